"""Colloquial place names mapped to the airport business aviation normally uses.

Consulted only after the live directory search found nothing.
"""

CITY_ALIASES = {
    # Italy
    "milano": "LIML",
    "milan": "LIML",
    "linate": "LIML",
    "malpensa": "LIMC",
    "bergamo": "LIME",
    "orio al serio": "LIME",
    "roma": "LIRA",
    "rome": "LIRA",
    "ciampino": "LIRA",
    "fiumicino": "LIRF",
    "venezia": "LIPZ",
    "venice": "LIPZ",
    "firenze": "LIRQ",
    "florence": "LIRQ",
    "napoli": "LIRN",
    "naples": "LIRN",
    "torino": "LIMF",
    "turin": "LIMF",
    "genova": "LIMJ",
    "genoa": "LIMJ",
    "bologna": "LIPE",
    "olbia": "LIEO",
    "costa smeralda": "LIEO",
    "palermo": "LICJ",
    "catania": "LICC",
    # France and Monaco
    "nizza": "LFMN",
    "nice": "LFMN",
    "monaco": "LFMN",
    "montecarlo": "LFMN",
    "monte carlo": "LFMN",
    "cannes": "LFMD",
    "saint tropez": "LFTZ",
    "st tropez": "LFTZ",
    "parigi": "LFPB",
    "paris": "LFPB",
    "le bourget": "LFPB",
    "courchevel": "LFLJ",
    "marsiglia": "LFML",
    "marseille": "LFML",
    # Switzerland
    "ginevra": "LSGG",
    "geneva": "LSGG",
    "geneve": "LSGG",
    "zurigo": "LSZH",
    "zurich": "LSZH",
    "lugano": "LSZA",
    "st moritz": "LSZS",
    "saint moritz": "LSZS",
    "engadina": "LSZS",
    "sion": "LSGS",
    # Elsewhere in Europe
    "londra": "EGLF",
    "london": "EGLF",
    "farnborough": "EGLF",
    "monaco di baviera": "EDDM",
    "munich": "EDDM",
    "munchen": "EDDM",
    "vienna": "LOWW",
    "wien": "LOWW",
    "ibiza": "LEIB",
    "palma": "LEPA",
    "maiorca": "LEPA",
    "mallorca": "LEPA",
    "madrid": "LEMD",
    "barcellona": "LEBL",
    "barcelona": "LEBL",
    "atene": "LGAV",
    "athens": "LGAV",
    "mykonos": "LGMK",
    "spalato": "LDSP",
    "split": "LDSP",
}


def lookup_alias(normalized: str):
    return CITY_ALIASES.get(normalized)
