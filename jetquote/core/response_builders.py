from jetquote.core.exceptions import DataUnavailable, RequestValidationFailed, ResolutionFailure

REQUIRED_FORMAT = {
    "from": "City name or ICAO code (e.g. 'Milano' or 'LIML')",
    "to": "City name or ICAO code (e.g. 'Nizza' or 'LFMN')",
    "date": "Departure date, e.g. YYYY-MM-DD (optional)",
    "time": "Departure time HH:MM (optional)",
    "tripType": "'oneway', 'roundtrip' or 'multileg'",
    "returnDate": "Return date (roundtrip only)",
    "legs": "2 to 10 legs of {from, to, date, time} (multileg only)",
    "pax": "Number of passengers, 1 to 50 (optional, default 4)",
}


def build_validation_error(exc: RequestValidationFailed) -> dict:
    return {
        "error": "Invalid request",
        "details": exc.errors,
        "required_format": REQUIRED_FORMAT,
    }


def build_resolution_error(exc: ResolutionFailure) -> dict:
    return {
        "error": exc.message,
        "missing": exc.missing,
    }


def build_unavailable_error(exc: DataUnavailable) -> dict:
    return {
        "error": "Internal server error",
        "details": exc.message,
    }
