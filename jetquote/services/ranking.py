from typing import Iterable, List

from jetquote.schemas.quote import QuoteOut


def rank(quotes: Iterable[QuoteOut]) -> List[QuoteOut]:
    """Cheapest first, unpriced last. Equal prices keep their input order."""
    return sorted(quotes, key=lambda q: (q.total_price is None, q.total_price or 0))
