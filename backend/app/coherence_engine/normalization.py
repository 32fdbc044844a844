"""Text normalization and tolerant comparisons for coherence checks — no DB dependency."""

import re
import unicodedata
from datetime import date, datetime

ADDRESS_MATCH_THRESHOLD = 0.7
MIN_ADDRESS_TOKEN_LENGTH = 3

_PUNCTUATION = re.compile(r"[^\w\s]")
_WHITESPACE = re.compile(r"\s+")


def normalize_text(value) -> str:
    """Lower-case, strip diacritics (ñ -> n), punctuation and repeated whitespace.

    >>> normalize_text("  José  Pérez-Muñoz ")
    'jose perezmunoz'
    """
    if value is None:
        return ""
    decomposed = unicodedata.normalize("NFD", str(value).lower())
    stripped = "".join(c for c in decomposed if unicodedata.category(c) != "Mn")
    stripped = _PUNCTUATION.sub("", stripped)
    return _WHITESPACE.sub(" ", stripped).strip()


def normalize_identifier(value) -> str:
    """Canonical form for RFC/CURP style identifiers: no spaces, upper-case."""
    return normalize_text(value).replace(" ", "").upper()


def texts_match(client_value, document_value) -> bool:
    return normalize_text(client_value) == normalize_text(document_value)


def identifiers_match(client_value, document_value) -> bool:
    return normalize_identifier(client_value) == normalize_identifier(document_value)


def coerce_date(value) -> date | None:
    """Best-effort date parsing for extracted values; None when unparseable."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None

    text = value.strip()
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        pass
    for fmt in ("%d/%m/%Y", "%d-%m-%Y", "%Y/%m/%d"):
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def dates_match(client_value, document_value) -> bool:
    client_date = coerce_date(client_value)
    document_date = coerce_date(document_value)
    if client_date is None or document_date is None:
        return False
    return client_date == document_date


def address_tokens(value) -> list[str]:
    """Significant address tokens: tokens of two characters or fewer are dropped."""
    return [t for t in normalize_text(value).split(" ") if len(t) >= MIN_ADDRESS_TOKEN_LENGTH]


def address_overlap(client_address, document_address) -> float:
    """Fraction of overlapping tokens relative to the longer token list.

    A token overlaps when it contains, or is contained in, some token of the other list.
    """
    client_tokens = address_tokens(client_address)
    document_tokens = address_tokens(document_address)
    longest = max(len(client_tokens), len(document_tokens))
    if longest == 0:
        return 0.0

    overlapping = sum(
        1
        for token in client_tokens
        if any(other in token or token in other for other in document_tokens)
    )
    return overlapping / longest


def compare_addresses(
    client_address,
    document_address,
    threshold: float = ADDRESS_MATCH_THRESHOLD,
) -> bool:
    """Tolerant address match: exact after normalization, or enough token overlap."""
    if normalize_text(client_address) == normalize_text(document_address):
        return True
    return address_overlap(client_address, document_address) >= threshold
