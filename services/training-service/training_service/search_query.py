import re
from collections.abc import Iterable

MAX_QUERY_LENGTH = 100
QUERY_PATTERN = re.compile(r"^[a-z0-9\s]+$", re.IGNORECASE)
INVALID_QUERY_MESSAGE = "The query is not valid."


def validate_query(raw: str | None) -> str | None:
    """Return an error message for a malformed search query, or None when it is acceptable."""
    if raw is None or raw.strip() == "":
        return None
    if len(raw) > MAX_QUERY_LENGTH or not QUERY_PATTERN.match(raw):
        return INVALID_QUERY_MESSAGE
    return None


def normalize_query(raw: str | None) -> tuple[str, ...]:
    """Split a query into lower-cased words, each one a required prefix token.

    An empty tuple means "no filter".
    """
    if raw is None:
        return ()
    return tuple(raw.lower().split())


def _compact_suffixes(text: str) -> list[str]:
    # "Barbell Bench Press" -> ["barbellbenchpress", "benchpress", "press"]
    words = text.lower().split()
    return ["".join(words[start:]) for start in range(len(words))]


def matches_query(tokens: Iterable[str], text: str) -> bool:
    """True when every token is a prefix of ``text`` starting at one of its word boundaries.

    Whitespace inside ``text`` is ignored, so "benchpr" matches "Barbell Bench Press".
    Token order does not matter: "press bench" matches it too.
    """
    suffixes = _compact_suffixes(text)
    return all(any(s.startswith(token) for s in suffixes) for token in tokens)


def matches_any(tokens: Iterable[str], texts: Iterable[str]) -> bool:
    """True when each token matches at least one of ``texts`` (name or muscle groups)."""
    suffixes = [s for text in texts for s in _compact_suffixes(text)]
    return all(any(s.startswith(token) for s in suffixes) for token in tokens)
