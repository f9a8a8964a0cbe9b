"""Filter Pairs — parser for the `Key=Value;Key2=Value2` mini-language.

Invariants:
    - Segments split on ';', each pair splits on the FIRST '='
    - Keys and values are whitespace-trimmed
    - Segments without '=' or with an empty key are dropped, never raised
    - Empty values are kept ("C=" yields ("C", ""))

Design Decisions:
    - Shared by query_entity (filters) and create_entity (assignments) so both
      tools accept exactly the same syntax
"""


def parse_pairs(text: str | None) -> list[tuple[str, str]]:
    """Parse "Key=Value;Key2=Value2" into an ordered list of (key, value)."""
    pairs: list[tuple[str, str]] = []
    if not text or not text.strip():
        return pairs
    for segment in text.split(";"):
        key, sep, value = segment.partition("=")
        if not sep:
            continue
        key = key.strip()
        if key:
            pairs.append((key, value.strip()))
    return pairs
