"""Display Label — human-readable label for a business object.

Invariants:
    - Selectors are tried in a fixed priority order; first non-empty value wins
    - Fallback is str(obj), never an exception
    - Used both for rendering references and for free-text reference matching

Design Decisions:
    - Explicit tuple of selector callables instead of probing attributes ad hoc:
      the priority list is visible and testable in one place
"""

from collections.abc import Callable

LabelSelector = Callable[[object], object]

LABEL_ATTRIBUTES = (
    "name",
    "company_name",
    "title",
    "full_name",
    "first_name",
    "description",
    "invoice_number",
)


def _attribute_selector(attribute: str) -> LabelSelector:
    def select(obj: object) -> object:
        return getattr(obj, attribute, None)
    select.__name__ = f"select_{attribute}"
    return select


LABEL_SELECTORS: tuple[LabelSelector, ...] = tuple(
    _attribute_selector(a) for a in LABEL_ATTRIBUTES
)


def display_label(
    obj: object, selectors: tuple[LabelSelector, ...] = LABEL_SELECTORS,
) -> str:
    """Return the first non-empty selector value, or str(obj)."""
    if obj is None:
        return "null"
    for select in selectors:
        value = select(obj)
        if value is None:
            continue
        text = str(value)
        if text.strip():
            return text
    return str(obj)


def label_contains(obj: object, needle: str) -> bool:
    """Case-insensitive substring match against the object's display label."""
    if obj is None:
        return False
    return needle.lower() in display_label(obj).lower()
