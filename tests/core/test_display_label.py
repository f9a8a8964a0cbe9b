"""Display Label — verifies label selection priority and label matching."""

from data_copilot.core.display_label import display_label, label_contains


class _Thing:
    def __init__(self, **attrs):
        for k, v in attrs.items():
            setattr(self, k, v)

    def __str__(self):
        return "Thing#1"


def test_name_wins_over_later_selectors():
    assert display_label(_Thing(name="Chai", description="Tea")) == "Chai"


def test_company_name_before_title():
    assert display_label(_Thing(company_name="Speedy Express", title="x")) == "Speedy Express"


def test_blank_values_are_skipped():
    assert display_label(_Thing(name="  ", company_name=None, title="Sales Manager")) == "Sales Manager"


def test_invoice_number_is_last_selector():
    assert display_label(_Thing(invoice_number="INV-0001")) == "INV-0001"


def test_falls_back_to_str():
    assert display_label(_Thing()) == "Thing#1"


def test_none_renders_null():
    assert display_label(None) == "null"


def test_label_contains_is_case_insensitive_substring():
    alfreds = _Thing(company_name="Alfreds Futterkiste")
    assert label_contains(alfreds, "alfreds")
    assert label_contains(alfreds, "FUTTER")
    assert not label_contains(alfreds, "Horn")


def test_label_contains_none_is_false():
    assert not label_contains(None, "x")
