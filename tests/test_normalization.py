import pytest

from startup_timer.normalization import normalize_activity_id, same_activity


@pytest.mark.parametrize(
    "raw",
    ["scripts/Initialize.nani", "Initialize", "INITIALIZE.NANI", r"Assets\Scripts\initialize.nani"],
)
def test_initialize_variants_normalize_the_same(raw):
    assert normalize_activity_id(raw) == "initialize"


def test_empty_values_normalize_to_none():
    assert normalize_activity_id(None) is None
    assert normalize_activity_id("") is None
    assert normalize_activity_id("   ") is None


def test_only_last_extension_is_stripped():
    assert normalize_activity_id("chapter.1.nani") == "chapter.1"


def test_same_activity():
    assert same_activity("scripts/Initialize.nani", "INITIALIZE.NANI")
    assert not same_activity("initialize", "title")
    assert not same_activity(None, None)
