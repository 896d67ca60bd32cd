"""
Unit tests for merging suggested note metadata.
"""

from voicenotes.background.enrichment import merge_suggestions


def test_suggested_tags_are_appended_and_deduplicated():
    changes = merge_suggestions(
        current_tags=["home"],
        current_category="personal",
        suggestion={"tags": ["Garden", "home"], "category": "work"},
    )

    assert changes == {"tags": ["home", "garden"]}


def test_category_only_filled_when_missing():
    changes = merge_suggestions(
        current_tags=[],
        current_category=None,
        suggestion={"tags": [], "category": "ideas"},
    )

    assert changes == {"category": "ideas"}


def test_unknown_category_is_ignored():
    changes = merge_suggestions(current_tags=[], current_category=None, suggestion={"category": "hobbies"})
    assert changes == {}


def test_no_changes_when_suggestion_adds_nothing():
    changes = merge_suggestions(
        current_tags=["a", "b"],
        current_category="work",
        suggestion={"tags": ["A", 3]},
    )

    assert changes == {}


def test_existing_tags_are_never_displaced():
    mine = [f"mine{i}" for i in range(10)]

    changes = merge_suggestions(
        current_tags=mine,
        current_category="work",
        suggestion={"tags": ["a", "b", "c", "d", "e"]},
    )

    assert changes == {}


def test_suggestions_fill_only_free_slots():
    mine = [f"mine{i}" for i in range(8)]

    changes = merge_suggestions(
        current_tags=mine,
        current_category="work",
        suggestion={"tags": ["a", "b", "c"]},
    )

    assert changes == {"tags": mine + ["a", "b"]}
