from __future__ import annotations

from pyepaper._grouping import group_by, last_value_group_reducer, list_group_reducer


def test_default_reducer_collects_lists_in_order() -> None:
    items = [("a", 1), ("b", 2), ("a", 3)]
    assert group_by(items, lambda item: item[0]) == {
        "a": [("a", 1), ("a", 3)],
        "b": [("b", 2)],
    }


def test_last_value_reducer_keeps_last_seen() -> None:
    bitmaps = [
        {"name": "logo", "metadata": {"hash": "1"}},
        {"name": "icon", "metadata": {"hash": "2"}},
        {"name": "logo", "metadata": {"hash": "3"}},
    ]
    grouped = group_by(bitmaps, lambda b: b["name"], group_reducer=last_value_group_reducer)
    assert list(grouped) == ["logo", "icon"]
    assert grouped["logo"]["metadata"]["hash"] == "3"


def test_empty_input() -> None:
    assert group_by([], lambda x: x) == {}


def test_list_reducer_does_not_mutate_previous_group() -> None:
    first = list_group_reducer(None, 1)
    second = list_group_reducer(first, 2)
    assert first == [1]
    assert second == [1, 2]
