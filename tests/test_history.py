"""Tests for bounded undo/redo history."""

import pytest

from pyqt_collection_editor.model import (
    DEFAULT_HISTORY_DEPTH,
    HistoryManager,
    Item,
    NothingToRedo,
    NothingToUndo,
)


def state(*titles):
    return tuple(Item(id=title, title=title) for title in titles)


def test_undo_then_redo_round_trip():
    history = HistoryManager()
    history.commit(state("A"))

    restored = history.undo(state("A", "B"))
    assert restored == state("A")
    assert history.can_redo

    assert history.redo(restored) == state("A", "B")
    assert history.can_undo and not history.can_redo


def test_commit_invalidates_redo():
    history = HistoryManager()
    history.commit(state())
    history.undo(state("A"))

    history.commit(state())
    assert not history.can_redo


def test_depth_is_bounded_and_oldest_dropped():
    history = HistoryManager(max_depth=3)
    for count in range(5):
        history.commit(state(*[str(n) for n in range(count)]))

    assert history.depth == 3
    restored = [history.undo(state()) for _ in range(3)]
    assert [len(snapshot) for snapshot in restored] == [4, 3, 2]
    assert not history.can_undo


def test_default_depth():
    assert HistoryManager().max_depth == DEFAULT_HISTORY_DEPTH == 25


def test_invalid_depth():
    with pytest.raises(ValueError):
        HistoryManager(max_depth=0)


def test_empty_stacks_raise_informational_errors():
    history = HistoryManager()

    with pytest.raises(NothingToUndo) as undo_info:
        history.undo(state())
    with pytest.raises(NothingToRedo) as redo_info:
        history.redo(state())
    assert undo_info.value.informational
    assert redo_info.value.informational


def test_snapshots_are_copied_on_commit():
    history = HistoryManager()
    before = (Item(id="1", title="A", metadata={"tags": []}),)
    history.commit(before)
    before[0].metadata["tags"].append("late")

    assert history.undo(state())[0].metadata == {"tags": []}


def test_reset_clears_both_stacks():
    history = HistoryManager()
    history.commit(state())
    history.commit(state("A"))
    history.undo(state("A", "B"))

    history.reset()
    assert not history.can_undo and not history.can_redo
