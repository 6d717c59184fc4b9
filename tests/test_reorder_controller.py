"""Tests for the drag gesture controller."""

import pytest

from pyqt_collection_editor.model import Item, ItemStore, NotFoundError
from pyqt_collection_editor.services import ReorderController


@pytest.fixture
def store():
    store = ItemStore()
    for item_id, title in (("1", "A"), ("2", "B"), ("3", "C")):
        store.add(Item(id=item_id, title=title))
    return store


@pytest.fixture
def controller(store):
    return ReorderController(store)


def titles(store):
    return [item.title for item in store.all()]


def test_hover_moves_immediately_and_drop_returns_baseline(store, controller):
    controller.drag_start("3")
    assert controller.drag_over("1")
    assert titles(store) == ["C", "A", "B"]
    assert controller.source_index == 0

    baseline = controller.drop()
    assert [item.title for item in baseline] == ["A", "B", "C"]
    assert not controller.is_dragging


def test_drop_back_at_origin_returns_nothing(store, controller):
    controller.drag_start("3")
    controller.drag_over("1")
    controller.drag_over("2")

    assert titles(store) == ["A", "B", "C"]
    assert controller.drop() is None


def test_cancel_restores_baseline(store, controller):
    controller.drag_start("1")
    controller.drag_over("3")
    assert titles(store) == ["B", "C", "A"]

    assert controller.cancel()
    assert titles(store) == ["A", "B", "C"]
    assert not controller.cancel()


def test_hover_without_drag_or_on_self_is_ignored(store, controller):
    assert not controller.drag_over("1")

    controller.drag_start("2")
    assert not controller.drag_over("2")
    assert titles(store) == ["A", "B", "C"]


def test_new_drag_cancels_unfinished_one(store, controller):
    controller.drag_start("1")
    controller.drag_over("3")

    controller.drag_start("2")
    assert titles(store) == ["A", "B", "C"]
    assert controller.source_id == "2"


def test_unknown_ids_raise(controller):
    with pytest.raises(NotFoundError):
        controller.drag_start("missing")
    assert not controller.is_dragging

    controller.drag_start("1")
    with pytest.raises(NotFoundError):
        controller.drag_over("missing")
    assert controller.is_dragging
