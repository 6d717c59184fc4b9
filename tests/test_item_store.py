"""Tests for the ordered item store."""

import itertools

import pytest

from pyqt_collection_editor.model import (
    DuplicateIdError,
    IdGenerator,
    IndexOutOfRangeError,
    InvalidPatchError,
    Item,
    ItemStore,
    NotFoundError,
)


def make_store():
    counter = itertools.count()
    return ItemStore(clock=lambda: f"t{next(counter):03d}")


def titles(store):
    return [item.title for item in store.all()]


def test_add_appends_and_generates_ids():
    store = make_store()
    first = store.add(Item(title="A"))
    second = store.add(Item(title="B"))

    assert titles(store) == ["A", "B"]
    assert first.id and second.id and first.id != second.id
    assert first.created_at == first.updated_at


def test_add_at_position():
    store = make_store()
    store.add(Item(id="1", title="A"))
    store.add(Item(id="2", title="B"))
    store.add(Item(id="0", title="Z"), position=0)
    store.add(Item(id="3", title="C"), position=3)

    assert store.ids() == ["0", "1", "2", "3"]


def test_add_rejects_bad_position():
    store = make_store()
    store.add(Item(id="1", title="A"))

    with pytest.raises(IndexOutOfRangeError):
        store.add(Item(title="B"), position=2)
    with pytest.raises(IndexOutOfRangeError):
        store.add(Item(title="B"), position=-1)
    assert store.ids() == ["1"]


def test_add_rejects_duplicate_id():
    store = make_store()
    store.add(Item(id="1", title="A"))

    with pytest.raises(DuplicateIdError) as exc_info:
        store.add(Item(id="1", title="again"))
    assert exc_info.value.item_id == "1"
    assert titles(store) == ["A"]


def test_explicit_id_reusable_after_removal():
    store = make_store()
    store.add(Item(id="1", title="A"))
    store.remove(["1"])

    store.add(Item(id="1", title="A again"))
    assert store.ids() == ["1"]


def test_generated_ids_never_reissued():
    generator = IdGenerator(prefix="ch")
    store = ItemStore(id_generator=generator)
    issued = set()
    for _ in range(20):
        item = store.add(Item(title="x"))
        issued.add(item.id)
        store.remove([item.id])

    assert len(issued) == 20
    assert all(item_id.startswith("ch-") for item_id in issued)


def test_remove_is_atomic():
    store = make_store()
    for item_id, title in (("1", "A"), ("2", "B"), ("3", "C")):
        store.add(Item(id=item_id, title=title))

    with pytest.raises(NotFoundError) as exc_info:
        store.remove(["1", "missing"])
    assert exc_info.value.missing == ("missing",)
    assert store.ids() == ["1", "2", "3"]

    removed = store.remove(["3", "1", "1"])
    assert [item.id for item in removed] == ["1", "3"]
    assert store.ids() == ["2"]


def test_update_merges_patch_and_stamps_only_target():
    store = make_store()
    store.add(Item(id="1", title="A", metadata={"tags": ["x"]}))
    store.add(Item(id="2", title="B"))
    untouched = store.get("2")

    updated = store.update("1", {"title": "A2", "metadata": {"bookmarked": True}, "synopsis": "s"})

    assert updated.title == "A2"
    assert updated.metadata == {"tags": ["x"], "bookmarked": True, "synopsis": "s"}
    assert updated.updated_at != updated.created_at
    assert store.get("2") == untouched


@pytest.mark.parametrize("field", ["id", "order", "created_at", "updated_at"])
def test_update_rejects_reserved_fields(field):
    store = make_store()
    store.add(Item(id="1", title="A"))
    before = store.get("1")

    with pytest.raises(InvalidPatchError):
        store.update("1", {field: "x"})
    assert store.get("1") == before


def test_update_unknown_id():
    store = make_store()
    with pytest.raises(NotFoundError):
        store.update("nope", {"title": "x"})


def test_reorder_moves_one_item():
    store = make_store()
    for item_id in "abcd":
        store.add(Item(id=item_id, title=item_id.upper()))
    stamps = {item.id: item.updated_at for item in store.all()}

    store.reorder(3, 1)

    assert store.ids() == ["a", "d", "b", "c"]
    assert store.get("d").updated_at != stamps["d"]
    assert all(store.get(item_id).updated_at == stamps[item_id] for item_id in "abc")


def test_reorder_equal_indices_is_noop():
    store = make_store()
    store.add(Item(id="1", title="A"))
    before = store.all()

    store.reorder(0, 0)
    assert store.all() == before


def test_reorder_out_of_range():
    store = make_store()
    store.add(Item(id="1", title="A"))

    with pytest.raises(IndexOutOfRangeError):
        store.reorder(0, 1)
    with pytest.raises(IndexOutOfRangeError):
        store.reorder(-1, 0)


def test_snapshot_is_independent():
    store = make_store()
    store.add(Item(id="1", title="A", metadata={"tags": ["x"]}))

    snapshot = store.snapshot()
    snapshot[0].metadata["tags"].append("y")

    assert store.get("1").metadata == {"tags": ["x"]}


def test_restore_replaces_sequence_and_rejects_duplicates():
    store = make_store()
    store.add(Item(id="1", title="A"))
    snapshot = store.snapshot()
    store.add(Item(id="2", title="B"))

    store.restore(snapshot)
    assert store.ids() == ["1"]

    with pytest.raises(DuplicateIdError):
        store.restore([Item(id="x", title="X"), Item(id="x", title="Y")])
    assert store.ids() == ["1"]


def test_check_patch_validates_without_applying():
    store = make_store()
    store.add(Item(id="1", title="A"))
    store.add(Item(id="2", title="B"))
    before = store.all()

    assert store.check_patch("2", {"title": "B2"}) == 1
    with pytest.raises(InvalidPatchError):
        store.check_patch("1", {"order": 3})
    with pytest.raises(NotFoundError):
        store.check_patch("nope", {"title": "x"})
    assert store.all() == before
