"""Tests for the item search service."""

import pytest

from pyqt_collection_editor.model import Item
from pyqt_collection_editor.protocols import EditorConfig, set_editor_config
from pyqt_collection_editor.services import ItemSearchService, count_words, strip_markup


@pytest.fixture
def items():
    return [
        Item(id="1", title="The Harbor", body="<p>Ships in the <b>harbor</b> at dawn.</p>",
             metadata={"tags": ["sea"], "bookmarked": True}),
        Item(id="2", title="Mountains", body="<p>No water here.</p>",
             metadata={"synopsis": "A climb toward the harbor lights"}),
        Item(id="3", title="Notes", body={"blocks": []}, metadata={"tags": ["draft", "sea"]}),
    ]


def test_strip_markup_and_count_words():
    assert strip_markup("<p>One&nbsp;<i>two</i></p>\n<p>three</p>") == "One two three"
    assert count_words("<p>One <b>two</b> three</p>") == 3
    assert count_words("") == 0
    assert count_words({"blocks": []}) == 0


def test_search_counts_title_body_and_synopsis_matches(items):
    hits = ItemSearchService().search(items, "harbor")

    assert [hit.item_id for hit in hits] == ["1", "2"]
    assert hits[0].match_count == 2
    assert hits[0].snippets == ("Ships in the harbor at dawn.",)
    assert hits[1].match_count == 1
    assert hits[1].snippets == ()


def test_search_matches_tags(items):
    hits = ItemSearchService().search(items, "SEA")
    assert [hit.item_id for hit in hits] == ["1", "3"]


def test_short_terms_do_not_search(items):
    service = ItemSearchService()
    assert service.search(items, "h") == []
    assert service.search(items, "   ") == []


def test_min_chars_from_config(items):
    set_editor_config(EditorConfig(search_min_chars=4))
    assert ItemSearchService().search(items, "sea") == []
    assert ItemSearchService(min_chars=3).search(items, "sea")


def test_snippets_are_elided_and_capped():
    body = " ".join(["word"] * 40 + ["needle"] + ["word"] * 40)
    item = Item(id="1", title="t", body=body * 10)
    hit = ItemSearchService(snippet_radius=10, max_snippets=3).search([item], "needle")[0]

    assert hit.match_count == 10
    assert len(hit.snippets) == 3
    assert all(snippet.startswith("...") and snippet.endswith("...") for snippet in hit.snippets)


def test_filter_by_term_bookmark_and_tag(items):
    service = ItemSearchService()

    assert [item.id for item in service.filter(items, "harbor")] == ["1", "2"]
    assert [item.id for item in service.filter(items, bookmarked_only=True)] == ["1"]
    assert [item.id for item in service.filter(items, tag="sea")] == ["1", "3"]
    assert [item.id for item in service.filter(items, "x")] == ["1", "2", "3"]


@pytest.mark.parametrize("term", ["harbor", "climb", "sea", "draft", "dawn", "ships"])
def test_search_and_filter_agree(items, term):
    service = ItemSearchService()

    searched = [hit.item_id for hit in service.search(items, term)]
    filtered = [item.id for item in service.filter(items, term)]
    assert searched == filtered
