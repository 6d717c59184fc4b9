"""Tests for core utilities."""

import logging

import pytest
from PyQt6.QtCore import QItemSelectionModel
from PyQt6.QtTest import QTest


def test_debounce_timer_coalesces(scheduler):
    from pyqt_collection_editor.core import DebounceTimer

    called = []
    timer = DebounceTimer(delay_ms=50, handler=lambda: called.append(1), scheduler=scheduler)

    timer.trigger()
    scheduler.advance(30)
    timer.trigger()
    scheduler.advance(30)
    assert called == []
    assert timer.is_pending

    scheduler.advance(20)
    assert called == [1]
    assert not timer.is_pending
    assert scheduler.pending == 0


def test_debounce_timer_cancel_and_force(scheduler):
    from pyqt_collection_editor.core import DebounceTimer

    called = []
    timer = DebounceTimer(delay_ms=50, handler=lambda: called.append(1), scheduler=scheduler)

    timer.trigger()
    timer.cancel()
    scheduler.advance(100)
    assert called == []

    timer.trigger()
    timer.force()
    assert called == [1]
    scheduler.advance(100)
    assert called == [1]


def test_debounce_timer_on_qt_event_loop(qapp):
    from pyqt_collection_editor.core import DebounceTimer

    called = []
    timer = DebounceTimer(delay_ms=10, handler=lambda: called.append(1))
    timer.trigger()
    timer.trigger()
    timer.trigger()

    QTest.qWait(200)
    assert called == [1]


def test_reorderable_list_widget_rows(qapp):
    from pyqt_collection_editor.core import ReorderableListWidget

    widget = ReorderableListWidget()
    widget.set_items([("1", "A"), ("2", "B")])

    assert widget.count() == 2
    assert widget.item_id(widget.item(1)) == "2"
    assert widget.item_id(None) is None
    assert widget.row_for_id("2") == 1
    assert widget.row_for_id("missing") == -1


def test_reorderable_list_widget_never_selects_on_input(qapp):
    from pyqt_collection_editor.core import ReorderableListWidget

    widget = ReorderableListWidget()
    widget.set_items([("1", "A")])

    command = widget.selectionCommand(widget.model().index(0, 0))
    assert command == QItemSelectionModel.SelectionFlag.NoUpdate


@pytest.fixture
def package_logger():
    from pyqt_collection_editor.core.log_utils import PACKAGE_LOGGER_NAME

    package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    handlers = list(package_logger.handlers)
    level = package_logger.level
    yield package_logger
    for handler in package_logger.handlers:
        if handler not in handlers:
            package_logger.removeHandler(handler)
            handler.close()
    package_logger.setLevel(level)


def test_configure_logging_is_idempotent(tmp_path, package_logger):
    from pyqt_collection_editor.core import configure_logging, get_current_log_file_path
    from pyqt_collection_editor.protocols import EditorConfig

    config = EditorConfig(log_dir=str(tmp_path), log_level="DEBUG")
    path = configure_logging(config)

    assert path.parent == tmp_path
    assert path.name.startswith("collection_editor_")
    assert configure_logging(config) == path
    assert get_current_log_file_path() == str(path)
    assert package_logger.level == logging.DEBUG


def test_discover_logs_filters_by_prefix(tmp_path):
    from pyqt_collection_editor.core import discover_logs
    from pyqt_collection_editor.protocols import EditorConfig

    (tmp_path / "collection_editor_1.log").write_text("x")
    (tmp_path / "other.log").write_text("x")
    (tmp_path / "collection_editor_2.txt").write_text("x")

    logs = discover_logs(tmp_path, EditorConfig())
    assert [info.display_name for info in logs] == ["collection_editor_1.log"]
    assert discover_logs(tmp_path / "missing") == []
