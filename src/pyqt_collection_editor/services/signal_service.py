"""
Signal blocking helpers for Qt adapters.

Used when the widget layer re-renders from kernel state, so that programmatic
row and selection changes are not fed back into the kernel as user input.
"""

from contextlib import contextmanager
from typing import Iterable
import logging

from PyQt6.QtCore import QItemSelectionModel, QObject
from PyQt6.QtWidgets import QListWidget

logger = logging.getLogger(__name__)


class SignalService:
    """
    Signal blocking for widgets and their selection models.

    Examples:
        # Block signals (context manager):
        with SignalService.block_signals(list_widget):
            list_widget.clear()

        # Mirror kernel selection into a list:
        SignalService.apply_selection(list_widget, selected_rows)
    """

    @staticmethod
    @contextmanager
    def block_signals(*objects: QObject):
        """Context manager for blocking signals; previous blocking state is restored."""
        previous = []
        for obj in objects:
            if obj is not None:
                previous.append((obj, obj.blockSignals(True)))
                logger.debug(f"Blocked signals on {type(obj).__name__}")

        try:
            yield
        finally:
            for obj, was_blocked in reversed(previous):
                obj.blockSignals(was_blocked)

    @staticmethod
    def apply_selection(list_widget: QListWidget, rows: Iterable[int], current_row: int = -1) -> None:
        """Select exactly ``rows`` without emitting selection signals."""
        rows = set(rows)
        with SignalService.block_signals(list_widget, list_widget.selectionModel()):
            list_widget.clearSelection()
            for row in range(list_widget.count()):
                if row in rows:
                    list_widget.item(row).setSelected(True)
            if 0 <= current_row < list_widget.count():
                list_widget.setCurrentRow(current_row, QItemSelectionModel.SelectionFlag.NoUpdate)
