"""
Shared reorderable QListWidget for kernel-driven drag-and-drop.

The widget reports gestures and never reorders or selects its own rows: the
owner forwards each signal to the collection kernel and re-renders from the
kernel's state.
"""

import logging
from typing import Iterable, Optional, Tuple

from PyQt6.QtWidgets import QListWidget, QListWidgetItem, QAbstractItemView
from PyQt6.QtCore import QItemSelectionModel, pyqtSignal, Qt
from PyQt6.QtGui import QDrag

logger = logging.getLogger(__name__)


class ReorderableListWidget(QListWidget):
    """QListWidget that turns mouse and drag input into item-id signals.

    Row data holds the item id under ``Qt.ItemDataRole.UserRole``. Mouse input
    never changes the Qt selection; the owner mirrors the kernel selection
    into the list instead.
    """

    item_clicked = pyqtSignal(str, object)  # item_id, Qt.KeyboardModifier
    drag_started = pyqtSignal(str)  # item_id
    drag_hovered = pyqtSignal(str)  # hovered item_id
    drag_dropped = pyqtSignal()
    drag_cancelled = pyqtSignal()

    ID_ROLE = Qt.ItemDataRole.UserRole

    def __init__(self, parent=None):
        """Initialize reorderable list widget.

        Args:
            parent: Parent widget
        """
        super().__init__(parent)
        self.setDragEnabled(True)
        self.setAcceptDrops(True)
        self.setDropIndicatorShown(False)
        self.setDragDropMode(QAbstractItemView.DragDropMode.InternalMove)
        self.setDefaultDropAction(Qt.DropAction.MoveAction)
        self.setSelectionMode(QListWidget.SelectionMode.ExtendedSelection)

        # Enable word wrap for multiline titles
        self.setWordWrap(True)
        self.setTextElideMode(Qt.TextElideMode.ElideNone)

        self._dropped = False
        self._last_hovered: Optional[str] = None

    # ========== Rows ==========

    def set_items(self, entries: Iterable[Tuple[str, str]]) -> None:
        """Replace all rows with ``(item_id, text)`` pairs."""
        self.clear()
        for item_id, text in entries:
            list_item = QListWidgetItem(text)
            list_item.setData(self.ID_ROLE, item_id)
            list_item.setFlags(list_item.flags() | Qt.ItemFlag.ItemIsEditable)
            self.addItem(list_item)

    def item_id(self, list_item: Optional[QListWidgetItem]) -> Optional[str]:
        if list_item is None:
            return None
        return list_item.data(self.ID_ROLE)

    def row_for_id(self, item_id: str) -> int:
        """Row showing ``item_id``, or -1."""
        for row in range(self.count()):
            if self.item(row).data(self.ID_ROLE) == item_id:
                return row
        return -1

    # ========== Input ==========

    def selectionCommand(self, index, event=None):
        # Selection is applied programmatically from the kernel only
        return QItemSelectionModel.SelectionFlag.NoUpdate

    def mousePressEvent(self, event):
        """Report the clicked item with its modifiers after Qt records the press."""
        super().mousePressEvent(event)
        if event.button() != Qt.MouseButton.LeftButton:
            return
        item_id = self.item_id(self.itemAt(event.position().toPoint()))
        if item_id is not None:
            self.item_clicked.emit(item_id, event.modifiers())

    def startDrag(self, supported_actions):
        """Run the drag loop ourselves so Qt never removes or moves rows."""
        item_id = self.item_id(self.currentItem())
        if item_id is None:
            return

        self._dropped = False
        self._last_hovered = item_id
        self.drag_started.emit(item_id)

        drag = QDrag(self)
        drag.setMimeData(self.model().mimeData([self.currentIndex()]))
        drag.exec(Qt.DropAction.MoveAction)

        if not self._dropped:
            logger.debug(f"Drag of {item_id!r} ended without a drop")
            self.drag_cancelled.emit()
        self._last_hovered = None

    def dragEnterEvent(self, event):
        # Reordering stays inside one collection
        if event.source() is self:
            event.acceptProposedAction()
        else:
            event.ignore()

    def dragMoveEvent(self, event):
        if event.source() is not self:
            event.ignore()
            return
        event.acceptProposedAction()
        item_id = self.item_id(self.itemAt(event.position().toPoint()))
        if item_id is not None and item_id != self._last_hovered:
            self._last_hovered = item_id
            self.drag_hovered.emit(item_id)

    def dropEvent(self, event):
        if event.source() is not self:
            event.ignore()
            return
        event.setDropAction(Qt.DropAction.CopyAction)
        event.accept()
        self._dropped = True
        self.drag_dropped.emit()
