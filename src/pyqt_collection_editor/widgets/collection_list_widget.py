"""
Collection manager widget: a thin Qt adapter over CollectionEditorKernel.

Binds list input, buttons and keyboard shortcuts to kernel calls and renders
the kernel's items and selection. The widget holds no collection state of its
own; every re-render reads the kernel.
"""

import logging
from typing import Callable, Dict, List, Optional, Tuple

from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QGridLayout, QLabel, QPushButton,
    QSplitter, QListWidgetItem
)
from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtGui import QFont, QKeySequence, QShortcut

from pyqt_collection_editor.core.reorderable_list_widget import ReorderableListWidget
from pyqt_collection_editor.kernel.collection_kernel import CollectionEditorKernel
from pyqt_collection_editor.model.exceptions import CollectionEditorError
from pyqt_collection_editor.model.results import ChangeEvent, EditResult
from pyqt_collection_editor.services.search_service import count_words
from pyqt_collection_editor.services.signal_service import SignalService

logger = logging.getLogger(__name__)


class CollectionManagerWidget(QWidget):
    """
    List manager for one kernel-owned collection.

    Args:
        kernel: Kernel owning the collection
        title: Header text
        parent: Parent widget
    """

    TITLE: str = "Items"
    BUTTON_CONFIGS: List[Tuple[str, str, str]] = [
        ("Add", "add", "Add a new item (Ctrl+N)"),
        ("Duplicate", "duplicate", "Duplicate the current item (Ctrl+D)"),
        ("Delete", "delete", "Delete selected items (Del)"),
        ("Up", "move_up", "Move the current item up"),
        ("Down", "move_down", "Move the current item down"),
        ("Undo", "undo", "Undo (Ctrl+Z)"),
        ("Redo", "redo", "Redo (Ctrl+Y)"),
        ("Save", "save", "Save now (Ctrl+S)"),
    ]
    BUTTON_GRID_COLUMNS: int = 4
    ACTION_REGISTRY: Dict[str, str] = {
        "add": "action_add",
        "duplicate": "action_duplicate",
        "delete": "action_delete",
        "move_up": "action_move_up",
        "move_down": "action_move_down",
        "undo": "action_undo",
        "redo": "action_redo",
        "save": "action_save",
        "select_all": "action_select_all",
    }
    SHORTCUTS: List[Tuple[str, str]] = [
        ("Ctrl+N", "add"),
        ("Ctrl+D", "duplicate"),
        ("Delete", "delete"),
        ("Ctrl+Z", "undo"),
        ("Ctrl+Y", "redo"),
        ("Ctrl+Shift+Z", "redo"),
        ("Ctrl+S", "save"),
        ("Ctrl+A", "select_all"),
    ]
    ITEM_NAME_SINGULAR: str = "item"
    ITEM_NAME_PLURAL: str = "items"

    # Common signals
    status_message = pyqtSignal(str)
    item_activated = pyqtSignal(str)  # item_id (double-click / current item)

    def __init__(self, kernel: CollectionEditorKernel, title: Optional[str] = None, parent=None):
        super().__init__(parent)
        self.kernel = kernel
        self.title = title or self.TITLE

        # UI components (created in setup_ui)
        self.buttons: Dict[str, QPushButton] = {}
        self.status_label: Optional[QLabel] = None
        self.item_list: Optional[ReorderableListWidget] = None
        self.shortcuts: List[QShortcut] = []

        self._unsubscribers: List[Callable[[], None]] = []

        self.setup_ui()
        self._setup_connections()
        self.update_item_list()

    # ========== UI ==========

    def setup_ui(self) -> None:
        """List above the button panel, header with title and status on top."""
        main_layout = QVBoxLayout(self)
        main_layout.setContentsMargins(2, 2, 2, 2)
        main_layout.setSpacing(2)

        main_layout.addWidget(self._create_header())

        splitter = QSplitter(Qt.Orientation.Vertical)
        self.item_list = ReorderableListWidget()
        splitter.addWidget(self.item_list)
        splitter.addWidget(self._create_button_panel())

        # List takes all space, buttons start at minimum height
        splitter.setSizes([1000, 1])
        splitter.setStretchFactor(0, 1)
        splitter.setStretchFactor(1, 0)
        main_layout.addWidget(splitter)

        for sequence, action_id in self.SHORTCUTS:
            shortcut = QShortcut(QKeySequence(sequence), self)
            shortcut.setContext(Qt.ShortcutContext.WidgetWithChildrenShortcut)
            shortcut.activated.connect(lambda a=action_id: self.handle_button_action(a))
            self.shortcuts.append(shortcut)

    def _create_header(self) -> QWidget:
        header = QWidget()
        header_layout = QHBoxLayout(header)
        header_layout.setContentsMargins(5, 5, 5, 5)

        title_label = QLabel(self.title)
        title_label.setFont(QFont("Arial", 12, QFont.Weight.Bold))
        header_layout.addWidget(title_label)
        header_layout.addStretch()

        self.status_label = QLabel("Ready")
        self.status_label.setTextFormat(Qt.TextFormat.PlainText)
        header_layout.addWidget(self.status_label)
        return header

    def _create_button_panel(self) -> QWidget:
        """Create button panel from BUTTON_CONFIGS using grid layout."""
        panel = QWidget()
        layout = QGridLayout(panel)
        layout.setContentsMargins(5, 5, 5, 5)
        layout.setSpacing(5)

        num_cols = self.BUTTON_GRID_COLUMNS or len(self.BUTTON_CONFIGS)
        for i, (label, action_id, tooltip) in enumerate(self.BUTTON_CONFIGS):
            button = QPushButton(label)
            button.setToolTip(tooltip)
            button.clicked.connect(lambda checked, a=action_id: self.handle_button_action(a))
            self.buttons[action_id] = button
            layout.addWidget(button, i // num_cols, i % num_cols)

        return panel

    def _setup_connections(self) -> None:
        self.item_list.item_clicked.connect(self._on_item_clicked)
        self.item_list.drag_started.connect(self._on_drag_started)
        self.item_list.drag_hovered.connect(self._on_drag_hovered)
        self.item_list.drag_dropped.connect(self._on_drag_dropped)
        self.item_list.drag_cancelled.connect(self._on_drag_cancelled)
        self.item_list.itemChanged.connect(self._on_item_renamed)
        self.item_list.itemDoubleClicked.connect(self._on_item_double_clicked)

        self.status_message.connect(self.update_status)

        self._unsubscribers.append(self.kernel.subscribe(self._on_kernel_changed))
        self._unsubscribers.append(self.kernel.on_error(self._on_kernel_error))

    def detach(self) -> None:
        """Stop listening to the kernel (call before discarding the widget)."""
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()

    # ========== Rendering ==========

    def update_item_list(self) -> None:
        """Re-render rows and selection from the kernel."""
        items = self.kernel.items
        with SignalService.block_signals(self.item_list):
            self.item_list.set_items((item.id, item.title) for item in items)
            for row, item in enumerate(items):
                words = count_words(item.body)
                self.item_list.item(row).setToolTip(f"{words} word{'s' if words != 1 else ''}")

        selected = self.kernel.selected_ids()
        rows = [row for row, item in enumerate(items) if item.id in selected]
        anchor = self.kernel.anchor_index
        SignalService.apply_selection(self.item_list, rows, -1 if anchor is None else anchor)
        self.update_button_states()

    def update_button_states(self) -> None:
        has_items = self.item_list.count() > 0
        has_selection = bool(self.kernel.selected_ids())
        self.buttons["duplicate"].setEnabled(has_selection)
        self.buttons["delete"].setEnabled(has_selection)
        self.buttons["move_up"].setEnabled(has_selection and has_items)
        self.buttons["move_down"].setEnabled(has_selection and has_items)
        self.buttons["undo"].setEnabled(self.kernel.can_undo)
        self.buttons["redo"].setEnabled(self.kernel.can_redo)

    def update_status(self, message: str) -> None:
        if self.status_label:
            self.status_label.setText(message)

    def _report(self, result: EditResult, success_message: Optional[str] = None) -> EditResult:
        if result.error is not None:
            self.status_message.emit(str(result.error))
        elif success_message:
            self.status_message.emit(success_message)
        return result

    def _on_kernel_changed(self, event: ChangeEvent) -> None:
        logger.debug(f"Kernel change {event.kind.value}: re-rendering {len(event.items)} {self.ITEM_NAME_PLURAL}")
        self.update_item_list()

    def _on_kernel_error(self, error: CollectionEditorError) -> None:
        self.status_message.emit(f"Save failed: {error}")

    # ========== Actions ==========

    def handle_button_action(self, action: str) -> None:
        """
        Dispatch a button or shortcut action using ACTION_REGISTRY.

        Args:
            action: Action identifier
        """
        if action not in self.ACTION_REGISTRY:
            logger.warning(f"Unknown action: {action}")
            return
        getattr(self, self.ACTION_REGISTRY[action])()

    def _current_id(self) -> Optional[str]:
        """Anchor item, falling back to the first selected item."""
        anchor = self.kernel.anchor_index
        items = self.kernel.items
        if anchor is not None and self.kernel.is_selected(items[anchor].id):
            return items[anchor].id
        selected = self.kernel.selected_items()
        return selected[0].id if selected else None

    def action_add(self) -> None:
        result = self._report(self.kernel.add_item())
        if result.ok:
            self.kernel.click(result.value)
            self.update_item_list()
            self.status_message.emit(f"Added {self.ITEM_NAME_SINGULAR}")

    def action_duplicate(self) -> None:
        item_id = self._current_id()
        if item_id is None:
            return
        result = self._report(self.kernel.duplicate_item(item_id))
        if result.ok:
            self.kernel.click(result.value)
            self.update_item_list()
            self.status_message.emit(f"Duplicated {self.ITEM_NAME_SINGULAR}")

    def action_delete(self) -> None:
        result = self._report(self.kernel.remove_selected())
        if result.ok and result.value:
            count = len(result.value)
            noun = self.ITEM_NAME_SINGULAR if count == 1 else self.ITEM_NAME_PLURAL
            self.status_message.emit(f"Deleted {count} {noun}")

    def action_move_up(self) -> None:
        item_id = self._current_id()
        if item_id is not None:
            self._report(self.kernel.move_up(item_id))

    def action_move_down(self) -> None:
        item_id = self._current_id()
        if item_id is not None:
            self._report(self.kernel.move_down(item_id))

    def action_undo(self) -> None:
        self._report(self.kernel.undo(), "Undone")

    def action_redo(self) -> None:
        self._report(self.kernel.redo(), "Redone")

    def action_save(self) -> None:
        result = self._report(self.kernel.save())
        if result.ok and result.value:
            self.status_message.emit("Saved")

    def action_select_all(self) -> None:
        self.kernel.select_all()
        self.update_item_list()

    # ========== List input ==========

    def _on_item_clicked(self, item_id: str, modifiers) -> None:
        modifiers = Qt.KeyboardModifier(modifiers)
        if modifiers & Qt.KeyboardModifier.ShiftModifier:
            index = self.item_list.row_for_id(item_id)
            result = self.kernel.select_range(index)
        elif modifiers & (Qt.KeyboardModifier.ControlModifier | Qt.KeyboardModifier.MetaModifier):
            result = self.kernel.click(item_id, additive=True)
        else:
            result = self.kernel.click(item_id)
        self._report(result)
        self.update_item_list()

    def _on_drag_started(self, item_id: str) -> None:
        self._report(self.kernel.drag_start(item_id))

    def _on_drag_hovered(self, item_id: str) -> None:
        # Hover moves are not broadcast by the kernel
        result = self.kernel.drag_over(item_id)
        if result.ok and result.value:
            self.update_item_list()

    def _on_drag_dropped(self) -> None:
        result = self._report(self.kernel.drop())
        if result.ok and result.value:
            self.status_message.emit(f"Moved {self.ITEM_NAME_SINGULAR}")

    def _on_drag_cancelled(self) -> None:
        if self.kernel.cancel_drag().value:
            self.update_item_list()

    def _on_item_renamed(self, list_item: QListWidgetItem) -> None:
        item_id = self.item_list.item_id(list_item)
        if item_id is None:
            return
        self._report(self.kernel.update_item(item_id, {"title": list_item.text()}))

    def _on_item_double_clicked(self, list_item: QListWidgetItem) -> None:
        item_id = self.item_list.item_id(list_item)
        if item_id is not None:
            self.item_activated.emit(item_id)
