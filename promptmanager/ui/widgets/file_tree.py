# promptmanager/ui/widgets/file_tree.py

from pathlib import Path
from typing import Callable, Container, Dict, Optional

from PySide6.QtWidgets import (
    QTreeWidget, QTreeWidgetItem, QHeaderView,
    QAbstractItemView, QMenu, QTreeWidgetItemIterator
)
from PySide6.QtCore import Qt, Signal, Slot, QPoint
from PySide6.QtGui import QFontDatabase, QPalette
from loguru import logger

from ...core.models import TreeNode

class FileTreeWidget(QTreeWidget):
    """Folder tree with a checkbox and a line count on every file."""

    # node id, checked
    file_check_changed = Signal(str, bool)

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setColumnCount(2) # Name, LOC
        self.setHeaderLabels(["Name", "LOC"])
        self.setSelectionMode(QAbstractItemView.SelectionMode.NoSelection) # Checkboxes only
        self.setAlternatingRowColors(True)
        self.setAnimated(False)

        fixed_font = QFontDatabase.systemFont(QFontDatabase.SystemFont.FixedFont)
        self.setFont(fixed_font); self.header().setFont(fixed_font)

        self._item_map: Dict[QTreeWidgetItem, TreeNode] = {}

        header = self.header()
        header.setSectionResizeMode(0, QHeaderView.ResizeMode.Stretch)
        header.setSectionResizeMode(1, QHeaderView.ResizeMode.ResizeToContents)
        self.setMinimumWidth(300)

        self.itemChanged.connect(self._on_item_changed)
        self.setContextMenuPolicy(Qt.ContextMenuPolicy.CustomContextMenu)
        self.customContextMenuRequested.connect(self._show_context_menu)

    def _create_tree_item(self, node: TreeNode, parent_item: Optional[QTreeWidgetItem],
                          line_count_for: Callable[[Path], Optional[int]],
                          selected: Container[str]) -> QTreeWidgetItem:
        item = QTreeWidgetItem(parent_item) if parent_item else QTreeWidgetItem(self)
        item.setText(0, node.name); item.setToolTip(0, str(node.path))
        if node.is_leaf:
            line_count = line_count_for(node.path)
            # Binary files have no line count but can still be checked
            item.setText(1, f"{line_count} LOC" if line_count is not None else "")
            item.setFlags(item.flags() | Qt.ItemFlag.ItemIsUserCheckable | Qt.ItemFlag.ItemIsEnabled)
            item.setCheckState(0, Qt.CheckState.Checked if node.id in selected else Qt.CheckState.Unchecked)
        else:
            item.setFlags(item.flags() & ~Qt.ItemFlag.ItemIsUserCheckable) # Folders are checked via the context menu
            font = item.font(0); font.setBold(True); item.setFont(0, font)
        self._item_map[item] = node
        return item

    def populate_tree(self, root_node: Optional[TreeNode], line_count_for: Callable[[Path], Optional[int]],
                      selected: Container[str] = ()):
        """Rebuilds the tree; leaves whose id is in `selected` start checked."""
        self.clear_tree()
        if root_node is None: return
        logger.debug(f"Populating tree with root: {root_node.name}")
        self.blockSignals(True)
        try:
            stack = [(root_node, None)]
            while stack:
                node, parent_qt_item = stack.pop()
                current_qt_item = self._create_tree_item(node, parent_qt_item, line_count_for, selected)
                for child_node in reversed(node.children or []):
                    stack.append((child_node, current_qt_item))
            for i in range(self.topLevelItemCount()): self.topLevelItem(i).setExpanded(True)
        finally: self.blockSignals(False)
        logger.debug("Tree population complete.")

    def clear_tree(self):
        self.blockSignals(True)
        self.clear(); self._item_map.clear()
        self.blockSignals(False)

    def show_loading_indicator(self, folder: str):
        self.clear_tree()
        self.blockSignals(True)
        try:
            loading_item = QTreeWidgetItem(self)
            loading_item.setText(0, f"Loading {folder}…")
            loading_item.setFlags(loading_item.flags() & ~Qt.ItemFlag.ItemIsEnabled)
            loading_item.setForeground(0, self.palette().color(QPalette.ColorRole.PlaceholderText))
        finally:
            self.blockSignals(False)

    @Slot(QTreeWidgetItem, int)
    def _on_item_changed(self, item: QTreeWidgetItem, column: int):
        if column != 0: return
        node = self._item_map.get(item)
        if node is None or not node.is_leaf: return
        is_checked = item.checkState(0) == Qt.CheckState.Checked
        logger.trace(f"File '{node.name}' check state changed to: {is_checked}")
        self.file_check_changed.emit(node.id, is_checked)

    def set_leaves_checked(self, item: QTreeWidgetItem, checked: bool):
        """Checks or unchecks every file below `item`, one change signal per file."""
        node = self._item_map.get(item)
        if node is None: return
        if node.is_leaf:
            state = Qt.CheckState.Checked if checked else Qt.CheckState.Unchecked
            if item.checkState(0) != state: item.setCheckState(0, state)
            return
        for i in range(item.childCount()): self.set_leaves_checked(item.child(i), checked)

    def uncheck_all_items(self):
        self.blockSignals(True)
        try:
            iterator = QTreeWidgetItemIterator(self)
            while iterator.value():
                item = iterator.value()
                if item.flags() & Qt.ItemFlag.ItemIsUserCheckable: item.setCheckState(0, Qt.CheckState.Unchecked)
                iterator += 1
        finally:
            self.blockSignals(False)

    @Slot(QPoint)
    def _show_context_menu(self, pos: QPoint):
        item = self.itemAt(pos)
        if not item: return
        node = self._item_map.get(item)
        if not node or node.is_leaf: return
        menu = QMenu(self)
        action_expand = menu.addAction("Expand All"); action_expand.triggered.connect(lambda: self.expandRecursively(item))
        action_collapse = menu.addAction("Collapse All"); action_collapse.triggered.connect(lambda: self.collapseRecursively(item))
        menu.addSeparator()
        action_check = menu.addAction("Check Files"); action_check.triggered.connect(lambda: self.set_leaves_checked(item, True))
        action_uncheck = menu.addAction("Uncheck Files"); action_uncheck.triggered.connect(lambda: self.set_leaves_checked(item, False))
        menu.exec(self.mapToGlobal(pos))

    def expandRecursively(self, item: QTreeWidgetItem):
        if not item: return
        item.setExpanded(True)
        for i in range(item.childCount()): self.expandRecursively(item.child(i))

    def collapseRecursively(self, item: QTreeWidgetItem):
        if not item: return
        for i in range(item.childCount()): self.collapseRecursively(item.child(i))
        item.setExpanded(False)
