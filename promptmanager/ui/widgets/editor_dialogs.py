# promptmanager/ui/widgets/editor_dialogs.py
from typing import Optional

from PySide6.QtWidgets import (QDialog, QVBoxLayout, QHBoxLayout, QLabel, QListWidget,
                             QListWidgetItem, QLineEdit, QPlainTextEdit, QPushButton,
                             QDialogButtonBox, QMessageBox)
from PySide6.QtCore import Qt, Slot
from loguru import logger

from ...core.session import PromptSession

class InstructionEditorDialog(QDialog):
    """Add, edit and delete custom instruction templates."""

    def __init__(self, session: PromptSession, parent=None):
        super().__init__(parent)
        self.session = session
        self.setWindowTitle("Edit Custom Instructions")
        self.setModal(True)
        self.setMinimumSize(500, 600)

        layout = QVBoxLayout(self)
        self.template_list = QListWidget()
        layout.addWidget(self.template_list)

        layout.addWidget(QLabel("Name"))
        self.name_edit = QLineEdit()
        layout.addWidget(self.name_edit)
        layout.addWidget(QLabel("Content"))
        self.content_edit = QPlainTextEdit()
        layout.addWidget(self.content_edit)

        buttons = QHBoxLayout()
        self.add_button = QPushButton("Add"); self.save_button = QPushButton("Save"); self.delete_button = QPushButton("Delete")
        buttons.addWidget(self.add_button); buttons.addWidget(self.save_button); buttons.addStretch(1); buttons.addWidget(self.delete_button)
        layout.addLayout(buttons)

        close_box = QDialogButtonBox(QDialogButtonBox.StandardButton.Close)
        close_box.rejected.connect(self.reject)
        layout.addWidget(close_box)

        self.template_list.currentItemChanged.connect(self._on_current_changed)
        self.name_edit.textChanged.connect(self._update_buttons)
        self.content_edit.textChanged.connect(self._update_buttons)
        self.add_button.clicked.connect(self._add)
        self.save_button.clicked.connect(self._save)
        self.delete_button.clicked.connect(self._delete)

        self._reload()

    def _current_id(self) -> Optional[str]:
        item = self.template_list.currentItem()
        return item.data(Qt.ItemDataRole.UserRole) if item else None

    def _reload(self, select_id: Optional[str] = None):
        self.template_list.clear()
        for template in self.session.instructions:
            item = QListWidgetItem(template.name)
            item.setData(Qt.ItemDataRole.UserRole, template.id)
            self.template_list.addItem(item)
            if template.id == select_id: self.template_list.setCurrentItem(item)
        self._update_buttons()

    @Slot()
    def _update_buttons(self):
        has_text = bool(self.name_edit.text()) and bool(self.content_edit.toPlainText())
        self.add_button.setEnabled(has_text)
        self.save_button.setEnabled(has_text and self._current_id() is not None)
        self.delete_button.setEnabled(self._current_id() is not None)

    @Slot(QListWidgetItem, QListWidgetItem)
    def _on_current_changed(self, current: QListWidgetItem, previous: QListWidgetItem):
        template = self.session.instructions.get(current.data(Qt.ItemDataRole.UserRole)) if current else None
        self.name_edit.setText(template.name if template else "")
        self.content_edit.setPlainText(template.body if template else "")
        self._update_buttons()

    @Slot()
    def _add(self):
        try:
            template = self.session.add_instruction(self.name_edit.text(), self.content_edit.toPlainText())
        except ValueError as e:
            QMessageBox.warning(self, "Invalid Instruction", str(e))
            return
        self._reload(select_id=template.id)

    @Slot()
    def _save(self):
        template_id = self._current_id()
        if template_id and self.session.update_instruction(template_id, self.name_edit.text(), self.content_edit.toPlainText()):
            self._reload(select_id=template_id)

    @Slot()
    def _delete(self):
        template_id = self._current_id()
        if template_id and self.session.delete_instruction(template_id):
            logger.info(f"Deleted custom instruction {template_id}")
            self._reload()


class TaskTypeEditorDialog(QDialog):
    """Add, rename and delete task types."""

    def __init__(self, session: PromptSession, parent=None):
        super().__init__(parent)
        self.session = session
        self.setWindowTitle("Edit Task Types")
        self.setModal(True)
        self.setMinimumSize(400, 400)

        layout = QVBoxLayout(self)
        self.type_list = QListWidget()
        layout.addWidget(self.type_list)

        row = QHBoxLayout()
        self.name_edit = QLineEdit(); self.name_edit.setPlaceholderText("New Task Type")
        self.add_button = QPushButton("Add"); self.rename_button = QPushButton("Rename"); self.delete_button = QPushButton("Delete")
        row.addWidget(self.name_edit); row.addWidget(self.add_button); row.addWidget(self.rename_button); row.addWidget(self.delete_button)
        layout.addLayout(row)

        close_box = QDialogButtonBox(QDialogButtonBox.StandardButton.Close)
        close_box.rejected.connect(self.reject)
        layout.addWidget(close_box)

        self.type_list.currentRowChanged.connect(self._on_row_changed)
        self.name_edit.textChanged.connect(self._update_buttons)
        self.add_button.clicked.connect(self._add)
        self.rename_button.clicked.connect(self._rename)
        self.delete_button.clicked.connect(self._delete)

        self._reload()

    def _reload(self, row: int = -1):
        self.type_list.clear()
        self.type_list.addItems(self.session.task_types.names)
        self.type_list.setCurrentRow(row)
        self._update_buttons()

    @Slot()
    def _update_buttons(self):
        name = self.name_edit.text()
        self.add_button.setEnabled(bool(name) and name not in self.session.task_types)
        self.rename_button.setEnabled(bool(name) and self.type_list.currentRow() >= 0)
        self.delete_button.setEnabled(self.type_list.currentRow() >= 0)

    @Slot(int)
    def _on_row_changed(self, row: int):
        names = self.session.task_types.names
        if 0 <= row < len(names): self.name_edit.setText(names[row])
        self._update_buttons()

    @Slot()
    def _add(self):
        if self.session.add_task_type(self.name_edit.text()):
            self.name_edit.clear()
            self._reload()

    @Slot()
    def _rename(self):
        row = self.type_list.currentRow()
        if self.session.rename_task_type(row, self.name_edit.text()):
            self._reload(row)

    @Slot()
    def _delete(self):
        if self.session.delete_task_type(self.type_list.currentRow()):
            self._reload()
