# promptmanager/ui/widgets/task_panel.py
from PySide6.QtWidgets import QWidget, QHBoxLayout, QVBoxLayout, QLabel, QComboBox, QToolButton
from PySide6.QtCore import Signal, Slot
from loguru import logger

from ...core.session import PromptSession

class TaskPanelWidget(QWidget):
    """Task type and custom instruction pickers, each with an edit button."""

    task_type_selected = Signal(str)
    instruction_selected = Signal(object) # template id or None
    edit_task_types_requested = Signal()
    edit_instructions_requested = Signal()

    def __init__(self, parent: QWidget | None = None):
        super().__init__(parent)
        self._setup_ui()

    def _setup_ui(self):
        layout = QHBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        self.task_type_combo = QComboBox(); self.task_type_combo.setMinimumWidth(140)
        self.edit_task_types_button = QToolButton(); self.edit_task_types_button.setText("…")
        self.edit_task_types_button.setToolTip("Edit task types")
        layout.addLayout(self._labeled("Task Type", self.task_type_combo, self.edit_task_types_button))

        self.instruction_combo = QComboBox(); self.instruction_combo.setMinimumWidth(140)
        self.edit_instructions_button = QToolButton(); self.edit_instructions_button.setText("…")
        self.edit_instructions_button.setToolTip("Edit custom instructions")
        layout.addLayout(self._labeled("Custom Instructions", self.instruction_combo, self.edit_instructions_button))
        layout.addStretch(1)

        self.task_type_combo.currentTextChanged.connect(self._on_task_type_changed)
        self.instruction_combo.currentIndexChanged.connect(self._on_instruction_changed)
        self.edit_task_types_button.clicked.connect(self.edit_task_types_requested)
        self.edit_instructions_button.clicked.connect(self.edit_instructions_requested)

    @staticmethod
    def _labeled(title: str, combo: QComboBox, button: QToolButton) -> QVBoxLayout:
        column = QVBoxLayout()
        label = QLabel(title); label.setStyleSheet("font-weight: bold;")
        column.addWidget(label)
        row = QHBoxLayout(); row.setSpacing(4)
        row.addWidget(combo); row.addWidget(button)
        column.addLayout(row)
        return column

    def refresh(self, session: PromptSession):
        """Reloads both pickers from the session's catalogs without emitting selection signals."""
        self.task_type_combo.blockSignals(True)
        self.instruction_combo.blockSignals(True)
        try:
            self.task_type_combo.clear()
            self.task_type_combo.addItems(session.task_types.names)
            active_type = session.task_type
            if self.task_type_combo.findText(active_type) < 0:
                self.task_type_combo.addItem(active_type) # Active type was removed from the list
            self.task_type_combo.setCurrentText(active_type)

            self.instruction_combo.clear()
            for template in session.instructions:
                self.instruction_combo.addItem(template.name, template.id)
            index = self.instruction_combo.findData(session.instructions.selected_id)
            self.instruction_combo.setCurrentIndex(index)
        finally:
            self.task_type_combo.blockSignals(False)
            self.instruction_combo.blockSignals(False)
        logger.trace("Task panel refreshed.")

    @Slot(str)
    def _on_task_type_changed(self, name: str):
        if name:
            self.task_type_selected.emit(name)

    @Slot(int)
    def _on_instruction_changed(self, index: int):
        self.instruction_selected.emit(self.instruction_combo.itemData(index) if index >= 0 else None)
