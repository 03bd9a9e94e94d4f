# promptmanager/ui/widgets/text_edit.py

from PySide6.QtWidgets import QPlainTextEdit, QSizePolicy
from PySide6.QtCore import Signal, Slot
from PySide6.QtGui import QFontDatabase


class PromptTextEdit(QPlainTextEdit):
    """Read-only, monospaced view of the final prompt."""

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setReadOnly(True)
        self.setLineWrapMode(QPlainTextEdit.LineWrapMode.WidgetWidth)
        self.setFont(QFontDatabase.systemFont(QFontDatabase.SystemFont.FixedFont))
        self.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding)
        self.setMinimumHeight(300)

    @Slot(str)
    def show_prompt(self, text: str):
        """Replaces the text, keeping the scroll position when the prompt is rebuilt."""
        scroll = self.verticalScrollBar().value()
        self.setPlainText(text)
        self.verticalScrollBar().setValue(scroll)


class InstructionTextEdit(QPlainTextEdit):
    """Editable task instruction; emits the full text on every edit."""

    instruction_edited = Signal(str)

    def __init__(self, text: str = "", parent=None):
        super().__init__(parent)
        self.setPlainText(text)
        self.setMinimumSize(300, 120)
        self.textChanged.connect(lambda: self.instruction_edited.emit(self.toPlainText()))
