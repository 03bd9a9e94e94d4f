# promptmanager/ui/windows/main_window.py
from pathlib import Path

from PySide6.QtWidgets import (QMainWindow, QWidget, QVBoxLayout, QHBoxLayout,
                             QSplitter, QPushButton, QLabel, QMessageBox, QFileDialog,
                             QStatusBar, QProgressBar, QApplication)
from PySide6.QtGui import QKeySequence
from PySide6.QtCore import Qt, Slot

from loguru import logger

from ..widgets.editor_dialogs import InstructionEditorDialog, TaskTypeEditorDialog
from ..widgets.file_tree import FileTreeWidget
from ..widgets.task_panel import TaskPanelWidget
from ..widgets.text_edit import InstructionTextEdit, PromptTextEdit
from ...core.models import DifficultyResult, FolderLoadResult, RecomputeResult
from ...core.recompute import RecomputeState
from ...core.token_counter import token_label
from ...services.workspace import WorkspaceController


class MainWindow(QMainWindow):
    """Main application window."""

    def __init__(self, controller: WorkspaceController, parent: QWidget | None = None):
        super().__init__(parent)
        self.setWindowTitle("PromptManager")
        self.controller = controller
        self.session = controller.session

        self._setup_ui()
        self._setup_menus()
        self._setup_statusbar()
        self._connect_signals()

        self.task_panel.refresh(self.session)
        self._show_prompt(self.controller.current_prompt)
        self._show_difficulty(self.controller.current_difficulty)
        self.resize(1200, 800)
        logger.info("MainWindow initialized.")

    def _setup_ui(self):
        self.main_splitter = QSplitter(Qt.Orientation.Horizontal, self)
        self.setCentralWidget(self.main_splitter)

        # Left: folder picker and tree
        left_container = QWidget(); left_layout = QVBoxLayout(left_container); left_layout.setContentsMargins(5, 5, 5, 5)
        self.add_folder_button = QPushButton("Add Folder…")
        left_layout.addWidget(self.add_folder_button)
        self.file_tree = FileTreeWidget()
        left_layout.addWidget(self.file_tree)

        # Right: task controls, instruction, prompt and footer
        right_container = QWidget(); right_layout = QVBoxLayout(right_container); right_layout.setContentsMargins(5, 5, 5, 5)
        self.task_panel = TaskPanelWidget()
        right_layout.addWidget(self.task_panel)
        instruction_label = QLabel("Task Instruction"); instruction_label.setStyleSheet("font-weight: bold;")
        right_layout.addWidget(instruction_label)
        self.instruction_edit = InstructionTextEdit(self.session.task_instruction)
        self.instruction_edit.setMaximumHeight(160)
        right_layout.addWidget(self.instruction_edit)
        prompt_label = QLabel("Prompt"); prompt_label.setStyleSheet("font-weight: bold;")
        right_layout.addWidget(prompt_label)
        self.prompt_view = PromptTextEdit()
        right_layout.addWidget(self.prompt_view, 1)

        footer = QHBoxLayout()
        self.difficulty_label = QLabel()
        self.token_label = QLabel(token_label(""))
        self.clear_button = QPushButton("Clear Selection")
        self.copy_button = QPushButton("Copy")
        footer.addWidget(self.difficulty_label); footer.addStretch(1)
        footer.addWidget(self.token_label); footer.addWidget(self.clear_button); footer.addWidget(self.copy_button)
        right_layout.addLayout(footer)

        self.main_splitter.addWidget(left_container); self.main_splitter.addWidget(right_container)
        self.main_splitter.setSizes([400, 800])

    def _setup_menus(self):
        menubar = self.menuBar()
        file_menu = menubar.addMenu("&File")
        self.open_folder_action = file_menu.addAction("&Add Folder…", self.choose_folder, QKeySequence.StandardKey.Open)
        file_menu.addSeparator(); self.quit_action = file_menu.addAction("&Quit", self.close, QKeySequence.StandardKey.Quit)
        edit_menu = menubar.addMenu("&Edit")
        self.copy_action = edit_menu.addAction("&Copy Prompt", self.copy_content, QKeySequence.StandardKey.Copy)
        self.clear_action = edit_menu.addAction("C&lear Selection", self.clear_selection)
        edit_menu.addSeparator()
        edit_menu.addAction("Edit &Task Types…", self.edit_task_types)
        edit_menu.addAction("Edit Custom &Instructions…", self.edit_instructions)
        help_menu = menubar.addMenu("&Help"); self.about_action = help_menu.addAction("&About", self._show_about_dialog)

    def _setup_statusbar(self):
        self.status_bar = QStatusBar(self); self.setStatusBar(self.status_bar); self.status_label = QLabel("Ready")
        self.status_progress = QProgressBar(); self.status_progress.setRange(0, 0); self.status_progress.setVisible(False); self.status_progress.setFixedWidth(150)
        self.status_bar.addWidget(self.status_label, 1); self.status_bar.addPermanentWidget(self.status_progress)

    def _connect_signals(self):
        self.add_folder_button.clicked.connect(self.choose_folder)
        self.copy_button.clicked.connect(self.copy_content)
        self.clear_button.clicked.connect(self.clear_selection)
        self.file_tree.file_check_changed.connect(self.session.set_file_selected)
        self.instruction_edit.instruction_edited.connect(self.session.set_task_instruction)
        self.task_panel.task_type_selected.connect(self.session.set_task_type)
        self.task_panel.instruction_selected.connect(self.session.select_instruction)
        self.task_panel.edit_task_types_requested.connect(self.edit_task_types)
        self.task_panel.edit_instructions_requested.connect(self.edit_instructions)

        self.controller.folder_load_started.connect(self._on_folder_load_started)
        self.controller.folder_loaded.connect(self._on_folder_loaded)
        self.controller.folder_load_failed.connect(self._on_folder_load_failed)
        self.controller.folder_load_progress.connect(self._show_status_message)
        self.controller.orchestrator.results_ready.connect(self._on_results_ready)
        self.controller.orchestrator.recompute_failed.connect(self._on_recompute_failed)
        self.controller.orchestrator.state_changed.connect(self._on_recompute_state_changed)

    # --- Folder loading ---

    @Slot()
    def choose_folder(self):
        start_dir = str(self.session.root_path or Path.home())
        folder = QFileDialog.getExistingDirectory(self, "Select Project Folder", start_dir)
        if not folder:
            logger.debug("Folder picker cancelled.")
            return
        self.controller.load_folder(Path(folder))

    @Slot(str)
    def _on_folder_load_started(self, folder: str):
        self.file_tree.show_loading_indicator(Path(folder).name)
        self._show_status_message(f"Loading {folder}…", 0, show_progress=True)

    @Slot(object)
    def _on_folder_loaded(self, result: FolderLoadResult):
        self.file_tree.populate_tree(result.tree, self.session.line_count_for)
        self.setWindowTitle(f"PromptManager - {result.root_path.name}")
        self._show_status_message(f"Loaded {len(result.files)} text files.", 4000, show_progress=False)

    @Slot(str)
    def _on_folder_load_failed(self, message: str):
        # The session still holds the previous folder
        self.file_tree.populate_tree(self.session.tree, self.session.line_count_for, self.session.selection)
        self._show_status_message(f"Load Error: {message}", 0, show_progress=False)
        QMessageBox.warning(self, "Load Error", f"Could not load folder:\n{message}")

    # --- Recompute results ---

    @Slot(object)
    def _on_results_ready(self, result: RecomputeResult):
        self._show_prompt(result.prompt)
        self._show_difficulty(result.difficulty)

    @Slot(str)
    def _on_recompute_failed(self, message: str):
        self._show_status_message(f"Error: {message}", 0, show_progress=False)

    @Slot(str)
    def _on_recompute_state_changed(self, state: str):
        if self.controller.is_loading: return
        busy = state == RecomputeState.RECOMPUTING.value
        self._show_status_message("Updating prompt…" if busy else "Ready", 0, show_progress=busy)

    def _show_prompt(self, prompt: str):
        self.prompt_view.show_prompt(prompt)
        self.token_label.setText(token_label(prompt))

    def _show_difficulty(self, difficulty: DifficultyResult):
        self.difficulty_label.setText(f"Task Difficulty: {difficulty.label}")
        self.difficulty_label.setToolTip(difficulty.tooltip_text)

    # --- Actions ---

    @Slot()
    def copy_content(self):
        text = self.prompt_view.toPlainText()
        if text: QApplication.clipboard().setText(text); logger.info(f"Copied {len(text)} characters to clipboard."); self._show_status_message("Prompt copied to clipboard!", 3000)
        else: logger.warning("Attempted to copy empty prompt."); self._show_status_message("Nothing to copy.", 3000)

    @Slot()
    def clear_selection(self):
        logger.info("Clearing file selection.")
        self.file_tree.uncheck_all_items()
        self.session.clear_selection()
        self._show_status_message("Selection cleared.", 3000)

    @Slot()
    def edit_task_types(self):
        TaskTypeEditorDialog(self.session, self).exec()
        self.task_panel.refresh(self.session)

    @Slot()
    def edit_instructions(self):
        InstructionEditorDialog(self.session, self).exec()
        self.task_panel.refresh(self.session)

    @Slot()
    def _show_about_dialog(self):
        from ... import __version__; QMessageBox.about(self, "About PromptManager", f"<b>PromptManager v{__version__}</b><br><br>Assembles code and instructions into LLM prompts.")

    @Slot(str)
    @Slot(str, int)
    def _show_status_message(self, message: str, timeout: int = 0, show_progress: bool | None = None):
        """Displays a message in the status bar. show_progress=None means don't change."""
        self.status_label.setText(message)
        if timeout <= 0: self.status_bar.clearMessage()
        else: self.status_bar.showMessage(message, timeout)
        if show_progress is True: self.status_progress.setVisible(True)
        elif show_progress is False: self.status_progress.setVisible(False)
