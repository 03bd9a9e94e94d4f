# promptmanager/services/workspace.py
from pathlib import Path
from typing import Callable, Optional

from PySide6.QtCore import QObject, QRunnable, Signal, Slot
from loguru import logger

from ..core.fs_scanner import FolderLoadTask
from ..core.models import PENDING_DIFFICULTY, PENDING_PROMPT, DifficultyResult, FolderLoadResult
from ..core.recompute import RecomputeOrchestrator
from ..core.session import PromptSession
from .async_utils import run_in_background

class WorkspaceController(QObject):
    """
    Connects a PromptSession to its background work: folder loads replace the
    session's files and tree, and every session change goes through the
    debounced RecomputeOrchestrator.
    """

    folder_load_started = Signal(str)
    folder_loaded = Signal(object) # FolderLoadResult
    folder_load_failed = Signal(str)
    folder_load_progress = Signal(str)

    def __init__(self,
                 session: PromptSession,
                 interval_ms: int = 300,
                 dispatcher: Optional[Callable[[QRunnable], None]] = None,
                 parent: QObject | None = None):
        super().__init__(parent)
        self.session = session
        self._dispatch = dispatcher or run_in_background
        self._load_sequence = 0
        self._loading_task: Optional[FolderLoadTask] = None
        self.orchestrator = RecomputeOrchestrator(session.snapshot, interval_ms=interval_ms,
                                                  dispatcher=self._dispatch, parent=self)
        session.subscribe(self.orchestrator.request_recompute)

    @property
    def is_loading(self) -> bool:
        return self._loading_task is not None

    @property
    def current_prompt(self) -> str:
        result = self.orchestrator.latest_result
        return result.prompt if result else PENDING_PROMPT

    @property
    def current_difficulty(self) -> DifficultyResult:
        result = self.orchestrator.latest_result
        return result.difficulty if result else PENDING_DIFFICULTY

    def start(self):
        """Initial computation, without waiting for the debounce."""
        self.orchestrator.recompute_now()

    def load_folder(self, folder: Optional[Path]) -> bool:
        """Starts a background folder load. None (picker cancelled) is a no-op."""
        if folder is None:
            return False
        folder = Path(folder)
        if not folder.is_dir():
            logger.error(f"Invalid directory selected: {folder}")
            self.folder_load_failed.emit(f"Not a valid folder: {folder}")
            return False

        self._load_sequence += 1
        logger.info(f"Starting folder load #{self._load_sequence} for: {folder}")
        task = FolderLoadTask(folder, sequence=self._load_sequence)
        task.signals.finished.connect(self._on_folder_load_finished)
        task.signals.error.connect(self._on_folder_load_error)
        task.signals.progress.connect(self.folder_load_progress)
        task.signals.skipped.connect(self._on_entry_skipped)
        self._loading_task = task
        self.folder_load_started.emit(str(folder))
        self._dispatch(task)
        return True

    @Slot(object)
    def _on_folder_load_finished(self, result: FolderLoadResult):
        if result.sequence != self._load_sequence:
            logger.warning(f"Received outdated folder load #{result.sequence} (latest #{self._load_sequence}). Ignoring.")
            return
        self._loading_task = None
        self.session.apply_folder_load(result)
        self.folder_loaded.emit(result)

    @Slot(int, str)
    def _on_folder_load_error(self, sequence: int, message: str):
        if sequence != self._load_sequence:
            logger.warning(f"Outdated folder load #{sequence} failed (latest #{self._load_sequence}). Ignoring: {message}")
            return
        logger.error(f"Folder load #{sequence} failed: {message}")
        self._loading_task = None
        self.folder_load_failed.emit(message)

    @Slot(str)
    def _on_entry_skipped(self, message: str):
        logger.debug(f"Folder load skipped an entry: {message}")
