# promptmanager/core/fs_scanner.py
import os
from pathlib import Path
from typing import List, Optional, Callable
from loguru import logger

from .models import FileRecord, FolderLoadResult, TreeNode

# --- Core Logic (Pure Python) ---

def is_hidden(name: str) -> bool:
    return name.startswith(".")

class _FileTreeBuilderCore:
    """
    Pure Python folder loader. One walk produces both the flat list of decoded
    text files and the display tree.
    """

    def __init__(self,
                 root_path: Path,
                 progress_callback: Optional[Callable[[str], None]] = None,
                 error_callback: Optional[Callable[[str], None]] = None):
        self.root_path = Path(root_path).resolve()
        self.progress_callback = progress_callback
        self.error_callback = error_callback
        self._files: List[FileRecord] = []
        logger.debug(f"Tree builder core initialized for {self.root_path}")

    def _emit_progress(self, message: str):
        if self.progress_callback:
            try: self.progress_callback(message)
            except Exception as e: logger.error(f"Error in progress callback: {e}")

    def _emit_error(self, message: str):
        if self.error_callback:
            try: self.error_callback(message)
            except Exception as e: logger.error(f"Error in error callback: {e}")

    def build_sync(self, sequence: int = 0) -> FolderLoadResult:
        """
        Builds the flat file list and the tree synchronously.
        Raises ValueError if the root is not a directory; every other
        filesystem error only drops the offending entry.
        """
        logger.info(f"[Sync Build] Starting for: {self.root_path}")
        if not self.root_path.is_dir():
            raise ValueError(f"Provided path is not a valid directory: {self.root_path}")
        self._files = []
        root_node = self._build_dir(self.root_path)
        result = FolderLoadResult(root_path=self.root_path, files=tuple(self._files),
                                  tree=root_node, sequence=sequence)
        logger.info(f"[Sync Build] Finished for: {self.root_path}. {len(result.files)} text files.")
        return result

    def _build_dir(self, dir_path: Path) -> TreeNode:
        """Recursive helper. Unreadable directories become empty folders."""
        dir_node = TreeNode(name=dir_path.name, path=dir_path, children=[])
        if dir_path != self.root_path: self._emit_progress(f"Scanning: {dir_path.name}")

        try: entries = list(os.scandir(dir_path))
        except OSError as scandir_err:
            logger.warning(f"Could not scan directory contents {dir_path}: {scandir_err}")
            self._emit_error(f"Access Error scanning: {dir_path.name}")
            return dir_node

        child_nodes: List[TreeNode] = []
        for entry in entries:
            if is_hidden(entry.name):
                continue
            entry_path = Path(entry.path)
            try:
                if entry.is_dir(follow_symlinks=False):
                    child_nodes.append(self._build_dir(entry_path))
                    continue
                if entry.is_symlink():
                    # Linked directories are not descended into
                    if entry.is_dir():
                        logger.trace(f"Skipping symlinked directory: {entry_path}")
                        continue
                    if not entry.is_file():
                        logger.trace(f"Skipping broken or special symlink: {entry_path}")
                        continue
                elif not entry.is_file(follow_symlinks=False):
                    continue # sockets, fifos, devices
            except OSError as e:
                logger.warning(f"Could not inspect entry {entry_path}: {e}. Skipping.")
                self._emit_error(f"Access Error inspecting: {entry.name}")
                continue

            child_nodes.append(TreeNode(name=entry.name, path=entry_path))
            record = self._read_record(entry_path)
            if record is not None:
                self._files.append(record)

        dir_node.children = sorted(child_nodes, key=lambda n: (n.name.lower(), n.name))
        return dir_node

    def _read_record(self, file_path: Path) -> Optional[FileRecord]:
        """Reads a file as strict UTF-8. Returns None for binary or unreadable files."""
        try:
            content = file_path.read_bytes().decode("utf-8")
        except UnicodeDecodeError:
            logger.debug(f"Not a text file, omitted from file list: {file_path}")
            return None
        except OSError as read_err:
            logger.warning(f"Error reading file {file_path}: {read_err}")
            self._emit_error(f"Access Error reading: {file_path.name}")
            return None
        return FileRecord.from_content(file_path, content)

# --- Qt Adapter Task ---

from PySide6.QtCore import QObject, QRunnable, Signal, Slot

class FolderLoadSignals(QObject):
    finished = Signal(object); error = Signal(int, str); progress = Signal(str); skipped = Signal(str)

class FolderLoadTask(QRunnable):
    """QRunnable adapter for running _FileTreeBuilderCore in a background thread."""
    def __init__(self, root_path: Path, sequence: int = 0):
        super().__init__(); self.root_path = Path(root_path); self.sequence = sequence
        self.signals = FolderLoadSignals()
        self.setAutoDelete(True)
    @Slot()
    def run(self) -> None:
        try:
            builder = _FileTreeBuilderCore(root_path=self.root_path, progress_callback=self.signals.progress.emit,
                                           error_callback=self.signals.skipped.emit)
            self.signals.finished.emit(builder.build_sync(sequence=self.sequence))
        except ValueError as ve: logger.error(f"Folder load error for {self.root_path}: {ve}"); self.signals.error.emit(self.sequence, str(ve))
        except Exception as e: logger.exception(f"Unexpected error during folder load for {self.root_path}: {e}"); self.signals.error.emit(self.sequence, f"Unexpected Load Error: {e}")
