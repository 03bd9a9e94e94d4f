# promptmanager/core/session.py
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple
from loguru import logger

from ..config.schema import AppConfig
from .catalog import InstructionCatalog, TaskTypeCatalog
from .models import FileRecord, FolderLoadResult, InstructionTemplate, RecomputeSnapshot, TreeNode
from .selection import SelectionStore, resolve_selected_files

class PromptSession:
    """
    Single source of truth for one prompt: loaded files and tree, the selection,
    the catalogs and the task instruction.

    Only the UI thread mutates a session. Every change to a recompute input is
    announced to the subscribers; background work reads snapshot() copies.
    """

    def __init__(self,
                 instructions: InstructionCatalog,
                 task_types: TaskTypeCatalog,
                 task_instruction: str = ""):
        self.instructions = instructions
        self.task_types = task_types
        self.selection = SelectionStore()
        self._task_instruction = task_instruction
        self._files: Tuple[FileRecord, ...] = ()
        self._tree: Optional[TreeNode] = None
        self._root_path: Optional[Path] = None
        self._line_counts: Dict[Path, int] = {}
        self._subscribers: List[Callable[[], None]] = []

    @classmethod
    def from_config(cls, config: AppConfig) -> "PromptSession":
        templates = [InstructionTemplate(name=d.name, body=d.content) for d in config.instructions]
        task_types = TaskTypeCatalog(config.task_types, active=config.default_task_type)
        return cls(InstructionCatalog(templates), task_types, config.default_task_instruction)

    # --- Change notification ---

    def subscribe(self, callback: Callable[[], None]) -> None:
        self._subscribers.append(callback)

    def unsubscribe(self, callback: Callable[[], None]) -> None:
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    def _notify(self, reason: str) -> None:
        logger.trace(f"Session changed: {reason}")
        for callback in list(self._subscribers):
            try: callback()
            except Exception as e: logger.error(f"Error in session subscriber: {e}")

    # --- Read access ---

    @property
    def files(self) -> Tuple[FileRecord, ...]:
        return self._files

    @property
    def tree(self) -> Optional[TreeNode]:
        return self._tree

    @property
    def root_path(self) -> Optional[Path]:
        return self._root_path

    @property
    def task_type(self) -> str:
        return self.task_types.active

    @property
    def task_instruction(self) -> str:
        return self._task_instruction

    def line_count_for(self, path: Path) -> Optional[int]:
        """Line count of a loaded text file, None for folders and binary files."""
        return self._line_counts.get(path)

    def selected_files(self) -> List[FileRecord]:
        return resolve_selected_files(self._tree, self._files, self.selection.snapshot())

    def snapshot(self, sequence: int) -> RecomputeSnapshot:
        return RecomputeSnapshot(
            sequence=sequence,
            files=self._files,
            tree=self._tree,
            selection=self.selection.snapshot(),
            task_type=self.task_types.active,
            task_instruction=self._task_instruction,
            custom_instruction=self.instructions.active_body,
        )

    # --- Recompute inputs ---

    def set_task_type(self, name: str) -> None:
        if name == self.task_types.active or not self.task_types.select(name):
            return
        self._notify(f"task type -> {name}")

    def set_task_instruction(self, text: str) -> None:
        if text == self._task_instruction:
            return
        self._task_instruction = text
        self._notify("task instruction")

    def select_instruction(self, template_id: Optional[str]) -> None:
        if template_id == self.instructions.selected_id or not self.instructions.select(template_id):
            return
        self._notify(f"instruction -> {template_id}")

    def set_file_selected(self, node_id: str, checked: bool) -> None:
        changed = self.selection.add(node_id) if checked else self.selection.remove(node_id)
        if changed:
            self._notify(f"selection {'+' if checked else '-'}{node_id}")

    def clear_selection(self) -> None:
        if self.selection.clear():
            self._notify("selection cleared")

    def apply_folder_load(self, result: FolderLoadResult) -> None:
        """Replaces files and tree together. Node ids are per build, so the selection is cleared."""
        self._files = result.files
        self._tree = result.tree
        self._root_path = result.root_path
        self._line_counts = {record.path: record.line_count for record in result.files}
        self.selection.clear()
        logger.info(f"Loaded folder {result.root_path}: {len(result.files)} text files.")
        self._notify("folder loaded")

    # --- Catalog editing ---

    def add_instruction(self, name: str, body: str) -> InstructionTemplate:
        return self.instructions.add(name, body)

    def update_instruction(self, template_id: str, name: str, body: str) -> bool:
        updated = self.instructions.update(template_id, name, body)
        if updated and template_id == self.instructions.selected_id:
            self._notify("active instruction edited")
        return updated

    def delete_instruction(self, template_id: str) -> bool:
        previous = self.instructions.selected_id
        deleted = self.instructions.delete(template_id)
        if deleted and self.instructions.selected_id != previous:
            self._notify("active instruction deleted")
        return deleted

    def add_task_type(self, name: str) -> bool:
        return self.task_types.add(name)

    def delete_task_type(self, index: int) -> bool:
        previous = self.task_types.active
        deleted = self.task_types.delete_at(index)
        if deleted and self.task_types.active != previous:
            self._notify("active task type deleted")
        return deleted

    def rename_task_type(self, index: int, name: str) -> bool:
        previous = self.task_types.active
        renamed = self.task_types.rename_at(index, name)
        if renamed and self.task_types.active != previous:
            self._notify("active task type renamed")
        return renamed
