# promptmanager/core/catalog.py
from typing import Iterable, Iterator, List, Optional
from loguru import logger

from .models import InstructionTemplate

FALLBACK_TASK_TYPE = "Feature"

class InstructionCatalog:
    """User-editable custom instructions, at most one of them active."""

    def __init__(self, templates: Iterable[InstructionTemplate] = ()):
        self._templates: List[InstructionTemplate] = list(templates)
        self.selected_id: Optional[str] = self._templates[0].id if self._templates else None

    def __iter__(self) -> Iterator[InstructionTemplate]:
        return iter(list(self._templates))

    def __len__(self) -> int:
        return len(self._templates)

    def get(self, template_id: Optional[str]) -> Optional[InstructionTemplate]:
        if template_id is None:
            return None
        return next((t for t in self._templates if t.id == template_id), None)

    def find_by_name(self, name: str) -> Optional[InstructionTemplate]:
        return next((t for t in self._templates if t.name == name), None)

    @property
    def active(self) -> Optional[InstructionTemplate]:
        return self.get(self.selected_id)

    @property
    def active_body(self) -> str:
        """Body of the active template, empty when nothing is active."""
        active = self.active
        return active.body if active else ""

    def add(self, name: str, body: str) -> InstructionTemplate:
        if not name or not body:
            raise ValueError("Instruction name and content must both be non-empty.")
        template = InstructionTemplate(name=name, body=body)
        self._templates.append(template)
        logger.info(f"Added custom instruction '{name}'")
        return template

    def update(self, template_id: str, name: str, body: str) -> bool:
        template = self.get(template_id)
        if template is None:
            logger.warning(f"Cannot update unknown instruction id: {template_id}")
            return False
        template.name = name
        template.body = body
        logger.debug(f"Updated custom instruction '{name}'")
        return True

    def delete(self, template_id: str) -> bool:
        """Removes a template; deleting the active one activates the first remaining (or none)."""
        before = len(self._templates)
        self._templates = [t for t in self._templates if t.id != template_id]
        if len(self._templates) == before:
            logger.warning(f"Cannot delete unknown instruction id: {template_id}")
            return False
        if self.selected_id == template_id:
            self.selected_id = self._templates[0].id if self._templates else None
            logger.debug(f"Active instruction deleted, now: {self.selected_id}")
        return True

    def select(self, template_id: Optional[str]) -> bool:
        if template_id is not None and self.get(template_id) is None:
            logger.warning(f"Cannot select unknown instruction id: {template_id}")
            return False
        self.selected_id = template_id
        return True


class TaskTypeCatalog:
    """Ordered, distinct task type names with one active entry."""

    def __init__(self, names: Iterable[str] = (), active: Optional[str] = None):
        self._names: List[str] = []
        for name in names:
            if name and name not in self._names:
                self._names.append(name)
        if active is None:
            active = self._names[0] if self._names else FALLBACK_TASK_TYPE
        self.active: str = active

    @property
    def names(self) -> List[str]:
        return list(self._names)

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def __len__(self) -> int:
        return len(self._names)

    def add(self, name: str) -> bool:
        """Ignores empty and duplicate names."""
        if not name or name in self._names:
            logger.debug(f"Ignoring task type '{name}' (empty or duplicate).")
            return False
        self._names.append(name)
        logger.info(f"Added task type '{name}'")
        return True

    def delete_at(self, index: int) -> bool:
        if not 0 <= index < len(self._names):
            logger.warning(f"Task type index out of range: {index}")
            return False
        deleted = self._names.pop(index)
        if self.active == deleted:
            self.active = self._names[0] if self._names else FALLBACK_TASK_TYPE
            logger.debug(f"Active task type deleted, now: '{self.active}'")
        return True

    def rename_at(self, index: int, name: str) -> bool:
        if not 0 <= index < len(self._names):
            logger.warning(f"Task type index out of range: {index}")
            return False
        old_name = self._names[index]
        if not name or (name != old_name and name in self._names):
            logger.debug(f"Ignoring rename of '{old_name}' to '{name}' (empty or duplicate).")
            return False
        self._names[index] = name
        if self.active == old_name:
            self.active = name
        return True

    def select(self, name: str) -> bool:
        """Any non-empty name may be active, including one not in the catalog."""
        if not name:
            return False
        self.active = name
        return True
