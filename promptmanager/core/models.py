# promptmanager/core/models.py
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, List, Tuple, FrozenSet

def count_lines(content: str) -> int:
    """Number of non-empty newline-delimited segments."""
    return sum(1 for segment in content.split("\n") if segment)

def new_node_id() -> str:
    return uuid.uuid4().hex

@dataclass(frozen=True)
class FileRecord:
    """A decoded text file from the loaded folder."""
    path: Path
    content: str
    line_count: int

    @classmethod
    def from_content(cls, path: Path, content: str) -> "FileRecord":
        return cls(path=path, content=content, line_count=count_lines(content))

@dataclass
class TreeNode:
    """A file (children is None) or folder (children is a list) in the loaded tree."""
    name: str
    path: Path
    children: Optional[List['TreeNode']] = None
    id: str = field(default_factory=new_node_id) # Ephemeral, regenerated on every build

    @property
    def is_leaf(self) -> bool:
        return self.children is None

@dataclass
class InstructionTemplate:
    """A named block of reusable custom-instruction text."""
    name: str
    body: str
    id: str = field(default_factory=new_node_id)

@dataclass(frozen=True)
class DifficultyResult:
    score: float
    label: str # Easy, Medium, Hard (N/A before the first recompute)
    file_count: int
    total_lines: int

    @property
    def tooltip_text(self) -> str:
        return (
            f"Based on {self.file_count} files and {self.total_lines} LOC:\n"
            f"Score = {self.score:.2f}\n"
            "Score ≤ 25: Easy\n"
            "25 < Score ≤ 50: Medium\n"
            "Score > 50: Hard"
        )

PENDING_DIFFICULTY = DifficultyResult(score=0.0, label="N/A", file_count=0, total_lines=0)
PENDING_PROMPT = "Select a folder and files to begin."

@dataclass(frozen=True)
class FolderLoadResult:
    """Output of one folder load: flat records plus the tree, replaced together."""
    root_path: Path
    files: Tuple[FileRecord, ...]
    tree: Optional[TreeNode]
    sequence: int = 0

@dataclass(frozen=True)
class RecomputeSnapshot:
    """Immutable copy of every input of one recompute."""
    sequence: int
    files: Tuple[FileRecord, ...]
    tree: Optional[TreeNode]
    selection: FrozenSet[str]
    task_type: str
    task_instruction: str
    custom_instruction: str

@dataclass(frozen=True)
class RecomputeResult:
    """Difficulty and prompt computed from the same snapshot."""
    sequence: int
    difficulty: DifficultyResult
    prompt: str
