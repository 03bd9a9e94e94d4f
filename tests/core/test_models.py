# tests/core/test_models.py
from pathlib import Path

from promptmanager.core.models import (FileRecord, TreeNode, DifficultyResult,
                                       PENDING_DIFFICULTY, count_lines)

def test_count_lines_ignores_empty_segments():
    assert count_lines("") == 0
    assert count_lines("one") == 1
    assert count_lines("one\ntwo\n") == 2
    assert count_lines("one\n\n\ntwo") == 2
    assert count_lines("\n\n") == 0

def test_file_record_derives_line_count():
    record = FileRecord.from_content(Path("a.py"), "x = 1\n\ny = 2\n")
    assert record.line_count == 2

def test_file_record_keeps_explicit_line_count():
    record = FileRecord(path=Path("a.py"), content="", line_count=7)
    assert record.line_count == 7

def test_tree_node_leaf_and_folder():
    leaf = TreeNode(name="a.py", path=Path("a.py"))
    folder = TreeNode(name="src", path=Path("src"), children=[])
    assert leaf.is_leaf
    assert not folder.is_leaf # Empty folders are still folders

def test_tree_node_ids_are_unique():
    ids = {TreeNode(name="same", path=Path("same")).id for _ in range(50)}
    assert len(ids) == 50

def test_difficulty_tooltip_text():
    result = DifficultyResult(score=12.5, label="Easy", file_count=2, total_lines=125)
    assert result.tooltip_text == (
        "Based on 2 files and 125 LOC:\n"
        "Score = 12.50\n"
        "Score ≤ 25: Easy\n"
        "25 < Score ≤ 50: Medium\n"
        "Score > 50: Hard"
    )

def test_pending_difficulty_placeholder():
    assert PENDING_DIFFICULTY.label == "N/A"
    assert PENDING_DIFFICULTY.file_count == 0
