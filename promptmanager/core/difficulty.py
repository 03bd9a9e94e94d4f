# promptmanager/core/difficulty.py
from typing import Sequence

from .models import DifficultyResult, FileRecord

POINTS_PER_FILE = 5.0
LINES_PER_POINT = 50.0
EASY_MAX_SCORE = 25.0
MEDIUM_MAX_SCORE = 50.0

def classify_score(score: float) -> str:
    """Upper bounds are inclusive: 25.0 is Easy, 50.0 is Medium."""
    if score <= EASY_MAX_SCORE:
        return "Easy"
    if score <= MEDIUM_MAX_SCORE:
        return "Medium"
    return "Hard"

def estimate_difficulty(files: Sequence[FileRecord]) -> DifficultyResult:
    """Scores the selected files by count and total line count."""
    file_count = len(files)
    total_lines = sum(record.line_count for record in files)
    score = file_count * POINTS_PER_FILE + total_lines / LINES_PER_POINT
    return DifficultyResult(score=score, label=classify_score(score),
                            file_count=file_count, total_lines=total_lines)
