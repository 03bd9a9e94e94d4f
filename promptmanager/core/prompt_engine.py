# promptmanager/core/prompt_engine.py
from typing import List, Optional, Sequence
from loguru import logger

from .models import FileRecord, TreeNode

NO_FILES_MARKER = "No files selected."

ARCHITECT_PROMPT = "\n".join([
    "You are a senior software architect specializing in code design and implementation planning. Your role is to:",
    "1. Analyze the requested changes and break them down into clear, actionable steps",
    "2. Create a detailed implementation plan that includes:",
    "   - Files that need to be modified",
    "   - Specific code sections requiring changes",
    "   - New functions, methods, or classes to be added",
    "   - Dependencies or imports to be updated",
    "   - Data structure modifications",
    "   - Interface changes",
    "   - Configuration updates",
    "For each change:",
    "- Describe the exact location in the code where changes are needed",
    "- Explain the logic and reasoning behind each modification",
    "- Provide example signatures, parameters, and return types",
    "- Note any potential side effects or impacts on other parts of the codebase",
    "- Highlight critical architectural decisions that need to be made",
    "You may include short code snippets to illustrate specific patterns, signatures, or structures, but do not implement the full solution.",
    "Focus solely on the technical implementation plan - exclude testing, validation, and deployment considerations unless they directly impact the architecture.",
])

ENGINEER_PROMPT = "\n".join([
    "You are a senior software engineer whose role is to provide clear, actionable code changes. For each edit required:",
    "1. Specify locations and changes:",
    "   - File path/name",
    "   - Function/class being modified",
    "   - The type of change (add/modify/remove)",
    "2. Show complete code for:",
    "   - Any modified functions (entire function)",
    "   - New functions or methods",
    "   - Changed class definitions",
    "   - Modified configuration blocks",
    "   Only show code units that actually change.",
    "Format all responses as:",
    "File: path/filename.ext",
    "Change: Brief description of what's changing",
    "```language",
    "[Complete code block for this change]",
    "```",
    "You only need to specify the file and path for the first change in a file, and split the rest into separate codeblocks.",
])

# {tree} is replaced with the rendered directory tree
ATOMIC_TASK_LIST_PROMPT = "\n".join([
    "You are a senior dev.",
    "Goal: implement PRD below in <task-instruction>.",
    "Repo tree: ```{tree}```",
    "Return: numbered checklist (≤40 items) + file-scoped diff blocks.",
    "Break PRD into 30-40 atomic edits (new module, unit test, CI yaml tweak). Take PRD, output a checklist with file-level diffs where possible.",
])

GENERIC_PROMPT = "You are tasked to implement a {task_type}. Instructions are as follows:"


def render_tree(root: Optional[TreeNode]) -> str:
    """
    Pretty-prints the descendants of `root` with box-drawing connectors.
    The root itself is not printed; every line ends with a newline.
    """
    if root is None or not root.children:
        return ""
    lines: List[str] = []
    _render_children(root.children, "", lines)
    return "".join(lines)

def _render_children(nodes: Sequence[TreeNode], prefix: str, lines: List[str]) -> None:
    for index, node in enumerate(nodes):
        is_last = index == len(nodes) - 1
        connector = "└── " if is_last else "├── "
        lines.append(f"{prefix}{connector}{node.name}\n")
        if node.children is not None:
            _render_children(node.children, prefix + ("    " if is_last else "│   "), lines)


def render_files_block(files: Sequence[FileRecord]) -> str:
    """Each file as a path header plus fenced content, in the given order."""
    if not files:
        return NO_FILES_MARKER
    return "\n\n".join(f"File: {record.path}\n```\n{record.content}\n```" for record in files)

def render_task_type_block(task_type: str, tree_text: str) -> str:
    """Boilerplate for the built-in task types, a one-line instruction for any other."""
    if task_type == "Architect":
        return ARCHITECT_PROMPT
    if task_type == "Engineer":
        return ENGINEER_PROMPT
    if task_type == "Atomic Task List":
        return ATOMIC_TASK_LIST_PROMPT.replace("{tree}", tree_text)
    return GENERIC_PROMPT.format(task_type=task_type.lower())

def render_prompt(
    task_type: str,
    files: Sequence[FileRecord],
    task_instruction: str,
    custom_instruction: str,
    tree_text: str,
) -> str:
    """Builds the final prompt: files, task-type, task-instruction and custom-instruction blocks."""
    lines = [
        "<files>",
        render_files_block(files),
        "</files>",
        "<task-type>",
        render_task_type_block(task_type, tree_text),
        "</task-type>",
        "<task-instruction>",
        task_instruction,
        "</task-instruction>",
        "<custom-instruction>",
        custom_instruction,
        "</custom-instruction>",
    ]
    prompt = "\n".join(lines)
    logger.debug(f"Rendered '{task_type}' prompt for {len(files)} files ({len(prompt)} chars).")
    return prompt
