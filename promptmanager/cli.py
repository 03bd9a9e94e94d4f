# promptmanager/cli.py

import fnmatch
from pathlib import Path
from typing import Optional, List

import typer
from loguru import logger

from .services.logging import setup_logging
from .config.loader import get_config
# Import the *core* classes, not the Qt adapters
from .core.fs_scanner import _FileTreeBuilderCore
from .core.models import TreeNode
from .core.recompute import compute_results
from .core.selection import flatten_tree
from .core.session import PromptSession
from .core.token_counter import token_label
from . import __version__

app = typer.Typer(help="PromptManager CLI - Assemble prompts headlessly.")

def version_callback(value: bool):
    if value:
        print(f"PromptManager CLI Version: {__version__}")
        raise typer.Exit()

@app.callback()
def main_options(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
    version: Optional[bool] = typer.Option(None, "--version", callback=version_callback, is_eager=True, help="Show version and exit."),
):
    """ Main callback to set up logging """
    log_level = "DEBUG" if verbose else "WARNING"
    setup_logging(level=log_level, verbose=verbose)
    ctx.ensure_object(dict)
    ctx.obj["VERBOSE"] = verbose


def _matching_leaves(root: Optional[TreeNode], root_path: Path, patterns: Optional[List[str]]) -> List[TreeNode]:
    """
    Leaves whose root-relative POSIX path or name matches any pattern,
    in tree order. No patterns selects every leaf.
    """
    if root is None:
        return []
    leaves = [node for node in flatten_tree([root]) if node.is_leaf]
    if not patterns:
        return leaves
    matched: List[TreeNode] = []
    for node in leaves:
        try:
            relative_path = node.path.relative_to(root_path).as_posix()
        except ValueError:
            relative_path = node.name # Fallback
        if any(fnmatch.fnmatch(relative_path, p) or fnmatch.fnmatch(node.name, p) for p in patterns):
            matched.append(node)
    return matched


@app.command()
def build(
    folder: Path = typer.Option(..., "--folder", "-f", help="Folder to load.", exists=True, file_okay=False, dir_okay=True, readable=True, resolve_path=True),
    select: Optional[List[str]] = typer.Option(None, "--select", "-s", help="Glob patterns for files to select (relative to the folder, e.g. 'src/*.py'). Default: all files."),
    task_type: Optional[str] = typer.Option(None, "--task-type", "-t", help="Task type (e.g. 'Architect', 'Engineer', 'Atomic Task List', or any custom name)."),
    instruction: Optional[str] = typer.Option(None, "--instruction", "-i", help="Task instruction text."),
    template: Optional[str] = typer.Option(None, "--template", help="Custom instruction template name. Default: the first template."),
    no_template: bool = typer.Option(False, "--no-template", help="Render without a custom instruction."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the prompt to this file instead of stdout.", resolve_path=True),
):
    """
    Loads a folder, selects files by glob and prints the assembled prompt.
    """
    config = get_config()
    session = PromptSession.from_config(config)

    try:
        result = _FileTreeBuilderCore(root_path=folder).build_sync()
    except ValueError as e:
        logger.error(f"Load Error: {e}")
        raise typer.Exit(code=1)
    session.apply_folder_load(result)

    for node in _matching_leaves(result.tree, result.root_path, select):
        session.set_file_selected(node.id, True)

    if task_type:
        session.set_task_type(task_type)
    if instruction is not None:
        session.set_task_instruction(instruction)
    if no_template:
        session.select_instruction(None)
    elif template:
        chosen = session.instructions.find_by_name(template)
        if chosen is None:
            names = ", ".join(t.name for t in session.instructions)
            typer.echo(f"Unknown template '{template}'. Available: {names}", err=True)
            raise typer.Exit(code=1)
        session.select_instruction(chosen.id)

    computed = compute_results(session.snapshot(sequence=1))
    difficulty = computed.difficulty
    summary = (f"Task Difficulty: {difficulty.label} (score {difficulty.score:.2f}, "
               f"{difficulty.file_count} files, {difficulty.total_lines} LOC) {token_label(computed.prompt)}")

    if output is None:
        typer.echo(computed.prompt)
    else:
        try:
            output.parent.mkdir(parents=True, exist_ok=True)
            output.write_text(computed.prompt, encoding='utf-8')
        except OSError as e:
            logger.error(f"Error writing output file: {e}")
            raise typer.Exit(code=1)
        typer.echo(f"Prompt written to: {output}", err=True)
    typer.echo(summary, err=True)


@app.command("task-types")
def task_types():
    """Lists the configured task types (* marks the default)."""
    config = get_config()
    for name in config.task_types:
        marker = "*" if name == config.default_task_type else " "
        typer.echo(f"{marker} {name}")


@app.command()
def templates(
    show: bool = typer.Option(False, "--show", help="Print each template's content."),
):
    """Lists the configured custom instruction templates."""
    for definition in get_config().instructions:
        typer.echo(definition.name)
        if show:
            for line in definition.content.splitlines():
                typer.echo(f"    {line}")


if __name__ == "__main__":
    app()
