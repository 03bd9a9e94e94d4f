# tests/conftest.py
import os

import pytest

# Widgets need a platform plugin; tests never open a real window
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PySide6.QtCore import QEventLoop, QTimer
from PySide6.QtWidgets import QApplication

from promptmanager.core.catalog import InstructionCatalog, TaskTypeCatalog
from promptmanager.core.models import InstructionTemplate
from promptmanager.core.session import PromptSession


@pytest.fixture(scope="session")
def qapp():
    app = QApplication.instance() or QApplication([])
    yield app


def _wait_for(signal, timeout_ms: int = 5000):
    """Runs an event loop until `signal` fires. Returns its arguments, or None on timeout."""
    loop = QEventLoop()
    received = []

    def _on_signal(*args):
        received.append(args)
        loop.quit()

    signal.connect(_on_signal)
    QTimer.singleShot(timeout_ms, loop.quit)
    loop.exec()
    signal.disconnect(_on_signal)
    return received[0] if received else None


@pytest.fixture
def wait_for(qapp):
    return _wait_for


@pytest.fixture
def session():
    """A session with two templates and the built-in task types."""
    templates = [InstructionTemplate(name="Default", body="Keep it short."),
                 InstructionTemplate(name="Python", body="Use Python 3.10.")]
    task_types = TaskTypeCatalog(["Feature", "Bug fix", "Architect", "Engineer", "Atomic Task List"])
    return PromptSession(InstructionCatalog(templates), task_types, task_instruction="Add a login page")


@pytest.fixture
def project_dir(tmp_path):
    """
    project/
        README.md       (2 lines)
        main.py         (3 lines)
        logo.png        (binary)
        .env            (hidden)
        src/
            util.py     (1 line)
    """
    root = tmp_path / "project"
    root.mkdir()
    (root / "README.md").write_text("# Demo\n\nSome text\n", encoding="utf-8")
    (root / "main.py").write_text("import util\n\nutil.run()\nprint('done')\n", encoding="utf-8")
    (root / "logo.png").write_bytes(b"\x89PNG\r\n\x1a\n\xff\xd8\x00")
    (root / ".env").write_text("SECRET=1\n", encoding="utf-8")
    (root / "src").mkdir()
    (root / "src" / "util.py").write_text("def run(): pass\n", encoding="utf-8")
    return root
