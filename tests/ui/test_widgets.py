# tests/ui/test_widgets.py
from PySide6.QtCore import Qt

from promptmanager.core.fs_scanner import _FileTreeBuilderCore
from promptmanager.ui.widgets.file_tree import FileTreeWidget
from promptmanager.ui.widgets.task_panel import TaskPanelWidget

def _find(tree, name):
    return tree.findItems(name, Qt.MatchFlag.MatchExactly | Qt.MatchFlag.MatchRecursive, 0)[0]

def test_file_tree_shows_line_counts_and_emits_checks(qapp, session, project_dir):
    session.apply_folder_load(_FileTreeBuilderCore(project_dir).build_sync())
    tree = FileTreeWidget()
    tree.populate_tree(session.tree, session.line_count_for)
    checks = []
    tree.file_check_changed.connect(lambda node_id, checked: checks.append((node_id, checked)))

    main_item = _find(tree, "main.py")
    assert main_item.text(1) == "3 LOC"
    assert _find(tree, "logo.png").text(1) == ""
    assert not (_find(tree, "src").flags() & Qt.ItemFlag.ItemIsUserCheckable)

    main_item.setCheckState(0, Qt.CheckState.Checked)
    assert len(checks) == 1 and checks[0][1] is True
    session.set_file_selected(*checks[0])
    assert [r.path.name for r in session.selected_files()] == ["main.py"]

def test_checking_a_folder_checks_its_files(qapp, session, project_dir):
    session.apply_folder_load(_FileTreeBuilderCore(project_dir).build_sync())
    tree = FileTreeWidget()
    tree.populate_tree(session.tree, session.line_count_for)
    tree.file_check_changed.connect(session.set_file_selected)
    tree.set_leaves_checked(tree.topLevelItem(0), True)
    assert len(session.selected_files()) == 3 # logo.png has no text record

    tree.uncheck_all_items()
    assert _find(tree, "main.py").checkState(0) == Qt.CheckState.Unchecked

def test_task_panel_reflects_session(qapp, session):
    panel = TaskPanelWidget()
    panel.refresh(session)
    assert panel.task_type_combo.currentText() == "Feature"
    assert panel.instruction_combo.currentText() == "Default"

    picked = []
    panel.task_type_selected.connect(picked.append)
    panel.task_type_combo.setCurrentText("Architect")
    assert picked == ["Architect"]

    session.select_instruction(session.instructions.find_by_name("Python").id)
    panel.refresh(session)
    assert panel.instruction_combo.currentText() == "Python"
