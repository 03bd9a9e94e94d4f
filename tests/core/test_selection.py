# tests/core/test_selection.py
from pathlib import Path

from promptmanager.core.models import FileRecord, TreeNode
from promptmanager.core.selection import SelectionStore, flatten_tree, resolve_selected_files

def _sample_tree():
    a = TreeNode(name="a.py", path=Path("/p/a.py"))
    b = TreeNode(name="b.py", path=Path("/p/src/b.py"))
    img = TreeNode(name="img.png", path=Path("/p/src/img.png"))
    src = TreeNode(name="src", path=Path("/p/src"), children=[b, img])
    z = TreeNode(name="z.md", path=Path("/p/z.md"))
    root = TreeNode(name="p", path=Path("/p"), children=[a, src, z])
    files = (
        FileRecord.from_content(Path("/p/z.md"), "z"),
        FileRecord.from_content(Path("/p/src/b.py"), "b"),
        FileRecord.from_content(Path("/p/a.py"), "a"),
    )
    return root, files

def test_store_add_remove_report_changes():
    store = SelectionStore()
    assert store.add("x")
    assert not store.add("x")
    assert "x" in store and store.contains("x")
    assert len(store) == 1
    assert store.remove("x")
    assert not store.remove("x")

def test_store_clear_reports_whether_anything_was_selected():
    store = SelectionStore(["a", "b"])
    assert store.clear()
    assert not store.clear()
    assert len(store) == 0

def test_snapshot_is_detached_copy():
    store = SelectionStore(["a"])
    snap = store.snapshot()
    store.add("b")
    assert snap == frozenset({"a"})

def test_flatten_tree_pre_order():
    root, _ = _sample_tree()
    assert [n.name for n in flatten_tree([root])] == ["p", "a.py", "src", "b.py", "img.png", "z.md"]

def test_resolve_follows_tree_order_not_selection_order():
    root, files = _sample_tree()
    ids = {n.name: n.id for n in flatten_tree([root])}
    selected = resolve_selected_files(root, files, [ids["z.md"], ids["a.py"], ids["b.py"]])
    assert [r.content for r in selected] == ["a", "b", "z"]

def test_resolve_ignores_folders_unknown_ids_and_binary_leaves():
    root, files = _sample_tree()
    ids = {n.name: n.id for n in flatten_tree([root])}
    selected = resolve_selected_files(root, files, {ids["src"], ids["img.png"], "stale-id"})
    assert selected == []

def test_resolve_without_tree():
    _, files = _sample_tree()
    assert resolve_selected_files(None, files, {"anything"}) == []
