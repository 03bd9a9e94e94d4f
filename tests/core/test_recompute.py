# tests/core/test_recompute.py
import pytest

from promptmanager.core.fs_scanner import _FileTreeBuilderCore
from promptmanager.core.prompt_engine import NO_FILES_MARKER
from promptmanager.core.recompute import (RecomputeOrchestrator, RecomputeState, RecomputeTask,
                                          compute_results)
from promptmanager.core.selection import flatten_tree

LONG_DEBOUNCE_MS = 60_000

def _run_now(task):
    task.run()

@pytest.fixture
def loaded_session(session, project_dir):
    session.apply_folder_load(_FileTreeBuilderCore(project_dir).build_sync())
    return session

def _select(session, *names):
    ids = {n.name: n.id for n in flatten_tree([session.tree]) if n.is_leaf}
    for name in names:
        session.set_file_selected(ids[name], True)

def test_compute_results_pairs_difficulty_with_prompt(loaded_session):
    _select(loaded_session, "main.py", "README.md")
    result = compute_results(loaded_session.snapshot(sequence=9))
    assert result.sequence == 9
    assert result.difficulty.file_count == 2
    assert result.difficulty.total_lines == 5
    assert result.difficulty.score == pytest.approx(10.1)
    assert "main.py\n```\nimport util" in result.prompt
    assert "<task-instruction>\nAdd a login page\n</task-instruction>" in result.prompt

def test_compute_results_without_selection(loaded_session):
    result = compute_results(loaded_session.snapshot(sequence=1))
    assert result.difficulty.label == "Easy"
    assert NO_FILES_MARKER in result.prompt

def test_task_emits_result_in_same_thread(qapp, loaded_session):
    received = []
    task = RecomputeTask(loaded_session.snapshot(sequence=2))
    task.signals.finished.connect(received.append)
    task.run()
    assert received[0].sequence == 2

def test_triggers_are_debounced_into_one_recompute(qapp, wait_for, session):
    dispatched = []
    def dispatcher(task):
        dispatched.append(task)
        task.run()
    orchestrator = RecomputeOrchestrator(session.snapshot, interval_ms=20, dispatcher=dispatcher)
    session.subscribe(orchestrator.request_recompute)

    for text in ["F", "Fi", "Fix", "Fix the", "Fix the bug"]:
        session.set_task_instruction(text)
    assert dispatched == []
    assert orchestrator.is_pending

    args = wait_for(orchestrator.results_ready)
    assert args is not None
    assert len(dispatched) == 1
    assert dispatched[0].snapshot.task_instruction == "Fix the bug"
    assert "Fix the bug" in args[0].prompt
    assert orchestrator.latest_result is args[0]
    assert not orchestrator.is_pending

def test_recompute_now_skips_debounce(qapp, session):
    results = []
    orchestrator = RecomputeOrchestrator(session.snapshot, interval_ms=LONG_DEBOUNCE_MS, dispatcher=_run_now)
    orchestrator.results_ready.connect(results.append)
    orchestrator.request_recompute()
    orchestrator.recompute_now()
    assert len(results) == 1
    assert not orchestrator.is_pending
    assert orchestrator.state is RecomputeState.IDLE

def test_state_changes_around_a_recompute(qapp, session):
    states = []
    orchestrator = RecomputeOrchestrator(session.snapshot, interval_ms=LONG_DEBOUNCE_MS, dispatcher=_run_now)
    orchestrator.state_changed.connect(states.append)
    orchestrator.recompute_now()
    assert states == ["RECOMPUTING", "IDLE"]

def test_trigger_during_recompute_reschedules_after_completion(qapp, session):
    held = []
    orchestrator = RecomputeOrchestrator(session.snapshot, interval_ms=LONG_DEBOUNCE_MS, dispatcher=held.append)
    session.subscribe(orchestrator.request_recompute)

    orchestrator.recompute_now()
    assert orchestrator.state is RecomputeState.RECOMPUTING
    session.set_task_type("Architect")
    session.set_task_instruction("Plan it")
    assert len(held) == 1 # Never two in flight
    assert orchestrator.is_pending

    held[0].run()
    assert orchestrator.state is RecomputeState.IDLE
    assert orchestrator.last_applied_sequence == 1
    assert orchestrator.is_pending # Debounce restarted for the dirty inputs

    orchestrator.recompute_now()
    assert len(held) == 2
    assert held[1].snapshot.task_type == "Architect"
    assert held[1].snapshot.task_instruction == "Plan it"

def test_recompute_now_while_busy_marks_dirty(qapp, session):
    held = []
    orchestrator = RecomputeOrchestrator(session.snapshot, interval_ms=LONG_DEBOUNCE_MS, dispatcher=held.append)
    orchestrator.recompute_now()
    orchestrator.recompute_now()
    assert len(held) == 1
    assert orchestrator.is_pending

def test_stale_result_is_dropped(qapp, session):
    held, published = [], []
    orchestrator = RecomputeOrchestrator(session.snapshot, interval_ms=LONG_DEBOUNCE_MS, dispatcher=held.append)
    orchestrator.results_ready.connect(published.append)

    orchestrator.recompute_now(); held[0].run()
    session.set_task_instruction("Second")
    orchestrator.recompute_now(); held[1].run()
    assert orchestrator.last_applied_sequence == 2

    orchestrator._on_task_finished(compute_results(held[0].snapshot)) # Late duplicate of #1
    assert [r.sequence for r in published] == [1, 2]
    assert orchestrator.latest_result.sequence == 2
    assert "Second" in orchestrator.latest_result.prompt

def test_compute_error_is_reported_and_releases_state(qapp, session, mocker):
    mocker.patch("promptmanager.core.recompute.compute_results", side_effect=RuntimeError("boom"))
    failures = []
    orchestrator = RecomputeOrchestrator(session.snapshot, interval_ms=LONG_DEBOUNCE_MS, dispatcher=_run_now)
    orchestrator.recompute_failed.connect(failures.append)
    orchestrator.recompute_now()
    assert failures == ["Unexpected Recompute Error: boom"]
    assert orchestrator.state is RecomputeState.IDLE
    assert orchestrator.latest_result is None

def test_snapshot_error_is_reported(qapp, mocker):
    provider = mocker.Mock(side_effect=RuntimeError("no snapshot"))
    dispatcher = mocker.Mock()
    failures = []
    orchestrator = RecomputeOrchestrator(provider, interval_ms=LONG_DEBOUNCE_MS, dispatcher=dispatcher)
    orchestrator.recompute_failed.connect(failures.append)
    orchestrator.recompute_now()
    dispatcher.assert_not_called()
    assert failures == ["Snapshot Error: no snapshot"]
    assert orchestrator.state is RecomputeState.IDLE

def test_end_to_end_on_thread_pool(qapp, wait_for, loaded_session):
    orchestrator = RecomputeOrchestrator(loaded_session.snapshot, interval_ms=10)
    loaded_session.subscribe(orchestrator.request_recompute)
    _select(loaded_session, "util.py")

    args = wait_for(orchestrator.results_ready)
    assert args is not None
    result = args[0]
    assert result.difficulty.file_count == 1
    assert "def run(): pass" in result.prompt
    assert orchestrator.state is RecomputeState.IDLE
