# promptmanager/core/recompute.py
from enum import Enum
from typing import Callable, Optional
from loguru import logger

from .difficulty import estimate_difficulty
from .models import RecomputeResult, RecomputeSnapshot
from .prompt_engine import render_prompt, render_tree
from .selection import resolve_selected_files

# --- Core Logic (Pure Python) ---

def compute_results(snapshot: RecomputeSnapshot) -> RecomputeResult:
    """Difficulty and prompt, both derived from the one snapshot."""
    selected = resolve_selected_files(snapshot.tree, snapshot.files, snapshot.selection)
    difficulty = estimate_difficulty(selected)
    prompt = render_prompt(
        snapshot.task_type,
        selected,
        snapshot.task_instruction,
        snapshot.custom_instruction,
        render_tree(snapshot.tree),
    )
    return RecomputeResult(sequence=snapshot.sequence, difficulty=difficulty, prompt=prompt)

# --- Qt Adapter Task ---

from PySide6.QtCore import QObject, QRunnable, Signal, Slot

from ..services.async_utils import create_debounce_timer, run_in_background

class RecomputeSignals(QObject):
    finished = Signal(object); error = Signal(int, str)

class RecomputeTask(QRunnable):
    """QRunnable adapter for running compute_results in a background thread."""
    def __init__(self, snapshot: RecomputeSnapshot):
        super().__init__(); self.snapshot = snapshot
        self.signals = RecomputeSignals(); self.setAutoDelete(True)
    @Slot()
    def run(self) -> None:
        try: self.signals.finished.emit(compute_results(self.snapshot))
        except Exception as e:
            logger.exception(f"Unexpected error during recompute #{self.snapshot.sequence}: {e}")
            self.signals.error.emit(self.snapshot.sequence, f"Unexpected Recompute Error: {e}")

# --- Orchestrator ---

class RecomputeState(Enum):
    IDLE = "IDLE"
    RECOMPUTING = "RECOMPUTING"

class RecomputeOrchestrator(QObject):
    """
    Debounces recompute triggers and runs at most one recompute at a time.

    Triggers restart a single-shot timer. When it fires, one snapshot is taken
    (stamped with the next sequence number) and computed on the thread pool.
    Results come back to the owning thread and are published as a pair, and
    only when newer than the last published one. A trigger that arrives while
    a recompute is running marks the orchestrator dirty; the debounce restarts
    when that recompute completes.
    """

    results_ready = Signal(object) # RecomputeResult
    recompute_failed = Signal(str)
    state_changed = Signal(str)

    def __init__(self,
                 snapshot_provider: Callable[[int], RecomputeSnapshot],
                 interval_ms: int = 300,
                 dispatcher: Optional[Callable[[RecomputeTask], None]] = None,
                 parent: QObject | None = None):
        super().__init__(parent)
        self._snapshot_provider = snapshot_provider
        self._dispatch = dispatcher or run_in_background
        self._timer = create_debounce_timer(self, interval_ms, self._on_debounce_timeout)
        self._state = RecomputeState.IDLE
        self._dirty = False
        self._last_sequence = 0
        self._last_applied_sequence = 0
        self._in_flight_task: Optional[RecomputeTask] = None
        self._in_flight_sequence: Optional[int] = None
        self._latest_result: Optional[RecomputeResult] = None
        logger.debug(f"RecomputeOrchestrator initialized (debounce {interval_ms} ms).")

    @property
    def state(self) -> RecomputeState:
        return self._state

    @property
    def is_pending(self) -> bool:
        """True while a debounce is counting down or a rerun is owed."""
        return self._timer.isActive() or self._dirty

    @property
    def latest_result(self) -> Optional[RecomputeResult]:
        return self._latest_result

    @property
    def last_applied_sequence(self) -> int:
        return self._last_applied_sequence

    @Slot()
    def request_recompute(self):
        """Trigger: any change to a recompute input."""
        if self._state is RecomputeState.RECOMPUTING:
            logger.trace("Recompute in flight, marking dirty.")
            self._dirty = True
            return
        logger.trace("Debounce timer restarted for recompute.")
        self._timer.start()

    @Slot()
    def recompute_now(self):
        """Skips the debounce, e.g. for the initial computation."""
        self._timer.stop()
        if self._state is RecomputeState.RECOMPUTING:
            self._dirty = True
            return
        self._start_recompute()

    def _set_state(self, state: RecomputeState):
        if state is not self._state:
            self._state = state
            self.state_changed.emit(state.value)

    @Slot()
    def _on_debounce_timeout(self):
        if self._state is RecomputeState.RECOMPUTING:
            self._dirty = True
            return
        self._start_recompute()

    def _start_recompute(self):
        self._last_sequence += 1
        sequence = self._last_sequence
        try:
            snapshot = self._snapshot_provider(sequence)
        except Exception as e:
            logger.exception(f"Could not take snapshot for recompute #{sequence}: {e}")
            self.recompute_failed.emit(f"Snapshot Error: {e}")
            return

        logger.debug(f"Starting recompute #{sequence} ({len(snapshot.selection)} selected ids).")
        task = RecomputeTask(snapshot)
        task.signals.finished.connect(self._on_task_finished)
        task.signals.error.connect(self._on_task_error)
        self._in_flight_task = task
        self._in_flight_sequence = sequence
        self._dirty = False
        self._set_state(RecomputeState.RECOMPUTING)
        self._dispatch(task)

    @Slot(object)
    def _on_task_finished(self, result: RecomputeResult):
        if result.sequence <= self._last_applied_sequence:
            logger.warning(f"Dropping stale recompute #{result.sequence} (already applied #{self._last_applied_sequence}).")
        else:
            self._last_applied_sequence = result.sequence
            self._latest_result = result
            logger.debug(f"Applied recompute #{result.sequence}: {result.difficulty.label}, {len(result.prompt)} chars.")
            self.results_ready.emit(result)
        self._complete(result.sequence)

    @Slot(int, str)
    def _on_task_error(self, sequence: int, message: str):
        logger.error(f"Recompute #{sequence} failed: {message}")
        self.recompute_failed.emit(message)
        self._complete(sequence)

    def _complete(self, sequence: int):
        if sequence != self._in_flight_sequence:
            return
        self._in_flight_task = None
        self._in_flight_sequence = None
        self._set_state(RecomputeState.IDLE)
        if self._dirty:
            self._dirty = False
            logger.debug("Inputs changed during recompute, scheduling another.")
            self._timer.start()
