# promptmanager/services/async_utils.py
from typing import Callable, Optional

from PySide6.QtCore import QObject, QRunnable, QThreadPool, QTimer
from loguru import logger

_pool: Optional[QThreadPool] = None

def get_global_thread_pool() -> QThreadPool:
    global _pool
    if _pool is None:
        _pool = QThreadPool.globalInstance()
        logger.info(f"Using global QThreadPool ({_pool.maxThreadCount()} threads max).")
    return _pool

def run_in_background(runnable: QRunnable) -> None:
    """Default dispatcher for folder loads and recomputes."""
    pool = get_global_thread_pool()
    logger.debug(f"Dispatching {type(runnable).__name__} ({pool.activeThreadCount()} threads busy).")
    pool.start(runnable)

def create_debounce_timer(parent: QObject, interval_ms: int, callback: Callable[[], None]) -> QTimer:
    """
    Single-shot timer for debouncing: call start() on every trigger, and
    `callback` runs once the triggers have been quiet for `interval_ms`.
    Must be created and started on the thread that owns `parent`.
    """
    timer = QTimer(parent)
    timer.setSingleShot(True)
    timer.setInterval(interval_ms)
    timer.timeout.connect(callback)
    return timer
