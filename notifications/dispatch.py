"""
Background dispatch for notification work.

Tasks are queued only after the surrounding database transaction commits,
then run on a small thread pool so request handlers never wait on the SMS
provider. Each task has its own error boundary.

With NOTIFICATIONS_RUN_INLINE enabled, tasks run synchronously in the
committing thread instead.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

from django.conf import settings
from django.db import connections, transaction

logger = logging.getLogger(__name__)

_executor: Optional[ThreadPoolExecutor] = None
_executor_lock = threading.Lock()


def _get_executor() -> ThreadPoolExecutor:
    global _executor
    with _executor_lock:
        if _executor is None:
            _executor = ThreadPoolExecutor(
                max_workers=settings.NOTIFICATION_WORKERS,
                thread_name_prefix="notify",
            )
        return _executor


def _task_name(func) -> str:
    return getattr(func, "__qualname__", repr(func))


def run_task(func, args, close_connections=True):
    """Run `func(*args)`, logging and swallowing any exception."""
    try:
        func(*args)
    except Exception:
        logger.exception(f"Background task {_task_name(func)}{args!r} failed")
    finally:
        if close_connections:
            connections.close_all()


def dispatch(func, *args):
    """Schedule `func(*args)` to run after the current transaction commits."""

    def _submit():
        if settings.NOTIFICATIONS_RUN_INLINE:
            run_task(func, args, close_connections=False)
        else:
            _get_executor().submit(run_task, func, args)

    transaction.on_commit(_submit)


def shutdown(wait=True):
    """Stop the worker pool (used by management commands before exit)."""
    global _executor
    with _executor_lock:
        if _executor is not None:
            _executor.shutdown(wait=wait)
            _executor = None
