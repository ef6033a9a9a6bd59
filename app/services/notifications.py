"""Fire-and-forget observers for user mutations.

After a create, update or delete commits, the route schedules each observer
as a FastAPI background task. Background tasks run after the response has
been sent, and ``_run_observer`` logs and discards any exception, so an
observer failure is never visible to the caller.
"""

from __future__ import annotations

import logging
from typing import Protocol

from fastapi import BackgroundTasks

logger = logging.getLogger(__name__)

# action name -> notification event
USER_EVENTS = {
    "CREATE": "created",
    "UPDATE": "updated",
    "DELETE": "deleted",
}


class UserEventObserver(Protocol):
    def notify(self, action: str, user_id: int) -> None: ...


class AuditLogger:
    """Writes an audit line for every committed user mutation."""

    def __init__(self, logger_name: str = "app.audit") -> None:
        self._logger = logging.getLogger(logger_name)

    def log(self, action: str, user_id: int) -> None:
        self._logger.info("audit.user_event", extra={"action": action, "user_id": user_id})

    def notify(self, action: str, user_id: int) -> None:
        self.log(action, user_id)


class Notifier:
    """Stand-in for an outbound notification channel; logs the event."""

    def __init__(self, logger_name: str = "app.notify") -> None:
        self._logger = logging.getLogger(logger_name)

    def send(self, user_id: int, event: str) -> None:
        self._logger.info("notify.user_event", extra={"user_id": user_id, "event": event})

    def notify(self, action: str, user_id: int) -> None:
        self.send(user_id, USER_EVENTS.get(action, action.lower()))


def _run_observer(observer: UserEventObserver, action: str, user_id: int) -> None:
    try:
        observer.notify(action, user_id)
    except Exception as exc:
        logger.warning(
            "observer.failed",
            extra={
                "observer": type(observer).__name__,
                "action": action,
                "user_id": user_id,
                "error_type": type(exc).__name__,
                "error_msg": str(exc),
            },
        )


def dispatch_user_event(
    background_tasks: BackgroundTasks,
    observers: list[UserEventObserver],
    action: str,
    user_id: int,
) -> None:
    """Schedule every observer for ``action`` on ``user_id`` without waiting.

    Args:
        background_tasks: Per-request task queue, run after the response.
        observers: Observers to notify.
        action: One of CREATE, UPDATE, DELETE.
        user_id: Id of the affected user.
    """
    for observer in observers:
        background_tasks.add_task(_run_observer, observer, action, user_id)
