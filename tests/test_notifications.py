"""Tests for fire-and-forget user event observers."""

import logging

import pytest
from fastapi import BackgroundTasks

from app.services.notifications import AuditLogger, Notifier, dispatch_user_event


class FailingObserver:
    def notify(self, action: str, user_id: int) -> None:
        raise ConnectionError("sink unreachable")


@pytest.mark.asyncio
async def test_dispatch_runs_every_observer(observer) -> None:
    tasks = BackgroundTasks()

    dispatch_user_event(tasks, [observer, observer], "CREATE", 3)
    assert observer.events == []

    await tasks()

    assert observer.events == [("CREATE", 3), ("CREATE", 3)]


@pytest.mark.asyncio
async def test_failing_observer_is_logged_and_does_not_stop_others(observer, caplog) -> None:
    tasks = BackgroundTasks()
    dispatch_user_event(tasks, [FailingObserver(), observer], "DELETE", 8)

    with caplog.at_level(logging.WARNING, logger="app.services.notifications"):
        await tasks()

    assert observer.events == [("DELETE", 8)]
    failures = [r for r in caplog.records if r.getMessage() == "observer.failed"]
    assert len(failures) == 1
    assert failures[0].observer == "FailingObserver"


def test_audit_logger_writes_action_and_user_id(caplog) -> None:
    with caplog.at_level(logging.INFO, logger="app.audit"):
        AuditLogger().notify("UPDATE", 4)

    record = caplog.records[-1]
    assert record.getMessage() == "audit.user_event"
    assert (record.action, record.user_id) == ("UPDATE", 4)


@pytest.mark.parametrize(
    ("action", "event"),
    [("CREATE", "created"), ("UPDATE", "updated"), ("DELETE", "deleted")],
)
def test_notifier_maps_actions_to_events(caplog, action: str, event: str) -> None:
    with caplog.at_level(logging.INFO, logger="app.notify"):
        Notifier().notify(action, 1)

    assert caplog.records[-1].event == event
