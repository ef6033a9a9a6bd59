"""CRUD endpoints for user records.

Admission control runs in middleware before these handlers are reached.
Handlers are plain ``def`` functions, so FastAPI runs each request on its own
worker thread; the store provides the cross-request locking.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, BackgroundTasks, Depends, Response, status

from app.schemas.user import User, UserInput
from app.services.notifications import (
    AuditLogger,
    Notifier,
    UserEventObserver,
    dispatch_user_event,
)
from app.services.user_store import UserStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Users"])

# Process-wide dependencies; tests swap them via app.dependency_overrides
_user_store = UserStore()
_observers: list[UserEventObserver] = [AuditLogger(), Notifier()]


def get_user_store() -> UserStore:
    return _user_store


def get_user_event_observers() -> list[UserEventObserver]:
    return _observers


@router.get("/users", response_model=list[User])
def list_users(store: UserStore = Depends(get_user_store)) -> list[User]:
    """Return every stored user. Order is not part of the contract."""
    return store.get_all()


@router.get("/users/{user_id}", response_model=User)
def get_user(user_id: int, store: UserStore = Depends(get_user_store)) -> User:
    """Return one user, or 404 when the id is unknown."""
    return store.get_by_id(user_id)


@router.post("/users", response_model=User, status_code=status.HTTP_201_CREATED)
def create_user(
    payload: UserInput,
    background_tasks: BackgroundTasks,
    store: UserStore = Depends(get_user_store),
    observers: list[UserEventObserver] = Depends(get_user_event_observers),
) -> User:
    """Create a user. Any ``id`` in the body is ignored; the server assigns it."""
    user = store.create(payload)
    logger.info("user.created", extra={"user_id": user.id})
    dispatch_user_event(background_tasks, observers, "CREATE", user.id)
    return user


@router.put("/users/{user_id}", response_model=User)
def update_user(
    user_id: int,
    payload: UserInput,
    background_tasks: BackgroundTasks,
    store: UserStore = Depends(get_user_store),
    observers: list[UserEventObserver] = Depends(get_user_event_observers),
) -> User:
    """Replace a user's fields. Omitted fields are cleared, not kept."""
    user = store.update(user_id, payload)
    logger.info("user.updated", extra={"user_id": user_id})
    dispatch_user_event(background_tasks, observers, "UPDATE", user_id)
    return user


@router.delete(
    "/users/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
)
def delete_user(
    user_id: int,
    background_tasks: BackgroundTasks,
    store: UserStore = Depends(get_user_store),
    observers: list[UserEventObserver] = Depends(get_user_event_observers),
) -> Response:
    """Delete a user. The id is never assigned again."""
    store.delete(user_id)
    logger.info("user.deleted", extra={"user_id": user_id})
    dispatch_user_event(background_tasks, observers, "DELETE", user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
