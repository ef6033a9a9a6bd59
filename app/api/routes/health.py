from __future__ import annotations

from fastapi import APIRouter, Depends

from app.api.routes.users import get_user_store
from app.services.user_store import UserStore

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check(store: UserStore = Depends(get_user_store)) -> dict:
    """Health check endpoint.

    Used by load balancers and monitoring systems to determine service health.
    Not subject to admission control.

    Returns:
        dict: ``status`` set to "ok" and the current number of stored users.
    """

    return {"status": "ok", "users": store.count()}
