from __future__ import annotations

from fastapi import APIRouter, Depends

from campushub.core.dependencies import get_session_registry
from campushub.services.session_registry import SessionRegistry

router = APIRouter(tags=["system"])


@router.get("/healthz")
def healthz(sessions: SessionRegistry = Depends(get_session_registry)) -> dict[str, object]:
    return {"status": "ok", "connectedSessions": len(sessions)}
