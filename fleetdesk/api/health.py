from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter

from fleetdesk.shared.response import Meta, ResponseEnvelope


router = APIRouter(tags=["health"])


@router.get("/health")
def health_check() -> ResponseEnvelope[dict]:
    meta = Meta(
        as_of=datetime.now(timezone.utc).isoformat(),
        source="system",
    )
    return ResponseEnvelope(data={"status": "ok"}, pagination=None, meta=meta)
