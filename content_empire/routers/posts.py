from typing import Any, Dict

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from content_empire.db.models import Decision
from content_empire.db.store import ContentStore
from content_empire.deps import get_pending_limit, get_store

router = APIRouter(prefix="/api/posts", tags=["moderation"])

class DecisionIn(BaseModel):
    id: int
    decision: Decision

@router.get("/pending")
def pending(
    store: ContentStore = Depends(get_store),
    limit: int = Depends(get_pending_limit),
) -> Dict[str, Any]:
    res = store.pending_posts(limit=limit)
    return {"data": res.value if res.ok else []}

@router.post("/decide")
def decide(body: DecisionIn, store: ContentStore = Depends(get_store)):
    res = store.decide(body.id, body.decision.value)
    if not res.ok:
        return JSONResponse(status_code=500, content={"error": res.error})
    return {"success": True}
