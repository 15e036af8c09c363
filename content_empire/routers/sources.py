from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, field_validator

from content_empire.db.models import SourceCategory
from content_empire.db.store import ContentStore
from content_empire.deps import get_store

router = APIRouter(prefix="/api/sources", tags=["sources"])

class SourceIn(BaseModel):
    username: str
    category: Optional[SourceCategory] = None

    @field_validator("username")
    @classmethod
    def _has_handle(cls, v: str) -> str:
        if not v.strip().lstrip("@"):
            raise ValueError("username must contain a channel handle")
        return v

@router.post("")
def add_source(body: SourceIn, store: ContentStore = Depends(get_store)):
    category = (body.category or SourceCategory.news).value
    res = store.add_source(body.username, category)
    if not res.ok:
        return JSONResponse(status_code=500, content={"error": res.error})
    return {"success": True, "data": res.value}

@router.get("")
def list_sources(store: ContentStore = Depends(get_store)) -> Dict[str, Any]:
    res = store.list_sources()
    return {"data": res.value if res.ok else []}
