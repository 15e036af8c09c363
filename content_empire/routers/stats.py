from typing import Dict

from fastapi import APIRouter, Depends

from content_empire.db.store import ContentStore
from content_empire.deps import get_store

router = APIRouter(prefix="/api", tags=["stats"])

@router.get("/stats")
def stats(store: ContentStore = Depends(get_store)) -> Dict[str, int]:
    # store failures read as zero counts
    res = store.post_counts()
    if not res.ok:
        return {"total": 0, "published": 0}
    total, published = res.value
    return {"total": total, "published": published}
