from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException

from content_empire.deps import get_trigger
from content_empire.services.scheduler import QueueTrigger

router = APIRouter(prefix="/scheduler", tags=["scheduler"])

@router.get("/status")
def status(trigger: Optional[QueueTrigger] = Depends(get_trigger)) -> Dict[str, Any]:
    if trigger is None:
        return {"running": False, "cron": None}
    return {"running": trigger.running, "cron": trigger.cron}

@router.post("/run")
def run_now(trigger: Optional[QueueTrigger] = Depends(get_trigger)) -> Dict[str, Any]:
    if trigger is None:
        raise HTTPException(503, "Queue trigger is not configured")
    due = trigger.run_once()
    return {"status": "ok", "due": due}
