from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool

from site_api.core.errors import ValidationError
from site_api.routers.state import get_coordinator
from site_api.services.lifecycle import LifecycleCoordinator

router = APIRouter(prefix="/api", tags=["content"])


@router.get("/content")
def get_content(svc: LifecycleCoordinator = Depends(get_coordinator)):
    return svc.get_content()


@router.post("/content")
async def merge_content(request: Request, svc: LifecycleCoordinator = Depends(get_coordinator)):
    try:
        payload = await request.json()
    except ValueError:
        raise ValidationError("Content must be a JSON object", "invalid_json")
    return await run_in_threadpool(svc.merge_content, payload)


@router.get("/all-uploads")
def all_uploads(svc: LifecycleCoordinator = Depends(get_coordinator)):
    return svc.list_all_blobs()
