from __future__ import annotations

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.concurrency import run_in_threadpool

from site_api.domain.models import EventFields
from site_api.routers.state import get_coordinator, read_upload
from site_api.services.lifecycle import LifecycleCoordinator

router = APIRouter(prefix="/api/events", tags=["events"])


def _fields(title: str, date: str, location: str, description: str) -> EventFields:
    return EventFields(
        title=title.strip(),
        date=date.strip(),
        location=location.strip(),
        description=description.strip(),
    )


@router.get("")
def list_events(svc: LifecycleCoordinator = Depends(get_coordinator)):
    return [event.to_dict() for event in svc.list_events()]


@router.post("")
async def add_event(
    title: str = Form(""),
    date: str = Form(""),
    location: str = Form(""),
    description: str = Form(""),
    image: UploadFile | None = File(None),
    svc: LifecycleCoordinator = Depends(get_coordinator),
):
    upload = await read_upload(image, svc.blobs.max_bytes)
    event = await run_in_threadpool(svc.add_event, _fields(title, date, location, description), upload)
    return event.to_dict()


@router.put("/{event_id}")
async def update_event(
    event_id: str,
    title: str = Form(""),
    date: str = Form(""),
    location: str = Form(""),
    description: str = Form(""),
    image: UploadFile | None = File(None),
    svc: LifecycleCoordinator = Depends(get_coordinator),
):
    upload = await read_upload(image, svc.blobs.max_bytes)
    event = await run_in_threadpool(
        svc.update_event, event_id, _fields(title, date, location, description), upload
    )
    return event.to_dict()


@router.delete("/{event_id}")
def delete_event(event_id: str, svc: LifecycleCoordinator = Depends(get_coordinator)):
    svc.delete_event(event_id)
    return {"message": "Event deleted successfully"}
