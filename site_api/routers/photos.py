from __future__ import annotations

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.concurrency import run_in_threadpool

from site_api.routers.state import get_coordinator, read_upload
from site_api.services.lifecycle import LifecycleCoordinator

router = APIRouter(prefix="/api/photos", tags=["photos"])


@router.get("")
def list_photos(svc: LifecycleCoordinator = Depends(get_coordinator)):
    return [photo.to_dict() for photo in svc.list_photos()]


@router.post("")
async def add_photo(
    caption: str = Form(""),
    image: UploadFile | None = File(None),
    svc: LifecycleCoordinator = Depends(get_coordinator),
):
    upload = await read_upload(image, svc.blobs.max_bytes)
    photo = await run_in_threadpool(svc.add_photo, caption, upload)
    return photo.to_dict()


@router.delete("/{photo_id}")
def delete_photo(photo_id: str, svc: LifecycleCoordinator = Depends(get_coordinator)):
    svc.delete_photo(photo_id)
    return {"message": "Photo deleted successfully"}
