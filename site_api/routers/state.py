from __future__ import annotations

from fastapi import Request, UploadFile

from site_api.services.lifecycle import LifecycleCoordinator, Upload


def get_coordinator(request: Request) -> LifecycleCoordinator:
    svc = getattr(getattr(request.app, "state", None), "coordinator", None)
    if not svc:
        raise RuntimeError("LifecycleCoordinator not configured")
    return svc


async def read_upload(file: UploadFile | None, max_bytes: int) -> Upload | None:
    """Read at most max_bytes + 1 so oversized files fail validation without being buffered."""
    if not file or not file.filename:
        return None
    data = await file.read(max_bytes + 1)
    return Upload(content=data, filename=file.filename, content_type=file.content_type)
