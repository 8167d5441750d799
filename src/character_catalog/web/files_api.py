"""
Raw file storage endpoints.

Upload, download and delete assets directly, independent of any
character.
"""

import mimetypes
from typing import Any, Dict

from fastapi import APIRouter, Depends, File, Request, Response, UploadFile
from starlette.concurrency import run_in_threadpool

from ..assets import AssetStore
from .dependencies import get_asset_store

files_router = APIRouter(prefix="/api/v1/files", tags=["files"])


@files_router.post("/upload")
async def upload_file(
    request: Request,
    file: UploadFile = File(...),
    asset_store: AssetStore = Depends(get_asset_store),
) -> Dict[str, str]:
    """Store a file and return its generated name and download URL."""
    data = await file.read()
    name = await run_in_threadpool(asset_store.put, data, file.filename)
    file_url = str(request.url_for("download_file", name=name))
    return {"file_name": name, "file_url": file_url}


@files_router.get("/{name}")
def download_file(
    name: str, asset_store: AssetStore = Depends(get_asset_store)
) -> Response:
    """Return a stored file inline, typed by its extension."""
    data = asset_store.get(name)
    content_type, _ = mimetypes.guess_type(name)
    return Response(
        content=data,
        media_type=content_type or "application/octet-stream",
        headers={"Content-Disposition": f'inline; filename="{name}"'},
    )


@files_router.delete("/{name}")
def delete_file(
    name: str, asset_store: AssetStore = Depends(get_asset_store)
) -> Dict[str, Any]:
    """Delete a stored file; ``deleted`` is false when it did not exist."""
    deleted = asset_store.delete(name)
    return {"deleted": deleted, "file_name": name}
