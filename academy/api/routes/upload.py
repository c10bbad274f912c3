from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import JSONResponse
from loguru import logger

from academy.api.services.blob import BlobStorage, get_blob_storage

router = APIRouter(prefix="", tags=["Uploads"])


@router.post("/upload")
async def upload_file(
    request: Request,
    filename: Optional[str] = Query(None, description="URL-encoded name to store the file under"),
    blob: BlobStorage = Depends(get_blob_storage),
):
    # The body is the raw file; it is streamed through, never parsed
    if not filename:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Filename is required")

    try:
        return await blob.put(
            filename,
            request.stream(),
            content_type=request.headers.get("content-type"),
        )
    except Exception as e:
        logger.opt(exception=e).error("Upload error for {}: {}", filename, e)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Upload failed", "details": str(e)},
        )
