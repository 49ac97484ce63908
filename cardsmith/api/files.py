"""
Uploaded file endpoint.

Serves card images from the blob store by key.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Response

from cardsmith.api.designs import NOT_FOUND_RESPONSE
from cardsmith.storage.blobs import BlobStore, get_blob_store

router = APIRouter(prefix="/files", tags=["files"])


@router.get(
    "/{key}",
    response_class=Response,
    responses={200: {"content": {"image/*": {}}}, **NOT_FOUND_RESPONSE},
)
async def get_file(
    key: str,
    blobs: Annotated[BlobStore, Depends(get_blob_store)],
) -> Response:
    """
    Return the bytes stored under a key.

    The content type is the one recorded at upload (database backend) or
    guessed from the key's extension (local backend).
    """
    blob = await blobs.get(key)
    return Response(content=blob.data, media_type=blob.content_type)
