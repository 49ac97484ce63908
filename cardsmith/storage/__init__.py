from cardsmith.storage.blobs import (
    BlobNotFoundError,
    BlobStore,
    BlobStoreError,
    DatabaseBlobStore,
    LocalBlobStore,
    StoredBlob,
    create_blob_store,
    get_blob_store,
)

__all__ = [
    "BlobNotFoundError",
    "BlobStore",
    "BlobStoreError",
    "DatabaseBlobStore",
    "LocalBlobStore",
    "StoredBlob",
    "create_blob_store",
    "get_blob_store",
]
