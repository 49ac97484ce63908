from cardsmith.models.card import STAT_FIELDS, CardFields, ImageUpload
from cardsmith.models.design import DesignStyles
from cardsmith.models.failure import (
    STORAGE_FAILURE_MESSAGE,
    DuplicateNameError,
    FailureDetail,
    FailureKind,
    InvalidInputError,
    KnownError,
    NotFoundError,
    UploadTooLargeError,
)

__all__ = [
    "CardFields",
    "DesignStyles",
    "DuplicateNameError",
    "FailureDetail",
    "FailureKind",
    "ImageUpload",
    "InvalidInputError",
    "KnownError",
    "NotFoundError",
    "STAT_FIELDS",
    "STORAGE_FAILURE_MESSAGE",
    "UploadTooLargeError",
]
