"""
Failure classification for API responses.

Every error a caller can see is one of three shapes:

- Validation: bad, missing or duplicate input (400-class)
- Not found: unknown id or blob key (404)
- Storage: database or blob store unavailable (500, generic message)

Known failures are raised as `KnownError` subclasses from the service
layer and turned into a `FailureDetail` body by the handlers in
`cardsmith.main`. Storage failures carry no user-facing detail; the
cause is logged server-side only.
"""

from enum import Enum

from pydantic import BaseModel, Field


class FailureKind(str, Enum):
    """Classification of failure types."""

    # Input validation failures
    INVALID_INPUT = "invalid_input"
    MISSING_REQUIRED = "missing_required"
    DUPLICATE_NAME = "duplicate_name"
    UPLOAD_TOO_LARGE = "upload_too_large"

    # Resource failures
    NOT_FOUND = "not_found"

    # Service failures
    STORAGE_UNAVAILABLE = "storage_unavailable"


class FailureDetail(BaseModel):
    """Error body returned for every non-success response."""

    kind: FailureKind = Field(
        ...,
        description="Classification of the failure",
    )
    message: str = Field(
        ...,
        description="User-appropriate explanation of what went wrong",
    )
    detail: str | None = Field(
        default=None,
        description="Additional technical detail (optional)",
    )


# Fixed message for storage and unexpected failures.
# Must not leak exception text to the caller.
STORAGE_FAILURE_MESSAGE = "The server could not complete the request. Please try again later."


class KnownError(Exception):
    """
    Base class for exceptions that represent known, explainable failures.

    Subclass this for errors where the system knows exactly what went wrong.
    """

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        status_code: int = 400,
    ):
        self.kind = kind
        self.message = message
        self.detail = detail
        self.status_code = status_code
        super().__init__(message)

    def to_detail(self) -> FailureDetail:
        """Convert to a response body."""
        return FailureDetail(kind=self.kind, message=self.message, detail=self.detail)


class InvalidInputError(KnownError):
    """Input was rejected before anything was stored."""

    def __init__(
        self,
        message: str,
        detail: str | None = None,
        kind: FailureKind = FailureKind.INVALID_INPUT,
    ):
        super().__init__(kind=kind, message=message, detail=detail, status_code=400)


class DuplicateNameError(InvalidInputError):
    """A design with the requested name already exists."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(
            message=f"A card design named '{name}' already exists",
            kind=FailureKind.DUPLICATE_NAME,
        )


class UploadTooLargeError(KnownError):
    """An uploaded image exceeds the configured size limit."""

    def __init__(self, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(
            kind=FailureKind.UPLOAD_TOO_LARGE,
            message=f"Image is too large ({size} bytes, limit is {limit} bytes)",
            status_code=413,
        )


class NotFoundError(KnownError):
    """
    A record or blob does not exist.

    `resource` is the human name of what was looked up ("Card", "Card design").
    """

    def __init__(self, resource: str, identifier: object):
        self.resource = resource
        self.identifier = identifier
        super().__init__(
            kind=FailureKind.NOT_FOUND,
            message=f"{resource} not found",
            detail=f"{resource} '{identifier}' does not exist",
            status_code=404,
        )
