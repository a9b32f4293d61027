# backend/utils/errors.py
from typing import Iterable, List, Optional


class ApiError(Exception):
    """Base error rendered by main.py as {"success": false, "error": ...}."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ApiError):
    """Missing or out-of-range input."""

    status_code = 400

    def __init__(self, message: str, missing: Optional[Iterable[str]] = None):
        super().__init__(message)
        self.missing: List[str] = list(missing or [])


class NotFound(ApiError):
    status_code = 404


class UpstreamError(ApiError):
    """The row store or the blob store rejected a call."""

    status_code = 500


class IngestError(UpstreamError):
    pass


class CascadeError(UpstreamError):
    # phase: name of the cascade step that failed
    def __init__(self, message: str, phase: str, products_deleted: bool):
        super().__init__(message)
        self.phase = phase
        self.products_deleted = products_deleted
