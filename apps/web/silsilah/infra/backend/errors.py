# apps/web/silsilah/infra/backend/errors.py
from __future__ import annotations


class BackendError(Exception):
    """Base for every failure talking to the family backend."""

    def __init__(self, message: str, status: int | None = None, url: str | None = None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.url = url

    def __str__(self) -> str:
        return self.message


class NotFound(BackendError):
    """The backend answered 404 for the requested tree or member."""


class NetworkFailure(BackendError):
    """Connection error, timeout, exhausted retries or a non-2xx answer."""


class MalformedResponse(NetworkFailure):
    """The body was not JSON or did not match the expected envelope."""
