"""Domain errors raised by services.

They subclass ``HTTPException`` so FastAPI renders them directly as
``{"detail": message}`` with the matching status code.
"""

from fastapi import HTTPException


class BookstoreError(HTTPException):
    status_code = 500

    def __init__(self, detail: str, headers: dict[str, str] | None = None) -> None:
        super().__init__(status_code=self.status_code, detail=detail, headers=headers)


class BadRequestError(BookstoreError):
    status_code = 400


class ConflictError(BadRequestError):
    """A unique value is already taken (reported as 400)."""


class UnauthorizedError(BookstoreError):
    status_code = 401


class ForbiddenError(BookstoreError):
    status_code = 403


class NotFoundError(BookstoreError):
    status_code = 404
