# core/errors.py
from fastapi import HTTPException, status


class APIError(HTTPException):
    """Base class for request problems the endpoints detect themselves, beyond schema validation."""

    def __init__(self, status_code: int, detail: str):
        super().__init__(status_code=status_code, detail=detail)


class APIBadRequestError(APIError):
    """A request that parses but cannot be processed as sent, e.g. a ticker repeated within a batch."""

    def __init__(self, detail: str = "Bad Request"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)
