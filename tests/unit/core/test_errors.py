# tests/unit/core/test_errors.py
from fastapi import HTTPException, status

from core.errors import APIBadRequestError, APIError


def test_api_bad_request_error():
    """Tests the APIBadRequestError custom exception."""
    try:
        raise APIBadRequestError("Each ticker may appear only once per batch.")
    except APIBadRequestError as e:
        assert e.status_code == status.HTTP_400_BAD_REQUEST
        assert e.detail == "Each ticker may appear only once per batch."


def test_api_bad_request_error_default_detail():
    assert APIBadRequestError().detail == "Bad Request"


def test_api_error_is_an_http_exception():
    err = APIError(status.HTTP_409_CONFLICT, "conflict")
    assert isinstance(err, HTTPException)
    assert err.status_code == 409
