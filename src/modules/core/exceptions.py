"""Standardized API error responses.

Every error leaving the API uses a single envelope::

    {
        "type": "validation_error" | "client_error" | "server_error",
        "errors": [{"code": "...", "detail": "...", "attr": "field.path" | None}]
    }

``exception_handler`` is wired as DRF's ``EXCEPTION_HANDLER``.  Views use
``error_response`` / ``pydantic_error_response`` when translating domain
exceptions and DTO validation failures explicitly.
"""

from __future__ import annotations

from typing import Any, Dict, Iterator, Optional

import structlog
from django.http import Http404
from pydantic import ValidationError as PydanticValidationError
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.settings import api_settings
from rest_framework.views import exception_handler as drf_exception_handler
from rest_framework.views import set_rollback

logger = structlog.get_logger(__name__)

VALIDATION_ERROR = "validation_error"
CLIENT_ERROR = "client_error"
SERVER_ERROR = "server_error"


def error_response(
    status_code: int,
    code: str,
    detail: str,
    attr: Optional[str] = None,
) -> Response:
    """Build a single-error response in the standard envelope."""
    error_type = CLIENT_ERROR if status_code < 500 else SERVER_ERROR
    return Response(
        {
            "type": error_type,
            "errors": [{"code": code, "detail": detail, "attr": attr}],
        },
        status=status_code,
    )


def pydantic_error_response(exc: PydanticValidationError) -> Response:
    """Translate a DTO validation failure into a 400 with per-field errors."""
    errors = [
        {
            "code": error["type"],
            "detail": error["msg"],
            "attr": ".".join(str(part) for part in error["loc"]) or None,
        }
        for error in exc.errors(include_url=False)
    ]
    return Response(
        {"type": VALIDATION_ERROR, "errors": errors},
        status=status.HTTP_400_BAD_REQUEST,
    )


def exception_handler(exc: Exception, context: Dict[str, Any]) -> Response:
    """DRF exception handler producing the standard error envelope.

    Known API exceptions keep DRF's status codes and headers (e.g.
    ``Retry-After`` on throttling).  Anything else is logged with its
    traceback and reported as a generic 500 so storage-layer details
    never reach the client.
    """
    response = drf_exception_handler(exc, context)

    if response is None:
        view = context.get("view")
        logger.error(
            "api.unhandled_exception",
            view=type(view).__name__ if view is not None else None,
            error_class=type(exc).__name__,
            exc_info=exc,
        )
        set_rollback()
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "error",
            "Internal server error.",
        )

    if isinstance(exc, exceptions.ValidationError):
        response.data = {
            "type": VALIDATION_ERROR,
            "errors": list(_flatten_errors(response.data)),
        }
        return response

    if isinstance(exc, Http404):
        code, detail = "not_found", "Not found."
    else:
        raw = response.data.get("detail", "") if isinstance(response.data, dict) else ""
        code = getattr(raw, "code", None) or "error"
        detail = str(raw)

    if isinstance(exc, exceptions.ParseError):
        error_type = VALIDATION_ERROR
    elif response.status_code < 500:
        error_type = CLIENT_ERROR
    else:
        error_type = SERVER_ERROR

    response.data = {
        "type": error_type,
        "errors": [{"code": code, "detail": detail, "attr": None}],
    }
    return response


def _flatten_errors(detail: Any, attr: Optional[str] = None) -> Iterator[Dict[str, Any]]:
    """Walk DRF's nested error structure yielding one entry per message.

    Nested serializer errors become dotted paths (``items.1.quantity``).
    """
    if isinstance(detail, dict):
        for key, value in detail.items():
            if key == api_settings.NON_FIELD_ERRORS_KEY:
                name = attr
            else:
                name = f"{attr}.{key}" if attr else str(key)
            yield from _flatten_errors(value, name)
    elif isinstance(detail, list):
        for index, value in enumerate(detail):
            if isinstance(value, (dict, list)):
                name = f"{attr}.{index}" if attr else str(index)
                yield from _flatten_errors(value, name)
            else:
                yield from _flatten_errors(value, attr)
    else:
        yield {
            "code": getattr(detail, "code", None) or "invalid",
            "detail": str(detail),
            "attr": attr,
        }
