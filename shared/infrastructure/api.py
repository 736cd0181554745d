"""HTTP translation of recoverable domain errors."""

from rest_framework import status  # type: ignore
from rest_framework.response import Response  # type: ignore


def domain_error_response(exc) -> Response:
    """400 with ``{"detail": ..., "code": ...}`` plus any error-specific fields.

    ``exc`` is a domain error exposing ``to_dict()``.
    """
    return Response(exc.to_dict(), status=status.HTTP_400_BAD_REQUEST)
