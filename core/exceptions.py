"""API-wide exception handling.

Wraps DRF's default handler so that persistence failures surface as a generic
500 response instead of an unhandled server error page.
"""

import logging

from django.db import DatabaseError
from rest_framework.views import exception_handler

from deliveries.exceptions import StoreError

logger = logging.getLogger(__name__)


def api_exception_handler(exc, context):
    """Map database errors to StoreError; everything else goes to DRF."""
    if isinstance(exc, DatabaseError):
        view = context.get("view")
        logger.error(
            "Store failure in %s", type(view).__name__ if view else "unknown view",
            exc_info=exc,
        )
        exc = StoreError()
    return exception_handler(exc, context)
