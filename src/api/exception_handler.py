import logging
import traceback

from django.conf import settings
from django.http import JsonResponse
from ninja_extra import NinjaExtraAPI

from src.dids.resolver.errors import ResolutionError

logger = logging.getLogger(__name__)


def attach_exception_handlers(api: NinjaExtraAPI) -> None:
    @api.exception_handler(ResolutionError)
    def on_resolution_error(request, exc: ResolutionError):
        # the failure is carried by the body, the transport status stays 200
        return JsonResponse(exc.to_payload(), status=200)

    @api.exception_handler(Exception)
    def on_unexpected_error(request, exc: Exception):
        logger.exception("Unexpected error", extra={"path": request.path})
        extra = {}
        if settings.DEBUG:
            extra["error"] = str(exc)
            extra["trace"] = traceback.format_exc(limit=20)
        return api.create_response(
            request,
            {"message": "Unexpected error", "code": "INTERNAL_ERROR", **extra},
            status=500,
        )
