from django.http import JsonResponse
from ninja_extra import api_controller, route

from src.dids.resolver import services


@api_controller("/1.0", tags=["DID Resolver"], auth=None)
class ResolverController:
    @route.get("/identifiers/{did}")
    def resolve(self, request, did: str):
        """
        Resolve a did:bitxhub identifier to its DID document.

        Resolution failures are answered by the ResolutionError handler with
        HTTP 200 and a ``{"code", "message"}`` body.
        """
        document = services.get_resolver().resolve(did)
        return JsonResponse(document.to_json(), status=200)
