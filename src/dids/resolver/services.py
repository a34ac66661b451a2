from __future__ import annotations

import logging
from functools import lru_cache

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from django.utils.module_loading import import_string

from src.dids.resolver.address import normalize_address
from src.dids.resolver.documents import IdentityDocument, decode_document
from src.dids.resolver.errors import ResolutionError
from src.dids.resolver.ipfs import ContentStore, IPFSClient
from src.dids.resolver.ledger import RegistryLedger
from src.dids.resolver.metadata import decode_metadata

logger = logging.getLogger(__name__)


class DidResolver:
    """
    did -> registry metadata (BitXHub) -> document address -> document (IPFS).

    Stateless: ``ledger`` and ``store`` are shared, read-only collaborators.
    The first failing stage raises its ResolutionError; nothing is retried.
    """

    def __init__(self, ledger, store):
        self.ledger = ledger
        self.store = store

    def resolve(self, did: str) -> IdentityDocument:
        logger.info("Resolve did", extra={"did": did})
        try:
            info = decode_metadata(self.ledger.query(did))
            address = normalize_address(info.doc_addr)
            logger.info("Get document from ipfs", extra={"did": did, "address": address})
            return decode_document(self.store.fetch(address))
        except ResolutionError as exc:
            logger.error(
                "Resolution failed",
                extra={"did": did, "stage": exc.stage, "code": exc.code, "err": exc.message},
            )
            raise


@lru_cache(maxsize=1)
def get_resolver() -> DidResolver:
    """Process-wide resolver built from settings; its HTTP sessions are shared by all requests."""
    if not settings.BITXHUB_LEDGER_CLIENT:
        raise ImproperlyConfigured("BITXHUB_LEDGER_CLIENT is not set: name the ledger client class to use")
    client_class = import_string(settings.BITXHUB_LEDGER_CLIENT)
    ledger_client = client_class(
        settings.BITXHUB_GATEWAYS,
        account=settings.BITXHUB_ACCOUNT,
        timeout=settings.BITXHUB_TIMEOUT,
    )
    ipfs_client = IPFSClient(settings.IPFS_NODES, timeout=settings.IPFS_TIMEOUT)
    return DidResolver(
        ledger=RegistryLedger(
            ledger_client,
            settings.DID_REGISTRY_CONTRACT_ADDR,
            method=settings.DID_REGISTRY_RESOLVE_METHOD,
        ),
        store=ContentStore(ipfs_client),
    )
