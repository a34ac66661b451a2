from __future__ import annotations

from src.core.exceptions import ApplicationError


class ResolutionError(ApplicationError):
    """
    Failure of one resolution stage. The numeric codes are part of the
    public response contract and must not change.
    """

    code: int = 0
    stage: str = ""

    def to_payload(self) -> dict:
        return {"code": self.code, "message": self.message}


class LedgerQueryFailed(ResolutionError):
    code = -10000
    stage = "query_ledger"


class MetadataDecodeFailed(ResolutionError):
    code = -10001
    stage = "decode_metadata"


class ContentFetchFailed(ResolutionError):
    code = -10002
    stage = "fetch_content"


class DocumentDecodeFailed(ResolutionError):
    code = -10003
    stage = "decode_document"
