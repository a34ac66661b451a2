from __future__ import annotations

import builtins
import json
import re
from typing import Any, ClassVar

from ninja import Schema
from pydantic import ValidationError, field_validator

from src.dids.resolver.errors import DocumentDecodeFailed

_JSON_KINDS = {list: "array", str: "string", int: "number", float: "number", bool: "bool", type(None): "null"}

# documents are published by anyone; keep nesting well inside the interpreter's recursion limit
MAX_NESTING_DEPTH = 128

_JSON_STRING = re.compile(rb'"(?:[^"\\]|\\.)*"', re.DOTALL)
_NOT_BRACKETS = bytes(b for b in range(256) if b not in b"[]{}")


class _DocumentPart(Schema):
    # list fields whose null entries decode to a zero element: field name -> element type
    list_items: ClassVar[dict[str, builtins.type]] = {}

    @field_validator("*", mode="before")
    @classmethod
    def _null_keeps_default(cls, v, info):
        # an explicit null leaves the field at its zero value
        if v is None:
            return cls.model_fields[info.field_name].default
        return v


class PublicKey(_DocumentPart):
    id: str = ""
    type: str = ""
    publicKeyPem: str = ""


class Authentication(_DocumentPart):
    list_items: ClassVar[dict[str, builtins.type]] = {"publicKey": str}

    publicKey: list[str] | None = None  # ids of entries in IdentityDocument.publicKey


class IdentityDocument(_DocumentPart):
    list_items: ClassVar[dict[str, builtins.type]] = {"publicKey": PublicKey, "authentication": Authentication}

    id: str = ""
    type: str = ""
    created: str = ""
    updated: str = ""
    controller: str = ""
    publicKey: list[PublicKey] | None = None
    authentication: list[Authentication] | None = None
    service: Any = None  # opaque, passed through untouched

    def to_json(self) -> dict:
        return self.model_dump(mode="json")


def _nesting_depth(raw: bytes) -> int:
    depth = deepest = 0
    for ch in _JSON_STRING.sub(b"", raw).translate(None, _NOT_BRACKETS):
        if ch in b"[{":
            depth += 1
            deepest = max(deepest, depth)
        else:
            depth -= 1
    return deepest


def _match_fields(data: dict, model: type[_DocumentPart]) -> dict:
    """
    Map object keys onto ``model`` fields: exact name first, then a
    case-insensitive match. Unknown keys are dropped, the last duplicate wins.
    """
    fields = model.model_fields
    folded = {name.lower(): name for name in fields}
    out = {}
    for key, value in data.items():
        name = key if key in fields else folded.get(key.lower())
        if name is not None:
            out[name] = value

    for name, item in model.list_items.items():
        if isinstance(out.get(name), list):
            out[name] = [_list_item(value, item) for value in out[name]]
    return out


def _list_item(value, item: type):
    if value is None:
        return {} if issubclass(item, _DocumentPart) else item()
    if isinstance(value, dict) and issubclass(item, _DocumentPart):
        return _match_fields(value, item)
    return value


def decode_document(raw: bytes) -> IdentityDocument:
    """
    Decode an identity document the way Go's ``encoding/json`` fills a struct:
    missing or null fields keep their zero value, unknown keys are ignored and
    keys match field names case-insensitively.
    """
    if _nesting_depth(raw) > MAX_NESTING_DEPTH:
        raise DocumentDecodeFailed("exceeded max depth")
    try:
        data = json.loads(raw)
    except (ValueError, RecursionError) as exc:
        raise DocumentDecodeFailed(str(exc)) from exc

    if not isinstance(data, dict):
        raise DocumentDecodeFailed(
            f"cannot unmarshal {_JSON_KINDS.get(type(data), 'value')} into an identity document"
        )
    try:
        return IdentityDocument.model_validate(_match_fields(data, IdentityDocument))
    except ValidationError as exc:
        raise DocumentDecodeFailed(str(exc)) from exc
