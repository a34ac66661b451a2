from __future__ import annotations

from dataclasses import dataclass

from src.dids.resolver import gob
from src.dids.resolver.errors import MetadataDecodeFailed

# wire name -> (attribute, gob type id)
_FIELDS = {
    "Method": ("method", gob.STRING),
    "Owner": ("owner", gob.STRING),
    "DocAddr": ("doc_addr", gob.STRING),
    "DocHash": ("doc_hash", gob.BYTES),
    "Status": ("status", gob.STRING),
}


@dataclass(frozen=True)
class RegistryMetadata:
    """Record kept by the DID registry contract for one identifier."""

    method: str = ""
    owner: str = ""  # a DID
    doc_addr: str = ""  # where the document is stored, possibly decorated
    doc_hash: bytes = b""
    status: str = ""


def _type_name(kind) -> str:
    if isinstance(kind, int):
        return gob.BUILTIN_NAMES.get(kind, str(kind))
    return getattr(kind, "name", "") or type(kind).__name__


def decode_metadata(raw: bytes) -> RegistryMetadata:
    """
    Decode the gob-encoded result of the registry ``Resolve`` call.
    Missing fields keep their zero value, unknown ones are ignored.
    """
    try:
        kind, value = gob.decode(raw)
    except gob.GobError as exc:
        raise MetadataDecodeFailed(f"gob decode err: {exc}") from exc

    if not isinstance(kind, gob.StructType):
        raise MetadataDecodeFailed(
            f"gob decode err: decoding into struct RegistryMetadata, received remote type {_type_name(kind)}"
        )
    wire_types = dict(kind.fields)
    if not set(wire_types) & set(_FIELDS):
        raise MetadataDecodeFailed(
            f"gob decode err: type mismatch: no fields matched compiling decoder for {kind.name or 'struct'}"
        )

    values = {}
    for wire_name, (attr, expected) in _FIELDS.items():
        if wire_name not in wire_types:
            continue
        if wire_types[wire_name] != expected:
            raise MetadataDecodeFailed(
                f"gob decode err: type mismatch in field {wire_name}: "
                f"want {gob.BUILTIN_NAMES[expected]}, got {_type_name(wire_types[wire_name])}"
            )
        if wire_name in value:
            values[attr] = value[wire_name]
    return RegistryMetadata(**values)


def encode_metadata(meta: RegistryMetadata) -> bytes:
    """Encode ``meta`` the way the registry contract does (a fresh gob stream)."""
    return gob.encode_struct(
        "Info",
        [(wire_name, type_id, getattr(meta, attr)) for wire_name, (attr, type_id) in _FIELDS.items()],
    )
