"""
Reader (and small writer) for Go ``encoding/gob`` streams.

The BitXHub DID registry contract hands back its records gob-encoded, so the
resolver has to speak gob to read them. Stream layout:

    message = uint(length) int(type id) payload
      type id < 0  -> payload is the wireType describing type -id
      type id > 0  -> payload is a value of that type
    uint    = one byte if < 128, else negated byte count + big-endian bytes
    int     = uint with the sign folded into bit 0
    struct  = (uint field delta, field value)* 0

Values of interface type are not supported.
"""
from __future__ import annotations

import struct
from dataclasses import dataclass


class GobError(ValueError):
    pass


# predefined type ids
BOOL = 1
INT = 2
UINT = 3
FLOAT = 4
BYTES = 5
STRING = 6
COMPLEX = 7
INTERFACE = 8

# ids of the types that describe types
WIRE_TYPE = 16
ARRAY_TYPE = 17
COMMON_TYPE = 18
SLICE_TYPE = 19
STRUCT_TYPE = 20
FIELD_TYPE = 21
FIELD_TYPE_SLICE = 22
MAP_TYPE = 23
# local handle only, never sent on the wire
_ENCODER_TYPE = 24

FIRST_USER_ID = 64
# id a fresh encoder hands its first user type
_FIRST_ENCODED_ID = 65

# composite values nested deeper than this are rejected
MAX_NESTING_DEPTH = 100

BUILTIN_NAMES = {
    BOOL: "bool",
    INT: "int",
    UINT: "uint",
    FLOAT: "float",
    BYTES: "[]byte",
    STRING: "string",
    COMPLEX: "complex",
    INTERFACE: "interface",
}


@dataclass(frozen=True)
class StructType:
    name: str
    fields: tuple[tuple[str, int], ...]

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(name for name, _ in self.fields)


@dataclass(frozen=True)
class SliceType:
    name: str
    elem: int


@dataclass(frozen=True)
class ArrayType:
    name: str
    elem: int
    length: int


@dataclass(frozen=True)
class MapType:
    name: str
    key: int
    elem: int


@dataclass(frozen=True)
class OpaqueType:
    """GobEncoder, BinaryMarshaler or TextMarshaler: the value travels as a byte string."""

    name: str


_BOOTSTRAP = {
    COMMON_TYPE: StructType("CommonType", (("Name", STRING), ("Id", INT))),
    ARRAY_TYPE: StructType(
        "arrayType", (("CommonType", COMMON_TYPE), ("Elem", INT), ("Len", INT))
    ),
    SLICE_TYPE: StructType("sliceType", (("CommonType", COMMON_TYPE), ("Elem", INT))),
    STRUCT_TYPE: StructType(
        "structType", (("CommonType", COMMON_TYPE), ("Field", FIELD_TYPE_SLICE))
    ),
    FIELD_TYPE: StructType("fieldType", (("Name", STRING), ("Id", INT))),
    FIELD_TYPE_SLICE: SliceType("[]*fieldType", FIELD_TYPE),
    MAP_TYPE: StructType(
        "mapType", (("CommonType", COMMON_TYPE), ("Key", INT), ("Elem", INT))
    ),
    _ENCODER_TYPE: StructType("gobEncoderType", (("CommonType", COMMON_TYPE),)),
    WIRE_TYPE: StructType(
        "wireType",
        (
            ("ArrayT", ARRAY_TYPE),
            ("SliceT", SLICE_TYPE),
            ("StructT", STRUCT_TYPE),
            ("MapT", MAP_TYPE),
            ("GobEncoderT", _ENCODER_TYPE),
            ("BinaryMarshalerT", _ENCODER_TYPE),
            ("TextMarshalerT", _ENCODER_TYPE),
        ),
    ),
}


class _Reader:
    def __init__(self, data: bytes):
        self._data = bytes(data)
        self._pos = 0

    def remaining(self) -> int:
        return len(self._data) - self._pos

    def read(self, n: int) -> bytes:
        if n < 0 or n > self.remaining():
            raise GobError("unexpected EOF")
        chunk = self._data[self._pos:self._pos + n]
        self._pos += n
        return chunk

    def read_uint(self) -> int:
        first = self.read(1)[0]
        if first < 0x80:
            return first
        count = 256 - first
        if count > 8:
            raise GobError("encoded unsigned integer out of range")
        return int.from_bytes(self.read(count), "big")

    def read_int(self) -> int:
        u = self.read_uint()
        if u & 1:
            return ~(u >> 1)
        return u >> 1

    def read_count(self) -> int:
        # every element takes at least one byte
        n = self.read_uint()
        if n > self.remaining():
            raise GobError(f"length {n} exceeds remaining data")
        return n


def _float_from_bits(u: int) -> float:
    # floats travel as their IEEE bits with the byte order reversed
    return struct.unpack("<d", u.to_bytes(8, "big"))[0]


class Decoder:
    """
    Reads values from one gob stream. Type definitions seen in the stream are
    remembered for the values that follow them.
    """

    def __init__(self, data: bytes):
        self._stream = _Reader(data)
        self._types: dict[int, object] = {}
        self._depth = 0

    def decode(self):
        """Return ``(type, value)`` for the next value; ``type`` is a builtin id or a descriptor."""
        while True:
            if self._stream.remaining() == 0:
                raise GobError("EOF")
            length = self._stream.read_uint()
            message = _Reader(self._stream.read(length))
            type_id = message.read_int()
            if type_id < 0:
                self._define(-type_id, message)
                continue
            return self._decode_top(type_id, message)

    def _define(self, type_id: int, r: _Reader) -> None:
        if type_id < FIRST_USER_ID or type_id in self._types:
            raise GobError(f"duplicate type id {type_id}")
        wire = self._decode_struct(_BOOTSTRAP[WIRE_TYPE], r)
        self._types[type_id] = self._from_wire(wire)

    @staticmethod
    def _from_wire(wire: dict):
        def common(desc: dict) -> str:
            return desc.get("CommonType", {}).get("Name", "")

        if "StructT" in wire:
            desc = wire["StructT"]
            fields = tuple(
                (f.get("Name", ""), f.get("Id", 0)) for f in desc.get("Field") or ()
            )
            return StructType(common(desc), fields)
        if "SliceT" in wire:
            desc = wire["SliceT"]
            return SliceType(common(desc), desc.get("Elem", 0))
        if "ArrayT" in wire:
            desc = wire["ArrayT"]
            return ArrayType(common(desc), desc.get("Elem", 0), desc.get("Len", 0))
        if "MapT" in wire:
            desc = wire["MapT"]
            return MapType(common(desc), desc.get("Key", 0), desc.get("Elem", 0))
        for key in ("GobEncoderT", "BinaryMarshalerT", "TextMarshalerT"):
            if key in wire:
                return OpaqueType(common(wire[key]))
        raise GobError("invalid wire type")

    def _type(self, type_id: int):
        if type_id in BUILTIN_NAMES:
            return type_id
        kind = _BOOTSTRAP.get(type_id) or self._types.get(type_id)
        if kind is None:
            raise GobError(f"unknown type id {type_id}")
        return kind

    def _decode_top(self, type_id: int, r: _Reader):
        kind = self._type(type_id)
        if isinstance(kind, StructType):
            return kind, self._decode_struct(kind, r)
        # non-struct values are sent as a struct with a single field
        if r.read_uint() != 0:
            raise GobError("invalid singleton field delta")
        return kind, self._decode_value(type_id, r)

    def _decode_struct(self, kind: StructType, r: _Reader) -> dict:
        out = {}
        index = -1
        while True:
            delta = r.read_uint()
            if delta == 0:
                return out
            index += delta
            if index >= len(kind.fields):
                raise GobError(f"field number {index} out of range for {kind.name or 'struct'}")
            name, field_id = kind.fields[index]
            out[name] = self._decode_value(field_id, r)

    def _decode_value(self, type_id: int, r: _Reader):
        if type_id == BOOL:
            return r.read_uint() != 0
        if type_id == INT:
            return r.read_int()
        if type_id == UINT:
            return r.read_uint()
        if type_id == FLOAT:
            return _float_from_bits(r.read_uint())
        if type_id == COMPLEX:
            real = _float_from_bits(r.read_uint())
            return complex(real, _float_from_bits(r.read_uint()))
        if type_id == BYTES:
            return r.read(r.read_uint())
        if type_id == STRING:
            # gob strings are arbitrary bytes; invalid UTF-8 survives as surrogates
            return r.read(r.read_uint()).decode("utf-8", "surrogateescape")
        if type_id == INTERFACE:
            raise GobError("interface values are not supported")

        kind = self._type(type_id)
        if self._depth >= MAX_NESTING_DEPTH:
            raise GobError("invalid nesting depth")
        self._depth += 1
        try:
            return self._decode_composite(type_id, kind, r)
        finally:
            self._depth -= 1

    def _decode_composite(self, type_id: int, kind, r: _Reader):
        if isinstance(kind, StructType):
            return self._decode_struct(kind, r)
        if isinstance(kind, SliceType):
            return [self._decode_value(kind.elem, r) for _ in range(r.read_count())]
        if isinstance(kind, ArrayType):
            n = r.read_count()
            if n != kind.length:
                raise GobError(f"length mismatch in array: got {n}, want {kind.length}")
            return [self._decode_value(kind.elem, r) for _ in range(n)]
        if isinstance(kind, MapType):
            out = {}
            for _ in range(r.read_count()):
                key = self._decode_value(kind.key, r)
                try:
                    out[key] = self._decode_value(kind.elem, r)
                except TypeError as exc:
                    raise GobError("unhashable map key") from exc
            return out
        if isinstance(kind, OpaqueType):
            return r.read(r.read_uint())
        raise GobError(f"cannot decode type id {type_id}")


def decode(data: bytes):
    """Decode the first value of a gob stream, returning ``(type, value)``."""
    return Decoder(data).decode()


def _uint(u: int) -> bytes:
    if u < 0x80:
        return bytes([u])
    raw = u.to_bytes((u.bit_length() + 7) // 8, "big")
    return bytes([256 - len(raw)]) + raw


def _int(i: int) -> bytes:
    return _uint((~i << 1) | 1 if i < 0 else i << 1)


def _scalar(type_id: int, value) -> bytes | None:
    # zero values are left out of structs
    if not value:
        return None
    if type_id == BOOL:
        return _uint(1)
    if type_id == INT:
        return _int(value)
    if type_id == UINT:
        return _uint(value)
    if type_id == STRING:
        raw = value.encode("utf-8")
        return _uint(len(raw)) + raw
    if type_id == BYTES:
        return _uint(len(value)) + bytes(value)
    raise GobError(f"cannot encode type id {type_id}")


def _struct_payload(fields: list) -> bytes:
    out = bytearray()
    last = -1
    for index, encoded in enumerate(fields):
        if encoded is None:
            continue
        out += _uint(index - last)
        out += encoded
        last = index
    out.append(0)
    return bytes(out)


def _message(type_id: int, payload: bytes) -> bytes:
    body = _int(type_id) + payload
    return _uint(len(body)) + body


def encode_struct(name: str, fields, type_id: int = _FIRST_ENCODED_ID) -> bytes:
    """
    Encode one struct value the way a fresh ``gob.Encoder`` does: the type
    definition message followed by the value message.

    ``fields`` is a sequence of ``(name, builtin type id, value)``; only
    bool, int, uint, string and []byte fields are supported.
    """
    fields = list(fields)
    common = _struct_payload([_scalar(STRING, name), _scalar(INT, type_id)])
    field_slice = None
    if fields:
        field_slice = _uint(len(fields)) + b"".join(
            _struct_payload([_scalar(STRING, fname), _scalar(INT, ftype)])
            for fname, ftype, _ in fields
        )
    wire = _struct_payload([None, None, _struct_payload([common, field_slice])])
    value = _struct_payload([_scalar(ftype, v) for _, ftype, v in fields])
    return _message(-type_id, wire) + _message(type_id, value)
