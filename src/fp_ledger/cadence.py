"""JSON-Cadence argument encoding and result decoding.

Arguments are built with the typed constructors below and only turned into
wire values by `encode_argument`, which is where range/format checks happen:

    uint64(12)        -> {"type": "UInt64", "value": "12"}
    ufix64("0.5")     -> {"type": "UFix64", "value": "0.50000000"}
    array(STRING, xs) -> {"type": "Array", "value": [{"type": "String", ...}, ...]}

Decoding maps ledger values back to plain Python: integers -> int,
fixed-point -> Decimal, composites (Struct/Resource/Event) -> dict of fields.
"""

import re
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from src.fp_common.ufix import format_ufix64

STRING = "String"
ADDRESS = "Address"
BOOL = "Bool"
UFIX64 = "UFix64"
UINT8 = "UInt8"
UINT64 = "UInt64"

_UINT_BITS: dict[str, int] = {
    "UInt8": 8, "UInt16": 16, "UInt32": 32, "UInt64": 64, "UInt128": 128, "UInt256": 256,
    "Word8": 8, "Word16": 16, "Word32": 32, "Word64": 64,
}
_INT_TYPES = frozenset(
    {"Int", "UInt", "Int8", "Int16", "Int32", "Int64", "Int128", "Int256", *_UINT_BITS}
)
_FIX_TYPES = frozenset({"Fix64", "UFix64"})
_COMPOSITE_TYPES = frozenset({"Struct", "Resource", "Event", "Contract", "Enum"})
_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{16}$")


@dataclass(frozen=True)
class CadenceArg:
    """A positional argument plus the Cadence type it must be serialized as."""

    type: str
    value: Any
    item_type: str | None = None  # element type for Array / inner type for Optional


def string(value: str) -> CadenceArg:
    return CadenceArg(STRING, value)


def address(value: str) -> CadenceArg:
    return CadenceArg(ADDRESS, value)


def ufix64(value: object) -> CadenceArg:
    return CadenceArg(UFIX64, value)


def uint8(value: int) -> CadenceArg:
    return CadenceArg(UINT8, value)


def uint64(value: int) -> CadenceArg:
    return CadenceArg(UINT64, value)


def array(item_type: str, values: list[Any]) -> CadenceArg:
    return CadenceArg("Array", list(values), item_type=item_type)


def optional(item_type: str, value: Any) -> CadenceArg:
    return CadenceArg("Optional", value, item_type=item_type)


def normalize_address(value: str) -> str:
    """'f8d6e0586b0a20c7' or '0xF8D6...' -> '0xf8d6e0586b0a20c7'."""
    if not isinstance(value, str):
        raise ValueError(f"Address must be a string, got {value!r}")
    candidate = value if value.startswith("0x") else f"0x{value}"
    if not _ADDRESS_RE.match(candidate):
        raise ValueError(f"Malformed address: {value!r}")
    return candidate.lower()


def _encode_uint(type_name: str, value: Any) -> dict[str, str]:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{type_name} requires an int, got {value!r}")
    bits = _UINT_BITS[type_name]
    if not 0 <= value < 2**bits:
        raise ValueError(f"{type_name} out of range: {value}")
    return {"type": type_name, "value": str(value)}


def _encode_scalar(type_name: str, value: Any) -> dict[str, Any]:
    if type_name in _UINT_BITS:
        return _encode_uint(type_name, value)
    if type_name == UFIX64:
        return {"type": UFIX64, "value": format_ufix64(value)}
    if type_name == STRING:
        if not isinstance(value, str):
            raise ValueError(f"String requires a str, got {value!r}")
        return {"type": STRING, "value": value}
    if type_name == ADDRESS:
        return {"type": ADDRESS, "value": normalize_address(value)}
    if type_name == BOOL:
        if not isinstance(value, bool):
            raise ValueError(f"Bool requires a bool, got {value!r}")
        return {"type": BOOL, "value": value}
    raise ValueError(f"Unsupported argument type: {type_name}")


def encode_argument(arg: CadenceArg) -> dict[str, Any]:
    """Encode one argument as JSON-Cadence. Raises ValueError on any mismatch."""
    if arg.type == "Array":
        if arg.item_type is None:
            raise ValueError("Array argument needs an item type")
        if not isinstance(arg.value, list):
            raise ValueError(f"Array requires a list, got {arg.value!r}")
        return {
            "type": "Array",
            "value": [_encode_scalar(arg.item_type, v) for v in arg.value],
        }
    if arg.type == "Optional":
        if arg.item_type is None:
            raise ValueError("Optional argument needs an inner type")
        inner = None if arg.value is None else _encode_scalar(arg.item_type, arg.value)
        return {"type": "Optional", "value": inner}
    return _encode_scalar(arg.type, arg.value)


def decode_value(value: dict[str, Any]) -> Any:
    """Decode a JSON-Cadence value into plain Python data.

    Any malformed payload raises ValueError.
    """
    try:
        return _decode(value)
    except ValueError:
        raise
    except (KeyError, TypeError, AttributeError, ArithmeticError) as exc:
        raise ValueError(f"Malformed JSON-Cadence value: {value!r}") from exc


def _decode(value: dict[str, Any]) -> Any:
    try:
        type_name = value["type"]
    except (KeyError, TypeError) as exc:
        raise ValueError(f"Not a JSON-Cadence value: {value!r}") from exc
    raw = value.get("value")

    if type_name in _INT_TYPES:
        return int(raw)
    if type_name in _FIX_TYPES:
        return Decimal(raw)
    if type_name in (STRING, "Character", ADDRESS):
        return raw
    if type_name == BOOL:
        return bool(raw)
    if type_name == "Void":
        return None
    if type_name == "Optional":
        return None if raw is None else _decode(raw)
    if type_name == "Array":
        return [_decode(item) for item in raw]
    if type_name == "Dictionary":
        return {_decode(kv["key"]): _decode(kv["value"]) for kv in raw}
    if type_name in _COMPOSITE_TYPES:
        return {f["name"]: _decode(f["value"]) for f in raw["fields"]}
    if type_name == "Path":
        return f"/{raw['domain']}/{raw['identifier']}"
    if type_name == "Type":
        return raw["staticType"]
    raise ValueError(f"Unsupported JSON-Cadence type: {type_name}")
