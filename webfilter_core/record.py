"""
webfilter_core.record
---------------------
Defines FilterRecord, the single entity kept in world state.

Key features:
- Field order is fixed and is part of the wire format
- encode()/decode() give a byte-exact, lossless JSON form
- The allowlist value doubles as the store key
"""

from __future__ import annotations
from dataclasses import dataclass, asdict
from typing import Any, Dict
from .errors import EncodingError, DecodingError
from .utils import ordered_json, load_json

# canonical order, must match the dataclass declaration below
FIELD_ORDER = ("allowlist", "blocklist", "attribute2", "attribute1", "webfilterlist")

STRING_FIELDS = ("allowlist", "blocklist", "attribute1")
INT_FIELDS = ("attribute2", "webfilterlist")


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass
class FilterRecord:
    allowlist: str              # primary key
    blocklist: str = ""
    attribute2: int = 0
    attribute1: str = ""        # target of transfer
    webfilterlist: int = 0

    @property
    def key(self) -> str:
        return self.allowlist

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FilterRecord":
        """Rebuild a record from a decoded JSON object.

        Unknown keys are ignored; every schema field must be present with
        its JSON type.
        """
        if not isinstance(data, dict):
            raise DecodingError(f"record must be a JSON object, got {type(data).__name__}")
        missing = [name for name in FIELD_ORDER if name not in data]
        if missing:
            raise DecodingError(f"record is missing fields: {', '.join(missing)}", {"missing": missing})
        for name in STRING_FIELDS:
            if not isinstance(data[name], str):
                raise DecodingError(f"field {name} must be a string", {"field": name})
        for name in INT_FIELDS:
            if not _is_int(data[name]):
                raise DecodingError(f"field {name} must be an integer", {"field": name})
        return cls(**{name: data[name] for name in FIELD_ORDER})

    def validate(self) -> None:
        for name in STRING_FIELDS:
            if not isinstance(getattr(self, name), str):
                raise EncodingError(f"field {name} must be a string", {"field": name})
        for name in INT_FIELDS:
            if not _is_int(getattr(self, name)):
                raise EncodingError(f"field {name} must be an integer", {"field": name})

    def encode(self) -> bytes:
        self.validate()
        try:
            return ordered_json({name: getattr(self, name) for name in FIELD_ORDER})
        except (TypeError, ValueError) as exc:
            raise EncodingError(f"failed to encode record {self.allowlist!r}: {exc}") from exc

    @classmethod
    def decode(cls, data: bytes) -> "FilterRecord":
        try:
            obj = load_json(data)
        except (UnicodeDecodeError, ValueError, RecursionError) as exc:
            raise DecodingError(f"stored value is not valid JSON: {exc}") from exc
        return cls.from_dict(obj)


