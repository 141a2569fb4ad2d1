from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from ..errors import ContractError

MAX_ATTR_KEY_LEN = 64
MAX_ATTR_VALUE_LEN = 4096

# Keys must be identifier-like: letters/underscore, then letters/digits/underscore.
_KEY_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def _check_attr(key: str, value: str) -> Tuple[str, str]:
    if not isinstance(key, str) or not _KEY_RE.match(key) or len(key) > MAX_ATTR_KEY_LEN:
        raise ContractError("invalid attribute key", context={"key": key})
    if not isinstance(value, str):
        value = str(value)
    if len(value) > MAX_ATTR_VALUE_LEN:
        raise ContractError("attribute value too long", context={"key": key, "len": len(value)})
    return key, value


@dataclass
class Response:
    """
    Result of a state-changing entry point.

    messages:   follow-up messages for the host to dispatch (always empty here)
    attributes: ordered (key, value) pairs describing what happened
    data:       optional opaque payload
    """

    messages: List[Any] = field(default_factory=list)
    attributes: List[Tuple[str, str]] = field(default_factory=list)
    data: Optional[bytes] = None

    def add_attribute(self, key: str, value: Any) -> "Response":
        self.attributes.append(_check_attr(key, value))
        return self

    def attribute(self, key: str) -> Optional[str]:
        for k, v in self.attributes:
            if k == key:
                return v
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "messages": list(self.messages),
            "attributes": [[k, v] for k, v in self.attributes],
            "data": self.data,
        }


class InitResponse(Response):
    pass


class HandleResponse(Response):
    pass


__all__ = ["Response", "InitResponse", "HandleResponse"]
