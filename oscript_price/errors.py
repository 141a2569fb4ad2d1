from __future__ import annotations

from typing import Any, Dict, Mapping, Optional


class ContractError(Exception):
    """
    Structured error raised by the contract and its host shims.

    Supported call patterns:

        NotFound("config record not found")

        ParseError("invalid integer part", context={"index": 1, "input": "abc"})

    Attributes:
        code: short machine-readable code string (fixed per subclass)
        message: human-readable message
        context: optional extra fields for debugging / CLI output
    """

    code: str = "contract_error"
    default_message: str = "contract error"

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        context: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self.message = str(message) if message is not None else self.default_message
        self.context: Dict[str, Any] = dict(context or {})
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "context": dict(self.context),
        }

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"


class NotFound(ContractError):
    """No record has been persisted at the requested key."""

    code = "not_found"
    default_message = "config record not found"


class Unauthorized(ContractError):
    """The caller is not the record owner."""

    code = "unauthorized"
    default_message = "unauthorized"


class ParseError(ContractError):
    """A decimal component could not be parsed during aggregation."""

    code = "parse_error"
    default_message = "invalid decimal string"


class EmptyInput(ContractError):
    """Aggregation was asked to average zero entries."""

    code = "empty_input"
    default_message = "cannot aggregate an empty list of results"


class AlreadyInitialized(ContractError):
    """init was called again while strict re-initialization is enabled."""

    code = "already_initialized"
    default_message = "config record already initialized"


class OwnerImmutable(ContractError):
    code = "owner_immutable"
    default_message = "owner cannot be changed by an update"


class InvalidAddress(ContractError):
    code = "invalid_address"
    default_message = "invalid address"


class InvalidMessage(ContractError):
    code = "invalid_message"
    default_message = "invalid message"


class StorageError(ContractError):
    code = "storage_error"
    default_message = "storage error"


class SerializationError(ContractError):
    code = "serialization_error"
    default_message = "serialization error"


__all__ = [
    "ContractError",
    "NotFound",
    "Unauthorized",
    "ParseError",
    "EmptyInput",
    "AlreadyInitialized",
    "OwnerImmutable",
    "InvalidAddress",
    "InvalidMessage",
    "StorageError",
    "SerializationError",
]
