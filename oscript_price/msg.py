"""
oscript_price.msg — inbound commands and their JSON wire form.

Init:
    {"ai_data_source": "datasource_eth", "testcase": "testcase_price"}

Handle (externally tagged, one variant per message):
    {"update_datasource": {"name": "datasource_btc"}}
    {"update_testcase": {"name": "testcase_volume"}}

Query:
    {"get_datasource": {}}
    {"get_testcase": {}}
    {"aggregate": {"results": ["10.5", "20.3"]}}

Payloads are validated with msgspec; unknown fields, unknown variants and
wrong types raise InvalidMessage.
"""

from __future__ import annotations

from typing import Any, Dict, List, Type, TypeVar, Union

import msgspec

from .errors import InvalidMessage

M = TypeVar("M", bound=msgspec.Struct)


class InitMsg(msgspec.Struct, forbid_unknown_fields=True):
    data_source: str = msgspec.field(name="ai_data_source")
    test_case: str = msgspec.field(name="testcase")


# --- handle ------------------------------------------------------------------


class UpdateDatasource(msgspec.Struct, forbid_unknown_fields=True):
    name: str


class UpdateTestcase(msgspec.Struct, forbid_unknown_fields=True):
    name: str


HandleMsg = Union[UpdateDatasource, UpdateTestcase]


# --- query -------------------------------------------------------------------


class GetDatasource(msgspec.Struct, forbid_unknown_fields=True):
    pass


class GetTestcase(msgspec.Struct, forbid_unknown_fields=True):
    pass


class Aggregate(msgspec.Struct, forbid_unknown_fields=True):
    results: List[str]


QueryMsg = Union[GetDatasource, GetTestcase, Aggregate]


HANDLE_VARIANTS: Dict[str, Type[msgspec.Struct]] = {
    "update_datasource": UpdateDatasource,
    "update_testcase": UpdateTestcase,
}

QUERY_VARIANTS: Dict[str, Type[msgspec.Struct]] = {
    "get_datasource": GetDatasource,
    "get_testcase": GetTestcase,
    "aggregate": Aggregate,
}

_TAGS: Dict[type, str] = {cls: tag for tag, cls in {**HANDLE_VARIANTS, **QUERY_VARIANTS}.items()}


# --- decoding ----------------------------------------------------------------


def _load_json(raw: Union[str, bytes]) -> Any:
    try:
        return msgspec.json.decode(raw)
    except msgspec.DecodeError as e:
        raise InvalidMessage(f"malformed JSON: {e}") from e


def _convert(obj: Any, cls: Type[M]) -> M:
    try:
        return msgspec.convert(obj, cls)
    except msgspec.ValidationError as e:
        raise InvalidMessage(str(e), context={"message": cls.__name__}) from e


def _decode_variant(raw: Union[str, bytes], variants: Dict[str, Type[msgspec.Struct]], kind: str) -> Any:
    obj = _load_json(raw)
    if not isinstance(obj, dict) or len(obj) != 1:
        raise InvalidMessage(f"{kind} message must be an object with exactly one key")
    (tag, body), = obj.items()
    cls = variants.get(tag)
    if cls is None:
        raise InvalidMessage(
            f"unknown {kind} message {tag!r}",
            context={"expected": sorted(variants)},
        )
    return _convert(body, cls)


def decode_init(raw: Union[str, bytes]) -> InitMsg:
    return _convert(_load_json(raw), InitMsg)


def decode_handle(raw: Union[str, bytes]) -> HandleMsg:
    return _decode_variant(raw, HANDLE_VARIANTS, "handle")


def decode_query(raw: Union[str, bytes]) -> QueryMsg:
    return _decode_variant(raw, QUERY_VARIANTS, "query")


def encode_msg(msg: msgspec.Struct) -> bytes:
    """JSON wire form of a message; handle/query variants are wrapped in their tag."""
    tag = _TAGS.get(type(msg))
    if tag is None:
        return msgspec.json.encode(msg)
    return msgspec.json.encode({tag: msg})


__all__ = [
    "InitMsg",
    "UpdateDatasource",
    "UpdateTestcase",
    "HandleMsg",
    "GetDatasource",
    "GetTestcase",
    "Aggregate",
    "QueryMsg",
    "decode_init",
    "decode_handle",
    "decode_query",
    "encode_msg",
]
