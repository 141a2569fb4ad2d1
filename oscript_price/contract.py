"""
oscript_price.contract — entry points of the price-configuration contract.

    init(deps, env, info, InitMsg)      -> InitResponse
    handle(deps, env, info, HandleMsg)  -> HandleResponse   (owner only)
    query(deps, env, QueryMsg)          -> bytes            (canonical CBOR)

State lives in oscript_price.state; aggregation in oscript_price.aggregate.
Every failure raises a ContractError subclass and leaves storage untouched.
"""

from __future__ import annotations

from typing import List

from .aggregate import aggregate
from .errors import InvalidMessage
from .logging import get_logger
from .msg import Aggregate, GetDatasource, GetTestcase, HandleMsg, InitMsg, QueryMsg, UpdateDatasource, UpdateTestcase
from .runtime.codec import to_binary
from .runtime.context import Env, MessageInfo
from .runtime.deps import Deps
from .runtime.response import HandleResponse, InitResponse
from .state import get_record, initialize, set_data_source, set_test_case, update_field

log = get_logger(__name__)


def init(deps: Deps, env: Env, info: MessageInfo, msg: InitMsg) -> InitResponse:
    res = InitResponse()
    res.add_attribute("action", "init")
    res.add_attribute("owner", info.sender)
    initialize(deps, msg.data_source, msg.test_case, info.sender)
    return res


def handle(deps: Deps, env: Env, info: MessageInfo, msg: HandleMsg) -> HandleResponse:
    if isinstance(msg, UpdateDatasource):
        return try_update_datasource(deps, info, msg.name)
    if isinstance(msg, UpdateTestcase):
        return try_update_testcase(deps, info, msg.name)
    raise InvalidMessage(f"unsupported handle message {type(msg).__name__}")


def try_update_datasource(deps: Deps, info: MessageInfo, name: str) -> HandleResponse:
    # Attributes are checked before the write; a rejected one leaves storage untouched.
    res = HandleResponse()
    res.add_attribute("action", "update_datasource")
    res.add_attribute("ai_data_source", name)
    update_field(deps, info.sender, set_data_source(name))
    log.info("config_updated", field="ai_data_source", value=name)
    return res


def try_update_testcase(deps: Deps, info: MessageInfo, name: str) -> HandleResponse:
    res = HandleResponse()
    res.add_attribute("action", "update_testcase")
    res.add_attribute("testcase", name)
    update_field(deps, info.sender, set_test_case(name))
    log.info("config_updated", field="testcase", value=name)
    return res


def query(deps: Deps, env: Env, msg: QueryMsg) -> bytes:
    if isinstance(msg, GetDatasource):
        return to_binary(query_datasource(deps))
    if isinstance(msg, GetTestcase):
        return to_binary(query_testcase(deps))
    if isinstance(msg, Aggregate):
        return to_binary(query_aggregation(deps, msg.results))
    raise InvalidMessage(f"unsupported query message {type(msg).__name__}")


def query_datasource(deps: Deps) -> str:
    return get_record(deps.storage).data_source


def query_testcase(deps: Deps) -> str:
    return get_record(deps.storage).test_case


def query_aggregation(deps: Deps, results: List[str]) -> str:
    return aggregate(results)


__all__ = [
    "init",
    "handle",
    "query",
    "try_update_datasource",
    "try_update_testcase",
    "query_datasource",
    "query_testcase",
    "query_aggregation",
]
