from __future__ import annotations

import json

import pytest

from oscript_price.errors import InvalidMessage
from oscript_price.msg import (
    Aggregate,
    GetDatasource,
    GetTestcase,
    InitMsg,
    UpdateDatasource,
    UpdateTestcase,
    decode_handle,
    decode_init,
    decode_query,
    encode_msg,
)


def test_decode_init_uses_wire_names() -> None:
    msg = decode_init('{"ai_data_source": "datasource_eth", "testcase": "testcase_price"}')
    assert msg == InitMsg(data_source="datasource_eth", test_case="testcase_price")


def test_decode_handle_variants() -> None:
    assert decode_handle('{"update_datasource": {"name": "datasource_btc"}}') == UpdateDatasource(name="datasource_btc")
    assert decode_handle(b'{"update_testcase": {"name": "tc"}}') == UpdateTestcase(name="tc")


def test_decode_query_variants() -> None:
    assert decode_query('{"get_datasource": {}}') == GetDatasource()
    assert decode_query('{"get_testcase": {}}') == GetTestcase()
    assert decode_query('{"aggregate": {"results": ["10.5", "20.3"]}}') == Aggregate(results=["10.5", "20.3"])


@pytest.mark.parametrize(
    "raw",
    [
        "not json",
        "[]",
        "{}",
        '{"update_datasource": {"name": "a"}, "update_testcase": {"name": "b"}}',
        '{"delete_everything": {}}',
        '{"update_datasource": {}}',
        '{"update_datasource": {"name": 5}}',
        '{"update_datasource": {"name": "a", "extra": 1}}',
    ],
)
def test_decode_handle_rejects_bad_messages(raw) -> None:
    with pytest.raises(InvalidMessage):
        decode_handle(raw)


def test_query_tags_are_not_handle_tags() -> None:
    with pytest.raises(InvalidMessage) as excinfo:
        decode_handle('{"get_datasource": {}}')
    assert "update_datasource" in excinfo.value.context["expected"]


def test_aggregate_results_must_be_strings() -> None:
    with pytest.raises(InvalidMessage):
        decode_query('{"aggregate": {"results": [10.5]}}')


def test_encode_msg_wire_form() -> None:
    assert json.loads(encode_msg(UpdateDatasource(name="x"))) == {"update_datasource": {"name": "x"}}
    assert json.loads(encode_msg(GetTestcase())) == {"get_testcase": {}}
    assert json.loads(encode_msg(InitMsg(data_source="d", test_case="t"))) == {
        "ai_data_source": "d",
        "testcase": "t",
    }
