# -*- coding: utf-8 -*-
"""
Property tests for aggregation and owner gating.

1) aggregate
   - order of inputs never changes the result
   - a single two-digit quote comes back with its fraction unpadded
   - the result integer part always lies between min and max integer parts

2) owner gating
   - any non-owner update raises Unauthorized and leaves stored bytes unchanged
   - any owner update keeps the owner
"""
from __future__ import annotations

import pytest
from hypothesis import HealthCheck, given, settings, strategies as st

from oscript_price.aggregate import aggregate
from oscript_price.contract import handle, init
from oscript_price.errors import Unauthorized
from oscript_price.msg import InitMsg, UpdateDatasource, UpdateTestcase
from oscript_price.runtime.testing import mock_dependencies, mock_env, mock_info
from oscript_price.state import get_record

INT_PART = st.integers(min_value=-10_000, max_value=10_000)
FRAC_PART = st.integers(min_value=0, max_value=99)
QUOTE = st.builds(lambda i, f: f"{i}.{f:02d}", INT_PART, FRAC_PART)
QUOTES = st.lists(QUOTE, min_size=1, max_size=25)

NAME = st.text(alphabet="abcdefghijklmnopqrstuvwxyz", min_size=3, max_size=20)
FIELD = st.text(min_size=0, max_size=40)


@settings(suppress_health_check=[HealthCheck.function_scoped_fixture])
@given(QUOTES, st.randoms(use_true_random=False))
def test_aggregate_is_order_independent(quotes, rnd) -> None:
    shuffled = list(quotes)
    rnd.shuffle(shuffled)
    assert aggregate(shuffled) == aggregate(quotes)


@settings(suppress_health_check=[HealthCheck.function_scoped_fixture])
@given(st.integers(min_value=0, max_value=10_000), FRAC_PART)
def test_single_quote_keeps_parts(i, f) -> None:
    assert aggregate([f"{i}.{f:02d}"]) == f"{i}.{f}"


@settings(suppress_health_check=[HealthCheck.function_scoped_fixture])
@given(QUOTES)
def test_integer_part_is_bounded(quotes) -> None:
    ints = [int(q.split(".")[0]) for q in quotes]
    result_int = int(aggregate(quotes).split(".")[0])
    assert min(ints) <= result_int <= max(ints)


@settings(max_examples=50, suppress_health_check=[HealthCheck.function_scoped_fixture])
@given(NAME.filter(lambda n: n != "creator"), FIELD, st.booleans())
def test_non_owner_never_changes_state(sender, value, datasource) -> None:
    deps = mock_dependencies()
    env = mock_env()
    init(deps, env, mock_info("creator"), InitMsg(data_source="datasource_eth", test_case="testcase_price"))
    before = deps.storage.snapshot()

    msg = UpdateDatasource(name=value) if datasource else UpdateTestcase(name=value)
    with pytest.raises(Unauthorized):
        handle(deps, env, mock_info(sender), msg)

    assert deps.storage.snapshot() == before


@settings(max_examples=50, suppress_health_check=[HealthCheck.function_scoped_fixture])
@given(st.lists(st.tuples(st.booleans(), FIELD), min_size=1, max_size=10))
def test_owner_updates_keep_owner(updates) -> None:
    deps = mock_dependencies()
    env = mock_env()
    init(deps, env, mock_info("creator"), InitMsg(data_source="datasource_eth", test_case="testcase_price"))
    owner = get_record(deps.storage).owner

    for datasource, value in updates:
        msg = UpdateDatasource(name=value) if datasource else UpdateTestcase(name=value)
        handle(deps, env, mock_info("creator"), msg)
        assert get_record(deps.storage).owner == owner
