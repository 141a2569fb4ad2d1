"""
oscript-price — local runner for the price-configuration contract.

Executes one entry point against a file-backed state, so a sequence of
invocations behaves like a sequence of transactions on one contract.

Global options:
  --state PATH              State file (default: ./oscript-state.cbor)
  --address-format TEXT     hex | mock (default from OSCRIPT_PRICE_ADDRESS_FORMAT)
  --json                    Output JSON instead of human-readable text
  --log-level TEXT          Log level (default from OSCRIPT_PRICE_LOG_LEVEL)

Examples:
  oscript-price --address-format mock init --sender creator \\
      --data-source datasource_eth --test-case testcase_price
  oscript-price --address-format mock handle --sender creator \\
      '{"update_datasource": {"name": "datasource_btc"}}'
  oscript-price query '{"get_datasource": {}}'
  oscript-price query '{"aggregate": {"results": ["10.5", "20.3"]}}'

Exit codes:
  0 on success, 1 on a contract error, 2 on usage errors.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

import typer

from ..config import ADDRESS_FORMATS, LOG_LEVELS, load_config
from ..contract import handle as contract_handle
from ..contract import init as contract_init
from ..contract import query as contract_query
from ..errors import ContractError
from ..logging import setup_logging
from ..msg import InitMsg, decode_handle, decode_query
from ..runtime.address_api import AddressApi, HexAddressApi, MockApi
from ..runtime.codec import from_binary
from ..runtime.context import BlockInfo, ContractInfo, Env, MessageInfo
from ..runtime.deps import Deps
from ..runtime.response import Response
from ..runtime.storage_api import FileBackend
from ..state import get_record

DEFAULT_STATE = Path("oscript-state.cbor")
LOCAL_CHAIN_ID = "oscript-local"

app = typer.Typer(
    name="oscript-price",
    help="Run the price-configuration contract against a local state file",
    no_args_is_help=True,
    add_completion=False,
)


class GlobalContext:
    def __init__(self) -> None:
        self.state: Path = DEFAULT_STATE
        self.address_format: str = "hex"
        self.json_output: bool = False


_ctx = GlobalContext()


@app.callback()
def main_callback(
    state: Path = typer.Option(
        DEFAULT_STATE,
        "--state",
        help="Path to the contract state file",
        envvar="OSCRIPT_PRICE_STATE",
    ),
    address_format: Optional[str] = typer.Option(
        None,
        "--address-format",
        help="Address format: hex or mock",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output JSON instead of human-readable text",
    ),
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Log level (default from OSCRIPT_PRICE_LOG_LEVEL)",
    ),
) -> None:
    cfg = load_config()
    fmt = (address_format or cfg.address_format).lower()
    if fmt not in ADDRESS_FORMATS:
        raise typer.BadParameter(f"must be one of {', '.join(ADDRESS_FORMATS)}", param_hint="--address-format")
    level = (log_level or cfg.log_level).upper()
    if level not in LOG_LEVELS:
        raise typer.BadParameter(f"must be one of {', '.join(LOG_LEVELS)}", param_hint="--log-level")
    _ctx.state = state
    _ctx.address_format = fmt
    _ctx.json_output = json_output
    setup_logging(level=level)


def _deps() -> Deps:
    api: AddressApi
    if _ctx.address_format == "mock":
        api = MockApi()
    else:
        api = HexAddressApi(load_config().address_bytes)
    return Deps(storage=FileBackend(_ctx.state), api=api)


def _local_env() -> Env:
    return Env(
        block=BlockInfo(height=0, time=0, chain_id=LOCAL_CHAIN_ID),
        contract=ContractInfo(address=str(_ctx.state)),
    )


def _fail(err: ContractError) -> None:
    if _ctx.json_output:
        typer.echo(json.dumps({"error": err.to_dict()}, sort_keys=True), err=True)
    else:
        typer.echo(f"error: {err.code}: {err.message}", err=True)
    raise typer.Exit(code=1)


def _print_response(res: Response) -> None:
    if _ctx.json_output:
        d = res.to_dict()
        d["data"] = d["data"].hex() if d["data"] is not None else None
        typer.echo(json.dumps(d, sort_keys=True))
        return
    for key, value in res.attributes:
        typer.echo(f"{key}: {value}")


def _print_value(value: Any) -> None:
    if _ctx.json_output:
        typer.echo(json.dumps({"result": value}, sort_keys=True))
    else:
        typer.echo(str(value))


@app.command("init")
def init_cmd(
    sender: str = typer.Option(..., "--sender", help="Address of the initializing account"),
    data_source: str = typer.Option(..., "--data-source", help="Upstream price feed identifier"),
    test_case: str = typer.Option(..., "--test-case", help="Active test scenario identifier"),
) -> None:
    """Create (or overwrite) the config record; the sender becomes owner."""
    msg = InitMsg(data_source=data_source, test_case=test_case)
    try:
        res = contract_init(_deps(), _local_env(), MessageInfo(sender=sender), msg)
    except ContractError as e:
        _fail(e)
    else:
        _print_response(res)


@app.command("handle")
def handle_cmd(
    message: str = typer.Argument(..., help='JSON message, e.g. \'{"update_datasource": {"name": "x"}}\''),
    sender: str = typer.Option(..., "--sender", help="Address of the calling account"),
) -> None:
    """Execute an owner-only update."""
    try:
        msg = decode_handle(message)
        res = contract_handle(_deps(), _local_env(), MessageInfo(sender=sender), msg)
    except ContractError as e:
        _fail(e)
    else:
        _print_response(res)


@app.command("query")
def query_cmd(
    message: str = typer.Argument(..., help='JSON message, e.g. \'{"get_datasource": {}}\''),
) -> None:
    """Run a read-only query and print the decoded result."""
    try:
        msg = decode_query(message)
        value = from_binary(contract_query(_deps(), _local_env(), msg))
    except ContractError as e:
        _fail(e)
    else:
        _print_value(value)


@app.command("show")
def show_cmd() -> None:
    """Print the stored record, owner rendered as a human address."""
    try:
        deps = _deps()
        record = get_record(deps.storage)
        owner = deps.api.human_address(record.owner)
    except ContractError as e:
        _fail(e)
    else:
        view = {"ai_data_source": record.data_source, "testcase": record.test_case, "owner": owner}
        if _ctx.json_output:
            typer.echo(json.dumps(view, sort_keys=True))
        else:
            for key, value in view.items():
                typer.echo(f"{key}: {value}")


def main() -> None:
    """Entry point for the oscript-price CLI."""
    app()


if __name__ == "__main__":
    main()
