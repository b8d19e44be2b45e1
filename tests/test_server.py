from importlib.metadata import version

import pytest
from mcp.server import Server

from swechain_mcp.config import ServerConfig
from swechain_mcp.server import (
    SERVER_NAME,
    TOOL_SPECS,
    available_tools,
    build_handlers,
    build_server,
    dispatch,
)

ALICE = "cosmos1" + "a" * 33
BOB = "cosmos1" + "b" * 33


class RecordingHandlers:
    """Captures the keyword arguments each tool handler receives."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, dict]] = []

    def __getattr__(self, name: str):
        async def handler(**kwargs):
            self.calls.append((name, kwargs))
            return f"called {name}"

        return handler


def _spec(name: str):
    return next(spec for spec in TOOL_SPECS if spec.name == name)


def test_key_creation_tool_is_opt_in() -> None:
    default_names = [spec.name for spec in available_tools(ServerConfig())]
    enabled_names = [spec.name for spec in available_tools(ServerConfig(allow_key_creation=True))]

    assert len(default_names) == 11
    assert "create-and-fund-address" not in default_names
    assert enabled_names[-1] == "create-and-fund-address"


def test_pay_schema_uses_wire_names() -> None:
    tool = _spec("pay").to_tool()

    assert tool.name == "pay"
    assert tool.inputSchema["required"] == ["from", "to", "amount"]
    assert set(tool.inputSchema["properties"]) == {"from", "to", "amount"}


def test_optional_arguments_are_not_required() -> None:
    schema = _spec("open-auction").to_tool().inputSchema

    assert schema["required"] == ["issue", "description", "from"]
    assert "status" in schema["properties"]


@pytest.mark.asyncio
async def test_dispatch_maps_wire_names_to_handler_arguments() -> None:
    handlers = RecordingHandlers()

    text = await dispatch(handlers, list(TOOL_SPECS), "pay", {"from": ALICE, "to": BOB, "amount": "5token"})

    assert text == "called pay"
    assert handlers.calls == [("pay", {"sender": ALICE, "recipient": BOB, "amount": "5token"})]


@pytest.mark.asyncio
async def test_dispatch_fills_missing_required_and_skips_missing_optional() -> None:
    handlers = RecordingHandlers()

    await dispatch(handlers, list(TOOL_SPECS), "create-bid", {"auctionId": 7, "bidder": BOB})

    assert handlers.calls == [
        ("create_bid", {"auction_id": "7", "bidder": BOB, "sender": ""})
    ]


@pytest.mark.asyncio
async def test_dispatch_rejects_unknown_and_disabled_tools() -> None:
    handlers = RecordingHandlers()
    specs = available_tools(ServerConfig())

    assert await dispatch(handlers, specs, "mint", {}) == "Error: unknown tool 'mint'."
    assert await dispatch(handlers, specs, "create-and-fund-address", None) == (
        "Error: unknown tool 'create-and-fund-address'."
    )
    assert handlers.calls == []


@pytest.mark.asyncio
async def test_dispatch_reaches_real_handlers() -> None:
    handlers = build_handlers("swechaind", ServerConfig())

    text = await dispatch(handlers, list(TOOL_SPECS), "get-balance", {"address": "nope"})

    assert text == "Error: address must be a valid cosmos address (cosmos1...)."


def test_build_server_names_the_server() -> None:
    config = ServerConfig()
    server = build_server(build_handlers("swechaind", config), config)

    assert isinstance(server, Server)
    assert server.name == SERVER_NAME


def test_installed_mcp_provides_the_low_level_server_api() -> None:
    assert version("mcp").split(".")[0] == "1"
    assert hasattr(Server(SERVER_NAME), "list_tools")
