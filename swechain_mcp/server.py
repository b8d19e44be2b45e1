"""MCP server exposing the swechain tools over stdio.

Tools are declared in :data:`TOOL_SPECS` with explicit input schemas so the
wire argument names stay exactly what callers send (``keyName``,
``auctionId``, ``from``...). :func:`dispatch` maps those names onto the
:class:`~swechain_mcp.handlers.ToolHandlers` coroutines.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, Mapping

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from .chain import SwechainClient
from .config import ServerConfig
from .handlers import ToolHandlers
from .parsers import stringify
from .runner import CommandRunner

logger = logging.getLogger(__name__)

SERVER_NAME = "swechain-mcp-server"


@dataclass(frozen=True)
class ToolArgument:
    wire_name: str
    handler_name: str
    description: str
    required: bool = True


@dataclass(frozen=True)
class ToolSpec:
    name: str
    description: str
    handler: str
    arguments: tuple[ToolArgument, ...] = ()
    requires_key_creation: bool = False

    def to_tool(self) -> Tool:
        return Tool(
            name=self.name,
            description=self.description,
            inputSchema={
                "type": "object",
                "properties": {
                    arg.wire_name: {"type": "string", "description": arg.description}
                    for arg in self.arguments
                },
                "required": [arg.wire_name for arg in self.arguments if arg.required],
            },
        )


_OPERATION_LIST = ToolArgument("operation", "operation", "Operation to perform (use 'list').")
_FROM = ToolArgument("from", "sender", "Sender cosmos address (cosmos1...).")

TOOL_SPECS: tuple[ToolSpec, ...] = (
    ToolSpec(
        name="get-address-for-key",
        description="Get the cosmos address for a specific key name. Required parameter: keyName (string).",
        handler="get_address_for_key",
        arguments=(ToolArgument("keyName", "key_name", "Name of the key in the keyring."),),
    ),
    ToolSpec(
        name="get-balance",
        description="Get token balance for a specific cosmos address. Required parameter: address (string).",
        handler="get_balance",
        arguments=(ToolArgument("address", "address", "Cosmos address (cosmos1...)."),),
    ),
    ToolSpec(
        name="query-open-auctions",
        description=(
            "Get all open auctions with detailed bid information and participants. "
            "Required parameter: operation (use 'list')."
        ),
        handler="query_open_auctions",
        arguments=(_OPERATION_LIST,),
    ),
    ToolSpec(
        name="query-all-auctions",
        description=(
            "Get all auctions (open and closed) with detailed information. "
            "Required parameter: operation (use 'list')."
        ),
        handler="query_all_auctions",
        arguments=(_OPERATION_LIST,),
    ),
    ToolSpec(
        name="query-bids-for-auction",
        description=(
            "Get bids for a specific auction or all bids. "
            "Required parameter: auctionId (string - use specific ID or 'all')."
        ),
        handler="query_bids_for_auction",
        arguments=(ToolArgument("auctionId", "auction_id", "Auction ID or 'all'."),),
    ),
    ToolSpec(
        name="get-blockchain-status",
        description="Get overall blockchain statistics. Required parameter: operation (use 'status').",
        handler="get_blockchain_status",
        arguments=(ToolArgument("operation", "operation", "Operation to perform (use 'status')."),),
    ),
    ToolSpec(
        name="get-keys",
        description="Get all keys in the keyring with addresses. Required parameter: operation (use 'list').",
        handler="get_keys",
        arguments=(_OPERATION_LIST,),
    ),
    ToolSpec(
        name="open-auction",
        description="Create a new auction. Required: issue, description, from. Optional: status, winner.",
        handler="open_auction",
        arguments=(
            ToolArgument("issue", "issue", "Issue the auction is about."),
            ToolArgument("description", "description", "Auction description."),
            _FROM,
            ToolArgument("status", "status", "Initial status (default 'open').", required=False),
            ToolArgument("winner", "winner", "Winner address, usually empty.", required=False),
        ),
    ),
    ToolSpec(
        name="create-bid",
        description="Place a bid on an auction. Required: auctionId, bidder, from. Optional: amount, description.",
        handler="create_bid",
        arguments=(
            ToolArgument("auctionId", "auction_id", "Numeric auction ID."),
            ToolArgument("bidder", "bidder", "Bidder cosmos address."),
            _FROM,
            ToolArgument("amount", "amount", "Bid amount (default '100token').", required=False),
            ToolArgument("description", "description", "Bid description.", required=False),
        ),
    ),
    ToolSpec(
        name="pay",
        description="Send tokens between addresses. Required: from, to, amount (all must be valid).",
        handler="pay",
        arguments=(
            _FROM,
            ToolArgument("to", "recipient", "Recipient cosmos address."),
            ToolArgument("amount", "amount", "Amount with denomination, e.g. '50token'."),
        ),
    ),
    ToolSpec(
        name="close-auction",
        description="Close/update an auction. Required: auctionId, status, issue, description, winner, from.",
        handler="close_auction",
        arguments=(
            ToolArgument("auctionId", "auction_id", "Numeric auction ID."),
            ToolArgument("status", "status", "New status, e.g. 'closed'."),
            ToolArgument("issue", "issue", "Issue text."),
            ToolArgument("description", "description", "Description text."),
            ToolArgument("winner", "winner", "Winner address."),
            _FROM,
        ),
    ),
    ToolSpec(
        name="create-and-fund-address",
        description=(
            "Use only for new users. Create new key and fund it. "
            "Required: keyName, funderAddress. Optional: amount."
        ),
        handler="create_and_fund_address",
        arguments=(
            ToolArgument("keyName", "key_name", "Name of the key to create."),
            ToolArgument("funderAddress", "funder_address", "Address paying for the new key."),
            ToolArgument("amount", "amount", "Funding amount (default '1000token').", required=False),
        ),
        requires_key_creation=True,
    ),
)


def available_tools(config: ServerConfig) -> List[ToolSpec]:
    return [
        spec
        for spec in TOOL_SPECS
        if config.allow_key_creation or not spec.requires_key_creation
    ]


async def dispatch(
    handlers: ToolHandlers,
    specs: List[ToolSpec],
    name: str,
    arguments: Mapping[str, Any] | None,
) -> str:
    """Invoke the handler registered for ``name`` with wire ``arguments``.

    Missing required arguments are passed as empty strings so the handler
    reports them like any other invalid value.
    """

    spec = next((candidate for candidate in specs if candidate.name == name), None)
    if spec is None:
        return f"Error: unknown tool '{name}'."

    arguments = arguments or {}
    kwargs: dict[str, Any] = {}
    for arg in spec.arguments:
        value = stringify(arguments.get(arg.wire_name))
        if value is None and not arg.required:
            continue
        kwargs[arg.handler_name] = value or ""

    handler = getattr(handlers, spec.handler)
    return await handler(**kwargs)


def build_handlers(executable: str, config: ServerConfig) -> ToolHandlers:
    runner = CommandRunner(executable, timeout=config.command_timeout)
    return ToolHandlers(SwechainClient(runner, config))


def build_server(handlers: ToolHandlers, config: ServerConfig) -> Server:
    specs = available_tools(config)
    server: Server = Server(SERVER_NAME)

    @server.list_tools()
    async def list_tools() -> List[Tool]:
        return [spec.to_tool() for spec in specs]

    @server.call_tool()
    async def call_tool(name: str, arguments: dict[str, Any] | None) -> List[TextContent]:
        text = await dispatch(handlers, specs, name, arguments)
        return [TextContent(type="text", text=text)]

    logger.debug("Registered %d tools", len(specs))
    return server


async def serve(server: Server) -> None:
    """Serve tool calls over stdio until the client disconnects."""

    logger.info("MCP server starting on stdio")
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())
    logger.info("MCP server stopped")
