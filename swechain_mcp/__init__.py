"""MCP bridge to the ``swechaind`` auction chain client."""

from .aggregate import extract_name_from_address, summarize
from .chain import ChainQueryError, SwechainClient
from .config import ConfigurationError, ServerConfig, load_server_config, resolve_executable
from .handlers import ToolHandlers
from .model import (
    Auction,
    AuctionDetail,
    AuctionSummaryResponse,
    Balance,
    Bid,
    BidDetail,
    DenomOwner,
    Key,
    ParticipantDetail,
)
from .pagination import PageFetcher
from .runner import CommandError, CommandRunner
from .validation import ValidationError, is_valid_cosmos_address

__all__ = [
    "Auction",
    "AuctionDetail",
    "AuctionSummaryResponse",
    "Balance",
    "Bid",
    "BidDetail",
    "ChainQueryError",
    "CommandError",
    "CommandRunner",
    "ConfigurationError",
    "DenomOwner",
    "Key",
    "PageFetcher",
    "ParticipantDetail",
    "ServerConfig",
    "SwechainClient",
    "ToolHandlers",
    "ValidationError",
    "extract_name_from_address",
    "is_valid_cosmos_address",
    "load_server_config",
    "resolve_executable",
    "summarize",
]
