"""Typed client for the ``swechaind`` command-line tool.

Each helper maps to one ``swechaind`` sub-command and returns parsed domain
records. List queries degrade to empty results when the executable fails or
prints something unparseable; single-record lookups raise
:class:`ChainQueryError` instead, since there is no sensible empty answer to
"what is the address of this key". No chain state is validated here; the
executable's output is taken as-is.
"""

from __future__ import annotations

import json
import logging
from typing import Any, List

from .config import ServerConfig
from .model import Auction, Balance, Bid, DenomOwner, Key
from .pagination import PageFetcher, Runner
from .parsers import parse_auctions, parse_balances, parse_bids, parse_denom_owners, parse_keys
from .runner import CommandError
from .validation import is_valid_cosmos_address

logger = logging.getLogger(__name__)

AUCTION_MODULE = "issuemarket"


class ChainQueryError(RuntimeError):
    """Raised when a single-record lookup cannot be answered."""


class SwechainClient:
    def __init__(
        self,
        runner: Runner,
        config: ServerConfig | None = None,
        *,
        fetcher: PageFetcher | None = None,
    ) -> None:
        self.runner = runner
        self.config = config or ServerConfig()
        self.fetcher = fetcher or PageFetcher(runner, keyring_backend=self.config.keyring_backend)

    # Queries ---------------------------------------------------------------

    async def list_auctions(self) -> List[Auction]:
        raw = await self.fetcher.fetch_all(AUCTION_MODULE, "list-auction", "Auction")
        return parse_auctions(raw)

    async def list_bids(self) -> List[Bid]:
        raw = await self.fetcher.fetch_all(AUCTION_MODULE, "list-bid", "Bid")
        return parse_bids(raw)

    async def denom_owners(self) -> List[DenomOwner]:
        """Return the holders of the configured denom, or ``[]`` on failure."""

        response = await self._query_json(
            "denom owners",
            "query",
            "bank",
            "denom-owners",
            self.config.denom,
            "--keyring-backend",
            self.config.keyring_backend,
            "--output",
            "json",
        )
        if response is None:
            return []
        raw_owners = response.get("denom_owners") if isinstance(response, dict) else None
        if not isinstance(raw_owners, list):
            logger.error("Unexpected format for denom owners")
            return []
        return parse_denom_owners(raw_owners)

    async def list_keys(self) -> List[Key]:
        """Return every keyring entry, or ``[]`` on failure."""

        response = await self._query_json(
            "keys",
            "keys",
            "list",
            "--keyring-backend",
            self.config.keyring_backend,
            "--output",
            "json",
        )
        if not isinstance(response, list):
            if response is not None:
                logger.error("Unexpected format for keys: %s", type(response).__name__)
            return []
        return parse_keys(response)

    async def address_for_key(self, key_name: str) -> str:
        try:
            output = await self.runner.run(
                "keys",
                "show",
                key_name,
                "--keyring-backend",
                self.config.keyring_backend,
                "--output",
                "json",
            )
        except CommandError as exc:
            raise ChainQueryError(f"failed to get key info: {exc}") from exc

        return _address_from_key_output(output)

    async def balances(self, address: str) -> List[Balance]:
        try:
            output = await self.runner.run(
                "query",
                "bank",
                "balances",
                address,
                "--keyring-backend",
                self.config.keyring_backend,
                "--output",
                "json",
            )
        except CommandError as exc:
            raise ChainQueryError(f"failed to query balance: {exc}") from exc

        try:
            response = json.loads(output)
        except ValueError as exc:
            raise ChainQueryError(f"failed to parse balance data: {exc}") from exc
        if not isinstance(response, dict):
            raise ChainQueryError("failed to parse balance data: expected a JSON object")

        raw_balances = response.get("balances")
        if not isinstance(raw_balances, list):
            return []
        return parse_balances(raw_balances)

    # Transactions ----------------------------------------------------------
    #
    # These return the executable's raw output and let CommandError propagate.

    async def create_auction(
        self, issue: str, description: str, status: str, winner: str, sender: str
    ) -> str:
        return await self.runner.run(
            "tx",
            AUCTION_MODULE,
            "create-auction",
            issue,
            description,
            status,
            winner,
            *self.config.tx_flags(sender),
        )

    async def create_bid(
        self, auction_id: str, bidder: str, amount: str, description: str, sender: str
    ) -> str:
        return await self.runner.run(
            "tx",
            AUCTION_MODULE,
            "create-bid",
            auction_id,
            bidder,
            amount,
            description,
            *self.config.tx_flags(sender),
        )

    async def update_auction(
        self,
        auction_id: str,
        issue: str,
        description: str,
        status: str,
        winner: str,
        sender: str,
    ) -> str:
        return await self.runner.run(
            "tx",
            AUCTION_MODULE,
            "update-auction",
            auction_id,
            issue,
            description,
            status,
            winner,
            *self.config.tx_flags(sender),
        )

    async def send(self, sender: str, recipient: str, amount: str) -> str:
        return await self.runner.run(
            "tx",
            "bank",
            "send",
            sender,
            recipient,
            amount,
            *self.config.tx_flags(sender),
        )

    async def add_key(self, key_name: str) -> str:
        """Create a keyring entry and return its address."""

        output = await self.runner.run(
            "keys",
            "add",
            key_name,
            "--keyring-backend",
            self.config.keyring_backend,
            "--output",
            "json",
        )
        return _address_from_key_output(output, validate=False)

    async def _query_json(self, label: str, *args: str) -> Any:
        try:
            output = await self.runner.run(*args)
        except CommandError as exc:
            logger.error("Error fetching %s: %s", label, exc)
            return None
        try:
            return json.loads(output)
        except ValueError as exc:
            logger.error("Error parsing %s: %s", label, exc)
            return None


def _address_from_key_output(output: str, *, validate: bool = True) -> str:
    try:
        key_data = json.loads(output)
    except ValueError as exc:
        raise ChainQueryError(f"failed to parse key data: {exc}") from exc

    address = key_data.get("address") if isinstance(key_data, dict) else None
    if not isinstance(address, str):
        raise ChainQueryError("address not found in key data")
    if validate and not is_valid_cosmos_address(address):
        raise ChainQueryError(f"invalid cosmos address format: {address}")
    return address
