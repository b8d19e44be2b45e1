"""Tool entry points.

Every handler returns text and never raises to the transport: validation
problems and chain client failures are reported inside the returned string.
Successful calls return an indented JSON document with a ``summary`` sentence
and structured ``details``.
"""

from __future__ import annotations

import functools
import json
import logging
from typing import Any, Awaitable, Callable, TypeVar

from .aggregate import (
    MODE_ALL,
    MODE_OPEN,
    count_open_auctions,
    filter_bids_for_auction,
    filter_open_auctions,
    summarize,
)
from .chain import ChainQueryError, SwechainClient
from .runner import CommandError
from .validation import ValidationError, clean, is_integer, require_address, require_text

logger = logging.getLogger(__name__)

DEFAULT_AUCTION_STATUS = "open"
DEFAULT_BID_AMOUNT = "100token"
DEFAULT_FUNDING_AMOUNT = "1000token"

F = TypeVar("F", bound=Callable[..., Awaitable[str]])


def render(payload: dict[str, Any]) -> str:
    return json.dumps(payload, indent=2)


def tool_boundary(func: F) -> F:
    """Turn validation errors and unexpected failures into result text."""

    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> str:
        try:
            return await func(*args, **kwargs)
        except ValidationError as exc:
            logger.info("Rejected %s call: %s", func.__name__, exc)
            return f"Error: {exc}"
        except Exception as exc:  # noqa: BLE001 - one bad call must not stop the server
            logger.exception("Unexpected failure in %s", func.__name__)
            return f"Error: unexpected failure in {func.__name__}: {exc}"

    return wrapper  # type: ignore[return-value]


def transaction_payload(action: str, output: str) -> dict[str, Any]:
    """Summarise the JSON printed by a ``tx`` command.

    A non-zero ``code`` means the chain accepted the request but rejected the
    transaction; that is reported in the summary, not as an error.
    """

    try:
        decoded = json.loads(output)
    except ValueError:
        decoded = None

    if not isinstance(decoded, dict):
        return {"summary": f"{action} submitted", "details": {"raw": output}}

    code = decoded.get("code")
    if code not in (None, 0, "0"):
        raw_log = decoded.get("raw_log", "")
        summary = f"{action} rejected by the chain (code {code}): {raw_log}"
    elif decoded.get("txhash"):
        summary = f"{action} submitted (txhash {decoded['txhash']})"
    else:
        summary = f"{action} submitted"
    return {"summary": summary, "details": decoded}


def transaction_response(action: str, output: str) -> str:
    return render(transaction_payload(action, output))


class ToolHandlers:
    """One coroutine per tool, sharing a :class:`SwechainClient`."""

    def __init__(self, client: SwechainClient) -> None:
        self.client = client

    @tool_boundary
    async def get_address_for_key(self, key_name: str) -> str:
        logger.info("Getting address for key: %s", key_name)
        key_name = require_text(key_name, "keyName parameter is required and cannot be empty.")

        try:
            address = await self.client.address_for_key(key_name)
        except ChainQueryError as exc:
            return f"Error getting address for key {key_name}: {exc}"

        return render(
            {
                "summary": f"Address for key '{key_name}': {address}",
                "details": {"keyName": key_name, "address": address},
            }
        )

    @tool_boundary
    async def get_balance(self, address: str) -> str:
        logger.info("Getting balance for address: %s", address)
        address = require_text(address, "address parameter is required and cannot be empty.")
        require_address(address, "address must be a valid cosmos address (cosmos1...).")

        try:
            balances = await self.client.balances(address)
        except ChainQueryError as exc:
            return f"Error getting balance for address {address}: {exc}"

        amount, denom = "0", "token"
        if balances:
            amount, denom = balances[0].amount, balances[0].denom

        return render(
            {
                "summary": f"Address {address} has {amount} {denom}",
                "details": {
                    "address": address,
                    "balances": [balance.to_dict() for balance in balances],
                },
            }
        )

    @tool_boundary
    async def query_open_auctions(self, operation: str = "list") -> str:
        logger.info("Querying open auctions")
        auctions = await self.client.list_auctions()
        bids = await self.client.list_bids()
        owners = await self.client.denom_owners()

        response = summarize(filter_open_auctions(auctions), bids, owners, MODE_OPEN)
        return render(response.to_dict())

    @tool_boundary
    async def query_all_auctions(self, operation: str = "list") -> str:
        logger.info("Querying all auctions")
        auctions = await self.client.list_auctions()
        bids = await self.client.list_bids()
        owners = await self.client.denom_owners()

        response = summarize(auctions, bids, owners, MODE_ALL)
        return render(response.to_dict())

    @tool_boundary
    async def query_bids_for_auction(self, auction_id: str) -> str:
        auction_id = clean(auction_id)
        logger.info("Querying bids for auction: %s", auction_id)
        require_text(
            auction_id,
            "auctionId parameter is required. Use specific auction ID or 'all' for all bids.",
        )
        show_all = auction_id.lower() == "all"
        if not show_all and not is_integer(auction_id):
            raise ValidationError(f"invalid auctionId '{auction_id}'. Must be a number or 'all'.")

        bids = await self.client.list_bids()
        if show_all:
            summary = f"Found {len(bids)} total bids across all auctions"
        else:
            bids = filter_bids_for_auction(bids, int(auction_id))
            summary = f"Found {len(bids)} bids for auction {auction_id}"

        return render({"summary": summary, "details": {"bids": [bid.to_dict() for bid in bids]}})

    @tool_boundary
    async def get_blockchain_status(self, operation: str = "status") -> str:
        logger.info("Getting blockchain status")
        auctions = await self.client.list_auctions()
        bids = await self.client.list_bids()
        owners = await self.client.denom_owners()
        keys = await self.client.list_keys()

        open_count = count_open_auctions(auctions)
        return render(
            {
                "summary": (
                    f"Blockchain has {len(auctions)} total auctions ({open_count} open), "
                    f"{len(bids)} bids, {len(keys)} keys, and {len(owners)} token holders"
                ),
                "details": {
                    "totalAuctions": len(auctions),
                    "openAuctions": open_count,
                    "totalBids": len(bids),
                    "totalKeys": len(keys),
                    "tokenHolders": len(owners),
                },
            }
        )

    @tool_boundary
    async def get_keys(self, operation: str = "list") -> str:
        logger.info("Getting all keys")
        keys = await self.client.list_keys()
        return render(
            {
                "summary": f"Found {len(keys)} keys in the keyring",
                "details": {"keys": [key.to_dict() for key in keys]},
            }
        )

    @tool_boundary
    async def open_auction(
        self,
        issue: str,
        description: str,
        sender: str,
        status: str | None = None,
        winner: str | None = None,
    ) -> str:
        logger.info("Handling 'open-auction' request: issue=%r from=%s", issue, sender)
        issue = require_text(issue, "'issue' parameter is required and cannot be empty.")
        description = require_text(
            description, "'description' parameter is required and cannot be empty."
        )
        sender = require_text(sender, "'from' parameter is required and cannot be empty.")
        require_address(sender, "'from' must be a valid cosmos address (cosmos1...).")

        try:
            output = await self.client.create_auction(
                issue,
                description,
                clean(status) or DEFAULT_AUCTION_STATUS,
                clean(winner),
                sender,
            )
        except CommandError as exc:
            return f"Failed to create auction: {exc}"
        return transaction_response("Auction creation", output)

    @tool_boundary
    async def create_bid(
        self,
        auction_id: str,
        bidder: str,
        sender: str,
        amount: str | None = None,
        description: str | None = None,
    ) -> str:
        logger.info("Handling 'create-bid' request: auction=%r bidder=%s", auction_id, bidder)
        auction_id = require_text(auction_id, "'auctionId' parameter is required.")
        bidder = require_text(bidder, "'bidder' parameter is required.")
        sender = require_text(sender, "'from' parameter is required.")
        require_address(bidder, "'bidder' must be a valid cosmos address (cosmos1...).")
        require_address(sender, "'from' must be a valid cosmos address (cosmos1...).")
        if not is_integer(auction_id):
            raise ValidationError("'auctionId' must be a valid number.")

        try:
            output = await self.client.create_bid(
                auction_id,
                bidder,
                clean(amount) or DEFAULT_BID_AMOUNT,
                clean(description) or f"Bid for auction {auction_id}",
                sender,
            )
        except CommandError as exc:
            return f"Failed to create bid: {exc}"
        return transaction_response("Bid", output)

    @tool_boundary
    async def pay(self, sender: str, recipient: str, amount: str) -> str:
        logger.info("Handling 'pay' request")
        sender, recipient, amount = clean(sender), clean(recipient), clean(amount)
        if not sender or not recipient or not amount:
            raise ValidationError("'from', 'to', and 'amount' parameters are all required.")
        require_address(sender, "'from' must be a valid cosmos address.")
        require_address(recipient, "'to' must be a valid cosmos address.")

        try:
            output = await self.client.send(sender, recipient, amount)
        except CommandError as exc:
            return f"Payment failed: {exc}"
        return transaction_response("Payment", output)

    @tool_boundary
    async def close_auction(
        self,
        auction_id: str,
        status: str,
        issue: str,
        description: str,
        winner: str,
        sender: str,
    ) -> str:
        logger.info("Handling 'close-auction' request: auction=%r", auction_id)
        auction_id, status, sender = clean(auction_id), clean(status), clean(sender)
        if not auction_id or not status or not sender:
            raise ValidationError("'auctionId', 'status', and 'from' parameters are required.")
        require_address(sender, "'from' must be a valid cosmos address.")
        if not is_integer(auction_id):
            raise ValidationError("'auctionId' must be a valid number.")

        try:
            output = await self.client.update_auction(
                auction_id, clean(issue), clean(description), status, clean(winner), sender
            )
        except CommandError as exc:
            return f"Failed to close auction: {exc}"
        return transaction_response("Auction update", output)

    @tool_boundary
    async def create_and_fund_address(
        self, key_name: str, funder_address: str, amount: str | None = None
    ) -> str:
        logger.info("Handling 'create-and-fund-address' request: key=%r", key_name)
        key_name = require_text(key_name, "'keyName' parameter is required.")
        funder_address = require_text(funder_address, "'funderAddress' parameter is required.")
        require_address(funder_address, "'funderAddress' must be a valid cosmos address.")
        amount = clean(amount) or DEFAULT_FUNDING_AMOUNT

        try:
            address = await self.client.add_key(key_name)
        except CommandError as exc:
            return f"Failed to create key: {exc}"
        except ChainQueryError as exc:
            return f"Failed to parse key creation output: {exc}"

        try:
            output = await self.client.send(funder_address, address, amount)
        except CommandError as exc:
            return f"Key created but funding failed: {exc}\nKey: {key_name}\nAddress: {address}"

        funding = transaction_payload("Funding", output)
        return render(
            {
                "summary": f"Created key '{key_name}' at {address} and funded it with {amount}",
                "details": {
                    "keyName": key_name,
                    "address": address,
                    "amount": amount,
                    "transaction": funding["details"],
                },
            }
        )
