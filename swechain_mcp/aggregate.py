"""Join auctions, bids and token holders into a single summary view."""

from __future__ import annotations

import logging
from typing import Iterable, List, Sequence

from .model import (
    DEFAULT_BID_AMOUNT,
    Auction,
    AuctionDetail,
    AuctionSummaryResponse,
    Bid,
    BidDetail,
    DenomOwner,
    ParticipantDetail,
)

logger = logging.getLogger(__name__)

MODE_OPEN = "open"
MODE_ALL = "all"


def extract_name_from_address(address: str) -> str:
    """Return a short display name cut from ``address``.

    Purely cosmetic: characters 7-12 of a ``cosmos1...`` address, or the
    whole string when it is too short.
    """

    if len(address) >= 12:
        return address[7:12]
    return address


def filter_open_auctions(auctions: Iterable[Auction]) -> List[Auction]:
    return [auction for auction in auctions if auction.is_open]


def count_open_auctions(auctions: Iterable[Auction]) -> int:
    return sum(1 for auction in auctions if auction.is_open)


def filter_bids_for_auction(bids: Iterable[Bid], auction_id: int) -> List[Bid]:
    return [bid for bid in bids if bid.auction_id == auction_id]


def build_auction_detail(auction: Auction, bids: Sequence[Bid]) -> AuctionDetail:
    """Attach the bids referencing ``auction``.

    The current bid amount is the amount of the *last* matching bid in the
    order the bids were fetched, not the highest bid. Auctions without bids
    report ``"0token"``.
    """

    matched: List[BidDetail] = []
    current_bid_amount = DEFAULT_BID_AMOUNT
    for bid in bids:
        if bid.auction_id != auction.id:
            continue
        matched.append(BidDetail(bidder=bid.bidder, amount=bid.amount, description=bid.description))
        current_bid_amount = bid.amount

    return AuctionDetail(
        auction_id=auction.id,
        issue=auction.issue,
        creator=auction.creator,
        description=auction.description,
        status=auction.status,
        winner=auction.winner,
        current_bid_amount=current_bid_amount,
        bids=matched,
    )


def build_participants(owners: Iterable[DenomOwner]) -> List[ParticipantDetail]:
    return [
        ParticipantDetail(
            name=extract_name_from_address(owner.address),
            address=owner.address,
            balance=f"{owner.balance.amount} {owner.balance.denom}",
        )
        for owner in owners
    ]


def summarize(
    auctions: Sequence[Auction],
    bids: Sequence[Bid],
    owners: Sequence[DenomOwner],
    mode: str,
) -> AuctionSummaryResponse:
    """Build the aggregated auction response.

    ``mode`` only selects the summary sentence; filtering to open auctions is
    the caller's job. Every auction scans the full bid list, which is
    O(auctions x bids) but bounded by the page ceiling on both inputs.
    """

    if mode not in (MODE_OPEN, MODE_ALL):
        raise ValueError(f"unknown summary mode: {mode!r}")

    details = [build_auction_detail(auction, bids) for auction in auctions]
    participants = build_participants(owners)

    if mode == MODE_OPEN:
        with_bids = sum(1 for detail in details if detail.bids)
        if not auctions:
            summary = "No open auctions found."
        else:
            summary = (
                f"There are {len(auctions)} open auctions "
                f"({with_bids} with bids, {len(auctions) - with_bids} without bids)."
            )
    else:
        summary = f"There are {len(auctions)} total auctions with {len(bids)} total bids."

    logger.debug("Summarized %d auctions, %d bids, %d holders", len(auctions), len(bids), len(owners))
    return AuctionSummaryResponse(summary=summary, auctions=details, participants=participants)
