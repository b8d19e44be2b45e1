"""Domain records read from ``swechaind`` and the views built from them.

Records are frozen: they are parsed once per tool call and every aggregation
step produces new view objects. ``to_dict`` methods emit the camelCase keys
that tool callers parse back out of the JSON text.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List

DEFAULT_BID_AMOUNT = "0token"


@dataclass(frozen=True)
class Key:
    name: str
    address: str

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "address": self.address}


@dataclass(frozen=True)
class Balance:
    denom: str
    amount: str

    def to_dict(self) -> dict[str, Any]:
        return {"denom": self.denom, "amount": self.amount}


@dataclass(frozen=True)
class Auction:
    """An ``issuemarket`` auction.

    ``id`` is ``0`` when the chain returned something that is not a
    non-negative integer; callers treat such entries as unparseable rather
    than failing.
    """

    id: int
    issue: str = ""
    description: str = ""
    status: str = ""
    winner: str = ""
    creator: str = ""

    @property
    def is_open(self) -> bool:
        return self.status.strip().lower() == "open"


@dataclass(frozen=True)
class Bid:
    auction_id: int
    amount: str = ""
    description: str = ""
    creator: str = ""
    bidder: str = ""

    def to_dict(self) -> dict[str, Any]:
        # The chain client reports auctionId as a string; keep that shape.
        return {
            "auctionId": str(self.auction_id),
            "amount": self.amount,
            "description": self.description,
            "creator": self.creator,
            "bidder": self.bidder,
        }


@dataclass(frozen=True)
class DenomOwner:
    """A token holder as reported by ``query bank denom-owners``."""

    address: str
    balance: Balance


@dataclass(frozen=True)
class BidDetail:
    bidder: str
    amount: str
    description: str

    def to_dict(self) -> dict[str, Any]:
        return {"bidder": self.bidder, "amount": self.amount, "description": self.description}


@dataclass(frozen=True)
class AuctionDetail:
    auction_id: int
    issue: str
    creator: str
    description: str
    status: str
    winner: str
    current_bid_amount: str = DEFAULT_BID_AMOUNT
    bids: List[BidDetail] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "auctionId": self.auction_id,
            "issue": self.issue,
            "creator": self.creator,
            "description": self.description,
            "status": self.status,
            "winner": self.winner,
            "currentBidAmount": self.current_bid_amount,
            "bids": [bid.to_dict() for bid in self.bids],
        }


@dataclass(frozen=True)
class ParticipantDetail:
    name: str
    address: str
    balance: str

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "address": self.address, "balance": self.balance}


@dataclass(frozen=True)
class AuctionSummaryResponse:
    summary: str
    auctions: List[AuctionDetail] = field(default_factory=list)
    participants: List[ParticipantDetail] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "summary": self.summary,
            "details": {
                "auctions": [auction.to_dict() for auction in self.auctions],
                "participants": [participant.to_dict() for participant in self.participants],
            },
        }
