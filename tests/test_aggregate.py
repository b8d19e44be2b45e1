import pytest

from swechain_mcp.aggregate import (
    count_open_auctions,
    extract_name_from_address,
    filter_bids_for_auction,
    filter_open_auctions,
    summarize,
)
from swechain_mcp.model import Auction, Balance, Bid, DenomOwner

ALICE = "cosmos1alice0000000000000000000000000000"


def _auction(auction_id: int, status: str = "open") -> Auction:
    return Auction(id=auction_id, issue=f"issue {auction_id}", status=status, creator=ALICE)


def _bid(auction_id: int, amount: str, bidder: str = ALICE) -> Bid:
    return Bid(auction_id=auction_id, amount=amount, description=f"bid {amount}", bidder=bidder)


def test_last_matching_bid_sets_current_amount() -> None:
    # Intentional quirk: the current bid is the last one fetched, not the highest.
    bids = [_bid(1, "9token"), _bid(1, "5token")]

    response = summarize([_auction(1), _auction(2)], bids, [], "all")

    first, second = response.auctions
    assert first.current_bid_amount == "5token"
    assert [bid.amount for bid in first.bids] == ["9token", "5token"]
    assert second.current_bid_amount == "0token"
    assert second.bids == []


def test_join_follows_fetch_order() -> None:
    bids = [_bid(1, "5token"), _bid(2, "1token"), _bid(1, "9token"), _bid(7, "3token")]

    response = summarize([_auction(1), _auction(2)], bids, [], "all")

    assert [detail.current_bid_amount for detail in response.auctions] == ["9token", "1token"]
    assert response.summary == "There are 2 total auctions with 4 total bids."


def test_duplicate_bids_are_kept() -> None:
    bid = _bid(3, "10token")

    response = summarize([_auction(3)], [bid, bid], [], "open")

    assert len(response.auctions[0].bids) == 2


def test_open_summary_without_auctions() -> None:
    assert summarize([], [_bid(1, "5token")], [], "open").summary == "No open auctions found."


def test_open_summary_counts_auctions_with_and_without_bids() -> None:
    auctions = [_auction(1), _auction(2), _auction(3)]
    bids = [_bid(1, "5token"), _bid(3, "7token")]

    response = summarize(auctions, bids, [], "open")

    assert response.summary == "There are 3 open auctions (2 with bids, 1 without bids)."


def test_all_summary_with_empty_inputs() -> None:
    response = summarize([], [], [], "all")

    assert response.summary == "There are 0 total auctions with 0 total bids."
    assert response.to_dict()["details"] == {"auctions": [], "participants": []}


def test_unknown_mode_is_rejected() -> None:
    with pytest.raises(ValueError):
        summarize([], [], [], "closed")


def test_participants_map_one_to_one() -> None:
    owners = [
        DenomOwner(address=ALICE, balance=Balance(denom="token", amount="1000")),
        DenomOwner(address=ALICE, balance=Balance(denom="token", amount="1000")),
        DenomOwner(address="cosmos1", balance=Balance(denom="stake", amount="3")),
    ]

    participants = summarize([], [], owners, "all").participants

    assert [p.to_dict() for p in participants] == [
        {"name": "alice", "address": ALICE, "balance": "1000 token"},
        {"name": "alice", "address": ALICE, "balance": "1000 token"},
        {"name": "cosmos1", "address": "cosmos1", "balance": "3 stake"},
    ]


@pytest.mark.parametrize(
    "address, expected",
    [
        ("cosmos1abcdefghij", "abcde"),
        ("cosmos1abcde", "abcde"),
        ("cosmos1abcd", "cosmos1abcd"),
        ("", ""),
    ],
)
def test_extract_name_from_address(address: str, expected: str) -> None:
    assert extract_name_from_address(address) == expected


def test_auction_detail_serialization() -> None:
    detail = summarize([_auction(4)], [_bid(4, "12token")], [], "open").to_dict()["details"]["auctions"][0]

    assert detail == {
        "auctionId": 4,
        "issue": "issue 4",
        "creator": ALICE,
        "description": "",
        "status": "open",
        "winner": "",
        "currentBidAmount": "12token",
        "bids": [{"bidder": ALICE, "amount": "12token", "description": "bid 12token"}],
    }


def test_open_filters_compare_status_loosely() -> None:
    auctions = [_auction(1, " OPEN "), _auction(2, "closed"), _auction(3, "Open")]

    assert [a.id for a in filter_open_auctions(auctions)] == [1, 3]
    assert count_open_auctions(auctions) == 2


def test_filter_bids_for_auction() -> None:
    bids = [_bid(2, "1token"), _bid(5, "2token"), _bid(2, "3token")]

    assert [b.amount for b in filter_bids_for_auction(bids, 2)] == ["1token", "3token"]
    assert filter_bids_for_auction(bids, 9) == []
