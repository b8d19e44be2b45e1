import sys

import pytest

from swechain_mcp.model import Auction, Balance, Bid, DenomOwner, Key
from swechain_mcp.parsers import (
    decode_id,
    decode_text,
    parse_auctions,
    parse_balances,
    parse_bids,
    parse_denom_owners,
    parse_keys,
    stringify,
)


@pytest.mark.parametrize(
    "value, expected",
    [
        ("open", "open"),
        (7, "7"),
        (7.0, "7"),
        (2.5, "2.5"),
        (True, "true"),
        (False, "false"),
        ({"b": 1, "a": 2}, '{"a":2,"b":1}'),
        ([1, "x"], '[1,"x"]'),
        (None, None),
    ],
)
def test_stringify(value, expected) -> None:
    assert stringify(value) == expected


@pytest.mark.parametrize(
    "raw, expected",
    [
        ({"id": "12"}, (12, True)),
        ({"id": 12}, (12, True)),
        ({"id": 3.0}, (3, True)),
        ({"id": "+4"}, (4, True)),
        ({"id": "-1"}, (0, False)),
        ({"id": "abc"}, (0, False)),
        ({"id": " 5"}, (0, False)),
        ({"id": 1.5}, (0, False)),
        ({"id": None}, (0, False)),
        ({}, (0, False)),
    ],
)
def test_decode_id_never_raises(raw, expected) -> None:
    decoded = decode_id(raw, "id")
    assert (decoded.value, decoded.ok) == expected


@pytest.mark.skipif(
    not hasattr(sys, "set_int_max_str_digits"), reason="no integer string conversion limit"
)
def test_decode_id_falls_back_past_the_digit_limit() -> None:
    decoded = decode_id({"id": "9" * 5000}, "id")

    assert (decoded.value, decoded.ok) == (0, False)
    assert parse_bids([{"auctionId": "9" * 5000, "amount": "1token"}])[0].auction_id == 0


def test_decode_text_reports_missing_fields() -> None:
    assert decode_text({"winner": ""}, "winner").ok
    missing = decode_text({}, "winner")
    assert missing.value == ""
    assert not missing.ok


def test_parse_auctions_maps_fields() -> None:
    raw = [
        {
            "id": "1",
            "issue": "Fix login bug",
            "description": "Users cannot log in",
            "status": "open",
            "winner": "",
            "creator": "cosmos1creator",
        }
    ]

    assert parse_auctions(raw) == [
        Auction(
            id=1,
            issue="Fix login bug",
            description="Users cannot log in",
            status="open",
            winner="",
            creator="cosmos1creator",
        )
    ]


def test_parse_auctions_tolerates_malformed_records() -> None:
    auctions = parse_auctions([{"id": "x1"}, "not a record", {"status": None}])

    assert auctions == [Auction(id=0), Auction(id=0)]


def test_parse_bids_keeps_amount_as_text() -> None:
    bids = parse_bids(
        [{"auctionId": "2", "amount": "150token", "description": "d", "creator": "c", "bidder": "b"}]
    )

    assert bids == [Bid(auction_id=2, amount="150token", description="d", creator="c", bidder="b")]
    assert bids[0].to_dict()["auctionId"] == "2"


def test_parsing_is_idempotent() -> None:
    raw = [{"auctionId": 3, "amount": 10, "bidder": "cosmos1b"}, {"auctionId": "bad"}]
    snapshot = [dict(record) for record in raw]

    assert parse_bids(raw) == parse_bids(raw)
    assert raw == snapshot


def test_parse_denom_owners_skips_entries_without_balance() -> None:
    owners = parse_denom_owners(
        [
            {"address": "cosmos1alice", "balance": {"amount": "1000", "denom": "token"}},
            {"address": "cosmos1bob"},
            {"address": "cosmos1carol", "balance": "1000token"},
        ]
    )

    assert owners == [DenomOwner(address="cosmos1alice", balance=Balance(denom="token", amount="1000"))]


def test_parse_balances_and_keys() -> None:
    assert parse_balances([{"denom": "token", "amount": "5"}, None]) == [Balance(denom="token", amount="5")]
    assert parse_keys([{"name": "alice", "address": "cosmos1a", "type": "local"}]) == [
        Key(name="alice", address="cosmos1a")
    ]
