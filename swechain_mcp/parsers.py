"""Turn loosely-typed JSON records from ``swechaind`` into domain records.

Nothing in here raises on bad input. Each field is decoded into a
:class:`Decoded` value that records whether the raw value was usable; on
failure the documented default is used instead:

* text fields fall back to ``""``
* identifiers fall back to ``0``

Validation beyond that (address formats and so on) happens at the tool
boundary.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Generic, Iterable, List, Mapping, TypeVar

from .model import Auction, Balance, Bid, DenomOwner, Key

logger = logging.getLogger(__name__)

T = TypeVar("T")

_ID_RE = re.compile(r"\+?[0-9]+")


@dataclass(frozen=True)
class Decoded(Generic[T]):
    value: T
    ok: bool


def stringify(value: Any) -> str | None:
    """Render a decoded JSON value as display text, ``None`` for null."""

    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, (list, dict)):
        return json.dumps(value, separators=(",", ":"), sort_keys=True)
    return str(value)


def decode_text(raw: Mapping[str, Any], key: str) -> Decoded[str]:
    text = stringify(raw.get(key))
    if text is None:
        return Decoded("", False)
    return Decoded(text, True)


def decode_id(raw: Mapping[str, Any], key: str) -> Decoded[int]:
    text = stringify(raw.get(key))
    if text is None or not _ID_RE.fullmatch(text):
        return Decoded(0, False)
    try:
        return Decoded(int(text), True)
    except ValueError:
        # Past the interpreter's integer string conversion limit.
        return Decoded(0, False)


def _mappings(raw_records: Iterable[Any], kind: str) -> Iterable[Mapping[str, Any]]:
    for raw in raw_records:
        if isinstance(raw, Mapping):
            yield raw
        else:
            logger.debug("Skipping non-object %s record: %r", kind, raw)


def parse_auction(raw: Mapping[str, Any]) -> Auction:
    auction_id = decode_id(raw, "id")
    if not auction_id.ok:
        logger.debug("Unparseable auction id %r", raw.get("id"))
    return Auction(
        id=auction_id.value,
        issue=decode_text(raw, "issue").value,
        description=decode_text(raw, "description").value,
        status=decode_text(raw, "status").value,
        winner=decode_text(raw, "winner").value,
        creator=decode_text(raw, "creator").value,
    )


def parse_bid(raw: Mapping[str, Any]) -> Bid:
    auction_id = decode_id(raw, "auctionId")
    if not auction_id.ok:
        logger.debug("Unparseable bid auctionId %r", raw.get("auctionId"))
    return Bid(
        auction_id=auction_id.value,
        amount=decode_text(raw, "amount").value,
        description=decode_text(raw, "description").value,
        creator=decode_text(raw, "creator").value,
        bidder=decode_text(raw, "bidder").value,
    )


def parse_balance(raw: Mapping[str, Any]) -> Balance:
    return Balance(
        denom=decode_text(raw, "denom").value,
        amount=decode_text(raw, "amount").value,
    )


def parse_auctions(raw_records: Iterable[Any]) -> List[Auction]:
    return [parse_auction(raw) for raw in _mappings(raw_records, "auction")]


def parse_bids(raw_records: Iterable[Any]) -> List[Bid]:
    return [parse_bid(raw) for raw in _mappings(raw_records, "bid")]


def parse_balances(raw_records: Iterable[Any]) -> List[Balance]:
    return [parse_balance(raw) for raw in _mappings(raw_records, "balance")]


def parse_denom_owners(raw_records: Iterable[Any]) -> List[DenomOwner]:
    """Parse ``denom_owners`` entries, skipping those without a balance object."""

    owners: List[DenomOwner] = []
    for raw in _mappings(raw_records, "denom owner"):
        balance = raw.get("balance")
        if not isinstance(balance, Mapping):
            logger.debug("Skipping denom owner without balance: %r", raw)
            continue
        owners.append(
            DenomOwner(address=decode_text(raw, "address").value, balance=parse_balance(balance))
        )
    return owners


def parse_keys(raw_records: Iterable[Any]) -> List[Key]:
    return [
        Key(name=decode_text(raw, "name").value, address=decode_text(raw, "address").value)
        for raw in _mappings(raw_records, "key")
    ]
