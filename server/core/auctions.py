# server/core/auctions.py

import logging
import math
from datetime import datetime, timezone
from sqlalchemy import update
from sqlalchemy.orm import Session

from core.errors import AuctionClosedError, NotFoundError, ValidationError
from models.auction import AuctionItem


logger = logging.getLogger("auction.auctions")

EDITABLE_FIELDS = ("title", "description", "starting_bid", "end_date")
MIN_ID, MAX_ID = -2 ** 63, 2 ** 63 - 1


# -------------------------------
# Helpers
# -------------------------------

def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    """
    Normalizes a datetime to naive UTC; naive inputs are assumed to already be UTC.
    """
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def _parse_id(auction_id) -> int | None:
    try:
        pk = int(auction_id)
    except (TypeError, ValueError):
        return None
    # Anything past a signed 64-bit INTEGER cannot be a stored key
    if not MIN_ID <= pk <= MAX_ID:
        return None
    return pk


def _fetch(db: Session, auction_id) -> AuctionItem | None:
    pk = _parse_id(auction_id)
    if pk is None:
        return None
    return db.get(AuctionItem, pk)


# -------------------------------
# Lifecycle Operations
# -------------------------------

def create_auction(
    db: Session,
    title: str,
    description: str,
    starting_bid: float,
    end_date: datetime
) -> AuctionItem:
    """
    Creates an open auction whose current bid starts at the starting bid.
    """
    missing = [
        name for name, value in (
            ("title", title),
            ("description", description),
            ("startingBid", starting_bid),
            ("endDate", end_date),
        )
        if value is None or value == ""
    ]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")
    if not math.isfinite(starting_bid):
        raise ValidationError("Starting bid must be a finite number")

    auction = AuctionItem(
        title=title,
        description=description,
        starting_bid=starting_bid,
        current_bid=starting_bid,
        highest_bidder="",
        end_date=to_naive_utc(end_date),
        is_closed=False
    )
    db.add(auction)
    db.commit()
    db.refresh(auction)

    logger.info("Created auction id=%s starting_bid=%s", auction.id, auction.starting_bid)
    return auction


def list_auctions(db: Session) -> list[AuctionItem]:
    return db.query(AuctionItem).order_by(AuctionItem.id.asc()).all()


def get_auction(db: Session, auction_id) -> AuctionItem:
    auction = _fetch(db, auction_id)
    if auction is None:
        logger.debug("Auction id=%s not found", auction_id)
        raise NotFoundError("Auction not found")
    return auction


def compare_and_set_bid(
    db: Session,
    auction_id: int,
    expected_bid: float,
    bid_amount: float,
    bidder_name: str
) -> bool:
    """
    Writes the new bid only if the stored current bid still equals expected_bid
    and the auction is open. Returns False when another writer got there first.
    """
    result = db.execute(
        update(AuctionItem)
        .where(
            AuctionItem.id == auction_id,
            AuctionItem.current_bid == expected_bid,
            AuctionItem.is_closed.is_(False)
        )
        .values(current_bid=bid_amount, highest_bidder=bidder_name)
        .execution_options(synchronize_session=False)
    )
    db.commit()
    return result.rowcount == 1


def place_bid(db: Session, auction_id, bid_amount: float, bidder_name: str) -> AuctionItem:
    """
    Places a bid on an auction.

    The amount is checked before the end date, so a low bid on an expired
    auction is reported as too low. An expired auction is marked closed the
    first time someone bids on it. The write itself is a compare-and-swap on
    the current bid; when it loses to a concurrent bid the checks are rerun
    against the fresh record.
    """
    if not math.isfinite(bid_amount):
        raise ValidationError("Bid must be a finite number")

    while True:
        auction = get_auction(db, auction_id)

        if bid_amount <= auction.current_bid:
            raise ValidationError("Bid must be higher than current bid")

        if auction.is_closed or utcnow() > auction.end_date:
            if not auction.is_closed:
                auction.is_closed = True
                db.commit()
                logger.info("Closed auction id=%s on late bid", auction.id)
            raise AuctionClosedError("Auction has ended")

        if compare_and_set_bid(db, auction.id, auction.current_bid, bid_amount, bidder_name):
            db.refresh(auction)
            logger.info(
                "Accepted bid on auction id=%s amount=%s bidder=%s",
                auction.id, bid_amount, bidder_name
            )
            return auction

        logger.debug("Bid on auction id=%s lost a race, retrying", auction.id)


def edit_auction(db: Session, auction_id, changes: dict) -> AuctionItem:
    """
    Overwrites the editable fields present in changes.
    Keys that are absent or hold an empty value (None, "", 0) keep their stored value.
    """
    auction = get_auction(db, auction_id)

    for field in EDITABLE_FIELDS:
        value = changes.get(field)
        if not value:
            continue
        if field == "end_date":
            value = to_naive_utc(value)
        setattr(auction, field, value)

    db.commit()
    db.refresh(auction)

    logger.info("Updated auction id=%s", auction.id)
    return auction


def delete_auction(db: Session, auction_id) -> None:
    auction = get_auction(db, auction_id)
    db.delete(auction)
    db.commit()
    logger.info("Deleted auction id=%s", auction_id)
