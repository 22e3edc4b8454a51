# server/api/auction.py

import logging
from datetime import datetime
from pydantic import BaseModel, FiniteFloat
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from api.auth import require_auth_if_enabled
from core import auctions
from core.errors import AuctionHouseError
from database import get_db
from models.auction import AuctionItem


logger = logging.getLogger("auction.api")

router = APIRouter()


# -------------------------------
# Request Schemas
# -------------------------------

class AuctionCreateRequest(BaseModel):
    title: str
    description: str
    startingBid: FiniteFloat
    endDate: datetime


class AuctionUpdateRequest(BaseModel):
    """
    Every field is optional; only non-empty fields sent by the client are applied.
    """
    title: str | None = None
    description: str | None = None
    startingBid: FiniteFloat | None = None
    endDate: datetime | None = None


class BidRequest(BaseModel):
    bidAmount: FiniteFloat
    bidderName: str


FIELD_NAMES = {
    "title": "title",
    "description": "description",
    "startingBid": "starting_bid",
    "endDate": "end_date",
}


def serialize_auction(auction: AuctionItem) -> dict:
    return {
        "id": auction.id,
        "title": auction.title,
        "description": auction.description,
        "startingBid": auction.starting_bid,
        "currentBid": auction.current_bid,
        "highestBidder": auction.highest_bidder,
        "endDate": auction.end_date.isoformat() + "Z",
        "isClosed": auction.is_closed,
    }


def error_response(e: Exception, message: str) -> JSONResponse:
    if isinstance(e, AuctionHouseError):
        return JSONResponse(status_code=e.status_code, content={"message": e.message})
    logger.exception(message)
    return JSONResponse(status_code=500, content={"message": message, "error": str(e)})


# -------------------------------
# Auction Endpoints
# -------------------------------

@router.post("/auction", status_code=status.HTTP_201_CREATED)
def create_auction(
    req: AuctionCreateRequest,
    db: Session = Depends(get_db),
    _user: str | None = Depends(require_auth_if_enabled)
):
    try:
        auction = auctions.create_auction(db, req.title, req.description, req.startingBid, req.endDate)
        return {"message": "Auction created successfully", "auction": serialize_auction(auction)}
    except Exception as e:
        return error_response(e, "Error creating auction")


@router.get("/auctions")
def list_auctions(db: Session = Depends(get_db)):
    try:
        return [serialize_auction(a) for a in auctions.list_auctions(db)]
    except Exception as e:
        return error_response(e, "Error fetching auctions")


@router.get("/auctions/{auction_id}")
def get_auction(auction_id: str, db: Session = Depends(get_db)):
    try:
        return serialize_auction(auctions.get_auction(db, auction_id))
    except Exception as e:
        return error_response(e, "Error fetching auction")


@router.post("/bid/{auction_id}")
def place_bid(
    auction_id: str,
    req: BidRequest,
    db: Session = Depends(get_db),
    _user: str | None = Depends(require_auth_if_enabled)
):
    try:
        auction = auctions.place_bid(db, auction_id, req.bidAmount, req.bidderName)
        return {"message": "Bid placed successfully", "auction": serialize_auction(auction)}
    except Exception as e:
        return error_response(e, "Error placing bid")


@router.put("/auction/{auction_id}")
def edit_auction(
    auction_id: str,
    req: AuctionUpdateRequest,
    db: Session = Depends(get_db),
    _user: str | None = Depends(require_auth_if_enabled)
):
    changes = {FIELD_NAMES[k]: v for k, v in req.model_dump(exclude_unset=True).items()}
    try:
        auction = auctions.edit_auction(db, auction_id, changes)
        return {"message": "Auction updated successfully", "auction": serialize_auction(auction)}
    except Exception as e:
        return error_response(e, "Error updating auction")


@router.delete("/auction/{auction_id}")
def delete_auction(
    auction_id: str,
    db: Session = Depends(get_db),
    _user: str | None = Depends(require_auth_if_enabled)
):
    try:
        auctions.delete_auction(db, auction_id)
        return {"message": "Auction deleted successfully"}
    except Exception as e:
        return error_response(e, "Error deleting auction")
