# server/models/auction.py

from sqlalchemy import Boolean, Column, DateTime, Float, Integer, String, Text
from . import Base


class AuctionItem(Base):
    __tablename__ = "auction_items"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    starting_bid = Column(Float, nullable=False)
    current_bid = Column(Float, nullable=False, default=0)
    highest_bidder = Column(String, nullable=False, default="")
    # Stored as naive UTC
    end_date = Column(DateTime, nullable=False)
    is_closed = Column(Boolean, nullable=False, default=False)
