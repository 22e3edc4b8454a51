# server/core/errors.py

from fastapi import status


class AuctionHouseError(Exception):
    """
    Base class for failures the API reports to clients as-is.
    Each subclass fixes the HTTP status it maps to.
    """
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Request failed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ConflictError(AuctionHouseError):
    default_message = "User already exists"


class NotFoundError(AuctionHouseError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class InvalidCredentialsError(AuctionHouseError):
    default_message = "Invalid credentials"


class ValidationError(AuctionHouseError):
    default_message = "Invalid request"


class AuctionClosedError(AuctionHouseError):
    default_message = "Auction has ended"
