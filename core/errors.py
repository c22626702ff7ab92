from fastapi import status
from typing import List, Optional

class MarketplaceError(Exception):
    """Base error for marketplace operations, carries the HTTP status to report"""
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.message = message
        self.errors = errors or []

class ValidationError(MarketplaceError):
    status_code = status.HTTP_400_BAD_REQUEST

class NotFoundError(MarketplaceError):
    status_code = status.HTTP_404_NOT_FOUND

class ConflictError(MarketplaceError):
    status_code = status.HTTP_409_CONFLICT

class NFTNotAvailableError(MarketplaceError):
    status_code = status.HTTP_400_BAD_REQUEST

class PinningError(MarketplaceError):
    """Raised for any failure talking to the pinning service"""

class StoreError(MarketplaceError):
    """Raised when the record store rejects or fails an operation"""

class PayloadTooLargeError(MarketplaceError):
    status_code = 413
