"""Marketplace operations: users, minting, listing and mock payments.

``MarketplaceService`` receives its database session and pinning client
explicitly; route handlers build one per request through ``api.deps``.
"""
import logging
import uuid
from typing import List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

import crud.nft as nft_crud
import crud.user as user_crud
from config.settings import get_settings
from core.errors import (
    ConflictError,
    NFTNotAvailableError,
    NotFoundError,
    PayloadTooLargeError,
    PinningError,
    StoreError,
    ValidationError,
)
from core.nft import generate_token_id
from core.pinning import PinningClient
from core.validation import validate_image, validate_mint_request, validate_user_request
from models.nft import NFT, NFTStatus
from models.user import User

logger = logging.getLogger(__name__)

TEST_NFT = {
    "title": "Test NFT",
    "description": "A sample NFT created for testing",
    "price": 10.0,
    "category": "art",
    "creator": "test_user",
}

class ImagePayload:
    """Raw uploaded image with the metadata the pinning service needs"""

    def __init__(self, data: bytes, filename: Optional[str], content_type: Optional[str]):
        self.data = data
        self.filename = filename or "image"
        self.content_type = content_type

class MarketplaceService:
    def __init__(
        self,
        db: Session,
        pinning: Optional[PinningClient] = None,
        max_image_size: Optional[int] = None,
    ):
        self.db = db
        self.pinning = pinning
        self.max_image_size = max_image_size if max_image_size is not None else get_settings().MAX_IMAGE_SIZE

    # Users

    def create_user(self, pi_user_id: Optional[str], username: Optional[str] = None) -> User:
        result = validate_user_request(pi_user_id, username)
        if not result.ok:
            raise ValidationError(result.errors[0], result.errors)

        if user_crud.get_user_by_pi_user_id(self.db, result.value["pi_user_id"]):
            raise ConflictError("User already exists")
        try:
            return user_crud.create_user(self.db, **result.value)
        except IntegrityError as e:
            # Lost a race with a concurrent insert of the same piUserId
            raise ConflictError("User already exists") from e
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to create user: {e}") from e

    def create_test_user(self) -> User:
        pi_user_id = f"test_user_{uuid.uuid4().hex[:12]}"
        return self.create_user(pi_user_id, username="Test User")

    def list_users(self) -> List[User]:
        try:
            return user_crud.get_users(self.db)
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to fetch users: {e}") from e

    # NFTs

    def mint_nft(
        self,
        title: Optional[str],
        description: Optional[str],
        price,
        category: Optional[str],
        creator: Optional[str],
        image: Optional[ImagePayload] = None,
    ) -> NFT:
        """Validate, pin the image if given, then persist an available NFT"""
        result = validate_mint_request(title, description, price, category, creator)
        if not result.ok:
            raise ValidationError(result.errors[0], result.errors)
        nft_data = result.value

        image_url = ipfs_hash = None
        if image is not None:
            if len(image.data) > self.max_image_size:
                raise PayloadTooLargeError(
                    f"Image exceeds maximum size of {self.max_image_size // (1024 * 1024)} MB"
                )
            checked = validate_image(image.content_type, len(image.data))
            if not checked.ok:
                raise ValidationError(checked.errors[0], checked.errors)
            if self.pinning is None:
                raise PinningError("Pinning service is not configured")
            ipfs_hash = self.pinning.upload(image.data, image.filename, image.content_type)
            image_url = self.pinning.gateway_url(ipfs_hash)

        try:
            nft = nft_crud.create_nft(
                self.db, generate_token_id(), nft_data, image_url=image_url, ipfs_hash=ipfs_hash
            )
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to save NFT: {e}") from e

        logger.info(f"Minted NFT {nft.token_id} for creator {nft.creator}")
        return nft

    def create_test_nft(self) -> NFT:
        return self.mint_nft(**TEST_NFT)

    def list_nfts(self) -> List[NFT]:
        try:
            return nft_crud.get_nfts(self.db)
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to fetch NFTs: {e}") from e

    def list_available_nfts(self) -> List[NFT]:
        try:
            return nft_crud.get_nfts(self.db, status=NFTStatus.AVAILABLE)
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to fetch available NFTs: {e}") from e

    def get_nft(self, token_id: str) -> Optional[NFT]:
        """Fetch an NFT and count the view; None when it does not exist"""
        try:
            if not nft_crud.increment_views(self.db, token_id):
                return None
            nft = nft_crud.get_nft_by_token_id(self.db, token_id)
            if nft is not None:
                self.db.refresh(nft)
            return nft
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to fetch NFT: {e}") from e

    # Payments

    def _require_nft(self, token_id: str) -> NFT:
        try:
            nft = nft_crud.get_nft_by_token_id(self.db, token_id)
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to fetch NFT: {e}") from e
        if nft is None:
            raise NotFoundError("NFT not found")
        return nft

    def approve_payment(self, payment_id: str, token_id: str, buyer_id: str) -> NFT:
        """Check the NFT can be bought; nothing is written"""
        nft = self._require_nft(token_id)
        if nft.status != NFTStatus.AVAILABLE:
            raise NFTNotAvailableError("NFT not available")

        logger.info(f"Payment {payment_id} approved for NFT {token_id} by buyer {buyer_id}")
        return nft

    def complete_payment(self, payment_id: str, txid: str, token_id: str, buyer_id: str) -> NFT:
        """Transfer the NFT to the buyer and record the sale"""
        nft = self._require_nft(token_id)
        try:
            sold = nft_crud.mark_nft_sold(self.db, token_id, buyer_id, payment_id, txid)
            if sold:
                self.db.refresh(nft)
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to complete payment: {e}") from e

        if not sold:
            logger.warning(f"Payment {payment_id} rejected: NFT {token_id} is no longer available")
            raise NFTNotAvailableError("NFT not available")
        return nft
