from typing import Optional
from fastapi import Depends, Request
from sqlalchemy.orm import Session

from core.marketplace import MarketplaceService
from core.pinning import PinningClient
from db.session import get_db

def get_pinning_client(request: Request) -> Optional[PinningClient]:
    """Pinning client created at startup, or None when not configured"""
    return getattr(request.app.state, "pinning", None)

def get_marketplace(
    request: Request,
    db: Session = Depends(get_db),
    pinning: Optional[PinningClient] = Depends(get_pinning_client),
) -> MarketplaceService:
    """Dependency to get a per-request marketplace service"""
    return MarketplaceService(db, pinning, max_image_size=request.app.state.settings.MAX_IMAGE_SIZE)
