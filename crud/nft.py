from datetime import datetime, timezone
from sqlalchemy import update
from sqlalchemy.orm import Session
from typing import Optional, List
import logging

from models.nft import NFT, NFTStatus
from schemas.nft import NFTCreate

logger = logging.getLogger(__name__)

def get_nft_by_token_id(db: Session, token_id: str) -> Optional[NFT]:
    """Get NFT by token ID"""
    return db.query(NFT).filter(NFT.token_id == token_id).first()

def get_nfts(db: Session, status: Optional[NFTStatus] = None) -> List[NFT]:
    """Get NFTs newest first, optionally filtered by status"""
    query = db.query(NFT)
    if status is not None:
        query = query.filter(NFT.status == status)
    return query.order_by(NFT.created_at.desc(), NFT.id.desc()).all()

def create_nft(
    db: Session,
    token_id: str,
    nft_data: NFTCreate,
    image_url: Optional[str] = None,
    ipfs_hash: Optional[str] = None,
) -> NFT:
    """Create new NFT owned by its creator"""
    try:
        db_nft = NFT(
            token_id=token_id,
            title=nft_data.title,
            description=nft_data.description,
            category=nft_data.category,
            price=nft_data.price,
            creator=nft_data.creator,
            owner=nft_data.creator,
            image_url=image_url,
            ipfs_hash=ipfs_hash,
            status=NFTStatus.AVAILABLE,
            views=0,
        )

        db.add(db_nft)
        db.commit()
        db.refresh(db_nft)

        logger.info(f"Created new NFT: {token_id} ({nft_data.title})")
        return db_nft

    except Exception as e:
        logger.error(f"Error creating NFT: {e}")
        db.rollback()
        raise e

def increment_views(db: Session, token_id: str) -> bool:
    """Atomically bump the view counter; False if no such NFT"""
    try:
        result = db.execute(
            update(NFT)
            .where(NFT.token_id == token_id)
            .values(views=NFT.views + 1)
            .execution_options(synchronize_session=False)
        )
        db.commit()
        return result.rowcount > 0

    except Exception as e:
        logger.error(f"Error incrementing views for NFT {token_id}: {e}")
        db.rollback()
        raise e

def mark_nft_sold(db: Session, token_id: str, owner: str, payment_id: str, txid: str) -> bool:
    """Mark NFT as sold if it is still available.

    Single conditional UPDATE so concurrent completions cannot both win;
    sold_price is copied from the row's own price in the same statement.
    """
    try:
        result = db.execute(
            update(NFT)
            .where(NFT.token_id == token_id, NFT.status == NFTStatus.AVAILABLE)
            .values(
                owner=owner,
                status=NFTStatus.SOLD,
                sold_at=datetime.now(timezone.utc),
                sold_price=NFT.price,
                transaction_id=txid,
                payment_id=payment_id,
            )
            .execution_options(synchronize_session=False)
        )
        db.commit()

        sold = result.rowcount > 0
        if sold:
            logger.info(f"Marked NFT {token_id} as sold to {owner} (payment {payment_id}, tx {txid})")
        return sold

    except Exception as e:
        logger.error(f"Error marking NFT as sold: {e}")
        db.rollback()
        raise e
