from sqlalchemy.orm import Session
from typing import Optional, List
import logging

from models.user import User

logger = logging.getLogger(__name__)

def get_user_by_pi_user_id(db: Session, pi_user_id: str) -> Optional[User]:
    """Get user by Pi user ID"""
    return db.query(User).filter(User.pi_user_id == pi_user_id).first()

def get_users(db: Session) -> List[User]:
    """Get all users"""
    return db.query(User).order_by(User.created_at.desc(), User.id.desc()).all()

def create_user(db: Session, pi_user_id: str, username: Optional[str] = None) -> User:
    """Create new user"""
    try:
        db_user = User(pi_user_id=pi_user_id, username=username)

        db.add(db_user)
        db.commit()
        db.refresh(db_user)

        logger.info(f"Created new user: {pi_user_id}")
        return db_user

    except Exception as e:
        logger.error(f"Error creating user: {e}")
        db.rollback()
        raise e
