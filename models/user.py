from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, DateTime, Numeric
from db.base import Base

def utc_now() -> datetime:
    return datetime.now(timezone.utc)

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    pi_user_id = Column(String(255), unique=True, nullable=False, index=True)
    username = Column(String(255), nullable=True)
    # Counters are declared but no operation updates them yet
    total_earnings = Column(Numeric(12, 2, asdecimal=False), nullable=False, default=0)
    total_sales = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
