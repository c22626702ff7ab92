import enum
from sqlalchemy import Column, Integer, String, Text, DateTime, Numeric, Enum
from db.base import Base
from models.user import utc_now

class NFTStatus(str, enum.Enum):
    AVAILABLE = "available"
    SOLD = "sold"
    PENDING = "pending"

class NFT(Base):
    __tablename__ = "nfts"

    id = Column(Integer, primary_key=True, index=True)
    token_id = Column(String(128), unique=True, nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    category = Column(String(100), nullable=False)
    price = Column(Numeric(12, 2, asdecimal=False), nullable=False)
    creator = Column(String(255), nullable=False)  # external user identifier, not a FK
    owner = Column(String(255), nullable=False)
    image_url = Column(Text, nullable=True)
    ipfs_hash = Column(String(255), nullable=True)
    status = Column(
        Enum(
            NFTStatus,
            name="nft_status",
            native_enum=False,
            create_constraint=True,
            validate_strings=True,
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
        default=NFTStatus.AVAILABLE,
        index=True,
    )
    views = Column(Integer, nullable=False, default=0)
    sold_at = Column(DateTime(timezone=True), nullable=True)
    sold_price = Column(Numeric(12, 2, asdecimal=False), nullable=True)
    transaction_id = Column(String(255), nullable=True)
    payment_id = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, index=True)
