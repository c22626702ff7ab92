from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Optional
from datetime import datetime

from models.nft import NFTStatus

class NFTCreate(BaseModel):
    """Validated mint input"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: str
    description: str
    category: str
    price: float
    creator: str

class NFTResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: int
    token_id: str
    title: str
    description: str
    category: str
    price: float
    creator: str
    owner: str
    image_url: Optional[str]
    ipfs_hash: Optional[str]
    status: NFTStatus
    views: int
    sold_at: Optional[datetime]
    sold_price: Optional[float]
    transaction_id: Optional[str]
    payment_id: Optional[str]
    created_at: datetime

class MintedNFTResponse(BaseModel):
    """Mint result; status is implied (always available) and left out"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    token_id: str
    title: str
    description: str
    category: str
    price: float
    creator: str
    owner: str
    image_url: Optional[str]
    ipfs_hash: Optional[str]
    created_at: datetime
