from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Optional
from datetime import datetime

class UserCreate(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    # Presence is checked by core.validation so the error message matches the other endpoints
    pi_user_id: Optional[str] = None
    username: Optional[str] = None

class UserResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: int
    pi_user_id: str
    username: Optional[str]
    total_earnings: float
    total_sales: int
    created_at: datetime
