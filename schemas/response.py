from typing import Any, Dict, Optional
from pydantic import BaseModel

class APIResponse(BaseModel):
    success: bool
    message: Optional[str] = None
    data: Optional[Any] = None

def success_response(data: Any = None, message: str = None) -> Dict:
    """Create a success response"""
    return APIResponse(
        success=True,
        data=data,
        message=message
    ).model_dump(mode="json")

def error_response(message: str, data: Any = None) -> Dict:
    """Create an error response"""
    return APIResponse(
        success=False,
        message=message,
        data=data
    ).model_dump(mode="json")

def dump(schema, obj) -> Dict:
    """Serialize an ORM object through a response schema using camelCase keys"""
    return schema.model_validate(obj).model_dump(by_alias=True, mode="json")
