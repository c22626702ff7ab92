"""Request validation independent of the storage layer.

Each validator returns a ``ValidationResult``; callers decide how to report
failures (the service raises ``ValidationError``).
"""
import math
from dataclasses import dataclass, field
from typing import Any, List, Optional

from schemas.nft import NFTCreate

MINT_REQUIRED_FIELDS = ("title", "description", "price", "category")

@dataclass
class ValidationResult:
    errors: List[str] = field(default_factory=list)
    value: Any = None

    @property
    def ok(self) -> bool:
        return not self.errors

def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())

def validate_user_request(pi_user_id: Optional[str], username: Optional[str] = None) -> ValidationResult:
    """piUserId is required, username optional"""
    if _blank(pi_user_id):
        return ValidationResult(errors=["piUserId is required"])
    return ValidationResult(value={
        "pi_user_id": pi_user_id.strip(),
        "username": username.strip() if isinstance(username, str) and username.strip() else None,
    })

def validate_mint_request(
    title: Optional[str],
    description: Optional[str],
    price: Any,
    category: Optional[str],
    creator: Optional[str],
) -> ValidationResult:
    """Check mint fields and coerce price; value is an NFTCreate on success"""
    supplied = {"title": title, "description": description, "price": price, "category": category}
    missing = [name for name in MINT_REQUIRED_FIELDS if _blank(supplied[name])]
    if missing:
        return ValidationResult(errors=[f"Missing required fields: {', '.join(missing)}"])

    errors = []
    try:
        price_value = float(price)
    except (TypeError, ValueError):
        price_value = None
    if price_value is None or math.isnan(price_value) or math.isinf(price_value) or price_value <= 0:
        errors.append("price must be a positive number")
    if _blank(creator):
        errors.append("creator is required")
    if errors:
        return ValidationResult(errors=errors)

    return ValidationResult(value=NFTCreate(
        title=title.strip(),
        description=description.strip(),
        category=category.strip(),
        price=price_value,
        creator=creator.strip(),
    ))

def validate_image(content_type: Optional[str], size: int) -> ValidationResult:
    """Only non-empty image/* payloads are accepted"""
    if not content_type or not content_type.startswith("image/"):
        return ValidationResult(errors=["Only image files are allowed"])
    if size == 0:
        return ValidationResult(errors=["Image file is empty"])
    return ValidationResult()
