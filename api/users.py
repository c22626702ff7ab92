from fastapi import APIRouter, Depends, status

from api.deps import get_marketplace
from core.marketplace import MarketplaceService
from schemas.response import dump, success_response
from schemas.user import UserCreate, UserResponse

router = APIRouter(tags=["users"])

@router.post("/users", status_code=status.HTTP_201_CREATED)
def create_user(payload: UserCreate, service: MarketplaceService = Depends(get_marketplace)):
    """Create a user keyed by Pi user ID"""
    user = service.create_user(payload.pi_user_id, payload.username)
    return success_response(dump(UserResponse, user), "User created successfully")

@router.get("/create-test-user")
def create_test_user(service: MarketplaceService = Depends(get_marketplace)):
    """Seed a throwaway user"""
    user = service.create_test_user()
    return success_response(dump(UserResponse, user), "Test user created successfully")

@router.get("/users")
def list_users(service: MarketplaceService = Depends(get_marketplace)):
    """List all users"""
    users = service.list_users()
    return success_response(
        {"users": [dump(UserResponse, u) for u in users], "total": len(users)},
        "Users retrieved successfully",
    )
