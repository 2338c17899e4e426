"""
Authentication endpoints.

Provide registration and login.  Login returns a bearer token that the
book write endpoints and ``/auth/me`` expect in the ``Authorization``
header.
"""

from fastapi import APIRouter, Depends, status

from bookshelf_api.app.api.deps import get_user_service
from bookshelf_api.app.core.exceptions import NotFoundError
from bookshelf_api.app.core.security import get_current_user_id
from bookshelf_api.app.schemas.user import Token, UserCreate, UserLogin, UserRead
from bookshelf_api.app.services.user_service import UserService


router = APIRouter()


@router.post("/register", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def register_user(
    user: UserCreate,
    service: UserService = Depends(get_user_service),
) -> UserRead:
    """Register a new user.

    Username and email must be unique.  The response never contains the
    password or its hash.
    """
    return await service.register(user)


@router.post("/login", response_model=Token)
async def login_user(
    credentials: UserLogin,
    service: UserService = Depends(get_user_service),
) -> Token:
    """Exchange email and password for a token valid for one hour."""
    return await service.login(credentials)


@router.get("/me", response_model=UserRead)
async def read_current_user(
    user_id: int = Depends(get_current_user_id),
    service: UserService = Depends(get_user_service),
) -> UserRead:
    """Return the account the presented token belongs to."""
    user = await service.get_user(user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user
