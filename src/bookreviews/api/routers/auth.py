"""Auth API router: signup, login and the current-user profile."""

from fastapi import APIRouter, Depends

from ...auth.manager import AuthManager
from ...auth.schemas import LoginRequest, SignupRequest, TokenResponse, UserProfile
from ..deps import get_actor_id, get_auth_manager

router = APIRouter()


@router.post("/signup", response_model=TokenResponse)
def signup(
    data: SignupRequest,
    auth: AuthManager = Depends(get_auth_manager),
) -> TokenResponse:
    """Register a new user."""
    return auth.signup(data)


@router.post("/login", response_model=TokenResponse)
def login(
    data: LoginRequest,
    auth: AuthManager = Depends(get_auth_manager),
) -> TokenResponse:
    """Authenticate a user and get a token."""
    return auth.login(data)


@router.get("/me", response_model=UserProfile)
def current_user(
    actor_id: str = Depends(get_actor_id),
    auth: AuthManager = Depends(get_auth_manager),
) -> UserProfile:
    """The authenticated user with their books and reviews."""
    return auth.get_profile(actor_id)
