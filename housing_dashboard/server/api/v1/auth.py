"""
Authentication Endpoints.

Self-registration, login with email and password, and the profile of the
authenticated user.
"""

from fastapi import APIRouter, HTTPException, status

from housing_dashboard.core.database.base import utc_now
from housing_dashboard.core.database.entities import User
from housing_dashboard.core.database.schemas.users import LoginRequest, LoginResponse, RegisterRequest, UserRead
from housing_dashboard.core.logging_config import get_logger
from housing_dashboard.server.services.deps import CurrentUserDep, ReposDep, SettingsDep
from housing_dashboard.server.services.security import create_access_token, hash_password, verify_password

logger = get_logger(__name__)
router = APIRouter()


@router.post(
    "/register",
    response_model=UserRead,
    status_code=status.HTTP_201_CREATED,
    summary="Register User",
    description="Create a new user account.",
    responses={400: {"description": "User with this email already exists"}},
)
async def register(user_in: RegisterRequest, repos: ReposDep) -> User:
    if await repos.users.get_by_email(user_in.email):
        raise HTTPException(status_code=400, detail="User with this email already exists")

    user = User(
        first_name=user_in.first_name,
        last_name=user_in.last_name,
        email=user_in.email.lower(),
        password=hash_password(user_in.password),
        role=user_in.role,
    )
    user = await repos.users.create(user)
    logger.info(f"Registered user {user.id} ({user.role})")
    return user


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Log In",
    description="Exchange email and password for an access token.",
    responses={401: {"description": "Invalid email or password"}},
)
async def login(credentials: LoginRequest, repos: ReposDep, app_settings: SettingsDep) -> LoginResponse:
    """
    Log in.

    Verifies the credentials of an active user, records the login time and
    returns the user together with a signed bearer token.
    """
    user = await repos.users.get_by_email(credentials.email)
    if user is None or not user.is_active or not verify_password(credentials.password, user.password):
        logger.info("Rejected login attempt")
        raise HTTPException(status_code=401, detail="Invalid email or password")

    user.last_login = utc_now()
    user = await repos.users.update(user)
    token = create_access_token(user.id, user.email, user.role, app_settings.auth)
    return LoginResponse(user=UserRead.model_validate(user), token=token)


@router.get(
    "/profile",
    response_model=UserRead,
    summary="Current User",
    description="Retrieve the profile of the authenticated user.",
)
async def profile(user: CurrentUserDep) -> User:
    return user
