"""
User Management Endpoints.

Administrators manage accounts; every user may change their own password.
"""

from typing import List

from fastapi import APIRouter, HTTPException, status

from housing_dashboard.core.database.entities import User, UserRole
from housing_dashboard.core.database.schemas.base import MessageResponse
from housing_dashboard.core.database.schemas.users import PasswordChange, UserCreate, UserRead, UserUpdate
from housing_dashboard.core.logging_config import get_logger
from housing_dashboard.server.services.deps import AdminDep, CurrentUserDep, ReposDep
from housing_dashboard.server.services.security import hash_password, verify_password

logger = get_logger(__name__)
router = APIRouter()


async def _get_user_or_404(repos: ReposDep, user_id: str) -> User:
    user = await repos.users.get_by_id(user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.get("", response_model=List[UserRead], summary="List Users")
async def list_users(repos: ReposDep, _: AdminDep) -> List[User]:
    return await repos.users.list_all()


@router.get(
    "/{user_id}",
    response_model=UserRead,
    summary="Get User",
    responses={404: {"description": "User not found"}},
)
async def get_user(user_id: str, repos: ReposDep, _: CurrentUserDep) -> User:
    return await _get_user_or_404(repos, user_id)


@router.post(
    "",
    response_model=UserRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create User",
    responses={400: {"description": "User with this email already exists"}},
)
async def create_user(user_in: UserCreate, repos: ReposDep, _: AdminDep) -> User:
    if await repos.users.get_by_email(user_in.email):
        raise HTTPException(status_code=400, detail="User with this email already exists")
    user = User(
        first_name=user_in.first_name,
        last_name=user_in.last_name,
        email=user_in.email.lower(),
        password=hash_password(user_in.password),
        role=user_in.role,
    )
    return await repos.users.create(user)


@router.put(
    "/{user_id}",
    response_model=UserRead,
    summary="Update User",
    description="Partially update a user. Email addresses stay unique.",
    responses={400: {"description": "Email already in use"}, 404: {"description": "User not found"}},
)
async def update_user(user_id: str, user_in: UserUpdate, repos: ReposDep, _: AdminDep) -> User:
    user = await _get_user_or_404(repos, user_id)
    changes = user_in.model_dump(exclude_unset=True)

    if changes.get("email"):
        changes["email"] = changes["email"].lower()
        existing = await repos.users.get_by_email(changes["email"])
        if existing is not None and existing.id != user.id:
            raise HTTPException(status_code=400, detail="Email already in use")

    for field, value in changes.items():
        if value is not None:
            setattr(user, field, value)
    return await repos.users.update(user)


@router.put(
    "/{user_id}/change-password",
    response_model=MessageResponse,
    summary="Change Password",
    description="Change a password. Non-admins may only change their own and must confirm the current one.",
    responses={
        400: {"description": "Current password is incorrect"},
        403: {"description": "Not allowed to change this password"},
        404: {"description": "User not found"},
    },
)
async def change_password(
    user_id: str, payload: PasswordChange, repos: ReposDep, current_user: CurrentUserDep
) -> MessageResponse:
    is_admin = current_user.role == UserRole.ADMIN.value
    if current_user.id != user_id and not is_admin:
        raise HTTPException(status_code=403, detail="Access denied. You can only change your own password.")

    user = await _get_user_or_404(repos, user_id)
    if not is_admin:
        if not payload.current_password or not verify_password(payload.current_password, user.password):
            raise HTTPException(status_code=400, detail="Current password is incorrect")

    user.password = hash_password(payload.new_password)
    await repos.users.update(user)
    logger.info(f"Password changed for user {user.id}")
    return MessageResponse(message="Password updated successfully")


@router.delete(
    "/{user_id}",
    response_model=MessageResponse,
    summary="Delete User",
    responses={400: {"description": "You cannot delete your own account"}, 404: {"description": "User not found"}},
)
async def delete_user(user_id: str, repos: ReposDep, admin: AdminDep) -> MessageResponse:
    if admin.id == user_id:
        raise HTTPException(status_code=400, detail="You cannot delete your own account")
    if not await repos.users.delete(user_id):
        raise HTTPException(status_code=404, detail="User not found")
    return MessageResponse(message="User deleted successfully")
