"""
Commitment Endpoints.

CRUD for fund commitments plus lookups by commitment type and status.
"""

from typing import List

from fastapi import APIRouter, HTTPException, status

from housing_dashboard.core.database.entities import Commitment, CommitmentStatus, CommitmentType
from housing_dashboard.core.database.schemas.base import MessageResponse
from housing_dashboard.core.database.schemas.commitments import CommitmentCreate, CommitmentRead, CommitmentUpdate
from housing_dashboard.server.services.deps import AdminDep, CurrentUserDep, ReposDep, WriterDep

from .common import enum_value

router = APIRouter()


async def _get_or_404(repos: ReposDep, commitment_id: str) -> Commitment:
    commitment = await repos.commitments.get_by_id(commitment_id)
    if commitment is None:
        raise HTTPException(status_code=404, detail="Commitment not found")
    return commitment


@router.get("", response_model=List[CommitmentRead], summary="List Commitments")
async def list_commitments(repos: ReposDep, _: CurrentUserDep) -> List[Commitment]:
    """All commitments, most recent commitment date first."""
    return await repos.commitments.list_latest_first()


@router.get(
    "/type/{commitment_type}",
    response_model=List[CommitmentRead],
    summary="Commitments By Type",
    responses={400: {"description": "Invalid commitment type"}},
)
async def list_by_type(commitment_type: str, repos: ReposDep, _: CurrentUserDep) -> List[Commitment]:
    return await repos.commitments.list_by_type(enum_value(commitment_type, CommitmentType, "commitment type"))


@router.get(
    "/status/{commitment_status}",
    response_model=List[CommitmentRead],
    summary="Commitments By Status",
    responses={400: {"description": "Invalid commitment status"}},
)
async def list_by_status(commitment_status: str, repos: ReposDep, _: CurrentUserDep) -> List[Commitment]:
    return await repos.commitments.list_by_status(enum_value(commitment_status, CommitmentStatus, "commitment status"))


@router.get(
    "/{commitment_id}",
    response_model=CommitmentRead,
    summary="Get Commitment",
    responses={404: {"description": "Commitment not found"}},
)
async def get_commitment(commitment_id: str, repos: ReposDep, _: CurrentUserDep) -> Commitment:
    return await _get_or_404(repos, commitment_id)


@router.post("", response_model=CommitmentRead, status_code=status.HTTP_201_CREATED, summary="Create Commitment")
async def create_commitment(commitment_in: CommitmentCreate, repos: ReposDep, _: WriterDep) -> Commitment:
    return await repos.commitments.create(Commitment(**commitment_in.model_dump()))


@router.put(
    "/{commitment_id}",
    response_model=CommitmentRead,
    summary="Update Commitment",
    responses={404: {"description": "Commitment not found"}},
)
async def update_commitment(
    commitment_id: str, commitment_in: CommitmentUpdate, repos: ReposDep, _: WriterDep
) -> Commitment:
    commitment = await _get_or_404(repos, commitment_id)
    for field, value in commitment_in.model_dump(exclude_unset=True).items():
        setattr(commitment, field, value)
    return await repos.commitments.update(commitment)


@router.delete(
    "/{commitment_id}",
    response_model=MessageResponse,
    summary="Delete Commitment",
    responses={404: {"description": "Commitment not found"}},
)
async def delete_commitment(commitment_id: str, repos: ReposDep, _: AdminDep) -> MessageResponse:
    if not await repos.commitments.delete(commitment_id):
        raise HTTPException(status_code=404, detail="Commitment not found")
    return MessageResponse(message="Commitment deleted successfully")
