"""
Commitment repository.
"""

from __future__ import annotations

from typing import Dict, List

from sqlalchemy import case, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.commitments import Commitment, CommitmentStatus
from .base import SqlRepository, as_float


class CommitmentRepository(SqlRepository[Commitment]):
    """Repository for commitment data access operations."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Commitment)

    async def list_latest_first(self) -> List[Commitment]:
        stmt = select(Commitment).order_by(Commitment.commitment_date.desc())
        return await self._all(stmt)

    async def list_by_type(self, commitment_type: str) -> List[Commitment]:
        stmt = (
            select(Commitment)
            .where(Commitment.commitment_type == commitment_type)
            .order_by(Commitment.commitment_date.desc())
        )
        return await self._all(stmt)

    async def list_by_status(self, status: str) -> List[Commitment]:
        stmt = select(Commitment).where(Commitment.status == status).order_by(Commitment.commitment_date.desc())
        return await self._all(stmt)

    async def totals(self) -> Dict[str, float]:
        """Aggregate commitment amounts.

        ``pending`` is the committed amount of commitments still ``planned``.
        """
        pending = case((Commitment.status == CommitmentStatus.PLANNED.value, Commitment.amount_committed), else_=0)
        stmt = select(
            func.sum(Commitment.amount_committed),
            func.sum(Commitment.amount_obligated),
            func.sum(Commitment.amount_expended),
            func.sum(pending),
        )
        result = await self.session.execute(stmt)
        total, obligated, expended, pending_total = result.one()
        return {
            "total": as_float(total),
            "obligated": as_float(obligated),
            "expended": as_float(expended),
            "pending": as_float(pending_total),
        }
