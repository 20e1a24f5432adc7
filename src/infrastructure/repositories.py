"""
Repository Pattern -- abstracts DB access so domain logic stays DB-agnostic.

Each repository receives an ``AsyncSession`` (unit-of-work) and exposes
domain-relevant queries only.  Distance math is *not* done in SQL; the
routes hand the rows to ``src.domain.proximity``.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import AutismCenterModel
from src.domain.enums import LocationType


class AutismCenterRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_center(
        self,
        *,
        name: str,
        type: LocationType,
        address: str,
        latitude: float,
        longitude: float,
        phone: str | None = None,
        website: str | None = None,
        email: str | None = None,
        description: str | None = None,
        services: list[str] | None = None,
        age_groups: list[str] | None = None,
        insurance_accepted: list[str] | None = None,
        rating: float | None = None,
        verified: bool = False,
    ) -> AutismCenterModel:
        center = AutismCenterModel(
            name=name,
            type=type,
            address=address,
            latitude=latitude,
            longitude=longitude,
            phone=phone,
            website=website,
            email=email,
            description=description,
            services=services or [],
            age_groups=age_groups or [],
            insurance_accepted=insurance_accepted or [],
            rating=rating,
            verified=verified,
        )
        self.session.add(center)
        await self.session.flush()
        await self.session.refresh(center)
        return center

    async def get_by_id(self, center_id: int) -> Optional[AutismCenterModel]:
        return await self.session.get(AutismCenterModel, center_id)

    async def list_centers(
        self, type: LocationType | None = None, limit: int | None = None
    ) -> list[AutismCenterModel]:
        """Newest first, optionally filtered by type."""
        query = select(AutismCenterModel).order_by(
            AutismCenterModel.created_at.desc(), AutismCenterModel.id.desc()
        )
        if type is not None:
            query = query.where(AutismCenterModel.type == type)
        if limit is not None:
            query = query.limit(limit)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def search(self, term: str, limit: int = 50) -> list[AutismCenterModel]:
        """Case-insensitive substring match on name, address or description."""
        pattern = f"%{term.lower()}%"
        result = await self.session.execute(
            select(AutismCenterModel)
            .where(
                or_(
                    func.lower(AutismCenterModel.name).like(pattern),
                    func.lower(AutismCenterModel.address).like(pattern),
                    func.lower(AutismCenterModel.description).like(pattern),
                )
            )
            .order_by(AutismCenterModel.created_at.desc(), AutismCenterModel.id.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def count_by_type(self) -> dict[LocationType, int]:
        result = await self.session.execute(
            select(AutismCenterModel.type, func.count()).group_by(
                AutismCenterModel.type
            )
        )
        return {LocationType(t): n for t, n in result.all()}

    async def count_verified(self) -> tuple[int, int]:
        """Return ``(verified, unverified)``."""
        result = await self.session.execute(
            select(AutismCenterModel.verified, func.count()).group_by(
                AutismCenterModel.verified
            )
        )
        counts = {bool(v): n for v, n in result.all()}
        return counts.get(True, 0), counts.get(False, 0)
