"""SQLAlchemy Outlet Repository Implementation"""

from typing import Optional
from datetime import datetime
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.outlet_repository import OutletRepository
from src.domain.outlet import Outlet


class SqlAlchemyOutletRepository(OutletRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, outlet_id: int, for_update: bool = False) -> Optional[Outlet]:
        stmt = select(Outlet).where(Outlet.id == outlet_id)
        if for_update:
            stmt = stmt.with_for_update()
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, outlet: Outlet) -> Outlet:
        self.session.add(outlet)
        await self.session.flush()
        await self.session.refresh(outlet)
        return outlet

    async def update(self, outlet: Outlet) -> Outlet:
        outlet.updated_at = datetime.utcnow()
        self.session.add(outlet)
        await self.session.flush()
        await self.session.refresh(outlet)
        return outlet
