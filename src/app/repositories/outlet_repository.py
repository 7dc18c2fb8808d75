"""Outlet Repository Interface

Defines the contract for outlet persistence operations.
"""

from abc import ABC, abstractmethod
from typing import Optional
from src.domain.outlet import Outlet


class OutletRepository(ABC):
    """Repository interface for Outlet persistence"""

    @abstractmethod
    async def get_by_id(self, outlet_id: int, for_update: bool = False) -> Optional[Outlet]:
        """
        Retrieve outlet by ID

        Args:
            outlet_id: Outlet ID
            for_update: If True, lock the row with SELECT FOR UPDATE

        Returns:
            Outlet if found, None otherwise
        """
        pass

    @abstractmethod
    async def create(self, outlet: Outlet) -> Outlet:
        pass

    @abstractmethod
    async def update(self, outlet: Outlet) -> Outlet:
        pass
