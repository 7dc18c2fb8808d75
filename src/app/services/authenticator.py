"""Authenticator Interface

Authentication lives outside the ledger; the API only needs an Actor to
stamp created_by on invoices and payments.
"""

from abc import ABC, abstractmethod
from typing import Optional
from pydantic import BaseModel


class Actor(BaseModel):
    """Authenticated caller"""

    id: str
    role: str = "staff"
    outlet_id: Optional[int] = None


class Authenticator(ABC):

    @abstractmethod
    async def authenticate(self, token: str) -> Optional[Actor]:
        """
        Resolve a bearer token

        Returns:
            Actor if the token is valid, None otherwise
        """
        pass
