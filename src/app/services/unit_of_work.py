"""Unit of Work Interface

A single database transaction spanning every repository that shares the
same session.
"""

from abc import ABC, abstractmethod


class UnitOfWork(ABC):
    """
    Abstract unit of work

    Leaving the context without commit rolls back whatever was staged.
    """

    async def __aenter__(self):
        await self.begin()
        return self

    async def __aexit__(self, *args):
        await self.rollback()

    @abstractmethod
    async def begin(self):
        pass

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass
