"""File Storage Interface

Receipt images are stored outside the ledger transaction.
"""

from abc import ABC, abstractmethod
from typing import Optional


class FileStorage(ABC):
    """Stores raw bytes and returns a URL to fetch them back"""

    @abstractmethod
    async def store_file(
        self,
        content: bytes,
        filename: Optional[str] = None,
        content_type: Optional[str] = None,
    ) -> str:
        """
        Store a file

        Args:
            content: Raw file bytes
            filename: Optional original file name (used for the extension)
            content_type: Optional MIME type

        Returns:
            URL of the stored file

        Raises:
            Exception: Any storage failure; callers treat it as non-fatal
        """
        pass
