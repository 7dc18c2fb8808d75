from fastapi import status
from libs.result import Error
from src.app import error_codes


class ClientError(Exception):
    """A use case error to be rendered as {"error": {"code", "message"}}"""

    def __init__(self, error: Error, status_code: int = status.HTTP_400_BAD_REQUEST):
        super().__init__(error.message)
        self.error = error
        self.status_code = status_code


def status_code_for(error: Error) -> int:
    """HTTP status of a ledger error code"""
    if error.code in error_codes.NOT_FOUND_CODES:
        return status.HTTP_404_NOT_FOUND
    if error.code in error_codes.BUSINESS_RULE_CODES:
        return status.HTTP_409_CONFLICT
    if error.code in (error_codes.TRANSACTION_FAILED, error_codes.RECONCILIATION_FAILED):
        return status.HTTP_500_INTERNAL_SERVER_ERROR
    return status.HTTP_400_BAD_REQUEST


def raise_for_error(error: Error) -> None:
    raise ClientError(error, status_code=status_code_for(error))
