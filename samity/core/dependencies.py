from fastapi import HTTPException
from samity.services.ledger import (
    LedgerError,
    OverRepayment,
    InvalidAmount,
    UnknownMemberReference,
    ValidationError,
)

# Rejected ledger operations and the HTTP status each one maps to
LEDGER_ERROR_STATUS = {
    UnknownMemberReference: 404,
    ValidationError: 422,
    InvalidAmount: 400,
    OverRepayment: 400,
}


def ledger_http_exception(error: LedgerError) -> HTTPException:
    """Translate a rejected ledger operation into an HTTP error response."""
    for error_type, status_code in LEDGER_ERROR_STATUS.items():
        if isinstance(error, error_type):
            return HTTPException(status_code=status_code, detail=str(error))
    return HTTPException(status_code=400, detail=str(error))
