from typing import Any


class LedgerError(Exception):
    """Base for every reason a ledger operation aborts."""

    status_code = 400
    kind = "ledger_error"

    def __init__(self, detail: Any):
        super().__init__(detail)
        self.detail = detail


class NotFound(LedgerError):
    status_code = 404
    kind = "not_found"


class Unauthorized(LedgerError):
    status_code = 403
    kind = "unauthorized"


class InvalidState(LedgerError):
    status_code = 409
    kind = "invalid_state"


class InvalidInput(LedgerError):
    status_code = 400
    kind = "invalid_input"


class TransferFailure(LedgerError):
    status_code = 502
    kind = "transfer_failure"
