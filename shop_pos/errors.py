"""
Error taxonomy shared by repositories, the sale composer and the UI.

Everything derives from DomainError so controllers can catch one type per
action and show the message inline. IndexError (built-in) is used as-is for
line-item index misuse.
"""


class DomainError(Exception):
    """Domain-level error the controller/UI can surface (message box)."""
    pass


class ValidationError(DomainError, ValueError):
    """User input violates a contract; nothing was changed."""
    pass


class SaleStateError(DomainError):
    """Operation is not allowed in the sale's current state."""
    pass


class StoreError(DomainError):
    """The catalog/profile store could not be read or written."""
    pass


class LedgerError(StoreError):
    """The sales ledger rejected or failed to persist a sale."""
    pass


class ReceiptError(DomainError):
    """Receipt template missing or the PDF backend is unavailable."""
    pass
