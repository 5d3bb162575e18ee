"""
Sales module package exports.

Always available (no Qt needed):
- pricing functions, SaleComposer, SaleState, LineItem, DraftSale
- ReceiptRenderer, receipt_filename

Optional UI components (imported defensively so environments
without Qt can still import this package):
- SalesController
- SaleView
- LineItemsModel
"""

from . import pricing
from .composer import (
    CatalogStore,
    DraftSale,
    LineItem,
    ProductMatches,
    SaleComposer,
    SaleState,
    SalesLedger,
)
from .receipt import ReceiptRenderer, receipt_filename

# UI pieces are optional to avoid a hard Qt dependency during headless use
try:
    from .controller import SalesController  # type: ignore
    from .view import SaleView  # type: ignore
    from .model import LineItemsModel  # type: ignore
except ImportError:  # pragma: no cover
    SalesController = None  # type: ignore
    SaleView = None  # type: ignore
    LineItemsModel = None  # type: ignore

__all__ = [
    "pricing",
    "CatalogStore",
    "DraftSale",
    "LineItem",
    "ProductMatches",
    "SaleComposer",
    "SaleState",
    "SalesLedger",
    "ReceiptRenderer",
    "receipt_filename",
    "SalesController",
    "SaleView",
    "LineItemsModel",
]
