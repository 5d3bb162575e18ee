"""
Sales history package exports.

- filter_sales / summarize / SalesSummary: plain helpers, no Qt needed.
- HistoryController: list, search, receipt and delete screen.
"""

from .summary import SalesSummary, filter_sales, sale_matches, summarize

try:
    from .controller import HistoryController  # type: ignore
except ImportError:  # pragma: no cover
    HistoryController = None  # type: ignore

__all__ = [
    "SalesSummary",
    "filter_sales",
    "sale_matches",
    "summarize",
    "HistoryController",
]
