"""Shop POS: catalog, sales with weight-based shipping, receipts and history."""

__version__ = "1.0.0"
