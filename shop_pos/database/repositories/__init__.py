# shop_pos/database/repositories/__init__.py
"""
Repository layer public API.

Usage:
    from shop_pos.database.repositories import (
        # Catalog
        ProductsRepo, Product, Unit,
        # Sales ledger
        SalesRepo, FinalizedSale, FinalizedSaleInput, LineItemSnapshot,
        # Shop settings
        ShopProfileRepo, ShopProfile,
    )
"""

# ---------------- Products -----------------
from .products_repo import ProductsRepo, Product, Unit

# ------------------ Sales ------------------
from .sales_repo import SalesRepo, FinalizedSale, FinalizedSaleInput, LineItemSnapshot

# ---------------- Settings -----------------
from .profile_repo import ShopProfileRepo, ShopProfile

__all__ = [
    # products_repo
    "ProductsRepo",
    "Product",
    "Unit",
    # sales_repo
    "SalesRepo",
    "FinalizedSale",
    "FinalizedSaleInput",
    "LineItemSnapshot",
    # profile_repo
    "ShopProfileRepo",
    "ShopProfile",
]
