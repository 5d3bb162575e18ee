"""
Product module package exports.

- ProductController: orchestrates catalog CRUD for the current shop.
- ProductView / ProductForm / ProductsTableModel: UI pieces.
"""

from .controller import ProductController
from .view import ProductView
from .form import ProductForm
from .model import ProductsTableModel

__all__ = [
    "ProductController",
    "ProductView",
    "ProductForm",
    "ProductsTableModel",
]
