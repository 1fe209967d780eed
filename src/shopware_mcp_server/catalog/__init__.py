"""
Catalog Package

Product records, the CSV catalog source and the in-memory catalog snapshot.
"""

from .models import ProductRecord, ProductView
from .source import CsvCatalogSource, CatalogLoadError
from .index import CatalogIndex

__all__ = [
    "ProductRecord",
    "ProductView",
    "CsvCatalogSource",
    "CatalogLoadError",
    "CatalogIndex",
]
