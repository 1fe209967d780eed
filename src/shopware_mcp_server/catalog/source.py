"""
Catalog Source

Loads the product catalog snapshot from a delimited file at process start.

The load is synchronous and one-shot. Any problem with the file (missing,
unreadable, wrong columns) raises `CatalogLoadError` so the process refuses
to serve traffic instead of running with a partial catalog.
"""

from __future__ import annotations

import csv
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .models import ProductRecord

logger = logging.getLogger("mcp.catalog")


REQUIRED_COLUMNS = (
    "productNumber",
    "productName",
    "vehicleBrand",
    "vehicleModel",
    "vehicleVariant",
)


class CatalogLoadError(RuntimeError):
    """Raised when the catalog snapshot is missing or malformed."""


class CsvCatalogSource:
    """
    Catalog source backed by a CSV file with a header row.
    """

    def __init__(self, path: Union[str, Path], delimiter: str = ",") -> None:
        self.path = Path(path)
        self.delimiter = delimiter

    def load(self) -> List[ProductRecord]:
        """
        Read and validate every row of the CSV file.

        Returns
        -------
        List[ProductRecord]
            Records in file order.

        Raises
        ------
        CatalogLoadError
            If the file is missing, cannot be decoded, lacks a required column,
            or has a row with too few or too many fields.
        """
        if not self.path.is_file():
            logger.error("CSV file not found at %s", self.path)
            raise CatalogLoadError(f"CSV file not found at {self.path}")

        try:
            # utf-8-sig drops a leading BOM if the export carries one
            with self.path.open("r", encoding="utf-8-sig", newline="") as f:
                reader = csv.DictReader(f, delimiter=self.delimiter)
                if reader.fieldnames is None:
                    raise CatalogLoadError(f"CSV file {self.path} has no header row")

                reader.fieldnames = [name.strip() for name in reader.fieldnames]
                missing = [c for c in REQUIRED_COLUMNS if c not in reader.fieldnames]
                if missing:
                    raise CatalogLoadError(
                        f"CSV file {self.path} is missing column(s): {', '.join(missing)}"
                    )

                products: List[ProductRecord] = []
                for row in reader:
                    if self._is_blank(row):
                        continue
                    self._check_shape(row, reader.line_num)
                    products.append(self._to_record(row))
        except (OSError, UnicodeDecodeError, csv.Error) as exc:
            logger.error("Failed to parse CSV file %s: %s", self.path, exc)
            raise CatalogLoadError(f"Failed to parse CSV file {self.path}") from exc

        logger.info("Loaded %d products from %s", len(products), self.path)
        return products

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _clean(value: Optional[str]) -> str:
        if value is None:
            return ""
        return value.strip()

    @staticmethod
    def _is_blank(row: Dict[Optional[str], Any]) -> bool:
        # Overflow cells are collected in a list under the None key
        for value in row.values():
            cells = value if isinstance(value, list) else [value]
            if any(cell is not None and cell.strip() for cell in cells):
                return False
        return True

    def _check_shape(self, row: Dict[Optional[str], Any], line_num: int) -> None:
        if None in row:
            raise CatalogLoadError(
                f"CSV file {self.path} line {line_num}: too many fields"
            )

        # Short rows are padded with None by DictReader
        short = [name for name, value in row.items() if value is None]
        if short:
            raise CatalogLoadError(
                f"CSV file {self.path} line {line_num}: missing value(s) for {', '.join(short)}"
            )

    @classmethod
    def _to_record(cls, row: Dict[Optional[str], Any]) -> ProductRecord:
        return ProductRecord(
            product_number=cls._clean(row.get("productNumber")),
            product_name=cls._clean(row.get("productName")),
            vehicle_brand=cls._clean(row.get("vehicleBrand")),
            vehicle_model=cls._clean(row.get("vehicleModel")),
            vehicle_variant=cls._clean(row.get("vehicleVariant")),
        )
