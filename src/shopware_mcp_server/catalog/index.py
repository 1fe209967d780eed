"""
In-Memory Catalog Index

An immutable snapshot of the product catalog. It is built once at startup and
injected into the match engine; request handling only ever reads from it, so
concurrent requests need no locking.
"""

from __future__ import annotations

from typing import Callable, Iterable, Iterator, List, Tuple

from .models import ProductRecord
from .source import CsvCatalogSource


class CatalogIndex:
    """
    Ordered, read-only collection of ProductRecord supporting linear scans.
    """

    def __init__(self, records: Iterable[ProductRecord]) -> None:
        self._records: Tuple[ProductRecord, ...] = tuple(records)

    @classmethod
    def from_source(cls, source: CsvCatalogSource) -> "CatalogIndex":
        return cls(source.load())

    @property
    def records(self) -> Tuple[ProductRecord, ...]:
        return self._records

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[ProductRecord]:
        return iter(self._records)

    def filter(self, predicate: Callable[[ProductRecord], bool]) -> List[ProductRecord]:
        """
        Return the records matching `predicate`, in catalog order.
        """
        return [record for record in self._records if predicate(record)]
