"""
FAISS Product Index

This module implements the persistent nearest-neighbour index over embedded
catalog rows. The index is written by the offline ingestion script and only
read by the serving path.

Key Properties
--------------
- Explicit ID management via IndexIDMap2
- Cosine similarity (inner product over L2-normalized vectors)
- Persistence as a FAISS file plus JSON metadata
- Thread-safe through an internal lock
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from threading import RLock
from typing import List, Tuple, Dict, Optional, Sequence

import faiss
import numpy as np

from .models import IndexedProduct
from ..config import settings

logger = logging.getLogger("mcp.vector")


# ---------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------

class VectorIndexError(RuntimeError):
    """Base error for vector index failures."""


class VectorIndexUnavailableError(VectorIndexError):
    """Raised when searching an index that was never built or loaded."""


class VectorPersistenceError(VectorIndexError):
    """Raised when index persistence fails."""


# ---------------------------------------------------------------------
# FAISS Index Wrapper
# ---------------------------------------------------------------------

class ProductVectorIndex:
    """
    Persistent FAISS index of catalog rows.
    """

    def __init__(
        self,
        index_path: Optional[str] = None,
        meta_path: Optional[str] = None,
    ) -> None:
        """
        Parameters
        ----------
        index_path : Optional[str]
            FAISS index file. Defaults to settings.vector_index_path.

        meta_path : Optional[str]
            JSON metadata file. Defaults to settings.vector_meta_path.
        """
        self._index_path = index_path or settings.vector_index_path
        self._meta_path = meta_path or settings.vector_meta_path

        self._index: Optional[faiss.IndexIDMap2] = None
        self._products: Dict[int, IndexedProduct] = {}
        self._next_id: int = 0

        self._lock = RLock()

    # ------------------------------------------------------------------
    # Internal Helpers
    # ------------------------------------------------------------------

    def _init_index(self, dim: int) -> None:
        base = faiss.IndexFlatIP(dim)
        self._index = faiss.IndexIDMap2(base)

    def _validate_embeddings(
        self,
        embeddings: Sequence[Sequence[float]],
        products: Sequence[IndexedProduct],
    ) -> None:
        if not embeddings:
            raise VectorIndexError("Cannot add empty embedding list.")

        if len(embeddings) != len(products):
            raise VectorIndexError(
                "Embedding count does not match product count."
            )

        dim = len(embeddings[0])
        if dim == 0:
            raise VectorIndexError("Embedding vectors must be non-empty.")

        if self._index is not None and self._index.d != dim:
            raise VectorIndexError(
                f"Embedding dimensionality {dim} does not match index ({self._index.d})."
            )

        for i, emb in enumerate(embeddings):
            if len(emb) != dim:
                raise VectorIndexError(
                    f"Inconsistent embedding dimensionality at index {i}."
                )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def is_ready(self) -> bool:
        with self._lock:
            return self._index is not None and bool(self._products)

    def __len__(self) -> int:
        with self._lock:
            return len(self._products)

    def add_products(
        self,
        products: Sequence[IndexedProduct],
        embeddings: Sequence[Sequence[float]],
    ) -> None:
        """
        Add products and their embeddings to the index.
        """
        if not products:
            return

        with self._lock:
            self._validate_embeddings(embeddings, products)

            if self._index is None:
                self._init_index(len(embeddings[0]))

            ids = np.arange(
                self._next_id,
                self._next_id + len(products),
                dtype="int64",
            )

            vectors = np.asarray(embeddings, dtype="float32")
            faiss.normalize_L2(vectors)

            try:
                self._index.add_with_ids(vectors, ids)
            except Exception as exc:
                raise VectorIndexError(
                    f"Failed to add vectors to FAISS: {type(exc).__name__}"
                ) from exc

            self._next_id += len(products)

            for i, product in zip(ids, products):
                self._products[int(i)] = product

    def rebuild(
        self,
        products: Sequence[IndexedProduct],
        embeddings: Sequence[Sequence[float]],
    ) -> None:
        """
        Fully replace the index with new products and embeddings.
        """
        with self._lock:
            self._index = None
            self._products.clear()
            self._next_id = 0
            self.add_products(products, embeddings)

    def search(
        self,
        query_emb: Sequence[float],
        k: Optional[int] = None,
    ) -> List[Tuple[IndexedProduct, float]]:
        """
        Return up to `k` nearest products as ranked (product, score) tuples.

        `k` defaults to settings.vector_search_k.

        Raises
        ------
        VectorIndexUnavailableError
            If the index has not been built or loaded.
        """
        k = k or settings.vector_search_k

        with self._lock:
            if self._index is None or not self._products:
                raise VectorIndexUnavailableError("Product vector index is not loaded.")

            if len(query_emb) != self._index.d:
                raise VectorIndexError(
                    f"Query dimensionality {len(query_emb)} does not match index ({self._index.d})."
                )

            q = np.asarray([query_emb], dtype="float32")
            faiss.normalize_L2(q)

            scores, idxs = self._index.search(q, k)

            results: List[Tuple[IndexedProduct, float]] = []

            for score, idx in zip(scores[0], idxs[0]):
                idx = int(idx)
                if idx == -1:
                    continue

                product = self._products.get(idx)
                if product is None:
                    continue

                results.append((product, float(score)))

            return results

    def get_stats(self) -> dict:
        """
        Return index statistics for diagnostics.
        """
        with self._lock:
            return {
                "status": "connected" if self.is_ready else "not_loaded",
                "total_vectors": self._index.ntotal if self._index else 0,
                "dimension": self._index.d if self._index else None,
            }

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self) -> None:
        """
        Persist both FAISS index and metadata to disk.
        """
        with self._lock:
            if self._index is None:
                return

            index_path = Path(self._index_path)
            meta_path = Path(self._meta_path)

            index_path.parent.mkdir(parents=True, exist_ok=True)

            try:
                faiss.write_index(self._index, str(index_path))
            except Exception as exc:
                raise VectorPersistenceError(
                    f"Failed to write FAISS index: {type(exc).__name__}"
                ) from exc

            meta = {
                "next_id": self._next_id,
                "products": {
                    str(k): v.model_dump()
                    for k, v in self._products.items()
                },
            }

            try:
                meta_path.parent.mkdir(parents=True, exist_ok=True)
                with meta_path.open("w", encoding="utf-8") as f:
                    json.dump(meta, f)
            except Exception as exc:
                raise VectorPersistenceError(
                    f"Failed to write FAISS metadata: {type(exc).__name__}"
                ) from exc

            logger.info(
                "Saved product index with %d vectors to %s",
                self._index.ntotal,
                index_path,
            )

    def load(self) -> bool:
        """
        Load index and metadata from disk if available.

        Returns
        -------
        bool
            True if an index was loaded.
        """
        with self._lock:
            index_path = Path(self._index_path)
            meta_path = Path(self._meta_path)

            if not index_path.exists() or not meta_path.exists():
                logger.warning("No product index found at %s", index_path)
                return False

            try:
                self._index = faiss.read_index(str(index_path))
            except Exception as exc:
                raise VectorPersistenceError(
                    f"Failed to read FAISS index: {type(exc).__name__}"
                ) from exc

            try:
                with meta_path.open("r", encoding="utf-8") as f:
                    data = json.load(f)

                self._next_id = int(data.get("next_id", 0))
                raw_map = data.get("products", {})

                self._products = {
                    int(k): IndexedProduct(**v)
                    for k, v in raw_map.items()
                }
            except Exception as exc:
                self._index = None
                self._products = {}
                raise VectorPersistenceError(
                    f"Failed to load FAISS metadata: {type(exc).__name__}"
                ) from exc

            logger.info(
                "Loaded product index with %d vectors from %s",
                self._index.ntotal,
                index_path,
            )
            return True
