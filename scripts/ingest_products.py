"""
Build the product vector index from the catalog CSV.

Embeds "<productName> | <brand> | <model> | <variant>" for every catalog row
in batches, retrying a failed batch with linear back-off, then writes the
FAISS index and its metadata to the configured paths.

Usage:
    python scripts/ingest_products.py [path/to/catalog.csv]
"""

import asyncio
import logging
import os
import sys
from typing import List, Sequence

# Ensure src is in pythonpath
sys.path.append(os.path.join(os.path.dirname(__file__), "..", "src"))

from dotenv import load_dotenv
load_dotenv()

from shopware_mcp_server.config import settings  # noqa: E402
from shopware_mcp_server.catalog.source import CsvCatalogSource, CatalogLoadError  # noqa: E402
from shopware_mcp_server.embeddings.embedder import Embedder, EmbeddingError  # noqa: E402
from shopware_mcp_server.embeddings.index import ProductVectorIndex  # noqa: E402
from shopware_mcp_server.embeddings.models import IndexedProduct  # noqa: E402

logger = logging.getLogger("mcp.ingest")

BATCH_SIZE = 50
MAX_ATTEMPTS = 3


async def embed_with_retry(
    embedder: Embedder,
    texts: Sequence[str],
    attempts: int = MAX_ATTEMPTS,
    backoff: float = 1.0,
) -> List[List[float]]:
    """
    Embed one batch, retrying up to `attempts` times.

    The wait before retry n is n * backoff seconds.
    """
    for attempt in range(1, attempts + 1):
        try:
            return await embedder.embed(texts, batch_size=len(texts))
        except EmbeddingError as exc:
            remaining = attempts - attempt
            logger.warning(
                "Embedding API error (%d retries left): %s", remaining, exc
            )
            if remaining == 0:
                raise
            await asyncio.sleep(backoff * attempt)

    raise EmbeddingError("Embedding failed without an attempt")


async def ingest(csv_path: str, batch_size: int = BATCH_SIZE) -> int:
    products = [
        IndexedProduct.from_record(record)
        for record in CsvCatalogSource(csv_path).load()
    ]
    if not products:
        logger.warning("Catalog %s is empty; nothing to index", csv_path)
        return 0

    embedder = Embedder()
    embeddings: List[List[float]] = []

    logger.info("Starting ingestion of %d products with batch size %d", len(products), batch_size)
    for start in range(0, len(products), batch_size):
        batch = products[start : start + batch_size]
        logger.info("Processing batch: rows %d-%d", start + 1, start + len(batch))
        embeddings.extend(
            await embed_with_retry(embedder, [p.embedding_text() for p in batch])
        )

    index = ProductVectorIndex()
    index.rebuild(products, embeddings)
    index.save()

    logger.info("Successfully ingested %d products into %s", len(products), settings.vector_index_path)
    return len(products)


def main() -> int:
    logging.basicConfig(level=settings.log_level.upper(), format="%(asctime)s %(name)s %(levelname)s %(message)s")
    csv_path = sys.argv[1] if len(sys.argv) > 1 else settings.catalog_csv_path

    try:
        asyncio.run(ingest(csv_path))
    except (CatalogLoadError, EmbeddingError) as exc:
        logger.error("Ingestion failed: %s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
