"""Command-line entrypoint that bulk-indexes the catalog into Elasticsearch.

Usage:
    car-catalog-sync-index
    python -m app.adapters.inbound.cli.sync_search_index
"""

import asyncio

from dotenv import load_dotenv

# Load environment variables from .env file before settings-dependent imports
load_dotenv()

from app.adapters.outbound.search.elasticsearch_search_engine import (  # noqa: E402
    ElasticsearchSearchEngine,
)
from app.application.ports.car_catalog_repository import CarCatalogRepository  # noqa: E402
from app.infrastructure.config.settings import settings  # noqa: E402
from app.infrastructure.logging.logger import log_event  # noqa: E402
from app.infrastructure.wiring.dependencies import (  # noqa: E402
    create_car_catalog_repository,
    create_elasticsearch_client,
)


async def sync_search_index(
    catalog_repository: CarCatalogRepository, search_engine: ElasticsearchSearchEngine
) -> int:
    """
    Copy the whole catalog into the search index.

    Args:
        catalog_repository: Source of truth for listings
        search_engine: Elasticsearch adapter to populate

    Returns:
        Number of listings indexed
    """
    listings = await catalog_repository.list_listings()
    indexed = await search_engine.reindex(listings)
    log_event("index_sync", catalog_size=len(listings), indexed=indexed)
    return indexed


async def _run() -> int:
    client = create_elasticsearch_client()
    try:
        engine = ElasticsearchSearchEngine(client, settings.elasticsearch_index)
        return await sync_search_index(create_car_catalog_repository(), engine)
    finally:
        await client.close()


def main() -> None:
    """Run the sync once."""
    asyncio.run(_run())


if __name__ == "__main__":
    main()
