"""Dependency injection factory functions."""

from typing import Optional

from elasticsearch import AsyncElasticsearch

from app.adapters.outbound.cache.noop_search_cache import NoopSearchCache
from app.adapters.outbound.cache.redis_search_cache import RedisSearchCache
from app.adapters.outbound.catalog.csv_car_catalog_repository import CSVCarCatalogRepository
from app.adapters.outbound.catalog.in_memory_car_catalog_repository import (
    InMemoryCarCatalogRepository,
)
from app.adapters.outbound.catalog.postgres_car_catalog_repository import (
    PostgresCarCatalogRepository,
)
from app.adapters.outbound.llm.openai_llm_client import OpenAILLMClient
from app.adapters.outbound.rate_limit.noop_rate_limiter import NoopRateLimiter
from app.adapters.outbound.rate_limit.redis_rate_limiter import RedisRateLimiter
from app.adapters.outbound.search.elasticsearch_search_engine import ElasticsearchSearchEngine
from app.adapters.outbound.search.in_memory_search_engine import InMemorySearchEngine
from app.application.ports.car_catalog_repository import CarCatalogRepository
from app.application.ports.llm_client import LLMClient
from app.application.ports.rate_limiter import RateLimiter
from app.application.ports.search_cache import SearchCache
from app.application.ports.search_engine import SearchEngine
from app.application.use_cases.ai_search_cars import AiSearchCars
from app.application.use_cases.autocomplete_car_names import AutocompleteCarNames
from app.application.use_cases.chat_about_cars import ChatAboutCars
from app.application.use_cases.compare_cars import CompareCars
from app.application.use_cases.get_search_facets import GetSearchFacets
from app.application.use_cases.normalize_search_request import QueryNormalizer
from app.application.use_cases.parse_natural_language_query import NaturalLanguageQueryParser
from app.application.use_cases.recommend_cars import RecommendCars
from app.application.use_cases.search_cars import SearchCars
from app.infrastructure.config.settings import settings
from app.infrastructure.logging.logger import log_event, logger


def create_car_catalog_repository() -> CarCatalogRepository:
    """
    Factory function to create car catalog repository.

    Returns:
        CarCatalogRepository instance
    """
    if settings.catalog_repository == "postgres":
        if not settings.database_url:
            raise ValueError("DATABASE_URL is required when CATALOG_REPOSITORY=postgres")
        return PostgresCarCatalogRepository()
    if settings.catalog_repository == "in_memory":
        return InMemoryCarCatalogRepository()
    return CSVCarCatalogRepository(settings.catalog_csv_path or None)


def create_elasticsearch_client() -> AsyncElasticsearch:
    """
    Factory function to create the async Elasticsearch client.

    Returns:
        AsyncElasticsearch instance
    """
    es_kwargs = {
        "hosts": [settings.elasticsearch_url],
        "request_timeout": settings.elasticsearch_timeout_seconds,
        "max_retries": 0,
    }
    if settings.elasticsearch_username and settings.elasticsearch_password:
        es_kwargs["basic_auth"] = (settings.elasticsearch_username, settings.elasticsearch_password)
    return AsyncElasticsearch(**es_kwargs)


def create_search_engine(catalog_repository: CarCatalogRepository) -> SearchEngine:
    """
    Factory function to create search engine.

    Args:
        catalog_repository: Catalog scanned by the in-memory engine

    Returns:
        SearchEngine instance
    """
    if settings.search_backend == "elasticsearch":
        return ElasticsearchSearchEngine(create_elasticsearch_client(), settings.elasticsearch_index)
    return InMemorySearchEngine(catalog_repository)


def create_llm_client() -> Optional[LLMClient]:
    """
    Factory function to create LLM client if enabled.

    Returns:
        LLMClient instance if enabled, None otherwise
    """
    if not settings.llm_enabled:
        return None

    try:
        return OpenAILLMClient()
    except ValueError as e:
        # Missing API key: use cases fall back to deterministic behavior
        logger.warning(f"LLM disabled: {str(e)}")
        return None


def create_search_cache() -> SearchCache:
    """
    Factory function to create search cache.

    Returns:
        SearchCache instance (Redis or no-op)
    """
    if not settings.search_cache_enabled or not settings.redis_url:
        return NoopSearchCache()
    return RedisSearchCache(settings.redis_url)


def create_rate_limiter() -> RateLimiter:
    """
    Factory function to create rate limiter.

    Returns:
        RateLimiter instance (Redis or no-op)
    """
    if not settings.rate_limit_enabled or not settings.redis_url:
        return NoopRateLimiter()
    return RedisRateLimiter(settings.redis_url, settings.rate_limit_per_minute)


def create_query_normalizer() -> QueryNormalizer:
    """Factory function to create query normalizer."""
    return QueryNormalizer(
        default_page_size=settings.default_page_size,
        max_page_size=settings.max_page_size,
    )


def create_search_cars_use_case(
    catalog_repository: CarCatalogRepository, search_engine: SearchEngine
) -> SearchCars:
    """
    Factory function to create SearchCars with dependencies.

    Returns:
        SearchCars instance
    """
    return SearchCars(
        catalog_repository,
        search_engine,
        normalizer=create_query_normalizer(),
        search_cache=create_search_cache(),
        cache_ttl_seconds=settings.search_cache_ttl_seconds,
        logger=log_event,
    )


def create_get_search_facets_use_case(
    catalog_repository: CarCatalogRepository, search_engine: SearchEngine
) -> GetSearchFacets:
    """Factory function to create GetSearchFacets with dependencies."""
    return GetSearchFacets(catalog_repository, search_engine, normalizer=create_query_normalizer())


def create_autocomplete_use_case(search_engine: SearchEngine) -> AutocompleteCarNames:
    """Factory function to create AutocompleteCarNames with dependencies."""
    return AutocompleteCarNames(
        search_engine,
        default_size=settings.autocomplete_default_size,
        max_size=settings.autocomplete_max_size,
        logger=log_event,
    )


def create_ai_search_use_case(
    catalog_repository: CarCatalogRepository,
    search_engine: SearchEngine,
    llm_client: Optional[LLMClient],
) -> AiSearchCars:
    """
    Factory function to create AiSearchCars with dependencies.

    Returns:
        AiSearchCars instance
    """
    parser = NaturalLanguageQueryParser(
        llm_client, timeout_seconds=settings.llm_call_timeout_seconds, logger=log_event
    )
    recommender = RecommendCars(
        llm_client, timeout_seconds=settings.llm_call_timeout_seconds, logger=log_event
    )
    return AiSearchCars(
        catalog_repository,
        search_engine,
        parser,
        recommender,
        result_limit=settings.ai_search_result_limit,
    )


def create_compare_cars_use_case(
    search_engine: SearchEngine, llm_client: Optional[LLMClient]
) -> CompareCars:
    """Factory function to create CompareCars with dependencies."""
    return CompareCars(
        search_engine,
        llm_client,
        timeout_seconds=settings.llm_call_timeout_seconds,
        logger=log_event,
    )


def create_chat_use_case(llm_client: Optional[LLMClient]) -> ChatAboutCars:
    """Factory function to create ChatAboutCars with dependencies."""
    return ChatAboutCars(
        llm_client,
        timeout_seconds=settings.llm_call_timeout_seconds,
        logger=log_event,
    )
