"""Elasticsearch search engine adapter.

Translates a CanonicalFilter into query DSL with the same semantics as the
in-memory engine: enum filters run against lowercase-normalized keyword
subfields, features are case-insensitive substring (wildcard) matches and
catalog order is kept through an indexed position.
"""

import math
from typing import Any, Iterable, Optional

from elasticsearch import ApiError, AsyncElasticsearch, NotFoundError, TransportError
from elasticsearch.helpers import BulkIndexError, async_bulk

from app.application.dtos.car import CarListing
from app.application.dtos.search import (
    AutocompleteSuggestion,
    CanonicalFilter,
    FacetBucket,
    FacetCounts,
    SearchPage,
)
from app.application.ports.search_engine import SearchEngine
from app.application.use_cases.listing_matcher import NATURAL_ORDER
from app.application.use_cases.search_text_analysis import FUZZY_PREFIX_LENGTH, SYNONYM_GROUPS
from app.domain.errors import ExternalServiceError
from app.domain.value_objects.price_band import PRICE_BANDS
from app.infrastructure.logging.logger import logger

TEXT_QUERY_FIELDS = ["name^3", "brand_name^2", "description", "body_type", "sub_body_type"]
TERM_BUCKET_SIZE = 100
# index.max_result_window default; from + size beyond it is rejected by the cluster
MAX_RESULT_WINDOW = 10_000
LONG_MAX = 2**63 - 1
INTEGER_MAX = 2**31 - 1
FLOAT_MAX = 3.4028234663852886e38

# Fields that exist only in the index document, never in CarListing
_INDEX_ONLY_FIELDS = ("catalog_position", "feature_text", "popularity_rank", "name_suggest")

_RAW_AND_NORMALIZED = {
    "raw": {"type": "keyword"},
    "normalized": {"type": "keyword", "normalizer": "lowercase_normalizer"},
}

INDEX_SETTINGS: dict[str, Any] = {
    "analysis": {
        "filter": {
            "car_synonyms": {
                "type": "synonym",
                "synonyms": [", ".join(group) for group in SYNONYM_GROUPS],
            }
        },
        "analyzer": {
            "car_analyzer": {
                "type": "custom",
                "tokenizer": "standard",
                "filter": ["lowercase", "asciifolding", "car_synonyms"],
            }
        },
        "normalizer": {
            "lowercase_normalizer": {"type": "custom", "filter": ["lowercase"]}
        },
    }
}

INDEX_MAPPINGS: dict[str, Any] = {
    "properties": {
        "id": {"type": "keyword"},
        "catalog_position": {"type": "integer"},
        "name": {"type": "text", "analyzer": "car_analyzer", "fields": _RAW_AND_NORMALIZED},
        "name_suggest": {"type": "completion", "analyzer": "simple"},
        "brand_id": {"type": "keyword"},
        "brand_name": {"type": "text", "analyzer": "car_analyzer", "fields": _RAW_AND_NORMALIZED},
        "body_type": {"type": "text", "analyzer": "car_analyzer", "fields": _RAW_AND_NORMALIZED},
        "sub_body_type": {"type": "text", "analyzer": "car_analyzer"},
        "fuel_types": {"type": "keyword", "fields": {"normalized": _RAW_AND_NORMALIZED["normalized"]}},
        "transmissions": {"type": "keyword", "fields": {"normalized": _RAW_AND_NORMALIZED["normalized"]}},
        "seating_capacity": {"type": "integer"},
        "price": {"type": "long"},
        "mileage": {"type": "float"},
        "is_new": {"type": "boolean"},
        "is_popular": {"type": "boolean"},
        "popular_rank": {"type": "integer"},
        "popularity_rank": {"type": "integer"},
        "launch_date": {"type": "keyword"},
        "key_features": {"type": "text"},
        "feature_text": {"type": "keyword"},
        "description": {"type": "text", "analyzer": "car_analyzer"},
    }
}


def _lowered(values: Iterable[str]) -> list[str]:
    return sorted({value.strip().lower() for value in values if value and value.strip()})


def _escape_wildcard(value: str) -> str:
    return value.replace("\\", "\\\\").replace("*", "\\*").replace("?", "\\?")


def filter_clauses(search_filter: CanonicalFilter) -> list[dict[str, Any]]:
    """
    Structured constraints of a filter as bool/filter clauses.

    Args:
        search_filter: Canonical filter

    Returns:
        Elasticsearch filter clauses (text query excluded)
    """
    clauses: list[dict[str, Any]] = []
    if search_filter.budget is not None:
        price_range: dict[str, int] = {"gte": min(search_filter.budget.lower, LONG_MAX)}
        if search_filter.budget.max is not None:
            price_range["lte"] = min(search_filter.budget.max, LONG_MAX)
        clauses.append({"range": {"price": price_range}})
    for values, field in (
        (search_filter.body_type, "body_type.normalized"),
        (search_filter.fuel_type, "fuel_types.normalized"),
        (search_filter.transmission, "transmissions.normalized"),
        (search_filter.brand, "brand_name.normalized"),
    ):
        if values:
            clauses.append({"terms": {field: _lowered(values)}})
    if search_filter.seating is not None:
        clauses.append({"range": {"seating_capacity": {"gte": min(search_filter.seating, INTEGER_MAX)}}})
    for feature in search_filter.features or []:
        if feature.strip():
            clauses.append(
                {
                    "wildcard": {
                        "feature_text": {
                            "value": f"*{_escape_wildcard(feature.strip().lower())}*",
                            "case_insensitive": True,
                        }
                    }
                }
            )
    if search_filter.is_new is not None:
        clauses.append({"term": {"is_new": search_filter.is_new}})
    if search_filter.is_popular is not None:
        clauses.append({"term": {"is_popular": search_filter.is_popular}})
    if search_filter.min_mileage is not None:
        clauses.append({"range": {"mileage": {"gte": min(search_filter.min_mileage, FLOAT_MAX)}}})
    return clauses


def text_query_clause(text_query: str) -> dict[str, Any]:
    """Fuzzy best-field match over the weighted text fields."""
    return {
        "multi_match": {
            "query": text_query,
            "fields": TEXT_QUERY_FIELDS,
            "type": "best_fields",
            "fuzziness": "AUTO",
            "prefix_length": FUZZY_PREFIX_LENGTH,
        }
    }


def _sort(search_filter: CanonicalFilter) -> list[Any]:
    if search_filter.sort_by:
        field = {"price": "price", "mileage": "mileage", "popularity": "popularity_rank"}[
            search_filter.sort_by
        ]
        order = search_filter.sort_order or NATURAL_ORDER[search_filter.sort_by]
        return [
            {field: {"order": order, "missing": "_last"}},
            {"_score": {"order": "desc"}},
            {"catalog_position": {"order": "asc"}},
        ]
    if search_filter.text_query:
        return [{"_score": {"order": "desc"}}, {"catalog_position": {"order": "asc"}}]
    return [{"catalog_position": {"order": "asc"}}]


def build_search_body(search_filter: CanonicalFilter, page: int, page_size: int) -> dict[str, Any]:
    """
    Build search keyword arguments for AsyncElasticsearch.search.

    Args:
        search_filter: Canonical filter
        page: 1-based page
        page_size: Hits per page

    Returns:
        Keyword arguments (query, sort, from_, size, track_total_hits).
        Pages beyond MAX_RESULT_WINDOW become a size-0 request that only
        counts, so they come back empty with the correct total.
    """
    bool_query: dict[str, Any] = {"filter": filter_clauses(search_filter)}
    if search_filter.text_query:
        bool_query["must"] = [text_query_clause(search_filter.text_query)]
    offset = (page - 1) * page_size
    size = max(0, min(page_size, MAX_RESULT_WINDOW - offset))
    return {
        "query": {"bool": bool_query},
        "sort": _sort(search_filter),
        "from_": offset if size else 0,
        "size": size,
        "track_total_hits": True,
    }


def _term_agg(search_filter: CanonicalFilter, dimension: str, field: str) -> dict[str, Any]:
    return {
        "filter": {"bool": {"filter": filter_clauses(search_filter.without(dimension))}},
        "aggs": {"buckets": {"terms": {"field": field, "size": TERM_BUCKET_SIZE}}},
    }


def build_facets_body(search_filter: CanonicalFilter) -> dict[str, Any]:
    """
    Build a size-0 request whose aggregations each drop their own dimension.

    Args:
        search_filter: Canonical filter

    Returns:
        Keyword arguments (query, size, aggs)
    """
    query: dict[str, Any] = {"match_all": {}}
    if search_filter.text_query:
        query = text_query_clause(search_filter.text_query)
    return {
        "query": query,
        "size": 0,
        "aggs": {
            "brands": _term_agg(search_filter, "brand", "brand_name.raw"),
            "body_types": _term_agg(search_filter, "body_type", "body_type.raw"),
            "fuel_types": _term_agg(search_filter, "fuel_type", "fuel_types"),
            "transmissions": _term_agg(search_filter, "transmission", "transmissions"),
            "seating_capacity": _term_agg(search_filter, "seating", "seating_capacity"),
            "price_ranges": {
                "filter": {"bool": {"filter": filter_clauses(search_filter.without("budget"))}},
                "aggs": {
                    "buckets": {
                        "range": {
                            "field": "price",
                            "keyed": False,
                            "ranges": [
                                {
                                    key: value
                                    for key, value in (
                                        ("key", band.key),
                                        ("from", band.lower),
                                        ("to", band.upper),
                                    )
                                    if value is not None
                                }
                                for band in PRICE_BANDS
                            ],
                        }
                    }
                },
            },
        },
    }


def build_document(listing: CarListing, position: int) -> dict[str, Any]:
    """
    Index document for a listing.

    Args:
        listing: Catalog listing
        position: Position in catalog order

    Returns:
        Document source
    """
    document = listing.model_dump()
    words = listing.name.split()
    document.update(
        {
            "catalog_position": position,
            "feature_text": listing.feature_text,
            "popularity_rank": listing.popular_rank if listing.is_popular else None,
            "name_suggest": {"input": [" ".join(words[index:]) for index in range(len(words))]},
        }
    )
    return document


def _listing_from_source(source: dict[str, Any]) -> CarListing:
    return CarListing.model_validate(
        {key: value for key, value in source.items() if key not in _INDEX_ONLY_FIELDS}
    )


def _term_buckets(aggregation: dict[str, Any]) -> list[FacetBucket]:
    buckets = [
        FacetBucket(key=str(bucket["key"]), count=bucket["doc_count"])
        for bucket in aggregation["buckets"]["buckets"]
        if bucket["doc_count"] > 0
    ]
    buckets.sort(key=lambda bucket: (-bucket.count, bucket.key.lower()))
    return buckets


class ElasticsearchSearchEngine(SearchEngine):
    """Search engine backed by an Elasticsearch index."""

    def __init__(self, client: AsyncElasticsearch, index_name: str = "car_listings") -> None:
        """
        Initialize Elasticsearch search engine.

        Args:
            client: Async Elasticsearch client (timeouts configured on the client)
            index_name: Index holding listing documents
        """
        self._client = client
        self._index_name = index_name

    async def search(self, search_filter: CanonicalFilter, page: int, page_size: int) -> SearchPage:
        """
        Run a filtered, ranked search.

        Raises:
            ExternalServiceError: If the index is unavailable
        """
        try:
            response = await self._client.search(
                index=self._index_name, **build_search_body(search_filter, page, page_size)
            )
        except (ApiError, TransportError) as e:
            logger.error(f"Elasticsearch search failed: {str(e)}")
            raise ExternalServiceError("elasticsearch", "Search index unavailable") from e

        total = response["hits"]["total"]["value"]
        hits = [_listing_from_source(hit["_source"]) for hit in response["hits"]["hits"]]
        return SearchPage(
            hits=hits,
            total=total,
            page=page,
            page_size=page_size,
            total_pages=math.ceil(total / page_size) if total else 0,
        )

    async def facets(self, search_filter: CanonicalFilter) -> FacetCounts:
        """
        Compute facet buckets with one aggregation request.

        Raises:
            ExternalServiceError: If the index is unavailable
        """
        try:
            response = await self._client.search(
                index=self._index_name, **build_facets_body(search_filter)
            )
        except (ApiError, TransportError) as e:
            logger.error(f"Elasticsearch facets failed: {str(e)}")
            raise ExternalServiceError("elasticsearch", "Search index unavailable") from e

        aggregations = response["aggregations"]
        price_ranges = [
            FacetBucket(key=bucket["key"], count=bucket["doc_count"], lower=band.lower, upper=band.upper)
            for band, bucket in zip(PRICE_BANDS, aggregations["price_ranges"]["buckets"]["buckets"])
        ]
        return FacetCounts(
            brands=_term_buckets(aggregations["brands"]),
            body_types=_term_buckets(aggregations["body_types"]),
            fuel_types=_term_buckets(aggregations["fuel_types"]),
            transmissions=_term_buckets(aggregations["transmissions"]),
            price_ranges=price_ranges,
            seating_capacity=_term_buckets(aggregations["seating_capacity"]),
        )

    async def autocomplete(self, prefix: str, size: int = 10) -> list[AutocompleteSuggestion]:
        """
        Suggest listing names with the completion suggester.

        Raises:
            ExternalServiceError: If the index is unavailable
        """
        try:
            response = await self._client.search(
                index=self._index_name,
                suggest={
                    "names": {
                        "prefix": prefix,
                        "completion": {
                            "field": "name_suggest",
                            "size": size,
                            "skip_duplicates": True,
                            "fuzzy": {"fuzziness": "AUTO", "prefix_length": 1},
                        },
                    }
                },
                source=["id", "name"],
            )
        except (ApiError, TransportError) as e:
            logger.error(f"Elasticsearch autocomplete failed: {str(e)}")
            raise ExternalServiceError("elasticsearch", "Search index unavailable") from e

        best: dict[str, AutocompleteSuggestion] = {}
        for option in response["suggest"]["names"][0]["options"]:
            name = option["_source"]["name"]
            suggestion = AutocompleteSuggestion(
                text=name, score=float(option["_score"]), listing_id=option["_id"]
            )
            current = best.get(name.lower())
            if current is None or suggestion.score > current.score:
                best[name.lower()] = suggestion
        ordered = sorted(best.values(), key=lambda s: (-s.score, len(s.text), s.text.lower()))
        return ordered[:size]

    async def get_listing(self, listing_id: str) -> Optional[CarListing]:
        """
        Fetch a listing document by id.

        Raises:
            ExternalServiceError: If the index is unavailable
        """
        try:
            response = await self._client.get(index=self._index_name, id=listing_id)
        except NotFoundError:
            return None
        except (ApiError, TransportError) as e:
            logger.error(f"Elasticsearch get failed for {listing_id}: {str(e)}")
            raise ExternalServiceError("elasticsearch", "Search index unavailable") from e
        return _listing_from_source(response["_source"])

    async def ensure_index(self) -> bool:
        """
        Create the index with analyzers and mappings if it does not exist.

        Returns:
            True if the index was created
        """
        if await self._client.indices.exists(index=self._index_name):
            return False
        await self._client.indices.create(
            index=self._index_name, settings=INDEX_SETTINGS, mappings=INDEX_MAPPINGS
        )
        logger.info(f"Initialized Elasticsearch index: {self._index_name}")
        return True

    async def reindex(self, listings: list[CarListing]) -> int:
        """
        Bulk-index the catalog and remove documents no longer in it.

        Args:
            listings: Catalog listings in catalog order

        Returns:
            Number of documents indexed

        Raises:
            ExternalServiceError: If the index is unavailable
        """
        try:
            await self.ensure_index()
            actions = [
                {"_index": self._index_name, "_id": listing.id, "_source": build_document(listing, position)}
                for position, listing in enumerate(listings)
            ]
            indexed, _ = await async_bulk(self._client, actions, raise_on_error=True)
            await self._client.delete_by_query(
                index=self._index_name,
                query={"bool": {"must_not": {"ids": {"values": [listing.id for listing in listings]}}}},
                refresh=True,
            )
        except (ApiError, TransportError, BulkIndexError) as e:
            logger.error(f"Elasticsearch reindex failed: {str(e)}")
            raise ExternalServiceError("elasticsearch", "Search index unavailable") from e
        logger.info(f"Indexed {indexed} listings into {self._index_name}")
        return indexed
