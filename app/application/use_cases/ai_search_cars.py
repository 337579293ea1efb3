"""Natural-language search orchestration: parse, search, recommend."""

from app.application.dtos.ai_search import AiSearchResult
from app.application.ports.car_catalog_repository import CarCatalogRepository
from app.application.ports.search_engine import SearchEngine
from app.application.use_cases.catalog_vocabulary import CatalogVocabulary
from app.application.use_cases.parse_natural_language_query import (
    NaturalLanguageQueryParser,
    validate_query,
)
from app.application.use_cases.recommend_cars import RecommendCars

# Shown on the search page as one-click example queries
POPULAR_SEARCH_SUGGESTIONS = [
    "SUV under 15 lakhs with sunroof",
    "Automatic sedan with good mileage",
    "7 seater family car under 20 lakhs",
    "Electric car with fast charging",
    "Cars with dual zone AC and DCT under 10 lakhs",
    "Hatchback with AMT under 8 lakhs",
    "Diesel SUV with ADAS",
    "CNG car with best mileage",
]


class AiSearchCars:
    """Use case for natural-language car search."""

    def __init__(
        self,
        catalog_repository: CarCatalogRepository,
        search_engine: SearchEngine,
        parser: NaturalLanguageQueryParser,
        recommender: RecommendCars,
        result_limit: int = 20,
    ) -> None:
        """
        Initialize AI search use case.

        Args:
            catalog_repository: Catalog used for vocabulary discovery
            search_engine: Search engine adapter
            parser: Natural-language parser
            recommender: Recommendation layer
            result_limit: Size of the single result page that is searched
        """
        self._catalog_repository = catalog_repository
        self._search_engine = search_engine
        self._parser = parser
        self._recommender = recommender
        self._result_limit = result_limit

    async def execute(self, query: str) -> AiSearchResult:
        """
        Run a natural-language search.

        Args:
            query: Free-text query

        Returns:
            Parsed filter, results and curated recommendations

        Raises:
            ValidationError: If the query is empty or too long
            ExternalServiceError: If the search index fails
        """
        query = validate_query(query)
        listings = await self._catalog_repository.list_listings()
        parsed = await self._parser.parse(query, CatalogVocabulary.from_listings(listings))

        page = await self._search_engine.search(parsed.filter, 1, self._result_limit)
        recommendation = await self._recommender.recommend(query, page.hits)

        return AiSearchResult(
            query=parsed.filter,
            explanation=parsed.explanation,
            confidence=parsed.confidence,
            source=parsed.source,
            suggestions=parsed.suggestions,
            total_results=page.total,
            recommendations=recommendation.recommendations,
            alternatives=recommendation.alternatives,
            recommendation_explanation=recommendation.explanation,
            all_results=page.hits,
        )
