"""Prompt templates for the natural-language search LLM calls."""

import json
from typing import Any, Mapping, Optional, Sequence

from app.application.dtos.car import CarListing
from app.application.use_cases.catalog_vocabulary import BODY_TYPES, BRANDS, FUEL_TYPES
from app.domain.value_objects.money_inr import MoneyINR

QUERY_PARSER_SYSTEM_PROMPT = """
You are a car recommendation expert for the Indian market.
You turn a shopper's free-text request into structured search filters with high accuracy.
You reply with a single JSON object and nothing else: no markdown, no code fences, no commentary.
"""

QUERY_PARSER_PROMPT = """
Parse this user query into structured filters.

User Query: "{query}"

TRANSMISSION TYPES (use exactly these values):
- Manual: Manual gearbox
- Automatic: Traditional torque-converter automatic
- AMT: Automated Manual Transmission
- CVT: Continuously Variable Transmission
- DCT: Dual Clutch Transmission (also called DSG)
- iMT: Intelligent Manual Transmission
A generic request for an "automatic" means ["Automatic", "AMT", "CVT", "DCT"] unless a specific type is named.

FEATURES (extract exactly):
{features}

BODY TYPES: {body_types}
FUEL TYPES: {fuel_types}
BRANDS: {brands}

BUDGET: Convert "X lakhs" to rupees (X * 100000) and "X crore" to rupees (X * 10000000).

Return ONLY valid JSON:
{{
  "query": {{
    "budget": {{ "min": number, "max": number }},
    "bodyType": ["exact type"],
    "fuelType": ["exact type"],
    "transmission": ["exact type"],
    "seating": number,
    "features": ["exact feature names"],
    "brand": ["brand name"],
    "mileage": {{ "min": number }},
    "sortBy": "price" | "mileage" | "popularity"
  }},
  "explanation": "Clear explanation of the user's requirements",
  "confidence": 0.0 to 1.0,
  "suggestions": ["short follow-up refinement"]
}}
Leave out any field the user did not ask for.

EXAMPLES:
Query: "cars with dual zone DCT under 10 lakhs"
{{"query":{{"budget":{{"min":0,"max":1000000}},"transmission":["DCT"],"features":["Dual Zone AC"]}},"explanation":"Looking for cars with Dual Zone AC and DCT transmission under 10 lakhs","confidence":0.95}}

Query: "SUV with sunroof and automatic under 15 lakhs"
{{"query":{{"budget":{{"min":0,"max":1500000}},"bodyType":["SUV"],"transmission":["Automatic","AMT","CVT","DCT"],"features":["Sunroof"]}},"explanation":"Looking for automatic SUVs with sunroof under 15 lakhs","confidence":0.9}}

Query: "family car with 7 seats"
{{"query":{{"seating":7,"bodyType":["SUV","MUV"]}},"explanation":"Looking for 7-seater family vehicles","confidence":0.85}}

Now parse: "{query}"
"""

RECOMMENDATION_SYSTEM_PROMPT = """
You are a car recommendation expert. You pick the best matches for a shopper from a numbered list.
You reply with a single JSON object and nothing else.
"""

RECOMMENDATION_PROMPT = """
Based on the user's query and the available cars, recommend the best options.

User Query: "{query}"

Available Cars:
{cars}

Provide recommendations in JSON format:
{{
  "recommendations": [1, 3, 5],
  "explanation": "Why these cars are recommended",
  "alternatives": [2, 4]
}}
"recommendations" holds at most 5 car numbers, "alternatives" at most 3, and no number appears in both.
"""

COMPARISON_SYSTEM_PROMPT = """
You are a friendly, knowledgeable car buying assistant for the Indian market.
Keep answers concise and user-friendly.
"""

COMPARISON_PROMPT = """
Compare these two cars and provide a detailed analysis:

Car 1: {car1}

Car 2: {car2}

Provide a comparison in this format:
- Key Differences
- Pros of Car 1
- Pros of Car 2
- Which one to choose and why
- Final verdict
"""

CHAT_SYSTEM_PROMPT = """
You are a friendly car buying assistant for the Indian market.
Answer the shopper naturally. Be concise and friendly, and quote prices in lakhs.
"""

CHAT_PROMPT = """
Respond to the user's message naturally.

Context: {context}
User Message: "{message}"

Provide a helpful, conversational response.
"""

# Serialized context beyond this is cut off
MAX_CHAT_CONTEXT_CHARS = 2000

# Feature names offered to the model; the keyword parser uses the same list
FEATURE_NAMES = (
    "Dual Zone AC",
    "Sunroof",
    "Panoramic Sunroof",
    "Leather Seats",
    "Touchscreen",
    "Wireless Charging",
    "Ventilated Seats",
    "360 Camera",
    "ADAS",
    "Cruise Control",
    "Keyless Entry",
    "Push Button Start",
)


def _or_na(value: Optional[object], suffix: str = "") -> str:
    return f"{value}{suffix}" if value is not None else "N/A"


def describe_listing(listing: CarListing, max_features: Optional[int] = None) -> str:
    """
    Render a listing as the bullet block used inside prompts.

    Args:
        listing: Listing to describe
        max_features: Truncate key features to this many (None keeps all)

    Returns:
        Multi-line description
    """
    features = listing.key_features if max_features is None else listing.key_features[:max_features]
    return "\n".join(
        [
            f"{listing.brand_name} {listing.name}",
            f"   - Price: {MoneyINR(listing.price).format_lakhs()}",
            f"   - Body Type: {_or_na(listing.body_type)}",
            f"   - Fuel: {', '.join(listing.fuel_types) or 'N/A'}",
            f"   - Transmission: {', '.join(listing.transmissions) or 'N/A'}",
            f"   - Mileage: {_or_na(listing.mileage, ' km/l')}",
            f"   - Seating: {_or_na(listing.seating_capacity)}",
            f"   - Key Features: {', '.join(features) or 'N/A'}",
        ]
    )


def build_query_parser_prompt(query: str, brands: Sequence[str] = BRANDS) -> str:
    """Build the natural-language parsing prompt."""
    return QUERY_PARSER_PROMPT.format(
        query=query,
        features="\n".join(f"- {name}" for name in FEATURE_NAMES),
        body_types=", ".join(BODY_TYPES),
        fuel_types=", ".join(FUEL_TYPES),
        brands=", ".join(brands),
    )


def build_recommendation_prompt(query: str, candidates: Sequence[CarListing]) -> str:
    """Build the recommendation prompt with 1-based car numbers."""
    cars = "\n\n".join(
        f"{index}. {describe_listing(listing, max_features=3)}"
        for index, listing in enumerate(candidates, start=1)
    )
    return RECOMMENDATION_PROMPT.format(query=query, cars=cars)


def build_comparison_prompt(car1: CarListing, car2: CarListing) -> str:
    """Build the side-by-side comparison prompt."""
    return COMPARISON_PROMPT.format(car1=describe_listing(car1), car2=describe_listing(car2))


def build_chat_prompt(message: str, context: Optional[Mapping[str, Any]] = None) -> str:
    """Build the conversational prompt; context is rendered as compact JSON."""
    rendered = json.dumps(dict(context or {}), ensure_ascii=False, sort_keys=True, default=str)
    return CHAT_PROMPT.format(context=rendered[:MAX_CHAT_CONTEXT_CHARS], message=message)
