"""Text analysis for relevance scoring and autocomplete.

Mirrors the index-side analyzer: lowercase, ASCII folding and a fixed
synonym table, so queries and documents are normalized the same way.
Fuzzy matching follows Elasticsearch's AUTO edit distance.
"""

import re
from functools import lru_cache
from typing import Optional
from unicodedata import normalize

from rapidfuzz.distance import Levenshtein

from app.application.dtos.car import CarListing

# First entry of each group is the canonical term
SYNONYM_GROUPS: tuple[tuple[str, ...], ...] = (
    ("suv", "sport utility vehicle"),
    ("muv", "mpv", "multi purpose vehicle", "multi utility vehicle"),
    ("sedan", "saloon"),
    ("hatchback", "hatch"),
    ("ev", "electric vehicle", "electric car"),
)

FIELD_WEIGHTS: tuple[tuple[str, float], ...] = (
    ("name", 3.0),
    ("brand_name", 2.0),
    ("description", 1.0),
    ("body_type", 1.0),
)

# Leading characters that must match exactly before fuzziness applies
FUZZY_PREFIX_LENGTH = 2

_TOKEN_PATTERN = re.compile(r"[a-z0-9]+")


def _build_synonym_patterns() -> list[tuple[re.Pattern, str]]:
    patterns = []
    for group in SYNONYM_GROUPS:
        canonical = group[0]
        for phrase in group[1:]:
            patterns.append((re.compile(rf"\b{re.escape(phrase)}\b"), canonical))
    # Longest phrases first so "electric vehicle" wins over shorter overlaps
    patterns.sort(key=lambda item: len(item[0].pattern), reverse=True)
    return patterns


_SYNONYM_PATTERNS = _build_synonym_patterns()


def fold(text: str) -> str:
    """Lowercase and strip accents."""
    decomposed = normalize("NFKD", text.lower())
    return "".join(char for char in decomposed if not (0x0300 <= ord(char) <= 0x036F))


def canonicalize_synonyms(text: str) -> str:
    """Fold text and replace synonym phrases with their canonical term."""
    folded = fold(text)
    for pattern, canonical in _SYNONYM_PATTERNS:
        folded = pattern.sub(canonical, folded)
    return folded


@lru_cache(maxsize=4096)
def analyze(text: str) -> tuple[str, ...]:
    """
    Tokenize text the way the search index does.

    Args:
        text: Raw text

    Returns:
        Normalized tokens
    """
    return tuple(_TOKEN_PATTERN.findall(canonicalize_synonyms(text)))


def auto_fuzziness(term: str) -> int:
    """Maximum edit distance for a term (Elasticsearch AUTO: 0 / 1 / 2)."""
    if len(term) <= 2:
        return 0
    if len(term) <= 5:
        return 1
    return 2


def term_match_score(term: str, tokens: tuple[str, ...]) -> float:
    """
    Best credit a query term earns against a field's tokens.

    Exact match earns 1.0, a prefix of a token 0.8, a fuzzy match within the
    AUTO edit distance (sharing the first two characters) up to 0.7.

    Args:
        term: Analyzed query term
        tokens: Analyzed field tokens

    Returns:
        Score in [0, 1]
    """
    best = 0.0
    max_edits = auto_fuzziness(term)
    for token in tokens:
        if token == term:
            return 1.0
        if len(term) >= 3 and token.startswith(term):
            best = max(best, 0.8)
            continue
        if max_edits and token[:FUZZY_PREFIX_LENGTH] == term[:FUZZY_PREFIX_LENGTH]:
            distance = Levenshtein.distance(term, token, score_cutoff=max_edits)
            if distance <= max_edits:
                best = max(best, 0.7 * (1.0 - distance / (len(term) + 1)))
    return best


def _field_text(listing: CarListing, field: str) -> str:
    if field == "body_type":
        return " ".join(part for part in (listing.body_type, listing.sub_body_type) if part)
    return getattr(listing, field) or ""


def relevance_score(query_terms: tuple[str, ...], listing: CarListing) -> float:
    """
    Weighted best-field relevance of a listing for analyzed query terms.

    Args:
        query_terms: Output of analyze() for the text query
        listing: Listing to score

    Returns:
        Score; 0.0 means no term matched any field
    """
    if not query_terms:
        return 0.0
    best = 0.0
    for field, weight in FIELD_WEIGHTS:
        tokens = analyze(_field_text(listing, field))
        if not tokens:
            continue
        field_score = sum(term_match_score(term, tokens) for term in query_terms)
        best = max(best, weight * field_score)
    return best


def autocomplete_score(prefix: str, name: str) -> Optional[float]:
    """
    Score a listing name against a typed prefix.

    Whole-name prefixes outrank word-start prefixes; fuzzy matches (AUTO
    distance, first character exact) lose 0.25 per edit.

    Args:
        prefix: Typed text
        name: Listing name

    Returns:
        Score, or None if the name does not match
    """
    folded_prefix = " ".join(fold(prefix).split())
    if not folded_prefix:
        return None
    folded_name = " ".join(fold(name).split())
    words = folded_name.split(" ")
    candidates = [(folded_name, 1.0)] + [
        (" ".join(words[index:]), 0.8) for index in range(1, len(words))
    ]
    max_edits = auto_fuzziness(folded_prefix)

    best: Optional[float] = None
    for candidate, weight in candidates:
        if candidate.startswith(folded_prefix):
            score = weight
        elif max_edits and candidate[:1] == folded_prefix[:1]:
            head = candidate[: len(folded_prefix)]
            distance = Levenshtein.distance(folded_prefix, head, score_cutoff=max_edits)
            if distance > max_edits:
                continue
            score = weight * (1.0 - 0.25 * distance)
        else:
            continue
        best = score if best is None else max(best, score)
    return best
