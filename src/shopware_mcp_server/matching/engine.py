"""
Catalog Match Engine

Filters the in-memory catalog by product name and vehicle fitment, then
decides whether the result can be shown or the caller must first narrow the
vehicle down.

Filtering
---------
All filters are AND-ed and keep catalog order:

1. every name term is a substring of the normalized product name
2. brand substring (only when a brand is given)
3. model substring (only when a model is given)
4. variant substring, or, for a base-variant request ("standard", "base",
   "basic", "base variant"), records whose variant is blank

Disambiguation
--------------
Runs when no variant was given, a brand was given, and something matched:

- MULTI_MODEL   : matches span several models -> ask for the model
- MULTI_VARIANT : one model, several variants -> ask for the variant
- RESOLVED      : otherwise, products are returned as-is
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence, Tuple

from ..catalog.index import CatalogIndex
from ..catalog.models import ProductRecord
from .fitment import Fitment, is_present
from .models import CatalogMatch, MatchQuery, MatchState, ModelOption
from .normalize import normalize

logger = logging.getLogger("mcp.matching")


BASE_VARIANT_SYNONYMS: Tuple[str, ...] = ("standard", "base", "basic", "base variant")

_NORMALIZED_BASE_SYNONYMS: Tuple[str, ...] = tuple(
    normalize(term) for term in BASE_VARIANT_SYNONYMS
)


# ---------------------------------------------------------------------
# Query Construction
# ---------------------------------------------------------------------

def build_name_terms(name: Optional[str]) -> Tuple[str, ...]:
    """
    Split a product name query into normalized search terms.

    Single-character tokens are dropped.
    """
    return tuple(term for term in normalize(name).split() if len(term) > 1)


def build_query(name: Optional[str], fitment: Fitment) -> MatchQuery:
    return MatchQuery(
        name_terms=build_name_terms(name),
        brand=fitment.brand,
        model=fitment.model,
        variant=fitment.variant,
    )


def is_base_variant_request(variant: Optional[str]) -> bool:
    """
    True when the requested variant names the unadorned/standard trim.
    """
    normalized = normalize(variant).strip()
    if not normalized:
        return False
    return any(term in normalized for term in _NORMALIZED_BASE_SYNONYMS)


def _sort_key(value: str) -> Tuple[str, str]:
    return (normalize(value), value)


# ---------------------------------------------------------------------
# Match Engine
# ---------------------------------------------------------------------

class MatchEngine:
    """
    Stateless matcher over an injected, immutable catalog snapshot.
    """

    def __init__(self, catalog: CatalogIndex) -> None:
        self._catalog = catalog

    @property
    def catalog(self) -> CatalogIndex:
        return self._catalog

    def match(self, query: MatchQuery) -> List[ProductRecord]:
        """
        Apply the name, brand, model and variant filters to the catalog.
        """
        terms = query.name_terms
        hits = self._catalog.filter(
            lambda p: all(term in normalize(p.product_name) for term in terms)
        )

        brand = normalize(query.brand)
        if brand:
            hits = [p for p in hits if brand in normalize(p.vehicle_brand)]

        model = normalize(query.model)
        if model:
            hits = [p for p in hits if model in normalize(p.vehicle_model)]

        variant = normalize(query.variant)
        if variant.strip():
            if is_base_variant_request(query.variant):
                hits = [p for p in hits if p.is_base_variant]
            else:
                hits = [p for p in hits if variant in normalize(p.vehicle_variant)]

        return hits

    def search(self, name: str, fitment: Fitment) -> CatalogMatch:
        """
        Match `name` under `fitment` and run the disambiguation step.
        """
        query = build_query(name, fitment)
        hits = self.match(query)

        logger.debug(
            "Catalog match for %r (brand=%r model=%r variant=%r): %d hit(s)",
            name,
            query.brand,
            query.model,
            query.variant,
            len(hits),
        )

        return disambiguate(name, fitment, hits)


# ---------------------------------------------------------------------
# Disambiguation
# ---------------------------------------------------------------------

def _build_option(model: str, records: Sequence[ProductRecord]) -> ModelOption:
    variants = {r.vehicle_variant.strip() for r in records if not r.is_base_variant}
    return ModelOption(
        model=model,
        variants=sorted(variants, key=_sort_key),
        has_base_variant=any(r.is_base_variant for r in records),
    )


def collect_model_options(records: Sequence[ProductRecord]) -> List[ModelOption]:
    """
    Group records by non-blank model, collecting each model's variants.

    Models are sorted alphabetically, as are the named variants of each model.
    A blank variant is reported through `has_base_variant`.
    """
    by_model: Dict[str, List[ProductRecord]] = {}
    for record in records:
        model = record.vehicle_model.strip()
        if model:
            by_model.setdefault(model, []).append(record)

    return [
        _build_option(model, by_model[model])
        for model in sorted(by_model, key=_sort_key)
    ]


def disambiguate(
    name: str,
    fitment: Fitment,
    records: Sequence[ProductRecord],
) -> CatalogMatch:
    """
    Decide whether `records` can be returned or the vehicle must be narrowed.
    """
    products = [record.to_view() for record in records]
    resolved = CatalogMatch(
        query=name,
        state=MatchState.RESOLVED,
        products=products,
        brand=fitment.brand,
        model=fitment.model,
    )

    if is_present(fitment.variant) or not is_present(fitment.brand) or not records:
        return resolved

    options = collect_model_options(records)

    if len(options) > 1:
        logger.info(
            "Query %r spans %d %s models, asking for the model",
            name,
            len(options),
            fitment.brand,
        )
        return CatalogMatch(
            query=name,
            state=MatchState.MULTI_MODEL,
            brand=fitment.brand,
            model=fitment.model,
            options=options,
        )

    if len(options) == 1:
        # Rows without a model still contribute their variants
        option = _build_option(options[0].model, records)
        if len(option.variant_labels) > 1:
            logger.info(
                "Query %r spans %d variants of %s %s, asking for the variant",
                name,
                len(option.variant_labels),
                fitment.brand,
                option.model,
            )
            return CatalogMatch(
                query=name,
                state=MatchState.MULTI_VARIANT,
                brand=fitment.brand,
                model=fitment.model or option.model,
                options=[option],
            )

    return resolved
