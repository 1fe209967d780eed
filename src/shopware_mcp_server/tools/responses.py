"""
Tool Response Rendering

Turns a search outcome into a `ToolResponse`: a structured payload for
machines and a text block for the conversational agent. This is the only
place where a `SearchError` becomes a sentence.

Text and structured output agree on content but not on cardinality: the
text groups rows that differ only by SKU, the structured payload lists every
(capped) row.
"""

from __future__ import annotations

import re
from typing import Dict, List, Optional, Tuple

from ..api.models import MatchResultPayload, TextContent, ToolResponse
from ..catalog.models import ProductView
from ..config import settings
from ..matching.models import CatalogMatch, MatchState, SearchError, SearchOutcome


def clamp_limit(
    limit: Optional[int],
    default: Optional[int] = None,
    maximum: Optional[int] = None,
) -> int:
    """
    Clamp a caller-supplied display limit into [1, maximum].
    """
    default = default if default is not None else settings.catalog_default_limit
    maximum = maximum if maximum is not None else settings.catalog_max_limit
    value = default if limit is None else limit
    return min(max(value, 1), maximum)


def clean_product_name(name: str, prefix: Optional[str] = None) -> str:
    """
    Strip the manufacturer prefix (e.g. "JAEGER automotive") from a product name.
    """
    prefix = settings.manufacturer_name_prefix if prefix is None else prefix
    if prefix:
        name = re.sub(rf"^{re.escape(prefix)}\s*", "", name, flags=re.IGNORECASE)
    return name.strip()


def describe_product(product: ProductView, prefix: Optional[str] = None) -> str:
    """
    "<cleanName> for <brand> <model> <variant>"
    """
    return (
        f"{clean_product_name(product.name, prefix)} for "
        f"{product.vehicle_brand} {product.vehicle_model} {product.vehicle_variant}"
    )


def group_products(
    products: List[ProductView],
    prefix: Optional[str] = None,
) -> List[Tuple[str, List[str]]]:
    """
    Group products with identical description, merging their SKUs.

    Groups keep first-seen order.
    """
    groups: Dict[str, List[str]] = {}
    for product in products:
        groups.setdefault(describe_product(product, prefix), []).append(
            product.product_number
        )
    return list(groups.items())


def _response(payload: MatchResultPayload, text: str) -> ToolResponse:
    return ToolResponse(
        structured_content=payload,
        content=[TextContent(text=text)],
    )


def _empty() -> MatchResultPayload:
    return MatchResultPayload(total=0, products=[])


# ---------------------------------------------------------------------
# Renderers
# ---------------------------------------------------------------------

def render_error(error: SearchError) -> ToolResponse:
    return _response(_empty(), f"{error.source} failed: {error.message}")


def render_model_choice(match: CatalogMatch) -> ToolResponse:
    lines = []
    for option in match.options:
        labels = option.variant_labels
        lines.append(f"{option.model} ({', '.join(labels)})" if labels else option.model)

    text = (
        f"I found {match.query} for these {match.brand} models:\n"
        + "\n".join(lines)
        + "\n\nWhich model and variant is your vehicle?"
    )
    return _response(_empty(), text)


def render_variant_choice(match: CatalogMatch) -> ToolResponse:
    labels = match.options[0].variant_labels if match.options else []
    text = (
        f"I found {match.query} for these {match.brand} {match.model} variants:\n"
        + "\n".join(labels)
        + "\n\nCan you specify which variant your vehicle is?"
    )
    return _response(_empty(), text)


def render_products(
    match: CatalogMatch,
    limit: Optional[int] = None,
    prefix: Optional[str] = None,
) -> ToolResponse:
    """
    Render a resolved match. `limit` caps the displayed rows only; the
    reported total always counts every match.
    """
    total = match.total
    shown = match.products if limit is None else match.products[:limit]
    payload = MatchResultPayload(total=total, products=shown)

    if total == 0:
        return _response(payload, f'No products found for "{match.query}".')

    if total == 1:
        product = match.products[0]
        return _response(
            payload,
            f"Found one product: {describe_product(product, prefix)} ({product.product_number})",
        )

    lines = [
        f"{description} ({', '.join(numbers)})"
        for description, numbers in group_products(shown, prefix)
    ]
    return _response(
        payload,
        f"Found {total} items for '{match.query}':\n" + "\n".join(lines),
    )


def render_outcome(
    outcome: SearchOutcome,
    limit: Optional[int] = None,
    prefix: Optional[str] = None,
) -> ToolResponse:
    """
    Render any search outcome.
    """
    if isinstance(outcome, SearchError):
        return render_error(outcome)

    if outcome.state is MatchState.MULTI_MODEL:
        return render_model_choice(outcome)

    if outcome.state is MatchState.MULTI_VARIANT:
        return render_variant_choice(outcome)

    return render_products(outcome, limit=limit, prefix=prefix)
