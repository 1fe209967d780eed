"""
Fitment Resolution

Fills in missing vehicle brand/model/variant fields from a free-text vehicle
description such as "citroen c5 limousine".

Absent values are represented as None everywhere past this module: blank and
whitespace-only strings are folded into None at the boundary.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict


class Fitment(BaseModel):
    """
    Resolved vehicle fitment. Each field is either a trimmed, non-blank
    string or None.
    """

    brand: Optional[str] = None
    model: Optional[str] = None
    variant: Optional[str] = None

    model_config = ConfigDict(frozen=True, extra="forbid")


def clean_field(value: Any) -> Optional[str]:
    """
    Return `value` trimmed, or None when it is missing, not a string, or blank.
    """
    if not isinstance(value, str):
        return None
    trimmed = value.strip()
    return trimmed or None


def is_present(value: Optional[str]) -> bool:
    """True for a non-blank string."""
    return clean_field(value) is not None


def resolve_fitment(
    brand: Optional[str] = None,
    model: Optional[str] = None,
    variant: Optional[str] = None,
    vehicle_text: Optional[str] = None,
) -> Fitment:
    """
    Combine explicit fitment fields with values parsed from `vehicle_text`.

    Explicit fields always win. The text is split on whitespace:
    the first token is the brand, the second the model, and any remaining
    tokens (joined by single spaces) the variant. Text with fewer than two
    tokens is ignored entirely.
    """
    resolved_brand = clean_field(brand)
    resolved_model = clean_field(model)
    resolved_variant = clean_field(variant)

    parts = vehicle_text.split() if isinstance(vehicle_text, str) else []

    if len(parts) >= 2:
        if resolved_brand is None:
            resolved_brand = parts[0]
        if resolved_model is None:
            resolved_model = parts[1]
        if resolved_variant is None and len(parts) > 2:
            resolved_variant = " ".join(parts[2:])

    return Fitment(
        brand=resolved_brand,
        model=resolved_model,
        variant=resolved_variant,
    )
