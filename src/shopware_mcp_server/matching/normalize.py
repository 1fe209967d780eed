"""
Text normalization used by every comparison in the catalog matcher.
"""

from __future__ import annotations

import unicodedata
from typing import Any


def normalize(text: Any) -> str:
    """
    Lowercase `text` and strip diacritics so that accented and unaccented
    spellings compare equal ("Citroën" -> "citroen").

    None normalizes to the empty string. Never raises.
    """
    if text is None:
        return ""
    if not isinstance(text, str):
        text = str(text)

    decomposed = unicodedata.normalize("NFD", text.lower())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))
