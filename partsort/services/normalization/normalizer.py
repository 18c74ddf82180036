"""Text normalization for scraped listing text.

Scraped names and descriptions arrive with HTML entities, typographic
quotes, stray markup and inconsistent spacing. The normalizer turns them
into a lower-case, single-spaced form that the extractors can match with
simple patterns, without ever separating a number from its unit.
"""
import hashlib
import html
import re
import unicodedata
from dataclasses import dataclass, field
from typing import List, Optional

from partsort.models.signals import TextField

# Typographic characters folded to their ASCII counterparts
_CHAR_FOLDS = {
    "‘": "'", "’": "'", "′": "'",
    "“": '"', "”": '"', "″": '"',
    "–": "-", "—": "-", "−": "-", "‐": "-",
    "×": "x", "✕": "x",
}
_FOLD_TABLE = str.maketrans(_CHAR_FOLDS)

_TAG_RE = re.compile(r"<[^>]+>")
# Everything except letters, digits, whitespace and spec-bearing punctuation
_NOISE_RE = re.compile(r"[^a-z0-9\s./,\"'+\-]")
_SPACE_RE = re.compile(r"\s+")
_TOKEN_STRIP = ".,'\"-/+"


@dataclass(frozen=True)
class NormalizedText:
    """Normalized name and description of one listing.

    Attributes:
        name: Normalized listing name
        description: Normalized description
        tokens: Alphanumeric tokens of name followed by description
    """
    name: str = ""
    description: str = ""
    tokens: List[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.tokens

    def text(self, source: TextField) -> str:
        return self.name if source is TextField.NAME else self.description


def normalize_field(value: Optional[str]) -> str:
    """Normalize one free-text field."""
    if not value:
        return ""
    text = html.unescape(str(value))
    text = _TAG_RE.sub(" ", text)
    text = unicodedata.normalize("NFKC", text.translate(_FOLD_TABLE))
    text = text.translate(_FOLD_TABLE).lower()
    text = _NOISE_RE.sub(" ", text)
    return _SPACE_RE.sub(" ", text).strip()


def tokenize(text: str) -> List[str]:
    """Split normalized text into tokens, dropping pure punctuation."""
    tokens = []
    for chunk in text.split():
        token = chunk.strip(_TOKEN_STRIP)
        if token and any(ch.isalnum() for ch in token):
            tokens.append(token)
    return tokens


class TextNormalizer:
    """Produces NormalizedText from raw listing fields. Never raises."""

    def normalize(self, name: Optional[str], description: Optional[str] = None) -> NormalizedText:
        norm_name = normalize_field(name)
        norm_description = normalize_field(description)
        return NormalizedText(
            name=norm_name,
            description=norm_description,
            tokens=tokenize(norm_name) + tokenize(norm_description),
        )


def listing_fingerprint(name: Optional[str], description: Optional[str] = None) -> str:
    """Stable key for a listing's text, used to join feedback to listings."""
    payload = f"{normalize_field(name)}\n{normalize_field(description)}"
    return hashlib.sha1(payload.encode("utf-8")).hexdigest()
