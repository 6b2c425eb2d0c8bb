"""Heuristic model routing.

Hides the decision of which model variant answers a message. The default
is the cheapest variant; escalation happens only on explicit signals in the
text (recency keywords for search, depth keywords or length for thinking).
"""

from collections.abc import Iterable

from .models import ModelVariant

# Recency and factual lookups (Indonesian, then English)
SEARCH_KEYWORDS: tuple[str, ...] = (
    "terbaru",
    "berita",
    "fakta",
    "siapa",
    "dimana",
    "kapan",
    "saat ini",
    "update",
    "informasi terkini",
    "latest",
    "news",
    "who",
    "where",
    "when",
    "current",
    "recent information",
)

# Requests that need analytical depth
THINKING_KEYWORDS: tuple[str, ...] = (
    "analisis",
    "strategi komprehensif",
    "desain pembelajaran universal",
    "mendalam",
    "bagaimana menerapkan",
    "kompleks",
    "tantangan",
    "analysis",
    "comprehensive strategy",
    "universal design for learning",
    "in-depth",
    "how to implement",
    "complex",
    "challenge",
)

LONG_MESSAGE_THRESHOLD = 100


def contains_keywords(text: str, keywords: Iterable[str]) -> bool:
    """Case-insensitive substring match against any keyword."""
    lower_text = text.lower()
    return any(keyword.lower() in lower_text for keyword in keywords)


class ModelRouter:
    """Picks a ModelVariant for outgoing user text.

    First match wins:
    1. any search keyword -> SEARCH
    2. any thinking keyword, or longer than the threshold -> THINKING
    3. otherwise -> LITE
    """

    def __init__(
        self,
        search_keywords: Iterable[str] = SEARCH_KEYWORDS,
        thinking_keywords: Iterable[str] = THINKING_KEYWORDS,
        length_threshold: int = LONG_MESSAGE_THRESHOLD,
    ):
        self._search_keywords = tuple(search_keywords)
        self._thinking_keywords = tuple(thinking_keywords)
        self._length_threshold = length_threshold

    @property
    def length_threshold(self) -> int:
        return self._length_threshold

    def select_variant(self, text: str) -> ModelVariant:
        if contains_keywords(text, self._search_keywords):
            return ModelVariant.SEARCH
        if contains_keywords(text, self._thinking_keywords) or len(text) > self._length_threshold:
            return ModelVariant.THINKING
        return ModelVariant.LITE


_default_router = ModelRouter()


def select_variant(text: str) -> ModelVariant:
    """Select a model variant using the default keyword sets."""
    return _default_router.select_variant(text)
