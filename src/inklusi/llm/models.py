from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ModelVariant(str, Enum):
    """Backend model configurations selectable per request."""

    LITE = "flash-lite"
    SEARCH = "flash-search"
    THINKING = "pro-thinking"


class Source(BaseModel):
    """A citation returned alongside search-grounded text."""

    model_config = ConfigDict(frozen=True)

    uri: str = Field(description="Address of the cited web page")
    title: str | None = Field(default=None, description="Page title, when provided")


class ModelReply(BaseModel):
    """Reply from a model client."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(description="Generated text content")
    sources: tuple[Source, ...] = Field(
        default=(),
        description="Grounding sources (search variant only)"
    )
    model: str | None = Field(default=None, description="Model that generated the reply")
    usage: dict[str, int] | None = Field(
        default=None,
        description="Token usage information"
    )


class RequestError(Exception):
    """Raised when the model client cannot produce a reply."""

    def __init__(self, message: str = "", variant: ModelVariant | None = None):
        super().__init__(message)
        self.message = message
        self.variant = variant
