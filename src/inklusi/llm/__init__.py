from .base import ModelClient
from .factory import create_model_client
from .models import ModelReply, ModelVariant, RequestError, Source
from .providers import GeminiModelClient
from .router import ModelRouter, select_variant

__all__ = [
    "ModelClient",
    "create_model_client",
    "ModelReply",
    "ModelVariant",
    "RequestError",
    "Source",
    "GeminiModelClient",
    "ModelRouter",
    "select_variant",
]
