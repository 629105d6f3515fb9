"""Provider adapters for chat_gateway."""

from .base import BaseProvider
from .huggingface import HuggingFaceProvider
from .local import LocalProvider
from .openai import OpenAIProvider

__all__ = [
    "BaseProvider",
    "OpenAIProvider",
    "HuggingFaceProvider",
    "LocalProvider",
]
