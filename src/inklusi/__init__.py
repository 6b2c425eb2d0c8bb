"""
Inklusi: a terminal companion chatbot for Universal Design for Learning (UDL).

This package follows Parnas's information hiding principles,
where each module hides a specific design decision.
"""

__version__ = "0.1.0"

from .conversation import ChatSession, Message, Sender
from .llm import ModelVariant, select_variant

__all__ = [
    "ChatSession",
    "Message",
    "ModelVariant",
    "Sender",
    "select_variant",
]
