# Generator package

# Makes generate/ importable and exposes key interfaces.

from .invoker import ModelInvoker
from .types import Message, TextPart, ImagePart, ModelParams, CustomComponentResult
from .clients.echo_dev_client import EchoDevClient

__all__ = [
    "ModelInvoker",
    "Message",
    "TextPart",
    "ImagePart",
    "ModelParams",
    "CustomComponentResult",
    "EchoDevClient",
]
