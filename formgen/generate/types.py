# AI INSTRUCTION:
# Define simple, typed dataclasses shared across generator modules.
# Message content is either plain text or an ordered list of typed parts;
# `Message.kind` is the discriminator, never isinstance checks on content.

from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional, Dict, Any, Union

TEXT = "text"
IMAGE_URL = "image_url"


@dataclass
class TextPart:
    text: str
    type: str = TEXT

    def to_dict(self) -> Dict[str, Any]:
        return {"type": TEXT, "text": self.text}


@dataclass
class ImagePart:
    """Inline image reference (data URL or http URL)."""
    url: str
    type: str = IMAGE_URL

    def to_dict(self) -> Dict[str, Any]:
        return {"type": IMAGE_URL, "image_url": {"url": self.url}}


ContentPart = Union[TextPart, ImagePart]


@dataclass
class Message:
    """Single chat turn: system, user, or assistant."""
    role: str
    content: str = ""
    parts: Optional[List[ContentPart]] = None

    @property
    def kind(self) -> str:
        return "text" if self.parts is None else "parts"

    @property
    def has_image(self) -> bool:
        if self.kind == "text":
            return False
        return any(p.type == IMAGE_URL for p in self.parts)

    @property
    def text(self) -> str:
        """Plain-text view of the message (image parts are skipped)."""
        if self.kind == "text":
            return self.content
        return "\n".join(p.text for p in self.parts if p.type == TEXT)

    def to_openai(self) -> Dict[str, Any]:
        if self.kind == "text":
            return {"role": self.role, "content": self.content}
        return {"role": self.role, "content": [p.to_dict() for p in self.parts]}


@dataclass
class ModelParams:
    """LLM parameters per request."""
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    model: Optional[str] = None


@dataclass
class CustomComponentResult:
    """Two code artifacts produced by the custom-component contract."""
    component_code: str
    template_code: str

    def to_dict(self) -> Dict[str, str]:
        return {"componentCode": self.component_code, "templateCode": self.template_code}

