"""
Message-sequence assembly for both generation contracts.

Order is always: one system message, then few-shot example turns (form
contract only, and only without an image), then caller history, then the
current user turn. Pure functions, no I/O beyond the cached examples file.
"""

from __future__ import annotations
import logging
from typing import Any, Dict, Iterable, List, Optional, Union

from .prompts import (
    CUSTOM_COMPONENT_SYSTEM_PROMPT,
    DEFAULT_IMAGE_PROMPT,
    build_form_system_prompt,
    load_few_shot_examples,
)
from .types import IMAGE_URL, TEXT, ImagePart, Message, TextPart

logger = logging.getLogger("formgen.prompt")

HistoryItem = Union[Message, Dict[str, Any]]


def image_url(image: str) -> str:
    """Accept a data URL, an http(s) URL, or a bare base64 payload."""
    image = image.strip()
    if image.startswith(("data:", "http://", "https://")):
        return image
    return f"data:image/png;base64,{image}"


def history_to_messages(history: Optional[Iterable[HistoryItem]]) -> List[Message]:
    """
    Convert caller history into Messages, in order.

    Dict items follow the wire format {role, content} where content is a string
    or a list of {type: text|image_url} parts. Image parts are dropped: only the
    current user turn may carry an image. A turn left with no parts
    is skipped.
    """
    out: List[Message] = []
    for item in history or []:
        msg = item if isinstance(item, Message) else _message_from_dict(item)
        if msg.has_image:
            logger.debug("Dropping image part from %s history turn", msg.role)
            msg = Message(role=msg.role, parts=[p for p in msg.parts if p.type == TEXT])
            if not msg.parts:
                continue
        out.append(msg)
    return out


def _message_from_dict(item: Dict[str, Any]) -> Message:
    role = item.get("role", "user")
    content = item.get("content", "")
    if isinstance(content, str):
        return Message(role=role, content=content)
    parts = []
    for part in content or []:
        if part.get("type") == IMAGE_URL:
            parts.append(ImagePart(url=(part.get("image_url") or {}).get("url", "")))
        else:
            parts.append(TextPart(text=part.get("text") or ""))
    return Message(role=role, parts=parts)


def build_form_prompt(
    user_text: str,
    history: Optional[Iterable[HistoryItem]] = None,
    image: Optional[str] = None,
) -> List[Message]:
    messages = [Message(role="system", content=build_form_system_prompt(with_image=bool(image)))]

    # few-shot examples cost tokens; skip them next to an image
    if not image:
        for user, assistant in load_few_shot_examples():
            messages.append(Message(role="user", content=user))
            messages.append(Message(role="assistant", content=assistant))

    messages.extend(history_to_messages(history))

    if image:
        messages.append(
            Message(
                role="user",
                parts=[TextPart(text=user_text or DEFAULT_IMAGE_PROMPT), ImagePart(url=image_url(image))],
            )
        )
    else:
        messages.append(Message(role="user", content=user_text))
    return messages


def build_custom_component_prompt(
    user_text: str,
    history: Optional[Iterable[HistoryItem]] = None,
) -> List[Message]:
    messages = [Message(role="system", content=CUSTOM_COMPONENT_SYSTEM_PROMPT)]
    messages.extend(history_to_messages(history))
    messages.append(Message(role="user", content=user_text))
    return messages
