# AI INSTRUCTION:
# Provide a dummy model client for local dev and testing without API calls.
# With no script it answers every request with a one-field form echoing the
# user text; with a script it replays the given replies/exceptions in order.

import asyncio
import json
from typing import List, Tuple, Dict, Any, Optional, Sequence, Union

from ..types import Message, ModelParams

Reply = Union[str, BaseException]


class EchoDevClient:
    def __init__(self, script: Optional[Sequence[Reply]] = None, delay: float = 0.0):
        self.model = "echo-dev"
        self.configured = True
        self.delay = delay
        self._script = list(script or [])
        self.calls: List[Tuple[List[Message], ModelParams]] = []

    async def generate(self, messages: List[Message], params: ModelParams) -> Tuple[str, Dict[str, Any]]:
        self.calls.append((messages, params))
        if self.delay:
            await asyncio.sleep(self.delay)

        meta = {"engine": "echo", "model": params.model or self.model, "temp": params.temperature, "max_tokens": params.max_tokens}
        if self._script:
            reply = self._script.pop(0)
            if isinstance(reply, BaseException):
                raise reply
            return reply, meta

        user_inputs = [m.text for m in messages if m.role == "user"]
        label = (user_inputs[-1] if user_inputs else "") or "(no user input)"
        payload = {
            "schema": {
                "display": "form",
                "title": "Echo Form",
                "components": [{"type": "textarea", "key": "echo", "label": label[:120], "input": True}],
            },
            "css": None,
        }
        return json.dumps(payload), meta
