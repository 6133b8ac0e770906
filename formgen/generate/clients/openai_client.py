# AI INSTRUCTION:
# Define an async client for an OpenAI-compatible Chat Completions API (Groq).
# It must expose generate(messages, params) and translate SDK errors into the
# pipeline's error taxonomy so the invoker can classify them.

from typing import List, Tuple, Dict, Any, Optional

import openai
from openai import AsyncOpenAI

from ..errors import AuthError, TransientGenerationError
from ..types import Message, ModelParams
from formgen.settings import PLACEHOLDER_API_KEY

GROQ_BASE_URL = "https://api.groq.com/openai/v1"

# Upstream rejections that no retry can fix.
_NON_RETRYABLE = (openai.AuthenticationError, openai.PermissionDeniedError, openai.BadRequestError)


class OpenAIClient:
    def __init__(
        self,
        api_key: Optional[str],
        model: str = "meta-llama/llama-4-maverick-17b-128e-instruct",
        base_url: str = GROQ_BASE_URL,
    ):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url
        self._client: Optional[AsyncOpenAI] = None

    @property
    def configured(self) -> bool:
        return bool(self.api_key) and self.api_key != PLACEHOLDER_API_KEY

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            # retries are owned by ModelInvoker
            self._client = AsyncOpenAI(api_key=self.api_key or "", base_url=self.base_url, max_retries=0)
        return self._client

    async def generate(self, messages: List[Message], params: ModelParams) -> Tuple[str, Dict[str, Any]]:
        model = params.model or self.model
        formatted = [m.to_openai() for m in messages]
        try:
            resp = await self._get_client().chat.completions.create(
                model=model,
                messages=formatted,
                temperature=params.temperature if params.temperature is not None else 0.3,
                max_tokens=params.max_tokens or 4000,
            )
        except _NON_RETRYABLE as e:
            raise AuthError(str(e)) from e
        except openai.OpenAIError as e:
            raise TransientGenerationError(str(e)) from e

        text = (resp.choices[0].message.content or "").strip()
        meta = {"engine": "openai", "model": model}
        return text, meta
