# AI INSTRUCTION:
# Provide a ModelInvoker that:
# - picks a vision-capable model when any message carries an image
# - bounds every attempt with a timeout
# - retries transient failures with exponential backoff + jitter
# - aborts immediately on auth / bad-request failures
# Retry flow is an explicit state machine; sleep and rand are injected so the
# backoff can be tested without real delays.

from __future__ import annotations
import asyncio
import logging
import random
from enum import Enum
from typing import Awaitable, Callable, List, Optional

from .errors import (
    AuthError,
    ExhaustedRetries,
    GenerationError,
    GenerationTimeout,
    TransientGenerationError,
)
from .types import Message, ModelParams

logger = logging.getLogger("formgen.invoker")

DEFAULT_MODEL = "meta-llama/llama-4-maverick-17b-128e-instruct"
VISION_MODEL = "meta-llama/llama-4-scout-17b-16e-instruct"
JITTER_RATIO = 0.25

NON_RETRYABLE_MESSAGES = (
    "invalid api key",
    "api key not valid",
    "authentication failed",
    "unauthorized",
    "forbidden",
    "bad request",
)


class AttemptState(str, Enum):
    ATTEMPTING = "attempting"
    BACKING_OFF = "backing_off"
    SUCCEEDED = "succeeded"
    FAILED_TERMINAL = "failed_terminal"


def classify_error(exc: BaseException) -> GenerationError:
    """Map any client failure onto AuthError, GenerationTimeout or TransientGenerationError."""
    if isinstance(exc, AuthError):
        return exc
    message = str(exc).lower()
    if any(m in message for m in NON_RETRYABLE_MESSAGES):
        return AuthError(str(exc))
    if isinstance(exc, GenerationError):
        return exc
    return TransientGenerationError(str(exc) or exc.__class__.__name__)


def next_state(attempt: int, max_attempts: int, error: Optional[GenerationError]) -> AttemptState:
    if error is None:
        return AttemptState.SUCCEEDED
    if isinstance(error, AuthError) or attempt >= max_attempts:
        return AttemptState.FAILED_TERMINAL
    return AttemptState.BACKING_OFF


class ModelInvoker:
    def __init__(
        self,
        client,
        default_model: Optional[str] = None,
        vision_model: str = VISION_MODEL,
        temperature: float = 0.3,
        max_tokens: int = 4000,
        timeout: float = 30.0,
        max_retries: int = 3,
        base_delay: float = 1.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        rand: Callable[[], float] = random.random,
    ):
        self.client = client
        self.default_model = default_model or getattr(client, "model", None) or DEFAULT_MODEL
        self.vision_model = vision_model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout = timeout
        self.max_retries = max(1, max_retries)
        self.base_delay = base_delay
        self._sleep = sleep
        self._rand = rand

    @classmethod
    def from_settings(cls, settings, client, **kwargs) -> "ModelInvoker":
        return cls(
            client,
            default_model=settings.GROQ_MODEL,
            vision_model=settings.GROQ_VISION_MODEL,
            temperature=settings.LLM_TEMPERATURE,
            max_tokens=settings.LLM_MAX_TOKENS,
            timeout=settings.LLM_TIMEOUT,
            max_retries=settings.LLM_MAX_RETRIES,
            base_delay=settings.LLM_RETRY_BASE_DELAY,
            **kwargs,
        )

    def is_configured(self) -> bool:
        return bool(getattr(self.client, "configured", False))

    def select_model(self, messages: List[Message]) -> str:
        if any(m.has_image for m in messages):
            return self.vision_model
        return self.default_model

    def backoff_delay(self, attempt: int) -> float:
        """Seconds to wait after failed attempt N: base*2^(N-1) plus up to 25% jitter."""
        delay = self.base_delay * (2 ** (attempt - 1))
        return delay + self._rand() * delay * JITTER_RATIO

    async def _invoke_with_timeout(self, messages: List[Message], params: ModelParams) -> str:
        try:
            text, _meta = await asyncio.wait_for(self.client.generate(messages, params), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            raise GenerationTimeout(f"Request timed out after {self.timeout:g}s") from e
        return text

    async def generate(self, messages: List[Message]) -> str:
        model = self.select_model(messages)
        if model != self.default_model:
            logger.info("Using vision model: %s", model)
        params = ModelParams(temperature=self.temperature, max_tokens=self.max_tokens, model=model)

        state = AttemptState.ATTEMPTING
        attempt = 1
        text = ""
        last_error: Optional[GenerationError] = None

        while state not in (AttemptState.SUCCEEDED, AttemptState.FAILED_TERMINAL):
            if state is AttemptState.ATTEMPTING:
                logger.info("Attempt %d/%d to generate (model=%s)", attempt, self.max_retries, model)
                error: Optional[GenerationError] = None
                try:
                    text = await self._invoke_with_timeout(messages, params)
                except Exception as e:
                    error = classify_error(e)
                    last_error = error
                    logger.warning(
                        "Attempt %d failed (%s): %s", attempt, error.__class__.__name__, error
                    )
                state = next_state(attempt, self.max_retries, error)
            elif state is AttemptState.BACKING_OFF:
                delay = self.backoff_delay(attempt)
                logger.info("Waiting %.0fms before retry...", delay * 1000)
                await self._sleep(delay)
                attempt += 1
                state = AttemptState.ATTEMPTING

        if state is AttemptState.SUCCEEDED:
            logger.info("Generation succeeded on attempt %d", attempt)
            return text

        if isinstance(last_error, AuthError):
            logger.error("Non-retryable error encountered: %s", last_error)
            raise last_error

        logger.error("All %d attempts failed", attempt)
        raise ExhaustedRetries(attempt, last_error) from last_error
