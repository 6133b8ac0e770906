# Error taxonomy for the generation pipeline.
# Everything the core raises on purpose derives from FormGenError, so the form
# orchestrator can catch one type and fall back.

from __future__ import annotations
from typing import Optional


class FormGenError(Exception):
    """Base class for all pipeline failures."""


class GenerationError(FormGenError):
    """Model invocation failed."""


class AuthError(GenerationError):
    """Upstream rejected the credential or the request; retrying cannot help."""


class GenerationTimeout(GenerationError):
    """A single attempt exceeded its deadline."""


class TransientGenerationError(GenerationError):
    """Retryable upstream failure (network, 5xx, rate limit, ...)."""


class ExhaustedRetries(GenerationError):
    def __init__(self, attempts: int, last_error: Optional[BaseException]):
        detail = str(last_error) if last_error else "Unknown error"
        super().__init__(f"Failed to generate after {attempts} attempts: {detail}")
        self.attempts = attempts
        self.last_error = last_error


class ExtractionError(FormGenError):
    """No usable payload could be recovered from the model text."""


class SchemaValidationError(FormGenError):
    """Schema is structurally invalid or has no usable components."""


class NotConfigured(FormGenError):
    """No usable LLM credential."""
