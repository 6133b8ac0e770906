# AI INSTRUCTION:
# Provide a FormGenerator class that:
# - accepts a ModelInvoker (any model client behind it)
# - tries the AI path (prompt -> invoke -> extract -> validate)
# - falls back to keyword matching whenever the AI path is unavailable or fails
# - generates custom component code with no fallback
# No state is kept between calls.

from __future__ import annotations
import json
import logging
from typing import Iterable, Optional

from formgen.generate.errors import ExtractionError, FormGenError, NotConfigured
from formgen.generate.extractor import extract_braced, extract_custom_component
from formgen.generate.invoker import ModelInvoker
from formgen.generate.prompt_builder import HistoryItem, build_custom_component_prompt, build_form_prompt
from formgen.generate.types import CustomComponentResult

from .fallback import generate_from_keywords
from .types import GenerationResult
from .validator import SchemaValidator

logger = logging.getLogger("formgen.generator")

PREVIEW_CHARS = 500


class FormGenerator:
    def __init__(self, invoker: ModelInvoker, validator: Optional[SchemaValidator] = None):
        self.invoker = invoker
        self.validator = validator or SchemaValidator()

    def is_configured(self) -> bool:
        return self.invoker.is_configured()

    async def generate_form(
        self,
        message: str,
        history: Optional[Iterable[HistoryItem]] = None,
        image: Optional[str] = None,
    ) -> GenerationResult:
        """Main entry point: AI path when configured, keyword fallback otherwise."""
        if self.is_configured():
            try:
                logger.info("Attempting AI-powered form generation%s", " with image" if image else "")
                return await self.generate_with_ai(message, history, image)
            except FormGenError as e:
                logger.error("AI generation failed: %s", e)
                logger.warning("Falling back to keyword matching")
            except Exception:
                logger.exception("Unexpected error during AI generation")
                logger.warning("Falling back to keyword matching")
        else:
            logger.warning("AI not configured, using keyword matching")

        return GenerationResult(schema=generate_from_keywords(message), css=None, source="fallback")

    async def generate_with_ai(
        self,
        message: str,
        history: Optional[Iterable[HistoryItem]] = None,
        image: Optional[str] = None,
    ) -> GenerationResult:
        messages = build_form_prompt(message, history, image)
        raw = await self.invoker.generate(messages)
        logger.debug("AI raw response: %s", raw[:PREVIEW_CHARS])

        trimmed = raw.strip()
        if not trimmed.startswith("{"):
            logger.warning("Response doesn't start with JSON! First 200 chars: %s", trimmed[:200])

        cleaned = extract_braced(trimmed)
        try:
            payload = json.loads(cleaned)
        except (RecursionError, ValueError) as e:
            raise ExtractionError(f"No JSON payload in model response: {e}") from e

        # either {"schema": {...}, "css": "..."} or a bare schema object
        schema_obj = payload.get("schema") if isinstance(payload, dict) else None
        if not isinstance(schema_obj, dict):
            schema_obj = payload
        schema = self.validator.validate_payload(schema_obj)

        css = payload.get("css") if isinstance(payload, dict) else None
        return GenerationResult(
            schema=schema,
            css=css if isinstance(css, str) and css.strip() else None,
            source="ai",
            model=self.invoker.select_model(messages),
        )

    async def generate_custom_component(
        self,
        message: str,
        history: Optional[Iterable[HistoryItem]] = None,
    ) -> CustomComponentResult:
        """Generate component.tsx + template.tsx code. There is no fallback."""
        if not self.is_configured():
            raise NotConfigured("AI not configured. Set GROQ_API_KEY to enable custom component generation.")

        try:
            logger.info("Generating custom Form.io component")
            messages = build_custom_component_prompt(message, history)
            raw = await self.invoker.generate(messages)
            logger.debug("AI raw response: %s", raw[:PREVIEW_CHARS])
            if not raw.strip().startswith("{"):
                logger.warning("Response doesn't start with JSON! First 200 chars: %s", raw.strip()[:200])
            result = extract_custom_component(raw)
        except FormGenError as e:
            logger.error("Custom component generation failed: %s", e)
            raise

        logger.info("Successfully generated custom component")
        return result
