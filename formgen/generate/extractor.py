# AI INSTRUCTION:
# Recover a JSON payload from noisy model text (prose, markdown fences,
# leading/trailing chatter). Keep helpers small and stateless.

from __future__ import annotations
import json
import logging
import re
from typing import Optional

from .errors import ExtractionError
from .types import CustomComponentResult

logger = logging.getLogger("formgen.extractor")

_FENCED = re.compile(r"```(?:json)?\s*(.*?)\s*```", re.DOTALL | re.IGNORECASE)

# Degraded mode: positional salvage when the payload is not valid JSON.
_COMPONENT_CODE = re.compile(r'"componentCode"\s*:\s*"(.*?)"\s*,?\s*"templateCode"', re.DOTALL)
_TEMPLATE_CODE = re.compile(r'"templateCode"\s*:\s*"(.*?)"\s*}', re.DOTALL)


def fenced_block(text: str) -> Optional[str]:
    m = _FENCED.search(text)
    return m.group(1).strip() if m else None


def extract_json(raw: str) -> str:
    """Inner content of the first fenced block, else the trimmed input."""
    inner = fenced_block(raw)
    if inner is not None:
        return inner
    return raw.strip()


def extract_braced(raw: str) -> str:
    """Cut to the span between the first '{' and the last '}', then extract_json."""
    cleaned = raw.strip()
    first, last = cleaned.find("{"), cleaned.rfind("}")
    if first != -1 and last > first:
        cleaned = cleaned[first : last + 1]
    return extract_json(cleaned)


def unescape_code(code: str) -> str:
    """Turn literal escape sequences the model wrote into real characters."""
    return (
        code.replace("\\n", "\n")
        .replace("\\t", "\t")
        .replace('\\"', '"')
        .replace("\\'", "'")
        .replace("\\\\", "\\")
    )


def extract_custom_component(raw: str) -> CustomComponentResult:
    try:
        parsed = json.loads(extract_braced(raw))
        component, template = parsed["componentCode"], parsed["templateCode"]
        if not isinstance(component, str) or not isinstance(template, str):
            raise TypeError("componentCode and templateCode must be strings")
        # models often double-escape code inside JSON strings, so literal \n is
        # unescaped even after decoding; code that needs a literal backslash-n loses it
        return CustomComponentResult(unescape_code(component), unescape_code(template))
    except (RecursionError, ValueError, KeyError, TypeError) as e:
        logger.warning("Custom component JSON unusable (%s); trying regex salvage", e)
        cause = e

    component_match = _COMPONENT_CODE.search(raw)
    template_match = _TEMPLATE_CODE.search(raw)
    if component_match and template_match:
        return CustomComponentResult(
            unescape_code(component_match.group(1)),
            unescape_code(template_match.group(1)),
        )
    raise ExtractionError(f"Failed to parse custom component response: {cause}") from cause
