# AI INSTRUCTION:
# Deterministic, LLM-free form generation from keyword matches.
# Must never fail: any text yields at least a submit button.

from __future__ import annotations
import logging
import re
from typing import Any, Dict, List

from .types import Component, FormSchema
from .validator import DEFAULT_SUBMIT

logger = logging.getLogger("formgen.fallback")

_OPTIONS = re.compile(r"\((.*?)\)")

# Checked in order; first hit wins.
TITLES = (
    (("contact",), "Contact Form"),
    (("registration", "register"), "Registration Form"),
    (("feedback",), "Feedback Form"),
    (("survey",), "Survey Form"),
)
DEFAULT_TITLE = "Form"


def _has_any(text: str, words) -> bool:
    return any(w in text for w in words)


def extract_title(description: str) -> str:
    lower = description.lower()
    for words, title in TITLES:
        if _has_any(lower, words):
            return title
    return DEFAULT_TITLE


def extract_select_options(description: str) -> List[Dict[str, str]]:
    """Options from the first '(a, b, c)' list in the text, else three placeholders."""
    m = _OPTIONS.search(description)
    if m:
        labels = [opt.strip() for opt in m.group(1).split(",") if opt.strip()]
        if labels:
            return [{"label": label, "value": re.sub(r"\s+", "_", label.lower())} for label in labels]
    return [{"label": f"Option {i}", "value": f"option{i}"} for i in (1, 2, 3)]


def parse_description_to_components(description: str) -> List[Component]:
    lower = description.lower()
    required = _has_any(lower, ("required", "must"))
    rules: Dict[str, Any] = {"required": required}
    components: List[Component] = []

    def add(ctype: str, key: str, label: str, validate=None, **attrs):
        components.append(
            Component(type=ctype, key=key, label=label, input=True, validate=dict(validate or rules), attrs=attrs)
        )

    if "name" in lower:
        add("textfield", "name", "Name")
    if "email" in lower:
        add("email", "email", "Email")
    if "phone" in lower:
        add("phoneNumber", "phone", "Phone Number")
    if "address" in lower:
        add("textarea", "address", "Address", rows=3)
    if _has_any(lower, ("date", "birth")):
        add("datetime", "date", "Date", format="yyyy-MM-dd", enableDate=True, enableTime=False)
    if _has_any(lower, ("message", "comment")):
        add("textarea", "message", "Message", rows=5)
    if _has_any(lower, ("agree", "terms", "checkbox")):
        add("checkbox", "agreement", "I agree to the terms and conditions", validate={"required": True})
    if _has_any(lower, ("select", "choose", "dropdown")):
        add("select", "selection", "Select an option", data={"values": extract_select_options(description)})

    components.append(Component.from_dict(dict(DEFAULT_SUBMIT)))
    return components


def generate_from_keywords(text: str) -> FormSchema:
    logger.info("Generating form with keyword matching")
    text = text or ""
    return FormSchema(
        display="form",
        title=extract_title(text),
        components=parse_description_to_components(text),
    )
