"""
Validation and sanitization of model-generated Form.io schemas.

This is the trust boundary between free-text model output and the rendering
layer: only whitelisted component types survive, keys are unique, and every
field the renderer would evaluate as JavaScript is stripped.
"""

from __future__ import annotations
import copy
import json
import logging
from typing import Any, Dict, List, Set

from formgen.generate.errors import SchemaValidationError
from formgen.generate.extractor import fenced_block

from .types import DISPLAY_MODES, Component, FormSchema

logger = logging.getLogger("formgen.validator")

ALLOWED_COMPONENT_TYPES = frozenset(
    {
        "textfield",
        "email",
        "phoneNumber",
        "textarea",
        "number",
        "checkbox",
        "radio",
        "select",
        "selectboxes",
        "datetime",
        "button",
        "password",
        "url",
        "day",
        "time",
        "currency",
        "address",
        "file",
        "hidden",
        "htmlelement",
        "panel",
        "columns",
        "fieldset",
        "table",
        "well",
        "container",
    }
)

# Non-interactive presentation type; everything else is an input by default.
PRESENTATION_TYPE = "htmlelement"

# Fields that carry executable expressions.
DANGEROUS_FIELDS = (
    "customClass",
    "customConditional",
    "calculateValue",
    "customDefaultValue",
    "customValidation",
)
DANGEROUS_CONDITIONAL_FIELDS = ("json",)
DANGEROUS_VALIDATE_FIELDS = ("custom", "customPrivate")

DEFAULT_SUBMIT = {
    "type": "button",
    "key": "submit",
    "label": "Submit",
    "input": True,
    "action": "submit",
    "theme": "primary",
}


class SchemaValidator:
    def __init__(self, allowed_types=ALLOWED_COMPONENT_TYPES):
        self.allowed_types = frozenset(allowed_types)

    # -------------------------
    # Public API
    # -------------------------
    def validate(self, json_text: str) -> FormSchema:
        """Parse, validate and sanitize a schema given as JSON text."""
        return self.validate_payload(self._parse(json_text))

    def validate_payload(self, payload: Any) -> FormSchema:
        """Same as validate() for an already-parsed object. The input is not mutated."""
        try:
            self._check_structure(payload)
            components = self._validate_components(payload["components"])
        except SchemaValidationError as e:
            logger.error("Schema validation failed: %s", e)
            raise

        components = self._ensure_submit_button(components)
        schema = FormSchema(
            display=self._display(payload.get("display")),
            title=self._title(payload.get("title")),
            components=components,
        )
        logger.info("Schema validated successfully with %d components", len(schema.components))
        return schema

    # -------------------------
    # Parsing / structure
    # -------------------------
    def _parse(self, json_text: str) -> Any:
        try:
            return json.loads(json_text)
        except RecursionError:
            raise SchemaValidationError("Response JSON is nested too deeply")
        except (TypeError, ValueError):
            inner = fenced_block(json_text or "")
            if inner is None:
                raise SchemaValidationError("Response is not valid JSON")
            try:
                return json.loads(inner)
            except (RecursionError, ValueError):
                raise SchemaValidationError("Invalid JSON in code block")

    def _check_structure(self, payload: Any) -> None:
        if not isinstance(payload, dict):
            raise SchemaValidationError("Schema must be an object")
        components = payload.get("components")
        if not isinstance(components, list):
            raise SchemaValidationError("Schema must have a components array")
        if not components:
            raise SchemaValidationError("Schema must have at least one component")

    def _display(self, display: Any) -> str:
        if display is None:
            return "form"
        if display not in DISPLAY_MODES:
            logger.warning('Invalid display type "%s", defaulting to "form"', display)
            return "form"
        return display

    def _title(self, title: Any) -> str:
        return title if isinstance(title, str) and title.strip() else "Form"

    # -------------------------
    # Components
    # -------------------------
    def _validate_components(self, raw_components: List[Any]) -> List[Component]:
        validated: List[Component] = []
        used_keys: Set[str] = set()
        for i, raw in enumerate(raw_components):
            try:
                component = self._validate_component(raw, used_keys)
            except SchemaValidationError as e:
                logger.warning("Skipping invalid component at index %d: %s", i, e)
                continue
            validated.append(component)

        if not validated:
            raise SchemaValidationError("No valid components found in schema")
        return validated

    def _validate_component(self, raw: Any, used_keys: Set[str]) -> Component:
        if not isinstance(raw, dict):
            raise SchemaValidationError("Component must be an object")

        ctype = raw.get("type")
        if not ctype or not isinstance(ctype, str):
            raise SchemaValidationError("Component must have a type field")
        if ctype not in self.allowed_types:
            raise SchemaValidationError(f'Component type "{ctype}" is not allowed')

        key = raw.get("key")
        if not key or not isinstance(key, str):
            raise SchemaValidationError("Component must have a key field")
        if key in used_keys:
            raise SchemaValidationError(f'Duplicate key "{key}" found')
        used_keys.add(key)

        label = raw.get("label")
        if not label or not isinstance(label, str):
            raise SchemaValidationError("Component must have a label field")

        component = copy.deepcopy(raw)
        if "input" not in component:
            component["input"] = ctype != PRESENTATION_TYPE
        return Component.from_dict(sanitize_component(component))

    def _ensure_submit_button(self, components: List[Component]) -> List[Component]:
        if any(c.is_submit for c in components):
            return components

        logger.info("Adding missing submit button")
        submit = dict(DEFAULT_SUBMIT)
        used = {c.key for c in components}
        n = 1
        while submit["key"] in used:
            submit["key"] = f"submit{n}"
            n += 1
        return [*components, Component.from_dict(submit)]


def sanitize_component(component: Dict[str, Any]) -> Dict[str, Any]:
    """Strip executable-expression fields in place and return the component."""
    key = component.get("key")
    for name in DANGEROUS_FIELDS:
        if name in component:
            logger.warning('Removing dangerous field "%s" from component "%s"', name, key)
            del component[name]

    conditional = component.get("conditional")
    if isinstance(conditional, dict):
        for name in DANGEROUS_CONDITIONAL_FIELDS:
            if name in conditional:
                logger.warning('Removing conditional.%s from component "%s"', name, key)
                del conditional[name]

    rules = component.get("validate")
    if isinstance(rules, dict):
        for name in DANGEROUS_VALIDATE_FIELDS:
            if name in rules:
                logger.warning('Removing validate.%s from component "%s"', name, key)
                del rules[name]
    return component
