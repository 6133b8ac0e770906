# AI INSTRUCTION:
# Define the form data model: Component, FormSchema, GenerationResult.
# A Component keeps its required fields typed and carries every other
# Form.io attribute verbatim in `attrs`.

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

DISPLAY_MODES = ("form", "wizard", "pdf")
TYPED_KEYS = ("type", "key", "label", "input", "validate")


@dataclass
class Component:
    """One Form.io field/control definition."""
    type: str
    key: str
    label: str
    input: bool = True
    validate: Optional[Dict[str, Any]] = None
    attrs: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Component":
        attrs = {k: v for k, v in data.items() if k not in TYPED_KEYS}
        return cls(
            type=data["type"],
            key=data["key"],
            label=data["label"],
            input=data.get("input", True),
            validate=data.get("validate"),
            attrs=attrs,
        )

    @property
    def is_submit(self) -> bool:
        return self.type == "button" and self.attrs.get("action") == "submit"

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"type": self.type, "key": self.key, "label": self.label, "input": self.input}
        if self.validate is not None:
            out["validate"] = self.validate
        out.update(self.attrs)
        return out


@dataclass
class FormSchema:
    display: str = "form"
    title: str = "Form"
    components: List[Component] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "display": self.display,
            "title": self.title,
            "components": [c.to_dict() for c in self.components],
        }


@dataclass
class GenerationResult:
    """Schema plus optional CSS; `source` says which path produced it."""
    schema: FormSchema
    css: Optional[str] = None
    source: str = "ai"
    model: Optional[str] = None
