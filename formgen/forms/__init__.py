# Makes the folder importable as a package.
# Exports the orchestrator and form types for convenience.

from .generator import FormGenerator
from .types import Component, FormSchema, GenerationResult
from .validator import SchemaValidator
from .fallback import generate_from_keywords

__all__ = ["FormGenerator", "Component", "FormSchema", "GenerationResult", "SchemaValidator", "generate_from_keywords"]
