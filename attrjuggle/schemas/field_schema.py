"""Schema Declarations — validated, plain-data form of a record type's field schema.

Invariants:
    - Type tokens are normalized to canonical names on validation
    - Unknown tokens are rejected here, before any record is touched
    - apply() replaces the target schema wholesale and sets the type-level flag

Design Decisions:
    - Pydantic model over hand-rolled dict checks: declarations arrive from JSON/YAML
      config and deserve field-level error messages (ADR: developer UX)
"""

from pydantic import BaseModel, Field, field_validator

from attrjuggle.core.domain_types import is_known_type, normalize_type
from attrjuggle.core.field_schema import SchemaRegistry


class SchemaDeclaration(BaseModel):
    """Declarative schema for one record type."""
    record_type: str = Field(..., min_length=1)
    fields: dict[str, str] = Field(default_factory=dict)
    enabled: bool = True

    @field_validator("fields")
    @classmethod
    def normalize_tokens(cls, v: dict[str, str]) -> dict[str, str]:
        unknown = sorted(name for name, token in v.items() if not is_known_type(token))
        if unknown:
            raise ValueError(f"unknown type token for field(s): {', '.join(unknown)}")
        return {name: normalize_type(token) for name, token in v.items()}

    def apply(self, registry: SchemaRegistry) -> None:
        registry.set(self.record_type, self.fields)
        registry.set_enabled(self.record_type, self.enabled)


def load_declarations(payload: list[dict], registry: SchemaRegistry) -> list[SchemaDeclaration]:
    """Validate every declaration first, then apply them all (no partial installs)."""
    declarations = [SchemaDeclaration.model_validate(item) for item in payload]
    for declaration in declarations:
        declaration.apply(registry)
    return declarations
