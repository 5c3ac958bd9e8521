"""Attributes an Application Provider wants, grouped by schema grammar."""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from ..constants import (
    DESIRED_ATTRIBUTES,
    OPTIONAL_GROUP_ATTRIBUTES,
    OPTIONAL_USER_ATTRIBUTES,
    PATH_DELIMITER,
    REQUIRED_GROUP_ATTRIBUTES,
    REQUIRED_USER_ATTRIBUTES,
    SCHEMA_GRAMMARS_SUPPORTED,
)
from ..errors import ErrorAccumulator
from ..json_object import JsonObject, JsonObjectBuilder
from .base import Metadata


class SchemaGrammarAttributes(BaseModel):
    """Desired user and group attributes expressed in one schema grammar."""

    schema_grammar: str
    required_user_attributes: Optional[List[str]] = None
    optional_user_attributes: Optional[List[str]] = None
    required_group_attributes: Optional[List[str]] = None
    optional_group_attributes: Optional[List[str]] = None

    def to_dict(self) -> Dict[str, List[str]]:
        return self.model_dump(exclude={"schema_grammar"}, exclude_none=True)


class DesiredAttributes(Metadata):
    attributes: Dict[str, SchemaGrammarAttributes] = Field(default_factory=dict)

    def for_schema_grammar(self, schema_grammar: str) -> Optional[SchemaGrammarAttributes]:
        return self.attributes.get(schema_grammar)

    @property
    def preferred(self) -> Optional[SchemaGrammarAttributes]:
        """Attributes for the configured preferred schema grammar."""
        return self.for_schema_grammar(self.configuration.preferred_schema_grammar)

    def to_json(self) -> JsonObject:
        builder = JsonObjectBuilder(DESIRED_ATTRIBUTES)
        for schema_grammar, entry in self.attributes.items():
            builder.put(schema_grammar, entry.to_dict())
        return builder.build()

    def hydrate_from_json(self, json: Optional[JsonObject]) -> None:
        if json is None:
            return
        json = json.unwrap_object_if_needed(DESIRED_ATTRIBUTES)
        super().hydrate_from_json(json)
        attributes: Dict[str, SchemaGrammarAttributes] = {}
        for schema_grammar in json.keys():
            # Stop on the first unknown key; a common mistake is to omit the
            # schema grammar level entirely.
            if schema_grammar not in SCHEMA_GRAMMARS_SUPPORTED:
                expected = ", ".join(f'"{g}"' for g in SCHEMA_GRAMMARS_SUPPORTED)
                json.errors.add(
                    f'Invalid member of "{json.json_path or DESIRED_ATTRIBUTES}". '
                    f'Unrecognized schema grammar (received: "{schema_grammar}"). '
                    f"Expected one of {expected}"
                )
                break
            grammar_json = json.get_object(schema_grammar)
            if grammar_json is None:
                continue
            attributes[schema_grammar] = SchemaGrammarAttributes(
                schema_grammar=schema_grammar,
                required_user_attributes=grammar_json.get_string_list(REQUIRED_USER_ATTRIBUTES),
                optional_user_attributes=grammar_json.get_string_list(OPTIONAL_USER_ATTRIBUTES),
                required_group_attributes=grammar_json.get_string_list(
                    REQUIRED_GROUP_ATTRIBUTES
                ),
                optional_group_attributes=grammar_json.get_string_list(
                    OPTIONAL_GROUP_ATTRIBUTES
                ),
            )
        self.attributes = attributes

    def validate(self, errors: ErrorAccumulator) -> None:
        if not self.attributes:
            errors.add(f'Missing value for "{self.json_path or DESIRED_ATTRIBUTES}"')
        for schema_grammar, entry in self.attributes.items():
            prefix = f"{schema_grammar}{PATH_DELIMITER}"
            self.validate_required_string_collection(
                errors, prefix + REQUIRED_USER_ATTRIBUTES, entry.required_user_attributes
            )
            self.validate_optional_string_collection(
                errors, prefix + OPTIONAL_USER_ATTRIBUTES, entry.optional_user_attributes
            )
            self.validate_optional_string_collection(
                errors, prefix + REQUIRED_GROUP_ATTRIBUTES, entry.required_group_attributes
            )
            self.validate_optional_string_collection(
                errors, prefix + OPTIONAL_GROUP_ATTRIBUTES, entry.optional_group_attributes
            )
