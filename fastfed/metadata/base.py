"""Extensible base class shared by every document in the handshake."""

from __future__ import annotations

import abc
import logging
from typing import TYPE_CHECKING, Any, Dict, Iterable, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from ..constants import PATH_DELIMITER, ExtensionPoint
from ..errors import ErrorAccumulator, InvalidMetadataError
from ..json_object import JsonObject, JsonObjectBuilder, parse_json
from . import validation

if TYPE_CHECKING:
    from ..config import FastFedConfig

logger = logging.getLogger(__name__)

MetadataT = TypeVar("MetadataT", bound="Metadata")


class Metadata(BaseModel, abc.ABC):
    """Base for documents that are hydrated from JSON, validated and serialized.

    Each instance holds a reference to the (immutable) configuration, the
    JSON path it was hydrated from, and a URN-keyed table of profile
    extensions. Copies made with :meth:`copy` are deep, except for the
    configuration which is shared.

    ``validate`` never raises. Violations are appended to the supplied
    :class:`~fastfed.errors.ErrorAccumulator` so that every problem in a
    document is reported together.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, validate_assignment=True)

    extensions: Dict[str, "Metadata"] = Field(default_factory=dict)

    _configuration: Any = PrivateAttr(default=None)
    _json_path: str = PrivateAttr(default="")

    def __init__(self, configuration: "FastFedConfig", **data: Any) -> None:
        super().__init__(**data)
        self._configuration = configuration

    # ------------------------------------------------------------------
    @property
    def configuration(self) -> "FastFedConfig":
        return self._configuration

    @property
    def json_path(self) -> str:
        return self._json_path

    def fully_qualified_name(self, member: str) -> str:
        if not self._json_path:
            return member
        return f"{self._json_path}{PATH_DELIMITER}{member}"

    def copy(self: MetadataT) -> MetadataT:  # type: ignore[override]
        """Return a deep copy that shares this object's configuration."""
        return self.model_copy(deep=True)

    def __eq__(self, other: object) -> bool:
        if type(self) is not type(other):
            return False
        return all(
            getattr(self, name) == getattr(other, name) for name in type(self).model_fields
        )

    # ------------------------------------------------------------------
    def hydrate_from_json(self, json: Optional[JsonObject]) -> None:
        """Populate fields from ``json``. A ``None`` document is ignored."""
        if json is None:
            return
        self._json_path = json.json_path

    def to_json(self) -> JsonObject:
        builder = JsonObjectBuilder()
        for urn, extension in self.extensions.items():
            builder.put(urn, extension.to_json())
        return builder.build()

    @abc.abstractmethod
    def validate(self, errors: ErrorAccumulator) -> None:  # type: ignore[override]
        """Append every violation found in this object to ``errors``."""
        raise NotImplementedError

    def hydrate_and_validate(self, text: str) -> None:
        """Parse, hydrate and validate ``text``.

        Raises:
            InvalidMetadataError: with every violation that was found.
        """
        self.hydrate_and_validate_json(parse_json(text))

    def hydrate_and_validate_json(self, json: JsonObject) -> None:
        errors = json.errors
        self.hydrate_from_json(json)
        if errors.has_errors():
            raise InvalidMetadataError(errors)
        self.validate(errors)
        if errors.has_errors():
            raise InvalidMetadataError(errors)

    @classmethod
    def from_json(cls: Type[MetadataT], configuration: "FastFedConfig", text: str) -> MetadataT:
        metadata = cls(configuration)
        metadata.hydrate_and_validate(text)
        return metadata

    def hydrate_child(
        self, json: JsonObject, member: str, child_type: Type[MetadataT]
    ) -> Optional[MetadataT]:
        """Hydrate the nested object ``member`` as ``child_type``, if present."""
        child_json = json.get_object(member)
        if child_json is None:
            return None
        child = child_type(self._configuration)
        child.hydrate_from_json(child_json)
        return child

    # ------------------------------------------------------------------
    # Profile extensions
    # ------------------------------------------------------------------
    def add_extension(self, urn: str, extension: "Metadata") -> None:
        self.extensions[urn] = extension

    def has_extension(self, urn: str) -> bool:
        return urn in self.extensions

    def get_extension(self, urn: str) -> Optional["Metadata"]:
        return self.extensions.get(urn)

    def hydrate_extensions(self, json: JsonObject, point: ExtensionPoint) -> None:
        self.extensions = self.hydrate_extension_table(json, point)

    def validate_extensions(
        self, errors: ErrorAccumulator, active_urns: Iterable[str], point: ExtensionPoint
    ) -> None:
        self.validate_extension_table(errors, self.extensions, active_urns, point)

    def hydrate_extension_table(
        self, json: Optional[JsonObject], point: ExtensionPoint
    ) -> Dict[str, "Metadata"]:
        """Build extension objects for every registered profile present in ``json``."""
        table: Dict[str, Metadata] = {}
        if json is None:
            return table
        for profile in self._configuration.profile_registry.all_profiles():
            if not json.contains_key(profile.urn):
                continue
            extension_json = json.get_object(profile.urn)
            if extension_json is None:
                continue
            extension = profile.new_extension(point, self._configuration)
            if extension is None:
                logger.debug(
                    f"Profile {profile.urn} has no {point.value} extension; ignoring member"
                )
                continue
            extension.hydrate_from_json(extension_json)
            table[profile.urn] = extension
        return table

    def validate_extension_table(
        self,
        errors: ErrorAccumulator,
        table: Dict[str, "Metadata"],
        active_urns: Iterable[str],
        point: ExtensionPoint,
        member: Optional[str] = None,
        enforce_required: bool = True,
    ) -> None:
        """Validate ``table`` against the profiles that are active for ``point``."""
        registry = self._configuration.profile_registry
        for urn in sorted(active_urns):
            profile = registry.get_by_urn(urn)
            if profile is None:
                logger.debug(f"Ignoring unrecognized profile {urn}")
                continue
            extension = table.get(urn)
            if extension is None:
                if enforce_required and profile.requires_extension(point):
                    name = f"{member}{PATH_DELIMITER}{urn}" if member else urn
                    errors.add(validation.missing_value(self.fully_qualified_name(name)))
                continue
            extension.validate(errors)

    @staticmethod
    def extension_table_to_json(table: Dict[str, "Metadata"]) -> JsonObject:
        builder = JsonObjectBuilder()
        for urn, extension in table.items():
            builder.put(urn, extension.to_json())
        return builder.build()

    # ------------------------------------------------------------------
    # Validation helpers
    # ------------------------------------------------------------------
    def validate_required_string(
        self, errors: ErrorAccumulator, member: str, value: Optional[str]
    ) -> None:
        validation.validate_required(errors, self.fully_qualified_name(member), value)

    def validate_required_object(self, errors: ErrorAccumulator, member: str, value: Any) -> None:
        validation.validate_required(errors, self.fully_qualified_name(member), value)

    def validate_required_url(
        self, errors: ErrorAccumulator, member: str, value: Optional[str]
    ) -> None:
        name = self.fully_qualified_name(member)
        if validation.validate_required(errors, name, value):
            validation.validate_url(errors, name, value)

    def validate_optional_url(
        self, errors: ErrorAccumulator, member: str, value: Optional[str]
    ) -> None:
        validation.validate_url(errors, self.fully_qualified_name(member), value)

    def validate_required_string_collection(
        self, errors: ErrorAccumulator, member: str, values: Optional[Iterable[str]]
    ) -> None:
        name = self.fully_qualified_name(member)
        if validation.validate_required(errors, name, values):
            validation.validate_string_collection(errors, name, values)

    def validate_optional_string_collection(
        self, errors: ErrorAccumulator, member: str, values: Optional[Iterable[str]]
    ) -> None:
        validation.validate_string_collection(errors, self.fully_qualified_name(member), values)
