"""Profile descriptors."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar, Dict, FrozenSet, Optional, Type

from ..constants import ExtensionPoint

if TYPE_CHECKING:
    from ..metadata.base import Metadata


class Profile:
    """An authentication or provisioning profile identified by a URN.

    Subclasses declare which :class:`~fastfed.metadata.base.Metadata` type
    carries their data at each extension point and which of those extension
    points are mandatory. The handshake engine never needs to know the shape
    of that data.
    """

    urn: ClassVar[str] = ""
    extension_types: ClassVar[Dict[ExtensionPoint, Type["Metadata"]]] = {}
    required_extensions: ClassVar[FrozenSet[ExtensionPoint]] = frozenset()

    def requires_extension(self, point: ExtensionPoint) -> bool:
        """Return ``True`` when ``point`` must carry this profile's extension."""
        return point in self.required_extensions

    def new_extension(self, point: ExtensionPoint, configuration: Any) -> Optional["Metadata"]:
        """Construct an empty extension object for ``point``, if the profile defines one."""
        extension_type = self.extension_types.get(point)
        if extension_type is None:
            return None
        return extension_type(configuration)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(urn={self.urn!r})"
