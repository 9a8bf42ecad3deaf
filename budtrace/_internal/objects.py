"""Object model for traced cluster objects.

Only the metadata that trace propagation reads or writes is modelled:
the generation counter, the annotations mapping and the ordered list of
per-writer managed-fields entries.

Example:
    >>> meta = ObjectMeta.from_dict({"metadata": {"name": "web", "generation": 3}})
    >>> meta.generation
    3
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

import structlog

from budtrace._internal.constants import FIELD_METADATA, FIELD_SPEC, FIELD_STATUS

logger = structlog.get_logger(__name__)

FieldsV1 = dict[str, Any] | str | None


def is_status_only(fields_v1: FieldsV1) -> bool:
    """Check whether a field set touches only the status subresource.

    A missing field set is treated as status-only, as is one that cannot be
    parsed. A set touching metadata or spec is never status-only.

    Args:
        fields_v1: Field-set tree, its JSON text, or None.

    Returns:
        True if the writer owns status fields and nothing in metadata/spec.
    """
    if fields_v1 is None:
        return True

    if isinstance(fields_v1, str):
        try:
            fields_v1 = json.loads(fields_v1)
        except ValueError as e:
            logger.warning("managed_fields_unparseable", error=str(e))
            return True

    if not isinstance(fields_v1, dict):
        logger.warning("managed_fields_unexpected_type", type=type(fields_v1).__name__)
        return True

    status_only = False
    for key in fields_v1:
        if key in (FIELD_METADATA, FIELD_SPEC):
            return False
        if key == FIELD_STATUS:
            status_only = True
    return status_only


@dataclass
class ManagedFieldsEntry:
    """A per-writer field-ownership record.

    Attributes:
        manager: Name of the writer (field manager).
        operation: Write operation, e.g. "Update" or "Apply".
        fields_v1: Owned field set, as a tree of ``f:``-prefixed keys.
        trace_context: Per-writer trace slot, see codec.format_trace_record().
        subresource: Subresource the write went through, if any.
    """

    manager: str
    operation: str = "Update"
    fields_v1: FieldsV1 = None
    trace_context: str | None = None
    subresource: str | None = None

    @property
    def status_only(self) -> bool:
        return is_status_only(self.fields_v1)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ManagedFieldsEntry:
        return cls(
            manager=data.get("manager", ""),
            operation=data.get("operation", "Update"),
            fields_v1=data.get("fieldsV1"),
            trace_context=data.get("traceContext") or None,
            subresource=data.get("subresource") or None,
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"manager": self.manager, "operation": self.operation}
        if self.fields_v1 is not None:
            data["fieldsV1"] = self.fields_v1
        if self.trace_context:
            data["traceContext"] = self.trace_context
        if self.subresource:
            data["subresource"] = self.subresource
        return data


@dataclass
class ObjectMeta:
    """Metadata of a versioned cluster object.

    Attributes:
        name: Object name.
        namespace: Object namespace, empty for cluster-scoped objects.
        generation: Counter incremented on every spec change.
        annotations: Free-form string annotations.
        managed_fields: Per-writer ownership records, in insertion order.
    """

    name: str = ""
    namespace: str = ""
    generation: int = 0
    annotations: dict[str, str] = field(default_factory=dict)
    managed_fields: list[ManagedFieldsEntry] = field(default_factory=list)

    def find_managed_fields(self, manager: str) -> ManagedFieldsEntry | None:
        """Get the first managed-fields entry owned by a writer."""
        for entry in self.managed_fields:
            if entry.manager == manager:
                return entry
        return None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ObjectMeta:
        """Build from a metadata dictionary, or a whole object with a ``metadata`` key."""
        metadata = data.get("metadata", data)
        return cls(
            name=metadata.get("name", ""),
            namespace=metadata.get("namespace", ""),
            generation=int(metadata.get("generation") or 0),
            annotations=dict(metadata.get("annotations") or {}),
            managed_fields=[ManagedFieldsEntry.from_dict(entry) for entry in metadata.get("managedFields") or []],
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"name": self.name, "generation": self.generation}
        if self.namespace:
            data["namespace"] = self.namespace
        if self.annotations:
            data["annotations"] = dict(self.annotations)
        if self.managed_fields:
            data["managedFields"] = [entry.to_dict() for entry in self.managed_fields]
        return data
