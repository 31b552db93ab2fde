"""Schema generator: converts intermediate models into JSON Schema fragments.

Fragments are plain dicts in OpenAPI 3.0 schema form. Cross-references
between types resolve by fully-qualified name and are emitted as ``$ref``
pointers into ``#/components/schemas``.
"""

import logging
from types import MappingProxyType
from typing import Any, Callable, Mapping

from twirp_openapi.errors import GenerationError, InvalidMapKey, UnknownType, UnresolvedFieldType
from twirp_openapi.parser.base import Document, Enum, Message, MessageField

_log = logging.getLogger(__name__)

SchemaFragment = dict[str, Any]
CustomFieldFunc = Callable[[MessageField], SchemaFragment]

SCHEMA_REF_PREFIX = "#/components/schemas/"

TIMESTAMP_TYPE = "google.protobuf.Timestamp"

SCALAR_TYPES = {
    "int32": "integer", "int64": "integer",
    "uint32": "integer", "uint64": "integer",
    "sint32": "integer", "sint64": "integer",
    "fixed32": "integer", "fixed64": "integer",
    "sfixed32": "integer", "sfixed64": "integer",
    "double": "number", "float": "number",
    "string": "string", "bytes": "string",
    "bool": "boolean",
}


def schema_ref(type_name: str) -> SchemaFragment:
    return {"$ref": SCHEMA_REF_PREFIX + type_name}


def _with_description(schema: SchemaFragment, description: str) -> SchemaFragment:
    if description:
        schema["description"] = description
    return schema


def google_timestamp(field: MessageField) -> SchemaFragment:
    """Render google.protobuf.Timestamp as an RFC 3339 string."""
    return _with_description({"type": "string", "format": "date-time"}, field.description)


DEFAULT_CUSTOM_FIELDS: Mapping[str, CustomFieldFunc] = MappingProxyType({
    TIMESTAMP_TYPE: google_timestamp,
})


class SchemaGenerator:
    """Generates schemas for the messages and enums of one Document.

    ``custom_fields`` maps fully-qualified type names to functions that
    replace the default resolution for fields of that type. The table is
    copied at construction and cannot be changed afterwards.
    """

    def __init__(self, document: Document, custom_fields: Mapping[str, CustomFieldFunc] | None = None):
        self.document = document
        table = DEFAULT_CUSTOM_FIELDS if custom_fields is None else custom_fields
        self.custom_fields: Mapping[str, CustomFieldFunc] = MappingProxyType(dict(table))

        self._messages: dict[str, Message] = {}
        self._enums: dict[str, Enum] = {}
        for f in document.files:
            for m in f.messages:
                self._messages.setdefault(m.full_name, m)
            for e in f.enums:
                self._enums.setdefault(e.full_name, e)

    def is_custom(self, type_name: str) -> bool:
        return type_name in self.custom_fields

    def has_message(self, type_name: str) -> bool:
        return type_name in self._messages

    def _type_tag(self, full_type: str) -> str:
        """Type tag for a fully-qualified type, following the reader's rule."""
        if full_type in self._enums:
            return "enum"
        return full_type.rsplit(".", 1)[-1]

    def enum_schema(self, enum: Enum) -> SchemaFragment:
        """String schema listing the enum's value names."""
        schema: SchemaFragment = {"type": "string"}
        _with_description(schema, enum.description)
        schema["enum"] = [v.name for v in enum.values]
        return schema

    def message_schema(self, type_name: str) -> SchemaFragment:
        """Object schema for the message with the given fully-qualified name."""
        message = self._messages.get(type_name)
        if message is None:
            raise UnknownType(f"unknown message type {type_name!r}", subject=type_name)

        schema: SchemaFragment = {"type": "object"}
        _with_description(schema, message.description)

        properties: dict[str, SchemaFragment] = {}
        required: list[str] = []
        for field in message.fields:
            try:
                properties[field.name] = self.field_schema(field)
            except GenerationError as err:
                raise err.wrap(
                    f"failed to generate {type_name}.{field.name} ({field.full_type}) schema"
                ) from err

            if field.is_required:
                required.append(field.name)

        schema["properties"] = properties
        if required:
            schema["required"] = required

        return schema

    def field_schema(self, field: MessageField) -> SchemaFragment:
        """Resolve the schema of a single field.

        Repeated and map fields are unwrapped first, so custom overrides
        and references apply to the element type.
        """
        if field.is_repeated:
            item = field.model_copy(update={"is_repeated": False, "description": ""})
            try:
                items = self.field_schema(item)
            except GenerationError as err:
                raise err.wrap("failed to generate array item schema") from err
            return _with_description({"type": "array", "items": items}, field.description)

        if field.is_map:
            if field.map_key not in SCALAR_TYPES:
                raise InvalidMapKey(
                    f"map key must be a scalar, was: {field.map_key!r}", subject=field.map_key or "",
                )
            value = field.model_copy(update={
                "is_map": False,
                "description": "",
                "type": self._type_tag(field.map_value or ""),
                "full_type": field.map_value,
                "map_key": None,
                "map_value": None,
            })
            try:
                values = self.field_schema(value)
            except GenerationError as err:
                raise err.wrap("failed to generate map value schema") from err
            schema: SchemaFragment = {"type": "object"}
            _with_description(schema, field.description)
            schema["additionalProperties"] = values
            return schema

        custom = self.custom_fields.get(field.full_type)
        if custom is not None:
            return custom(field)

        scalar = SCALAR_TYPES.get(field.full_type)
        if scalar is not None:
            return _with_description({"type": scalar}, field.description)

        if field.full_type in self._enums or field.full_type in self._messages:
            return schema_ref(field.full_type)

        _log.debug("No schema rule matches field %s (%s)", field.name, field.full_type)
        raise UnresolvedFieldType(f"unhandled field type {field.full_type}", subject=field.full_type)
