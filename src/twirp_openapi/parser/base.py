"""Intermediate document models for parsed protobuf descriptors.

The descriptor reader converts compiled .proto files into these models,
and the schema generator consumes them. Models are frozen; derived values
are produced with ``model_copy(update=...)``.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class _Model(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class EnumValue(_Model):
    """A single enum value."""

    name: str
    number: int
    description: str = ""


class Enum(_Model):
    name: str
    full_name: str
    description: str = ""
    values: list[EnumValue] = []


class MessageField(_Model):
    """A message field with its resolved type.

    ``map_key`` and ``map_value`` are only set when ``is_map`` is true,
    in which case ``is_repeated`` is always false.
    """

    name: str
    description: str = ""
    type: str  # short type name, "enum" or "map"
    full_type: str  # my.pkg.Message / my.pkg.Enum / int32
    is_repeated: bool = False
    is_map: bool = False
    is_required: bool = False
    map_key: str | None = None
    map_value: str | None = None


class Message(_Model):
    name: str
    full_name: str
    description: str = ""
    fields: list[MessageField] = []


class Method(_Model):
    """A service method. Request and response are fully-qualified message names."""

    name: str
    description: str = ""
    request_type: str
    response_type: str


class Service(_Model):
    name: str
    full_name: str
    description: str = ""
    methods: list[Method] = []


class File(_Model):
    """One .proto file, with its declarations in source order."""

    name: str
    description: str = ""
    services: list[Service] = []
    messages: list[Message] = []
    enums: list[Enum] = []


class Document(_Model):
    """All files of a single generation run."""

    files: list[File] = []

    def dump_json(self) -> str:
        """Serialize with camelCase keys, two-space indented."""
        return self.model_dump_json(indent=2, by_alias=True, exclude_none=True) + "\n"
