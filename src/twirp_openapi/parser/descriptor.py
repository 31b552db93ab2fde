"""Protobuf descriptor reader.

Walks compiled ``FileDescriptorProto`` messages (as delivered by protoc in a
``CodeGeneratorRequest`` or a ``FileDescriptorSet``) and converts them into
the intermediate Document model. Comments come from ``SourceCodeInfo``, so
descriptors must be compiled with source info.
"""

import logging
from typing import Iterable

from google.protobuf import descriptor_pb2
from google.protobuf.compiler import plugin_pb2

from .base import Document, Enum, EnumValue, File, Message, MessageField, Method, Service
from .comments import FieldAttributeExtractor, clean_comment, field_documentation, required_marker

_log = logging.getLogger(__name__)

FieldProto = descriptor_pb2.FieldDescriptorProto

# SourceCodeInfo path components, see google/protobuf/descriptor.proto
_FILE_PACKAGE = descriptor_pb2.FileDescriptorProto.PACKAGE_FIELD_NUMBER
_FILE_SYNTAX = descriptor_pb2.FileDescriptorProto.SYNTAX_FIELD_NUMBER
_FILE_MESSAGE = descriptor_pb2.FileDescriptorProto.MESSAGE_TYPE_FIELD_NUMBER
_FILE_ENUM = descriptor_pb2.FileDescriptorProto.ENUM_TYPE_FIELD_NUMBER
_FILE_SERVICE = descriptor_pb2.FileDescriptorProto.SERVICE_FIELD_NUMBER
_MESSAGE_FIELD = descriptor_pb2.DescriptorProto.FIELD_FIELD_NUMBER
_MESSAGE_NESTED = descriptor_pb2.DescriptorProto.NESTED_TYPE_FIELD_NUMBER
_MESSAGE_ENUM = descriptor_pb2.DescriptorProto.ENUM_TYPE_FIELD_NUMBER
_ENUM_VALUE = descriptor_pb2.EnumDescriptorProto.VALUE_FIELD_NUMBER
_SERVICE_METHOD = descriptor_pb2.ServiceDescriptorProto.METHOD_FIELD_NUMBER

_STRUCTURED_KINDS = (FieldProto.TYPE_MESSAGE, FieldProto.TYPE_GROUP)


def read_request(
    request: plugin_pb2.CodeGeneratorRequest,
    extractor: FieldAttributeExtractor = required_marker,
) -> Document:
    """Read every file of a protoc plugin request, imports included."""
    return DescriptorReader(request.proto_file, extractor).read()


def read_descriptor_set(
    descriptor_set: descriptor_pb2.FileDescriptorSet,
    extractor: FieldAttributeExtractor = required_marker,
) -> Document:
    """Read every file of a serialized ``protoc -o`` descriptor set."""
    return DescriptorReader(descriptor_set.file, extractor).read()


def read_files(
    files: Iterable[descriptor_pb2.FileDescriptorProto],
    extractor: FieldAttributeExtractor = required_marker,
) -> Document:
    return DescriptorReader(files, extractor).read()


class DescriptorReader:
    """Converts a resolved set of file descriptors into a Document."""

    def __init__(
        self,
        files: Iterable[descriptor_pb2.FileDescriptorProto],
        extractor: FieldAttributeExtractor = required_marker,
    ):
        self.files = list(files)
        self.extractor = extractor
        self._messages: dict[str, descriptor_pb2.DescriptorProto] = {}
        for f in self.files:
            self._index_messages(_package_prefix(f.package), f.message_type)

    def read(self) -> Document:
        return Document(files=[self._read_file(f) for f in self.files])

    def _index_messages(self, prefix: str, messages) -> None:
        for m in messages:
            full_name = prefix + m.name
            self._messages.setdefault(full_name, m)
            self._index_messages(full_name + ".", m.nested_type)

    def _read_file(self, f: descriptor_pb2.FileDescriptorProto) -> File:
        comments = _Comments(f.source_code_info)
        prefix = _package_prefix(f.package)

        messages: list[Message] = []
        nested_enums: list[Enum] = []
        for i, m in enumerate(f.message_type):
            self._read_message(m, prefix, (_FILE_MESSAGE, i), comments, messages, nested_enums)

        enums = [
            self._read_enum(e, prefix, (_FILE_ENUM, i), comments)
            for i, e in enumerate(f.enum_type)
        ]
        enums.extend(nested_enums)

        services = [
            self._read_service(s, prefix, (_FILE_SERVICE, i), comments)
            for i, s in enumerate(f.service)
        ]

        description = comments.leading((_FILE_SYNTAX,)) or comments.leading((_FILE_PACKAGE,))

        _log.debug(
            "Read %s: %d services, %d messages, %d enums",
            f.name, len(services), len(messages), len(enums),
        )
        return File(
            name=f.name,
            description=clean_comment(description),
            services=services,
            messages=messages,
            enums=enums,
        )

    def _read_message(
        self,
        message: descriptor_pb2.DescriptorProto,
        prefix: str,
        path: tuple[int, ...],
        comments: "_Comments",
        messages: list[Message],
        enums: list[Enum],
    ) -> None:
        """Append the message, then its nested messages depth first.

        Nested enums go to ``enums``. Synthetic map entry messages are skipped.
        """
        full_name = prefix + message.name
        messages.append(
            Message(
                name=message.name,
                full_name=full_name,
                description=clean_comment(comments.leading(path)),
                fields=[
                    self._read_field(field, path + (_MESSAGE_FIELD, i), comments)
                    for i, field in enumerate(message.field)
                ],
            )
        )

        for i, e in enumerate(message.enum_type):
            enums.append(self._read_enum(e, full_name + ".", path + (_MESSAGE_ENUM, i), comments))

        for i, nested in enumerate(message.nested_type):
            if nested.options.map_entry:
                continue
            self._read_message(
                nested, full_name + ".", path + (_MESSAGE_NESTED, i), comments, messages, enums,
            )

    def _read_field(
        self, field: FieldProto, path: tuple[int, ...], comments: "_Comments"
    ) -> MessageField:
        is_required, description = field_documentation(
            comments.leading(path), comments.trailing(path), self.extractor,
        )
        type_name, full_type = resolve_types(field)

        values = {
            "name": field.name,
            "description": description,
            "type": type_name,
            "full_type": full_type,
            "is_repeated": field.label == FieldProto.LABEL_REPEATED,
            "is_required": is_required,
        }

        entry = self._map_entry(field)
        if entry is not None:
            key, value = _entry_fields(entry)
            values.update(
                type="map",
                is_map=True,
                is_repeated=False,
                map_key=resolve_types(key)[1],
                map_value=resolve_types(value)[1],
            )

        return MessageField(**values)

    def _map_entry(self, field: FieldProto) -> descriptor_pb2.DescriptorProto | None:
        if field.label != FieldProto.LABEL_REPEATED or field.type != FieldProto.TYPE_MESSAGE:
            return None
        entry = self._messages.get(_strip_dot(field.type_name))
        if entry is None or not entry.options.map_entry:
            return None
        return entry

    def _read_enum(
        self,
        enum: descriptor_pb2.EnumDescriptorProto,
        prefix: str,
        path: tuple[int, ...],
        comments: "_Comments",
    ) -> Enum:
        return Enum(
            name=enum.name,
            full_name=prefix + enum.name,
            description=clean_comment(comments.leading(path)),
            values=[
                EnumValue(
                    name=v.name,
                    number=v.number,
                    description=clean_comment(comments.leading(path + (_ENUM_VALUE, i))),
                )
                for i, v in enumerate(enum.value)
            ],
        )

    def _read_service(
        self,
        service: descriptor_pb2.ServiceDescriptorProto,
        prefix: str,
        path: tuple[int, ...],
        comments: "_Comments",
    ) -> Service:
        return Service(
            name=service.name,
            full_name=prefix + service.name,
            description=clean_comment(comments.leading(path)),
            methods=[
                Method(
                    name=m.name,
                    description=clean_comment(comments.leading(path + (_SERVICE_METHOD, i))),
                    request_type=_strip_dot(m.input_type),
                    response_type=_strip_dot(m.output_type),
                )
                for i, m in enumerate(service.method)
            ],
        )


def resolve_types(field: FieldProto) -> tuple[str, str]:
    """Return (type, full type) for a field.

    Messages give their short and fully-qualified names, enums give
    ``"enum"`` and the enum's fully-qualified name, scalars give their kind
    name (``int32``, ``bytes``, ...) twice.
    """
    if field.type in _STRUCTURED_KINDS:
        full_name = _strip_dot(field.type_name)
        return full_name.rsplit(".", 1)[-1], full_name
    if field.type == FieldProto.TYPE_ENUM:
        return "enum", _strip_dot(field.type_name)

    kind = FieldProto.Type.Name(field.type).removeprefix("TYPE_").lower()
    return kind, kind


class _Comments:
    """Comment lookup by SourceCodeInfo path."""

    def __init__(self, info: descriptor_pb2.SourceCodeInfo):
        self._locations: dict[tuple[int, ...], descriptor_pb2.SourceCodeInfo.Location] = {}
        for location in info.location:
            self._locations.setdefault(tuple(location.path), location)

    def leading(self, path: tuple[int, ...]) -> str:
        location = self._locations.get(path)
        return location.leading_comments if location is not None else ""

    def trailing(self, path: tuple[int, ...]) -> str:
        location = self._locations.get(path)
        return location.trailing_comments if location is not None else ""


def _entry_fields(entry: descriptor_pb2.DescriptorProto) -> tuple[FieldProto, FieldProto]:
    by_number = {f.number: f for f in entry.field}
    return by_number[1], by_number[2]


def _package_prefix(package: str) -> str:
    return f"{package}." if package else ""


def _strip_dot(type_name: str) -> str:
    return type_name.removeprefix(".")
