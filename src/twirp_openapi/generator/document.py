"""Assembles the OpenAPI document for a Twirp API.

Every service becomes a tag and every method a POST operation at
``/<prefix>/<service full name>/<method>``. Message and enum schemas are
registered under their fully-qualified names.
"""

import logging
from typing import Any

from twirp_openapi.errors import GenerationError, MissingApplicationName, UnknownType
from twirp_openapi.generator.schema import SchemaGenerator, schema_ref
from twirp_openapi.parser.base import Document, Method, Service

_log = logging.getLogger(__name__)

OPENAPI_VERSION = "3.0.0"
DEFAULT_PREFIX = "twirp"
BEARER_SCHEME = "bearer"
JSON_CONTENT_TYPE = "application/json"


def bearer_security_scheme() -> dict[str, str]:
    return {"type": "http", "scheme": "bearer", "bearerFormat": "JWT"}


def operation_path(service: Service, method: Method, prefix: str = DEFAULT_PREFIX) -> str:
    return f"/{prefix}/{service.full_name}/{method.name}"


def build_document(
    document: Document,
    generator: SchemaGenerator,
    *,
    application: str,
    version: str = "0.0.0",
    servers: list[dict[str, Any]] | None = None,
    prefix: str = DEFAULT_PREFIX,
) -> dict[str, Any]:
    """Build the full OpenAPI document.

    Raises on the first error; no partial document is ever returned.
    """
    if not application:
        raise MissingApplicationName("missing application name")

    api: dict[str, Any] = {
        "openapi": OPENAPI_VERSION,
        "info": {"title": f"{application} API", "version": version},
    }
    if servers:
        api["servers"] = list(servers)

    tags: list[dict[str, str]] = []
    paths: dict[str, dict[str, Any]] = {}
    schemas: dict[str, Any] = {}

    for file in document.files:
        for service in file.services:
            tag = {"name": service.name}
            if service.description:
                tag["description"] = service.description
            tags.append(tag)

            for method in service.methods:
                try:
                    path, operation = create_operation(generator, service, method, prefix)
                except GenerationError as err:
                    raise err.wrap(
                        f"failed to create the operation for {service.full_name}.{method.name}"
                    ) from err
                paths[path] = {"post": operation}

        for message in file.messages:
            if generator.is_custom(message.full_name):
                continue
            try:
                schemas[message.full_name] = generator.message_schema(message.full_name)
            except GenerationError as err:
                raise err.wrap(f"failed to generate schema for {message.full_name}") from err

        for enum in file.enums:
            if generator.is_custom(enum.full_name):
                continue
            schemas[enum.full_name] = generator.enum_schema(enum)

        _log.debug("Processed %s", file.name)

    api["tags"] = tags
    api["paths"] = paths
    api["components"] = {
        "schemas": schemas,
        "securitySchemes": {BEARER_SCHEME: bearer_security_scheme()},
    }

    _log.debug("Built document with %d paths and %d schemas", len(paths), len(schemas))
    return api


def create_operation(
    generator: SchemaGenerator, service: Service, method: Method, prefix: str = DEFAULT_PREFIX,
) -> tuple[str, dict[str, Any]]:
    """Return (path, operation) for a single method.

    Request and response must be messages with a registered schema; custom
    types get no schema of their own.
    """
    for type_name in (method.request_type, method.response_type):
        if not generator.has_message(type_name):
            raise UnknownType(f"unknown message type {type_name!r}", subject=type_name)
        if generator.is_custom(type_name):
            raise UnknownType(f"message type {type_name!r} has no schema", subject=type_name)

    operation: dict[str, Any] = {
        "tags": [service.name],
        "summary": method.name,
    }
    if method.description:
        operation["description"] = method.description

    operation["requestBody"] = {
        "content": {JSON_CONTENT_TYPE: {"schema": schema_ref(method.request_type)}},
    }
    operation["responses"] = {
        "200": {
            "description": "Method response",
            "content": {JSON_CONTENT_TYPE: {"schema": schema_ref(method.response_type)}},
        },
    }
    operation["security"] = [{BEARER_SCHEME: []}]

    return operation_path(service, method, prefix), operation
