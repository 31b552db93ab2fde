"""Generation pipeline shared by the CLI and the protoc plugin."""

import json
import logging
from typing import Any, Mapping

import yaml

from twirp_openapi.config import GenerationOptions
from twirp_openapi.errors import UnknownType
from twirp_openapi.generator.document import build_document
from twirp_openapi.generator.schema import CustomFieldFunc, SchemaGenerator
from twirp_openapi.generator.servers import saas_server
from twirp_openapi.generator.validator import find_dangling_refs
from twirp_openapi.parser.base import Document

_log = logging.getLogger(__name__)


def render_api(api: dict[str, Any], fmt: str = "json") -> str:
    """Serialize an API document. Key order is preserved in both formats."""
    if fmt == "yaml":
        return yaml.safe_dump(api, sort_keys=False, allow_unicode=True)
    return json.dumps(api, indent=2, ensure_ascii=False) + "\n"


def generate_files(
    document: Document,
    options: GenerationOptions,
    custom_fields: Mapping[str, CustomFieldFunc] | None = None,
) -> dict[str, str]:
    """Generate all output files.

    Returns dict of {filename: content}: the API document, plus the
    intermediate document dump when ``options.json_file`` is set.
    """
    options.require_application()

    files: dict[str, str] = {}
    if options.json_file:
        files[options.json_file] = document.dump_json()

    generator = SchemaGenerator(document, custom_fields)
    api = build_document(
        document,
        generator,
        application=options.application,
        version=options.version,
        servers=[saas_server(options.application, options.infomaker)],
        prefix=options.prefix,
    )

    dangling = find_dangling_refs(api)
    if dangling:
        location, message = next(iter(dangling.items()))
        raise UnknownType(f"{location}: {message}", subject=location)

    files[options.output_file] = render_api(api, options.format)
    _log.info("Rendered %s", options.output_file)
    return files
