"""protoc plugin entry point (protoc-gen-openapi3).

Reads a CodeGeneratorRequest from stdin and writes a CodeGeneratorResponse
to stdout. Generation errors are reported through the response.
"""

import logging
import sys

from google.protobuf.compiler import plugin_pb2

from twirp_openapi.config import GenerationOptions
from twirp_openapi.errors import GenerationError
from twirp_openapi.generator.pipeline import generate_files
from twirp_openapi.parser.descriptor import read_request

_log = logging.getLogger(__name__)


def run(request: plugin_pb2.CodeGeneratorRequest) -> plugin_pb2.CodeGeneratorResponse:
    """Process a single plugin request."""
    response = plugin_pb2.CodeGeneratorResponse(
        supported_features=plugin_pb2.CodeGeneratorResponse.FEATURE_PROTO3_OPTIONAL,
    )

    try:
        options = GenerationOptions.from_parameter(request.parameter)
        options.require_application()
        document = read_request(request)
        files = generate_files(document, options)
    except GenerationError as err:
        _log.error("Generation failed: %s", err)
        response.error = str(err)
        return response

    for name, content in files.items():
        response.file.add(name=name, content=content)
    return response


def main():
    logging.basicConfig(level=logging.WARNING, format="%(name)s: %(message)s", stream=sys.stderr)
    request = plugin_pb2.CodeGeneratorRequest.FromString(sys.stdin.buffer.read())
    response = run(request)
    sys.stdout.buffer.write(response.SerializeToString())
    sys.stdout.buffer.flush()
