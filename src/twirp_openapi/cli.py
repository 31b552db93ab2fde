"""CLI entry point for twirp-openapi."""

import logging
from pathlib import Path

import click
from google.protobuf import descriptor_pb2
from google.protobuf.message import DecodeError

from twirp_openapi.config import GenerationOptions
from twirp_openapi.errors import GenerationError
from twirp_openapi.generator.pipeline import generate_files
from twirp_openapi.parser.base import Document
from twirp_openapi.parser.descriptor import read_descriptor_set


def _read_doc(descriptor_path: Path) -> Document:
    """Read a FileDescriptorSet written by ``protoc -o``."""
    try:
        descriptor_set = descriptor_pb2.FileDescriptorSet.FromString(descriptor_path.read_bytes())
    except DecodeError as err:
        raise click.ClickException(f"{descriptor_path} is not a FileDescriptorSet: {err}") from err
    return read_descriptor_set(descriptor_set)


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def main(verbose: bool):
    """twirp-openapi: generate OpenAPI documents for Twirp services from protobuf descriptors."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.argument("descriptor_set", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-o", "--output", required=True, type=click.Path(file_okay=False, path_type=Path), help="Output directory.")
@click.option("--application", required=True, help="The name of the application.")
@click.option("--version", "api_version", default="0.0.0", show_default=True, help="The API version.")
@click.option("--infomaker", is_flag=True, help="Support the infomaker.io domain.")
@click.option("--format", "fmt", default="json", type=click.Choice(["json", "yaml"]), help="API document format.")
@click.option("--file", "spec_file", default=None, help="API document file name.")
@click.option("--json", "json_file", default=None, help="Also dump the intermediate document to this file.")
@click.option("--prefix", default="twirp", show_default=True, help="Path prefix of the Twirp routes.")
def generate(
    descriptor_set: Path,
    output: Path,
    application: str,
    api_version: str,
    infomaker: bool,
    fmt: str,
    spec_file: str | None,
    json_file: str | None,
    prefix: str,
):
    """Generate an OpenAPI document from a protoc descriptor set.

    Build the descriptor set with:

        protoc --include_imports --include_source_info -o api.pb api.proto
    """
    try:
        options = GenerationOptions(
            application=application,
            version=api_version,
            infomaker=infomaker,
            format=fmt,
            spec_file=spec_file,
            json_file=json_file,
            prefix=prefix,
        )
    except GenerationError as err:
        raise click.ClickException(str(err)) from err

    click.echo(f"Reading {descriptor_set}...")
    doc = _read_doc(descriptor_set)
    click.echo(f"Found {len(doc.files)} files.")

    try:
        files = generate_files(doc, options)
    except GenerationError as err:
        raise click.ClickException(f"failed to render API spec: {err}") from err

    output.mkdir(parents=True, exist_ok=True)
    for filename, content in files.items():
        file_path = output / filename
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(content, encoding="utf-8")
        click.echo(f"  Created {file_path}")

    click.echo(f"Generated {len(files)} files in {output}")


@main.command()
@click.argument("descriptor_set", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-o", "--output", required=True, type=click.Path(dir_okay=False, path_type=Path), help="Output file for the intermediate JSON document.")
def dump(descriptor_set: Path, output: Path):
    """Dump the intermediate document read from a protoc descriptor set."""
    doc = _read_doc(descriptor_set)

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(doc.dump_json(), encoding="utf-8")
    click.echo(f"Document saved to {output}")
