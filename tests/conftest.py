from pathlib import Path

import pytest
from google.protobuf import descriptor_pb2, text_format, timestamp_pb2

from twirp_openapi.parser.descriptor import read_files

FIXTURES = Path(__file__).parent / "fixtures"


def load_textproto(name: str) -> descriptor_pb2.FileDescriptorProto:
    text = (FIXTURES / name).read_text(encoding="utf-8")
    return text_format.Parse(text, descriptor_pb2.FileDescriptorProto())


def timestamp_file() -> descriptor_pb2.FileDescriptorProto:
    proto = descriptor_pb2.FileDescriptorProto()
    timestamp_pb2.DESCRIPTOR.CopyToProto(proto)
    return proto


@pytest.fixture
def news_files() -> list[descriptor_pb2.FileDescriptorProto]:
    return [timestamp_file(), load_textproto("news.textproto")]


@pytest.fixture
def docs_files() -> list[descriptor_pb2.FileDescriptorProto]:
    return [load_textproto("docs.textproto")]


@pytest.fixture
def news_doc(news_files):
    return read_files(news_files)


@pytest.fixture
def news_set_path(tmp_path, news_files) -> Path:
    path = tmp_path / "news.pb"
    path.write_bytes(descriptor_pb2.FileDescriptorSet(file=news_files).SerializeToString())
    return path
