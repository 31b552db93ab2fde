import pytest

from twirp_openapi.config import GenerationOptions
from twirp_openapi.errors import InvalidParameter, MissingApplicationName


class TestFromParameter:
    def test_defaults(self):
        options = GenerationOptions.from_parameter("")
        assert options.application == ""
        assert options.version == "0.0.0"
        assert options.infomaker is False
        assert options.json_file is None
        assert options.format == "json"
        assert options.prefix == "twirp"

    def test_all_keys(self):
        options = GenerationOptions.from_parameter(
            "application=news,version=1.2.0,infomaker=true,json=news.json,file=api.json,format=yaml"
        )
        assert options.application == "news"
        assert options.version == "1.2.0"
        assert options.infomaker is True
        assert options.json_file == "news.json"
        assert options.spec_file == "api.json"
        assert options.format == "yaml"

    def test_bare_key_is_true(self):
        assert GenerationOptions.from_parameter("application=news,infomaker").infomaker is True

    def test_unknown_key(self):
        with pytest.raises(InvalidParameter):
            GenerationOptions.from_parameter("application=news,colour=blue")

    def test_bad_format(self):
        with pytest.raises(InvalidParameter):
            GenerationOptions.from_parameter("format=xml")


class TestOptions:
    def test_require_application(self):
        with pytest.raises(MissingApplicationName):
            GenerationOptions().require_application()

    def test_default_output_file(self):
        assert GenerationOptions(application="news").output_file == "news-openapi.json"
        assert GenerationOptions(application="news", format="yaml").output_file == "news-openapi.yaml"

    def test_explicit_output_file(self):
        assert GenerationOptions(application="news", spec_file="api.json").output_file == "api.json"

    def test_dump_cannot_overwrite_document(self):
        with pytest.raises(InvalidParameter):
            GenerationOptions(application="news", json_file="news-openapi.json")

    def test_dump_collision_in_parameter(self):
        with pytest.raises(InvalidParameter):
            GenerationOptions.from_parameter("application=news,json=api.json,file=api.json")
