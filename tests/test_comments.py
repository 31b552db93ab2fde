from twirp_openapi.parser.comments import clean_comment, field_documentation, required_marker


class TestCleanComment:
    def test_trims_whitespace(self):
        assert clean_comment("  Hello there.\n") == "Hello there."

    def test_folds_indented_lines(self):
        assert clean_comment(" First line,\n   second line.\n") == "First line, second line."

    def test_keeps_unindented_newlines(self):
        assert clean_comment("a\nb") == "a\nb"

    def test_empty(self):
        assert clean_comment("") == ""


class TestRequiredMarker:
    def test_bare_token(self):
        assert required_marker("required") == (True, "")

    def test_token_with_separator(self):
        assert required_marker("required, must be positive") == (True, "must be positive")

    def test_token_with_space(self):
        assert required_marker("required the headline") == (True, "the headline")

    def test_case_sensitive(self):
        assert required_marker("Required") == (False, "Required")

    def test_only_at_start(self):
        assert required_marker("not required") == (False, "not required")


class TestFieldDocumentation:
    def test_joins_leading_and_trailing(self):
        assert field_documentation(" The title.\n", " Shown in lists.\n") == (False, "The title. Shown in lists.")

    def test_required_stripped_from_description(self):
        assert field_documentation("", " required, must be positive\n") == (True, "must be positive")

    def test_leading_required_is_ignored(self):
        assert field_documentation(" required\n", "") == (False, "required")

    def test_custom_extractor(self):
        def optional_marker(trailing: str) -> tuple[bool, str]:
            return not trailing.startswith("optional"), trailing.removeprefix("optional").strip()

        assert field_documentation("", " optional field\n", optional_marker) == (False, "field")
