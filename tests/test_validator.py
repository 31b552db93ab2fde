from twirp_openapi.generator.document import build_document
from twirp_openapi.generator.schema import SchemaGenerator
from twirp_openapi.generator.validator import find_dangling_refs


class TestFindDanglingRefs:
    def test_generated_document_is_clean(self, news_doc):
        api = build_document(news_doc, SchemaGenerator(news_doc), application="news")
        assert find_dangling_refs(api) == {}

    def test_missing_target(self):
        api = {
            "paths": {"/twirp/a.Svc/Do": {"post": {"requestBody": {"content": {"application/json": {
                "schema": {"$ref": "#/components/schemas/a.Missing"},
            }}}}}},
            "components": {"schemas": {}},
        }
        errors = find_dangling_refs(api)
        assert list(errors) == ["/paths/~1twirp~1a.Svc~1Do/post/requestBody/content/application~1json/schema"]
        assert "a.Missing" in next(iter(errors.values()))

    def test_refs_inside_lists(self):
        api = {
            "components": {"schemas": {
                "a.A": {"type": "object", "properties": {}},
                "a.B": {"allOf": [{"$ref": "#/components/schemas/a.A"}, {"$ref": "#/components/schemas/a.C"}]},
            }},
        }
        assert list(find_dangling_refs(api)) == ["/components/schemas/a.B/allOf/1"]

    def test_external_ref(self):
        api = {"components": {"schemas": {"a.A": {"$ref": "other.yaml#/A"}}}}
        errors = find_dangling_refs(api)
        assert "unsupported" in errors["/components/schemas/a.A"]
