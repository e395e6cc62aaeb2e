from pathlib import Path

from api_doc_renderer.source.order import ordered_top_level_keys

FIXTURES = Path(__file__).parent / "fixtures"


class TestOrderedTopLevelKeys:
    def test_declaration_order_not_sorted(self):
        assert ordered_top_level_keys('{"paths": {"/b": {}, "/a": {}}}') == ["/b", "/a"]

    def test_fixture_paths(self):
        raw = (FIXTURES / "shop.json").read_text(encoding="utf-8")
        assert ordered_top_level_keys(raw) == ["/v1/users", "/v1/orders/{id}", "/v1/auth/login"]

    def test_only_root_container_counts(self):
        raw = '{"info": {"paths": {"/nested": 1}}, "paths": {"/z": {"get": {}}, "/y": []}}'
        assert ordered_top_level_keys(raw) == ["/z", "/y"]

    def test_other_container_key(self):
        raw = '{"components": {"schemas": {}}, "tags": {"b": 1, "a": 2}}'
        assert ordered_top_level_keys(raw, "tags") == ["b", "a"]

    def test_escaped_keys_and_strings(self):
        raw = '{"x": "a \\"paths\\" b", "paths": {"/a\\u00e9": {"d": "}{"}, "/b": 1}}'
        assert ordered_top_level_keys(raw) == ["/a\u00e9", "/b"]

    def test_byte_order_mark(self):
        assert ordered_top_level_keys('\ufeff{"paths": {"/x": {}}}') == ["/x"]

    def test_missing_or_empty_container(self):
        assert ordered_top_level_keys('{"openapi": "3.0.0"}') == []
        assert ordered_top_level_keys('{"paths": {}}') == []
        assert ordered_top_level_keys('{"paths": []}') == []

    def test_not_json(self):
        assert ordered_top_level_keys("openapi: 3.0.0\npaths:\n  /a: {}\n") == []
        assert ordered_top_level_keys("") == []

    def test_malformed_before_container(self):
        assert ordered_top_level_keys('{"info": [1,, 2], "paths": {"/a": {}}}') == []

    def test_malformed_inside_container_keeps_partial(self):
        assert ordered_top_level_keys('{"paths": {"/b": {}, "/a": {} "/c": {}}}') == ["/b", "/a"]
