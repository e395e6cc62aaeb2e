import json
from pathlib import Path

from api_doc_renderer.schema.document import Document
from api_doc_renderer.schema.example import build_example, example_json

FIXTURES = Path(__file__).parent / "fixtures"


def _shop() -> Document:
    return Document(json.loads((FIXTURES / "shop.json").read_text(encoding="utf-8")))


class TestBuildExample:
    def test_placeholders(self):
        schema = {
            "type": "object",
            "properties": {
                "s": {"type": "string"},
                "i": {"type": "integer"},
                "n": {"type": "number"},
                "b": {"type": "boolean"},
                "x": {},
            },
        }
        assert build_example(None, schema) == {"s": "string", "i": 0, "n": 0, "b": False, "x": None}

    def test_single_ref(self):
        doc = Document({"components": {"schemas": {"A": {"type": "object", "properties": {"a": {"type": "string"}}}}}})
        assert build_example(doc, "#/components/schemas/A") == {"a": "string"}

    def test_root_array_of_ref(self):
        doc = Document({"components": {"schemas": {"A": {"type": "object", "properties": {"a": {"type": "string"}}}}}})
        assert build_example(doc, {"type": "array", "items": {"$ref": "#/components/schemas/A"}}) == [{"a": "string"}]

    def test_scalar_arrays_are_empty(self):
        assert build_example(None, {"type": "array", "items": {"type": "string"}}) == []

    def test_nested_document(self):
        assert build_example(_shop(), "UserPage") == {
            "code": 0,
            "message": "string",
            "data": {
                "total": 0,
                "list": [
                    {
                        "id": 0,
                        "name": "string",
                        "tags": [],
                        "address": {"city": "string", "zip": "string"},
                    }
                ],
            },
        }

    def test_all_of_members_merged(self):
        assert build_example(_shop(), "Order") == {
            "id": "string",
            "status": "string",
            "lines": [{"sku": "string", "qty": 0}],
        }

    def test_unresolved(self):
        assert build_example(_shop(), "Missing") is None
        assert build_example(Document({}), {"type": "array", "items": {"$ref": "#/components/schemas/Gone"}}) == []

    def test_cycle_stops_with_empty_object(self):
        assert build_example(_shop(), "Node") == {"name": "string", "children": [{}]}


class TestExampleJson:
    def test_four_space_indent_and_unicode(self):
        assert example_json({"a": "é"}) == '{\n    "a": "é"\n}'

    def test_none(self):
        assert example_json(None) == "null"
