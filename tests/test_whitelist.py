import json
from pathlib import Path

from api_doc_renderer.schema.document import Document
from api_doc_renderer.schema.example import build_example
from api_doc_renderer.schema.flatten import FieldDescriptor, flatten
from api_doc_renderer.schema.whitelist import filter_example, filter_fields, normalize_allowed

FIXTURES = Path(__file__).parent / "fixtures"


def _shop() -> Document:
    return Document(json.loads((FIXTURES / "shop.json").read_text(encoding="utf-8")))


def _paths(fields) -> list[str]:
    return [f.path for f in fields]


class TestNormalizeAllowed:
    def test_items_and_duplicates(self):
        allowed = ["data.departments.items[].address", "", "data.departments[].address"]
        assert normalize_allowed(allowed) == ["data.departments[].address"]

    def test_none(self):
        assert normalize_allowed(None) == []


class TestFilterFields:
    def test_no_allow_list_is_a_no_op(self):
        fields = flatten(_shop(), "UserPage")
        assert filter_fields(fields, None) == fields
        assert filter_fields(fields, []) == fields

    def test_envelope_rows_always_kept(self):
        fields = flatten(_shop(), "UserPage")
        assert _paths(filter_fields(fields, ["data.list[].name"])) == ["code", "message", "data", "data.list[].name"]

    def test_items_notation_is_equivalent(self):
        fields = flatten(_shop(), "Order")
        assert _paths(filter_fields(fields, ["lines.items[].sku"])) == ["lines[].sku"]

    def test_branch_pattern_keeps_subtree(self):
        fields = flatten(_shop(), "User")
        assert _paths(filter_fields(fields, ["address"])) == ["address", "address.city", "address.zip"]

    def test_leaf_shorthand_matches_at_any_depth(self):
        fields = flatten(_shop(), "UserPage")
        assert _paths(filter_fields(fields, ["name", "total"])) == [
            "code",
            "message",
            "data",
            "data.total",
            "data.list[].name",
        ]

    def test_leaf_shorthand_ignores_objects(self):
        fields = flatten(_shop(), "UserPage")
        assert _paths(filter_fields(fields, ["address"])) == ["code", "message", "data"]

    def test_leaf_shorthand_only_under_container(self):
        fields = [
            FieldDescriptor(path="meta.code", type="string"),
            FieldDescriptor(path="data.x.code", type="string"),
            FieldDescriptor(path="data.y.code", type="string"),
            FieldDescriptor(path="data.obj", type="object"),
        ]
        assert _paths(filter_fields(fields, ["code"], envelope_keys=[])) == ["data.x.code", "data.y.code"]

    def test_full_path_outside_container(self):
        fields = [FieldDescriptor(path="meta.code", type="string"), FieldDescriptor(path="meta.id", type="string")]
        assert _paths(filter_fields(fields, ["meta.code"])) == ["meta.code"]

    def test_custom_container_key(self):
        fields = [FieldDescriptor(path="result.code", type="string"), FieldDescriptor(path="data.code", type="string")]
        assert _paths(filter_fields(fields, ["code"], envelope_keys=[], container_keys=["result"])) == ["result.code"]

    def test_custom_envelope_keys(self):
        fields = flatten(_shop(), "UserPage")
        assert _paths(filter_fields(fields, ["total"], envelope_keys=["code"])) == ["code", "data.total"]


class TestFilterExample:
    def test_no_allow_list_is_a_no_op(self):
        value = {"code": 0, "data": {"a": 1}}
        assert filter_example(value, None) is value
        assert filter_example(value, []) is value

    def test_envelope_kept_and_container_pruned(self):
        value = build_example(_shop(), "UserPage")
        assert filter_example(value, ["data.list[].name"]) == {
            "code": 0,
            "message": "string",
            "data": {"list": [{"name": "string"}]},
        }

    def test_leaf_shorthand(self):
        value = build_example(_shop(), "UserPage")
        assert filter_example(value, ["total"]) == {"code": 0, "message": "string", "data": {"total": 0}}

    def test_other_top_level_keys_kept_verbatim(self):
        value = {"code": 0, "message": "s", "data": {"a": 1, "b": 2}, "total": 5, "extra": {"k": 1}}
        assert filter_example(value, ["data.a"]) == {
            "code": 0,
            "message": "s",
            "data": {"a": 1},
            "total": 5,
            "extra": {"k": 1},
        }

    def test_whole_branch(self):
        value = {"data": {"id": 1, "address": {"city": "c", "zip": "z"}}}
        assert filter_example(value, ["data.address"]) == {"data": {"address": {"city": "c", "zip": "z"}}}

    def test_body_without_container_is_unchanged(self):
        value = build_example(_shop(), "User")
        assert filter_example(value, ["address"]) == value

    def test_custom_container_key(self):
        value = {"result": {"a": 1, "b": 2}, "data": {"a": 1}}
        assert filter_example(value, ["a"], container_keys=["result"]) == {"result": {"a": 1}, "data": {"a": 1}}

    def test_non_dict_returned_as_is(self):
        assert filter_example([{"a": 1}], ["a"]) == [{"a": 1}]
