import pytest
from pydantic import ValidationError

from api_doc_renderer.config import CustomizeRule
from api_doc_renderer.render.operations import Operation, ParamInfo
from api_doc_renderer.render.projection import Projection
from api_doc_renderer.schema.document import Document
from api_doc_renderer.schema.flatten import FieldDescriptor
from api_doc_renderer.schema.nodes import normalize
from api_doc_renderer.source.loader import LoadedSource


class TestParamInfo:
    def test_create_required_param(self):
        p = ParamInfo(name="id", location="path", required=True, param_type="integer")
        assert p.name == "id"
        assert p.required is True
        assert p.description == ""


class TestOperation:
    def test_create_minimal_operation(self):
        op = Operation(method="get", path="/api/users", summary="List users", anchor="get-api-users")
        assert op.group == "Ungrouped"
        assert op.subgroup == "Default"
        assert op.content_type == "application/json"
        assert op.request_schema is None

    def test_operation_serialization_roundtrip(self):
        op = Operation(
            method="post",
            path="/api/users",
            summary="Create user",
            anchor="post-api-users",
            tags=["Users"],
            query_params=[ParamInfo(name="dry", location="query")],
            request_schema=normalize({"$ref": "#/components/schemas/User"}),
        )
        data = op.model_dump()
        restored = Operation(**data)
        assert restored.query_params[0].name == "dry"
        assert restored.request_schema.ref == "#/components/schemas/User"


class TestFieldDescriptor:
    def test_defaults(self):
        f = FieldDescriptor(path="a.b", type="string")
        assert f.required is False
        assert f.description == ""


class TestProjection:
    def test_example_text(self):
        p = Projection(fields=[], example={"a": 1})
        assert p.example_text == '{\n    "a": 1\n}'


class TestCustomizeRule:
    def test_unconfigured_lists_are_none(self):
        rule = CustomizeRule()
        assert rule.request is None
        assert rule.response is None
        assert rule.headers == {}


class TestLoadedSource:
    def test_holds_document(self):
        loaded = LoadedSource(document=Document({"info": {"title": "T"}}), raw="{}", source="<text>")
        assert loaded.document.title == "T"

    def test_rejects_plain_dict_document(self):
        with pytest.raises(ValidationError):
            LoadedSource(document={"info": {}}, raw="{}", source="<text>")
