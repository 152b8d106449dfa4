"""Tests for specgraph.parser.extractor (parse_spec)."""

from __future__ import annotations

import copy
import json
from typing import Any

import pytest

from specgraph.exceptions import (
    EmptyInputError,
    InvalidStructureError,
    NoEndpointsFoundError,
    UnparseableContentError,
)
from specgraph.exit_codes import EXIT_INVALID_SPEC
from specgraph.models import ApiSpecDomainModel, HTTPMethod
from specgraph.parser import parse_spec


def _names(refs: list) -> list[str]:
    return [ref.name for ref in refs]


def _doc(paths: Any, **extra: Any) -> dict[str, Any]:
    return {"openapi": "3.0.0", "info": {"title": "T", "version": "1"}, "paths": paths, **extra}


def _ok(status: str = "200") -> dict[str, Any]:
    return {"responses": {status: {"description": "ok"}}}


# ---------------------------------------------------------------------------
# Whole-document parsing
# ---------------------------------------------------------------------------


class TestParseStore:
    """Parse the YAML store fixture end to end."""

    def test_info(self, store_model: ApiSpecDomainModel) -> None:
        assert store_model.title == "Store API"
        # YAML reads ``version: 1.0`` as a float.
        assert store_model.version == "1.0"

    def test_endpoint_order(self, store_model: ApiSpecDomainModel) -> None:
        assert [e.id for e in store_model.endpoints] == [
            "GET /orders",
            "POST /orders",
            "GET /orders/{id}",
            "GET /health",
        ]

    def test_path_level_keys_are_not_operations(self, store_model: ApiSpecDomainModel) -> None:
        assert all(e.method in HTTPMethod for e in store_model.endpoints)
        assert len(store_model.endpoints) == 4

    def test_list_orders(self, store_model: ApiSpecDomainModel) -> None:
        endpoint = store_model.endpoints[0]
        assert endpoint.method == HTTPMethod.GET
        assert endpoint.path == "/orders"
        assert endpoint.summary == "List orders"
        assert endpoint.description is None
        assert endpoint.tags == ["orders"]
        assert endpoint.request_schemas == []
        assert _names(endpoint.response_schemas) == ["Order", "Error"]
        assert endpoint.status_codes == ["200", "default"]

    def test_create_order(self, store_model: ApiSpecDomainModel) -> None:
        endpoint = store_model.endpoints[1]
        assert _names(endpoint.request_schemas) == ["NewOrder"]
        assert _names(endpoint.response_schemas) == ["Order", "Error"]
        assert endpoint.status_codes == ["201", "default"]

    def test_composed_response_collects_nested_refs(
        self, store_model: ApiSpecDomainModel
    ) -> None:
        endpoint = store_model.endpoints[2]
        assert _names(endpoint.response_schemas) == ["Order", "Customer"]
        assert endpoint.status_codes == ["200", "404"]

    def test_untagged_endpoint(self, store_model: ApiSpecDomainModel) -> None:
        endpoint = store_model.endpoints[3]
        assert endpoint.tags == []
        assert endpoint.response_schemas == []
        assert endpoint.status_codes == ["200"]

    def test_schemas_in_declaration_order(self, store_model: ApiSpecDomainModel) -> None:
        assert [s.name for s in store_model.schemas] == [
            "Order",
            "NewOrder",
            "LineItem",
            "Error",
        ]

    def test_complexity_scores(self, store_model: ApiSpecDomainModel) -> None:
        scores = {s.name: s.complexity_score for s in store_model.schemas}
        assert scores == {"Order": 12, "NewOrder": 9, "LineItem": 8, "Error": 5}

    def test_schema_raw_is_kept(self, store_model: ApiSpecDomainModel) -> None:
        error = store_model.schemas[3]
        assert error.raw == {"type": "object", "properties": {"message": {"type": "string"}}}


class TestParsePets:
    """Parse the JSON pets fixture from a mapping and from text."""

    def test_mapping_and_text_agree(self, pets_raw: dict, pets_text: str) -> None:
        assert parse_spec(pets_raw) == parse_spec(pets_text)

    def test_endpoints(self, pets_model: ApiSpecDomainModel) -> None:
        assert [e.id for e in pets_model.endpoints] == [
            "GET /pets",
            "GET /pets/{id}",
            "DELETE /pets/{id}",
        ]
        assert pets_model.endpoints[2].status_codes == ["204"]

    def test_pet_complexity(self, pets_model: ApiSpecDomainModel) -> None:
        assert pets_model.schemas[0].complexity_score == 8

    def test_input_mapping_is_not_modified(self, pets_raw: dict) -> None:
        snapshot = copy.deepcopy(pets_raw)
        parse_spec(pets_raw)
        assert pets_raw == snapshot

    def test_bytes_input(self, pets_text: str) -> None:
        assert parse_spec(pets_text.encode("utf-8")).title == "Pets API"

    def test_camel_case_serialisation(self, pets_model: ApiSpecDomainModel) -> None:
        data = pets_model.model_dump(mode="json", by_alias=True)
        endpoint = data["endpoints"][0]
        assert endpoint["statusCodes"] == ["200"]
        assert endpoint["responseSchemas"] == [{"name": "Pet"}]
        assert data["schemas"][0]["complexityScore"] == 8
        json.dumps(data)


# ---------------------------------------------------------------------------
# Operation details
# ---------------------------------------------------------------------------


class TestOperations:
    """Edge cases in path items and operations."""

    def test_method_order_within_a_path(self) -> None:
        path_item = {m: _ok() for m in ["head", "delete", "get", "options", "put", "post", "patch"]}
        model = parse_spec(_doc({"/x": path_item}))
        assert [e.method.value for e in model.endpoints] == [
            "get", "post", "put", "patch", "delete", "options", "head",
        ]

    def test_unknown_methods_and_path_keys_are_skipped(self) -> None:
        path_item = {"trace": _ok(), "summary": "x", "servers": [], "get": _ok()}
        model = parse_spec(_doc({"/x": path_item}))
        assert [e.id for e in model.endpoints] == ["GET /x"]

    def test_non_mapping_operation_is_skipped(self) -> None:
        model = parse_spec(_doc({"/x": {"get": "oops", "post": _ok()}}))
        assert [e.id for e in model.endpoints] == ["POST /x"]

    def test_non_mapping_path_item_is_skipped(self) -> None:
        model = parse_spec(_doc({"/a": None, "/b": ["get"], "/c": {"get": {}}}))
        assert [e.id for e in model.endpoints] == ["GET /c"]

    def test_operation_without_responses(self) -> None:
        endpoint = parse_spec(_doc({"/x": {"get": {}}})).endpoints[0]
        assert endpoint.status_codes == []
        assert endpoint.response_schemas == []

    def test_response_without_content_still_records_status(self) -> None:
        responses = {"204": {"description": "gone"}, "500": "broken"}
        endpoint = parse_spec(_doc({"/x": {"get": {"responses": responses}}})).endpoints[0]
        assert endpoint.status_codes == ["204", "500"]

    def test_integer_status_codes_are_stringified(self) -> None:
        endpoint = parse_spec(
            "openapi: 3.0.0\npaths:\n  /x:\n    get:\n      responses:\n        200: {}\n"
        ).endpoints[0]
        assert endpoint.status_codes == ["200"]

    def test_response_refs_deduplicated_across_status_codes(self) -> None:
        pet = {"content": {"application/json": {"schema": {"$ref": "#/components/schemas/Pet"}}}}
        responses = {"200": pet, "201": pet, "400": {"content": {}}}
        endpoint = parse_spec(_doc({"/x": {"post": {"responses": responses}}})).endpoints[0]
        assert _names(endpoint.response_schemas) == ["Pet"]

    def test_request_body_without_content_wrapper(self) -> None:
        body = {"application/json": {"schema": {"$ref": "#/components/schemas/In"}}}
        endpoint = parse_spec(_doc({"/x": {"put": {"requestBody": body}}})).endpoints[0]
        assert _names(endpoint.request_schemas) == ["In"]

    def test_non_string_summary_is_dropped(self) -> None:
        operation = {"summary": 42, "description": "Long text"}
        endpoint = parse_spec(_doc({"/x": {"get": operation}})).endpoints[0]
        assert endpoint.summary is None
        assert endpoint.description == "Long text"


class TestTags:
    """Tag normalisation."""

    @pytest.mark.parametrize(
        "tags, expected",
        [
            (["b", "a", "b"], ["b", "a"]),
            ("single", ["single"]),
            (["", None, "x"], ["x"]),
            ([1, "1"], ["1"]),
            ([{"name": "obj"}, ["nested"], "ok"], ["ok"]),
            (None, []),
            ([], []),
        ],
    )
    def test_tag_normalisation(self, tags: Any, expected: list[str]) -> None:
        endpoint = parse_spec(_doc({"/x": {"get": {"tags": tags}}})).endpoints[0]
        assert endpoint.tags == expected


class TestInfoAndComponents:
    """Metadata and schema section handling."""

    def test_missing_info(self) -> None:
        model = parse_spec({"paths": {"/x": {"get": {}}}})
        assert model.title is None
        assert model.version is None

    def test_non_mapping_info(self) -> None:
        assert parse_spec({"info": "x", "paths": {"/x": {"get": {}}}}).title is None

    @pytest.mark.parametrize(
        "version_line, expected",
        [("version: 1.0", "1.0"), ("version: 2", "2"), ("version: 2024-01-01", "2024-01-01")],
    )
    def test_yaml_scalar_versions_are_stringified(self, version_line: str, expected: str) -> None:
        text = f"info:\n  title: X\n  {version_line}\npaths:\n  /x:\n    get: {{}}\n"
        assert parse_spec(text).version == expected

    def test_missing_components(self) -> None:
        assert parse_spec(_doc({"/x": {"get": {}}})).schemas == []

    def test_non_mapping_schemas_section(self) -> None:
        model = parse_spec(_doc({"/x": {"get": {}}}, components={"schemas": ["A"]}))
        assert model.schemas == []

    def test_scalar_schema_scores_one(self) -> None:
        model = parse_spec(_doc({"/x": {"get": {}}}, components={"schemas": {"Flag": True}}))
        assert model.schemas[0].name == "Flag"
        assert model.schemas[0].complexity_score == 1
        assert model.schemas[0].raw is True


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class TestParseErrors:
    """Invalid documents raise the matching error."""

    def test_blank_text(self) -> None:
        with pytest.raises(EmptyInputError):
            parse_spec("   ")

    def test_garbage_text(self) -> None:
        with pytest.raises(UnparseableContentError):
            parse_spec("{[}")

    @pytest.mark.parametrize(
        "raw", ["[]", "[1, 2]", "42", "just some words", "# only a comment", [{"paths": {}}]]
    )
    def test_non_object_document_is_invalid_structure(self, raw: Any) -> None:
        with pytest.raises(InvalidStructureError, match="paths"):
            parse_spec(raw)

    @pytest.mark.parametrize("paths", [None, "paths", ["/x"]])
    def test_missing_or_malformed_paths(self, paths: Any) -> None:
        document = {"openapi": "3.0.0"} if paths is None else {"paths": paths}
        with pytest.raises(InvalidStructureError, match="paths"):
            parse_spec(document)

    def test_empty_paths(self) -> None:
        with pytest.raises(NoEndpointsFoundError, match="No endpoints"):
            parse_spec({"paths": {}})

    def test_paths_without_operations(self) -> None:
        with pytest.raises(NoEndpointsFoundError):
            parse_spec({"paths": {"/x": {"parameters": []}, "/y": {"get": None}}})

    def test_errors_carry_invalid_spec_exit_code(self) -> None:
        with pytest.raises(NoEndpointsFoundError) as exc_info:
            parse_spec({"paths": {}})
        assert exc_info.value.exit_code == EXIT_INVALID_SPEC
