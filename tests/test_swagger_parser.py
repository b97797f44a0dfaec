import pytest

from openapi_rag_client.errors import MalformedSpecError, SpecInvalidError
from openapi_rag_client.parser.swagger import get_server_url, normalize


class TestNormalize:
    def test_endpoint_count_matches_recognized_operations(self, petstore_doc):
        spec = normalize(petstore_doc)
        # options on /pet/{petId} is ignored
        assert len(spec.endpoints) == 5

    def test_document_and_verb_order(self, petstore_doc):
        spec = normalize(petstore_doc)
        assert [ep.signature for ep in spec.endpoints] == [
            "POST /pet",
            "PUT /pet",
            "GET /pet/findByStatus",
            "DELETE /pet/{petId}",
            "GET /store/inventory",
        ]

    def test_find_by_status_details(self, petstore_doc):
        spec = normalize(petstore_doc)
        ep = [e for e in spec.endpoints if e.path == "/pet/findByStatus"][0]
        assert ep.operation_id == "findPetsByStatus"
        assert ep.tags == ["pet"]
        assert ep.parameters[0].name == "status"
        assert ep.parameters[0].location == "query"
        assert ep.parameters[0].param_type == "string"
        assert ep.responses["200"].content == ["application/json", "application/xml"]

    def test_parameter_without_schema_has_no_type(self, petstore_doc):
        spec = normalize(petstore_doc)
        ep = [e for e in spec.endpoints if e.method == "DELETE"][0]
        api_key = [p for p in ep.parameters if p.name == "api_key"][0]
        assert api_key.param_type is None
        assert ep.parameters[0].required is True
        assert ep.parameters[0].param_type == "integer"

    def test_response_without_description_defaults_to_empty(self, petstore_doc):
        spec = normalize(petstore_doc)
        ep = [e for e in spec.endpoints if e.method == "DELETE"][0]
        assert ep.responses["400"].description == ""
        assert ep.responses["400"].content == []

    def test_schemas_and_info(self, petstore_doc):
        spec = normalize(petstore_doc)
        assert [s.name for s in spec.schemas] == ["Category", "Pet", "Tag"]
        pet = spec.schemas[1]
        assert pet.required == ["name", "photoUrls"]
        assert pet.properties["photoUrls"].items_type == "string"
        assert pet.properties["status"].enum == ["available", "pending", "sold"]
        assert spec.info.title == "Swagger Petstore"
        assert spec.info.server_url == "https://petstore.example/v2"

    def test_path_without_recognized_verb_contributes_nothing(self):
        spec = normalize({"openapi": "3.0.0", "paths": {"/health": {"head": {"responses": {}}}}})
        assert spec.endpoints == []
        assert spec.schemas == []

    def test_missing_paths_is_malformed(self):
        with pytest.raises(MalformedSpecError):
            normalize({"openapi": "3.0.0", "info": {"title": "x"}})

    def test_malformed_is_a_spec_error(self):
        assert issubclass(MalformedSpecError, SpecInvalidError)

    def test_swagger2_definitions_and_parameter_types(self):
        doc = {
            "swagger": "2.0",
            "host": "api.example.com",
            "basePath": "/v1",
            "schemes": ["http"],
            "paths": {
                "/users": {
                    "get": {
                        "parameters": [
                            {"name": "limit", "in": "query", "type": "integer"},
                            {"name": "body", "in": "body", "schema": {"type": "object"}},
                        ],
                        "responses": {"200": {"description": "ok"}},
                    }
                }
            },
            "definitions": {"User": {"type": "object", "properties": {"id": {"type": "integer"}}}},
        }
        spec = normalize(doc)
        assert spec.info.server_url == "http://api.example.com/v1"
        assert [p.name for p in spec.endpoints[0].parameters] == ["limit"]
        assert spec.endpoints[0].parameters[0].param_type == "integer"
        assert spec.schemas[0].name == "User"


class TestServerUrl:
    def test_missing_servers_gives_empty_string(self):
        assert get_server_url({"openapi": "3.0.0", "paths": {}}) == ""

    def test_first_server_wins(self):
        doc = {"servers": [{"url": "https://a.example"}, {"url": "https://b.example"}]}
        assert get_server_url(doc) == "https://a.example"


class TestPathLevelParameters:
    def test_operation_parameter_overrides_path_level(self, petstore_doc):
        spec = normalize(petstore_doc)
        ep = [e for e in spec.endpoints if e.method == "DELETE"][0]
        pet_ids = [p for p in ep.parameters if p.name == "petId"]
        assert len(pet_ids) == 1
        assert pet_ids[0].param_type == "integer"

    def test_path_level_parameters_apply_to_every_operation(self):
        doc = {
            "openapi": "3.0.0",
            "paths": {
                "/pet/{petId}": {
                    "parameters": [
                        {"name": "petId", "in": "path", "required": True, "schema": {"type": "integer"}},
                        {"name": "X-Trace", "in": "header"},
                    ],
                    "get": {
                        "parameters": [{"name": "X-Trace", "in": "header", "required": True}],
                        "responses": {"200": {"description": "ok"}},
                    },
                    "delete": {"responses": {"204": {"description": "gone"}}},
                }
            },
        }
        get, delete = normalize(doc).endpoints

        assert [(p.name, p.required) for p in get.parameters] == [("X-Trace", True), ("petId", True)]
        assert [p.name for p in delete.parameters] == ["petId", "X-Trace"]
        assert delete.parameters[0].param_type == "integer"
