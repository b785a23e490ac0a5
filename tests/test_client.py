"""Tests for the requests-based ``PetRegistryAPI`` client."""

from __future__ import annotations

import json
from unittest import mock

import requests

from pet_registry_client import PetRegistryAPI


def make_response(status_code=200, body=None):
    response = requests.Response()
    response.status_code = status_code
    if body is not None:
        response._content = json.dumps(body).encode("utf-8")
        response.headers["Content-Type"] = "application/json"
    else:
        response._content = b""
    return response


def make_client(*responses, **kwargs):
    session = mock.Mock(spec=requests.Session)
    session.request.side_effect = list(responses)
    client = PetRegistryAPI(base_url="http://pets.local/", session=session, **kwargs)
    return client, session


def test_default_endpoints_and_auth_header():
    client, session = make_client(make_response(201, {"id": "p1", "name": "Rex"}), api_key="tok")
    data, error = client.create_pet({"name": "Rex"})
    assert error is None
    assert data["id"] == "p1"
    kwargs = session.request.call_args.kwargs
    assert kwargs["method"] == "POST"
    assert kwargs["url"] == "http://pets.local/api/v1/pets/"
    assert kwargs["headers"]["Authorization"] == "Bearer tok"
    assert kwargs["json"] == {"name": "Rex"}


def test_path_parameters_are_quoted():
    client, session = make_client(make_response(200, []))
    pets, error = client.get_pets_by_breed("Border Collie")
    assert (pets, error) == ([], None)
    assert session.request.call_args.kwargs["url"] == "http://pets.local/api/v1/pets/breed/Border%20Collie"


def test_http_error_is_returned_as_tuple():
    client, _ = make_client(make_response(403, {"detail": "User does not have the right to delete pet."}))
    data, error = client.delete_pet("p1")
    assert data is None
    assert error == {"status_code": 403, "message": "User does not have the right to delete pet."}


def test_connection_error_is_returned_as_tuple():
    client, _ = make_client(requests.ConnectionError("refused"))
    pets, error = client.list_pets()
    assert pets == []
    assert error["status_code"] is None
    assert "refused" in error["message"]


def test_aggregate_helpers_unwrap_values():
    client, _ = make_client(
        make_response(200, {"count": 3}),
        make_response(200, {"average_age": 4.0, "count": 3}),
    )
    assert client.count_pets() == (3, None)
    assert client.average_age() == (4.0, None)


def test_search_sends_query_parameter():
    client, session = make_client(make_response(200, [{"name": "Max"}]))
    pets, _ = client.search_pets_by_name("max")
    assert pets == [{"name": "Max"}]
    assert session.request.call_args.kwargs["params"] == {"q": "max"}


def test_discovers_endpoints_from_openapi_file(tmp_path):
    spec = {
        "paths": {
            "/v2/animals/{pet_id}": {"get": {"operationId": "getPet"}},
            "/v2/other": {"get": {"operationId": "somethingElse"}},
        }
    }
    path = tmp_path / "openapi.json"
    path.write_text(json.dumps(spec), encoding="utf-8")
    client, session = make_client(make_response(200, {"id": "p1"}), openapi_path=str(path))
    assert "somethingElse" not in client.endpoints
    client.get_pet("p1")
    assert session.request.call_args.kwargs["url"] == "http://pets.local/v2/animals/p1"
    assert client.endpoints["deletePet"].path == "/api/v1/pets/{pet_id}"


def test_discovers_endpoints_from_server():
    spec = {"paths": {"/pets/count": {"get": {"operationId": "getNumberOfPets"}}}}
    client, session = make_client(make_response(200, spec), make_response(200, {"count": 0}), discover=True)
    assert client.count_pets() == (0, None)
    assert session.request.call_args.kwargs["url"] == "http://pets.local/pets/count"


def test_client_against_live_app(client):
    """The client's default routes match the real application."""
    from pet_registry_api.app.core.security import create_access_token
    from tests.conftest import TEST_SECRET

    api = PetRegistryAPI(
        base_url="http://testserver",
        session=client,
        api_key=create_access_token({"sub": "alice"}, secret_key=TEST_SECRET),
    )
    created, error = api.create_pet({"name": "Rex", "breed": "Beagle", "age": 3, "weight": 12.5})
    assert error is None
    updated, error = api.update_vaccination_status(created["id"], True)
    assert error is None and updated["vaccination"] is True
    assert api.count_pets() == (1, None)
    deleted, error = api.delete_pets_by_owner("alice")
    assert error is None and len(deleted) == 1
