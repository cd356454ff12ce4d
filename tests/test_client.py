import httpx
import pytest

from recipebook.client import (
    RecipeClient,
    RecipeClientError,
    RecipeConnectionError,
    RecipeServerError,
)

MISSING_ID = "A" * 20


def test_create_and_fetch_return_unwrapped_data(api_client):
    created = api_client.create_recipe(
        {"title": "Toast", "ingredients": ["bread"], "instructions": "Toast it"}
    )

    assert created["title"] == "Toast"
    assert api_client.get_recipe(created["id"]) == created


def test_list_update_and_delete(api_client):
    first = api_client.create_recipe(
        {"title": "Soup", "ingredients": ["water"], "instructions": "Boil."}
    )
    second = api_client.create_recipe(
        {"title": "Salad", "ingredients": ["lettuce"], "instructions": "Toss."}
    )

    assert [recipe["id"] for recipe in api_client.list_recipes()] == [second["id"], first["id"]]

    updated = api_client.update_recipe(first["id"], {"cookingTime": 40})
    assert updated["cookingTime"] == 40

    removed = api_client.delete_recipe(first["id"])
    assert removed["id"] == first["id"]
    assert [recipe["id"] for recipe in api_client.list_recipes()] == [second["id"]]


def test_validation_errors_are_joined(api_client):
    with pytest.raises(RecipeServerError) as excinfo:
        api_client.create_recipe({"title": "", "ingredients": [], "instructions": ""})

    error = excinfo.value
    assert str(error) == (
        "Recipe title is required, "
        "Recipe must have at least one ingredient, "
        "Cooking instructions are required"
    )
    assert error.status_code == 400
    assert len(error.errors) == 3


def test_envelope_message_is_used_without_field_errors(api_client):
    with pytest.raises(RecipeServerError) as excinfo:
        api_client.get_recipe(MISSING_ID)

    assert str(excinfo.value) == "Recipe not found"
    assert excinfo.value.status_code == 404
    assert excinfo.value.errors == []


def test_error_without_envelope_gets_generic_message():
    transport = httpx.MockTransport(lambda request: httpx.Response(502, text="Bad Gateway"))

    with RecipeClient("http://testserver/api", transport=transport) as client:
        with pytest.raises(RecipeServerError) as excinfo:
            client.list_recipes()

    assert str(excinfo.value) == "An error occurred"
    assert excinfo.value.status_code == 502


@pytest.mark.parametrize(
    "failure",
    [httpx.ConnectError("connection refused"), httpx.ReadTimeout("timed out")],
)
def test_unreachable_server_is_a_connection_error(failure):
    def handler(request):
        raise failure

    with RecipeClient("http://testserver/api", transport=httpx.MockTransport(handler)) as client:
        with pytest.raises(RecipeConnectionError) as excinfo:
            client.list_recipes()

    assert str(excinfo.value) == "Unable to connect to server. Please check your connection."


def test_other_failures_keep_their_message():
    transport = httpx.MockTransport(lambda request: httpx.Response(200, text="not json"))

    with RecipeClient("http://testserver/api", transport=transport) as client:
        with pytest.raises(RecipeClientError) as excinfo:
            client.list_recipes()

    assert not isinstance(excinfo.value, (RecipeServerError, RecipeConnectionError))
    assert str(excinfo.value)


def test_requests_use_base_url_and_json():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(201, json={"success": True, "data": {"id": "x"}})

    with RecipeClient("http://testserver/api", transport=httpx.MockTransport(handler)) as client:
        assert client.create_recipe({"title": "Toast"}) == {"id": "x"}

    assert seen[0].method == "POST"
    assert str(seen[0].url) == "http://testserver/api/recipes"
    assert seen[0].headers["Content-Type"] == "application/json"
