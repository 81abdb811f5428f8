def _create(client, headers, **overrides):
    body = {"name": "Lemon Chicken", "ingredients": [{"item": "chicken", "amount": "500g"}]}
    body.update(overrides)
    return client.post("/api/recipes", json=body, headers=headers)


def test_create_recipe_fills_defaults(client, user_headers):
    response = _create(client, user_headers, name="  Lemon Chicken  ")

    assert response.status_code == 201
    recipe = response.json()["recipe"]
    assert recipe["name"] == "Lemon Chicken"
    assert recipe["user_id"] == user_headers["x-user-id"]
    assert recipe["servings"] == 4
    assert recipe["difficulty"] == "Medium"
    assert recipe["is_public"] is False
    assert recipe["ingredients"][0]["item"] == "chicken"


def test_create_recipe_requires_name(client, user_headers):
    response = client.post("/api/recipes", json={"name": "   "}, headers=user_headers)

    assert response.status_code == 400
    assert response.json() == {"error": "Recipe name is required"}


def test_create_recipe_rejects_unknown_difficulty(client, user_headers):
    response = _create(client, user_headers, difficulty="Impossible")

    assert response.status_code == 400
    assert "error" in response.json()


def test_missing_user_header_uses_anonymous_id(client, fake_supabase):
    response = client.post("/api/recipes", json={"name": "Toast"})

    assert response.status_code == 201
    assert fake_supabase.tables["custom_recipes"][0]["user_id"] == "anonymous"


def test_list_returns_only_own_recipes(client, user_headers, other_headers):
    _create(client, user_headers, name="Mine")
    _create(client, other_headers, name="Theirs", is_public=True)
    _create(client, other_headers, name="Secret")

    names = [r["name"] for r in client.get("/api/recipes", headers=user_headers).json()["recipes"]]
    assert names == ["Mine"]

    with_public = client.get("/api/recipes", params={"include_public": "true"}, headers=user_headers).json()
    assert sorted(r["name"] for r in with_public["recipes"]) == ["Mine", "Theirs"]


def test_get_single_recipe(client, user_headers, other_headers):
    recipe_id = _create(client, user_headers).json()["recipe"]["id"]

    own = client.get("/api/recipes", params={"id": recipe_id}, headers=user_headers)
    assert own.status_code == 200
    assert own.json()["recipe"]["id"] == recipe_id

    foreign = client.get("/api/recipes", params={"id": recipe_id}, headers=other_headers)
    assert foreign.status_code == 404
    assert foreign.json() == {"error": "Recipe not found"}


def test_update_recipe_checks_owner(client, fake_supabase, user_headers, other_headers):
    recipe_id = _create(client, user_headers).json()["recipe"]["id"]

    denied = client.put("/api/recipes", json={"id": recipe_id, "name": "Stolen"}, headers=other_headers)
    assert denied.status_code == 403
    assert denied.json() == {"error": "Not authorized to edit this recipe"}
    assert fake_supabase.tables["custom_recipes"][0]["name"] == "Lemon Chicken"

    updated = client.put("/api/recipes", json={"id": recipe_id, "servings": 6}, headers=user_headers)
    assert updated.status_code == 200
    assert updated.json()["recipe"]["servings"] == 6
    assert updated.json()["recipe"]["name"] == "Lemon Chicken"
    assert updated.json()["recipe"]["updated_at"] is not None


def test_update_missing_recipe(client, user_headers):
    response = client.put("/api/recipes", json={"id": "nope", "name": "x"}, headers=user_headers)

    assert response.status_code == 404


def test_delete_recipe(client, fake_supabase, user_headers, other_headers):
    recipe_id = _create(client, user_headers).json()["recipe"]["id"]

    assert client.delete("/api/recipes", headers=user_headers).json() == {"error": "Recipe ID is required"}
    assert client.delete("/api/recipes", params={"id": recipe_id}, headers=other_headers).status_code == 403

    response = client.delete("/api/recipes", params={"id": recipe_id}, headers=user_headers)
    assert response.status_code == 200
    assert response.json() == {"success": True}
    assert fake_supabase.tables["custom_recipes"] == []


def test_database_error_is_500(client, fake_supabase, user_headers):
    fake_supabase.errors["custom_recipes"] = RuntimeError("connection reset")

    response = client.get("/api/recipes", headers=user_headers)

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to fetch recipes"}


def test_update_rejects_null_required_fields(client, fake_supabase, user_headers):
    recipe_id = _create(client, user_headers).json()["recipe"]["id"]

    for field in ("name", "tags", "nutrition"):
        response = client.put("/api/recipes", json={"id": recipe_id, field: None}, headers=user_headers)
        assert response.status_code == 400

    stored = fake_supabase.tables["custom_recipes"][0]
    assert stored["name"] == "Lemon Chicken"
    assert stored["tags"] is not None
    assert client.get("/api/recipes", params={"id": recipe_id}, headers=user_headers).status_code == 200

    cleared = client.put("/api/recipes", json={"id": recipe_id, "description": None}, headers=user_headers)
    assert cleared.status_code == 200
    assert cleared.json()["recipe"]["description"] is None
