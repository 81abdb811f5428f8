def test_missing_profile_is_404(client, user_headers):
    response = client.get("/api/family-profile", headers=user_headers)

    assert response.status_code == 404
    assert response.json() == {"error": "Family profile not found"}


def test_save_profile_assigns_member_ids(client, user_headers):
    response = client.put(
        "/api/family-profile",
        json={
            "family_name": "The Parks",
            "members": [
                {"name": "Min", "role": "adult", "allergies": ["peanuts"]},
                {"name": "Joon", "role": "child", "dislikes": ["mushrooms"]},
            ],
            "preferences": {"cuisine_types": ["korean"]},
        },
        headers=user_headers,
    )

    assert response.status_code == 200
    profile = response.json()
    assert profile["family_name"] == "The Parks"
    assert profile["skill_level"] == "intermediate"
    assert all(member["id"] for member in profile["members"])
    assert profile["members"][0]["allergies"] == ["peanuts"]
    assert client.get("/api/family-profile", headers=user_headers).json()["id"] == profile["id"]


def test_save_profile_merges_preferences(client, fake_supabase, user_headers):
    client.put(
        "/api/family-profile",
        json={"preferences": {"cuisine_types": ["italian"], "budget_level": "budget"}},
        headers=user_headers,
    )
    response = client.put(
        "/api/family-profile",
        json={"skill_level": "advanced", "preferences": {"budget_level": "premium"}},
        headers=user_headers,
    )

    profile = response.json()
    assert profile["skill_level"] == "advanced"
    assert profile["family_name"] == "My Family"
    assert profile["preferences"]["cuisine_types"] == ["italian"]
    assert profile["preferences"]["budget_level"] == "premium"
    assert len(fake_supabase.tables["family_profiles"]) == 1


def test_member_lifecycle(client, user_headers):
    added = client.post("/api/family-profile/members", json={"name": "Ava", "role": "teen"}, headers=user_headers)
    assert added.status_code == 201
    member_id = added.json()["members"][0]["id"]

    updated = client.put(
        f"/api/family-profile/members/{member_id}",
        json={"likes": ["pizza"]},
        headers=user_headers,
    )
    member = updated.json()["members"][0]
    assert member["likes"] == ["pizza"]
    assert member["name"] == "Ava"
    assert member["role"] == "teen"

    removed = client.delete(f"/api/family-profile/members/{member_id}", headers=user_headers)
    assert removed.json()["members"] == []


def test_unknown_member_is_404(client, user_headers):
    assert client.delete("/api/family-profile/members/abc", headers=user_headers).status_code == 404

    client.post("/api/family-profile/members", json={"name": "Ava"}, headers=user_headers)
    response = client.put("/api/family-profile/members/abc", json={"name": "Eve"}, headers=user_headers)
    assert response.status_code == 404
    assert response.json() == {"error": "Family member not found"}


def test_null_member_field_is_rejected(client, fake_supabase, user_headers):
    added = client.post("/api/family-profile/members", json={"name": "Ava"}, headers=user_headers)
    member_id = added.json()["members"][0]["id"]

    response = client.put(
        f"/api/family-profile/members/{member_id}",
        json={"allergies": None},
        headers=user_headers,
    )

    assert response.status_code == 400
    assert response.json() == {"error": "allergies cannot be null"}
    assert fake_supabase.tables["family_profiles"][0]["members"][0]["allergies"] == []
    assert client.get("/api/family-profile", headers=user_headers).status_code == 200

    cleared = client.put(
        f"/api/family-profile/members/{member_id}",
        json={"notes": None},
        headers=user_headers,
    )
    assert cleared.status_code == 200
    assert cleared.json()["members"][0]["notes"] is None
