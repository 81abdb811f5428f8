from app.modules.storage.service import STORAGE_LIMIT_BYTES, file_extension, slugify

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


def test_slugify_and_extension():
    assert slugify("  Grandma's Apple  Pie! ") == "grandmas-apple-pie"
    assert slugify("???") == "recipe"
    assert file_extension("photo.JPEG") == "jpeg"
    assert file_extension("noext") == "bin"
    assert file_extension(None, "jpg") == "jpg"


def test_upload_recipe_image(client, fake_supabase, user_headers):
    user_id = user_headers["x-user-id"]

    response = client.post(
        "/api/storage/recipe-images",
        files={"file": ("pasta.png", PNG_BYTES, "image/png")},
        data={"recipe_name": "Creamy Pasta"},
        headers=user_headers,
    )

    assert response.status_code == 201
    body = response.json()
    assert body["path"].startswith(f"{user_id}/creamy-pasta-")
    assert body["path"].endswith(".png")
    assert body["url"].endswith(f"/recipe-images/{body['path']}")
    stored = fake_supabase.storage.buckets["recipe-images"][body["path"]]
    assert stored["options"]["content-type"] == "image/png"


def test_recipe_image_must_be_an_image(client, user_headers):
    response = client.post(
        "/api/storage/recipe-images",
        files={"file": ("notes.txt", b"hello", "text/plain")},
        data={"recipe_name": "Pasta"},
        headers=user_headers,
    )

    assert response.status_code == 400


def test_user_file_and_signed_url(client, user_headers, other_headers):
    upload = client.post(
        "/api/storage/uploads",
        files={"file": ("list.pdf", b"%PDF-1.4", "application/pdf")},
        data={"folder": "Shopping Lists"},
        headers=user_headers,
    )
    assert upload.status_code == 201
    path = upload.json()["path"]
    assert path.startswith(f"{user_headers['x-user-id']}/shopping-lists/")

    signed = client.get("/api/storage/signed-url", params={"path": path}, headers=user_headers)
    assert signed.status_code == 200
    assert signed.json()["expires_in"] == 3600
    assert "token=" in signed.json()["signed_url"]

    denied = client.get("/api/storage/signed-url", params={"path": path}, headers=other_headers)
    assert denied.status_code == 403
    assert denied.json() == {"error": "Not authorized to access this file"}


def test_list_usage_and_delete(client, user_headers):
    user_id = user_headers["x-user-id"]
    path = client.post(
        "/api/storage/recipe-images",
        files={"file": ("soup.png", PNG_BYTES, "image/png")},
        data={"recipe_name": "Soup"},
        headers=user_headers,
    ).json()["path"]

    files = client.get("/api/storage/recipe-images", headers=user_headers).json()["files"]
    assert files == [path]

    usage = client.get("/api/storage/usage", headers=user_headers).json()
    assert usage["used"] == len(PNG_BYTES)
    assert usage["limit"] == STORAGE_LIMIT_BYTES

    assert client.delete("/api/storage/recipe-images", params={"path": f"{user_id}/../x"}, headers=user_headers).status_code == 403
    assert client.delete("/api/storage/recipe-images", params={"path": path}, headers=user_headers).json() == {"success": True}
    assert client.get("/api/storage/recipe-images", headers=user_headers).json()["files"] == []


def test_unknown_bucket(client, user_headers):
    response = client.get("/api/storage/photos", headers=user_headers)

    assert response.status_code == 400
    assert response.json() == {"error": "Unknown bucket: photos"}
