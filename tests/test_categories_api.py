CATEGORIES = "/api/v1/categories"


def test_list_categories(client, make_category):
    make_category(name="Books", slug="books")
    make_category(name="Sports", slug="sports")

    resp = client.get(CATEGORIES)

    assert resp.status_code == 200
    assert [c["slug"] for c in resp.json()["data"]] == ["books", "sports"]


def test_create_category_derives_slug(client, admin):
    resp = client.post(CATEGORIES, params={"user_id": admin.id}, json={"name": "Home & Garden"})

    assert resp.status_code == 201
    assert resp.json()["data"]["slug"] == "home-garden"


def test_duplicate_slug(client, admin, make_category):
    make_category(name="Books", slug="books")

    resp = client.post(CATEGORIES, params={"user_id": admin.id}, json={"name": "Books"})

    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "SLUG_EXISTS"


def test_rename_category(client, admin, make_category):
    category = make_category(name="Boks", slug="boks")

    resp = client.put(f"{CATEGORIES}/{category.id}", params={"user_id": admin.id}, json={"name": "Books"})

    assert resp.json()["data"] == {
        "id": category.id,
        "name": "Books",
        "slug": "books",
        "description": "Test category",
        "image": None,
        "parent_id": None,
    }


def test_cannot_delete_category_with_products(client, admin, category, make_product):
    make_product()

    resp = client.delete(f"{CATEGORIES}/{category.id}", params={"user_id": admin.id})

    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "HAS_PRODUCTS"


def test_delete_empty_category(client, admin, make_category):
    category = make_category()

    resp = client.delete(f"{CATEGORIES}/{category.id}", params={"user_id": admin.id})

    assert resp.status_code == 200
    assert client.get(f"{CATEGORIES}/{category.id}").status_code == 404


def test_regular_user_cannot_create_category(client, user):
    resp = client.post(CATEGORIES, params={"user_id": user.id}, json={"name": "Secret"})

    assert resp.status_code == 403
