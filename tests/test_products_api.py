from storefront.data.models import ProductModel

PRODUCTS = "/api/v1/products"


def _names(resp):
    return [p["name"] for p in resp.json()["data"]["data"]]


def test_list_only_active_products(client, make_product):
    make_product(name="Visible")
    make_product(name="Hidden", status="inactive")
    make_product(name="Draft", status="draft")

    resp = client.get(PRODUCTS)

    assert resp.status_code == 200
    assert _names(resp) == ["Visible"]
    assert resp.json()["data"]["pagination"]["total"] == 1


def test_filters_by_category_and_price(client, make_product, make_category):
    books = make_category(name="Books", slug="books")
    make_product(name="Cheap Book", price="9.99", category_id=books.id)
    make_product(name="Pricey Book", price="59.99", category_id=books.id)
    make_product(name="Lamp", price="29.99")

    by_category = client.get(PRODUCTS, params={"category_id": books.id, "sort_by": "price_asc"})
    by_price = client.get(PRODUCTS, params={"min_price": 10, "max_price": 50})

    assert _names(by_category) == ["Cheap Book", "Pricey Book"]
    assert _names(by_price) == ["Lamp"]


def test_search_and_in_stock(client, make_product):
    make_product(name="Wireless Mouse", stock=0)
    make_product(name="Wireless Keyboard", stock=5)
    make_product(name="Desk", description="Solid oak desk with wireless charging pad")

    matches = client.get(PRODUCTS, params={"search": "wireless", "sort_by": "name"})
    in_stock = client.get(PRODUCTS, params={"search": "wireless", "in_stock": True, "sort_by": "name"})

    assert _names(matches) == ["Desk", "Wireless Keyboard", "Wireless Mouse"]
    assert _names(in_stock) == ["Desk", "Wireless Keyboard"]


def test_sort_by_price_desc(client, make_product):
    make_product(name="B", price="20.00")
    make_product(name="A", price="5.00")
    make_product(name="C", price="50.00")

    assert _names(client.get(PRODUCTS, params={"sort_by": "price_desc"})) == ["C", "B", "A"]


def test_pagination(client, make_product):
    for i in range(5):
        make_product(name=f"Item {i}")

    body = client.get(PRODUCTS, params={"page": 2, "page_size": 2, "sort_by": "name"}).json()["data"]

    assert [p["name"] for p in body["data"]] == ["Item 2", "Item 3"]
    assert body["pagination"] == {"page": 2, "page_size": 2, "total": 5, "total_pages": 3}


def test_invalid_sort(client):
    resp = client.get(PRODUCTS, params={"sort_by": "random"})

    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "VALIDATION_ERROR"


def test_featured(client, make_product):
    make_product(name="Star", featured=True)
    make_product(name="Plain")
    make_product(name="Retired Star", featured=True, status="inactive")

    resp = client.get(f"{PRODUCTS}/featured")

    assert [p["name"] for p in resp.json()["data"]["products"]] == ["Star"]


def test_search_endpoint(client, make_product):
    make_product(name="Yoga Mat")
    make_product(name="Dumbbell")

    resp = client.get(f"{PRODUCTS}/search", params={"q": "yoga"})

    assert _names(resp) == ["Yoga Mat"]


def test_search_query_too_short(client):
    resp = client.get(f"{PRODUCTS}/search", params={"q": "a"})

    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "INVALID_QUERY"


def test_get_product_with_category(client, make_product, category):
    product = make_product(price="12.50")

    data = client.get(f"{PRODUCTS}/{product.id}").json()["data"]

    assert data["price"] == 12.5
    assert data["category"]["slug"] == category.slug


def test_get_missing_product(client, db):
    resp = client.get(f"{PRODUCTS}/999")

    assert resp.status_code == 404
    assert resp.json() == {"success": False, "error": {"message": "Product not found", "code": "NOT_FOUND"}}


# =====================================================
# REVIEWS
# =====================================================
def _review(rating, title="Great stuff"):
    return {"rating": rating, "title": title, "comment": "Exactly as described, would buy again."}


def test_reviews_update_product_rating(client, db, make_user, make_product):
    product = make_product()
    first, second = make_user(first_name="Anna"), make_user()

    resp = client.post(f"{PRODUCTS}/{product.id}/reviews", params={"user_id": first.id}, json=_review(5))
    client.post(f"{PRODUCTS}/{product.id}/reviews", params={"user_id": second.id}, json=_review(4))

    assert resp.status_code == 201
    assert resp.json()["data"]["user"]["first_name"] == "Anna"

    db.expire_all()
    stored = db.get(ProductModel, product.id)
    assert float(stored.rating) == 4.5
    assert stored.review_count == 2

    listing = client.get(f"{PRODUCTS}/{product.id}/reviews").json()["data"]
    assert listing["pagination"]["total"] == 2


def test_one_review_per_user(client, user, make_product):
    product = make_product()
    client.post(f"{PRODUCTS}/{product.id}/reviews", params={"user_id": user.id}, json=_review(5))

    resp = client.post(f"{PRODUCTS}/{product.id}/reviews", params={"user_id": user.id}, json=_review(1))

    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "ALREADY_REVIEWED"


def test_review_rating_out_of_range(client, user, make_product):
    product = make_product()

    resp = client.post(f"{PRODUCTS}/{product.id}/reviews", params={"user_id": user.id}, json=_review(6))

    assert resp.status_code == 400
    assert "rating" in resp.json()["error"]["details"]


# =====================================================
# ADMIN
# =====================================================
def _new_product(category_id, **overrides):
    payload = {
        "name": "Smart Watch",
        "description": "A watch that is smarter than most phones.",
        "price": "199.99",
        "category_id": category_id,
        "stock": 5,
        "images": ["https://images.example.com/watch.jpg"],
    }
    payload.update(overrides)
    return payload


def test_admin_creates_products_with_unique_slugs(client, admin, category):
    first = client.post(PRODUCTS, params={"user_id": admin.id}, json=_new_product(category.id))
    second = client.post(PRODUCTS, params={"user_id": admin.id}, json=_new_product(category.id))

    assert first.status_code == 201
    assert first.json()["data"]["slug"] == "smart-watch"
    assert first.json()["data"]["price"] == 199.99
    assert second.json()["data"]["slug"] == "smart-watch-1"


def test_create_with_unknown_category(client, admin):
    resp = client.post(PRODUCTS, params={"user_id": admin.id}, json=_new_product(999))

    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "INVALID_CATEGORY"


def test_create_requires_images(client, admin, category):
    resp = client.post(PRODUCTS, params={"user_id": admin.id}, json=_new_product(category.id, images=[]))

    assert resp.status_code == 400
    assert "images" in resp.json()["error"]["details"]


def test_regular_user_cannot_create_product(client, user, category):
    resp = client.post(PRODUCTS, params={"user_id": user.id}, json=_new_product(category.id))

    assert resp.status_code == 403


def test_admin_updates_product(client, admin, make_product):
    product = make_product(price="10.00", stock=3)

    resp = client.put(
        f"{PRODUCTS}/{product.id}",
        params={"user_id": admin.id},
        json={"name": "Renamed Thing", "stock": 7},
    )

    data = resp.json()["data"]
    assert data["name"] == "Renamed Thing"
    assert data["slug"] == "renamed-thing"
    assert data["stock"] == 7
    assert data["price"] == 10.0


def test_admin_deletes_product(client, db, admin, make_product):
    product = make_product()

    resp = client.delete(f"{PRODUCTS}/{product.id}", params={"user_id": admin.id})

    assert resp.status_code == 200
    assert client.get(f"{PRODUCTS}/{product.id}").status_code == 404
