import pytest

from models.product import Product

PNG = b"\x89PNG-bytes"

PRODUCT_FORM = {
    "title": "Pixel 9",
    "description": "Phone",
    "price": "799.5",
    "quantity": "4",
    "category_id": "1",
}


def test_add_product_defaults(client, db):
    res = client.post(
        "/api/product/add",
        data=PRODUCT_FORM,
        files={"picture": ("main.png", PNG, "image/png")},
    )
    assert res.status_code == 201
    body = res.json()
    assert body["message"] == "Product added successfully"
    assert "skipped" not in body

    row = body["data"][0]
    assert row["price"] == 799.5
    assert row["quantity"] == 4
    assert row["category_id"] == 1
    assert row["discount"] == 0
    assert row["coupon"] is None
    assert row["additionalPic"] == []
    assert row["picture"].endswith("_main.png")
    assert db.query(Product).count() == 1


def test_add_product_with_gallery(client):
    files = [
        ("picture", ("main.png", PNG, "image/png")),
        ("additionalPics", ("side.png", PNG, "image/png")),
        ("additionalPics", ("back.jpg", PNG, "image/jpeg")),
    ]
    res = client.post("/api/product/add", data=dict(PRODUCT_FORM, discount="15", coupon="SAVE15"), files=files)
    assert res.status_code == 201
    row = res.json()["data"][0]
    assert row["discount"] == 15
    assert row["coupon"] == "SAVE15"
    assert [u.rsplit("_", 1)[1] for u in row["additionalPic"]] == ["side.png", "back.jpg"]


def test_one_failed_additional_picture_is_skipped(client, db):
    files = [
        ("picture", ("main.png", PNG, "image/png")),
        ("additionalPics", ("one.png", PNG, "image/png")),
        ("additionalPics", ("fail.png", PNG, "image/png")),
        ("additionalPics", ("three.png", PNG, "image/png")),
    ]
    res = client.post("/api/product/add", data=PRODUCT_FORM, files=files)
    assert res.status_code == 201
    body = res.json()
    assert [u.rsplit("_", 1)[1] for u in body["data"][0]["additionalPic"]] == ["one.png", "three.png"]
    assert body["skipped"] == [{"filename": "fail.png", "error": "Error uploading file to storage: upload rejected"}]
    assert db.query(Product).count() == 1


def test_main_picture_failure_inserts_nothing(client, storage, db):
    files = [
        ("picture", ("fail.png", PNG, "image/png")),
        ("additionalPics", ("one.png", PNG, "image/png")),
    ]
    res = client.post("/api/product/add", data=PRODUCT_FORM, files=files)
    assert res.status_code == 500
    assert res.json()["success"] is False
    assert db.query(Product).count() == 0
    assert storage.objects == {}


@pytest.mark.parametrize("field", ["title", "description", "price", "quantity", "category_id"])
def test_add_product_missing_field(client, storage, db, field):
    data = {k: v for k, v in PRODUCT_FORM.items() if k != field}
    res = client.post("/api/product/add", data=data, files={"picture": ("main.png", PNG, "image/png")})
    assert res.status_code == 400
    assert res.json()["missing"] == [field]
    assert storage.objects == {}
    assert db.query(Product).count() == 0


def test_add_product_missing_picture(client):
    res = client.post("/api/product/add", data=PRODUCT_FORM)
    assert res.status_code == 400
    assert res.json()["missing"] == ["picture"]


@pytest.mark.parametrize("field,value", [("price", "0"), ("price", "cheap"), ("quantity", "-1"), ("discount", "120")])
def test_add_product_rejects_bad_values(client, storage, field, value):
    data = dict(PRODUCT_FORM, **{field: value})
    res = client.post("/api/product/add", data=data, files={"picture": ("main.png", PNG, "image/png")})
    assert res.status_code == 400
    assert field in res.json()["error"]
    assert storage.objects == {}


def test_fetch_is_filtered_and_repeatable(client, make_product):
    make_product(1, title="Red Shirt")
    make_product(1, title="Blue shirt")
    make_product(2, title="Kettle")

    first = client.get("/api/product/fetch", params={"title": "SHIRT"})
    second = client.get("/api/product/fetch", params={"title": "SHIRT"})
    assert first.status_code == 200
    assert first.json() == second.json()
    assert [p["title"] for p in first.json()["data"]] == ["Red Shirt", "Blue shirt"]

    assert len(client.get("/api/product/fetch").json()["data"]) == 3


def test_get_product(client, make_product):
    p = make_product(1)
    res = client.get(f"/api/product/{p['id']}")
    assert res.status_code == 200
    assert res.json()["data"]["id"] == p["id"]

    res = client.get("/api/product/999")
    assert res.status_code == 404
    assert res.json()["error"] == "Product not found"


def test_products_by_category(client, make_product):
    make_product(5, title="a")
    make_product(6, title="b")

    res = client.get("/api/product/category/5")
    assert res.status_code == 200
    assert [p["title"] for p in res.json()["data"]] == ["a"]


def test_empty_category_is_not_found(client):
    res = client.get("/api/product/category/999")
    assert res.status_code == 404
    assert res.json() == {"success": False, "error": "No products found for this category"}


def test_empty_category_policy_can_return_empty_list(client, override_settings):
    override_settings(EMPTY_CATEGORY_IS_NOT_FOUND=False)
    res = client.get("/api/product/category/999")
    assert res.status_code == 200
    assert res.json() == {"success": True, "data": []}


def test_update_coupon(client, make_product):
    p = make_product(1)
    res = client.put(f"/api/product/update/coupon/{p['id']}", params={"coupon": "WELCOME"})
    assert res.status_code == 200
    assert res.json()["data"][0]["coupon"] == "WELCOME"

    res = client.put(f"/api/product/update/coupon/{p['id']}")
    assert res.status_code == 400
    assert res.json()["error"] == "Coupon code is required"


@pytest.mark.parametrize("value,status", [("0", 200), ("100", 200), ("55.5", 200), ("101", 400), ("-1", 400), ("lots", 400)])
def test_update_discount_bounds(client, make_product, value, status):
    p = make_product(1)
    res = client.put(f"/api/product/update/discount/{p['id']}", params={"discount": value})
    assert res.status_code == status
    if status == 200:
        assert res.json()["data"][0]["discount"] == float(value)


def test_update_discount_requires_value(client, make_product):
    p = make_product(1)
    res = client.put(f"/api/product/update/discount/{p['id']}")
    assert res.status_code == 400


def test_update_rejects_non_numeric_id(client):
    res = client.put("/api/product/update/discount/abc", params={"discount": "10"})
    assert res.status_code == 400
    assert res.json()["error"] == "Invalid product ID"


def test_delete_product(client, make_product, db):
    p = make_product(1)
    res = client.delete(f"/api/product/delete/{p['id']}")
    assert res.status_code == 200
    assert res.json() == {"success": True, "message": "Product deleted successfully"}
    assert db.query(Product).count() == 0

    assert client.delete(f"/api/product/delete/{p['id']}").status_code == 404
    res = client.delete("/api/product/delete/xyz")
    assert res.status_code == 400
    assert res.json()["error"] == "Invalid product ID"
