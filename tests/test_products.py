"""Tests for Product API endpoints."""
from unittest.mock import patch

from sqlalchemy.exc import OperationalError


def test_create_product(client):
    """Test creating a new product from JSON."""
    response = client.post(
        "/api/v1/products/",
        json={
            "name": "Test Product",
            "description": "Something to sell",
            "price": 99.99,
            "quantity": 10,
            "category": "electronics",
            "is_active": True
        }
    )

    assert response.status_code == 201
    data = response.json()
    assert data["name"] == "Test Product"
    assert data["price"] == "99.99"
    assert data["formatted_price"] == "$99.99"
    assert data["quantity"] == 10
    assert data["category"] == "electronics"
    assert data["is_active"] is True
    assert "id" in data
    assert "created_at" in data
    assert "updated_at" in data


def test_create_product_from_form(client, widget_data):
    """Test creating a product from an HTML form post."""
    response = client.post("/api/v1/products/", data=widget_data)

    assert response.status_code == 201
    data = response.json()
    assert data["name"] == "Widget"
    assert data["price"] == "9.99"
    assert data["quantity"] == 5
    assert data["is_active"] is True


def test_create_product_without_active_flag_is_inactive(client):
    """Test an omitted is_active checkbox stores an inactive product."""
    response = client.post(
        "/api/v1/products/",
        data={"name": "Widget", "price": "9.99", "quantity": "5", "category": "tools"}
    )

    assert response.status_code == 201
    data = response.json()
    assert data["is_active"] is False
    assert data["price"] == "9.99"
    assert data["id"] > 0
    assert data["created_at"] is not None
    assert data["updated_at"] is not None


def test_create_product_invalid_reports_all_fields(client):
    """Test every failing field is reported and no product is created."""
    response = client.post(
        "/api/v1/products/",
        data={"name": "", "price": "-1", "quantity": "5", "category": "tools"}
    )

    assert response.status_code == 422
    detail = response.json()["detail"]
    assert set(detail["errors"]) == {"name", "price"}
    assert detail["errors"]["name"] == "The name field is required."
    assert detail["errors"]["price"] == "The price field must be at least 0."
    assert detail["old_input"]["price"] == "-1"
    assert detail["old_input"]["category"] == "tools"

    listing = client.get("/api/v1/products/").json()
    assert listing["total"] == 0


def test_create_product_invalid_quantity(client):
    """Test creating product with negative quantity fails."""
    response = client.post(
        "/api/v1/products/",
        json={"name": "Test Product", "price": 99.99, "quantity": -5, "category": "tools"}
    )

    assert response.status_code == 422
    assert "quantity" in response.json()["detail"]["errors"]


def test_create_product_ignores_unknown_fields(client):
    """Test fields outside the allow-list are never applied."""
    response = client.post(
        "/api/v1/products/",
        json={
            "id": 999,
            "name": "Sneaky",
            "price": 1,
            "quantity": 1,
            "category": "tools",
            "created_at": "2000-01-01T00:00:00"
        }
    )

    assert response.status_code == 201
    data = response.json()
    assert data["id"] != 999
    assert not data["created_at"].startswith("2000")


def test_create_product_rejects_non_object_body(client):
    """Test a JSON array body is refused."""
    response = client.post("/api/v1/products/", json=[1, 2, 3])

    assert response.status_code == 400


def test_get_product(client, widget_data):
    """Test getting a product by ID."""
    create_response = client.post("/api/v1/products/", data=widget_data)
    product_id = create_response.json()["id"]

    response = client.get(f"/api/v1/products/{product_id}")

    assert response.status_code == 200
    data = response.json()
    assert data["id"] == product_id
    assert data["name"] == "Widget"


def test_get_product_not_found(client):
    """Test getting non-existent product returns 404."""
    response = client.get("/api/v1/products/9999")

    assert response.status_code == 404


def test_list_products_newest_first(client):
    """Test products are listed most recently created first."""
    for name in ("A", "B", "C"):
        client.post(
            "/api/v1/products/",
            json={"name": name, "price": 1, "quantity": 1, "category": "letters"}
        )

    response = client.get("/api/v1/products/")

    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 3
    assert [item["name"] for item in data["items"]] == ["C", "B", "A"]


def test_list_products_filters(client):
    """Test the active and category filters, alone and combined."""
    products = [
        {"name": "Book", "price": 10, "quantity": 1, "category": "books", "is_active": True},
        {"name": "Old Book", "price": 5, "quantity": 1, "category": "books"},
        {"name": "Mat", "price": 45, "quantity": 1, "category": "sports", "is_active": True},
    ]
    for product in products:
        client.post("/api/v1/products/", json=product)

    active = client.get("/api/v1/products/?active=true").json()
    assert {item["name"] for item in active["items"]} == {"Book", "Mat"}

    books = client.get("/api/v1/products/?category=books").json()
    assert {item["name"] for item in books["items"]} == {"Book", "Old Book"}

    active_books = client.get("/api/v1/products/?active=true&category=books").json()
    assert [item["name"] for item in active_books["items"]] == ["Book"]


def test_list_categories(client):
    """Test distinct categories are listed alphabetically."""
    for category in ("tools", "books", "tools"):
        client.post(
            "/api/v1/products/",
            json={"name": "Item", "price": 1, "quantity": 1, "category": category}
        )

    response = client.get("/api/v1/products/categories")

    assert response.status_code == 200
    assert response.json()["categories"] == ["books", "tools"]


def test_update_product(client, widget_data):
    """Test updating a product replaces every editable field."""
    create_response = client.post("/api/v1/products/", data=widget_data)
    created = create_response.json()
    product_id = created["id"]

    response = client.put(
        f"/api/v1/products/{product_id}",
        data={"name": "Gadget", "price": "12.5", "quantity": "0", "category": "gadgets"}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["id"] == product_id
    assert data["name"] == "Gadget"
    assert data["description"] is None
    assert data["price"] == "12.50"
    assert data["quantity"] == 0
    assert data["category"] == "gadgets"
    assert data["is_active"] is False
    assert data["created_at"] == created["created_at"]
    assert data["updated_at"] >= created["updated_at"]


def test_patch_is_a_full_update(client, widget_data):
    """Test PATCH validates the full field set like PUT."""
    product_id = client.post("/api/v1/products/", data=widget_data).json()["id"]

    response = client.patch(f"/api/v1/products/{product_id}", json={"name": "Renamed"})

    assert response.status_code == 422
    assert set(response.json()["detail"]["errors"]) == {"price", "quantity", "category"}


def test_update_product_invalid_leaves_record_untouched(client, widget_data):
    """Test a rejected update does not change the stored product."""
    product_id = client.post("/api/v1/products/", data=widget_data).json()["id"]

    response = client.put(
        f"/api/v1/products/{product_id}",
        data={**widget_data, "name": "x" * 256}
    )

    assert response.status_code == 422
    assert response.json()["detail"]["errors"]["name"] == (
        "The name field must not be greater than 255 characters."
    )
    assert client.get(f"/api/v1/products/{product_id}").json()["name"] == "Widget"


def test_update_product_not_found(client, widget_data):
    """Test updating a missing product returns 404."""
    response = client.put("/api/v1/products/9999", data=widget_data)

    assert response.status_code == 404


def test_delete_product(client, widget_data):
    """Test deleting a product."""
    product_id = client.post("/api/v1/products/", data=widget_data).json()["id"]

    response = client.delete(f"/api/v1/products/{product_id}")
    assert response.status_code == 204

    get_response = client.get(f"/api/v1/products/{product_id}")
    assert get_response.status_code == 404


def test_delete_product_not_found(client):
    """Test deleting a missing product returns 404."""
    response = client.delete("/api/v1/products/9999")

    assert response.status_code == 404


def test_create_product_oversized_quantity_is_a_field_error(client, widget_data):
    """Test a quantity beyond the column range is rejected, not stored."""
    response = client.post(
        "/api/v1/products/",
        data={**widget_data, "quantity": "99999999999999999999"}
    )

    assert response.status_code == 422
    assert response.json()["detail"]["errors"] == {
        "quantity": "The quantity field must not be greater than 2147483647."
    }
    assert client.get("/api/v1/products/").json()["total"] == 0


def test_storage_failure_returns_generic_500(client, widget_data):
    """Test database failures map to a 500 without leaking details."""
    failure = OperationalError("INSERT", {}, Exception("disk I/O error"))

    with patch("sqlalchemy.orm.Session.commit", side_effect=failure):
        response = client.post("/api/v1/products/", data=widget_data)

    assert response.status_code == 500
    assert response.json() == {"detail": "Internal storage error"}
    assert client.get("/api/v1/products/").json()["total"] == 0


def test_update_storage_failure_returns_generic_500(client, widget_data):
    """Test a failed update reports 500 and the product keeps its values."""
    product_id = client.post("/api/v1/products/", data=widget_data).json()["id"]
    failure = OperationalError("UPDATE", {}, Exception("database is locked"))

    with patch("sqlalchemy.orm.Session.commit", side_effect=failure):
        response = client.put(
            f"/api/v1/products/{product_id}",
            data={**widget_data, "name": "Gadget"}
        )

    assert response.status_code == 500
    assert response.json() == {"detail": "Internal storage error"}
    assert client.get(f"/api/v1/products/{product_id}").json()["name"] == "Widget"
