"""Tests for Product API endpoints."""


def create(client, headers, **fields):
    payload = {"id": "p1", "name": "Widget", "price": 9.99, "quantity": 5}
    payload.update(fields)
    return client.post("/api/products", json=payload, headers=headers)


def test_create_product(client, auth_headers):
    """Test creating a new product."""
    response = create(client, auth_headers)

    assert response.status_code == 201
    data = response.json()
    assert data["message"] == "Product created successfully"
    product = data["product"]
    assert product["id"] == "p1"
    assert product["name"] == "Widget"
    assert product["quantity"] == 5
    assert product["price"] == 9.99
    assert product["price_out"] == 9.99
    assert product["price_in"] == "0"
    assert product["image_url"] == ""
    assert "created_at" in product


def test_create_product_missing_fields(client, auth_headers):
    """Test creating product without a name fails with 400."""
    response = client.post("/api/products", json={"id": "p1"}, headers=auth_headers)

    assert response.status_code == 400
    assert "error" in response.json()


def test_create_product_invalid_quantity(client, auth_headers):
    """Test creating product with negative quantity fails."""
    response = create(client, auth_headers, quantity=-5)

    assert response.status_code == 400


def test_create_product_duplicate_id(client, auth_headers):
    """Test a duplicate id is a conflict and never overwrites."""
    create(client, auth_headers)

    response = create(client, auth_headers, name="Other", price=1.00)

    assert response.status_code == 409
    assert response.json()["error"] == "Product with this ID already exists"

    product = client.get("/api/products/p1", headers=auth_headers).json()
    assert product["name"] == "Widget"


def test_create_product_with_price_out(client, auth_headers):
    """Test an explicit price_out is kept."""
    response = create(client, auth_headers, price_out=12.50, price_in="7.25")

    product = response.json()["product"]
    assert product["price_out"] == 12.50
    assert product["price_in"] == "7.25"


def test_products_require_token(client):
    """Test product routes reject requests without a token."""
    response = client.get("/api/products")

    assert response.status_code == 401
    assert response.json()["error"] == "Access token required"


def test_products_reject_bad_token(client):
    response = client.get("/api/products", headers={"Authorization": "Bearer not-a-token"})

    assert response.status_code == 401
    assert response.json()["error"] == "Invalid or expired token"


def test_get_product(client, auth_headers):
    """Test getting a product by ID."""
    create(client, auth_headers)

    response = client.get("/api/products/p1", headers=auth_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["id"] == "p1"
    assert data["name"] == "Widget"


def test_get_product_not_found(client, auth_headers):
    """Test getting non-existent product returns 404."""
    response = client.get("/api/products/missing", headers=auth_headers)

    assert response.status_code == 404
    assert response.json() == {"error": "Product not found"}


def test_list_products(client, auth_headers):
    """Test listing products."""
    for i in range(3):
        create(client, auth_headers, id=f"p{i}", name=f"Product {i}")

    response = client.get("/api/products", headers=auth_headers)

    assert response.status_code == 200
    data = response.json()
    assert len(data) == 3
    assert {p["id"] for p in data} == {"p0", "p1", "p2"}


def test_products_are_scoped_to_owner(client, auth_headers, other_auth_headers):
    """Test another user's products are invisible and untouchable."""
    create(client, auth_headers)

    assert client.get("/api/products", headers=other_auth_headers).json() == []

    response = client.get("/api/products/p1", headers=other_auth_headers)
    assert response.status_code == 404
    assert response.json() == {"error": "Product not found"}

    response = client.put("/api/products/p1", json={"name": "Hijacked"}, headers=other_auth_headers)
    assert response.status_code == 404

    response = client.delete("/api/products/p1", headers=other_auth_headers)
    assert response.status_code == 404

    assert client.get("/api/products/p1", headers=auth_headers).json()["name"] == "Widget"


def test_update_product(client, auth_headers):
    """Test updating a product replaces its fields."""
    create(client, auth_headers, image_url="http://img/1.png")

    response = client.put(
        "/api/products/p1",
        json={"name": "Updated Name", "price": 75.00, "quantity": 2},
        headers=auth_headers
    )

    assert response.status_code == 200
    product = response.json()["product"]
    assert product["name"] == "Updated Name"
    assert product["price"] == 75.00
    assert product["quantity"] == 2
    # Omitted fields are reset, and a zero price_out displays the price
    assert product["image_url"] == ""
    assert product["price_out"] == 75.00


def test_update_product_not_found(client, auth_headers):
    response = client.put("/api/products/missing", json={"name": "X"}, headers=auth_headers)

    assert response.status_code == 404


def test_delete_product(client, auth_headers):
    """Test deleting a product."""
    create(client, auth_headers)

    response = client.delete("/api/products/p1", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["message"] == "Product deleted successfully"

    # Verify it's deleted
    get_response = client.get("/api/products/p1", headers=auth_headers)
    assert get_response.status_code == 404

    assert client.delete("/api/products/p1", headers=auth_headers).status_code == 404


def test_search_products(client, auth_headers):
    """Test searching products by name or id, ignoring case."""
    create(client, auth_headers, id="apple-1", name="Apple iPhone")
    create(client, auth_headers, id="sam-1", name="Samsung Galaxy")
    create(client, auth_headers, id="mac-1", name="apple MacBook")

    response = client.get("/api/products/search/APPLE")

    assert response.status_code == 200
    assert {p["id"] for p in response.json()} == {"apple-1", "mac-1"}

    response = client.get("/api/products/search/sam-")
    assert [p["id"] for p in response.json()] == ["sam-1"]


def test_search_treats_wildcards_literally(client, auth_headers):
    create(client, auth_headers, id="a", name="100% cotton")
    create(client, auth_headers, id="b", name="1000 pieces")

    response = client.get("/api/products/search/0%25")

    assert [p["id"] for p in response.json()] == ["a"]


def test_unsupported_method(client, auth_headers):
    """Test a known path with an unrouted method is reported as missing."""
    create(client, auth_headers)

    response = client.patch("/api/products/p1", json={"name": "X"}, headers=auth_headers)

    assert response.status_code == 404
    assert response.json() == {"error": "Endpoint not found"}
