"""
Tests for product API endpoints.
Cover the public listing and the admin authorization pipeline end to end.
"""
import pytest
from unittest.mock import AsyncMock, MagicMock

from pymongo.errors import ServerSelectionTimeoutError


class TestListProducts:
    """Public catalog listing"""

    def test_list_without_credentials(self, client, identity_provider):
        """Listing needs no token and never consults the identity provider"""
        response = client.get("/api/products")

        assert response.status_code == 200
        assert response.json() == {"success": True, "products": []}
        assert identity_provider.calls == []

    def test_list_ignores_invalid_credentials(self, client, identity_provider):
        """A bad token on a public route is not even looked at"""
        response = client.get("/api/products", headers={"Authorization": "Bearer garbage"})

        assert response.status_code == 200
        assert identity_provider.calls == []

    def test_list_store_failure(self, client, product_collection):
        """Store errors surface as 500 with the raw error detail"""
        cursor = MagicMock()
        cursor.sort.return_value = cursor
        cursor.to_list = AsyncMock(side_effect=ServerSelectionTimeoutError("no servers"))
        product_collection.find = MagicMock(return_value=cursor)

        response = client.get("/api/products")

        assert response.status_code == 500
        data = response.json()
        assert data["success"] is False
        assert data["message"] == "Failed to fetch products"
        assert data["code"] == "STORE_UNAVAILABLE"
        assert data["error"] == {"type": "ServerSelectionTimeoutError", "message": "no servers"}


class TestAddProduct:
    """Admin-only product creation"""

    def test_add_product_as_admin(self, client, admin_headers, pen):
        """Admin adds a product and it shows up in the listing"""
        response = client.post("/api/products", json=pen, headers=admin_headers)

        assert response.status_code == 201
        data = response.json()
        assert data["success"] is True
        assert data["message"] == "Product added successfully"
        assert data["product"]["name"] == "Pen"
        assert data["product"]["id"]

        listing = client.get("/api/products").json()["products"]
        assert any(product["id"] == data["product"]["id"] for product in listing)

    def test_added_product_round_trips(self, client, admin_headers, pen):
        """Fields come back from the listing exactly as they were sent"""
        created = client.post("/api/products", json=pen, headers=admin_headers).json()["product"]

        listed = next(p for p in client.get("/api/products").json()["products"] if p["id"] == created["id"])
        for field, value in pen.items():
            assert listed[field] == value

    def test_add_product_accepts_any_values(self, client, admin_headers, product_collection):
        """No type or presence validation; unknown fields are dropped"""
        body = {"name": 42, "price": "free", "extra": "ignored"}

        response = client.post("/api/products", json=body, headers=admin_headers)

        assert response.status_code == 201
        stored = list(product_collection.docs.values())[0]
        assert stored["name"] == 42
        assert stored["price"] == "free"
        assert "extra" not in stored

    def test_add_product_without_header(self, client, identity_provider, product_collection, pen):
        """Missing header is rejected before any provider or store call"""
        response = client.post("/api/products", json=pen)

        assert response.status_code == 401
        assert response.json()["code"] == "UNAUTHENTICATED"
        assert response.headers["WWW-Authenticate"] == "Bearer"
        assert identity_provider.calls == []
        assert product_collection.calls == []

    def test_add_product_header_without_token(self, client, identity_provider, pen):
        """A scheme with no token segment counts as no token"""
        response = client.post("/api/products", json=pen, headers={"Authorization": "Bearer"})

        assert response.status_code == 401
        assert identity_provider.calls == []

    def test_add_product_with_rejected_token(self, client, product_collection, pen):
        """Tokens the provider rejects are Forbidden, not AccessDenied"""
        response = client.post("/api/products", json=pen, headers={"Authorization": "Bearer forged"})

        assert response.status_code == 403
        data = response.json()
        assert data["code"] == "FORBIDDEN"
        assert data["message"] == "Invalid token"
        assert product_collection.calls == []

    def test_add_product_as_non_admin(self, client, user_headers, product_collection, pen):
        """Verified non-admins are denied"""
        response = client.post("/api/products", json=pen, headers=user_headers)

        assert response.status_code == 403
        data = response.json()
        assert data["code"] == "ACCESS_DENIED"
        assert data["message"] == "Access denied: Admins only"
        assert product_collection.calls == []

    def test_add_product_without_profile(self, client, pen):
        """A user with no stored profile has no role"""
        response = client.post("/api/products", json=pen, headers={"Authorization": "Bearer no-profile-token"})

        assert response.status_code == 403
        assert response.json()["code"] == "ACCESS_DENIED"

    def test_scheme_is_not_checked(self, client, pen):
        """Only the second header segment matters"""
        response = client.post("/api/products", json=pen, headers={"Authorization": "Token admin-token"})

        assert response.status_code == 201

    @pytest.mark.parametrize("role", ["Admin", "ADMIN", "admin ", "administrator"])
    def test_role_match_is_exact(self, client, identity_provider, pen, role):
        """Only the literal role "admin" is privileged"""
        identity_provider.profiles["user-uid"] = {"role": role}

        response = client.post("/api/products", json=pen, headers={"Authorization": "Bearer user-token"})

        assert response.status_code == 403
        assert response.json()["code"] == "ACCESS_DENIED"

    @pytest.mark.parametrize("role", [["admin"], 5, {"name": "admin"}, True])
    def test_non_string_role_is_denied(self, client, identity_provider, product_collection, pen, role):
        """A role that is not a string is no role at all"""
        identity_provider.profiles["user-uid"] = {"role": role}

        response = client.post("/api/products", json=pen, headers={"Authorization": "Bearer user-token"})

        assert response.status_code == 403
        assert response.json()["code"] == "ACCESS_DENIED"
        assert product_collection.calls == []

    def test_role_is_read_on_every_request(self, client, identity_provider, user_headers, pen):
        """Promoting a user takes effect on the next request"""
        assert client.post("/api/products", json=pen, headers=user_headers).status_code == 403

        identity_provider.profiles["user-uid"] = {"role": "admin"}

        assert client.post("/api/products", json=pen, headers=user_headers).status_code == 201

    def test_add_product_store_failure(self, client, admin_headers, product_collection, pen):
        """Insert failures surface as 500"""
        product_collection.insert_one = AsyncMock(side_effect=ServerSelectionTimeoutError("down"))

        response = client.post("/api/products", json=pen, headers=admin_headers)

        assert response.status_code == 500
        assert response.json()["message"] == "Failed to add product"

    def test_add_product_unencodable_value(self, client, admin_headers, product_collection):
        """Values the store cannot encode fail with the store error body"""
        product_collection.insert_one = AsyncMock(
            side_effect=OverflowError("MongoDB can only handle up to 8-byte ints")
        )

        response = client.post("/api/products", json={"price": 10 ** 20}, headers=admin_headers)

        assert response.status_code == 500
        data = response.json()
        assert data["code"] == "STORE_UNAVAILABLE"
        assert data["message"] == "Failed to add product"
        assert data["error"]["type"] == "OverflowError"

    def test_add_product_empty_body(self, client, admin_headers, product_collection):
        """An empty body adds an empty product"""
        response = client.post("/api/products", headers=admin_headers)

        assert response.status_code == 201
        assert response.json()["product"]["id"]
        assert len(product_collection.docs) == 1


class TestDeleteProduct:
    """Admin-only product deletion"""

    def test_delete_product_as_admin(self, client, admin_headers, pen):
        """Admin deletes an existing product"""
        product_id = client.post("/api/products", json=pen, headers=admin_headers).json()["product"]["id"]

        response = client.delete(f"/api/products/{product_id}", headers=admin_headers)

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Product deleted successfully"}
        assert client.get("/api/products").json()["products"] == []

    def test_delete_missing_product_is_idempotent(self, client, admin_headers):
        """Deleting an unknown id twice succeeds identically"""
        first = client.delete("/api/products/507f1f77bcf86cd799439011", headers=admin_headers)
        second = client.delete("/api/products/507f1f77bcf86cd799439011", headers=admin_headers)

        assert first.status_code == second.status_code == 200
        assert first.json() == second.json()

    def test_delete_malformed_id(self, client, admin_headers, product_collection):
        """Ids that cannot be ObjectIds match nothing and still succeed"""
        response = client.delete("/api/products/not-an-id", headers=admin_headers)

        assert response.status_code == 200
        assert product_collection.calls == []

    def test_delete_as_non_admin(self, client, admin_headers, user_headers, pen):
        """Non-admin delete is denied and the product survives"""
        product_id = client.post("/api/products", json=pen, headers=admin_headers).json()["product"]["id"]

        response = client.delete(f"/api/products/{product_id}", headers=user_headers)

        assert response.status_code == 403
        assert response.json()["message"] == "Access denied: Admins only"
        listing = client.get("/api/products").json()["products"]
        assert [product["id"] for product in listing] == [product_id]

    def test_delete_without_header(self, client, identity_provider, product_collection):
        """Missing header short-circuits before provider and store"""
        response = client.delete("/api/products/507f1f77bcf86cd799439011")

        assert response.status_code == 401
        assert identity_provider.calls == []
        assert product_collection.calls == []

    def test_delete_store_failure(self, client, admin_headers, product_collection):
        """Delete failures surface as 500"""
        product_collection.delete_one = AsyncMock(side_effect=ServerSelectionTimeoutError("down"))

        response = client.delete("/api/products/507f1f77bcf86cd799439011", headers=admin_headers)

        assert response.status_code == 500
        assert response.json()["message"] == "Failed to delete product"


class TestRequestContext:
    """Cross-cutting request handling"""

    def test_correlation_id_echoed(self, client):
        """Responses carry the caller's correlation id"""
        response = client.get("/api/products", headers={"X-Correlation-ID": "abc-123"})

        assert response.headers["X-Correlation-ID"] == "abc-123"

    def test_malformed_json_body(self, client, admin_headers):
        """A body that is not JSON is a validation error"""
        response = client.post(
            "/api/products",
            content="not json",
            headers={**admin_headers, "Content-Type": "application/json"},
        )

        assert response.status_code == 422
        assert response.json()["code"] == "VALIDATION_ERROR"

    def test_malformed_json_body_without_header(self, client, identity_provider, product_collection):
        """Authentication is checked before the body is parsed"""
        response = client.post(
            "/api/products",
            content="not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 401
        assert response.json()["code"] == "UNAUTHENTICATED"
        assert identity_provider.calls == []
        assert product_collection.calls == []

    def test_malformed_json_body_as_non_admin(self, client, user_headers, product_collection):
        """Role denial also comes before the body is parsed"""
        response = client.post(
            "/api/products",
            content="not json",
            headers={**user_headers, "Content-Type": "application/json"},
        )

        assert response.status_code == 403
        assert response.json()["code"] == "ACCESS_DENIED"

    def test_non_object_json_body(self, client, admin_headers, product_collection):
        """A JSON value that is not an object is a validation error"""
        response = client.post("/api/products", json=["Pen"], headers=admin_headers)

        assert response.status_code == 422
        assert response.json()["code"] == "VALIDATION_ERROR"
        assert product_collection.calls == []
