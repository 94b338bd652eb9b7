"""
Tests for API route endpoints.

Tests: health, auth guard, access check, reader, library, checkout,
fulfillment transitions and catalog administration over HTTP.
"""
import pytest

from domain.enums import OrderStatus, UserRole


class TestHealthEndpoint:
    """Tests for GET /health."""

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_health_returns_200(self, client):
        response = await client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["database_connected"] is True


class TestAuthMe:
    """Tests for GET /auth/me."""

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_me_returns_profile(self, client, reader, auth_headers):
        response = await client.get("/auth/me", headers=auth_headers(reader.id))
        assert response.status_code == 200
        assert response.headers["cache-control"] == "no-store"
        data = response.json()["data"]
        assert data["_id"] == reader.id
        assert data["email"] == "reader@example.com"
        assert data["isAdmin"] is False

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_me_without_token_is_401(self, client):
        response = await client.get("/auth/me")
        assert response.status_code == 401
        assert response.json()["success"] is False

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_me_with_garbage_token_is_401(self, client):
        response = await client.get("/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401


class TestAccessEndpoint:
    """Tests for GET /books/{book_id}/access."""

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_granted(self, client, reader, make_book, make_order, auth_headers):
        book = await make_book()
        await make_order(reader, [book], status=OrderStatus.CONFIRMED)

        response = await client.get(f"/books/{book.id}/access", headers=auth_headers(reader.id))

        assert response.status_code == 200
        body = response.json()
        assert body["hasAccess"] is True
        assert body["book"]["id"] == book.id
        assert body["book"]["digitalContent"]["contentType"] == "pdf"

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_forbidden(self, client, reader, make_book, auth_headers):
        book = await make_book()

        response = await client.get(f"/books/{book.id}/access", headers=auth_headers(reader.id))

        assert response.status_code == 403
        body = response.json()
        assert body["hasAccess"] is False
        assert body["message"] == "Purchase required to access this book"
        assert "book" not in body

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_not_found(self, client, reader, auth_headers):
        response = await client.get(f"/books/{'a' * 32}/access", headers=auth_headers(reader.id))

        assert response.status_code == 404
        assert "not found" in response.json()["message"].lower()

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_malformed_id_is_400(self, client, reader, auth_headers):
        response = await client.get("/books/not-an-id/access", headers=auth_headers(reader.id))
        assert response.status_code == 400

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_unauthenticated(self, client, make_book):
        book = await make_book()
        response = await client.get(f"/books/{book.id}/access")
        assert response.status_code == 401


class TestReaderEndpoint:
    """Tests for GET /reader/{book_id}."""

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_ready_download(self, client, reader, make_book, make_order, auth_headers):
        book = await make_book(content_type="epub", content_url="https://cdn/book.epub")
        await make_order(reader, [book])

        response = await client.get(f"/reader/{book.id}", headers=auth_headers(reader.id))

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["state"] == "ready"
        assert data["plan"]["kind"] == "download_link"
        assert data["plan"]["suggestedName"] == f"{book.title}.epub"

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_denied(self, client, reader, make_book, auth_headers):
        book = await make_book()

        response = await client.get(f"/reader/{book.id}", headers=auth_headers(reader.id))

        assert response.status_code == 403
        data = response.json()["data"]
        assert data["state"] == "denied"
        assert data["catalogUrl"]

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_unknown_book(self, client, reader, auth_headers):
        response = await client.get(f"/reader/{'9' * 32}", headers=auth_headers(reader.id))

        assert response.status_code == 404
        assert response.json()["data"]["state"] == "error"

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_no_content(self, client, reader, make_book, make_order, auth_headers):
        book = await make_book(has_content=False, content_url=None)
        await make_order(reader, [book])

        response = await client.get(f"/reader/{book.id}", headers=auth_headers(reader.id))

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["state"] == "no_content"
        assert data["plan"]["kind"] == "no_content"

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_content_unavailable(self, client, reader, make_book, make_order, auth_headers):
        book = await make_book(content_type="txt", content_url="")
        await make_order(reader, [book])

        response = await client.get(f"/reader/{book.id}", headers=auth_headers(reader.id))

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["state"] == "error"
        assert data["message"] == "Content unavailable"
        assert data["retryable"] is False


class TestLibraryEndpoint:
    """Tests for GET /library."""

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_library_lists_entitled_books_once(
        self, client, reader, make_book, make_order, auth_headers,
    ):
        kids = await make_book(title="Little Fox", target_audience="kids", age_min=3, age_max=6)
        adults = await make_book(title="Tax Law", has_content=False, content_url=None)
        pending = await make_book(title="Not Yet")
        await make_order(reader, [kids, adults], status=OrderStatus.PAID)
        await make_order(reader, [kids], status=OrderStatus.DELIVERED)
        await make_order(reader, [pending], status=OrderStatus.PENDING)

        response = await client.get("/library", headers=auth_headers(reader.id))

        assert response.status_code == 200
        body = response.json()
        assert sorted(b["title"] for b in body["data"]) == ["Little Fox", "Tax Law"]
        assert body["meta"]["total"] == 2
        assert body["meta"]["withContent"] == 1

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_library_filters(self, client, reader, make_book, make_order, auth_headers):
        kids = await make_book(title="Little Fox", target_audience="kids", age_min=3, age_max=6)
        adults = await make_book(title="Tax Law", author="Fox Mulder")
        await make_order(reader, [kids, adults])

        response = await client.get(
            "/library", params={"audience": "kids"}, headers=auth_headers(reader.id),
        )
        assert [b["title"] for b in response.json()["data"]] == ["Little Fox"]

        response = await client.get(
            "/library", params={"search": "FOX"}, headers=auth_headers(reader.id),
        )
        assert response.json()["meta"]["total"] == 2

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_library_unknown_audience(self, client, reader, auth_headers):
        response = await client.get(
            "/library", params={"audience": "pets"}, headers=auth_headers(reader.id),
        )
        assert response.status_code == 400

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_empty_library(self, client, reader, auth_headers):
        response = await client.get("/library", headers=auth_headers(reader.id))
        assert response.status_code == 200
        assert response.json()["data"] == []


class TestAdminBooks:
    """Tests for /admin/books."""

    @staticmethod
    def _payload(**overrides):
        data = {
            "title": "Field Guide",
            "author": "N. Aturalist",
            "description": "Birds of the coast",
            "category": "Nature",
            "targetAudience": "adults",
            "price": 15.0,
            "digitalContent": {
                "hasContent": True,
                "contentType": "link",
                "externalLink": "https://birds.example.org",
                "linkDescription": "Online edition",
            },
        }
        data.update(overrides)
        return data

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_create_update_delete(self, client, admin, auth_headers):
        headers = auth_headers(admin.id, role=UserRole.ADMIN)

        created = await client.post("/admin/books", json=self._payload(), headers=headers)
        assert created.status_code == 201
        book_id = created.json()["data"]["id"]

        updated = await client.put(
            f"/admin/books/{book_id}",
            json=self._payload(title="Field Guide, 2nd ed."),
            headers=headers,
        )
        assert updated.status_code == 200
        assert updated.json()["data"]["title"] == "Field Guide, 2nd ed."

        deleted = await client.delete(f"/admin/books/{book_id}", headers=headers)
        assert deleted.status_code == 204

        missing = await client.delete(f"/admin/books/{book_id}", headers=headers)
        assert missing.status_code == 404

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_invalid_form_returns_field_errors(self, client, admin, auth_headers):
        payload = self._payload(digitalContent={"hasContent": True, "contentType": "doi"})

        response = await client.post(
            "/admin/books", json=payload, headers=auth_headers(admin.id, role=UserRole.ADMIN),
        )

        assert response.status_code == 422
        fields = response.json()["error"]["details"]["fields"]
        assert fields == {"doiNumber": "DOI number is required when content type is DOI"}

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_non_admin_rejected(self, client, reader, auth_headers):
        # A forged role claim does not help; the users row decides.
        response = await client.post(
            "/admin/books", json=self._payload(), headers=auth_headers(reader.id, role=UserRole.ADMIN),
        )
        assert response.status_code == 403


class TestPurchaseToReadFlow:
    """Checkout -> payment -> access -> reader, then cancellation."""

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_end_to_end(self, client, reader, admin, make_book, auth_headers):
        book = await make_book(
            content_type="link",
            content_url=None,
            external_link="https://reader.example.com/b/42",
            link_description="Hosted edition",
        )
        user_headers = auth_headers(reader.id)
        admin_headers = auth_headers(admin.id, role=UserRole.ADMIN)

        checkout = await client.post(
            "/orders", json={"items": [{"productId": book.id}]}, headers=user_headers,
        )
        assert checkout.status_code == 201
        order_id = checkout.json()["data"]["id"]
        assert checkout.json()["data"]["status"] == "pending"

        denied = await client.get(f"/books/{book.id}/access", headers=user_headers)
        assert denied.status_code == 403

        paid = await client.patch(
            f"/admin/orders/{order_id}/status", json={"status": "paid"}, headers=admin_headers,
        )
        assert paid.status_code == 200

        granted = await client.get(f"/books/{book.id}/access", headers=user_headers)
        assert granted.status_code == 200
        assert granted.json()["hasAccess"] is True

        reader_view = await client.get(f"/reader/{book.id}", headers=user_headers)
        plan = reader_view.json()["data"]["plan"]
        assert plan["kind"] == "external_redirect"
        assert plan["url"] == "https://reader.example.com/b/42"
        assert plan["newContext"] is True

        regress = await client.patch(
            f"/admin/orders/{order_id}/status", json={"status": "pending"}, headers=admin_headers,
        )
        assert regress.status_code == 409

        cancelled = await client.patch(
            f"/admin/orders/{order_id}/status", json={"status": "cancelled"}, headers=admin_headers,
        )
        assert cancelled.status_code == 200

        revoked = await client.get(f"/books/{book.id}/access", headers=user_headers)
        assert revoked.status_code == 403

    @pytest.mark.api
    @pytest.mark.asyncio
    @pytest.mark.parametrize("product_id", ["abc", "z" * 32, "A" * 32, "0" * 40])
    async def test_checkout_malformed_product_id_is_400(
        self, client, reader, auth_headers, product_id,
    ):
        response = await client.post(
            "/orders", json={"items": [{"productId": product_id}]},
            headers=auth_headers(reader.id),
        )
        assert response.status_code == 400
        assert response.json()["success"] is False
