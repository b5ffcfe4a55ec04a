"""
Integration tests for API endpoints.
"""

import pytest

pytestmark = pytest.mark.asyncio


async def signup(client, data: dict) -> dict:
    response = await client.post("/users", json=data)
    assert response.status_code == 201
    return response.json()


async def create_book(client, data: dict) -> dict:
    response = await client.post("/books", json=data)
    assert response.status_code == 201
    return response.json()


class TestHealthEndpoints:
    """Tests for health check endpoints."""

    async def test_health_check(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["components"]["database"] == "healthy"

    async def test_request_id_header(self, client):
        response = await client.get("/health", headers={"X-Request-ID": "req-42"})

        assert response.headers["X-Request-ID"] == "req-42"


class TestUserFlow:
    """Tests for signup, login and user CRUD."""

    async def test_signup_returns_only_id_and_email(self, client, sample_user_data):
        data = await signup(client, sample_user_data)

        assert set(data) == {"id", "email"}
        assert data["email"] == sample_user_data["email"]

    async def test_duplicate_signup(self, client, sample_user_data):
        await signup(client, sample_user_data)

        response = await client.post("/users", json=sample_user_data)

        assert response.status_code == 400
        assert response.json() == {"message": "User already exists"}

    async def test_password_never_returned(self, client, sample_user_data):
        created = await signup(client, sample_user_data)

        listing = await client.get("/users")
        single = await client.get(f"/users/{created['id']}")

        assert all("password" not in u for u in listing.json())
        assert "password" not in single.json()
        assert single.json()["name"] == "Ana"

    async def test_login_and_me(self, client, sample_user_data):
        created = await signup(client, sample_user_data)

        login = await client.post(
            "/users/login",
            json={"email": sample_user_data["email"], "password": sample_user_data["password"]},
        )
        assert login.status_code == 200
        assert set(login.json()) == {"token"}

        me = await client.get(
            "/users/me", headers={"Authorization": f"Bearer {login.json()['token']}"}
        )
        assert me.status_code == 200
        assert me.json()["id"] == created["id"]

    async def test_login_wrong_password(self, client, sample_user_data):
        await signup(client, sample_user_data)

        response = await client.post(
            "/users/login",
            json={"email": sample_user_data["email"], "password": "not-the-password"},
        )

        assert response.status_code == 401
        assert response.json() == {"message": "Invalid credentials"}

    async def test_login_unknown_user(self, client):
        response = await client.post(
            "/users/login", json={"email": "nobody@example.com", "password": "12345678"}
        )

        assert response.status_code == 404
        assert response.json() == {"message": "User not found"}

    async def test_update_password_then_login(self, client, sample_user_data):
        created = await signup(client, sample_user_data)

        update = await client.put(
            f"/users/{created['id']}", json={"password": "brand-new-pass"}
        )
        assert update.status_code == 200

        old = await client.post(
            "/users/login",
            json={"email": sample_user_data["email"], "password": sample_user_data["password"]},
        )
        new = await client.post(
            "/users/login",
            json={"email": sample_user_data["email"], "password": "brand-new-pass"},
        )
        assert old.status_code == 401
        assert new.status_code == 200

    async def test_delete_user_then_get(self, client, sample_user_data):
        created = await signup(client, sample_user_data)

        deleted = await client.delete(f"/users/{created['id']}")
        again = await client.delete(f"/users/{created['id']}")
        fetched = await client.get(f"/users/{created['id']}")

        assert deleted.status_code == 204
        assert again.status_code == 404
        assert fetched.status_code == 404
        assert fetched.json() == {"message": "User not found"}


class TestBookFlow:
    """Tests for book CRUD and lookups."""

    async def test_create_and_get_book(self, client, sample_book_data):
        created = await create_book(client, sample_book_data)

        response = await client.get(f"/books/{created['id']}")

        assert response.status_code == 200
        data = response.json()
        assert data["title"] == sample_book_data["title"]
        assert data["price"] == pytest.approx(sample_book_data["price"])
        assert data["isSold"] is False
        assert data["buyer"] is None
        assert data["createdAt"] is not None

    async def test_create_ignores_sale_state(self, client, sample_book_data):
        created = await create_book(client, {**sample_book_data, "isSold": True})

        assert created["isSold"] is False

    async def test_get_nonexistent_book(self, client):
        response = await client.get("/books/nonexistent-id")

        assert response.status_code == 404
        assert response.json() == {"message": "Book not found"}

    async def test_list_books(self, client, sample_books_batch):
        for book in sample_books_batch:
            await create_book(client, book)

        response = await client.get("/books")

        assert response.status_code == 200
        assert len(response.json()) == len(sample_books_batch)

    async def test_author_lookup_ignores_case(self, client, sample_books_batch):
        for book in sample_books_batch:
            await create_book(client, book)

        lower = await client.get("/books/author/tolkien")
        upper = await client.get("/books/author/TOLKIEN")

        assert lower.status_code == 200
        assert {b["id"] for b in lower.json()} == {b["id"] for b in upper.json()}
        assert {b["title"] for b in lower.json()} == {"The Hobbit", "The Silmarillion"}

    async def test_update_book(self, client, sample_book_data):
        created = await create_book(client, sample_book_data)

        response = await client.put(f"/books/{created['id']}", json={"price": 21.5})

        assert response.status_code == 200
        assert response.json()["price"] == pytest.approx(21.5)
        assert response.json()["title"] == sample_book_data["title"]

    async def test_update_cannot_mark_sold(self, client, sample_book_data):
        created = await create_book(client, sample_book_data)

        response = await client.put(f"/books/{created['id']}", json={"isSold": True})
        book = await client.get(f"/books/{created['id']}")

        assert response.status_code == 422
        assert book.json()["isSold"] is False

    async def test_delete_book(self, client, sample_book_data):
        created = await create_book(client, sample_book_data)

        deleted = await client.delete(f"/books/{created['id']}")
        again = await client.delete(f"/books/{created['id']}")
        fetched = await client.get(f"/books/{created['id']}")

        assert deleted.status_code == 204
        assert fetched.status_code == 404
        assert again.status_code == 404
        assert again.json() == {"message": "Book not found"}


class TestPurchaseFlow:
    """Tests for buying books."""

    async def test_buy_book(self, client, sample_user_data, sample_book_data):
        user = await signup(client, sample_user_data)
        book = await create_book(client, sample_book_data)

        response = await client.post(f"/books/{book['id']}/buy/{user['id']}")

        assert response.status_code == 200
        assert response.json() == {
            "message": f"El libro The Hobbit ha sido comprado por el usuario con ID {user['id']}."
        }

        fetched = (await client.get(f"/books/{book['id']}")).json()
        assert fetched["isSold"] is True
        assert fetched["buyer"]["id"] == user["id"]
        assert fetched["buyer"]["email"] == sample_user_data["email"]
        assert "password" not in fetched["buyer"]

    async def test_book_sold_only_once(self, client, sample_user_data, sample_book_data):
        first = await signup(client, sample_user_data)
        second = await signup(client, {**sample_user_data, "email": "bob@example.com"})
        book = await create_book(client, sample_book_data)

        await client.post(f"/books/{book['id']}/buy/{first['id']}")
        response = await client.post(f"/books/{book['id']}/buy/{second['id']}")

        assert response.status_code == 404
        assert response.json() == {"message": "Book not found or already sold"}
        fetched = (await client.get(f"/books/{book['id']}")).json()
        assert fetched["buyer"]["id"] == first["id"]

    async def test_buy_missing_book(self, client, sample_user_data):
        user = await signup(client, sample_user_data)

        response = await client.post(f"/books/missing/buy/{user['id']}")

        assert response.status_code == 404
        assert response.json() == {"message": "Book not found or already sold"}

    async def test_buyer_cannot_be_deleted(self, client, sample_user_data, sample_book_data):
        user = await signup(client, sample_user_data)
        book = await create_book(client, sample_book_data)
        await client.post(f"/books/{book['id']}/buy/{user['id']}")

        deleted = await client.delete(f"/users/{user['id']}")
        fetched = (await client.get(f"/books/{book['id']}")).json()
        still_there = await client.get(f"/users/{user['id']}")

        assert deleted.status_code == 500
        assert deleted.json() == {"message": "Internal server error"}
        assert still_there.status_code == 200
        assert fetched["isSold"] is True
        assert fetched["buyer"]["id"] == user["id"]

    async def test_buy_for_missing_user(self, client, sample_book_data):
        book = await create_book(client, sample_book_data)

        response = await client.post(f"/books/{book['id']}/buy/ghost")
        fetched = (await client.get(f"/books/{book['id']}")).json()

        assert response.status_code == 404
        assert fetched["isSold"] is False

    async def test_available_and_sold_listings(
        self, client, sample_user_data, sample_books_batch
    ):
        user = await signup(client, sample_user_data)
        created = [await create_book(client, b) for b in sample_books_batch]

        await client.post(f"/books/{created[0]['id']}/buy/{user['id']}")

        available = (await client.get("/books/available")).json()
        sold = (await client.get("/books/sold")).json()

        assert {b["id"] for b in sold} == {created[0]["id"]}
        assert {b["id"] for b in available} == {b["id"] for b in created[1:]}
