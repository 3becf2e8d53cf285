"""
Integration tests for API endpoints.
"""

import pytest

from tests.conftest import ADMIN_EMAIL, PASSWORD, STUDENT_EMAIL

pytestmark = pytest.mark.asyncio

ISBN = "9780743273565"


class TestHealthEndpoints:
    """Tests for health check endpoints."""

    async def test_health_check(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["components"]["database"] == "healthy"


class TestAuthFlow:
    """Signup, login, logout and dashboard routing."""

    async def test_signup_then_login_lands_on_role_dashboard(self, client):
        response = await client.post(
            "/signup",
            data={"name": "Fay", "email": "fay@example.com", "password": "pw", "role": "faculty"},
        )
        assert response.status_code == 303
        assert response.headers["location"] == "/login?registered=1"

        response = await client.post("/login", data={"email": "fay@example.com", "password": "pw"})
        assert response.status_code == 303
        assert response.headers["location"] == "/faculty/dashboard"
        assert "library_session" in response.cookies

        dashboard = await client.get("/faculty/dashboard")
        assert dashboard.status_code == 200
        assert "Fay" in dashboard.text

    async def test_signup_duplicate_email(self, client, seeded_users):
        response = await client.post(
            "/signup",
            data={"name": "Dup", "email": STUDENT_EMAIL, "password": "pw", "role": "student"},
        )

        assert response.status_code == 409
        assert "Could not create user" in response.text

    async def test_signup_missing_fields(self, client):
        response = await client.post("/signup", data={"name": "", "email": "x@example.com", "password": "pw"})

        assert response.status_code == 400
        assert "All fields are required." in response.text

    async def test_login_unknown_user(self, client):
        response = await client.post("/login", data={"email": "ghost@example.com", "password": "pw"})

        assert response.status_code == 404
        assert "User not found." in response.text

    async def test_login_wrong_password(self, client, seeded_users):
        response = await client.post("/login", data={"email": ADMIN_EMAIL, "password": "bad"})

        assert response.status_code == 401
        assert "Incorrect password." in response.text

    async def test_dashboard_role_mismatch_redirects_to_login(self, student_client):
        response = await student_client.get("/admin/dashboard")

        assert response.status_code == 303
        assert response.headers["location"] == "/login"

    async def test_logged_in_user_skips_login_page(self, student_client):
        response = await student_client.get("/login")

        assert response.status_code == 303
        assert response.headers["location"] == "/student/dashboard"

    async def test_logout_destroys_session(self, admin_client, container):
        assert len(container.session_store) == 1

        response = await admin_client.get("/logout")

        assert response.status_code == 303
        assert response.headers["location"] == "/login"
        assert len(container.session_store) == 0

        response = await admin_client.get("/admin/dashboard")
        assert response.status_code == 303

    async def test_relogin_replaces_previous_session(self, admin_client, container):
        first = admin_client.cookies.get("library_session")
        assert container.session_store.get(first) is not None

        response = await admin_client.post("/login", data={"email": ADMIN_EMAIL, "password": PASSWORD})

        assert response.status_code == 303
        assert container.session_store.get(first) is None
        assert len(container.session_store) == 1

    async def test_dashboard_stats_only_built_for_admins(self, student_client, container, monkeypatch):
        def fail():
            raise AssertionError("stats computed for a non-admin")

        monkeypatch.setattr(container.book_repository, "get_stats", fail)

        response = await student_client.get("/admin/dashboard")

        assert response.status_code == 303
        assert response.headers["location"] == "/login"

    async def test_root_redirects(self, client):
        response = await client.get("/")

        assert response.status_code == 303
        assert response.headers["location"] == "/login"


class TestAdminGuard:
    """Non-admin sessions get the 403 page and change nothing."""

    async def test_anonymous_add_books_forbidden(self, client, container, sample_book_data):
        response = await client.post("/admin/add-books", data={**sample_book_data, "quantity": "2"})

        assert response.status_code == 403
        assert "403 Forbidden" in response.text
        assert container.book_repository.get_by_isbn(ISBN) is None

    @pytest.mark.parametrize(
        "method,path,payload",
        [
            ("POST", "/admin/add-books", {"data": {"quantity": "2"}}),
            ("GET", "/admin/update-quantity", {"params": {"isbn": ISBN, "quantity": "5"}}),
            ("POST", "/admin/remove-books", {"data": {"quantity": "1"}}),
            ("POST", "/admin/remove-books", {"data": {"quantity": "3"}}),
            ("POST", "/api/inventory/add-one", {"json": {"isbn": ISBN}}),
            ("POST", "/api/inventory/remove-one", {"json": {"isbn": ISBN}}),
        ],
    )
    async def test_student_mutations_forbidden(
        self, student_client, container, sample_book_data, method, path, payload
    ):
        container.book_repository.create(available=3, **sample_book_data)
        if "data" in payload:
            payload = {"data": {**sample_book_data, **payload["data"]}}

        response = await student_client.request(method, path, **payload)

        assert response.status_code == 403
        assert "403 Forbidden" in response.text
        book = container.book_repository.get_by_isbn(ISBN)
        assert book is not None
        assert book.available == 3
        assert book.book_name == sample_book_data["book_name"]

    @pytest.mark.parametrize(
        "path",
        ["/admin/add-books", "/admin/remove-books", "/admin/manage-inventory", "/admin/view-members"],
    )
    async def test_student_admin_pages_forbidden(self, student_client, path):
        response = await student_client.get(path)

        assert response.status_code == 403


class TestAdminInventory:
    """Admin add / top-up / remove flows through the HTML routes."""

    async def test_add_new_book_redirects_with_flash(self, admin_client, container, sample_book_data):
        response = await admin_client.post("/admin/add-books", data={**sample_book_data, "quantity": "3"})

        assert response.status_code == 303
        assert response.headers["location"] == "/admin/dashboard"
        assert container.book_repository.get_by_isbn(ISBN).available == 3

        dashboard = await admin_client.get("/admin/dashboard")
        assert "Book(s) added successfully" in dashboard.text

    async def test_add_existing_book_confirms_then_tops_up(self, admin_client, container, sample_book_data):
        await admin_client.post("/admin/add-books", data={**sample_book_data, "quantity": "3"})

        response = await admin_client.post("/admin/add-books", data={**sample_book_data, "quantity": "2"})
        assert response.status_code == 200
        assert "already exists" in response.text
        assert f"/admin/update-quantity?isbn={ISBN}&amp;quantity=2" in response.text

        response = await admin_client.get("/admin/update-quantity", params={"isbn": ISBN, "quantity": "2"})
        assert response.status_code == 303
        assert container.book_repository.get_by_isbn(ISBN).available == 5

    async def test_add_with_mismatched_details(self, admin_client, container, sample_book_data):
        await admin_client.post("/admin/add-books", data={**sample_book_data, "quantity": "1"})

        response = await admin_client.post(
            "/admin/add-books",
            data={**sample_book_data, "book_name": "Something Else", "quantity": "1"},
        )

        assert response.status_code == 400
        assert "don&#39;t match" in response.text or "don't match" in response.text
        assert container.book_repository.get_by_isbn(ISBN).book_name == "The Great Gatsby"

    async def test_add_with_oversized_quantity_redisplays_form(self, admin_client, container, sample_book_data):
        response = await admin_client.post(
            "/admin/add-books",
            data={**sample_book_data, "quantity": "99999999999999999999"},
        )

        assert response.status_code == 400
        assert "Invalid quantity entered" in response.text
        assert sample_book_data["book_name"] in response.text
        assert container.book_repository.get_by_isbn(ISBN) is None

    async def test_top_up_with_oversized_quantity_adds_one(self, admin_client, container, sample_book_data):
        container.book_repository.create(available=2, **sample_book_data)

        response = await admin_client.get(
            "/admin/update-quantity",
            params={"isbn": ISBN, "quantity": "99999999999999999999"},
        )

        assert response.status_code == 303
        assert container.book_repository.get_by_isbn(ISBN).available == 3

    async def test_remove_partial(self, admin_client, container, sample_book_data):
        container.book_repository.create(available=5, **sample_book_data)

        response = await admin_client.post("/admin/remove-books", data={**sample_book_data, "quantity": "2"})

        assert response.status_code == 303
        assert container.book_repository.get_by_isbn(ISBN).available == 3

    async def test_remove_too_many(self, admin_client, container, sample_book_data):
        container.book_repository.create(available=2, **sample_book_data)

        response = await admin_client.post("/admin/remove-books", data={**sample_book_data, "quantity": "3"})

        assert response.status_code == 400
        assert "more than the available quantity" in response.text
        assert container.book_repository.get_by_isbn(ISBN).available == 2

    async def test_remove_all_deletes(self, admin_client, container, sample_book_data):
        container.book_repository.create(available=2, **sample_book_data)

        response = await admin_client.post("/admin/remove-books", data={**sample_book_data, "quantity": "2"})

        assert response.status_code == 303
        assert container.book_repository.get_by_isbn(ISBN) is None

    async def test_remove_unknown_book(self, admin_client, sample_book_data):
        response = await admin_client.post("/admin/remove-books", data={**sample_book_data, "quantity": "1"})

        assert response.status_code == 404
        assert "does not exist in the library" in response.text

    async def test_manage_inventory_lists_books(self, admin_client, container, sample_books_batch):
        for book in sample_books_batch:
            container.book_repository.create(available=1, **book)

        response = await admin_client.get("/admin/manage-inventory")

        assert response.status_code == 200
        for book in sample_books_batch:
            assert book["isbn"] in response.text


class TestInventoryApi:
    """JSON single-unit adjustments."""

    async def test_add_one_and_remove_one(self, admin_client, container, sample_book_data):
        container.book_repository.create(available=1, **sample_book_data)

        response = await admin_client.post("/api/inventory/add-one", json={"isbn": ISBN})
        assert response.status_code == 200
        assert response.json()["success"] is True
        assert response.json()["available"] == 2

        await admin_client.post("/api/inventory/remove-one", json={"isbn": ISBN})
        response = await admin_client.post("/api/inventory/remove-one", json={"isbn": ISBN})
        assert response.json()["available"] == 0

        response = await admin_client.post("/api/inventory/remove-one", json={"isbn": ISBN})
        assert response.status_code == 200
        assert response.json()["success"] is False
        assert container.book_repository.get_by_isbn(ISBN).available == 0

    async def test_unknown_isbn(self, admin_client):
        response = await admin_client.post("/api/inventory/add-one", json={"isbn": "0000000000000"})

        assert response.status_code == 200
        assert response.json() == {
            "success": False,
            "status": "failure",
            "message": "Book not found",
            "redirect_target": None,
            "isbn": "0000000000000",
        }

    async def test_overlong_isbn_fails_softly(self, admin_client):
        response = await admin_client.post("/api/inventory/remove-one", json={"isbn": "9" * 40})

        assert response.status_code == 200
        assert response.json()["success"] is False
        assert response.json()["message"] == "Book not found"


class TestBookLookup:
    """Public ISBN lookup."""

    async def test_found(self, client, container, sample_book_data):
        container.book_repository.create(available=4, **sample_book_data)

        response = await client.post("/books/getBookDetailsByISBN", json={"isbn": ISBN})

        data = response.json()
        assert data["success"] is True
        assert data["book"]["author_name"] == "F. Scott Fitzgerald"
        assert data["book"]["available"] == 4

    async def test_bad_length(self, client):
        response = await client.post("/books/getBookDetailsByISBN", json={"isbn": "123"})

        assert response.status_code == 200
        assert response.json()["success"] is False

    @pytest.mark.parametrize("isbn", ["9" * 40, 123, None])
    async def test_unusual_isbn_values_fail_softly(self, client, isbn):
        response = await client.post("/books/getBookDetailsByISBN", json={"isbn": isbn})

        assert response.status_code == 200
        assert response.json()["success"] is False

    async def test_numeric_isbn_is_looked_up(self, client, container, sample_book_data):
        container.book_repository.create(available=1, **sample_book_data)

        response = await client.post("/books/getBookDetailsByISBN", json={"isbn": int(ISBN)})

        assert response.json()["success"] is True


class TestMemberSearch:
    """Admin member roster and search fragment."""

    async def test_view_members(self, admin_client):
        response = await admin_client.get("/admin/view-members")

        assert response.status_code == 200
        assert ADMIN_EMAIL in response.text
        assert STUDENT_EMAIL in response.text
        assert PASSWORD not in response.text

    async def test_search_fragment(self, admin_client):
        response = await admin_client.get("/api/admin/search-members", params={"query": "faculty"})

        assert response.status_code == 200
        assert "<tr>" in response.text
        assert "Fay Faculty" in response.text
        assert "Sam Student" not in response.text

    async def test_search_no_results(self, admin_client):
        response = await admin_client.get("/api/admin/search-members", params={"query": "zzz"})

        assert "no results found" in response.text


class TestRequestLogging:
    """Correlation id header from the logging middleware."""

    async def test_request_id_is_echoed(self, client):
        response = await client.get("/login", headers={"X-Request-ID": "abc123"})

        assert response.headers["X-Request-ID"] == "abc123"

    async def test_request_id_is_generated(self, client):
        response = await client.get("/login")

        assert len(response.headers["X-Request-ID"]) == 8
