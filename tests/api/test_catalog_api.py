"""Storefront browsing and back-office catalog management over HTTP."""

import pytest

from tests.utils import add_book_to_cart, move_order, place_order


class TestBrowseBooks:
    def test_list_hides_inactive(self, client, book, second_book, admin_headers):
        client.delete(f"/api/admin/books/{second_book.id}", headers=admin_headers)

        body = client.get("/api/books").json()
        assert [item["id"] for item in body["items"]] == [book.id]
        assert body["pagination"] == {"page": 1, "limit": 12, "total": 1, "pages": 1}

    def test_include_inactive_only_for_admins(self, client, book, second_book, admin_headers):
        client.delete(f"/api/admin/books/{second_book.id}", headers=admin_headers)

        anonymous = client.get("/api/books", params={"include_inactive": True}).json()
        admin = client.get(
            "/api/books", params={"include_inactive": True}, headers=admin_headers
        ).json()
        assert anonymous["pagination"]["total"] == 1
        assert admin["pagination"]["total"] == 2

    @pytest.mark.parametrize(
        ("params", "expected"),
        [
            ({"min_price": 100000}, ["Đắc Nhân Tâm"]),
            ({"max_price": 100000}, ["Quẳng Gánh Lo Đi"]),
            ({"search": "quẳng"}, ["Quẳng Gánh Lo Đi"]),
            ({"sort": "sale_price"}, ["Quẳng Gánh Lo Đi", "Đắc Nhân Tâm"]),
            ({"sort": "-salePrice"}, ["Đắc Nhân Tâm", "Quẳng Gánh Lo Đi"]),
        ],
    )
    def test_filters_and_sorting(self, client, book, second_book, params, expected):
        body = client.get("/api/books", params=params).json()
        assert [item["title"] for item in body["items"]] == expected

    def test_filter_by_category(self, client, book, category):
        body = client.get("/api/books", params={"category": category.id}).json()
        assert body["pagination"]["total"] == 1
        assert client.get("/api/books", params={"category": "x"}).json()["items"] == []

    def test_pagination(self, client, make_book):
        for _ in range(3):
            make_book()
        body = client.get("/api/books", params={"page": 2, "limit": 2}).json()
        assert len(body["items"]) == 1
        assert body["pagination"]["pages"] == 2

    def test_unknown_sort_field(self, client, book):
        response = client.get("/api/books", params={"sort": "password"})
        assert response.status_code == 400
        assert response.json()["detail"] == "Cannot sort by 'password'"

    def test_detail_by_slug_counts_views(self, client, book):
        client.get("/api/books/slug/dac-nhan-tam")
        body = client.get("/api/books/slug/dac-nhan-tam").json()
        assert body["id"] == book.id
        assert body["view_count"] == 2
        assert body["author"]["name"] == "Dale Carnegie"

    def test_unknown_book(self, client):
        response = client.get("/api/books/missing")
        assert response.status_code == 404
        assert response.json()["detail"] == "Book not found"


class TestManageBooks:
    def _payload(self, author, publisher, category, **fields):
        return {
            "title": "Tuổi Trẻ Đáng Giá Bao Nhiêu",
            "author_id": author.id,
            "publisher_id": publisher.id,
            "category_id": category.id,
            "isbn": "9786045600000",
            "images": ["https://img.test/tuoi-tre.jpg"],
            "original_price": 90000,
            "sale_price": 76500,
            "initial_copies": 2,
            **fields,
        }

    def test_create_requires_admin(self, client, customer_headers, author, publisher, category):
        response = client.post(
            "/api/admin/books",
            json=self._payload(author, publisher, category),
            headers=customer_headers,
        )
        assert response.status_code == 403

    def test_create(self, client, admin_headers, author, publisher, category):
        response = client.post(
            "/api/admin/books",
            json=self._payload(author, publisher, category),
            headers=admin_headers,
        )
        assert response.status_code == 201
        body = response.json()
        assert body["slug"] == "tuoi-tre-dang-gia-bao-nhieu"
        assert body["discount_percent"] == 15
        assert body["available_copies"] == 2

    def test_create_validates_images(self, client, admin_headers, author, publisher, category):
        response = client.post(
            "/api/admin/books",
            json=self._payload(author, publisher, category, images=[]),
            headers=admin_headers,
        )
        assert response.status_code == 422

    def test_update_and_toggle(self, client, admin_headers, book):
        updated = client.put(
            f"/api/admin/books/{book.id}", json={"discount_percent": 50}, headers=admin_headers
        )
        assert updated.json()["sale_price"] == 75000

        toggled = client.patch(f"/api/admin/books/{book.id}/toggle-status", headers=admin_headers)
        assert toggled.json()["is_active"] is False
        assert client.get("/api/books/slug/dac-nhan-tam").status_code == 404

    def test_null_for_required_field(self, client, admin_headers, book):
        response = client.put(
            f"/api/admin/books/{book.id}", json={"title": None}, headers=admin_headers
        )
        assert response.status_code == 422
        assert client.get(f"/api/books/{book.id}").json()["title"] == "Đắc Nhân Tâm"

    def test_copies(self, client, admin_headers, book):
        added = client.post(
            f"/api/admin/books/{book.id}/copies",
            json={"quantity": 2, "import_price": 55000},
            headers=admin_headers,
        )
        assert added.status_code == 201
        assert [copy["copy_code"] for copy in added.json()] == ["COPY-00006", "COPY-00007"]

        listed = client.get(
            f"/api/admin/books/{book.id}/copies",
            params={"status": "available"},
            headers=admin_headers,
        )
        assert listed.json()["pagination"]["total"] == 7


class TestBookCopies:
    def test_status_change_and_summary(self, client, admin_headers, book):
        copies = client.get(f"/api/admin/books/{book.id}/copies", headers=admin_headers).json()
        copy_id = copies["items"][0]["id"]

        response = client.put(
            f"/api/admin/book-copies/{copy_id}/status",
            json={"status": "damaged"},
            headers=admin_headers,
        )
        assert response.json()["status"] == "damaged"

        summary = client.get("/api/admin/book-copies", headers=admin_headers).json()["summary"]
        assert summary["damaged"] == 1
        assert summary["available"] == 4

    def test_sold_copy_cannot_be_deleted(self, client, admin_headers, book):
        copies = client.get(f"/api/admin/books/{book.id}/copies", headers=admin_headers).json()
        copy_id = copies["items"][0]["id"]
        client.put(
            f"/api/admin/book-copies/{copy_id}/status",
            json={"status": "sold"},
            headers=admin_headers,
        )

        response = client.delete(f"/api/admin/book-copies/{copy_id}", headers=admin_headers)
        assert response.status_code == 400
        assert response.json()["detail"] == "Cannot delete book copy with status: sold"

    def test_stats_by_book(self, client, admin_headers, book, second_book):
        stats = client.get("/api/admin/book-copies/stats/by-book", headers=admin_headers).json()
        assert {row["book_title"]: row["total"] for row in stats} == {
            "Đắc Nhân Tâm": 5,
            "Quẳng Gánh Lo Đi": 3,
        }


class TestCopiesHeldByOrders:
    @pytest.fixture
    def pending_order(self, client, customer_headers, address, book):
        add_book_to_cart(client, customer_headers, book.id, quantity=2)
        return place_order(client, customer_headers, address.id)

    def _linked_copy_ids(self, client, admin_headers, book_id, order_id):
        copies = client.get(
            "/api/admin/book-copies", params={"book_id": book_id}, headers=admin_headers
        ).json()["items"]
        return [copy["id"] for copy in copies if copy["order_id"] == order_id]

    def test_linked_copy_cannot_be_deleted(self, client, admin_headers, book, pending_order):
        linked = self._linked_copy_ids(client, admin_headers, book.id, pending_order["id"])
        assert len(linked) == 2

        response = client.delete(f"/api/admin/book-copies/{linked[0]}", headers=admin_headers)
        assert response.status_code == 400
        assert response.json()["detail"] == (
            f"Book copy is linked to order {pending_order['order_number']}"
        )

        confirmed = move_order(client, admin_headers, pending_order["id"], "confirmed")
        assert confirmed["status"] == "confirmed"
        assert len(self._linked_copy_ids(client, admin_headers, book.id, confirmed["id"])) == 2

    def test_linked_copy_status_is_locked(self, client, admin_headers, book, pending_order):
        linked = self._linked_copy_ids(client, admin_headers, book.id, pending_order["id"])

        response = client.put(
            f"/api/admin/book-copies/{linked[0]}/status",
            json={"status": "damaged"},
            headers=admin_headers,
        )
        assert response.status_code == 400

        response = client.put(
            f"/api/admin/book-copies/{linked[0]}",
            json={"status": "returned"},
            headers=admin_headers,
        )
        assert response.status_code == 400

    def test_linked_copy_notes_can_change(self, client, admin_headers, book, pending_order):
        linked = self._linked_copy_ids(client, admin_headers, book.id, pending_order["id"])

        response = client.put(
            f"/api/admin/book-copies/{linked[0]}",
            json={"warehouse_location": "Shelf B2"},
            headers=admin_headers,
        )
        assert response.status_code == 200
        assert response.json()["warehouse_location"] == "Shelf B2"


class TestTaxonomy:
    def test_category_lifecycle(self, client, admin_headers):
        created = client.post(
            "/api/categories", json={"name": "Văn học"}, headers=admin_headers
        )
        assert created.status_code == 201
        category_id = created.json()["id"]
        assert created.json()["slug"] == "van-hoc"

        duplicate = client.post(
            "/api/categories", json={"name": "Văn học"}, headers=admin_headers
        )
        assert duplicate.status_code == 400

        assert client.get("/api/categories/slug/van-hoc").json()["book_count"] == 0
        deleted = client.delete(f"/api/categories/{category_id}", headers=admin_headers)
        assert deleted.json() == {"message": "Category deleted successfully"}

    def test_category_in_use(self, client, admin_headers, category, book):
        response = client.delete(f"/api/categories/{category.id}", headers=admin_headers)
        assert response.status_code == 400

    def test_category_books(self, client, category, book):
        body = client.get(f"/api/categories/{category.id}/books").json()
        assert [item["id"] for item in body["items"]] == [book.id]

    def test_authors_and_publishers(self, client, author, publisher, book):
        authors = client.get("/api/authors").json()
        assert authors["items"][0]["name"] == "Dale Carnegie"
        assert authors["items"][0]["book_count"] == 1

        publisher_books = client.get(f"/api/publishers/{publisher.id}/books").json()
        assert publisher_books["pagination"]["total"] == 1

    def test_create_author_requires_admin(self, client, customer_headers):
        response = client.post(
            "/api/authors", json={"name": "Nguyễn Nhật Ánh"}, headers=customer_headers
        )
        assert response.status_code == 403


class TestCombos:
    def test_storefront_combo(self, client, combo):
        body = client.get(f"/api/combos/{combo.id}").json()
        assert body["saved_amount"] == 70000

        availability = client.get(f"/api/combos/{combo.id}/availability").json()
        assert availability["is_available"] is True
        assert availability["available_quantity"] == 3

    def test_admin_combo_lifecycle(self, client, admin_headers, book, second_book):
        created = client.post(
            "/api/admin/combos",
            json={
                "name": "Bộ sách kỹ năng",
                "items": [
                    {"book_id": book.id, "quantity": 1},
                    {"book_id": second_book.id, "quantity": 2},
                ],
                "combo_price": 250000,
            },
            headers=admin_headers,
        )
        assert created.status_code == 201
        combo_id = created.json()["id"]
        assert created.json()["total_original_price"] == 350000

        client.delete(f"/api/admin/combos/{combo_id}", headers=admin_headers)
        assert client.get(f"/api/combos/{combo_id}").status_code == 404
        listed = client.get("/api/admin/combos", headers=admin_headers).json()
        assert [item["is_active"] for item in listed["items"]] == [False]

    def test_combo_with_unknown_book(self, client, admin_headers, book):
        response = client.post(
            "/api/admin/combos",
            json={
                "name": "Broken",
                "items": [{"book_id": book.id}, {"book_id": "missing"}],
                "combo_price": 1000,
            },
            headers=admin_headers,
        )
        assert response.status_code == 404
        assert response.json()["detail"] == "Book not found: missing"
