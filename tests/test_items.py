"""Tests for item CRUD, soft delete and listing filters."""


class TestCreateItem:

    def test_create_returns_joined_names(self, client, auth):
        response = client.post(
            "/api/items",
            json={"item": "Chicken Breast", "supplier": "Bidfood", "category": "Meats", "quantity": 10, "price": 2.50},
            headers=auth,
        )

        assert response.status_code == 201
        body = response.json()
        assert body["quantity"] == 10
        assert body["price"] == 2.5
        assert body["supplier"] == "Bidfood"
        assert body["category"] == "Meats"
        assert body["sku"] == ""
        assert body["deletedAt"] is None
        assert body["createdAt"]

    def test_missing_item_name_is_rejected(self, client, auth):
        response = client.post(
            "/api/items",
            json={"supplier": "Bidfood", "category": "Meats"},
            headers=auth,
        )

        assert response.status_code == 400
        assert response.json() == {"error": "item, supplier, category required"}

    def test_category_required_on_single_create(self, client, auth):
        response = client.post("/api/items", json={"item": "Cola", "supplier": "Booker"}, headers=auth)

        assert response.status_code == 400
        assert response.json()["error"] == "item, supplier, category required"

    def test_numeric_fields_default_to_zero(self, make_item):
        body = make_item(item="Napkins", category="Other", quantity=None, price=None)

        assert body["quantity"] == 0
        assert body["price"] == 0

    def test_timestamps_carry_utc_offset(self, client, auth, make_item):
        created = make_item()
        client.delete(f"/api/items/{created['id']}", headers=auth)

        listed = client.get("/api/items", params={"includeDeleted": "true"}).json()[0]

        for field in ("createdAt", "updatedAt", "deletedAt"):
            assert listed[field].endswith(("Z", "+00:00")), listed[field]

    def test_price_is_rounded_to_two_places(self, make_item):
        assert make_item(price=1.999)["price"] == 2.0
        assert make_item(price="0.125")["price"] == 0.13

    def test_blank_numbers_default_to_zero(self, make_item):
        body = make_item(quantity="", price="")

        assert body["quantity"] == 0
        assert body["price"] == 0

    def test_numeric_strings_are_coerced(self, make_item):
        body = make_item(quantity="4", price="1.25")

        assert body["quantity"] == 4
        assert body["price"] == 1.25

    def test_negative_quantity_is_rejected(self, client, auth):
        response = client.post(
            "/api/items",
            json={"item": "Peas", "supplier": "Booker", "category": "Frozen", "quantity": -1},
            headers=auth,
        )

        assert response.status_code == 400
        assert "quantity" in response.json()["error"]

    def test_unknown_supplier_is_created(self, client, make_item):
        make_item(supplier="New Wholesaler")

        names = [s["name"] for s in client.get("/api/suppliers").json()]
        assert "New Wholesaler" in names


class TestListItems:

    def test_newest_first(self, client, make_item):
        first = make_item(item="First")
        second = make_item(item="Second")

        ids = [i["id"] for i in client.get("/api/items").json()]
        assert ids == [second["id"], first["id"]]

    def test_filter_by_supplier_and_category(self, client, make_item):
        make_item(item="Steak", supplier="Bidfood", category="Meats")
        make_item(item="Lemonade", supplier="Booker", category="Drinks")
        make_item(item="Burger", supplier="Booker", category="Meats")

        by_supplier = client.get("/api/items", params={"supplier": "Booker"}).json()
        by_both = client.get("/api/items", params={"supplier": "Booker", "category": "Meats"}).json()

        assert {i["item"] for i in by_supplier} == {"Lemonade", "Burger"}
        assert [i["item"] for i in by_both] == ["Burger"]

    def test_text_query_is_case_insensitive_substring(self, client, make_item):
        make_item(item="Chicken Breast")
        make_item(item="Beef Mince")

        found = client.get("/api/items", params={"q": "chick"}).json()

        assert [i["item"] for i in found] == ["Chicken Breast"]

    def test_sku_is_exact_match(self, client, make_item):
        make_item(item="Tomato Ketchup", sku="SAU-001", category="Sauces")
        make_item(item="Mayonnaise", sku="SAU-0011", category="Sauces")

        found = client.get("/api/items", params={"sku": "SAU-001"}).json()

        assert [i["item"] for i in found] == ["Tomato Ketchup"]

    def test_get_single_item(self, client, make_item):
        created = make_item()

        response = client.get(f"/api/items/{created['id']}")

        assert response.status_code == 200
        assert response.json()["item"] == "Chicken Breast"

    def test_get_unknown_item_is_404(self, client):
        response = client.get("/api/items/9999")

        assert response.status_code == 404
        assert response.json() == {"error": "Item not found"}


class TestSoftDelete:

    def test_delete_hides_and_undelete_restores(self, client, auth, make_item):
        created = make_item()

        assert client.delete(f"/api/items/{created['id']}", headers=auth).json() == {"ok": True}
        assert client.get("/api/items").json() == []

        with_deleted = client.get("/api/items", params={"includeDeleted": "true"}).json()
        assert [i["id"] for i in with_deleted] == [created["id"]]
        assert with_deleted[0]["deletedAt"] is not None

        restored = client.post(f"/api/items/{created['id']}/undelete", headers=auth)
        assert restored.status_code == 200
        assert restored.json()["deletedAt"] is None
        assert [i["id"] for i in client.get("/api/items").json()] == [created["id"]]

    def test_include_deleted_false_string_still_excludes(self, client, auth, make_item):
        created = make_item()
        client.delete(f"/api/items/{created['id']}", headers=auth)

        assert client.get("/api/items", params={"includeDeleted": "false"}).json() == []

    def test_patch_undelete_flag(self, client, auth, make_item):
        created = make_item()
        client.delete(f"/api/items/{created['id']}", headers=auth)

        response = client.patch(f"/api/items/{created['id']}", json={"undelete": True}, headers=auth)

        assert response.json()["deletedAt"] is None

    def test_delete_unknown_item_is_404(self, client, auth):
        assert client.delete("/api/items/424242", headers=auth).status_code == 404
        assert client.post("/api/items/424242/undelete", headers=auth).status_code == 404


class TestUpdateItem:

    def test_quantity_only_patch_leaves_other_fields(self, client, auth, make_item):
        created = make_item(sku="MEAT-1")

        response = client.patch(f"/api/items/{created['id']}", json={"quantity": 3}, headers=auth)

        updated = response.json()
        assert response.status_code == 200
        assert updated["quantity"] == 3
        for field in ("sku", "item", "price", "supplierId", "categoryId"):
            assert updated[field] == created[field]

    def test_supplier_rebinds_to_resolved_row(self, client, auth, make_item):
        created = make_item()

        updated = client.patch(f"/api/items/{created['id']}", json={"supplier": "Adams"}, headers=auth).json()

        adams = next(s for s in client.get("/api/suppliers").json() if s["name"] == "Adams")
        assert updated["supplier"] == "Adams"
        assert updated["supplierId"] == adams["id"]
        assert updated["categoryId"] == created["categoryId"]

    def test_price_patch_is_rounded(self, client, auth, make_item):
        created = make_item()

        updated = client.patch(f"/api/items/{created['id']}", json={"price": 3.333}, headers=auth).json()

        assert updated["price"] == 3.33

    def test_blank_sku_clears_it(self, client, auth, make_item):
        created = make_item(sku="X-1")

        updated = client.patch(f"/api/items/{created['id']}", json={"sku": ""}, headers=auth).json()

        assert updated["sku"] == ""

    def test_empty_item_name_is_rejected(self, client, auth, make_item):
        created = make_item()

        response = client.patch(f"/api/items/{created['id']}", json={"item": ""}, headers=auth)

        assert response.status_code == 400

    def test_update_unknown_item_is_404(self, client, auth):
        response = client.patch("/api/items/777", json={"quantity": 1}, headers=auth)

        assert response.status_code == 404


class TestAdjustQuantity:

    def test_adjust_adds_delta(self, client, auth, make_item):
        created = make_item(quantity=5)

        response = client.post(f"/api/items/{created['id']}/adjust", json={"delta": 2}, headers=auth)

        assert response.json()["quantity"] == 7

    def test_adjust_clamps_at_zero(self, client, auth, make_item):
        created = make_item(quantity=1)

        response = client.post(f"/api/items/{created['id']}/adjust", json={"delta": -5}, headers=auth)

        assert response.json()["quantity"] == 0
