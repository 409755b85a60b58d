"""
Tests para endpoints de categorías
"""
from decimal import Decimal
from uuid import UUID

from fastapi.testclient import TestClient

from tests.conftest import TestUtils

BASE = "/api/v1/categories"


def create(client: TestClient, name: str, parent_id=None, **extra):
    payload = {"name": name, **extra}
    if parent_id is not None:
        payload["parent_id"] = str(parent_id)
    return client.post(BASE, json=payload)


def add_product(db_session, category_id, sku: str):
    from app.models.product import Product

    product = Product(
        sku=sku, name=f"Part {sku}", slug=f"part-{sku.lower()}",
        price=Decimal("10.00"), category_id=category_id,
    )
    db_session.add(product)
    db_session.commit()
    return product


class TestCreateCategory:
    """Creación y reglas del árbol"""

    def test_create_root_category(self, client: TestClient):
        response = create(client, "Brakes", description="Brake parts")

        TestUtils.assert_response_success(response, 201)
        category = response.json()["category"]
        assert category["name"] == "Brakes"
        assert category["slug"] == "brakes"
        assert category["level"] == 1
        assert category["parent_id"] is None
        assert category["sort_order"] == 1

    def test_child_level_derived_from_parent(self, client: TestClient):
        root = create(client, "Body").json()["category"]
        child = create(client, "Doors", parent_id=root["id"], level=1).json()["category"]
        grandchild = create(client, "Handles", parent_id=child["id"]).json()["category"]

        assert child["level"] == 2
        assert grandchild["level"] == 3

    def test_sort_order_is_max_sibling_plus_one(self, client: TestClient):
        first = create(client, "Brakes").json()["category"]
        second = create(client, "Suspension").json()["category"]
        child = create(client, "Pads", parent_id=first["id"]).json()["category"]

        assert second["sort_order"] == first["sort_order"] + 1
        assert child["sort_order"] == 1

    def test_fourth_level_rejected(self, client: TestClient):
        parent_id = None
        for name in ("L1", "L2", "L3"):
            parent_id = create(client, name, parent_id=parent_id).json()["category"]["id"]

        response = create(client, "L4", parent_id=parent_id)

        error = TestUtils.assert_response_error(response, 400)
        assert error["error_code"] == "VALIDATION_ERROR"

    def test_missing_parent_rejected(self, client: TestClient):
        response = create(client, "Orphan", parent_id=TestUtils.create_test_uuid())

        TestUtils.assert_response_error(response, 400)

    def test_blank_name_rejected(self, client: TestClient):
        TestUtils.assert_response_error(create(client, "   "), 400)

    def test_duplicate_name_same_parent_conflicts(self, client: TestClient):
        root = create(client, "Body").json()["category"]
        assert create(client, "Doors", parent_id=root["id"]).status_code == 201

        response = create(client, "Doors", parent_id=root["id"])

        error = TestUtils.assert_response_error(response, 409)
        assert error["error_code"] == "CONFLICT"

    def test_duplicate_root_name_conflicts(self, client: TestClient):
        assert create(client, "Lighting").status_code == 201
        TestUtils.assert_response_error(create(client, "Lighting"), 409)

    def test_same_name_different_parents_allowed(self, client: TestClient):
        front = create(client, "Front").json()["category"]
        rear = create(client, "Rear").json()["category"]

        assert create(client, "Bumper", parent_id=front["id"]).status_code == 201
        assert create(client, "Bumper", parent_id=rear["id"]).status_code == 201


class TestListCategories:
    """Listado, árbol y conteos agregados"""

    def test_counts_aggregate_over_descendants(self, client: TestClient, db_session):
        root = create(client, "Brakes").json()["category"]
        child = create(client, "Pads", parent_id=root["id"]).json()["category"]
        leaf = create(client, "Ceramic", parent_id=child["id"]).json()["category"]

        add_product(db_session, UUID(root["id"]), "R-1")
        add_product(db_session, UUID(child["id"]), "C-1")
        add_product(db_session, UUID(leaf["id"]), "L-1")
        add_product(db_session, UUID(leaf["id"]), "L-2")

        response = client.get(BASE)

        TestUtils.assert_response_success(response)
        counts = {c["name"]: (c["direct_product_count"], c["product_count"]) for c in response.json()}
        assert counts == {"Brakes": (1, 4), "Pads": (1, 3), "Ceramic": (2, 2)}

    def test_empty_catalog(self, client: TestClient):
        response = client.get(BASE)

        assert response.status_code == 200
        assert response.json() == []

    def test_tree_nests_children(self, client: TestClient, sample_subcategory):
        response = client.get(f"{BASE}/tree")

        TestUtils.assert_response_success(response)
        tree = response.json()
        assert len(tree) == 1
        assert tree[0]["name"] == "Brakes"
        assert [c["name"] for c in tree[0]["children"]] == ["Brake Pads"]
        assert tree[0]["children"][0]["children"] == []

    def test_get_category_with_counts(self, client: TestClient, sample_product):
        response = client.get(f"{BASE}/{sample_product.category_id}")

        TestUtils.assert_response_success(response)
        data = response.json()
        assert data["name"] == "Brakes"
        assert data["product_count"] == 1

    def test_get_missing_category(self, client: TestClient):
        response = client.get(f"{BASE}/{TestUtils.create_test_uuid()}")

        error = TestUtils.assert_response_error(response, 404)
        assert error["path"].startswith(BASE)


class TestUpdateCategory:

    def test_rename_regenerates_slug(self, client: TestClient, sample_category):
        response = client.put(f"{BASE}/{sample_category.id}", json={"name": "Brake System"})

        TestUtils.assert_response_success(response)
        category = response.json()["category"]
        assert category["slug"] == "brake-system"
        assert category["description"] == "Brake pads, rotors and calipers"

    def test_rename_to_sibling_name_conflicts(self, client: TestClient, sample_category):
        other = create(client, "Suspension").json()["category"]

        response = client.put(f"{BASE}/{other['id']}", json={"name": "Brakes"})

        TestUtils.assert_response_error(response, 409)

    def test_rename_to_name_under_other_parent_conflicts(self, client: TestClient, sample_subcategory):
        other = create(client, "Suspension").json()["category"]

        response = client.put(f"{BASE}/{other['id']}", json={"name": "Brake Pads"})

        TestUtils.assert_response_error(response, 409)

    def test_rename_keeping_own_name(self, client: TestClient, sample_category):
        response = client.put(f"{BASE}/{sample_category.id}", json={"name": "Brakes"})

        TestUtils.assert_response_success(response)

    def test_update_flags(self, client: TestClient, sample_category):
        response = client.put(
            f"{BASE}/{sample_category.id}", json={"is_active": False, "sort_order": 7}
        )

        category = response.json()["category"]
        assert category["is_active"] is False
        assert category["sort_order"] == 7


class TestDeleteCategory:

    def test_delete_blocked_by_products(self, client: TestClient, sample_product):
        response = client.delete(f"{BASE}/{sample_product.category_id}")

        error = TestUtils.assert_response_error(response, 409)
        assert error["message"].startswith("Cannot delete category with 1 products")

    def test_delete_empty_category(self, client: TestClient, sample_category):
        response = client.delete(f"{BASE}/{sample_category.id}")

        TestUtils.assert_response_success(response)
        assert client.get(f"{BASE}/{sample_category.id}").status_code == 404

    def test_delete_promotes_children(self, client: TestClient):
        root = create(client, "Body").json()["category"]
        middle = create(client, "Exterior", parent_id=root["id"]).json()["category"]
        leaf = create(client, "Mirrors", parent_id=middle["id"]).json()["category"]

        assert client.delete(f"{BASE}/{middle['id']}").status_code == 200

        promoted = client.get(f"{BASE}/{leaf['id']}").json()
        assert promoted["parent_id"] == root["id"]
        assert promoted["level"] == 2

    def test_delete_missing_category(self, client: TestClient):
        TestUtils.assert_response_error(
            client.delete(f"{BASE}/{TestUtils.create_test_uuid()}"), 404
        )


class TestHierarchySetup:

    HIERARCHY = {
        "hierarchy": {
            "name": "Model 3",
            "children": [
                {"name": "Body", "children": [{"name": "Doors"}, {"name": "Mirrors"}]},
                {"name": "Brakes"},
            ],
        }
    }

    def test_creates_nested_tree(self, client: TestClient):
        response = client.post(f"{BASE}/hierarchy", json=self.HIERARCHY)

        TestUtils.assert_response_success(response)
        data = response.json()
        assert data["created"] == 5
        assert data["skipped"] == 0
        assert data["errors"] == []

        levels = {c["name"]: c["level"] for c in client.get(BASE).json()}
        assert levels == {"Model 3": 1, "Body": 2, "Brakes": 2, "Doors": 3, "Mirrors": 3}

    def test_rerun_skips_existing(self, client: TestClient):
        client.post(f"{BASE}/hierarchy", json=self.HIERARCHY)

        data = client.post(f"{BASE}/hierarchy", json=self.HIERARCHY).json()

        assert data["created"] == 0
        assert data["skipped"] == 5

    def test_too_deep_node_reported(self, client: TestClient):
        payload = {"hierarchy": {"name": "A", "children": [
            {"name": "B", "children": [{"name": "C", "children": [{"name": "D"}]}]}
        ]}}

        data = client.post(f"{BASE}/hierarchy", json=payload).json()

        assert data["created"] == 3
        assert len(data["errors"]) == 1
        assert data["errors"][0].startswith('Failed to create "D"')


class TestCleanCategories:

    def test_clean_blocked_when_products_exist(self, client: TestClient, sample_product):
        TestUtils.assert_response_error(client.delete(BASE), 409)

    def test_clean_removes_all(self, client: TestClient, sample_subcategory):
        response = client.delete(BASE)

        TestUtils.assert_response_success(response)
        assert response.json()["deleted"] == 2
        assert client.get(BASE).json() == []
