def test_menu_lists_available_items(client):
    r = client.get("/api/menu")
    assert r.status_code == 200
    names = {m["name"] for m in r.get_json()}
    assert names == {"Chicken Biryani", "Beef Burger"}


def test_menu_filters(client):
    assert [m["name"] for m in client.get("/api/menu?category=Desi").get_json()] == ["Chicken Biryani"]
    assert [m["name"] for m in client.get("/api/menu?search=burger").get_json()] == ["Beef Burger"]
    assert [m["id"] for m in client.get("/api/menu?id=2").get_json()] == [2]
    assert len(client.get("/api/menu?available=all").get_json()) == 3
    assert client.get("/api/menu?id=abc").status_code == 400


def test_menu_item_and_categories(client):
    assert client.get("/api/menu/1").get_json()["price"] == 12.99
    assert client.get("/api/menu/99").status_code == 404
    assert "Soup" in client.get("/api/menu/categories").get_json()


def test_manager_menu_crud(client, auth_headers):
    r = client.post("/api/manager/menu", json={"name": "Test Pizza", "price": 12.99, "category": "Pizza"}, headers=auth_headers)
    assert r.status_code == 201
    item_id = r.get_json()["item"]["id"]

    r = client.put(f"/api/manager/menu/{item_id}", json={"price": 14.5, "is_available": False}, headers=auth_headers)
    assert r.status_code == 200
    assert r.get_json()["item"]["price"] == 14.5
    assert item_id not in [m["id"] for m in client.get("/api/menu").get_json()]

    listed = client.get("/api/manager/menu", headers=auth_headers).get_json()["items"]
    assert item_id in [m["id"] for m in listed]

    assert client.delete(f"/api/manager/menu/{item_id}", headers=auth_headers).status_code == 200
    assert client.get(f"/api/menu/{item_id}").status_code == 404


def test_manager_menu_validation(client, auth_headers):
    assert client.post("/api/manager/menu", json={"name": "Free", "price": 0}, headers=auth_headers).status_code == 400
    assert client.post("/api/manager/menu", json={"price": 3}, headers=auth_headers).status_code == 400
    assert client.put("/api/manager/menu/99", json={"price": 3}, headers=auth_headers).status_code == 404


def test_deleting_ordered_menu_item_keeps_order_lines(client, auth_headers, make_order):
    order = make_order(items=[{"menuItemId": 2, "quantity": 1}])
    assert client.delete("/api/manager/menu/2", headers=auth_headers).status_code == 200
    items = client.get(f"/api/orders/{order['id']}").get_json()["data"]["items"]
    assert items[0]["name"] == "Beef Burger"
    assert items[0]["menu_item_id"] is None


def test_tables_list_and_availability(client, auth_headers):
    r = client.get("/api/manager/tables", headers=auth_headers)
    assert r.status_code == 200
    assert r.get_json()["count"] == 22

    r = client.put("/api/manager/tables/4/availability", json={"is_available": False}, headers=auth_headers)
    assert r.status_code == 200
    assert r.get_json()["table"]["is_available"] is False
    assert client.put("/api/manager/tables/40/availability", json={"is_available": True}, headers=auth_headers).status_code == 404


def test_table_create_rules(client, auth_headers):
    r = client.post("/api/manager/tables", json={"table_number": 3}, headers=auth_headers)
    assert r.status_code == 422
    assert r.get_json()["error"] == "duplicate"
    assert client.post("/api/manager/tables", json={"table_number": 23}, headers=auth_headers).status_code == 400
    assert client.post("/api/manager/tables", json={"table_number": 0}, headers=auth_headers).status_code == 400


def test_duplicate_table_insert_keeps_session_usable(app_factory):
    client = app_factory(TABLE_NUMBER_MAX=30).test_client()
    token = client.post("/api/auth/manager/login", json={"username": "admin", "password": "password"}).get_json()["token"]
    headers = {"Authorization": f"Bearer {token}"}
    r = client.post("/api/manager/tables", json={"table_number": 7}, headers=headers)
    assert r.status_code == 422
    assert r.get_json()["error"] == "duplicate"
    r = client.post("/api/manager/tables", json={"table_number": 25, "capacity": 6}, headers=headers)
    assert r.status_code == 201
    assert r.get_json()["table"]["capacity"] == 6


def test_manager_menu_rejects_non_string_text(client, auth_headers):
    r = client.post("/api/manager/menu", json={"name": "Tea", "price": 2, "description": ["hot"]}, headers=auth_headers)
    assert r.status_code == 400
    assert client.post("/api/manager/menu", json=["Tea"], headers=auth_headers).status_code == 400
