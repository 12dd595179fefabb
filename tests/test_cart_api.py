from datetime import datetime, timedelta

from pizzeria.jobs.cart_expiry import expire_stale_carts
from pizzeria.models.cart import Cart
from pizzeria.services import cart_service


def _add(client, headers, pizza, size="Medium", quantity=1, **customizations):
    return client.post(
        "/cart/add",
        json={
            "pizza_id": pizza.id,
            "size": size,
            "quantity": quantity,
            "customizations": customizations,
        },
        headers=headers,
    )


class TestViewCart:

    def test_requires_token(self, client):
        resp = client.get("/cart")
        assert resp.status_code == 401
        assert resp.json()["success"] is False

    def test_empty_cart_is_created_lazily(self, client, auth_headers):
        resp = client.get("/cart", headers=auth_headers)

        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["items"] == []
        assert data["subtotal"] == 0
        assert data["tax"] == 0
        assert data["delivery_fee"] == 200
        assert data["total"] == 200


class TestAddItem:

    def test_add_worked_example(self, client, auth_headers, margherita):
        resp = _add(client, auth_headers, margherita, quantity=2, extra_cheese=True)

        assert resp.status_code == 200
        body = resp.json()
        assert body["message"] == "Item added to cart successfully"
        data = body["data"]
        assert len(data["items"]) == 1
        assert data["items"][0]["price"] == 1200
        assert data["items"][0]["total_price"] == 2700
        assert data["subtotal"] == 2700
        assert data["tax"] == 270
        assert data["delivery_fee"] == 200
        assert data["total"] == 3170
        assert data["formatted_total"] == "LKR 3,170.00"

    def test_same_line_merges_and_caps(self, client, auth_headers, margherita):
        _add(client, auth_headers, margherita, quantity=6)
        resp = _add(client, auth_headers, margherita, quantity=7)

        items = resp.json()["data"]["items"]
        assert len(items) == 1
        assert items[0]["quantity"] == 10

    def test_different_customizations_make_new_line(self, client, auth_headers, margherita):
        _add(client, auth_headers, margherita)
        resp = _add(client, auth_headers, margherita, extra_cheese=True)

        assert len(resp.json()["data"]["items"]) == 2

    def test_different_size_makes_new_line(self, client, auth_headers, margherita):
        _add(client, auth_headers, margherita, size="Small")
        resp = _add(client, auth_headers, margherita, size="Large")

        items = resp.json()["data"]["items"]
        assert [i["price"] for i in items] == [900, 1500]

    def test_invalid_size(self, client, auth_headers, margherita):
        resp = _add(client, auth_headers, margherita, size="Extra Large")

        assert resp.status_code == 400
        assert resp.json()["message"] == "Invalid size selected"

    def test_unknown_pizza(self, client, auth_headers):
        resp = client.post("/cart/add", json={"pizza_id": 999, "size": "Medium"}, headers=auth_headers)

        assert resp.status_code == 404
        assert resp.json()["message"] == "Pizza not found"

    def test_unavailable_pizza(self, client, auth_headers, sold_out):
        resp = _add(client, auth_headers, sold_out)

        assert resp.status_code == 400
        assert resp.json()["message"] == "Pizza is currently unavailable"

    def test_quantity_above_limit_is_clamped(self, client, auth_headers, margherita):
        resp = _add(client, auth_headers, margherita, quantity=11)

        assert resp.status_code == 200
        item = resp.json()["data"]["items"][0]
        assert item["quantity"] == 10
        assert item["total_price"] == 12000

    def test_quantity_below_one_is_clamped(self, client, auth_headers, margherita):
        resp = _add(client, auth_headers, margherita, quantity=0)

        assert resp.status_code == 200
        assert resp.json()["data"]["items"][0]["quantity"] == 1

    def test_accepts_camel_case_body(self, client, auth_headers, margherita):
        resp = client.post(
            "/cart/add",
            json={
                "pizzaId": margherita.id,
                "size": "Medium",
                "quantity": 2,
                "customizations": {
                    "extraCheese": True,
                    "extraToppings": [{"name": "Olives", "price": 100}],
                    "specialInstructions": "Well done",
                },
            },
            headers=auth_headers,
        )

        assert resp.status_code == 200
        item = resp.json()["data"]["items"][0]
        assert item["customizations"]["extra_cheese"] is True
        assert item["customizations"]["extra_toppings"] == [{"name": "Olives", "price": 100}]
        # (1200 + 150 + 100) x 2
        assert item["total_price"] == 2900


class TestUpdateAndRemove:

    def test_update_quantity(self, client, auth_headers, margherita):
        item_id = _add(client, auth_headers, margherita).json()["data"]["items"][0]["item_id"]

        resp = client.put(f"/cart/update/{item_id}", json={"quantity": 3}, headers=auth_headers)

        data = resp.json()["data"]
        assert data["items"][0]["quantity"] == 3
        assert data["subtotal"] == 3600
        assert data["delivery_fee"] == 0

    def test_update_out_of_range_leaves_item_unchanged(self, client, auth_headers, margherita):
        item_id = _add(client, auth_headers, margherita, quantity=2).json()["data"]["items"][0]["item_id"]

        for quantity in (0, 11):
            resp = client.put(f"/cart/update/{item_id}", json={"quantity": quantity}, headers=auth_headers)
            assert resp.status_code == 400

        cart = client.get("/cart", headers=auth_headers).json()["data"]
        assert cart["items"][0]["quantity"] == 2
        assert cart["subtotal"] == 2400

    def test_update_unknown_item(self, client, auth_headers):
        resp = client.put("/cart/update/999", json={"quantity": 2}, headers=auth_headers)

        assert resp.status_code == 404
        assert resp.json()["message"] == "Item not found in cart"

    def test_remove_is_idempotent(self, client, auth_headers, margherita, pepperoni):
        _add(client, auth_headers, margherita)
        items = _add(client, auth_headers, pepperoni).json()["data"]["items"]
        item_id = items[0]["item_id"]

        first = client.delete(f"/cart/remove/{item_id}", headers=auth_headers)
        second = client.delete(f"/cart/remove/{item_id}", headers=auth_headers)

        assert first.status_code == 200
        assert second.status_code == 200
        assert len(second.json()["data"]["items"]) == 1
        assert second.json()["data"]["subtotal"] == 1600

    def test_clear_cart(self, client, auth_headers, margherita):
        _add(client, auth_headers, margherita, quantity=3)

        resp = client.delete("/cart/clear", headers=auth_headers)
        data = resp.json()["data"]
        assert data["items"] == []
        assert data["subtotal"] == 0
        assert data["total"] == 200

        # clearing an empty cart is fine too
        assert client.delete("/cart/clear", headers=auth_headers).status_code == 200

    def test_carts_are_per_user(self, client, auth_headers, other_headers, margherita):
        _add(client, auth_headers, margherita)

        resp = client.get("/cart", headers=other_headers)
        assert resp.json()["data"]["items"] == []


class TestDiscountEndpoints:

    def test_apply_and_remove(self, client, auth_headers, margherita):
        _add(client, auth_headers, margherita, quantity=2, extra_cheese=True)

        resp = client.post("/cart/discount", json={"code": "welcome10"}, headers=auth_headers)
        data = resp.json()["data"]
        assert data["discount"] == {"amount": 270, "code": "WELCOME10", "percentage": 10}
        assert data["total"] == 2900

        resp = client.delete("/cart/discount", headers=auth_headers)
        data = resp.json()["data"]
        assert data["discount"]["code"] is None
        assert data["total"] == 3170

    def test_minimum_not_met_keeps_cart(self, client, auth_headers, margherita):
        _add(client, auth_headers, margherita)

        resp = client.post("/cart/discount", json={"code": "SAVE20"}, headers=auth_headers)

        assert resp.status_code == 400
        assert resp.json()["message"] == "Minimum order amount of LKR 2000 required for this discount"
        cart = client.get("/cart", headers=auth_headers).json()["data"]
        assert cart["discount"]["code"] is None
        assert cart["total"] == 1200 + 120 + 200

    def test_invalid_code(self, client, auth_headers, margherita):
        _add(client, auth_headers, margherita)

        resp = client.post("/cart/discount", json={"code": "FREEPIZZA"}, headers=auth_headers)

        assert resp.status_code == 400
        assert resp.json()["message"] == "Invalid discount code"

    def test_discount_dropped_when_cart_shrinks(self, client, auth_headers, margherita):
        item_id = _add(client, auth_headers, margherita, quantity=2).json()["data"]["items"][0]["item_id"]
        client.post("/cart/discount", json={"code": "SAVE20"}, headers=auth_headers)

        resp = client.put(f"/cart/update/{item_id}", json={"quantity": 1}, headers=auth_headers)

        body = resp.json()
        assert body["data"]["discount"]["amount"] == 0
        assert body["data"]["discount"]["code"] is None
        notice = "Discount SAVE20 was removed: minimum order amount of LKR 2000 is no longer met"
        assert body["data"]["discount_notice"] == notice
        assert body["message"] == f"Cart item updated successfully. {notice}"

    def test_notice_cleared_on_next_change(self, client, auth_headers, margherita):
        item_id = _add(client, auth_headers, margherita, quantity=2).json()["data"]["items"][0]["item_id"]
        client.post("/cart/discount", json={"code": "SAVE20"}, headers=auth_headers)
        client.put(f"/cart/update/{item_id}", json={"quantity": 1}, headers=auth_headers)

        resp = client.put(f"/cart/update/{item_id}", json={"quantity": 2}, headers=auth_headers)

        body = resp.json()
        assert body["data"]["discount_notice"] is None
        assert body["message"] == "Cart item updated successfully"


class TestExpiry:

    def test_expired_cart_is_replaced(self, session, user, margherita):
        cart = cart_service.add_item(session, user.id, margherita.id, "Medium")
        cart.expires_at = datetime.utcnow() - timedelta(minutes=1)
        session.add(cart)
        session.commit()

        fresh = cart_service.get_active_cart(session, user.id)

        assert fresh.id != cart.id
        assert fresh.items == []
        session.refresh(cart)
        assert cart.is_active is False

    def test_expire_stale_carts_job(self, session, user, other_user, margherita):
        stale = cart_service.add_item(session, user.id, margherita.id, "Medium")
        live = cart_service.add_item(session, other_user.id, margherita.id, "Medium")
        stale.expires_at = datetime.utcnow() - timedelta(hours=1)
        session.add(stale)
        session.commit()

        assert expire_stale_carts(session) == 1

        session.refresh(stale)
        session.refresh(live)
        assert stale.is_active is False
        assert stale.items == []
        assert live.is_active is True
        assert session.get(Cart, live.id).item_count == 1
