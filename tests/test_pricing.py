from datetime import datetime, timedelta

from pizzeria.config import Settings
from pizzeria.models.cart import Cart, CartItem
from pizzeria.services.pricing import (
    compute_totals,
    customization_surcharge,
    item_total,
    recalculate_cart,
)
from pizzeria.utils.money import format_amount, round_half_up

config = Settings()


def _line(price, quantity, **customizations):
    return CartItem(
        pizza_id=1,
        name="Margherita",
        image="m.jpg",
        size="Medium",
        price=price,
        quantity=quantity,
        customizations=customizations,
    )


def _cart(*items):
    return Cart(user_id=1, expires_at=datetime.utcnow() + timedelta(hours=1), items=list(items))


class TestSurcharges:

    def test_no_customizations(self):
        assert customization_surcharge({}, 150) == 0
        assert customization_surcharge(None, 150) == 0

    def test_extra_cheese_and_toppings(self):
        customizations = {
            "extra_cheese": True,
            "extra_toppings": [{"name": "Olives", "price": 100}, {"name": "Jalapenos", "price": 80}],
        }
        assert customization_surcharge(customizations, 150) == 330

    def test_surcharge_is_charged_per_pizza(self):
        assert item_total(1200, 2, {"extra_cheese": True}, 150) == 2700


class TestComputeTotals:

    def test_worked_example(self):
        totals = compute_totals([_line(1200, 2, extra_cheese=True)], config=config)

        assert totals.subtotal == 2700
        assert totals.tax == 270
        assert totals.delivery_fee == 200
        assert totals.total == 3170
        assert totals.item_count == 2

    def test_empty_cart(self):
        totals = compute_totals([], config=config)

        assert totals.subtotal == 0
        assert totals.tax == 0
        assert totals.delivery_fee == 200
        assert totals.total == 200

    def test_free_delivery_at_threshold(self):
        totals = compute_totals([_line(1500, 2)], config=config)

        assert totals.subtotal == 3000
        assert totals.delivery_fee == 0
        assert totals.total == 3300

    def test_delivery_charged_just_below_threshold(self):
        totals = compute_totals([_line(2999, 1)], config=config)
        assert totals.delivery_fee == 200

    def test_tax_rounds_half_up(self):
        # 1005 * 0.10 = 100.5
        totals = compute_totals([_line(1005, 1)], config=config)
        assert totals.tax == 101

    def test_total_never_negative(self):
        totals = compute_totals([_line(100, 1)], discount_amount=5000, config=config)
        assert totals.total == 0

    def test_custom_rates(self):
        custom = Settings(tax_rate=0.2, delivery_fee=350, free_delivery_threshold=10000)
        totals = compute_totals([_line(1000, 1)], config=custom)

        assert totals.tax == 200
        assert totals.delivery_fee == 350
        assert totals.total == 1550


class TestRecalculateCart:

    def test_overwrites_stale_values(self):
        line = _line(1200, 2, extra_cheese=True)
        line.total_price = 1
        cart = _cart(line)
        cart.subtotal = 99999
        cart.total = 99999

        recalculate_cart(cart, config)

        assert line.total_price == 2700
        assert cart.subtotal == 2700
        assert cart.total == 3170
        assert cart.item_count == 2

    def test_subtotal_is_sum_of_lines(self):
        cart = _cart(_line(1200, 1), _line(900, 3, extra_toppings=[{"name": "Olives", "price": 100}]))

        recalculate_cart(cart, config)

        assert cart.subtotal == 1200 + 3000
        assert cart.delivery_fee == 0


class TestMoney:

    def test_round_half_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(2.4) == 2
        assert round_half_up(0) == 0

    def test_format_amount(self):
        assert format_amount(3170, "LKR") == "LKR 3,170.00"
