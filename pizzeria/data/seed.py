# pizzeria/data/seed.py
import logging

from sqlmodel import Session, select

from pizzeria.database import create_db_and_tables, engine
from pizzeria.models.pizza import Pizza

logger = logging.getLogger(__name__)


def _sizes(small, medium, large):
    return [
        {"size": "Small", "price": small, "diameter": "8 inch"},
        {"size": "Medium", "price": medium, "diameter": "12 inch"},
        {"size": "Large", "price": large, "diameter": "14 inch"},
    ]


DEMO_PIZZAS = [
    dict(
        name="Margherita Classic",
        description="Fresh mozzarella, tomato sauce, basil, and olive oil on our signature crust",
        image="https://images.unsplash.com/photo-1604382354936-07c5d9983bd3?w=500",
        category="Vegetarian",
        sizes=_sizes(990, 1290, 1590),
        ingredients=["Mozzarella", "Tomato Sauce", "Fresh Basil", "Olive Oil"],
        tags=["classic", "cheese"],
        is_vegetarian=True,
        is_featured=True,
        rating_average=4.6,
        rating_count=128,
        preparation_time=15,
    ),
    dict(
        name="Pepperoni Supreme",
        description="Premium pepperoni, mozzarella cheese, and our special tomato sauce",
        image="https://images.unsplash.com/photo-1628840042765-356cda07504e?w=500",
        category="Non-Vegetarian",
        sizes=_sizes(1290, 1590, 1890),
        ingredients=["Pepperoni", "Mozzarella", "Tomato Sauce"],
        tags=["bestseller"],
        is_vegetarian=False,
        is_featured=True,
        rating_average=4.7,
        rating_count=210,
        preparation_time=18,
    ),
    dict(
        name="BBQ Chicken Delight",
        description="Grilled chicken, BBQ sauce, red onions, mozzarella, and cilantro",
        image="https://images.unsplash.com/photo-1565299624946-b28f40a0ca4b?w=500",
        category="Non-Vegetarian",
        sizes=_sizes(1490, 1790, 2090),
        ingredients=["Grilled Chicken", "BBQ Sauce", "Red Onions", "Mozzarella", "Cilantro"],
        tags=["chicken", "smoky"],
        is_vegetarian=False,
        rating_average=4.5,
        rating_count=96,
        preparation_time=20,
    ),
    dict(
        name="Veggie Garden",
        description="Bell peppers, mushrooms, onions, tomatoes, olives, and mozzarella",
        image="https://images.unsplash.com/photo-1571997478779-2adcbbe9ab2f?w=500",
        category="Vegetarian",
        sizes=_sizes(1190, 1490, 1790),
        ingredients=["Bell Peppers", "Mushrooms", "Onions", "Tomatoes", "Olives", "Mozzarella"],
        tags=["veggie"],
        is_vegetarian=True,
        rating_average=4.3,
        rating_count=74,
        preparation_time=16,
    ),
    dict(
        name="Meat Lovers Special",
        description="Pepperoni, sausage, ham, bacon and mozzarella on a thick crust",
        image="https://images.unsplash.com/photo-1513104890138-7c749659a591?w=500",
        category="Non-Vegetarian",
        sizes=_sizes(1690, 1990, 2290),
        ingredients=["Pepperoni", "Sausage", "Ham", "Bacon", "Mozzarella"],
        tags=["meat", "hearty"],
        is_vegetarian=False,
        rating_average=4.4,
        rating_count=88,
        preparation_time=22,
    ),
    dict(
        name="Hawaiian Paradise",
        description="Ham, pineapple and mozzarella with a sweet tomato base",
        image="https://images.unsplash.com/photo-1565299507177-b0ac66763828?w=500",
        category="Specialty",
        sizes=_sizes(1390, 1690, 1990),
        ingredients=["Ham", "Pineapple", "Mozzarella", "Tomato Sauce"],
        tags=["sweet"],
        is_vegetarian=False,
        rating_average=4.0,
        rating_count=51,
        preparation_time=18,
    ),
    dict(
        name="Spicy Buffalo Chicken",
        description="Buffalo chicken, jalapenos, red onions and a ranch drizzle",
        image="https://images.unsplash.com/photo-1594007654729-407eedc4be65?w=500",
        category="Specialty",
        sizes=_sizes(1590, 1890, 2190),
        ingredients=["Buffalo Chicken", "Jalapenos", "Red Onions", "Ranch", "Mozzarella"],
        tags=["spicy", "chicken"],
        is_vegetarian=False,
        spice_level="Hot",
        rating_average=4.2,
        rating_count=63,
        preparation_time=20,
    ),
    dict(
        name="Vegan Harvest",
        description="Roasted vegetables and cashew cheese on a gluten free base",
        image="https://images.unsplash.com/photo-1511689660979-10d2b1aada49?w=500",
        category="Vegan",
        sizes=_sizes(1290, 1590, 1890),
        ingredients=["Zucchini", "Eggplant", "Bell Peppers", "Cashew Cheese", "Tomato Sauce"],
        tags=["plant-based", "gluten-free"],
        is_vegetarian=True,
        is_vegan=True,
        is_gluten_free=True,
        rating_average=4.1,
        rating_count=37,
        preparation_time=17,
    ),
]


def seed_pizzas(session: Session) -> int:
    """Insert the demo menu when the pizza table is empty. Returns rows added."""
    # not forcing: only seed if empty
    if session.exec(select(Pizza)).first():
        return 0

    for data in DEMO_PIZZAS:
        session.add(Pizza(**data))
    session.commit()

    logger.info(f"Seeded {len(DEMO_PIZZAS)} pizzas")
    return len(DEMO_PIZZAS)


def seed():
    create_db_and_tables()
    with Session(engine) as session:
        seed_pizzas(session)


if __name__ == "__main__":
    seed()
