from pizzeria.models.user import User
from pizzeria.models.pizza import Pizza
from pizzeria.models.cart import Cart, CartItem
from pizzeria.models.address import Address
from pizzeria.models.order import Order
from pizzeria.models.order_item import OrderItem
from pizzeria.models.order_event import OrderStatusEvent, OrderCounter
from pizzeria.models.contact import Contact

# add ALL models here
