from .auth import User, ROLE_BUYER, ROLE_SELLER, VALID_ROLES
from .catalog import Product
from .orders import Order, OrderItem

__all__ = [
    'User', 'ROLE_BUYER', 'ROLE_SELLER', 'VALID_ROLES',
    'Product',
    'Order', 'OrderItem',
]
