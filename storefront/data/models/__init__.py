#import wszystkich modeli zeby SQLAlchemy je zarejestrowal w base metadata
from storefront.data.models.profile import ProfileModel
from storefront.data.models.catalog import (
    PublisherModel,
    PlatformModel,
    CategoryModel,
    GameModel,
    game_platforms,
    game_categories,
)
from storefront.data.models.inventory import InventoryModel
from storefront.data.models.cart import CartModel
from storefront.data.models.cart_item import CartItemModel
from storefront.data.models.order import OrderModel, OrderStatus
from storefront.data.models.order_item import OrderItemModel

__all__ = [
    "ProfileModel",
    "PublisherModel",
    "PlatformModel",
    "CategoryModel",
    "GameModel",
    "game_platforms",
    "game_categories",
    "InventoryModel",
    "CartModel",
    "CartItemModel",
    "OrderModel",
    "OrderStatus",
    "OrderItemModel",
]
