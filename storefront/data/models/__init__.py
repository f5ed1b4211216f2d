#import all models so SQLAlchemy registers them in Base.metadata

from storefront.data.models.user import UserModel
from storefront.data.models.category import CategoryModel
from storefront.data.models.product import ProductModel
from storefront.data.models.product_image import ProductImageModel
from storefront.data.models.cart_item import CartItemModel
from storefront.data.models.order import OrderModel
from storefront.data.models.order_item import OrderItemModel
from storefront.data.models.address import AddressModel
from storefront.data.models.wishlist import WishlistModel
from storefront.data.models.user_device import UserDeviceModel
from storefront.data.models.newsletter_subscriber import NewsletterSubscriberModel

__all__ = [
    "UserModel",
    "CategoryModel",
    "ProductModel",
    "ProductImageModel",
    "CartItemModel",
    "OrderModel",
    "OrderItemModel",
    "AddressModel",
    "WishlistModel",
    "UserDeviceModel",
    "NewsletterSubscriberModel",
]
