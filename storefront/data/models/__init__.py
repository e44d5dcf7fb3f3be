#import wszystkich modeli zeby SQLAlchemy je zarejestrowal w base metadata

from storefront.data.models.user import UserModel
from storefront.data.models.product import ProductModel, VariantModel
from storefront.data.models.cart import CartModel
from storefront.data.models.cart_item import CartItemModel
from storefront.data.models.address import AddressModel
from storefront.data.models.order import OrderModel, OrderItemModel
from storefront.data.models.review import ReviewModel, ReviewVoteModel, ReviewReportModel
from storefront.data.models.payment import PaymentModel
from storefront.data.models.otp import OtpModel
from storefront.data.models.wishlist import WishlistItemModel
from storefront.data.models.shipping_zone import ShippingZoneModel
from storefront.data.models.currency import CurrencyModel

__all__ = [
    "UserModel",
    "ProductModel",
    "VariantModel",
    "CartModel",
    "CartItemModel",
    "AddressModel",
    "OrderModel",
    "OrderItemModel",
    "ReviewModel",
    "ReviewVoteModel",
    "ReviewReportModel",
    "PaymentModel",
    "OtpModel",
    "WishlistItemModel",
    "ShippingZoneModel",
    "CurrencyModel",
]
