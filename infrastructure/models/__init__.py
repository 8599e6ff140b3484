"""Infrastructure models package exports."""
from .base import Base, metadata
from .user import UserModel, UserPurchaseModel
from .order import OrderModel
from .product import ProductModel
from .download_token import DownloadTokenModel
from .app_config import AppConfigModel

__all__ = [
    "Base",
    "metadata",
    "UserModel",
    "UserPurchaseModel",
    "OrderModel",
    "ProductModel",
    "DownloadTokenModel",
    "AppConfigModel",
]
