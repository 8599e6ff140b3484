"""Domain-level business exceptions shared by the domain and infrastructure.

The core layer only maps these to HTTP responses; the domain never imports
from core.
"""
from __future__ import annotations

from typing import Optional
from shared.codes import BusinessCode


class BusinessException(Exception):
    """Base class for every business error"""

    def __init__(
        self,
        code: int,
        message: str,
        error_type: str = "BusinessError",
        details: Optional[dict] = None,
        field: Optional[str] = None,
    ) -> None:
        self.code = code
        self.message = message
        self.error_type = error_type
        self.details = details
        self.field = field
        super().__init__(self.message)


class DomainValidationException(BusinessException):
    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        details: dict | None = None,
        code: int = BusinessCode.PARAM_VALIDATION_ERROR,
    ):
        super().__init__(
            code=code,
            message=message,
            error_type="DomainValidationError",
            details=details,
            field=field,
        )


class ForbiddenException(BusinessException):
    def __init__(self, message: str = "Access denied"):
        super().__init__(
            code=BusinessCode.FORBIDDEN,
            message=message,
            error_type="Forbidden",
        )


class PurchaseRequiredException(BusinessException):
    def __init__(self, product_id: str):
        super().__init__(
            code=BusinessCode.PURCHASE_REQUIRED,
            message="Purchase required to download this product",
            error_type="PurchaseRequired",
            details={"product_id": product_id},
        )


class UserNotFoundException(BusinessException):
    def __init__(self, user_id: Optional[str] = None, *, message: str = "User not found"):
        details = {"user_id": user_id} if user_id else None
        super().__init__(
            code=BusinessCode.USER_NOT_FOUND,
            message=message,
            error_type="UserNotFound",
            details=details,
        )


class ProductNotFoundException(BusinessException):
    def __init__(self, product_id: str):
        super().__init__(
            code=BusinessCode.PRODUCT_NOT_FOUND,
            message="Product not found",
            error_type="ProductNotFound",
            details={"product_id": product_id},
        )


class ProductNotAvailableException(BusinessException):
    def __init__(self, product_id: str, status: str):
        super().__init__(
            code=BusinessCode.PRODUCT_NOT_AVAILABLE,
            message="This product is not available for purchase",
            error_type="ProductNotAvailable",
            details={"product_id": product_id, "status": status},
        )


class OrderNotFoundException(BusinessException):
    def __init__(self, order_id: str):
        super().__init__(
            code=BusinessCode.ORDER_NOT_FOUND,
            message="Order not found",
            error_type="OrderNotFound",
            details={"order_id": order_id},
        )


class AlreadyPurchasedException(BusinessException):
    def __init__(self, buyer_id: str, product_id: str):
        super().__init__(
            code=BusinessCode.ALREADY_PURCHASED,
            message="You have already purchased this product",
            error_type="AlreadyPurchased",
            details={"buyer_id": buyer_id, "product_id": product_id},
        )


class DownloadTokenNotFoundException(BusinessException):
    def __init__(self):
        # No token echo: redemption failures stay terse
        super().__init__(
            code=BusinessCode.DOWNLOAD_TOKEN_NOT_FOUND,
            message="Download token not found",
            error_type="NotFound",
        )


class DownloadLinkGoneException(BusinessException):
    def __init__(self, message: str = "This download link is no longer valid"):
        super().__init__(
            code=BusinessCode.DOWNLOAD_LINK_GONE,
            message=message,
            error_type="Gone",
        )


class GatewayException(BusinessException):
    """Upstream payment provider failure on the synchronous path"""

    def __init__(self, message: str, *, provider: Optional[str] = None, details: Optional[dict] = None):
        full_details = {"provider": provider} if provider else {}
        if details:
            full_details.update(details)
        super().__init__(
            code=BusinessCode.GATEWAY_ERROR,
            message=f"Payment gateway error: {message}",
            error_type="GatewayError",
            details=full_details or None,
        )


class ConfigurationException(BusinessException):
    def __init__(self, message: str):
        super().__init__(
            code=BusinessCode.CONFIGURATION_ERROR,
            message=message,
            error_type="ConfigurationError",
        )


class DecryptionException(BusinessException):
    def __init__(self, message: str = "Unable to decrypt payload"):
        super().__init__(
            code=BusinessCode.DECRYPTION_ERROR,
            message=message,
            error_type="DecryptionError",
        )
