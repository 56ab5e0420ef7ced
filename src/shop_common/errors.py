"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth/User (1001: bearer token missing or rejected, raised by the framework)
  2xxx: Wallet/Ledger
  3xxx: Store/Catalog
  4xxx: Order
  5xxx: Payment gateway
  9xxx: System / generic
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- Generic categories (subclassed below) ---

class ValidationError(AppError):
    def __init__(self, detail: str, code: int = 9004) -> None:
        super().__init__(code, detail, 400)


class AccessDeniedError(AppError):
    def __init__(self, detail: str = "Access denied", code: int = 9005) -> None:
        super().__init__(code, detail, 403)


class NotFoundError(AppError):
    def __init__(self, detail: str, code: int = 9006) -> None:
        super().__init__(code, detail, 404)


# --- 1xxx: Auth/User ---

class EmailExistsError(AppError):
    def __init__(self) -> None:
        super().__init__(1002, "Email already registered", 409)


class InvalidCredentialsError(AppError):
    def __init__(self) -> None:
        super().__init__(1003, "Invalid email or password", 401)


class AccountDisabledError(AppError):
    def __init__(self) -> None:
        super().__init__(1004, "Account is disabled", 403)


class InvalidRefreshTokenError(AppError):
    def __init__(self) -> None:
        super().__init__(1005, "Refresh token is invalid or expired", 401)


class UserNotFoundError(NotFoundError):
    def __init__(self, user_id: str) -> None:
        super().__init__(f"User not found: {user_id}", 1006)


# --- 2xxx: Wallet/Ledger ---

class InsufficientFundsError(AppError):
    def __init__(self, required: int, available: int) -> None:
        super().__init__(
            2001,
            f"Insufficient balance: required {required}, available {available}",
            400,
        )


class WalletNotFoundError(NotFoundError):
    def __init__(self, user_id: str) -> None:
        super().__init__(f"Wallet not found for user {user_id}", 2002)


class InvestmentNotFoundError(NotFoundError):
    def __init__(self, investment_id: str) -> None:
        super().__init__(f"Investment not found or already sold: {investment_id}", 2003)


# --- 3xxx: Store/Catalog ---

class StoreNotFoundError(NotFoundError):
    def __init__(self, store_id: str) -> None:
        super().__init__(f"Store not found: {store_id}", 3001)


class StoreAccessDeniedError(AccessDeniedError):
    def __init__(self, store_id: str) -> None:
        super().__init__(f"Store not found or access denied: {store_id}", 3002)


class ProductNotFoundError(NotFoundError):
    def __init__(self, product_id: str) -> None:
        super().__init__(f"Product not found: {product_id}", 3003)


class InsufficientStockError(AppError):
    def __init__(self, product_name: str, requested: int, available: int) -> None:
        super().__init__(
            3004,
            f"Insufficient stock for {product_name}: requested {requested}, available {available}",
            409,
        )


class StoreHasOrdersError(AppError):
    def __init__(self, store_id: str) -> None:
        super().__init__(3005, f"Store {store_id} has orders and cannot be deleted", 409)


# --- 4xxx: Order ---

class EmptyOrderError(ValidationError):
    def __init__(self) -> None:
        super().__init__("Order must contain at least one item", 4001)


class InvalidAmountError(ValidationError):
    def __init__(self, amount: int) -> None:
        super().__init__(f"Invalid order total: {amount}", 4002)


class OrderNotFoundError(NotFoundError):
    def __init__(self, order_id: str) -> None:
        super().__init__(f"Order not found: {order_id}", 4004)


# --- 5xxx: Payment gateway ---

class GatewayError(AppError):
    def __init__(self, detail: str = "Payment gateway request failed") -> None:
        super().__init__(5001, detail, 502)


class InvalidSignatureError(AppError):
    def __init__(self) -> None:
        super().__init__(5002, "Invalid notification signature", 401)


# --- 9xxx: System ---

class RateLimitError(AppError):
    def __init__(self) -> None:
        super().__init__(9001, "Rate limit exceeded", 429)


class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)


class StorageError(AppError):
    def __init__(self) -> None:
        super().__init__(9003, "Storage operation failed", 500)
