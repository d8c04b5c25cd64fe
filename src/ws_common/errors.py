"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth/Session
  2xxx: User/Account
  3xxx: Product
  4xxx: Transaction
  8xxx: Upstream (Wingy Coin ledger)
  9xxx: System
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


# --- Families (catch these, raise the concrete subclasses) ---

class NotFoundError(AppError):
    def __init__(self, code: int, message: str) -> None:
        super().__init__(code, message, 404)


class ForbiddenError(AppError):
    def __init__(self, message: str = "Forbidden", code: int = 1004) -> None:
        super().__init__(code, message, 403)


class ConflictError(AppError):
    def __init__(self, code: int, message: str) -> None:
        super().__init__(code, message, 409)


class BusinessRuleError(AppError):
    """A purchase/settlement rule was violated; always a 400."""

    def __init__(self, code: int, message: str) -> None:
        super().__init__(code, message, 400)


# --- 1xxx: Auth/Session ---

class UnauthenticatedError(AppError):
    def __init__(self) -> None:
        super().__init__(1001, "Access token required", 401)


class InvalidTokenError(AppError):
    def __init__(self) -> None:
        super().__init__(1002, "Invalid token", 403)


class AuthError(AppError):
    def __init__(self, message: str = "Incorrect email or password") -> None:
        super().__init__(1003, message, 401)


class AdminRequiredError(ForbiddenError):
    def __init__(self) -> None:
        super().__init__("Admin access required", 1005)


class NotTransactionPartyError(ForbiddenError):
    def __init__(self) -> None:
        super().__init__("Not authorized for this transaction", 1006)


class UsernameExistsError(ConflictError):
    def __init__(self) -> None:
        super().__init__(1007, "Username already exists")


class EmailExistsError(ConflictError):
    def __init__(self) -> None:
        super().__init__(1008, "Email already exists")


# --- 2xxx: User/Account ---

class UserNotFoundError(NotFoundError):
    def __init__(self, user_id: int) -> None:
        super().__init__(2001, f"User not found: {user_id}")


# --- 3xxx: Product ---

class ProductNotFoundError(NotFoundError):
    def __init__(self, product_id: int) -> None:
        super().__init__(3001, f"Product not found: {product_id}")


class ProductNotAvailableError(BusinessRuleError):
    def __init__(self, product_id: int, status: str) -> None:
        super().__init__(3002, f"Product {product_id} is not available (status={status})")


# --- 4xxx: Transaction ---

class TransactionNotFoundError(NotFoundError):
    def __init__(self, transaction_id: int) -> None:
        super().__init__(4001, f"Transaction not found: {transaction_id}")


class OutOfStockError(BusinessRuleError):
    def __init__(self) -> None:
        super().__init__(4002, "Product out of stock")


class SelfPurchaseError(BusinessRuleError):
    def __init__(self) -> None:
        super().__init__(4003, "Cannot buy your own product")


class InsufficientBalanceError(BusinessRuleError):
    def __init__(self, required: str, available: str) -> None:
        super().__init__(
            4004,
            f"Insufficient balance: required {required}, available {available}",
        )


class StockExhaustedError(BusinessRuleError):
    def __init__(self, product_id: int) -> None:
        super().__init__(4005, f"Stock exhausted for product {product_id}")


# --- 8xxx: Upstream ---

class GatewayError(AppError):
    """The Wingy Coin ledger rejected a call, timed out, or answered garbage."""

    def __init__(self, message: str, http_status: int = 502) -> None:
        super().__init__(8001, message, http_status)


# --- 9xxx: System ---

class ValidationError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(9001, detail, 400)


class ServerError(AppError):
    def __init__(self, detail: str = "Server error") -> None:
        super().__init__(9002, detail, 500)
