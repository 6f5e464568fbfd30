"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth/User
  2xxx: Transaction
  3xxx: Category
  4xxx: Analytics
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


# --- 1xxx: Auth/User ---

class UsernameExistsError(AppError):
    def __init__(self) -> None:
        super().__init__(1001, "Username already exists", 409)


class EmailExistsError(AppError):
    def __init__(self) -> None:
        super().__init__(1002, "Email already exists", 409)


class InvalidCredentialsError(AppError):
    def __init__(self) -> None:
        super().__init__(1003, "Invalid username or password", 401)


class AccountDisabledError(AppError):
    def __init__(self) -> None:
        super().__init__(1004, "Account is disabled", 403)


class InvalidRefreshTokenError(AppError):
    def __init__(self) -> None:
        super().__init__(1005, "Refresh token is invalid or expired", 401)


class PermissionDeniedError(AppError):
    def __init__(self, detail: str = "Access denied") -> None:
        super().__init__(1006, detail, 403)


class ReadOnlyUserError(AppError):
    def __init__(self) -> None:
        super().__init__(1007, "Read-only users cannot modify data", 403)


class UserNotFoundError(AppError):
    def __init__(self, user_id: str) -> None:
        super().__init__(1008, f"User not found: {user_id}", 404)


class SelfModificationError(AppError):
    def __init__(self, action: str) -> None:
        super().__init__(1009, f"You cannot {action} your own account", 400)


# --- 2xxx: Transaction ---

class TransactionNotFoundError(AppError):
    def __init__(self, transaction_id: int) -> None:
        super().__init__(2001, f"Transaction not found: {transaction_id}", 404)


class CategoryTypeMismatchError(AppError):
    def __init__(self, category_type: str, transaction_type: str) -> None:
        super().__init__(
            2002,
            f"Category type ({category_type}) does not match transaction type ({transaction_type})",
            400,
        )


class InvalidCategoryError(AppError):
    def __init__(self, category_id: int) -> None:
        super().__init__(2003, f"Invalid category ID: {category_id}", 400)


class TargetUserNotFoundError(AppError):
    def __init__(self, user_id: str) -> None:
        super().__init__(2004, f"Target user not found: {user_id}", 400)


# --- 3xxx: Category ---

class CategoryNotFoundError(AppError):
    def __init__(self, category_id: int) -> None:
        super().__init__(3001, f"Category not found: {category_id}", 404)


class CategoryExistsError(AppError):
    def __init__(self, name: str) -> None:
        super().__init__(3002, f"Category with name '{name}' already exists", 409)


class CategoryInUseError(AppError):
    def __init__(self, category_id: int) -> None:
        super().__init__(
            3003, f"Category {category_id} is used by transactions and cannot be deleted", 409
        )


# --- 4xxx: Analytics ---

class InvalidPeriodError(AppError):
    def __init__(self, period: str) -> None:
        super().__init__(4001, f"Unsupported period: {period}", 422)


class InvalidDateRangeError(AppError):
    def __init__(self) -> None:
        super().__init__(4002, "start_date must not be after end_date", 422)


# --- 9xxx: System ---

class RateLimitError(AppError):
    def __init__(self) -> None:
        super().__init__(9001, "Rate limit exceeded", 429)


class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)
