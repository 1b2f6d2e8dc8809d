from enum import Enum


class ExpenseCategory(str, Enum):
    FOOD = "Food"
    TRANSPORT = "Transport"
    UTILITIES = "Utilities"
    OTHER = "Other"


EXPENSE_CATEGORIES = [category.value for category in ExpenseCategory]

USER_ROLE = "user"
ADMIN_ROLE = "admin"
USER_ROLES = [USER_ROLE, ADMIN_ROLE]

MIN_YEAR = 2000
MAX_YEAR = 2100

AUTH_MESSAGES = {
    "REGISTER_SUCCESS": "User registered successfully",
    "LOGIN_SUCCESS": "User logged in successfully",
    "LOGOUT_SUCCESS": "User logged out successfully",
    "INVALID_CREDENTIALS": "Invalid email or password",
    "EMAIL_EXISTS": "Email already exists",
}
