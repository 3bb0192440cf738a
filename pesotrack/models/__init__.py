"""Pydantic domain models for the budgeting API."""

from .constants import CATEGORIES, DEFAULT_CATEGORY  # re-export
from .expense import ExpenseIn, ExpenseOut
from .budget import BudgetAmountIn, BudgetOut, BudgetStatus
from .profile import UserProfile, ProfileUpdateIn, AvatarIn
from .auth import (
    SignupIn,
    LoginIn,
    RefreshIn,
    PasswordResetIn,
    PasswordChangeIn,
    SessionTokens,
    AuthResponse,
    SessionState,
)

__all__ = [
    "CATEGORIES",
    "DEFAULT_CATEGORY",
    "ExpenseIn",
    "ExpenseOut",
    "BudgetAmountIn",
    "BudgetOut",
    "BudgetStatus",
    "UserProfile",
    "ProfileUpdateIn",
    "AvatarIn",
    "SignupIn",
    "LoginIn",
    "RefreshIn",
    "PasswordResetIn",
    "PasswordChangeIn",
    "SessionTokens",
    "AuthResponse",
    "SessionState",
]
