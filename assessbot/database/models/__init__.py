from .user import User, UserRole
from .test import Test
from .result import TestResult

__all__ = [
    "User",
    "UserRole",
    "Test",
    "TestResult",
]
