"""Domain models for the DevSphere quiz backend."""

from .quiz import QuizQuestion, QuizScore
from .user import ResetChallenge, Role, User, serialize_roles

__all__ = [
    "QuizQuestion",
    "QuizScore",
    "ResetChallenge",
    "Role",
    "User",
    "serialize_roles",
]
