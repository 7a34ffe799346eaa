from dataclasses import dataclass

from ..application.services.account_service import AccountService
from ..application.services.quiz_service import QuizService
from .config import Settings
from ..domain.ports.persistence import NotificationSender, UserRepository
from ..services.otp_manager import OtpManager
from ..services.password_hasher import PasswordHasher
from ..services.quiz_generator import QuizGenerator
from ..services.token_service import TokenService


@dataclass(slots=True)
class ApplicationContainer:
    """Dependency registry shared across the FastAPI application lifecycle."""

    settings: Settings
    persistence: UserRepository
    password_hasher: PasswordHasher
    token_service: TokenService
    otp_manager: OtpManager
    email_service: NotificationSender
    account_service: AccountService
    quiz_generator: QuizGenerator
    quiz_service: QuizService
