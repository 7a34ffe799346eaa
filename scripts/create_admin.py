import asyncio
import getpass
import os

from dotenv import load_dotenv

from devsphere.application.services.account_service import AccountService
from devsphere.core.config import Settings
from devsphere.domain.errors import DevSphereError
from devsphere.infrastructure.persistence.sqlite import SQLitePersistence
from devsphere.services.email_service import EmailService
from devsphere.services.otp_manager import OtpManager
from devsphere.services.password_hasher import PasswordHasher
from devsphere.services.token_service import TokenService


async def main() -> None:
    load_dotenv()
    settings = Settings()

    email = os.getenv("ADMIN_EMAIL") or input("Administrator email: ").strip()
    password = os.getenv("ADMIN_PASSWORD") or getpass.getpass("Administrator password: ").strip()
    if not email or not password:
        raise RuntimeError("Both ADMIN_EMAIL and ADMIN_PASSWORD are required.")

    persistence = SQLitePersistence(settings.database_path)
    try:
        accounts = AccountService(
            persistence,
            PasswordHasher(rounds=settings.bcrypt_rounds),
            TokenService(settings.jwt_access_secret, settings.jwt_refresh_secret),
            OtpManager(persistence, ttl_minutes=settings.otp_ttl_minutes),
            EmailService(),
        )
        try:
            account = await accounts.register_admin(email, password)
        except DevSphereError as exc:
            print(f"Could not create administrator: {exc.message}")
            return
        print("Administrator created:", account["email"], account["roles"])
    finally:
        persistence.close()


if __name__ == "__main__":
    asyncio.run(main())
