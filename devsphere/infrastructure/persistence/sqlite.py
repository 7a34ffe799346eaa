import json
import sqlite3
import threading
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Optional, Union

from ...domain.errors import EmailExists
from ...domain.models import ResetChallenge, Role, User, serialize_roles
from ...domain.ports.persistence import UserRepository

_MEMORY = ":memory:"


class SQLitePersistence(UserRepository):
    """SQLite-backed credential store."""

    def __init__(self, path: Union[Path, str]) -> None:
        if str(path) != _MEMORY:
            path = Path(path)
            path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(str(path), check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._lock = threading.Lock()
        self._initialize()

    def _initialize(self) -> None:
        with self._lock, self._conn:
            self._conn.executescript(
                """
                CREATE TABLE IF NOT EXISTS users (
                    id TEXT PRIMARY KEY,
                    email TEXT NOT NULL UNIQUE,
                    password_hash TEXT NOT NULL,
                    roles TEXT NOT NULL,
                    firstname TEXT,
                    lastname TEXT,
                    reset_token_hash TEXT,
                    reset_token_expires_at TEXT,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL,
                    CHECK ((reset_token_hash IS NULL) = (reset_token_expires_at IS NULL))
                );

                CREATE INDEX IF NOT EXISTS idx_users_email ON users(email);
                """
            )

    def close(self) -> None:
        self._conn.close()

    # UserRepository API -----------------------------------------------------
    def find_by_email(self, email: str) -> Optional[User]:
        with self._lock:
            cur = self._conn.execute("SELECT * FROM users WHERE email = ?", (email,))
            row = cur.fetchone()
        return self._row_to_user(row) if row else None

    def find_by_id(self, user_id: str) -> Optional[User]:
        with self._lock:
            cur = self._conn.execute("SELECT * FROM users WHERE id = ?", (user_id,))
            row = cur.fetchone()
        return self._row_to_user(row) if row else None

    def create(
        self,
        email: str,
        password_hash: str,
        roles: Iterable[Role],
        firstname: Optional[str] = None,
        lastname: Optional[str] = None,
    ) -> User:
        now = _utcnow()
        user = User(
            id=uuid.uuid4().hex,
            email=email,
            password_hash=password_hash,
            roles=frozenset(roles),
            firstname=firstname,
            lastname=lastname,
            created_at=now,
            updated_at=now,
        )
        try:
            with self._lock, self._conn:
                self._conn.execute(
                    """
                    INSERT INTO users (
                        id, email, password_hash, roles, firstname, lastname,
                        reset_token_hash, reset_token_expires_at, created_at, updated_at
                    )
                    VALUES (?, ?, ?, ?, ?, ?, NULL, NULL, ?, ?)
                    """,
                    (
                        user.id,
                        user.email,
                        user.password_hash,
                        json.dumps(serialize_roles(user.roles)),
                        user.firstname,
                        user.lastname,
                        now.isoformat(),
                        now.isoformat(),
                    ),
                )
        except sqlite3.IntegrityError as exc:
            raise EmailExists() from exc
        return user

    def save(self, user: User) -> User:
        now = _utcnow()
        challenge = user.reset_challenge
        try:
            with self._lock, self._conn:
                self._conn.execute(
                    """
                    UPDATE users
                    SET email = ?, password_hash = ?, roles = ?, firstname = ?, lastname = ?,
                        reset_token_hash = ?, reset_token_expires_at = ?, updated_at = ?
                    WHERE id = ?
                    """,
                    (
                        user.email,
                        user.password_hash,
                        json.dumps(serialize_roles(user.roles)),
                        user.firstname,
                        user.lastname,
                        challenge.token_hash if challenge else None,
                        challenge.expires_at.isoformat() if challenge else None,
                        now.isoformat(),
                        user.id,
                    ),
                )
        except sqlite3.IntegrityError as exc:
            raise EmailExists() from exc
        user.updated_at = now
        return user

    def _row_to_user(self, row: sqlite3.Row) -> User:
        challenge = None
        if row["reset_token_hash"]:
            challenge = ResetChallenge(
                token_hash=row["reset_token_hash"],
                expires_at=datetime.fromisoformat(row["reset_token_expires_at"]),
            )
        return User(
            id=row["id"],
            email=row["email"],
            password_hash=row["password_hash"],
            roles=frozenset(Role(item) for item in json.loads(row["roles"])),
            firstname=row["firstname"],
            lastname=row["lastname"],
            reset_challenge=challenge,
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)
