"""Configuration for TaskBeacon.

Values come from the environment (a local ``.env`` file is loaded first) and
are collected into an immutable ``Settings`` object so the app factory and
tests can pass them around explicitly.
"""

import os
from dataclasses import dataclass, field
from typing import Optional, Tuple
from dotenv import load_dotenv
from .constants import MAX_STEPS_PER_TASK

load_dotenv()

PRODUCTION = "production"


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_list(name: str, default: str) -> Tuple[str, ...]:
    raw = os.getenv(name, default)
    return tuple(item.strip() for item in raw.split(",") if item.strip())


@dataclass(frozen=True)
class Settings:
    """Runtime settings.

    Attributes:
        database_url: SQLAlchemy database URL
        sql_echo: Echo SQL statements to the log
        environment: Deployment environment name
        log_level: Root logging level
        auth_bypass: Accept any bearer token and inject a fixed development identity
        jwt_secret: Key used to validate bearer tokens (shared secret or PEM public key)
        jwt_algorithm: Expected token signing algorithm
        jwt_audience: Required ``aud`` claim, if set
        jwt_issuer: Required ``iss`` claim, if set
        allowed_origins: CORS origins allowed to call the API
        max_steps_per_task: Maximum number of steps a task may hold
    """
    database_url: str = "sqlite:///./taskbeacon.db"
    sql_echo: bool = False
    environment: str = "development"
    log_level: str = "INFO"
    auth_bypass: bool = False
    jwt_secret: Optional[str] = None
    jwt_algorithm: str = "HS256"
    jwt_audience: Optional[str] = None
    jwt_issuer: Optional[str] = None
    allowed_origins: Tuple[str, ...] = field(
        default=("http://localhost:3000", "http://frontend")
    )
    max_steps_per_task: int = MAX_STEPS_PER_TASK

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == PRODUCTION

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables."""
        return cls(
            database_url=os.getenv("DATABASE_URL", "sqlite:///./taskbeacon.db"),
            sql_echo=_env_bool("SQL_ECHO"),
            environment=os.getenv("ENVIRONMENT", "development"),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            auth_bypass=_env_bool("AUTH_BYPASS"),
            jwt_secret=os.getenv("JWT_SECRET") or None,
            jwt_algorithm=os.getenv("JWT_ALGORITHM", "HS256"),
            jwt_audience=os.getenv("JWT_AUDIENCE") or None,
            jwt_issuer=os.getenv("JWT_ISSUER") or None,
            allowed_origins=_env_list("ALLOWED_ORIGINS", "http://localhost:3000,http://frontend"),
            max_steps_per_task=int(os.getenv("MAX_STEPS_PER_TASK", str(MAX_STEPS_PER_TASK))),
        )
