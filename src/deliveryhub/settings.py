"""Runtime settings read from ``DELIVERYHUB_*`` environment variables."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

ENV_PREFIX = "DELIVERYHUB_"


def _float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(ENV_PREFIX + name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ValueError(f"{ENV_PREFIX}{name} must be a number, got {raw!r}") from e


def _int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(ENV_PREFIX + name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{ENV_PREFIX}{name} must be an integer, got {raw!r}") from e


@dataclass(frozen=True)
class Settings:
    """Process-wide settings.

    Attributes:
        db_path: SQLite file used by the local gateway.
        backend_url: Remote delivery backend; when set the HTTP gateway is used.
        backend_token: Bearer token for the remote backend.
        board_config_path: Optional JSON board configuration.
        default_dev_count: Developer count used for ETA projection.
        ai_timeout_seconds: How long to wait for AI enhancement.
        host: Bind address for the API server.
        port: Bind port for the API server.
        log_level: Level for the engine and server loggers.
        log_dir: Directory for the rotating log file; None logs to the console only.
    """

    db_path: str = "deliveryhub.db"
    backend_url: str | None = None
    backend_token: str = ""
    board_config_path: str | None = None
    default_dev_count: int = 2
    ai_timeout_seconds: float = 30.0
    host: str = "127.0.0.1"
    port: int = 8000
    log_level: str = "INFO"
    log_dir: str | None = None

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> Settings:
        """Build settings from the environment.

        Args:
            env: Mapping to read instead of ``os.environ``.

        Raises:
            ValueError: If a numeric variable cannot be parsed.
        """
        env = os.environ if env is None else env
        dev_count = _int(env, "DEFAULT_DEV_COUNT", cls.default_dev_count)
        if dev_count < 1:
            raise ValueError(f"{ENV_PREFIX}DEFAULT_DEV_COUNT must be at least 1")
        return cls(
            db_path=env.get(ENV_PREFIX + "DB_PATH", cls.db_path),
            backend_url=env.get(ENV_PREFIX + "BACKEND_URL") or None,
            backend_token=env.get(ENV_PREFIX + "BACKEND_TOKEN", ""),
            board_config_path=env.get(ENV_PREFIX + "BOARD_CONFIG") or None,
            default_dev_count=dev_count,
            ai_timeout_seconds=_float(env, "AI_TIMEOUT", cls.ai_timeout_seconds),
            host=env.get(ENV_PREFIX + "HOST", cls.host),
            port=_int(env, "PORT", cls.port),
            log_level=env.get(ENV_PREFIX + "LOG_LEVEL", cls.log_level),
            log_dir=env.get(ENV_PREFIX + "LOG_DIR") or None,
        )
