from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Central configuration loaded from environment / .env file."""

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    # Audit log destinations (one per run mode, never shared)
    manual_log_path: str = "manual_kernel_log.txt"
    auto_log_path: str = "auto_kernel_log.txt"

    # Rotate once a destination grows past this many bytes
    max_log_bytes: int = 16_384

    # Optional YAML list of subsystem names (defaults used if missing)
    subsystems_file: str = "subsystems.yaml"

    # Seed for the failure injector; unset = nondeterministic
    random_seed: int | None = None

    # Logging
    log_level: str = "INFO"


settings = Settings()
