"""Application configuration settings for the barter exchange."""

from dataclasses import dataclass
import os


@dataclass
class StoreConfig:
    """Key-value store configuration."""
    storage_type: str = "memory"
    base_dir: str = "./barter_data"
    file_name: str = "store.json"
    redis_url: str = "redis://localhost:6379"
    namespace: str = "barter"


@dataclass
class LatencyConfig:
    """Simulated API latency in milliseconds (0 disables the delay)."""
    barter_ms: int = 0
    chat_ms: int = 0


@dataclass
class CodeConfig:
    """Confirmation and community join code generation."""
    confirmation_code_length: int = 6
    confirmation_code_alphabet: str = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"
    community_code_length: int = 6


@dataclass
class BarterPolicyConfig:
    """Product decisions for barter request creation."""
    allow_duplicate_requests: bool = False


@dataclass
class AppSettings:
    """Main application settings."""
    log_level: str = "INFO"
    store: StoreConfig = None
    latency: LatencyConfig = None
    codes: CodeConfig = None
    policy: BarterPolicyConfig = None

    def __post_init__(self):
        """Initialize nested configs if not provided."""
        if self.store is None:
            self.store = StoreConfig()
        if self.latency is None:
            self.latency = LatencyConfig()
        if self.codes is None:
            self.codes = CodeConfig()
        if self.policy is None:
            self.policy = BarterPolicyConfig()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


# Default application configuration
APP_CONFIG = {
    "log_level": os.getenv("LOG_LEVEL", "INFO"),
    "store": {
        "storage_type": os.getenv("STORAGE_TYPE", "memory"),
        "base_dir": os.getenv("STORE_BASE_DIR", "./barter_data"),
        "file_name": os.getenv("STORE_FILE_NAME", "store.json"),
        "redis_url": os.getenv("REDIS_URL", "redis://localhost:6379"),
        "namespace": os.getenv("STORE_NAMESPACE", "barter"),
    },
    "latency": {
        "barter_ms": int(os.getenv("BARTER_LATENCY_MS", "0")),
        "chat_ms": int(os.getenv("CHAT_LATENCY_MS", "0")),
    },
    "codes": {
        "confirmation_code_length": int(os.getenv("CONFIRMATION_CODE_LENGTH", "6")),
        "confirmation_code_alphabet": os.getenv(
            "CONFIRMATION_CODE_ALPHABET", "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"
        ),
        "community_code_length": int(os.getenv("COMMUNITY_CODE_LENGTH", "6")),
    },
    "policy": {
        "allow_duplicate_requests": _env_bool("ALLOW_DUPLICATE_REQUESTS", "false"),
    },
}


def get_app_settings() -> AppSettings:
    """Get application settings from configuration."""
    return AppSettings(
        log_level=APP_CONFIG["log_level"],
        store=StoreConfig(**APP_CONFIG["store"]),
        latency=LatencyConfig(**APP_CONFIG["latency"]),
        codes=CodeConfig(**APP_CONFIG["codes"]),
        policy=BarterPolicyConfig(**APP_CONFIG["policy"]),
    )
