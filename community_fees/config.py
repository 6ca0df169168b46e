"""Configuration management for community-fees."""

from dataclasses import dataclass, field
from pathlib import Path

from community_fees.exceptions import ConfigurationError

STORAGE_BACKENDS = ("memory", "json")


@dataclass
class StorageConfig:
    """Persistence backend configuration."""

    backend: str = "memory"
    data_dir: Path = field(default_factory=lambda: Path("data"))
    key_prefix: str = "jiahe_"

    def __post_init__(self) -> None:
        if self.backend not in STORAGE_BACKENDS:
            raise ConfigurationError(
                f"Unknown storage backend {self.backend!r}, expected one of {STORAGE_BACKENDS}"
            )


@dataclass
class AdminConfig:
    """Bootstrap administrator account, created when no ADMIN exists."""

    user_id: str = "admin-001"
    username: str = "admin"
    password: str = "admin123"


@dataclass
class LedgerConfig:
    """Payment ledger policy."""

    deletion_window_days: int = 3


@dataclass
class FeeDefaults:
    """Rates used until a manager edits the fee table."""

    management: int = 800
    motorcycle_small: int = 100
    motorcycle_large: int = 200
    car_small: int = 1200
    car_large: int = 1800


@dataclass
class AppConfig:
    """Main configuration for community-fees."""

    storage: StorageConfig = field(default_factory=StorageConfig)
    admin: AdminConfig = field(default_factory=AdminConfig)
    ledger: LedgerConfig = field(default_factory=LedgerConfig)
    fees: FeeDefaults = field(default_factory=FeeDefaults)
    seed: int | None = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Create config from environment variables."""
        import os

        storage = StorageConfig(
            backend=os.getenv("COMMUNITY_FEES_STORAGE", "memory"),
            data_dir=Path(os.getenv("COMMUNITY_FEES_DATA_DIR", "data")),
            key_prefix=os.getenv("COMMUNITY_FEES_KEY_PREFIX", "jiahe_"),
        )

        admin = AdminConfig(
            username=os.getenv("COMMUNITY_FEES_ADMIN_USERNAME", "admin"),
            password=os.getenv("COMMUNITY_FEES_ADMIN_PASSWORD", "admin123"),
        )

        try:
            ledger = LedgerConfig(
                deletion_window_days=int(os.getenv("COMMUNITY_FEES_DELETION_WINDOW_DAYS", "3")),
            )
            fees = FeeDefaults(
                management=int(os.getenv("COMMUNITY_FEES_MANAGEMENT_RATE", "800")),
            )
            seed = int(os.getenv("SEED")) if os.getenv("SEED") else None
        except ValueError as exc:
            raise ConfigurationError(f"Invalid numeric setting: {exc}") from exc

        return cls(
            storage=storage,
            admin=admin,
            ledger=ledger,
            fees=fees,
            seed=seed,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )
