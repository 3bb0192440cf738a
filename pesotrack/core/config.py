from functools import lru_cache
from pathlib import Path
from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment with defaults.

    Environment variable mapping follows pydantic's rules (e.g., APP_NAME, DEBUG, DATA_DIR,
    DB_FILENAME, IDENTITY_PROVIDER, IDENTITY_API_KEY, BUDGET_WARN_PCT).
    """

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Basic app metadata
    app_name: str = "Pesotrack Budget API"
    debug: bool = True
    version: str = "0.1.0"

    # Data & persistence
    data_dir: Path = Path("data")
    db_filename: str = "pesotrack.sqlite3"
    db_path: Optional[Path] = None  # derived if not provided

    # Identity provider
    # Allowed: 'firebase' (hosted identity toolkit), 'firebase-emulator' (local auth emulator)
    identity_provider: str = "firebase"
    identity_api_key: str = ""
    identity_emulator_host: str = "localhost:9099"
    http_timeout_seconds: float = 5.0
    http_retries: int = 2

    cors_origins: List[str] = ["*"]

    # Budget usage thresholds (percent of monthly budget)
    budget_warn_pct: int = 70
    budget_danger_pct: int = 90

    # View windows
    recent_expenses_limit: int = 5
    history_days: int = 7
    savings_days: int = 7

    avatar_max_bytes: int = 5 * 1024 * 1024

    def init_post_load(self) -> None:
        """Finalize derived fields and ensure directories exist."""
        if self.db_path is None:
            self.db_path = self.data_dir / self.db_filename
        # Ensure persistence directory exists
        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        allowed = {"firebase", "firebase-emulator"}
        if self.identity_provider not in allowed:
            raise ValueError(
                f"Unsupported identity_provider '{self.identity_provider}'. Allowed: {allowed}"
            )
        if not (0 < self.budget_warn_pct < self.budget_danger_pct):
            raise ValueError(
                "Invalid budget thresholds: require 0 < warn < danger"
            )


@lru_cache
def get_settings() -> Settings:
    settings = Settings()
    settings.init_post_load()
    return settings
