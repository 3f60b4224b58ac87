import os
import logging
from pydantic import BaseModel, Field
from typing import Optional
from dotenv import load_dotenv

load_dotenv()


class Config(BaseModel):
    app_name: str = "Bono Dashboard"
    environment: str = os.getenv("APP_ENV", "development")
    api_prefix: str = "/api"
    version: str = "1.0.0"
    request_id_header: str = "X-Request-ID"
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # Storage
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./bonos.db")
    record_store: str = os.getenv("RECORD_STORE", "sql")  # sql | sheet
    sheet_path: Optional[str] = Field(default=os.getenv("SHEET_PATH") or None)

    # Tier tables; built-in defaults are used when unset
    bonus_rules_file: Optional[str] = Field(default=os.getenv("BONUS_RULES_FILE") or None)

    # Rate limiting on write endpoints
    rate_limit_enabled: bool = os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"
    rate_limit_per_minute: int = int(os.getenv("RATE_LIMIT_PER_MINUTE", "60"))


settings = Config()

_logger = logging.getLogger(__name__)
if settings.record_store not in ("sql", "sheet"):
    raise RuntimeError(
        f"FATAL: RECORD_STORE must be 'sql' or 'sheet', got '{settings.record_store}'."
    )
if settings.record_store == "sheet" and not settings.sheet_path:
    _logger.warning("⚠ RECORD_STORE=sheet without SHEET_PATH: records are kept in memory only.")
if settings.sheet_path and not settings.sheet_path.lower().endswith((".xlsx", ".xlsm")):
    raise RuntimeError(
        f"FATAL: SHEET_PATH must point to an .xlsx workbook, got '{settings.sheet_path}'."
    )
