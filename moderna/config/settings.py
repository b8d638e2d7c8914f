from decimal import Decimal
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # App Info
    app_name: str = "Moderna Shop API"
    version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    # Database
    database_url: str = "sqlite:///./moderna.db"
    db_isolation_level: Optional[str] = Field(
        default=None,
        description="Nivel de aislamiento del engine (ej. SERIALIZABLE, REPEATABLE READ)"
    )
    auto_create_schema: bool = Field(
        default=False,
        description="Crear tablas al iniciar (solo desarrollo)"
    )

    # Saldo inicial con el que se crea el registro único de caja
    ledger_base_balance: Decimal = Decimal("0.00")

    # CORS
    allowed_origins: List[str] = [
        "http://localhost:3000",
        "https://moderna-shop.vercel.app",
    ]

    # Server
    host: str = "0.0.0.0"
    port: int = 8000


settings = Settings()
