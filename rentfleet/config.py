from pydantic_settings import BaseSettings
from typing import List
from pathlib import Path


class Settings(BaseSettings):
    # Storage: "memory" or "mongo"
    storage_backend: str = "memory"
    seed_mock_data: bool = True

    # MongoDB
    mongodb_url: str = "mongodb://localhost:27017"
    database_name: str = "rentfleet_db"
    vehicles_collection: str = "vehicles"

    # Statistics
    estimated_revenue_per_vehicle: float = 1500.0

    # CORS
    cors_origins: List[str] = ["*"]

    # Server
    debug: bool = True
    host: str = "0.0.0.0"
    port: int = 8000

    class Config:
        env_file = str(Path(__file__).parent.parent / ".env")
        env_file_encoding = 'utf-8'
        extra = 'ignore'  # Ignore extra fields from .env


settings = Settings()
