"""
Core configuration and settings for the Product Catalog Service
Following FastAPI best practices for configuration management
"""

from typing import List, Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Config(BaseSettings):
    """Application configuration with environment variable support"""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",  # Allow extra fields to be ignored
        env_parse_none_str="none",
    )

    # Service information
    service_name: str = "product-catalog-service"
    service_version: str = "1.0.0"
    environment: str = "development"

    # Server configuration
    port: int = 5000
    host: str = "0.0.0.0"
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])

    # Database configuration
    mongo_uri: str = "mongodb://localhost:27017/productdb"
    mongodb_database: str = "productdb"  # used when MONGO_URI names no database
    products_collection: str = "products"
    users_collection: str = "users"

    # Identity provider configuration
    identity_provider: str = "firebase"  # firebase | jwt
    firebase_credentials: str = "serviceAccountKey.json"
    firebase_check_revoked: bool = False
    jwt_secret: str = "your_jwt_secret_key"
    jwt_algorithm: str = "HS256"

    # Upper bound in seconds for each identity provider and store call; "none" disables it
    external_call_timeout: Optional[float] = 10.0

    # Logging configuration
    log_level: str = "INFO"
    log_format: str = "console"
    log_to_file: bool = False
    log_to_console: bool = True
    log_file_path: str = "logs/product-catalog-service.log"

    # Request tracing
    correlation_id_header: str = "X-Correlation-ID"

    @property
    def store_timeout_ms(self) -> Optional[int]:
        """Motor server selection timeout derived from the external call timeout"""
        if self.external_call_timeout is None:
            return None
        return int(self.external_call_timeout * 1000)


# Global config instance
config = Config()
