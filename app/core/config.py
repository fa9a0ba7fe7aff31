from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App settings
    PROJECT_NAME: str = "ExpenseDashboard"
    API_PREFIX: str = "/api"
    DEBUG: bool = Field(default=False)
    LOG_LEVEL: str = Field(default="INFO")

    # DynamoDB
    DYNAMO_REGION: str = Field(default="eu-west-1")
    DYNAMO_EXPENSES_TABLE: str = Field(default="expense-dashboard-expenses")
    DYNAMO_CATEGORIES_TABLE: str = Field(default="expense-dashboard-categories")

    # Bearer tokens are issued by the external auth provider and signed with its shared secret
    JWT_SECRET_KEY: str = Field(default="change-me-in-production")
    JWT_ALGORITHM: str = "HS256"
    JWT_AUDIENCE: Optional[str] = Field(default="authenticated")

    CORS_ORIGINS: List[str] = Field(
        default=[
            "http://localhost:3000",
            "http://localhost:8000",
        ]
    )

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True)


settings = Settings()
