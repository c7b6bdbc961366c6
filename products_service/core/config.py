from functools import lru_cache
from typing import Literal, Optional
import os
from pydantic_settings import BaseSettings, SettingsConfigDict

EnvName = Literal["development", "production"]

def _env_file_for(app_env: EnvName) -> str:
    return ".env.development" if app_env == "development" else ".env.production"

class Settings(BaseSettings):

    # Core
    APP_ENV: EnvName = "development"
    APP_NAME: str = "ProductsService"
    DEBUG: bool = False
    GIT_SHA: str = "unknown"

    # Logging
    LOG_FILE_PATH: Optional[str] = None        # e.g. ./logs/products-service/service.log

    # Redis (record store + optional RediSearch index)
    REDIS_URL: str = "redis://localhost:6379/0"
    SEARCH_INDEX_NAME: str = "products-index"
    product_key_prefix: str = "product:"       # record key = prefix + id
    search_doc_prefix: str = "idx:product:"    # hash documents covered by the index

    # Seeding
    seed_target: int = 100_000                 # minimum catalog size guaranteed at startup
    seed_scan_batch_size: int = 1000           # SCAN COUNT hint
    seed_write_batch_size: int = 200           # concurrent writes per seeding round
    seed_random_seed: Optional[int] = None     # set for reproducible synthetic records

    # Listing
    max_page_size: int = 100

    # API
    api_prefix: str = ""

    # pydantic-settings config will be set dynamically in the factory below
    model_config = SettingsConfigDict(env_file=None, case_sensitive=True, extra="ignore")

@lru_cache
def get_settings() -> Settings:
    """
    Factory that chooses the right .env file based on APP_ENV.
    Cache makes it cheap to inject via FastAPI dependencies.
    """
    app_env: EnvName = os.getenv("APP_ENV", "development")  # earliest switch
    env_file = _env_file_for(app_env)
    return Settings(
                _env_file=env_file,  # load .env.development or .env.production
                _env_file_encoding="utf-8"
    )
