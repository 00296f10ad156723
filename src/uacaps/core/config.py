"""Application configuration using pydantic-settings with grouped env prefixes."""

from __future__ import annotations

from typing import Literal

from pydantic_settings import BaseSettings


class DatasetConfig(BaseSettings):
    """Pattern dataset location, file format and resolution options."""

    model_config = {"env_prefix": "UACAPS_DATASET_"}

    path: str = "data/browscap.csv"
    delimiter: str = ","
    skip_rows: int = 0  # browscap CSV exports carry 2 version lines before the header
    encoding: str = "utf-8-sig"
    unknown_marker: str = "unknown"
    device_type_column: str = "Device_Type"
    max_inheritance_depth: int = 16


class CacheConfig(BaseSettings):
    """Lookup result cache configuration."""

    model_config = {"env_prefix": "UACAPS_CACHE_"}

    backend: Literal["none", "memory", "redis"] = "none"
    ttl: int = 3600


class RedisConfig(BaseSettings):
    """Redis cache configuration."""

    model_config = {"env_prefix": "UACAPS_REDIS_"}

    host: str = "localhost"
    port: int = 6379
    db: int = 0
    decode_responses: bool = True


class AppSettings(BaseSettings):
    """Root application settings aggregating all sub-configs."""

    model_config = {"env_prefix": "UACAPS_"}

    environment: Literal["dev", "uat", "prod"] = "dev"
    log_level: str = "INFO"

    dataset: DatasetConfig = DatasetConfig()
    cache: CacheConfig = CacheConfig()
    redis: RedisConfig = RedisConfig()
