# ==============================================
# Configuration Management
# ==============================================
#
# PURPOSE:
#   Load and validate all configuration from environment
#   variables / .env file. Provides typed config objects
#   to the storage factory and the CLI.
#
# CLASSES:
# --------
# - MongoConfig (dataclass)
#     host: str          (default "localhost")
#     port: int          (default 27017)
#     user: str | None   (default None)
#     password: str | None (default None)
#     database: str      (default "elementstore")
#     collection: str    (default "elements")
#
# - MySQLConfig (dataclass)
#     host: str          (default "localhost")
#     port: int          (default 3306)
#     user: str          (default "root")
#     password: str      (default "root")
#     database: str      (default "elementstore")
#     table: str         (default "elements")
#
# - AppConfig (dataclass)
#     mongo: MongoConfig
#     mysql: MySQLConfig
#     backend: str               (default "memory")
#     timeout_seconds: float     (default 5.0)
#     metadata_dir: str          (default "metadata/")
#     log_level: str             (default "INFO")
#
# FUNCTION:
# ---------
# - get_config() -> AppConfig
#     Load .env using python-dotenv, construct AppConfig.
#     Returns the same singleton on repeated calls.
#
# USAGE:
# ------
#   from elementstore.config import get_config
#   config = get_config()
#   print(config.backend)
#   print(config.mongo.collection)
#
# ==============================================

import os
from dataclasses import dataclass, field
from typing import Optional
from pathlib import Path

from dotenv import load_dotenv

BACKENDS = ("memory", "mongo", "mysql")


@dataclass
class MongoConfig:
    """MongoDB connection configuration."""
    host: str = "localhost"
    port: int = 27017
    user: Optional[str] = None
    password: Optional[str] = None
    database: str = "elementstore"
    collection: str = "elements"


@dataclass
class MySQLConfig:
    """MySQL connection configuration."""
    host: str = "localhost"
    port: int = 3306
    user: str = "root"
    password: str = "root"
    database: str = "elementstore"
    table: str = "elements"


@dataclass
class AppConfig:
    """Main application configuration."""
    mongo: MongoConfig = field(default_factory=MongoConfig)
    mysql: MySQLConfig = field(default_factory=MySQLConfig)
    backend: str = "memory"
    timeout_seconds: float = 5.0
    metadata_dir: str = "metadata/"
    log_level: str = "INFO"

    def __post_init__(self):
        self.backend = self.backend.lower()
        if self.backend not in BACKENDS:
            raise ValueError(
                f"Unknown storage backend {self.backend!r}; expected one of {', '.join(BACKENDS)}"
            )


# Singleton instance
_config_instance: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """
    Load configuration from environment variables / .env file.
    Returns the same singleton instance on repeated calls.

    Returns:
        AppConfig: Application configuration
    """
    global _config_instance

    if _config_instance is not None:
        return _config_instance

    # Load .env file from project root
    env_path = Path(__file__).parent.parent / ".env"
    load_dotenv(dotenv_path=env_path)

    mongo_config = MongoConfig(
        host=os.getenv("MONGO_HOST", "localhost"),
        port=int(os.getenv("MONGO_PORT", "27017")),
        user=os.getenv("MONGO_USER") or None,
        password=os.getenv("MONGO_PASSWORD") or None,
        database=os.getenv("MONGO_DATABASE", "elementstore"),
        collection=os.getenv("MONGO_COLLECTION", "elements"),
    )

    mysql_config = MySQLConfig(
        host=os.getenv("MYSQL_HOST", "localhost"),
        port=int(os.getenv("MYSQL_PORT", "3306")),
        user=os.getenv("MYSQL_USER", "root"),
        password=os.getenv("MYSQL_PASSWORD", "root"),
        database=os.getenv("MYSQL_DATABASE", "elementstore"),
        table=os.getenv("MYSQL_TABLE", "elements"),
    )

    _config_instance = AppConfig(
        mongo=mongo_config,
        mysql=mysql_config,
        backend=os.getenv("ELEMENTSTORE_BACKEND", "memory"),
        timeout_seconds=float(os.getenv("STORE_TIMEOUT_SECONDS", "5.0")),
        metadata_dir=os.getenv("METADATA_DIR", "metadata/"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
    )

    return _config_instance
