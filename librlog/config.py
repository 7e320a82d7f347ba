import os
from dataclasses import dataclass
from dotenv import load_dotenv

from librlog import __version__

load_dotenv()

@dataclass
class Settings:
    # Catalog file
    data_file: str = os.getenv("LIBRLOG_DATA_FILE", "data/library_catalog.csv")

    # Access gate
    password: str = os.getenv("LIBRLOG_PASSWORD", "librlog")

    # Default borrow/return date, strftime format
    date_format: str = os.getenv("LIBRLOG_DATE_FORMAT", "%Y-%m-%d")

    # Logging
    log_level: str = os.getenv("LIBRLOG_LOG_LEVEL", "WARNING").upper()

    # Application
    app_name: str = os.getenv("APP_NAME", "librlog")
    app_version: str = os.getenv("APP_VERSION", __version__)
    debug: bool = os.getenv("DEBUG", "False").lower() in ("true", "1", "yes")


settings = Settings()
