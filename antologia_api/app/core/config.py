"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields.  Outside
of production a local ``.env`` file is loaded first so developers can
keep their overrides next to the project; in production the values come
from the deployment environment only.
"""

import os
import tempfile
from dataclasses import dataclass

from dotenv import load_dotenv


# The environment flag itself must come from the real environment, since
# it decides whether the ``.env`` file is consulted at all.
if os.getenv("ENVIRONMENT", "development").lower() != "production":
    load_dotenv()


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Antologia API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    environment: str = os.getenv("ENVIRONMENT", "development")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    # Optional path of a log file written in addition to the console.
    log_file: str = os.getenv("LOG_FILE", "")
    # Rotation of the log file: size in bytes and number of old files kept.
    log_max_bytes: int = int(os.getenv("LOG_MAX_BYTES", str(5 * 1024 * 1024)))
    log_backup_count: int = int(os.getenv("LOG_BACKUP_COUNT", "3"))

    # Address the HTTP server binds to when started through ``run.py``.
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "3000"))

    # Origin allowed by the CORS middleware.  ``*`` allows any origin.
    frontend_url: str = os.getenv("FRONTEND_URL", "*")

    # Path to the SQLite database file.  If a relative path is given it
    # is resolved relative to the project root by the ``db`` module.
    database_url: str = os.getenv("DATABASE_URL", "database.sqlite")

    # Upper bound for the body of ``POST /database/import`` (50 MB).
    max_import_bytes: int = int(os.getenv("MAX_IMPORT_BYTES", str(50 * 1024 * 1024)))

    # Directory where export snapshots are written before being streamed.
    export_dir: str = os.getenv("EXPORT_DIR", tempfile.gettempdir())


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Because the dataclass
# computes values at class definition time, environment variables should
# be set before importing this module.
settings = Settings()
