"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  A local ``.env`` file is loaded first with
``python-dotenv`` so development setups do not need to export
anything by hand.  Defaults are provided for all fields.  In a
production deployment you should override these via environment
variables.
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Nudge API")
    api_version: str = os.getenv("API_VERSION", "3.0.0")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    # Optional path of a log file.  Console logging is always enabled.
    log_file: str = os.getenv("LOG_FILE", "")

    # MongoDB connection.  ``mongodb_timeout_ms`` bounds how long the
    # startup ping waits for a server before the process gives up.
    mongodb_uri: str = os.getenv("MONGODB_URI", "mongodb://localhost:27017")
    db_name: str = os.getenv("DB_NAME", "event_management")
    mongodb_timeout_ms: int = int(os.getenv("MONGODB_TIMEOUT_MS", "5000"))

    # All resource routes are mounted below this prefix.  ``/health``,
    # ``/uploads`` and the browser page stay at the root.
    api_prefix: str = os.getenv("API_PREFIX", "/api/v3/app")

    # Directory receiving uploaded files.  Relative paths are resolved
    # against the current working directory.
    upload_dir: str = os.getenv("UPLOAD_DIR", "uploads")

    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "3000"))

    # Owner id stored on resources created without a usable ``uid``.
    default_uid: int = int(os.getenv("DEFAULT_UID", "18"))


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Because the dataclass
# computes values at class definition time, environment variables should
# be set before importing this module.
settings = Settings()
