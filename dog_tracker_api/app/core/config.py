"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables each time it is instantiated.  Defaults are
provided for all fields so the service starts with no configuration
at all; override them via environment variables in a real deployment.
"""

import os
from dataclasses import dataclass, field
from typing import Optional


PAGE_ERROR_MODES = frozenset({"json", "html"})


def _env(name: str, default: str) -> str:
    return os.getenv(name, default)


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = field(default_factory=lambda: _env("PROJECT_NAME", "Dog Tracker API"))
    api_version: str = field(default_factory=lambda: _env("API_VERSION", "1.0.0"))
    debug: bool = field(default_factory=lambda: _env("DEBUG", "false").lower() in {"1", "true", "yes"})
    log_level: str = field(default_factory=lambda: _env("LOG_LEVEL", "INFO"))
    log_file: Optional[str] = field(default_factory=lambda: os.getenv("LOG_FILE") or None)

    # Path to the SQLite database file.  A relative path is resolved
    # against the project root by the ``db`` module.  ``:memory:``
    # switches the application to the in-memory store, which forgets
    # everything on restart.
    database_url: str = field(default_factory=lambda: _env("DATABASE_URL", "dogs.db"))

    # What the list page does when the store fails.  ``json`` answers
    # with the store error as a JSON body (status 200), ``html`` renders
    # the error page with status 500.  Any other value is rejected.
    page_error_mode: str = field(default_factory=lambda: _env("PAGE_ERROR_MODE", "json"))

    host: str = field(default_factory=lambda: _env("HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(_env("PORT", "8000")))

    def __post_init__(self) -> None:
        self.page_error_mode = self.page_error_mode.strip().lower()
        if self.page_error_mode not in PAGE_ERROR_MODES:
            raise ValueError(
                f"PAGE_ERROR_MODE must be one of {sorted(PAGE_ERROR_MODES)}, got {self.page_error_mode!r}"
            )


# Instantiated once so other modules share one set of values;
# environment variables must be set before this module is imported.
settings = Settings()
