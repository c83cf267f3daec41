"""Observability — logging setup shared by every entrypoint."""

from gmx_installer.core.observability.logging_config import setup_logging  # noqa: F401
