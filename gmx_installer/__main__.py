"""Allow ``python -m gmx_installer``."""

from gmx_installer.main import cli

cli()
