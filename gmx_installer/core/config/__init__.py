from gmx_installer.core.config.loader import (  # noqa: F401
    CONFIG_FILE,
    ConfigError,
    find_config_file,
    load_config,
)
from gmx_installer.core.config.settings import InstallerConfig  # noqa: F401
