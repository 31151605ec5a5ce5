"""Default paths, environment variable names, and constants."""

from __future__ import annotations

import platformdirs

APP_NAME = "wp-manager"
APP_AUTHOR = "WPManager"

CONFIG_DIR = platformdirs.user_config_path(APP_NAME, APP_AUTHOR)
CONFIG_FILE = CONFIG_DIR / "config.toml"
DATA_DIR = platformdirs.user_data_path(APP_NAME, APP_AUTHOR)
SITES_FILE = DATA_DIR / "sites.toml"

# Environment variable names
ENV_CONFIG_FILE = "WP_MANAGER_CONFIG"
ENV_SITES_FILE = "WP_MANAGER_SITES_FILE"
ENV_LOG_LEVEL = "WP_MANAGER_LOG_LEVEL"

# Companion plugin REST API
DISCOVERY_PATH = "/wp-json/"
API_NAMESPACE = "/wp-json/wp-manager/v1"
HEADER_API_KEY = "X-WP-Manager-Key"
HEADER_API_SECRET = "X-WP-Manager-Secret"

# Public catalog (wordpress.org)
PLUGIN_CATALOG_URL = "https://api.wordpress.org/plugins/info/1.2/"
THEME_CATALOG_URL = "https://api.wordpress.org/themes/info/1.2/"
CATALOG_PAGE_SIZE = 20

# Defaults
DEFAULT_TIMEOUT = 30.0
DEFAULT_SYNC_INTERVAL = 30
OUTPUT_FORMATS = ("table", "json", "yaml", "csv")
