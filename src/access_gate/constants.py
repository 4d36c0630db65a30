"""Application-wide constants for access-gate.

Constants that define application behavior.
For user-configurable settings per deployment, see config.py.
"""

__all__ = [
    # Application identity
    "APP_NAME",
    "DEFAULT_CONFIG_PATH",
    # Block rules
    "DEFAULT_BLOCK_STATUS_CODE",
    "DEFAULT_BLOCK_BODY",
    "BLOCK_CONTENT_TYPE",
    # Credentials
    "DEFAULT_CREDENTIAL_FIELD_DELIMITER",
    "DEFAULT_CREDENTIAL_PAIR_DELIMITER",
    # Challenge
    "DEFAULT_REALM",
    # Serve command
    "DEFAULT_SERVE_HOST",
    "DEFAULT_SERVE_PORT",
]

from pathlib import Path

from platformdirs import user_config_dir

# ============================================================================
# Application Identity
# ============================================================================

# Application name used for logger names, directory names, etc.
APP_NAME: str = "access-gate"

# Platform-specific paths:
# - macOS: ~/Library/Application Support/access-gate/config.json
# - Linux: ~/.config/access-gate/config.json
# - Windows: %APPDATA%\access-gate\config.json
DEFAULT_CONFIG_PATH: Path = Path(user_config_dir(APP_NAME)) / "config.json"

# ============================================================================
# Block Rules
# ============================================================================

DEFAULT_BLOCK_STATUS_CODE: int = 403
DEFAULT_BLOCK_BODY: tuple[str, ...] = ("<h1>Forbidden</h1>",)
BLOCK_CONTENT_TYPE: str = "text/html"

# ============================================================================
# Credentials
# ============================================================================

# "user,pass" separates the two fields of one pair
DEFAULT_CREDENTIAL_FIELD_DELIMITER: str = ","
# "user1,pass1;user2,pass2" separates pairs
DEFAULT_CREDENTIAL_PAIR_DELIMITER: str = ";"

# ============================================================================
# Credential Challenge (HTTP Basic)
# ============================================================================

DEFAULT_REALM: str = "Restricted Area"

# ============================================================================
# Serve Command
# ============================================================================

DEFAULT_SERVE_HOST: str = "127.0.0.1"
DEFAULT_SERVE_PORT: int = 8000
