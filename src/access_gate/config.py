"""Application configuration for access-gate.

Defines configuration models for gate options, rule tiers and logging.
Config is a JSON file, by default stored at the OS-appropriate location
(see constants.DEFAULT_CONFIG_PATH).

Example config:
    {
      "enabled": true,
      "auth": true,
      "allow": [{"origins": ["127.0.0.1"]}],
      "block": [{"resources": "/admin,/internal", "delimiter": ","}],
      "restrict": [
        {
          "resources": [{"regex": "^/reports"}],
          "credentials": "admin,secret;ops,hunter2"
        }
      ]
    }

Pre-built patterns are written as {"regex": "...", "ignore_case": false}.
Plain strings are always exact matches.

Example usage:
    config = AccessGateConfig.load_from_file(config_path)
    gatekeeper = build_gatekeeper(config)
"""

from __future__ import annotations

__all__ = [
    "AccessGateConfig",
    "AllowRuleConfig",
    "BlockRuleConfig",
    "CredentialEntry",
    "LoggingConfig",
    "RegexValue",
    "RestrictRuleConfig",
    "RuleConfig",
]

import json
import re
from pathlib import Path
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing_extensions import TypeAliasType

from access_gate.constants import (
    DEFAULT_BLOCK_BODY,
    DEFAULT_BLOCK_STATUS_CODE,
    DEFAULT_CREDENTIAL_FIELD_DELIMITER,
    DEFAULT_CREDENTIAL_PAIR_DELIMITER,
    DEFAULT_REALM,
)
from access_gate.utils.file_helpers import load_validated_json, require_file_exists


# =============================================================================
# Pattern Values
# =============================================================================


class RegexValue(BaseModel):
    """JSON form of a pre-built pattern.

    Attributes:
        regex: Regular expression source. Used unanchored.
        ignore_case: Compile with re.IGNORECASE.
    """

    regex: str = Field(min_length=1)
    ignore_case: bool = False

    model_config = ConfigDict(frozen=True, extra="forbid")

    @field_validator("regex")
    @classmethod
    def must_compile(cls, v: str) -> str:
        """Reject invalid regular expressions at load time."""
        try:
            re.compile(v)
        except re.error as e:
            raise ValueError(f"Invalid regular expression {v!r}: {e}") from e
        return v

    def compile(self) -> re.Pattern[str]:
        return re.compile(self.regex, re.IGNORECASE if self.ignore_case else 0)


# A single value or a (nested) list of values (OR logic)
PatternItem = str | RegexValue
PatternTree = TypeAliasType("PatternTree", "Union[str, RegexValue, list[PatternTree]]")
PatternValue = Optional[PatternTree]


def _compile_item(item: PatternItem) -> str | re.Pattern[str]:
    return item.compile() if isinstance(item, RegexValue) else item


def _compile_value(value: PatternValue) -> Any:
    if value is None:
        return None
    if isinstance(value, list):
        return [_compile_value(item) for item in value]
    return _compile_item(value)


class CredentialEntry(BaseModel):
    """One username/password pair in object form.

    Attributes:
        username: Exact username or pre-built pattern.
        password: Exact password or pre-built pattern.
    """

    username: PatternItem
    password: PatternItem

    model_config = ConfigDict(frozen=True, extra="forbid")

    def compiled(self) -> dict[str, str | re.Pattern[str]]:
        return {"username": _compile_item(self.username), "password": _compile_item(self.password)}


CredentialTree = TypeAliasType("CredentialTree", "Union[str, CredentialEntry, list[CredentialTree]]")
CredentialValue = Optional[CredentialTree]


def _compile_credentials(value: CredentialTree) -> Any:
    if isinstance(value, list):
        return [_compile_credentials(item) for item in value]
    return value.compiled() if isinstance(value, CredentialEntry) else value


# =============================================================================
# Rule Configuration
# =============================================================================


class RuleConfig(BaseModel):
    """Matching settings shared by every rule tier.

    Attributes:
        resources: Request paths (exact, optional trailing "/") or patterns.
        origins: Client addresses (exact) or patterns.
        delimiter: Splits plain strings in resources/origins.
        resource_delimiter: Splits resources only; overrides delimiter.
        origin_delimiter: Splits origins only; overrides delimiter.
        all_resources: Rule applies to every request.
    """

    resources: PatternValue = None
    origins: PatternValue = None
    delimiter: str | RegexValue | None = None
    resource_delimiter: str | RegexValue | None = None
    origin_delimiter: str | RegexValue | None = None
    all_resources: bool = False

    model_config = ConfigDict(frozen=True, extra="forbid")

    @field_validator("delimiter", "resource_delimiter", "origin_delimiter")
    @classmethod
    def reject_empty_delimiter(cls, v: str | RegexValue | None) -> str | RegexValue | None:
        """Empty delimiters cannot split anything."""
        if isinstance(v, str) and not v:
            raise ValueError("Delimiter cannot be empty")
        return v

    def compiled_resources(self) -> Any:
        return _compile_value(self.resources)

    def compiled_origins(self) -> Any:
        return _compile_value(self.origins)

    def compiled_delimiter(self) -> str | re.Pattern[str] | None:
        return _compile_item(self.delimiter) if self.delimiter is not None else None

    def compiled_resource_delimiter(self) -> str | re.Pattern[str] | None:
        return _compile_item(self.resource_delimiter) if self.resource_delimiter is not None else None

    def compiled_origin_delimiter(self) -> str | re.Pattern[str] | None:
        return _compile_item(self.origin_delimiter) if self.origin_delimiter is not None else None


class AllowRuleConfig(RuleConfig):
    """Allow rule: matching requests bypass block and restrict rules."""


class BlockRuleConfig(RuleConfig):
    """Block rule: matching requests get status_code and body.

    Attributes:
        status_code: HTTP status of the rejection.
        body: HTML body chunks, concatenated in order.
    """

    status_code: int = Field(default=DEFAULT_BLOCK_STATUS_CODE, ge=100, le=599)
    body: list[str] = Field(default_factory=lambda: list(DEFAULT_BLOCK_BODY))


class RestrictRuleConfig(RuleConfig):
    """Restrict rule: matching requests must present valid credentials.

    Attributes:
        credentials: "user,pass" strings (pairs separated by pair_delimiter),
            credential objects, or a list of both.
        field_delimiter: Separates username from password.
        pair_delimiter: Separates pairs within one string.
    """

    credentials: CredentialValue = None
    field_delimiter: str | RegexValue = DEFAULT_CREDENTIAL_FIELD_DELIMITER
    pair_delimiter: str | RegexValue = DEFAULT_CREDENTIAL_PAIR_DELIMITER

    def compiled_credentials(self) -> Any:
        if self.credentials is None:
            return None
        compiled = _compile_credentials(self.credentials)
        return compiled if isinstance(compiled, list) else [compiled]

    def compiled_field_delimiter(self) -> str | re.Pattern[str]:
        return _compile_item(self.field_delimiter)

    def compiled_pair_delimiter(self) -> str | re.Pattern[str]:
        return _compile_item(self.pair_delimiter)


# =============================================================================
# Logging Configuration
# =============================================================================


class LoggingConfig(BaseModel):
    """Logging configuration.

    Attributes:
        log_level: Console log level.
        log_file: Optional JSONL file for WARNING and above.
    """

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_file: str | None = None

    model_config = ConfigDict(frozen=True, extra="forbid")


# =============================================================================
# Application Configuration
# =============================================================================


class AccessGateConfig(BaseModel):
    """Complete access-gate configuration.

    Attributes:
        enabled: Gate on/off switch. When False every request passes.
        auth: Restrict tier on/off switch.
        realm: Realm announced in credential challenges.
        allow: Allow rules, in precedence order.
        block: Block rules, in precedence order.
        restrict: Restrict rules, in precedence order.
        logging: Logging settings.
    """

    enabled: bool = True
    auth: bool = True
    realm: str = Field(default=DEFAULT_REALM, min_length=1)
    allow: list[AllowRuleConfig] = Field(default_factory=list)
    block: list[BlockRuleConfig] = Field(default_factory=list)
    restrict: list[RestrictRuleConfig] = Field(default_factory=list)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = ConfigDict(frozen=True, extra="forbid")

    @field_validator("realm")
    @classmethod
    def reject_quote_in_realm(cls, v: str) -> str:
        """The realm is sent inside a quoted header value."""
        if '"' in v:
            raise ValueError("Realm cannot contain double quotes")
        return v

    @classmethod
    def load_from_file(cls, config_path: Path) -> AccessGateConfig:
        """Load and validate configuration from a JSON file.

        Args:
            config_path: Path to the JSON config file.

        Returns:
            Validated AccessGateConfig.

        Raises:
            ConfigurationError: If the file is missing, unreadable or invalid.
        """
        require_file_exists(config_path, file_type="configuration")
        return load_validated_json(config_path, cls, file_type="configuration")

    def save_to_file(self, config_path: Path) -> None:
        """Write configuration as indented JSON, creating parent directories."""
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(
            json.dumps(self.model_dump(mode="json", exclude_none=True), indent=2) + "\n",
            encoding="utf-8",
        )
