"""Setup phase for the gatekeeper.

Rules are declared on a GatekeeperBuilder, then build() returns a frozen
Gatekeeper. Each declaration appends a new rule to its tier and returns it,
so further settings can be applied before building:

    builder = GatekeeperBuilder()
    builder.options(auth=True)
    builder.allow(origins="127.0.0.1")
    builder.block(resources="/admin,/internal", delimiter=",", status_code=404)
    restricted = builder.restrict(all_resources=True)
    restricted.add_credentials("admin,secret")
    gatekeeper = builder.build()

Builders can also be populated from a validated AccessGateConfig via
GatekeeperBuilder.from_config().
"""

from __future__ import annotations

__all__ = [
    "GatekeeperBuilder",
    "build_gatekeeper",
]

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from access_gate.constants import (
    DEFAULT_CREDENTIAL_FIELD_DELIMITER,
    DEFAULT_CREDENTIAL_PAIR_DELIMITER,
)
from access_gate.pdp.engine import Gatekeeper
from access_gate.pdp.matcher import Delimiter
from access_gate.pdp.rules import AllowRule, BlockRule, RestrictRule, Rule
from access_gate.telemetry.system_logger import get_system_logger

if TYPE_CHECKING:
    from access_gate.config import AccessGateConfig, RuleConfig


class GatekeeperBuilder:
    """Collects options and rule declarations for a Gatekeeper.

    Attributes:
        enabled: Gate on/off switch (default True).
        auth_enabled: Restrict tier on/off switch (default True).
    """

    def __init__(self) -> None:
        self.enabled: bool = True
        self.auth_enabled: bool = True
        self._allow_rules: list[AllowRule] = []
        self._block_rules: list[BlockRule] = []
        self._restrict_rules: list[RestrictRule] = []

    def options(self, *, enabled: bool | None = None, auth: bool | None = None) -> GatekeeperBuilder:
        """Merge option toggles. Options left as None keep their value."""
        if enabled is not None:
            self.enabled = enabled
        if auth is not None:
            self.auth_enabled = auth
        return self

    def allow(
        self,
        *,
        resources: Any = None,
        origins: Any = None,
        delimiter: Delimiter = None,
        resource_delimiter: Delimiter = None,
        origin_delimiter: Delimiter = None,
        all_resources: bool = False,
    ) -> AllowRule:
        """Declare an allow rule. Returns the new rule."""
        rule = AllowRule()
        self._allow_rules.append(rule)
        _apply_match_settings(
            rule,
            resources,
            origins,
            resource_delimiter if resource_delimiter is not None else delimiter,
            origin_delimiter if origin_delimiter is not None else delimiter,
            all_resources,
        )
        return rule

    def block(
        self,
        *,
        resources: Any = None,
        origins: Any = None,
        delimiter: Delimiter = None,
        resource_delimiter: Delimiter = None,
        origin_delimiter: Delimiter = None,
        all_resources: bool = False,
        status_code: int | None = None,
        body: Iterable[str | bytes] | None = None,
    ) -> BlockRule:
        """Declare a block rule. Returns the new rule."""
        rule = BlockRule()
        self._block_rules.append(rule)
        _apply_match_settings(
            rule,
            resources,
            origins,
            resource_delimiter if resource_delimiter is not None else delimiter,
            origin_delimiter if origin_delimiter is not None else delimiter,
            all_resources,
        )
        if status_code is not None:
            rule.set_status_code(status_code)
        if body is not None:
            rule.set_body(body)
        return rule

    def restrict(
        self,
        *,
        resources: Any = None,
        origins: Any = None,
        delimiter: Delimiter = None,
        resource_delimiter: Delimiter = None,
        origin_delimiter: Delimiter = None,
        all_resources: bool = False,
        credentials: Any = None,
        field_delimiter: Delimiter = DEFAULT_CREDENTIAL_FIELD_DELIMITER,
        pair_delimiter: Delimiter = DEFAULT_CREDENTIAL_PAIR_DELIMITER,
    ) -> RestrictRule:
        """Declare a restrict rule. Returns the new rule."""
        rule = RestrictRule()
        self._restrict_rules.append(rule)
        _apply_match_settings(
            rule,
            resources,
            origins,
            resource_delimiter if resource_delimiter is not None else delimiter,
            origin_delimiter if origin_delimiter is not None else delimiter,
            all_resources,
        )
        if credentials is not None:
            rule.add_credentials(credentials, field_delimiter=field_delimiter, pair_delimiter=pair_delimiter)
        return rule

    def build(self) -> Gatekeeper:
        """Snapshot the declarations into a frozen Gatekeeper."""
        gatekeeper = Gatekeeper(
            enabled=self.enabled,
            auth_enabled=self.auth_enabled,
            allow_rules=tuple(self._allow_rules),
            block_rules=tuple(self._block_rules),
            restrict_rules=tuple(self._restrict_rules),
        )
        get_system_logger().debug(
            {
                "event": "gatekeeper_built",
                "message": f"Gatekeeper built with {gatekeeper.rule_count} rules",
                "component": "builder",
                "details": {
                    "enabled": gatekeeper.enabled,
                    "auth_enabled": gatekeeper.auth_enabled,
                    "allow": len(gatekeeper.allow_rules),
                    "block": len(gatekeeper.block_rules),
                    "restrict": len(gatekeeper.restrict_rules),
                },
            }
        )
        return gatekeeper

    @classmethod
    def from_config(cls, config: "AccessGateConfig") -> GatekeeperBuilder:
        """Populate a builder from a validated configuration.

        Args:
            config: Validated AccessGateConfig.

        Returns:
            Builder holding one rule per configured entry, in file order.
        """
        builder = cls()
        builder.options(enabled=config.enabled, auth=config.auth)

        for allow_cfg in config.allow:
            builder.allow(**_match_kwargs(allow_cfg))

        for block_cfg in config.block:
            builder.block(
                **_match_kwargs(block_cfg),
                status_code=block_cfg.status_code,
                body=block_cfg.body,
            )

        for restrict_cfg in config.restrict:
            builder.restrict(
                **_match_kwargs(restrict_cfg),
                credentials=restrict_cfg.compiled_credentials(),
                field_delimiter=restrict_cfg.compiled_field_delimiter(),
                pair_delimiter=restrict_cfg.compiled_pair_delimiter(),
            )

        return builder


def build_gatekeeper(config: "AccessGateConfig") -> Gatekeeper:
    """Build a frozen Gatekeeper from a validated configuration."""
    return GatekeeperBuilder.from_config(config).build()


def _apply_match_settings(
    rule: Rule,
    resources: Any,
    origins: Any,
    resource_delimiter: Delimiter,
    origin_delimiter: Delimiter,
    all_resources: bool,
) -> None:
    if resources is not None:
        rule.add_resources(resources, delimiter=resource_delimiter)
    if origins is not None:
        rule.add_origins(origins, delimiter=origin_delimiter)
    if all_resources:
        rule.mark_matches_everything()


def _match_kwargs(rule_cfg: "RuleConfig") -> dict[str, Any]:
    return {
        "resources": rule_cfg.compiled_resources(),
        "origins": rule_cfg.compiled_origins(),
        "delimiter": rule_cfg.compiled_delimiter(),
        "resource_delimiter": rule_cfg.compiled_resource_delimiter(),
        "origin_delimiter": rule_cfg.compiled_origin_delimiter(),
        "all_resources": rule_cfg.all_resources,
    }
