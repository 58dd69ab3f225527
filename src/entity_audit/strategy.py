"""Audit strategy selection.

The blueprint delegates audit persistence to one of two sibling
generators. Exactly one strategy object is built per run from the
``auditFramework`` setting and handed to the pipeline explicitly:

    NoAuditStrategy      -> nothing is composed
    JaversAuditStrategy  -> spring-boot-javers generator
    CustomAuditStrategy  -> spring-boot-custom-audit generator
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, ClassVar

from entity_audit.base import AuditFramework
from entity_audit.config import BlueprintConfig

logger = logging.getLogger(__name__)

# Host callback that composes a sibling generator by namespace.
Composer = Callable[[str], Any]


@dataclass(frozen=True)
class AuditFlags:
    """Boolean convenience flags derived from the blueprint config."""

    audit_framework: AuditFramework = AuditFramework.NO
    audit_framework_custom: bool = False
    audit_framework_javers: bool = False
    audit_framework_any: bool = False
    audit_page: bool = False

    def as_template_context(self) -> dict[str, Any]:
        """Flags under the camelCase names used by the templates."""
        return {
            "auditFramework": self.audit_framework.value,
            "auditFrameworkCustom": self.audit_framework_custom,
            "auditFrameworkJavers": self.audit_framework_javers,
            "auditFrameworkAny": self.audit_framework_any,
            "auditPage": self.audit_page,
        }


def derive_flags(config: BlueprintConfig) -> AuditFlags:
    """Compute the strategy flags for a blueprint configuration."""
    framework = AuditFramework.parse(config.audit_framework)
    return AuditFlags(
        audit_framework=framework,
        audit_framework_custom=framework is AuditFramework.CUSTOM,
        audit_framework_javers=framework is AuditFramework.JAVERS,
        audit_framework_any=framework is not AuditFramework.NO,
        audit_page=config.audit_page,
    )


# =============================================================================
# Strategies
# =============================================================================


class AuditStrategy:
    """Persists audit events through a sibling generator."""

    framework: ClassVar[AuditFramework] = AuditFramework.NO
    namespace: ClassVar[str | None] = None

    def compose(self, composer: Composer | None) -> bool:
        """Compose the sibling generator for this strategy.

        Args:
            composer: Host callback taking the generator namespace.

        Returns:
            True if a generator was composed.
        """
        if self.namespace is None:
            return False
        if composer is None:
            logger.debug(f"No composer supplied, skipping {self.namespace}")
            return False

        logger.info(f"Composing with {self.namespace}")
        composer(self.namespace)
        return True

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} framework={self.framework.value}>"


class NoAuditStrategy(AuditStrategy):
    """No audit history is persisted."""

    framework = AuditFramework.NO
    namespace = None


class JaversAuditStrategy(AuditStrategy):
    """Audit history stored by Javers."""

    framework = AuditFramework.JAVERS
    namespace = "jhipster-entity-audit:spring-boot-javers"


class CustomAuditStrategy(AuditStrategy):
    """Audit history stored in the entity audit event table."""

    framework = AuditFramework.CUSTOM
    namespace = "jhipster-entity-audit:spring-boot-custom-audit"


_STRATEGIES: dict[AuditFramework, type[AuditStrategy]] = {
    AuditFramework.NO: NoAuditStrategy,
    AuditFramework.JAVERS: JaversAuditStrategy,
    AuditFramework.CUSTOM: CustomAuditStrategy,
}


def select_strategy(framework: AuditFramework | str | None) -> AuditStrategy:
    """Build the strategy for a framework value.

    Unset and unrecognized values select NoAuditStrategy.
    """
    return _STRATEGIES[AuditFramework.parse(framework)]()
