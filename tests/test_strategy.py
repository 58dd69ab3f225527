"""Tests for audit strategy selection."""

from __future__ import annotations

import pytest

from entity_audit.base import AuditFramework
from entity_audit.config import BlueprintConfig
from entity_audit.strategy import (
    CustomAuditStrategy,
    JaversAuditStrategy,
    NoAuditStrategy,
    derive_flags,
    select_strategy,
)


class TestDeriveFlags:
    """Tests for strategy flags."""

    def test_javers(self):
        flags = derive_flags(BlueprintConfig(audit_framework="javers"))

        assert flags.audit_framework_javers is True
        assert flags.audit_framework_custom is False
        assert flags.audit_framework_any is True

    def test_custom(self):
        flags = derive_flags(BlueprintConfig(audit_framework="custom"))

        assert flags.audit_framework_javers is False
        assert flags.audit_framework_custom is True
        assert flags.audit_framework_any is True

    @pytest.mark.parametrize("value", ["no", None, "", "unknown"])
    def test_disabled(self, value):
        flags = derive_flags(BlueprintConfig(audit_framework=value))

        assert flags.audit_framework_javers is False
        assert flags.audit_framework_custom is False
        assert flags.audit_framework_any is False

    def test_audit_page_passed_through(self):
        flags = derive_flags(BlueprintConfig(audit_page=True))
        assert flags.audit_page is True

    def test_template_context(self):
        context = derive_flags(BlueprintConfig(audit_framework="javers")).as_template_context()

        assert context == {
            "auditFramework": "javers",
            "auditFrameworkCustom": False,
            "auditFrameworkJavers": True,
            "auditFrameworkAny": True,
            "auditPage": False,
        }


class TestSelectStrategy:
    """Tests for strategy selection and composition."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("javers", JaversAuditStrategy),
            ("custom", CustomAuditStrategy),
            ("no", NoAuditStrategy),
            (None, NoAuditStrategy),
            ("other", NoAuditStrategy),
            (AuditFramework.JAVERS, JaversAuditStrategy),
        ],
    )
    def test_select(self, value, expected):
        assert type(select_strategy(value)) is expected

    @pytest.mark.parametrize(
        "value,namespace",
        [
            ("javers", "jhipster-entity-audit:spring-boot-javers"),
            ("custom", "jhipster-entity-audit:spring-boot-custom-audit"),
        ],
    )
    def test_compose_once(self, value, namespace):
        composed = []

        assert select_strategy(value).compose(composed.append) is True
        assert composed == [namespace]

    def test_no_strategy_composes_nothing(self):
        composed = []

        assert select_strategy("no").compose(composed.append) is False
        assert composed == []

    def test_compose_without_composer(self):
        assert select_strategy("javers").compose(None) is False
