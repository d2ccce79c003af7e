"""Tests for the check registry."""

import pytest

from cluster_health_checks.check_registry import CheckRegistry
from cluster_health_checks.exceptions import ConfigurationError, DuplicateCheckError
from fakes import FakeCheck


def _registry():
    return CheckRegistry(
        [
            FakeCheck("a", "Cluster Config"),
            FakeCheck("b", "Security"),
            FakeCheck("c", "Networking"),
            FakeCheck("d", "Security"),
        ]
    )


def test_duplicate_id_rejected() -> None:
    registry = _registry()
    with pytest.raises(DuplicateCheckError) as excinfo:
        registry.add(FakeCheck("b"))

    assert excinfo.value.check_id == "b"
    assert isinstance(excinfo.value, ConfigurationError)
    assert len(registry) == 4


def test_filter_preserves_order_and_is_non_destructive() -> None:
    registry = _registry()
    selected = registry.filter(["Security", "Cluster Config"])

    assert [c.id for c in selected] == ["a", "b", "d"]
    assert len(registry) == 4


def test_empty_filter_returns_all() -> None:
    registry = _registry()
    assert [c.id for c in registry.filter([])] == ["a", "b", "c", "d"]
    assert [c.id for c in registry.filter(None)] == ["a", "b", "c", "d"]


def test_get_check_unknown_id() -> None:
    with pytest.raises(KeyError):
        _registry().get_check("missing")


def test_categories_in_registration_order() -> None:
    assert _registry().categories() == ["Cluster Config", "Security", "Networking"]


def test_get_all_checks_is_a_copy() -> None:
    registry = _registry()
    checks = registry.get_all_checks()
    checks.pop("a")

    assert "a" in registry


def test_add_all_appends_in_order() -> None:
    registry = CheckRegistry()
    registry.add_all([FakeCheck("x"), FakeCheck("y")])

    assert len(registry) == 2
    assert [c.id for c in registry.filter()] == ["x", "y"]
    assert "y" in registry
