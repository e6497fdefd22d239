"""Identity registry and badge directory."""

from __future__ import annotations

import pytest

from relay.identity import BadgeDirectory, IdentityRegistry, normalize_address


@pytest.fixture
def registry() -> IdentityRegistry:
    return IdentityRegistry()


class TestIdentityRegistry:
    def test_upsert_lowercases_address(self, registry: IdentityRegistry) -> None:
        registry.upsert("c1", "alice", "0xABcD")
        assert registry.address_of("c1") == "0xabcd"
        assert registry.display_name_of("c1") == "alice"

    def test_unknown_connection_has_no_address(self, registry: IdentityRegistry) -> None:
        assert registry.address_of("nobody") == ""

    def test_empty_address_keeps_previous(self, registry: IdentityRegistry) -> None:
        registry.upsert("c1", "alice", "0xAB")
        registry.upsert("c1", "alice2", "")
        assert registry.address_of("c1") == "0xab"
        assert registry.display_name_of("c1") == "alice2"

    def test_none_display_name_keeps_previous(self, registry: IdentityRegistry) -> None:
        registry.upsert("c1", "alice", "")
        registry.upsert("c1", None, "0xAB")
        assert registry.display_name_of("c1") == "alice"
        assert registry.address_of("c1") == "0xab"

    def test_new_address_moves_reverse_index(self, registry: IdentityRegistry) -> None:
        registry.upsert("c1", "alice", "0xAA")
        registry.upsert("c1", "alice", "0xBB")
        assert registry.connections_for("0xaa") == []
        assert registry.connections_for("0xBB") == ["c1"]

    def test_connections_for_collects_every_session(self, registry: IdentityRegistry) -> None:
        registry.upsert("c1", "alice", "0xAB")
        registry.upsert("c2", "alice-tab", "0xab")
        registry.upsert("c3", "bob", "0xCD")
        assert registry.connections_for("0xAb") == ["c1", "c2"]

    def test_remove_is_idempotent(self, registry: IdentityRegistry) -> None:
        registry.upsert("c1", "alice", "0xAB")
        registry.remove("c1")
        registry.remove("c1")
        registry.remove("never-seen")
        assert "c1" not in registry
        assert len(registry) == 0
        assert registry.connections_for("0xab") == []


class TestBadgeDirectory:
    def test_unknown_address_has_no_badge(self) -> None:
        assert BadgeDirectory().has_badge("0xab") is False

    def test_set_is_case_insensitive(self) -> None:
        badges = BadgeDirectory()
        assert badges.set_badge("0xAB", True) is True
        assert badges.has_badge("0xab") is True
        assert badges.has_badge("0XAB") is True

    def test_last_write_wins(self) -> None:
        badges = BadgeDirectory()
        badges.set_badge("0xab", True)
        badges.set_badge("0xAB", False)
        assert badges.has_badge("0xab") is False
        assert len(badges) == 1

    @pytest.mark.parametrize("address", ["", None, "   "])
    def test_empty_address_ignored(self, address) -> None:
        badges = BadgeDirectory()
        assert badges.set_badge(address, True) is False
        assert len(badges) == 0


@pytest.mark.parametrize(
    "raw, expected",
    [("0xAB", "0xab"), ("  0xAb ", "0xab"), ("", ""), (None, ""), (42, "")],
)
def test_normalize_address(raw, expected) -> None:
    assert normalize_address(raw) == expected
