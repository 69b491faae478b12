"""Tests for the Subsystem Registry."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from selfheal.subsystems.registry import (
    DEFAULT_NAMES,
    RegistryError,
    Status,
    Subsystem,
    SubsystemRegistry,
)


# ── Subsystem ────────────────────────────────────────────────────────────────


class TestSubsystem:
    def test_defaults(self) -> None:
        ss = Subsystem(name="CPU")
        assert ss.status == Status.HEALTHY
        assert ss.health == 100
        assert ss.restart_count == 0

    def test_mark_failed_zeroes_health(self) -> None:
        ss = Subsystem(name="CPU")
        ss.mark_failed()
        assert ss.status == Status.FAILED
        assert ss.health == 0

    def test_recovering_has_zero_health(self) -> None:
        ss = Subsystem(name="CPU")
        ss.mark_recovering()
        assert ss.status == Status.RECOVERING
        assert ss.health == 0

    def test_mark_healthy_restores_health(self) -> None:
        ss = Subsystem(name="CPU")
        ss.mark_failed()
        ss.mark_healthy()
        assert ss.is_healthy
        assert ss.health == 100

    def test_name_is_read_only(self) -> None:
        ss = Subsystem(name="Network")
        with pytest.raises(AttributeError):
            ss.name = "Disk"
        assert ss.name == "Network"

    def test_status_fields_stay_mutable(self) -> None:
        ss = Subsystem(name="Network")
        ss.restart_count += 1
        assert ss.restart_count == 1


# ── Registry ─────────────────────────────────────────────────────────────────


class TestSubsystemRegistry:
    def test_default_five_in_order(self) -> None:
        reg = SubsystemRegistry()
        assert len(reg) == 5
        assert [ss.name for ss in reg] == ["CPU", "Memory", "I/O", "Network", "Storage"]

    def test_ids_are_one_based(self) -> None:
        reg = SubsystemRegistry()
        assert reg.get(1).name == "CPU"
        assert reg.get(5).name == "Storage"

    @pytest.mark.parametrize("subsystem_id", [0, -1, 6, 100])
    def test_out_of_range_returns_none(self, subsystem_id: int) -> None:
        assert SubsystemRegistry().get(subsystem_id) is None

    def test_ids_are_stable(self) -> None:
        reg = SubsystemRegistry()
        first = reg.get(3)
        first.mark_failed()
        assert reg.get(3) is first

    def test_items_and_failed_ids(self) -> None:
        reg = SubsystemRegistry()
        reg.get(2).mark_failed()
        reg.get(4).mark_failed()
        assert [i for i, _ in reg.items()] == [1, 2, 3, 4, 5]
        assert reg.failed_ids() == [2, 4]

    def test_empty_names_rejected(self) -> None:
        with pytest.raises(RegistryError):
            SubsystemRegistry([])

    def test_duplicate_names_rejected(self) -> None:
        with pytest.raises(RegistryError):
            SubsystemRegistry(["CPU", "CPU"])


# ── YAML loading ─────────────────────────────────────────────────────────────


class TestFromYaml:
    def test_missing_file_uses_defaults(self, tmp_path: Path) -> None:
        reg = SubsystemRegistry.from_yaml(tmp_path / "nope.yaml")
        assert [ss.name for ss in reg] == list(DEFAULT_NAMES)

    def test_loads_names(self, tmp_path: Path) -> None:
        path = tmp_path / "subsystems.yaml"
        path.write_text(yaml.dump({"subsystems": ["GPU", "Cache", "Bus"]}))
        reg = SubsystemRegistry.from_yaml(path)
        assert [ss.name for ss in reg] == ["GPU", "Cache", "Bus"]

    def test_malformed_falls_back(self, tmp_path: Path) -> None:
        path = tmp_path / "subsystems.yaml"
        path.write_text("subsystems: [unclosed")
        reg = SubsystemRegistry.from_yaml(path)
        assert len(reg) == 5

    def test_empty_list_falls_back(self, tmp_path: Path) -> None:
        path = tmp_path / "subsystems.yaml"
        path.write_text(yaml.dump({"subsystems": []}))
        reg = SubsystemRegistry.from_yaml(path)
        assert len(reg) == 5

    def test_scalar_value_falls_back(self, tmp_path: Path) -> None:
        path = tmp_path / "subsystems.yaml"
        path.write_text("subsystems: CPU\n")
        reg = SubsystemRegistry.from_yaml(path)
        assert [ss.name for ss in reg] == list(DEFAULT_NAMES)

    def test_mapping_value_falls_back(self, tmp_path: Path) -> None:
        path = tmp_path / "subsystems.yaml"
        path.write_text(yaml.dump({"subsystems": {"CPU": 1, "GPU": 2}}))
        reg = SubsystemRegistry.from_yaml(path)
        assert [ss.name for ss in reg] == list(DEFAULT_NAMES)
