from __future__ import annotations

from pathlib import Path

import pytest

from nodectl.core import eeprom_map as ee
from nodectl.core.errors import ProfileValidationError
from nodectl.core.model import ChannelMask, Version
from nodectl.core.profile_loader import load_profiles
from nodectl.core.types import SamplingMode


def _write_profile(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def test_load_packaged_profiles(isolated_profile_dirs) -> None:
    loaded = load_profiles()
    assert {"shm_link2", "sg_link", "tc_link"} <= set(loaded.profiles)
    assert loaded.warnings == ()

    profile = loaded.profiles["shm_link2"]
    assert profile.match.models == (63090100,)
    assert profile.sampling_modes == (SamplingMode.SYNC, SamplingMode.NON_SYNC)
    assert profile.capabilities["histogram_config"] == Version(10, 0)
    assert profile.capabilities["fatigue_config"] is None
    assert profile.channel_groups[0].channels == ChannelMask.of(1)
    assert profile.channel_groups[0].settings["hardware_offset"] == ee.HW_OFFSET_1


def test_unknown_register_rejected(isolated_profile_dirs: Path) -> None:
    _write_profile(
        isolated_profile_dirs / "cfg" / "nodectl" / "profiles" / "bad.yaml",
        """
id: bad_register
name: Bad Register
match:
  model_prefix: [1234]
channels: [1]
sampling_modes: [sync]
channel_groups:
  - channels: [1]
    settings:
      hardware_offset: HW_OFFSET_99
""",
    )

    with pytest.raises(ProfileValidationError) as exc:
        load_profiles()

    assert "HW_OFFSET_99" in str(exc.value)


def test_missing_required_keys_rejected(isolated_profile_dirs: Path) -> None:
    _write_profile(
        isolated_profile_dirs / "cfg" / "nodectl" / "profiles" / "missing.yaml",
        """
id: missing
name: Missing
match:
  model_prefix: [1234]
channels: [1]
""",
    )

    with pytest.raises(ProfileValidationError):
        load_profiles()


def test_unquoted_firmware_version_rejected(isolated_profile_dirs: Path) -> None:
    _write_profile(
        isolated_profile_dirs / "cfg" / "nodectl" / "profiles" / "float.yaml",
        """
id: float_version
name: Float Version
match:
  model_prefix: [1234]
channels: [1]
sampling_modes: [sync]
capabilities:
  - name: histogram_config
    min_firmware: 10.10
""",
    )

    with pytest.raises(ProfileValidationError):
        load_profiles()


def test_auto_balance_channel_needs_offset_register(isolated_profile_dirs: Path) -> None:
    _write_profile(
        isolated_profile_dirs / "data" / "nodectl" / "profiles" / "balance.yaml",
        """
id: no_offset
name: No Offset
match:
  model_prefix: [1234]
channels: [1, 2]
sampling_modes: [sync]
auto_balance_channels: [2]
channel_groups:
  - channels: [1]
    settings:
      hardware_offset: HW_OFFSET_1
""",
    )

    with pytest.raises(ProfileValidationError) as exc:
        load_profiles()

    assert "auto balance channel 2" in str(exc.value)


def test_channel_group_with_undeclared_channel_rejected(isolated_profile_dirs: Path) -> None:
    _write_profile(
        isolated_profile_dirs / "cfg" / "nodectl" / "profiles" / "undeclared.yaml",
        """
id: undeclared
name: Undeclared
match:
  model_prefix: [1234]
channels: [1]
sampling_modes: [sync]
channel_groups:
  - channels: [3]
    settings:
      hardware_gain: HW_GAIN_3
""",
    )

    with pytest.raises(ProfileValidationError):
        load_profiles()


def test_user_profile_overrides_packaged(isolated_profile_dirs: Path) -> None:
    _write_profile(
        isolated_profile_dirs / "cfg" / "nodectl" / "profiles" / "override.yaml",
        """
id: tc_link
name: User TC-Link
match:
  model_prefix: [6310]
channels: [1]
sampling_modes: [sync]
""",
    )

    loaded = load_profiles()
    assert loaded.profiles["tc_link"].name == "User TC-Link"
    assert loaded.profiles["tc_link"].channels == (1,)
    assert any("overrides" in warning for warning in loaded.warnings)


def test_duplicate_yaml_keys_rejected(isolated_profile_dirs: Path) -> None:
    _write_profile(
        isolated_profile_dirs / "cfg" / "nodectl" / "profiles" / "dup.yaml",
        """
id: dup
name: Duplicate
match:
  model_prefix: [1234]
channels: [1]
sampling_modes: [sync]
channel_groups:
  - channels: [1]
    settings:
      hardware_gain: HW_GAIN_1
      hardware_gain: HW_GAIN_2
""",
    )

    with pytest.raises(ProfileValidationError):
        load_profiles()
