from __future__ import annotations

from typer.testing import CliRunner

from nodectl import cli
from nodectl.core.errors import ProfileValidationError
from nodectl.core.service import ProfileService

runner = CliRunner()


def test_profiles_command(isolated_profile_dirs):
    result = runner.invoke(cli.app, ["profiles"])
    assert result.exit_code == 0
    assert "shm_link2: SHM-Link 2" in result.stdout
    assert "models: 63090100  model prefixes: 6309" in result.stdout
    assert "tc_link: TC-Link" in result.stdout


def test_features_command(isolated_profile_dirs):
    result = runner.invoke(cli.app, ["features", "63090100", "--firmware", "10.2"])
    assert result.exit_code == 0
    assert "Profile: shm_link2 (SHM-Link 2)" in result.stdout
    assert "sampling modes: sync, non_sync" in result.stdout
    assert "histogram_config" in result.stdout
    assert "hardware_offset: [1] [2] [3]" in result.stdout


def test_features_command_hides_capability_below_min_firmware(isolated_profile_dirs):
    result = runner.invoke(cli.app, ["features", "63090100", "--firmware", "9.4"])
    assert result.exit_code == 0
    assert "histogram_config" not in result.stdout
    assert "fatigue_config" in result.stdout


def test_features_command_unknown_model(isolated_profile_dirs):
    result = runner.invoke(cli.app, ["features", "12340001", "--firmware", "1.0"])
    assert result.exit_code == 1
    assert "Error: Node model 12340001 has no feature profile" in result.stderr
    assert "Traceback" not in result.stderr


def test_features_command_bad_firmware(isolated_profile_dirs):
    result = runner.invoke(cli.app, ["features", "63090100", "--firmware", "ten"])
    assert result.exit_code == 1
    assert "Invalid firmware version 'ten'" in result.stderr


def test_locate_command(isolated_profile_dirs):
    result = runner.invoke(
        cli.app, ["locate", "63100100", "thermocouple_type", "--channel", "1", "--channel", "2", "--firmware", "10.2"]
    )
    assert result.exit_code == 0
    assert "THERMOCPL_TYPE address=204 type=uint16" in result.stdout


def test_locate_command_unmapped_channel(isolated_profile_dirs):
    result = runner.invoke(cli.app, ["locate", "63090100", "hardware_offset", "--channel", "4", "--firmware", "10.2"])
    assert result.exit_code == 1
    assert "Error: The hardware_offset setting is not supported for channel(s) 4" in result.stderr


def test_locate_command_unknown_setting(isolated_profile_dirs):
    result = runner.invoke(cli.app, ["locate", "63090100", "colour", "--channel", "1", "--firmware", "10.2"])
    assert result.exit_code == 1
    assert "Unknown channel setting 'colour'" in result.stderr


def test_profile_error_is_clean(monkeypatch):
    class FailingService:
        def __init__(self) -> None:
            raise ProfileValidationError("broken.yaml: 'id' is a required property")

    monkeypatch.setattr(cli, "ProfileService", FailingService)
    result = runner.invoke(cli.app, ["profiles"])
    assert result.exit_code == 1
    assert "Error: broken.yaml: 'id' is a required property" in result.stderr
    assert "Traceback" not in result.stdout


def test_load_warning_is_printed(monkeypatch, isolated_profile_dirs):
    class WarnService(ProfileService):
        def __init__(self) -> None:
            super().__init__()
            self.load_warnings = ("User profile /tmp/x.yaml overrides packaged profile 'tc_link'",)

    monkeypatch.setattr(cli, "ProfileService", WarnService)
    result = runner.invoke(cli.app, ["profiles"])
    assert result.exit_code == 0
    assert "Warning: User profile /tmp/x.yaml overrides packaged profile 'tc_link'" in result.stderr
