"""Feature profile loading and validation for YAML-based node profiles."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from importlib import resources
from importlib.resources.abc import Traversable
from pathlib import Path
from typing import Any

import yaml
from jsonschema import ValidationError, validators

from nodectl.core import eeprom_map
from nodectl.core.errors import ProfileLoadError, ProfileValidationError
from nodectl.core.model import (
    ChannelGroup,
    ChannelMask,
    EepromLocation,
    FeatureProfile,
    ProfileMatch,
    Version,
)
from nodectl.core.types import ChannelSetting, SamplingMode

LOGGER = logging.getLogger(__name__)


class UniqueKeyLoader(yaml.SafeLoader):
    """YAML loader that rejects duplicate mapping keys."""


UniqueKeyLoader.yaml_implicit_resolvers = {
    key: list(value) for key, value in yaml.SafeLoader.yaml_implicit_resolvers.items()
}

for first_char, mappings in list(UniqueKeyLoader.yaml_implicit_resolvers.items()):
    UniqueKeyLoader.yaml_implicit_resolvers[first_char] = [
        (tag, regexp)
        for tag, regexp in mappings
        if tag != "tag:yaml.org,2002:bool"
    ]


def _construct_mapping(loader: UniqueKeyLoader, node: yaml.Node, deep: bool = False) -> dict[str, Any]:
    mapping: dict[str, Any] = {}
    for key_node, value_node in node.value:
        key = loader.construct_object(key_node, deep=deep)
        if key in mapping:
            raise ProfileValidationError(f"Duplicate key '{key}' in YAML document")
        mapping[key] = loader.construct_object(value_node, deep=deep)
    return mapping


UniqueKeyLoader.add_constructor(
    yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG,
    _construct_mapping,
)


@dataclass(frozen=True)
class LoadedProfiles:
    profiles: dict[str, FeatureProfile]
    warnings: tuple[str, ...]


def _load_schema_validator() -> Any:
    schema_text = resources.files("nodectl.schemas").joinpath("profile.schema.json").read_text(
        encoding="utf-8"
    )
    schema = json.loads(schema_text)
    validator_cls = validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema)


def _profile_dirs() -> tuple[Path, Path]:
    xdg_config = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    xdg_data = Path(os.environ.get("XDG_DATA_HOME", Path.home() / ".local/share"))
    return xdg_config / "nodectl/profiles", xdg_data / "nodectl/profiles"


def _read_yaml(path: Path | Traversable) -> dict[str, Any]:
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ProfileLoadError(f"Could not read profile file {path}: {exc}") from exc

    try:
        loaded = yaml.load(content, Loader=UniqueKeyLoader)
    except yaml.YAMLError as exc:
        raise ProfileValidationError(f"Invalid YAML in {path}: {exc}") from exc

    if not isinstance(loaded, dict):
        raise ProfileValidationError(f"Profile file {path} must contain a mapping at root")
    return loaded


def _parse_version(value: str, *, context: str) -> Version:
    try:
        return Version.parse(str(value))
    except ValueError as exc:
        raise ProfileValidationError(f"{context}: {exc}") from exc


def _resolve_location(name: str, *, context: str) -> EepromLocation:
    location = eeprom_map.LOCATIONS.get(name)
    if location is None:
        raise ProfileValidationError(f"{context} refers to unknown register '{name}'")
    return location


def _build_channel_group(doc: dict[str, Any], channels: tuple[int, ...], *, context: str) -> ChannelGroup:
    unknown = [ch for ch in doc["channels"] if ch not in channels]
    if unknown:
        raise ProfileValidationError(f"{context} uses undeclared channel(s) {unknown}")

    settings: dict[str, EepromLocation] = {}
    for setting_name, register_name in doc["settings"].items():
        setting = ChannelSetting(setting_name)
        settings[setting.value] = _resolve_location(register_name, context=f"{context}.{setting_name}")

    slope = settings.get(ChannelSetting.LINEAR_EQUATION.value)
    if slope is not None and slope.address not in eeprom_map.LINEAR_EQUATION_OFFSETS:
        raise ProfileValidationError(f"{context}.linear_equation must name a calibration slope register")

    return ChannelGroup(channels=ChannelMask.of(*doc["channels"]), settings=settings)


def _build_profile(doc: dict[str, Any], source: Path | Traversable) -> FeatureProfile:
    validator = _load_schema_validator()
    try:
        validator.validate(doc)
    except ValidationError as exc:
        path = ".".join(str(p) for p in exc.path)
        where = f" ({path})" if path else ""
        raise ProfileValidationError(f"Schema validation failed for {source}{where}: {exc.message}") from exc

    profile_id = doc["id"]
    channels = tuple(sorted(set(doc["channels"])))

    capabilities: dict[str, Version | None] = {}
    for entry in doc.get("capabilities", []):
        min_firmware = entry.get("min_firmware")
        capabilities[entry["name"]] = (
            _parse_version(min_firmware, context=f"{profile_id}.capabilities.{entry['name']}")
            if min_firmware is not None
            else None
        )

    auto_balance = tuple(doc.get("auto_balance_channels", []))
    unknown = [ch for ch in auto_balance if ch not in channels]
    if unknown:
        raise ProfileValidationError(f"{profile_id}.auto_balance_channels uses undeclared channel(s) {unknown}")

    groups = tuple(
        _build_channel_group(group, channels, context=f"{profile_id}.channel_groups[{index}]")
        for index, group in enumerate(doc.get("channel_groups", []))
    )

    for channel in auto_balance:
        mask = ChannelMask.of(channel)
        if not any(
            group.channels == mask and ChannelSetting.HARDWARE_OFFSET.value in group.settings
            for group in groups
        ):
            raise ProfileValidationError(
                f"{profile_id}: auto balance channel {channel} has no hardware_offset register"
            )

    return FeatureProfile(
        id=profile_id,
        name=doc["name"],
        match=ProfileMatch(
            models=tuple(doc["match"].get("models", [])),
            model_prefix=tuple(doc["match"].get("model_prefix", [])),
        ),
        channels=channels,
        sampling_modes=tuple(SamplingMode[mode.upper()] for mode in doc["sampling_modes"]),
        capabilities=capabilities,
        auto_balance_channels=auto_balance,
        channel_groups=groups,
    )


def _iter_packaged_profile_paths() -> list[Traversable]:
    profile_root = resources.files("nodectl.profiles")
    return [item for item in profile_root.iterdir() if item.name.endswith((".yml", ".yaml"))]


def _iter_user_profile_paths() -> list[Path]:
    paths: list[Path] = []
    for directory in _profile_dirs():
        if not directory.exists() or not directory.is_dir():
            continue
        paths.extend(sorted(p for p in directory.iterdir() if p.suffix in {".yml", ".yaml"}))
    return paths


def load_profiles() -> LoadedProfiles:
    profiles: dict[str, FeatureProfile] = {}
    warnings: list[str] = []

    for path in sorted(_iter_packaged_profile_paths(), key=lambda p: p.name):
        doc = _read_yaml(path)
        profile = _build_profile(doc, path)
        profiles[profile.id] = profile

    for path in _iter_user_profile_paths():
        doc = _read_yaml(path)
        profile = _build_profile(doc, path)
        if profile.id in profiles:
            warning = f"User profile '{profile.id}' overrides packaged profile"
            LOGGER.warning(warning)
            warnings.append(warning)
        profiles[profile.id] = profile

    return LoadedProfiles(profiles=profiles, warnings=tuple(warnings))
