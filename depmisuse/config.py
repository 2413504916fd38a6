"""
Classifier configuration.

Holds the exclusion rules applied during classification, loadable from a
``.depmisuse.yml`` file so CI pipelines can tune them per project.
"""
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import yaml

from depmisuse.models import ConfigurationError

DEFAULT_CONFIG_FILE = ".depmisuse.yml"
DEFAULT_EXCLUDED_IDENTIFIER = "org.jetbrains.kotlin:kotlin-stdlib"
DEFAULT_AMBIENT_PREFIX = "android."

TOP_LEVEL_KEYS = ("exclusions", "legacy_ordering")
EXCLUSION_KEYS = ("identifier", "ambient_prefix")


@dataclass(frozen=True)
class ClassifierConfig:
    """Configuration for the dependency classifier."""

    # Never reported as unused (prefix match) nor as used transitively (exact match)
    excluded_identifier: Optional[str] = DEFAULT_EXCLUDED_IDENTIFIER

    # Classes under this namespace are supplied by the platform runtime
    ambient_prefix: Optional[str] = DEFAULT_AMBIENT_PREFIX

    # Evaluate shadowing against direct classes seen so far, in input order
    legacy_ordering: bool = False

    def is_excluded_identifier(self, identifier: str) -> bool:
        """Exact match against the excluded coordinate."""
        return bool(self.excluded_identifier) and identifier == self.excluded_identifier

    def matches_excluded_prefix(self, identifier: str) -> bool:
        """Prefix match against the excluded coordinate (covers -jdk7, -jdk8 variants)."""
        return bool(self.excluded_identifier) and identifier.startswith(self.excluded_identifier)

    def is_ambient_class(self, class_name: str) -> bool:
        return bool(self.ambient_prefix) and class_name.startswith(self.ambient_prefix)

    @classmethod
    def from_yaml(cls, yaml_path: Path) -> "ClassifierConfig":
        """
        Load classifier configuration from a YAML file.

        Args:
            yaml_path: Path to .depmisuse.yml file

        Returns:
            ClassifierConfig instance

        Raises:
            ConfigurationError: If the file is not a mapping of known sections,
                or names a key this version does not understand

        Example YAML:
            exclusions:
              identifier: "org.jetbrains.kotlin:kotlin-stdlib"
              ambient_prefix: "android."
            legacy_ordering: false
        """
        with open(yaml_path, encoding="utf-8") as f:
            try:
                config = yaml.safe_load(f)
            except (yaml.YAMLError, UnicodeDecodeError) as e:
                raise ConfigurationError(f"Invalid YAML in {yaml_path}: {e}") from e

        return cls.from_dict(config or {}, source=str(yaml_path))

    @classmethod
    def from_dict(cls, config: Any, source: str = "<config>") -> "ClassifierConfig":
        if not isinstance(config, dict):
            raise ConfigurationError(f"{source}: top level must be a mapping")

        _reject_unknown_keys(config, TOP_LEVEL_KEYS, source)

        kwargs = {}

        if "exclusions" in config:
            exclusions = config["exclusions"] or {}
            if not isinstance(exclusions, dict):
                raise ConfigurationError(f"{source}: 'exclusions' must be a mapping")
            _reject_unknown_keys(exclusions, EXCLUSION_KEYS, f"{source}: exclusions")

            if "identifier" in exclusions:
                kwargs["excluded_identifier"] = _optional_str(exclusions["identifier"], "identifier", source)
            if "ambient_prefix" in exclusions:
                kwargs["ambient_prefix"] = _optional_str(exclusions["ambient_prefix"], "ambient_prefix", source)

        if "legacy_ordering" in config:
            legacy = config["legacy_ordering"]
            if not isinstance(legacy, bool):
                raise ConfigurationError(f"{source}: 'legacy_ordering' must be true or false")
            kwargs["legacy_ordering"] = legacy

        return cls(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        return {
            "exclusions": {
                "identifier": self.excluded_identifier,
                "ambient_prefix": self.ambient_prefix,
            },
            "legacy_ordering": self.legacy_ordering,
        }


def _reject_unknown_keys(section: dict, known: tuple, source: str) -> None:
    unknown = sorted(str(key) for key in section if key not in known)
    if unknown:
        raise ConfigurationError(
            f"{source}: unknown key(s) {', '.join(unknown)}; expected one of {', '.join(known)}"
        )


def _optional_str(value: Any, key: str, source: str) -> Optional[str]:
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ConfigurationError(f"{source}: '{key}' must be a string")
    return value


def load_config(config_path: Optional[Path] = None) -> ClassifierConfig:
    """
    Resolve the effective configuration.

    Args:
        config_path: Explicit config file; falls back to ./.depmisuse.yml

    Returns:
        Loaded config, or defaults when no file is present
    """
    if config_path is not None:
        return ClassifierConfig.from_yaml(config_path)

    default_path = Path(DEFAULT_CONFIG_FILE)
    if default_path.exists():
        return ClassifierConfig.from_yaml(default_path)

    return ClassifierConfig()
