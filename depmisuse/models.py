"""
Data model for dependency misuse analysis.

Components come from the dependency-resolution step; reports are produced
by the classifier and handed to the report writers.
"""
from dataclasses import dataclass
from typing import Any, Iterable


class DepMisuseError(Exception):
    """Base class for depmisuse errors."""


class MalformedComponentError(DepMisuseError, ValueError):
    """Raised when a declared component is missing required fields."""


class ConfigurationError(DepMisuseError, ValueError):
    """Raised when a configuration file cannot be interpreted."""


@dataclass(frozen=True)
class Component:
    """
    A declared dependency and the classes it provides.

    Classes keep the producer's order with duplicates dropped, so iteration
    over them is deterministic.
    """

    identifier: str
    classes: tuple[str, ...] = ()
    is_transitive: bool = False

    def __post_init__(self):
        if not isinstance(self.identifier, str) or not self.identifier.strip():
            raise MalformedComponentError(
                f"Component identifier must be a non-empty string, got {self.identifier!r}"
            )
        if self.classes is None or isinstance(self.classes, (str, bytes)):
            raise MalformedComponentError(
                f"Classes of {self.identifier} must be a collection of names, not a string"
            )
        if not isinstance(self.is_transitive, bool):
            raise MalformedComponentError(
                f"isTransitive of {self.identifier} must be a boolean, got {self.is_transitive!r}"
            )

        classes = []
        seen = set()
        for name in self.classes:
            if not isinstance(name, str):
                raise MalformedComponentError(
                    f"Class names of {self.identifier} must be strings, got {name!r}"
                )
            if name not in seen:
                seen.add(name)
                classes.append(name)
        object.__setattr__(self, "classes", tuple(classes))

    @property
    def is_empty(self) -> bool:
        """True when the component provides no classes (e.g. an aggregator artifact)."""
        return not self.classes

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Component":
        """
        Create a Component from a declared-dependencies JSON entry.

        Args:
            data: Mapping with ``identifier``, ``isTransitive`` and ``classes`` keys

        Returns:
            Component instance

        Raises:
            MalformedComponentError: If required fields are missing or mistyped
        """
        if not isinstance(data, dict):
            raise MalformedComponentError(f"Component entry must be an object, got {type(data).__name__}")
        if "identifier" not in data:
            raise MalformedComponentError("Component entry has no 'identifier'")

        classes = data.get("classes", [])
        if classes is None or not isinstance(classes, list):
            raise MalformedComponentError(
                f"'classes' of {data['identifier']!r} must be a list, got {type(classes).__name__}"
            )

        if "isTransitive" in data:
            is_transitive = data["isTransitive"]
        else:
            is_transitive = data.get("is_transitive", False)

        return cls(
            identifier=data["identifier"],
            classes=tuple(classes),
            is_transitive=is_transitive,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize in the declared-dependencies file format."""
        return {
            "identifier": self.identifier,
            "isTransitive": self.is_transitive,
            "classes": list(self.classes),
        }


@dataclass(frozen=True)
class TransitiveDependency:
    """A transitive dependency the project uses without declaring it."""

    identifier: str
    triggering_classes: tuple[str, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "identifier": self.identifier,
            "usedTransitiveClasses": list(self.triggering_classes),
        }


@dataclass(frozen=True)
class MisuseReport:
    """Result of one classification run."""

    unused_dependencies: tuple[str, ...] = ()
    used_transitives: tuple[TransitiveDependency, ...] = ()

    @property
    def is_clean(self) -> bool:
        """True when there is nothing to report."""
        return not self.unused_dependencies and not self.used_transitives

    def to_dict(self) -> dict[str, Any]:
        return {
            "unusedDependencies": list(self.unused_dependencies),
            "usedTransitiveDependencies": [t.to_dict() for t in self.used_transitives],
        }


def components_from_dicts(entries: Iterable[Any]) -> list[Component]:
    """
    Build components from a sequence of JSON entries.

    Raises:
        MalformedComponentError: Naming the index of the first bad entry
    """
    components = []
    for index, entry in enumerate(entries):
        try:
            components.append(Component.from_dict(entry))
        except MalformedComponentError as e:
            raise MalformedComponentError(f"Declared dependency #{index}: {e}") from e
    return components
