"""
Dependency classifier.

Decides which direct dependencies are unused and which transitive
dependencies are used, given the declared components and the set of class
names referenced by the project's compiled output.
"""
import logging
from typing import Iterable, Optional

from depmisuse.config import ClassifierConfig
from depmisuse.models import Component, MalformedComponentError, MisuseReport, TransitiveDependency

logger = logging.getLogger(__name__)


class DependencyClassifier:
    """
    Classifies declared components into unused directs and used transitives.

    A classifier holds only its configuration; every call to ``classify``
    starts from fresh accumulators, so one instance can be shared across
    threads.
    """

    def __init__(self, config: Optional[ClassifierConfig] = None):
        self.config = config or ClassifierConfig()

    def classify(self, components: Iterable[Component], used_classes: Iterable[str]) -> MisuseReport:
        """
        Classify components against the classes the project uses.

        Args:
            components: Declared components, in report order
            used_classes: Fully-qualified class names referenced by the project

        Returns:
            MisuseReport with unused direct identifiers and used transitives

        Raises:
            MalformedComponentError: If a component is not a Component, an
                identifier appears twice, or used_classes is not a
                collection of strings
        """
        used = self._used_set(used_classes)
        libs = self._prepare(components)

        if self.config.legacy_ordering:
            report = self._classify_single_pass(libs, used)
        else:
            report = self._classify_two_phase(libs, used)

        logger.debug(
            "Classified %d components: %d unused, %d used transitives",
            len(libs), len(report.unused_dependencies), len(report.used_transitives),
        )
        return report

    @staticmethod
    def _used_set(used_classes: Iterable[str]) -> frozenset:
        if used_classes is None or isinstance(used_classes, (str, bytes)):
            raise MalformedComponentError(
                f"Used classes must be a collection of names, got {type(used_classes).__name__}"
            )
        used = frozenset(used_classes)
        for name in used:
            if not isinstance(name, str):
                raise MalformedComponentError(f"Used class names must be strings, got {name!r}")
        return used

    def _prepare(self, components: Iterable[Component]) -> list[Component]:
        """Validate input and drop components that provide no classes."""
        libs = []
        seen = set()
        for component in components:
            if not isinstance(component, Component):
                raise MalformedComponentError(f"Expected Component, got {type(component).__name__}")
            if component.identifier in seen:
                raise MalformedComponentError(f"Duplicate component identifier: {component.identifier}")
            seen.add(component.identifier)

            if component.is_empty:
                logger.debug("Skipping %s: no class files", component.identifier)
                continue
            libs.append(component)
        return libs

    def _classify_two_phase(self, libs: list[Component], used: frozenset) -> MisuseReport:
        # Phase one: direct dependencies
        unused = []
        used_direct_classes = set()
        for lib in libs:
            if lib.is_transitive:
                continue
            hits = [c for c in lib.classes if c in used]
            used_direct_classes.update(hits)
            if not hits and self._may_report_unused(lib):
                unused.append(lib.identifier)

        # Phase two: transitive dependencies, against the complete direct set
        transitives = []
        for lib in libs:
            if not lib.is_transitive:
                continue
            triggered = {c for c in lib.classes if self._triggers(lib, c, used, used_direct_classes)}
            if triggered:
                transitives.append(TransitiveDependency(lib.identifier, tuple(sorted(triggered))))

        return MisuseReport(tuple(unused), tuple(transitives))

    def _classify_single_pass(self, libs: list[Component], used: frozenset) -> MisuseReport:
        """Shadowing only sees direct classes from components earlier in the list."""
        unused = []
        transitives = []
        used_direct_classes = set()
        for lib in libs:
            unused_count = 0
            triggered = set()
            for declared_class in lib.classes:
                if not lib.is_transitive:
                    if declared_class not in used:
                        unused_count += 1
                    else:
                        used_direct_classes.add(declared_class)

                if self._triggers(lib, declared_class, used, used_direct_classes):
                    triggered.add(declared_class)

            if unused_count == len(lib.classes) and not lib.is_transitive and self._may_report_unused(lib):
                unused.append(lib.identifier)
            if triggered:
                transitives.append(TransitiveDependency(lib.identifier, tuple(sorted(triggered))))

        return MisuseReport(tuple(unused), tuple(transitives))

    def _may_report_unused(self, lib: Component) -> bool:
        if self.config.matches_excluded_prefix(lib.identifier):
            logger.debug("Not reporting %s as unused: excluded", lib.identifier)
            return False
        return True

    def _triggers(self, lib: Component, class_name: str, used: frozenset, used_direct_classes: set) -> bool:
        return (
            lib.is_transitive
            and class_name in used
            and not self.config.is_excluded_identifier(lib.identifier)
            and not self.config.is_ambient_class(class_name)
            and class_name not in used_direct_classes
        )


def classify(
    components: Iterable[Component],
    used_classes: Iterable[str],
    config: Optional[ClassifierConfig] = None,
) -> MisuseReport:
    """Classify components with a one-off DependencyClassifier."""
    return DependencyClassifier(config).classify(components, used_classes)
