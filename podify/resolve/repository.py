"""
Local-repository dependency resolution.

Resolves dependency coordinates against a Maven-layout repository that has
already been populated (nothing is downloaded):

    <repo>/org/example/widget/1.2.0/widget-1.2.0.jar
    <repo>/org/example/widget/1.2.0/widget-1.2.0.pom

Transitive dependencies are read from each artifact's ``.pom``.  The graph is
walked breadth-first so the nearest declaration of a ``group:artifact`` wins;
a managed pin overrides every version, declared or transitive.  Dependencies
with ``test`` or ``provided`` scope, and ``<optional>true</optional>`` ones,
are not bundled.

Usage:
    from podify.resolve.repository import LocalRepositoryResolver
    resolver = LocalRepositoryResolver("~/.m2/repository")
    files = resolver.resolve(deps, managed=pins, exclusions=["log4j:log4j"])
"""

import logging
import xml.etree.ElementTree as ET
from collections import deque
from pathlib import Path
from typing import Deque, Dict, Iterable, List, Optional, Set, Tuple, Union

from podify.errors import ResolutionError
from podify.project.descriptor import Dependency

logger = logging.getLogger(__name__)

DEFAULT_REPOSITORY = Path("~/.m2/repository")

# Scopes that never reach the runtime bundle
SKIPPED_SCOPES = {"test", "provided", "system"}


def _strip_ns(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _child_text(elem: ET.Element, name: str) -> Optional[str]:
    for child in elem:
        if _strip_ns(child.tag) == name:
            return (child.text or "").strip() or None
    return None


def _children(elem: Optional[ET.Element], name: str) -> List[ET.Element]:
    if elem is None:
        return []
    return [c for c in elem if _strip_ns(c.tag) == name]


def read_pom_dependencies(pom_path: Path) -> List[Dependency]:
    """Parse the direct runtime dependencies declared in a pom file.

    Property placeholders (``${...}``) in versions are left for managed pins
    to override; a dependency whose version is still a placeholder is
    reported as unresolved when nothing pins it.
    """
    try:
        root = ET.parse(pom_path).getroot()
    except ET.ParseError as exc:
        raise ResolutionError(f"Malformed pom: {pom_path}: {exc}", path=pom_path) from exc

    deps_elems = _children(root, "dependencies")
    result: List[Dependency] = []
    for dep in _children(deps_elems[0] if deps_elems else None, "dependency"):
        group = _child_text(dep, "groupId")
        artifact = _child_text(dep, "artifactId")
        if not group or not artifact:
            continue
        if (_child_text(dep, "optional") or "").lower() == "true":
            continue
        version = _child_text(dep, "version")
        if version and version.startswith("${"):
            version = None
        exclusions = []
        for excl_block in _children(dep, "exclusions"):
            for excl in _children(excl_block, "exclusion"):
                eg, ea = _child_text(excl, "groupId"), _child_text(excl, "artifactId")
                if eg and ea:
                    exclusions.append(f"{eg}:{ea}")
        result.append(Dependency(
            group=group,
            artifact=artifact,
            version=version,
            extension=_child_text(dep, "type") or "jar",
            scope=_child_text(dep, "scope") or "compile",
            exclusions=tuple(exclusions),
        ))
    return result


class LocalRepositoryResolver:
    """Resolves coordinates to files already present in a local repository."""

    def __init__(self, repo_root: Union[str, Path] = DEFAULT_REPOSITORY):
        self.repo_root = Path(repo_root).expanduser()

    def artifact_dir(self, dep: Dependency) -> Path:
        return self.repo_root.joinpath(*dep.group.split("."), dep.artifact, dep.version or "")

    def artifact_path(self, dep: Dependency) -> Path:
        return self.artifact_dir(dep) / dep.filename

    def pom_path(self, dep: Dependency) -> Path:
        return self.artifact_dir(dep) / f"{dep.artifact}-{dep.version}.pom"

    def resolve(self, dependencies: Iterable[Dependency],
                managed: Iterable[Dependency] = (),
                exclusions: Iterable[str] = ()) -> List[Path]:
        """Resolve declared dependencies and their transitive closure.

        Args:
            dependencies: declared coordinates, in declaration order
            managed: version pins; a pin beats any other version
            exclusions: ``group:artifact`` keys dropped from the whole graph

        Returns:
            Artifact paths in breadth-first order, one per ``group:artifact``.

        Raises:
            ResolutionError: a coordinate has no version or no file on disk.
        """
        pins: Dict[str, str] = {m.key: m.version for m in managed if m.version}
        global_excl: Set[str] = set(exclusions)

        queue: Deque[Tuple[Dependency, Tuple[str, ...]]] = deque(
            (dep, ()) for dep in dependencies)
        seen: Set[str] = set()
        resolved: List[Path] = []

        while queue:
            dep, inherited_excl = queue.popleft()
            if dep.key in seen or dep.key in global_excl or dep.key in inherited_excl:
                continue
            if dep.scope in SKIPPED_SCOPES:
                logger.debug("Skipping %s (scope %s)", dep.coordinate, dep.scope)
                continue
            seen.add(dep.key)

            pinned = pins.get(dep.key)
            if pinned and pinned != dep.version:
                if dep.version:
                    logger.info("Managed version %s overrides %s", pinned, dep.coordinate)
                dep = dep.with_version(pinned)
            if not dep.version:
                raise ResolutionError(
                    f"No version for dependency {dep.key} and no managed pin",
                    coordinate=dep.coordinate)

            path = self.artifact_path(dep)
            if not path.is_file():
                raise ResolutionError(
                    f"Could not resolve {dep.coordinate}: {path} not found",
                    coordinate=dep.coordinate, path=path)
            resolved.append(path)

            pom = self.pom_path(dep)
            if pom.is_file():
                child_excl = inherited_excl + dep.exclusions
                for child in read_pom_dependencies(pom):
                    queue.append((child, child_excl))

        logger.debug("Resolved %d artifacts from %s", len(resolved), self.repo_root)
        return resolved
