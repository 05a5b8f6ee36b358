"""Project descriptor model.

A ProjectDescriptor is the read-only description of the application being
packaged: where it lives, what it depends on, which profiles exist and which
are active, plus free-form settings used when templating launcher scripts.

Dependencies are written either as ``"group:artifact:version"`` strings or as
mappings::

    dependencies:
      - org.clojure:clojure:1.11.1
      - {group: io.czlab, artifact: basal, version: 2.1.0,
         exclusions: [org.slf4j:slf4j-api]}
"""

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

DEFAULT_EXTENSION = "jar"
DEFAULT_SCOPE = "compile"


@dataclass(frozen=True)
class Dependency:
    """One Maven-style coordinate."""
    group: str
    artifact: str
    version: Optional[str] = None          # None -> supplied by a managed pin
    extension: str = DEFAULT_EXTENSION
    scope: str = DEFAULT_SCOPE
    exclusions: Tuple[str, ...] = ()       # "group:artifact" keys

    @property
    def key(self) -> str:
        return f"{self.group}:{self.artifact}"

    @property
    def coordinate(self) -> str:
        return f"{self.key}:{self.version or '?'}"

    @property
    def filename(self) -> str:
        return f"{self.artifact}-{self.version}.{self.extension}"

    def with_version(self, version: str) -> "Dependency":
        return replace(self, version=version)

    @classmethod
    def parse(cls, spec: Any) -> "Dependency":
        """Build a Dependency from a coordinate string or a mapping."""
        if isinstance(spec, Dependency):
            return spec
        if isinstance(spec, str):
            parts = spec.strip().split(":")
            if len(parts) not in (2, 3) or not all(parts):
                raise ValueError(f"Bad dependency coordinate: {spec!r}")
            return cls(group=parts[0], artifact=parts[1],
                       version=parts[2] if len(parts) == 3 else None)
        if isinstance(spec, dict):
            if "group" not in spec or "artifact" not in spec:
                raise ValueError(f"Dependency mapping needs group and artifact: {spec!r}")
            version = spec.get("version")
            return cls(
                group=str(spec["group"]),
                artifact=str(spec["artifact"]),
                version=str(version) if version is not None else None,
                extension=spec.get("extension", DEFAULT_EXTENSION),
                scope=spec.get("scope", DEFAULT_SCOPE),
                exclusions=tuple(parse_exclusion(e) for e in spec.get("exclusions", [])),
            )
        raise ValueError(f"Unsupported dependency spec: {spec!r}")


def parse_exclusion(spec: Any) -> str:
    """Normalise an exclusion to its ``group:artifact`` key."""
    if isinstance(spec, dict):
        return f"{spec['group']}:{spec['artifact']}"
    parts = str(spec).split(":")
    if len(parts) < 2:
        raise ValueError(f"Bad exclusion: {spec!r}")
    return f"{parts[0]}:{parts[1]}"


@dataclass(frozen=True)
class Profile:
    """A named bundle of build directives that can be merged into a project."""
    name: str
    dependencies: Tuple[Dependency, ...] = ()
    managed_dependencies: Tuple[Dependency, ...] = ()
    exclusions: Tuple[str, ...] = ()
    jar_inclusions: Tuple[str, ...] = ()
    settings: Dict[str, Any] = field(default_factory=dict)
    scope: Optional[str] = None            # "provided" marks a provided-scope profile

    @property
    def provided(self) -> bool:
        return self.scope == "provided"

    @classmethod
    def from_dict(cls, name: str, data: Optional[dict]) -> "Profile":
        data = data or {}
        if not isinstance(data, dict):
            raise ValueError(f"Profile {name!r} must be a mapping, got {type(data).__name__}")
        return cls(
            name=name,
            dependencies=tuple(Dependency.parse(d) for d in data.get("dependencies", [])),
            managed_dependencies=tuple(
                Dependency.parse(d) for d in data.get("managed_dependencies", [])),
            exclusions=tuple(parse_exclusion(e) for e in data.get("exclusions", [])),
            jar_inclusions=tuple(data.get("jar_inclusions", [])),
            settings=dict(data.get("settings", {})),
            scope=data.get("scope"),
        )


@dataclass(frozen=True)
class ProjectDescriptor:
    root: Path
    name: str
    version: str
    dependencies: Tuple[Dependency, ...] = ()
    managed_dependencies: Tuple[Dependency, ...] = ()
    exclusions: Tuple[str, ...] = ()
    profiles: Dict[str, Profile] = field(default_factory=dict)
    included_profiles: Tuple[str, ...] = ()
    default_profiles: Tuple[str, ...] = ()
    jar_inclusions: Tuple[str, ...] = ()
    uberjar_inclusions: Tuple[str, ...] = ()
    settings: Dict[str, Any] = field(default_factory=dict)

    @property
    def jar_name(self) -> str:
        return f"{self.name}-{self.version}.jar"

    def profile(self, name: str) -> Optional[Profile]:
        return self.profiles.get(name)

    @classmethod
    def from_dict(cls, data: dict, root: Optional[Path] = None) -> "ProjectDescriptor":
        """Build a descriptor from a parsed project YAML mapping.

        ``root`` in the mapping wins; otherwise the caller-supplied root
        (usually the project file's directory) is used.
        """
        if not data.get("name"):
            raise ValueError("Project descriptor needs a name")
        root_value = data.get("root") or root
        if root_value is None:
            raise ValueError("Project descriptor needs a root")
        root_path = Path(root_value).expanduser()
        if not root_path.is_absolute() and root is not None:
            root_path = Path(root) / root_path

        raw_profiles = data.get("profiles") or {}
        if not isinstance(raw_profiles, dict):
            raise ValueError("Project profiles must be a mapping of name to profile")
        profiles = {
            str(name): Profile.from_dict(str(name), body)
            for name, body in raw_profiles.items()
        }
        return cls(
            root=root_path.resolve(),
            name=str(data["name"]),
            version=str(data.get("version", "0.1.0")),
            dependencies=tuple(Dependency.parse(d) for d in data.get("dependencies", [])),
            managed_dependencies=tuple(
                Dependency.parse(d) for d in data.get("managed_dependencies", [])),
            exclusions=tuple(parse_exclusion(e) for e in data.get("exclusions", [])),
            profiles=profiles,
            included_profiles=tuple(data.get("included_profiles", [])),
            default_profiles=tuple(data.get("default_profiles", [])),
            jar_inclusions=tuple(data.get("jar_inclusions", [])),
            uberjar_inclusions=tuple(data.get("uberjar_inclusions", [])),
            settings=dict(data.get("settings", {})),
        )

