"""Helpers for loading project configuration and resolving paths."""

import logging
from pathlib import Path
from typing import Dict, Optional, Union

import yaml

from podify.project.descriptor import ProjectDescriptor
from podify.resolve.repository import DEFAULT_REPOSITORY

logger = logging.getLogger(__name__)


def load_project_config(config_path: Union[str, Path]) -> Dict:
    """Load the raw project mapping from a YAML file.

    Args:
        config_path: Path to project.yaml

    Returns:
        Parsed mapping (empty mapping for an empty file)
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Project file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        try:
            config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {path}: {e}") from e
    if not isinstance(config, dict):
        raise ValueError(f"Project file must contain a mapping: {path}")
    return config


def load_project(config_path: Union[str, Path]) -> ProjectDescriptor:
    """Load a ProjectDescriptor; a relative or missing root is taken
    relative to the project file's directory."""
    path = Path(config_path).resolve()
    return ProjectDescriptor.from_dict(load_project_config(path), root=path.parent)


def resolve_repository(config: Dict, override: Optional[str] = None) -> Path:
    """Local repository root: CLI override, then ``repository`` key, then ~/.m2."""
    value = override or config.get("repository") or DEFAULT_REPOSITORY
    return Path(value).expanduser().resolve()


def resolve_target(project: ProjectDescriptor, default_dir: str,
                   override: Optional[Union[str, Path]] = None) -> Path:
    """Bundle target: explicit override, else ``<root>/<default_dir>``."""
    if override:
        return Path(override).expanduser().resolve()
    return project.root / default_dir
