"""Resolve an effective descriptor to the jar files it bundles."""

import logging
from pathlib import Path
from typing import List

from podify.project.descriptor import ProjectDescriptor

logger = logging.getLogger(__name__)

ARTIFACT_SUFFIX = ".jar"


def is_bundled_artifact(path: Path) -> bool:
    return path.name.endswith(ARTIFACT_SUFFIX)


def resolve_dependency_files(project: ProjectDescriptor, resolver) -> List[Path]:
    """Resolve declared + managed dependencies and keep only jar files.

    ``resolver`` is any object with ``resolve(dependencies, managed,
    exclusions) -> List[Path]`` (see LocalRepositoryResolver).  Resolution
    errors propagate unchanged.
    """
    files = resolver.resolve(
        project.dependencies,
        managed=project.managed_dependencies,
        exclusions=project.exclusions,
    )
    jars = [Path(f) for f in files if is_bundled_artifact(Path(f))]
    skipped = len(files) - len(jars)
    if skipped:
        logger.debug("Dropped %d non-jar resolution outputs", skipped)
    return jars
