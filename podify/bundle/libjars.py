"""Populate a lib directory with the primary jar and its runtime jars.

Collection runs in two phases so callers can finish every build and
resolution step before they touch the filesystem:

    plan = plan_libs(project, builder, resolver)    # may raise, writes nothing
    copy_libs(plan, target)
"""

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Union

from podify.errors import CopyError
from podify.project.descriptor import ProjectDescriptor
from podify.project.profiles import effective_descriptor, resolution_descriptor
from podify.resolve.dependencies import resolve_dependency_files

logger = logging.getLogger(__name__)


@dataclass
class LibraryPlan:
    """Everything needed to fill a lib directory."""
    project: ProjectDescriptor              # build descriptor
    artifact: Path
    dependencies: List[Path] = field(default_factory=list)

    @property
    def sources(self) -> List[Path]:
        return [self.artifact] + list(self.dependencies)


def plan_libs(project: ProjectDescriptor, builder, resolver) -> LibraryPlan:
    """Build the primary jar and resolve the dependency jars.

    The builder sees the build descriptor; the resolver sees the resolution
    descriptor, so default profiles never contribute bundled jars.

    Args:
        project: project descriptor as loaded (profiles not yet merged)
        builder: object with ``build(project) -> Path``
        resolver: object with ``resolve(deps, managed, exclusions) -> List[Path]``
    """
    effective = effective_descriptor(project)
    jar = Path(builder.build(effective))
    deps = resolve_dependency_files(resolution_descriptor(project), resolver)
    return LibraryPlan(project=effective, artifact=jar, dependencies=deps)


def copy_libs(plan: LibraryPlan, target: Union[str, Path]) -> List[Path]:
    """Copy a plan's jars into target (created when absent).

    Files keep their original names; a later file with the same name
    overwrites an earlier one.

    Returns:
        Destination paths in copy order (primary artifact first).
    """
    lib = Path(target)
    written: List[Path] = []
    source = plan.artifact
    try:
        lib.mkdir(parents=True, exist_ok=True)
        for source in plan.sources:
            dest = lib / source.name
            shutil.copyfile(source, dest)
            written.append(dest)
    except OSError as exc:
        raise CopyError(f"Failed to copy {source} into {lib}: {exc}", path=source) from exc

    logger.info("Collected %d jars into %s", len(written), lib)
    return written


def collect_libs(project: ProjectDescriptor, target: Union[str, Path],
                 builder, resolver) -> List[Path]:
    """Plan then copy in one call; a failed plan leaves target untouched."""
    return copy_libs(plan_libs(project, builder, resolver), target)
