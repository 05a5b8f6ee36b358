"""
Bundle assembly.

Two entry points, both safe to re-run against the same target:

  package_libjars      flat directory of jars (default <root>/lib)
  package_standalone   runnable distribution (default <root>/pkg):

      <target>/bin/      launcher scripts + logging config (executable)
      <target>/lib/      primary jar + runtime dependency jars
      <target>/conf etc src doc public/   mirrored from the project root
      <target>/logs/readme.txt

The primary jar is built and every dependency resolved before the target is
erased, so a build or resolution failure leaves a previous bundle intact.
After that the target is always erased before it is repopulated, so nothing
from a previous run survives.  A failure part way leaves a partial tree;
running again is the recovery.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from podify.bundle.launcher import default_provider, install_launchers
from podify.bundle.libjars import copy_libs, plan_libs
from podify.bundle.templater import build_template_context
from podify.errors import CopyError, EraseError
from podify.io.readers import resolve_target
from podify.io.tree import copy_tree, erase_tree
from podify.project.descriptor import ProjectDescriptor

logger = logging.getLogger(__name__)

PKG_DIR = "pkg"
LIB_DIR = "lib"
LOGS_DIR = "logs"
AUX_DIRS = ("conf", "etc", "src", "doc", "public")
LOGS_README = "log files"


@dataclass
class BundleReport:
    """What one packaging run wrote."""
    target: Path
    copied: Dict[str, int] = field(default_factory=dict)   # aux dir -> files copied
    launchers: List[Path] = field(default_factory=list)
    jars: List[Path] = field(default_factory=list)

    @property
    def summary(self) -> str:
        aux = ", ".join(f"{d}={n}" for d, n in self.copied.items()) or "none"
        return (f"{len(self.jars)} jars, {len(self.launchers)} launchers, "
                f"aux files [{aux}]")


def prepare_target(target: Path, project_root: Path, sources: Iterable[str] = ()) -> None:
    """Create target if needed, then empty it.

    The project root and its ancestors are never valid targets, nor is any
    path inside one of the ``sources`` directories under the root.
    """
    resolved, root = target.resolve(), project_root.resolve()
    if resolved == root or resolved in root.parents:
        raise EraseError(f"Refusing to erase {target}: it contains the project root",
                         path=target)
    for name in sources:
        src = root / name
        if resolved == src or src in resolved.parents:
            raise CopyError(f"Refusing to package into {target}: it is inside {src}",
                            path=target)
    try:
        target.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise EraseError(f"Cannot create target {target}: {exc}", path=target) from exc
    erase_tree(target)


def package_libjars(project: ProjectDescriptor, builder, resolver,
                    to_dir: Optional[Union[str, Path]] = None) -> BundleReport:
    """Refresh a flat directory holding every runtime jar."""
    target = resolve_target(project, LIB_DIR, to_dir)
    logger.info("Packaging dependencies for %s into %s", project.name, target)
    plan = plan_libs(project, builder, resolver)

    prepare_target(target, project.root)
    report = BundleReport(target=target)
    report.jars = copy_libs(plan, target)
    return report


def write_logs_placeholder(target: Path) -> Path:
    logs = target / LOGS_DIR
    readme = logs / "readme.txt"
    try:
        logs.mkdir(parents=True, exist_ok=True)
        readme.write_text(LOGS_README, encoding="utf-8")
    except OSError as exc:
        raise CopyError(f"Cannot write {readme}: {exc}", path=readme) from exc
    return readme


def package_standalone(project: ProjectDescriptor, builder, resolver, provider=None,
                       to_dir: Optional[Union[str, Path]] = None) -> BundleReport:
    """Assemble a complete runnable distribution directory."""
    target = resolve_target(project, PKG_DIR, to_dir)
    logger.info("Packaging standalone application %s into %s", project.name, target)
    if provider is None:
        provider = default_provider()
    plan = plan_libs(project, builder, resolver)

    prepare_target(target, project.root, sources=AUX_DIRS)
    report = BundleReport(target=target)

    for name in AUX_DIRS:
        src = project.root / name
        if not src.is_dir():
            logger.debug("No %s directory in %s, skipped", name, project.root)
            continue
        report.copied[name] = copy_tree(src, target / name)

    report.launchers = install_launchers(target, build_template_context(plan.project),
                                         provider)
    report.jars = copy_libs(plan, target / LIB_DIR)
    write_logs_placeholder(target)
    return report
