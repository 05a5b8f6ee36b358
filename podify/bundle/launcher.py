"""
Launcher installation.

Copies the bundled launcher scripts and logging config into ``<target>/bin``.
Templated entries are rendered against the template context; verbatim
entries are copied byte for byte.  Every installed file is made executable.
A resource the provider does not have is skipped.

Resources are looked up through a ResourceProvider:

    provider.lookup("h2db") -> bytes or None

PackageResourceProvider serves the files shipped in ``podify/resources/bin``;
DirectoryResourceProvider serves a project-supplied directory; and
ChainResourceProvider tries several providers in order.
"""

import enum
import logging
import stat
from dataclasses import dataclass
from pathlib import Path
from typing import List, Mapping, Optional, Sequence, Union

from podify.bundle.templater import render
from podify.errors import InstallError

logger = logging.getLogger(__name__)

BIN_DIR = "bin"
PACKAGE_RESOURCES = Path(__file__).resolve().parents[1] / "resources" / "bin"


class Kind(enum.Enum):
    VERBATIM = "verbatim"
    TEMPLATED = "templated"


@dataclass(frozen=True)
class ResourceEntry:
    name: str
    kind: Kind = Kind.VERBATIM


LAUNCHER_RESOURCES = (
    ResourceEntry("log4j2.xml", Kind.VERBATIM),
    ResourceEntry("h2db", Kind.TEMPLATED),
    ResourceEntry("podify", Kind.TEMPLATED),
    ResourceEntry("podify-stop", Kind.TEMPLATED),
)


# ── Resource providers ───────────────────────────────────────────────────────

class DirectoryResourceProvider:
    """Serves resources from files in one directory."""

    def __init__(self, base: Union[str, Path]):
        self.base = Path(base)

    def lookup(self, name: str) -> Optional[bytes]:
        path = self.base / name
        if not path.is_file():
            return None
        return path.read_bytes()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self.base)!r})"


class PackageResourceProvider(DirectoryResourceProvider):
    """Launcher resources shipped with podify."""

    def __init__(self):
        super().__init__(PACKAGE_RESOURCES)


class ChainResourceProvider:
    """First provider that has the resource wins."""

    def __init__(self, providers: Sequence):
        self.providers = list(providers)

    def lookup(self, name: str) -> Optional[bytes]:
        for provider in self.providers:
            data = provider.lookup(name)
            if data is not None:
                return data
        return None


def default_provider(extra_dir: Optional[Union[str, Path]] = None):
    """Package resources, optionally shadowed by a project directory."""
    if extra_dir is None:
        return PackageResourceProvider()
    return ChainResourceProvider([DirectoryResourceProvider(extra_dir),
                                  PackageResourceProvider()])


# ── Installation ─────────────────────────────────────────────────────────────

def make_executable(path: Path) -> None:
    mode = path.stat().st_mode
    path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)


def install_launchers(root: Union[str, Path], context: Mapping[str, str], provider,
                      entries: Sequence[ResourceEntry] = LAUNCHER_RESOURCES) -> List[Path]:
    """Write launcher resources into ``<root>/bin``.

    Returns:
        Paths of the installed files, in entry order.
    """
    bin_dir = Path(root) / BIN_DIR
    installed: List[Path] = []
    try:
        bin_dir.mkdir(parents=True, exist_ok=True)
        for entry in entries:
            data = provider.lookup(entry.name)
            if data is None:
                logger.debug("Launcher resource %s not available, skipped", entry.name)
                continue
            dest = bin_dir / entry.name
            if entry.kind is Kind.TEMPLATED:
                dest.write_text(render(data.decode("utf-8"), context), encoding="utf-8")
            else:
                dest.write_bytes(data)
            make_executable(dest)
            installed.append(dest)
    except OSError as exc:
        failed = getattr(exc, "filename", None) or bin_dir
        raise InstallError(f"Failed to install launcher into {failed}: {exc}",
                           path=failed) from exc

    logger.info("Installed %d launcher files into %s", len(installed), bin_dir)
    return installed
