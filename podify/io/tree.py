"""Directory tree helpers: bottom-up erase and mirror copy."""

import logging
import os
import shutil
from pathlib import Path
from typing import Iterator, Tuple, Union

from podify.errors import CopyError, EraseError

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def _raise(exc: OSError) -> None:
    raise exc


def walk_post_order(root: Path) -> Iterator[Tuple[Path, bool]]:
    """Yield ``(path, is_dir)`` for every descendant of root, children first.

    Symlinks (to files or directories) are reported as files so they are
    unlinked, never followed.  The root itself is not yielded.
    """
    for dirpath, dirnames, filenames in os.walk(root, topdown=False, onerror=_raise):
        base = Path(dirpath)
        for name in filenames:
            yield base / name, False
        for name in dirnames:
            p = base / name
            yield p, not p.is_symlink()


def erase_tree(root: PathLike) -> int:
    """Delete everything under root, leaving root present and empty.

    A missing root is a no-op.  The first filesystem error aborts the erase;
    whatever was already deleted stays deleted.

    Returns:
        Number of entries removed.
    """
    root = Path(root)
    if not root.exists():
        logger.debug("Erase skipped, %s does not exist", root)
        return 0
    if not root.is_dir():
        raise EraseError(f"Cannot erase {root}: not a directory", path=root)

    removed = 0
    current = root
    try:
        for current, is_dir in walk_post_order(root):
            if is_dir:
                current.rmdir()
            else:
                current.unlink()
            removed += 1
    except OSError as exc:
        failed = Path(exc.filename) if getattr(exc, "filename", None) else current
        raise EraseError(f"Failed to erase {failed}: {exc.strerror or exc}", path=failed) from exc

    logger.debug("Erased %d entries under %s", removed, root)
    return removed


def copy_tree(src: PathLike, dest: PathLike) -> int:
    """Mirror the contents of src into dest at the same relative paths.

    The src root is never copied as an entry, only what is beneath it.
    Missing src is a no-op.  Existing destination files are overwritten;
    nothing is ever removed from dest.  Symlinked directories are followed,
    but a directory reached a second time (a link cycle) is not descended.

    Returns:
        Number of files copied.
    """
    src, dest = Path(src), Path(dest)
    if not src.is_dir():
        logger.debug("Copy skipped, %s is not a directory", src)
        return 0

    copied = 0
    current = src
    seen = set()
    try:
        for dirpath, dirnames, filenames in os.walk(src, followlinks=True, onerror=_raise):
            base = Path(dirpath)
            info = os.stat(base)
            if (info.st_dev, info.st_ino) in seen:
                # Symlink back into a directory already mirrored.
                dirnames[:] = []
                continue
            seen.add((info.st_dev, info.st_ino))
            rel = base.relative_to(src)
            for name in dirnames:
                current = base / name
                (dest / rel / name).mkdir(parents=True, exist_ok=True)
            for name in filenames:
                current = base / name
                target = dest / rel / name
                target.parent.mkdir(parents=True, exist_ok=True)
                shutil.copy2(current, target)
                copied += 1
    except OSError as exc:
        raise CopyError(f"Failed to copy {current} into {dest}: {exc}", path=current) from exc

    logger.info("Copied %d files from %s", copied, src)
    return copied
