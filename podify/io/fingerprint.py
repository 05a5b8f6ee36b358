"""Content fingerprints for a bundle directory.

``run_package`` prints ``tree_digest`` of the finished target so two runs
can be compared at a glance; ``tree_fingerprint`` gives the per-path view.
"""

import hashlib
import os
from pathlib import Path
from typing import Dict, Union

READ_SIZE = 1 << 16


def file_sha256(path: Path) -> str:
    digest = hashlib.sha256()
    with open(path, "rb") as f:
        for block in iter(lambda: f.read(READ_SIZE), b""):
            digest.update(block)
    return digest.hexdigest()


def tree_fingerprint(root: Union[str, Path]) -> Dict[str, str]:
    """Map every path under root (posix, relative) to a digest.

    Directories map to ``"<dir>"`` so empty directories are part of the
    fingerprint too.
    """
    root = Path(root)
    prints: Dict[str, str] = {}
    if not root.is_dir():
        return prints
    for dirpath, dirnames, filenames in os.walk(root):
        base = Path(dirpath)
        for name in dirnames:
            prints[(base / name).relative_to(root).as_posix()] = "<dir>"
        for name in filenames:
            fpath = base / name
            prints[fpath.relative_to(root).as_posix()] = file_sha256(fpath)
    return dict(sorted(prints.items()))


def tree_digest(root: Union[str, Path]) -> str:
    """Single digest over a whole tree's fingerprint."""
    h = hashlib.sha256()
    for rel, digest in tree_fingerprint(root).items():
        h.update(f"{rel}\0{digest}\n".encode("utf-8"))
    return h.hexdigest()
