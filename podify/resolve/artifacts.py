"""Primary-artifact builders.

The application jar is produced outside this tool.  A builder only has to
hand back the path of that jar for a given (effective) descriptor.
"""

import logging
import shlex
import subprocess
from pathlib import Path
from typing import List, Optional, Union

from podify.errors import BuildError
from podify.project.descriptor import ProjectDescriptor

logger = logging.getLogger(__name__)

TARGET_DIR = "target"


class PrebuiltArtifact:
    """Locates a jar that an earlier build already produced.

    Looks at the ``jar_path`` setting first (relative to the project root),
    then ``<root>/target/<name>-<version>.jar``.
    """

    def locate(self, project: ProjectDescriptor) -> Path:
        explicit = project.settings.get("jar_path")
        if explicit:
            path = Path(explicit).expanduser()
            if not path.is_absolute():
                path = project.root / path
        else:
            path = project.root / TARGET_DIR / project.jar_name
        if not path.is_file():
            raise BuildError(f"Primary artifact not found: {path}", path=path)
        return path

    def build(self, project: ProjectDescriptor) -> Path:
        return self.locate(project)


class CommandArtifactBuilder(PrebuiltArtifact):
    """Runs an external build command in the project root, then locates the jar."""

    def __init__(self, command: Union[str, List[str]], timeout: Optional[float] = None):
        self.command = shlex.split(command) if isinstance(command, str) else list(command)
        self.timeout = timeout

    def build(self, project: ProjectDescriptor) -> Path:
        logger.info("Building primary artifact: %s", " ".join(self.command))
        try:
            subprocess.run(self.command, cwd=project.root, check=True, timeout=self.timeout)
        except (OSError, subprocess.SubprocessError) as exc:
            raise BuildError(f"Build command failed: {exc}", path=project.root) from exc
        return self.locate(project)
