"""
conftest.py  –  Root-level pytest configuration for podify.
===========================================================
Puts the repo root on sys.path and provides fixtures for building throwaway
projects and local artifact repositories under tmp_path.
"""
from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure podify/ is importable even when invoked from repo root
_ROOT = Path(__file__).resolve().parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from podify.project.descriptor import Dependency, ProjectDescriptor  # noqa: E402

POM_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<project xmlns="http://maven.apache.org/POM/4.0.0">
  <modelVersion>4.0.0</modelVersion>
  <groupId>{group}</groupId>
  <artifactId>{artifact}</artifactId>
  <version>{version}</version>
  <dependencies>
{deps}
  </dependencies>
</project>
"""

POM_DEP = """    <dependency>
      <groupId>{group}</groupId>
      <artifactId>{artifact}</artifactId>
      <version>{version}</version>
      <scope>{scope}</scope>
    </dependency>"""


class FakeRepo:
    """Writes artifacts into a Maven-layout directory."""

    def __init__(self, root: Path):
        self.root = root
        self.root.mkdir(parents=True, exist_ok=True)

    def add(self, coordinate: str, deps=(), extension: str = "jar",
            content: bytes | None = None) -> Path:
        """Add ``group:artifact:version`` with optional pom dependencies.

        ``deps`` items are coordinates, or (coordinate, scope) tuples.
        """
        group, artifact, version = coordinate.split(":")
        adir = self.root.joinpath(*group.split("."), artifact, version)
        adir.mkdir(parents=True, exist_ok=True)
        path = adir / f"{artifact}-{version}.{extension}"
        path.write_bytes(content if content is not None else f"{coordinate}".encode())
        dep_xml = []
        for d in deps:
            coord, scope = (d, "compile") if isinstance(d, str) else d
            g, a, v = coord.split(":")
            dep_xml.append(POM_DEP.format(group=g, artifact=a, version=v, scope=scope))
        (adir / f"{artifact}-{version}.pom").write_text(
            POM_TEMPLATE.format(group=group, artifact=artifact, version=version,
                                deps="\n".join(dep_xml)))
        return path


class StubBuilder:
    """Primary-artifact builder returning a fixed jar and counting calls."""

    def __init__(self, jar: Path):
        self.jar = jar
        self.calls = 0

    def build(self, project):
        self.calls += 1
        return self.jar


@pytest.fixture
def fake_repo(tmp_path) -> FakeRepo:
    return FakeRepo(tmp_path / "m2")


@pytest.fixture
def app_root(tmp_path) -> Path:
    """A project root with conf/, src/ and public/ (no doc/ or etc/)."""
    root = tmp_path / "app"
    (root / "conf").mkdir(parents=True)
    (root / "conf" / "app.conf").write_text("port = 8080\n")
    (root / "src" / "main" / "clojure").mkdir(parents=True)
    (root / "src" / "main" / "clojure" / "core.clj").write_text("(ns app.core)\n")
    (root / "public" / "css").mkdir(parents=True)
    (root / "public" / "css" / "site.css").write_text("body {}\n")
    (root / "public" / "index.html").write_text("<html></html>\n")
    return root


@pytest.fixture
def app_jar(tmp_path) -> Path:
    jar = tmp_path / "build" / "app.jar"
    jar.parent.mkdir(parents=True)
    jar.write_bytes(b"PK\x03\x04app")
    return jar


@pytest.fixture
def stub_builder(app_jar) -> StubBuilder:
    return StubBuilder(app_jar)


def make_project(root: Path, **kwargs) -> ProjectDescriptor:
    deps = kwargs.pop("dependencies", ())
    managed = kwargs.pop("managed_dependencies", ())
    return ProjectDescriptor(
        root=root,
        name=kwargs.pop("name", "app"),
        version=kwargs.pop("version", "1.0.0"),
        dependencies=tuple(Dependency.parse(d) for d in deps),
        managed_dependencies=tuple(Dependency.parse(d) for d in managed),
        **kwargs,
    )
