"""Tests for the packaging CLI and the path checker."""

import subprocess
import sys
from pathlib import Path

import pytest
import yaml

from podify.bundle import run_package
from podify.io import check_paths
from podify.io.fingerprint import tree_digest

REPO_ROOT = Path(__file__).resolve().parent.parent


@pytest.fixture
def project_file(app_root, fake_repo):
    """project.yaml for app_root with a prebuilt jar under target/."""
    fake_repo.add("org.a:A:1.0")
    fake_repo.add("org.b:B:2.1")
    (app_root / "target").mkdir()
    (app_root / "target" / "app-1.0.0.jar").write_bytes(b"PK")
    path = app_root / "project.yaml"
    path.write_text(yaml.safe_dump({
        "name": "app",
        "version": "1.0.0",
        "repository": str(fake_repo.root),
        "dependencies": ["org.a:A:1.0", "org.b:B:2.0"],
        "managed_dependencies": ["org.b:B:2.1"],
        "settings": {"kill_port": 7001},
    }))
    return path


def test_standalone_in_process(project_file, tmp_path, capsys):
    target = tmp_path / "dist"
    rc = run_package.main(["standalone", "--project", str(project_file),
                           "--to-dir", str(target)])
    out = capsys.readouterr().out
    assert rc == 0, out
    assert "PACKAGING COMPLETE" in out
    assert f"digest: {tree_digest(target)[:16]}" in out
    assert sorted(p.name for p in (target / "lib").iterdir()) == \
        ["A-1.0.jar", "B-2.1.jar", "app-1.0.0.jar"]
    assert "7001" in (target / "bin" / "podify-stop").read_text()


def test_libjars_default_target(project_file):
    assert run_package.main(["libjars", "--project", str(project_file)]) == 0
    assert (project_file.parent / "lib" / "app-1.0.0.jar").exists()


def test_resources_override(project_file, tmp_path):
    res = project_file.parent / "launchers"
    res.mkdir()
    (res / "podify").write_text("custom start on {{kill-port}}")
    rc = run_package.main(["standalone", "--project", str(project_file),
                           "--to-dir", str(tmp_path / "dist"), "--resources", "launchers"])
    assert rc == 0
    assert (tmp_path / "dist" / "bin" / "podify").read_text() == "custom start on 7001"


def test_missing_dependency_exit_code(project_file, tmp_path, capsys):
    data = yaml.safe_load(project_file.read_text())
    data["dependencies"].append("org.x:ghost:0.1")
    project_file.write_text(yaml.safe_dump(data))
    rc = run_package.main(["libjars", "--project", str(project_file),
                           "--to-dir", str(tmp_path / "lib")])
    out = capsys.readouterr().out
    assert rc == 1
    assert "resolution failed" in out
    assert "org.x:ghost:0.1" in out


def test_missing_jar_is_build_failure(project_file, capsys):
    (project_file.parent / "target" / "app-1.0.0.jar").unlink()
    assert run_package.main(["libjars", "--project", str(project_file)]) == 1
    assert "build failed" in capsys.readouterr().out


def test_missing_project_file(tmp_path, capsys):
    assert run_package.main(["libjars", "--project", str(tmp_path / "nope.yaml")]) == 1
    assert "Cannot load project" in capsys.readouterr().out


def test_malformed_yaml_is_reported(tmp_path, capsys):
    bad = tmp_path / "project.yaml"
    bad.write_text("name: [unclosed\n")
    assert run_package.main(["libjars", "--project", str(bad)]) == 1
    out = capsys.readouterr().out
    assert "Cannot load project" in out
    assert "Invalid YAML" in out


def test_list_profile_body_is_reported(tmp_path, capsys):
    bad = tmp_path / "project.yaml"
    bad.write_text(yaml.safe_dump({"name": "app", "profiles": {"dev": ["org:x:1"]}}))
    assert run_package.main(["libjars", "--project", str(bad)]) == 1
    assert "Profile 'dev' must be a mapping" in capsys.readouterr().out


def test_cli_subprocess(project_file, tmp_path):
    """Run the module the way users do."""
    result = subprocess.run(
        [sys.executable, "-m", "podify.bundle.run_package", "standalone",
         "--project", str(project_file), "--to-dir", str(tmp_path / "dist")],
        capture_output=True,
        text=True,
        cwd=REPO_ROOT,
    )
    assert result.returncode == 0, (
        f"run_package failed with return code {result.returncode}\n"
        f"STDOUT:\n{result.stdout}\n"
        f"STDERR:\n{result.stderr}"
    )
    assert (tmp_path / "dist" / "logs" / "readme.txt").exists()


# ── Path checker ─────────────────────────────────────────────────────────────


def test_check_paths_ok(project_file, capsys):
    assert check_paths.main(["--project", str(project_file)]) == 0
    out = capsys.readouterr().out
    assert "PATH VALIDATION COMPLETE" in out
    assert "✓ conf/" in out
    assert "- doc/" in out


def test_check_paths_missing_repository(project_file, tmp_path, capsys):
    rc = check_paths.main(["--project", str(project_file),
                           "--repository", str(tmp_path / "no-repo")])
    assert rc == 1
    assert "repository does not exist" in capsys.readouterr().out


def test_check_paths_malformed_yaml(tmp_path, capsys):
    bad = tmp_path / "project.yaml"
    bad.write_text("name: [unclosed\n")
    assert check_paths.main(["--project", str(bad)]) == 1
    assert "ERROR: Invalid YAML" in capsys.readouterr().out


def test_check_paths_lists_bundled_profiles(project_file, capsys):
    data = yaml.safe_load(project_file.read_text())
    data["profiles"] = {"provided": {"scope": "provided"}, "dev": {}}
    data["default_profiles"] = ["base", "provided", "dev"]
    data["included_profiles"] = ["provided", "dev"]
    project_file.write_text(yaml.safe_dump(data))
    assert check_paths.main(["--project", str(project_file)]) == 0
    out = capsys.readouterr().out
    assert "retained: provided" in out
    assert "excluded: base, dev" in out
    assert "bundled:  (none)" in out
