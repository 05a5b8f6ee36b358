"""CLI tool to check a project file and the paths packaging will use."""

import argparse
import sys
from pathlib import Path

from podify.bundle.assemble import AUX_DIRS
from podify.io.readers import load_project, load_project_config, resolve_repository
from podify.project.profiles import excluded_profiles, packaging_profiles, retained_profiles


def main(argv=None):
    """Check the project root, local repository and auxiliary directories."""
    parser = argparse.ArgumentParser(description="Check configured paths")
    parser.add_argument("--project", required=True, help="Path to project.yaml")
    parser.add_argument("--repository", default=None, help="Local artifact repository")
    args = parser.parse_args(argv)

    config_path = Path(args.project)
    if not config_path.exists():
        print(f"ERROR: Project file not found: {config_path}")
        return 1

    try:
        config = load_project_config(config_path)
        project = load_project(config_path)
    except ValueError as e:
        print(f"ERROR: {e}")
        return 1

    print("=" * 60)
    print("PATH VALIDATION")
    print("=" * 60)

    print(f"\nroot (absolute):")
    print(f"  {project.root}")
    if not project.root.is_dir():
        print(f"  ✗ ERROR: root is not a directory: {project.root}")
        return 1
    print(f"  ✓ OK: root exists and is a directory")

    repository = resolve_repository(config, args.repository)
    print(f"\nrepository (absolute):")
    print(f"  {repository}")
    if not repository.is_dir():
        print(f"  ✗ ERROR: repository does not exist: {repository}")
        print(f"  Dependencies must already be present locally; nothing is downloaded.")
        return 1
    print(f"  ✓ OK: repository exists and is a directory")

    print("\nAuxiliary directories:")
    for name in AUX_DIRS:
        mark = "✓" if (project.root / name).is_dir() else "-"
        print(f"  {mark} {name}/")

    print("\nProfiles:")
    print(f"  retained: {', '.join(retained_profiles(project)) or '(none)'}")
    print(f"  excluded: {', '.join(excluded_profiles(project)) or '(none)'}")
    print(f"  bundled:  {', '.join(packaging_profiles(project)) or '(none)'}")

    print("\n" + "=" * 60)
    print("PATH VALIDATION COMPLETE")
    print("=" * 60)
    return 0


if __name__ == "__main__":
    sys.exit(main())
