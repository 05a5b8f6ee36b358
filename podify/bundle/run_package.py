"""CLI entrypoint for the packaging pipeline.

    python -m podify.bundle.run_package libjars --project project.yaml
    python -m podify.bundle.run_package standalone --project project.yaml --to-dir /opt/app
"""

import argparse
import logging
import sys
from pathlib import Path

from podify.bundle.assemble import package_libjars, package_standalone
from podify.bundle.launcher import default_provider
from podify.errors import PackagingError
from podify.io.fingerprint import tree_digest
from podify.io.readers import load_project, load_project_config, resolve_repository
from podify.resolve.artifacts import CommandArtifactBuilder, PrebuiltArtifact
from podify.resolve.repository import LocalRepositoryResolver


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Package an application for deployment")
    sub = parser.add_subparsers(dest="command", required=True)

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--project", required=True, help="Path to project.yaml")
    common.add_argument("--to-dir", default=None, help="Override the target directory")
    common.add_argument("--repository", default=None,
                        help="Local artifact repository (default: ~/.m2/repository)")
    common.add_argument("--build-command", default=None,
                        help="Command that builds the primary jar before packaging")
    common.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    sub.add_parser("libjars", parents=[common],
                   help="Copy every runtime jar into a flat directory (default <root>/lib)")
    standalone = sub.add_parser("standalone", parents=[common],
                                help="Build a runnable distribution (default <root>/pkg)")
    standalone.add_argument("--resources", default=None,
                            help="Directory whose launcher files shadow the bundled ones")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(message)s")

    print("=" * 60)
    print(f"PACKAGE {args.command.upper()}")
    print("=" * 60)

    try:
        config = load_project_config(args.project)
        project = load_project(args.project)
    except (OSError, ValueError) as e:
        print(f"  ✗ Cannot load project: {e}")
        return 1

    repository = resolve_repository(config, args.repository)
    build_command = args.build_command or config.get("build_command")
    builder = CommandArtifactBuilder(build_command) if build_command else PrebuiltArtifact()
    resolver = LocalRepositoryResolver(repository)

    print(f"Project: {project.name} {project.version}")
    print(f"Root: {project.root}")
    print(f"Repository: {repository}")
    print()

    try:
        if args.command == "libjars":
            report = package_libjars(project, builder, resolver, to_dir=args.to_dir)
        else:
            resources = args.resources or config.get("resources_dir")
            if resources:
                resources = Path(resources)
                if not resources.is_absolute():
                    resources = project.root / resources
            report = package_standalone(project, builder, resolver,
                                        provider=default_provider(resources),
                                        to_dir=args.to_dir)
    except PackagingError as e:
        print(f"  ✗ {e.stage} failed: {e}")
        return 1

    print(f"\n  ✓ {report.target}")
    print(f"    {report.summary}")
    print(f"    digest: {tree_digest(report.target)[:16]}")
    print("\n" + "=" * 60)
    print("PACKAGING COMPLETE")
    print("=" * 60)
    return 0


if __name__ == "__main__":
    sys.exit(main())
