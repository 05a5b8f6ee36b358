"""Profile algebra for packaging.

Two descriptors come out of a project:

  build descriptor       base + ``uberjar`` + every retained profile, used to
                         build the primary jar and to fill launcher templates
  resolution descriptor  the build descriptor with every default-active
                         profile's directives taken back out, used to decide
                         which dependency jars are bundled

with

    excluded = default_profiles - provided-scope profiles
    retained = included_profiles - excluded          (order preserved)

So a default-only profile such as ``dev`` is never merged, a default profile
that is also provided-scope is merged for the build but its dependencies are
not bundled, and a provided-scope profile that is not default-active stays in
both.  Merging is pure: the input descriptor is never modified.
"""

import logging
from dataclasses import replace
from typing import Dict, Iterable, List, Tuple

from podify.errors import ProfileError
from podify.project.descriptor import Dependency, Profile, ProjectDescriptor

logger = logging.getLogger(__name__)

UBERJAR_PROFILE = "uberjar"

# Keys that survive unmerging the default profiles.
WHITELIST_KEYS = ("settings", "jar_inclusions")


def provided_profiles(project: ProjectDescriptor) -> List[str]:
    """Names of profiles declared with provided scope."""
    return [name for name, p in project.profiles.items() if p.provided]


def excluded_profiles(project: ProjectDescriptor) -> List[str]:
    """Default-active profiles that are not provided-scope."""
    scoped = set(provided_profiles(project))
    return [name for name in project.default_profiles if name not in scoped]


def retained_profiles(project: ProjectDescriptor) -> List[str]:
    """Included profiles that are merged into the build descriptor."""
    excluded = set(excluded_profiles(project))
    return [name for name in project.included_profiles if name not in excluded]


def _build_stack(project: ProjectDescriptor) -> List[str]:
    stack: List[str] = []
    if project.profile(UBERJAR_PROFILE) is not None:
        stack.append(UBERJAR_PROFILE)
    stack.extend(name for name in retained_profiles(project) if name != UBERJAR_PROFILE)
    return stack


def packaging_profiles(project: ProjectDescriptor) -> List[str]:
    """Profiles whose directives remain once the default profiles are unmerged."""
    defaults = set(project.default_profiles)
    return [name for name in _build_stack(project) if name not in defaults]


def _merge_deps(base: Iterable[Dependency], extra: Iterable[Dependency]) -> Tuple[Dependency, ...]:
    # A later entry for the same group:artifact replaces the earlier one in place.
    merged: Dict[str, Dependency] = {}
    for dep in list(base) + list(extra):
        merged[dep.key] = dep
    return tuple(merged.values())


def _merge_unique(base: Iterable[str], extra: Iterable[str]) -> Tuple[str, ...]:
    return tuple(dict.fromkeys(list(base) + list(extra)))


def merge_profile(project: ProjectDescriptor, profile: Profile) -> ProjectDescriptor:
    """Return ``project`` with one profile's directives applied."""
    settings = dict(project.settings)
    settings.update(profile.settings)
    return replace(
        project,
        dependencies=_merge_deps(project.dependencies, profile.dependencies),
        managed_dependencies=_merge_deps(project.managed_dependencies,
                                         profile.managed_dependencies),
        exclusions=_merge_unique(project.exclusions, profile.exclusions),
        jar_inclusions=_merge_unique(project.jar_inclusions, profile.jar_inclusions),
        settings=settings,
    )


def merge_profiles(project: ProjectDescriptor, names: Iterable[str]) -> ProjectDescriptor:
    """Merge the named profiles in order; undeclared names are fatal."""
    for name in names:
        profile = project.profile(name)
        if profile is None:
            raise ProfileError(f"Profile not declared in project: {name}")
        project = merge_profile(project, profile)
    return project


def effective_descriptor(project: ProjectDescriptor) -> ProjectDescriptor:
    """Compute the build descriptor.

    Steps:
        1. merge ``uberjar`` (when the project declares it);
        2. merge each retained profile in ``included_profiles`` order;
        3. append ``uberjar_inclusions`` to ``jar_inclusions``.
    """
    dropped = [n for n in excluded_profiles(project) if n in project.included_profiles]
    if dropped:
        logger.debug("Excluding default profiles: %s", ", ".join(dropped))

    stack = _build_stack(project)
    logger.debug("Merging profiles: %s", ", ".join(stack) or "(none)")

    effective = merge_profiles(project, stack)
    return replace(
        effective,
        jar_inclusions=tuple(effective.jar_inclusions) + tuple(effective.uberjar_inclusions),
    )


def resolution_descriptor(project: ProjectDescriptor) -> ProjectDescriptor:
    """Compute the descriptor whose dependencies are bundled.

    The build descriptor is recomputed without any default profile, then the
    whitelisted keys are carried back from the full build descriptor.
    """
    effective = effective_descriptor(project)
    unmerged = merge_profiles(project, packaging_profiles(project))
    whites = {key: getattr(effective, key) for key in WHITELIST_KEYS}
    return replace(unmerged, **whites)
