"""Placeholder substitution for launcher scripts.

Two interchangeable delimiter styles are recognised, ``{{key}}`` and
``@@key@@``.  Substitution is plain text replacement: placeholders whose key
is not in the context are left exactly as written.
"""

from typing import Any, Dict, Mapping

from podify.project.descriptor import ProjectDescriptor

DELIMITERS = (("{{", "}}"), ("@@", "@@"))


def render(text: str, context: Mapping[str, str]) -> str:
    """Replace every known placeholder in text, in context iteration order."""
    for key, value in context.items():
        for left, right in DELIMITERS:
            text = text.replace(f"{left}{key}{right}", value)
    return text


def _as_text(value: Any) -> str:
    return "" if value is None else str(value)


def build_template_context(project: ProjectDescriptor) -> Dict[str, str]:
    """Context for launcher scripts, built from project settings.

    ``vmopts`` is the jvm_opts list joined by spaces; each option may itself
    reference ``kill-port``.
    """
    settings = project.settings
    context = {"kill-port": _as_text(settings.get("kill_port"))}

    jvm_opts = settings.get("jvm_opts") or []
    if isinstance(jvm_opts, str):
        jvm_opts = [jvm_opts]
    context["vmopts"] = " ".join(render(str(opt), context) for opt in jvm_opts)
    context["agent"] = _as_text(settings.get("agentlib"))
    context["app-name"] = project.name
    context["app-version"] = project.version
    return context
