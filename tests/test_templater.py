"""Tests for launcher placeholder substitution."""

from podify.bundle.templater import build_template_context, render
from conftest import make_project


class TestRender:
    ctx = {"port": "9090"}

    def test_brace_style(self):
        assert render("use {{port}}", self.ctx) == "use 9090"

    def test_at_style(self):
        assert render("use @@port@@", self.ctx) == "use 9090"

    def test_missing_key_untouched(self):
        assert render("use {{missing}}", self.ctx) == "use {{missing}}"
        assert render("use @@missing@@", self.ctx) == "use @@missing@@"

    def test_every_occurrence_every_key(self):
        text = "{{port}}:@@port@@ {{host}} {{port}}"
        out = render(text, {"port": "1", "host": "h"})
        assert out == "1:1 h 1"

    def test_empty_context(self):
        assert render("{{a}}", {}) == "{{a}}"


class TestContext:
    def test_context_from_settings(self, tmp_path):
        project = make_project(tmp_path, settings={
            "kill_port": 4444,
            "jvm_opts": ["-Xmx1g", "-Dkill={{kill-port}}"],
            "agentlib": "jdwp=transport=dt_socket",
        })
        ctx = build_template_context(project)
        assert ctx["kill-port"] == "4444"
        assert ctx["vmopts"] == "-Xmx1g -Dkill=4444"
        assert ctx["agent"] == "jdwp=transport=dt_socket"
        assert ctx["app-name"] == "app"

    def test_unset_settings_render_empty(self, tmp_path):
        ctx = build_template_context(make_project(tmp_path))
        assert ctx["kill-port"] == ""
        assert ctx["vmopts"] == ""
        assert ctx["agent"] == ""
