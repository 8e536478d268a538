from typer.testing import CliRunner

from rbspatch.cli.main import app
from rbspatch.common import L
from rbspatch.test_utils import SpyBus

runner = CliRunner()

BASE = """\
class A
  def a: () -> void
  def b: () -> void
end
"""

PATCH = """\
class A
  %a{patch:append_after(a)}
  def c: () -> void
end
"""

MERGED = "class A\n  def a: () -> void\n  def c: () -> void\n  def b: () -> void\nend\n"


def test_merge_prints_to_stdout(workspace_factory):
    root = (
        workspace_factory.with_signature("sig/base.rbs", BASE)
        .with_signature("patches/a.rbs", PATCH)
        .build()
    )

    result = runner.invoke(
        app, ["merge", str(root / "sig"), str(root / "patches")], catch_exceptions=False
    )

    assert result.exit_code == 0
    # Status messages go to stderr; older Click versions mix it into stdout.
    assert result.stdout.endswith(MERGED)


def test_merge_writes_output_file(workspace_factory, monkeypatch):
    root = (
        workspace_factory.with_signature("sig/base.rbs", BASE)
        .with_signature("patches/a.rbs", PATCH)
        .build()
    )
    spy_bus = SpyBus()

    with spy_bus.patch(monkeypatch):
        result = runner.invoke(
            app, ["merge", "sig", "patches", "-o", "out/merged.rbs"], catch_exceptions=False
        )

    assert result.exit_code == 0
    assert (root / "out" / "merged.rbs").read_text(encoding="utf-8") == MERGED
    spy_bus.assert_id_called(L.merge.output.written, level="success")
    spy_bus.assert_id_called(L.merge.layer.applied, level="debug")
    assert {
        "level": "info",
        "id": "merge.summary",
        "params": {"count": 2},
    } in spy_bus.get_messages()


def test_merge_uses_configured_paths(workspace_factory):
    root = (
        workspace_factory.with_config(
            {"patch_paths": ["sig", "patches"], "output": "build/merged.rbs"}
        )
        .with_signature("sig/base.rbs", BASE)
        .with_signature("patches/a.rbs", PATCH)
        .build()
    )

    result = runner.invoke(app, ["merge"], catch_exceptions=False)

    assert result.exit_code == 0
    assert (root / "build" / "merged.rbs").read_text(encoding="utf-8") == MERGED


def test_merge_without_inputs_fails(workspace_factory, monkeypatch):
    workspace_factory.with_project_name("demo").build()
    spy_bus = SpyBus()

    with spy_bus.patch(monkeypatch):
        result = runner.invoke(app, ["merge"], catch_exceptions=False)

    assert result.exit_code == 1
    spy_bus.assert_id_called(L.merge.error.no_inputs, level="error")


def test_merge_reports_missing_path(workspace_factory, monkeypatch):
    workspace_factory.with_project_name("demo").build()
    spy_bus = SpyBus()

    with spy_bus.patch(monkeypatch):
        result = runner.invoke(app, ["merge", "nowhere"], catch_exceptions=False)

    assert result.exit_code == 1
    spy_bus.assert_id_called(L.merge.error.not_found, level="error")


def test_merge_reports_syntax_errors(workspace_factory, monkeypatch):
    workspace_factory.with_signature("sig/bad.rbs", "class A\n  def a: (\nend\n").build()
    spy_bus = SpyBus()

    with spy_bus.patch(monkeypatch):
        result = runner.invoke(app, ["merge", "sig"], catch_exceptions=False)

    assert result.exit_code == 1
    spy_bus.assert_id_called(L.merge.error.syntax, level="error")
    assert "class A" not in result.stdout


def test_already_applied_paths_are_reported(workspace_factory, monkeypatch):
    workspace_factory.with_signature("sig/base.rbs", BASE).build()
    spy_bus = SpyBus()

    with spy_bus.patch(monkeypatch):
        result = runner.invoke(
            app, ["-v", "merge", "sig", "sig/base.rbs"], catch_exceptions=False
        )

    assert result.exit_code == 0
    spy_bus.assert_id_called(L.merge.layer.skipped, level="debug")
