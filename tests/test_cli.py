from pathlib import Path

from typer.testing import CliRunner

from scaffprep import cli
from scaffprep.errors import CheckoutError

from .conftest import FakeClone

runner = CliRunner()

TEMPLATE = """\
apiVersion: backstage.io/v1beta2
kind: Template
metadata:
  name: t1
  annotations:
    backstage.io/managed-by-location: url:https://bitbucket.org/org/repo/templates/t1/template.yaml
spec:
  path: ./skeleton
"""


def _patch_clone(monkeypatch, clone):
    monkeypatch.setattr("scaffprep.preparers.clone_repository", clone)


def test_prepare_prints_template_dir(tmp_path, monkeypatch):
    clone = FakeClone()
    _patch_clone(monkeypatch, clone)
    template = tmp_path / "template.yaml"
    template.write_text(TEMPLATE, encoding="utf-8")
    work = tmp_path / "work"
    work.mkdir()

    result = runner.invoke(cli.app, ["prepare", str(template), "-w", str(work)])

    assert result.exit_code == 0, result.output
    [(url, staging, _)] = clone.calls
    assert url == "https://bitbucket.org/org/repo"
    assert Path(result.output.strip()) == staging / "templates" / "t1" / "skeleton"


def test_prepare_reports_checkout_errors(tmp_path, monkeypatch):
    _patch_clone(monkeypatch, FakeClone(fail=CheckoutError("auth failed")))
    template = tmp_path / "template.yaml"
    template.write_text(TEMPLATE, encoding="utf-8")

    result = runner.invoke(cli.app, ["prepare", str(template), "-w", str(tmp_path)])

    assert result.exit_code == 1
    assert "auth failed" in result.output


def test_prepare_missing_template_file(tmp_path):
    result = runner.invoke(cli.app, ["prepare", str(tmp_path / "nope.yaml")])
    assert result.exit_code == 1
    assert "not found" in result.output


def test_protocols_command():
    result = runner.invoke(cli.app, ["protocols"])
    assert result.exit_code == 0
    assert result.output.split() == ["bitbucket/api", "url"]


def test_prepare_rejects_missing_config_file(tmp_path, monkeypatch):
    clone = FakeClone()
    _patch_clone(monkeypatch, clone)
    template = tmp_path / "template.yaml"
    template.write_text(TEMPLATE, encoding="utf-8")

    result = runner.invoke(
        cli.app,
        ["prepare", str(template), "-w", str(tmp_path), "-c", str(tmp_path / "typo.yaml")],
    )

    assert result.exit_code == 1
    assert "Config file not found" in result.output
    assert clone.calls == []
