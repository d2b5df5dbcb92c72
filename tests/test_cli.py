"""CLI tests for export, catalog and check."""

import json
import uuid
from pathlib import Path

import pytest

from schemata import cli


MODULE_SOURCE = '''
from schemata import s

Address = s.object({"city": s.string()}).id("Address")
Person = s.object({"name": s.string().min(1), "home": Address}).id("Person")
not_a_schema = 42
'''


@pytest.fixture
def schema_module(tmp_path, monkeypatch):
    """A freshly named module defining two named schemas."""
    name = f"cli_schemas_{uuid.uuid4().hex}"
    (tmp_path / f"{name}.py").write_text(MODULE_SOURCE, encoding="utf-8")
    monkeypatch.syspath_prepend(str(tmp_path))
    return name


def _write_json(path: Path, data) -> Path:
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    return path


def test_export(schema_module, capsys):
    code = cli.main(["export", f"{schema_module}:Person"])
    assert code == cli.EXIT_OK
    exported = json.loads(capsys.readouterr().out)
    assert exported["$ref"] == "#/$defs/Person"
    assert set(exported["$defs"]) == {"Person", "Address"}


def test_export_with_ref_template(schema_module, capsys):
    code = cli.main([
        "export", f"{schema_module}:Person",
        "--ref-template", "#/components/schemas/{name}",
        "--defs-key", "schemas",
    ])
    assert code == cli.EXIT_OK
    exported = json.loads(capsys.readouterr().out)
    assert exported["$ref"] == "#/components/schemas/Person"
    assert "schemas" in exported


def test_catalog(schema_module, capsys):
    code = cli.main(["catalog", schema_module, "--title", "People"])
    assert code == cli.EXIT_OK
    catalog = json.loads(capsys.readouterr().out)
    assert catalog["info"]["title"] == "People"
    assert list(catalog["components"]["schemas"]) == ["Address", "Person"]


def test_catalog_to_file(schema_module, tmp_path, capsys):
    out = tmp_path / "out" / "catalog.json"
    code = cli.main(["catalog", schema_module, "--out", str(out), "--indent", "2"])
    assert code == cli.EXIT_OK
    assert "Catalog written" in capsys.readouterr().out
    assert "Person" in json.loads(out.read_text(encoding="utf-8"))["components"]["schemas"]


def test_check_valid(schema_module, tmp_path, capsys):
    data = _write_json(tmp_path / "ok.json", {"name": "Ada", "home": {"city": "London"}})
    code = cli.main(["check", f"{schema_module}:Person", str(data)])
    assert code == cli.EXIT_OK
    assert "[OK]" in capsys.readouterr().out


def test_check_invalid_lists_issues(schema_module, tmp_path, capsys):
    data = _write_json(tmp_path / "bad.json", {"name": "", "home": {}})
    code = cli.main(["check", f"{schema_module}:Person", str(data)])
    assert code == cli.EXIT_INVALID
    out = capsys.readouterr().out
    assert "[FAILED] 2 issue(s)" in out
    assert "too_small" in out
    assert "missing_property" in out
    assert "at home.city" in out


def test_check_quiet_prints_nothing(schema_module, tmp_path, capsys):
    data = _write_json(tmp_path / "bad.json", {})
    code = cli.main(["check", f"{schema_module}:Person", str(data), "--quiet"])
    assert code == cli.EXIT_INVALID
    assert capsys.readouterr().out == ""


@pytest.mark.parametrize("target", [
    "no_colon",
    "missing_module_xyz:Thing",
])
def test_bad_targets_are_usage_errors(target, capsys):
    code = cli.main(["export", target])
    assert code == cli.EXIT_USAGE
    assert "Error:" in capsys.readouterr().err


def test_missing_attribute_and_non_schema(schema_module, capsys):
    assert cli.main(["export", f"{schema_module}:Nope"]) == cli.EXIT_USAGE
    assert cli.main(["export", f"{schema_module}:not_a_schema"]) == cli.EXIT_USAGE


def test_check_missing_file(schema_module, tmp_path):
    code = cli.main(["check", f"{schema_module}:Person", str(tmp_path / "absent.json")])
    assert code == cli.EXIT_USAGE


def test_check_invalid_json(schema_module, tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    assert cli.main(["check", f"{schema_module}:Person", str(path)]) == cli.EXIT_USAGE


def test_no_command_prints_help(capsys):
    assert cli.main([]) == cli.EXIT_USAGE
    assert "usage" in capsys.readouterr().out


def test_version(capsys):
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--version"])
    assert excinfo.value.code == 0
    assert "schemata" in capsys.readouterr().out
