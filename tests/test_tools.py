from __future__ import annotations

import importlib.util

from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]


def _load(relative: str):
    path = ROOT / relative
    spec = importlib.util.spec_from_file_location(path.stem, path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_duplicate_operation_ids_detected():
    export = _load("tools/export_openapi.py")
    spec = {
        "paths": {
            "/a": {"get": {"operationId": "same"}},
            "/b": {"post": {"operationId": "same"}, "parameters": []},
            "/c": {"get": {"operationId": "unique"}},
        }
    }
    assert export.duplicate_operation_ids(spec) == ["same"]


def test_app_schema_has_no_duplicates(openapi_spec):
    export = _load("tools/export_openapi.py")
    assert export.duplicate_operation_ids(openapi_spec) == []


def test_swisseph_imports_confined_to_engine(monkeypatch):
    hook = _load("tools/hooks/check_swisseph_imports.py")
    monkeypatch.chdir(ROOT)
    sources = [p.relative_to(ROOT).as_posix() for p in (ROOT / "src").rglob("*.py")]
    assert hook.main(sources) == 0


def test_swisseph_hook_flags_other_modules(tmp_path, monkeypatch):
    hook = _load("tools/hooks/check_swisseph_imports.py")
    monkeypatch.chdir(tmp_path)
    (tmp_path / "rogue.py").write_text("import swisseph as swe\n")
    assert hook.main(["rogue.py"]) == 1
