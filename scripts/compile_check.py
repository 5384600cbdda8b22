"""Pre-deploy check: Python sources compile, data files parse, templates load."""

from __future__ import annotations

import json
import py_compile
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

SOURCE_DIRS = ("fleet_hub", "scripts", "tests")
ROOT_MODULES = ("app.py", "constants.py", "config.py")


def python_sources() -> list[Path]:
    files = [ROOT / name for name in ROOT_MODULES]
    for directory in SOURCE_DIRS:
        files.extend(p for p in (ROOT / directory).rglob("*.py") if "__pycache__" not in p.parts)
    return files


def check_sources() -> list[str]:
    failures: list[str] = []
    for path in python_sources():
        try:
            py_compile.compile(str(path), doraise=True)
        except py_compile.PyCompileError as exc:
            failures.append(f"{path.relative_to(ROOT)}: {exc.msg}")
    return failures


def check_data_files(data_dir: Path) -> list[str]:
    """Every entity file must hold a list of entities with id, slug and name."""
    failures: list[str] = []
    for path in sorted((data_dir / "entities").glob("*.json")):
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            failures.append(f"{path.name}: {exc}")
            continue
        rows = data.get("entities", []) if isinstance(data, dict) else data
        for i, row in enumerate(rows):
            missing = [k for k in ("id", "slug", "name") if not row.get(k)]
            if missing:
                failures.append(f"{path.name}[{i}]: missing {', '.join(missing)}")
    for name in ("seo/keywords.json", "blog_articles.json"):
        path = data_dir / name
        if not path.exists():
            continue
        try:
            json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            failures.append(f"{name}: {exc}")
    return failures


def check_templates() -> tuple[list[str], list[str]]:
    """Load every Jinja template through the app's environment."""
    try:
        from jinja2 import TemplateSyntaxError

        from app import app
    except ModuleNotFoundError as exc:
        return [], [f"templates: missing dependency {exc.name}"]

    failures: list[str] = []
    for name in app.jinja_env.list_templates():
        try:
            app.jinja_env.get_template(name)
        except TemplateSyntaxError as exc:
            failures.append(f"templates/{name}:{exc.lineno}: {exc.message}")
    return failures, []


def main() -> int:
    import constants

    failures = check_sources() + check_data_files(constants.DATA_DIR)
    template_failures, skipped = check_templates()
    failures += template_failures
    if failures:
        print("Check failed:")
        for item in failures:
            print(f"  {item}")
        return 1
    for item in skipped:
        print(f"Skipped {item}")
    print("Sources, data files and templates OK.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
