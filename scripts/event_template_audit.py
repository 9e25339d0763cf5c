"""Compare ``log_event`` call sites with the event template catalog.

Reports ``(domain, action)`` pairs logged somewhere in the package without a
template (missing) and templates nothing logs (unused). Exit status is 1 when
templates are missing.
"""

from __future__ import annotations

import argparse
import ast
import json
import sys
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

PACKAGE_ROOT = Path(__file__).resolve().parent.parent / "relaychat"
TEMPLATES_JSON = PACKAGE_ROOT / "logs" / "event_templates.json"


def iter_python_files(root: Path) -> Iterable[Path]:
    for path in sorted(root.rglob("*.py")):
        if not path.name.startswith("."):
            yield path


def _string_values(expr: ast.AST) -> set[str]:
    """String literals an expression can evaluate to (ternaries included)."""
    if isinstance(expr, ast.Constant) and isinstance(expr.value, str):
        return {expr.value}
    if isinstance(expr, ast.IfExp):
        return _string_values(expr.body) | _string_values(expr.orelse)
    return set()


def _pairs_from_call(node: ast.Call) -> set[tuple[str, str]]:
    domain_expr = node.args[0] if node.args else None
    action_expr = node.args[1] if len(node.args) > 1 else None
    for kw in node.keywords:
        if kw.arg == "domain":
            domain_expr = kw.value
        elif kw.arg == "action":
            action_expr = kw.value
    if domain_expr is None or action_expr is None:
        return set()
    return {
        (domain, action)
        for domain in _string_values(domain_expr)
        for action in _string_values(action_expr)
    }


def extract_references(paths: Iterable[Path]) -> set[tuple[str, str]]:
    refs: set[tuple[str, str]] = set()
    for path in paths:
        try:
            tree = ast.parse(path.read_text(encoding="utf-8"), filename=str(path))
        except (OSError, SyntaxError, UnicodeDecodeError) as e:
            print(f"Skipping {path}: {e}", file=sys.stderr)
            continue
        for node in ast.walk(tree):
            if (
                isinstance(node, ast.Call)
                and isinstance(node.func, ast.Attribute)
                and node.func.attr == "log_event"
            ):
                refs.update(_pairs_from_call(node))
    return refs


def load_template_keys(path: Path = TEMPLATES_JSON) -> set[tuple[str, str]]:
    with path.open("r", encoding="utf-8") as f:
        raw = json.load(f)
    return {
        (domain, action)
        for domain, actions in raw.items()
        if isinstance(actions, dict)
        for action in actions
    }


@dataclass(slots=True)
class AuditResult:
    missing: set[tuple[str, str]]
    unused: set[tuple[str, str]]


def audit(root: Path = PACKAGE_ROOT, templates: Path = TEMPLATES_JSON) -> AuditResult:
    code_refs = extract_references(iter_python_files(root))
    keys = load_template_keys(templates)
    return AuditResult(missing=code_refs - keys, unused=keys - code_refs)


def emit_human(result: AuditResult) -> None:
    print("Event Template Audit Report")
    print("===========================")
    for title, pairs in (("Missing templates", result.missing), ("Unused templates", result.unused)):
        if not pairs:
            print(f"No {title.lower()}.")
            continue
        print(f"{title} ({len(pairs)}):")
        for domain, action in sorted(pairs):
            print(f"  - {domain}:{action}")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Audit event templates vs code usages")
    parser.add_argument("--json-output", action="store_true", help="Emit JSON diff result")
    args = parser.parse_args(argv)
    result = audit()
    if args.json_output:
        print(
            json.dumps(
                {"missing": sorted(result.missing), "unused": sorted(result.unused)},
                indent=2,
            )
        )
    else:
        emit_human(result)
    return 1 if result.missing else 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
