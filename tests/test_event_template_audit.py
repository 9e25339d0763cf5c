"""Event template catalog stays in sync with the ``log_event`` call sites."""

from __future__ import annotations

import string

from relaychat.logs.logger import EVENT_TEMPLATES
from scripts.event_template_audit import audit, extract_references, main


def test_no_missing_or_unused_templates():
    result = audit()
    assert result.missing == set()
    assert result.unused == set()


def test_templates_render_with_placeholder_values():
    failures: list[tuple[str, str, str]] = []
    for (domain, action), template in EVENT_TEMPLATES.items():
        fields = {name for _, name, _, _ in string.Formatter().parse(template) if name}
        try:
            template.format(**dict.fromkeys(fields, "x"))
        except (KeyError, IndexError, ValueError) as e:
            failures.append((domain, action, str(e)))
    assert failures == []


def test_template_keys_lowercase():
    for domain, action in EVENT_TEMPLATES:
        assert domain == domain.lower()
        assert action == action.lower()


def test_extract_references_handles_ternary_and_keywords(tmp_path):
    source = tmp_path / "sample.py"
    source.write_text(
        "logger.log_event('irc', 'ping' if ok else 'raw_in', line=x)\n"
        "logger.log_event(domain='session', action='reset')\n"
        "logger.log_event(dynamic, 'skipped')\n",
        encoding="utf-8",
    )
    assert extract_references([source]) == {
        ("irc", "ping"),
        ("irc", "raw_in"),
        ("session", "reset"),
    }


def test_main_exit_code(capsys):
    assert main(["--json-output"]) == 0
    assert '"missing": []' in capsys.readouterr().out
