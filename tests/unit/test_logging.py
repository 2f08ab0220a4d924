from __future__ import annotations

import json
import logging

from github_issue_dispatch.logging import JsonFormatter, TextFormatter


def _record(**extra: object) -> logging.LogRecord:
    record = logging.LogRecord(
        name="github_issue_dispatch.issues",
        level=logging.WARNING,
        pathname=__file__,
        lineno=1,
        msg="Failed to add automation comment to issue #%d",
        args=(42,),
        exc_info=None,
    )
    record.__dict__.update(extra)
    return record


def test_json_formatter_includes_extra_fields() -> None:
    line = JsonFormatter().format(_record(repo="acme/widgets", issue_number=42))
    payload = json.loads(line)

    assert payload["level"] == "WARNING"
    assert payload["logger"] == "github_issue_dispatch.issues"
    assert payload["message"] == "Failed to add automation comment to issue #42"
    assert payload["extra"] == {"repo": "acme/widgets", "issue_number": 42}


def test_json_formatter_omits_empty_extra() -> None:
    payload = json.loads(JsonFormatter().format(_record()))

    assert "extra" not in payload


def test_text_formatter_appends_extra_pairs() -> None:
    line = TextFormatter().format(_record(repo="acme/widgets"))

    assert "WARNING" in line
    assert line.endswith("repo=acme/widgets")
