"""Generate JSON Schema and docs for the match suite YAML format."""

from __future__ import annotations

import json
from pathlib import Path

from assert_matches_regex.config import SuiteConfig


def generate_json_schema() -> dict:
    return SuiteConfig.model_json_schema()


def generate_schema_doc() -> str:
    defs = generate_json_schema().get("$defs", {})
    case_fields = ", ".join(defs.get("MatchCase", {}).get("properties", {}))
    expectations = ", ".join(defs.get("Expectation", {}).get("enum", []))

    return "\n".join(
        [
            "# Match suite YAML Schema",
            "",
            "This doc is generated from the Pydantic models.",
            "",
            "## Top-level keys",
            "- `name`: string (optional) - suite name used in reports.",
            "- `cases`: list of match cases (required, non-empty).",
            "",
            "## Match case",
            f"- fields: {{ {case_fields} }}",
            "- exactly one of `haystack` or `haystack_file` must be set",
            f"- `expect`: one of {expectations}",
            "- `${VAR}` references in `haystack`, `message` and `args` are expanded;",
            "  write `\\$` for a literal dollar sign",
            "- `message` is formatted with `args` and must accept all of them",
            "",
        ]
    )


def write_schema_files(schema_path: Path, doc_path: Path) -> None:
    """Write the JSON Schema and its markdown doc, creating parent directories."""
    for path in (schema_path, doc_path):
        path.parent.mkdir(parents=True, exist_ok=True)
    schema_path.write_text(json.dumps(generate_json_schema(), indent=2) + "\n")
    doc_path.write_text(generate_schema_doc())
