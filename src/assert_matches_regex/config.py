from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from expandvars import expandvars
from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from assert_matches_regex.errors import MessageTemplateError
from assert_matches_regex.matching import render_message


class Expectation(str, Enum):
    MATCH = "match"
    NO_MATCH = "no_match"


def _expand(value: str, missing: list[str], label: str) -> str:
    try:
        return expandvars(value, nounset=True)
    except Exception:
        # Variable is missing and has no default
        missing.append(f"  {label}={value}")
        return value


class MatchCase(BaseModel):
    model_config = ConfigDict(extra="forbid")
    name: str
    haystack: str | None = None
    haystack_file: str | None = None
    pattern: str
    message: str | None = None
    args: list[Any] = []
    expect: Expectation = Expectation.MATCH

    @model_validator(mode="after")
    def exactly_one_haystack_source(self) -> "MatchCase":
        if (self.haystack is None) == (self.haystack_file is None):
            raise ValueError(
                f"Case '{self.name}' must set exactly one of 'haystack' or 'haystack_file'"
            )
        return self

    @model_validator(mode="after")
    def expand_env_variables(self) -> "MatchCase":
        """Expand ${VAR} references in the haystack, message and args.

        Raises ValueError listing every missing variable so the user can fix them
        all at once rather than hitting them one-by-one mid-run.
        """
        missing: list[str] = []
        if self.haystack is not None:
            self.haystack = _expand(self.haystack, missing, "haystack")
        if self.message is not None:
            self.message = _expand(self.message, missing, "message")
        self.args = [
            _expand(arg, missing, f"args[{i}]") if isinstance(arg, str) else arg
            for i, arg in enumerate(self.args)
        ]

        if missing:
            details = "\n".join(missing)
            raise ValueError(
                f"Case '{self.name}' has missing environment variables:\n{details}\n"
                "Write \\$ for a literal dollar sign."
            )

        return self

    @model_validator(mode="after")
    def message_fits_args(self) -> "MatchCase":
        if self.message is not None:
            try:
                render_message(self.message, tuple(self.args))
            except MessageTemplateError as e:
                raise ValueError(f"Case '{self.name}' has an {e}") from e
        return self


class SuiteConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")
    name: str = "regex-suite"
    cases: list[MatchCase]

    @field_validator("cases")
    @classmethod
    def cases_must_be_unique_and_non_empty(cls, v: list[MatchCase]) -> list[MatchCase]:
        if not v:
            raise ValueError("cases must not be empty")
        seen: set[str] = set()
        for case in v:
            if case.name in seen:
                raise ValueError(f"Duplicate case name '{case.name}'")
            seen.add(case.name)
        return v


def load_suite(path: Path) -> SuiteConfig:
    """Load and validate a match suite from a YAML file."""
    suite_dir = path.parent.resolve()

    with open(path) as f:
        raw = yaml.safe_load(f)

    if not isinstance(raw, dict):
        raise ValueError(f"{path} does not contain a YAML mapping")

    suite = SuiteConfig(**raw)

    # Resolve relative haystack files relative to the suite file location
    for case in suite.cases:
        if case.haystack_file is None:
            continue
        file_path = Path(case.haystack_file)
        if not file_path.is_absolute():
            case.haystack_file = str((suite_dir / file_path).resolve())

    return suite
