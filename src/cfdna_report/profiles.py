"""Report profile loader for per-record-type defaults."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from jsonschema import exceptions as jsex
from jsonschema.validators import validator_for

from cfdna_report.config import ConfigurationError
from cfdna_report.models import RecordType

PACKAGE_ROOT = Path(__file__).resolve().parent
DEFAULT_PROFILES_DIR = PACKAGE_ROOT / "profiles"
PROFILE_SCHEMA_PATH = PACKAGE_ROOT / "schemas" / "report_profile.schema.json"


@dataclass(frozen=True)
class ExternalToolSpec:
    """Executable a report depends on, with its minimum ``major.minor`` version."""

    executable: str
    min_version: tuple[int, int]
    arguments: tuple[str, ...] = ()


@dataclass(frozen=True)
class ReportProfile:
    """Serializable defaults for one report type."""

    name: str
    record_type: RecordType
    description: str
    defaults: dict[str, Any] = field(default_factory=dict)
    external_tool: ExternalToolSpec | None = None

    def criteria_options(self, **overrides: Any) -> dict[str, Any]:
        """Merge profile defaults with CLI overrides, ignoring unset overrides."""

        options = dict(self.defaults)
        options.update({key: value for key, value in overrides.items() if value is not None})
        return options


def compile_profile_validator(schema_path: Path = PROFILE_SCHEMA_PATH):
    schema = json.loads(schema_path.read_text(encoding="utf-8"))
    Validator = validator_for(schema)
    Validator.check_schema(schema)
    return Validator(schema)


class ReportProfileLoader:
    """Load report profiles from the packaged ``profiles`` directory or a custom path."""

    def __init__(self, profiles_dir: str | Path | None = None) -> None:
        self.profiles_dir = Path(profiles_dir) if profiles_dir is not None else DEFAULT_PROFILES_DIR
        self._validator = compile_profile_validator()

    def list_profiles(self) -> list[str]:
        return sorted(path.stem for path in self.profiles_dir.glob("*.json"))

    def load(self, name_or_path: str | Path) -> ReportProfile:
        """Load a profile by name (for example, ``cnv``) or explicit path."""

        path = self._resolve_path(name_or_path)
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise ConfigurationError(f"Profile {path} is not valid JSON: {exc}") from exc

        errors = sorted(self._validator.iter_errors(payload), key=lambda err: list(err.path))
        if errors:
            raise ConfigurationError(
                f"Profile {path} failed validation: " + "; ".join(_describe(err) for err in errors)
            )
        return self._parse(payload)

    def _resolve_path(self, name_or_path: str | Path) -> Path:
        requested = Path(name_or_path)

        # bare names only resolve inside profiles_dir, never against the cwd
        if len(requested.parts) == 1 and requested.suffix != ".json":
            candidate = self.profiles_dir / f"{requested}.json"
            if candidate.is_file():
                return candidate
        elif requested.is_file():
            return requested

        raise FileNotFoundError(
            f"Profile not found: {name_or_path}. Available: {', '.join(self.list_profiles())}"
        )

    def _parse(self, payload: dict[str, Any]) -> ReportProfile:
        tool = None
        raw_tool = payload.get("external_tool")
        if raw_tool:
            major, minor = (int(part) for part in raw_tool["min_version"].split("."))
            tool = ExternalToolSpec(
                executable=raw_tool["executable"],
                min_version=(major, minor),
                arguments=tuple(raw_tool.get("arguments", ())),
            )

        return ReportProfile(
            name=str(payload["name"]),
            record_type=RecordType(payload["record_type"]),
            description=str(payload.get("description", "")),
            defaults=dict(payload.get("defaults", {})),
            external_tool=tool,
        )


def _describe(err: jsex.ValidationError) -> str:
    location = "/" + "/".join(str(part) for part in err.path)
    return f"{location}: {err.message}"
