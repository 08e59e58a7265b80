from __future__ import annotations

import importlib
import json
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Optional

import jsonschema
import yaml

from csvcodec.codec.errors import ConfigError

SCHEMA_PATH = Path(__file__).parent / "schemas" / "codec_config.schema.json"


@dataclass(frozen=True)
class CodecConfig:
    version: str = "1"
    record: Optional[str] = None        # "package.module:ClassName"
    mode: str = "strict"                # strict | fuzzy
    encoding: str = "utf-8"
    validate_quotes: bool = True
    skip_blank_lines: bool = True

    def with_overrides(self, **overrides: Any) -> "CodecConfig":
        """Return a copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def _load_schema(path: Path = SCHEMA_PATH) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def validate_config_doc(doc: Any) -> None:
    if doc is None:
        return
    try:
        jsonschema.validate(instance=doc, schema=_load_schema())
    except jsonschema.ValidationError as e:
        where = ".".join(str(p) for p in e.absolute_path) or "<root>"
        raise ConfigError(f"Invalid codec config at {where}: {e.message}") from e


def build_config(doc: Optional[Dict[str, Any]]) -> CodecConfig:
    validate_config_doc(doc)
    doc = doc or {}
    return CodecConfig(
        version=str(doc.get("version", "1")),
        record=doc.get("record"),
        mode=doc.get("mode", "strict"),
        encoding=doc.get("encoding", "utf-8"),
        validate_quotes=doc.get("validate_quotes", True),
        skip_blank_lines=doc.get("skip_blank_lines", True),
    )


def load_config(path: Optional[Path]) -> CodecConfig:
    """Read a YAML config file; no path means all defaults."""
    if path is None:
        return CodecConfig()
    path = Path(path).expanduser().resolve()
    if not path.is_file():
        raise FileNotFoundError(path)
    try:
        doc = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigError(f"{path}: invalid YAML") from e
    return build_config(doc)


def import_record_type(ref: str) -> type:
    """Resolve 'package.module:ClassName' to the class."""
    if ":" not in ref:
        raise ConfigError(f"Record reference must look like 'module:Class', got {ref!r}")
    module_name, _, qualname = ref.partition(":")
    try:
        obj: Any = importlib.import_module(module_name)
    except ImportError as e:
        raise ConfigError(f"Cannot import module '{module_name}': {e}") from e
    for part in qualname.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as e:
            raise ConfigError(f"'{module_name}' has no attribute '{qualname}'") from e
    if not isinstance(obj, type):
        raise ConfigError(f"{ref} is not a class")
    return obj
