import logging
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Dict, Optional, Union

import yaml

from .errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_NAME = "xsdbind.yaml"


@dataclass(frozen=True)
class GeneratorConfig:
    """Settings of one generation run.

    ``output`` is a base path; the target's suffix (``.go``, ``.py``, ``.ts``)
    is appended when the artifact is written.
    """

    language: str = "go"
    output: str = "schema"
    package: str = "schema"
    strict: bool = False
    header: Optional[str] = None

    def merged(self, **overrides) -> "GeneratorConfig":
        """Copy with every override that is not ``None`` applied."""
        return replace(self, **{key: value for key, value in overrides.items() if value is not None})


def load_config(path: Optional[Union[str, Path]] = None) -> GeneratorConfig:
    """
    Load generator settings from YAML.
    Structure:
    language: go
    output: out/schema
    package: schema
    strict: false
    header: "Generated from vendor.xsd"

    Without an explicit path, ``xsdbind.yaml`` in the working directory is used
    when present; otherwise the defaults apply.
    """
    candidate = Path(path) if path else Path.cwd() / DEFAULT_CONFIG_NAME
    if not candidate.exists():
        if path:
            raise ConfigError(f"Config file does not exist: {candidate}", "Pass an existing YAML file to --config.")
        return GeneratorConfig()

    try:
        with candidate.open("r") as fh:
            data = yaml.safe_load(fh) or {}
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"Failed to load config from {candidate}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {candidate} must contain a mapping, got {type(data).__name__}")

    logger.debug(f"Loaded generator config from {candidate}")
    return config_from_mapping(data)


def config_from_mapping(data: Dict) -> GeneratorConfig:
    known = {f.name for f in fields(GeneratorConfig)}
    values = {}
    for key, value in data.items():
        if key not in known:
            logger.warning(f"Ignoring unknown config key: {key}")
            continue
        values[key] = value
    if "strict" in values and not isinstance(values["strict"], bool):
        raise ConfigError(f"Config key 'strict' must be a boolean, got {values['strict']!r}")
    for key in ("language", "output", "package"):
        if key in values and not isinstance(values[key], str):
            raise ConfigError(f"Config key '{key}' must be a string, got {values[key]!r}")
    return GeneratorConfig(**values)
