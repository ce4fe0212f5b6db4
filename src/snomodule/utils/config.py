"""
snomodule: Filtered OWL Module Extraction
Configuration

Settings are read from a YAML file, then overridden by SNOMODULE_*
environment variables (a .env file is loaded first), then by command-line
flags.
"""

from __future__ import annotations
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Any, Dict, Optional
import logging
import os

import yaml
from dotenv import find_dotenv, load_dotenv

from ..reasoning.locality import ModuleType
from ..reasoning.oracle import ReasonerType

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = 'configs/extract.yaml'

ENV_OVERRIDES = {
    'SNOMODULE_REASONER': 'reasoner',
    'SNOMODULE_MODULE_TYPE': 'module_type',
    'SNOMODULE_ONTOLOGY_URI': 'ontology_uri',
    'SNOMODULE_VERSION_DATE': 'version_date',
}


@dataclass
class ExtractionConfig:
    """
    Settings for one conversion run.

    Attributes:
        reasoner: Classification backend name
        module_type: Locality module flavour name
        ontology_uri: Ontology IRI override
        version_date: Release date used for the version IRI
        copyright_notice: Path of the notice written before extra namespaces
        strict_parsing: Fail on unsupported axioms in the input file
    """
    reasoner: str = ReasonerType.STRUCTURAL.value
    module_type: str = ModuleType.STAR.value
    ontology_uri: Optional[str] = None
    version_date: Optional[str] = None
    copyright_notice: Optional[str] = None
    strict_parsing: bool = False

    def __post_init__(self):
        # fail at startup on unknown names
        self.reasoner_type
        self.module_kind

    @property
    def reasoner_type(self) -> ReasonerType:
        try:
            return ReasonerType(str(self.reasoner).lower())
        except ValueError:
            known = ', '.join(r.value for r in ReasonerType)
            raise ValueError(f"Unknown reasoner '{self.reasoner}', expected one of: {known}") from None

    @property
    def module_kind(self) -> ModuleType:
        try:
            return ModuleType(str(self.module_type).lower())
        except ValueError:
            known = ', '.join(m.value for m in ModuleType)
            raise ValueError(f"Unknown module type '{self.module_type}', expected one of: {known}") from None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def load_config(
    path: Optional[str] = None,
    overrides: Optional[Dict[str, Any]] = None
) -> ExtractionConfig:
    """
    Build the configuration for a run.

    Args:
        path: YAML file; a missing file falls back to defaults
        overrides: Values taken over last, None values are ignored

    Returns:
        ExtractionConfig instance
    """
    load_dotenv(find_dotenv(usecwd=True))

    values: Dict[str, Any] = {}
    config_path = Path(path or DEFAULT_CONFIG_PATH)
    if config_path.exists():
        with open(config_path) as f:
            loaded = yaml.safe_load(f) or {}
        if not isinstance(loaded, dict):
            raise ValueError(f"Config file {config_path} must contain a mapping")
        section = loaded.get('extraction', loaded) or {}
        if not isinstance(section, dict):
            raise ValueError(f"'extraction' section of {config_path} must be a mapping")
        values.update(section)
    else:
        logger.warning(f"Config not found at {config_path}, using defaults")

    for env_name, key in ENV_OVERRIDES.items():
        if os.environ.get(env_name):
            values[key] = os.environ[env_name]

    for key, value in (overrides or {}).items():
        if value is not None:
            values[key] = value

    unknown = set(values) - set(ExtractionConfig.__dataclass_fields__)
    if unknown:
        raise ValueError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")

    return ExtractionConfig(**values)
