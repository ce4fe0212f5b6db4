"""
snomodule: Filtered OWL Module Extraction

Converts a clinical terminology release into an OWL ontology restricted to
the module around one filter concept.

This package provides:
- EL ontology model and immutable Axiom Store
- Pluggable classification oracles
- Syntactic locality (BOT, TOP, STAR) module extraction
- Gap repair and module assembly with OWL functional syntax output

Example:
    >>> from snomodule import parse_owl, ModuleExtractionPipeline
    >>> release = parse_owl("snomed.ofn")
    >>> with open("module.ofn", "wb") as out:
    ...     result = ModuleExtractionPipeline().convert(release, out, filter_id="404684003")
"""

__version__ = "0.1.0"

from .core import (
    OntologyDocument,
    TerminologyRelease,
    NamedClass,
    ConversionError,
)

from .reasoning import (
    ReasonerType,
    ModuleType,
    StructuralOracle,
    LocalityModuleExtractor,
)

from .extraction import (
    ModuleExtractionPipeline,
    ExtractionResult,
    build_seed_signature,
    repair_module,
    convert_release,
)

from .utils import (
    parse_owl,
    save_ontology,
)

__all__ = [
    # Version
    '__version__',

    # Core
    'OntologyDocument',
    'TerminologyRelease',
    'NamedClass',
    'ConversionError',

    # Reasoning
    'ReasonerType',
    'ModuleType',
    'StructuralOracle',
    'LocalityModuleExtractor',

    # Extraction
    'ModuleExtractionPipeline',
    'ExtractionResult',
    'build_seed_signature',
    'repair_module',
    'convert_release',

    # Utils
    'parse_owl',
    'save_ontology',
]
