"""
snomodule Extraction Module

This module provides the filtered conversion pipeline: seed signature
building, gap repair and module assembly.
"""

from .signature import build_seed_signature

from .repair import (
    filter_class_axioms,
    repair_module,
)

from .assembler import (
    ModuleAssembler,
    load_copyright_notice,
)

from .pipeline import (
    ModuleExtractionPipeline,
    ExtractionResult,
    resolve_ontology_uri,
    version_iri_for,
    convert_release,
    SNOMED_INTERNATIONAL_EDITION_URI,
)

__all__ = [
    'build_seed_signature',
    'filter_class_axioms',
    'repair_module',
    'ModuleAssembler',
    'load_copyright_notice',
    'ModuleExtractionPipeline',
    'ExtractionResult',
    'resolve_ontology_uri',
    'version_iri_for',
    'convert_release',
    'SNOMED_INTERNATIONAL_EDITION_URI',
]
