"""
snomodule Utils Module

This module provides OWL functional syntax reading and writing and the
run configuration.
"""

from .owl_parser import OWLParser, parse_owl
from .owl_writer import OWLFunctionalWriter, save_ontology
from .config import ExtractionConfig, load_config

__all__ = [
    'OWLParser',
    'parse_owl',
    'OWLFunctionalWriter',
    'save_ontology',
    'ExtractionConfig',
    'load_config',
]
