"""
snomodule Reasoning Module

This module provides the pluggable classification oracles and the
syntactic locality module extractor.
"""

from .oracle import (
    ReasonerType,
    ClassificationOracle,
    StructuralOracle,
    register_reasoner,
    get_oracle_factory,
    create_oracle,
)

from .locality import (
    LocalityType,
    ModuleType,
    LocalityEvaluator,
    LocalityModuleExtractor,
    extract_module,
)

__all__ = [
    # Oracles
    'ReasonerType',
    'ClassificationOracle',
    'StructuralOracle',
    'register_reasoner',
    'get_oracle_factory',
    'create_oracle',

    # Locality
    'LocalityType',
    'ModuleType',
    'LocalityEvaluator',
    'LocalityModuleExtractor',
    'extract_module',
]
