"""
snomodule Core Module

This module provides the ontology data model, prefix handling, release
bundle and error types shared by the extraction pipeline.
"""

from .ontology import (
    EntityType,
    ExpressionType,
    AxiomType,
    Entity,
    ClassExpression,
    NamedClass,
    ObjectProperty,
    DataProperty,
    AnnotationProperty,
    ObjectIntersectionOf,
    ObjectSomeValuesFrom,
    DataHasValue,
    Axiom,
    SubClassOf,
    EquivalentClasses,
    SubObjectPropertyOf,
    SubObjectPropertyChainOf,
    TransitiveObjectProperty,
    SubDataPropertyOf,
    AnnotationAssertion,
    OntologyDocument,
    THING,
    NOTHING,
    RDFS_LABEL,
    local_name,
    make_intersection,
)

from .prefixes import (
    SNOMED_NAMESPACE,
    DEFAULT_PREFIXES,
    DEFAULT_NAMESPACES,
    PrefixManager,
    format_declaration,
)

from .release import TerminologyRelease

from .exceptions import (
    ConversionError,
    EmptyReleaseError,
    OntologyIdentifierError,
    ReasonerConstructionError,
    DocumentConstructionError,
    OntologyStorageError,
    ReasonerServiceError,
)

__all__ = [
    # Ontology constructs
    'EntityType',
    'ExpressionType',
    'AxiomType',
    'Entity',
    'ClassExpression',
    'NamedClass',
    'ObjectProperty',
    'DataProperty',
    'AnnotationProperty',
    'ObjectIntersectionOf',
    'ObjectSomeValuesFrom',
    'DataHasValue',
    'Axiom',
    'SubClassOf',
    'EquivalentClasses',
    'SubObjectPropertyOf',
    'SubObjectPropertyChainOf',
    'TransitiveObjectProperty',
    'SubDataPropertyOf',
    'AnnotationAssertion',
    'OntologyDocument',
    'THING',
    'NOTHING',
    'RDFS_LABEL',
    'local_name',
    'make_intersection',

    # Prefixes
    'SNOMED_NAMESPACE',
    'DEFAULT_PREFIXES',
    'DEFAULT_NAMESPACES',
    'PrefixManager',
    'format_declaration',

    # Release
    'TerminologyRelease',

    # Errors
    'ConversionError',
    'EmptyReleaseError',
    'OntologyIdentifierError',
    'ReasonerConstructionError',
    'DocumentConstructionError',
    'OntologyStorageError',
    'ReasonerServiceError',
]
