"""
snomodule: Filtered OWL Module Extraction
Terminology Release Snapshot

The bundle handed over by the upstream taxonomy-to-ontology build: the
Axiom Store plus the release metadata the conversion needs.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Set

from .ontology import OntologyDocument
from .prefixes import DEFAULT_NAMESPACES, PrefixManager


@dataclass
class TerminologyRelease:
    """
    A loaded terminology release.

    Attributes:
        ontology: The fully built Axiom Store (read-only)
        prefix_manager: Prefix manager the store's IRIs were built with
        stated_relationship_count: Number of active stated relationships
        ontology_headers: Active ontology identifier rows, e.g. ``Ontology(<http://snomed.info/sct/900000000000207008>)``
        ontology_namespaces: Active namespace rows, e.g. ``Prefix(xsd:=<http://www.w3.org/2001/XMLSchema#>)``
    """
    ontology: OntologyDocument
    prefix_manager: PrefixManager = field(default_factory=PrefixManager)
    stated_relationship_count: int = 0
    ontology_headers: Dict[str, str] = field(default_factory=dict)
    ontology_namespaces: Dict[str, str] = field(default_factory=dict)

    @property
    def axiom_count(self) -> int:
        """Number of logical axioms in the store."""
        return self.ontology.logical_axiom_count

    @property
    def is_empty(self) -> bool:
        return self.stated_relationship_count == 0 and self.axiom_count == 0

    @property
    def extra_namespaces(self) -> Set[str]:
        """Namespace declarations that are not one of the six defaults."""
        return {ns for ns in self.ontology_namespaces.values() if ns not in DEFAULT_NAMESPACES}
