"""
snomodule: Filtered OWL Module Extraction
Gap Repair

Locality modules preserve entailments but need not contain every axiom that
names the filter class. This stage adds them back from the full ontology.
"""

from __future__ import annotations
from typing import Iterable, Set
import logging

from ..core.ontology import Axiom, NamedClass, OntologyDocument

logger = logging.getLogger(__name__)


def filter_class_axioms(filter_class: NamedClass, ontology: OntologyDocument) -> Set[Axiom]:
    """
    Collect the axioms of the ontology that directly name the filter class.

    Returns:
        Subclass axioms with the class as subclass or as superclass, and
        every annotation assertion about the class IRI
    """
    axioms: Set[Axiom] = set()
    axioms.update(ontology.sub_class_axioms_for_subclass(filter_class))
    axioms.update(ontology.sub_class_axioms_for_superclass(filter_class))
    axioms.update(ontology.annotation_assertion_axioms(filter_class.iri))
    return axioms


def repair_module(
    extracted_axioms: Iterable[Axiom],
    filter_class: NamedClass,
    full_ontology: OntologyDocument
) -> Set[Axiom]:
    """
    Union an extracted module with the axioms that name the filter class.

    Axioms are only ever added, so repairing a repaired module is a no-op.

    Args:
        extracted_axioms: Module returned by the locality extractor
        filter_class: Root of the requested module
        full_ontology: The source ontology

    Returns:
        New set of axioms
    """
    if full_ontology is None:
        raise ValueError("full_ontology is required")

    repaired = set(extracted_axioms)
    before = len(repaired)
    repaired.update(filter_class_axioms(filter_class, full_ontology))
    logger.info(f"Gap repair added {len(repaired) - before} axioms for {filter_class}")
    return repaired
