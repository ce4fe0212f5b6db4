"""
snomodule: Filtered OWL Module Extraction
Seed Signature Builder

Expands a filter entity into the signature a module must be faithful to:
the entity itself plus every class above or below it in the hierarchy.
"""

from __future__ import annotations
from typing import Set
import logging

from ..core.ontology import Entity, NamedClass
from ..reasoning.oracle import ClassificationOracle

logger = logging.getLogger(__name__)


def build_seed_signature(filter_entity: Entity, oracle: ClassificationOracle) -> Set[Entity]:
    """
    Build the seed signature for a filter entity.

    Classes are expanded with all (direct and indirect) sub- and
    superclasses reported by the oracle; other entities are kept as they
    are. The filter entity is always a member of the result.

    Args:
        filter_entity: Root of the requested module
        oracle: Classification oracle over the source ontology

    Returns:
        Set of entities
    """
    signature: Set[Entity] = {filter_entity}

    if isinstance(filter_entity, NamedClass):
        sub_classes = oracle.get_sub_classes(filter_entity, direct=False)
        super_classes = oracle.get_super_classes(filter_entity, direct=False)
        signature.update(sub_classes)
        signature.update(super_classes)
        logger.info(f"Seed signature for {filter_entity}: {len(sub_classes)} subclasses, "
                    f"{len(super_classes)} superclasses")

    return signature
