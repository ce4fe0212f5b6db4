"""
snomodule: Filtered OWL Module Extraction
Syntactic Locality Module Extraction

This module implements ⊥-, ⊤- and STAR (⊥⊤*) syntactic locality modules
for the EL constructs of the terminology. A module for a signature Σ keeps
every axiom that is not local w.r.t. Σ extended by the signature of the
axioms already kept, and therefore preserves all entailments over Σ.
"""

from __future__ import annotations
from collections import deque
from typing import Iterable, Set, FrozenSet
from enum import Enum, auto
import logging

from ..core.ontology import (
    Entity, Axiom, ClassExpression, NamedClass, ObjectIntersectionOf,
    ObjectSomeValuesFrom, DataHasValue, SubClassOf, EquivalentClasses,
    SubObjectPropertyOf, SubObjectPropertyChainOf, TransitiveObjectProperty,
    SubDataPropertyOf, OntologyDocument
)

logger = logging.getLogger(__name__)


class LocalityType(Enum):
    """Interpretation given to entities outside the signature."""
    BOTTOM = auto()   # classes and properties are empty
    TOP = auto()      # classes are the domain, properties are universal


class ModuleType(Enum):
    """Locality-based module flavours."""
    BOT = "bot"
    TOP = "top"
    STAR = "star"


class LocalityEvaluator:
    """
    Decides syntactic locality of axioms for one locality type.

    Axiom kinds it does not know are treated as non-local.
    """

    def __init__(self, locality_type: LocalityType):
        self.locality_type = locality_type

    def _outside(self, entity: Entity, signature: Set[Entity]) -> bool:
        return entity not in signature

    def is_bottom_equivalent(self, expr: ClassExpression, signature: Set[Entity]) -> bool:
        """True if expr is interpreted as the empty set."""
        if isinstance(expr, NamedClass):
            if expr.is_nothing:
                return True
            if expr.is_thing:
                return False
            return self.locality_type == LocalityType.BOTTOM and self._outside(expr, signature)
        if isinstance(expr, ObjectIntersectionOf):
            return any(self.is_bottom_equivalent(op, signature) for op in expr.operands)
        if isinstance(expr, ObjectSomeValuesFrom):
            if self.locality_type == LocalityType.BOTTOM and self._outside(expr.property, signature):
                return True
            return self.is_bottom_equivalent(expr.filler, signature)
        if isinstance(expr, DataHasValue):
            return self.locality_type == LocalityType.BOTTOM and self._outside(expr.property, signature)
        return False

    def is_top_equivalent(self, expr: ClassExpression, signature: Set[Entity]) -> bool:
        """True if expr is interpreted as the whole domain."""
        if isinstance(expr, NamedClass):
            if expr.is_thing:
                return True
            if expr.is_nothing:
                return False
            return self.locality_type == LocalityType.TOP and self._outside(expr, signature)
        if isinstance(expr, ObjectIntersectionOf):
            return all(self.is_top_equivalent(op, signature) for op in expr.operands)
        if isinstance(expr, ObjectSomeValuesFrom):
            return (self.locality_type == LocalityType.TOP
                    and self._outside(expr.property, signature)
                    and self.is_top_equivalent(expr.filler, signature))
        if isinstance(expr, DataHasValue):
            return self.locality_type == LocalityType.TOP and self._outside(expr.property, signature)
        return False

    def is_local(self, axiom: Axiom, signature: Set[Entity]) -> bool:
        """Check whether the axiom is local w.r.t. the signature."""
        if not axiom.is_logical:
            return True

        if isinstance(axiom, SubClassOf):
            return (self.is_bottom_equivalent(axiom.sub_class, signature)
                    or self.is_top_equivalent(axiom.super_class, signature))

        if isinstance(axiom, EquivalentClasses):
            return (all(self.is_bottom_equivalent(op, signature) for op in axiom.operands)
                    or all(self.is_top_equivalent(op, signature) for op in axiom.operands))

        bottom = self.locality_type == LocalityType.BOTTOM

        if isinstance(axiom, (SubObjectPropertyOf, SubDataPropertyOf)):
            if bottom:
                return self._outside(axiom.sub_property, signature)
            return self._outside(axiom.super_property, signature)

        if isinstance(axiom, SubObjectPropertyChainOf):
            if bottom:
                return any(self._outside(p, signature) for p in axiom.chain)
            return self._outside(axiom.super_property, signature)

        if isinstance(axiom, TransitiveObjectProperty):
            return self._outside(axiom.property, signature)

        return False


class LocalityModuleExtractor:
    """
    Extracts syntactic locality modules from an ontology.

    Attributes:
        ontology: The source ontology
        module_type: BOT, TOP or STAR
    """

    def __init__(self, ontology: OntologyDocument, module_type: ModuleType = ModuleType.STAR):
        self.ontology = ontology
        self.module_type = module_type

    def extract(self, signature: Iterable[Entity]) -> Set[Axiom]:
        """
        Compute the module for the given signature.

        Args:
            signature: Entities the module must be faithful to

        Returns:
            Set of logical axioms of the source ontology
        """
        seed = {e for e in signature if not e.is_builtin}
        axioms = frozenset(self.ontology.logical_axioms)

        if self.module_type == ModuleType.BOT:
            module = self._extract(axioms, seed, LocalityType.BOTTOM)
        elif self.module_type == ModuleType.TOP:
            module = self._extract(axioms, seed, LocalityType.TOP)
        else:
            module = self._extract_star(axioms, seed)

        logger.info(f"{self.module_type.name} module: {len(module)} of {len(axioms)} "
                    f"logical axioms for a signature of {len(seed)} entities")
        return set(module)

    def _extract_star(self, axioms: FrozenSet[Axiom], seed: Set[Entity]) -> FrozenSet[Axiom]:
        """Alternate ⊥- and ⊤-extraction until the module stops shrinking."""
        module = self._extract(axioms, seed, LocalityType.BOTTOM)
        locality = LocalityType.TOP
        size = -1
        while len(module) != size:
            size = len(module)
            module = self._extract(module, seed, locality)
            locality = LocalityType.BOTTOM if locality == LocalityType.TOP else LocalityType.TOP
        # modules are idempotent: an unchanged pass means both types are at a fixpoint
        return module

    def _extract(
        self,
        axioms: FrozenSet[Axiom],
        seed: Set[Entity],
        locality_type: LocalityType
    ) -> FrozenSet[Axiom]:
        evaluator = LocalityEvaluator(locality_type)
        signature = set(seed)

        index = {}
        for axiom in axioms:
            for entity in axiom.signature:
                index.setdefault(entity, []).append(axiom)

        module: Set[Axiom] = set()
        queue = deque()

        def include(axiom: Axiom) -> None:
            module.add(axiom)
            for entity in axiom.signature:
                if entity not in signature and not entity.is_builtin:
                    signature.add(entity)
                    queue.append(entity)

        # axioms can be non-local without mentioning the signature (⊤ ⊑ A)
        for axiom in axioms:
            if axiom not in module and not evaluator.is_local(axiom, signature):
                include(axiom)

        while queue:
            entity = queue.popleft()
            for axiom in index.get(entity, ()):
                if axiom not in module and not evaluator.is_local(axiom, signature):
                    include(axiom)

        return frozenset(module)


def extract_module(
    ontology: OntologyDocument,
    signature: Iterable[Entity],
    module_type: ModuleType = ModuleType.STAR
) -> Set[Axiom]:
    """
    Convenience function to extract a locality module.

    Args:
        ontology: Source ontology
        signature: Seed signature
        module_type: Module flavour

    Returns:
        Set of module axioms
    """
    return LocalityModuleExtractor(ontology, module_type).extract(signature)
