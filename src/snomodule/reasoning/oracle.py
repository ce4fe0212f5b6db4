"""
snomodule: Filtered OWL Module Extraction
Classification Oracles

A classification oracle answers sub/superclass queries over an ontology.
Backends are selected by ReasonerType through an explicit registry that is
resolved when the pipeline starts.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Callable, Dict, Set
from enum import Enum
import logging

import networkx as nx

from ..core.exceptions import ReasonerServiceError
from ..core.ontology import (
    NamedClass, OntologyDocument, SubClassOf, EquivalentClasses,
    ObjectIntersectionOf, ClassExpression, THING, NOTHING
)

logger = logging.getLogger(__name__)


class ReasonerType(Enum):
    """Classification backends known to the registry."""
    STRUCTURAL = "structural"


class ClassificationOracle(ABC):
    """Answers hierarchy queries about the named classes of one ontology."""

    @abstractmethod
    def get_sub_classes(self, cls: NamedClass, direct: bool = False) -> Set[NamedClass]:
        """Return the subclasses of cls; all of them unless direct is True."""
        pass

    @abstractmethod
    def get_super_classes(self, cls: NamedClass, direct: bool = False) -> Set[NamedClass]:
        """Return the superclasses of cls; all of them unless direct is True."""
        pass

    def dispose(self) -> None:
        """Release backend resources."""
        pass


def _named_parents(expression: ClassExpression) -> Set[NamedClass]:
    """Named classes that an expression is told to be subsumed by."""
    if expression.is_named:
        return {expression}
    if isinstance(expression, ObjectIntersectionOf):
        return expression.named_conjuncts
    return set()


class StructuralOracle(ClassificationOracle):
    """
    Told-subsumption reasoner.

    The hierarchy is read off the asserted axioms only:
    - SubClassOf(A, C) makes every named conjunct of C a parent of A
    - EquivalentClasses makes named members mutual parents, and the named
      conjuncts of any intersection member parents of each named member
    No inference beyond the transitive closure of these edges is done.
    ⊤ is a superclass of every class in the ontology; ⊥ is never reported.
    """

    def __init__(self, ontology: OntologyDocument):
        self.ontology = ontology
        self.graph = nx.DiGraph()
        self._build_graph()

    def _build_graph(self) -> None:
        for cls in self.ontology.classes:
            if not cls.is_builtin:
                self.graph.add_node(cls)

        for axiom in self.ontology.logical_axioms:
            if isinstance(axiom, SubClassOf) and isinstance(axiom.sub_class, NamedClass):
                for parent in _named_parents(axiom.super_class):
                    self._add_edge(axiom.sub_class, parent)
            elif isinstance(axiom, EquivalentClasses):
                named = {op for op in axiom.operands if op.is_named}
                for cls in named:
                    for op in axiom.operands:
                        if op == cls:
                            continue
                        for parent in _named_parents(op):
                            self._add_edge(cls, parent)

        logger.debug(f"Structural hierarchy: {self.graph.number_of_nodes()} classes, "
                     f"{self.graph.number_of_edges()} told edges")

    def _add_edge(self, child: NamedClass, parent: NamedClass) -> None:
        if child.is_builtin or parent.is_builtin or child == parent:
            return
        self.graph.add_edge(child, parent)

    def _equivalents(self, cls: NamedClass) -> Set[NamedClass]:
        return nx.ancestors(self.graph, cls) & nx.descendants(self.graph, cls)

    def get_equivalent_classes(self, cls: NamedClass) -> Set[NamedClass]:
        if cls not in self.graph:
            return set()
        return self._equivalents(cls)

    def get_super_classes(self, cls: NamedClass, direct: bool = False) -> Set[NamedClass]:
        if cls.is_thing or cls not in self.graph:
            return set()
        # edges point child -> parent
        supers = nx.descendants(self.graph, cls) - self._equivalents(cls)
        if direct:
            supers = self._most_specific(supers)
            return supers if supers else {THING}
        return supers | {THING}

    def get_sub_classes(self, cls: NamedClass, direct: bool = False) -> Set[NamedClass]:
        if cls.is_nothing:
            return set()
        if cls.is_thing:
            subs = set(self.graph.nodes)
            if direct:
                return {n for n in subs if not (nx.descendants(self.graph, n) - self._equivalents(n))}
            return subs
        if cls not in self.graph:
            return set()
        subs = nx.ancestors(self.graph, cls) - self._equivalents(cls)
        if direct:
            return self._most_general(subs)
        return subs

    def _most_specific(self, classes: Set[NamedClass]) -> Set[NamedClass]:
        """Drop every class that is a strict superclass of another member."""
        result = set()
        for cls in classes:
            below = nx.ancestors(self.graph, cls) - self._equivalents(cls)
            if not below & classes:
                result.add(cls)
        return result

    def _most_general(self, classes: Set[NamedClass]) -> Set[NamedClass]:
        """Drop every class that is a strict subclass of another member."""
        result = set()
        for cls in classes:
            above = nx.descendants(self.graph, cls) - self._equivalents(cls)
            if not above & classes:
                result.add(cls)
        return result

    def dispose(self) -> None:
        self.graph.clear()


OracleFactory = Callable[[OntologyDocument], ClassificationOracle]

_REGISTRY: Dict[ReasonerType, OracleFactory] = {
    ReasonerType.STRUCTURAL: StructuralOracle,
}


def register_reasoner(reasoner_type: ReasonerType, factory: OracleFactory) -> None:
    """Register or replace the factory for a reasoner type."""
    _REGISTRY[reasoner_type] = factory


def get_oracle_factory(reasoner_type: ReasonerType) -> OracleFactory:
    """
    Look up the factory for a reasoner type.

    Raises:
        ReasonerServiceError: If no factory is registered for the type
    """
    try:
        return _REGISTRY[reasoner_type]
    except KeyError:
        raise ReasonerServiceError(f"Requested reasoner '{reasoner_type}' is not registered.") from None


def create_oracle(reasoner_type: ReasonerType, ontology: OntologyDocument) -> ClassificationOracle:
    """
    Build an oracle over the ontology.

    Raises:
        ReasonerServiceError: If the backend is unknown or can not be created
    """
    factory = get_oracle_factory(reasoner_type)
    try:
        return factory(ontology)
    except Exception as e:
        raise ReasonerServiceError(
            f"An instance of requested reasoner '{reasoner_type.value}' could not be created."
        ) from e
