"""
snomodule: Filtered OWL Module Extraction
Core Ontology Module - Terminology Axiom Store

This module provides classes for representing the EL constructs used by
clinical terminology logic definitions: entities, class expressions, axioms,
and the immutable ontology document that holds them.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from collections import defaultdict
from dataclasses import dataclass
from typing import Set, Optional, Dict, FrozenSet, Iterable, Iterator, Tuple, Union
from enum import Enum, auto

from rdflib import Literal, URIRef
from rdflib.namespace import OWL, RDFS


def local_name(iri: str) -> str:
    """Return the fragment or last path component of an IRI."""
    if '#' in iri:
        return iri.rsplit('#', 1)[-1]
    if '/' in iri:
        return iri.rstrip('/').rsplit('/', 1)[-1]
    return iri


class EntityType(Enum):
    """Kinds of named OWL entities."""
    CLASS = auto()
    OBJECT_PROPERTY = auto()
    DATA_PROPERTY = auto()
    ANNOTATION_PROPERTY = auto()


class ExpressionType(Enum):
    """Enumeration of supported class expression types."""
    NAMED = auto()
    INTERSECTION = auto()
    SOME_VALUES = auto()
    DATA_HAS_VALUE = auto()


class AxiomType(Enum):
    """Enumeration of supported axiom types."""
    SUBCLASS_OF = auto()
    EQUIVALENT_CLASSES = auto()
    SUB_OBJECT_PROPERTY = auto()
    SUB_PROPERTY_CHAIN = auto()
    TRANSITIVE_OBJECT_PROPERTY = auto()
    SUB_DATA_PROPERTY = auto()
    ANNOTATION_ASSERTION = auto()


class Entity(ABC):
    """
    Abstract base class for named entities.

    Entities are value types: two entities of the same kind with the same
    IRI are the same entity.
    """

    iri: URIRef

    @property
    @abstractmethod
    def entity_type(self) -> EntityType:
        """Return the kind of this entity."""
        pass

    @property
    def is_class(self) -> bool:
        return self.entity_type == EntityType.CLASS

    @property
    def is_builtin(self) -> bool:
        """True for owl:Thing and owl:Nothing."""
        return False

    @property
    def short_name(self) -> str:
        return local_name(self.iri)


class ClassExpression(ABC):
    """
    Abstract base class for EL class expressions.

    Supported expressions:
    - A (named class, including ⊤ and ⊥)
    - C ⊓ D (intersection)
    - ∃r.C (existential restriction)
    - ∃p.{v} (data has-value restriction)
    """

    @property
    @abstractmethod
    def expression_type(self) -> ExpressionType:
        """Return the type of this expression."""
        pass

    @property
    @abstractmethod
    def signature(self) -> Set[Entity]:
        """Return the entities used in this expression."""
        pass

    def contains_entity(self, entity: Entity) -> bool:
        return entity in self.signature

    @property
    def is_named(self) -> bool:
        return self.expression_type == ExpressionType.NAMED

    @abstractmethod
    def __str__(self) -> str:
        pass

    def __repr__(self) -> str:
        return str(self)


@dataclass(frozen=True)
class NamedClass(ClassExpression, Entity):
    """Represents a named class, identified by its IRI."""
    iri: URIRef

    def __post_init__(self):
        object.__setattr__(self, 'iri', URIRef(self.iri))

    @property
    def entity_type(self) -> EntityType:
        return EntityType.CLASS

    @property
    def expression_type(self) -> ExpressionType:
        return ExpressionType.NAMED

    @property
    def signature(self) -> Set[Entity]:
        return {self}

    @property
    def is_thing(self) -> bool:
        return self.iri == OWL.Thing

    @property
    def is_nothing(self) -> bool:
        return self.iri == OWL.Nothing

    @property
    def is_builtin(self) -> bool:
        return self.is_thing or self.is_nothing

    def __hash__(self) -> int:
        return hash(("CLASS", self.iri))

    def __eq__(self, other) -> bool:
        return isinstance(other, NamedClass) and self.iri == other.iri

    def __str__(self) -> str:
        if self.is_thing:
            return "⊤"
        if self.is_nothing:
            return "⊥"
        return self.short_name


@dataclass(frozen=True)
class ObjectProperty(Entity):
    """Represents an object property (role) r."""
    iri: URIRef

    def __post_init__(self):
        object.__setattr__(self, 'iri', URIRef(self.iri))

    @property
    def entity_type(self) -> EntityType:
        return EntityType.OBJECT_PROPERTY

    def __hash__(self) -> int:
        return hash(("OBJECT_PROPERTY", self.iri))

    def __eq__(self, other) -> bool:
        return isinstance(other, ObjectProperty) and self.iri == other.iri

    def __str__(self) -> str:
        return self.short_name


@dataclass(frozen=True)
class DataProperty(Entity):
    """Represents a data property carrying concrete values."""
    iri: URIRef

    def __post_init__(self):
        object.__setattr__(self, 'iri', URIRef(self.iri))

    @property
    def entity_type(self) -> EntityType:
        return EntityType.DATA_PROPERTY

    def __hash__(self) -> int:
        return hash(("DATA_PROPERTY", self.iri))

    def __eq__(self, other) -> bool:
        return isinstance(other, DataProperty) and self.iri == other.iri

    def __str__(self) -> str:
        return self.short_name


@dataclass(frozen=True)
class AnnotationProperty(Entity):
    """Represents an annotation property such as rdfs:label."""
    iri: URIRef

    def __post_init__(self):
        object.__setattr__(self, 'iri', URIRef(self.iri))

    @property
    def entity_type(self) -> EntityType:
        return EntityType.ANNOTATION_PROPERTY

    def __hash__(self) -> int:
        return hash(("ANNOTATION_PROPERTY", self.iri))

    def __eq__(self, other) -> bool:
        return isinstance(other, AnnotationProperty) and self.iri == other.iri

    def __str__(self) -> str:
        return self.short_name


THING = NamedClass(OWL.Thing)
NOTHING = NamedClass(OWL.Nothing)
RDFS_LABEL = AnnotationProperty(RDFS.label)


@dataclass(frozen=True)
class ObjectIntersectionOf(ClassExpression):
    """Represents intersection C ⊓ D (and multiple operands)."""
    operands: FrozenSet[ClassExpression]

    @property
    def expression_type(self) -> ExpressionType:
        return ExpressionType.INTERSECTION

    @property
    def signature(self) -> Set[Entity]:
        result = set()
        for op in self.operands:
            result.update(op.signature)
        return result

    @property
    def named_conjuncts(self) -> Set[NamedClass]:
        return {op for op in self.operands if op.is_named}

    def __hash__(self) -> int:
        return hash(("AND", self.operands))

    def __eq__(self, other) -> bool:
        return isinstance(other, ObjectIntersectionOf) and self.operands == other.operands

    def __str__(self) -> str:
        parts = sorted(str(op) for op in self.operands)
        return f"({' ⊓ '.join(parts)})"


@dataclass(frozen=True)
class ObjectSomeValuesFrom(ClassExpression):
    """Represents existential restriction ∃r.C."""
    property: ObjectProperty
    filler: ClassExpression

    @property
    def expression_type(self) -> ExpressionType:
        return ExpressionType.SOME_VALUES

    @property
    def signature(self) -> Set[Entity]:
        return {self.property} | self.filler.signature

    def __hash__(self) -> int:
        return hash(("SOME", self.property, self.filler))

    def __eq__(self, other) -> bool:
        return (isinstance(other, ObjectSomeValuesFrom) and
                self.property == other.property and self.filler == other.filler)

    def __str__(self) -> str:
        return f"∃{self.property}.{self.filler}"


@dataclass(frozen=True)
class DataHasValue(ClassExpression):
    """Represents a concrete-value restriction ∃p.{v}."""
    property: DataProperty
    value: Literal

    @property
    def expression_type(self) -> ExpressionType:
        return ExpressionType.DATA_HAS_VALUE

    @property
    def signature(self) -> Set[Entity]:
        return {self.property}

    def __hash__(self) -> int:
        return hash(("HAS_VALUE", self.property, self.value))

    def __eq__(self, other) -> bool:
        return (isinstance(other, DataHasValue) and
                self.property == other.property and self.value == other.value)

    def __str__(self) -> str:
        return f"∃{self.property}.{{{self.value}}}"


class Axiom(ABC):
    """Abstract base class for axioms. Axioms are immutable and hashable."""

    @property
    @abstractmethod
    def axiom_type(self) -> AxiomType:
        pass

    @property
    @abstractmethod
    def signature(self) -> Set[Entity]:
        """Return the entities used in this axiom."""
        pass

    @property
    def is_logical(self) -> bool:
        return True

    def contains_entity(self, entity: Entity) -> bool:
        return entity in self.signature

    def __repr__(self) -> str:
        return str(self)


@dataclass(frozen=True)
class SubClassOf(Axiom):
    """Represents a subclass axiom: C ⊑ D"""
    sub_class: ClassExpression
    super_class: ClassExpression

    @property
    def axiom_type(self) -> AxiomType:
        return AxiomType.SUBCLASS_OF

    @property
    def signature(self) -> Set[Entity]:
        return self.sub_class.signature | self.super_class.signature

    def __str__(self) -> str:
        return f"{self.sub_class} ⊑ {self.super_class}"


@dataclass(frozen=True)
class EquivalentClasses(Axiom):
    """Represents C ≡ D (and multiple operands)."""
    operands: FrozenSet[ClassExpression]

    @property
    def axiom_type(self) -> AxiomType:
        return AxiomType.EQUIVALENT_CLASSES

    @property
    def signature(self) -> Set[Entity]:
        result = set()
        for op in self.operands:
            result.update(op.signature)
        return result

    def __str__(self) -> str:
        return ' ≡ '.join(sorted(str(op) for op in self.operands))


@dataclass(frozen=True)
class SubObjectPropertyOf(Axiom):
    """Represents a role inclusion r ⊑ s"""
    sub_property: ObjectProperty
    super_property: ObjectProperty

    @property
    def axiom_type(self) -> AxiomType:
        return AxiomType.SUB_OBJECT_PROPERTY

    @property
    def signature(self) -> Set[Entity]:
        return {self.sub_property, self.super_property}

    def __str__(self) -> str:
        return f"{self.sub_property} ⊑ {self.super_property}"


@dataclass(frozen=True)
class SubObjectPropertyChainOf(Axiom):
    """Represents a role chain r₁ ∘ ... ∘ rₙ ⊑ s"""
    chain: Tuple[ObjectProperty, ...]
    super_property: ObjectProperty

    @property
    def axiom_type(self) -> AxiomType:
        return AxiomType.SUB_PROPERTY_CHAIN

    @property
    def signature(self) -> Set[Entity]:
        return set(self.chain) | {self.super_property}

    def __str__(self) -> str:
        return f"{' ∘ '.join(str(p) for p in self.chain)} ⊑ {self.super_property}"


@dataclass(frozen=True)
class TransitiveObjectProperty(Axiom):
    """Represents Trans(r)."""
    property: ObjectProperty

    @property
    def axiom_type(self) -> AxiomType:
        return AxiomType.TRANSITIVE_OBJECT_PROPERTY

    @property
    def signature(self) -> Set[Entity]:
        return {self.property}

    def __str__(self) -> str:
        return f"Trans({self.property})"


@dataclass(frozen=True)
class SubDataPropertyOf(Axiom):
    """Represents a data property inclusion p ⊑ q"""
    sub_property: DataProperty
    super_property: DataProperty

    @property
    def axiom_type(self) -> AxiomType:
        return AxiomType.SUB_DATA_PROPERTY

    @property
    def signature(self) -> Set[Entity]:
        return {self.sub_property, self.super_property}

    def __str__(self) -> str:
        return f"{self.sub_property} ⊑ {self.super_property}"


@dataclass(frozen=True)
class AnnotationAssertion(Axiom):
    """
    Represents an annotation on an IRI, e.g. a concept's preferred term.

    Annotation assertions carry no logical meaning and never take part in
    locality checks.
    """
    property: AnnotationProperty
    subject: URIRef
    value: Union[Literal, URIRef]

    def __post_init__(self):
        object.__setattr__(self, 'subject', URIRef(self.subject))

    @property
    def axiom_type(self) -> AxiomType:
        return AxiomType.ANNOTATION_ASSERTION

    @property
    def signature(self) -> Set[Entity]:
        return {self.property}

    @property
    def is_logical(self) -> bool:
        return False

    def __str__(self) -> str:
        return f"{local_name(self.subject)} {self.property} {self.value!r}"


class OntologyDocument:
    """
    An immutable ontology: a set of axioms plus the ontology identifier.

    Entity declarations are not stored; the entities of a document are the
    entities its axioms reference.
    """

    def __init__(
        self,
        axioms: Optional[Iterable[Axiom]] = None,
        ontology_iri: Optional[str] = None,
        version_iri: Optional[str] = None
    ):
        """
        Initialize the document.

        Args:
            axioms: Axioms of the document; duplicates collapse
            ontology_iri: Ontology IRI, or None for an anonymous ontology
            version_iri: Optional version IRI
        """
        if version_iri is not None and ontology_iri is None:
            raise ValueError("An anonymous ontology can not carry a version IRI")
        self._axioms: FrozenSet[Axiom] = frozenset(axioms) if axioms else frozenset()
        self.ontology_iri: Optional[URIRef] = URIRef(ontology_iri) if ontology_iri else None
        self.version_iri: Optional[URIRef] = URIRef(version_iri) if version_iri else None
        self._by_entity: Optional[Dict[Entity, Set[Axiom]]] = None
        self._by_subclass: Optional[Dict[ClassExpression, Set[SubClassOf]]] = None
        self._by_superclass: Optional[Dict[ClassExpression, Set[SubClassOf]]] = None
        self._by_annotation_subject: Optional[Dict[URIRef, Set[AnnotationAssertion]]] = None

    @classmethod
    def from_owl(cls, path: str) -> 'OntologyDocument':
        """
        Load an ontology from an OWL functional syntax file.

        Args:
            path: Path to the file

        Returns:
            OntologyDocument instance
        """
        from ..utils.owl_parser import OWLParser
        return OWLParser().parse(path).ontology

    def _build_indexes(self) -> None:
        by_entity = defaultdict(set)
        by_subclass = defaultdict(set)
        by_superclass = defaultdict(set)
        by_subject = defaultdict(set)
        for axiom in self._axioms:
            for entity in axiom.signature:
                by_entity[entity].add(axiom)
            if isinstance(axiom, SubClassOf):
                by_subclass[axiom.sub_class].add(axiom)
                by_superclass[axiom.super_class].add(axiom)
            elif isinstance(axiom, AnnotationAssertion):
                by_subject[axiom.subject].add(axiom)
        self._by_entity = dict(by_entity)
        self._by_subclass = dict(by_subclass)
        self._by_superclass = dict(by_superclass)
        self._by_annotation_subject = dict(by_subject)

    @property
    def axioms(self) -> FrozenSet[Axiom]:
        """Return all axioms in the document."""
        return self._axioms

    @property
    def logical_axioms(self) -> Set[Axiom]:
        return {ax for ax in self._axioms if ax.is_logical}

    @property
    def logical_axiom_count(self) -> int:
        return sum(1 for ax in self._axioms if ax.is_logical)

    @property
    def is_anonymous(self) -> bool:
        return self.ontology_iri is None

    @property
    def signature(self) -> Set[Entity]:
        """Return every entity referenced by an axiom."""
        if self._by_entity is None:
            self._build_indexes()
        return set(self._by_entity)

    @property
    def classes(self) -> Set[NamedClass]:
        return {e for e in self.signature if isinstance(e, NamedClass)}

    def contains_entity(self, entity: Entity) -> bool:
        if self._by_entity is None:
            self._build_indexes()
        return entity in self._by_entity

    def referencing_axioms(self, entity: Entity) -> Set[Axiom]:
        """Return all axioms whose signature contains the entity."""
        if self._by_entity is None:
            self._build_indexes()
        return set(self._by_entity.get(entity, ()))

    def sub_class_axioms_for_subclass(self, cls: ClassExpression) -> Set[SubClassOf]:
        """Return the SubClassOf axioms whose subclass is exactly cls."""
        if self._by_subclass is None:
            self._build_indexes()
        return set(self._by_subclass.get(cls, ()))

    def sub_class_axioms_for_superclass(self, cls: ClassExpression) -> Set[SubClassOf]:
        """Return the SubClassOf axioms whose superclass is exactly cls."""
        if self._by_superclass is None:
            self._build_indexes()
        return set(self._by_superclass.get(cls, ()))

    def annotation_assertion_axioms(self, subject: str) -> Set[AnnotationAssertion]:
        """Return the annotation assertions about the given IRI."""
        if self._by_annotation_subject is None:
            self._build_indexes()
        return set(self._by_annotation_subject.get(URIRef(subject), ()))

    def __len__(self) -> int:
        """Return the number of axioms."""
        return len(self._axioms)

    def __iter__(self) -> Iterator[Axiom]:
        return iter(self._axioms)

    def __contains__(self, axiom: Axiom) -> bool:
        return axiom in self._axioms

    def __str__(self) -> str:
        name = self.ontology_iri or "<anonymous>"
        lines = [f"OntologyDocument {name} with {len(self)} axioms:"]
        for ax in sorted(self._axioms, key=str):
            lines.append(f"  {ax}")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"OntologyDocument(iri={self.ontology_iri}, |axioms|={len(self)})"


def make_intersection(*expressions: ClassExpression) -> ClassExpression:
    """Create an intersection, flattening nested intersections."""
    flat = set()
    for c in expressions:
        if isinstance(c, ObjectIntersectionOf):
            flat.update(c.operands)
        elif not (isinstance(c, NamedClass) and c.is_thing):
            flat.add(c)

    if len(flat) == 0:
        return THING
    if len(flat) == 1:
        return next(iter(flat))
    if NOTHING in flat:
        return NOTHING

    return ObjectIntersectionOf(frozenset(flat))
