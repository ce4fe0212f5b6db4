"""
snomodule: Filtered OWL Module Extraction
OWL Functional Syntax Writer

Serializes an OntologyDocument as OWL functional syntax using the
terminology prefix manager.
"""

from __future__ import annotations
from typing import BinaryIO, List, Optional, Set, Union
import io
import logging

from rdflib import Literal
from rdflib.namespace import XSD

from ..core.ontology import (
    Entity, EntityType, Axiom, AxiomType, ClassExpression, NamedClass,
    ObjectIntersectionOf, ObjectSomeValuesFrom, DataHasValue, SubClassOf,
    EquivalentClasses, SubObjectPropertyOf, SubObjectPropertyChainOf,
    TransitiveObjectProperty, SubDataPropertyOf, AnnotationAssertion,
    OntologyDocument
)
from ..core.prefixes import DEFAULT_PREFIXES, PrefixManager, format_declaration

logger = logging.getLogger(__name__)

_DECLARATION_KEYWORDS = {
    EntityType.CLASS: "Class",
    EntityType.OBJECT_PROPERTY: "ObjectProperty",
    EntityType.DATA_PROPERTY: "DataProperty",
    EntityType.ANNOTATION_PROPERTY: "AnnotationProperty",
}

_AXIOM_ORDER = {
    AxiomType.SUB_OBJECT_PROPERTY: 0,
    AxiomType.SUB_PROPERTY_CHAIN: 1,
    AxiomType.TRANSITIVE_OBJECT_PROPERTY: 2,
    AxiomType.SUB_DATA_PROPERTY: 3,
    AxiomType.EQUIVALENT_CLASSES: 4,
    AxiomType.SUBCLASS_OF: 5,
    AxiomType.ANNOTATION_ASSERTION: 6,
}


def escape_string(text: str) -> str:
    return text.replace('\\', '\\\\').replace('"', '\\"')


class OWLFunctionalWriter:
    """
    Writer for OWL functional syntax.

    Declarations are generated for every non-built-in entity referenced by
    an axiom, so documents need not track them. Annotation subjects are
    declared with the kind they have in the source document; a subject the
    source never uses in a logical axiom stays undeclared.
    """

    def __init__(self, prefix_manager: Optional[PrefixManager] = None):
        self.prefix_manager = prefix_manager or PrefixManager()

    def iri(self, iri: str) -> str:
        return self.prefix_manager.render(iri)

    def literal(self, value: Literal) -> str:
        text = f'"{escape_string(str(value))}"'
        if value.language:
            return f"{text}@{value.language}"
        if value.datatype is not None and value.datatype != XSD.string:
            return f"{text}^^{self.iri(value.datatype)}"
        return text

    def expression(self, expr: ClassExpression) -> str:
        """Render a class expression."""
        if isinstance(expr, NamedClass):
            return self.iri(expr.iri)
        if isinstance(expr, ObjectIntersectionOf):
            parts = sorted(self.expression(op) for op in expr.operands)
            return f"ObjectIntersectionOf({' '.join(parts)})"
        if isinstance(expr, ObjectSomeValuesFrom):
            return f"ObjectSomeValuesFrom({self.iri(expr.property.iri)} {self.expression(expr.filler)})"
        if isinstance(expr, DataHasValue):
            return f"DataHasValue({self.iri(expr.property.iri)} {self.literal(expr.value)})"
        raise ValueError(f"Unsupported class expression: {expr!r}")

    def axiom(self, axiom: Axiom) -> str:
        """Render one axiom."""
        if isinstance(axiom, SubClassOf):
            return f"SubClassOf({self.expression(axiom.sub_class)} {self.expression(axiom.super_class)})"
        if isinstance(axiom, EquivalentClasses):
            parts = sorted(self.expression(op) for op in axiom.operands)
            return f"EquivalentClasses({' '.join(parts)})"
        if isinstance(axiom, SubObjectPropertyOf):
            return f"SubObjectPropertyOf({self.iri(axiom.sub_property.iri)} {self.iri(axiom.super_property.iri)})"
        if isinstance(axiom, SubObjectPropertyChainOf):
            chain = ' '.join(self.iri(p.iri) for p in axiom.chain)
            return f"SubObjectPropertyOf(ObjectPropertyChain({chain}) {self.iri(axiom.super_property.iri)})"
        if isinstance(axiom, TransitiveObjectProperty):
            return f"TransitiveObjectProperty({self.iri(axiom.property.iri)})"
        if isinstance(axiom, SubDataPropertyOf):
            return f"SubDataPropertyOf({self.iri(axiom.sub_property.iri)} {self.iri(axiom.super_property.iri)})"
        if isinstance(axiom, AnnotationAssertion):
            value = axiom.value
            rendered = self.literal(value) if isinstance(value, Literal) else self.iri(value)
            return f"AnnotationAssertion({self.iri(axiom.property.iri)} {self.iri(axiom.subject)} {rendered})"
        raise ValueError(f"Unsupported axiom: {axiom!r}")

    def declaration(self, entity: Entity) -> str:
        keyword = _DECLARATION_KEYWORDS[entity.entity_type]
        return f"Declaration({keyword}({self.iri(entity.iri)}))"

    def _annotation_subjects(self, ontology: OntologyDocument, source: OntologyDocument) -> Set[Entity]:
        subjects = {ax.subject for ax in ontology.axioms if isinstance(ax, AnnotationAssertion)}
        if not subjects:
            return set()
        return {e for e in source.signature if e.iri in subjects and not e.is_builtin}

    def lines(self, ontology: OntologyDocument, source: Optional[OntologyDocument] = None) -> List[str]:
        """
        Render the whole document as a list of lines.

        Args:
            ontology: Document to render
            source: Document the entity kinds of annotation subjects are
                looked up in; defaults to ontology
        """
        lines = [format_declaration(prefix, self.prefix_manager.prefixes[prefix])
                 for prefix in DEFAULT_PREFIXES]
        lines.append("")
        lines.append("")

        header = "Ontology("
        if ontology.ontology_iri is not None:
            header += f"<{ontology.ontology_iri}>"
            if ontology.version_iri is not None:
                header += f"\n<{ontology.version_iri}>"
        lines.append(header)
        lines.append("")

        entities: Set[Entity] = set()
        for axiom in ontology.axioms:
            entities.update(e for e in axiom.signature if not e.is_builtin)
        entities.update(self._annotation_subjects(ontology, source or ontology))
        for entity in sorted(entities, key=lambda e: (e.entity_type.value, str(e.iri))):
            lines.append(self.declaration(entity))
        if entities:
            lines.append("")

        rendered = sorted(
            (_AXIOM_ORDER[ax.axiom_type], self.axiom(ax)) for ax in ontology.axioms
        )
        lines.extend(text for _, text in rendered)
        lines.append(")")
        return lines

    def write(
        self,
        ontology: OntologyDocument,
        sink: BinaryIO,
        source: Optional[OntologyDocument] = None
    ) -> None:
        """Write the document as UTF-8 to a binary sink."""
        text = "\n".join(self.lines(ontology, source)) + "\n"
        sink.write(text.encode('utf-8'))
        sink.flush()
        logger.debug(f"Wrote {len(ontology)} axioms")

    def to_string(self, ontology: OntologyDocument) -> str:
        buffer = io.BytesIO()
        self.write(ontology, buffer)
        return buffer.getvalue().decode('utf-8')


def save_ontology(
    ontology: OntologyDocument,
    sink: Union[BinaryIO, str],
    prefix_manager: Optional[PrefixManager] = None
) -> None:
    """
    Convenience function to write a document to a binary sink or file path.

    Args:
        ontology: Document to write
        sink: Binary stream, or path of the file to create
        prefix_manager: Prefixes used to abbreviate IRIs
    """
    writer = OWLFunctionalWriter(prefix_manager)
    if isinstance(sink, str):
        with open(sink, 'wb') as f:
            writer.write(ontology, f)
    else:
        writer.write(ontology, sink)
