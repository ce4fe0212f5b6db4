"""
snomodule: Filtered OWL Module Extraction
OWL Parser Utility

This module reads OWL functional syntax files (such as the output of a full
release conversion) into a TerminologyRelease, so that an already converted
release can serve as the Axiom Store.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List, Optional, Union
from pathlib import Path
import logging
import re

from rdflib import Literal, URIRef
from rdflib.namespace import XSD

from ..core.ontology import (
    Axiom, ClassExpression, NamedClass, ObjectProperty, DataProperty,
    AnnotationProperty, SubClassOf, EquivalentClasses, SubObjectPropertyOf,
    SubObjectPropertyChainOf, TransitiveObjectProperty, SubDataPropertyOf,
    AnnotationAssertion, ObjectSomeValuesFrom, DataHasValue, OntologyDocument,
    make_intersection
)
from ..core.prefixes import PrefixManager, format_declaration
from ..core.release import TerminologyRelease

logger = logging.getLogger(__name__)

_TOKEN_PATTERN = re.compile(r'''
    (?P<ws>\s+)
  | (?P<comment>\#[^\n]*)
  | (?P<open>\()
  | (?P<close>\))
  | (?P<iri><[^>\s]*>)
  | (?P<string>"(?:[^"\\]|\\.)*")
  | (?P<datatype>\^\^)
  | (?P<lang>@[A-Za-z][A-Za-z0-9\-]*)
  | (?P<name>[^\s()<>"^@]+)
''', re.VERBOSE)

_ESCAPE_PATTERN = re.compile(r'\\(.)')


@dataclass
class _Token:
    kind: str
    text: str
    offset: int


@dataclass
class _Atom:
    kind: str                        # 'iri', 'name' or 'literal'
    value: Union[str, Literal]


@dataclass
class _Node:
    keyword: str
    args: List[Union['_Node', _Atom]]


def tokenize(content: str) -> List[_Token]:
    """Split functional syntax text into tokens, dropping whitespace and comments."""
    tokens = []
    pos = 0
    while pos < len(content):
        match = _TOKEN_PATTERN.match(content, pos)
        if not match:
            raise ValueError(f"Unexpected character {content[pos]!r} at offset {pos}")
        kind = match.lastgroup
        if kind not in ('ws', 'comment'):
            tokens.append(_Token(kind, match.group(), pos))
        pos = match.end()
    return tokens


class OWLParser:
    """
    Parser for OWL functional syntax.

    Supports the EL constructs of the terminology: SubClassOf,
    EquivalentClasses, object/data property inclusions, property chains,
    transitivity and annotation assertions. Declarations, imports and
    ontology annotations are read past. Other axioms are skipped unless
    strict is set.
    """

    def __init__(self, strict: bool = False):
        """
        Initialize the parser.

        Args:
            strict: If True, raise errors on unsupported constructs
        """
        self.strict = strict
        self.prefix_manager = PrefixManager()
        self._class_cache: Dict[str, NamedClass] = {}
        self._tokens: List[_Token] = []
        self._pos = 0

    def parse(self, path: str) -> TerminologyRelease:
        """
        Parse an OWL functional syntax file.

        Args:
            path: Path to the file

        Returns:
            TerminologyRelease whose ontology holds the parsed axioms
        """
        path = Path(path)

        if not path.exists():
            raise FileNotFoundError(f"Ontology file not found: {path}")

        return self.parse_string(path.read_text(encoding='utf-8'))

    def parse_string(self, content: str) -> TerminologyRelease:
        """Parse functional syntax text."""
        self.prefix_manager = PrefixManager()
        self._class_cache.clear()
        self._tokens = tokenize(content)
        self._pos = 0

        namespaces: Dict[str, str] = {}
        headers: Dict[str, str] = {}
        ontology: Optional[OntologyDocument] = None

        while self._pos < len(self._tokens):
            node = self._parse_item()
            if not isinstance(node, _Node):
                raise ValueError(f"Unexpected token at top level: {node.value!r}")
            if node.keyword == 'Prefix':
                prefix, namespace = self._parse_prefix(node)
                self.prefix_manager.set_prefix(prefix, namespace)
                namespaces[prefix] = format_declaration(prefix, namespace)
            elif node.keyword == 'Ontology':
                if ontology is not None:
                    raise ValueError("More than one Ontology( block found")
                ontology = self._parse_ontology(node)
                if ontology.ontology_iri is not None:
                    headers[str(ontology.ontology_iri)] = f"Ontology(<{ontology.ontology_iri}>)"
            else:
                raise ValueError(f"Unexpected top level construct: {node.keyword}")

        if ontology is None:
            raise ValueError("No Ontology( block found")

        logger.info(f"Parsed {len(ontology)} axioms from Functional Syntax")
        return TerminologyRelease(
            ontology=ontology,
            prefix_manager=self.prefix_manager,
            ontology_headers=headers,
            ontology_namespaces=namespaces,
        )

    # -- tree building ------------------------------------------------------

    def _peek(self) -> Optional[_Token]:
        return self._tokens[self._pos] if self._pos < len(self._tokens) else None

    def _next(self) -> _Token:
        token = self._peek()
        if token is None:
            raise ValueError("Unexpected end of input")
        self._pos += 1
        return token

    def _parse_item(self) -> Union[_Node, _Atom]:
        token = self._next()
        if token.kind == 'name':
            following = self._peek()
            if following is not None and following.kind == 'open':
                self._pos += 1
                args = []
                while True:
                    following = self._peek()
                    if following is None:
                        raise ValueError(f"Unclosed '{token.text}(' at offset {token.offset}")
                    if following.kind == 'close':
                        self._pos += 1
                        break
                    args.append(self._parse_item())
                return _Node(token.text, args)
            return _Atom('name', token.text)
        if token.kind == 'iri':
            return _Atom('iri', token.text[1:-1])
        if token.kind == 'string':
            return _Atom('literal', self._parse_literal(token))
        raise ValueError(f"Unexpected token {token.text!r} at offset {token.offset}")

    def _parse_literal(self, token: _Token) -> Literal:
        lexical = _ESCAPE_PATTERN.sub(r'\1', token.text[1:-1])
        following = self._peek()
        if following is not None and following.kind == 'lang':
            self._pos += 1
            return Literal(lexical, lang=following.text[1:])
        if following is not None and following.kind == 'datatype':
            self._pos += 1
            datatype = self._next()
            if datatype.kind == 'iri':
                iri = URIRef(datatype.text[1:-1])
            elif datatype.kind == 'name':
                iri = self.prefix_manager.get_iri(datatype.text)
            else:
                raise ValueError(f"Expected a datatype at offset {datatype.offset}")
            if iri == XSD.string:
                return Literal(lexical)
            return Literal(lexical, datatype=iri)
        return Literal(lexical)

    def _parse_prefix(self, node: _Node):
        if (len(node.args) != 2 or not all(isinstance(a, _Atom) for a in node.args)
                or node.args[0].kind != 'name' or not node.args[0].value.endswith(':=')
                or node.args[1].kind != 'iri'):
            raise ValueError("Malformed Prefix declaration")
        return node.args[0].value[:-2], node.args[1].value

    # -- interpretation -----------------------------------------------------

    def _parse_ontology(self, node: _Node) -> OntologyDocument:
        iris = []
        axioms = set()
        for arg in node.args:
            if isinstance(arg, _Atom):
                if arg.kind != 'iri' or len(iris) == 2:
                    raise ValueError(f"Unexpected token in Ontology header: {arg.value!r}")
                iris.append(arg.value)
                continue
            if arg.keyword in ('Declaration', 'Import', 'Annotation'):
                continue
            try:
                axiom = self._parse_axiom(arg)
            except (ValueError, IndexError) as e:
                if self.strict:
                    raise ValueError(f"Invalid {arg.keyword} axiom: {e}") from e
                logger.debug(f"Skipping {arg.keyword} axiom: {e}")
                continue
            if axiom is not None:
                axioms.add(axiom)

        ontology_iri = iris[0] if iris else None
        version_iri = iris[1] if len(iris) > 1 else None
        return OntologyDocument(axioms, ontology_iri=ontology_iri, version_iri=version_iri)

    def _parse_axiom(self, node: _Node) -> Optional[Axiom]:
        """Parse one axiom node; returns None for unsupported constructs in lenient mode."""
        # axiom annotations carry no logical meaning here
        args = [a for a in node.args if not (isinstance(a, _Node) and a.keyword == 'Annotation')]
        keyword = node.keyword

        if keyword == 'SubClassOf':
            self._expect_arity(keyword, args, 2)
            return SubClassOf(self._parse_class_expression(args[0]),
                              self._parse_class_expression(args[1]))

        if keyword == 'EquivalentClasses':
            if len(args) < 2:
                raise ValueError("EquivalentClasses needs at least two operands")
            return EquivalentClasses(frozenset(self._parse_class_expression(a) for a in args))

        if keyword == 'SubObjectPropertyOf':
            self._expect_arity(keyword, args, 2)
            sup = ObjectProperty(self._resolve(args[1]))
            if isinstance(args[0], _Node) and args[0].keyword == 'ObjectPropertyChain':
                chain = tuple(ObjectProperty(self._resolve(a)) for a in args[0].args)
                return SubObjectPropertyChainOf(chain, sup)
            return SubObjectPropertyOf(ObjectProperty(self._resolve(args[0])), sup)

        if keyword == 'TransitiveObjectProperty':
            self._expect_arity(keyword, args, 1)
            return TransitiveObjectProperty(ObjectProperty(self._resolve(args[0])))

        if keyword == 'SubDataPropertyOf':
            self._expect_arity(keyword, args, 2)
            return SubDataPropertyOf(DataProperty(self._resolve(args[0])),
                                     DataProperty(self._resolve(args[1])))

        if keyword == 'AnnotationAssertion':
            self._expect_arity(keyword, args, 3)
            value = args[2]
            if isinstance(value, _Atom) and value.kind == 'literal':
                value = value.value
            else:
                value = self._resolve(value)
            return AnnotationAssertion(AnnotationProperty(self._resolve(args[0])),
                                       self._resolve(args[1]), value)

        if self.strict:
            raise ValueError(f"Unsupported axiom type: {keyword}")
        logger.debug(f"Skipping unsupported axiom type: {keyword}")
        return None

    def _parse_class_expression(self, item: Union[_Node, _Atom]) -> ClassExpression:
        if isinstance(item, _Atom):
            return self._get_class(self._resolve(item))

        if item.keyword == 'ObjectIntersectionOf':
            if len(item.args) < 2:
                raise ValueError("ObjectIntersectionOf needs at least two operands")
            return make_intersection(*(self._parse_class_expression(a) for a in item.args))

        if item.keyword == 'ObjectSomeValuesFrom':
            self._expect_arity(item.keyword, item.args, 2)
            return ObjectSomeValuesFrom(ObjectProperty(self._resolve(item.args[0])),
                                        self._parse_class_expression(item.args[1]))

        if item.keyword == 'DataHasValue':
            self._expect_arity(item.keyword, item.args, 2)
            literal = item.args[1]
            if not isinstance(literal, _Atom) or literal.kind != 'literal':
                raise ValueError("DataHasValue needs a literal value")
            return DataHasValue(DataProperty(self._resolve(item.args[0])), literal.value)

        raise ValueError(f"Unsupported class expression: {item.keyword}")

    def _resolve(self, item: Union[_Node, _Atom]) -> URIRef:
        """Turn an IRI or prefixed-name atom into a full IRI."""
        if isinstance(item, _Atom):
            if item.kind == 'iri':
                return URIRef(item.value)
            if item.kind == 'name':
                return self.prefix_manager.get_iri(item.value)
        raise ValueError(f"Expected an IRI, found {item!r}")

    def _expect_arity(self, keyword: str, args: list, count: int) -> None:
        if len(args) != count:
            raise ValueError(f"{keyword} expects {count} arguments, found {len(args)}")

    def _get_class(self, iri: URIRef) -> NamedClass:
        """Get or create a named class."""
        if iri not in self._class_cache:
            self._class_cache[iri] = NamedClass(iri)
        return self._class_cache[iri]


def parse_owl(path: str, strict: bool = False) -> TerminologyRelease:
    """
    Convenience function to parse an OWL functional syntax file.

    Args:
        path: Path to the file
        strict: If True, raise errors on unsupported constructs

    Returns:
        TerminologyRelease instance
    """
    parser = OWLParser(strict=strict)
    return parser.parse(path)
