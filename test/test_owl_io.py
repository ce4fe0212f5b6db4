"""
Tests for OWL functional syntax reading and writing.
"""

import io

import pytest

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

from rdflib import Literal, URIRef
from rdflib.namespace import XSD

from snomodule.core import (
    NamedClass, ObjectProperty, DataProperty, ObjectIntersectionOf,
    ObjectSomeValuesFrom, DataHasValue, SubClassOf, EquivalentClasses,
    SubObjectPropertyChainOf, TransitiveObjectProperty, SubDataPropertyOf,
    AnnotationAssertion, OntologyDocument, PrefixManager, RDFS_LABEL,
    SNOMED_NAMESPACE
)
from snomodule.utils.owl_parser import OWLParser, parse_owl, tokenize
from snomodule.utils.owl_writer import OWLFunctionalWriter, save_ontology

RELEASE = '''
Prefix(:=<http://snomed.info/id/>)
Prefix(owl:=<http://www.w3.org/2002/07/owl#>)
Prefix(rdfs:=<http://www.w3.org/2000/01/rdf-schema#>)
Prefix(xsd:=<http://www.w3.org/2001/XMLSchema#>)
Prefix(ex:=<http://example.org/>)

Ontology(<http://snomed.info/sct/900000000000207008>
<http://snomed.info/sct/900000000000207008/version/20260901>
Declaration(Class(:1))
# Clinical finding
SubClassOf(:1 :2)
EquivalentClasses(:3 ObjectIntersectionOf(:2 ObjectSomeValuesFrom(:10 :4)))
SubObjectPropertyOf(ObjectPropertyChain(:10 :11) :10)
TransitiveObjectProperty(:11)
SubDataPropertyOf(:20 :21)
SubClassOf(:5 DataHasValue(:20 "2"^^xsd:integer))
AnnotationAssertion(rdfs:label :1 "Heart \\"disease\\""@en)
DisjointClasses(:1 :5)
)
'''


def sct(code):
    return NamedClass(SNOMED_NAMESPACE + code)


def role(code):
    return ObjectProperty(SNOMED_NAMESPACE + code)


class TestTokenizer:
    """Test cases for the tokenizer."""

    def test_comments_and_whitespace_dropped(self):
        """Test that only meaningful tokens are returned."""
        tokens = tokenize('SubClassOf(:1 :2) # trailing\n')
        assert [t.kind for t in tokens] == ['name', 'open', 'name', 'name', 'close']

    def test_bad_character(self):
        """Test that stray characters are reported."""
        with pytest.raises(ValueError):
            tokenize('SubClassOf(:1 ^ :2)')


class TestParser:
    """Test cases for OWLParser."""

    def test_parse_axioms(self):
        """Test that every supported axiom kind is read."""
        release = OWLParser().parse_string(RELEASE)
        axioms = release.ontology.axioms

        assert len(axioms) == 7
        assert SubClassOf(sct('1'), sct('2')) in axioms
        assert EquivalentClasses(frozenset([
            sct('3'),
            ObjectIntersectionOf(frozenset([sct('2'), ObjectSomeValuesFrom(role('10'), sct('4'))])),
        ])) in axioms
        assert SubObjectPropertyChainOf((role('10'), role('11')), role('10')) in axioms
        assert TransitiveObjectProperty(role('11')) in axioms
        assert SubDataPropertyOf(DataProperty(SNOMED_NAMESPACE + '20'),
                                 DataProperty(SNOMED_NAMESPACE + '21')) in axioms

    def test_parse_literals(self):
        """Test typed, language-tagged and escaped literals."""
        release = OWLParser().parse_string(RELEASE)
        ontology = release.ontology

        restriction = SubClassOf(sct('5'), DataHasValue(DataProperty(SNOMED_NAMESPACE + '20'),
                                                        Literal('2', datatype=XSD.integer)))
        assert restriction in ontology.axioms

        label = AnnotationAssertion(RDFS_LABEL, SNOMED_NAMESPACE + '1', Literal('Heart "disease"', lang='en'))
        assert ontology.annotation_assertion_axioms(SNOMED_NAMESPACE + '1') == {label}

    def test_parse_header_and_namespaces(self):
        """Test ontology identifiers and prefix declarations."""
        release = OWLParser().parse_string(RELEASE)

        assert release.ontology.ontology_iri == URIRef('http://snomed.info/sct/900000000000207008')
        assert str(release.ontology.version_iri).endswith('/version/20260901')
        assert release.ontology_headers == {
            'http://snomed.info/sct/900000000000207008': 'Ontology(<http://snomed.info/sct/900000000000207008>)'
        }
        assert release.ontology_namespaces['ex'] == 'Prefix(ex:=<http://example.org/>)'
        assert release.extra_namespaces == {'Prefix(ex:=<http://example.org/>)'}
        assert release.prefix_manager.get_iri('ex:a') == URIRef('http://example.org/a')

    def test_strict_mode_rejects_unsupported(self):
        """Test that strict parsing fails on unsupported axioms."""
        with pytest.raises(ValueError):
            OWLParser(strict=True).parse_string(RELEASE)

    def test_lenient_mode_skips_malformed(self):
        """Test that lenient parsing skips axioms it can not read."""
        content = 'Prefix(:=<http://snomed.info/id/>)\nOntology(SubClassOf(:1) SubClassOf(nope:1 :2) SubClassOf(:1 :2))'
        release = OWLParser().parse_string(content)

        assert set(release.ontology.axioms) == {SubClassOf(sct('1'), sct('2'))}
        assert release.ontology.is_anonymous
        assert release.ontology_headers == {}

    def test_axiom_annotations_ignored(self):
        """Test that annotations on an axiom do not change it."""
        content = 'Ontology(SubClassOf(Annotation(rdfs:comment "told") <http://a/1> <http://a/2>))'
        release = OWLParser(strict=True).parse_string(content)
        assert set(release.ontology.axioms) == {SubClassOf(NamedClass('http://a/1'), NamedClass('http://a/2'))}

    def test_structure_errors(self):
        """Test missing, repeated and unknown top level blocks."""
        with pytest.raises(ValueError):
            OWLParser().parse_string('Prefix(:=<http://snomed.info/id/>)')
        with pytest.raises(ValueError):
            OWLParser().parse_string('Ontology() Ontology()')
        with pytest.raises(ValueError):
            OWLParser().parse_string('Import(<http://a>) Ontology()')
        with pytest.raises(ValueError):
            OWLParser().parse_string('Ontology(SubClassOf(:1 :2)')

    def test_parse_file(self, tmp_path):
        """Test reading from disk."""
        path = tmp_path / 'release.ofn'
        path.write_text(RELEASE, encoding='utf-8')

        assert len(parse_owl(str(path)).ontology) == 7
        assert len(OntologyDocument.from_owl(str(path))) == 7

    def test_missing_file(self, tmp_path):
        """Test that a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            parse_owl(str(tmp_path / 'absent.ofn'))


class TestWriter:
    """Test cases for OWLFunctionalWriter."""

    def _document(self):
        return OntologyDocument({
            SubClassOf(sct('1'), sct('2')),
            SubObjectPropertyChainOf((role('10'), role('11')), role('10')),
            TransitiveObjectProperty(role('11')),
            AnnotationAssertion(RDFS_LABEL, SNOMED_NAMESPACE + '1', Literal('Disease', lang='en')),
        }, ontology_iri='http://snomed.info/sct/900000000000207008')

    def test_document_layout(self):
        """Test prefixes, header, declarations and closing bracket."""
        lines = OWLFunctionalWriter().lines(self._document())

        assert lines[:6] == [
            'Prefix(:=<http://snomed.info/id/>)',
            'Prefix(owl:=<http://www.w3.org/2002/07/owl#>)',
            'Prefix(rdf:=<http://www.w3.org/1999/02/22-rdf-syntax-ns#>)',
            'Prefix(xml:=<http://www.w3.org/XML/1998/namespace>)',
            'Prefix(xsd:=<http://www.w3.org/2001/XMLSchema#>)',
            'Prefix(rdfs:=<http://www.w3.org/2000/01/rdf-schema#>)',
        ]
        assert 'Ontology(<http://snomed.info/sct/900000000000207008>' in lines
        assert 'Declaration(Class(:1))' in lines
        assert 'Declaration(ObjectProperty(:10))' in lines
        assert 'Declaration(AnnotationProperty(rdfs:label))' in lines
        assert lines[-1] == ')'

    def test_axiom_rendering(self):
        """Test rendering of individual axioms."""
        writer = OWLFunctionalWriter()
        text = writer.to_string(self._document())

        assert 'SubObjectPropertyOf(ObjectPropertyChain(:10 :11) :10)' in text
        assert 'AnnotationAssertion(rdfs:label :1 "Disease"@en)' in text
        assert text.index('TransitiveObjectProperty(:11)') < text.index('SubClassOf(:1 :2)')

    def test_literals(self):
        """Test literal rendering."""
        writer = OWLFunctionalWriter()
        assert writer.literal(Literal('plain')) == '"plain"'
        assert writer.literal(Literal('a "b"')) == '"a \\"b\\""'
        assert writer.literal(Literal('2', datatype=XSD.integer)) == '"2"^^xsd:integer'
        assert writer.literal(Literal('x', datatype=XSD.string)) == '"x"'

    def test_unabbreviated_iri(self):
        """Test that IRIs outside known namespaces are bracketed."""
        writer = OWLFunctionalWriter(PrefixManager())
        assert writer.iri('http://other.org/x/1') == '<http://other.org/x/1>'

    def test_written_document_reads_back(self):
        """Test that parsing written output gives the same axioms."""
        document = self._document()
        sink = io.BytesIO()
        save_ontology(document, sink)

        release = OWLParser(strict=True).parse_string(sink.getvalue().decode('utf-8'))
        assert release.ontology.axioms == document.axioms

    def test_annotation_subject_declared_from_source(self):
        """Test that a class used only as an annotation subject is declared."""
        label = AnnotationAssertion(RDFS_LABEL, SNOMED_NAMESPACE + '1', Literal('x'))
        module = OntologyDocument({label})
        source = OntologyDocument({SubClassOf(sct('1'), sct('2')), label})
        writer = OWLFunctionalWriter()

        lines = writer.lines(module, source)
        assert 'Declaration(Class(:1))' in lines
        assert 'Declaration(Class(:2))' not in lines
        assert 'AnnotationAssertion(rdfs:label :1 "x")' in lines

    def test_unknown_annotation_subject_undeclared(self):
        """Test that a subject the source never uses gets no declaration."""
        label = AnnotationAssertion(RDFS_LABEL, SNOMED_NAMESPACE + '1', Literal('x'))
        lines = OWLFunctionalWriter().lines(OntologyDocument({label}))
        assert 'Declaration(Class(:1))' not in lines
        assert 'Declaration(AnnotationProperty(rdfs:label))' in lines

    def test_save_to_path(self, tmp_path):
        """Test writing to a file path."""
        path = tmp_path / 'module.ofn'
        save_ontology(self._document(), str(path))
        assert path.read_text(encoding='utf-8').rstrip().endswith(')')


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
