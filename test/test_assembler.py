"""
Tests for module assembly and output writing.
"""

import io

import pytest

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

from rdflib import Literal

from snomodule.core import (
    NamedClass, SubClassOf, AnnotationAssertion, OntologyDocument, RDFS_LABEL,
    SNOMED_NAMESPACE, DocumentConstructionError, OntologyStorageError
)
from snomodule.extraction.assembler import ModuleAssembler, load_copyright_notice

NOTICE = "# Copyright notice for tests"
EXTRA = "Prefix(ex:=<http://example.org/>)"


def sct(code):
    return NamedClass(SNOMED_NAMESPACE + code)


class FailingSink(io.BytesIO):
    """Sink that refuses every write."""

    def write(self, data):
        raise OSError("disk full")


class TestAssemble:
    """Test cases for ModuleAssembler.assemble."""

    def test_document_holds_exactly_the_axioms(self):
        """Test that assembly neither adds nor drops axioms."""
        axioms = {SubClassOf(sct('1'), sct('2')), SubClassOf(sct('3'), sct('1'))}
        document = ModuleAssembler(copyright_notice=NOTICE).assemble(
            axioms, ontology_iri='http://snomed.info/sct/900000000000207008'
        )
        assert set(document.axioms) == axioms
        assert str(document.ontology_iri) == 'http://snomed.info/sct/900000000000207008'

    def test_invalid_identifiers_raise(self):
        """Test that a bad document is reported as a construction error."""
        with pytest.raises(DocumentConstructionError):
            ModuleAssembler(copyright_notice=NOTICE).assemble(
                set(), version_iri='http://example.org/version/1'
            )


class TestHeader:
    """Test cases for header emission."""

    def test_no_extra_namespaces_no_header(self):
        """Test that nothing is written before the body without extra prefixes."""
        assembler = ModuleAssembler(copyright_notice=NOTICE)
        sink = io.BytesIO()

        assert assembler.write_header([], sink) is False
        assert sink.getvalue() == b''

    def test_one_extra_namespace(self):
        """Test that the header appears once with exactly the extra prefix line."""
        assembler = ModuleAssembler(copyright_notice=NOTICE)
        document = assembler.assemble({SubClassOf(sct('1'), sct('2'))})
        sink = io.BytesIO()

        assert assembler.write(document, [EXTRA], sink) is True

        output = sink.getvalue().decode('utf-8')
        assert output.startswith(NOTICE + "\n" + EXTRA + "\n")
        assert output.count(NOTICE) == 1
        assert output.count(EXTRA) == 1
        assert output.index(EXTRA) < output.index("Ontology(")

    def test_header_lines_are_sorted_and_unique(self):
        """Test that several extra prefixes are written once each."""
        assembler = ModuleAssembler(copyright_notice=NOTICE)
        other = "Prefix(ab:=<http://example.org/ab/>)"
        sink = io.BytesIO()

        assembler.write_header([EXTRA, other, EXTRA], sink)

        lines = sink.getvalue().decode('utf-8').splitlines()
        assert lines == [NOTICE, other, EXTRA]

    def test_default_notice_is_packaged(self):
        """Test that the bundled copyright notice is used by default."""
        notice = load_copyright_notice()
        assert notice.startswith('#')
        assert ModuleAssembler().copyright_notice == notice


class TestDeclarations:
    """Test cases for declarations in the written body."""

    def test_annotation_only_filter_is_declared(self):
        """Test that a class kept only through its label is declared from the source."""
        label = AnnotationAssertion(RDFS_LABEL, SNOMED_NAMESPACE + '1', Literal('x'))
        source = OntologyDocument({SubClassOf(sct('1'), sct('2')), label})
        assembler = ModuleAssembler(copyright_notice=NOTICE)
        document = assembler.assemble({label})
        sink = io.BytesIO()

        assembler.write(document, [], sink, source=source)

        assert 'Declaration(Class(:1))' in sink.getvalue().decode('utf-8')


class TestStorageErrors:
    """Test cases for write failures."""

    def test_header_write_failure(self):
        """Test that a failing header write raises OntologyStorageError."""
        assembler = ModuleAssembler(copyright_notice=NOTICE)
        with pytest.raises(OntologyStorageError) as info:
            assembler.write_header([EXTRA], FailingSink())
        assert "namespaces" in str(info.value)
        assert isinstance(info.value.__cause__, OSError)

    def test_body_write_failure(self):
        """Test that a failing body write raises OntologyStorageError."""
        assembler = ModuleAssembler(copyright_notice=NOTICE)
        document = assembler.assemble({SubClassOf(sct('1'), sct('2'))})
        with pytest.raises(OntologyStorageError) as info:
            assembler.serialize(document, FailingSink())
        assert "serialise" in str(info.value)


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
