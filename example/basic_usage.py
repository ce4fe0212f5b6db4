#!/usr/bin/env python3
"""
snomodule: Filtered OWL Module Extraction
Example Usage Script

This script demonstrates the basic usage of the snomodule package for:
1. Building a small terminology release
2. Extracting the module around one concept
3. Writing a module with extra namespace declarations
"""

import io
import sys
from pathlib import Path

# Add src to path for development
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from rdflib import Literal

from snomodule.core import (
    NamedClass,
    ObjectProperty,
    ObjectSomeValuesFrom,
    SubClassOf,
    EquivalentClasses,
    AnnotationAssertion,
    OntologyDocument,
    TerminologyRelease,
    RDFS_LABEL,
    SNOMED_NAMESPACE,
    make_intersection,
)
from snomodule.extraction import ModuleExtractionPipeline, convert_release
from snomodule.reasoning import ModuleType, extract_module


def sct(code: str) -> NamedClass:
    return NamedClass(SNOMED_NAMESPACE + code)


def label(cls: NamedClass, text: str) -> AnnotationAssertion:
    return AnnotationAssertion(RDFS_LABEL, cls.iri, Literal(text, lang="en"))


def create_sample_release() -> TerminologyRelease:
    """Create a sample clinical finding hierarchy for demonstration."""

    # Concepts
    finding = sct("404684003")
    disease = sct("64572001")
    heart_disease = sct("56265001")
    endocarditis = sct("56819008")
    infective_endo = sct("301183007")
    lung_disease = sct("19829001")
    pneumonia = sct("233604007")

    body_structure = sct("123037004")
    heart_valve = sct("17401000")
    lung = sct("39607008")

    # Attributes
    finding_site = ObjectProperty(SNOMED_NAMESPACE + "363698007")

    axioms = {
        # Told hierarchy
        SubClassOf(disease, finding),
        SubClassOf(heart_disease, disease),
        SubClassOf(lung_disease, disease),
        SubClassOf(infective_endo, endocarditis),
        SubClassOf(heart_valve, body_structure),
        SubClassOf(lung, body_structure),

        # Definitions
        EquivalentClasses(frozenset([
            endocarditis,
            make_intersection(heart_disease, ObjectSomeValuesFrom(finding_site, heart_valve)),
        ])),
        EquivalentClasses(frozenset([
            pneumonia,
            make_intersection(lung_disease, ObjectSomeValuesFrom(finding_site, lung)),
        ])),

        # Labels
        label(endocarditis, "Endocarditis (disorder)"),
        label(pneumonia, "Pneumonia (disorder)"),
    }

    return TerminologyRelease(ontology=OntologyDocument(axioms))


def example_filtered_conversion():
    """Demonstrate a filtered conversion."""
    print("=" * 60)
    print("Example 1: Module for Endocarditis")
    print("=" * 60)

    release = create_sample_release()
    print(f"\nRelease has {release.axiom_count} logical axioms")

    sink = io.BytesIO()
    result = convert_release(release, sink, filter_id="56819008", version_date="20260901")

    print(f"\nSeed signature: {sorted(str(e) for e in result.signature)}")
    print(f"Extracted axioms: {result.num_extracted}")
    print(f"Added by gap repair: {result.num_repaired}")
    print(f"\nModule has {result.module_size} axioms:")
    for ax in sorted(result.module.axioms, key=str):
        print(f"  {ax}")


def example_compare_module_types():
    """Compare BOT, TOP and STAR modules for the same signature."""
    print("\n" + "=" * 60)
    print("Example 2: Locality Module Types")
    print("=" * 60)

    ontology = create_sample_release().ontology
    signature = {sct("56819008"), sct("56265001"), sct("64572001"), sct("404684003")}

    for module_type in ModuleType:
        module = extract_module(ontology, signature, module_type)
        print(f"\n{module_type.name} module: {len(module)} axioms")
        for ax in sorted(module, key=str):
            print(f"  {ax}")


def example_extra_namespaces():
    """Demonstrate the copyright and namespace header."""
    print("\n" + "=" * 60)
    print("Example 3: Extra Namespace Header")
    print("=" * 60)

    release = create_sample_release()
    release.ontology_namespaces["ex"] = "Prefix(ex:=<http://example.org/extension/>)"

    pipeline = ModuleExtractionPipeline(copyright_notice="# Example extension notice")
    sink = io.BytesIO()
    result = pipeline.convert(release, sink, filter_id="233604007",
                              ontology_uri_override="http://example.org/extension")

    print(f"\nHeader written: {result.header_written}")
    print("\nOutput document:")
    print(sink.getvalue().decode("utf-8"))


def main():
    """Run all examples."""
    print("\nsnomodule: Filtered OWL Module Extraction - Examples\n")

    example_filtered_conversion()
    example_compare_module_types()
    example_extra_namespaces()

    print("\n" + "=" * 60)
    print("Examples completed!")
    print("=" * 60)


if __name__ == "__main__":
    main()
