"""
Tests for syntactic locality and module extraction.
"""

import pytest

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

from rdflib import Literal

from snomodule.core import (
    NamedClass, ObjectProperty, DataProperty, ObjectIntersectionOf,
    ObjectSomeValuesFrom, DataHasValue, SubClassOf, EquivalentClasses,
    SubObjectPropertyOf, SubObjectPropertyChainOf, TransitiveObjectProperty,
    AnnotationAssertion, OntologyDocument, THING, NOTHING, RDFS_LABEL,
    SNOMED_NAMESPACE
)
from snomodule.reasoning.locality import (
    LocalityType, ModuleType, LocalityEvaluator, LocalityModuleExtractor,
    extract_module
)


def sct(code):
    return NamedClass(SNOMED_NAMESPACE + code)


def role(code):
    return ObjectProperty(SNOMED_NAMESPACE + code)


A, B, C, D, E = sct('1'), sct('2'), sct('3'), sct('4'), sct('5')
R, S = role('10'), role('11')


class TestBottomLocality:
    """Tests for ⊥-locality of axioms."""

    def setup_method(self):
        self.evaluator = LocalityEvaluator(LocalityType.BOTTOM)

    def test_subclass_with_foreign_subclass_is_local(self):
        """Test that C ⊑ D is local when C is outside the signature."""
        assert self.evaluator.is_local(SubClassOf(A, B), {B})

    def test_subclass_with_known_subclass_is_not_local(self):
        """Test that C ⊑ D is non-local when C is in the signature."""
        assert not self.evaluator.is_local(SubClassOf(A, B), {A})

    def test_existential_with_foreign_role_is_bottom(self):
        """Test that ∃r.C is empty when r is outside the signature."""
        expr = ObjectSomeValuesFrom(R, A)
        assert self.evaluator.is_bottom_equivalent(expr, {A})
        assert not self.evaluator.is_bottom_equivalent(expr, {A, R})

    def test_intersection_with_bottom_conjunct(self):
        """Test that one empty conjunct empties an intersection."""
        expr = ObjectIntersectionOf(frozenset([A, B]))
        assert self.evaluator.is_bottom_equivalent(expr, {A})
        assert not self.evaluator.is_bottom_equivalent(expr, {A, B})

    def test_thing_superclass_is_local(self):
        """Test that C ⊑ ⊤ is always local."""
        assert self.evaluator.is_local(SubClassOf(A, THING), {A})

    def test_thing_subclass_is_not_local(self):
        """Test that ⊤ ⊑ C is non-local even with an empty signature."""
        assert not self.evaluator.is_local(SubClassOf(THING, A), set())

    def test_equivalent_classes(self):
        """Test that C ≡ D is local only when both sides are empty."""
        ax = EquivalentClasses(frozenset([A, ObjectIntersectionOf(frozenset([B, C]))]))
        assert self.evaluator.is_local(ax, {B})
        assert not self.evaluator.is_local(ax, {A})

    def test_role_axioms(self):
        """Test property inclusion, chain and transitivity axioms."""
        assert self.evaluator.is_local(SubObjectPropertyOf(R, S), {S})
        assert not self.evaluator.is_local(SubObjectPropertyOf(R, S), {R})
        assert self.evaluator.is_local(SubObjectPropertyChainOf((R, S), R), {R})
        assert not self.evaluator.is_local(SubObjectPropertyChainOf((R, S), R), {R, S})
        assert self.evaluator.is_local(TransitiveObjectProperty(R), set())
        assert not self.evaluator.is_local(TransitiveObjectProperty(R), {R})

    def test_data_has_value(self):
        """Test that a concrete value restriction on a foreign property is empty."""
        count = DataProperty(SNOMED_NAMESPACE + '20')
        expr = DataHasValue(count, Literal(2))
        assert self.evaluator.is_bottom_equivalent(expr, set())
        assert not self.evaluator.is_bottom_equivalent(expr, {count})

    def test_annotations_are_local(self):
        """Test that annotation assertions are always local."""
        ax = AnnotationAssertion(RDFS_LABEL, A.iri, Literal('A'))
        assert self.evaluator.is_local(ax, {A, RDFS_LABEL})


class TestTopLocality:
    """Tests for ⊤-locality of axioms."""

    def setup_method(self):
        self.evaluator = LocalityEvaluator(LocalityType.TOP)

    def test_subclass_with_foreign_superclass_is_local(self):
        """Test that C ⊑ D is local when D is outside the signature."""
        assert self.evaluator.is_local(SubClassOf(A, B), {A})
        assert not self.evaluator.is_local(SubClassOf(A, B), {B})

    def test_existential_is_top_only_with_foreign_role(self):
        """Test ∃r.C under ⊤-locality."""
        expr = ObjectSomeValuesFrom(R, A)
        assert self.evaluator.is_top_equivalent(expr, set())
        assert not self.evaluator.is_top_equivalent(expr, {R})
        assert not self.evaluator.is_top_equivalent(expr, {A})

    def test_nothing_superclass_is_not_local(self):
        """Test that C ⊑ ⊥ is non-local when C is the whole domain."""
        assert not self.evaluator.is_local(SubClassOf(A, NOTHING), set())

    def test_role_inclusion(self):
        """Test that r ⊑ s is local when s is outside the signature."""
        assert self.evaluator.is_local(SubObjectPropertyOf(R, S), {R})
        assert not self.evaluator.is_local(SubObjectPropertyOf(R, S), {S})


class TestModuleExtraction:
    """Tests for BOT, TOP and STAR modules."""

    def _chain(self):
        # A ⊑ B ⊑ C, sibling E ⊑ C, unrelated D ⊑ E
        return OntologyDocument({
            SubClassOf(A, B),
            SubClassOf(B, C),
            SubClassOf(E, C),
            SubClassOf(D, E),
            AnnotationAssertion(RDFS_LABEL, A.iri, Literal('A')),
        })

    def test_bot_module_follows_superclasses(self):
        """Test that the ⊥-module of {A} contains the path to the top."""
        module = LocalityModuleExtractor(self._chain(), ModuleType.BOT).extract({A})
        assert module == {SubClassOf(A, B), SubClassOf(B, C)}

    def test_top_module_follows_subclasses(self):
        """Test that the ⊤-module of {C} contains everything below C."""
        module = LocalityModuleExtractor(self._chain(), ModuleType.TOP).extract({C})
        assert module == {SubClassOf(A, B), SubClassOf(B, C), SubClassOf(E, C), SubClassOf(D, E)}

    def test_star_module_excludes_siblings(self):
        """Test that the STAR module of a hierarchy path excludes siblings."""
        module = extract_module(self._chain(), {A, B, C}, ModuleType.STAR)
        assert module == {SubClassOf(A, B), SubClassOf(B, C)}

    def test_star_module_of_lone_class_is_empty(self):
        """Test that no axiom is needed for a signature with no entailments."""
        assert extract_module(self._chain(), {A}, ModuleType.STAR) == set()

    def test_modules_hold_no_annotations(self):
        """Test that annotation assertions never enter a module."""
        module = extract_module(self._chain(), {A, B, C, RDFS_LABEL}, ModuleType.BOT)
        assert all(ax.is_logical for ax in module)

    def test_definition_pulls_in_role_axioms(self):
        """Test that a definition brings in axioms about its role and filler."""
        ontology = OntologyDocument({
            EquivalentClasses(frozenset([A, ObjectIntersectionOf(frozenset([B, ObjectSomeValuesFrom(R, C)]))])),
            SubClassOf(C, D),
            TransitiveObjectProperty(R),
            SubObjectPropertyOf(S, R),
            SubClassOf(E, D),
        })
        module = extract_module(ontology, {A, B}, ModuleType.BOT)
        assert TransitiveObjectProperty(R) in module
        assert SubClassOf(C, D) in module
        assert SubObjectPropertyOf(S, R) not in module
        assert SubClassOf(E, D) not in module

    def test_global_axiom_always_included(self):
        """Test that ⊤ ⊑ D is part of any ⊥-module."""
        ontology = OntologyDocument({SubClassOf(THING, D), SubClassOf(A, B)})
        module = extract_module(ontology, {A}, ModuleType.BOT)
        assert SubClassOf(THING, D) in module

    def test_builtins_in_signature_are_ignored(self):
        """Test that owl:Thing in the signature does not change the module."""
        ontology = self._chain()
        with_thing = extract_module(ontology, {A, B, C, THING}, ModuleType.STAR)
        without = extract_module(ontology, {A, B, C}, ModuleType.STAR)
        assert with_thing == without

    def test_module_is_subset_of_ontology(self):
        """Test that every module axiom comes from the source."""
        ontology = self._chain()
        for module_type in ModuleType:
            module = extract_module(ontology, {B, C}, module_type)
            assert module <= set(ontology.axioms)


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
