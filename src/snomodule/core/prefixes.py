"""
snomodule: Filtered OWL Module Extraction
Prefix Manager

Maps short prefixes to namespace IRIs for the terminology's own namespace
and the well-known OWL namespaces.
"""

from __future__ import annotations
from typing import Dict, Optional, Tuple
import re

from rdflib import URIRef
from rdflib.namespace import OWL, RDF, RDFS, XSD

SNOMED_NAMESPACE = "http://snomed.info/id/"
XML_NAMESPACE = "http://www.w3.org/XML/1998/namespace"

# Order is the order prefixes are written in an ontology document
DEFAULT_PREFIXES: Dict[str, str] = {
    "": SNOMED_NAMESPACE,
    "owl": str(OWL),
    "rdf": str(RDF),
    "xml": XML_NAMESPACE,
    "xsd": str(XSD),
    "rdfs": str(RDFS),
}

_LOCAL_NAME_PATTERN = re.compile(r'^[A-Za-z0-9_][\w\-]*$')


def format_declaration(prefix: str, namespace: str) -> str:
    """Render a functional syntax prefix declaration."""
    return f"Prefix({prefix}:=<{namespace}>)"


DEFAULT_NAMESPACES = frozenset(
    format_declaration(prefix, namespace) for prefix, namespace in DEFAULT_PREFIXES.items()
)


class PrefixManager:
    """
    Resolves prefixed names (``:404684003``, ``rdfs:label``) to IRIs and
    abbreviates IRIs back to prefixed names.
    """

    def __init__(self, prefixes: Optional[Dict[str, str]] = None):
        self._prefixes: Dict[str, str] = dict(DEFAULT_PREFIXES)
        if prefixes:
            self._prefixes.update(prefixes)

    @property
    def prefixes(self) -> Dict[str, str]:
        return dict(self._prefixes)

    def set_prefix(self, prefix: str, namespace: str) -> None:
        self._prefixes[prefix] = namespace

    def get_iri(self, name: str) -> URIRef:
        """
        Expand a prefixed name to a full IRI.

        Raises:
            ValueError: If the name has no prefix separator or the prefix is unknown
        """
        if ':' not in name:
            raise ValueError(f"'{name}' is not a prefixed name")
        prefix, local = name.split(':', 1)
        if prefix not in self._prefixes:
            raise ValueError(f"Unknown prefix '{prefix}' in '{name}'")
        return URIRef(self._prefixes[prefix] + local)

    def shorten(self, iri: str) -> Optional[str]:
        """Return the prefixed name for an IRI, or None if none applies."""
        best: Optional[Tuple[str, str]] = None
        for prefix, namespace in self._prefixes.items():
            if iri.startswith(namespace) and (best is None or len(namespace) > len(best[1])):
                local = iri[len(namespace):]
                if _LOCAL_NAME_PATTERN.match(local):
                    best = (prefix, namespace)
        if best is None:
            return None
        return f"{best[0]}:{iri[len(best[1]):]}"

    def render(self, iri: str) -> str:
        """Render an IRI the way functional syntax writes it."""
        short = self.shorten(iri)
        return short if short is not None else f"<{iri}>"

