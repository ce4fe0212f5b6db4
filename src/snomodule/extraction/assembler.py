"""
snomodule: Filtered OWL Module Extraction
Module Assembler

Builds the standalone module document and writes it, preceded by the
copyright notice and extra namespace declarations when the release has any.
"""

from __future__ import annotations
from pathlib import Path
from typing import BinaryIO, Iterable, Optional
import logging

from ..core.exceptions import DocumentConstructionError, OntologyStorageError
from ..core.ontology import Axiom, OntologyDocument
from ..core.prefixes import PrefixManager
from ..utils.owl_writer import OWLFunctionalWriter

logger = logging.getLogger(__name__)

COPYRIGHT_NOTICE_PATH = Path(__file__).parent.parent / 'resources' / 'owl-file-copyright-notice.txt'


def load_copyright_notice(path: Optional[str] = None) -> str:
    """Read the notice written in front of extra namespace declarations."""
    return Path(path or COPYRIGHT_NOTICE_PATH).read_text(encoding='utf-8')


class ModuleAssembler:
    """
    Turns a repaired axiom set into an output document.

    Attributes:
        prefix_manager: Prefixes used when serializing
        copyright_notice: Text of the header notice
    """

    def __init__(
        self,
        prefix_manager: Optional[PrefixManager] = None,
        copyright_notice: Optional[str] = None
    ):
        self.prefix_manager = prefix_manager or PrefixManager()
        self._copyright_notice = copyright_notice
        self.writer = OWLFunctionalWriter(self.prefix_manager)

    @property
    def copyright_notice(self) -> str:
        if self._copyright_notice is None:
            self._copyright_notice = load_copyright_notice()
        return self._copyright_notice

    def assemble(
        self,
        axioms: Iterable[Axiom],
        ontology_iri: Optional[str] = None,
        version_iri: Optional[str] = None
    ) -> OntologyDocument:
        """
        Create a new document holding exactly the given axioms.

        Raises:
            DocumentConstructionError: If the document can not be built
        """
        try:
            document = OntologyDocument(axioms, ontology_iri=ontology_iri, version_iri=version_iri)
        except (TypeError, ValueError) as e:
            raise DocumentConstructionError("Failed to build OWL Ontology from the module axioms.") from e
        logger.info(f"Assembled module with {len(document)} axioms")
        return document

    def write_header(self, extra_namespaces: Iterable[str], sink: BinaryIO) -> bool:
        """
        Write the copyright notice and extra namespace lines.

        Nothing is written when there are no extra namespaces.

        Returns:
            True if a header was written

        Raises:
            OntologyStorageError: If reading the notice or writing fails
        """
        namespaces = sorted(set(extra_namespaces))
        if not namespaces:
            return False
        try:
            lines = [self.copyright_notice.rstrip('\n')]
            lines.extend(namespaces)
            sink.write(("\n".join(lines) + "\n").encode('utf-8'))
            sink.flush()
        except (OSError, ValueError) as e:
            raise OntologyStorageError("Failed to write ontology namespaces to output stream.") from e
        logger.debug(f"Wrote header with {len(namespaces)} extra namespaces")
        return True

    def serialize(
        self,
        document: OntologyDocument,
        sink: BinaryIO,
        source: Optional[OntologyDocument] = None
    ) -> None:
        """
        Write the document body.

        Annotation subjects are declared with their kind in source.

        Raises:
            OntologyStorageError: If writing fails
        """
        try:
            self.writer.write(document, sink, source)
        except (OSError, ValueError) as e:
            raise OntologyStorageError("Failed to serialise and write OWL Ontology to output stream.") from e

    def write(
        self,
        document: OntologyDocument,
        extra_namespaces: Iterable[str],
        sink: BinaryIO,
        source: Optional[OntologyDocument] = None
    ) -> bool:
        """Write the optional header followed by the document. Returns whether a header was written."""
        header_written = self.write_header(extra_namespaces, sink)
        self.serialize(document, sink, source)
        return header_written
