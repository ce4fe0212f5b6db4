"""
snomodule: Filtered OWL Module Extraction
Conversion Pipeline

This module implements the filtered conversion of a terminology release:
validate the release, resolve the ontology identifier, build the seed
signature for the filter concept, extract a STAR locality module, repair
known extraction gaps and write the resulting document.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import BinaryIO, Callable, Optional, Set
import logging
import time

from ..core.exceptions import (
    DocumentConstructionError, EmptyReleaseError, OntologyIdentifierError,
    ReasonerConstructionError, ReasonerServiceError
)
from ..core.ontology import Axiom, Entity, NamedClass, OntologyDocument
from ..core.release import TerminologyRelease
from ..reasoning.locality import LocalityModuleExtractor, ModuleType
from ..reasoning.oracle import (
    ClassificationOracle, OracleFactory, ReasonerType, get_oracle_factory
)
from .assembler import ModuleAssembler
from .repair import repair_module
from .signature import build_seed_signature

logger = logging.getLogger(__name__)

SNOMED_INTERNATIONAL_EDITION_URI = "http://snomed.info/sct/900000000000207008"
HEADER_PREFIX = "Ontology(<"
HEADER_SUFFIX = ">)"

ExtractorFactory = Callable[[OntologyDocument, ModuleType], LocalityModuleExtractor]


def resolve_ontology_uri(release: TerminologyRelease, ontology_uri_override: Optional[str] = None) -> str:
    """
    Decide the IRI of the output ontology.

    An override wins. Otherwise the release must carry at most one active
    ``Ontology(<iri>)`` header; with none the International Edition IRI is used.

    Raises:
        OntologyIdentifierError: If several headers are active or the header is malformed
    """
    if ontology_uri_override:
        return ontology_uri_override

    headers = list(release.ontology_headers.values())
    if len(headers) > 1:
        raise OntologyIdentifierError(
            "Multiple active Ontology identifiers found. An extension should make other "
            f"Ontology identifier records inactive when adding its own. {headers}"
        )
    if not headers:
        logger.warning(f"No Ontology identifier found. Using default identifier {SNOMED_INTERNATIONAL_EDITION_URI}")
        header = HEADER_PREFIX + SNOMED_INTERNATIONAL_EDITION_URI + HEADER_SUFFIX
    else:
        header = headers[0]

    if not header.startswith(HEADER_PREFIX) or not header.endswith(HEADER_SUFFIX):
        raise OntologyIdentifierError(
            f"Ontology header should start with '{HEADER_PREFIX}' and end with '{HEADER_SUFFIX}' "
            f"but this found '{header}'"
        )
    return header[len(HEADER_PREFIX):-len(HEADER_SUFFIX)]


def version_iri_for(ontology_uri: str, version_date: Optional[str]) -> Optional[str]:
    if not version_date:
        return None
    return f"{ontology_uri}/version/{version_date}"


@dataclass
class ExtractionResult:
    """Outcome of one conversion."""
    module: OntologyDocument
    filter_class: Optional[NamedClass]
    signature: Set[Entity]
    num_extracted: int
    num_repaired: int
    header_written: bool
    time_seconds: float
    memory_mb: float

    @property
    def module_size(self) -> int:
        return len(self.module)

    @property
    def is_filtered(self) -> bool:
        return self.filter_class is not None


class ModuleExtractionPipeline:
    """
    Converts a terminology release into an OWL document, optionally
    restricted to the module around one filter concept.

    The classification oracle and the module extractor are injected as
    factories so that each conversion gets fresh instances.

    Attributes:
        reasoner_type: Backend used when no oracle factory is given
        module_type: Locality module flavour, STAR by default
        oracle_factory: Builds a ClassificationOracle for an ontology
        extractor_factory: Builds a module extractor for an ontology
    """

    def __init__(
        self,
        reasoner_type: ReasonerType = ReasonerType.STRUCTURAL,
        module_type: ModuleType = ModuleType.STAR,
        oracle_factory: Optional[OracleFactory] = None,
        extractor_factory: Optional[ExtractorFactory] = None,
        copyright_notice: Optional[str] = None
    ):
        """
        Initialize the pipeline.

        Raises:
            ReasonerConstructionError: If no backend is registered for reasoner_type
        """
        self.reasoner_type = reasoner_type
        self.module_type = module_type
        if oracle_factory is None:
            try:
                oracle_factory = get_oracle_factory(reasoner_type)
            except ReasonerServiceError as e:
                raise ReasonerConstructionError(f"Failed to resolve reasoner '{reasoner_type}'.") from e
        self.oracle_factory = oracle_factory
        self.extractor_factory = extractor_factory or LocalityModuleExtractor
        self.copyright_notice = copyright_notice

    def convert(
        self,
        release: TerminologyRelease,
        sink: BinaryIO,
        filter_id: Optional[str] = None,
        ontology_uri_override: Optional[str] = None,
        version_date: Optional[str] = None
    ) -> ExtractionResult:
        """
        Run the conversion and write the result to sink.

        Args:
            release: Loaded terminology release
            sink: Binary output; discard it if an error is raised
            filter_id: Concept id (or IRI) of the module root; None converts everything
            ontology_uri_override: Ontology IRI to use instead of the release header
            version_date: Release date for the version IRI

        Returns:
            ExtractionResult describing the written document
        """
        start_time = time.time()

        if release.is_empty:
            raise EmptyReleaseError(
                "No Stated Relationships or Axioms were found. An Ontology file can not be produced."
            )

        ontology_uri = resolve_ontology_uri(release, ontology_uri_override)
        version_iri = version_iri_for(ontology_uri, version_date)
        ontology = release.ontology
        assembler = ModuleAssembler(release.prefix_manager, self.copyright_notice)

        filter_class = None
        signature: Set[Entity] = set()
        num_extracted = 0
        if filter_id:
            logger.info(f"Extracting module for filter concept {filter_id}")
            filter_class = self._filter_class(release, filter_id)
            signature = self._seed_signature(filter_class, ontology)
            extracted = self._extract(signature, ontology)
            num_extracted = len(extracted)
            axioms = repair_module(extracted, filter_class, ontology)
        else:
            logger.info("No filter concept given, converting the whole ontology")
            axioms = set(ontology.axioms)

        module = assembler.assemble(axioms, ontology_iri=ontology_uri, version_iri=version_iri)
        header_written = assembler.write(module, release.extra_namespaces, sink, source=ontology)

        logger.info("Release to OWL Ontology conversion complete.")
        return self._make_result(
            module, filter_class, signature, num_extracted,
            len(module) - num_extracted if filter_class is not None else 0,
            header_written, start_time
        )

    def _filter_class(self, release: TerminologyRelease, filter_id: str) -> NamedClass:
        try:
            if filter_id.startswith(('http://', 'https://')):
                return NamedClass(filter_id)
            name = filter_id if ':' in filter_id else ':' + filter_id
            return NamedClass(release.prefix_manager.get_iri(name))
        except ValueError as e:
            raise DocumentConstructionError(f"Invalid filter concept '{filter_id}'.") from e

    def _seed_signature(self, filter_class: NamedClass, ontology: OntologyDocument) -> Set[Entity]:
        try:
            oracle: ClassificationOracle = self.oracle_factory(ontology)
        except Exception as e:
            raise ReasonerConstructionError(
                f"An instance of requested reasoner '{self.reasoner_type.value}' could not be created."
            ) from e
        try:
            return build_seed_signature(filter_class, oracle)
        except Exception as e:
            raise DocumentConstructionError(f"Failed to build seed signature for {filter_class.iri}.") from e
        finally:
            # plug-in oracles need not implement dispose
            dispose = getattr(oracle, 'dispose', None)
            if dispose is not None:
                dispose()

    def _extract(self, signature: Set[Entity], ontology: OntologyDocument) -> Set[Axiom]:
        try:
            extractor = self.extractor_factory(ontology, self.module_type)
            return set(extractor.extract(signature))
        except Exception as e:
            raise DocumentConstructionError("Failed to extract module from OWL Ontology.") from e

    def _make_result(
        self,
        module: OntologyDocument,
        filter_class: Optional[NamedClass],
        signature: Set[Entity],
        num_extracted: int,
        num_repaired: int,
        header_written: bool,
        start_time: float
    ) -> ExtractionResult:
        """Create an ExtractionResult."""
        import psutil
        process = psutil.Process()
        memory_mb = process.memory_info().rss / (1024 * 1024)

        return ExtractionResult(
            module=module,
            filter_class=filter_class,
            signature=signature,
            num_extracted=num_extracted,
            num_repaired=num_repaired,
            header_written=header_written,
            time_seconds=time.time() - start_time,
            memory_mb=memory_mb,
        )


def convert_release(
    release: TerminologyRelease,
    sink: BinaryIO,
    filter_id: Optional[str] = None,
    ontology_uri_override: Optional[str] = None,
    version_date: Optional[str] = None,
    reasoner_type: ReasonerType = ReasonerType.STRUCTURAL
) -> ExtractionResult:
    """
    Convenience function to run a conversion with the default backends.

    Args:
        release: Loaded terminology release
        sink: Binary output
        filter_id: Concept id of the module root, or None for everything
        ontology_uri_override: Ontology IRI override
        version_date: Release date for the version IRI
        reasoner_type: Classification backend

    Returns:
        ExtractionResult
    """
    pipeline = ModuleExtractionPipeline(reasoner_type=reasoner_type)
    return pipeline.convert(
        release, sink,
        filter_id=filter_id,
        ontology_uri_override=ontology_uri_override,
        version_date=version_date,
    )
