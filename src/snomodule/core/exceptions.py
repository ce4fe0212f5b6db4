"""
Conversion Exceptions

Every failure during a conversion is terminal for that conversion. Stage
failures are raised with the original error chained as ``__cause__``.
"""


class ConversionError(Exception):
    """Base class for conversion errors"""
    pass


class EmptyReleaseError(ConversionError):
    """The release holds no stated relationships and no axioms"""
    pass


class OntologyIdentifierError(ConversionError):
    """Ambiguous or malformed ontology identifier in the release"""
    pass


class ReasonerConstructionError(ConversionError):
    """The classification backend could not be created"""
    pass


class DocumentConstructionError(ConversionError):
    """Building the signature, module or final ontology failed"""
    pass


class OntologyStorageError(ConversionError):
    """Writing the header or ontology body to the output failed"""
    pass


class ReasonerServiceError(Exception):
    """Raised by the reasoner registry when a backend can not be provided"""
    pass
