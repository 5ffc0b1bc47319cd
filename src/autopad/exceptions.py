"""Module for shared exceptions in the autopad package."""


class AutoPADError(Exception):
    """Base exception for structurally invalid pH adjustment input."""

    def __init__(self, message):
        """Inherit parent behaviors."""
        super(AutoPADError, self).__init__(message)


class FormatError(AutoPADError):
    """Exception for metabolite identifiers without a compartment suffix."""

    pass


class CompartmentMismatchError(AutoPADError):
    """Exception for resolved compartments that disagree with the model."""

    pass


class AmbiguousProtonError(AutoPADError):
    """Exception for compartments with more than one proton candidate."""

    pass


class NegativeAtomCountError(AutoPADError):
    """Exception for adjustments removing more hydrogens than present."""

    pass


class DimensionMismatchError(AutoPADError):
    """Exception for pKa, pH or direction input not aligned with the model."""

    pass
