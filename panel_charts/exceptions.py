"""
Custom exceptions for PanelCharts package.

This module defines exception classes for better error handling and messaging
across the package. Validation errors are raised while a chart is being built,
before anything is drawn, so a failing chart never produces a partial image.
"""


class PanelChartsError(Exception):
    """Base exception class for all PanelCharts errors."""
    pass


class InvalidParameterError(PanelChartsError):
    """
    Raised for invalid user inputs.

    This exception is used for malformed chart documents (invalid JSON, values
    of the wrong type) and is the parent of every validation error below.
    """
    pass


class DesignError(InvalidParameterError):
    """Raised for an invalid design record (grid width or colours)."""
    pass


class LayoutError(InvalidParameterError):
    """
    Raised for an invalid layout record.

    Covers non-positive canvas dimensions, split ratios outside [0, 1],
    unknown split keywords and missing split lookup entries.
    """
    pass


class ScaleError(InvalidParameterError):
    """
    Raised when an axis scale cannot be built.

    This can occur due to an inverted range, a non-positive logarithmic
    domain, an offset outside [0, 100], an unknown adjustment keyword or a
    tick sequence with the wrong number of steps.
    """
    pass


class MappingError(InvalidParameterError):
    """
    Raised when a data mapping is invalid.

    Typical causes are an unknown mapping kind, a missing or mismatched
    data column, a property that does not apply to the mapping kind, or an
    invalid colour.
    """
    pass


class PanelError(InvalidParameterError):
    """Raised when the number of plots does not match the split topology."""
    pass


class RenderError(PanelChartsError):
    """
    Raised when chart rendering fails.

    This can occur due to matplotlib errors while the drawing operations
    are replayed on the output surface.
    """
    pass


class RenderIOError(RenderError):
    """
    Raised when rendered output cannot be produced or written.

    This typically occurs for an unsupported output extension, a missing
    parent directory, or a failing file write.
    """
    pass
