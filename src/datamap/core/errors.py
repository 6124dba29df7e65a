"""datamap error types.

The pipeline itself never raises for bad data; these cover the I/O and
user-input edges around it.
"""

from __future__ import annotations


class DataMapError(Exception):
    """Base exception for datamap."""

    pass


class SourceError(DataMapError):
    """Input file could not be read or decoded."""

    pass


class FilterError(DataMapError):
    """Filter values outside the accepted set."""

    pass
