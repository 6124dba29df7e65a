"""Sources that load raw system records."""

from datamap.sources.base import FileSource, Source
from datamap.sources.json_file import JsonFileSource, SampleSource, get_source

__all__ = [
    "FileSource",
    "JsonFileSource",
    "SampleSource",
    "Source",
    "get_source",
]
