"""sqlcomplete - context-aware SQL completion for interactive database shells."""

from .completion import Completer, KeywordCasing, Suggestion, SuggestionType, analyze_context
from .metadata import Metadata, MetadataProvider, SpecialCommand
from .refresh import MetadataRefresher

__version__ = "0.1.0"

__all__ = [
    "Completer",
    "KeywordCasing",
    "Metadata",
    "MetadataProvider",
    "MetadataRefresher",
    "SpecialCommand",
    "Suggestion",
    "SuggestionType",
    "analyze_context",
]
