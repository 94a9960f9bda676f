"""Source list editing — classification, placement and surgical rewrite."""

from .sources import Section, SourcesStatement, classify, extract_path
from .placement import find_insert_section, prefix_score, common_prefix_length
from .listsfile import (
    BlockCreationPolicy,
    CMakeListsFile,
    SortSectionPolicy,
    needs_quotation,
)

__all__ = [
    "Section", "SourcesStatement", "classify", "extract_path",
    "find_insert_section", "prefix_score", "common_prefix_length",
    "BlockCreationPolicy", "CMakeListsFile", "SortSectionPolicy",
    "needs_quotation",
]
