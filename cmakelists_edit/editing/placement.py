"""
Placement — chooses the section that receives a newly added file.

Sections are scored by how closely the directories of their files match
the directory of the new file, so files land next to their siblings.
"""

from __future__ import annotations

import logging
import math
from typing import Optional

from .sources import DEFAULT_SEPARATOR, Section, SourcesStatement, extract_path

logger = logging.getLogger(__name__)

NO_FILES_SCORE = -1.0
EXACT_MATCH_SCORE = math.inf


def common_prefix_length(path1: str, path2: str) -> int:
    """Length of the common leading character run of two strings."""
    length = 0
    for ch1, ch2 in zip(path1, path2):
        if ch1 != ch2:
            break
        length += 1
    return length


def prefix_score(file_path: str, section: Section) -> float:
    """Score *section* for the directory *file_path*.

    -1 for a section without files, infinity when a file of the section
    lives in exactly that directory, else the longest common prefix.
    """
    if not section.common_prefixes:
        return NO_FILES_SCORE

    best = 0
    for prefix in section.common_prefixes:
        if prefix == file_path:
            return EXACT_MATCH_SCORE
        best = max(best, common_prefix_length(prefix, file_path))
    return float(best)


def find_insert_section(
    candidates: list[SourcesStatement],
    file_name: str,
    preferred_section_name: Optional[str] = None,
    separator: str = DEFAULT_SEPARATOR,
) -> tuple[SourcesStatement, Section]:
    """Pick (or create) the section of *candidates* for *file_name*.

    Parameters
    ----------
    candidates:
        All sources statements of one target, in file order. Must not be
        empty.
    file_name:
        Path of the file to add, as it will be written.
    preferred_section_name:
        Restrict scoring to sections with this name. Ignored when no
        candidate has such a section.
    separator:
        Separator for the keyword of a newly created named section.

    Returns
    -------
    tuple[SourcesStatement, Section]
        The owning statement and the chosen section.
    """
    if not candidates:
        raise ValueError("find_insert_section needs at least one statement")

    for sources in candidates:
        if sources.is_preferred:
            name = preferred_section_name or sources.default_insert_section_name
            section = sources.find_section(name) or \
                sources.add_section(name, separator)
            return sources, section

    if preferred_section_name and not any(
        sources.find_section(preferred_section_name) for sources in candidates
    ):
        logger.debug(
            "[CMakeEdit] No %s section for %s, placing unconstrained",
            preferred_section_name, candidates[0].target,
        )
        preferred_section_name = None

    file_path = extract_path(file_name)
    best: Optional[tuple[SourcesStatement, Section]] = None
    best_score = NO_FILES_SCORE

    for sources in candidates:
        for section in sources.sections:
            if preferred_section_name and \
                    section.name != preferred_section_name.upper():
                continue
            score = prefix_score(file_path, section)
            if score == EXACT_MATCH_SCORE:
                return sources, section
            if score > best_score:
                best_score = score
                best = (sources, section)

    if best is not None:
        return best

    # Only empty sections of the preferred name: take the first of them.
    if preferred_section_name:
        for sources in candidates:
            section = sources.find_section(preferred_section_name)
            if section is not None:
                return sources, section

    first = candidates[0]
    name = first.default_insert_section_name
    section = first.find_section(name)
    if section is None:
        section = first.add_section(name, separator)
        logger.debug(
            "[CMakeEdit] Created section %r in %s(%s)",
            name, first.statement.name, first.target,
        )
    return first, section
