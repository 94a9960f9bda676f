"""
CMakeListsFile — the editable model of one listfile.

Source files are added, renamed and removed in the sources statements of
a target; ``write()`` then regenerates only the statements that changed
and copies every other byte of the file verbatim.
"""

from __future__ import annotations

import bisect
import enum
import locale
import logging
from typing import Callable, Optional

from ..config import Config
from ..file_buffer import BytesFileBuffer, FileBuffer
from ..parser.content import Argument, Statement
from ..parser.statements import read_cmake_file
from .placement import find_insert_section
from .sources import (
    SECTION_KEYWORDS,
    TARGET_SOURCES,
    Section,
    SourcesStatement,
    classify,
)

logger = logging.getLogger(__name__)

_ENCODING = "utf-8"
_ERRORS = "surrogateescape"


class SortSectionPolicy(enum.Enum):
    NO_SORT = "no_sort"
    SORT = "sort"


class BlockCreationPolicy(enum.Enum):
    CREATE = "create"
    NO_CREATE = "no_create"


def needs_quotation(value: str) -> bool:
    # Approximation: CMake has more reasons to quote.
    return " " in value


def _has_path_separator(value: str) -> bool:
    return "/" in value or "\\" in value


def _file_name_sort_key(arg: Argument) -> tuple[int, str]:
    """Files in subdirectories first, then locale order."""
    return (0 if _has_path_separator(arg.value) else 1,
            locale.strxfrm(arg.value))


def _inherit_separator(separator: str) -> str:
    """Separator for a file appended after one separated by *separator*."""
    if "#" in separator:
        newline = separator.rfind("\n")
        return separator[newline:] if newline >= 0 else " "
    return separator or " "


def _line_starts(text: str) -> list[int]:
    starts = [0]
    pos = text.find("\n")
    while pos >= 0:
        starts.append(pos + 1)
        pos = text.find("\n", pos + 1)
    return starts


def _offset(line_starts: list[int], line: int, column: int) -> int:
    return line_starts[line - 1] + column - 1


def _position(line_starts: list[int], offset: int) -> tuple[int, int]:
    line = bisect.bisect_right(line_starts, offset)
    return line, offset - line_starts[line - 1] + 1


class CMakeListsFile:
    """Editable source lists of a CMake listfile.

    The model is built once from the buffer content. If the content does
    not parse, ``is_loaded`` is False and every operation fails.

    Without *config*, ``Config()`` is used: built-in defaults overridden
    by any ``CMAKELISTS_EDIT_*`` environment variables. Pass
    ``Config.load()`` to also read the YAML config file.
    """

    def __init__(
        self,
        file_buffer: FileBuffer,
        config: Optional[Config] = None,
    ) -> None:
        cfg = config or Config()
        self._buffer = file_buffer
        self._sort_policy = (
            SortSectionPolicy.SORT if cfg.SORT else SortSectionPolicy.NO_SORT
        )
        self._block_creation_policy = (
            BlockCreationPolicy.CREATE if cfg.CREATE_BLOCKS
            else BlockCreationPolicy.NO_CREATE
        )
        self._default_section_name = cfg.DEFAULT_SECTION
        self._default_separator = cfg.DEFAULT_SEPARATOR
        self._config = cfg

        self._listeners: list[Callable[[], None]] = []
        self._dirty = False
        self._statements: list[Statement] = []
        self._sources: list[SourcesStatement] = []
        self._index: dict[str, list[SourcesStatement]] = {}
        self._owners: dict[int, SourcesStatement] = {}
        self._created: list[SourcesStatement] = []

        self._loaded = self._read()

    @classmethod
    def from_bytes(
        cls,
        content: bytes,
        config: Optional[Config] = None,
    ) -> "CMakeListsFile":
        return cls(BytesFileBuffer(content), config)

    # ------------------------------------------------------------------
    # State and policies
    # ------------------------------------------------------------------

    @property
    def file_buffer(self) -> FileBuffer:
        return self._buffer

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    @property
    def is_dirty(self) -> bool:
        return self._dirty

    def set_sort_section_policy(self, policy: SortSectionPolicy) -> None:
        self._sort_policy = policy

    def set_block_creation_policy(self, policy: BlockCreationPolicy) -> None:
        self._block_creation_policy = policy

    def set_default_section_name(self, name: str) -> None:
        """Set the section new files go to in ``target_sources`` blocks."""
        name = name.upper()
        if name not in SECTION_KEYWORDS:
            raise ValueError(f"not a section keyword: {name!r}")
        self._default_section_name = name
        for sources in self._sources:
            if sources.statement.name == TARGET_SOURCES:
                sources.default_insert_section_name = name

    def add_change_listener(self, callback: Callable[[], None]) -> None:
        """Register *callback* to run after every successful mutation."""
        self._listeners.append(callback)

    def targets(self) -> list[str]:
        return list(self._index)

    def source_files(self, target: str) -> list[str]:
        return [
            name
            for sources in self._index.get(target, [])
            for name in sources.file_names()
        ]

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add_source_file(
        self,
        target: str,
        file_name: str,
        hint: Optional[str] = None,
    ) -> bool:
        """Add *file_name* to the best matching section of *target*.

        Parameters
        ----------
        target:
            Target name as written in the listfile.
        file_name:
            File path as it should appear in the listfile.
        hint:
            Optional file kind (see :mod:`cmakelists_edit.kinds`) or
            section keyword used to prefer a section.

        Returns
        -------
        bool
            False if the target has no sources statement and block
            creation is disabled; the model is unchanged then.
        """
        if not self._check_loaded() or not file_name:
            return False

        candidates = self._index.get(target)
        if not candidates:
            if self._block_creation_policy == BlockCreationPolicy.NO_CREATE:
                logger.warning(
                    "[CMakeEdit] Target %s not found in CMakeLists file %s",
                    target, self._buffer.file_name,
                )
                return False
            candidates = [self._create_sources_statement(target)]

        sources, section = find_insert_section(
            candidates,
            file_name,
            self._preferred_section_name(hint),
            self._default_separator,
        )

        if section.file_names:
            separator = _inherit_separator(section.file_names[-1].separator)
        else:
            separator = self._default_separator

        section.file_names.append(
            Argument(file_name, needs_quotation(file_name), separator)
        )
        logger.debug(
            "[CMakeEdit] Added %s to %s section %r of %s",
            file_name, sources.statement.name, section.name, target,
        )
        self._section_changed(sources, section)
        return True

    def rename_source_file(
        self,
        target: str,
        old_file_name: str,
        new_file_name: str,
    ) -> bool:
        """Rename the first occurrence of *old_file_name* in *target*."""
        if not self._check_loaded() or not new_file_name:
            return False

        found = self._find_file(target, old_file_name)
        if found is None:
            return False

        sources, section, index = found
        arg = section.file_names[index]
        arg.set_value(new_file_name)
        arg.quoted = arg.quoted or needs_quotation(new_file_name)

        self._section_changed(sources, section)
        return True

    def remove_source_file(self, target: str, file_name: str) -> bool:
        """Remove the first occurrence of *file_name* from *target*."""
        if not self._check_loaded():
            return False

        found = self._find_file(target, file_name)
        if found is None:
            return False

        sources, section, index = found
        del section.file_names[index]

        self._section_changed(sources, section)
        return True

    # ------------------------------------------------------------------
    # Reading and writing
    # ------------------------------------------------------------------

    def reload(self) -> bool:
        """Rebuild the model from the current buffer content."""
        self._statements = []
        self._sources = []
        self._index = {}
        self._owners = {}
        self._created = []
        self._dirty = False
        self._loaded = self._read()
        return self._loaded

    def write(self) -> bytes:
        """Regenerate the listfile and store it in the buffer.

        Only dirty statements are regenerated; everything else is copied
        from the current buffer content. Statements created in this
        session are appended at the end of the file.
        """
        content = self._buffer.content()
        if not self._loaded:
            return content

        text = content.decode(_ENCODING, _ERRORS)
        line_starts = _line_starts(text)

        parts: list[str] = []
        placed: list[tuple[Statement, int, int]] = []
        out_len = 0
        cursor = 0

        for statement in self._statements:
            start = _offset(line_starts, statement.start_line,
                            statement.start_column)
            end = _offset(line_starts, statement.end_line,
                          statement.end_column) + 1

            sources = self._owners.get(id(statement))
            if sources is not None and sources.dirty:
                statement.arguments = sources.regenerate_arguments()
                statement_text = statement.to_string()
            else:
                statement_text = text[start:end]

            gap = text[cursor:start]
            parts.append(gap)
            out_len += len(gap)
            placed.append((statement, out_len, len(statement_text)))
            parts.append(statement_text)
            out_len += len(statement_text)
            cursor = end

        parts.append(text[cursor:])
        out_len += len(text) - cursor

        for sources in self._created:
            if out_len and not parts[-1].endswith("\n"):
                parts.append("\n")
                out_len += 1
            statement = sources.statement
            statement.arguments = sources.regenerate_arguments()
            statement_text = statement.to_string()
            placed.append((statement, out_len, len(statement_text)))
            parts.append(statement_text + "\n")
            out_len += len(statement_text) + 1
            self._statements.append(statement)
        self._created = []

        output = "".join(parts)
        self._move_spans(output, placed)

        for sources in self._sources:
            sources.dirty = False
        self._dirty = False

        data = output.encode(_ENCODING, _ERRORS)
        if data != content:
            self._buffer.set_content(data)
        return data

    def save(self) -> bool:
        """Write the model into the buffer and persist the buffer."""
        if not self._check_loaded():
            return False
        self.write()
        return self._buffer.save()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _read(self) -> bool:
        text = self._buffer.content().decode(_ENCODING, _ERRORS)
        statements, error = read_cmake_file(text)
        if error:
            logger.error(
                "[CMakeEdit] Could not parse CMakeLists file %s",
                self._buffer.file_name,
            )
            return False

        self._statements = statements
        for statement in statements:
            sources = classify(statement, self._default_section_name)
            if sources is not None:
                self._register(sources)
        return True

    def _register(self, sources: SourcesStatement) -> None:
        self._sources.append(sources)
        self._index.setdefault(sources.target, []).append(sources)
        self._owners[id(sources.statement)] = sources

    def _create_sources_statement(self, target: str) -> SourcesStatement:
        target_arg = Argument(target, needs_quotation(target))
        statement = Statement(
            name=TARGET_SOURCES,
            arguments=[target_arg],
            trailing_space="\n",
        )
        sources = SourcesStatement(
            statement=statement,
            target=target,
            slots=[target_arg],
            default_insert_section_name=self._default_section_name,
        )
        self._register(sources)
        self._created.append(sources)
        logger.info(
            "[CMakeEdit] Creating %s block for target %s",
            TARGET_SOURCES, target,
        )
        return sources

    def _preferred_section_name(self, hint: Optional[str]) -> Optional[str]:
        if hint is None:
            return None
        if hint.upper() in SECTION_KEYWORDS:
            return hint.upper()
        return self._config.section_for_kind(hint)

    def _find_file(
        self,
        target: str,
        file_name: str,
    ) -> Optional[tuple[SourcesStatement, Section, int]]:
        if target not in self._index:
            logger.warning(
                "[CMakeEdit] Target %s not found in CMakeLists file %s",
                target, self._buffer.file_name,
            )
            return None

        for sources in self._index[target]:
            for section in sources.sections:
                index = section.index_of(file_name)
                if index >= 0:
                    return sources, section, index

        logger.warning(
            "[CMakeEdit] File %s not listed for target %s in %s",
            file_name, target, self._buffer.file_name,
        )
        return None

    def _section_changed(
        self,
        sources: SourcesStatement,
        section: Section,
    ) -> None:
        if self._sort_policy == SortSectionPolicy.SORT:
            self._resort_section(section)
        sources.dirty = True
        self._set_dirty()

    @staticmethod
    def _resort_section(section: Section) -> None:
        """Sort files in place; separators move with their files.

        The first file's separator stays first unless either separator
        carries a comment, which must stay with its file.
        """
        if not section.file_names:
            return
        old_first = section.file_names[0]
        section.file_names.sort(key=_file_name_sort_key)
        new_first = section.file_names[0]
        if new_first is not old_first \
                and "#" not in old_first.separator \
                and "#" not in new_first.separator:
            old_first.separator, new_first.separator = \
                new_first.separator, old_first.separator

    def _set_dirty(self) -> None:
        self._dirty = True
        for callback in self._listeners:
            callback()

    def _check_loaded(self) -> bool:
        if not self._loaded:
            logger.warning(
                "[CMakeEdit] CMakeLists file %s is not loaded",
                self._buffer.file_name,
            )
        return self._loaded

    @staticmethod
    def _move_spans(
        output: str,
        placed: list[tuple[Statement, int, int]],
    ) -> None:
        """Point statement spans at their position in *output*."""
        line_starts = _line_starts(output)
        for statement, start, length in placed:
            statement.start_line, statement.start_column = \
                _position(line_starts, start)
            statement.end_line, statement.end_column = \
                _position(line_starts, start + length - 1)
