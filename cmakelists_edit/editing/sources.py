"""
Sources statements — the editable view of commands that list a
target's source files, and the classifier that builds them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, Union

from ..parser.content import Argument, Statement

logger = logging.getLogger(__name__)

DEFAULT_SEPARATOR = "\n    "

TARGET_SOURCES = "target_sources"

ADD_TARGET_COMMANDS = frozenset({
    "add_executable",
    "add_library",
    "qt_add_executable",
    "qt_add_library",
    "qt6_add_executable",
    "qt6_add_library",
})

QML_MODULE_COMMANDS = frozenset({
    "qt_add_qml_module",
    "qt6_add_qml_module",
})

SECTION_KEYWORDS = ("PRIVATE", "PUBLIC", "INTERFACE")

TARGET_MODIFIERS = frozenset({
    "WIN32",
    "MACOSX_BUNDLE",
    "EXCLUDE_FROM_ALL",
    "STATIC",
    "SHARED",
    "MODULE",
    "INTERFACE",
    "OBJECT",
    "MANUAL_FINALIZATION",
})

# Keywords whose following argument is a value, not a file.
KEYWORDS_WITH_VALUE = frozenset({"CLASS_NAME", "OUTPUT_TARGETS"})

# Target forms that never own sources.
NON_SOURCE_KEYWORDS = frozenset({"IMPORTED", "ALIAS"})


def extract_path(file_name: str) -> str:
    """Return the directory part of *file_name* ("" for top-level files)."""
    pos = file_name.rfind("/")
    if pos < 0:
        return ""
    return file_name[:pos]


def section_keyword(arg: Argument) -> Optional[str]:
    """Return the canonical section name if *arg* opens a section."""
    if arg.quoted:
        return None
    upper = arg.value.upper()
    if upper in SECTION_KEYWORDS:
        return upper
    return None


@dataclass(eq=False)
class Section:
    """A named (PRIVATE/PUBLIC/INTERFACE) or anonymous group of files."""
    name: str
    name_argument: Optional[Argument] = None
    file_names: list[Argument] = field(default_factory=list)
    common_prefixes: set[str] = field(default_factory=set)

    def collect_prefixes(self) -> None:
        self.common_prefixes = {
            extract_path(arg.value) for arg in self.file_names if arg.value
        }

    def index_of(self, file_name: str) -> int:
        for i, arg in enumerate(self.file_names):
            if arg.matches(file_name):
                return i
        return -1

    def arguments(self) -> list[Argument]:
        if self.name_argument is None:
            return list(self.file_names)
        return [self.name_argument, *self.file_names]


Slot = Union[Argument, Section]


@dataclass(eq=False)
class SourcesStatement:
    """A statement that declares source files for a target.

    ``slots`` keeps plain arguments (target, modifiers) and sections in
    their original order so the statement can be regenerated faithfully.
    """
    statement: Statement
    target: str
    slots: list[Slot] = field(default_factory=list)
    sections: list[Section] = field(default_factory=list)
    default_insert_section_name: str = ""
    is_preferred: bool = False
    dirty: bool = False

    def find_section(self, name: str) -> Optional[Section]:
        """Return the last section called *name* (case-insensitive)."""
        wanted = name.upper()
        for section in reversed(self.sections):
            if section.name == wanted:
                return section
        return None

    def add_section(
        self,
        name: str,
        separator: str = DEFAULT_SEPARATOR,
    ) -> Section:
        name = name.upper()
        name_argument = Argument(name, False, separator) if name else None
        section = Section(name=name, name_argument=name_argument)
        self.sections.append(section)
        self.slots.append(section)
        return section

    def regenerate_arguments(self) -> list[Argument]:
        arguments: list[Argument] = []
        for slot in self.slots:
            if isinstance(slot, Section):
                arguments.extend(slot.arguments())
            else:
                arguments.append(slot)
        return arguments

    def file_names(self) -> list[str]:
        return [
            arg.value
            for section in self.sections
            for arg in section.file_names
            if arg.value
        ]


def classify(
    statement: Statement,
    default_section_name: str = "PRIVATE",
) -> Optional[SourcesStatement]:
    """Build a :class:`SourcesStatement` for source-declaring commands.

    Returns None for every other command, for QML module declarations
    (not supported yet) and for imported or alias targets.
    """
    if statement.name == TARGET_SOURCES:
        sources = _read_target_sources(statement, default_section_name)
    elif statement.name in ADD_TARGET_COMMANDS:
        sources = _read_add_target(statement)
    elif statement.name in QML_MODULE_COMMANDS:
        logger.warning(
            "[CMakeEdit] %s is not supported, statement at line %s is "
            "left untouched",
            statement.name, statement.start_line,
        )
        return None
    else:
        return None

    if sources is None:
        return None

    for section in sources.sections:
        section.collect_prefixes()
    return sources


def _read_target_sources(
    statement: Statement,
    default_section_name: str,
) -> Optional[SourcesStatement]:
    args = statement.arguments
    if not args or not args[0].value:
        return None

    sources = SourcesStatement(
        statement=statement,
        target=args[0].value,
        slots=[args[0]],
        default_insert_section_name=default_section_name.upper(),
    )
    current: Optional[Section] = None

    for arg in args[1:]:
        keyword = section_keyword(arg)
        if keyword is not None:
            current = Section(name=keyword, name_argument=arg)
            sources.sections.append(current)
            sources.slots.append(current)
        elif current is not None:
            current.file_names.append(arg)
        else:
            # Not valid before a section keyword; kept, but not a file.
            sources.slots.append(arg)

    return sources


def _read_add_target(statement: Statement) -> Optional[SourcesStatement]:
    args = statement.arguments
    if not args or not args[0].value:
        return None

    if any(arg.value.upper() in NON_SOURCE_KEYWORDS
           for arg in args[1:] if not arg.quoted):
        logger.debug(
            "[CMakeEdit] %s(%s) declares an imported or alias target",
            statement.name, args[0].value,
        )
        return None

    sources = SourcesStatement(
        statement=statement,
        target=args[0].value,
        slots=[args[0]],
    )
    section: Optional[Section] = None
    expect_value = False

    for arg in args[1:]:
        if section is not None:
            section.file_names.append(arg)
            continue

        # Quoted arguments are never keywords.
        keyword = "" if arg.quoted else arg.value.upper()
        if expect_value:
            sources.slots.append(arg)
            expect_value = False
        elif keyword in TARGET_MODIFIERS:
            sources.slots.append(arg)
        elif keyword in KEYWORDS_WITH_VALUE:
            sources.slots.append(arg)
            expect_value = True
        elif not arg.value:
            sources.slots.append(arg)
        else:
            section = Section(name="", file_names=[arg])
            sources.sections.append(section)
            sources.slots.append(section)

    return sources
