"""
cmakelists_edit — add, rename and remove source files in CMake listfiles
without touching the rest of the file.

Public API for library usage::

    from cmakelists_edit import CMakeListsFile, StandardFileBuffer

    buffer = StandardFileBuffer("CMakeLists.txt")
    buffer.load()
    listsfile = CMakeListsFile(buffer)
    listsfile.add_source_file("app", "src/widget.cpp")
    listsfile.save()
"""

from .config import Config
from .file_buffer import BytesFileBuffer, FileBuffer, StandardFileBuffer
from .editing import BlockCreationPolicy, CMakeListsFile, SortSectionPolicy

__all__ = [
    "Config",
    "BytesFileBuffer", "FileBuffer", "StandardFileBuffer",
    "BlockCreationPolicy", "CMakeListsFile", "SortSectionPolicy",
]
