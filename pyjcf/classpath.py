"""
Class lookup over directories and jar/zip archives.
"""

import logging
import os
import zipfile
from pathlib import Path
from typing import Iterable, Optional, Union

from .classreader import ClassFile, ClassReader

logger = logging.getLogger(__name__)

Entry = Union[Path, zipfile.ZipFile]


def _entry_name(entry: Entry) -> str:
    if isinstance(entry, zipfile.ZipFile):
        return str(entry.filename)
    return str(entry)


class ClassPath:
    """Ordered search path of class directories and archives.

    ``find_class`` walks the entries in the order they were added and returns
    the first resource that decodes to a valid class file. Resources without
    the class file magic are skipped with a warning. Only valid hits are cached.
    """

    def __init__(self, entries: Iterable[Union[str, Path]] = ()):
        self.entries: list[Entry] = []
        self._cache: dict[str, ClassFile] = {}
        for entry in entries:
            self.add_path(entry)

    @classmethod
    def from_string(cls, classpath: str) -> "ClassPath":
        """Build a classpath from an ``os.pathsep`` separated string, as passed to ``-cp``."""
        return cls(entry for entry in classpath.split(os.pathsep) if entry)

    def add_path(self, path: Union[str, Path]):
        """Append a directory or a .jar/.zip archive."""
        path = Path(path)
        if path.is_dir():
            self.entries.append(path)
        elif path.is_file() and path.suffix in (".jar", ".zip"):
            self.entries.append(zipfile.ZipFile(path, "r"))
        else:
            raise ValueError(f"Invalid classpath entry: {path}")
        logger.debug("Added classpath entry %s", path)

    @staticmethod
    def _read_resource(entry: Entry, resource: str) -> Optional[bytes]:
        if isinstance(entry, zipfile.ZipFile):
            try:
                return entry.read(resource)
            except KeyError:
                return None
        path = entry / resource
        return path.read_bytes() if path.is_file() else None

    def find_class(self, class_name: str) -> Optional[ClassFile]:
        """Find a class by internal name (e.g. 'java/lang/String').

        Returns None when no entry holds a valid class file for the name.
        Truncated or malformed class files raise the decoder's errors.
        """
        cached = self._cache.get(class_name)
        if cached is not None:
            return cached

        resource = class_name + ".class"
        for entry in self.entries:
            data = self._read_resource(entry, resource)
            if data is None:
                continue
            class_file = ClassReader(data).read()
            if not class_file.valid:
                logger.warning("Skipping %s in %s: bad magic number", resource, _entry_name(entry))
                continue
            self._cache[class_name] = class_file
            return class_file

        logger.debug("Class %s not found on classpath", class_name)
        return None

    def __contains__(self, class_name: str) -> bool:
        return self.find_class(class_name) is not None

    def close(self):
        """Close the archives and drop them from the search path."""
        for entry in self.entries:
            if isinstance(entry, zipfile.ZipFile):
                entry.close()
        self.entries = [entry for entry in self.entries if not isinstance(entry, zipfile.ZipFile)]

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()
