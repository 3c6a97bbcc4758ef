#!/usr/bin/env python3
"""
Command-line interface for pyjcf - Python Java Class File reader.
"""

import argparse
import logging
import sys
import zipfile
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

logger = logging.getLogger("pyjcf.cli")

_TAG_LABELS = {
    "UTF8": "Utf8",
    "INTEGER": "Integer",
    "FLOAT": "Float",
    "LONG": "Long",
    "DOUBLE": "Double",
    "CLASS": "Class",
    "STRING": "String",
    "FIELDREF": "Fieldref",
    "METHODREF": "Methodref",
    "INTERFACE_METHODREF": "InterfaceMethodref",
    "NAME_AND_TYPE": "NameAndType",
    "METHOD_HANDLE": "MethodHandle",
    "METHOD_TYPE": "MethodType",
    "DYNAMIC": "Dynamic",
    "INVOKE_DYNAMIC": "InvokeDynamic",
    "MODULE": "Module",
    "PACKAGE": "Package",
}


def _configure_logging(level: str):
    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        show_time=False,
    )
    logging.basicConfig(level=level, format="%(message)s", handlers=[handler], force=True)


def _build_classpath(args):
    from .classpath import ClassPath

    try:
        return ClassPath.from_string(args.classpath or "")
    except (ValueError, OSError, zipfile.BadZipFile) as e:
        logger.error("Bad classpath: %s", e)
        sys.exit(1)


def _load_classes(args):
    """Yield ``(target, ClassFile)`` for each target; exit 1 on the first failure."""
    from .classreader import read_class_file
    from .errors import ClassFileError

    with _build_classpath(args) as classpath:
        for target in args.targets:
            try:
                if target.endswith(".class") or Path(target).is_file():
                    path = Path(target)
                    if not path.exists():
                        logger.error("File not found: %s", target)
                        sys.exit(1)
                    class_file = read_class_file(path)
                else:
                    class_file = classpath.find_class(target.replace(".", "/"))
                    if class_file is None:
                        logger.error("Class not found: %s", target)
                        sys.exit(1)
            except (ClassFileError, OSError) as e:
                logger.error("Error reading %s: %s", target, e)
                sys.exit(1)

            if not class_file.valid:
                logger.error("Not a class file: %s", target)
                sys.exit(1)
            yield target, class_file


def header_command(args):
    """Print Java-like class headers."""
    from .header import class_header

    for _, class_file in _load_classes(args):
        print(class_header(class_file))


def constants_command(args):
    """Dump the constant pool."""
    for target, class_file in _load_classes(args):
        pool = class_file.constant_pool
        print(f"Constant pool of {target} ({len(pool)} slots):")
        for index, entry in pool:
            label = _TAG_LABELS[entry.tag.name]
            print(f"  #{index} = {label:<18} {entry.describe(pool)}")


def members_command(args):
    """List fields and methods with their flags and types."""
    for _, class_file in _load_classes(args):
        print(f"{class_file.name} (version {class_file.major_version}.{class_file.minor_version})")
        for fld in class_file.fields:
            flags = " ".join(fld.flag_names)
            print(f"  field  {fld.name}: {fld.generic_type} [{flags}]")
        for method in class_file.methods:
            flags = " ".join(method.flag_names)
            line = f"  method {method.name}({method.parameters}): {method.return_type} [{flags}]"
            if method.exceptions:
                line += " throws " + ", ".join(name.replace("/", ".") for name in method.exceptions)
            print(line)


def main(argv=None):
    """Main entry point for pyjcf CLI."""
    parser = argparse.ArgumentParser(
        prog="pyjcf",
        description="Python Java Class File reader - inspect compiled .class files",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Shortcut for --log-level DEBUG",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    commands = (
        ("header", "Print the class declaration, fields and method headers", header_command),
        ("constants", "Dump the constant pool", constants_command),
        ("members", "List fields and methods", members_command),
    )
    for name, help_text, func in commands:
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument(
            "targets",
            nargs="+",
            help=".class files, or class names to look up on the classpath",
        )
        sub.add_argument(
            "-cp", "--classpath",
            help="Classpath entries (os.pathsep-separated .jar/.zip files or directories)",
        )
        sub.set_defaults(func=func)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    _configure_logging("DEBUG" if args.verbose else args.log_level)

    from .errors import ClassFileError

    try:
        args.func(args)
    except ClassFileError as e:
        # Raised while rendering, e.g. a malformed Signature attribute
        logger.error("Error: %s", e)
        sys.exit(1)


if __name__ == "__main__":
    main()
