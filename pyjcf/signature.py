"""
Generic signature rendering.

Parses Signature attribute strings (JVMS 4.7.9.1) with a Lark grammar and
renders them as Java-like type strings, e.g.

    Ljava/util/HashMap<Ljava/lang/String;[I>;  ->  java.util.HashMap<java.lang.String, int[]>
"""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from lark import Lark, Transformer
from lark.exceptions import LarkError

from .descriptors import PRIMITIVE_NAMES
from .errors import SignatureError

GRAMMAR_FILE = Path(__file__).parent / "signature.lark"


@dataclass(frozen=True)
class MethodSignature:
    """A rendered method signature."""
    type_parameters: tuple[str, ...]
    parameter_types: tuple[str, ...]
    return_type: str
    exceptions: tuple[str, ...] = ()


@dataclass(frozen=True)
class ClassSignature:
    """A rendered class signature."""
    type_parameters: tuple[str, ...]
    superclass: str
    interfaces: tuple[str, ...] = ()


class SignatureTransformer(Transformer):
    """Renders the parse tree bottom-up into strings."""

    def field_signature(self, items):
        return items[0]

    def base_type(self, items):
        return PRIMITIVE_NAMES[str(items[0])]

    def type_variable(self, items):
        # T<name>;
        return str(items[0])[1:-1]

    def array_type(self, items):
        # Suffix applies to the whole element type, type arguments included
        return items[0] + "[]"

    def class_type(self, items):
        name = str(items[0])[1:].replace("/", ".")
        return name + "".join(items[1:])

    def inner_class(self, items):
        return "." + str(items[0]) + "".join(items[1:])

    def type_arguments(self, items):
        return "<" + ", ".join(items) + ">"

    def unbounded_wildcard(self, items):
        return "?"

    def extends_wildcard(self, items):
        return f"? extends {items[0]}"

    def super_wildcard(self, items):
        return f"? super {items[0]}"

    def type_parameters(self, items):
        return tuple(items)

    def type_parameter(self, items):
        name = str(items[0])
        bounds = [bound for bound in items[1:] if bound is not None]
        if not bounds or bounds == ["java.lang.Object"]:
            return name
        return f"{name} extends {' & '.join(bounds)}"

    def class_bound(self, items):
        return items[0] if items else None

    def interface_bound(self, items):
        return items[0]

    def parameters(self, items):
        return tuple(items)

    def return_type(self, items):
        return items[0]

    def void_type(self, items):
        return "void"

    def throws(self, items):
        return tuple(items)

    def throws_clause(self, items):
        return items[0]

    def method_signature(self, items):
        type_params, params, return_type, exceptions = items
        return MethodSignature(
            type_parameters=type_params,
            parameter_types=params,
            return_type=return_type,
            exceptions=exceptions,
        )

    def class_signature(self, items):
        type_params, superclass, *interfaces = items
        return ClassSignature(
            type_parameters=type_params,
            superclass=superclass,
            interfaces=tuple(interfaces),
        )


@lru_cache(maxsize=None)
def _parser() -> Lark:
    with open(GRAMMAR_FILE, "r") as f:
        grammar = f.read()
    return Lark(
        grammar,
        parser="lalr",
        start=["field_signature", "method_signature", "class_signature"],
        maybe_placeholders=False,
    )


def _parse(signature: str, start: str):
    try:
        tree = _parser().parse(signature, start=start)
    except LarkError as e:
        raise SignatureError(f"Malformed {start.replace('_', ' ')} '{signature}': {e}") from e
    return SignatureTransformer().transform(tree)


def compound_type_from_signature(signature: str) -> str:
    """Render a field type signature as a Java-like type string."""
    return _parse(signature, "field_signature")


def parse_method_signature(signature: str) -> MethodSignature:
    """Render a method signature."""
    return _parse(signature, "method_signature")


def parse_class_signature(signature: str) -> ClassSignature:
    """Render a class signature."""
    return _parse(signature, "class_signature")
