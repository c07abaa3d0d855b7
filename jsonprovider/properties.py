"""
Recognized marshaller/unmarshaller option names.

The constant holders below declare every option the bundled JSON engine
understands. Only names found here are ever picked up from the process-wide
configuration; per-request overrides are applied as given.
"""
from typing import FrozenSet


class MarshallerProperties:
    """Options understood by a marshaller (write) session."""

    FORMATTED_OUTPUT = "json.formatted-output"
    INDENT_STRING = "json.indent-string"
    COMPACT = "json.compact"
    INCLUDE_ROOT = "json.include-root"
    MARSHAL_EMPTY_COLLECTIONS = "json.marshal-empty-collections"
    EXCLUDE_NONE = "json.exclude-none"
    BY_ALIAS = "json.by-alias"
    SORT_KEYS = "json.sort-keys"
    ENCODING = "json.encoding"


class UnmarshallerProperties:
    """Options understood by an unmarshaller (read) session."""

    INCLUDE_ROOT = "json.include-root"
    STRICT = "json.strict"
    ENCODING = "json.encoding"


def discover_property_names(source: type) -> FrozenSet[str]:
    """
    Collect the values of the public string constants declared on `source`.

    A constant that cannot be read is left out; the rest are still
    collected.
    """
    names = set()
    for attr in list(vars(source)):
        if attr.startswith("_"):
            continue
        try:
            value = getattr(source, attr)
        except Exception:
            continue
        if isinstance(value, str):
            names.add(value)
    return frozenset(names)


MARSHALLER_PROPERTY_NAMES = discover_property_names(MarshallerProperties)
UNMARSHALLER_PROPERTY_NAMES = discover_property_names(UnmarshallerProperties)
