import ctypes
from typing import Any
from typing import FrozenSet

# Scalar types JSON carries as bare values, in object form and in
# fixed-width primitive form: string, character, short, integer, long,
# float, double, boolean and byte.
SCALAR_TYPES: FrozenSet[Any] = frozenset(
    {
        str,
        int,
        float,
        bool,
        ctypes.c_char,
        ctypes.c_wchar,
        ctypes.c_short,
        ctypes.c_int,
        ctypes.c_long,
        ctypes.c_longlong,
        ctypes.c_float,
        ctypes.c_double,
        ctypes.c_bool,
        ctypes.c_byte,
        ctypes.c_ubyte,
    }
)


def is_excluded(tp: Any) -> bool:
    """
    True if `tp` is exactly one of the scalar types this provider declines.

    Matching is by identity: subclasses and look-alike user types are not
    excluded.
    """
    return any(tp is scalar for scalar in SCALAR_TYPES)
