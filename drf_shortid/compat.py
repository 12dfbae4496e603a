"""
Typing imports shared across the package.

Gathers the typing names the package relies on in one module, and resolves
'Self' from 'typing' or 'typing_extensions' depending on the interpreter.
"""

import sys
from typing import (
    Any,
    Dict,
    Tuple,
    Union,
    Callable,
    Optional,
    Sequence,
    NamedTuple,
    TYPE_CHECKING,
)

# 'Self' (PEP 673) landed in typing with Python 3.11.
if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self

__all__ = [
    "Any",
    "Self",
    "Dict",
    "Tuple",
    "Union",
    "Callable",
    "Optional",
    "Sequence",
    "NamedTuple",
    "TYPE_CHECKING",
]
