"""
Parametron: declare command line parameters, parse argv, render help.

    >>> from parametron import CommandParser, Switch, String
    >>> verbose = Switch("verbose", "v", descr="Be chatty")
    >>> parser = CommandParser("tool", arity=0, colorful=False).add(verbose)
    >>> parser.parse(["-v"]).positionals
    ()
    >>> verbose.value
    True
"""
__title__ = 'parametron'
__author__ = 'Parametron Developers'
__license__ = 'MIT'
__version__ = "1.0.0"

from collections import namedtuple

from .faults import *
from .groups import *
from .parameters import *
from .parser import *
from .stream import *

VersionInfo = namedtuple("VersionInfo", ("major", "minor", "micro", "releaselevel", "serial"))

# keep in sync with __version__ and pyproject.toml
version_info = VersionInfo(1, 0, 0, "final", 0)

__all__ = (
    "__title__",
    "__author__",
    "__license__",
    "__version__",
    "version_info",
)

__all__ += faults.__all__  # type: ignore[attr-defined]
__all__ += groups.__all__  # type: ignore[attr-defined]
__all__ += parameters.__all__  # type: ignore[attr-defined]
__all__ += parser.__all__  # type: ignore[attr-defined]
__all__ += stream.__all__  # type: ignore[attr-defined]
