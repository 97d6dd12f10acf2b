"""Exception types for the build pipeline.

Structural absence (unknown pages, unreachable depths) is never an error;
these cover files and user code that can't be loaded or compiled.
"""


class KilnError(Exception):
    """Base class for pipeline errors."""


class PageLoadError(KilnError):
    """Raised when a page file or its metadata can't be read."""


class CompileError(KilnError):
    """Raised when a page or its layout fails to compile."""


class HooksError(KilnError):
    """Raised when the hooks module can't be loaded."""


class DataLoadError(KilnError):
    """Raised when a global data file can't be read or parsed."""
