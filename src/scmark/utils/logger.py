"""Logger factory for scmark modules.

All loggers live under the ``scmark`` namespace, so an application can
enable reader and renderer debug output with a single call:

    >>> import logging
    >>> logging.getLogger("scmark").setLevel(logging.DEBUG)

No handlers are installed; records propagate to whatever the host
application configured.
"""

from __future__ import annotations

import logging

_NAMESPACE = "scmark"


def get_logger(name: str) -> logging.Logger:
    """Return the stdlib logger for ``name`` inside the scmark namespace.

    Module names such as ``scmark.reader`` are used as-is; anything else
    is nested under ``scmark.``.

    Example:
        >>> get_logger("site_build").name
        'scmark.site_build'
    """
    if name != _NAMESPACE and not name.startswith(_NAMESPACE + "."):
        name = f"{_NAMESPACE}.{name}"
    return logging.getLogger(name)
