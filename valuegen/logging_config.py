"""Logging setup for valuegen.

All modules obtain their logger through :func:`get_logger`, which places them
under the ``valuegen`` namespace. The CLI calls :func:`configure_logging` once
to attach a rich handler; library users get silent loggers by default.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER_NAME = "valuegen"


def get_logger(name: str) -> logging.Logger:
    """Return a logger namespaced under ``valuegen``.

    Args:
        name: Usually ``__name__`` of the calling module.

    Returns:
        Logger instance.
    """
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def configure_logging(
    level: int | str = logging.WARNING,
    use_rich: bool = True,
    console: Console | None = None,
) -> logging.Logger:
    """Configure the ``valuegen`` logger hierarchy.

    Calling this more than once replaces the previously installed handler.

    Args:
        level: Logging level (name or number).
        use_rich: Render records through :class:`rich.logging.RichHandler`.
        console: Console to log to (defaults to stderr).

    Returns:
        The configured root ``valuegen`` logger.
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    root.setLevel(level)

    for handler in list(root.handlers):
        root.removeHandler(handler)

    if use_rich:
        handler: logging.Handler = RichHandler(
            console=console or Console(stderr=True),
            show_path=False,
            rich_tracebacks=True,
            markup=False,
        )
        handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    else:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )

    root.addHandler(handler)
    root.propagate = False
    root.debug(f"Logging configured at level {logging.getLevelName(level)}")
    return root

