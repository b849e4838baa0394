from __future__ import annotations

import logging
import os

# -------------------- Logging setup --------------------

_LOG = logging.getLogger("uritpl")

DEBUG_ENV = "URITPL_DEBUG"


def setup_logging_once() -> None:
    """
    Включает отладочный вывод дерева логгеров "uritpl", если задан URITPL_DEBUG.

    Без переменной окружения библиотека ничего не настраивает:
    обработчики остаются на совести приложения.
    """
    if getattr(setup_logging_once, "_inited", False):
        return
    setup_logging_once._inited = True  # type: ignore[attr-defined]
    if not os.environ.get(DEBUG_ENV):
        return
    _LOG.setLevel(logging.DEBUG)
    if not _LOG.handlers:
        h = logging.StreamHandler()
        fmt = logging.Formatter("[%(levelname)s] %(name)s: %(message)s")
        h.setFormatter(fmt)
        _LOG.addHandler(h)


__all__ = ["setup_logging_once", "DEBUG_ENV"]
