"""Conversion failures.

Every stage raises one of these; nothing in the pipeline catches them.
"""
from __future__ import annotations

from .const import ERRORS


class SimError(ValueError):
    """Base class for fatal conversion errors. Carries a stable error code."""

    code = "E_SIM"

    def __init__(self, detail: str | None = None):
        self.detail = detail
        message = ERRORS.get(self.code, self.code)
        super().__init__(f"{message}: {detail}" if detail else message)


class OpenError(SimError):
    code = "E_OPEN_INPUT"

    def __init__(self, detail: str | None = None, output: bool = False):
        if output:
            self.code = "E_OPEN_OUTPUT"
        super().__init__(detail)


class ReadError(SimError):
    code = "E_READ"


class WriteError(SimError):
    code = "E_WRITE"


class LayoutError(SimError):
    code = "E_LAYOUT"
