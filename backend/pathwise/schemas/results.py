"""Result values returned by service operations.

Service functions called from the API never raise for expected failures;
they return ``ActionError`` instead, mirroring ``{"ok": false, "error": ...}``
on the wire.
"""

from typing import Literal

from pydantic import BaseModel


class ActionOk(BaseModel):
    ok: Literal[True] = True


class ActionError(BaseModel):
    ok: Literal[False] = False
    error: str
