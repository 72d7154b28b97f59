"""Terminal components exposed by the redash package."""
from __future__ import annotations

from typing import Any

from . import app as _app
from . import component as _component
from . import events as _events
from . import input_box as _input_box
from . import renderer as _renderer
from . import selectable_list as _selectable_list
from . import system_bar as _system_bar

_modules = [
    _app,
    _component,
    _events,
    _input_box,
    _renderer,
    _selectable_list,
    _system_bar,
]

__all__: list[str] = []
_seen: set[str] = set()
for _module in _modules:
    for _name in _module.__all__:
        if _name not in _seen:
            _seen.add(_name)
            __all__.append(_name)
        globals()[_name] = getattr(_module, _name)


def __getattr__(name: str) -> Any:
    for _module in _modules:
        if hasattr(_module, name):
            return getattr(_module, name)
    raise AttributeError(name)


def __dir__() -> list[str]:
    return sorted(__all__)
