"""
tapebf — a tape machine for the eight-symbol Brainfuck language.

| Layer                    | Purpose                                   |
<------------------------- + ----------------------------------------- >
| **Sanitizer**            | Any text → ordered instruction stream     |
| **Program state**        | Byte tape, pointer, counter, output log   |
| **Stepper**              | One instruction, positional bracket scans |
| **Runner**               | Timed immediate execution with a summary  |
| **Diagnostic renderer**  | Paced replay with a tape view per step    |
| **Analysis**             | Loop nesting graphs and tape charts       |
| **Snapshots**            | Portable `.tapebf.json` state documents   |
| **Logbook**              | Signed ledger of runs                     |
"""

from . import core as _core
from . import errors as _errors
from . import state as _state
from . import channels as _channels
from . import stepper as _stepper
from . import runner as _runner
from . import render as _render
from . import analysis as _analysis
from . import snapshot as _snapshot
from . import crypto as _crypto
from . import logbook as _logbook
from .cli import main, parse_args
from ..constants import KEY_FILE, LOGBOOK_FILE, PUB_FILE

from .core import *
from .errors import *
from .state import *
from .channels import *
from .stepper import *
from .runner import *
from .render import *
from .analysis import *
from .snapshot import *
from .crypto import *
from .logbook import *

__all__ = []
for module in (
    _core,
    _errors,
    _state,
    _channels,
    _stepper,
    _runner,
    _render,
    _analysis,
    _snapshot,
    _crypto,
    _logbook,
):
    __all__.extend(getattr(module, "__all__", []))
__all__ += ["main", "parse_args", "KEY_FILE", "LOGBOOK_FILE", "PUB_FILE"]
__all__ = list(dict.fromkeys(__all__))
