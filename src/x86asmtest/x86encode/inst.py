# SPDX-License-Identifier: LGPLv3+
"""abstract x86-64 instruction description handed to the encoder

Ignores existence of 32-bit CPU mode, multi-immediate instructions and
rel-operands.  Args are kept in Intel (encoder) operand order.
"""

import dataclasses as _dataclasses
import enum as _enum
import typing as _typing


class DataclassMeta(type):
    def __new__(metacls, name, bases, ns):
        cls = super().__new__(metacls, name, bases, ns)
        return _dataclasses.dataclass(cls, eq=True, frozen=True)


class Dataclass(metaclass=DataclassMeta):
    pass


class InstParam(_enum.Enum):
    REXW0 = _enum.auto()
    REXW1 = _enum.auto()
    VEXL128 = _enum.auto()
    VEXL256 = _enum.auto()
    VEXL512 = _enum.auto()
    EOSZ8 = _enum.auto()
    EOSZ16 = _enum.auto()
    EOSZ32 = _enum.auto()
    EOSZ64 = _enum.auto()


class DisplacementKind(_enum.Enum):
    SMALLEST = _enum.auto()
    DISP8 = _enum.auto()
    DISP32 = _enum.auto()


class RegArgument(Dataclass):
    name: str


class ImmArgument(Dataclass):
    """immediate (const) operand.

    widths: 8, 16, 32 (signed or unsigned) and 64 (unsigned only).
    value holds the integer the encoder must produce; it must fit the
    width and signedness.
    """
    value: int
    width: int = 8
    unsigned: bool = True


class MemArgument(Dataclass):
    """memory operand.

    base and index are register names (SIB.B, SIB.I), None when absent.
    scale 0 means "no explicit scaling factor", encoded as 1.
    width is the pointer size in bits:

        8   | BYTE PTR
        16  | WORD PTR
        32  | DWORD PTR
        64  | QWORD PTR
        128 | XMMWORD PTR
        256 | YMMWORD PTR
        512 | ZMMWORD PTR

    disp is a signed 32-bit displacement, encoded as 8 or 32 bits
    according to disp_width (EVEX disp8*N compression is the encoder's
    business).
    """
    base: _typing.Optional[str] = None
    index: _typing.Optional[str] = None
    scale: int = 0
    disp: int = 0
    disp_width: DisplacementKind = DisplacementKind.SMALLEST
    width: int = 0


Argument = _typing.Union[RegArgument, ImmArgument, MemArgument]


class Inst(Dataclass):
    opcode: str
    params: _typing.FrozenSet[InstParam] = frozenset()
    args: _typing.Tuple[Argument, ...] = ()

    def __post_init__(self):
        # accept any iterables, store hashable containers
        object.__setattr__(self, "params", frozenset(self.params))
        object.__setattr__(self, "args", tuple(self.args))
