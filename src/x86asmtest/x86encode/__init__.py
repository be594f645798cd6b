"""simple x86-64 instruction encoder, backed by Intel XED

Please note that sometimes there is more than one way to encode the same
instruction.  There are no guarantees regarding which form will be used,
and it can vary between XED versions.
"""

from x86asmtest.x86encode.inst import (
    Argument,
    DisplacementKind,
    ImmArgument,
    Inst,
    InstParam,
    MemArgument,
    RegArgument,
)
from x86asmtest.x86encode import xed as _xed


def to_bytes(inst):
    return _xed.engine().encode(inst)


def to_hex_string(inst):
    """lowercase hex of the machine code XED produces for inst"""
    return to_bytes(inst).hex()
