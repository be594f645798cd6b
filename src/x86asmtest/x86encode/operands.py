# SPDX-License-Identifier: LGPLv3+
"""conversion of Inst arguments into encoder operands

Everything here is engine-neutral: the xed module maps the resulting
operand records onto libxed calls one to one.
"""

from x86asmtest.exceptions import EncodeError
from x86asmtest.x86encode.inst import (
    Dataclass,
    DisplacementKind,
    ImmArgument,
    MemArgument,
    RegArgument,
)


class RegOperand(Dataclass):
    name: str


class ImmOperand(Dataclass):
    value: int
    bits: int
    signed: bool


class MemOperand(Dataclass):
    base: object
    index: object
    scale: int
    disp: int
    disp_bits: int
    width: int


# (width, unsigned) pairs the encoder accepts.  there is no signed
# 64-bit immediate in x86-64.
IMM_SHAPES = frozenset([
    (8, True), (16, True), (32, True), (64, True),
    (8, False), (16, False), (32, False),
])

SCALES = (1, 2, 4, 8)


def fits(value, bits, signed):
    if signed:
        return -(1 << (bits - 1)) <= value < (1 << (bits - 1))
    return 0 <= value < (1 << bits)


def disp_bits(mem):
    """number of bits used to encode mem.disp: 0, 8 or 32"""
    if mem.disp_width is DisplacementKind.DISP8:
        return 8
    if mem.disp_width is DisplacementKind.DISP32:
        return 32
    if mem.disp_width is DisplacementKind.SMALLEST:
        if mem.disp == 0:
            return 0
        if -128 <= mem.disp <= 127:
            return 8
        return 32
    raise EncodeError(f"invalid memory argument disp width: {mem.disp_width}")


def mem_scale(mem):
    if mem.scale == 0:
        return 1  # default
    if mem.scale not in SCALES:
        raise EncodeError(f"invalid memory argument scale: {mem.scale}")
    return mem.scale


def imm_operand(imm):
    if (imm.width, imm.unsigned) not in IMM_SHAPES:
        signedness = "unsigned" if imm.unsigned else "signed"
        raise EncodeError(f"unsupported immediate shape: "
                          f"{signedness} {imm.width}-bit")
    signed = not imm.unsigned
    if not fits(imm.value, imm.width, signed):
        raise EncodeError(f"immediate {imm.value} does not fit "
                          f"{imm.width} bits")
    return ImmOperand(value=imm.value, bits=imm.width, signed=signed)


def mem_operand(mem):
    if not fits(mem.disp, 32, signed=True):
        raise EncodeError(f"displacement {mem.disp} does not fit 32 bits")
    return MemOperand(base=mem.base, index=mem.index,
                      scale=mem_scale(mem), disp=mem.disp,
                      disp_bits=disp_bits(mem), width=mem.width)


def convert_operand(arg):
    if isinstance(arg, RegArgument):
        return RegOperand(arg.name)
    if isinstance(arg, ImmArgument):
        return imm_operand(arg)
    if isinstance(arg, MemArgument):
        return mem_operand(arg)
    raise TypeError(f"invalid argument type: {type(arg).__name__}")


def convert_operands(inst):
    operands = []
    for (i, arg) in enumerate(inst.args):
        try:
            operands.append(convert_operand(arg))
        except EncodeError as e:
            raise e.at(i) from e
    return operands
