"""argument domains per operand syntax class

This module acts as a configuration: the generated fixtures depend on
its contents directly.  Domains and peek counts are hand-tuned, edit them
to change coverage.
"""

from collections import namedtuple

from x86asmtest.gen.memexpr import memory_expression
from x86asmtest.x86encode.inst import ImmArgument, MemArgument, RegArgument


# go_syntax: operand text for the Go assembler
# data: the x86encode argument it stands for
InstArg = namedtuple("InstArg", ["go_syntax", "data"])


# peeks_per_arg_by_syntax defines how many entries of the domain are
# taken for a single instruction form.
#
# Higher numbers increase output test suite size significantly.
peeks_per_arg_by_syntax = {
    "m8": 2,
    "m16": 2,
    "m32": 2,
    "m64": 2,
    "m128": 2,
    "m256": 2,
    "m512": 2,
    "xmm": 1,
    "ymm": 1,
    "zmm": 2,
    "k": 2,
    "{k}": 1,
    "imm8u": 1,
    "imm8u:1": 1,
    "imm8u:2": 1,
    "imm8u:4": 1,
    "r32": 2,
    "r64": 2,

    "vmx:32": 3,
    "vmx:64": 3,
    "vmy:8": 3,
    "vmy:32": 3,
    "vmy:64": 3,
    "vmz:8": 3,
    "vmz:32": 3,
    "vmz:64": 3,

    "zmm+3": 3,
    "xmm+3": 3,

    "m32bcst": 0,
    "m64bcst": 0,
}

# inst_args_by_syntax maps a normalized operand syntax class to the list
# of arguments that can be used to cover it.
#
# Filled by init_tables().
inst_args_by_syntax = {}


def make_reg_args(name, go_fmt, intel_fmt, *ids):
    return tuple(InstArg(go_fmt % (name, i), RegArgument(intel_fmt % (name, i)))
                 for i in ids)


def make_mask_reg_args(*ids):
    return make_reg_args("K", "%s%d", "%s%d", *ids)


def make_vec_reg_args(name, *ids):
    return make_reg_args(name, "%s%d", "%sMM%d", *ids)


def make_uint8_args(*values):
    return tuple(InstArg(f"${v}", ImmArgument(v, width=8, unsigned=True))
                 for v in values)


def memory_list_to_args(width, lst):
    args = []
    for fields in lst:
        mem = MemArgument(width=width, **fields)
        args.append(InstArg(memory_expression(mem), mem))
    return tuple(args)


# displacement signs, every scale factor, REX-extended base/index and the
# RSP/RBP special cases of SIB and ModRM
MEMORY_OPERANDS = [
    dict(base="RSP", disp=17),
    dict(base="RBP", index="RSI", scale=4, disp=-17),
    dict(base="RAX", disp=7),
    dict(base="RDI"),
    dict(base="R15", index="R15", disp=99),
    dict(base="RDX"),
    dict(base="RBP", index="RSI", scale=8, disp=-17),
    dict(base="R15"),
    dict(base="RSI", index="RDI", scale=8, disp=7),
    dict(base="R14", disp=-15),
    dict(base="RSI", index="RDI", disp=7),
    dict(base="RDX", index="RBX", scale=8, disp=15),
    dict(base="RDI", index="R8", disp=-7),
    dict(base="RSP"),
    dict(base="RCX", disp=-7),
    dict(base="RDX", index="RBX", scale=4, disp=15),
    dict(base="R15", index="R15", scale=8, disp=99),
    dict(base="RAX", index="RCX", scale=8, disp=7),
    dict(base="RAX"),
    dict(base="RSI", disp=7),
    dict(base="RBX"),
    dict(base="RBP", index="RSI", disp=-17),
    dict(base="R8", index="R14", scale=4, disp=15),
    dict(base="RCX", index="RDX", scale=4, disp=-7),
    dict(base="R8"),
    dict(base="RDX", index="RBX", scale=2, disp=15),
    dict(base="RSP", index="RBP", disp=17),
    dict(base="RCX", index="RDX", scale=8, disp=-7),
    dict(base="RBP", index="RSI", scale=2, disp=-17),
    dict(base="RAX", index="RCX", scale=2, disp=7),
    dict(base="R8", index="R14", disp=15),
    dict(base="R8", index="R14", scale=2, disp=15),
    dict(base="R14"),
    dict(base="RDI", index="R8", scale=8, disp=-7),
    dict(base="R15", index="R15", scale=4, disp=99),
    dict(base="RDX", disp=15),
    dict(base="RCX"),
    dict(base="R15", disp=99),
    dict(base="R15", index="R15", scale=2, disp=99),
    dict(base="RDI", disp=-7),
    dict(base="RCX", index="RDX", disp=-7),
    dict(base="R14", index="R15", scale=4, disp=-15),
    dict(base="RDX", index="RBX", disp=15),
    dict(base="RCX", index="RDX", scale=2, disp=-7),
    dict(base="RBP", disp=-17),
    dict(base="R14", index="R15", scale=8, disp=-15),
    dict(base="RSP", index="RBP", scale=2, disp=17),
    dict(base="RDI", index="R8", scale=4, disp=-7),
    dict(base="R8", disp=15),
    dict(base="RBP"),
    dict(base="R8", index="R14", scale=8, disp=15),
    dict(base="R14", index="R15", scale=2, disp=-15),
    dict(base="R14", index="R15", disp=-15),
    dict(base="RBX", disp=-15),
    dict(base="RAX", index="RCX", scale=4, disp=7),
    dict(base="RAX", index="RCX", disp=7),
    dict(base="RSI"),
    dict(base="RSI", index="RDI", scale=2, disp=7),
    dict(base="RSP", index="RBP", scale=8, disp=17),
    dict(base="RSP", index="RBP", scale=4, disp=17),
    dict(base="RSI", index="RDI", scale=4, disp=7),
    dict(base="RDI", index="R8", scale=2, disp=-7),
]

VMEM_X_OPERANDS = [
    dict(base="RAX", index="XMM4"),
    dict(base="RBP", index="XMM10", scale=2),
    dict(base="R10", index="XMM29", scale=8),
    dict(base="RDX", index="XMM10", scale=4),
    dict(base="RSP", index="XMM4", scale=2),
    dict(base="R14", index="XMM29", scale=8),
]

VMEM_Y_OPERANDS = [
    dict(base="RAX", index="YMM3"),
    dict(base="RBP", index="YMM9", scale=2),
    dict(base="R10", index="YMM28", scale=8),
    dict(base="RDX", index="YMM9", scale=4),
    dict(base="RSP", index="YMM3", scale=2),
    dict(base="R14", index="YMM28", scale=8),
]

VMEM_Z_OPERANDS = [
    dict(base="RAX", index="ZMM9"),
    dict(base="RBP", index="ZMM12", scale=2),
    dict(base="R10", index="ZMM31", scale=8),
    dict(base="RDX", index="ZMM12", scale=4),
    dict(base="RSP", index="ZMM9", scale=2),
    dict(base="R14", index="ZMM31", scale=8),
]

XMM_IDS = (
    22, 30, 3, 11, 15, 30, 13, 6, 12, 23, 30, 8, 20, 2, 9, 26, 19, 0,
    31, 16, 7, 8, 1, 0, 15, 0, 16, 21, 0, 28, 22, 7, 19, 7, 16, 31,
    1, 7, 9, 15, 12, 0, 12, 14, 5, 17, 15, 8, 3, 26, 23, 13, 28, 24,
    9, 15, 26, 18, 21, 1, 11, 31, 3, 7, 0, 0, 24, 20, 7, 9, 7, 14,
    5, 31, 3, 21, 1, 11, 13, 0, 30, 16, 14, 11, 14, 19, 8, 8, 26, 23,
    12, 16, 23, 23, 11, 31, 24, 14, 0, 11, 23, 2, 20, 5, 25, 0, 9, 13,
    2, 8, 9, 2, 31, 11, 22, 5, 14, 0, 17, 7, 15, 11, 0, 18, 8, 27,
    25, 3, 18, 15, 28, 15, 7, 13, 8, 24, 7, 0, 22, 1, 11, 6, 7, 8,
    31, 3, 28, 20, 24, 7, 20, 16, 12, 6, 17, 28, 6, 1, 8, 8, 6, 0,
    11, 16, 6, 6, 22, 12, 16, 28, 8, 15, 11, 1, 19, 13, 2, 14, 0, 0,
    25, 11, 17, 18, 11, 9, 2, 24, 2, 2, 27, 26,
)

YMM_IDS = (
    14, 31, 25, 2, 22, 27, 8, 9, 22, 9, 14, 1, 6, 1, 9, 0, 19, 31,
    22, 9, 23, 31, 5, 0, 5, 19, 31, 28, 2, 24, 27, 0, 11, 31, 3, 14,
    2, 13, 27, 15, 22, 20, 18, 24, 9, 3, 19, 23, 19, 14, 21, 5, 16, 2,
    21, 20, 6, 31, 6, 11, 19, 7, 6, 0, 3, 5, 20, 12, 3, 5, 28, 7,
    0, 22, 13, 12, 1, 14, 17, 7, 9, 31, 8, 1, 28, 13, 7, 2, 21, 12,
    9, 1, 9, 3, 2, 9, 12, 21, 14, 30, 26, 7, 16, 1, 30, 31, 22, 6,
    21, 7, 0, 28, 20, 14, 24, 13, 20, 14, 21, 1, 26, 30, 12, 22, 3, 15,
    1, 27, 19, 5, 17, 13, 21, 7, 30, 13, 18, 24, 8, 11, 24, 5, 24, 21,
    16, 9, 13, 9, 6, 3, 7, 6, 26, 11, 26, 12, 14, 18, 31, 18, 3, 24,
    2, 7, 21, 14, 8, 20, 11, 24, 1, 5, 18, 20, 20, 9, 28, 28, 1, 8,
    11, 27, 17, 16, 12, 6, 26, 3, 8, 28, 1, 23,
)

ZMM_IDS = (
    0, 8, 15, 12, 14, 27, 11, 5, 13, 14, 5, 23, 2, 2, 6, 14, 26, 14,
    28, 6, 13, 21, 26, 3, 3, 0, 21, 13, 11, 25, 3, 12, 27, 15, 23, 5,
    23, 6, 8, 28, 21, 5, 16, 13, 12, 27, 22, 11, 6, 8, 25, 12, 12, 17,
    9, 12, 6, 25, 3, 21, 8, 2, 3, 27, 7, 9, 0, 6, 20, 28, 3, 30,
    9, 19, 12, 22, 11, 5, 18, 24, 2, 21, 7, 13, 6, 16, 6, 22, 1, 15,
    13, 13, 18, 8, 22, 7, 2, 31, 20, 9, 1, 3, 12, 16, 28, 13, 14, 28,
    3, 12, 15, 30, 19, 15, 5, 1, 3, 5, 14, 15, 21, 8, 16, 9, 20, 0,
    23, 19, 0, 11, 0, 25, 24, 12, 0, 26, 9, 3, 9, 25, 9, 28, 20, 0,
    17, 0, 17, 23, 31, 0, 21, 9, 6, 9, 1, 9, 20, 9, 30, 5, 26, 22,
    7, 21, 16, 25, 14, 13, 12, 13, 21, 9, 2, 7, 27, 25, 23, 9, 27, 14,
    3, 0, 14, 7, 8, 24, 22, 25, 1, 16, 6, 2,
)

# first register of each 4-register block
REG_BLOCK_STARTS = (0, 10, 20, 1, 11, 21, 2, 12, 22, 4, 14, 24)


def make_reg_block_args(go_name, intel_name):
    return tuple(InstArg(f"[{go_name}{i}-{go_name}{i + 3}]",
                         RegArgument(f"{intel_name}{i}"))
                 for i in REG_BLOCK_STARTS)


def build_tables():
    def mem_args(width):
        return memory_list_to_args(width, MEMORY_OPERANDS)

    return {
        # Skip broadcasts.
        # They are tested separately (as all other suffixes).
        "m32bcst": (),
        "m64bcst": (),

        # GPR args.
        "r32": (
            InstArg("AX", RegArgument("EAX")),
            InstArg("R9", RegArgument("R9D")),
            InstArg("CX", RegArgument("ECX")),
            InstArg("SP", RegArgument("ESP")),
            InstArg("R14", RegArgument("R14D")),
        ),
        "r64": (
            InstArg("DX", RegArgument("RDX")),
            InstArg("BP", RegArgument("RBP")),
            InstArg("R10", RegArgument("R10")),
            InstArg("CX", RegArgument("RCX")),
            InstArg("R9", RegArgument("R9")),
            InstArg("R13", RegArgument("R13")),
        ),

        # Vector register range (block) args.
        "zmm+3": make_reg_block_args("Z", "ZMM"),
        "xmm+3": make_reg_block_args("X", "XMM"),

        # K operand for KOP instructions.
        "k": make_mask_reg_args(7, 0, 1, 2, 3, 4, 5, 6),
        # K operand for write masks. Can't be K0.
        "{k}": make_mask_reg_args(7, 1, 2, 3, 4, 5, 6),

        # Immediate args.
        "imm8u:1": make_uint8_args(1, 0),
        "imm8u:2": make_uint8_args(3, 0, 1, 2),
        "imm8u:4": make_uint8_args(15, *range(15)),
        "imm8u": make_uint8_args(
            255, 0, 97, 81, 42, 79, 64, 27,
            47, 82, 126, 94, 121, 13, 65, 67,
        ),

        # Memory args.
        "m8": mem_args(8),
        "m16": mem_args(16),
        "m32": mem_args(32),
        "m64": mem_args(64),
        "m128": mem_args(128),
        "m256": mem_args(256),
        "m512": mem_args(512),

        # VMem args.
        "vmx:32": memory_list_to_args(32, VMEM_X_OPERANDS),
        "vmx:64": memory_list_to_args(64, VMEM_X_OPERANDS),
        "vmy:8": memory_list_to_args(8, VMEM_Y_OPERANDS),
        "vmy:32": memory_list_to_args(32, VMEM_Y_OPERANDS),
        "vmy:64": memory_list_to_args(64, VMEM_Y_OPERANDS),
        "vmz:8": memory_list_to_args(8, VMEM_Z_OPERANDS),
        "vmz:32": memory_list_to_args(32, VMEM_Z_OPERANDS),
        "vmz:64": memory_list_to_args(64, VMEM_Z_OPERANDS),

        # Vector register args.
        "xmm": make_vec_reg_args("X", *XMM_IDS),
        "ymm": make_vec_reg_args("Y", *YMM_IDS),
        "zmm": make_vec_reg_args("Z", *ZMM_IDS),
    }


def init_tables():
    """fills inst_args_by_syntax.  Safe to be called multiple times."""
    if not inst_args_by_syntax:
        inst_args_by_syntax.update(build_tables())


def lookup(key):
    """whole domain for key; unknown keys have an empty domain"""
    init_tables()
    return inst_args_by_syntax.get(key, ())


def peeks(key):
    """how many entries of key's domain one instruction form takes"""
    return peeks_per_arg_by_syntax.get(key, len(lookup(key)))
