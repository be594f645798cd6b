"""operand syntax normalization

The instruction database spells the same operand class in several ways
(rmr32 vs r32, xmm1/xmm2/xmmV, ...).  normalize_arg() turns a raw token
into a key of args_table.inst_args_by_syntax.
"""

import re


# decorations that do not affect operand shape
arg_replace = re.compile(r"\{sae\}|\{er\}")

arg_normalize_map = {
    "rmr32": "r32",
    "rmr64": "r64",

    "xmm1": "xmm",
    "xmm2": "xmm",
    "xmmV": "xmm",
    "xmmV+3": "xmm+3",
    "xmmIH": "xmm",

    "ymm1": "ymm",
    "ymm2": "ymm",
    "ymmV": "ymm",
    "ymmIH": "ymm",

    "zmm1": "zmm",
    "zmm2": "zmm",
    "zmmV": "zmm",
    "zmmV+3": "zmm+3",

    "k1": "k",
    "kV": "k",
    "k2": "k",

    "vm32x": "vmx",
    "vm64x": "vmx",
    "vm32y": "vmy",
    "vm64y": "vmy",
    "vm64z": "vmz",
    "vm32z": "vmz",
}

VMEM_CLASSES = frozenset(["vmx", "vmy", "vmz"])

# vmem_widths maps Intel opcode to VMem width.
# VMem memory size can't be inferred from vm32/vm64 alone.
vmem_widths = {
    "VSCATTERQPD": 64,
    "VGATHERDPD": 64,
    "VGATHERQPD": 64,
    "VPGATHERDQ": 64,
    "VPGATHERQQ": 64,
    "VPSCATTERDQ": 64,
    "VPSCATTERQQ": 64,
    "VSCATTERDPD": 64,
    "VGATHERDPS": 32,
    "VGATHERQPS": 32,
    "VPGATHERDD": 32,
    "VPGATHERQD": 32,
    "VPSCATTERDD": 32,
    "VPSCATTERQD": 32,
    "VSCATTERDPS": 32,
    "VSCATTERQPS": 32,
    "VGATHERPF0DPD": 8,
    "VGATHERPF0DPS": 8,
    "VGATHERPF0QPD": 8,
    "VGATHERPF0QPS": 8,
    "VGATHERPF1DPD": 8,
    "VGATHERPF1DPS": 8,
    "VGATHERPF1QPD": 8,
    "VGATHERPF1QPS": 8,
    "VSCATTERPF0DPD": 8,
    "VSCATTERPF0DPS": 8,
    "VSCATTERPF0QPD": 8,
    "VSCATTERPF0QPS": 8,
    "VSCATTERPF1DPD": 8,
    "VSCATTERPF1DPS": 8,
    "VSCATTERPF1QPD": 8,
    "VSCATTERPF1QPS": 8,
}


def normalize_arg(intel_opcode, arg):
    arg = arg_replace.sub("", arg)
    normalized = arg_normalize_map.get(arg)
    if normalized is None:
        return arg
    if normalized in VMEM_CLASSES:
        width = vmem_widths.get(intel_opcode)
        if width is not None:
            return f"{normalized}:{width}"
    return normalized
