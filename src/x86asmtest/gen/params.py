"""encoding parameter variants derived from the encoding string

The encoding string is the x86.csv encoding column, for example
"EVEX.NDS.512.66.0F.W1 58 /r".  Every variant returned here produces
different bytes for the same operands, so each is a separate test case.
"""

from x86asmtest.x86encode.inst import InstParam


def evex_encoded(encoding):
    return encoding.startswith("EVEX")


def inst_rexw(encoding):
    if ".WIG" in encoding:
        return [InstParam.REXW0, InstParam.REXW1]
    if ".W1" in encoding:
        return [InstParam.REXW1]
    return [InstParam.REXW0]


def inst_vl(encoding):
    if ".LIG" in encoding:
        if evex_encoded(encoding):
            return [InstParam.VEXL128, InstParam.VEXL256, InstParam.VEXL512]
        return [InstParam.VEXL128, InstParam.VEXL256]
    if ".512" in encoding:
        return [InstParam.VEXL512]
    if ".256" in encoding:
        return [InstParam.VEXL256]
    return [InstParam.VEXL128]


def inst_eosz(keys):
    """explicit operand size selector for a form's normalized operands.

    64-bit general purpose operands need a 64-bit effective operand size,
    everything else runs with the encoder default (32).
    """
    if "r64" in keys:
        return [InstParam.EOSZ64]
    return []


def inst_params(encoding, keys=()):
    """all parameter sets to test, REX.W major, vector length minor"""
    eosz = inst_eosz(keys)
    for rexw in inst_rexw(encoding):
        for vl in inst_vl(encoding):
            yield frozenset([rexw, vl, *eosz])


def normalize_cpuid(cpuid):
    cpuid = cpuid.replace("+AVX512VL", "", 1)
    cpuid = cpuid.replace("+AVX512F", "", 1)
    return cpuid
