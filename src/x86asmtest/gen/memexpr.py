from x86asmtest.exceptions import ConfigError


# Note that the list is incomplete: it covers the registers the
# argument tables put into memory operands.
intel_reg_to_go_reg_map = {
    "EBP": "BP",
    "RBP": "BP",
    "ESI": "SI",
    "RSI": "SI",
    "EDI": "DI",
    "RDI": "DI",
    "EAX": "AX",
    "RAX": "AX",
    "R8D": "R8",
    "R8": "R8",
    "R9D": "R9",
    "R9": "R9",
    "R10D": "R10",
    "R10": "R10",
    "R14D": "R14",
    "R14": "R14",
    "R15D": "R15",
    "R15": "R15",
    "EDX": "DX",
    "RDX": "DX",
    "EBX": "BX",
    "RBX": "BX",
    "ECX": "CX",
    "RCX": "CX",
    "ESP": "SP",
    "RSP": "SP",
    "XMM4": "X4",
    "XMM10": "X10",
    "XMM29": "X29",
    "YMM3": "Y3",
    "YMM4": "Y4",
    "YMM5": "Y5",
    "YMM9": "Y9",
    "YMM11": "Y11",
    "YMM28": "Y28",
    "YMM30": "Y30",
    "ZMM4": "Z4",
    "ZMM9": "Z9",
    "ZMM12": "Z12",
    "ZMM31": "Z31",
}


def intel_reg_to_go_reg(intel_name):
    go_name = intel_reg_to_go_reg_map.get(intel_name)
    if go_name is None:
        raise ConfigError(f"empty Intel->Go reg mapping for {intel_name!r}")
    return go_name


def memory_expression(mem):
    """Go assembler syntax for a MemArgument, e.g. -17(BP)(SI*4)"""
    if mem.base is None:
        raise ConfigError(f"memory argument without base: {mem!r}")
    expr = f"({intel_reg_to_go_reg(mem.base)})"

    scale = mem.scale or 1  # default

    if mem.index is not None:
        expr += f"({intel_reg_to_go_reg(mem.index)}*{scale})"

    if mem.disp != 0:
        expr = f"{mem.disp}{expr}"

    return expr
