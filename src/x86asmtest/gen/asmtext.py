def go_asm_string(go_opcode, args):
    """Go assembler text for an instruction.

    args are InstArg entries in Intel order; Go lists operands reversed.
    """
    if not args:
        return go_opcode
    go_args = [arg.go_syntax for arg in reversed(args)]
    return go_opcode + " " + ", ".join(go_args)
