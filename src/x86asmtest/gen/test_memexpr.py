import unittest

from x86asmtest.exceptions import ConfigError
from x86asmtest.gen.args_table import InstArg
from x86asmtest.gen.asmtext import go_asm_string
from x86asmtest.gen.memexpr import intel_reg_to_go_reg, memory_expression
from x86asmtest.x86encode.inst import ImmArgument, MemArgument, RegArgument


class MemoryExpressionTestCase(unittest.TestCase):
    def test_expressions(self):
        for (mem, expr) in [
                (MemArgument(base="RBP", index="RSI", scale=4, disp=-17),
                 "-17(BP)(SI*4)"),
                (MemArgument(base="RSP", disp=17), "17(SP)"),
                (MemArgument(base="RSI", index="RDI", disp=7),
                 "7(SI)(DI*1)"),
                (MemArgument(base="RAX"), "(AX)"),
                (MemArgument(base="R10", index="ZMM31", scale=8),
                 "(R10)(Z31*8)"),
                ]:
            with self.subTest(expr=expr):
                self.assertEqual(memory_expression(mem), expr)

    def test_missing_mapping(self):
        with self.assertRaises(ConfigError):
            intel_reg_to_go_reg("R11")
        with self.assertRaises(ConfigError):
            memory_expression(MemArgument(base="RAX", index="XMM5"))

    def test_missing_base(self):
        with self.assertRaises(ConfigError):
            memory_expression(MemArgument(index="RSI", scale=2))


class GoAsmStringTestCase(unittest.TestCase):
    def test_reversed(self):
        args = [InstArg("X3", RegArgument("XMM3")),
                InstArg("K1", RegArgument("K1")),
                InstArg("X2", RegArgument("XMM2")),
                InstArg("X1", RegArgument("XMM1"))]
        self.assertEqual(go_asm_string("VADDPD", args),
                         "VADDPD X1, X2, K1, X3")

    def test_single(self):
        args = [InstArg("$7", ImmArgument(7))]
        self.assertEqual(go_asm_string("PUSHQ", args), "PUSHQ $7")

    def test_no_args(self):
        self.assertEqual(go_asm_string("RET", []), "RET")


if __name__ == "__main__":
    unittest.main()
