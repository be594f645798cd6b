import unittest

from x86asmtest.gen import args_table
from x86asmtest.x86encode.inst import ImmArgument, MemArgument, RegArgument


class ArgsTableTestCase(unittest.TestCase):
    def test_init_idempotent(self):
        args_table.init_tables()
        before = dict(args_table.inst_args_by_syntax)
        args_table.init_tables()
        self.assertEqual(set(before), set(args_table.inst_args_by_syntax))
        for (key, domain) in before.items():
            self.assertIs(args_table.inst_args_by_syntax[key], domain)

    def test_every_peeked_class_exists(self):
        self.assertLessEqual(set(args_table.peeks_per_arg_by_syntax),
                             set(args_table.build_tables()))

    def test_write_mask_excludes_k0(self):
        names = [arg.data.name for arg in args_table.lookup("{k}")]
        self.assertNotIn("K0", names)
        self.assertEqual(names[0], "K7")
        self.assertIn("K0", [arg.data.name
                             for arg in args_table.lookup("k")])

    def test_broadcasts_empty(self):
        self.assertEqual(args_table.lookup("m32bcst"), ())
        self.assertEqual(args_table.lookup("m64bcst"), ())
        self.assertEqual(args_table.peeks("m64bcst"), 0)

    def test_unknown(self):
        self.assertEqual(args_table.lookup("no-such-class"), ())
        self.assertEqual(args_table.peeks("no-such-class"), 0)

    def test_sizes(self):
        for (key, size) in [("xmm", 192), ("ymm", 192), ("zmm", 192),
                            ("m64", 62), ("vmz:32", 6), ("r32", 5),
                            ("r64", 6), ("k", 8), ("{k}", 7),
                            ("imm8u", 16), ("imm8u:4", 16),
                            ("zmm+3", 12)]:
            with self.subTest(key=key):
                self.assertEqual(len(args_table.lookup(key)), size)

    def test_vector_registers(self):
        first = args_table.lookup("xmm")[0]
        self.assertEqual(first.go_syntax, "X22")
        self.assertEqual(first.data, RegArgument("XMM22"))

    def test_register_blocks(self):
        first = args_table.lookup("zmm+3")[0]
        self.assertEqual(first.go_syntax, "[Z0-Z3]")
        self.assertEqual(first.data, RegArgument("ZMM0"))

    def test_immediates(self):
        imm = args_table.lookup("imm8u:2")
        self.assertEqual([arg.go_syntax for arg in imm],
                         ["$3", "$0", "$1", "$2"])
        self.assertEqual(imm[0].data, ImmArgument(3, width=8, unsigned=True))

    def test_memory(self):
        mem = args_table.lookup("m512")[1]
        self.assertEqual(mem.go_syntax, "-17(BP)(SI*4)")
        self.assertEqual(mem.data, MemArgument(base="RBP", index="RSI",
                                               scale=4, disp=-17,
                                               width=512))
        vmem = args_table.lookup("vmy:64")[2]
        self.assertEqual(vmem.go_syntax, "(R10)(Y28*8)")
        self.assertEqual(vmem.data.width, 64)


if __name__ == "__main__":
    unittest.main()
