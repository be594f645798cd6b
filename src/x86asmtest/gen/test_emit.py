import os
import tempfile
import unittest

from x86asmtest.exceptions import EncodeError
from x86asmtest.gen.emit import (
    fixture_line,
    group_fixtures,
    group_name,
    render_report,
    write_fixtures,
    write_report,
)
from x86asmtest.gen.generator import Failure, Fixture, Generator, Skip
from x86asmtest.x86encode.inst import InstParam


def fixture(cpuid, asm, hexstr):
    return Fixture(cpuid, asm, hexstr, None, frozenset())


class EmitTestCase(unittest.TestCase):
    def setUp(self):
        self.fixtures = [
            fixture("AVX512F", "VADDPD X1, X2, K1, X3", "62f1ed0958d9"),
            fixture("AVX512BW", "KMOVQ K7, DX", "c4e1fb93d7"),
            fixture("AVX512F", "VADDPD Z0, Z0, K7, Z0", "62f1fd4f58c0"),
        ]

    def test_group_name(self):
        self.assertEqual(group_name("AVX512F"), "avx512f")
        self.assertEqual(group_name("AVX512_4FMAPS"), "avx512_4fmaps")
        self.assertEqual(group_name("AVX512DQ+AVX512BW"), "avx512dq_avx512bw")

    def test_fixture_line(self):
        asm = "VADDPD X1, X2, K1, X3"
        self.assertEqual(fixture_line(fixture("AVX512F", asm, "62f1ed0958d9")),
                         "\t" + asm.ljust(50) + " // 62f1ed0958d9\n")

    def test_groups_keep_order(self):
        groups = group_fixtures(self.fixtures)
        self.assertEqual(set(groups), {"avx512f", "avx512bw"})
        self.assertEqual([f.asm for f in groups["avx512f"]],
                         ["VADDPD X1, X2, K1, X3", "VADDPD Z0, Z0, K7, Z0"])

    def test_write_fixtures(self):
        with tempfile.TemporaryDirectory() as outdir:
            paths = write_fixtures(outdir, self.fixtures)
            self.assertEqual([os.path.basename(p) for p in paths],
                             ["avx512bw.s", "avx512f.s"])
            with open(os.path.join(outdir, "avx512f.s")) as f:
                text = f.read()
        lines = text.splitlines()
        self.assertEqual(lines[0],
                         "// Code generated by x86asmtest. DO NOT EDIT.")
        self.assertEqual(lines[2],
                         '#include "../../../../../../runtime/textflag.h"')
        self.assertEqual(lines[4], "TEXT asmtest_avx512f(SB), NOSPLIT, $0")
        self.assertTrue(lines[5].startswith("\tVADDPD X1, X2, K1, X3 "))
        self.assertTrue(lines[5].endswith(" // 62f1ed0958d9"))
        self.assertEqual(lines[-1], "\tRET")
        self.assertEqual(len(lines), 8)

    def test_write_fixtures_deterministic(self):
        with tempfile.TemporaryDirectory() as outdir:
            texts = []
            for _ in range(2):
                write_fixtures(outdir, self.fixtures)
                with open(os.path.join(outdir, "avx512bw.s")) as f:
                    texts.append(f.read())
        self.assertEqual(texts[0], texts[1])

    def test_report(self):
        generator = Generator(encode=lambda inst: "90")
        generator.skipped.append(Skip("VADDPD zmm1, {k}, zmmV, m64bcst{er}",
                                      "no arguments for m64bcst"))
        generator.failures.append(Failure(
            "VADDPD zmm1, {k}, zmmV, m512{er}",
            frozenset([InstParam.REXW1, InstParam.VEXL512]),
            "VADDPD 17(SP), Z0, K7, Z0",
            EncodeError("XED_ERROR_GENERAL_ERROR")))
        report = render_report(generator)
        self.assertEqual(report.splitlines(), [
            "# skipped forms: 1",
            "VADDPD zmm1, {k}, zmmV, m64bcst{er}: no arguments for m64bcst",
            "# failed combinations: 1",
            "VADDPD zmm1, {k}, zmmV, m512{er} [REXW1,VEXL512] "
            "VADDPD 17(SP), Z0, K7, Z0: XED_ERROR_GENERAL_ERROR",
        ])
        with tempfile.TemporaryDirectory() as outdir:
            path = os.path.join(outdir, "report.txt")
            write_report(path, generator)
            with open(path) as f:
                self.assertEqual(f.read(), report)


if __name__ == "__main__":
    unittest.main()
