import os
import unittest
from unittest import mock

from x86asmtest.exceptions import ConfigError, EncodeError
from x86asmtest.gen.generator import Generator, param_names
from x86asmtest.gen.product import Sampler
from x86asmtest.insndb.csvdb import Database, read_csv
from x86asmtest.x86encode.inst import (
    InstParam,
    MemArgument,
    RegArgument,
)


X86_CSV = [
    '"VADDPD zmm1{k}{z}, zmmV, zmm2/m512/m64bcst{er}",'
    '"VADDPD zmm2/m512/m64bcst{er}, zmmV, K, zmm1",'
    '"vaddpd zmm2/m512/m64bcst{er}, zmmV, zmm1{k}{z}",'
    '"EVEX.NDS.512.66.0F.W1 58 /r","V","V","AVX512F",'
    '"scale64","w,r,r","",""\n',
    '"KMOVQ r64, k2","KMOVQ k2, r64","kmovq k2, r64",'
    '"VEX.L0.F2.0F.W1 93 /r","N.S.","V","AVX512BW","","w,r","",""\n',
]


def fake_encode(inst):
    return "%02x" % len(inst.args)


class GeneratorTestCase(unittest.TestCase):
    def setUp(self):
        patcher = mock.patch.dict(os.environ, {"SILENCELOG": "1"})
        patcher.start()
        self.addCleanup(patcher.stop)
        self.db = Database(read_csv(X86_CSV))

    def test_fixtures(self):
        generator = Generator(encode=fake_encode)
        generator.run(self.db.forms(cpuid="AVX512F"))
        # zmm, {k}, zmm, zmm and zmm, {k}, zmm, m512: 2 * 1 * 2 * 2 each
        self.assertEqual(len(generator.fixtures), 16)
        self.assertEqual(generator.failures, [])

        first = generator.fixtures[0]
        self.assertEqual(first.cpuid, "AVX512F")
        self.assertEqual(first.asm, "VADDPD Z0, Z0, K7, Z0")
        self.assertEqual(first.hex, "04")
        self.assertEqual(first.params,
                         frozenset([InstParam.REXW1, InstParam.VEXL512]))

        last = generator.fixtures[-1]
        self.assertEqual(last.asm, "VADDPD -17(BP)(SI*4), Z8, K7, Z8")

    def test_inst(self):
        insts = []

        def encode(inst):
            insts.append(inst)
            return "90"

        generator = Generator(encode=encode)
        generator.run(self.db.forms(cpuid="AVX512F"))
        self.assertEqual(insts[0].opcode, "VADDPD")
        self.assertEqual(insts[0].args, (RegArgument("ZMM0"),
                                         RegArgument("K7"),
                                         RegArgument("ZMM0"),
                                         RegArgument("ZMM0")))
        self.assertIsInstance(insts[-1].args[-1], MemArgument)
        self.assertEqual(insts[-1].args[-1].width, 512)

    def test_skipped(self):
        generator = Generator(encode=fake_encode)
        generator.run(self.db.forms(cpuid="AVX512F"))
        self.assertEqual(len(generator.skipped), 1)
        skip = generator.skipped[0]
        self.assertEqual(skip.form.args[-1], "m64bcst{er}")
        self.assertEqual(skip.reason, "no arguments for m64bcst")

    def test_failures(self):
        def encode(inst):
            if isinstance(inst.args[-1], MemArgument):
                raise EncodeError("no memory today", index=3)
            return "90"

        generator = Generator(encode=encode)
        generator.run(self.db.forms(cpuid="AVX512F"))
        self.assertEqual(len(generator.fixtures), 8)
        self.assertEqual(len(generator.failures), 8)
        failure = generator.failures[0]
        self.assertEqual(failure.asm, "VADDPD 17(SP), Z0, K7, Z0")
        self.assertEqual(failure.error.index, 3)

    def test_config_error(self):
        def encode(inst):
            raise ConfigError("unknown register")

        generator = Generator(encode=encode)
        with self.assertRaises(ConfigError):
            generator.run(self.db.forms(cpuid="AVX512F"))

    def test_operand_size(self):
        generator = Generator(encode=fake_encode)
        generator.run(self.db.forms(cpuid="AVX512BW"))
        self.assertEqual(len(generator.fixtures), 2 * 2)
        fixture = generator.fixtures[0]
        self.assertEqual(fixture.asm, "KMOVQ K7, DX")
        self.assertIn(InstParam.EOSZ64, fixture.params)
        self.assertEqual(param_names(fixture.params), "EOSZ64,REXW1,VEXL128")

    def test_rotate(self):
        generator = Generator(encode=fake_encode,
                              sampler=Sampler(rotate=True))
        generator.run(self.db.forms(cpuid="AVX512F"))
        asms = [fixture.asm for fixture in generator.fixtures]
        self.assertEqual(len(asms), 16)
        self.assertEqual(len(set(asms)), 16)

    def test_rotate_skipped_form_keeps_windows(self):
        forms = list(self.db.forms(cpuid="AVX512F"))
        (zmm_form, bcst_form) = (forms[0], forms[2])
        self.assertEqual(bcst_form.args[-1], "m64bcst{er}")

        alone = Generator(encode=fake_encode, sampler=Sampler(rotate=True))
        alone.run([zmm_form])
        after_skip = Generator(encode=fake_encode,
                               sampler=Sampler(rotate=True))
        after_skip.run([bcst_form, zmm_form])

        self.assertEqual(len(after_skip.skipped), 1)
        self.assertEqual([f.asm for f in after_skip.fixtures],
                         [f.asm for f in alone.fixtures])


if __name__ == "__main__":
    unittest.main()
