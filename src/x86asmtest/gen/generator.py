# SPDX-License-Identifier: LGPLv3+
"""fixture generation over instruction forms

For each form: normalize the operand tokens, derive the REX.W and vector
length variants, sample argument combinations and ask the reference
encoder for the bytes of every (variant, combination) pair.

A combination the encoder rejects is recorded in .failures and the batch
continues.  A form with an operand class that has no (peeked) domain is
recorded in .skipped.  ConfigError is not caught: it means the curated
tables disagree with the encoder and the run has to stop.
"""

from collections import namedtuple

from x86asmtest.exceptions import EncodeError, SkipCase
from x86asmtest.gen import args_table
from x86asmtest.gen.asmtext import go_asm_string
from x86asmtest.gen.normalize import normalize_arg
from x86asmtest.gen.params import inst_params, normalize_cpuid
from x86asmtest.gen.product import Sampler
from x86asmtest.util import LogType, log
from x86asmtest.x86encode import Inst, to_hex_string


Fixture = namedtuple("Fixture", ["cpuid", "asm", "hex", "form", "params"])
Failure = namedtuple("Failure", ["form", "params", "asm", "error"])
Skip = namedtuple("Skip", ["form", "reason"])


def param_names(params):
    return ",".join(sorted(param.name for param in params))


class Generator:
    def __init__(self, encode=None, sampler=None):
        if encode is None:
            encode = to_hex_string
        if sampler is None:
            sampler = Sampler()
        self.encode = encode
        self.sampler = sampler
        self.fixtures = []
        self.failures = []
        self.skipped = []
        args_table.init_tables()

    def run(self, forms):
        for form in forms:
            self.add_form(form)
        return self

    def keys(self, form):
        return [normalize_arg(form.intel_opcode, arg) for arg in form.args]

    def combinations(self, keys):
        # checked first: a skipped form must not move rotation cursors
        empty = [key for key in keys if not self.sampler.peek_count(key)]
        if empty:
            raise SkipCase("no arguments for " + ", ".join(empty))
        return self.sampler.combinations(keys)

    def add_form(self, form):
        keys = self.keys(form)
        try:
            combinations = self.combinations(keys)
        except SkipCase as e:
            log(f"SKIPPED({form}):", str(e), kind=LogType.SkipCase)
            self.skipped.append(Skip(form, str(e)))
            return

        cpuid = normalize_cpuid(form.cpuid)
        for params in inst_params(form.encoding, keys):
            for args in combinations:
                self.add_case(form, cpuid, params, args)

    def add_case(self, form, cpuid, params, args):
        asm = go_asm_string(form.go_opcode, args)
        inst = Inst(opcode=form.intel_opcode, params=params,
                    args=[arg.data for arg in args])
        try:
            hexstr = self.encode(inst)
        except EncodeError as e:
            log(f"FAILED({asm}) [{param_names(params)}]:", str(e),
                kind=LogType.EncodeFail)
            self.failures.append(Failure(form, params, asm, e))
            return
        self.fixtures.append(Fixture(cpuid, asm, hexstr, form, params))
