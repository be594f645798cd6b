# SPDX-License-Identifier: LGPLv3+
"""x86.csv instruction database

Each line of x86.csv describes one instruction form:

    "VADDPD zmm1{k}{z}, zmmV, zmm2/m512/m64bcst{er}",  Intel syntax
    "VADDPD zmm2/m512/m64bcst{er}, zmmV, K, zmm1",     Go syntax
    "vaddpd zmm2/m512/m64bcst{er}, zmmV, zmm1{k}{z}",  GNU syntax
    "EVEX.NDS.512.66.0F.W1 58 /r",                     encoding
    "V", "V",                                          valid 32/64-bit
    "AVX512F",                                         CPUID
    "scale64", "w,r,r", "", ""                         tags, action, ...

Lines starting with "#" are comments; there is no header.  Operand
tokens are taken from the Intel syntax, which lists them in the same
order the encoder wants them.
"""

import csv as _csv
import itertools as _itertools
import re as _re
import typing as _typing

from x86asmtest.x86encode.inst import Dataclass


FIELDS = ("intel", "go", "gnu", "encoding", "valid32", "valid64",
          "cpuid", "tags", "action", "multisize", "datasize")

DECORATION = _re.compile(r"\{[^}]*\}")
MASK = _re.compile(r"\{k\d*\}")
ZEROING = "{z}"


class Record(Dataclass):
    intel: str
    go: str
    gnu: str = ""
    encoding: str = ""
    valid32: str = ""
    valid64: str = ""
    cpuid: str = ""
    tags: str = ""
    action: str = ""
    multisize: str = ""
    datasize: str = ""

    @classmethod
    def from_row(cls, row):
        row = [field.strip() for field in row]
        if len(row) > len(FIELDS):
            raise ValueError(f"too many x86.csv columns: {row!r}")
        return cls(**dict(zip(FIELDS, row)))

    @property
    def intel_opcode(self):
        return self.intel.split(None, 1)[0]

    @property
    def go_opcode(self):
        return self.go.split(None, 1)[0]

    @property
    def intel_args(self):
        parts = self.intel.split(None, 1)
        if len(parts) < 2:
            return []
        return [arg.strip() for arg in parts[1].split(",")]

    @property
    def valid_64bit(self):
        return self.valid64 == "V"

    def forms(self):
        """one Form per combination of slash alternatives"""
        slots = []
        for arg in self.intel_args:
            slots.extend(operand_slots(arg))
        for args in _itertools.product(*slots):
            yield Form(record=self, args=args)


class Form(Dataclass):
    record: Record
    args: _typing.Tuple[str, ...]

    @property
    def intel_opcode(self):
        return self.record.intel_opcode

    @property
    def go_opcode(self):
        return self.record.go_opcode

    @property
    def encoding(self):
        return self.record.encoding

    @property
    def cpuid(self):
        return self.record.cpuid

    def __str__(self):
        return f"{self.intel_opcode} {', '.join(self.args)}".rstrip()


def operand_slots(arg):
    """splits one Intel operand into operand positions.

    Returns a list of positions, each a list of alternative tokens.
    "zmm1{k}{z}" gives [["zmm1"], ["{k}"]]: the write mask is an operand
    of its own, following its owner; zeroing is not.  Other decorations
    ({er}, {sae}) stay attached to every alternative.
    """
    decorations = DECORATION.findall(arg)
    main = DECORATION.sub("", arg).strip()
    suffix = "".join(d for d in decorations
                     if not MASK.fullmatch(d) and d != ZEROING)
    slots = [[alt.strip() + suffix for alt in main.split("/")]]
    if any(MASK.fullmatch(d) for d in decorations):
        slots.append(["{k}"])
    return slots


def read_csv(lines):
    """Records of a not-entirely-csv-formatted file, which allows comments
    """
    lines = filter(lambda line: line.strip() and
                   not line.lstrip().startswith("#"), lines)
    for row in _csv.reader(lines):
        yield Record.from_row(row)


class Database:
    def __init__(self, records):
        self.__records = tuple(records)

    @classmethod
    def from_csv(cls, path):
        with open(path, "r") as csvfile:
            return cls(read_csv(csvfile))

    def __iter__(self):
        yield from self.__records

    def __len__(self):
        return len(self.__records)

    def forms(self, cpuid=None):
        """forms valid in 64-bit mode, optionally only those whose CPUID
        matches the regular expression cpuid"""
        pattern = None if cpuid is None else _re.compile(cpuid)
        for record in self.__records:
            if not record.valid_64bit:
                continue
            if pattern is not None and not pattern.search(record.cpuid):
                continue
            yield from record.forms()
