# SPDX-License-Identifier: LGPLv3+
"""Intel XED binding

The encoder helpers used here (xed_reg, xed_inst2, xed3_operand_set_vl, ...)
are static inline functions in the XED headers, so the binding is built in
cffi API mode.  It is compiled on first use into a cache directory and
loaded from there afterwards.

Configuration (environment):

* XED_INCLUDE_DIR: directory holding xed/xed-interface.h
* XED_LIBRARY_DIR: directory holding libxed
* X86ASMTEST_CACHE_DIR: where the compiled extension is kept
"""

import hashlib
import importlib.util
import os

from cffi import FFI

from x86asmtest.exceptions import ConfigError, EncodeError, EngineError
from x86asmtest.util import log
from x86asmtest.x86encode.inst import InstParam
from x86asmtest.x86encode.operands import (
    ImmOperand,
    MemOperand,
    RegOperand,
    convert_operands,
)


CDEF = """\
typedef int... xed_uint_t;
typedef int... xed_bits_t;
typedef int... xed_bool_t;
typedef int... xed_uint8_t;
typedef int... xed_int32_t;
typedef int... xed_uint32_t;
typedef int... xed_uint64_t;
typedef int... xed_reg_enum_t;
typedef int... xed_iclass_enum_t;
typedef int... xed_error_enum_t;
typedef int... xed_machine_mode_enum_t;
typedef int... xed_address_width_enum_t;

typedef struct {
    xed_machine_mode_enum_t mmode;
    xed_address_width_enum_t stack_addr_width;
    ...;
} xed_state_t;

typedef struct {
    xed_uint64_t displacement;
    xed_uint32_t displacement_bits;
    ...;
} xed_enc_displacement_t;

typedef struct { ...; } xed_encoder_operand_t;

typedef struct {
    xed_state_t mode;
    ...;
} xed_encoder_instruction_t;

typedef struct { ...; } xed_encoder_request_t;

#define XED_MAX_INSTRUCTION_BYTES ...
static const int XED_MACHINE_MODE_LONG_64;
static const int XED_ADDRESS_WIDTH_64b;
static const int XED_ERROR_NONE;
static const int XED_REG_INVALID;
static const int XED_ICLASS_INVALID;

void xed_tables_init(void);
void xed_state_zero(xed_state_t* p);

xed_reg_enum_t str2xed_reg_enum_t(const char* s);
xed_iclass_enum_t str2xed_iclass_enum_t(const char* s);
const char* xed_error_enum_t2str(const xed_error_enum_t p);

xed_encoder_operand_t xed_reg(xed_reg_enum_t reg);
xed_encoder_operand_t xed_imm0(xed_uint64_t v, xed_uint_t width_bits);
xed_encoder_operand_t xed_simm0(xed_int32_t v, xed_uint_t width_bits);
xed_encoder_operand_t xed_mem_bisd(xed_reg_enum_t base,
                                   xed_reg_enum_t index,
                                   xed_uint_t scale,
                                   xed_enc_displacement_t disp,
                                   xed_uint_t width_bits);

void xed_inst0(xed_encoder_instruction_t* inst, xed_state_t mode,
               xed_iclass_enum_t iclass, xed_uint_t eosz);
void xed_inst1(xed_encoder_instruction_t* inst, xed_state_t mode,
               xed_iclass_enum_t iclass, xed_uint_t eosz,
               xed_encoder_operand_t op0);
void xed_inst2(xed_encoder_instruction_t* inst, xed_state_t mode,
               xed_iclass_enum_t iclass, xed_uint_t eosz,
               xed_encoder_operand_t op0, xed_encoder_operand_t op1);
void xed_inst3(xed_encoder_instruction_t* inst, xed_state_t mode,
               xed_iclass_enum_t iclass, xed_uint_t eosz,
               xed_encoder_operand_t op0, xed_encoder_operand_t op1,
               xed_encoder_operand_t op2);
void xed_inst4(xed_encoder_instruction_t* inst, xed_state_t mode,
               xed_iclass_enum_t iclass, xed_uint_t eosz,
               xed_encoder_operand_t op0, xed_encoder_operand_t op1,
               xed_encoder_operand_t op2, xed_encoder_operand_t op3);
void xed_inst5(xed_encoder_instruction_t* inst, xed_state_t mode,
               xed_iclass_enum_t iclass, xed_uint_t eosz,
               xed_encoder_operand_t op0, xed_encoder_operand_t op1,
               xed_encoder_operand_t op2, xed_encoder_operand_t op3,
               xed_encoder_operand_t op4);

void xed_encoder_request_zero_set_mode(xed_encoder_request_t* p,
                                       const xed_state_t* dstate);
xed_bool_t xed_convert_to_encoder_request(xed_encoder_request_t* out,
                                          xed_encoder_instruction_t* in);
void xed3_operand_set_rexw(xed_encoder_request_t* d, xed_bits_t opval);
void xed3_operand_set_vl(xed_encoder_request_t* d, xed_bits_t opval);
xed_error_enum_t xed_encode(xed_encoder_request_t* r,
                            xed_uint8_t* array,
                            const unsigned int ilen,
                            unsigned int* olen);
"""

SOURCE = """\
#include "xed/xed-interface.h"
"""

MODULE_NAME = "_x86asmtest_xed"

EOSZ_BY_PARAM = {
    InstParam.EOSZ8: 8,
    InstParam.EOSZ16: 16,
    InstParam.EOSZ32: 32,
    InstParam.EOSZ64: 64,
}

# values written into the request after construction
REXW_BY_PARAM = {
    InstParam.REXW0: 0,
    InstParam.REXW1: 1,
}

VL_BY_PARAM = {
    InstParam.VEXL128: 0,
    InstParam.VEXL256: 1,
    InstParam.VEXL512: 2,
}

MAX_ARGS = 5


def cache_dir():
    path = os.environ.get("X86ASMTEST_CACHE_DIR")
    if path is None:
        base = os.environ.get("XDG_CACHE_HOME",
                              os.path.join(os.path.expanduser("~"), ".cache"))
        path = os.path.join(base, "x86asmtest")
    return path


def build_ffi():
    include_dirs = []
    library_dirs = []
    if "XED_INCLUDE_DIR" in os.environ:
        include_dirs.append(os.environ["XED_INCLUDE_DIR"])
    if "XED_LIBRARY_DIR" in os.environ:
        library_dirs.append(os.environ["XED_LIBRARY_DIR"])

    ffibuilder = FFI()
    ffibuilder.cdef(CDEF)
    ffibuilder.set_source(MODULE_NAME, SOURCE,
                          libraries=["xed"],
                          include_dirs=include_dirs,
                          library_dirs=library_dirs,
                          runtime_library_dirs=library_dirs)
    return ffibuilder


def compile_module():
    # one subdirectory per XED location, so switching installs rebuilds
    key = "|".join((os.environ.get("XED_INCLUDE_DIR", ""),
                    os.environ.get("XED_LIBRARY_DIR", "")))
    tmpdir = os.path.join(cache_dir(),
                          hashlib.sha1(key.encode()).hexdigest()[:12])
    os.makedirs(tmpdir, exist_ok=True)
    log("building XED binding in", tmpdir)
    path = build_ffi().compile(tmpdir=tmpdir)

    spec = importlib.util.spec_from_file_location(MODULE_NAME, path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


class XEDEngine:
    """process-wide XED encoder.  calls are strictly sequential."""

    def __init__(self, module):
        self.ffi = module.ffi
        self.lib = module.lib
        self.lib.xed_tables_init()
        self.state = self.ffi.new("xed_state_t *")
        self.lib.xed_state_zero(self.state)
        self.state.mmode = self.lib.XED_MACHINE_MODE_LONG_64
        self.state.stack_addr_width = self.lib.XED_ADDRESS_WIDTH_64b
        self.__iclasses = {}
        self.__regs = {}

    def iclass(self, opcode):
        iclass = self.__iclasses.get(opcode)
        if iclass is None:
            iclass = self.lib.str2xed_iclass_enum_t(opcode.encode())
            if iclass == self.lib.XED_ICLASS_INVALID:
                raise ConfigError(f"no iclass found for {opcode!r}")
            self.__iclasses[opcode] = iclass
        return iclass

    def reg(self, name):
        """register enum for name.  None means "no register" (memory)."""
        if name is None:
            return self.lib.XED_REG_INVALID
        reg = self.__regs.get(name)
        if reg is None:
            reg = self.lib.str2xed_reg_enum_t(name.encode())
            if reg == self.lib.XED_REG_INVALID:
                raise ConfigError(f"no XED register found for {name!r}")
            self.__regs[name] = reg
        return reg

    def operand(self, operand):
        lib = self.lib
        if isinstance(operand, RegOperand):
            return lib.xed_reg(self.reg(operand.name))
        if isinstance(operand, ImmOperand):
            if operand.signed:
                return lib.xed_simm0(operand.value, operand.bits)
            return lib.xed_imm0(operand.value, operand.bits)
        if isinstance(operand, MemOperand):
            disp = self.ffi.new("xed_enc_displacement_t *")
            # sign-extended, as the encoder expects
            disp.displacement = operand.disp & 0xFFFFFFFFFFFFFFFF
            disp.displacement_bits = operand.disp_bits
            return lib.xed_mem_bisd(self.reg(operand.base),
                                    self.reg(operand.index),
                                    operand.scale, disp[0], operand.width)
        raise TypeError(f"invalid operand type: {type(operand).__name__}")

    def encode(self, inst):
        ffi, lib = self.ffi, self.lib

        iclass = self.iclass(inst.opcode)
        eosz = 32  # default
        for param in inst.params:
            eosz = EOSZ_BY_PARAM.get(param, eosz)

        if len(inst.args) > MAX_ARGS:
            raise EncodeError(f"unexpected number of args: {len(inst.args)}")
        operands = [self.operand(op) for op in convert_operands(inst)]

        enc = ffi.new("xed_encoder_instruction_t *")
        inst_fn = getattr(lib, f"xed_inst{len(operands)}")
        inst_fn(enc, self.state[0], iclass, eosz, *operands)

        req = ffi.new("xed_encoder_request_t *")
        mode = ffi.addressof(enc[0], "mode")
        lib.xed_encoder_request_zero_set_mode(req, mode)
        if not lib.xed_convert_to_encoder_request(req, enc):
            raise EngineError("encoder request conversion failed")

        for param in inst.params:
            if param in REXW_BY_PARAM:
                lib.xed3_operand_set_rexw(req, REXW_BY_PARAM[param])
            elif param in VL_BY_PARAM:
                lib.xed3_operand_set_vl(req, VL_BY_PARAM[param])

        buf = ffi.new("xed_uint8_t[]", lib.XED_MAX_INSTRUCTION_BYTES)
        length = ffi.new("unsigned int *")
        err = lib.xed_encode(req, buf, len(buf), length)
        if err != lib.XED_ERROR_NONE:
            reason = ffi.string(lib.xed_error_enum_t2str(err)).decode()
            raise EngineError(f"xed error: {reason}")
        return bytes(ffi.buffer(buf, length[0]))


__engine = None


def engine():
    """returns the shared XEDEngine, building the binding on first use"""
    global __engine
    if __engine is None:
        try:
            module = compile_module()
        except Exception as e:
            raise ConfigError(f"cannot build XED binding: {e}") from e
        __engine = XEDEngine(module)
    return __engine


def available():
    try:
        engine()
    except ConfigError as e:
        log("XED unavailable:", e)
        return False
    return True
