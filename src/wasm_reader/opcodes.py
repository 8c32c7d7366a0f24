"""WebAssembly opcode definitions.

Covers the MVP instruction set using the published one-byte encodings.
``OPCODES`` maps each opcode byte to its mnemonic and the shape of its
immediate operand; the instruction decoder dispatches on that shape.
"""

# Control instructions
UNREACHABLE = 0x00
NOP = 0x01
BLOCK = 0x02
LOOP = 0x03
IF = 0x04
ELSE = 0x05
END = 0x0B
BR = 0x0C
BR_IF = 0x0D
BR_TABLE = 0x0E
RETURN = 0x0F
CALL = 0x10
CALL_INDIRECT = 0x11

# Parametric instructions
DROP = 0x1A
SELECT = 0x1B

# Variable instructions
LOCAL_GET = 0x20
LOCAL_SET = 0x21
LOCAL_TEE = 0x22
GLOBAL_GET = 0x23
GLOBAL_SET = 0x24

# Memory instructions
I32_LOAD = 0x28
I64_LOAD = 0x29
F32_LOAD = 0x2A
F64_LOAD = 0x2B
I32_LOAD8_S = 0x2C
I32_LOAD8_U = 0x2D
I32_LOAD16_S = 0x2E
I32_LOAD16_U = 0x2F
I64_LOAD8_S = 0x30
I64_LOAD8_U = 0x31
I64_LOAD16_S = 0x32
I64_LOAD16_U = 0x33
I64_LOAD32_S = 0x34
I64_LOAD32_U = 0x35
I32_STORE = 0x36
I64_STORE = 0x37
F32_STORE = 0x38
F64_STORE = 0x39
I32_STORE8 = 0x3A
I32_STORE16 = 0x3B
I64_STORE8 = 0x3C
I64_STORE16 = 0x3D
I64_STORE32 = 0x3E
MEMORY_SIZE = 0x3F
MEMORY_GROW = 0x40

# Numeric instructions - constants
I32_CONST = 0x41
I64_CONST = 0x42
F32_CONST = 0x43
F64_CONST = 0x44

# Numeric instructions - i32 comparison
I32_EQZ = 0x45
I32_EQ = 0x46
I32_NE = 0x47
I32_LT_S = 0x48
I32_LT_U = 0x49
I32_GT_S = 0x4A
I32_GT_U = 0x4B
I32_LE_S = 0x4C
I32_LE_U = 0x4D
I32_GE_S = 0x4E
I32_GE_U = 0x4F

# Numeric instructions - i64 comparison
I64_EQZ = 0x50
I64_EQ = 0x51
I64_NE = 0x52
I64_LT_S = 0x53
I64_LT_U = 0x54
I64_GT_S = 0x55
I64_GT_U = 0x56
I64_LE_S = 0x57
I64_LE_U = 0x58
I64_GE_S = 0x59
I64_GE_U = 0x5A

# Numeric instructions - f32 comparison
F32_EQ = 0x5B
F32_NE = 0x5C
F32_LT = 0x5D
F32_GT = 0x5E
F32_LE = 0x5F
F32_GE = 0x60

# Numeric instructions - f64 comparison
F64_EQ = 0x61
F64_NE = 0x62
F64_LT = 0x63
F64_GT = 0x64
F64_LE = 0x65
F64_GE = 0x66

# Numeric instructions - i32 unary
I32_CLZ = 0x67
I32_CTZ = 0x68
I32_POPCNT = 0x69

# Numeric instructions - i32 binary
I32_ADD = 0x6A
I32_SUB = 0x6B
I32_MUL = 0x6C
I32_DIV_S = 0x6D
I32_DIV_U = 0x6E
I32_REM_S = 0x6F
I32_REM_U = 0x70
I32_AND = 0x71
I32_OR = 0x72
I32_XOR = 0x73
I32_SHL = 0x74
I32_SHR_S = 0x75
I32_SHR_U = 0x76
I32_ROTL = 0x77
I32_ROTR = 0x78

# Numeric instructions - i64 unary
I64_CLZ = 0x79
I64_CTZ = 0x7A
I64_POPCNT = 0x7B

# Numeric instructions - i64 binary
I64_ADD = 0x7C
I64_SUB = 0x7D
I64_MUL = 0x7E
I64_DIV_S = 0x7F
I64_DIV_U = 0x80
I64_REM_S = 0x81
I64_REM_U = 0x82
I64_AND = 0x83
I64_OR = 0x84
I64_XOR = 0x85
I64_SHL = 0x86
I64_SHR_S = 0x87
I64_SHR_U = 0x88
I64_ROTL = 0x89
I64_ROTR = 0x8A

# Numeric instructions - f32 unary
F32_ABS = 0x8B
F32_NEG = 0x8C
F32_CEIL = 0x8D
F32_FLOOR = 0x8E
F32_TRUNC = 0x8F
F32_NEAREST = 0x90
F32_SQRT = 0x91

# Numeric instructions - f32 binary
F32_ADD = 0x92
F32_SUB = 0x93
F32_MUL = 0x94
F32_DIV = 0x95
F32_MIN = 0x96
F32_MAX = 0x97
F32_COPYSIGN = 0x98

# Numeric instructions - f64 unary
F64_ABS = 0x99
F64_NEG = 0x9A
F64_CEIL = 0x9B
F64_FLOOR = 0x9C
F64_TRUNC = 0x9D
F64_NEAREST = 0x9E
F64_SQRT = 0x9F

# Numeric instructions - f64 binary
F64_ADD = 0xA0
F64_SUB = 0xA1
F64_MUL = 0xA2
F64_DIV = 0xA3
F64_MIN = 0xA4
F64_MAX = 0xA5
F64_COPYSIGN = 0xA6

# Numeric instructions - conversions
I32_WRAP_I64 = 0xA7
I32_TRUNC_F32_S = 0xA8
I32_TRUNC_F32_U = 0xA9
I32_TRUNC_F64_S = 0xAA
I32_TRUNC_F64_U = 0xAB
I64_EXTEND_I32_S = 0xAC
I64_EXTEND_I32_U = 0xAD
I64_TRUNC_F32_S = 0xAE
I64_TRUNC_F32_U = 0xAF
I64_TRUNC_F64_S = 0xB0
I64_TRUNC_F64_U = 0xB1
F32_CONVERT_I32_S = 0xB2
F32_CONVERT_I32_U = 0xB3
F32_CONVERT_I64_S = 0xB4
F32_CONVERT_I64_U = 0xB5
F32_DEMOTE_F64 = 0xB6
F64_CONVERT_I32_S = 0xB7
F64_CONVERT_I32_U = 0xB8
F64_CONVERT_I64_S = 0xB9
F64_CONVERT_I64_U = 0xBA
F64_PROMOTE_F32 = 0xBB
I32_REINTERPRET_F32 = 0xBC
I64_REINTERPRET_F64 = 0xBD
F32_REINTERPRET_I32 = 0xBE
F64_REINTERPRET_I64 = 0xBF


# Immediate operand shapes
IMM_NONE = "none"
IMM_INDEX = "index"  # unsigned LEB128 index or branch depth
IMM_I32 = "i32"  # signed LEB128, 32 bits
IMM_I64 = "i64"  # signed LEB128, 64 bits
IMM_F32 = "f32"  # 4 bytes little-endian IEEE-754
IMM_F64 = "f64"  # 8 bytes little-endian IEEE-754
IMM_BLOCK = "block"  # one inline signature byte
IMM_MEMORY = "memory"  # alignment flags + byte offset
IMM_BR_TABLE = "br_table"  # arm count, arms, default target
IMM_CALL_INDIRECT = "call_indirect"  # type index + reserved flag
IMM_RESERVED = "reserved"  # reserved flag only

# Opcode -> (mnemonic, immediate shape)
OPCODES = {
    UNREACHABLE: ("unreachable", IMM_NONE),
    NOP: ("nop", IMM_NONE),
    BLOCK: ("block", IMM_BLOCK),
    LOOP: ("loop", IMM_BLOCK),
    IF: ("if", IMM_BLOCK),
    ELSE: ("else", IMM_NONE),
    END: ("end", IMM_NONE),
    BR: ("br", IMM_INDEX),
    BR_IF: ("br_if", IMM_INDEX),
    BR_TABLE: ("br_table", IMM_BR_TABLE),
    RETURN: ("return", IMM_NONE),
    CALL: ("call", IMM_INDEX),
    CALL_INDIRECT: ("call_indirect", IMM_CALL_INDIRECT),
    DROP: ("drop", IMM_NONE),
    SELECT: ("select", IMM_NONE),
    LOCAL_GET: ("local.get", IMM_INDEX),
    LOCAL_SET: ("local.set", IMM_INDEX),
    LOCAL_TEE: ("local.tee", IMM_INDEX),
    GLOBAL_GET: ("global.get", IMM_INDEX),
    GLOBAL_SET: ("global.set", IMM_INDEX),
    I32_LOAD: ("i32.load", IMM_MEMORY),
    I64_LOAD: ("i64.load", IMM_MEMORY),
    F32_LOAD: ("f32.load", IMM_MEMORY),
    F64_LOAD: ("f64.load", IMM_MEMORY),
    I32_LOAD8_S: ("i32.load8_s", IMM_MEMORY),
    I32_LOAD8_U: ("i32.load8_u", IMM_MEMORY),
    I32_LOAD16_S: ("i32.load16_s", IMM_MEMORY),
    I32_LOAD16_U: ("i32.load16_u", IMM_MEMORY),
    I64_LOAD8_S: ("i64.load8_s", IMM_MEMORY),
    I64_LOAD8_U: ("i64.load8_u", IMM_MEMORY),
    I64_LOAD16_S: ("i64.load16_s", IMM_MEMORY),
    I64_LOAD16_U: ("i64.load16_u", IMM_MEMORY),
    I64_LOAD32_S: ("i64.load32_s", IMM_MEMORY),
    I64_LOAD32_U: ("i64.load32_u", IMM_MEMORY),
    I32_STORE: ("i32.store", IMM_MEMORY),
    I64_STORE: ("i64.store", IMM_MEMORY),
    F32_STORE: ("f32.store", IMM_MEMORY),
    F64_STORE: ("f64.store", IMM_MEMORY),
    I32_STORE8: ("i32.store8", IMM_MEMORY),
    I32_STORE16: ("i32.store16", IMM_MEMORY),
    I64_STORE8: ("i64.store8", IMM_MEMORY),
    I64_STORE16: ("i64.store16", IMM_MEMORY),
    I64_STORE32: ("i64.store32", IMM_MEMORY),
    MEMORY_SIZE: ("memory.size", IMM_RESERVED),
    MEMORY_GROW: ("memory.grow", IMM_RESERVED),
    I32_CONST: ("i32.const", IMM_I32),
    I64_CONST: ("i64.const", IMM_I64),
    F32_CONST: ("f32.const", IMM_F32),
    F64_CONST: ("f64.const", IMM_F64),
    I32_EQZ: ("i32.eqz", IMM_NONE),
    I32_EQ: ("i32.eq", IMM_NONE),
    I32_NE: ("i32.ne", IMM_NONE),
    I32_LT_S: ("i32.lt_s", IMM_NONE),
    I32_LT_U: ("i32.lt_u", IMM_NONE),
    I32_GT_S: ("i32.gt_s", IMM_NONE),
    I32_GT_U: ("i32.gt_u", IMM_NONE),
    I32_LE_S: ("i32.le_s", IMM_NONE),
    I32_LE_U: ("i32.le_u", IMM_NONE),
    I32_GE_S: ("i32.ge_s", IMM_NONE),
    I32_GE_U: ("i32.ge_u", IMM_NONE),
    I64_EQZ: ("i64.eqz", IMM_NONE),
    I64_EQ: ("i64.eq", IMM_NONE),
    I64_NE: ("i64.ne", IMM_NONE),
    I64_LT_S: ("i64.lt_s", IMM_NONE),
    I64_LT_U: ("i64.lt_u", IMM_NONE),
    I64_GT_S: ("i64.gt_s", IMM_NONE),
    I64_GT_U: ("i64.gt_u", IMM_NONE),
    I64_LE_S: ("i64.le_s", IMM_NONE),
    I64_LE_U: ("i64.le_u", IMM_NONE),
    I64_GE_S: ("i64.ge_s", IMM_NONE),
    I64_GE_U: ("i64.ge_u", IMM_NONE),
    F32_EQ: ("f32.eq", IMM_NONE),
    F32_NE: ("f32.ne", IMM_NONE),
    F32_LT: ("f32.lt", IMM_NONE),
    F32_GT: ("f32.gt", IMM_NONE),
    F32_LE: ("f32.le", IMM_NONE),
    F32_GE: ("f32.ge", IMM_NONE),
    F64_EQ: ("f64.eq", IMM_NONE),
    F64_NE: ("f64.ne", IMM_NONE),
    F64_LT: ("f64.lt", IMM_NONE),
    F64_GT: ("f64.gt", IMM_NONE),
    F64_LE: ("f64.le", IMM_NONE),
    F64_GE: ("f64.ge", IMM_NONE),
    I32_CLZ: ("i32.clz", IMM_NONE),
    I32_CTZ: ("i32.ctz", IMM_NONE),
    I32_POPCNT: ("i32.popcnt", IMM_NONE),
    I32_ADD: ("i32.add", IMM_NONE),
    I32_SUB: ("i32.sub", IMM_NONE),
    I32_MUL: ("i32.mul", IMM_NONE),
    I32_DIV_S: ("i32.div_s", IMM_NONE),
    I32_DIV_U: ("i32.div_u", IMM_NONE),
    I32_REM_S: ("i32.rem_s", IMM_NONE),
    I32_REM_U: ("i32.rem_u", IMM_NONE),
    I32_AND: ("i32.and", IMM_NONE),
    I32_OR: ("i32.or", IMM_NONE),
    I32_XOR: ("i32.xor", IMM_NONE),
    I32_SHL: ("i32.shl", IMM_NONE),
    I32_SHR_S: ("i32.shr_s", IMM_NONE),
    I32_SHR_U: ("i32.shr_u", IMM_NONE),
    I32_ROTL: ("i32.rotl", IMM_NONE),
    I32_ROTR: ("i32.rotr", IMM_NONE),
    I64_CLZ: ("i64.clz", IMM_NONE),
    I64_CTZ: ("i64.ctz", IMM_NONE),
    I64_POPCNT: ("i64.popcnt", IMM_NONE),
    I64_ADD: ("i64.add", IMM_NONE),
    I64_SUB: ("i64.sub", IMM_NONE),
    I64_MUL: ("i64.mul", IMM_NONE),
    I64_DIV_S: ("i64.div_s", IMM_NONE),
    I64_DIV_U: ("i64.div_u", IMM_NONE),
    I64_REM_S: ("i64.rem_s", IMM_NONE),
    I64_REM_U: ("i64.rem_u", IMM_NONE),
    I64_AND: ("i64.and", IMM_NONE),
    I64_OR: ("i64.or", IMM_NONE),
    I64_XOR: ("i64.xor", IMM_NONE),
    I64_SHL: ("i64.shl", IMM_NONE),
    I64_SHR_S: ("i64.shr_s", IMM_NONE),
    I64_SHR_U: ("i64.shr_u", IMM_NONE),
    I64_ROTL: ("i64.rotl", IMM_NONE),
    I64_ROTR: ("i64.rotr", IMM_NONE),
    F32_ABS: ("f32.abs", IMM_NONE),
    F32_NEG: ("f32.neg", IMM_NONE),
    F32_CEIL: ("f32.ceil", IMM_NONE),
    F32_FLOOR: ("f32.floor", IMM_NONE),
    F32_TRUNC: ("f32.trunc", IMM_NONE),
    F32_NEAREST: ("f32.nearest", IMM_NONE),
    F32_SQRT: ("f32.sqrt", IMM_NONE),
    F32_ADD: ("f32.add", IMM_NONE),
    F32_SUB: ("f32.sub", IMM_NONE),
    F32_MUL: ("f32.mul", IMM_NONE),
    F32_DIV: ("f32.div", IMM_NONE),
    F32_MIN: ("f32.min", IMM_NONE),
    F32_MAX: ("f32.max", IMM_NONE),
    F32_COPYSIGN: ("f32.copysign", IMM_NONE),
    F64_ABS: ("f64.abs", IMM_NONE),
    F64_NEG: ("f64.neg", IMM_NONE),
    F64_CEIL: ("f64.ceil", IMM_NONE),
    F64_FLOOR: ("f64.floor", IMM_NONE),
    F64_TRUNC: ("f64.trunc", IMM_NONE),
    F64_NEAREST: ("f64.nearest", IMM_NONE),
    F64_SQRT: ("f64.sqrt", IMM_NONE),
    F64_ADD: ("f64.add", IMM_NONE),
    F64_SUB: ("f64.sub", IMM_NONE),
    F64_MUL: ("f64.mul", IMM_NONE),
    F64_DIV: ("f64.div", IMM_NONE),
    F64_MIN: ("f64.min", IMM_NONE),
    F64_MAX: ("f64.max", IMM_NONE),
    F64_COPYSIGN: ("f64.copysign", IMM_NONE),
    I32_WRAP_I64: ("i32.wrap_i64", IMM_NONE),
    I32_TRUNC_F32_S: ("i32.trunc_f32_s", IMM_NONE),
    I32_TRUNC_F32_U: ("i32.trunc_f32_u", IMM_NONE),
    I32_TRUNC_F64_S: ("i32.trunc_f64_s", IMM_NONE),
    I32_TRUNC_F64_U: ("i32.trunc_f64_u", IMM_NONE),
    I64_EXTEND_I32_S: ("i64.extend_i32_s", IMM_NONE),
    I64_EXTEND_I32_U: ("i64.extend_i32_u", IMM_NONE),
    I64_TRUNC_F32_S: ("i64.trunc_f32_s", IMM_NONE),
    I64_TRUNC_F32_U: ("i64.trunc_f32_u", IMM_NONE),
    I64_TRUNC_F64_S: ("i64.trunc_f64_s", IMM_NONE),
    I64_TRUNC_F64_U: ("i64.trunc_f64_u", IMM_NONE),
    F32_CONVERT_I32_S: ("f32.convert_i32_s", IMM_NONE),
    F32_CONVERT_I32_U: ("f32.convert_i32_u", IMM_NONE),
    F32_CONVERT_I64_S: ("f32.convert_i64_s", IMM_NONE),
    F32_CONVERT_I64_U: ("f32.convert_i64_u", IMM_NONE),
    F32_DEMOTE_F64: ("f32.demote_f64", IMM_NONE),
    F64_CONVERT_I32_S: ("f64.convert_i32_s", IMM_NONE),
    F64_CONVERT_I32_U: ("f64.convert_i32_u", IMM_NONE),
    F64_CONVERT_I64_S: ("f64.convert_i64_s", IMM_NONE),
    F64_CONVERT_I64_U: ("f64.convert_i64_u", IMM_NONE),
    F64_PROMOTE_F32: ("f64.promote_f32", IMM_NONE),
    I32_REINTERPRET_F32: ("i32.reinterpret_f32", IMM_NONE),
    I64_REINTERPRET_F64: ("i64.reinterpret_f64", IMM_NONE),
    F32_REINTERPRET_I32: ("f32.reinterpret_i32", IMM_NONE),
    F64_REINTERPRET_I64: ("f64.reinterpret_i64", IMM_NONE),
}

# Opcodes opening a nested block scope, closed by END
BLOCK_OPENERS = {
    BLOCK,
    LOOP,
    IF,
}
