"""Tests for instruction decoding and the legality check."""

import pytest
from chipjax import decode, is_legal


def test_decode_fields():
    instruction = decode(0xD1A5)

    assert instruction.raw == 0xD1A5
    assert instruction.opcode == 0xD
    assert instruction.x == 0x1
    assert instruction.y == 0xA
    assert instruction.n == 0x5
    assert instruction.nn == 0xA5
    assert instruction.nnn == 0x1A5


@pytest.mark.parametrize("word", [
    0x00E0, 0x00EE, 0x1ABC, 0x2ABC, 0x3A12, 0x4A12, 0x5AB0, 0x6A12, 0x7A12,
    0x8AB0, 0x8AB1, 0x8AB2, 0x8AB3, 0x8AB4, 0x8AB5, 0x8AB6, 0x8AB7, 0x8ABE,
    0x9AB0, 0xAABC, 0xBABC, 0xCA12, 0xDAB5, 0xDAB0, 0xEA9E, 0xEAA1,
    0xFA07, 0xFA0A, 0xFA15, 0xFA18, 0xFA1E, 0xFA29, 0xFA33, 0xFA55, 0xFA65,
])
def test_defined_instructions_are_legal(word):
    assert is_legal(decode(word))


@pytest.mark.parametrize("word", [
    0x0000, 0x0001, 0x00E1, 0x01E0, 0x0FFF,
    0x5AB1, 0x9ABF,
    0x8AB8, 0x8AB9, 0x8ABD, 0x8ABF,
    0xEA9F, 0xEA00, 0xEAA2,
    0xFA00, 0xFA08, 0xFA30, 0xFA75, 0xFAFF,
])
def test_undefined_words_are_illegal(word):
    assert not is_legal(decode(word))
