"""
Percent-кодирование строк по правилам RFC 6570.

Каждый байт UTF-8 представления строки относится к одному из классов:

    unreserved  =  ALPHA / DIGIT / "-" / "." / "_" / "~"
    reserved    =  gen-delims / sub-delims
    gen-delims  =  ":" / "/" / "?" / "#" / "[" / "]" / "@"
    sub-delims  =  "!" / "$" / "&" / "'" / "(" / ")"
                /  "*" / "+" / "," / ";" / "="

Всё остальное (включая любые байты >= 0x80) считается disallowed.
"""

from __future__ import annotations

import enum
import string

_UPPERHEX = "0123456789ABCDEF"

UNRESERVED_CHARS = string.ascii_letters + string.digits + "-._~"
RESERVED_CHARS = ":/?#[]@!$&'()*+,;="


class Mask(enum.IntFlag):
    """Классы байтов, которые нужно закодировать в %XX."""
    NONE = 0
    DISALLOWED = 1
    UNRESERVED = 2
    RESERVED = 4


def _build_table() -> bytes:
    table = bytearray([Mask.DISALLOWED] * 256)
    for c in UNRESERVED_CHARS:
        table[ord(c)] = Mask.UNRESERVED
    for c in RESERVED_CHARS:
        table[ord(c)] = Mask.RESERVED
    return bytes(table)


# 256 записей: класс каждого байта
CLASSES = _build_table()


def byte_class(b: int) -> Mask:
    """Класс отдельного байта."""
    return Mask(CLASSES[b])


def escape(s: str, mask: int) -> str:
    """
    Заменяет байты из классов mask на последовательности %XX (верхний регистр).

    Если ни один байт не попадает под маску, возвращается тот же самый объект s.
    Одиночные суррогаты (surrogateescape) кодируются как исходные байты,
    прочие суррогаты кодируются как их UTF-8 представление (surrogatepass).

    Args:
        s: Исходная строка
        mask: Побитовое ИЛИ флагов Mask

    Returns:
        Экранированная строка
    """
    if not mask:
        return s

    try:
        errors = "surrogateescape"
        data = s.encode("utf-8", errors)
    except UnicodeEncodeError:
        # одиночные суррогаты вне U+DC80..U+DCFF (например, из битого JSON)
        errors = "surrogatepass"
        data = s.encode("utf-8", errors)

    hex_count = 0
    for b in data:
        if CLASSES[b] & mask:
            hex_count += 1

    if hex_count == 0:
        return s

    out = bytearray()
    for b in data:
        if CLASSES[b] & mask:
            out += b"%" + _UPPERHEX[b >> 4].encode() + _UPPERHEX[b & 0xF].encode()
        else:
            out.append(b)
    return out.decode("utf-8", errors)


__all__ = ["Mask", "CLASSES", "UNRESERVED_CHARS", "RESERVED_CHARS", "byte_class", "escape"]
