# Copyright (c) 2013-2025, Andrea Zoppi
# All rights reserved.
#
# Redistribution and use in source and binary forms, with or without
# modification, are permitted provided that the following conditions are met:
#
# 1. Redistributions of source code must retain the above copyright notice,
#    this list of conditions and the following disclaimer.
#
# 2. Redistributions in binary form must reproduce the above copyright
#    notice, this list of conditions and the following disclaimer in the
#    documentation and/or other materials provided with the distribution.
#
# THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS"
# AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO, THE
# IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE
# ARE DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR CONTRIBUTORS BE
# LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR
# CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT LIMITED TO, PROCUREMENT OF
# SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS
# INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF LIABILITY, WHETHER IN
# CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE)
# ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE, EVEN IF ADVISED OF THE
# POSSIBILITY OF SUCH DAMAGE.

r"""Generic utility functions."""

import binascii
import re
from typing import Union

from .errors import InvalidAddressError

try:
    from typing import TypeAlias
except ImportError:  # pragma: no cover
    from typing import Any as TypeAlias  # Python < 3.10

AnyBytes: TypeAlias = Union[bytes, bytearray, memoryview]

ADDRESS_REGEX = re.compile(r'^\s*(?P<prefix>(0x|\$)?)'
                           r'(?P<value>[0-9a-f]+)\s*$')

ADDRESS_MAX: int = 0xFFFF
r"""Highest starting address, as held by a 16-bit extension field."""


def hexlify(
    bytestr: AnyBytes,
    upper: bool = True,
) -> bytes:
    r"""Converts raw bytes into a hexadecimal byte string.

    Args:
        bytestr (bytes):
            Source byte string.

        upper (bool):
            Uppercase hexadecimal string.

    Returns:
        bytes: Hexadecimal byte string.

    Examples:
        >>> from hex2raw.utils import hexlify
        >>> hexlify(b'\xAA\xBB\xCC')
        b'AABBCC'
        >>> hexlify(b'\xAA\xBB\xCC', upper=False)
        b'aabbcc'
    """

    hexstr = binascii.hexlify(bytestr)

    if upper:
        hexstr = hexstr.upper()

    return hexstr


def parse_address(text: str) -> int:
    r"""Parses a starting address.

    Args:
        text (str):
            Address text (case-insensitive), either decimal, or hexadecimal
            if prefixed by ``0x`` or ``$``.

    Returns:
        int: Parsed address, within ``0`` and :data:`ADDRESS_MAX`.

    Raises:
        InvalidAddressError: Syntax error, or address out of range.

    Examples:
        >>> parse_address('1234')
        1234
        >>> parse_address('0x1234')
        4660
        >>> parse_address('$FF')
        255
        >>> parse_address('0x10000')
        Traceback (most recent call last):
            ...
        hex2raw.errors.InvalidAddressError: invalid address: '0x10000'
    """

    m = ADDRESS_REGEX.match(text.lower())
    if not m:
        raise InvalidAddressError(text)

    prefix = m.group('prefix')
    value = m.group('value')

    if prefix:
        address = int(value, 16)
    elif value.isdigit():
        address = int(value, 10)
    else:
        raise InvalidAddressError(text)

    if not 0 <= address <= ADDRESS_MAX:
        raise InvalidAddressError(text)

    return address


def unhexlify(hexstr: AnyBytes) -> bytes:
    r"""Converts a hexadecimal byte string into raw bytes.

    Args:
        hexstr (bytes):
            Source hexadecimal byte string, with an even number of digits.

    Returns:
        bytes: Raw byte string.

    Examples:
        >>> from hex2raw.utils import unhexlify
        >>> unhexlify(b'AABBCC')
        b'\xaa\xbb\xcc'
        >>> unhexlify(b'aabbcc')
        b'\xaa\xbb\xcc'
    """

    bytestr = binascii.unhexlify(hexstr)
    return bytestr
