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

r"""Conversion errors.

All the errors derive from :class:`ValueError`, so that callers already
catching :class:`ValueError` from the record API keep working.

Decode errors carry the 1-based line number of the offending line, as
:attr:`RecordError.lineno`; it is zero when a single line was parsed out of
any file context.

Error hierarchy::

    Hex2RawError
    ├── RecordError
    │   ├── RecordSyntaxError
    │   ├── OddDigitCountError
    │   ├── UnknownRecordTypeError
    │   ├── TruncatedRecordError
    │   ├── TrailingDataError
    │   └── ChecksumMismatchError
    └── InvalidAddressError
"""


class Hex2RawError(ValueError):
    r"""Base class of all the conversion errors."""


class RecordError(Hex2RawError):
    r"""Record line cannot be decoded.

    Args:
        message (str):
            Short description, completed with the line number.

        lineno (int):
            Line number (1-based) of the offending line.
    """

    def __init__(self, message: str, lineno: int = 0):

        self.lineno: int = lineno
        if lineno:
            message = f'{message} on line {lineno}'
        super().__init__(message)


class RecordSyntaxError(RecordError):
    r"""Line does not match the ``:`` + hex digits grammar."""

    def __init__(self, lineno: int = 0):

        super().__init__('syntax error', lineno)


class OddDigitCountError(RecordError):
    r"""Odd number of hex digits after ``:``."""

    def __init__(self, lineno: int = 0):

        super().__init__('odd number of digits', lineno)


class UnknownRecordTypeError(RecordError):
    r"""Record type id outside of the six standard ones."""

    def __init__(self, tag_id: int, lineno: int = 0):

        self.tag_id: int = tag_id
        super().__init__(f'unknown record type 0x{tag_id:02X}', lineno)


class TruncatedRecordError(RecordError):
    r"""Fewer bytes than required by the declared count."""

    def __init__(self, lineno: int = 0):

        super().__init__('truncated record', lineno)


class TrailingDataError(RecordError):
    r"""More bytes than required by the declared count."""

    def __init__(self, expected: int, actual: int, lineno: int = 0):

        self.expected: int = expected
        self.actual: int = actual
        super().__init__(f'trailing data, expected {expected} bytes '
                         f'but got {actual}', lineno)


class ChecksumMismatchError(RecordError):
    r"""Parsed checksum differs from the computed one."""

    def __init__(self, expected: int, actual: int, lineno: int = 0):

        self.expected: int = expected
        self.actual: int = actual
        super().__init__(f'checksum error, expected 0x{expected:02X} '
                         f'but got 0x{actual:02X}', lineno)


class InvalidAddressError(Hex2RawError):
    r"""Starting address text cannot be parsed."""

    def __init__(self, text: str):

        self.text: str = text
        super().__init__(f'invalid address: {text!r}')
