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

r"""Intel HEX records.

A record is a single line of an Intel HEX file::

    :LLAAAATT[DD...]CC

with ``LL`` the data byte count, ``AAAA`` the 16-bit big-endian address
(*load offset*), ``TT`` the record type (*tag*), ``DD...`` the data bytes, and
``CC`` the checksum.

See Also:
    `<https://en.wikipedia.org/wiki/Intel_HEX>`_
"""

import enum
import re
from typing import IO
from typing import Any
from typing import Sequence
from typing import Tuple
from typing import Union

from .errors import ChecksumMismatchError
from .errors import OddDigitCountError
from .errors import RecordSyntaxError
from .errors import TrailingDataError
from .errors import TruncatedRecordError
from .errors import UnknownRecordTypeError
from .utils import AnyBytes
from .utils import hexlify
from .utils import unhexlify

LINE_REGEX = re.compile(b'^:[0-9A-Fa-f]+$')
r"""Line grammar, after stripping the line terminator."""

HEADER_SIZE: int = 4
r"""Bytes before data: count, address (2 bytes), tag."""


class IhexTag(enum.IntEnum):
    r"""Intel HEX record tag."""

    DATA = 0
    r"""Binary data."""

    END_OF_FILE = 1
    r"""End Of File."""

    EXTENDED_SEGMENT_ADDRESS = 2
    r"""Extended Segment Address."""

    START_SEGMENT_ADDRESS = 3
    r"""Start Segment Address."""

    EXTENDED_LINEAR_ADDRESS = 4
    r"""Extended Linear Address."""

    START_LINEAR_ADDRESS = 5
    r"""Start Linear Address."""

    def is_data(self) -> bool:
        r"""Tells whether this is a Data record tag.

        Only *data* records carry bytes of the raw payload.

        Returns:
            bool: This is a Data record tag.

        Examples:
            >>> from hex2raw import IhexTag
            >>> IhexTag.DATA.is_data()
            True
            >>> IhexTag.EXTENDED_SEGMENT_ADDRESS.is_data()
            False
        """

        return self == self.DATA

    def is_eof(self) -> bool:
        r"""Tells whether this is an End Of File record tag.

        Returns:
            bool: This is an End Of File record tag.

        Examples:
            >>> from hex2raw import IhexTag
            >>> IhexTag.END_OF_FILE.is_eof()
            True
            >>> IhexTag.DATA.is_eof()
            False
        """

        return self == self.END_OF_FILE

    def is_extension(self) -> bool:
        r"""Tells whether this is an Extended Address record tag.

        Returns:
            bool: This is an Extended Address record tag.

        Examples:
            >>> from hex2raw import IhexTag
            >>> IhexTag.EXTENDED_LINEAR_ADDRESS.is_extension()
            True
            >>> IhexTag.EXTENDED_SEGMENT_ADDRESS.is_extension()
            True
            >>> IhexTag.DATA.is_extension()
            False
        """

        return ((self == self.EXTENDED_SEGMENT_ADDRESS) or
                (self == self.EXTENDED_LINEAR_ADDRESS))

    def is_start(self) -> bool:
        r"""Tells whether this is a Start Address record tag.

        Returns:
            bool: This is a Start Address record tag.

        Examples:
            >>> from hex2raw import IhexTag
            >>> IhexTag.START_LINEAR_ADDRESS.is_start()
            True
            >>> IhexTag.START_SEGMENT_ADDRESS.is_start()
            True
            >>> IhexTag.DATA.is_start()
            False
        """

        return ((self == self.START_SEGMENT_ADDRESS) or
                (self == self.START_LINEAR_ADDRESS))


def compute_checksum(tag: int, address: int, data: AnyBytes) -> int:
    r"""Computes the checksum of a record.

    All the fields preceding the checksum are summed as unsigned bytes: tag,
    count, address high byte, address low byte, and each data byte.
    The checksum is the two's complement of the low byte of the sum.

    Args:
        tag (int):
            Record tag value.

        address (int):
            16-bit record address.

        data (bytes):
            Record data.

    Returns:
        int: Checksum byte.

    Examples:
        >>> compute_checksum(IhexTag.END_OF_FILE, 0, b'')
        255
        >>> hex(compute_checksum(IhexTag.DATA, 0x1234, b'abc'))
        '0x91'
    """

    count = len(data) & 0xFF
    address &= 0xFFFF
    total = (tag & 0xFF) + count + (address >> 8) + (address & 0xFF)
    total += sum(iter(data))
    total &= 0xFF
    checksum = (~total + 1) & 0xFF
    return checksum


class IhexRecord:
    r"""Intel HEX record object.

    Records are immutable: :attr:`count` and :attr:`checksum` are always
    computed out of the other fields, so that a record never carries a stale
    checksum.

    Prefer the ``create_*`` factory methods to the constructor.

    Args:
        tag (:class:`IhexTag`):
            Record tag.

        address (int):
            16-bit address field.

        data (bytes):
            Record data, up to 255 bytes.

        coords (int couple):
            Coordinates of the parsed record, as ``(line, column)``;
            ``(-1, -1)`` when not parsed.

    Raises:
        ValueError: Some field is out of range.

    Examples:
        >>> from hex2raw import IhexRecord, IhexTag
        >>> record = IhexRecord(IhexTag.DATA, address=0x1234, data=b'abc')
        >>> record.count, hex(record.checksum)
        (3, '0x91')
    """

    EQUALITY_KEYS: Sequence[str] = [
        'address',
        'checksum',
        'count',
        'data',
        'tag',
    ]
    r"""Attributes compared by equality tests; :attr:`coords` is ignored."""

    Tag = IhexTag

    def __init__(
        self,
        tag: IhexTag,
        address: int = 0,
        data: AnyBytes = b'',
        coords: Tuple[int, int] = (-1, -1),
    ):

        tag = IhexTag(tag)

        address = address.__index__()
        if not 0 <= address <= 0xFFFF:
            raise ValueError('address overflow')

        data = bytes(data)
        if len(data) > 0xFF:
            raise ValueError('data size overflow')

        self._tag: IhexTag = tag
        self._address: int = address
        self._data: bytes = data
        self._count: int = len(data)
        self._checksum: int = compute_checksum(tag, address, data)
        self._coords: Tuple[int, int] = coords

    def __bytes__(self) -> bytes:

        return self.to_bytestr()

    def __eq__(self, other: Any) -> bool:

        return not self != other

    def __hash__(self) -> int:

        return hash((self._tag, self._address, self._data))

    def __ne__(self, other: Any) -> bool:

        for key in self.EQUALITY_KEYS:
            if not hasattr(other, key):
                return True
            if getattr(self, key) != getattr(other, key):
                return True

        return False

    def __repr__(self) -> str:

        return (f'<{self.__class__.__name__} tag={self._tag.name} '
                f'count={self._count} address=0x{self._address:04X} '
                f'checksum=0x{self._checksum:02X} coords={self._coords!r}>')

    def __str__(self) -> str:
        r"""Serializes the record into a string.

        Examples:
            >>> from hex2raw import IhexRecord
            >>> str(IhexRecord.create_end_of_file())
            ':00000001FF\r\n'
        """

        return self.to_bytestr().decode()

    @property
    def address(self) -> int:
        r"""int: 16-bit address field (load offset)."""

        return self._address

    @property
    def checksum(self) -> int:
        r"""int: Checksum byte, see :func:`compute_checksum`."""

        return self._checksum

    @property
    def coords(self) -> Tuple[int, int]:
        r"""int couple: Parsing coordinates, as ``(line, column)``."""

        return self._coords

    @property
    def count(self) -> int:
        r"""int: Number of data bytes."""

        return self._count

    @property
    def data(self) -> bytes:
        r"""bytes: Record data."""

        return self._data

    @property
    def tag(self) -> IhexTag:
        r""":class:`IhexTag`: Record tag."""

        return self._tag

    @classmethod
    def create_data(
        cls,
        address: int,
        data: AnyBytes,
    ) -> 'IhexRecord':
        r"""Creates a Data record.

        Args:
            address (int):
                16-bit address field.

            data (bytes):
                Record data, up to 255 bytes.

        Returns:
            :class:`IhexRecord`: Data record object.

        Examples:
            >>> from hex2raw import IhexRecord
            >>> record = IhexRecord.create_data(0x1234, b'abc')
            >>> str(record)
            ':0312340061626391\r\n'
        """

        return cls(IhexTag.DATA, address=address, data=data)

    @classmethod
    def create_end_of_file(cls) -> 'IhexRecord':
        r"""Creates an End Of File record.

        Returns:
            :class:`IhexRecord`: End Of File record object.

        Examples:
            >>> from hex2raw import IhexRecord
            >>> record = IhexRecord.create_end_of_file()
            >>> str(record)
            ':00000001FF\r\n'
        """

        return cls(IhexTag.END_OF_FILE)

    @classmethod
    def create_extended_linear_address(cls, extension: int) -> 'IhexRecord':
        r"""Creates an Extended Linear Address record.

        Args:
            extension (int):
                Address extension value.

        Returns:
            :class:`IhexRecord`: Extended Linear Address record object.

        Examples:
            >>> from hex2raw import IhexRecord
            >>> record = IhexRecord.create_extended_linear_address(0x1234)
            >>> str(record)
            ':020000041234B4\r\n'
        """

        extension = extension.__index__()
        if not 0 <= extension <= 0xFFFF:
            raise ValueError('extension overflow')

        data = extension.to_bytes(2, byteorder='big')
        return cls(IhexTag.EXTENDED_LINEAR_ADDRESS, data=data)

    @classmethod
    def create_extended_segment_address(cls, extension: int) -> 'IhexRecord':
        r"""Creates an Extended Segment Address record.

        Args:
            extension (int):
                Address extension value.

        Returns:
            :class:`IhexRecord`: Extended Segment Address record object.

        Examples:
            >>> from hex2raw import IhexRecord
            >>> record = IhexRecord.create_extended_segment_address(0x1234)
            >>> str(record)
            ':020000021234B6\r\n'
        """

        extension = extension.__index__()
        if not 0 <= extension <= 0xFFFF:
            raise ValueError('extension overflow')

        data = extension.to_bytes(2, byteorder='big')
        return cls(IhexTag.EXTENDED_SEGMENT_ADDRESS, data=data)

    @classmethod
    def create_start_linear_address(cls, address: int) -> 'IhexRecord':
        r"""Creates a Start Linear Address record.

        Args:
            address (int):
                32-bit start address.

        Returns:
            :class:`IhexRecord`: Start Linear Address record object.

        Examples:
            >>> from hex2raw import IhexRecord
            >>> record = IhexRecord.create_start_linear_address(0x12345678)
            >>> str(record)
            ':0400000512345678E3\r\n'
        """

        address = address.__index__()
        if not 0 <= address <= 0xFFFFFFFF:
            raise ValueError('address overflow')

        data = address.to_bytes(4, byteorder='big')
        return cls(IhexTag.START_LINEAR_ADDRESS, data=data)

    @classmethod
    def create_start_segment_address(cls, address: int) -> 'IhexRecord':
        r"""Creates a Start Segment Address record.

        Args:
            address (int):
                32-bit start address, as ``CS:IP``.

        Returns:
            :class:`IhexRecord`: Start Segment Address record object.

        Examples:
            >>> from hex2raw import IhexRecord
            >>> record = IhexRecord.create_start_segment_address(0x12345678)
            >>> str(record)
            ':0400000312345678E5\r\n'
        """

        address = address.__index__()
        if not 0 <= address <= 0xFFFFFFFF:
            raise ValueError('address overflow')

        data = address.to_bytes(4, byteorder='big')
        return cls(IhexTag.START_SEGMENT_ADDRESS, data=data)

    @classmethod
    def parse(
        cls,
        line: Union[AnyBytes, str],
        lineno: int = 0,
    ) -> 'IhexRecord':
        r"""Parses a record from a line.

        Any trailing line terminator characters are ignored.

        Args:
            line (bytes or str):
                Line to parse.

            lineno (int):
                Line number (1-based), reported by errors and stored into
                :attr:`coords`.

        Returns:
            :class:`IhexRecord`: Parsed record.

        Raises:
            RecordSyntaxError: Not a ``:`` followed by hex digits.
            OddDigitCountError: Odd number of hex digits.
            TruncatedRecordError: Fewer bytes than declared.
            UnknownRecordTypeError: Record type outside of 0 to 5.
            TrailingDataError: More bytes than declared.
            ChecksumMismatchError: Wrong checksum.

        Examples:
            >>> from hex2raw import IhexRecord
            >>> record = IhexRecord.parse(b':0312340061626391\r\n')
            >>> record.tag, hex(record.address), record.data
            (<IhexTag.DATA: 0>, '0x1234', b'abc')
            >>> IhexRecord.parse(':1', lineno=7)
            Traceback (most recent call last):
                ...
            hex2raw.errors.OddDigitCountError: odd number of digits on line 7
        """

        if isinstance(line, str):
            line = line.encode('ascii', 'replace')

        line = bytes(line).rstrip(b'\r\n')
        if not LINE_REGEX.match(line):
            raise RecordSyntaxError(lineno)

        digits = line[1:]
        if len(digits) & 1:
            raise OddDigitCountError(lineno)

        groups = unhexlify(digits)
        if len(groups) < HEADER_SIZE:
            raise TruncatedRecordError(lineno)

        count = groups[0]
        address = (groups[1] << 8) | groups[2]
        try:
            tag = IhexTag(groups[3])
        except ValueError:
            raise UnknownRecordTypeError(groups[3], lineno) from None

        expected_size = HEADER_SIZE + count + 1
        if len(groups) < expected_size:
            raise TruncatedRecordError(lineno)
        if len(groups) > expected_size:
            raise TrailingDataError(expected_size, len(groups), lineno)

        data = groups[HEADER_SIZE:(HEADER_SIZE + count)]
        actual = groups[-1]
        expected = compute_checksum(tag, address, data)
        if actual != expected:
            raise ChecksumMismatchError(expected, actual, lineno)

        return cls(tag, address=address, data=data, coords=(lineno, 0))

    def serialize(self, stream: IO, end: AnyBytes = b'\r\n') -> 'IhexRecord':
        r"""Serializes onto a byte stream.

        Args:
            stream (bytes IO):
                Stream to write.

            end (bytes):
                Line terminator.

        Returns:
            :class:`IhexRecord`: *self*.
        """

        stream.write(self.to_bytestr(end=end))
        return self

    def to_bytestr(self, end: AnyBytes = b'\r\n') -> bytes:
        r"""Converts into a byte string.

        Args:
            end (bytes):
                Line terminator.

        Returns:
            bytes: Serialized record line.

        Examples:
            >>> from hex2raw import IhexRecord
            >>> record = IhexRecord.create_data(0x1234, b'abc')
            >>> record.to_bytestr(end=b'\n')
            b':0312340061626391\n'
        """

        bytestr = b':%02X%04X%02X%s%02X%s' % (
            self._count,
            self._address,
            self._tag,
            hexlify(self._data),
            self._checksum,
            end,
        )
        return bytestr


def decode(line: Union[AnyBytes, str], lineno: int = 0) -> IhexRecord:
    r"""Decodes a record line.

    See Also:
        :meth:`IhexRecord.parse`
    """

    return IhexRecord.parse(line, lineno=lineno)


def encode(record: IhexRecord, end: AnyBytes = b'\r\n') -> bytes:
    r"""Encodes a record line.

    See Also:
        :meth:`IhexRecord.to_bytestr`
    """

    return record.to_bytestr(end=end)
