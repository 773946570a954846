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

r"""Raw binary to Intel HEX conversions, and vice versa."""

import io
import logging
from typing import IO
from typing import Iterable
from typing import List
from typing import Union

from bytesparse import Memory

from .reader import HexLineReader
from .record import IhexRecord
from .utils import AnyBytes

logger = logging.getLogger(__name__)

DEFAULT_DATALEN: int = 16
r"""Default number of data bytes per record."""


class RawToHexConverter:
    r"""Splits raw binary data into Intel HEX records.

    The generated record sequence is:

    #. an *Extended Segment Address* record, holding the starting address;
    #. *Data* records for consecutive chunks of :attr:`maxdatalen` bytes
       (the last one possibly shorter), whose address is the byte offset of
       the chunk within the raw data;
    #. an *End Of File* record.

    The address field holds 16 bits only: offsets beyond ``0xFFFF`` wrap
    around, without any further extended address records.

    Args:
        maxdatalen (int):
            Maximum number of data bytes per record.

    Examples:
        >>> from hex2raw import RawToHexConverter
        >>> converter = RawToHexConverter(maxdatalen=2)
        >>> for record in converter.convert(b'abc', address=0x1234):
        ...     print(record.to_bytestr(end=b'').decode())
        :020000021234B6
        :0200000061623B
        :01000200639A
        :00000001FF
    """

    def __init__(self, maxdatalen: int = DEFAULT_DATALEN):

        maxdatalen = maxdatalen.__index__()
        if not 1 <= maxdatalen <= 0xFF:
            raise ValueError('invalid maximum data length')

        self.maxdatalen: int = maxdatalen

    def convert(
        self,
        data: AnyBytes,
        address: int = 0,
    ) -> List[IhexRecord]:
        r"""Converts raw data into records.

        Args:
            data (bytes):
                Raw binary data.

            address (int):
                Starting address, stored by the leading
                *Extended Segment Address* record.

        Returns:
            list of :class:`IhexRecord`: Record sequence.

        Raises:
            ValueError: Starting address out of the 16-bit range.
        """

        records = [IhexRecord.create_extended_segment_address(address)]
        memory = Memory.from_bytes(data)

        if len(data) > 0x10000:
            logger.warning('Data size %d exceeds 64 KiB, '
                           'record addresses wrap around', len(data))

        chunk_views = []
        try:
            for chunk_start, chunk_view in memory.chop(self.maxdatalen):
                chunk_views.append(chunk_view)
                record = IhexRecord.create_data(chunk_start & 0xFFFF,
                                                bytes(chunk_view))
                records.append(record)
        finally:
            for chunk_view in chunk_views:
                chunk_view.release()

        records.append(IhexRecord.create_end_of_file())
        logger.info('Generated %d records out of %d raw bytes',
                    len(records), len(data))
        return records

    def serialize(
        self,
        data: AnyBytes,
        stream: IO,
        address: int = 0,
        end: AnyBytes = b'\r\n',
    ) -> int:
        r"""Converts raw data into records, written onto a byte stream.

        Args:
            data (bytes):
                Raw binary data.

            stream (bytes IO):
                Output byte stream.

            address (int):
                Starting address.

            end (bytes):
                Line terminator.

        Returns:
            int: Number of records written.
        """

        records = self.convert(data, address=address)
        for record in records:
            record.serialize(stream, end=end)
        return len(records)


class HexToRawConverter:
    r"""Collects raw binary data out of Intel HEX records.

    The data of *Data* records is concatenated in the very same order the
    records come; any other records contribute no data.
    Record addresses are not taken into account: no reordering, no
    overlapping checks, and no gap filling.

    Attributes:
        written (int):
            Number of raw bytes produced by the last conversion.

    Examples:
        >>> from hex2raw import HexToRawConverter, IhexRecord
        >>> records = [
        ...     IhexRecord.create_extended_segment_address(0),
        ...     IhexRecord.create_data(0x0100, b'xyz'),
        ...     IhexRecord.create_data(0x0000, b'abc'),
        ...     IhexRecord.create_end_of_file(),
        ... ]
        >>> converter = HexToRawConverter()
        >>> converter.convert(records)
        b'xyzabc'
        >>> converter.written
        6
    """

    def __init__(self):

        self.written: int = 0

    def convert(self, records: Iterable[IhexRecord]) -> bytes:
        r"""Converts records into raw data.

        Args:
            records (iterable of :class:`IhexRecord`):
                Record sequence, consumed in order.

        Returns:
            bytes: Raw binary data.
        """

        stream = io.BytesIO()
        self.transfer(records, stream)
        return stream.getvalue()

    def transfer(self, records: Iterable[IhexRecord], stream: IO) -> int:
        r"""Converts records into raw data, written onto a byte stream.

        Args:
            records (iterable of :class:`IhexRecord`):
                Record sequence, consumed in order.

            stream (bytes IO):
                Output byte stream.

        Returns:
            int: Number of raw bytes written.
        """

        self.written = 0
        eof_found = False

        for record in records:
            tag = record.tag

            if tag.is_data():
                stream.write(record.data)
                self.written += record.count

            elif tag.is_eof():
                eof_found = True

        if not eof_found:
            logger.warning('Missing end of file record')

        logger.info('Wrote %d raw bytes', self.written)
        return self.written


def hex_to_raw(stream: Union[IO, AnyBytes, str]) -> bytes:
    r"""Converts Intel HEX text into raw binary data.

    Args:
        stream (IO or buffer):
            Text or byte stream, or whole buffer, holding the record lines.

    Returns:
        bytes: Raw binary data.

    Raises:
        RecordError: Invalid record line.

    Examples:
        >>> from hex2raw import hex_to_raw
        >>> hex_to_raw(b':020000020000FC\r\n:03000000616263D7\r\n:00000001FF\r\n')
        b'abc'
    """

    return HexToRawConverter().convert(HexLineReader(stream))


def raw_to_hex(
    data: AnyBytes,
    address: int = 0,
    maxdatalen: int = DEFAULT_DATALEN,
) -> bytes:
    r"""Converts raw binary data into Intel HEX text.

    Args:
        data (bytes):
            Raw binary data.

        address (int):
            Starting address.

        maxdatalen (int):
            Maximum number of data bytes per record.

    Returns:
        bytes: Intel HEX text, with CRLF line terminators.

    Examples:
        >>> from hex2raw import raw_to_hex
        >>> raw_to_hex(b'abc')
        b':020000020000FC\r\n:03000000616263D7\r\n:00000001FF\r\n'
    """

    stream = io.BytesIO()
    RawToHexConverter(maxdatalen=maxdatalen).serialize(data, stream,
                                                        address=address)
    return stream.getvalue()
