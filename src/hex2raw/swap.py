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

r"""Byte pair swapping.

Some bootloaders store 16-bit words with their bytes in swapped order.
Each pair of adjacent bytes ``(a, b)`` becomes ``(b, a)``; if the whole
stream has an odd length, its very last byte is kept unchanged.

The stream filters hold back an unpaired byte until its companion arrives,
so that their output does not depend on how reads or writes are chunked.

Both filters leave the wrapped stream open when closed.
"""

import io
from typing import IO

from .utils import AnyBytes


def swap_bytes(data: AnyBytes) -> bytes:
    r"""Swaps byte pairs of a whole buffer.

    Args:
        data (bytes):
            Source buffer.

    Returns:
        bytes: Swapped buffer; an odd trailing byte is kept in place.

    Examples:
        >>> swap_bytes(b'012345678')
        b'103254768'
        >>> swap_bytes(b'01234567')
        b'10325476'
    """

    data = bytes(data)
    even = len(data) & ~1
    swapped = bytearray(data)
    swapped[0:even:2] = data[1:even:2]
    swapped[1:even:2] = data[0:even:2]
    return bytes(swapped)


class SwappingWriter(io.RawIOBase):
    r"""Outbound byte pair swapping filter.

    Complete pairs are swapped and forwarded to the wrapped stream right
    away. An unpaired trailing byte is held until the next write completes
    its pair, or until :meth:`close` forwards it unchanged.

    Args:
        stream (bytes IO):
            Wrapped output stream.

    Examples:
        >>> import io
        >>> from hex2raw import SwappingWriter
        >>> stream = io.BytesIO()
        >>> with SwappingWriter(stream) as writer:
        ...     for chunk in (b'0', b'123', b'45678'):
        ...         _ = writer.write(chunk)
        >>> stream.getvalue()
        b'103254768'
    """

    def __init__(self, stream: IO):

        super().__init__()
        self._stream: IO = stream
        self._pending: bytes = b''

    def close(self) -> None:
        r"""Forwards the held byte, if any, then closes the filter."""

        if not self.closed:
            try:
                if self._pending:
                    self._stream.write(self._pending)
                    self._pending = b''
            finally:
                super().close()

    def flush(self) -> None:

        super().flush()
        self._stream.flush()

    def writable(self) -> bool:

        return True

    def write(self, b: AnyBytes) -> int:

        if self.closed:
            raise ValueError('write to closed file')

        chunk = bytes(b)
        data = self._pending + chunk
        even = len(data) & ~1
        if even:
            self._stream.write(swap_bytes(data[:even]))
        self._pending = data[even:]
        return len(chunk)


class SwappingReader(io.RawIOBase):
    r"""Inbound byte pair swapping filter.

    Bytes read from the wrapped stream are swapped pairwise.
    An unpaired trailing byte is returned unchanged, once, at the end of the
    wrapped stream.

    Reads are filled up to the requested size, unless the wrapped stream ends.
    Swapped bytes exceeding the size requested by the caller are kept for the
    following reads, so that even single byte reads are supported.

    Args:
        stream (bytes IO):
            Wrapped input stream.

    Examples:
        >>> import io
        >>> from hex2raw import SwappingReader
        >>> reader = SwappingReader(io.BytesIO(b'abc'))
        >>> reader.read(1), reader.read()
        (b'b', b'ac')
    """

    def __init__(self, stream: IO):

        super().__init__()
        self._stream: IO = stream
        self._pending: bytes = b''
        self._ready: bytearray = bytearray()
        self._eof: bool = False

    def _fill(self, size: int) -> None:

        chunk = self._stream.read(max(size, 2))
        if not chunk:
            self._ready += self._pending
            self._pending = b''
            self._eof = True
            return

        data = self._pending + chunk
        even = len(data) & ~1
        self._ready += swap_bytes(data[:even])
        self._pending = data[even:]

    def readable(self) -> bool:

        return True

    def readinto(self, buffer) -> int:

        if self.closed:
            raise ValueError('read from closed file')

        view = memoryview(buffer).cast('B')
        size = len(view)

        while len(self._ready) < size and not self._eof:
            self._fill(size)

        count = min(size, len(self._ready))
        view[:count] = self._ready[:count]
        del self._ready[:count]
        return count


def wrap_inbound(stream: IO) -> SwappingReader:
    r"""Wraps an input byte stream with a :class:`SwappingReader`."""

    return SwappingReader(stream)


def wrap_outbound(stream: IO) -> SwappingWriter:
    r"""Wraps an output byte stream with a :class:`SwappingWriter`."""

    return SwappingWriter(stream)
