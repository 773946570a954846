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

r"""Record file reader."""

import io
import logging
from typing import IO
from typing import Iterable
from typing import Iterator
from typing import Union

from .record import IhexRecord
from .utils import AnyBytes

logger = logging.getLogger(__name__)


def iter_text_lines(stream: IO) -> Iterator[str]:
    r"""Iterates the lines of a byte stream, with universal newlines.

    Lines end with either ``\n``, ``\r\n``, or a bare ``\r``.
    Bytes outside of the ASCII range are replaced, so that they fail the
    record grammar check.

    The byte stream is detached, not closed, once iteration stops.

    Args:
        stream (bytes IO):
            Readable byte stream.

    Yields:
        str: Text line, terminated by ``\n`` unless it is the last one.
    """

    wrapper = io.TextIOWrapper(stream, encoding='ascii', errors='replace',
                               newline=None)
    try:
        yield from wrapper
    finally:
        if not wrapper.closed:
            wrapper.detach()


class HexLineReader:
    r"""Reads records out of a line stream.

    Each line is parsed by :meth:`IhexRecord.parse` as soon as it is
    requested, with an incrementing 1-based line number.
    Parsing errors propagate unchanged; they already report the line number.

    Byte streams and whole buffers are split at ``\n``, ``\r\n``, and bare
    ``\r`` alike. Text streams and other iterables are taken line by line as
    they come; :func:`open` in text mode already applies universal newlines.

    The reader stops at the end of the stream, regardless of any
    *End Of File* record.
    Once exhausted, it stays exhausted.

    Args:
        stream (IO or buffer):
            Text or byte stream, or any iterable of lines.
            A whole ``bytes`` or ``str`` buffer is split into lines.

    Examples:
        >>> from hex2raw import HexLineReader
        >>> buffer = b':03000000616263D7\r:00000001FF\r'
        >>> [record.tag.name for record in HexLineReader(buffer)]
        ['DATA', 'END_OF_FILE']
    """

    def __init__(self, stream: Union[IO, Iterable, AnyBytes, str]):

        if isinstance(stream, str):
            stream = stream.encode('ascii', 'replace')

        if isinstance(stream, (bytes, bytearray, memoryview)):
            lines = bytes(stream).splitlines()
        elif isinstance(stream, (io.RawIOBase, io.BufferedIOBase)):
            lines = iter_text_lines(stream)
        else:
            lines = stream

        self._lines: Iterator = iter(lines)
        self.lineno: int = 0

    def __iter__(self) -> 'HexLineReader':

        return self

    def __next__(self) -> IhexRecord:

        line = next(self._lines)
        self.lineno += 1
        logger.debug('Parsing line %d: %r', self.lineno, line)

        record = IhexRecord.parse(line, lineno=self.lineno)
        logger.debug('%r', record)
        return record
