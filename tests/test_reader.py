import io
import logging

import pytest

from hex2raw.errors import ChecksumMismatchError
from hex2raw.errors import RecordSyntaxError
from hex2raw.reader import HexLineReader
from hex2raw.reader import iter_text_lines
from hex2raw.record import IhexRecord
from hex2raw.record import IhexTag

BUFFER = (
    b':020000020000FC\r\n'
    b':03000000616263D7\r\n'
    b':00000001FF\r\n'
)

RECORDS = [
    IhexRecord.create_extended_segment_address(0),
    IhexRecord.create_data(0, b'abc'),
    IhexRecord.create_end_of_file(),
]


class TestHexLineReader:

    def test___init__(self):
        reader = HexLineReader(io.BytesIO(BUFFER))
        assert reader.lineno == 0

    def test___iter__(self):
        reader = HexLineReader(io.BytesIO(BUFFER))
        assert iter(reader) is reader

    def test_bytes_stream(self):
        records = list(HexLineReader(io.BytesIO(BUFFER)))
        assert records == RECORDS

    def test_text_stream(self):
        records = list(HexLineReader(io.StringIO(BUFFER.decode())))
        assert records == RECORDS

    def test_bytes_buffer(self):
        assert list(HexLineReader(BUFFER)) == RECORDS
        assert list(HexLineReader(bytearray(BUFFER))) == RECORDS

    def test_str_buffer(self):
        assert list(HexLineReader(BUFFER.decode())) == RECORDS

    def test_line_list(self):
        lines = [':020000020000FC', ':03000000616263D7', ':00000001FF']
        assert list(HexLineReader(lines)) == RECORDS

    def test_empty(self):
        reader = HexLineReader(b'')
        assert list(reader) == []
        assert reader.lineno == 0

    def test_coords(self):
        records = list(HexLineReader(BUFFER))
        assert [record.coords for record in records] == [(1, 0), (2, 0), (3, 0)]

    def test_lineno(self):
        reader = HexLineReader(BUFFER)
        next(reader)
        assert reader.lineno == 1
        next(reader)
        next(reader)
        assert reader.lineno == 3

    def test_eof_not_required(self):
        buffer = b':020000020000FC\r\n:03000000616263D7\r\n'
        records = list(HexLineReader(buffer))
        assert records == RECORDS[:2]

    def test_after_eof(self):
        buffer = BUFFER + b':03000000616263D7\r\n'
        records = list(HexLineReader(buffer))
        assert len(records) == 4
        assert records[-1].tag is IhexTag.DATA

    def test_lazy(self):
        buffer = b':03000000616263D7\r\ngarbage\r\n'
        reader = HexLineReader(buffer)
        record = next(reader)
        assert record.data == b'abc'
        with pytest.raises(RecordSyntaxError):
            next(reader)

    def test_not_restartable(self):
        reader = HexLineReader(io.BytesIO(BUFFER))
        assert len(list(reader)) == 3
        assert list(reader) == []
        with pytest.raises(StopIteration):
            next(reader)

    def test_raises_lineno(self):
        buffer = b':03000000616263D7\r\n:03000000616263D8\r\n:00000001FF\r\n'
        with pytest.raises(ChecksumMismatchError) as excinfo:
            list(HexLineReader(buffer))
        assert excinfo.value.lineno == 2
        assert 'on line 2' in str(excinfo.value)

    def test_raises_blank_line(self):
        buffer = b':03000000616263D7\r\n\r\n:00000001FF\r\n'
        with pytest.raises(RecordSyntaxError, match='syntax error on line 2'):
            list(HexLineReader(buffer))

    def test_debug_log(self, caplog):
        caplog.set_level(logging.DEBUG, logger='hex2raw')
        list(HexLineReader(BUFFER))
        assert 'Parsing line 3' in caplog.text

    def test_cr_line_endings(self):
        buffer = BUFFER.replace(b'\r\n', b'\r')
        assert list(HexLineReader(buffer)) == RECORDS
        assert list(HexLineReader(buffer.decode())) == RECORDS
        assert list(HexLineReader(io.BytesIO(buffer))) == RECORDS

    def test_lf_line_endings(self):
        buffer = BUFFER.replace(b'\r\n', b'\n')
        assert list(HexLineReader(buffer)) == RECORDS
        assert list(HexLineReader(io.BytesIO(buffer))) == RECORDS

    def test_mixed_line_endings(self):
        buffer = b':020000020000FC\r:03000000616263D7\n:00000001FF\r\n'
        records = list(HexLineReader(io.BytesIO(buffer)))
        assert records == RECORDS
        assert [record.coords for record in records] == [(1, 0), (2, 0), (3, 0)]

    def test_cr_line_endings_lineno(self):
        buffer = b':03000000616263D7\r:03000000616263D8\r:00000001FF\r'
        with pytest.raises(ChecksumMismatchError, match='on line 2'):
            list(HexLineReader(io.BytesIO(buffer)))
        with pytest.raises(ChecksumMismatchError, match='on line 2'):
            list(HexLineReader(buffer))

    def test_cr_blank_line(self):
        buffer = b':03000000616263D7\r\r:00000001FF\r'
        with pytest.raises(RecordSyntaxError, match='syntax error on line 2'):
            list(HexLineReader(io.BytesIO(buffer)))

    def test_non_ascii_byte(self):
        buffer = b':03000000616263D7\r\n:0000\xff0001FF\r\n'
        with pytest.raises(RecordSyntaxError, match='syntax error on line 2'):
            list(HexLineReader(io.BytesIO(buffer)))

    def test_byte_stream_left_open(self):
        stream = io.BytesIO(BUFFER)
        assert list(HexLineReader(stream)) == RECORDS
        assert not stream.closed
        assert stream.read() == b''

    def test_buffered_file(self, tmpdir):
        path = tmpdir.join('test.hex')
        path.write_binary(BUFFER.replace(b'\r\n', b'\r'))
        with open(str(path), 'rb') as stream:
            assert list(HexLineReader(stream)) == RECORDS
            assert not stream.closed


def test_iter_text_lines():
    stream = io.BytesIO(b'a\rb\r\nc\nd')
    assert list(iter_text_lines(stream)) == ['a\n', 'b\n', 'c\n', 'd']
    assert not stream.closed
