import doctest
import importlib
import runpy
import sys

import pytest

import hex2raw
from hex2raw.errors import ChecksumMismatchError
from hex2raw.errors import Hex2RawError
from hex2raw.errors import InvalidAddressError
from hex2raw.errors import OddDigitCountError
from hex2raw.errors import RecordError
from hex2raw.errors import RecordSyntaxError
from hex2raw.errors import TrailingDataError
from hex2raw.errors import TruncatedRecordError
from hex2raw.errors import UnknownRecordTypeError


def test_version():
    assert isinstance(hex2raw.__version__, str)
    assert hex2raw.__version__.count('.') == 2


def test_exports():
    names = [
        'ChecksumMismatchError',
        'HexLineReader',
        'HexToRawConverter',
        'IhexRecord',
        'IhexTag',
        'InvalidAddressError',
        'RawToHexConverter',
        'SwappingReader',
        'SwappingWriter',
        'decode',
        'encode',
        'hex_to_raw',
        'raw_to_hex',
        'swap_bytes',
        'wrap_inbound',
        'wrap_outbound',
    ]
    for name in names:
        assert hasattr(hex2raw, name), name


def test_main_module(monkeypatch, capsys):
    monkeypatch.setattr(sys, 'argv', ['hex2raw', '--version'])
    with pytest.raises(SystemExit) as excinfo:
        runpy.run_module('hex2raw', run_name='__main__')
    assert excinfo.value.code == 0
    assert capsys.readouterr().out.strip() == hex2raw.__version__


class TestErrors:

    def test_hierarchy(self):
        for cls in (RecordSyntaxError, OddDigitCountError, UnknownRecordTypeError,
                    TruncatedRecordError, TrailingDataError, ChecksumMismatchError):
            assert issubclass(cls, RecordError)
        assert issubclass(RecordError, Hex2RawError)
        assert issubclass(InvalidAddressError, Hex2RawError)
        assert issubclass(Hex2RawError, ValueError)

    def test_record_error(self):
        error = RecordError('bad record')
        assert error.lineno == 0
        assert str(error) == 'bad record'
        error = RecordError('bad record', lineno=7)
        assert error.lineno == 7
        assert str(error) == 'bad record on line 7'

    def test_messages(self):
        assert str(RecordSyntaxError(3)) == 'syntax error on line 3'
        assert str(OddDigitCountError()) == 'odd number of digits'
        assert str(UnknownRecordTypeError(6, 2)) == 'unknown record type 0x06 on line 2'
        assert str(TruncatedRecordError(1)) == 'truncated record on line 1'
        assert str(TrailingDataError(3, 4)) == 'trailing data, expected 3 bytes but got 4'
        assert (str(ChecksumMismatchError(0xD7, 0xD8, 2))
                == 'checksum error, expected 0xD7 but got 0xD8 on line 2')
        assert str(InvalidAddressError('0x10000')) == "invalid address: '0x10000'"

    def test_attributes(self):
        error = ChecksumMismatchError(0xD7, 0xD8, 2)
        assert (error.expected, error.actual, error.lineno) == (0xD7, 0xD8, 2)
        error = TrailingDataError(3, 4, 5)
        assert (error.expected, error.actual, error.lineno) == (3, 4, 5)
        assert UnknownRecordTypeError(6).tag_id == 6


@pytest.mark.parametrize('name', [
    'hex2raw.cli',
    'hex2raw.convert',
    'hex2raw.reader',
    'hex2raw.record',
    'hex2raw.swap',
    'hex2raw.utils',
])
def test_docstring_examples(name):
    module = importlib.import_module(name)
    failed, attempted = doctest.testmod(module)
    assert attempted > 0
    assert failed == 0
