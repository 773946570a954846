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

"""
Module that contains the command line app.

Why does this file exist, and why not put this in __main__?

  You might be tempted to import things from __main__ later, but that will cause
  problems: the code will get executed twice:

  - When you run `python -m hex2raw` python will execute
    ``__main__.py`` as a script. That means there won't be any
    ``hex2raw.__main__`` in ``sys.modules``.
  - When you import __main__ it will get executed again (as a module) because
    there's no ``hex2raw.__main__`` in ``sys.modules``.

  Also see (1) from https://click.palletsprojects.com/en/stable/setuptools/#setuptools-integration
"""

import logging
import os
from typing import IO
from typing import Optional

import click

from .__init__ import __version__
from .convert import HexToRawConverter
from .convert import RawToHexConverter
from .errors import InvalidAddressError
from .reader import HexLineReader
from .swap import wrap_inbound
from .swap import wrap_outbound
from .utils import parse_address

logger = logging.getLogger(__name__)

HEX_SUFFIX: str = '.hex'
RAW_SUFFIX: str = '.raw'


class AddressParamType(click.ParamType):
    name = 'address'

    def convert(self, value, param, ctx):
        if isinstance(value, int):
            return value
        try:
            return parse_address(value)
        except InvalidAddressError as exc:
            self.fail(str(exc), param, ctx)


ADDRESS = AddressParamType()

FILE_PATH_IN = click.Path(dir_okay=False, readable=True, exists=True)
FILE_PATH_OUT = click.Path(dir_okay=False, writable=True)


# ----------------------------------------------------------------------------

def default_output_path(input_path: str, suffix: str) -> str:
    r"""Builds the default output file path.

    Everything from the last dot of the input file name onwards is replaced
    by `suffix`, or `suffix` is appended if the file name has no dot.
    Dots within the directory part are not taken into account.

    Examples:
        >>> default_output_path('firmware.bin', '.hex')
        'firmware.hex'
        >>> default_output_path('firmware', '.raw')
        'firmware.raw'
        >>> default_output_path('.hex', '.raw')
        '.raw'
    """

    dirname, basename = os.path.split(input_path)
    index = basename.rfind('.')
    if index < 0:
        return input_path + suffix
    return os.path.join(dirname, basename[:index] + suffix)


def check_distinct_paths(input_path: str, output_path: str) -> None:
    r"""Refuses an output file which is the input file itself.

    Opening the output would truncate the input before it is read.

    Raises:
        click.BadParameter: Both paths refer to the same file.
    """

    if os.path.exists(output_path) and os.path.samefile(input_path, output_path):
        raise click.BadParameter(f'same file as the input file: {output_path!r}',
                                 param_hint="'OUTFILE'")


def print_version(ctx, _, value):

    if not value or ctx.resilient_parsing:
        return

    click.echo(str(__version__))
    ctx.exit()


def setup_logging(debug: bool, verbose: bool) -> None:

    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(format='%(message)s')
    logging.getLogger(__package__).setLevel(level)


def hex_to_raw_stream(
    in_stream: IO,
    out_stream: IO,
    swap: bool = False,
) -> int:
    r"""Converts an Intel HEX byte stream into a raw byte stream.

    Args:
        in_stream (bytes IO):
            Input record lines.

        out_stream (bytes IO):
            Output raw data.

        swap (bool):
            Swaps byte pairs of the raw data.

    Returns:
        int: Number of raw bytes written.
    """

    converter = HexToRawConverter()
    records = HexLineReader(in_stream)

    if swap:
        with wrap_outbound(out_stream) as raw_stream:
            return converter.transfer(records, raw_stream)
    else:
        return converter.transfer(records, out_stream)


def raw_to_hex_stream(
    in_stream: IO,
    out_stream: IO,
    address: int = 0,
    swap: bool = False,
) -> int:
    r"""Converts a raw byte stream into an Intel HEX byte stream.

    The whole input is buffered in memory.

    Args:
        in_stream (bytes IO):
            Input raw data.

        out_stream (bytes IO):
            Output record lines.

        address (int):
            Starting address.

        swap (bool):
            Swaps byte pairs of the raw data.

    Returns:
        int: Number of records written.
    """

    if swap:
        with wrap_inbound(in_stream) as raw_stream:
            data = raw_stream.read()
    else:
        data = in_stream.read()

    return RawToHexConverter().serialize(data, out_stream, address=address)


# ============================================================================

@click.command()
@click.option('-d', '--debug', is_flag=True, help="""
    Enables debug output; implies verbose.
""")
@click.option('-v', '--verbose', is_flag=True, help="""
    Enables verbose output.
""")
@click.option('-r', '--raw-to-hex', 'address', type=ADDRESS, metavar='ADDRESS', help="""
    Converts raw to hex (instead of hex to raw, which is the default),
    with the given starting address.
    Decimal, or hexadecimal if prefixed by "0x" or "$".
""")
@click.option('-s', '--swap', is_flag=True, help="""
    Swaps each pair of adjacent bytes of the raw data.
""")
@click.option('--version', is_flag=True, is_eager=True, expose_value=False,
              callback=print_version, help="""
    Prints the package version number.
""")
@click.argument('infile', type=FILE_PATH_IN)
@click.argument('outfile', type=FILE_PATH_OUT, required=False)
def main(
    debug: bool,
    verbose: bool,
    address: Optional[int],
    swap: bool,
    infile: str,
    outfile: Optional[str],
) -> None:
    r"""Converts between Intel HEX and raw binary files.

    ``INFILE`` is the path of the input file.

    ``OUTFILE`` is the path of the output file.
    By default it is ``INFILE`` with its extension replaced by ``.raw``
    (hex to raw) or ``.hex`` (raw to hex).
    """

    setup_logging(debug, verbose)
    raw_to_hex = address is not None

    if not outfile:
        outfile = default_output_path(infile, HEX_SUFFIX if raw_to_hex else RAW_SUFFIX)

    check_distinct_paths(infile, outfile)

    logger.info('Reading: %s', os.path.abspath(infile))
    logger.info('Writing: %s', os.path.abspath(outfile))

    with open(infile, 'rb') as in_stream, open(outfile, 'wb') as out_stream:
        if raw_to_hex:
            logger.info('Converting RAW -> HEX, starting address: 0x%04X', address)
            raw_to_hex_stream(in_stream, out_stream, address=address, swap=swap)
        else:
            logger.info('Converting HEX -> RAW')
            hex_to_raw_stream(in_stream, out_stream, swap=swap)
