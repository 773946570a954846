"""
Entry point module, in case you use `python -m hex2raw`.

The command line app itself lives in :mod:`hex2raw.cli`, so that importing
it does not run it twice (see PEP 338).
"""
from .cli import main

if __name__ == '__main__':  # pragma: no cover
    main(prog_name='hex2raw')
