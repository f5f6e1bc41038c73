#!python
# emacs: -*- mode: python-mode; py-indent-offset: 4; indent-tabs-mode: nil -*-
# vi: set ft=python sts=4 ts=4 sw=4 et:
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
#
#   See COPYING file distributed along with the nrrdio package for the
#   copyright and license terms.
#
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
"""Print NRRD diagnostics for header files"""

import os
from argparse import ArgumentParser

import nrrdio
from nrrdio.errors import NrrdError
from nrrdio.headerparser import parse_header
from nrrdio.openers import Opener

__license__ = 'MIT'


def main(args=None):
    """Go go team"""
    parser = ArgumentParser(description=__doc__)
    parser.add_argument('--version', action='version', version=f'%(prog)s {nrrdio.__version__}')
    parser.add_argument('files', nargs='*', metavar='FILE', help='NRRD file names')

    args = parser.parse_args(args=args)

    n_bad = 0
    for fname in args.files:
        try:
            with Opener(fname) as fobj:
                hdr = parse_header(fobj, os.path.dirname(fname), check=False)
        except (NrrdError, OSError) as err:
            print(f'Cannot read header of "{fname}": {err}')
            n_bad += 1
            continue
        result = hdr.diagnose()
        if len(result):
            print(f'Picky header check output for "{fname}"\n')
            print(result + '\n')
            n_bad += 1
        else:
            print(f'Header for "{fname}" is clean')
    return 1 if n_bad else 0
