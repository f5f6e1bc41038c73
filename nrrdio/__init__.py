# emacs: -*- mode: python-mode; py-indent-offset: 4; indent-tabs-mode: nil -*-
# vi: set ft=python sts=4 ts=4 sw=4 et:
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
#
#   See COPYING file distributed along with the nrrdio package for the
#   copyright and license terms.
#
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##

from .info import __version__
from .info import long_description as __doc__

__doc__ += """
Quickstart
==========

::

   import nrrdio

   img = nrrdio.load('my_file.nrrd')
   data = img.dataobj              # (T, Z, C, Y, X) array
   print(img.header)
   print(img.calibration.pixel_width)

   nrrdio.save(img, 'my_file_copy.nhdr', encoding='gzip')
   nrrdio.save(img, 'planes.nrrd', slice_axes='Z')
"""

# module imports
from . import errors, imageglobals

# object imports
from .calibration import Calibration
from .headerparser import parse_custom_fields, parse_header
from .headerwriter import write_header
from .loadsave import NrrdImage, load, load_header, save
from .nrrdheader import NrrdHeader
from .pixelcodec import decode_image, encode_image
from .slicing import enumerate_slices


def test(label=None, verbose=1, extra_argv=None, doctests=False, coverage=False):
    """
    Run tests for nrrdio using pytest

    Parameters
    ----------
    label : None
        Unused.
    verbose: int, optional
        Verbosity value for test outputs. Positive values increase verbosity, and
        negative values decrease it. Default is 1.
    extra_argv : list, optional
        List with any extra arguments to pass to pytest.
    doctests: bool, optional
        If True, run doctests in module. Default is False.
    coverage: bool, optional
        If True, report coverage of nrrdio code. Default is False.
        (This requires the ``pytest-cov`` plugin.)

    Returns
    -------
    code : ExitCode
        Returns the result of running the tests as a ``pytest.ExitCode`` enum
    """
    import pytest

    args = []

    if label is not None:
        raise NotImplementedError('Labels cannot be set at present')

    verbose = int(verbose)
    if verbose > 0:
        args.append('-' + 'v' * verbose)
    elif verbose < 0:
        args.append('-' + 'q' * -verbose)

    if extra_argv:
        args.extend(extra_argv)
    if doctests:
        args.append('--doctest-modules')
    if coverage:
        args.extend(['--cov', 'nrrdio'])

    args.extend(['--pyargs', 'nrrdio'])

    return pytest.main(args=args)
