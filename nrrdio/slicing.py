# emacs: -*- mode: python-mode; py-indent-offset: 4; indent-tabs-mode: nil -*-
# vi: set ft=python sts=4 ts=4 sw=4 et:
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
#
#   See COPYING file distributed along with the nrrdio package for the
#   copyright and license terms.
#
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
"""Split an image into one file per index of chosen axes

Axes with ``slice`` set are written as one file per index.  For example,
slicing the Z axis of a 12-slice volume saved as ``scan.nrrd`` gives files
``scan_Z00.nrrd`` to ``scan_Z11.nrrd``, each with a 2D header.

>>> from nrrdio.nrrdheader import NrrdHeader
>>> hdr = NrrdHeader.from_shape((4, 3, 2))
>>> hdr.axes[0].kind = 'space'
>>> hdr.resolve()
>>> mark_sliced(hdr, 'Z')
>>> [name for _, name in enumerate_slices(hdr, 'scan.nrrd')]
['scan_Z0.nrrd', 'scan_Z1.nrrd']
"""
import math

from .filename_parser import slice_file_name
from .nrrdaxis import ROLE_LETTERS


def mark_sliced(hdr, letters):
    """Set ``slice`` on the axes of `hdr` playing roles named by `letters`

    Parameters
    ----------
    hdr : NrrdHeader
        resolved header
    letters : str
        role letters from ``'CXYZT'``, case ignored; absent roles are ignored

    Raises
    ------
    ValueError
        for a letter that is not a role letter, or if every axis of `hdr`
        would be sliced, leaving slice files without axes
    """
    indices = set()
    for letter in letters.upper():
        role = ROLE_LETTERS.find(letter)
        if role < 0:
            raise ValueError(f"'{letter}' is not one of the axis letters {ROLE_LETTERS}")
        if hdr.role_indices[role] > -1:
            indices.add(hdr.role_indices[role])
    indices.update(i for i, axis in enumerate(hdr.axes) if axis.slice)
    if indices and len(indices) == len(hdr.axes):
        raise ValueError(f"Cannot slice all {len(hdr.axes)} axes; "
                         'each slice file needs at least one axis')
    for index in indices:
        hdr.axes[index].slice = True


def n_slice_files(hdr):
    """Number of files :func:`enumerate_slices` would generate"""
    return math.prod(axis.size for axis in hdr.axes if axis.slice)


def enumerate_slices(hdr, filename):
    """Generate a header and file name for each slice file of `hdr`

    Sliced axes are walked in axis order, the last sliced axis varying
    fastest.  Each generated header is a copy of `hdr` with the
    ``slice_index`` of every sliced axis set; it can be passed to
    :func:`~nrrdio.headerwriter.write_header` and
    :func:`~nrrdio.pixelcodec.encode_image`.  Without sliced axes, one copy
    of `hdr` and `filename` are generated.

    Parameters
    ----------
    hdr : NrrdHeader
        resolved header with ``slice`` set on the axes to split
    filename : str
        file name for the whole image

    Yields
    ------
    slice_hdr : NrrdHeader
    slice_filename : str
    """
    yield from _walk(hdr.copy(), 0, filename)


def _walk(hdr, axis_index, filename):
    if axis_index == len(hdr.axes):
        name = slice_file_name(filename, hdr.axes, hdr.detached) if hdr.sliced_axes() else filename
        yield hdr.copy(), name
        return
    axis = hdr.axes[axis_index]
    if not axis.slice:
        yield from _walk(hdr, axis_index + 1, filename)
        return
    for index in range(axis.size):
        axis.slice_index = index
        yield from _walk(hdr, axis_index + 1, filename)
