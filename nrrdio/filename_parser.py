# emacs: -*- mode: python-mode; py-indent-offset: 4; indent-tabs-mode: nil -*-
# vi: set ft=python sts=4 ts=4 sw=4 et:
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
#
#   See COPYING file distributed along with the nrrdio package for the
#   copyright and license terms.
#
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
"""Create header, data and slice file names with expected extensions"""
from __future__ import annotations

import os
import pathlib
import typing as ty

from .fieldgrammar import clean_string

if ty.TYPE_CHECKING:  # pragma: no cover
    from .nrrdaxis import NrrdAxis

    FileSpec = str | os.PathLike[str]

#: extension of a header that refers to a separate data file
DETACHED_EXT = '.nhdr'
#: extension of a header followed by its data in the same file
ATTACHED_EXT = '.nrrd'


def _stringify_path(filepath_or_buffer: FileSpec) -> str:
    """Attempt to convert a path-like object to a string.

    Parameters
    ----------
    filepath_or_buffer : str or os.PathLike

    Returns
    -------
    str_filepath_or_buffer : str
    """
    return pathlib.Path(filepath_or_buffer).expanduser().as_posix()


def _iendswith(whole: str, end: str) -> bool:
    return whole.lower().endswith(end.lower())


def splitext(filename: FileSpec) -> tuple[str, str]:
    """Split `filename` at the last ``.`` of its final path component

    >>> splitext('/pth/scan.v2.nrrd')
    ('/pth/scan.v2', '.nrrd')
    >>> splitext('/pth.d/scan')
    ('/pth.d/scan', '')
    """
    filename = _stringify_path(filename)
    extpos = filename.rfind('.')
    if extpos <= filename.rfind('/') + 1:
        return filename, ''
    return filename[:extpos], filename[extpos:]


def is_detached_name(filename: FileSpec) -> bool:
    """True if `filename` names a detached header (``.nhdr``)

    >>> is_detached_name('brain.NHDR'), is_detached_name('brain.nrrd')
    (True, False)
    """
    return _iendswith(_stringify_path(filename), DETACHED_EXT)


def data_file_name(header_name: FileSpec, encoding: str = 'raw') -> str:
    """Name of the data file for detached header `header_name`

    The name has no directory part; it is written as the ``data file`` field
    and is found again beside the header.

    >>> data_file_name('/tmp/brain.nhdr')
    'brain.raw'
    >>> data_file_name('brain.nhdr', 'gzip')
    'brain.raw.gz'
    >>> data_file_name('brain.raw')
    'brain.raw.dat'
    """
    base = os.path.basename(_stringify_path(header_name))
    root, _ = splitext(base)
    fname = clean_string(root) + '.raw'
    if encoding == 'gzip':
        fname += '.gz'
    if fname == base:
        fname += '.dat'
    return fname


def slice_file_name(
    filename: FileSpec,
    axes: ty.Sequence[NrrdAxis],
    detached: bool = False,
) -> str:
    """File name for the slice of `filename` selected by sliced `axes`

    For each axis with ``slice`` set, in axis order, ``_`` plus the axis role
    letter plus the zero padded ``slice_index`` is inserted before the
    extension.  Without an extension, ``.nhdr`` or ``.nrrd`` is added,
    depending on `detached`.

    Parameters
    ----------
    filename : str or os.PathLike
        file name of the whole image
    axes : sequence of NrrdAxis
        axes of the image; only those with ``slice`` set are used
    detached : bool, optional
        whether the header is detached from its data

    Returns
    -------
    slice_name : str
    """
    root, ext = splitext(filename)
    if not ext:
        ext = DETACHED_EXT if detached else ATTACHED_EXT
    parts = [root]
    for axis in axes:
        if axis.slice:
            parts.append(f'_{axis.letter}{axis.slice_index:0{axis.digits_for_size()}d}')
    return ''.join(parts) + ext
