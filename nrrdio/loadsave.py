# emacs: -*- mode: python-mode; py-indent-offset: 4; indent-tabs-mode: nil -*-
# vi: set ft=python sts=4 ts=4 sw=4 et:
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
#
#   See COPYING file distributed along with the nrrdio package for the
#   copyright and license terms.
#
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
# module imports
"""Utilities to load and save NRRD images"""
from __future__ import annotations

import os
import typing as ty

import numpy as np

from ._compression import wrap_payload
from .calibration import Calibration, calibration_from_header, header_from_image
from .errors import EndOfStreamError, NrrdFileError
from .filename_parser import _stringify_path, data_file_name, is_detached_name
from .headerparser import parse_header
from .headerwriter import write_header
from .imageglobals import logger
from .nrrdheader import parse_encoding
from .openers import Opener
from .pixelcodec import decode_image, encode_image
from .slicing import enumerate_slices, mark_sliced, n_slice_files
from .volumeutils import skip_bytes, skip_lines

if ty.TYPE_CHECKING:  # pragma: no cover
    from .filename_parser import FileSpec
    from .nrrdheader import NrrdHeader


class NrrdImage:
    """Image data with the NRRD header and calibration it goes with

    Parameters
    ----------
    dataobj : array-like
        ``(T, Z, C, Y, X)`` array of uint8, uint16 or float32 values
    header : None or NrrdHeader, optional
        header the image was read with, used as template when saving
    calibration : None or Calibration, optional
        physical calibration; default is unscaled
    """

    def __init__(self, dataobj, header=None, calibration=None):
        self._dataobj = np.asanyarray(dataobj)
        self._header = header
        self._calibration = Calibration() if calibration is None else calibration

    @property
    def dataobj(self):
        return self._dataobj

    @property
    def header(self):
        return self._header

    @property
    def calibration(self):
        return self._calibration

    @property
    def shape(self):
        return self._dataobj.shape

    def get_data_dtype(self):
        return self._dataobj.dtype

    def get_values(self):
        """Sample values as float64, with the calibration value offset added

        Signed integer samples are stored unsigned in memory; this gives
        back their signed values.
        """
        return self._dataobj.astype(np.float64) + self._calibration.value_offset

    def __str__(self):
        return '\n'.join((f'{self.__class__}',
                          f'data shape {self.shape}',
                          'header:',
                          f'{self._header}',
                          f'calibration: {self._calibration!r}'))

    @classmethod
    def from_filename(klass, filename: FileSpec) -> NrrdImage:
        return load(filename)

    def to_filename(self, filename: FileSpec, **kwargs) -> bool:
        r"""Write image to files implied by `filename`

        See :func:`save` for the keyword arguments.
        """
        return save(self, filename, **kwargs)


def _payload_stream(hdr: NrrdHeader, fileobj, file_size: int):
    """Set up `fileobj` to read the pixel payload of `hdr`

    Lines, then compression, then bytes are skipped.  A byte skip of -1
    means the payload is the last bytes of the (uncompressed) file.
    """
    skip_lines(fileobj, hdr.line_skip)
    stream = wrap_payload(fileobj, hdr.encoding, 'rb')
    if hdr.byte_skip == -1:
        skip = file_size - hdr.payload_size() - fileobj.tell()
        if skip < 0:
            raise EndOfStreamError(
                f'File is {-skip} bytes too short for the {hdr.payload_size()} byte image.')
        fileobj.seek(skip, 1)
    else:
        skip_bytes(stream, hdr.byte_skip)
    return stream


def _read_data(hdr: NrrdHeader, fileobj, file_size: int) -> np.ndarray:
    stream = _payload_stream(hdr, fileobj, file_size)
    try:
        return decode_image(hdr, stream)
    finally:
        if stream is not fileobj:
            stream.close()


def load_header(filename: FileSpec) -> NrrdHeader:
    """Read the header of NRRD file `filename`"""
    filename = _stringify_path(filename)
    with Opener(filename) as fobj:
        return parse_header(fobj, os.path.dirname(filename))


def load(filename: FileSpec) -> NrrdImage:
    r"""Load NRRD image from `filename`

    `filename` is an attached header (usually ``.nrrd``), or a detached
    header (usually ``.nhdr``) whose ``data file`` is found beside it.

    Parameters
    ----------
    filename : str or os.PathLike
       specification of file to load

    Returns
    -------
    img : NrrdImage
    """
    filename = _stringify_path(filename)
    try:
        stat_result = os.stat(filename)
    except OSError:
        raise NrrdFileError(f"No such file or no access: '{filename}'")
    if stat_result.st_size <= 0:
        raise NrrdFileError(f"Empty file: '{filename}'")
    with Opener(filename) as fobj:
        hdr = parse_header(fobj, os.path.dirname(filename))
        logger.debug('Read header of %s:\n%s', filename, hdr)
        if not hdr.detached:
            data = _read_data(hdr, fobj, stat_result.st_size)
    if hdr.detached:
        with Opener(hdr.data_file) as fobj:
            data = _read_data(hdr, fobj, os.stat(hdr.data_file).st_size)
    return NrrdImage(data, hdr, calibration_from_header(hdr))


def _may_write(filename: str, confirm_overwrite) -> bool:
    if confirm_overwrite is None or not os.path.exists(filename):
        return True
    return bool(confirm_overwrite(filename))


def _write_data(hdr: NrrdHeader, data, fileobj) -> None:
    stream = wrap_payload(fileobj, hdr.encoding, 'wb', Opener.default_compresslevel)
    try:
        encode_image(hdr, data, stream)
    finally:
        if stream is not fileobj:
            stream.close()


def _write_nrrd(hdr: NrrdHeader, data, filename: str, confirm_overwrite) -> bool:
    """Write one header, and its data; False if an overwrite was declined"""
    if not _may_write(filename, confirm_overwrite):
        return False
    with Opener(filename, 'wb') as fobj:
        fobj.write(write_header(hdr, filename))
        if not hdr.detached:
            _write_data(hdr, data, fobj)
    if hdr.detached:
        data_name = os.path.join(os.path.dirname(filename),
                                 data_file_name(filename, hdr.encoding))
        if not _may_write(data_name, confirm_overwrite):
            return False
        with Opener(data_name, 'wb') as fobj:
            _write_data(hdr, data, fobj)
    return True


def save(
    img: NrrdImage,
    filename: FileSpec,
    detached: bool | None = None,
    encoding: str | None = None,
    slice_axes: str = '',
    confirm_overwrite: ty.Callable[[str], bool] | None = None,
) -> bool:
    """Save an image to file(s)

    Parameters
    ----------
    img : NrrdImage
        image to save
    filename : str or os.PathLike
        file name of the header.  With sliced axes, this is the name the
        slice file names are made from.
    detached : None or bool, optional
        write the data to a separate file.  Default is True for ``.nhdr``
        file names.
    encoding : None or str, optional
        ``'raw'`` or ``'gzip'``; default is the encoding of the image header,
        or ``'raw'``
    slice_axes : str, optional
        role letters (from ``'CXYZT'``) of axes to write one file per index
    confirm_overwrite : None or callable, optional
        called with the name of each file that already exists; saving stops
        if it returns False.  None means always overwrite.

    Returns
    -------
    saved : bool
        False if saving stopped because an overwrite was declined.  Files
        written before that are left in place.
    """
    filename = _stringify_path(filename)
    hdr = header_from_image(img.dataobj, img.calibration, img.header)
    hdr.detached = is_detached_name(filename) if detached is None else detached
    if encoding is not None:
        hdr.encoding = parse_encoding(encoding)
    mark_sliced(hdr, slice_axes)
    logger.debug('Saving %d file(s) for %s', n_slice_files(hdr), filename)
    for slice_hdr, slice_name in enumerate_slices(hdr, filename):
        if not _write_nrrd(slice_hdr, img.dataobj, slice_name, confirm_overwrite):
            logger.info('Not overwriting %s; stopping', slice_name)
            return False
    return True
