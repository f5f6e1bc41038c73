# emacs: -*- mode: python-mode; py-indent-offset: 4; indent-tabs-mode: nil -*-
# vi: set ft=python sts=4 ts=4 sw=4 et:
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
#
#   See COPYING file distributed along with the nrrdio package for the
#   copyright and license terms.
#
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
"""Convert between NRRD pixel payloads and planar image arrays

On disk, samples are interleaved with the channel varying fastest, then X,
then Y, then Z, then time.  In memory, an image is an array of shape
``(T, Z, C, Y, X)`` holding one of three *planar kinds*:

* ``uint8`` for ``uint8`` and ``int8`` samples.  Signed samples have 0x80
  added, so that -128 is stored as 0;
* ``uint16`` for ``uint16`` and ``int16`` samples, ``int16`` with 0x8000
  added;
* ``float32`` for all other sample types.  ``double`` samples lose precision.

Disk linear index ``i`` within a ``(Z, T)`` plane group holds channel
``i % nc`` of in-plane pixel ``i // nc``.

>>> from nrrdio.nrrdheader import NrrdHeader
>>> hdr = NrrdHeader.from_shape((2, 3), 'int16')
>>> import io
>>> bio = io.BytesIO()
>>> encode_image(hdr, np.arange(6, dtype=np.uint16).reshape(1, 1, 1, 3, 2), bio)
>>> decode_image(hdr, io.BytesIO(bio.getvalue())).ravel().tolist()
[0, 1, 2, 3, 4, 5]
"""
import warnings

import numpy as np

from .errors import ImageDataError, TruncatedDataWarning, UnsupportedSampleKindError
from .imageglobals import logger
from .nrrdaxis import CHANNEL, TIME, X, Y, Z

READ_CHUNK_MIN = 8192
READ_CHUNK_DIVISOR = 25
WRITE_CHUNK_MIN = 65536
WRITE_CHUNK_DIVISOR = 50

#: packed color sample dtype, which NRRD files cannot hold
RGB_DTYPE = np.dtype([('R', 'u1'), ('G', 'u1'), ('B', 'u1')])

_PLANAR_KINDS = {
    np.dtype(np.uint8): 'uint8',
    np.dtype(np.uint16): 'uint16',
    np.dtype(np.float32): 'float32',
}

# NRRD type of samples stored in memory with an added offset
_SIGN_FLIPS = {'int8': (np.uint8, 0x80), 'int16': (np.uint16, 0x8000)}


def planar_kind(dtype):
    """Name of the planar kind of in-memory `dtype`

    >>> planar_kind(np.float32)
    'float32'

    Raises
    ------
    UnsupportedSampleKindError
        for packed color samples
    ImageDataError
        for other dtypes that are not a planar kind
    """
    dt = np.dtype(dtype)
    if dt.names is not None:
        raise UnsupportedSampleKindError('RGB data is not supported.')
    try:
        return _PLANAR_KINDS[dt.newbyteorder('=')]
    except KeyError:
        raise ImageDataError(f'Unsupported pixel data type {dt}; '
                             'expecting uint8, uint16 or float32')


def memory_dtype(type_name):
    """In-memory dtype for samples of NRRD type `type_name`"""
    if type_name in ('uint8', 'int8'):
        return np.dtype(np.uint8)
    if type_name in ('uint16', 'int16'):
        return np.dtype(np.uint16)
    return np.dtype(np.float32)


def read_chunk_size(byte_count):
    """Bytes to read at a time for a plane group of `byte_count` bytes

    The payload is read one plane group (all channels of one ``(Z, T)``
    plane) at a time, and a read never spans two plane groups, so the size
    is a fraction of the plane group rather than of the whole payload.  It
    is a multiple of :data:`READ_CHUNK_MIN`, so that no sample is split
    between chunks.

    >>> read_chunk_size(1000), read_chunk_size(25 * 20000)
    (8192, 16384)
    """
    size = byte_count // READ_CHUNK_DIVISOR
    if size <= READ_CHUNK_MIN:
        return READ_CHUNK_MIN
    return size // READ_CHUNK_MIN * READ_CHUNK_MIN


def write_chunk_size(byte_count, whole=False):
    """Bytes to write at a time for a plane group of `byte_count` bytes"""
    if whole or byte_count < 4:
        return byte_count
    size = max(byte_count // WRITE_CHUNK_DIVISOR, WRITE_CHUNK_MIN)
    size = min(size, byte_count)
    return size // 4 * 4


class SliceRange:
    """Part of an image selected by the sliced axes of a header

    Each role has a start and a count; an axis with ``slice`` set contributes
    only its ``slice_index``.

    >>> from nrrdio.nrrdheader import NrrdHeader
    >>> hdr = NrrdHeader.from_shape((2, 5, 4, 3))
    >>> hdr.axes[3].slice, hdr.axes[3].slice_index = True, 1
    >>> sr = SliceRange(hdr)
    >>> sr.nc, sr.nx, sr.ny, (sr.z0, sr.z1)
    (2, 5, 4, (1, 2))
    """

    def __init__(self, hdr):
        self.c0, self.nc = self._extent(hdr, CHANNEL)
        self.x0, self.nx = self._extent(hdr, X)
        self.y0, self.ny = self._extent(hdr, Y)
        z0, nz = self._extent(hdr, Z)
        t0, nt = self._extent(hdr, TIME)
        self.z0, self.z1 = z0, z0 + nz
        self.t0, self.t1 = t0, t0 + nt
        self.width = hdr.width

    @staticmethod
    def _extent(hdr, role):
        axis = hdr.axis_for_role(role)
        if axis is None:
            return 0, 1
        if axis.slice:
            return axis.slice_index, 1
        return 0, axis.size

    @property
    def pixel_offset(self):
        """Offset of the first selected pixel within a full plane"""
        return self.x0 + self.y0 * self.width

    def plane_shape(self):
        return self.nc, self.ny, self.nx

    def select(self, data, t, z):
        """Selected part of plane ``data[t, z]`` as a ``(C, Y, X)`` view"""
        return data[t, z,
                    self.c0:self.c0 + self.nc,
                    self.y0:self.y0 + self.ny,
                    self.x0:self.x0 + self.nx]


class _ChunkReader:
    """Read fixed byte counts, giving zeros after the end of the stream"""

    def __init__(self, fileobj):
        self.fileobj = fileobj
        self.at_eof = False

    def read(self, byte_count, chunk_size):
        out = bytearray(byte_count)
        pos = 0
        while pos < byte_count and not self.at_eof:
            want = min(chunk_size, byte_count - pos)
            got = 0
            while got < want:
                try:
                    chunk = self.fileobj.read(want - got)
                except EOFError:
                    # truncated compressed stream
                    chunk = b''
                if not chunk:
                    self._hit_eof(pos + got)
                    break
                out[pos + got:pos + got + len(chunk)] = chunk
                got += len(chunk)
            pos += got
        return out

    def _hit_eof(self, n_read):
        self.at_eof = True
        logger.debug('EOF after %d bytes of plane; filling with zeros', n_read)
        warnings.warn('Reached the end of the file unexpectedly; '
                      'the image may be truncated.', TruncatedDataWarning, stacklevel=4)


def _decode_plane(raw, hdr, shape):
    """Samples in `raw` bytes as planar ``(C, Y, X)`` array"""
    nc, ny, nx = shape
    disk = np.frombuffer(raw, dtype=hdr.get_data_dtype())
    if hdr.type in _SIGN_FLIPS:
        udtype, flip = _SIGN_FLIPS[hdr.type]
        values = disk.astype(disk.dtype.newbyteorder('=')).view(udtype) ^ udtype(flip)
    else:
        values = disk.astype(memory_dtype(hdr.type))
    return values.reshape(ny, nx, nc).transpose(2, 0, 1)


def iter_planes(hdr, fileobj):
    """Generate planar ``(C, Y, X)`` arrays read from payload stream

    Planes come in order of Z, then time.  A payload that ends early gives
    zero samples, and one :class:`TruncatedDataWarning` for the whole image.
    Stop iterating to stop reading.

    Parameters
    ----------
    hdr : NrrdHeader
        resolved header
    fileobj : file-like
        binary stream positioned at the first payload byte

    Yields
    ------
    plane : ndarray
        array of the in-memory dtype for ``hdr.type``
    """
    shape = (hdr.n_channels, hdr.height, hdr.width)
    byte_count = hdr.bytes_per_sample * shape[0] * shape[1] * shape[2]
    chunk_size = read_chunk_size(byte_count)
    logger.debug('Reading %d planes of %d bytes in chunks of %d bytes',
                 hdr.n_slices * hdr.n_frames, byte_count, chunk_size)
    reader = _ChunkReader(fileobj)
    for t in range(hdr.n_frames):
        for z in range(hdr.n_slices):
            yield _decode_plane(reader.read(byte_count, chunk_size), hdr, shape)


def decode_image(hdr, fileobj):
    """Read the whole payload into a ``(T, Z, C, Y, X)`` array

    See :func:`iter_planes`.
    """
    shape = (hdr.n_frames, hdr.n_slices, hdr.n_channels, hdr.height, hdr.width)
    data = np.empty(shape, dtype=memory_dtype(hdr.type))
    planes = iter_planes(hdr, fileobj)
    for t in range(hdr.n_frames):
        for z in range(hdr.n_slices):
            data[t, z] = next(planes)
    return data


def _encode_plane(plane, hdr):
    """Interleaved disk bytes for planar ``(C, Y, X)`` array"""
    out_dtype = hdr.get_data_dtype()
    if hdr.type in _SIGN_FLIPS:
        udtype, flip = _SIGN_FLIPS[hdr.type]
        values = (plane.astype(udtype) ^ udtype(flip)).view(out_dtype.newbyteorder('='))
        values = values.astype(out_dtype)
    else:
        values = plane.astype(out_dtype)
    return values.transpose(1, 2, 0).tobytes()


def encode_image(hdr, data, fileobj, whole_buffer=False):
    """Write the part of `data` selected by `hdr` to payload stream

    Parameters
    ----------
    hdr : NrrdHeader
        resolved header giving sample type, byte order and, through axes
        with ``slice`` set, the part of `data` to write
    data : array-like
        ``(T, Z, C, Y, X)`` array of one of the planar kinds
    fileobj : file-like
        binary stream to write to.  It is not closed.
    whole_buffer : bool, optional
        write each plane group with a single call, rather than in chunks

    Raises
    ------
    UnsupportedSampleKindError
        if `data` holds packed color samples
    ImageDataError
        if `data` has another unsupported dtype, or does not match `hdr`
    """
    data = np.asanyarray(data)
    planar_kind(data.dtype)
    full_shape = (hdr.n_frames, hdr.n_slices, hdr.n_channels, hdr.height, hdr.width)
    if data.shape != full_shape:
        raise ImageDataError(f'Data shape {data.shape} does not match header shape {full_shape}')
    srange = SliceRange(hdr)
    for t in range(srange.t0, srange.t1):
        for z in range(srange.z0, srange.z1):
            raw = _encode_plane(srange.select(data, t, z), hdr)
            chunk_size = write_chunk_size(len(raw), whole_buffer)
            for start in range(0, len(raw), max(chunk_size, 1)):
                fileobj.write(raw[start:start + chunk_size])
