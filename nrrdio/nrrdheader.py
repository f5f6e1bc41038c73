# emacs: -*- mode: python-mode; py-indent-offset: 4; indent-tabs-mode: nil -*-
# vi: set ft=python sts=4 ts=4 sw=4 et:
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
#
#   See COPYING file distributed along with the nrrdio package for the
#   copyright and license terms.
#
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
"""In-memory NRRD header

:class:`NrrdHeader` holds the fields of one NRRD header: the array axes, the
sample type and encoding, the optional physical "space" description, value
ranges and custom ``key:=value`` fields.  Once the axis roles are resolved it
also knows which axis is the channel, X, Y, Z and time axis.

Headers are usually made by :func:`nrrdio.headerparser.parse_header` or by
:func:`nrrdio.calibration.header_from_image`, and turned back into text by
:func:`nrrdio.headerwriter.write_header`.
"""
import copy
import math

import numpy as np

from . import imageglobals
from .batteryrunners import BatteryRunner, Report
from .errors import (HeaderDataError, MissingFieldError, UnrecognizedValueError,
                     UnsupportedFeatureError)
from .fieldgrammar import clean_string
from .nrrdaxis import (CHANNEL, TIME, X, Y, Z, NrrdAxis, resolve_shape,
                       solve_space_indices)
from .volumeutils import Recoder, endian_codes, make_dt_codes, pretty_mapping

SUPPORTED_NRRD_VERSION = 5
MAX_DIMENSION = 5
MAX_SPACE_DIMENSION = 4

_dtdefs = (  # canonical name, numpy type, aliases
    ('uint8', np.uint8, 'uint8_t', 'uchar', 'unsigned char'),
    ('int8', np.int8, 'int8_t', 'signed char'),
    ('uint16', np.uint16, 'uint16_t', 'ushort', 'unsigned short', 'unsigned short int'),
    ('int16', np.int16, 'int16_t', 'short', 'short int', 'signed short', 'signed short int'),
    ('uint32', np.uint32, 'uint32_t', 'uint', 'unsigned int'),
    ('int32', np.int32, 'int32_t', 'int', 'signed int'),
    ('float', np.float32),
    ('double', np.float64),
)
data_type_codes = make_dt_codes(_dtdefs)

#: valid NRRD sample types we cannot read
UNSUPPORTED_TYPES = frozenset((
    'block',
    'int64', 'int64_t', 'longlong', 'long long', 'long long int',
    'signed long long', 'signed long long int',
    'uint64', 'uint64_t', 'ulonglong', 'unsigned long long', 'unsigned long long int',
))

encoding_codes = Recoder((('raw',), ('gzip', 'gz')))

#: valid NRRD encodings we cannot read or write
UNSUPPORTED_ENCODINGS = {
    'bz2': 'BZip2', 'bzip2': 'BZip2',
    'hex': 'hexadecimal',
    'txt': 'ASCII', 'text': 'ASCII', 'ascii': 'ASCII',
}

_space_defs = (  # name, space dimension, abbreviation
    ('right-anterior-superior', 3, 'ras'),
    ('left-anterior-superior', 3, 'las'),
    ('left-posterior-superior', 3, 'lps'),
    ('scanner-xyz', 3),
    ('3d-right-handed', 3),
    ('3d-left-handed', 3),
    ('right-anterior-superior-time', 4, 'rast'),
    ('left-anterior-superior-time', 4, 'last'),
    ('left-posterior-superior-time', 4, 'lpst'),
    ('scanner-xyz-time', 4),
    ('3d-right-handed-time', 4),
    ('3d-left-handed-time', 4),
)
space_codes = Recoder(_space_defs, fields=('code', 'dim'))


def parse_data_type(name):
    """Canonical NRRD type name for `name`, matched ignoring case"""
    lowered = name.lower()
    if lowered in UNSUPPORTED_TYPES:
        raise UnsupportedFeatureError(f"'{name}' data type is not supported.")
    try:
        return data_type_codes.code[lowered]
    except KeyError:
        raise UnrecognizedValueError(f"Unrecognized data type, '{name}'.")


def parse_encoding(name):
    """Canonical NRRD encoding name for `name`, matched ignoring case"""
    lowered = name.lower()
    if lowered in UNSUPPORTED_ENCODINGS:
        raise UnsupportedFeatureError(
            f'The {UNSUPPORTED_ENCODINGS[lowered]} encoding is not supported.')
    try:
        return encoding_codes.code[lowered]
    except KeyError:
        raise UnrecognizedValueError(f"Unrecognized encoding, '{name}'.")


def parse_endian(name):
    lowered = name.lower()
    if lowered not in ('little', 'big'):
        raise UnrecognizedValueError(f"Endianness, '{name}', should be 'little' or 'big'.")
    return lowered


def space_dimension(space):
    """Number of space dimensions of the named coordinate `space`

    >>> space_dimension('RAS'), space_dimension('scanner-xyz-time')
    (3, 4)
    """
    try:
        return space_codes.dim[space.lower()]
    except KeyError:
        raise UnrecognizedValueError(f"Unrecognised coordinate space, '{space}'.")


class NrrdHeader:
    """Fields of one NRRD header, with resolved axis roles

    Unset floating point fields are NaN, unset strings and arrays None.
    ``space_dim`` is 0 when the header has no space fields; otherwise
    ``space_units``, ``space_origin``, ``space_directions`` and
    ``measurement_frame`` each have ``space_dim`` entries when set.
    ``byte_skip`` may be -1, meaning the payload is the last bytes of the data
    file.
    """

    def __init__(self):
        self.version = 0
        self.axes = None
        self.type = None
        self.encoding = None
        self.endian = None
        self.min = math.nan
        self.max = math.nan
        self.old_min = math.nan
        self.old_max = math.nan
        self.sample_units = None
        self.content = None
        self.space = None
        self.space_dim = 0
        self.space_units = None
        self.space_origin = None
        self.space_directions = None
        self.measurement_frame = None
        self.custom_fields = {}
        self.detached = False
        self.data_file = None
        self.byte_skip = 0
        self.line_skip = 0
        # bytes taken by the header text, including its terminating blank line
        self.header_length = 0
        self.c_axis = self.x_axis = self.y_axis = self.z_axis = self.t_axis = -1
        self.x_space = self.y_space = self.z_space = self.t_space = -1

    @classmethod
    def from_shape(klass, sizes, data_type='uint8', encoding='raw', endian='little'):
        """Make resolved header with axes of `sizes` and default fields

        >>> hdr = NrrdHeader.from_shape((3, 64, 32))
        >>> hdr.n_channels, hdr.width, hdr.height
        (3, 64, 32)
        """
        hdr = klass()
        hdr.type = parse_data_type(data_type)
        hdr.encoding = parse_encoding(encoding)
        hdr.endian = endian
        hdr.set_sizes(sizes)
        hdr.resolve()
        return hdr

    def set_sizes(self, sizes):
        self.axes = [NrrdAxis(size=int(size)) for size in sizes]

    def copy(self):
        return copy.deepcopy(self)

    @property
    def dimension(self):
        return 0 if self.axes is None else len(self.axes)

    @property
    def role_indices(self):
        return self.c_axis, self.x_axis, self.y_axis, self.z_axis, self.t_axis

    @property
    def space_indices(self):
        return self.x_space, self.y_space, self.z_space, self.t_space

    def set_layout(self, role_indices):
        """Assign axis roles from C, X, Y, Z, T axis indices (-1 if absent)"""
        (self.c_axis, self.x_axis, self.y_axis,
         self.z_axis, self.t_axis) = role_indices
        for axis in self.axes:
            axis.role = None
        for role, index in enumerate(role_indices):
            if index > -1:
                self.axes[index].role = role
        (self.x_space, self.y_space,
         self.z_space, self.t_space) = solve_space_indices(role_indices)

    def resolve(self):
        """Work out and store the role of each axis"""
        self.set_layout(resolve_shape(self.axes, self.space_dim))

    def axis_for_role(self, role):
        """Axis playing `role`, or None if no axis plays it"""
        index = self.role_indices[role]
        return None if index < 0 else self.axes[index]

    def _role_size(self, role):
        axis = self.axis_for_role(role)
        return 1 if axis is None else axis.size

    @property
    def n_channels(self):
        return self._role_size(CHANNEL)

    @property
    def width(self):
        return self._role_size(X)

    @property
    def height(self):
        return self._role_size(Y)

    @property
    def n_slices(self):
        return self._role_size(Z)

    @property
    def n_frames(self):
        return self._role_size(TIME)

    @property
    def n_images(self):
        """Number of 2D planes, counting each channel separately"""
        return self.n_channels * self.n_slices * self.n_frames

    @property
    def bytes_per_sample(self):
        return data_type_codes.dtype[self.type].itemsize

    def get_data_dtype(self):
        """numpy dtype of samples on disk, with the header byte order

        >>> hdr = NrrdHeader.from_shape((2, 2), 'short', endian='big')
        >>> hdr.get_data_dtype().str
        '>i2'
        """
        dt = data_type_codes.dtype[self.type]
        if dt.itemsize == 1:
            return dt
        return dt.newbyteorder(endian_codes.code[self.endian or 'little'])

    def payload_size(self):
        """Number of bytes of pixel data described by the header"""
        return self.width * self.height * self.n_images * self.bytes_per_sample

    def masked_axes(self):
        """Axes not flagged for slicing, in axis order"""
        return [axis for axis in self.axes if not axis.slice]

    def masked_space_indices(self):
        """Space indices of the X, Y, Z, T roles whose axes are not sliced

        For example, with axes C, X, Y, Z where Y is sliced, the space indices
        of X and Z are returned: ``[0, 2]``.
        """
        indices = []
        for role, space_index in zip((X, Y, Z, TIME), self.space_indices):
            axis = self.axis_for_role(role)
            if axis is not None and not axis.slice:
                indices.append(space_index)
        return indices

    def sliced_axes(self):
        return [axis for axis in self.axes if axis.slice]

    def custom_fields_block(self):
        """Custom fields as ``key:=value`` lines, in insertion order"""
        return ''.join(f'{clean_string(key)}:={clean_string(value)}\n'
                       for key, value in self.custom_fields.items())

    def new_space_origin(self):
        self.space_origin = np.full(self.space_dim, np.nan)

    def new_space_directions(self, fill_with_zeros=True):
        fill = 0.0 if fill_with_zeros else np.nan
        self.space_directions = [np.full(self.space_dim, fill)
                                 for i in range(self.space_dim)]

    def new_space_units(self):
        self.space_units = [None] * self.space_dim

    def _summary(self):
        axes = self.axes or []
        layout = ''.join(axis.letter for axis in axes)
        return {
            'version': self.version,
            'type': self.type,
            'endian': self.endian,
            'encoding': self.encoding,
            'dimension': self.dimension,
            'sizes': ' '.join(str(axis.size) for axis in axes),
            'layout': layout,
            'space': self.space if self.space else self.space_dim,
            'detached': self.detached,
            'data file': self.data_file,
            'custom fields': len(self.custom_fields),
        }

    def __str__(self):
        return f'{self.__class__}\n' + pretty_mapping(self._summary())

    def check_fix(self, logger=None, error_level=None):
        """Check header fields and fix what can be fixed

        Parameters
        ----------
        logger : None or logging.Logger
        error_level : None or int
            Level of error severity at which to raise error.  Any error of
            severity >= `error_level` will cause an exception.
        """
        if logger is None:
            logger = imageglobals.logger
        if error_level is None:
            error_level = imageglobals.error_level
        battrun = BatteryRunner(self.__class__._get_checks())
        self, reports = battrun.check_fix(self)
        for report in reports:
            report.log_raise(logger, error_level)

    def diagnose(self):
        """Messages for problems the header checks find, empty if none

        The header is not changed.
        """
        battrun = BatteryRunner(self.__class__._get_checks())
        reports = battrun.check_only(self)
        return '\n'.join([report.message for report in reports if report.message])

    @classmethod
    def _get_checks(klass):
        """Return sequence of check functions for this class"""
        return (klass._chk_type,
                klass._chk_dimension,
                klass._chk_sizes,
                klass._chk_encoding,
                klass._chk_byte_skip,
                klass._chk_endian)

    """ Check functions in format expected by BatteryRunner class """

    @staticmethod
    def _chk_type(hdr, fix=False):
        rep = Report(MissingFieldError)
        if hdr.type is not None:
            return hdr, rep
        rep.problem_level = 40
        rep.problem_msg = "'type' field must be specified."
        if fix:
            rep.fix_msg = 'not attempting fix'
        return hdr, rep

    @staticmethod
    def _chk_dimension(hdr, fix=False):
        rep = Report(MissingFieldError)
        if hdr.axes is not None:
            return hdr, rep
        rep.problem_level = 40
        rep.problem_msg = "'dimension' field must be specified."
        if fix:
            rep.fix_msg = 'not attempting fix'
        return hdr, rep

    @staticmethod
    def _chk_sizes(hdr, fix=False):
        rep = Report(MissingFieldError)
        if hdr.axes is None or all(axis.size > 0 for axis in hdr.axes):
            return hdr, rep
        rep.problem_level = 40
        rep.problem_msg = "'sizes' field must be specified."
        if fix:
            rep.fix_msg = 'not attempting fix'
        return hdr, rep

    @staticmethod
    def _chk_encoding(hdr, fix=False):
        rep = Report(MissingFieldError)
        if hdr.encoding is not None:
            return hdr, rep
        rep.problem_level = 40
        rep.problem_msg = "'encoding' field must be specified."
        if fix:
            rep.fix_msg = 'not attempting fix'
        return hdr, rep

    @staticmethod
    def _chk_byte_skip(hdr, fix=False):
        rep = Report(HeaderDataError)
        if hdr.byte_skip != -1 or hdr.encoding != 'gzip':
            return hdr, rep
        rep.problem_level = 40
        rep.problem_msg = "'byte skip' cannot be -1 when compression is enabled."
        if fix:
            rep.fix_msg = 'not attempting fix'
        return hdr, rep

    @staticmethod
    def _chk_endian(hdr, fix=False):
        rep = Report(HeaderDataError)
        if hdr.endian is not None or hdr.type is None or hdr.bytes_per_sample < 2:
            return hdr, rep
        rep.problem_level = 30
        rep.problem_msg = f"'endian' field missing for '{hdr.type}' samples"
        if fix:
            hdr.endian = 'little'
            rep.fix_msg = 'assuming little endian'
        return hdr, rep