# emacs: -*- mode: python-mode; py-indent-offset: 4; indent-tabs-mode: nil -*-
# vi: set ft=python sts=4 ts=4 sw=4 et:
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
#
#   See COPYING file distributed along with the nrrdio package for the
#   copyright and license terms.
#
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
"""Read NRRD header text into a :class:`~nrrdio.nrrdheader.NrrdHeader`

The header is read line by line.  The first line is the magic ``NRRD0005``
(any 4-digit version); after it come comment lines starting with ``#`` and
field lines, up to the first blank line or the end of the input.

Standard fields are looked up in a table giving, for each field, whether it
is global, has one value per axis (needs ``dimension`` first) or one value per
space dimension (needs ``space`` or ``space dimension`` first), and the
method that stores it.  Every field may appear only once; ``centers`` and
``centerings`` count as the same field.

>>> hdr = parse_header(b'NRRD0004\\ntype: uint8\\ndimension: 2\\n'
...                    b'sizes: 4 3\\nencoding: raw\\n\\n')
>>> hdr.type, hdr.width, hdr.height, hdr.header_length
('uint8', 4, 3, 60)
"""
import io
import math
import os
import re
import warnings

from .errors import (DuplicateFieldError, FieldCountError, HeaderDataError,
                     KindSizeError, MalformedNumberError, MissingFieldError,
                     NrrdError, NrrdFileError, UnknownFieldError,
                     UnrecognizedValueError, UnsupportedFeatureError,
                     BadMagicError, UnsupportedVersionWarning)
from .fieldgrammar import (is_none, parse_int, parse_real, split_line,
                           split_subfields, split_vectors)
from .imageglobals import logger
from .nrrdaxis import CENTERINGS, kind_axis_size
from .nrrdheader import (MAX_DIMENSION, MAX_SPACE_DIMENSION,
                         SUPPORTED_NRRD_VERSION, NrrdHeader, parse_data_type,
                         parse_encoding, parse_endian, space_dimension)

GLOBAL = 'global'
PER_AXIS = 'per-axis'
PER_SPACE = 'per-space'

_MAGIC_RE = re.compile(r'^NRRD(\d{4})$')
# printf-style integer conversion, as in "I.%03d"
_DIGIT_FORMAT_RE = re.compile(r'(^|[^%])%[\d\-.+*# ]*d')
_WHITESPACE_RE = re.compile(r'\s+')


def _field(name, arity, method):
    return name, arity, method


#: field key (lower case, no spaces) -> (name, arity class, setter)
FIELDS = {
    'type': _field('type', GLOBAL, '_set_type'),
    'encoding': _field('encoding', GLOBAL, '_set_encoding'),
    'endian': _field('endian', GLOBAL, '_set_endian'),
    'min': _field('min', GLOBAL, '_set_min'),
    'max': _field('max', GLOBAL, '_set_max'),
    'oldmin': _field('old min', GLOBAL, '_set_old_min'),
    'oldmax': _field('old max', GLOBAL, '_set_old_max'),
    'sampleunits': _field('sample units', GLOBAL, '_set_sample_units'),
    'content': _field('content', GLOBAL, '_set_content'),
    'dimension': _field('dimension', GLOBAL, '_set_dimension'),
    'lineskip': _field('line skip', GLOBAL, '_set_line_skip'),
    'byteskip': _field('byte skip', GLOBAL, '_set_byte_skip'),
    'datafile': _field('data file', GLOBAL, '_set_data_file'),
    'space': _field('space', GLOBAL, '_set_space'),
    'spacedimension': _field('space dimension', GLOBAL, '_set_space_dimension'),
    # accepted for compatibility; no meaning for the sample types we read
    'blocksize': _field('block size', GLOBAL, None),
    'number': _field('number', GLOBAL, None),
    'sizes': _field('sizes', PER_AXIS, '_set_sizes'),
    'spacings': _field('spacings', PER_AXIS, '_set_spacings'),
    'thicknesses': _field('thicknesses', PER_AXIS, '_set_thicknesses'),
    'centers': _field('centers', PER_AXIS, '_set_centers'),
    'centerings': _field('centers', PER_AXIS, '_set_centers'),
    'axismins': _field('axis mins', PER_AXIS, '_set_axis_mins'),
    'axismaxs': _field('axis maxs', PER_AXIS, '_set_axis_maxs'),
    'units': _field('units', PER_AXIS, '_set_units'),
    'kinds': _field('kinds', PER_AXIS, '_set_kinds'),
    'labels': _field('labels', PER_AXIS, '_set_labels'),
    'spaceunits': _field('space units', PER_SPACE, '_set_space_units'),
    'spaceorigin': _field('space origin', PER_SPACE, '_set_space_origin'),
    'spacedirections': _field('space directions', PER_SPACE, '_set_space_directions'),
    'measurementframe': _field('measurement frame', PER_SPACE, '_set_measurement_frame'),
}


def _real_or_nan(subfield):
    return math.nan if subfield is None else parse_real(subfield)


class HeaderParser:
    """Build a :class:`NrrdHeader` from header lines fed in order

    Parameters
    ----------
    dirname : None or str, optional
        directory of the header file.  When given, a ``data file`` name is
        resolved against it (and then as an absolute path), and must exist.
    """

    def __init__(self, dirname=None):
        self.header = NrrdHeader()
        self.dirname = dirname
        self._seen = set()
        self._kinds_line = None
        self.line_num = 0

    def parse_version(self, line):
        """Check the magic line and store the header version"""
        match = _MAGIC_RE.match(line)
        if match is None:
            if not line.startswith('NRRD'):
                msg = "Missing the magic number, 'NRRDxxxx'. Is this really an NRRD file?"
            else:
                msg = f"Invalid magic number, '{line}'. Should be exactly four digits."
            raise BadMagicError(msg, 1)
        version = int(match.group(1))
        logger.debug('NRRD version: %d', version)
        if version > SUPPORTED_NRRD_VERSION:
            msg = (f'NRRD version {version} is newer than the newest supported '
                   f'version, {SUPPORTED_NRRD_VERSION}; reading anyway')
            logger.debug(msg)
            warnings.warn(msg, UnsupportedVersionWarning, stacklevel=3)
        self.header.version = version

    def parse_line(self, line):
        """Parse one header line that is not the magic line"""
        if line.startswith('#'):
            return
        key, value, is_custom = split_line(line)
        if not key:
            raise UnknownFieldError(
                "Missing field. Each line must contain ': ' or ':=' to define a field.")
        if is_custom:
            if key in self.header.custom_fields:
                raise DuplicateFieldError(f"Duplicate optional field, '{key}'.")
            self.header.custom_fields[key] = value
            return
        key = _WHITESPACE_RE.sub('', key.lower())
        value = value.strip()
        try:
            name, arity, method = FIELDS[key]
        except KeyError:
            raise UnknownFieldError(
                f"Unrecognized standard field: '{key}'. Use := to define custom fields.")
        if name in self._seen:
            raise DuplicateFieldError(f"Duplicate '{name}' field encountered.")
        self._seen.add(name)
        subfields = split_subfields(value)
        if not subfields:
            raise MissingFieldError(f"Missing value for '{name}' field.")
        logger.debug("Field '%s' = '%s'", key, value)
        if arity == PER_SPACE and self.header.space_dim == 0:
            raise MissingFieldError(
                f"'space dimension' must be specified before per-dimension field, '{name}'.")
        if arity == PER_AXIS:
            if self.header.axes is None:
                raise MissingFieldError(
                    f"'dimension' must be specified before per-axis field, '{name}'.")
            if len(subfields) != len(self.header.axes):
                raise FieldCountError(
                    f"'{name}' must specify a value for each of the "
                    f'{len(self.header.axes)} axes.')
        if method is None:
            logger.debug("Ignoring '%s' field", name)
            return
        getattr(self, method)(value, subfields)

    def finish(self, check=True):
        """Check mandatory fields, resolve axis roles and return header"""
        hdr = self.header
        if self._kinds_line is not None:
            try:
                self._check_kind_sizes()
            except NrrdError as err:
                raise err.at_line(self._kinds_line)
        if check:
            hdr.check_fix()
        if hdr.axes is not None:
            hdr.resolve()
        return hdr

    def _check_kind_sizes(self):
        for axis in self.header.axes:
            size = kind_axis_size(axis.kind)
            if size != 0 and size != axis.size:
                raise KindSizeError(f"Kind, '{axis.kind}' must correspond to size {size}.")

    # Global fields

    def _set_type(self, value, subfields):
        self.header.type = parse_data_type(value)

    def _set_encoding(self, value, subfields):
        self.header.encoding = parse_encoding(value)

    def _set_endian(self, value, subfields):
        self.header.endian = parse_endian(value)

    def _set_min(self, value, subfields):
        self.header.min = parse_real(value)

    def _set_max(self, value, subfields):
        self.header.max = parse_real(value)

    def _set_old_min(self, value, subfields):
        self.header.old_min = parse_real(value)

    def _set_old_max(self, value, subfields):
        self.header.old_max = parse_real(value)

    def _set_sample_units(self, value, subfields):
        self.header.sample_units = None if is_none(value) else value

    def _set_content(self, value, subfields):
        self.header.content = None if is_none(value) else value

    def _set_dimension(self, value, subfields):
        n = parse_int(value)
        if n < 1:
            raise HeaderDataError("'dimension' must be positive.")
        if n > MAX_DIMENSION:
            raise UnsupportedFeatureError(f"'dimension'>{MAX_DIMENSION} is not supported.")
        self.header.set_sizes([0] * n)

    def _set_line_skip(self, value, subfields):
        skip = parse_int(value)
        if skip < 0:
            raise HeaderDataError('Line skip must not be negative.')
        self.header.line_skip = skip

    def _set_byte_skip(self, value, subfields):
        skip = parse_int(value)
        if skip < -1:
            raise HeaderDataError("'byte skip' must be non-negative or equal -1.")
        self.header.byte_skip = skip

    def _set_data_file(self, value, subfields):
        if subfields[0] == 'LIST':
            raise UnsupportedFeatureError(
                'Not yet able to handle datafile: LIST specifications.')
        if 4 <= len(subfields) <= 5 and _DIGIT_FORMAT_RE.search(subfields[0]):
            raise UnsupportedFeatureError(
                'Not yet able to handle datafile: sprintf file specifications.')
        path = value
        if self.dirname is not None:
            path = os.path.join(self.dirname, value)
            if not os.path.isfile(path):
                path = value
            if not os.path.isfile(path):
                raise NrrdFileError(f"Can't find image file at '{path}'")
        self.header.detached = True
        self.header.data_file = path

    def _set_space(self, value, subfields):
        hdr = self.header
        if hdr.axes is None:
            raise MissingFieldError("Must specify 'dimension' before 'space'")
        if hdr.space_dim != 0:
            raise HeaderDataError("Only one 'space' or 'space dimension' field is permitted.")
        space_dim = space_dimension(value)
        if space_dim > len(hdr.axes):
            raise HeaderDataError(
                f"'space dimension' is incompatible with 'dimension' = {len(hdr.axes)}.")
        hdr.space = value
        hdr.space_dim = space_dim

    def _set_space_dimension(self, value, subfields):
        hdr = self.header
        if hdr.axes is None:
            raise MissingFieldError("Must specify 'dimension' before 'space dimension'")
        if hdr.space is not None:
            raise HeaderDataError("Only one 'space' or 'space dimension' field is permitted.")
        space_dim = parse_int(value)
        if space_dim < 1:
            raise HeaderDataError("'space dimension' field must be positive.")
        if space_dim > MAX_SPACE_DIMENSION:
            raise UnsupportedFeatureError(
                f"'space dimension' > {MAX_SPACE_DIMENSION} is not supported.")
        if space_dim > len(hdr.axes):
            raise HeaderDataError(
                f"'space dimension' is incompatible with 'dimension' = {len(hdr.axes)}.")
        hdr.space_dim = space_dim

    # Per-space-dimension fields

    def _set_space_units(self, value, subfields):
        space_dim = self.header.space_dim
        if len(subfields) != space_dim:
            raise FieldCountError(
                f"'space units' must specify a value for each of the {space_dim} "
                'spatial dimensions.')
        self.header.space_units = subfields

    def _set_space_origin(self, value, subfields):
        space_dim = self.header.space_dim
        vectors = split_vectors(value)
        if len(vectors) != 1 or vectors[0] is None:
            raise FieldCountError("'space origin' must contain a single vector.")
        if len(vectors[0]) != space_dim:
            raise FieldCountError(
                f"'space origin' must be of dimensionality, 'space dimension' = {space_dim}.")
        self.header.space_origin = vectors[0]

    def _set_space_directions(self, value, subfields):
        space_dim = self.header.space_dim
        vectors = split_vectors(value)
        if len(vectors) != space_dim:
            raise FieldCountError(
                "'space directions' must be a DxD matrix where D = 'space dimension' = "
                f'{space_dim}.')
        # rows may be none
        for i, row in enumerate(vectors):
            if row is None:
                continue
            if len(row) != space_dim:
                raise FieldCountError(
                    f"'space directions' row {i + 1} != 'space dimension' = {space_dim}.")
            if any(math.isinf(x) for x in row):
                raise HeaderDataError("'space directions' must contain finite values.")
        self.header.space_directions = vectors

    def _set_measurement_frame(self, value, subfields):
        space_dim = self.header.space_dim
        vectors = split_vectors(value)
        if len(vectors) != space_dim:
            raise FieldCountError(
                "'measurement frame' must be a DxD matrix where D = 'space dimension' = "
                f'{space_dim}.')
        for i, row in enumerate(vectors):
            if row is None or len(row) != space_dim:
                raise FieldCountError(
                    f"'measurement frame' row {i + 1} != 'space dimension' = {space_dim}.")
        self.header.measurement_frame = vectors

    # Per-axis fields

    def _set_sizes(self, value, subfields):
        for axis, subfield in zip(self.header.axes, subfields):
            if subfield is None:
                raise MalformedNumberError("'sizes' must contain positive values.")
            axis.size = parse_int(subfield)
            if axis.size <= 0:
                raise HeaderDataError("'sizes' must contain positive values.")

    def _set_spacings(self, value, subfields):
        for axis, subfield in zip(self.header.axes, subfields):
            spacing = _real_or_nan(subfield)
            # negative spacings are allowed
            if spacing == 0:
                raise HeaderDataError("'spacings' must contain non-zero values.")
            if math.isinf(spacing):
                raise HeaderDataError("'spacings' must contain finite values.")
            axis.spacing = spacing

    def _set_thicknesses(self, value, subfields):
        for axis, subfield in zip(self.header.axes, subfields):
            thickness = _real_or_nan(subfield)
            if thickness <= 0:
                raise HeaderDataError("'thicknesses' must contain positive values.")
            if math.isinf(thickness):
                raise HeaderDataError("'thicknesses' must contain finite values.")
            axis.thickness = thickness

    def _set_centers(self, value, subfields):
        for axis, subfield in zip(self.header.axes, subfields):
            if subfield is None:
                continue
            center = subfield.lower()
            if center not in CENTERINGS:
                raise UnrecognizedValueError(f"Unrecognised centering scheme: '{subfield}'")
            axis.center = center

    def _set_axis_mins(self, value, subfields):
        for axis, subfield in zip(self.header.axes, subfields):
            axis.min = _real_or_nan(subfield)
            if math.isinf(axis.min):
                raise HeaderDataError("'axis mins' must contain finite values.")

    def _set_axis_maxs(self, value, subfields):
        for axis, subfield in zip(self.header.axes, subfields):
            axis.max = _real_or_nan(subfield)
            if math.isinf(axis.max):
                raise HeaderDataError("'axis maxs' must contain finite values.")

    def _set_units(self, value, subfields):
        for axis, subfield in zip(self.header.axes, subfields):
            axis.unit = subfield

    def _set_kinds(self, value, subfields):
        for axis, subfield in zip(self.header.axes, subfields):
            kind_axis_size(subfield)
            axis.kind = subfield
        if 'sizes' in self._seen and self.header.axes[0].size > 0:
            self._check_kind_sizes()
        else:
            # sizes may come after kinds
            self._kinds_line = self.line_num

    def _set_labels(self, value, subfields):
        for axis, subfield in zip(self.header.axes, subfields):
            axis.label = subfield


def _as_fileobj(source):
    if isinstance(source, str):
        source = source.encode('latin-1')
    if isinstance(source, (bytes, bytearray)):
        return io.BytesIO(source)
    return source


def parse_header(source, dirname=None, check=True):
    """Read NRRD header from `source`

    Reading stops after the blank line ending the header, or at the end of
    the input, so a file object is left positioned at the start of an
    attached pixel payload.

    Parameters
    ----------
    source : bytes, str or file-like
        header text, or binary file object positioned at the magic line
    dirname : None or str, optional
        directory of the header file, used to find a ``data file``
    check : bool, optional
        run the header checks (see :meth:`NrrdHeader.check_fix`) after
        reading the fields

    Returns
    -------
    hdr : NrrdHeader
        header with resolved axis roles and ``header_length`` set to the
        number of bytes read

    Raises
    ------
    NrrdError
        subclass describing the first problem found; ``line_num`` gives the
        1-based header line where it was found, if any.
    """
    fileobj = _as_fileobj(source)
    parser = HeaderParser(dirname)
    raw = fileobj.readline()
    length = len(raw)
    parser.parse_version(raw.decode('latin-1').rstrip('\r\n'))
    line_num = 1
    while True:
        raw = fileobj.readline()
        if not raw:
            break
        length += len(raw)
        line_num += 1
        line = raw.decode('latin-1').rstrip('\r\n')
        if not line.strip():
            break
        parser.line_num = line_num
        try:
            parser.parse_line(line)
        except NrrdError as err:
            raise err.at_line(line_num)
    hdr = parser.finish(check)
    hdr.header_length = length
    return hdr


def parse_custom_fields(text):
    """Parse block of ``key:=value`` lines into an ordered dict

    Comment lines and blank lines are skipped.  Values are kept as written,
    including surrounding spaces.

    >>> parse_custom_fields('# note\\nscanner:=MR 7T\\nsubject:= 12\\n')
    {'scanner': 'MR 7T', 'subject': ' 12'}

    Raises
    ------
    HeaderDataError
        for a line that is not a custom field, or a repeated key; the
        error's ``line_num`` is the line number within `text`
    """
    fields = {}
    for i, line in enumerate(text.split('\n')):
        if line.startswith('#') or not line.strip():
            continue
        key, value, is_custom = split_line(line)
        if not is_custom:
            raise UnknownFieldError("Optional fields must be defined using ':='.", i + 1)
        if not key:
            raise HeaderDataError('Optional fields must define a field key.', i + 1)
        if key in fields:
            raise DuplicateFieldError(f"Duplicate optional field key, '{key}'.", i + 1)
        fields[key] = value
    return fields
