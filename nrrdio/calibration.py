# emacs: -*- mode: python-mode; py-indent-offset: 4; indent-tabs-mode: nil -*-
# vi: set ft=python sts=4 ts=4 sw=4 et:
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
#
#   See COPYING file distributed along with the nrrdio package for the
#   copyright and license terms.
#
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
"""Physical calibration of an image and its NRRD space fields

A :class:`Calibration` gives the pixel size, origin and units of an image in
the usual pixel-based convention: the origin is the position, in pixels, of
the physical origin relative to the corner of the first pixel.  NRRD gives
instead the physical position of the first sample, which is the center of the
first pixel for ``space origin``, and the first node (cell centering) or sample
(node centering) for ``axis mins``.

Cell centering (1D example)::

    -----------------
    | . | . | . | . |
    -----------------

Samples sit in the center of cells.  Node centering::

    ----------
    i  i  i  i
    ----------

Samples sit on the bounds of the cells.  Node centering is assumed when the
centering is unknown.

See https://teem.sourceforge.net/nrrd/format.html#centers
"""
import math

import numpy as np

from .errors import ImageDataError, UnrecognizedValueError
from .imageglobals import logger
from .nrrdaxis import CHANNEL, TIME, X, Y, Z, NrrdAxis
from .nrrdheader import NrrdHeader, space_dimension
from .pixelcodec import planar_kind

_KIND_TYPES = {'uint8': 'uint8', 'uint16': 'uint16', 'float32': 'float'}

# added to in-memory samples to give values of signed types
_VALUE_OFFSETS = {'int8': -128.0, 'int16': -32768.0}


class Calibration:
    """Pixel sizes, origins and units of an image

    Attributes
    ----------
    pixel_width, pixel_height, pixel_depth : float
        physical size of a pixel along X, Y and Z
    frame_interval : float
        time between frames
    x_origin, y_origin, z_origin : float
        position of the physical origin, in pixels
    x_unit, y_unit, z_unit, time_unit : None or str
        units of the axes, None where unknown
    value_unit : None or str
        unit of the sample values
    info : None or str
        free text description of the image
    value_offset : float
        add to in-memory sample values to get true values
    display_min, display_max : float
        display range, NaN if unset
    """

    def __init__(self, pixel_width=1.0, pixel_height=1.0, pixel_depth=1.0,
                 frame_interval=1.0, x_origin=0.0, y_origin=0.0, z_origin=0.0,
                 x_unit=None, y_unit=None, z_unit=None, time_unit=None,
                 value_unit=None, info=None, value_offset=0.0,
                 display_min=math.nan, display_max=math.nan):
        self.pixel_width = pixel_width
        self.pixel_height = pixel_height
        self.pixel_depth = pixel_depth
        self.frame_interval = frame_interval
        self.x_origin = x_origin
        self.y_origin = y_origin
        self.z_origin = z_origin
        self.x_unit = x_unit
        self.y_unit = y_unit
        self.z_unit = z_unit
        self.time_unit = time_unit
        self.value_unit = value_unit
        self.info = info
        self.value_offset = value_offset
        self.display_min = display_min
        self.display_max = display_max

    def __repr__(self):
        fields = ', '.join(f'{key}={value!r}' for key, value in self.__dict__.items())
        return f'{self.__class__.__name__}({fields})'

    def __eq__(self, other):
        if not isinstance(other, Calibration):
            return NotImplemented
        return all(_same(value, other.__dict__[key]) for key, value in self.__dict__.items())

    def scaled(self):
        """True if the calibration has pixel sizes or spatial units"""
        return (self.pixel_width != 1.0 or self.pixel_height != 1.0
                or self.pixel_depth != 1.0
                or any(unit is not None for unit in (self.x_unit, self.y_unit, self.z_unit)))

    def has_origin(self):
        return self.x_origin != 0 or self.y_origin != 0 or self.z_origin != 0


def _same(a, b):
    if isinstance(a, float) and isinstance(b, float) and math.isnan(a) and math.isnan(b):
        return True
    return a == b


def axis_spacing(hdr, axis_index, space_index):
    """Sample spacing of an axis, in the units of the axis

    In order of preference: the length of the ``space directions`` row, the
    axis ``spacings`` value, the axis range divided by the number of cells,
    and 1.

    Parameters
    ----------
    hdr : NrrdHeader
    axis_index : int
        index of the array axis, -1 if the axis is absent
    space_index : int
        space index of the axis, -1 if none

    Returns
    -------
    spacing : float

    Examples
    --------
    >>> hdr = NrrdHeader.from_shape((5, 4))
    >>> hdr.axes[0].min, hdr.axes[0].max = 0.0, 2.0
    >>> axis_spacing(hdr, 0, 0)
    0.5
    >>> hdr.axes[0].center = 'cell'
    >>> axis_spacing(hdr, 0, 0)
    0.4
    """
    if axis_index < 0:
        return 1.0
    directions = hdr.space_directions
    if (-1 < space_index < hdr.space_dim and directions is not None
            and directions[space_index] is not None):
        row = np.asarray(directions[space_index], dtype=np.float64)
        sum_sq = float(np.sum(row[~np.isnan(row)] ** 2))
        if sum_sq <= 0:
            return 1.0
        return math.sqrt(sum_sq)
    axis = hdr.axes[axis_index]
    if not math.isnan(axis.spacing):
        return axis.spacing
    if not math.isnan(axis.min) and not math.isnan(axis.max):
        adjust = 1 if not axis.is_cell_centered() and axis.size > 1 else 0
        return (axis.max - axis.min) / (axis.size - adjust)
    return 1.0


def axis_origin_from_nrrd(space_origin, spacing):
    """Pixel origin for NRRD ``space origin`` component and `spacing`

    >>> axis_origin_from_nrrd(-1.0, 2.0)
    1.0
    """
    return -(space_origin / spacing - 0.5)


def axis_origin_to_nrrd(pixel_origin, spacing):
    """NRRD ``space origin`` component for pixel origin and `spacing`

    The inverse of :func:`axis_origin_from_nrrd`.

    >>> axis_origin_to_nrrd(1.0, 2.0)
    -1.0
    """
    return spacing * (0.5 - pixel_origin)


def axis_origin(hdr, axis_index, space_index, spacing):
    """Pixel origin of an axis from ``space origin`` or else ``axis mins``

    Returns 0 when the axis is absent, `spacing` is not positive, or neither
    field gives the origin.
    """
    if axis_index < 0 or not spacing > 0:
        return 0.0
    axis = hdr.axes[axis_index]
    if hdr.space_origin is not None and -1 < space_index < hdr.space_dim:
        return axis_origin_from_nrrd(float(hdr.space_origin[space_index]), spacing)
    if not math.isnan(axis.min):
        adjust = 0.5 if axis.is_cell_centered() else 0.0
        return -(axis.min / spacing - adjust)
    return 0.0


def calibration_from_header(hdr):
    """Make :class:`Calibration` for image read with resolved header `hdr`"""
    cal = Calibration(info=hdr.content, value_offset=_VALUE_OFFSETS.get(hdr.type, 0.0))
    if not math.isnan(hdr.min) and not math.isnan(hdr.max):
        cal.display_min, cal.display_max = hdr.min, hdr.max
    roles = ((hdr.x_axis, hdr.x_space, 'x_unit'),
             (hdr.y_axis, hdr.y_space, 'y_unit'),
             (hdr.z_axis, hdr.z_space, 'z_unit'))
    for axis_index, space_index, unit_attr in roles:
        if axis_index < 0:
            continue
        if hdr.space_units is not None and space_index < hdr.space_dim:
            setattr(cal, unit_attr, hdr.space_units[space_index])
        elif hdr.axes[axis_index].unit is not None:
            setattr(cal, unit_attr, hdr.axes[axis_index].unit)
    if hdr.t_axis > -1:
        cal.time_unit = hdr.axes[hdr.t_axis].unit
        if (cal.time_unit is None and hdr.space_units is not None
                and -1 < hdr.t_space < hdr.space_dim):
            cal.time_unit = hdr.space_units[hdr.t_space]
    if hdr.sample_units is not None:
        cal.value_unit = hdr.sample_units
    cal.pixel_width = axis_spacing(hdr, hdr.x_axis, hdr.x_space)
    cal.pixel_height = axis_spacing(hdr, hdr.y_axis, hdr.y_space)
    cal.pixel_depth = axis_spacing(hdr, hdr.z_axis, hdr.z_space)
    cal.frame_interval = axis_spacing(hdr, hdr.t_axis, hdr.t_space)
    cal.x_origin = axis_origin(hdr, hdr.x_axis, hdr.x_space, cal.pixel_width)
    cal.y_origin = axis_origin(hdr, hdr.y_axis, hdr.y_space, cal.pixel_height)
    cal.z_origin = axis_origin(hdr, hdr.z_axis, hdr.z_space, cal.pixel_depth)
    return cal


def header_from_image(data, calibration=None, template=None):
    """Make resolved header to write image `data` with `calibration`

    Parameters
    ----------
    data : array-like
        ``(T, Z, C, Y, X)`` image of a planar kind (uint8, uint16 or float32)
    calibration : None or Calibration, optional
        physical calibration of `data`; default is an unscaled calibration
    template : None or NrrdHeader, optional
        header, such as the one `data` was read with, donating its axis
        descriptors (by role), custom fields, encoding, byte order and, where
        still valid, its space name and time origin

    Returns
    -------
    hdr : NrrdHeader

    Raises
    ------
    UnsupportedSampleKindError
        for packed color `data`
    ImageDataError
        for `data` of other unsupported dtypes or shapes
    """
    data = np.asanyarray(data)
    type_name = _KIND_TYPES[planar_kind(data.dtype)]
    if data.ndim != 5:
        raise ImageDataError(f'Expecting (T, Z, C, Y, X) image, got shape {data.shape}')
    if calibration is None:
        calibration = Calibration()
    n_frames, n_slices, n_channels, height, width = data.shape
    if template is None:
        hdr = NrrdHeader()
        hdr.encoding = 'raw'
        hdr.endian = 'little'
        old_axes = []
    else:
        hdr = template.copy()
        old_axes = template.axes or []
    old_roles = hdr.role_indices
    old_spaces = hdr.space_indices
    hdr.byte_skip = hdr.line_skip = 0
    hdr.header_length = 0
    hdr.data_file = None
    hdr.type = type_name
    if hdr.endian is None:
        hdr.endian = 'little'

    n_axes = 0
    new_roles = []
    for role, present in ((CHANNEL, n_channels > 1), (X, True), (Y, height > 1),
                          (Z, n_slices > 1), (TIME, n_frames > 1)):
        new_roles.append(n_axes if present else -1)
        n_axes += present
    axes = [None] * n_axes
    for role, (new_index, old_index) in enumerate(zip(new_roles, old_roles)):
        if new_index < 0:
            continue
        if old_index > -1:
            axes[new_index] = old_axes[old_index].copy()
            axes[new_index].slice = False
            axes[new_index].slice_index = -1
        else:
            axes[new_index] = NrrdAxis(role)
    hdr.axes = axes
    hdr.space_dim = 1 + sum(index > -1 for index in new_roles[Y:])
    if hdr.space is not None:
        try:
            if space_dimension(hdr.space) != hdr.space_dim:
                hdr.space = None
        except UnrecognizedValueError:
            hdr.space = None
    hdr.set_layout(new_roles)
    if hdr.space_indices != old_spaces:
        old_origin = hdr.space_origin
        hdr.new_space_origin()
        if old_origin is not None and hdr.t_space > -1 and old_spaces[3] > -1:
            hdr.space_origin[hdr.t_space] = old_origin[old_spaces[3]]
        hdr.measurement_frame = None
    elif hdr.space_origin is None:
        hdr.new_space_origin()

    for role, size, kind in ((CHANNEL, n_channels, None), (X, width, 'space'),
                             (Y, height, 'space'), (Z, n_slices, 'space'),
                             (TIME, n_frames, 'time')):
        axis = hdr.axis_for_role(role)
        if axis is None:
            continue
        axis.size = size
        if kind is not None:
            axis.kind = kind

    if calibration.info is not None:
        hdr.content = calibration.info
    hdr.sample_units = calibration.value_unit
    hdr.new_space_units()
    hdr.new_space_directions(True)
    found_spacings = False
    if calibration.frame_interval != 1.0 and hdr.t_space > -1:
        hdr.space_directions[hdr.t_space][hdr.t_space] = calibration.frame_interval
        hdr.space_units[hdr.t_space] = calibration.time_unit
        found_spacings = True
    pixel_sizes = (1.0, 1.0, 1.0)
    if calibration.scaled():
        pixel_sizes = (calibration.pixel_width, calibration.pixel_height,
                       calibration.pixel_depth)
        units = (calibration.x_unit, calibration.y_unit, calibration.z_unit)
        for space_index, unit, size in zip(hdr.space_indices[:3], units, pixel_sizes):
            if space_index > -1:
                hdr.space_units[space_index] = unit
                hdr.space_directions[space_index][space_index] = size
        found_spacings = True
    if not found_spacings:
        logger.debug('No calibration spacing information exists.')
        hdr.space_units = None
        hdr.space_directions = None

    if calibration.has_origin():
        origins = (calibration.x_origin, calibration.y_origin, calibration.z_origin)
        for space_index, origin, size in zip(hdr.space_indices[:3], origins, pixel_sizes):
            if space_index > -1:
                hdr.space_origin[space_index] = axis_origin_to_nrrd(origin, size)
    elif hdr.t_space < 0 or math.isnan(hdr.space_origin[hdr.t_space]):
        hdr.space_origin = None

    hdr.min = calibration.display_min
    hdr.max = calibration.display_max
    return hdr
