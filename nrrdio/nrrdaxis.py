# emacs: -*- mode: python-mode; py-indent-offset: 4; indent-tabs-mode: nil -*-
# vi: set ft=python sts=4 ts=4 sw=4 et:
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
#
#   See COPYING file distributed along with the nrrdio package for the
#   copyright and license terms.
#
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
"""Array axes of an NRRD file and the roles they play

Every axis of an NRRD array is described by a :class:`NrrdAxis`.  Once a
header has been read, each axis is given one of the roles channel, X, Y, Z
or time (:func:`resolve_shape`).  Roles are always stored in the canonical
order C, X, Y, Z, T; absent roles are skipped.

Physical "space" fields of the header are numbered separately, in X, Y, Z, T
order over the roles that are present (:func:`solve_space_indices`).
"""
import copy
import math

from .errors import UnrecognizedValueError
from .imageglobals import logger

CHANNEL, X, Y, Z, TIME = range(5)
ROLE_NAMES = ('channel', 'x', 'y', 'z', 'time')
ROLE_LETTERS = 'CXYZT'

CENTERINGS = ('node', 'cell')

# Kinds that say an axis is a sampled domain, so not a channel axis
_DOMAIN_KINDS = ('domain', 'space', 'time')

# kind -> axis size implied by the kind; 0 means any size
_KIND_SIZES = {
    'domain': 0, 'space': 0, 'time': 0, 'list': 0, 'point': 0,
    'vector': 0, 'covariant-vector': 0, 'normal': 0,
    'stub': 1, 'scalar': 1,
    'complex': 2, '2-vector': 2,
    '3-color': 3, 'rgb-color': 3, 'hsv-color': 3, 'xyz-color': 3,
    '3-vector': 3, '3-gradient': 3, '3-normal': 3, '2d-symmetric-matrix': 3,
    '4-color': 4, 'rgba-color': 4, '4-vector': 4, 'quaternion': 4,
    '2d-masked-symmetric-matrix': 4, '2d-matrix': 4,
    # listed as 4D in the format description, but it has 5 components
    '2d-masked-matrix': 5,
    '3d-symmetric-matrix': 6,
    '3d-masked-symmetric-matrix': 7,
    '3d-matrix': 9,
    '3d-masked-matrix': 10,
}


def kind_axis_size(kind):
    """Return axis size implied by `kind`, 0 if any size is allowed

    >>> kind_axis_size('RGB-color'), kind_axis_size('space'), kind_axis_size(None)
    (3, 0, 0)
    """
    if kind is None:
        return 0
    try:
        return _KIND_SIZES[kind.lower()]
    except KeyError:
        raise UnrecognizedValueError(f"Unrecognised kind, '{kind}'.")


class NrrdAxis:
    """Parameters of one array axis

    Floating point values are NaN while unset, string values None.  ``center``
    is None (unknown), ``'node'`` or ``'cell'``.  ``role`` is one of
    :data:`CHANNEL`, :data:`X`, :data:`Y`, :data:`Z`, :data:`TIME` or None.

    ``slice`` and ``slice_index`` control writing: a sliced axis is written as
    one file per index, each file holding only index ``slice_index`` of it.
    """

    def __init__(self, role=None, size=0):
        self.size = size
        self.spacing = math.nan
        self.thickness = math.nan
        self.center = None
        self.min = math.nan
        self.max = math.nan
        self.unit = None
        self.label = None
        self.kind = None
        self.role = role
        self.slice = False
        self.slice_index = -1

    def __repr__(self):
        return (f'NrrdAxis(role={self.name}, size={self.size}, '
                f'spacing={self.spacing}, thickness={self.thickness}, '
                f'center={self.center}, min={self.min}, max={self.max}, '
                f'unit={self.unit!r}, label={self.label!r}, kind={self.kind!r}, '
                f'slice={self.slice}, slice_index={self.slice_index})')

    def copy(self):
        return copy.copy(self)

    @property
    def name(self):
        """Canonical name of the axis role, ``'unknown'`` without a role"""
        if self.role is None:
            return 'unknown'
        return ROLE_NAMES[self.role]

    @property
    def letter(self):
        """Letter of the axis role, as used in slice file names"""
        if self.role is None:
            return ' '
        return ROLE_LETTERS[self.role]

    def digits_for_size(self):
        """Number of decimal digits needed to write any index of this axis

        >>> ax = NrrdAxis(Z, 12)
        >>> ax.digits_for_size()
        2
        """
        if self.size <= 0:
            return 1
        return math.ceil(math.log10(self.size + 1))

    def center_text(self):
        return self.center if self.center is not None else 'none'

    def is_cell_centered(self):
        return self.center == 'cell'


def _channel_like(kind):
    return kind is None or kind.lower() not in _DOMAIN_KINDS


def _is_time(kind):
    return kind is not None and kind.lower() == 'time'


def resolve_shape(axes, space_dim=0):
    """Find the axis index of each role from axis count, kinds and space

    Parameters
    ----------
    axes : sequence of NrrdAxis
        1 to 5 axes; only ``kind`` is consulted
    space_dim : int, optional
        number of space dimensions of the header, 0 if none

    Returns
    -------
    indices : tuple
        axis index of the channel, X, Y, Z and time roles, -1 where absent

    Examples
    --------
    >>> resolve_shape([NrrdAxis(), NrrdAxis(), NrrdAxis()])
    (0, 1, 2, -1, -1)
    >>> axes = [NrrdAxis() for i in range(3)]
    >>> axes[2].kind = 'time'
    >>> resolve_shape(axes)
    (-1, 0, 1, 2, -1)
    >>> axes[0].kind = 'space'
    >>> resolve_shape(axes)
    (-1, 0, 1, -1, 2)
    """
    n = len(axes)
    if n == 1:
        layout = 'X'
    elif n == 2:
        layout = 'XY'
    elif n == 3:
        layout = 'XYZ'
        if space_dim != 3:
            maybe_channel_first = _channel_like(axes[0].kind)
            definitely_time_last = _is_time(axes[2].kind)
            if maybe_channel_first and not definitely_time_last:
                layout = 'CXY'
            elif not maybe_channel_first and definitely_time_last:
                layout = 'XYT'
    elif n == 4:
        if space_dim != 4 and _channel_like(axes[0].kind):
            layout = 'CXYT' if _is_time(axes[3].kind) else 'CXYZ'
        else:
            layout = 'XYZT'
    elif n == 5:
        layout = 'CXYZT'
    else:
        raise ValueError(f'Cannot resolve roles for {n} axes')
    logger.debug('%dD NRRD axes: %s', n, layout)
    return tuple(layout.find(letter) for letter in ROLE_LETTERS)


def solve_space_indices(indices):
    """Space-field index of the X, Y, Z and time roles, -1 where absent

    Space fields are always ordered X, Y, Z, T over the roles present.  X
    is never preceded by another spatial role in any layout that
    :func:`resolve_shape` gives, so the Z and time positions are their axis
    offsets from X.

    >>> solve_space_indices((0, 1, 2, -1, 3))
    (0, 1, -1, 2)
    """
    _, x_axis, y_axis, z_axis, t_axis = indices
    x_space = 0
    y_space = 1 if y_axis > -1 else -1
    z_space = z_axis - x_axis if z_axis > -1 else -1
    t_space = t_axis - x_axis if t_axis > -1 else -1
    return x_space, y_space, z_space, t_space
