# emacs: -*- mode: python-mode; py-indent-offset: 4; indent-tabs-mode: nil -*-
# vi: set ft=python sts=4 ts=4 sw=4 et:
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
#
#   See COPYING file distributed along with the nrrdio package for the
#   copyright and license terms.
#
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
"""Write a :class:`~nrrdio.nrrdheader.NrrdHeader` as NRRD header text

Fields are written in a fixed order.  Axes and space dimensions whose axis has
``slice`` set are left out, so that the header describes one slice of the
image; the index of that slice is recorded in custom fields.

>>> from nrrdio.nrrdheader import NrrdHeader
>>> hdr = NrrdHeader.from_shape((4, 3), 'int16')
>>> print(write_header(hdr).decode('latin-1'), end='')  # doctest: +ELLIPSIS
NRRD0005
# Created by nrrdio ...
type: int16
endian: little
encoding: raw
dimension: 2
sizes: 4 3
<BLANKLINE>
"""
import math

from .errors import HeaderDataError
from .fieldgrammar import (any_number, any_value, clean_string, format_real,
                           format_string_subfield, format_vector)
from .filename_parser import data_file_name
from .info import __version__
from .nrrdheader import SUPPORTED_NRRD_VERSION, data_type_codes, encoding_codes, space_codes


def _sample(values, indices):
    if values is None:
        return None
    return [values[i] for i in indices]


def _sample_vector(vec, indices):
    if vec is None:
        return None
    return [vec[i] for i in indices]


def _axis_lines(axes):
    """Per-axis field lines, each only if some axis has a value"""
    fields = (
        ('kinds', lambda ax: ax.kind, format_string_subfield, False),
        ('labels', lambda ax: ax.label, format_string_subfield, False),
        ('units', lambda ax: ax.unit, format_string_subfield, False),
        ('spacings', lambda ax: ax.spacing, format_real, True),
        ('thicknesses', lambda ax: ax.thickness, format_real, True),
        ('centers', lambda ax: ax.center, lambda c: 'none' if c is None else c, False),
        ('axis mins', lambda ax: ax.min, format_real, True),
        ('axis maxs', lambda ax: ax.max, format_real, True),
    )
    lines = []
    for name, getter, formatter, numeric in fields:
        values = [getter(axis) for axis in axes]
        present = any_number(values) if numeric else any(v is not None for v in values)
        if present:
            lines.append(f"{name}: {' '.join(formatter(v) for v in values)}")
    return lines


def _space_lines(hdr):
    indices = hdr.masked_space_indices()
    space_dim = hdr.space_dim
    space_ok = (hdr.space is not None and len(indices) == space_dim
                and hdr.space.lower() in space_codes.dim
                and space_codes.dim[hdr.space.lower()] == space_dim)
    if space_ok:
        lines = [f'space: {hdr.space}']
    else:
        lines = [f'space dimension: {len(indices)}']
    units = _sample(hdr.space_units, indices)
    if units is not None and any(u is not None for u in units):
        lines.append(f"space units: {' '.join(format_string_subfield(u) for u in units)}")
    origin = _sample_vector(hdr.space_origin, indices)
    if any_number(origin):
        lines.append(f'space origin: {format_vector(origin)}')
    directions = _sample(hdr.space_directions, indices)
    if any_value(directions):
        # rows without any number are written as none
        rows = [format_vector(_sample_vector(row, indices)) for row in directions]
        lines.append(f"space directions: {' '.join(rows)}")
    frame = _sample(hdr.measurement_frame, indices)
    if frame and all(any_number(row) for row in frame):
        rows = [format_vector(_sample_vector(row, indices)) for row in frame]
        lines.append(f"measurement frame: {' '.join(rows)}")
    return lines


def _slice_field_lines(hdr):
    lines = []
    for axis in hdr.sliced_axes():
        key_i = f'{axis.name} index'
        key_n = f'n {axis.name}s'
        if key_i in hdr.custom_fields or key_n in hdr.custom_fields:
            continue
        lines.append(f'{key_i}:={axis.slice_index}')
        lines.append(f'{key_n}:={axis.size}')
    return lines


def header_lines(hdr, header_name=None):
    """Lines of the header text for `hdr`, without line ends

    Parameters
    ----------
    hdr : NrrdHeader
        header with resolved axis roles
    header_name : None or str, optional
        file name the header will be written to.  Needed for detached
        headers, to make the ``data file`` name.

    Returns
    -------
    lines : list of str
        the last line is the empty line ending the header
    """
    if hdr.axes is None:
        raise HeaderDataError('Tried to write a header without axes.')
    if hdr.type is None or hdr.type not in data_type_codes:
        raise HeaderDataError(f"Cannot write samples of type '{hdr.type}'.")
    type_name = data_type_codes.code[hdr.type]
    lines = [f'NRRD{SUPPORTED_NRRD_VERSION:04d}',
             f'# Created by nrrdio {__version__}',
             f'type: {type_name}']
    if type_name != 'uint8':
        lines.append(f"endian: {hdr.endian or 'little'}")
    lines.append(f'encoding: {encoding_codes.code[hdr.encoding]}')
    axes = hdr.masked_axes()
    lines.append(f'dimension: {len(axes)}')
    lines.append(f"sizes: {' '.join(str(axis.size) for axis in axes)}")
    lines.extend(_axis_lines(axes))
    if hdr.space_dim > 0:
        lines.extend(_space_lines(hdr))
    for name, value in (('min', hdr.min), ('max', hdr.max),
                        ('old min', hdr.old_min), ('old max', hdr.old_max)):
        if not math.isnan(value):
            lines.append(f'{name}: {format_real(value)}')
    if hdr.sample_units is not None:
        lines.append(f'sample units: {clean_string(hdr.sample_units)}')
    if hdr.content is not None:
        lines.append(f'content: {clean_string(hdr.content)}')
    lines.extend(hdr.custom_fields_block().split('\n')[:-1])
    lines.extend(_slice_field_lines(hdr))
    if hdr.byte_skip != 0:
        lines.append(f'byte skip: {hdr.byte_skip}')
    if hdr.line_skip != 0:
        lines.append(f'line skip: {hdr.line_skip}')
    if hdr.detached:
        if header_name is None:
            raise HeaderDataError('Detached header needs a file name to name its data file.')
        lines.append(f'data file: {data_file_name(header_name, hdr.encoding)}')
    lines.append('')
    return lines


def write_header(hdr, header_name=None):
    """Header text for `hdr` as bytes, ending with the blank line

    See :func:`header_lines` for the parameters.
    """
    return '\n'.join(header_lines(hdr, header_name) + ['']).encode('latin-1')
