# emacs: -*- mode: python-mode; py-indent-offset: 4; indent-tabs-mode: nil -*-
# vi: set ft=python sts=4 ts=4 sw=4 et:
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
#
#   See COPYING file distributed along with the nrrdio package for the
#   copyright and license terms.
#
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
"""Tests for writing NRRD header text"""

import math

import numpy as np
import pytest
from numpy.testing import assert_array_equal

from ..errors import HeaderDataError
from ..headerparser import parse_header
from ..headerwriter import header_lines, write_header
from ..info import __version__
from ..nrrdheader import NrrdHeader


def test_minimal():
    hdr = NrrdHeader.from_shape((4, 3))
    assert header_lines(hdr) == [
        'NRRD0005',
        f'# Created by nrrdio {__version__}',
        'type: uint8',
        'encoding: raw',
        'dimension: 2',
        'sizes: 4 3',
        '',
    ]
    assert write_header(hdr).endswith(b'sizes: 4 3\n\n')
    hdr = NrrdHeader.from_shape((4, 3), 'unsigned short', 'gz', 'big')
    lines = header_lines(hdr)
    assert lines[2:5] == ['type: uint16', 'endian: big', 'encoding: gzip']


def test_no_axes_or_type():
    with pytest.raises(HeaderDataError):
        header_lines(NrrdHeader())
    hdr = NrrdHeader.from_shape((4, 3))
    hdr.type = None
    with pytest.raises(HeaderDataError):
        header_lines(hdr)


def test_axis_fields():
    hdr = NrrdHeader.from_shape((3, 4, 5), 'float')
    hdr.axes[0].kind = 'RGB-color'
    hdr.axes[1].label = 'x "pos"'
    hdr.axes[1].spacing = 0.5
    hdr.axes[2].center = 'cell'
    hdr.axes[2].min = -1.0
    lines = header_lines(hdr)
    assert lines[7:-1] == [
        'kinds: "RGB-color" none none',
        'labels: none "x \'pos\'" none',
        'spacings: nan 0.5 nan',
        'centers: none none cell',
        'axis mins: nan nan -1',
    ]
    hdr_back = parse_header(write_header(hdr))
    assert hdr_back.axes[0].kind == 'RGB-color'
    assert hdr_back.axes[1].label == "x 'pos'"
    assert hdr_back.axes[1].spacing == 0.5
    assert math.isnan(hdr_back.axes[0].spacing)
    assert hdr_back.axes[2].center == 'cell'
    assert hdr_back.axes[2].min == -1


def test_global_fields():
    hdr = NrrdHeader.from_shape((4, 3))
    hdr.min, hdr.max = 0.0, 255.0
    hdr.old_max = 1.5
    hdr.sample_units = 'HU'
    hdr.content = 'two\nlines'
    hdr.custom_fields['scanner'] = 'MR: 7T'
    hdr.byte_skip = -1
    hdr.line_skip = 2
    lines = header_lines(hdr)
    assert lines[6:] == [
        'min: 0',
        'max: 255',
        'old max: 1.5',
        'sample units: HU',
        'content: two lines',
        'scanner:=MR: 7T',
        'byte skip: -1',
        'line skip: 2',
        '',
    ]
    hdr_back = parse_header(write_header(hdr))
    assert hdr_back.custom_fields == {'scanner': 'MR: 7T'}
    assert (hdr_back.min, hdr_back.max, hdr_back.old_max) == (0, 255, 1.5)
    assert math.isnan(hdr_back.old_min)
    assert hdr_back.byte_skip == -1


def _space_header():
    hdr = NrrdHeader.from_shape((4, 3, 12), 'int16')
    hdr.set_layout((-1, 0, 1, 2, -1))
    hdr.space = 'RAS'
    hdr.space_dim = 3
    hdr.space_units = ['mm', 'mm', None]
    hdr.space_origin = np.array([1.0, 2.0, 3.0])
    hdr.space_directions = [np.array([0.5, 0, 0]), np.array([0, 0.5, 0]),
                            np.array([0, 0, 2.0])]
    hdr.measurement_frame = [np.array(row) for row in np.eye(3)]
    return hdr


def test_space_fields():
    hdr = _space_header()
    lines = header_lines(hdr)
    assert lines[7:-1] == [
        'space: RAS',
        'space units: "mm" "mm" none',
        'space origin: (1,2,3)',
        'space directions: (0.5,0,0) (0,0.5,0) (0,0,2)',
        'measurement frame: (1,0,0) (0,1,0) (0,0,1)',
    ]
    hdr_back = parse_header(write_header(hdr))
    assert hdr_back.space_dim == 3
    assert hdr_back.space_units == ['mm', 'mm', None]
    assert_array_equal(hdr_back.space_origin, hdr.space_origin)
    assert_array_equal(hdr_back.space_directions, hdr.space_directions)
    assert hdr_back.role_indices == (-1, 0, 1, 2, -1)


def test_space_partial():
    hdr = _space_header()
    # a frame row without numbers drops the frame
    hdr.measurement_frame[1] = None
    # a direction row without numbers is written as none
    hdr.space_directions[2] = np.array([np.nan] * 3)
    hdr.space_origin = np.array([np.nan] * 3)
    lines = header_lines(hdr)
    assert 'space directions: (0.5,0,0) (0,0.5,0) none' in lines
    assert not any(line.startswith('measurement frame') for line in lines)
    assert not any(line.startswith('space origin') for line in lines)
    # no space name when it no longer matches the space dimension
    hdr.space = 'RAST'
    assert 'space dimension: 3' in header_lines(hdr)


def test_sliced_header():
    hdr = _space_header()
    hdr.axes[2].slice = True
    hdr.axes[2].slice_index = 7
    lines = header_lines(hdr)
    assert lines[5:] == [
        'dimension: 2',
        'sizes: 4 3',
        'space dimension: 2',
        'space units: "mm" "mm"',
        'space origin: (1,2)',
        'space directions: (0.5,0) (0,0.5)',
        'measurement frame: (1,0) (0,1)',
        'z index:=7',
        'n zs:=12',
        '',
    ]
    # explicit custom fields win over the slice fields
    hdr.custom_fields['z index'] = '3'
    lines = header_lines(hdr)
    assert 'z index:=3' in lines
    assert 'z index:=7' not in lines
    assert 'n zs:=12' not in lines


def test_detached():
    hdr = NrrdHeader.from_shape((4, 3))
    hdr.detached = True
    with pytest.raises(HeaderDataError):
        header_lines(hdr)
    assert header_lines(hdr, '/data/scan.nhdr')[-2] == 'data file: scan.raw'
    hdr.encoding = 'gzip'
    assert header_lines(hdr, 'scan.nhdr')[-2] == 'data file: scan.raw.gz'
