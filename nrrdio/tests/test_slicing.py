# emacs: -*- mode: python-mode; py-indent-offset: 4; indent-tabs-mode: nil -*-
# vi: set ft=python sts=4 ts=4 sw=4 et:
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
#
#   See COPYING file distributed along with the nrrdio package for the
#   copyright and license terms.
#
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
"""Tests for splitting images into one file per axis index"""

import pytest

from ..headerparser import parse_header
from ..headerwriter import write_header
from ..nrrdheader import NrrdHeader
from ..slicing import enumerate_slices, mark_sliced, n_slice_files


def xyzt_header(sizes):
    hdr = NrrdHeader.from_shape(sizes)
    hdr.set_layout((-1, 0, 1, 2, 3)[:len(sizes) + 1] + (-1,) * (4 - len(sizes)))
    return hdr


def test_mark_sliced():
    hdr = NrrdHeader.from_shape((3, 4, 5))
    mark_sliced(hdr, 'c')
    assert [axis.slice for axis in hdr.axes] == [True, False, False]
    # absent roles are ignored
    mark_sliced(hdr, 'ZT')
    assert [axis.slice for axis in hdr.axes] == [True, False, False]
    with pytest.raises(ValueError):
        mark_sliced(hdr, 'Q')
    mark_sliced(hdr, '')
    assert n_slice_files(hdr) == 3


def test_cannot_slice_every_axis():
    hdr = NrrdHeader.from_shape((5,))
    with pytest.raises(ValueError, match='Cannot slice all 1 axes'):
        mark_sliced(hdr, 'X')
    assert not hdr.axes[0].slice
    hdr = NrrdHeader.from_shape((3, 4, 5))
    mark_sliced(hdr, 'C')
    # with C already sliced, X and Y would leave nothing
    with pytest.raises(ValueError):
        mark_sliced(hdr, 'xy')
    assert [axis.slice for axis in hdr.axes] == [True, False, False]
    mark_sliced(hdr, 'Y')
    assert n_slice_files(hdr) == 3 * 5


def test_no_slicing():
    hdr = NrrdHeader.from_shape((4, 3))
    assert n_slice_files(hdr) == 1
    slices = list(enumerate_slices(hdr, 'scan.nrrd'))
    assert len(slices) == 1
    slice_hdr, name = slices[0]
    assert name == 'scan.nrrd'
    assert slice_hdr is not hdr


def test_z_slices():
    hdr = xyzt_header((4, 3, 12))
    assert hdr.role_indices == (-1, 0, 1, 2, -1)
    mark_sliced(hdr, 'Z')
    assert n_slice_files(hdr) == 12
    slices = list(enumerate_slices(hdr, 'out/scan.nrrd'))
    assert [name for _, name in slices] == [f'out/scan_Z{i:02d}.nrrd' for i in range(12)]
    assert [h.axes[2].slice_index for h, _ in slices] == list(range(12))
    # each slice file has a 2D header
    hdr_back = parse_header(write_header(slices[5][0]))
    assert hdr_back.dimension == 2
    assert hdr_back.custom_fields == {'z index': '5', 'n zs': '12'}
    # the input header is not changed
    assert hdr.axes[2].slice_index == -1


def test_two_sliced_axes():
    hdr = xyzt_header((4, 3, 2, 3))
    assert hdr.role_indices == (-1, 0, 1, 2, 3)
    mark_sliced(hdr, 'TZ')
    assert n_slice_files(hdr) == 6
    names = [name for _, name in enumerate_slices(hdr, 'scan.nhdr')]
    # last sliced axis varies fastest
    assert names == ['scan_Z0_T0.nhdr', 'scan_Z0_T1.nhdr', 'scan_Z0_T2.nhdr',
                     'scan_Z1_T0.nhdr', 'scan_Z1_T1.nhdr', 'scan_Z1_T2.nhdr']


def test_detached_default_extension():
    hdr = xyzt_header((4, 3, 2))
    hdr.detached = True
    mark_sliced(hdr, 'z')
    names = [name for _, name in enumerate_slices(hdr, 'scan')]
    assert names == ['scan_Z0.nhdr', 'scan_Z1.nhdr']
