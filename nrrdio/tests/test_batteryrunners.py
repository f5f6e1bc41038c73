# emacs: -*- mode: python-mode; py-indent-offset: 4; indent-tabs-mode: nil -*-
# vi: set ft=python sts=4 ts=4 sw=4 et:
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
#
#   See COPYING file distributed along with the nrrdio package for the
#   copyright and license terms.
#
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
"""Tests for BatteryRunner and Report objects"""

import logging
from io import StringIO

import pytest

from ..batteryrunners import BatteryRunner, Report
from ..errors import HeaderDataError, MissingFieldError


# checks on dict stand-ins for headers
def chk_type(hdr, fix=False):
    rep = Report(MissingFieldError)
    if 'type' in hdr:
        return hdr, rep
    rep.problem_level = 40
    rep.problem_msg = "'type' field must be specified."
    if fix:
        rep.fix_msg = 'not attempting fix'
    return hdr, rep


def chk_endian(hdr, fix=False):
    rep = Report(HeaderDataError)
    if 'endian' in hdr:
        return hdr, rep
    rep.problem_level = 30
    rep.problem_msg = "'endian' field missing"
    if fix:
        hdr['endian'] = 'little'
        rep.fix_msg = 'assuming little endian'
    return hdr, rep


def test_init_basic():
    # With no args, raise
    with pytest.raises(TypeError):
        BatteryRunner()
    # Len returns number of checks
    battrun = BatteryRunner((chk_type,))
    assert len(battrun) == 1
    battrun = BatteryRunner((chk_type, chk_endian))
    assert len(battrun) == 2


def test_init_report():
    rep = Report()
    assert rep == Report(Exception, 0, '', '')
    assert str(rep) == 'no problem'
    assert rep.message == ''


def test_report_message():
    rep = Report(HeaderDataError, 30, 'msg')
    assert rep.message == 'msg'
    rep.fix_msg = 'fix'
    assert rep.message == 'msg; fix'
    assert str(rep) == 'Level 30: msg; fix'


def test_checks():
    battrun = BatteryRunner((chk_type, chk_endian))
    hdr = {'type': 'int16'}
    reports = battrun.check_only(hdr)
    assert reports[0] == Report(MissingFieldError)
    assert reports[1] == Report(HeaderDataError, 30, "'endian' field missing", '')
    # check only leaves the object alone
    assert hdr == {'type': 'int16'}
    obj, reports = battrun.check_fix(hdr)
    assert reports[1] == Report(HeaderDataError, 30, "'endian' field missing",
                                'assuming little endian')
    assert obj == {'type': 'int16', 'endian': 'little'}
    obj, reports = battrun.check_fix({})
    assert reports[0].problem_level == 40
    assert reports[0].fix_msg == 'not attempting fix'


def test_log_raise():
    str_io = StringIO()
    logger = logging.getLogger('test.logger')
    logger.setLevel(30)
    logger.addHandler(logging.StreamHandler(str_io))
    rep = Report(HeaderDataError, 20, 'msg', 'fix')
    rep.log_raise(logger)
    assert str_io.getvalue() == ''
    rep.problem_level = 30
    rep.log_raise(logger)
    assert str_io.getvalue() == 'msg; fix\n'
    # raise at or above error level
    with pytest.raises(HeaderDataError):
        rep.log_raise(logger, 30)
    # unless there is no error to raise
    rep.error = None
    rep.log_raise(logger, 30)
