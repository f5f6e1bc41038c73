# emacs: -*- mode: python-mode; py-indent-offset: 4; indent-tabs-mode: nil -*-
# vi: set ft=python sts=4 ts=4 sw=4 et:
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
#
#   See COPYING file distributed along with the nrrdio package for the
#   copyright and license terms.
#
### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ### ##
"""Check batteries for NRRD headers

A check is a callable of signature ``func(obj, fix=False)`` returning a tuple
``(obj, Report)``.  With ``fix=True`` the check may modify ``obj`` (or return
a different object) to repair the problem it found.

``BatteryRunner`` runs a sequence of checks over one object:

>>> from nrrdio.batteryrunners import BatteryRunner, Report
>>> def chk(obj, fix=False): # minimal check
...     return obj, Report()
>>> btrun = BatteryRunner((chk,))
>>> reports = btrun.check_only({'type': 'uint8'})

and, with fixes:

>>> fixed_obj, report_seq = btrun.check_fix({'type': 'uint8'})

Each ``Report`` has an ``error`` (an exception class to raise for this
problem, or None), a ``problem_level`` from 0 (no problem) to 50 (very bad
problem) following the :mod:`logging` levels, and human readable
``problem_msg`` and ``fix_msg`` strings.

A check on the NRRD ``encoding`` field, for example, looks like this::

    def chk_encoding(hdr, fix=False):
        rep = Report(MissingFieldError)
        if hdr.encoding is not None:
            return hdr, rep
        rep.problem_level = 40
        rep.problem_msg = "'encoding' field must be specified"
        if fix:
            rep.fix_msg = 'not attempting fix'
        return hdr, rep

and a problem that can be repaired, like a missing ``endian`` for a
multi-byte sample type::

    def chk_endian(hdr, fix=False):
        rep = Report(HeaderDataError)
        if hdr.endian is not None or hdr.bytes_per_sample < 2:
            return hdr, rep
        rep.problem_level = 30
        rep.problem_msg = "'endian' missing for multi-byte type"
        if fix:
            hdr.endian = 'little'
            rep.fix_msg = 'assuming little endian'
        return hdr, rep
"""


class BatteryRunner:
    """Class to run set of checks"""

    def __init__(self, checks):
        """Initialize instance from sequence of `checks`

        Parameters
        ----------
        checks : sequence
           sequence of checks, where checks are callables matching
           signature ``obj, rep = chk(obj, fix=False)``.  Checks are run
           in the order they are passed.
        """
        self._checks = checks

    def check_only(self, obj):
        """Run checks on `obj` returning reports

        Parameters
        ----------
        obj : anything
           object on which to run checks

        Returns
        -------
        reports : sequence
           sequence of report objects reporting on result of running
           checks (without fixes) on `obj`
        """
        reports = []
        for check in self._checks:
            obj, rep = check(obj, False)
            reports.append(rep)
        return reports

    def check_fix(self, obj):
        """Run checks, with fixes, on `obj` returning `obj`, reports

        Parameters
        ----------
        obj : anything
           object on which to run checks, fixes

        Returns
        -------
        obj : anything
           possibly modified or replaced `obj`, after fixes
        reports : sequence
           sequence of reports on checks, fixes
        """
        reports = []
        for check in self._checks:
            obj, report = check(obj, True)
            reports.append(report)
        return obj, reports

    def __len__(self):
        return len(self._checks)


class Report:
    def __init__(self, error=Exception, problem_level=0, problem_msg='', fix_msg=''):
        """Initialize report with values

        Parameters
        ----------
        error : None or Exception
           Error to raise if raising error for this check.  If None,
           no error can be raised for this check.
        problem_level : int
           level of problem.  From 0 (no problem) to 50 (severe
           problem).  If the report originates from a fix, then this
           is the level of the problem remaining after the fix.
        problem_msg : string
           String describing problem detected. Default is ''
        fix_msg : string
           String describing any fix applied.  Default is ''.

        Examples
        --------
        >>> rep = Report()
        >>> rep.problem_level
        0
        >>> rep = Report(TypeError, 10)
        >>> rep.problem_level
        10
        """
        self.error = error
        self.problem_level = problem_level
        self.problem_msg = problem_msg
        self.fix_msg = fix_msg

    def __getstate__(self):
        return self.error, self.problem_level, self.problem_msg, self.fix_msg

    def __eq__(self, other):
        return self.__getstate__() == other.__getstate__()

    def __str__(self):
        if not self.problem_level:
            return 'no problem'
        return f'Level {self.problem_level}: {self.message}'

    @property
    def message(self):
        """formatted message string, including fix message if present"""
        if self.fix_msg:
            return '; '.join((self.problem_msg, self.fix_msg))
        return self.problem_msg

    def log_raise(self, logger, error_level=40):
        """Log problem, raise error if problem >= `error_level`

        Parameters
        ----------
        logger : log
           log object, implementing ``log`` method
        error_level : int, optional
           If ``self.problem_level`` >= `error_level`, raise error
        """
        logger.log(self.problem_level, self.message)
        if self.problem_level and self.problem_level >= error_level:
            if self.error:
                raise self.error(self.problem_msg)

