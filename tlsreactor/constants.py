# Copyright (c) 2026, tlsreactor developers
#
# See the LICENSE file for legal information regarding use of this file.

"""Constants used in various places."""


class TLSReactorEnum(object):
    """Base class for the enumerations used by tlsreactor"""

    @classmethod
    def _recursiveVars(cls, klass):
        """Call vars recursively on base classes"""
        fields = dict()
        for basecls in klass.__bases__:
            fields.update(cls._recursiveVars(basecls))
        fields.update(dict(vars(klass)))
        return fields

    @classmethod
    def toRepr(cls, value, blacklist=None):
        """
        Convert value to its symbolic name

        name if found, None otherwise
        """
        fields = cls._recursiveVars(cls)
        if blacklist is None:
            blacklist = []
        return next((key for key, val in fields.items()
                     if key not in ('__weakref__', '__dict__', '__doc__',
                                    '__module__') and
                     key not in blacklist and
                     not callable(val) and
                     val == value), None)

    @classmethod
    def toStr(cls, value, blacklist=None):
        """Convert value to human-readable string if possible"""
        ret = cls.toRepr(value, blacklist)
        if ret is not None:
            return ret
        else:
            return '{0}'.format(value)


class HandshakeState(TLSReactorEnum):
    """Lifecycle of a single TLS handshake.

    notStarted -> inProgress -> (completed | aborted). Both completed and
    aborted are terminal.
    """

    notStarted = 0
    inProgress = 1
    completed = 2
    aborted = 3

    terminal = (completed, aborted)


class IODirection(TLSReactorEnum):
    """Socket readiness reported by the reactor."""

    read = 0
    write = 1


class VerifyHookType(TLSReactorEnum):
    """Declared form of an application verification callback."""

    none = 0
    noArgs = 1
    certOnly = 2
    certAndPreverify = 3


# protocol version names accepted in HandshakeConfig, oldest first
PROTOCOL_VERSIONS = ("TLSv1", "TLSv1.1", "TLSv1.2", "TLSv1.3")
