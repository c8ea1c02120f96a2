# Copyright (c) 2026, tlsreactor developers
#
# See the LICENSE file for legal information regarding use of this file.

"""Normalisation of application certificate verification callbacks."""

import inspect
import logging

from .constants import VerifyHookType
from .errors import TLSCallbackFault, TLSConfigurationError

logger = logging.getLogger(__name__)

_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY,
               inspect.Parameter.POSITIONAL_OR_KEYWORD)


class VerifyHook(object):
    """
    An application verification callback with its declared form.

    Applications may register a callback taking no arguments, only the
    certificate, or the certificate and the preverification result. The
    form is determined once, when the hook is created, and every later
    invocation dispatches on it::

        hook = VerifyHook.fromCallable(lambda cert: cert.depth > 0)
        accepted = hook(certificate, preverifyOk)

    :vartype hookType: int
    :ivar hookType: one of :py:class:`tlsreactor.constants.VerifyHookType`

    :vartype func: callable
    :ivar func: the application callback, None for the absent hook
    """

    def __init__(self, hookType, func=None):
        if hookType == VerifyHookType.none:
            if func is not None:
                raise ValueError("Absent hook can't have a callback")
        elif not callable(func):
            raise TLSConfigurationError("Verification callback is not "
                                        "callable: {0!r}".format(func))
        self.hookType = hookType
        self.func = func

    @classmethod
    def none(cls):
        """No callback registered, the default policy applies."""
        return cls(VerifyHookType.none)

    @classmethod
    def noArgs(cls, func):
        return cls(VerifyHookType.noArgs, func)

    @classmethod
    def certOnly(cls, func):
        return cls(VerifyHookType.certOnly, func)

    @classmethod
    def certAndPreverify(cls, func):
        return cls(VerifyHookType.certAndPreverify, func)

    @classmethod
    def fromCallable(cls, func):
        """
        Select the hook form from the declared parameters of func.

        A callback accepting ``*args`` is given both arguments. Optional
        parameters count: ``def hook(cert, ok=None)`` receives both.

        :param func: the application callback, None or an existing
            VerifyHook are accepted as well
        :rtype: VerifyHook
        :raises TLSConfigurationError: when func isn't callable, needs more
            than two arguments, or its signature can't be inspected
        """
        if func is None:
            return cls.none()
        if isinstance(func, VerifyHook):
            return func
        if not callable(func):
            raise TLSConfigurationError("Verification callback is not "
                                        "callable: {0!r}".format(func))
        try:
            params = inspect.signature(func).parameters.values()
        except (TypeError, ValueError) as err:
            raise TLSConfigurationError("Can't inspect verification "
                                        "callback {0!r}: {1}"
                                        .format(func, err))

        positional = [p for p in params if p.kind in _POSITIONAL]
        required = [p for p in positional if p.default is p.empty]
        requiredKw = [p for p in params
                      if p.kind == inspect.Parameter.KEYWORD_ONLY and
                      p.default is p.empty]
        varArgs = any(p.kind == inspect.Parameter.VAR_POSITIONAL
                      for p in params)

        if len(required) > 2 or requiredKw:
            raise TLSConfigurationError("Verification callback {0!r} "
                                        "requires too many arguments"
                                        .format(func))
        if varArgs or len(positional) >= 2:
            hookType = VerifyHookType.certAndPreverify
        elif len(positional) == 1:
            hookType = VerifyHookType.certOnly
        else:
            hookType = VerifyHookType.noArgs
        logger.debug("Registered verification callback %r as %s", func,
                     VerifyHookType.toStr(hookType))
        return cls(hookType, func)

    def isRegistered(self):
        """Check if an application callback is present."""
        return self.hookType != VerifyHookType.none

    def __call__(self, certificate, preverifyOk):
        """
        Ask the application to judge a certificate.

        :rtype: bool
        :raises TLSCallbackFault: when the callback raised
        :raises AssertionError: when called on the absent hook
        """
        if self.hookType == VerifyHookType.none:
            raise AssertionError("No verification callback registered")
        try:
            if self.hookType == VerifyHookType.noArgs:
                ret = self.func()
            elif self.hookType == VerifyHookType.certOnly:
                ret = self.func(certificate)
            else:
                ret = self.func(certificate, preverifyOk)
        except Exception as err:
            raise TLSCallbackFault(err, certificate) from err
        return bool(ret)

    def __repr__(self):
        return "VerifyHook({0}, {1!r})".format(
            VerifyHookType.toStr(self.hookType), self.func)
