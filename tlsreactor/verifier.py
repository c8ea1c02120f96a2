# Copyright (c) 2026, tlsreactor developers
#
# See the LICENSE file for legal information regarding use of this file.

"""Class for deciding whether a presented peer certificate is accepted."""

import logging
from collections import namedtuple

from .errors import TLSCallbackFault
from .verifyhook import VerifyHook

logger = logging.getLogger(__name__)


class VerificationResult(namedtuple("VerificationResult",
                                    ["accepted", "fault"])):
    """Decision for one certificate.

    fault is the :py:class:`tlsreactor.errors.TLSCallbackFault` that
    forced a reject, None otherwise.
    """

    __slots__ = ()

    def __bool__(self):
        return self.accepted


class Verifier(object):
    """This class judges every certificate the peer presents.

    It combines the chain preverification done by OpenSSL against the
    trust store with the application hook:

     - verify peer not requested: the verifier is not installed at all and
       the handshake completes without a trust decision
     - no hook registered: accept if and only if preverification passed,
       so with an empty trust store every peer is rejected
     - hook registered: the hook's answer is final, the preverification
       result is only passed to it as advice
     - hook raised: reject
    """

    def __init__(self, verifyPeer=False, hook=None):
        """Create a new Verifier instance.

        @type verifyPeer: bool
        @param verifyPeer: whether the peer certificate is to be verified

        @type hook: L{tlsreactor.verifyhook.VerifyHook}
        @param hook: application hook, None or the absent hook select the
        default policy
        """
        self.verifyPeer = bool(verifyPeer)
        if hook is None:
            hook = VerifyHook.none()
        self.hook = hook

    def isActive(self):
        """Check if certificates are verified at all."""
        return self.verifyPeer

    def __call__(self, certificate, preverifyOk):
        """Judge one certificate of the peer's chain.

        @type certificate: L{tlsreactor.certificate.PresentedCertificate}
        @param certificate: the certificate being verified

        @type preverifyOk: bool
        @param preverifyOk: whether it chains to a CA in the trust store

        @rtype: L{VerificationResult}
        """
        if not self.verifyPeer:
            return VerificationResult(True, None)

        if not self.hook.isRegistered():
            accepted = bool(preverifyOk)
            logger.debug("Default policy %s certificate at depth %d "
                         "(preverify_ok=%s)",
                         "accepts" if accepted else "rejects",
                         certificate.depth, preverifyOk)
            return VerificationResult(accepted, None)

        try:
            accepted = self.hook(certificate, bool(preverifyOk))
        except TLSCallbackFault as fault:
            logger.warning("Verification callback failed on certificate at "
                           "depth %d: %r", certificate.depth, fault.fault)
            return VerificationResult(False, fault)
        logger.debug("Verification callback %s certificate at depth %d "
                     "(preverify_ok=%s)",
                     "accepts" if accepted else "rejects",
                     certificate.depth, preverifyOk)
        return VerificationResult(accepted, None)
