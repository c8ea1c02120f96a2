# Copyright (c) 2026, tlsreactor developers
#
# See the LICENSE file for legal information regarding use of this file.

"""Exception classes and handshake outcomes."""
import socket


class BaseTLSReactorException(Exception):
    """
    Metaclass for tlsreactor exceptions.

    Look to :py:class:`tlsreactor.errors.TLSError` for exceptions that
    should be caught by tlsreactor consumers
    """

    pass


class TLSError(BaseTLSReactorException):
    """Base class for all tlsreactor exceptions."""

    def __str__(self):
        """At least print out the Exception type for str(...)."""
        if self.args:
            return "{0}: {1}".format(type(self).__name__, self.args[0])
        return repr(self)


class TLSConfigurationError(TLSError, ValueError):
    """The handshake configuration is unusable.

    Raised while the configuration is validated or the SSL context is
    built: missing or unreadable key and certificate material, a key that
    does not match the certificate, an unreadable CA bundle or one that
    contains no CA certificate, unknown options. The handshake never
    starts with such a configuration.
    """

    pass


class TLSCallbackFault(TLSError):
    """The application verification callback raised an exception.

    The certificate is rejected (fail closed) and this error is delivered
    to the connection handler's error channel.

    :vartype fault: Exception
    :ivar fault: the exception raised by the callback

    :vartype certificate: ~tlsreactor.certificate.PresentedCertificate
    :ivar certificate: certificate that was being verified
    """

    def __init__(self, fault, certificate=None):
        TLSError.__init__(self, "verification callback raised {0!r}"
                          .format(fault))
        self.fault = fault
        self.certificate = certificate


class TLSTransportError(TLSError):
    """The socket or the TLS protocol failed.

    The handshake is aborted and the connection closed; tlsreactor never
    retries on its own.
    """

    pass


class TLSClosedConnectionError(TLSTransportError, socket.error):
    """The connection was closed while the handshake was in progress."""

    pass


class TLSInternalError(TLSError):
    """The internal state of object is unexpected or invalid.

    Caused by incorrect use of API.
    """

    pass


class TLSVerificationRejected(object):
    """The peer certificate was rejected.

    This is an outcome, not an exception: it is never raised. It is
    delivered as the close reason of the connection whose handshake it
    aborted. The peer is not told why the session was refused.

    :vartype certificate: ~tlsreactor.certificate.PresentedCertificate
    :ivar certificate: the rejected certificate, None when the peer
        presented no certificate at all

    :vartype preverifyOk: bool
    :ivar preverifyOk: outcome of chain validation against the trust store

    :vartype fault: TLSCallbackFault
    :ivar fault: set when the rejection was caused by a failing callback
    """

    def __init__(self, certificate=None, preverifyOk=False, fault=None,
                 message=None):
        self.certificate = certificate
        self.preverifyOk = preverifyOk
        self.fault = fault
        self.message = message

    def __str__(self):
        if self.message:
            return "verification rejected: " + self.message
        if self.certificate is None:
            return "verification rejected"
        return "verification rejected: {0} (depth {1})".format(
            self.certificate.subject, self.certificate.depth)

    def __repr__(self):
        return ("TLSVerificationRejected(certificate={0!r}, preverifyOk={1!r}"
                ", fault={2!r})".format(self.certificate, self.preverifyOk,
                                        self.fault))
