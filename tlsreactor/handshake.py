# Copyright (c) 2026, tlsreactor developers
#
# See the LICENSE file for legal information regarding use of this file.

"""The resumable TLS handshake driven by socket readiness events."""

import logging

from OpenSSL import SSL

from .certificate import PresentedCertificate
from .constants import HandshakeState, IODirection
from .errors import TLSClosedConnectionError, TLSConfigurationError, \
        TLSInternalError, TLSTransportError, TLSVerificationRejected
from .verifier import Verifier
from .verifyhook import VerifyHook

logger = logging.getLogger(__name__)


def openSSLVerifyCallback(sslConnection, x509, errorNumber, depth, ok):
    """Route the OpenSSL verify callback to the owning TLSHandshake."""
    handshake = sslConnection.get_app_data()
    certificate = PresentedCertificate.fromOpenSSL(x509, depth, errorNumber)
    return handshake._onVerifyStep(certificate, bool(ok))


class HandshakeListener(object):
    """Receiver of the outcome of a TLSHandshake."""

    def handshakeCompleted(self, handshake):
        pass

    def handshakeAborted(self, handshake, reason):
        pass

    def verificationFault(self, handshake, fault):
        pass


class TLSHandshake(object):
    """
    TLS negotiation of one connection.

    The handshake never touches the socket. Ciphertext received from the
    peer is passed to :py:meth:`feed`, ciphertext to send is taken from
    :py:meth:`pendingOutput`, and :py:meth:`onIoReady` advances the
    negotiation as far as the available data allows. OpenSSL calls back
    into :py:meth:`_onVerifyStep` for every certificate of the peer chain
    while onIoReady runs.

    :vartype verifier: ~tlsreactor.verifier.Verifier
    :ivar verifier: decision engine for peer certificates

    :vartype peerCertificates: list
    :ivar peerCertificates: certificates judged so far, in the order
        OpenSSL presented them

    :vartype closeReason: object
    :ivar closeReason: why the handshake was aborted, None otherwise
    """

    readSize = 16384

    def __init__(self, contextFactory, isServer, listener=None,
                 verifyHook=None):
        """
        Prepare a handshake, :py:meth:`start` begins the negotiation.

        :type contextFactory: ~tlsreactor.contextfactory.ContextFactory
        :param contextFactory: source of the shared SSL context

        :type isServer: bool
        :param isServer: whether this end accepts the handshake

        :type listener: HandshakeListener
        :param listener: notified of completion, abort and callback faults

        :type verifyHook: ~tlsreactor.verifyhook.VerifyHook
        :param verifyHook: hook used when the configuration has none

        :raises TLSConfigurationError: for a server without private key and
            certificate
        """
        self.config = contextFactory.config
        self.isServer = isServer
        if isServer and not self.config.hasIdentity():
            raise TLSConfigurationError("A server needs a private key and "
                                        "a certificate chain")
        if listener is None:
            listener = HandshakeListener()
        self.listener = listener

        hook = self.config.verifyHook
        if not hook.isRegistered():
            hook = VerifyHook.fromCallable(verifyHook)
        self.verifier = Verifier(self.config.verifyPeer, hook)

        self.peerCertificates = []
        self.closeReason = None
        self._state = HandshakeState.notStarted
        self._stepper = None
        self._rejection = None
        self._accepted = set()

        self._ssl = SSL.Connection(contextFactory.getContext(), None)
        self._ssl.set_app_data(self)

    def getState(self):
        """Return one of :py:class:`tlsreactor.constants.HandshakeState`."""
        return self._state

    def _setState(self, state):
        logger.debug("%s handshake %s -> %s",
                     "Server" if self.isServer else "Client",
                     HandshakeState.toStr(self._state),
                     HandshakeState.toStr(state))
        self._state = state

    def start(self):
        """
        Begin the negotiation.

        A client queues its ClientHello in :py:meth:`pendingOutput`.

        :raises TLSInternalError: when the handshake was already started
        """
        if self._state != HandshakeState.notStarted:
            raise TLSInternalError("Handshake already started")
        if self.isServer:
            self._ssl.set_accept_state()
        else:
            self._ssl.set_connect_state()
            if self.config.sniHostname:
                hostname = self.config.sniHostname
                if not isinstance(hostname, bytes):
                    hostname = hostname.encode("idna")
                self._ssl.set_tlsext_host_name(hostname)
        self._setState(HandshakeState.inProgress)
        self._stepper = self._handshakeSteps()
        return self.onIoReady(IODirection.write)

    def _handshakeSteps(self):
        """Generator running the negotiation.

        Each iteration yields the direction OpenSSL is waiting on and
        returns once the handshake succeeded.
        """
        while True:
            try:
                self._ssl.do_handshake()
            except SSL.WantReadError:
                yield IODirection.read
            except SSL.WantWriteError:
                yield IODirection.write
            else:
                return

    def onIoReady(self, direction):
        """
        Advance the negotiation after the socket became ready.

        Does nothing once the handshake reached a terminal state.

        :type direction: int
        :param direction: :py:class:`tlsreactor.constants.IODirection`
        :rtype: int
        :returns: the state after the step
        """
        if self._state != HandshakeState.inProgress:
            return self._state
        try:
            next(self._stepper)
        except StopIteration:
            self._complete()
        except SSL.Error as err:
            self._abort(self._reasonFor(err))
        return self._state

    def _onVerifyStep(self, certificate, preverifyOk):
        """
        Judge one certificate of the peer chain.

        Returns the value handed back to OpenSSL; False makes it abort the
        negotiation with a generic alert.
        """
        if self._state != HandshakeState.inProgress or \
                self._rejection is not None:
            return False
        # OpenSSL may report several errors for the same certificate
        if certificate.depth in self._accepted:
            return True

        self.peerCertificates.append(certificate)
        result = self.verifier(certificate, preverifyOk)
        if result.fault is not None:
            try:
                self.listener.verificationFault(self, result.fault)
            except Exception:
                logger.exception("Error while reporting %s", result.fault)

        # closed while the application callback ran, discard the result
        if self._state != HandshakeState.inProgress:
            return False

        if not result.accepted:
            self._rejection = TLSVerificationRejected(certificate,
                                                      preverifyOk,
                                                      result.fault)
            logger.warning("Rejected peer certificate %s at depth %d "
                           "(preverify_ok=%s)", certificate.subject,
                           certificate.depth, preverifyOk)
            return False
        self._accepted.add(certificate.depth)
        return True

    def _reasonFor(self, err):
        if self._rejection is not None:
            return self._rejection
        if self.config.failIfNoPeerCert and not self.peerCertificates:
            return TLSVerificationRejected(
                message="peer did not present a certificate")
        error = TLSTransportError("TLS negotiation failed: {0}".format(err))
        error.__cause__ = err
        return error

    def _complete(self):
        if self._rejection is not None:
            self._abort(self._rejection)
            return
        self._setState(HandshakeState.completed)
        self._stepper = None
        logger.info("%s handshake completed: %s, %s",
                    "Server" if self.isServer else "Client",
                    self.getProtocolVersion(), self.getCipherName())
        self.listener.handshakeCompleted(self)

    def _abort(self, reason):
        if self._state in HandshakeState.terminal:
            return
        self._setState(HandshakeState.aborted)
        self._stepper = None
        self.closeReason = reason
        logger.debug("Handshake aborted: %s", reason)
        self.listener.handshakeAborted(self, reason)

    def cancel(self):
        """
        Abort a handshake in progress because the connection is closing.

        The listener is not notified; any verification decision produced
        after this call is discarded.

        :rtype: bool
        :returns: True if the handshake was in progress
        """
        if self._state != HandshakeState.inProgress:
            return False
        self._setState(HandshakeState.aborted)
        self._stepper = None
        self.closeReason = TLSClosedConnectionError(
            "Connection closed during handshake")
        return True

    def feed(self, data):
        """Pass ciphertext received from the peer."""
        self._ssl.bio_write(data)

    def feedEOF(self):
        """Signal that the peer closed the socket."""
        self._ssl.bio_shutdown()

    def pendingOutput(self):
        """
        Take the ciphertext waiting to be sent to the peer.

        :rtype: bytes
        """
        chunks = []
        while True:
            try:
                chunk = self._ssl.bio_read(self.readSize)
            except SSL.WantReadError:
                break
            if not chunk:
                break
            chunks.append(chunk)
        return b"".join(chunks)

    def _checkCompleted(self):
        if self._state != HandshakeState.completed:
            raise TLSInternalError("Handshake not completed")

    def writeApplicationData(self, data):
        """Encrypt application data, to be sent with pendingOutput()."""
        self._checkCompleted()
        data = bytes(data)
        while data:
            try:
                sent = self._ssl.send(data)
            except SSL.Error as err:
                raise TLSTransportError("Can't send: {0}".format(err)) \
                        from err
            data = data[sent:]

    def readApplicationData(self):
        """
        Decrypt the application data fed so far.

        :rtype: tuple
        :returns: the data and whether the peer sent close_notify
        :raises TLSTransportError: on protocol errors or a truncated stream
        """
        self._checkCompleted()
        chunks = []
        while True:
            try:
                chunk = self._ssl.recv(self.readSize)
            except SSL.WantReadError:
                return b"".join(chunks), False
            except SSL.ZeroReturnError:
                return b"".join(chunks), True
            except SSL.Error as err:
                raise TLSTransportError("Can't receive: {0}".format(err)) \
                        from err
            chunks.append(chunk)

    def shutdown(self):
        """Queue a close_notify alert."""
        if self._state != HandshakeState.completed:
            return
        try:
            self._ssl.shutdown()
        except SSL.Error as err:
            logger.debug("Error sending close_notify: %s", err)

    def getPeerCertificate(self):
        """
        Return the peer end-entity certificate of a completed handshake.

        :rtype: ~tlsreactor.certificate.PresentedCertificate
        """
        cert = self._ssl.get_peer_certificate()
        if cert is None:
            return None
        return PresentedCertificate.fromOpenSSL(cert)

    def getCipherName(self):
        return self._ssl.get_cipher_name()

    def getProtocolVersion(self):
        return self._ssl.get_protocol_version_name()
