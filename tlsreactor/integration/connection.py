# Copyright (c) 2026, tlsreactor developers
#
# See the LICENSE file for legal information regarding use of this file.

"""Reactor connection carrying a TLS handshake."""

import asyncio
import logging

from ..constants import HandshakeState, IODirection
from ..contextfactory import ContextFactory
from ..errors import TLSConfigurationError, TLSInternalError, \
        TLSTransportError
from ..handshake import HandshakeListener, TLSHandshake
from ..handshakeconfig import HandshakeConfig

logger = logging.getLogger(__name__)


class Connection(asyncio.Protocol, HandshakeListener):
    """
    A stream connection driven by a reactor's asyncio loop.

    The connection passes the bytes the transport delivers to
    :py:meth:`TLSHandshake.onIoReady
    <tlsreactor.handshake.TLSHandshake.onIoReady>`, writes the ciphertext
    the handshake produces, and turns the outcome of the handshake into
    handler events. Verification decisions are made by the handshake,
    never here.

    :vartype handler: ~tlsreactor.integration.handler.ConnectionHandler
    :ivar handler: receiver of the connection events

    :vartype isServer: bool
    :ivar isServer: whether this end was accepted by a listener
    """

    def __init__(self, reactor, handler, isServer):
        self.reactor = reactor
        self.handler = handler
        self.isServer = isServer
        self.handshake = None
        self.transport = None
        self._closing = False
        self._closed = False
        self._closeReason = None
        reactor.addChannel(self)

    def __repr__(self):
        return "<Connection {0}>".format(
            "server" if self.isServer else "client")

    def isClosed(self):
        return self._closed

    # asyncio.Protocol

    def connection_made(self, transport):
        self.transport = transport
        if self._closing:
            transport.abort()
            return
        try:
            self.handler.onConnected(self)
        except TLSConfigurationError as err:
            logger.error("Can't start TLS on %r: %s", self, err)
            self.handler.onError(self, err)
            self.close(reason=err)

    def data_received(self, data):
        if self._closing:
            return
        if self.handshake is None:
            self.handler.onData(self, data)
            return
        self.handshake.feed(data)
        self._advance()

    def eof_received(self):
        if self._closing:
            return None
        if self.handshake is None:
            self.close()
            return None
        self.handshake.feedEOF()
        self._advance()
        if not self._closing:
            self.close(reason=TLSTransportError("Peer closed the "
                                                "connection"))
        return None

    def connection_lost(self, exc):
        if exc is not None:
            error = TLSTransportError("Connection lost: {0}".format(exc))
            error.__cause__ = exc
            self._teardown(error)
        else:
            self._teardown()

    # public API

    def startTLS(self, contextFactory=None):
        """
        Begin the TLS handshake on this connection.

        :type contextFactory: ~tlsreactor.contextfactory.ContextFactory
        :param contextFactory: shared context; a
            :py:class:`~tlsreactor.handshakeconfig.HandshakeConfig` is
            accepted too and gets a context of its own
        :raises TLSConfigurationError: if the configuration is unusable,
            or lacks a certificate on the server side
        """
        if self.handshake is not None:
            raise TLSInternalError("TLS already started on {0!r}"
                                   .format(self))
        if self.transport is None or self._closing:
            raise TLSInternalError("TLS needs an open connection")
        if contextFactory is None or \
                isinstance(contextFactory, HandshakeConfig):
            contextFactory = ContextFactory(contextFactory)
        self.handshake = TLSHandshake(contextFactory, self.isServer,
                                      listener=self,
                                      verifyHook=self.handler.getVerifyHook())
        self.handshake.start()
        self._flushTLS()

    def write(self, data):
        """Send application data, encrypted once TLS is established."""
        if self._closing or self.transport is None:
            raise TLSInternalError("Write on closed connection")
        if self.handshake is None:
            self.transport.write(data)
            return
        self.handshake.writeApplicationData(data)
        self._flushTLS()

    def getPeerCertificate(self):
        """Peer end-entity certificate, None before the handshake ends."""
        if self.handshake is None or \
                self.handshake.getState() != HandshakeState.completed:
            return None
        return self.handshake.getPeerCertificate()

    def getCipherName(self):
        if self.handshake is None:
            return None
        return self.handshake.getCipherName()

    def getProtocolVersion(self):
        if self.handshake is None:
            return None
        return self.handshake.getProtocolVersion()

    # HandshakeListener

    def handshakeCompleted(self, handshake):
        self.handler.onHandshakeCompleted(self)

    def handshakeAborted(self, handshake, reason):
        # the alert OpenSSL queued still goes out before the close
        self.close(afterWriting=True, reason=reason)

    def verificationFault(self, handshake, fault):
        self.handler.onError(self, fault)

    # internals

    def _advance(self):
        handshake = self.handshake
        if handshake.getState() == HandshakeState.inProgress:
            handshake.onIoReady(IODirection.read)
        if handshake.getState() == HandshakeState.completed and \
                not self._closing:
            try:
                data, finished = handshake.readApplicationData()
            except TLSTransportError as err:
                self.close(reason=err)
                return
            if data:
                self.handler.onData(self, data)
            if finished:
                self.close()
        self._flushTLS()

    def _flushTLS(self):
        if self._closing or self.handshake is None:
            return
        self._sendPending()

    def _sendPending(self):
        output = self.handshake.pendingOutput()
        if output:
            self.transport.write(output)

    def close(self, afterWriting=False, reason=None):
        """
        Close the connection.

        A handshake still in progress is aborted at once and never
        completes; a completed TLS session first sends close_notify.
        handler.onClosed() is called from the loop once the transport is
        gone.

        :type afterWriting: bool
        :param afterWriting: send buffered data before closing
        """
        if self._closed:
            return
        if reason is not None and self._closeReason is None:
            self._closeReason = reason
        if self._closing:
            return
        self._closing = True

        if self.handshake is not None:
            state = self.handshake.getState()
            if state == HandshakeState.inProgress:
                self.handshake.cancel()
                if self._closeReason is None:
                    self._closeReason = self.handshake.closeReason
            elif state == HandshakeState.completed:
                self.handshake.shutdown()
                afterWriting = True
            if afterWriting and self.transport is not None:
                self._sendPending()

        if self.transport is None:
            return
        if afterWriting:
            self.transport.close()
        else:
            self.transport.abort()

    def abort(self):
        """Close without sending anything more."""
        self.close(reason=TLSTransportError("Connection aborted"))

    def _connectionFailed(self, reason):
        self._closing = True
        self._teardown(reason)

    def _teardown(self, reason=None):
        if self._closed:
            return
        self._closed = True
        self._closing = True
        if reason is not None and self._closeReason is None:
            self._closeReason = reason
        if self.handshake is not None:
            self.handshake.cancel()
        self.reactor.removeChannel(self)
        logger.debug("Closed %r: %s", self, self._closeReason)
        self.handler.onClosed(self, self._closeReason)
