# Copyright (c) 2026, tlsreactor developers
#
# See the LICENSE file for legal information regarding use of this file.

"""Application side of a reactor connection."""

import logging

from ..verifyhook import VerifyHook

logger = logging.getLogger(__name__)


class ConnectionHandler(object):
    """This class receives the events of one connection.

    Subclass it, or assign callables to the instance attributes, to give a
    connection its behaviour. A handler is injected into the connection
    when it is created::

        class Server(ConnectionHandler):
            def onConnected(self, connection):
                connection.startTLS(contextFactory)

            def onVerifyPeer(self, certificate, preverifyOk):
                return preverifyOk and certificate.depth < 3

    onVerifyPeer may be declared with no argument, with the certificate
    only, or with the certificate and the preverification result. A
    handler that does not provide it registers no verification callback
    and the default policy applies.
    """

    def onConnected(self, connection):
        """The connection is established, TLS may be started."""
        pass

    def onVerifyPeer(self, certificate, preverifyOk):
        """Judge a peer certificate. Only used when overridden."""
        return preverifyOk

    def onHandshakeCompleted(self, connection):
        """The TLS handshake succeeded. Called at most once."""
        pass

    def onData(self, connection, data):
        """Application data arrived."""
        pass

    def onError(self, connection, error):
        """
        An error that doesn't by itself close the connection happened.

        Faults of the verification callback are reported here.
        """
        logger.error("Error on %r: %s", connection, error)

    def onClosed(self, connection, reason):
        """
        The connection is closed.

        reason is None for a close requested locally or a clean close by
        the peer, a :py:class:`tlsreactor.errors.TLSVerificationRejected`
        when the peer certificate was refused, or a
        :py:class:`tlsreactor.errors.TLSTransportError`.
        """
        pass

    def getVerifyHook(self):
        """
        Return the verification hook this handler registers.

        :rtype: ~tlsreactor.verifyhook.VerifyHook
        """
        if "onVerifyPeer" not in vars(self) and \
                type(self).onVerifyPeer is ConnectionHandler.onVerifyPeer:
            return VerifyHook.none()
        return VerifyHook.fromCallable(self.onVerifyPeer)
