# Copyright (c) 2026, tlsreactor developers
#
# See the LICENSE file for legal information regarding use of this file.

"""An explicitly owned asyncio event loop driving tlsreactor connections."""

import asyncio
import logging

from ..errors import TLSTransportError
from .connection import Connection

logger = logging.getLogger(__name__)


class Listener(object):
    """Listening socket creating a Connection per accepted peer."""

    def __init__(self, reactor, server):
        self.reactor = reactor
        self.server = server
        self._closed = False
        reactor.addChannel(self)

    def getAddress(self):
        return self.server.sockets[0].getsockname()

    def close(self):
        if self._closed:
            return
        self._closed = True
        self.server.close()
        self.reactor.removeChannel(self)


class Reactor(object):
    """
    Event loop driving connections through asyncio.

    Every reactor owns a loop of its own, created with
    :py:func:`asyncio.new_event_loop`; connections are created through an
    instance and only that instance drives them. :py:meth:`run` returns
    when :py:meth:`stop` is called, when no listener and no connection is
    left, or when the timeout expires.

    Listeners and connections register themselves as channels so that the
    reactor knows when nothing is left to do.

    :vartype loop: asyncio.AbstractEventLoop
    :ivar loop: the loop, usable for scheduling with ``call_soon`` and
        ``call_later``
    """

    def __init__(self, loop=None):
        if loop is None:
            loop = asyncio.new_event_loop()
        self.loop = loop
        self._channels = set()
        self._done = None

    def addChannel(self, channel):
        self._channels.add(channel)

    def removeChannel(self, channel):
        self._channels.discard(channel)
        if not self._channels:
            self._finish()

    def getChannelCount(self):
        return len(self._channels)

    def _finish(self):
        if self._done is not None and not self._done.done():
            self._done.set_result(None)

    def listen(self, host, port, handlerFactory):
        """
        Accept connections on host:port.

        Must be called while the loop is not running.

        :param handlerFactory: called without arguments for every accepted
            connection, returns its
            :py:class:`~tlsreactor.integration.handler.ConnectionHandler`
        :rtype: Listener
        """
        def protocolFactory():
            return Connection(self, handlerFactory(), isServer=True)

        server = self.loop.run_until_complete(
            self.loop.create_server(protocolFactory, host, port,
                                    reuse_address=True))
        logger.debug("Listening on %s", server.sockets[0].getsockname())
        return Listener(self, server)

    def connect(self, host, port, handler):
        """
        Open a connection to host:port.

        handler.onConnected() is called once the connection is
        established, handler.onClosed() with a
        :py:class:`~tlsreactor.errors.TLSTransportError` if it can't be.

        :rtype: ~tlsreactor.integration.connection.Connection
        """
        connection = Connection(self, handler, isServer=False)
        self._establish(connection,
                        self.loop.create_connection(lambda: connection,
                                                    host, port))
        return connection

    def adopt(self, sock, handler, isServer):
        """
        Drive an already connected socket.

        handler.onConnected() is called from the loop.

        :rtype: ~tlsreactor.integration.connection.Connection
        """
        connection = Connection(self, handler, isServer)
        if isServer:
            coro = self.loop.connect_accepted_socket(lambda: connection,
                                                     sock)
        else:
            coro = self.loop.create_connection(lambda: connection, sock=sock)
        self._establish(connection, coro)
        return connection

    def _establish(self, connection, coro):
        def done(task):
            if task.cancelled():
                connection._connectionFailed(
                    TLSTransportError("Connect cancelled"))
            elif task.exception() is not None:
                err = task.exception()
                error = TLSTransportError("Connect failed: {0}".format(err))
                error.__cause__ = err
                connection._connectionFailed(error)

        self.loop.create_task(coro).add_done_callback(done)

    def stop(self):
        """Make run() return."""
        self._finish()

    def run(self, timeout=None):
        """
        Run the loop.

        :type timeout: float
        :param timeout: seconds after which the loop gives up
        :rtype: bool
        :returns: False if the timeout expired, True otherwise
        """
        if not self._channels:
            return True
        self._done = self.loop.create_future()
        try:
            self.loop.run_until_complete(
                asyncio.wait_for(self._done, timeout))
        except asyncio.TimeoutError:
            logger.warning("Reactor timed out with %d channel(s)",
                           len(self._channels))
            return False
        finally:
            self._done = None
        return True

    def close(self):
        """Drop what is still open and release the loop."""
        for channel in list(self._channels):
            if isinstance(channel, Listener):
                channel.close()
            else:
                channel.abort()
        pending = asyncio.all_tasks(self.loop)
        for task in pending:
            task.cancel()
        # let the transports deliver connection_lost
        self.loop.run_until_complete(
            asyncio.gather(asyncio.sleep(0), *pending,
                           return_exceptions=True))
        self.loop.close()
