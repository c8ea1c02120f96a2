# Copyright (c) 2026, tlsreactor developers
#
# See the LICENSE file for legal information regarding use of this file.

"""
tlsreactor negotiates TLS sessions on connections driven by an event loop
and lets the application decide, certificate by certificate, whether the
peer is accepted. Record-layer cryptography is done by OpenSSL through
pyOpenSSL.

To use, do::

    from tlsreactor.api import *

Then create a L{tlsreactor.integration.reactor.Reactor}, give every
connection a L{tlsreactor.integration.handler.ConnectionHandler} and call
C{connection.startTLS()} with a L{tlsreactor.contextfactory.ContextFactory}
built from a L{tlsreactor.handshakeconfig.HandshakeConfig}.
"""
__version__ = "0.1.0"

from .constants import HandshakeState, IODirection, VerifyHookType
from .errors import *
from .certificate import PresentedCertificate
from .truststore import TrustStore, loadTrustStore
from .verifyhook import VerifyHook
from .verifier import Verifier, VerificationResult
from .handshakeconfig import HandshakeConfig
from .handshake import TLSHandshake, HandshakeListener
from .contextfactory import ContextFactory
from .integration.handler import ConnectionHandler
from .integration.connection import Connection
from .integration.reactor import Reactor, Listener
