# Copyright (c) 2026, tlsreactor developers
#
# See the LICENSE file for legal information regarding use of this file.

"""Import this module for easy access to tlsreactor objects.

The tlsreactor API consists of classes, functions, and variables spread
throughout this package.  Instead of importing them individually with::

    from tlsreactor.handshakeconfig import HandshakeConfig
    from tlsreactor.integration.reactor import Reactor
    from tlsreactor.errors import *
    .
    .

It's easier to do::

    from tlsreactor.api import *

This imports all the important objects (Reactor, ConnectionHandler,
HandshakeConfig, ContextFactory, etc.) into the global namespace.
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
