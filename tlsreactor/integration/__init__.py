# Copyright (c) 2026, tlsreactor developers
#
# See the LICENSE file for legal information regarding use of this file.

"""Classes for driving tlsreactor handshakes from an event loop."""

__all__ = ["Reactor",
           "Listener",
           "Connection",
           "ConnectionHandler"]
