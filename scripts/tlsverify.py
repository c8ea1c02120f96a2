#!/usr/bin/env python

# Copyright (c) 2026, tlsreactor developers
#
# See the LICENSE file for legal information regarding use of this file.
import sys
import getopt
import logging

from tlsreactor import __version__
from tlsreactor.api import Reactor, ConnectionHandler, ContextFactory, \
        HandshakeConfig, TLSConfigurationError, TLSVerificationRejected


def printUsage(s=None):
    if s:
        print("ERROR: %s" % s)

    print("")
    print("Version: %s" % __version__)
    print("""
Commands:

  server
    -k KEY -c CERT [-a CAFILE] [--verify] [--fail-if-no-peer-cert] [-v]
    HOST:PORT

  client
    [-k KEY] [-c CERT] [-a CAFILE] [--verify] [-s SNI] [-v] HOST:PORT

  KEY - PEM private key of this endpoint
  CERT - PEM certificate chain of this endpoint
  CAFILE - PEM bundle of CA certificates trusted for the peer
  --verify - request and verify the peer certificate
  -v - print debugging output
""")
    sys.exit(-1)


def printError(s):
    """Print error message and exit"""
    sys.stderr.write("ERROR: %s\n" % s)
    sys.exit(-1)


def handleArgs(argv, argString, flagsList=None):
    # Convert to getopt argstring format:
    # Add ":" after each arg, ie "abc" -> "a:b:c:"
    getOptArgString = ":".join(argString) + ":"
    if flagsList is None:
        flagsList = []
    try:
        opts, argv = getopt.getopt(argv, getOptArgString + "v", flagsList)
    except getopt.GetoptError as e:
        printError(e)

    config = HandshakeConfig()
    for opt, arg in opts:
        if opt == "-k":
            config.privateKeyFile = arg
        elif opt == "-c":
            config.certChainFile = arg
        elif opt == "-a":
            config.certAuthFile = arg
        elif opt == "-s":
            config.sniHostname = arg
        elif opt == "--verify":
            config.verifyPeer = True
        elif opt == "--fail-if-no-peer-cert":
            config.failIfNoPeerCert = True
        elif opt == "-v":
            logging.getLogger().setLevel(logging.DEBUG)
        else:
            printError("Unsupported option: %s" % opt)

    if not argv:
        printError("Missing address")
    if len(argv) > 1:
        printError("Too many arguments")
    #Split address into hostname/port tuple
    address = argv[0].split(":")
    if len(address) != 2:
        printError("Must specify <host>:<port>")
    address = (address[0], int(address[1]))

    try:
        factory = ContextFactory(config)
    except TLSConfigurationError as e:
        printError(e)
    return address, factory


def printPeerCertificate(certificate, preverifyOk):
    print("  Peer certificate (depth %d): %s" % (certificate.depth,
                                                  certificate.subject))
    print("    Issuer: %s" % certificate.issuer)
    print("    SHA-256: %s" % certificate.getFingerprint())
    print("    Preverify: %s" % ("OK" if preverifyOk else "FAILED"))


class PrintingHandler(ConnectionHandler):
    """Reports every event of a connection on stdout."""

    def __init__(self, factory, reactor=None):
        self.factory = factory
        self.reactor = reactor

    def onConnected(self, connection):
        print("Connected, starting TLS...")
        connection.startTLS(self.factory)

    def onVerifyPeer(self, certificate, preverifyOk):
        printPeerCertificate(certificate, preverifyOk)
        return preverifyOk

    def onHandshakeCompleted(self, connection):
        print("Handshake completed")
        print("  Version: %s" % connection.getProtocolVersion())
        print("  Cipher: %s" % connection.getCipherName())
        if self.reactor is not None:
            connection.close()

    def onError(self, connection, error):
        print("Error: %s" % error)

    def onClosed(self, connection, reason):
        if isinstance(reason, TLSVerificationRejected):
            print("Closed: peer rejected (%s)" % reason)
        elif reason is not None:
            print("Closed: %s" % reason)
        else:
            print("Closed")
        if self.reactor is not None:
            self.reactor.stop()


def clientCmd(argv):
    address, factory = handleArgs(argv, "kcas", ["verify"])

    reactor = Reactor()
    reactor.connect(address[0], address[1], PrintingHandler(factory, reactor))
    try:
        reactor.run()
    finally:
        reactor.close()


def serverCmd(argv):
    address, factory = handleArgs(argv, "kca",
                                  ["verify", "fail-if-no-peer-cert"])
    if not factory.config.hasIdentity():
        printError("Must specify CERT and KEY")

    print("I am a TLS test server, I will listen on %s:%d" %
          (address[0], address[1]))
    if factory.config.verifyPeer:
        print("Asking for client certificates, %d trusted CA(s)..." %
              len(factory.trustStore))

    reactor = Reactor()
    reactor.listen(address[0], address[1], lambda: PrintingHandler(factory))
    try:
        reactor.run()
    except KeyboardInterrupt:
        pass
    finally:
        reactor.close()


if __name__ == '__main__':
    logging.basicConfig(format="%(levelname)s %(name)s: %(message)s",
                        level=logging.WARNING)
    if len(sys.argv) < 2:
        printUsage("Missing command")
    elif sys.argv[1] == "client"[:len(sys.argv[1])]:
        clientCmd(sys.argv[2:])
    elif sys.argv[1] == "server"[:len(sys.argv[1])]:
        serverCmd(sys.argv[2:])
    else:
        printUsage("Unknown command: %s" % sys.argv[1])
