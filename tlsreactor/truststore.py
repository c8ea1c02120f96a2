# Copyright (c) 2026, tlsreactor developers
#
# See the LICENSE file for legal information regarding use of this file.

"""Class representing the set of CA certificates trusted for peers."""

import logging

from cryptography import x509
from OpenSSL import crypto

from .certificate import PresentedCertificate
from .errors import TLSConfigurationError

logger = logging.getLogger(__name__)


class TrustStore(object):
    """This class represents the CA certificates used for preverification.

    The store is read-only once built, so a single instance may be
    installed into any number of SSL contexts and shared by every
    connection using them.

    @type caList: tuple
    @ivar caList: The parsed CA certificates, as
    L{cryptography.x509.Certificate} instances.

    @type path: str
    @ivar path: file the certificates were read from, None for a store
    that was not loaded from a file.
    """

    def __init__(self, caList=None, path=None):
        """Create a new TrustStore.

        @type caList: list
        @param caList: A list of L{cryptography.x509.Certificate}
        instances. An empty or missing list gives an empty store.
        """
        if caList:
            self.caList = tuple(caList)
        else:
            self.caList = ()
        self.path = path

    @classmethod
    def fromFile(cls, path):
        """Load every PEM certificate found in a CA bundle.

        @type path: str
        @param path: path of the bundle

        @raise tlsreactor.errors.TLSConfigurationError: If the file can't
        be read or holds no certificate.
        """
        try:
            with open(path, "rb") as bundle:
                data = bundle.read()
        except (IOError, OSError) as err:
            raise TLSConfigurationError("Can't read CA bundle {0}: {1}"
                                        .format(path, err))
        try:
            caList = x509.load_pem_x509_certificates(data)
        except ValueError as err:
            raise TLSConfigurationError("No valid CA certificate in {0}: {1}"
                                        .format(path, err))
        if not caList:
            raise TLSConfigurationError("No valid CA certificate in {0}"
                                        .format(path))
        logger.debug("Loaded %d CA certificate(s) from %s", len(caList), path)
        return cls(caList, path)

    def isEmpty(self):
        """Check if the store holds no CA at all.

        With an empty store no peer can pass preverification.

        @rtype: bool
        """
        return len(self.caList) == 0

    def __len__(self):
        return len(self.caList)

    def __iter__(self):
        return iter(self.caList)

    def getFingerprints(self):
        """Get the hex-encoded SHA-256 fingerprints of the CAs.

        @rtype: list
        """
        return [PresentedCertificate.fromCryptography(ca).getFingerprint()
                for ca in self.caList]

    def installInto(self, context):
        """Add every CA to the certificate store of an SSL context.

        @type context: L{OpenSSL.SSL.Context}
        """
        store = context.get_cert_store()
        for ca in self.caList:
            store.add_cert(crypto.X509.from_cryptography(ca))

    def __repr__(self):
        return "TrustStore(path={0!r}, size={1})".format(self.path,
                                                         len(self.caList))


def loadTrustStore(path=None):
    """Build the trust store for a configuration.

    No path means an empty store, which is not an error.

    @type path: str
    @param path: optional path of a PEM CA bundle

    @rtype: L{TrustStore}
    """
    if not path:
        return TrustStore()
    return TrustStore.fromFile(path)
