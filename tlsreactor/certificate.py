# Copyright (c) 2026, tlsreactor developers
#
# See the LICENSE file for legal information regarding use of this file.

"""Class representing a certificate presented by the peer."""

from binascii import b2a_hex

from cryptography import x509
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.serialization import Encoding


class PresentedCertificate(object):
    """
    A certificate observed while verifying the peer's chain.

    The object holds a copy of the DER encoding, not the handle OpenSSL
    passes to the verify callback, so it may be kept after the callback
    returns.

    :vartype der: bytes
    :ivar der: The DER-encoded ASN.1 certificate

    :vartype depth: int
    :ivar depth: Position in the verified chain, 0 for the end-entity
        certificate

    :vartype errorNumber: int
    :ivar errorNumber: OpenSSL X509_V_ERR code reported by chain
        validation for this certificate, 0 when it validated
    """

    def __init__(self, der, depth=0, errorNumber=0):
        self.der = bytes(der)
        self.depth = depth
        self.errorNumber = errorNumber
        self._certificate = None

    @classmethod
    def fromOpenSSL(cls, x509Handle, depth=0, errorNumber=0):
        """Copy a pyOpenSSL X509 handle."""
        cert = x509Handle.to_cryptography()
        return cls(cert.public_bytes(Encoding.DER), depth, errorNumber)

    @classmethod
    def fromCryptography(cls, certificate, depth=0, errorNumber=0):
        """Wrap a :py:class:`cryptography.x509.Certificate`."""
        return cls(certificate.public_bytes(Encoding.DER), depth, errorNumber)

    def toCryptography(self):
        """
        Parse the certificate.

        :rtype: cryptography.x509.Certificate
        """
        if self._certificate is None:
            self._certificate = x509.load_der_x509_certificate(self.der)
        return self._certificate

    @property
    def pem(self):
        """PEM encoding of the certificate, as text."""
        return self.toCryptography().public_bytes(Encoding.PEM).decode("ascii")

    @property
    def subject(self):
        """RFC 4514 string of the subject name."""
        return self.toCryptography().subject.rfc4514_string()

    @property
    def issuer(self):
        """RFC 4514 string of the issuer name."""
        return self.toCryptography().issuer.rfc4514_string()

    def getFingerprint(self, algorithm="sha256"):
        """
        Get the hex-encoded fingerprint of this certificate.

        :type algorithm: str
        :param algorithm: name of the hash, "sha256" or "sha1"

        :rtype: str
        :returns: A hex-encoded fingerprint.
        """
        if algorithm == "sha256":
            hashAlg = hashes.SHA256()
        elif algorithm == "sha1":
            hashAlg = hashes.SHA1()
        else:
            raise ValueError("Unknown fingerprint algorithm: {0}"
                             .format(algorithm))
        return b2a_hex(self.toCryptography().fingerprint(hashAlg)) \
            .decode("ascii")

    def writeBytes(self):
        """Serialise object to a DER encoded string."""
        return self.der

    def __eq__(self, other):
        if not isinstance(other, PresentedCertificate):
            return NotImplemented
        return self.der == other.der

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __hash__(self):
        return hash(self.der)

    def __repr__(self):
        return "PresentedCertificate(subject={0!r}, depth={1}, " \
               "errorNumber={2})".format(self.subject, self.depth,
                                         self.errorNumber)
