# Copyright (c) 2026, tlsreactor developers
#
# See the LICENSE file for legal information regarding use of this file.

import unittest

from cryptography.hazmat.primitives.serialization import Encoding
from OpenSSL import crypto

from tlsreactor.certificate import PresentedCertificate

from unit_tests.certfactory import CertFactory


class TestPresentedCertificate(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.certs = CertFactory()

    @classmethod
    def tearDownClass(cls):
        cls.certs.cleanup()

    def test_fromCryptography(self):
        cert = PresentedCertificate.fromCryptography(self.certs.clientCert,
                                                     depth=1, errorNumber=20)

        self.assertEqual(cert.der,
                         self.certs.clientCert.public_bytes(Encoding.DER))
        self.assertEqual(cert.depth, 1)
        self.assertEqual(cert.errorNumber, 20)

    def test_fromOpenSSL(self):
        handle = crypto.X509.from_cryptography(self.certs.clientCert)

        cert = PresentedCertificate.fromOpenSSL(handle, 0, 0)

        self.assertEqual(cert.pem, self.certs.clientCertPem)

    def test_pem(self):
        cert = PresentedCertificate.fromCryptography(self.certs.serverCert)

        self.assertEqual(cert.pem, self.certs.serverCertPem)

    def test_subject_and_issuer(self):
        cert = PresentedCertificate.fromCryptography(self.certs.clientCert)

        self.assertEqual(cert.subject, "CN=client.example")
        self.assertEqual(cert.issuer, "CN=Test CA")

    def test_getFingerprint(self):
        cert = PresentedCertificate.fromCryptography(self.certs.clientCert)

        self.assertEqual(len(cert.getFingerprint()), 64)
        self.assertEqual(len(cert.getFingerprint("sha1")), 40)

    def test_getFingerprint_unknown_algorithm(self):
        cert = PresentedCertificate.fromCryptography(self.certs.clientCert)

        with self.assertRaises(ValueError):
            cert.getFingerprint("md5")

    def test_equality(self):
        cert1 = PresentedCertificate.fromCryptography(self.certs.clientCert)
        cert2 = PresentedCertificate(cert1.writeBytes(), depth=3)
        cert3 = PresentedCertificate.fromCryptography(self.certs.serverCert)

        self.assertEqual(cert1, cert2)
        self.assertNotEqual(cert1, cert3)
        self.assertEqual(hash(cert1), hash(cert2))

    def test_toCryptography(self):
        cert = PresentedCertificate.fromCryptography(self.certs.caCert)

        self.assertEqual(cert.toCryptography(), self.certs.caCert)


if __name__ == '__main__':
    unittest.main()
