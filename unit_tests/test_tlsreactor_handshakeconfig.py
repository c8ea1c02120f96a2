# Copyright (c) 2026, tlsreactor developers
#
# See the LICENSE file for legal information regarding use of this file.

import unittest

from tlsreactor.constants import VerifyHookType
from tlsreactor.errors import TLSConfigurationError
from tlsreactor.handshakeconfig import HandshakeConfig

from unit_tests.certfactory import CertFactory


class TestHandshakeConfig(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.certs = CertFactory()

    @classmethod
    def tearDownClass(cls):
        cls.certs.cleanup()

    def test___init__(self):
        hc = HandshakeConfig()

        self.assertIsNotNone(hc)
        self.assertFalse(hc.verifyPeer)
        self.assertIsNone(hc.certAuthFile)
        self.assertEqual(hc.maxVersion, "TLSv1.2")
        self.assertFalse(hc.hasIdentity())

    def test___init___with_keywords(self):
        hc = HandshakeConfig(verifyPeer=True, certAuthFile="ca.pem")

        self.assertTrue(hc.verifyPeer)
        self.assertEqual(hc.certAuthFile, "ca.pem")

    def test___init___with_unknown_keyword(self):
        with self.assertRaises(TLSConfigurationError):
            HandshakeConfig(verify=True)

    def test_validate(self):
        hc = HandshakeConfig()
        newHC = hc.validate()

        self.assertIsNotNone(newHC)
        self.assertIsNot(hc, newHC)
        self.assertTrue(newHC.isFrozen())
        self.assertFalse(hc.isFrozen())

    def test_validate_frozen_returns_self(self):
        hc = HandshakeConfig().validate()

        self.assertIs(hc.validate(), hc)

    def test_validated_copy_is_read_only(self):
        hc = HandshakeConfig().validate()

        with self.assertRaises(AttributeError):
            hc.verifyPeer = True

    def test_validate_does_not_modify_original(self):
        hook = lambda cert: True
        hc = HandshakeConfig(verifyHook=hook)

        newHC = hc.validate()

        self.assertIs(hc.verifyHook, hook)
        self.assertEqual(newHC.verifyHook.hookType, VerifyHookType.certOnly)

    def test_validate_without_hook(self):
        newHC = HandshakeConfig().validate()

        self.assertFalse(newHC.verifyHook.isRegistered())

    def test_validate_with_bad_hook(self):
        hc = HandshakeConfig(verifyHook=lambda a, b, c: True)

        with self.assertRaises(TLSConfigurationError):
            hc.validate()

    def test_verifyPeer_not_boolean(self):
        hc = HandshakeConfig(verifyPeer="yes")

        with self.assertRaises(TLSConfigurationError):
            hc.validate()

    def test_failIfNoPeerCert_requires_verifyPeer(self):
        hc = HandshakeConfig(failIfNoPeerCert=True)

        with self.assertRaises(TLSConfigurationError):
            hc.validate()

        hc.verifyPeer = True

        self.assertTrue(hc.validate().failIfNoPeerCert)

    def test_unknown_minVersion(self):
        hc = HandshakeConfig(minVersion="SSLv3")

        with self.assertRaises(TLSConfigurationError):
            hc.validate()

    def test_unknown_maxVersion(self):
        hc = HandshakeConfig(maxVersion=(3, 3))

        with self.assertRaises(TLSConfigurationError):
            hc.validate()

    def test_minVersion_above_maxVersion(self):
        hc = HandshakeConfig(minVersion="TLSv1.3", maxVersion="TLSv1.2")

        with self.assertRaises(TLSConfigurationError):
            hc.validate()

    def test_verifyPeer_with_TLSv1_3_warns(self):
        hc = HandshakeConfig(verifyPeer=True, maxVersion="TLSv1.3")

        with self.assertLogs("tlsreactor.handshakeconfig", "WARNING") as cm:
            hc.validate()

        self.assertEqual(len(cm.records), 1)
        self.assertIn("TLS 1.3", cm.records[0].getMessage())

    def test_key_without_certificate(self):
        hc = HandshakeConfig(privateKeyFile=self.certs.path("client.key"))

        with self.assertRaises(TLSConfigurationError):
            hc.validate()

    def test_certificate_without_key(self):
        hc = HandshakeConfig(certChain=self.certs.clientCertPem)

        with self.assertRaises(TLSConfigurationError):
            hc.validate()

    def test_key_file_and_key_text(self):
        hc = HandshakeConfig(privateKeyFile=self.certs.path("client.key"),
                             privateKey=self.certs.clientKeyPem,
                             certChainFile=self.certs.path("client.crt"))

        with self.assertRaises(TLSConfigurationError):
            hc.validate()

    def test_unreadable_file(self):
        hc = HandshakeConfig(certAuthFile=self.certs.path("missing.crt"))

        with self.assertRaises(TLSConfigurationError):
            hc.validate()

    def test_identity_files(self):
        hc = HandshakeConfig(privateKeyFile=self.certs.path("client.key"),
                             certChainFile=self.certs.path("client.crt"))

        newHC = hc.validate()

        self.assertTrue(newHC.hasIdentity())

    def test_cipherList_not_string(self):
        hc = HandshakeConfig(cipherList=["AES128-SHA"])

        with self.assertRaises(TLSConfigurationError):
            hc.validate()

    def test_configuration_error_is_value_error(self):
        hc = HandshakeConfig(minVersion="bogus")

        with self.assertRaises(ValueError):
            hc.validate()


class TestHandshakeConfigFromOptions(unittest.TestCase):
    def test_fromOptions(self):
        hc = HandshakeConfig.fromOptions({"private_key_file": "k.pem",
                                          "cert_chain_file": "c.pem",
                                          "verify_peer": True,
                                          "cert_auth_file": "ca.pem",
                                          "fail_if_no_peer_cert": True,
                                          "sni_hostname": "example.com",
                                          "cipher_list": "HIGH"})

        self.assertEqual(hc.privateKeyFile, "k.pem")
        self.assertEqual(hc.certChainFile, "c.pem")
        self.assertTrue(hc.verifyPeer)
        self.assertEqual(hc.certAuthFile, "ca.pem")
        self.assertTrue(hc.failIfNoPeerCert)
        self.assertEqual(hc.sniHostname, "example.com")
        self.assertEqual(hc.cipherList, "HIGH")

    def test_fromOptions_with_unknown_option(self):
        with self.assertRaises(TLSConfigurationError):
            HandshakeConfig.fromOptions({"verify_peer": True,
                                         "ssl_version": "TLSv1"})

    def test_fromOptions_empty(self):
        hc = HandshakeConfig.fromOptions({})

        self.assertFalse(hc.verifyPeer)


if __name__ == '__main__':
    unittest.main()
