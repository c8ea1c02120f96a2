# Copyright (c) 2026, tlsreactor developers
#
# See the LICENSE file for legal information regarding use of this file.

import importlib.util
import io
import os
import unittest
import unittest.mock as mock

from tlsreactor.contextfactory import ContextFactory

from unit_tests.certfactory import CertFactory

SCRIPT = os.path.join(os.path.dirname(os.path.dirname(
    os.path.abspath(__file__))), "scripts", "tlsverify.py")


def loadScript():
    spec = importlib.util.spec_from_file_location("tlsverify", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


class TestHandleArgs(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.certs = CertFactory()
        cls.tlsverify = loadScript()

    @classmethod
    def tearDownClass(cls):
        cls.certs.cleanup()

    def test_handleArgs_without_flags(self):
        address, factory = self.tlsverify.handleArgs(
            ["-k", self.certs.path("server.key"),
             "-c", self.certs.path("server.crt"), "localhost:4433"], "kc")

        self.assertEqual(address, ("localhost", 4433))
        self.assertIsInstance(factory, ContextFactory)
        self.assertTrue(factory.config.hasIdentity())

    def test_handleArgs_with_verify(self):
        _, factory = self.tlsverify.handleArgs(["--verify", "h:1"], "a",
                                               ["verify"])

        self.assertTrue(factory.config.verifyPeer)

    def test_handleArgs_unsupported_option(self):
        with mock.patch("sys.stderr", new_callable=io.StringIO) as stderr:
            with self.assertRaises(SystemExit):
                self.tlsverify.handleArgs(["-x", "1", "h:1"], "x")

        self.assertIn("Unsupported option: -x", stderr.getvalue())

    def test_handleArgs_bad_address(self):
        with mock.patch("sys.stderr", new_callable=io.StringIO):
            with self.assertRaises(SystemExit):
                self.tlsverify.handleArgs(["localhost"], "k")


if __name__ == '__main__':
    unittest.main()
