# Copyright (c) 2026, tlsreactor developers
#
# See the LICENSE file for legal information regarding use of this file.

import unittest

from tlsreactor.constants import VerifyHookType
from tlsreactor.integration.handler import ConnectionHandler


class TestConnectionHandler(unittest.TestCase):
    def test_getVerifyHook_default(self):
        self.assertFalse(ConnectionHandler().getVerifyHook().isRegistered())

    def test_getVerifyHook_overridden_in_subclass(self):
        class Handler(ConnectionHandler):
            def onVerifyPeer(self, certificate):
                return True

        hook = Handler().getVerifyHook()

        self.assertEqual(hook.hookType, VerifyHookType.certOnly)
        self.assertTrue(hook(None, False))

    def test_getVerifyHook_full_override(self):
        class Handler(ConnectionHandler):
            def onVerifyPeer(self, certificate, preverifyOk):
                return preverifyOk

        hook = Handler().getVerifyHook()

        self.assertEqual(hook.hookType, VerifyHookType.certAndPreverify)
        self.assertFalse(hook(None, False))

    def test_getVerifyHook_instance_attribute(self):
        handler = ConnectionHandler()
        handler.onVerifyPeer = lambda: False

        hook = handler.getVerifyHook()

        self.assertEqual(hook.hookType, VerifyHookType.noArgs)
        self.assertFalse(hook(None, True))

    def test_onError_logs(self):
        with self.assertLogs("tlsreactor.integration.handler", "ERROR"):
            ConnectionHandler().onError(None, RuntimeError("boom"))


if __name__ == '__main__':
    unittest.main()
