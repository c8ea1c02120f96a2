# Copyright (c) 2026, tlsreactor developers
#
# See the LICENSE file for legal information regarding use of this file.

import unittest
import unittest.mock as mock

from tlsreactor.errors import TLSCallbackFault
from tlsreactor.verifier import Verifier, VerificationResult
from tlsreactor.verifyhook import VerifyHook


class TestVerifier(unittest.TestCase):
    def setUp(self):
        self.cert = mock.Mock(depth=0)

    def test___init__(self):
        verifier = Verifier()

        self.assertIsNotNone(verifier)
        self.assertFalse(verifier.isActive())
        self.assertFalse(verifier.hook.isRegistered())

    def test_verify_peer_not_requested(self):
        hook = mock.Mock(return_value=False)
        verifier = Verifier(False, VerifyHook.certOnly(hook))

        result = verifier(self.cert, False)

        self.assertTrue(result.accepted)
        self.assertFalse(hook.called)

    def test_default_policy_accepts_preverified(self):
        verifier = Verifier(True)

        self.assertEqual(verifier(self.cert, True),
                         VerificationResult(True, None))

    def test_default_policy_rejects_unverified(self):
        verifier = Verifier(True)

        self.assertEqual(verifier(self.cert, False),
                         VerificationResult(False, None))

    def test_hook_overrides_failed_preverification(self):
        verifier = Verifier(True, VerifyHook.certOnly(lambda cert: True))

        self.assertTrue(verifier(self.cert, False).accepted)

    def test_hook_overrides_passed_preverification(self):
        verifier = Verifier(True, VerifyHook.noArgs(lambda: False))

        self.assertFalse(verifier(self.cert, True).accepted)

    def test_hook_sees_preverify_result(self):
        hook = mock.Mock(return_value=True)
        verifier = Verifier(True, VerifyHook.certAndPreverify(hook))

        verifier(self.cert, 1)

        hook.assert_called_once_with(self.cert, True)

    def test_raising_hook_rejects(self):
        def verify(cert, preverifyOk):
            raise KeyError("missing")

        verifier = Verifier(True, VerifyHook.certAndPreverify(verify))

        result = verifier(self.cert, True)

        self.assertFalse(result.accepted)
        self.assertIsInstance(result.fault, TLSCallbackFault)
        self.assertIsInstance(result.fault.fault, KeyError)

    def test_result_truth_value(self):
        self.assertTrue(VerificationResult(True, None))
        self.assertFalse(VerificationResult(False, None))


class TestVerifierMatrix(unittest.TestCase):
    """Decision for every combination of preverification and hook."""

    hooks = {"none": None,
             "accept": lambda cert: True,
             "reject": lambda cert: False,
             "echo": lambda cert, preverifyOk: preverifyOk}

    expected = {("none", True): True,
                ("none", False): False,
                ("accept", True): True,
                ("accept", False): True,
                ("reject", True): False,
                ("reject", False): False,
                ("echo", True): True,
                ("echo", False): False}

    def test_matrix(self):
        cert = mock.Mock(depth=0)
        for (hookName, preverifyOk), accepted in self.expected.items():
            verifier = Verifier(True,
                                VerifyHook.fromCallable(self.hooks[hookName]))
            self.assertEqual(verifier(cert, preverifyOk).accepted, accepted,
                             "hook {0}, preverify_ok {1}"
                             .format(hookName, preverifyOk))


if __name__ == '__main__':
    unittest.main()
