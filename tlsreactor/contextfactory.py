# Copyright (c) 2026, tlsreactor developers
#
# See the LICENSE file for legal information regarding use of this file.

"""Construction of the OpenSSL contexts shared by connections."""

import logging

from cryptography import x509
from cryptography.hazmat.primitives import serialization
from OpenSSL import SSL, crypto

from .errors import TLSConfigurationError
from .handshake import openSSLVerifyCallback
from .handshakeconfig import HandshakeConfig
from .truststore import loadTrustStore

logger = logging.getLogger(__name__)

_PROTOCOL_VERSIONS = {"TLSv1": SSL.TLS1_VERSION,
                      "TLSv1.1": SSL.TLS1_1_VERSION,
                      "TLSv1.2": SSL.TLS1_2_VERSION,
                      "TLSv1.3": SSL.TLS1_3_VERSION}


def _toBytes(value):
    if isinstance(value, bytes):
        return value
    return value.encode("utf-8")


class ContextFactory(object):
    """
    Build, once, the SSL context described by a handshake configuration.

    Everything that can fail because of bad configuration happens in the
    constructor: loading the identity, checking that the private key
    matches the certificate and loading the trust store. The resulting
    context is never modified afterwards, so one factory may serve any
    number of connections.

    :vartype config: ~tlsreactor.handshakeconfig.HandshakeConfig
    :ivar config: the validated, frozen configuration

    :vartype trustStore: ~tlsreactor.truststore.TrustStore
    :ivar trustStore: CA certificates installed in the context
    """

    def __init__(self, config=None):
        if config is None:
            config = HandshakeConfig()
        self.config = config.validate()
        self.trustStore = loadTrustStore(self.config.certAuthFile)
        self._context = self._makeContext()

    def getContext(self):
        """Return the shared :py:class:`OpenSSL.SSL.Context`."""
        return self._context

    def _makeContext(self):
        config = self.config
        context = SSL.Context(SSL.TLS_METHOD)
        try:
            context.set_min_proto_version(
                _PROTOCOL_VERSIONS[config.minVersion])
            context.set_max_proto_version(
                _PROTOCOL_VERSIONS[config.maxVersion])
            if config.cipherList:
                context.set_cipher_list(_toBytes(config.cipherList))
        except SSL.Error as err:
            raise TLSConfigurationError("Invalid protocol settings: {0}"
                                        .format(err))

        # every handshake is a full one, so the peer is always verified
        context.set_session_cache_mode(SSL.SESS_CACHE_OFF)
        context.set_options(SSL.OP_NO_TICKET)

        if config.hasIdentity():
            self._loadIdentity(context)

        self.trustStore.installInto(context)

        if config.verifyPeer:
            mode = SSL.VERIFY_PEER
            if config.failIfNoPeerCert:
                mode |= SSL.VERIFY_FAIL_IF_NO_PEER_CERT
            context.set_verify(mode, openSSLVerifyCallback)
        logger.debug("Built SSL context: verify_peer=%s, %d trusted CA(s)",
                     config.verifyPeer, len(self.trustStore))
        return context

    def _loadIdentity(self, context):
        config = self.config
        password = None
        if config.privateKeyPassword is not None:
            password = _toBytes(config.privateKeyPassword)
            context.set_passwd_cb(lambda maxLength, verify, extra: password)

        try:
            if config.certChainFile:
                context.use_certificate_chain_file(config.certChainFile)
            else:
                chain = x509.load_pem_x509_certificates(
                    _toBytes(config.certChain))
                context.use_certificate(crypto.X509.from_cryptography(chain[0]))
                for cert in chain[1:]:
                    context.add_extra_chain_cert(
                        crypto.X509.from_cryptography(cert))
        except (SSL.Error, ValueError) as err:
            raise TLSConfigurationError("Can't load certificate chain: {0}"
                                        .format(err))

        try:
            if config.privateKeyFile:
                context.use_privatekey_file(config.privateKeyFile)
            else:
                key = serialization.load_pem_private_key(
                    _toBytes(config.privateKey), password)
                context.use_privatekey(crypto.PKey.from_cryptography_key(key))
        except (SSL.Error, ValueError, TypeError) as err:
            raise TLSConfigurationError("Can't load private key: {0}"
                                        .format(err))

        try:
            context.check_privatekey()
        except SSL.Error as err:
            raise TLSConfigurationError("Private key does not match the "
                                        "certificate: {0}".format(err))
