# Copyright (c) 2026, tlsreactor developers
#
# See the LICENSE file for legal information regarding use of this file.

"""Class for setting handshake parameters."""

import logging
import os

from .constants import PROTOCOL_VERSIONS
from .errors import TLSConfigurationError
from .verifyhook import VerifyHook

logger = logging.getLogger(__name__)

# option names accepted by fromOptions() and the attributes they set
OPTION_NAMES = {"private_key_file": "privateKeyFile",
                "cert_chain_file": "certChainFile",
                "private_key": "privateKey",
                "cert_chain": "certChain",
                "private_key_pass": "privateKeyPassword",
                "cert_auth_file": "certAuthFile",
                "verify_peer": "verifyPeer",
                "fail_if_no_peer_cert": "failIfNoPeerCert",
                "verify_hook": "verifyHook",
                "sni_hostname": "sniHostname",
                "cipher_list": "cipherList",
                "min_version": "minVersion",
                "max_version": "maxVersion"}

_FIELDS = tuple(OPTION_NAMES.values())


class HandshakeConfig(object):
    """
    This class encapsulates the parameters of one TLS endpoint.

    Instances are mutable until :py:meth:`validate` is called; it returns a
    frozen copy which rejects attribute assignment and is what the rest of
    tlsreactor works with.

    :vartype privateKeyFile: str
    :ivar privateKeyFile: path of the PEM private key of this endpoint.

    :vartype certChainFile: str
    :ivar certChainFile: path of the PEM certificate chain of this
        endpoint, end-entity certificate first.

        Key and certificate are required when this endpoint presents a
        certificate: always for a server, for a client only when the server
        asks for one.

    :vartype privateKey: str
    :ivar privateKey: PEM private key given in memory instead of
        privateKeyFile.

    :vartype certChain: str
    :ivar certChain: PEM certificate chain given in memory instead of
        certChainFile.

    :vartype privateKeyPassword: str
    :ivar privateKeyPassword: passphrase of an encrypted private key.

    :vartype certAuthFile: str
    :ivar certAuthFile: path of a PEM bundle of CA certificates trusted
        for the peer. No bundle means an empty trust store.

    :vartype verifyPeer: bool
    :ivar verifyPeer: whether the peer certificate is requested and
        verified. False by default.

    :vartype failIfNoPeerCert: bool
    :ivar failIfNoPeerCert: whether a peer presenting no certificate is
        rejected. Requires verifyPeer. False by default.

    :vartype verifyHook: callable
    :ivar verifyHook: application verification callback, taking no
        arguments, the certificate, or the certificate and the
        preverification result. Turned into a
        :py:class:`tlsreactor.verifyhook.VerifyHook` by validate().

    :vartype sniHostname: str
    :ivar sniHostname: server name sent by a client in the SNI extension.

    :vartype cipherList: str
    :ivar cipherList: OpenSSL cipher list string, passed through
        unchanged.

    :vartype minVersion: str
    :ivar minVersion: lowest protocol version, one of "TLSv1", "TLSv1.1",
        "TLSv1.2" and "TLSv1.3". The default is "TLSv1.2".

    :vartype maxVersion: str
    :ivar maxVersion: highest protocol version. The default is "TLSv1.2".

        .. warning:: In TLS 1.3 a client considers the handshake finished
            before the server has judged the client certificate, so a
            client can report success for a session the server rejects.
    """

    def __init__(self, **kwargs):
        self.privateKeyFile = None
        self.certChainFile = None
        self.privateKey = None
        self.certChain = None
        self.privateKeyPassword = None
        self.certAuthFile = None
        self.verifyPeer = False
        self.failIfNoPeerCert = False
        self.verifyHook = None
        self.sniHostname = None
        self.cipherList = None
        self.minVersion = "TLSv1.2"
        self.maxVersion = "TLSv1.2"
        for name, value in kwargs.items():
            if name not in _FIELDS:
                raise TLSConfigurationError("Unknown setting: {0}"
                                            .format(name))
            setattr(self, name, value)

    def __setattr__(self, name, value):
        if self.__dict__.get("_frozen", False):
            raise AttributeError("Validated HandshakeConfig is read-only")
        object.__setattr__(self, name, value)

    @classmethod
    def fromOptions(cls, options):
        """
        Create settings from a dictionary of snake_case options.

        :param dict options: e.g. ``{"verify_peer": True,
            "cert_auth_file": "ca.pem"}``
        :raises TLSConfigurationError: on unknown option names
        """
        unknown = [key for key in options if key not in OPTION_NAMES]
        if unknown:
            raise TLSConfigurationError("Unknown TLS option: {0}"
                                        .format(sorted(unknown)))
        return cls(**dict((OPTION_NAMES[key], value)
                          for key, value in options.items()))

    def isFrozen(self):
        """Check if this is a validated, read-only copy."""
        return self.__dict__.get("_frozen", False)

    def hasIdentity(self):
        """Check if key and certificate material is configured."""
        return bool((self.privateKeyFile or self.privateKey) and
                    (self.certChainFile or self.certChain))

    @staticmethod
    def _sanityCheckFlags(other):
        """Check if boolean settings are sane"""
        if other.verifyPeer not in (True, False):
            raise TLSConfigurationError("verifyPeer must be True or False")
        if other.failIfNoPeerCert not in (True, False):
            raise TLSConfigurationError("failIfNoPeerCert must be True or "
                                        "False")
        if other.failIfNoPeerCert and not other.verifyPeer:
            raise TLSConfigurationError("failIfNoPeerCert requires "
                                        "verifyPeer")

    @staticmethod
    def _sanityCheckProtocolVersions(other):
        """Check if set protocol versions are sane"""
        if other.minVersion not in PROTOCOL_VERSIONS:
            raise TLSConfigurationError("minVersion set incorrectly: {0!r}"
                                        .format(other.minVersion))
        if other.maxVersion not in PROTOCOL_VERSIONS:
            raise TLSConfigurationError("maxVersion set incorrectly: {0!r}"
                                        .format(other.maxVersion))
        if PROTOCOL_VERSIONS.index(other.minVersion) > \
                PROTOCOL_VERSIONS.index(other.maxVersion):
            raise TLSConfigurationError("Versions set incorrectly")
        if other.verifyPeer and other.maxVersion == "TLSv1.3":
            logger.warning("TLS 1.3 with verifyPeer: a client finishes its "
                           "handshake before the server judges its "
                           "certificate, and may report success for a "
                           "rejected session")

    @staticmethod
    def _sanityCheckIdentity(other):
        """Check if key and certificate material is complete"""
        if other.privateKeyFile and other.privateKey:
            raise TLSConfigurationError("privateKeyFile and privateKey are "
                                        "mutually exclusive")
        if other.certChainFile and other.certChain:
            raise TLSConfigurationError("certChainFile and certChain are "
                                        "mutually exclusive")
        hasKey = bool(other.privateKeyFile or other.privateKey)
        hasCert = bool(other.certChainFile or other.certChain)
        if hasKey and not hasCert:
            raise TLSConfigurationError("Private key given without "
                                        "certificate chain")
        if hasCert and not hasKey:
            raise TLSConfigurationError("Certificate chain given without "
                                        "private key")
        for name in ("privateKeyFile", "certChainFile", "certAuthFile"):
            path = getattr(other, name)
            if path and not os.access(path, os.R_OK):
                raise TLSConfigurationError("{0} is not readable: {1}"
                                            .format(name, path))

    @staticmethod
    def _sanityCheckStrings(other):
        """Check if pass-through string settings have the right type"""
        for name in ("privateKey", "certChain", "privateKeyPassword",
                     "sniHostname", "cipherList"):
            value = getattr(other, name)
            if value is not None and not isinstance(value, (str, bytes)):
                raise TLSConfigurationError("{0} must be a string"
                                            .format(name))

    def validate(self):
        """
        Validate the settings and return a frozen copy.

        Does not modify the original object. The verification callback is
        inspected here, once.

        :rtype: HandshakeConfig
        :returns: a self-consistent, read-only copy of settings
        :raises TLSConfigurationError: when settings are invalid
        """
        if self.isFrozen():
            return self

        other = HandshakeConfig()
        for name in _FIELDS:
            setattr(other, name, getattr(self, name))

        self._sanityCheckFlags(other)
        self._sanityCheckProtocolVersions(other)
        self._sanityCheckIdentity(other)
        self._sanityCheckStrings(other)

        other.verifyHook = VerifyHook.fromCallable(other.verifyHook)

        other._frozen = True
        return other

    def __repr__(self):
        fields = ", ".join("{0}={1!r}".format(name, getattr(self, name))
                           for name in _FIELDS
                           if name not in ("privateKey",
                                           "privateKeyPassword"))
        return "HandshakeConfig({0})".format(fields)
