# Copyright (c) 2026, tlsreactor developers
#
# See the LICENSE file for legal information regarding use of this file.

import datetime
import os
import shutil
import tempfile

from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.x509.oid import NameOID


def _name(commonName):
    return x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, commonName)])


def _key():
    return ec.generate_private_key(ec.SECP256R1())


def _pemKey(key, password=None):
    if password is None:
        encryption = serialization.NoEncryption()
    else:
        encryption = serialization.BestAvailableEncryption(password)
    return key.private_bytes(serialization.Encoding.PEM,
                             serialization.PrivateFormat.PKCS8,
                             encryption).decode("ascii")


def _pemCert(cert):
    return cert.public_bytes(serialization.Encoding.PEM).decode("ascii")


def _makeCert(subject, publicKey, issuer, issuerKey, isCA):
    now = datetime.datetime.now(datetime.timezone.utc)
    builder = x509.CertificateBuilder() \
        .subject_name(_name(subject)) \
        .issuer_name(_name(issuer)) \
        .public_key(publicKey) \
        .serial_number(x509.random_serial_number()) \
        .not_valid_before(now - datetime.timedelta(days=1)) \
        .not_valid_after(now + datetime.timedelta(days=30)) \
        .add_extension(x509.BasicConstraints(ca=isCA, path_length=None),
                       critical=True) \
        .add_extension(x509.SubjectKeyIdentifier.from_public_key(publicKey),
                       critical=False) \
        .add_extension(x509.AuthorityKeyIdentifier.from_issuer_public_key(
                           issuerKey.public_key()),
                       critical=False)
    if isCA:
        builder = builder.add_extension(
            x509.KeyUsage(digital_signature=True, content_commitment=False,
                          key_encipherment=False, data_encipherment=False,
                          key_agreement=False, key_cert_sign=True,
                          crl_sign=True, encipher_only=False,
                          decipher_only=False),
            critical=True)
    return builder.sign(issuerKey, hashes.SHA256())


class CertFactory(object):
    """Test PKI written to a temporary directory.

    Files:
     - ca.crt: CA that signed client.crt
     - other-ca.crt: unrelated CA
     - ca-bundle-with-client-signer.crt: other-ca.crt followed by ca.crt
     - ca-bundle-without-client-signer.crt: other-ca.crt only
     - client.key / client.crt: client identity issued by ca.crt
     - server.key / server.crt: self-signed server identity
     - server-encrypted.key: server.key protected with keyPassword
     - not-a-bundle.crt: a file with no certificate in it
    """

    keyPassword = b"secret"

    def __init__(self):
        self.directory = tempfile.mkdtemp(prefix="tlsreactor-test-")

        self.caKey = _key()
        self.caCert = _makeCert("Test CA", self.caKey.public_key(),
                                "Test CA", self.caKey, True)
        self.otherCAKey = _key()
        self.otherCACert = _makeCert("Other CA",
                                     self.otherCAKey.public_key(),
                                     "Other CA", self.otherCAKey, True)
        self.clientKey = _key()
        self.clientCert = _makeCert("client.example",
                                    self.clientKey.public_key(),
                                    "Test CA", self.caKey, False)
        self.serverKey = _key()
        self.serverCert = _makeCert("server.example",
                                    self.serverKey.public_key(),
                                    "server.example", self.serverKey, False)

        self.clientCertPem = _pemCert(self.clientCert)
        self.clientKeyPem = _pemKey(self.clientKey)
        self.serverCertPem = _pemCert(self.serverCert)
        self.serverKeyPem = _pemKey(self.serverKey)

        self._write("ca.crt", _pemCert(self.caCert))
        self._write("other-ca.crt", _pemCert(self.otherCACert))
        self._write("ca-bundle-with-client-signer.crt",
                    _pemCert(self.otherCACert) + _pemCert(self.caCert))
        self._write("ca-bundle-without-client-signer.crt",
                    _pemCert(self.otherCACert))
        self._write("client.key", self.clientKeyPem)
        self._write("client.crt", self.clientCertPem)
        self._write("server.key", self.serverKeyPem)
        self._write("server.crt", self.serverCertPem)
        self._write("server-encrypted.key",
                    _pemKey(self.serverKey, self.keyPassword))
        self._write("not-a-bundle.crt", "this is not a certificate\n")

    def _write(self, name, text):
        with open(self.path(name), "w") as out:
            out.write(text)

    def path(self, name):
        return os.path.join(self.directory, name)

    def cleanup(self):
        shutil.rmtree(self.directory, ignore_errors=True)
