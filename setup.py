#!/usr/bin/env python

# Copyright (c) 2026, tlsreactor developers
#
# See the LICENSE file for legal information regarding use of this file.

from setuptools import setup


setup(name="tlsreactor",
      version="0.1.0",
      author="tlsreactor developers",
      description="Peer certificate verification for TLS handshakes "
                  "driven by a non-blocking reactor.",
      license="LGPLv2",
      scripts=["scripts/tlsverify.py"],
      packages=["tlsreactor", "tlsreactor.integration"],
      install_requires=['pyOpenSSL>=22.1', 'cryptography>=39'],
      extras_require={'test': ['pytest']},
      python_requires=">=3.7",
      classifiers=[
            'Development Status :: 3 - Alpha',
            'Intended Audience :: Developers',
            'License :: OSI Approved :: GNU Lesser General Public License v2 (LGPLv2)',
            'Operating System :: POSIX',
            'Programming Language :: Python',
            'Programming Language :: Python :: 3',
            'Topic :: Security :: Cryptography',
            'Topic :: Software Development :: Libraries :: Python Modules',
            'Topic :: System :: Networking'
          ],
      keywords="ssl, tls, x509, client certificates, reactor"
      )
