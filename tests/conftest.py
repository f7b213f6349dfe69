"""
Certificate builders for hostname verification tests.
"""

from __future__ import annotations

import datetime
from dataclasses import dataclass
from functools import cached_property

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.x509.oid import NameOID

# NOTE: We judiciously start on the second *after* the Unix epoch, since
# some libraries intentionally reject anything on or before the epoch.
EPOCH = datetime.datetime.fromtimestamp(1, tz=datetime.timezone.utc)
ONE_THOUSAND_YEARS_OF_TORMENT = EPOCH + datetime.timedelta(days=365 * 1000)


@dataclass(frozen=True)
class CertificatePair:
    """
    An X.509 certificate and its associated private key.
    """

    cert: x509.Certificate
    key: ec.EllipticCurvePrivateKey

    @cached_property
    def cert_der(self) -> bytes:
        return self.cert.public_bytes(encoding=serialization.Encoding.DER)


class Builder:
    """
    Mints throwaway CA and leaf certificates.
    """

    def __init__(self) -> None:
        self._serial = 1

    def _next_serial(self) -> int:
        self._serial += 1
        return self._serial

    def root_ca(self) -> CertificatePair:
        key = ec.generate_private_key(ec.SECP256R1())
        name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, "hostcheck root CA")])
        cert = (
            x509.CertificateBuilder()
            .subject_name(name)
            .issuer_name(name)
            .public_key(key.public_key())
            .serial_number(self._next_serial())
            .not_valid_before(EPOCH)
            .not_valid_after(ONE_THOUSAND_YEARS_OF_TORMENT)
            .add_extension(x509.BasicConstraints(ca=True, path_length=None), critical=True)
            .sign(key, hashes.SHA256())
        )
        return CertificatePair(cert, key)

    def leaf_cert(
        self,
        parent: CertificatePair,
        *,
        subject: x509.Name | None = None,
        san: x509.SubjectAlternativeName | None = None,
    ) -> CertificatePair:
        """
        Issue a leaf under `parent`. With no `san`, the leaf carries no
        subjectAltName extension at all.
        """
        key = ec.generate_private_key(ec.SECP256R1())
        builder = (
            x509.CertificateBuilder()
            .subject_name(subject if subject is not None else x509.Name([]))
            .issuer_name(parent.cert.subject)
            .public_key(key.public_key())
            .serial_number(self._next_serial())
            .not_valid_before(EPOCH)
            .not_valid_after(ONE_THOUSAND_YEARS_OF_TORMENT)
            .add_extension(x509.BasicConstraints(ca=False, path_length=None), critical=True)
        )
        if san is not None:
            builder = builder.add_extension(san, critical=False)

        return CertificatePair(builder.sign(parent.key, hashes.SHA256()), key)

    @staticmethod
    def cn(*values: str) -> x509.Name:
        """
        A subject made of one commonName attribute per value, in order.
        """
        return x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, v) for v in values])

    @staticmethod
    def dns_san(*values: str) -> x509.SubjectAlternativeName:
        return x509.SubjectAlternativeName([x509.DNSName(v) for v in values])


@pytest.fixture
def builder() -> Builder:
    return Builder()


@pytest.fixture
def root(builder: Builder) -> CertificatePair:
    return builder.root_ca()
