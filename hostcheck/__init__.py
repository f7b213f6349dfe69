"""
RFC 2818 hostname verification for X.509 certificates.
"""

from hostcheck.matcher import hostname_matches
from hostcheck.names import (
    AltName,
    AltNameKind,
    CertificateNames,
    CommonName,
    ExtractStatus,
    NameExtractor,
    RawCertificateNames,
    iter_alt_names,
)
from hostcheck.verify import verify_certificate_hostname, verify_der_hostname, verify_hostname

__all__ = [
    "AltName",
    "AltNameKind",
    "CertificateNames",
    "CommonName",
    "ExtractStatus",
    "NameExtractor",
    "RawCertificateNames",
    "hostname_matches",
    "iter_alt_names",
    "verify_certificate_hostname",
    "verify_der_hostname",
    "verify_hostname",
]
