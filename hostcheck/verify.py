"""
RFC 2818 hostname verification over both certificate representations.

Names are checked in this order:

1. Every subjectAltName entry of type dNSName. The first one that matches
   the hostname wins.
2. The subject commonName, but only if the certificate has no dNSName
   entries at all. A certificate that lists any usable dNSName opts out
   of commonName matching, even if none of its dNSNames match.

Either kind of name may be a `*.domain.tld` wildcard. Every failure,
including undecodable input, results in `False`.

Nothing here checks the certificate's signature, chain or validity period;
callers are expected to have done that already.
"""

from __future__ import annotations

import logging

from cryptography import x509

from hostcheck.matcher import hostname_matches
from hostcheck.names import (
    AltNameKind,
    CertificateNames,
    NameExtractor,
    RawCertificateNames,
    iter_alt_names,
)

logger = logging.getLogger(__name__)


def verify_hostname(extractor: NameExtractor, hostname: str) -> bool:
    """
    Returns whether any name obtainable from `extractor` authorizes `hostname`.

    This is the representation-independent core of
    `verify_certificate_hostname` and `verify_der_hostname`.
    """
    if not isinstance(hostname, str) or not hostname:
        logger.debug("refusing to match an empty or non-text hostname")
        return False

    found_dnsname = False
    for name in iter_alt_names(extractor):
        if name.kind is not AltNameKind.DNS:
            continue

        # NOTE: an unusable dNSName (too long, embedded NUL) is skipped without
        # being counted, so commonName matching stays available.
        if not name.ok:
            continue

        found_dnsname = True
        if hostname_matches(name.value, hostname):
            logger.debug("subjectAltName %r matches %r", name.value, hostname)
            return True

    if found_dnsname:
        logger.debug("no subjectAltName dNSName matches %r", hostname)
        return False

    common_name = extractor.common_name()
    if not common_name.ok:
        logger.debug("no dNSName and no usable commonName (%s)", common_name.status.value)
        return False

    matched = hostname_matches(common_name.value, hostname)
    logger.debug("commonName %r matches %r: %s", common_name.value, hostname, matched)
    return matched


def verify_certificate_hostname(cert: x509.Certificate, hostname: str) -> bool:
    """
    Checks whether the parsed certificate `cert` was issued for `hostname`.

    Returns `True` on a match and `False` otherwise. Raises `TypeError` if
    `cert` is not an `x509.Certificate`; that is a caller bug, not a property
    of the peer.
    """
    return verify_hostname(CertificateNames(cert), hostname)


def verify_der_hostname(cert_der: bytes, hostname: str) -> bool:
    """
    Checks whether the DER-encoded certificate `cert_der` was issued for
    `hostname`.

    Returns `True` on a match and `False` otherwise, including when
    `cert_der` cannot be decoded. Raises `TypeError` if `cert_der` is not
    bytes-like.
    """
    return verify_hostname(RawCertificateNames(cert_der), hostname)
