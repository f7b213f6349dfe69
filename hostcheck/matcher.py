"""
RFC 2818 comparison of a single certificate name against a hostname.
"""

from __future__ import annotations

from hostcheck.limits import WILDCARD_PREFIX


def hostname_matches(certname: str, hostname: str) -> bool:
    """
    Returns whether `certname` (a dNSName or commonName taken from a
    certificate) authorizes `hostname`.

    A name of the form `*.domain.tld` is a single-level wildcard: it matches
    any hostname whose suffix, starting at the hostname's first `.`, is
    exactly `.domain.tld`. Every other name must equal the hostname exactly.

    Comparison is case-sensitive. DNS names are case-insensitive in
    practice, but folding case here would change which certificates are
    accepted, so callers that want it must normalize both sides first.
    """
    if not certname or not hostname:
        return False

    # NOTE: a bare "*." is not long enough to be a wildcard and falls
    # through to the exact comparison below.
    if len(certname) > len(WILDCARD_PREFIX) and certname.startswith(WILDCARD_PREFIX):
        dot = hostname.find(".")
        if dot == -1:
            # Single-label hostnames can never match a wildcard.
            return False

        return certname[1:] == hostname[dot:]

    return certname == hostname
