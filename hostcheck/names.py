"""
Name extraction from X.509 certificates for hostname verification.

Two bindings are provided, one over a parsed `x509.Certificate` and one over
raw DER bytes. Both expose the same indexable view of the subjectAltName
entries and the subject commonName, and report failures as statuses rather
than exceptions.
"""

from __future__ import annotations

import enum
import itertools
import logging
from collections.abc import Iterator
from dataclasses import dataclass
from functools import cached_property
from typing import Protocol

from cryptography import x509
from cryptography.x509.oid import NameOID

from hostcheck.limits import MAX_ALT_NAMES, MAX_NAME_LENGTH

logger = logging.getLogger(__name__)


class AltNameKind(str, enum.Enum):
    """
    The declared type of a subjectAltName entry.
    """

    DNS = "DNS"
    RFC822 = "RFC822"
    URI = "URI"
    IP = "IP"
    DIRECTORY = "DIRECTORY"
    REGISTERED_ID = "REGISTERED_ID"
    OTHER = "OTHER"


class ExtractStatus(str, enum.Enum):
    """
    The outcome of a single name extraction.
    """

    OK = "OK"
    # The name exists but does not fit in MAX_NAME_SIZE.
    TRUNCATED = "TRUNCATED"
    # The name exists but cannot be used as text (embedded NUL, bad encoding).
    INVALID = "INVALID"
    # The requested field is not present at all.
    ABSENT = "ABSENT"
    # The certificate or extension could not be decoded.
    ERROR = "ERROR"
    # No entry at this index.
    END = "END"


@dataclass(frozen=True)
class AltName:
    """
    A single subjectAltName entry, or the reason one could not be produced.
    """

    kind: AltNameKind | None
    value: str | None
    status: ExtractStatus

    @property
    def ok(self) -> bool:
        return self.status is ExtractStatus.OK


@dataclass(frozen=True)
class CommonName:
    """
    The subject commonName, or the reason it could not be produced.
    """

    value: str | None
    status: ExtractStatus

    @property
    def ok(self) -> bool:
        return self.status is ExtractStatus.OK


_END = AltName(None, None, ExtractStatus.END)
_ERROR = AltName(None, None, ExtractStatus.ERROR)

_KINDS: dict[type, AltNameKind] = {
    x509.DNSName: AltNameKind.DNS,
    x509.RFC822Name: AltNameKind.RFC822,
    x509.UniformResourceIdentifier: AltNameKind.URI,
    x509.IPAddress: AltNameKind.IP,
    x509.DirectoryName: AltNameKind.DIRECTORY,
    x509.RegisteredID: AltNameKind.REGISTERED_ID,
    x509.OtherName: AltNameKind.OTHER,
}


class NameExtractor(Protocol):
    """
    The capability the verifier needs from a certificate representation.
    """

    def alt_name(self, index: int) -> AltName: ...

    def common_name(self) -> CommonName: ...


def _check_bounds(value: str) -> ExtractStatus:
    """
    Check that `value` fits in a name buffer and is usable as a C-style string.
    """
    try:
        encoded = value.encode("utf-8")
    except UnicodeEncodeError:
        return ExtractStatus.INVALID

    if b"\x00" in encoded:
        return ExtractStatus.INVALID
    if len(encoded) > MAX_NAME_LENGTH:
        return ExtractStatus.TRUNCATED
    return ExtractStatus.OK


def _general_name_text(name: x509.GeneralName) -> str | None:
    if isinstance(name, x509.DirectoryName):
        return name.value.rfc4514_string()
    if isinstance(name, x509.RegisteredID):
        return name.value.dotted_string
    if isinstance(name, x509.IPAddress):
        return str(name.value)
    if isinstance(name, x509.OtherName):
        return None
    return name.value


def _to_alt_name(name: x509.GeneralName) -> AltName:
    kind = _KINDS.get(type(name), AltNameKind.OTHER)
    text = _general_name_text(name)
    if text is None:
        return AltName(kind, None, ExtractStatus.OK)

    status = _check_bounds(text)
    if status is not ExtractStatus.OK:
        # Only dNSNames are ever compared against a hostname.
        log = logger.warning if kind is AltNameKind.DNS else logger.debug
        log("unusable %s subjectAltName entry: %s", kind.value, status.value)
        return AltName(kind, None, status)

    return AltName(kind, text, status)


@dataclass(frozen=True)
class CertificateNames:
    """
    Names extracted from a parsed `x509.Certificate`.
    """

    cert: x509.Certificate

    def __post_init__(self) -> None:
        if not isinstance(self.cert, x509.Certificate):
            raise TypeError(f"expected an x509.Certificate, got {type(self.cert)}")

    @cached_property
    def _general_names(self) -> list[x509.GeneralName] | None:
        """
        The subjectAltName entries in certificate order, an empty list if the
        extension is missing, or None if it could not be decoded.
        """
        try:
            san = self.cert.extensions.get_extension_for_class(x509.SubjectAlternativeName)
        except x509.ExtensionNotFound:
            return []
        except (ValueError, x509.DuplicateExtension, x509.UnsupportedGeneralNameType) as exc:
            logger.warning("malformed subjectAltName extension: %s", exc)
            return None

        return list(san.value)

    def alt_name(self, index: int) -> AltName:
        """
        Returns the subjectAltName entry at `index`.

        `ExtractStatus.END` is returned once `index` runs past the last entry,
        and `ExtractStatus.ERROR` if the extension is malformed or the
        certificate carries more than `MAX_ALT_NAMES` entries.
        """
        if index < 0:
            raise ValueError(f"alt name index must be non-negative, got {index}")

        names = self._general_names
        if names is None:
            return _ERROR
        if index >= len(names):
            return _END
        if index >= MAX_ALT_NAMES:
            logger.warning("certificate has more than %d subjectAltName entries", MAX_ALT_NAMES)
            return _ERROR

        return _to_alt_name(names[index])

    def common_name(self) -> CommonName:
        """
        Returns the first commonName attribute of the certificate's subject.
        """
        try:
            attrs = self.cert.subject.get_attributes_for_oid(NameOID.COMMON_NAME)
        except ValueError as exc:
            logger.warning("malformed subject name: %s", exc)
            return CommonName(None, ExtractStatus.ERROR)

        if not attrs:
            return CommonName(None, ExtractStatus.ABSENT)

        value = attrs[0].value
        if not isinstance(value, str):
            return CommonName(None, ExtractStatus.INVALID)

        status = _check_bounds(value)
        if status is not ExtractStatus.OK:
            logger.warning("unusable commonName: %s", status.value)
            return CommonName(None, status)

        return CommonName(value, status)


@dataclass(frozen=True)
class RawCertificateNames:
    """
    Names extracted from a DER-encoded certificate.

    The certificate is decoded on first use. If decoding fails, every
    accessor reports `ExtractStatus.ERROR`.
    """

    cert_der: bytes

    def __post_init__(self) -> None:
        if not isinstance(self.cert_der, (bytes, bytearray, memoryview)):
            raise TypeError(f"expected DER bytes, got {type(self.cert_der)}")

    @cached_property
    def _parsed(self) -> CertificateNames | None:
        try:
            cert = x509.load_der_x509_certificate(bytes(self.cert_der))
        except ValueError as exc:
            logger.warning("could not decode DER certificate: %s", exc)
            return None

        return CertificateNames(cert)

    def alt_name(self, index: int) -> AltName:
        if index < 0:
            raise ValueError(f"alt name index must be non-negative, got {index}")
        if self._parsed is None:
            return _ERROR
        return self._parsed.alt_name(index)

    def common_name(self) -> CommonName:
        if self._parsed is None:
            return CommonName(None, ExtractStatus.ERROR)
        return self._parsed.common_name()


def iter_alt_names(extractor: NameExtractor) -> Iterator[AltName]:
    """
    Lazily walks the subjectAltName entries of `extractor` from index 0.

    Iteration stops at `ExtractStatus.END` or `ExtractStatus.ERROR`; neither
    is yielded. Entries that are `TRUNCATED` or `INVALID` are yielded so that
    callers can still see their declared kind.
    """
    for index in itertools.count():
        name = extractor.alt_name(index)
        if name.status in (ExtractStatus.END, ExtractStatus.ERROR):
            if name.status is ExtractStatus.ERROR:
                logger.debug("stopping subjectAltName walk at index %d on error", index)
            return
        yield name
