"""Verification of signed (PKCS#7 / CMS) AASA files.

Trust model:
- The TLS leaf certificate presented by the domain is the only accepted
  signer. The certificate chain is NOT validated: this checks that the
  payload was signed with the key of the certificate that served it, not who
  issued that certificate.
- `asn1crypto` parses the CMS structure; `cryptography` checks the signature.
"""

from __future__ import annotations

import hmac

from asn1crypto import cms
from asn1crypto import x509 as asn1_x509
from cryptography import x509
from cryptography.exceptions import InvalidSignature, UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec, padding, rsa

from core.domain.errors import TrustError

_HASHES: dict[str, type[hashes.HashAlgorithm]] = {
    "sha1": hashes.SHA1,
    "sha224": hashes.SHA224,
    "sha256": hashes.SHA256,
    "sha384": hashes.SHA384,
    "sha512": hashes.SHA512,
}


def _hash_for(name: str) -> hashes.HashAlgorithm:
    algorithm = _HASHES.get(name)
    if algorithm is None:
        raise TrustError(f"Unsupported digest algorithm: {name}")
    return algorithm()


def _digest(data: bytes, algorithm: hashes.HashAlgorithm) -> bytes:
    ctx = hashes.Hash(algorithm)
    ctx.update(data)
    return ctx.finalize()


class SignatureVerifier:
    def verify(self, signed_blob: bytes, trusted_cert: x509.Certificate | None) -> bytes:
        """Return the signed payload, or raise `TrustError`."""

        if trusted_cert is None:
            raise TrustError("No peer certificate available to verify the signature")

        # asn1crypto parses lazily, so malformed input can fail on any access.
        try:
            return self._verify(signed_blob, trusted_cert)
        except (ValueError, TypeError, KeyError) as exc:
            raise TrustError(f"Malformed PKCS7 payload: {exc}") from exc

    def _verify(self, signed_blob: bytes, trusted_cert: x509.Certificate) -> bytes:
        content_info = cms.ContentInfo.load(signed_blob)
        if content_info["content_type"].native != "signed_data":
            raise TrustError("Payload is not CMS signed data")

        signed_data = content_info["content"]
        payload = signed_data["encap_content_info"]["content"].native
        signer_infos = signed_data["signer_infos"]

        if not isinstance(payload, bytes):
            raise TrustError("Signed data has no embedded content")
        if len(signer_infos) == 0:
            raise TrustError("Signed data has no signers")

        cert_der = trusted_cert.public_bytes(serialization.Encoding.DER)
        signer_cert = asn1_x509.Certificate.load(cert_der)

        signer = None
        for candidate in signer_infos:
            if self._identifies(candidate["sid"], signer_cert):
                signer = candidate
                break
        if signer is None:
            raise TrustError("Signer certificate not found")

        self._check_signature(signer, payload, trusted_cert)
        return payload

    @staticmethod
    def _identifies(sid: cms.SignerIdentifier, cert: asn1_x509.Certificate) -> bool:
        if sid.name == "issuer_and_serial_number":
            chosen = sid.chosen
            return chosen["serial_number"].native == cert.serial_number and chosen["issuer"] == cert.issuer
        if sid.name == "subject_key_identifier":
            return sid.chosen.native == cert.key_identifier
        return False

    def _check_signature(self, signer: cms.SignerInfo, payload: bytes, cert: x509.Certificate) -> None:
        digest_algorithm = _hash_for(signer["digest_algorithm"]["algorithm"].native)
        signed_attrs = signer["signed_attrs"]

        if signed_attrs.native:
            message_digest = None
            for attr in signed_attrs:
                if attr["type"].native == "message_digest":
                    message_digest = attr["values"][0].native
                    break
            if message_digest is None:
                raise TrustError("Signed attributes lack a message digest")
            if not hmac.compare_digest(message_digest, _digest(payload, digest_algorithm)):
                raise TrustError("Message digest does not match content")

            # The signature covers the attributes encoded as a SET OF, not
            # with the implicit [0] tag they carry inside SignerInfo.
            encoded = signed_attrs.dump()
            signed_bytes = b"\x31" + encoded[1:]
        else:
            signed_bytes = payload

        signature = signer["signature"].native
        signature_algo = signer["signature_algorithm"].signature_algo
        public_key = cert.public_key()

        try:
            if isinstance(public_key, rsa.RSAPublicKey) and signature_algo == "rsassa_pkcs1v15":
                public_key.verify(signature, signed_bytes, padding.PKCS1v15(), digest_algorithm)
            elif isinstance(public_key, rsa.RSAPublicKey) and signature_algo == "rsassa_pss":
                public_key.verify(
                    signature,
                    signed_bytes,
                    padding.PSS(mgf=padding.MGF1(digest_algorithm), salt_length=padding.PSS.AUTO),
                    digest_algorithm,
                )
            elif isinstance(public_key, ec.EllipticCurvePublicKey) and signature_algo == "ecdsa":
                public_key.verify(signature, signed_bytes, ec.ECDSA(digest_algorithm))
            else:
                raise TrustError(f"Unsupported signature algorithm: {signature_algo}")
        except InvalidSignature as exc:
            raise TrustError("Signature verification failed") from exc
        except UnsupportedAlgorithm as exc:
            raise TrustError(str(exc)) from exc
