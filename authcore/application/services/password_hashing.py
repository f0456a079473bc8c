"""Password hashing strategies."""

from __future__ import annotations

import base64
import secrets

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.constant_time import bytes_eq
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from authcore.domain.users.repositories import CredentialHasher
from authcore.shared.config.settings import HashingConfig

_ALGORITHMS: dict[str, type[hashes.HashAlgorithm]] = {  # keys match SUPPORTED_HASH_ALGORITHMS
    "sha256": hashes.SHA256,
    "sha384": hashes.SHA384,
    "sha512": hashes.SHA512,
    "sha3_256": hashes.SHA3_256,
    "sha3_512": hashes.SHA3_512,
}


class Pbkdf2CredentialHasher(CredentialHasher):
    """PBKDF2-HMAC hasher with a per-user random salt.

    Salt and digest are stored base64-encoded. The algorithm, iteration count
    and key length must stay fixed for as long as digests derived with them
    are stored, otherwise every later verification fails.
    """

    def __init__(self, config: HashingConfig | None = None) -> None:
        self._config = config or HashingConfig()  # type: ignore[call-arg]
        self._algorithm = _ALGORITHMS[self._config.algorithm]

    def _kdf(self, salt: str) -> PBKDF2HMAC:
        # A PBKDF2HMAC instance derives exactly once.
        return PBKDF2HMAC(
            algorithm=self._algorithm(),
            length=self._config.key_length,
            salt=base64.b64decode(salt),
            iterations=self._config.iterations,
        )

    def generate_salted_digest(self, plaintext: str) -> tuple[str, str]:
        salt = base64.b64encode(secrets.token_bytes(self._config.salt_bytes)).decode("ascii")
        return salt, self.verify(plaintext, salt)

    def verify(self, plaintext: str, salt: str) -> str:
        derived = self._kdf(salt).derive(plaintext.encode("utf-8"))
        return base64.b64encode(derived).decode("ascii")

    def digests_match(self, candidate: str, stored: str) -> bool:
        return bytes_eq(candidate.encode("ascii"), stored.encode("ascii"))

