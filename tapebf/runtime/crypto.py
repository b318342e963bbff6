"""Ed25519 signing for logbook entries."""
from __future__ import annotations

import sys

from ..constants import KEY_FILE, PUB_FILE

try:  # pragma: no cover - optional dependency
    from cryptography.hazmat.primitives.asymmetric.ed25519 import (
        Ed25519PrivateKey,
        Ed25519PublicKey,
    )
    from cryptography.hazmat.primitives import serialization
    from cryptography.exceptions import InvalidSignature
except ImportError:  # pragma: no cover
    Ed25519PrivateKey = Ed25519PublicKey = serialization = InvalidSignature = None


def _require_cryptography():
    if Ed25519PrivateKey is None or serialization is None:
        raise RuntimeError(
            "Cryptography support is unavailable; install the 'cryptography' package"
        )


def _key_paths():
    runtime_mod = sys.modules.get("tapebf.runtime")
    return (
        getattr(runtime_mod, "KEY_FILE", KEY_FILE),
        getattr(runtime_mod, "PUB_FILE", PUB_FILE),
    )


def ensure_keypair():
    """Load the signing key, generating and storing a new pair if missing."""
    _require_cryptography()
    key_path, pub_path = _key_paths()

    try:
        with open(key_path, "rb") as f:
            private_key = serialization.load_pem_private_key(f.read(), password=None)
    except FileNotFoundError:
        print("🔐 Generating new tapebf Ed25519 keypair ...")
        private_key = Ed25519PrivateKey.generate()
        with open(key_path, "wb") as f:
            f.write(
                private_key.private_bytes(
                    encoding=serialization.Encoding.PEM,
                    format=serialization.PrivateFormat.PKCS8,
                    encryption_algorithm=serialization.NoEncryption(),
                )
            )
        with open(pub_path, "wb") as f:
            f.write(
                private_key.public_key().public_bytes(
                    encoding=serialization.Encoding.PEM,
                    format=serialization.PublicFormat.SubjectPublicKeyInfo,
                )
            )
        print(f"  ✓ Keys written to {key_path}, {pub_path}")
    return private_key


def sign_hash(sha256_hex):
    """Sign a SHA-256 hex digest, returning the signature as hex."""
    private_key = ensure_keypair()
    return private_key.sign(sha256_hex.encode()).hex()


def verify_signature(sha256_hex, signature_hex):
    """Check *signature_hex* against the stored public key."""
    _require_cryptography()
    _, pub_path = _key_paths()

    with open(pub_path, "rb") as f:
        public_key = serialization.load_pem_public_key(f.read())
    try:
        public_key.verify(bytes.fromhex(signature_hex), sha256_hex.encode())
    except (InvalidSignature, ValueError):
        return False
    return True


__all__ = [
    "ensure_keypair",
    "sign_hash",
    "verify_signature",
]
