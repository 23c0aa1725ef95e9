"""
Default credential generator.

The protocol engine may supply its own generator; this one produces a
fresh, unregistered identity with the same shape the engine expects.
"""

from __future__ import annotations

import base64
import secrets

from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey
from cryptography.hazmat.primitives.asymmetric.x25519 import X25519PrivateKey
from cryptography.hazmat.primitives.serialization import (
    Encoding,
    NoEncryption,
    PrivateFormat,
    PublicFormat,
)

from authkeep.auth.types import AuthenticationCreds, KeyPair, SignedKeyPair

# Type byte prepended to Curve25519 public keys on the wire
KEY_BUNDLE_TYPE = b"\x05"


def generate_key_pair() -> KeyPair:
    """Random X25519 key pair as raw 32-byte public/private values."""
    private_key = X25519PrivateKey.generate()
    return {
        "public": private_key.public_key().public_bytes(Encoding.Raw, PublicFormat.Raw),
        "private": private_key.private_bytes(
            Encoding.Raw, PrivateFormat.Raw, NoEncryption()
        ),
    }


def sign(private_key: bytes, message: bytes) -> bytes:
    """
    Ed25519 signature with a signing key seeded from a 32-byte private key.

    Not XEdDSA: the signature verifies against the Ed25519 key derived from
    `private_key`, not against its X25519 public key. Engines that check
    signed pre-keys against the identity key must inject their own generator.
    """
    return Ed25519PrivateKey.from_private_bytes(private_key).sign(message)


def signed_key_pair(identity_key: KeyPair, key_id: int) -> SignedKeyPair:
    pre_key = generate_key_pair()
    signature = sign(identity_key["private"], KEY_BUNDLE_TYPE + pre_key["public"])
    return {"keyPair": pre_key, "signature": signature, "keyId": key_id}


def generate_registration_id() -> int:
    return secrets.randbits(16) & 16383


def init_auth_creds() -> AuthenticationCreds:
    """Fresh credentials for a device that has never paired."""
    identity_key = generate_key_pair()
    return {
        "noiseKey": generate_key_pair(),
        "pairingEphemeralKeyPair": generate_key_pair(),
        "signedIdentityKey": identity_key,
        "signedPreKey": signed_key_pair(identity_key, 1),
        "registrationId": generate_registration_id(),
        "advSecretKey": base64.b64encode(secrets.token_bytes(32)).decode("ascii"),
        "processedHistoryMessages": [],
        "nextPreKeyId": 1,
        "firstUnuploadedPreKeyId": 1,
        "accountSyncCounter": 0,
        "accountSettings": {"unarchiveChats": False},
        "registered": False,
        "pairingCode": None,
        "lastPropHash": None,
        "routingInfo": None,
    }
