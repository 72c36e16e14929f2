"""Host key fingerprints in OpenSSH notation."""

import base64
import hashlib


def fingerprint(key_blob: bytes) -> str:
    """Return the SHA256 fingerprint of a raw public key blob.

    Matches ``ssh-keygen -lf`` output: unpadded base64 of the digest.
    """
    digest = hashlib.sha256(key_blob).digest()
    return "SHA256:" + base64.b64encode(digest).decode("ascii").rstrip("=")
