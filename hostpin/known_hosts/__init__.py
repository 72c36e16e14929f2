"""known_hosts trust store.

- codec: Parses and renders individual known_hosts lines
- TrustStore: File-backed, append-only collection of pinned keys
"""

from hostpin.known_hosts.codec import decode_line, encode_entry, hash_host, matches_host
from hostpin.known_hosts.store import TrustStore

__all__ = ["TrustStore", "decode_line", "encode_entry", "hash_host", "matches_host"]
