from hashlib import sha256
from typing import Final

LENGTH_PREFIX_BYTES: Final = 8


def derive_cache_key(filename: str, chain: str) -> str:
    """
    Derive the cache digest of a (source filename, operation chain) pair.

    Each field is UTF-8 encoded and prefixed with its byte length, so no two distinct
    pairs hash the same input (``"ab" + "c"`` and ``"a" + "bc"`` stay apart). The digest
    only indexes the cache and is never used for integrity checks.

    :param filename: Source path relative to the image root, as requested.
    :param chain: The raw operation chain.
    :return: 64 lowercase hexadecimal characters.
    """
    h = sha256()
    for field in (filename, chain):
        encoded = field.encode("utf8")
        h.update(len(encoded).to_bytes(LENGTH_PREFIX_BYTES, "big"))
        h.update(encoded)
    return h.hexdigest()
