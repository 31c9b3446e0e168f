"""Import fingerprints for statement rows.

A fingerprint is a deterministic 64-bit integer derived from the raw CSV line
a transaction was parsed from. It is the only key used to recognise rows that
were already imported, so the scheme below must stay stable: changing it makes
every previously imported statement look new again. If it ever has to change,
bump ``FINGERPRINT_SCHEME`` and recompute stored fingerprints from the source
files before importing with the new scheme.
"""

import hashlib

FINGERPRINT_SCHEME = "md5-le64-v1"


def create_import_fingerprint(csv_line: str) -> int:
    """Return the fingerprint for one raw statement line.

    The first 8 bytes of the MD5 digest of the UTF-8 encoded line, read as a
    signed little-endian integer so the value fits a SQL BIGINT.
    """
    digest = hashlib.md5(csv_line.encode("utf-8"), usedforsecurity=False).digest()
    return int.from_bytes(digest[:8], byteorder="little", signed=True)
