from __future__ import annotations

import hashlib
import uuid


def derive_identifier(name: str) -> uuid.UUID:
    """Stable GUID for a name: MD5 of its UTF-8 bytes in Windows GUID byte order.

    Used for the MSI UpgradeCode so rebuilding a package with the same name is
    seen as an upgrade. Not a security boundary.
    """

    digest = hashlib.md5(name.encode("utf-8"), usedforsecurity=False).digest()
    return uuid.UUID(bytes_le=digest)


def new_component_guid() -> uuid.UUID:
    return uuid.uuid4()
