# recordseal_core/storage/models.py
from __future__ import annotations
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, Optional

from recordseal_core.constants import DEFAULT_ROLE, DEFAULT_STATUS
from recordseal_core.integrity import IntegrityRecord
from recordseal_core.utils import now_iso


@dataclass
class UserRecord:
    """
    Storage-level representation of a user row.

    digest/signature belong to `identifier` and are only ever written
    together with it (see UserDirectory.update).
    """
    identifier: str
    role: str = DEFAULT_ROLE
    status: str = DEFAULT_STATUS
    digest: Optional[str] = None
    signature: Optional[str] = None
    created_at: str = field(default_factory=now_iso)
    id: Optional[int] = None

    def integrity(self) -> IntegrityRecord:
        return IntegrityRecord(identifier=self.identifier, digest=self.digest, signature=self.signature)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
