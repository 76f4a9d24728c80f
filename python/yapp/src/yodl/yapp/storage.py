"""
Session recovery store for the redirect transport

Holds the single pending redirect payment in session storage so the
request can be matched again after the page navigated away and back.
"""

import json
import logging
import time
from typing import Callable, Optional

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from yodl.yapp.config import ProtocolConfig
from yodl.yapp.environment import SessionStorage
from yodl.yapp.types import PaymentRequestPayload

logger = logging.getLogger(__name__)


class PendingRequestRecord(BaseModel):
    """Persisted state of the redirect payment in flight"""

    schema_version: int = Field(ProtocolConfig.RECORD_SCHEMA_VERSION, alias="schemaVersion")
    memo: str
    timestamp: int
    redirect_url: str = Field(alias="redirectUrl")
    payload: PaymentRequestPayload
    timeout_id: Optional[str] = Field(None, alias="timeoutId")

    class Config:
        populate_by_name = True


class SessionRecoveryStore:
    """Single-slot store for PendingRequestRecord"""

    def __init__(
        self,
        storage: SessionStorage,
        key: str = ProtocolConfig.STORAGE_KEY,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """
        Initialize the store.

        Args:
            storage: Session-scoped storage port
            key: Storage key of the slot
            clock: Returns the current time in seconds
        """
        self._storage = storage
        self._key = key
        self._clock = clock

    def now_ms(self) -> int:
        return int(self._clock() * 1000)

    def load(self) -> PendingRequestRecord | None:
        """
        Read the pending record.

        Corrupt data and unknown schema versions are discarded and
        reported as no record.
        """
        raw = self._storage.get_item(self._key)
        if raw is None:
            return None

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning(f"Discarding unreadable pending payment record: {e}")
            self.clear()
            return None

        version = data.get("schemaVersion") if isinstance(data, dict) else None
        if version != ProtocolConfig.RECORD_SCHEMA_VERSION:
            logger.warning(f"Discarding pending payment record with schema version {version!r}")
            self.clear()
            return None

        try:
            return PendingRequestRecord(**data)
        except PydanticValidationError as e:
            logger.warning(f"Discarding invalid pending payment record: {e}")
            self.clear()
            return None

    def save(self, record: PendingRequestRecord) -> None:
        self._storage.set_item(
            self._key, json.dumps(record.model_dump(by_alias=True, exclude_none=True))
        )
        logger.debug(f"Saved pending payment record for memo {record.memo}")

    def clear(self) -> None:
        self._storage.remove_item(self._key)

    def clear_if_memo(self, memo: str) -> bool:
        """Clear the slot only if it holds the record for memo"""
        record = self.load()
        if record is None or record.memo != memo:
            return False
        self.clear()
        return True

    def is_expired(self, record: PendingRequestRecord, duration_ms: int) -> bool:
        return self.now_ms() - record.timestamp >= duration_ms

    def remaining_ms(self, record: PendingRequestRecord, duration_ms: int) -> int:
        return max(0, duration_ms - (self.now_ms() - record.timestamp))
