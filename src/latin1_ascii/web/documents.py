"""Document store for the web API.

Each ``POST /api/documents`` creates an in-memory document holding an
:class:`EditorSession`. Documents expire after ``TTL_SECONDS`` and are
cleaned up automatically.
"""

from __future__ import annotations

import threading
import time
import uuid
from dataclasses import dataclass, field

from latin1_ascii.core.session import EditorSession

TTL_SECONDS = 3600  # 1 hour


@dataclass
class Document:
    id: str
    session: EditorSession
    created_at: float = field(default_factory=time.time)
    # Conversions mutate the buffer in place; one request at a time per document.
    lock: threading.Lock = field(default_factory=threading.Lock)

    def to_dict(self) -> dict:
        session = self.session
        return {
            "document_id": self.id,
            "text": session.buffer.text,
            "length": len(session.buffer),
            "selection": session.buffer.get_current_selection(),
            "can_undo": session.history.can_undo,
            "can_redo": session.history.can_redo,
        }


class DocumentManager:
    """Thread-safe in-memory document store with automatic expiry."""

    def __init__(self, cleanup_interval: float | None = 300) -> None:
        self._documents: dict[str, Document] = {}
        self._lock = threading.Lock()
        if cleanup_interval:
            self._start_cleanup_thread(cleanup_interval)

    def create(self, session: EditorSession) -> Document:
        document = Document(id=str(uuid.uuid4()), session=session)
        with self._lock:
            self._documents[document.id] = document
        return document

    def get(self, document_id: str) -> Document | None:
        with self._lock:
            return self._documents.get(document_id)

    def delete(self, document_id: str) -> bool:
        with self._lock:
            return self._documents.pop(document_id, None) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._documents)

    def cleanup_expired(self, now: float | None = None) -> int:
        now = time.time() if now is None else now
        with self._lock:
            expired = [
                doc_id for doc_id, doc in self._documents.items()
                if now - doc.created_at > TTL_SECONDS
            ]
            for doc_id in expired:
                del self._documents[doc_id]
        return len(expired)

    def _start_cleanup_thread(self, interval: float) -> None:
        def _loop() -> None:
            while True:
                time.sleep(interval)
                self.cleanup_expired()

        t = threading.Thread(target=_loop, daemon=True)
        t.start()


# Singleton used by FastAPI routes
document_manager = DocumentManager()
