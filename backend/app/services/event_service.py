"""문서 변경 이벤트(잠금/버전 생성)를 구독자에게 전달하는 실시간 알림 서비스입니다.

전달은 at-most-once, best-effort다. 구독자 큐가 가득 차거나 웹훅 전송이 실패하면
이벤트는 버려지고 로그만 남는다. 클라이언트는 이벤트 누락을 전제로 현재 상태를
다시 조회할 수 있어야 한다.
"""

import logging
import queue
import threading
from typing import Any, Dict, Iterable, Iterator, List, Optional

import httpx

from app.config import settings
from app.utils.helpers import utcnow

logger = logging.getLogger(__name__)

LOCK_CHANGED = "lock_changed"
VERSION_CREATED = "version_created"
EVENT_TYPES = {LOCK_CHANGED, VERSION_CREATED}


def build_event(document_id: int, event_type: str, payload: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    if event_type not in EVENT_TYPES:
        raise ValueError(f"unsupported event type: {event_type}")
    return {
        "document_id": int(document_id),
        "type": event_type,
        "payload": dict(payload or {}),
        "occurred_at": utcnow().isoformat(),
    }


class Subscription:
    """필터에 맞는 이벤트 스트림. 반복하면 close() 전까지 이벤트를 차례로 돌려준다."""

    def __init__(
        self,
        bus: "EventBus",
        *,
        document_id: Optional[int] = None,
        types: Optional[Iterable[str]] = None,
        maxsize: int = 100,
    ):
        self._bus = bus
        self.document_id = document_id
        self.types = set(types) if types else None
        self._queue: "queue.Queue[Optional[Dict[str, Any]]]" = queue.Queue(maxsize=maxsize)
        self.closed = False
        self.dropped = 0
        self._dropped_lock = threading.Lock()

    def matches(self, event: Dict[str, Any]) -> bool:
        if self.document_id is not None and event.get("document_id") != self.document_id:
            return False
        if self.types is not None and event.get("type") not in self.types:
            return False
        return True

    def offer(self, event: Dict[str, Any]) -> bool:
        try:
            self._queue.put_nowait(event)
            return True
        except queue.Full:
            with self._dropped_lock:
                self.dropped += 1
            return False

    def get(self, timeout: Optional[float] = None) -> Optional[Dict[str, Any]]:
        try:
            return self._queue.get(timeout=timeout)
        except queue.Empty:
            return None

    def drain(self) -> List[Dict[str, Any]]:
        events = []
        while True:
            try:
                event = self._queue.get_nowait()
            except queue.Empty:
                return events
            if event is not None:
                events.append(event)

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        self._bus.unsubscribe(self)
        try:
            # 블로킹 중인 반복자를 깨운다.
            self._queue.put_nowait(None)
        except queue.Full:
            pass

    def __iter__(self) -> Iterator[Dict[str, Any]]:
        while True:
            if self.closed:
                # 닫힌 뒤에는 이미 쌓인 이벤트만 돌려준다.
                yield from self.drain()
                return
            event = self._queue.get()
            if event is None:
                return
            yield event

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class WebhookForwarder:
    """외부 pub/sub 채널(HTTP 웹훅)로 이벤트를 전달한다."""

    def __init__(self, url: str, *, timeout: float = 3.0, client: Optional[httpx.Client] = None):
        self.url = url
        self.timeout = timeout
        self._client = client

    def send(self, event: Dict[str, Any]) -> None:
        if self._client is not None:
            response = self._client.post(self.url, json=event, timeout=self.timeout)
        else:
            response = httpx.post(self.url, json=event, timeout=self.timeout)
        response.raise_for_status()


class EventBus:
    def __init__(self, *, queue_size: int = 100, forwarder: Optional[WebhookForwarder] = None):
        self.queue_size = queue_size
        self.forwarder = forwarder
        self._subscriptions: List[Subscription] = []
        self._lock = threading.Lock()

    def subscribe(self, document_id: Optional[int] = None, types: Optional[Iterable[str]] = None) -> Subscription:
        subscription = Subscription(self, document_id=document_id, types=types, maxsize=self.queue_size)
        with self._lock:
            self._subscriptions.append(subscription)
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        with self._lock:
            if subscription in self._subscriptions:
                self._subscriptions.remove(subscription)

    def publish(self, event: Dict[str, Any]) -> int:
        """매칭되는 구독자 수만큼 전달하고 실제 전달된 수를 돌려준다."""
        with self._lock:
            targets = [s for s in self._subscriptions if s.matches(event)]
        delivered = 0
        for subscription in targets:
            if subscription.offer(event):
                delivered += 1
            else:
                logger.warning(
                    "[events] subscriber queue full, dropped %s for document %s",
                    event.get("type"),
                    event.get("document_id"),
                )
        if self.forwarder is not None:
            try:
                self.forwarder.send(event)
            except httpx.HTTPError as exc:
                logger.warning("[events] webhook delivery failed: %s", exc)
        return delivered


def _build_default_bus() -> EventBus:
    forwarder = None
    if settings.REALTIME_WEBHOOK_URL:
        forwarder = WebhookForwarder(settings.REALTIME_WEBHOOK_URL, timeout=settings.REALTIME_TIMEOUT_SECONDS)
    return EventBus(queue_size=settings.REALTIME_QUEUE_SIZE, forwarder=forwarder)


event_bus = _build_default_bus()


def publish_event(document_id: int, event_type: str, payload: Optional[Dict[str, Any]] = None) -> None:
    # 커밋 이후 호출된다. 알림 실패가 이미 커밋된 변경을 실패로 만들면 안 된다.
    if not settings.REALTIME_ENABLED:
        return
    try:
        event_bus.publish(build_event(document_id, event_type, payload))
    except Exception as exc:
        logger.warning("[events] publish skipped for document %s: %s", document_id, exc)
