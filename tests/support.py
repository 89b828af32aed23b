from __future__ import annotations

import asyncio

from backend_api import RequestResult, TransportCallError, TransportRequest


class ManualTransport:
    """Transport whose calls stay pending until the test settles them."""

    transport_id = "manual"

    def __init__(self) -> None:
        self.calls: list[tuple[TransportRequest, asyncio.Future]] = []

    async def send(self, request: TransportRequest) -> RequestResult:
        future = asyncio.get_running_loop().create_future()
        self.calls.append((request, future))
        return await future

    def respond(self, index: int, status_code: int = 200, data=None) -> None:
        self.calls[index][1].set_result(
            RequestResult(status_code=status_code, headers={}, data=data)
        )

    def fail(self, index: int, err_msg: str) -> None:
        self.calls[index][1].set_exception(TransportCallError(err_msg))


class StaticTransport:
    """Transport answering every call with the same body."""

    transport_id = "static"

    def __init__(self, status_code: int = 200, data=None) -> None:
        self.status_code = status_code
        self.data = data
        self.requests: list[TransportRequest] = []

    async def send(self, request: TransportRequest) -> RequestResult:
        self.requests.append(request)
        return RequestResult(status_code=self.status_code, headers={}, data=self.data)


class RecordingIndicator:
    def __init__(self) -> None:
        self.events: list[str] = []
        self.loading = False
        self.active = False
        self.last_mask: bool | None = None

    def show_loading(self, *, message: str, mask: bool) -> None:
        self.events.append("show_loading")
        self.loading = True
        self.last_mask = mask

    def hide_loading(self) -> None:
        self.events.append("hide_loading")
        self.loading = False

    def show_activity(self) -> None:
        self.events.append("show_activity")
        self.active = True

    def hide_activity(self) -> None:
        self.events.append("hide_activity")
        self.active = False


class RecordingNotifier:
    def __init__(self) -> None:
        self.toasts: list[tuple[str, int | None]] = []

    def show_toast(self, message: str, *, duration_ms: int | None = None) -> None:
        self.toasts.append((message, duration_ms))


class FakeClock:
    """Epoch-seconds clock advanced in whole milliseconds."""

    def __init__(self, now_ms: int = 1_000_000) -> None:
        self.now_ms = now_ms

    def __call__(self) -> float:
        return self.now_ms / 1000.0

    def advance_ms(self, ms: int) -> None:
        self.now_ms += ms


async def settle() -> None:
    """Let pending callbacks and tasks run."""
    for _ in range(5):
        await asyncio.sleep(0)

