from __future__ import annotations

import asyncio
import logging

import pytest

from backend_api import (
    SUPPRESSED,
    BackendApiError,
    BackendApiSettings,
    BusinessFailure,
    CallSetupFailure,
    EndpointRegistry,
    InMemoryResponseCache,
    OrchestratorHooks,
    Outcome,
    OutcomeClassifier,
    RequestOrchestrator,
    RequestResult,
    TransportFailure,
)
from tests.support import StaticTransport, settle


def run_async(coro):
    return asyncio.run(coro)


def _endpoints() -> EndpointRegistry:
    registry = EndpointRegistry()
    registry.register("getList", "https://api.test/list")
    registry.register("getUser", "https://api.test/user")
    registry.register("saveUser", "https://api.test/user", method="POST")
    return registry


def _api(transport, indicator=None, notifier=None, *, clock=None, settings=None, hooks=None, cache=None):
    return RequestOrchestrator(
        transport=transport,
        endpoints=_endpoints(),
        settings=settings,
        cache=cache if cache is not None else InMemoryResponseCache(clock=clock or (lambda: 0.0)),
        indicator=indicator,
        notifier=notifier,
        hooks=hooks,
    )


class _SpyCache:
    backend_id = "spy"

    def __init__(self) -> None:
        self.inner = InMemoryResponseCache()
        self.writes: list[str] = []

    async def get(self, key):
        return await self.inner.get(key)

    async def has(self, key):
        return await self.inner.has(key)

    async def set(self, key, value, *, ttl_ms):
        self.writes.append(key)
        return await self.inner.set(key, value, ttl_ms=ttl_ms)

    async def delete(self, key):
        await self.inner.delete(key)


def test_business_success_resolves_payload_and_raw_result(manual_transport, indicator):
    async def scenario() -> None:
        api = _api(manual_transport, indicator)
        task = asyncio.create_task(api.send("getList", {"page": 1}))
        await settle()

        request, _ = manual_transport.calls[0]
        assert request.method == "GET"
        assert request.url == "https://api.test/list"
        assert request.payload == {"page": 1}
        assert request.headers["content-type"] == "application/x-www-form-urlencoded"

        body = {"status": 0, "data": {"items": [1, 2]}}
        manual_transport.respond(0, data=body)
        payload, result = await task
        assert payload == {"items": [1, 2]}
        assert result.data == body
        assert result.status_code == 200

    run_async(scenario())


def test_duplicate_is_suppressed_while_original_in_flight(manual_transport, caplog):
    async def scenario() -> None:
        api = _api(manual_transport)
        first = asyncio.create_task(api.send("getList", {"page": 1}, suppress_duplicates=True))
        await settle()
        second = asyncio.create_task(api.send("getList", {"page": 1}, suppress_duplicates=True))
        await settle()
        assert len(manual_transport.calls) == 1

        manual_transport.respond(0, data={"data": "first"})
        payload, _ = await first
        assert payload == "first"

        done, _ = await asyncio.wait({second}, timeout=0.05)
        assert not done
        assert len(api.registry) == 0
        second.cancel()

    with caplog.at_level(logging.WARNING, logger="backend_api.runtime"):
        run_async(scenario())
    assert any("Suppressed duplicate request" in r.message for r in caplog.records)


def test_sentinel_mode_returns_suppressed_marker(manual_transport):
    async def scenario() -> None:
        api = _api(manual_transport, settings=BackendApiSettings(duplicate_mode="sentinel"))
        first = asyncio.create_task(api.send("getList", suppress_duplicates=True))
        await settle()
        outcome = await api.send("getList", suppress_duplicates=True)
        assert outcome is SUPPRESSED

        manual_transport.respond(0, data={"data": 1})
        assert (await first)[0] == 1

    run_async(scenario())


def test_duplicates_dispatch_when_suppression_not_requested(manual_transport):
    async def scenario() -> None:
        api = _api(manual_transport)
        first = asyncio.create_task(api.send("getList"))
        second = asyncio.create_task(api.send("getList"))
        await settle()
        assert len(manual_transport.calls) == 2
        assert len(api.registry) == 2

        manual_transport.respond(0, data={"data": "a"})
        await first
        assert api.registry.any()
        manual_transport.respond(1, data={"data": "b"})
        await second
        assert not api.registry.any()

    run_async(scenario())


def test_cached_result_is_served_until_ttl_elapses(manual_transport, clock):
    async def scenario() -> None:
        api = _api(manual_transport, clock=clock)
        task = asyncio.create_task(api.send("getList", {"page": 1}, cache_ttl_ms=1000))
        await settle()
        manual_transport.respond(0, data={"status": 0, "data": ["fresh"]})
        await task

        clock.advance_ms(500)
        payload, result = await api.send("getList", {"page": 1}, cache_ttl_ms=1000)
        assert payload == ["fresh"]
        assert result.status_code == 200
        assert len(manual_transport.calls) == 1
        assert len(api.registry) == 0

        clock.advance_ms(1000)
        task = asyncio.create_task(api.send("getList", {"page": 1}, cache_ttl_ms=1000))
        await settle()
        assert len(manual_transport.calls) == 2
        manual_transport.respond(1, data={"data": ["again"]})
        assert (await task)[0] == ["again"]

    run_async(scenario())


def test_cache_hit_does_not_touch_visibility(manual_transport, indicator):
    async def scenario() -> None:
        api = _api(manual_transport, indicator)
        task = asyncio.create_task(api.send("getList", cache_ttl_ms=1000))
        await settle()
        manual_transport.respond(0, data={"data": 1})
        await task
        events_before = list(indicator.events)

        await api.send("getList")
        assert indicator.events == events_before

    run_async(scenario())


def test_failures_are_not_cached(manual_transport):
    async def scenario() -> None:
        api = _api(manual_transport)
        task = asyncio.create_task(api.send("getList", cache_ttl_ms=1000))
        await settle()
        manual_transport.respond(0, data={"status": 500, "statusInfo": {"message": "x"}})
        with pytest.raises(BusinessFailure):
            await task
        assert not await api.cache.has(api.fingerprint(api.endpoints.resolve("getList")))

    run_async(scenario())


def test_first_writer_wins_for_concurrent_successes(manual_transport):
    async def scenario() -> None:
        cache = _SpyCache()
        api = _api(manual_transport, cache=cache)
        first = asyncio.create_task(api.send("getList", cache_ttl_ms=1000))
        second = asyncio.create_task(api.send("getList", cache_ttl_ms=1000))
        await settle()
        assert len(manual_transport.calls) == 2

        manual_transport.respond(0, data={"data": "first"})
        manual_transport.respond(1, data={"data": "second"})
        await first
        await second
        assert len(cache.writes) == 1

        payload, _ = await api.send("getList")
        assert payload == "first"

    run_async(scenario())


def test_visibility_held_until_all_visible_calls_complete(manual_transport, indicator):
    async def scenario() -> None:
        api = _api(manual_transport, indicator)
        visible = [
            asyncio.create_task(api.send("getUser", {"id": i})) for i in range(3)
        ]
        hidden = asyncio.create_task(api.send("getList", show_visibility=False))
        await settle()
        assert len(manual_transport.calls) == 4
        assert indicator.events.count("show_loading") == 1
        assert indicator.events.count("show_activity") == 1
        assert api.visibility.engaged

        manual_transport.respond(3, data={})
        await hidden
        assert indicator.loading

        manual_transport.respond(0, data={})
        manual_transport.respond(1, data={})
        await visible[0]
        await visible[1]
        assert indicator.loading
        assert "hide_loading" not in indicator.events

        manual_transport.respond(2, data={})
        await visible[2]
        assert not indicator.loading
        assert not indicator.active
        assert indicator.events.count("hide_loading") == 1
        assert not api.visibility.engaged

    run_async(scenario())


def test_activity_indicator_outlives_visible_calls(manual_transport, indicator):
    async def scenario() -> None:
        api = _api(manual_transport, indicator)
        hidden = asyncio.create_task(api.send("getList", show_visibility=False))
        await settle()
        assert indicator.active
        assert not indicator.loading

        shown = asyncio.create_task(api.send("getUser", visibility_mask=True))
        await settle()
        assert indicator.loading
        assert indicator.last_mask is True

        manual_transport.respond(1, data={})
        await shown
        assert not indicator.loading
        assert indicator.active

        manual_transport.respond(0, data={})
        await hidden
        assert not indicator.active

    run_async(scenario())


class _FailureWithoutErrorClassifier(OutcomeClassifier):
    def classify(self, request, outcome):
        return Outcome(kind="business_failure", result=outcome)


def test_failure_outcome_without_error_raises_backend_api_error(notifier):
    async def scenario() -> None:
        api = RequestOrchestrator(
            transport=StaticTransport(200, {"status": 3}),
            endpoints=_endpoints(),
            notifier=notifier,
            classifier=_FailureWithoutErrorClassifier(),
        )
        with pytest.raises(BackendApiError, match="Unclassified outcome"):
            await api.send("getList")
        assert notifier.toasts == []

    run_async(scenario())


def test_http_error_status_maps_to_transport_failure(manual_transport, notifier):
    async def scenario() -> None:
        api = _api(manual_transport, notifier=notifier)
        task = asyncio.create_task(api.send("getList"))
        await settle()
        manual_transport.respond(0, status_code=404, data="not found")

        with pytest.raises(TransportFailure) as excinfo:
            await task
        failure = excinfo.value
        assert failure.status == 10000
        assert failure.detail == {"statusCode": 404}
        assert failure.result.status_code == 404
        assert failure.result.data == {
            "status": 10000,
            "statusInfo": {
                "message": "Request timed out, please retry",
                "detail": {"statusCode": 404},
            },
        }
        assert notifier.toasts == [("Request timed out, please retry\n(code: 10000)", None)]

    run_async(scenario())


def test_transport_call_error_maps_to_call_setup_failure(manual_transport, indicator):
    async def scenario() -> None:
        api = _api(manual_transport, indicator)
        task = asyncio.create_task(api.send("getList"))
        await settle()
        manual_transport.fail(0, "timeout")

        with pytest.raises(CallSetupFailure) as excinfo:
            await task
        failure = excinfo.value
        assert failure.status == 20000
        assert failure.detail == {"errMsg": "timeout"}
        assert failure.result.err_msg == "timeout"
        assert failure.result.data["statusInfo"]["detail"]["errMsg"] == "timeout"
        assert len(api.registry) == 0
        assert not indicator.loading

    run_async(scenario())


class _BrokenTransport:
    async def send(self, request):
        raise OSError("socket gone")


def test_unexpected_transport_exception_maps_to_call_setup_failure(indicator, notifier):
    async def scenario() -> None:
        api = _api(_BrokenTransport(), indicator, notifier)
        with pytest.raises(CallSetupFailure) as excinfo:
            await api.send("getList")
        failure = excinfo.value
        assert failure.status == 20000
        assert failure.result.err_msg == "OSError: socket gone"
        assert len(notifier.toasts) == 1
        assert len(api.registry) == 0
        assert not indicator.loading
        assert not indicator.active

    run_async(scenario())


def test_business_failure_passes_body_through_and_runs_funnel(manual_transport, notifier):
    seen = []

    def on_fail_status(request, failure):
        seen.append((request.name, failure.status))

    async def scenario() -> None:
        api = _api(manual_transport, notifier=notifier, hooks=OrchestratorHooks(on_fail_status=on_fail_status))
        task = asyncio.create_task(api.send("getUser", error_toast_duration_ms=3000))
        await settle()
        body = {"status": 401, "statusInfo": {"message": "Login required", "detail": None}}
        manual_transport.respond(0, data=body)

        with pytest.raises(BusinessFailure) as excinfo:
            await task
        assert excinfo.value.result.data is body
        assert excinfo.value.status == 401
        assert excinfo.value.message == "Login required"

    run_async(scenario())
    assert seen == [("getUser", 401)]
    assert notifier.toasts == [("Login required\n(code: 401)", 3000)]


def test_error_toast_can_be_disabled(manual_transport, notifier):
    async def scenario() -> None:
        api = _api(manual_transport, notifier=notifier)
        task = asyncio.create_task(api.send("getUser", show_error_toast=False))
        await settle()
        manual_transport.respond(0, status_code=500)
        with pytest.raises(TransportFailure):
            await task

    run_async(scenario())
    assert notifier.toasts == []


def test_failing_status_hook_does_not_mask_failure(manual_transport, caplog):
    def on_fail_status(request, failure):
        raise RuntimeError("redirect failed")

    async def scenario() -> None:
        api = _api(manual_transport, hooks=OrchestratorHooks(on_fail_status=on_fail_status))
        task = asyncio.create_task(api.send("getUser"))
        await settle()
        manual_transport.respond(0, status_code=502)
        with pytest.raises(TransportFailure):
            await task

    with caplog.at_level(logging.ERROR, logger="backend_api.runtime"):
        run_async(scenario())
    assert any("on_fail_status hook failed" in r.message for r in caplog.records)


def test_before_send_hook_short_circuits_dispatch(manual_transport):
    canned = ("canned", RequestResult(status_code=200, data={"data": "canned"}))

    async def before_send(request):
        if request.name == "getList":
            return canned
        return None

    async def scenario() -> None:
        api = _api(manual_transport, hooks=OrchestratorHooks(before_send=before_send))
        assert await api.send("getList") is canned
        assert manual_transport.calls == []

        task = asyncio.create_task(api.send("getUser"))
        await settle()
        assert len(manual_transport.calls) == 1
        manual_transport.respond(0, data={"data": "real"})
        assert (await task)[0] == "real"

    run_async(scenario())


def test_after_send_hook_rewrites_response_before_classification(manual_transport):
    def after_send(request, outcome):
        if isinstance(outcome, RequestResult) and isinstance(outcome.data, str):
            return RequestResult(
                status_code=outcome.status_code,
                headers=outcome.headers,
                data={"status": 0, "data": outcome.data[::-1]},
            )
        return None

    async def scenario() -> None:
        api = _api(manual_transport, hooks=OrchestratorHooks(after_send=after_send))
        task = asyncio.create_task(api.send("getList"))
        await settle()
        manual_transport.respond(0, data="terces")
        payload, result = await task
        assert payload == "secret"
        assert result.data == {"status": 0, "data": "secret"}

    run_async(scenario())


def test_cancelled_call_is_torn_down(manual_transport, indicator):
    async def scenario() -> None:
        api = _api(manual_transport, indicator)
        task = asyncio.create_task(api.send("getList", suppress_duplicates=True))
        await settle()
        assert api.registry.any()

        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        assert not api.registry.any()
        assert not indicator.loading
        assert not indicator.active

    run_async(scenario())


def test_path_suffix_names_target_the_trailing_resource():
    async def scenario() -> None:
        transport = StaticTransport(data={"data": {"id": 123}})
        api = _api(transport)
        payload, _ = await api.send("getUser/123")
        assert payload == {"id": 123}
        assert transport.requests[0].url == "https://api.test/user/123"

    run_async(scenario())


def test_unknown_endpoint_warns_and_uses_call_time_url(caplog):
    async def scenario() -> None:
        transport = StaticTransport(data={"data": "ok"})
        api = _api(transport)
        payload, _ = await api.send("missing", url="https://api.test/adhoc", method="post")
        assert payload == "ok"
        assert transport.requests[0].method == "POST"
        assert transport.requests[0].url == "https://api.test/adhoc"

    with caplog.at_level(logging.WARNING, logger="backend_api.endpoints"):
        run_async(scenario())
    assert any("No endpoint registered for 'missing'" in r.message for r in caplog.records)


def test_send_sync_runs_one_call():
    transport = StaticTransport(data={"status": 0, "data": [1]})
    api = _api(transport)
    payload, result = api.send_sync("getList")
    assert payload == [1]
    assert result.status_code == 200
