"""
basic_usage.py — Minimal backend API example.

Registers two endpoints, sends a cached call twice and shows how failures
surface as one exception family.

Usage:
    export BACKEND_API_TIMEOUT_S=10
    python examples/basic_usage.py
"""

import logging

from backend_api import EndpointRegistry, OrchestratorHooks, RequestFailure, create_backend_api


def on_fail_status(request, failure):
    if failure.status == 401:
        print("Session expired; redirect to login")


async def main() -> None:
    logging.basicConfig(level=logging.INFO)

    endpoints = EndpointRegistry()
    endpoints.register("getTodo", "https://jsonplaceholder.typicode.com/todos", cache_ttl_ms=30_000)
    endpoints.register("getMissing", "https://jsonplaceholder.typicode.com/nope")

    api = create_backend_api(endpoints, hooks=OrchestratorHooks(on_fail_status=on_fail_status))
    try:
        payload, result = await api.send("getTodo/1")
        print(result.status_code, payload if payload is not None else result.data)

        # Served from cache: no second HTTP call.
        _, cached = await api.send("getTodo/1")
        print("cached:", cached.data)

        try:
            await api.send("getMissing")
        except RequestFailure as failure:
            print("failed:", failure.status, failure.detail)
    finally:
        await api.aclose()


if __name__ == "__main__":
    import asyncio

    asyncio.run(main())
