"""Example demonstrating single-flight token refresh."""

import asyncio

from requeue import CallableStrategy, RetryCoordinator


class Unauthorized(Exception):
    def __init__(self, request):
        super().__init__("401 Unauthorized")
        self.request = request


async def main():
    print("🔄 Testing Retry Coordinator\n")

    refreshes = [0]

    async def send(request):
        await asyncio.sleep(0)
        if request["token"] != "t2":
            raise Unauthorized(request)
        return f"{request['url']} -> 200 (token {request['token']})"

    async def refresh():
        refreshes[0] += 1
        print(f"  Refreshing token (refresh #{refreshes[0]})...")
        await asyncio.sleep(0.5)
        return {"token": "t2"}

    async def apply(request, values):
        request["token"] = values["token"]
        return await send(request)

    coordinator = RetryCoordinator(
        CallableStrategy(
            tag="auth",
            is_applicable=lambda e: isinstance(e, Unauthorized),
            refresh=refresh,
            apply_updated_values=apply,
        )
    )

    # Example 1: concurrent failures share one refresh
    print("Example 1: Five requests fail on an expired token at once")
    requests = [{"url": f"/items/{i}", "token": "t1"} for i in range(5)]
    results = await asyncio.gather(*(coordinator.call(send, r) for r in requests))
    for result in results:
        print(f"  ✅ {result}")
    print(f"  Refreshes: {refreshes[0]}\n")

    # Example 2: a later failure starts a new refresh cycle
    print("Example 2: A late request with the old token")
    result = await coordinator.call(send, {"url": "/items/9", "token": "t1"})
    print(f"  ✅ {result}")
    print(f"  Refreshes: {refreshes[0]}\n")

    print("✅ All retry coordinator examples completed successfully!")


if __name__ == "__main__":
    asyncio.run(main())
