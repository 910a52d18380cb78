"""Tests for refresh strategies and refresh adapters."""

import asyncio
from types import SimpleNamespace

import pytest

from requeue.coordination import (
    CallableStrategy,
    RetryCoordinator,
    callback_refresh,
    timeout_refresh,
)
from requeue.core.config import get_config
from requeue.core.exceptions import (
    ConfigurationError,
    QueueProcessingError,
    RefreshError,
    RefreshTimeoutError,
)


async def _noop_refresh():
    return {}


async def _noop_apply(request, values):
    return None


class TestCallableStrategy:
    """Test strategy built from callables."""

    def test_exposes_callables(self):
        """Callables are usable as strategy methods."""
        strategy = CallableStrategy(
            tag="auth",
            is_applicable=lambda e: isinstance(e, PermissionError),
            refresh=_noop_refresh,
            apply_updated_values=_noop_apply,
        )

        assert strategy.tag == "auth"
        assert strategy.is_applicable(PermissionError())
        assert not strategy.is_applicable(ValueError())

    def test_empty_tag_rejected(self):
        """Empty tag raises ConfigurationError."""
        with pytest.raises(ConfigurationError):
            CallableStrategy(
                tag="",
                is_applicable=lambda e: True,
                refresh=_noop_refresh,
                apply_updated_values=_noop_apply,
            )

    def test_coordinator_rejects_empty_tag(self):
        """Coordinator validates tag of any strategy object."""
        strategy = SimpleNamespace(tag="")

        with pytest.raises(ConfigurationError):
            RetryCoordinator(strategy)


class TestCallbackRefresh:
    """Test callback-style refresh adapter."""

    @pytest.mark.asyncio
    async def test_success_callback_resolves(self):
        """Values passed to on_success are returned."""

        def action(on_success, on_error):
            asyncio.get_running_loop().call_soon(on_success, {"token": "t2"})

        refresh = callback_refresh(action)

        assert await refresh() == {"token": "t2"}

    @pytest.mark.asyncio
    async def test_error_callback_raises(self):
        """Error passed to on_error is raised."""
        error = RefreshError("expired")

        def action(on_success, on_error):
            on_error(error)

        with pytest.raises(RefreshError) as exc_info:
            await callback_refresh(action)()

        assert exc_info.value is error

    @pytest.mark.asyncio
    async def test_error_without_value_raises_placeholder(self):
        """on_error without an error raises QueueProcessingError."""

        def action(on_success, on_error):
            on_error(None)

        with pytest.raises(QueueProcessingError, match="Queue processing failed"):
            await callback_refresh(action)()

    @pytest.mark.asyncio
    async def test_settles_exactly_once(self):
        """Only the first callback counts."""

        def action(on_success, on_error):
            on_success({"token": "first"})
            on_error(RefreshError("late"))
            on_success({"token": "second"})

        assert await callback_refresh(action)() == {"token": "first"}

    @pytest.mark.asyncio
    async def test_each_call_starts_new_action(self):
        """Refresh runs the action once per call."""
        calls = [0]

        def action(on_success, on_error):
            calls[0] += 1
            on_success(calls[0])

        refresh = callback_refresh(action)

        assert await refresh() == 1
        assert await refresh() == 2


class TestTimeoutRefresh:
    """Test time-bounded refresh."""

    @pytest.mark.asyncio
    async def test_returns_values_within_timeout(self):
        """Fast refresh passes its values through."""

        async def refresh():
            return {"token": "t2"}

        assert await timeout_refresh(refresh, timeout=1.0)() == {"token": "t2"}

    @pytest.mark.asyncio
    async def test_slow_refresh_times_out(self):
        """Slow refresh raises RefreshTimeoutError."""

        async def refresh():
            await asyncio.sleep(1.0)

        with pytest.raises(RefreshTimeoutError):
            await timeout_refresh(refresh, timeout=0.01)()

    @pytest.mark.asyncio
    async def test_default_timeout_from_config(self, monkeypatch):
        """Timeout defaults to the configured refresh timeout."""
        monkeypatch.setattr(get_config(), "refresh_timeout", 0.01)

        async def refresh():
            await asyncio.sleep(1.0)

        with pytest.raises(RefreshTimeoutError, match="0.01s"):
            await timeout_refresh(refresh)()

    @pytest.mark.asyncio
    async def test_timeout_is_a_refresh_error(self):
        """Timeouts fan out to waiters like any refresh failure."""

        async def slow():
            await asyncio.sleep(1.0)

        strategy = CallableStrategy(
            tag="timeout",
            is_applicable=lambda e: True,
            refresh=timeout_refresh(slow, timeout=0.01),
            apply_updated_values=_noop_apply,
        )
        coordinator = RetryCoordinator(strategy)

        results = await asyncio.gather(
            coordinator.on_failure(RuntimeError("401"), {"url": "/a"}),
            coordinator.on_failure(RuntimeError("401"), {"url": "/b"}),
            return_exceptions=True,
        )

        assert all(isinstance(r, RefreshTimeoutError) for r in results)
        assert isinstance(results[0], RefreshError)
