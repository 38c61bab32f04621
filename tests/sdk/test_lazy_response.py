import pytest

from declarest import LazyResponse


class Counter:
    def __init__(self) -> None:
        self.calls = 0

    def __call__(self) -> int:
        self.calls += 1
        return self.calls


class TestLazyResponse:
    def test_nothing_runs_until_consumed(self):
        counter = Counter()

        response = LazyResponse(counter).map(lambda n: n * 10)

        assert counter.calls == 0
        assert response.result() == 10
        assert counter.calls == 1

    def test_each_consumption_runs_again(self):
        counter = Counter()
        response = LazyResponse(counter)

        assert response.result() == 1
        assert response.result() == 2

    def test_tap_passes_value_through(self):
        seen = []

        response = LazyResponse.of({"a": 1}).tap(seen.append)

        assert response.result() == {"a": 1}
        assert seen == [{"a": 1}]

    def test_map_error_replaces_error(self):
        def fail() -> int:
            raise KeyError("missing")

        response = LazyResponse(fail).map_error(lambda e: LookupError(f"mapped {e}"))

        with pytest.raises(LookupError, match="mapped") as exc_info:
            response.result()

        assert isinstance(exc_info.value.__cause__, KeyError)

    def test_map_error_returning_none_reraises(self):
        def fail() -> int:
            raise ValueError("boom")

        seen = []
        response = LazyResponse(fail).map_error(lambda e: seen.append(e))

        with pytest.raises(ValueError, match="boom"):
            response.result()

        assert len(seen) == 1

    @pytest.mark.anyio
    async def test_await_prefers_async_computation(self):
        async def fetch() -> str:
            return "async"

        response = LazyResponse(lambda: "sync", fetch).map(str.upper)

        assert await response == "ASYNC"
        assert response.result() == "SYNC"

    @pytest.mark.anyio
    async def test_await_falls_back_to_sync_computation(self):
        assert await LazyResponse.of(3).map(lambda n: n + 1) == 4

    @pytest.mark.anyio
    async def test_map_error_applies_when_awaited(self):
        async def fail() -> int:
            raise ValueError("boom")

        response = LazyResponse(lambda: 0, fail).map_error(
            lambda e: RuntimeError("mapped")
        )

        with pytest.raises(RuntimeError, match="mapped"):
            await response
