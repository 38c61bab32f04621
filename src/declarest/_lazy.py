from typing import Any, Awaitable, Callable, Generator, Generic, Optional, TypeVar

T = TypeVar("T")
U = TypeVar("U")


class LazyResponse(Generic[T]):
    """A deferred response computation.

    Nothing runs until the response is consumed, either synchronously with
    :meth:`result` or asynchronously with ``await``. Every consumption runs the
    whole computation again; results are never cached or shared between
    consumers.

    Examples:
        ```python
        response = client.get_user("42")  # no I/O yet
        user = response.result()          # sends the request
        user = await response             # sends it again, asynchronously
        ```
    """

    def __init__(
        self,
        thunk: Callable[[], T],
        async_thunk: Optional[Callable[[], Awaitable[T]]] = None,
    ) -> None:
        self._thunk = thunk
        self._async_thunk = async_thunk

    @classmethod
    def of(cls, value: T) -> "LazyResponse[T]":
        return cls(lambda: value)

    def result(self) -> T:
        return self._thunk()

    async def result_async(self) -> T:
        if self._async_thunk is None:
            return self._thunk()
        return await self._async_thunk()

    def __await__(self) -> Generator[Any, None, T]:
        return self.result_async().__await__()

    def map(self, fn: Callable[[T], U]) -> "LazyResponse[U]":
        """Transform the value once it is produced."""

        async def run_async() -> U:
            return fn(await self.result_async())

        return LazyResponse(lambda: fn(self._thunk()), run_async)

    def tap(self, fn: Callable[[T], Any]) -> "LazyResponse[T]":
        """Run ``fn`` for its side effects and pass the value through unchanged."""

        def observe(value: T) -> T:
            fn(value)
            return value

        return self.map(observe)

    def map_error(
        self, fn: Callable[[Exception], Optional[Exception]]
    ) -> "LazyResponse[T]":
        """Replace errors raised while producing the value.

        ``fn`` receives the error and returns the exception to raise instead;
        returning ``None`` re-raises the original error.
        """

        def translate(error: Exception) -> Exception:
            mapped = fn(error)
            return error if mapped is None else mapped

        def run() -> T:
            try:
                return self._thunk()
            except Exception as e:
                mapped = translate(e)
                if mapped is e:
                    raise
                raise mapped from e

        async def run_async() -> T:
            try:
                return await self.result_async()
            except Exception as e:
                mapped = translate(e)
                if mapped is e:
                    raise
                raise mapped from e

        return LazyResponse(run, run_async)

    def __repr__(self) -> str:
        target = getattr(self._thunk, "__qualname__", None) or repr(self._thunk)
        mode = "sync+async" if self._async_thunk is not None else "sync"
        return f"LazyResponse({target}, {mode})"

