"""Exponential backoff for calls to a pattern store.

Nothing in the timing engine uses this module. It is for the thin client that
syncs patterns and progress with a backing store, where timeouts, rate limits
and 5xx responses are worth retrying and everything else is not.

Example:
	```python
	import rhythmcore.retry

	async def push () -> None:
		response = await client.put(pattern)
		if response.status >= 400:
			raise rhythmcore.retry.SyncError(response.status, "Sync failed")

	await rhythmcore.retry.with_retry(push)
	```
"""

import asyncio
import dataclasses
import logging
import typing

logger = logging.getLogger(__name__)

T = typing.TypeVar("T")


class SyncError (Exception):

	"""A failed store request. ``status`` is the HTTP status, if there was one."""

	def __init__ (self, status: typing.Optional[int], message: str = "") -> None:

		super().__init__(message or f"Request failed with status {status}")
		self.status = status


class RetryableError (Exception):

	"""A transient failure with no status (connection reset, network down)."""


@dataclasses.dataclass(frozen=True)
class RetryPolicy:

	"""
	Parameters:
		max_retries: Attempts after the first one.
		initial_delay: Seconds to wait before the first retry.
		max_delay: Cap on the wait between attempts.
		multiplier: Growth of the wait after each retry.
		retryable_statuses: Status codes worth retrying.
	"""

	max_retries: int = 3
	initial_delay: float = 1.0
	max_delay: float = 10.0
	multiplier: float = 2.0
	retryable_statuses: typing.FrozenSet[int] = frozenset({408, 429, 500, 502, 503, 504})

	def __post_init__ (self) -> None:

		if self.max_retries < 0:
			raise ValueError("max_retries must not be negative")

		if self.initial_delay < 0 or self.max_delay < 0:
			raise ValueError("Delays must not be negative")

	def is_retryable (self, error: BaseException) -> bool:

		if isinstance(error, RetryableError):
			return True

		if isinstance(error, SyncError):
			return error.status in self.retryable_statuses

		return False

	def delays (self) -> typing.Iterator[float]:

		"""The successive waits between attempts."""

		delay = self.initial_delay

		for _ in range(self.max_retries):
			yield delay
			delay = min(delay * self.multiplier, self.max_delay)


DEFAULT_POLICY = RetryPolicy()


async def with_retry (
	fn: typing.Callable[[], typing.Awaitable[T]],
	policy: RetryPolicy = DEFAULT_POLICY,
	sleep: typing.Callable[[float], typing.Awaitable[typing.Any]] = asyncio.sleep
) -> T:

	"""
	Await ``fn()`` until it succeeds, retrying transient failures.

	Errors the policy does not consider retryable are raised at once. When the
	retries run out the last error is raised.
	"""

	delays = policy.delays()
	attempt = 0

	while True:

		attempt += 1

		try:
			return await fn()

		except (SyncError, RetryableError) as error:

			if not policy.is_retryable(error):
				raise

			delay = next(delays, None)

			if delay is None:
				logger.error(f"Giving up after {attempt} attempts: {error}")
				raise

			logger.warning(f"Attempt {attempt} failed ({error}), retrying in {delay:.1f}s")
			await sleep(delay)
