import logging
import typing


logger = logging.getLogger(__name__)

CallbackType = typing.Callable[..., typing.Any]


class EventEmitter:

	"""
	Named-event listener registry used by practice sessions.

	Listeners run synchronously in registration order. A listener may
	unregister itself while the event is being emitted.

	Example:
		```python
		emitter = EventEmitter()
		emitter.on("hit", lambda hit: print(hit.error_ms))
		emitter.emit("hit", hit)
		```
	"""

	def __init__ (self) -> None:

		self._listeners: typing.Dict[str, typing.List[CallbackType]] = {}

	def on (self, event_name: str, callback: CallbackType) -> None:

		"""Register a callback for an event name."""

		self._listeners.setdefault(event_name, []).append(callback)

	def off (self, event_name: str, callback: CallbackType) -> None:

		"""
		Unregister a previously registered callback.

		Raises ``ValueError`` if the callback is not registered for the event.
		"""

		if callback not in self._listeners.get(event_name, []):
			raise ValueError(f"Callback not registered for event {event_name!r}")

		self._listeners[event_name].remove(callback)

	def listener_count (self, event_name: str) -> int:
		return len(self._listeners.get(event_name, []))

	def clear (self) -> None:
		self._listeners.clear()

	def emit (self, event_name: str, *args: typing.Any, **kwargs: typing.Any) -> int:

		"""
		Call every listener of ``event_name`` and return how many ran.
		"""

		listeners = list(self._listeners.get(event_name, []))

		for callback in listeners:
			callback(*args, **kwargs)

		if listeners:
			logger.debug(f"Emitted {event_name!r} to {len(listeners)} listener(s)")

		return len(listeners)
