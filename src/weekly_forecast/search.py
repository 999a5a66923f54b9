"""Debounced city search.

`SearchController` turns a stream of input changes into settled search
requests. `SearchSession` runs those requests through the weather service
and publishes updates, dropping results of searches that a newer one has
superseded.
"""

import asyncio
import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Optional, Set

from weekly_forecast.config import DEBOUNCE_SECONDS, DEFAULT_CITY, DEFAULT_LOCALE
from weekly_forecast.weather.exceptions import WeatherError
from weekly_forecast.weather.models import SearchUpdate
from weekly_forecast.weather.service import WeatherService

logger = logging.getLogger(__name__)

ERROR_MESSAGES = {
    "en": "Unable to fetch weather data, please check the city name or try again later",
    "zh": "无法获取天气数据，请检查城市名称或稍后重试",
}


class SearchState(str, Enum):
    IDLE = "idle"
    PENDING = "pending"


class SearchController:
    """Trailing-edge debounce between input changes and searches.

    The visible value follows every input change immediately; `on_search`
    is called with the value once no change has arrived for
    `debounce_seconds`. Must be used from a running event loop.
    """

    def __init__(
        self,
        on_search: Callable[[str], Any],
        value: str = "",
        debounce_seconds: float = DEBOUNCE_SECONDS
    ):
        self._on_search = on_search
        self._value = value
        self._external_value = value
        self.debounce_seconds = debounce_seconds
        self._timer: Optional[asyncio.TimerHandle] = None
        self._closed = False

    @property
    def value(self) -> str:
        """Current visible text."""
        return self._value

    @property
    def state(self) -> SearchState:
        return SearchState.PENDING if self._timer is not None else SearchState.IDLE

    @property
    def closed(self) -> bool:
        return self._closed

    def on_input(self, value: str) -> None:
        """Record an input change and restart the debounce window."""
        if self._closed:
            raise RuntimeError("SearchController is closed")

        self._value = value
        self._cancel_timer()
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(self.debounce_seconds, self._dispatch)
        logger.debug(f"Input changed to '{value}', search in {self.debounce_seconds}s")

    def sync_value(self, value: str) -> None:
        """Adopt an externally supplied value without searching.

        Only a change of the external value has an effect; a pending
        debounce is dropped so the typed text cannot overwrite it.
        """
        if value == self._external_value:
            return

        self._external_value = value
        self._cancel_timer()
        self._value = value

    def close(self) -> None:
        """Cancel any pending search and reject further input."""
        self._cancel_timer()
        self._closed = True

    def _dispatch(self) -> None:
        self._timer = None
        logger.info(f"Input settled, searching for '{self._value}'")
        self._on_search(self._value)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None


class SearchSession:
    """Runs debounced searches for one client and publishes their results."""

    def __init__(
        self,
        service: WeatherService,
        publish: Callable[[SearchUpdate], Awaitable[None]],
        initial_city: str = DEFAULT_CITY,
        locale: str = DEFAULT_LOCALE,
        debounce_seconds: float = DEBOUNCE_SECONDS
    ):
        """Initialize the search session.

        Args:
            service: Weather service used for every search
            publish: Coroutine function receiving each update
            initial_city: Value shown before the first keystroke
            locale: Output locale for descriptions and error messages
            debounce_seconds: Debounce window for input changes
        """
        self.service = service
        self.publish = publish
        self.locale = locale
        self.controller = SearchController(
            on_search=self.search,
            value=initial_city,
            debounce_seconds=debounce_seconds
        )
        self._sequence = 0
        self._tasks: Set[asyncio.Task] = set()

    @property
    def sequence(self) -> int:
        """Sequence number of the latest search."""
        return self._sequence

    def on_input(self, value: str) -> None:
        self.controller.on_input(value)

    def reset(self, city: str) -> asyncio.Task:
        """Replace the city from outside and search for it immediately."""
        return self.search(city)

    def search(self, city: str) -> asyncio.Task:
        """Start a search for a city, superseding any search in flight.

        Returns:
            Task running the search
        """
        self._sequence += 1
        self.controller.sync_value(city)

        task = asyncio.get_running_loop().create_task(self._run(self._sequence, city))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _run(self, sequence: int, city: str) -> None:
        await self._publish(SearchUpdate(type="loading", sequence=sequence, city=city))

        try:
            forecast = await self.service.get_weekly_forecast(city, self.locale)
            update = SearchUpdate(type="forecast", sequence=sequence, city=city, days=forecast.days)
        except WeatherError as e:
            logger.error(f"Search #{sequence} for '{city}' failed: {e}")
            update = self._error_update(sequence, city)
        except Exception:
            logger.exception(f"Unexpected error in search #{sequence} for '{city}'")
            update = self._error_update(sequence, city)

        if sequence != self._sequence:
            logger.info(f"Discarding result of search #{sequence} for '{city}', superseded by #{self._sequence}")
            return

        await self._publish(update)

    async def _publish(self, update: SearchUpdate) -> None:
        try:
            await self.publish(update)
        except Exception:
            logger.exception(f"Failed to publish {update.type} update for search #{update.sequence}")

    def _error_update(self, sequence: int, city: str) -> SearchUpdate:
        message = ERROR_MESSAGES.get(self.locale, ERROR_MESSAGES["en"])
        return SearchUpdate(type="error", sequence=sequence, city=city, days=[], message=message)

    async def aclose(self) -> None:
        """Stop the controller and cancel searches still in flight."""
        self.controller.close()

        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
