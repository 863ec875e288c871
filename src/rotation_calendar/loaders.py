"""Resource loading for the schedule data files.

The generator only needs text by name; where it comes from is up to the
loader. FileResourceLoader reads a local data directory, HttpResourceLoader
fetches from a base URL (the data files are normally published next to the
web page that builds the calendar).
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

import requests
from pydantic import ValidationError
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
)

from rotation_calendar.config import CalendarConfig
from rotation_calendar.errors import InvalidResource, MissingResource, TransientError
from rotation_calendar.logging import get_logger
from rotation_calendar.models import LessonPrompts, RotationTemplate, TimeTable

logger = get_logger(__name__)


class ResourceLoader(Protocol):
    """Anything that can return the text content of a named resource."""

    def load(self, name: str) -> str:
        """Return the resource's text, or raise MissingResource."""
        ...


class FileResourceLoader:
    """Reads resources from a local directory as UTF-8 text."""

    def __init__(self, base_dir: str | Path) -> None:
        self.base_dir = Path(base_dir)

    def load(self, name: str) -> str:
        path = self.base_dir / name
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.error("resource_missing", path=str(path))
            raise MissingResource(name, f"no such file {path}") from None
        except (OSError, UnicodeDecodeError) as e:
            logger.error("resource_unreadable", path=str(path), error=str(e))
            raise MissingResource(name, str(e)) from e

        logger.info("resource_loaded", source="file", path=str(path), bytes=len(text))
        return text


class HttpResourceLoader:
    """Fetches resources relative to a base URL with one blocking GET each.

    Transient failures (timeouts, dropped connections, 5xx) are retried up to
    ``attempts`` times; everything else fails immediately.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        attempts: int = 1,
        retry_wait: float = 2.0,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.attempts = attempts
        self.retry_wait = retry_wait
        self.session = session or requests.Session()

    def _fetch(self, url: str) -> str:
        """Single GET, classifying failures for the retry policy.

        Raises:
            TransientError: Network trouble or a 5xx response.
            MissingResource: Any other non-200 response.
        """
        try:
            resp = self.session.get(url, timeout=self.timeout)
        except (requests.Timeout, requests.ConnectionError) as e:
            logger.warning("resource_fetch_failed", url=url, error=str(e))
            raise TransientError(f"Fetching {url} failed: {e}") from e

        if resp.status_code >= 500:
            logger.warning("resource_fetch_failed", url=url, status=resp.status_code)
            raise TransientError(f"Fetching {url} failed: HTTP {resp.status_code}")
        if resp.status_code != 200:
            logger.error("resource_missing", url=url, status=resp.status_code)
            raise MissingResource(url, f"HTTP {resp.status_code}")

        resp.encoding = "utf-8"
        return resp.text

    def load(self, name: str) -> str:
        url = f"{self.base_url}/{name}"
        fetch = retry(
            stop=stop_after_attempt(self.attempts),
            wait=wait_fixed(self.retry_wait),
            retry=retry_if_exception_type(TransientError),
            reraise=True,
        )(self._fetch)
        try:
            text = fetch(url)
        except TransientError as e:
            raise MissingResource(name, str(e)) from e

        logger.info("resource_loaded", source="http", url=url, bytes=len(text))
        return text


def loader_for(source: str, timeout: float = 10.0, attempts: int = 1) -> ResourceLoader:
    """Pick an HTTP loader for http(s) URLs and a file loader for anything else."""
    if source.startswith(("http://", "https://")):
        return HttpResourceLoader(source, timeout=timeout, attempts=attempts)
    return FileResourceLoader(source)


@dataclass(frozen=True)
class ScheduleInputs:
    """Everything the generator reads before asking for lesson choices."""

    calendar_csv: str
    template: RotationTemplate
    timetable: TimeTable
    prompts: LessonPrompts


def _parse_json(name: str, text: str, model):
    try:
        return model.model_validate(json.loads(text))
    except json.JSONDecodeError as e:
        raise InvalidResource(name, f"not valid JSON ({e})") from e
    except ValidationError as e:
        raise InvalidResource(name, str(e)) from e


def load_inputs(loader: ResourceLoader, config: CalendarConfig) -> ScheduleInputs:
    """Load and parse all four schedule resources.

    Raises:
        MissingResource: If any resource can't be obtained.
        InvalidResource: If a JSON resource doesn't match its schema.
    """
    calendar_csv = loader.load(config.calendar_file)
    template = _parse_json(
        config.rotation_file, loader.load(config.rotation_file), RotationTemplate
    )
    timetable = _parse_json(config.times_file, loader.load(config.times_file), TimeTable)
    prompts = _parse_json(
        config.lessons_file, loader.load(config.lessons_file), LessonPrompts
    )
    return ScheduleInputs(
        calendar_csv=calendar_csv,
        template=template,
        timetable=timetable,
        prompts=prompts,
    )
