"""Ollama HTTP client for test generation."""

import asyncio
import time
from concurrent.futures import ThreadPoolExecutor

import requests
from requests.adapters import HTTPAdapter

from ..code_extractor import extract_code
from ..logger import get_logger
from ..settings import Settings
from .errors import GenerationError, MalformedResponseError, ServerError, TransportError
from .request import GenerationRequest, GenerationResponse, GenerationResult
from .trace import record_error_trace, record_trace

logger = get_logger(__name__)

GENERATE_PATH = "/api/generate"
TAGS_PATH = "/api/tags"


def _is_success(status_code: int) -> bool:
    return 200 <= status_code < 300


class OllamaClient:
    """Client for the Ollama generate and tags endpoints.

    One session (connection pool) and one worker pool are shared by every
    call made through the instance. The async methods run the blocking
    transport on a worker thread and resume on the caller's event loop.
    """

    def __init__(self, session: requests.Session | None = None, max_workers: int = 4):
        """Initialize client.

        Args:
            session: Optional pre-built session (mainly for tests)
            max_workers: Worker threads, also the connection pool size
        """
        self.session = session if session is not None else self._create_session(max_workers)
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="ollama-http",
        )

    @staticmethod
    def _create_session(pool_size: int) -> requests.Session:
        session = requests.Session()
        adapter = HTTPAdapter(pool_connections=pool_size, pool_maxsize=pool_size)
        session.mount("http://", adapter)
        session.mount("https://", adapter)
        return session

    def close(self) -> None:
        """Release the worker pool and the connection pool."""
        self._executor.shutdown(wait=True)
        self.session.close()

    def __enter__(self) -> "OllamaClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    async def generate(self, request: GenerationRequest, settings: Settings) -> GenerationResult:
        """Execute a generation request without blocking the event loop.

        Args:
            request: Request to send
            settings: Settings snapshot (endpoint, timeouts, language)

        Returns:
            Result holding the extracted code

        Raises:
            TransportError: Connection refused, DNS failure or timeout
            ServerError: Non-2xx status or empty body
            MalformedResponseError: Body is not a generation response
        """
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, self.generate_sync, request, settings)

    def generate_sync(self, request: GenerationRequest, settings: Settings) -> GenerationResult:
        """Blocking variant of :meth:`generate`. Single-shot, never retried."""
        logger.info(
            "ollama.generate",
            event="ollama.generate.start",
            endpoint_url=settings.endpoint_url,
            model=request.model,
            prompt_chars=len(request.prompt),
            timeout_s=settings.timeout_seconds,
        )

        start_time = time.time()
        try:
            result = self._execute(request, settings, start_time)
        except GenerationError as e:
            elapsed_ms = int((time.time() - start_time) * 1000)
            trace_file = None
            if settings.trace_dir:
                trace_file = self._safe_trace(record_error_trace, request, e, settings, elapsed_ms)

            logger.error(
                "ollama.generate.error",
                event="ollama.generate.error",
                model=request.model,
                error_type=type(e).__name__,
                error_message=str(e),
                elapsed_ms=elapsed_ms,
                trace_file=trace_file,
            )
            raise

        trace_file = None
        if settings.trace_dir:
            trace_file = self._safe_trace(record_trace, request, result, settings)

        logger.info(
            "ollama.generate.success",
            event="ollama.generate.success",
            model=result.model,
            request_id=result.request_id,
            elapsed_ms=result.elapsed_ms,
            code_chars=len(result.code),
            trace_file=trace_file,
        )
        return result

    def _execute(
        self,
        request: GenerationRequest,
        settings: Settings,
        start_time: float,
    ) -> GenerationResult:
        url = f"{settings.base_url}{GENERATE_PATH}"
        timeout = (settings.connect_timeout_seconds, settings.timeout_seconds)

        try:
            response = self.session.post(
                url,
                json=request.to_payload(),
                headers={"Content-Type": "application/json; charset=utf-8"},
                timeout=timeout,
            )
        except requests.Timeout as e:
            elapsed_ms = int((time.time() - start_time) * 1000)
            raise TransportError(
                f"Request timed out after {elapsed_ms}ms "
                f"(timeout: {settings.timeout_seconds}s)",
                cause=e,
            ) from e
        except requests.RequestException as e:
            raise TransportError(f"Could not reach Ollama at {url}: {e}", cause=e) from e

        elapsed_ms = int((time.time() - start_time) * 1000)
        logger.debug(
            "ollama.generate.response",
            event="ollama.generate.response",
            status_code=response.status_code,
            body_chars=len(response.content or b""),
            duration_ms=elapsed_ms,
        )

        if not _is_success(response.status_code):
            raise ServerError(response.status_code, response.reason or "")
        if not response.content:
            raise ServerError(response.status_code, "Empty response body")

        try:
            data = response.json()
        except ValueError as e:
            raise MalformedResponseError(
                f"Response is not valid JSON: {e}", response.text
            ) from e

        parsed = GenerationResponse.from_payload(data, response.text)
        code = extract_code(parsed.response_text, settings.language)

        return GenerationResult(
            code=code,
            raw_text=parsed.response_text,
            model=parsed.model or request.model,
            elapsed_ms=elapsed_ms,
        )

    @staticmethod
    def _safe_trace(recorder, *args) -> str | None:
        try:
            return str(recorder(*args))
        except OSError as e:
            logger.warning("ollama.trace.failed", error_message=str(e))
            return None

    async def check_availability(self, settings: Settings) -> bool:
        """Probe ``/api/tags`` without blocking the event loop. Never raises."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, self.check_availability_sync, settings)

    def check_availability_sync(self, settings: Settings) -> bool:
        """Return True only when ``/api/tags`` answers with a 2xx status."""
        url = f"{settings.base_url}{TAGS_PATH}"
        timeout = (settings.connect_timeout_seconds, settings.timeout_seconds)

        try:
            response = self.session.get(url, timeout=timeout)
        except requests.RequestException as e:
            logger.warning(
                "ollama.availability",
                event="ollama.availability",
                endpoint_url=settings.endpoint_url,
                available=False,
                error_type=type(e).__name__,
                error_message=str(e),
            )
            return False

        available = _is_success(response.status_code)
        response.close()

        logger.info(
            "ollama.availability",
            event="ollama.availability",
            endpoint_url=settings.endpoint_url,
            available=available,
            status_code=response.status_code,
        )
        return available
