"""
Executor: assemble once, transform once, dispatch up to ``retry_max`` times.

Status codes are never inspected: the first attempt that yields a response
wins, 4xx/5xx included. Only TransportError triggers another attempt.
"""

import time
import uuid
from typing import Optional, TYPE_CHECKING

from .assembler import WireRequest, assemble
from .exceptions import HTTPClientException, TooManyRetriesError, TransportError
from .logging.filters import clear_correlation_id, set_correlation_id
from .response import Response
from .retry_engine import RetryEngine
from ..utils.sanitizer import mask_headers

if TYPE_CHECKING:
    from .http_client import Client
    from .request import Request


def _log_request(logger, request: 'Request', wire: WireRequest) -> None:
    """Dump the wire request with the descriptor's parameters."""
    logger.info(
        "Performing request",
        method=wire.method,
        url=wire.url,
        headers=mask_headers(wire.headers),
        cookies=[f"{c.name}={c.value}" for c in wire.cookies],
        query_params=dict(request.query_params),
        form_params={k: list(v) for k, v in request.form_params.items()},
        body=request.body,
    )


def _log_response(logger, response: Response) -> None:
    logger.info(
        "Received response",
        status_code=response.status_code,
        status=response.status,
        headers=mask_headers(response.headers),
        cookies=[f"{c.name}={c.value}" for c in response.cookies],
        body=response.text(),
    )


class Executor:
    """
    Bounded-retry loop over the client's transport.

    Attempts are strictly sequential. The cancellation context is not
    checked between attempts; the transport decides what a cancelled
    context means for each attempt.

    Example:
        >>> response = Executor(client).execute(request)
        >>> response.is_success()
    """

    def __init__(self, client: 'Client'):
        self.client = client

    def execute(self, request: 'Request') -> Response:
        """
        Execute the request.

        Returns:
            Response of the first attempt that produced one

        Raises:
            ConfigurationError: Request could not be assembled
            TooManyRetriesError: Every attempt failed in the transport
            InvalidURLError: Transport rejected the URL (not retried)
        """
        client = self.client
        logger = client.logger()
        correlation_id = str(uuid.uuid4())
        set_correlation_id(correlation_id)

        try:
            try:
                wire = assemble(request)
            except HTTPClientException as e:
                logger.error(
                    "Failed to build HTTP request",
                    error=str(e),
                    error_type=type(e).__name__,
                )
                raise

            if client.request_hook is not None:
                wire = client.request_hook(wire)
            request.wire = wire

            engine = RetryEngine(client.retry)
            last_error: Optional[Exception] = None
            start_time = time.time()

            for attempt in range(engine.max_attempts):
                if attempt:
                    engine.wait(attempt)
                    wire.reopen_body()

                try:
                    raw = client.transport.send(wire)
                except TransportError as e:
                    last_error = e
                    logger.warning(
                        "Request failed",
                        method=wire.method,
                        url=wire.url,
                        error=str(e),
                        error_type=type(e).__name__,
                        attempt=attempt + 1,
                        max_attempts=engine.max_attempts,
                    )
                    if client.debug:
                        _log_request(logger, request, wire)
                    if not engine.should_retry(e, attempt):
                        break
                    continue
                except HTTPClientException as e:
                    logger.error(
                        "Request failed",
                        method=wire.method,
                        url=wire.url,
                        error=str(e),
                        error_type=type(e).__name__,
                        attempt=attempt + 1,
                    )
                    raise

                if raw is None:
                    continue

                response = Response(
                    raw,
                    request=request,
                    json_unmarshal=client.json_unmarshal,
                    xml_unmarshal=client.xml_unmarshal,
                )
                if client.debug:
                    _log_request(logger, request, wire)
                    _log_response(logger, response)
                    logger.debug(
                        "Request completed",
                        attempt=attempt + 1,
                        duration_ms=round((time.time() - start_time) * 1000, 2),
                    )
                return response

            logger.error(
                "Request failed after all attempts",
                method=wire.method,
                url=wire.url,
                max_attempts=engine.max_attempts,
            )
            raise TooManyRetriesError(
                attempts=attempt + 1,
                last_error=last_error,
                url=wire.url,
            ) from last_error
        finally:
            clear_correlation_id()
