"""
Retry Examples

Only transport errors (refused connection, timeout, DNS) are retried.
HTTP status codes are never inspected: a 500 is a normal response.
"""

import threading

from quickly_http import (
    Client,
    RequestCancelledError,
    RetryConfig,
    TooManyRetriesError,
)


def server_error_is_a_response():
    """5xx is returned, not retried."""
    print("\n=== Server Error ===")

    client = Client(base_url="https://httpbin.org").set_retry_max(3)
    response = client.get("/status/500")

    print(f"Status: {response.status}")
    print(f"Server error: {response.is_server_error()}")


def connection_refused():
    """All attempts fail: TooManyRetriesError with the last error."""
    print("\n=== Connection Refused ===")

    client = Client(base_url="http://127.0.0.1:9", timeout=(1, 1)).set_retry_max(3)

    try:
        client.get("/")
    except TooManyRetriesError as e:
        print(f"Attempts: {e.attempts}")
        print(f"Last error: {type(e.last_error).__name__}")


def retry_with_backoff():
    """Exponential backoff between attempts."""
    print("\n=== Backoff ===")

    client = Client(base_url="http://127.0.0.1:9", timeout=(1, 1)).set_retry(
        RetryConfig(max_attempts=3, backoff_base=0.2, backoff_jitter=False)
    )

    try:
        client.get("/")
    except TooManyRetriesError as e:
        print(f"Failed after {e.attempts} attempts (waited 0.2s, 0.4s)")


def retry_resends_body():
    """The body is re-opened for every attempt."""
    print("\n=== Body On Retry ===")

    client = Client(base_url="https://httpbin.org")
    response = (
        client.r()
        .set_method("POST")
        .set_body_json({"event": "signup"})
        .execute("/post")
    )
    print(f"Echoed body: {response.get_json_path('json')}")


def cancelled_request():
    """A set context cancels every attempt before it is sent."""
    print("\n=== Cancelled ===")

    cancel = threading.Event()
    cancel.set()

    client = Client(base_url="https://httpbin.org").set_retry_max(2)
    try:
        client.r().set_context(cancel).execute("/get")
    except TooManyRetriesError as e:
        print(f"Cancelled: {isinstance(e.last_error, RequestCancelledError)}")


if __name__ == "__main__":
    print("=" * 50)
    print("quickly-http - Retry Examples")
    print("=" * 50)

    try:
        server_error_is_a_response()
        connection_refused()
        retry_with_backoff()
        retry_resends_body()
        cancelled_request()

        print("\n" + "=" * 50)
        print("All examples completed!")
        print("=" * 50)

    except Exception as e:
        print(f"\nError: {e}")
