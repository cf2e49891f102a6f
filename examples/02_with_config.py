"""
Configuration Examples

Demonstrates ClientConfig with timeouts, retries, auth and logging.
"""

from quickly_http import (
    Client,
    ClientConfig,
    LoggingConfig,
    RetryConfig,
    TimeoutConfig,
)


def basic_config():
    """Using ClientConfig.create() for simple setup."""
    print("\n=== Basic Config ===")

    config = ClientConfig.create(
        base_url="https://jsonplaceholder.typicode.com",
        timeout=10,
        retry_max=3,
    )

    client = Client(config=config)
    response = client.get("/posts/1")

    print(f"Status: {response.status_code}")
    print(f"Config timeout: {config.timeout.as_tuple()}")


def custom_timeout_config():
    """Custom timeout configuration."""
    print("\n=== Custom Timeout Config ===")

    timeout_cfg = TimeoutConfig(
        connect=5.0,    # 5 seconds to connect
        read=10.0,      # 10 seconds to read response
    )

    config = ClientConfig(
        base_url="https://httpbin.org",
        timeout=timeout_cfg
    )

    client = Client(config=config)
    response = client.get("/delay/2")

    print(f"Status: {response.status_code}")


def shared_defaults():
    """One config, several clients: defaults are copied, not shared."""
    print("\n=== Shared Defaults ===")

    config = ClientConfig(
        base_url="https://httpbin.org",
        headers={"Accept": "application/json"},
        cookies="session=demo",
        query_params={"source": "example"},
    )

    first = Client(config=config)
    second = Client(config=config).set_header("Accept", "text/html")

    print(f"First client Accept: {first.get_header('Accept')}")
    print(f"Second client Accept: {second.get_header('Accept')}")


def auth_config():
    """Basic auth and token auth."""
    print("\n=== Auth ===")

    # Basic auth wins over the token when both are set
    config = ClientConfig(
        base_url="https://httpbin.org",
        basic_auth=("user", "passwd"),
        auth_token="ignored-token",
    )

    client = Client(config=config)
    response = client.get("/basic-auth/user/passwd")
    print(f"Basic auth status: {response.status_code}")

    token_client = Client("https://httpbin.org").set_auth_token("demo-token")
    response = token_client.get("/bearer")
    print(f"Bearer status: {response.status_code}")


def retry_config():
    """Retry with exponential backoff."""
    print("\n=== Retry Config ===")

    config = ClientConfig(
        base_url="https://httpbin.org",
        retry=RetryConfig(
            max_attempts=4,
            backoff_base=0.5,
            backoff_max=5.0,
        ),
    )

    client = Client(config=config)
    print(f"Retry max: {client.retry_max}")


def logging_config():
    """JSON logs with debug dumps."""
    print("\n=== Logging Config ===")

    config = ClientConfig(
        base_url="https://httpbin.org",
        debug=True,
        logging=LoggingConfig.create(level="INFO", format="json"),
    )

    with Client(config=config) as client:
        # Request and response dumps go to stderr; Authorization is masked
        client.set_auth_token("secret-token").get("/get")


if __name__ == "__main__":
    print("=" * 50)
    print("quickly-http - Configuration Examples")
    print("=" * 50)

    try:
        basic_config()
        custom_timeout_config()
        shared_defaults()
        auth_config()
        retry_config()
        logging_config()

        print("\n" + "=" * 50)
        print("All examples completed!")
        print("=" * 50)

    except Exception as e:
        print(f"\nError: {e}")
