"""
Environment Configuration Examples.

Demonstrates loading configuration from .env files, environment
variables and YAML/JSON config files.
"""

import json
import os
import tempfile

from quickly_http import Client, ConfigFileLoader, load_from_env


def example_1_load_from_env_file():
    """Example 1: Load from .env file."""
    print("\n" + "="*60)
    print("EXAMPLE 1: Load from .env")
    print("="*60 + "\n")

    with tempfile.TemporaryDirectory() as tmp:
        env_file = os.path.join(tmp, ".env")
        with open(env_file, 'w') as f:
            f.write("QUICKLY_HTTP_BASE_URL=https://httpbin.org\n")
            f.write("QUICKLY_HTTP_RETRY_MAX_ATTEMPTS=3\n")
            f.write("QUICKLY_HTTP_LOG_LEVEL=INFO\n")
            f.write("QUICKLY_HTTP_LOG_FORMAT=colored\n")

        config = load_from_env(env_file=env_file)

    print(f"Base URL:  {config.base_url}")
    print(f"Retry max: {config.retry.max_attempts}")
    print(f"Log level: {config.logging.level.value}")

    with Client(config=config) as client:
        print(f"Status: {client.get('/get').status_code}")


def example_2_environment_variables():
    """Example 2: Environment variables override .env."""
    print("\n" + "="*60)
    print("EXAMPLE 2: Environment variables")
    print("="*60 + "\n")

    os.environ["QUICKLY_HTTP_BASE_URL"] = "https://jsonplaceholder.typicode.com"
    os.environ["QUICKLY_HTTP_HEADERS"] = json.dumps({"Accept": "application/json"})
    try:
        config = load_from_env(retry_max_attempts=2)
    finally:
        del os.environ["QUICKLY_HTTP_BASE_URL"]
        del os.environ["QUICKLY_HTTP_HEADERS"]

    print(f"Base URL: {config.base_url}")
    print(f"Headers:  {dict(config.headers)}")
    print(f"Retry (override): {config.retry.max_attempts}")


def example_3_yaml_file():
    """Example 3: YAML config file."""
    print("\n" + "="*60)
    print("EXAMPLE 3: YAML config")
    print("="*60 + "\n")

    yaml_config = (
        "quickly_http:\n"
        "  base_url: https://httpbin.org\n"
        "  timeout:\n"
        "    connect: 3\n"
        "    read: 10\n"
        "  retry:\n"
        "    max_attempts: 4\n"
        "  logging:\n"
        "    level: WARNING\n"
    )

    with tempfile.TemporaryDirectory() as tmp:
        path = os.path.join(tmp, "quickly_http.yaml")
        with open(path, 'w') as f:
            f.write(yaml_config)

        config = ConfigFileLoader.from_file(path)

    print(f"Timeout: {config.timeout.as_tuple()}")
    print(f"Retry max: {config.retry.max_attempts}")


if __name__ == "__main__":
    example_1_load_from_env_file()
    example_2_environment_variables()
    example_3_yaml_file()
