"""
Basic Client Usage Examples

Demonstrates client defaults, per-request overrides and response views.
"""

import quickly_http
from quickly_http import Client


def basic_get_request():
    """Simple GET request."""
    print("\n=== Basic GET Request ===")

    client = Client(base_url="https://jsonplaceholder.typicode.com")
    response = client.r().execute("/posts/1")

    print(f"Status: {response.status}")
    print(f"Data: {response.to_map()}")


def post_with_json():
    """POST request with JSON body."""
    print("\n=== POST with JSON ===")

    client = Client(base_url="https://jsonplaceholder.typicode.com")

    data = {
        "title": "My Post",
        "body": "This is the content",
        "userId": 1
    }

    response = client.post_json("/posts", data)
    print(f"Status: {response.status_code}")
    print(f"Created: {response.pretty_print()}")


def put_request():
    """PUT request built with the fluent API."""
    print("\n=== PUT Request ===")

    client = Client(base_url="https://jsonplaceholder.typicode.com")

    response = (
        client.r()
        .set_method("PUT")
        .set_body_json({"id": 1, "title": "Updated Title", "userId": 1})
        .execute("/posts/1")
    )
    print(f"Status: {response.status_code}")
    print(f"Title: {response.get_json_path('title')}")


def delete_request():
    """DELETE request."""
    print("\n=== DELETE Request ===")

    client = Client(base_url="https://jsonplaceholder.typicode.com")
    response = client.r().set_method("DELETE").execute("/posts/1")

    print(f"Status: {response.status_code}")
    print("Resource deleted")


def with_query_params():
    """GET request with query parameters."""
    print("\n=== GET with Query Params ===")

    client = Client(base_url="https://jsonplaceholder.typicode.com")
    response = client.get("/posts", params={"userId": "1"})

    posts = response.json()
    print(f"Found {len(posts)} posts for user 1")


def with_client_defaults():
    """Headers and cookies set on the client go into every request."""
    print("\n=== Client Defaults ===")

    client = (
        Client(base_url="https://httpbin.org")
        .set_header("X-Custom-Header", "MyValue")
        .set_cookie("theme=dark; lang=en")
    )

    # Request gets its own copy of the defaults
    response = client.r().add_header("X-Custom-Header", "Extra").execute("/headers")
    print(f"Headers sent: {response.get_json_path('headers')}")


def with_timeout():
    """Request with custom timeout."""
    print("\n=== Custom Timeout ===")

    client = Client(base_url="https://httpbin.org").set_timeout((3, 5))

    response = client.get("/delay/2")  # Server delays 2 seconds
    print(f"Status: {response.status_code}")
    print("Request completed within timeout")


def module_shortcuts():
    """One-off requests without a client."""
    print("\n=== Module Shortcuts ===")

    response = quickly_http.get("https://httpbin.org/get", params={"q": "1"})
    print(f"Args: {response.get_json_path('args')}")


def context_manager():
    """Using client as context manager."""
    print("\n=== Context Manager ===")

    with Client(base_url="https://jsonplaceholder.typicode.com") as client:
        response = client.get("/posts/1")
        print(f"Status: {response.status_code}")
        print(f"Data: {response.to_map()}")
    # Sessions automatically closed


if __name__ == "__main__":
    print("=" * 50)
    print("quickly-http - Basic Usage Examples")
    print("=" * 50)

    try:
        basic_get_request()
        post_with_json()
        put_request()
        delete_request()
        with_query_params()
        with_client_defaults()
        with_timeout()
        module_shortcuts()
        context_manager()

        print("\n" + "=" * 50)
        print("All examples completed successfully!")
        print("=" * 50)

    except Exception as e:
        print(f"\nError: {e}")
