"""
Basic fluent-http usage.

Demonstrates chained GET, POST, PUT, DELETE requests and body extraction.
"""

from dataclasses import dataclass

import fluent_http
from fluent_http import ClientConfig, HTTPClient

BASE_URL = "https://jsonplaceholder.typicode.com"


@dataclass
class Post:
    userId: int
    id: int
    title: str
    body: str


def basic_get_request():
    """Simple GET request, decoded into a dataclass."""
    print("\n=== Basic GET Request ===")

    response = HTTPClient(ClientConfig()).url(BASE_URL).path("posts", "1").get()

    print(f"Status: {response.status_code}")
    print(f"Post: {response.as_json(Post)}")


def post_with_json():
    """POST request with JSON body."""
    print("\n=== POST with JSON ===")

    response = (
        HTTPClient(ClientConfig(base_url=BASE_URL))
        .path("posts")
        .json_struct({"title": "My Post", "body": "This is the content", "userId": 1})
        .post()
    )
    print(f"Status: {response.status_code}")
    print(f"Created: {response.as_json()}")


def put_request():
    """PUT request with a literal JSON body."""
    print("\n=== PUT Request ===")

    response = (
        HTTPClient(ClientConfig(base_url=BASE_URL))
        .path("posts/1")
        .json('{"id": 1, "title": "Updated Title", "body": "Updated content", "userId": 1}')
        .put()
    )
    print(f"Status: {response.status_code}")
    print(f"Updated: {response.as_string()}")


def delete_request():
    """DELETE request."""
    print("\n=== DELETE Request ===")

    response = HTTPClient(ClientConfig(base_url=BASE_URL)).path("posts", "1").delete()
    print(f"Status: {response.status_code}")


def shortcuts():
    """Package-level shortcuts share one process-wide builder."""
    print("\n=== Shortcuts ===")

    response = fluent_http.get(f"{BASE_URL}/users/1")
    print(f"User: {response.as_json()['name']}")


def upload_files():
    """multipart/form-data upload."""
    print("\n=== Multipart upload ===")

    response = (
        HTTPClient(ClientConfig())
        .url("https://httpbin.org/post")
        .file(b"first file", "a.txt", "field")
        .file(b"second file", "b.txt", "field2")
        .post()
    )
    print(f"Files received: {list(response.as_json()['files'])}")


if __name__ == "__main__":
    basic_get_request()
    post_with_json()
    put_request()
    delete_request()
    shortcuts()
    upload_files()
