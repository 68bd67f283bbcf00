# example_usage.py

from fluent_http import ClientConfig, HTTPClient


def main():
    # Общая конфигурация: base URL, ретраи, таймаут
    api = HTTPClient(ClientConfig(
        base_url="https://jsonplaceholder.typicode.com",
        timeout=10,
        retries=3,
    ))

    # Каждый запрос - своя производная от общего builder'а
    print("\n=== GET ===")
    response = api.new().path("posts", "1").get()
    print(f"Status: {response.status_code}")
    print(f"Title: {response.as_json()['title']}")

    print("\n=== GET with query ===")
    response = api.new().path("comments").query("postId", "1").get()
    print(f"Comments: {len(response.as_json())}")

    print("\n=== POST ===")
    response = api.new().path("posts").json_struct({
        "title": "Test Post",
        "body": "This is a test",
        "userId": 1
    }).post()
    print(f"Status: {response.status_code}")
    print(f"Created ID: {response.as_json()['id']}")

    api.close()

if __name__ == "__main__":
    main()
