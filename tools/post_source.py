"""
Post Source — pages through LeetCode Discuss compensation posts, newest first.
Uses the public GraphQL endpoint with httpx, retrying transient failures.
"""

import time
from typing import Callable, Iterator, Optional

import httpx
from pydantic import ValidationError

from models.post import Post
from tools.errors import PostFetchError, QuotaExceeded


CATEGORY_TOPIC_QUERY = """
query categoryTopicList($categories: [String!]!, $first: Int!, $orderBy: TopicSortingOption, $skip: Int, $query: String, $tags: [String!]) {
  categoryTopicList(categories: $categories, orderBy: $orderBy, skip: $skip, query: $query, first: $first, tags: $tags) {
    totalNum
    edges {
      node {
        id
        title
        post {
          id
          voteCount
          creationDate
          content
        }
      }
    }
  }
}
"""

DEFAULT_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/120.0.0.0 Safari/537.36"
    ),
    "Accept": "application/json",
    "Content-Type": "application/json",
    "Referer": "https://leetcode.com/discuss/compensation",
}


def parse_topic_node(node: dict) -> Post:
    """Convert one `categoryTopicList` edge node into a Post."""
    post = node.get("post") or {}
    return Post(
        id=node["id"],
        title=node.get("title") or "",
        content=post.get("content") or "",
        vote_count=post.get("voteCount") or 0,
        creation_date=post["creationDate"],
    )


class LeetCodePostSource:
    """Lazy, newest-first sequence of compensation posts."""

    def __init__(
        self,
        graphql_url: str = "https://leetcode.com/graphql",
        category: str = "compensation",
        page_size: int = 50,
        timeout: int = 30,
        max_retries: int = 3,
        transport: httpx.BaseTransport = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.graphql_url = graphql_url
        self.category = category
        self.page_size = page_size
        self.timeout = timeout
        self.max_retries = max(1, max_retries)
        self.transport = transport
        self.sleep = sleep

    def iter_posts(self, stop_at_id: Optional[str] = None, max_posts: int = 2000) -> Iterator[Post]:
        """
        Yield posts newest first.

        Stops before the post whose id equals `stop_at_id`, after `max_posts`
        posts, or when the source runs out of posts.

        Raises:
            QuotaExceeded: If the source rate-limits us (HTTP 429).
            PostFetchError: On any other pagination failure.
        """
        if max_posts <= 0:
            return

        skip = 0
        yielded = 0

        with httpx.Client(
            timeout=self.timeout,
            headers=DEFAULT_HEADERS,
            follow_redirects=True,
            transport=self.transport,
        ) as client:
            while True:
                first = min(self.page_size, max_posts - yielded)
                topic_list = self._fetch_page(client, skip, first)
                edges = topic_list.get("edges") or []
                if not edges:
                    return

                print(f"[PostSource] Skip {skip}: fetched {len(edges)} posts")

                for edge in edges:
                    try:
                        post = parse_topic_node(edge["node"])
                    except (KeyError, TypeError, ValidationError) as e:
                        raise PostFetchError(f"Malformed post in response: {e}") from e

                    if stop_at_id is not None and post.id == stop_at_id:
                        print(f"[PostSource] Reached last ingested post {stop_at_id}")
                        return

                    yield post
                    yielded += 1
                    if yielded >= max_posts:
                        print(f"[PostSource] Reached max posts ({max_posts})")
                        return

                skip += len(edges)
                total = topic_list.get("totalNum")
                if total is not None and skip >= total:
                    return

    def _fetch_page(self, client: httpx.Client, skip: int, first: int) -> dict:
        payload = {
            "operationName": "categoryTopicList",
            "query": CATEGORY_TOPIC_QUERY,
            "variables": {
                "categories": [self.category],
                "first": first,
                "orderBy": "newest_to_oldest",
                "skip": skip,
                "query": "",
                "tags": [],
            },
        }

        for attempt in range(self.max_retries):
            last_attempt = attempt == self.max_retries - 1
            try:
                resp = client.post(self.graphql_url, json=payload)
            except httpx.TimeoutException as e:
                if not last_attempt:
                    self.sleep(2 ** attempt)
                    continue
                raise PostFetchError(f"Timeout after {self.timeout}s fetching posts") from e
            except httpx.HTTPError as e:
                if not last_attempt:
                    self.sleep(2 ** attempt)
                    continue
                raise PostFetchError(f"HTTP error fetching posts: {e}") from e

            if resp.status_code == 429:
                raise QuotaExceeded("Post source rate limit reached (HTTP 429)")

            if resp.status_code >= 500 and not last_attempt:
                self.sleep(2 ** attempt)
                continue

            if resp.status_code != 200:
                raise PostFetchError(f"Post source returned HTTP {resp.status_code}")

            try:
                body = resp.json()
            except ValueError as e:
                raise PostFetchError(f"Invalid JSON from post source: {e}") from e

            if body.get("errors"):
                messages = "; ".join(err.get("message", "") for err in body["errors"])
                raise PostFetchError(f"GraphQL errors: {messages}")

            topic_list = (body.get("data") or {}).get("categoryTopicList")
            if topic_list is None:
                raise PostFetchError("Response has no categoryTopicList")
            return topic_list

        raise PostFetchError(f"All {self.max_retries} retries exhausted fetching posts")
