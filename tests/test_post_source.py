import json
import unittest

import httpx

from tools.errors import PostFetchError, QuotaExceeded
from tools.post_source import LeetCodePostSource


def _node(i, votes=1):
    return {
        "node": {
            "id": str(1000 - i),
            "title": f"Post {i}",
            "post": {
                "id": 5000 - i,
                "voteCount": votes,
                "creationDate": 1740830400 - i * 60,
                "content": f"Google | L4 | TC 300k ({i})",
            },
        }
    }


class FakeDiscuss:
    """GraphQL endpoint serving `total` posts newest first."""

    def __init__(self, total):
        self.edges = [_node(i) for i in range(total)]
        self.requests = []

    def __call__(self, request):
        body = json.loads(request.content)
        self.requests.append(body["variables"])
        skip = body["variables"]["skip"]
        first = body["variables"]["first"]
        return httpx.Response(
            200,
            json={
                "data": {
                    "categoryTopicList": {
                        "totalNum": len(self.edges),
                        "edges": self.edges[skip : skip + first],
                    }
                }
            },
        )


def _source(handler, page_size=3, max_retries=3):
    sleeps = []
    source = LeetCodePostSource(
        graphql_url="https://leetcode.test/graphql",
        page_size=page_size,
        max_retries=max_retries,
        transport=httpx.MockTransport(handler),
        sleep=sleeps.append,
    )
    return source, sleeps


class TestLeetCodePostSource(unittest.TestCase):
    def test_pages_through_all_posts_newest_first(self):
        discuss = FakeDiscuss(7)
        source, _ = _source(discuss)

        posts = list(source.iter_posts())

        self.assertEqual([p.id for p in posts], [str(1000 - i) for i in range(7)])
        self.assertEqual([r["skip"] for r in discuss.requests], [0, 3, 6])
        self.assertEqual(discuss.requests[0]["categories"], ["compensation"])
        self.assertEqual(discuss.requests[0]["orderBy"], "newest_to_oldest")

    def test_maps_post_fields(self):
        source, _ = _source(FakeDiscuss(1))

        post = next(iter(source.iter_posts()))

        self.assertEqual(post.id, "1000")
        self.assertEqual(post.title, "Post 0")
        self.assertEqual(post.vote_count, 1)
        self.assertEqual(post.timestamp_ms, 1740830400 * 1000)
        self.assertEqual(post.post_date, "2025-03-01")

    def test_stops_before_cursor_post(self):
        discuss = FakeDiscuss(10)
        source, _ = _source(discuss)

        posts = list(source.iter_posts(stop_at_id="996"))

        self.assertEqual([p.id for p in posts], ["1000", "999", "998", "997"])
        self.assertEqual(len(discuss.requests), 2)

    def test_respects_max_posts(self):
        discuss = FakeDiscuss(10)
        source, _ = _source(discuss)

        posts = list(source.iter_posts(max_posts=5))

        self.assertEqual(len(posts), 5)
        self.assertEqual(discuss.requests[-1]["first"], 2)

    def test_is_lazy(self):
        discuss = FakeDiscuss(10)
        source, _ = _source(discuss)

        stream = source.iter_posts()
        self.assertEqual(discuss.requests, [])
        next(stream)
        self.assertEqual(len(discuss.requests), 1)

    def test_rate_limit_raises_quota_exceeded(self):
        source, _ = _source(lambda request: httpx.Response(429))

        with self.assertRaises(QuotaExceeded):
            list(source.iter_posts())

    def test_server_errors_are_retried(self):
        responses = [httpx.Response(502), httpx.Response(503)]
        discuss = FakeDiscuss(2)

        def handler(request):
            if responses:
                return responses.pop(0)
            return discuss(request)

        source, sleeps = _source(handler)

        self.assertEqual(len(list(source.iter_posts())), 2)
        self.assertEqual(sleeps, [1, 2])

    def test_client_error_raises_fetch_error(self):
        source, sleeps = _source(lambda request: httpx.Response(403))

        with self.assertRaises(PostFetchError):
            list(source.iter_posts())
        self.assertEqual(sleeps, [])

    def test_graphql_errors_raise_fetch_error(self):
        source, _ = _source(
            lambda request: httpx.Response(200, json={"errors": [{"message": "boom"}]})
        )

        with self.assertRaises(PostFetchError) as ctx:
            list(source.iter_posts())
        self.assertIn("boom", str(ctx.exception))

    def test_transport_failure_after_retries_raises_fetch_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        source, sleeps = _source(handler, max_retries=2)

        with self.assertRaises(PostFetchError):
            list(source.iter_posts())
        self.assertEqual(sleeps, [1])


if __name__ == "__main__":
    unittest.main()
