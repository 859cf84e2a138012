import random
import unittest
from unittest.mock import MagicMock, patch

import requests

from litero.core.fetchers import PageFetcher, build_page_url, choose_user_agent, USER_AGENTS
from litero.core.fetchers.base_fetcher import FetchResult

REQUESTS_GET_PATH = "litero.core.fetchers.page_fetcher.requests.get"


def make_response(text="<html></html>", status_code=200, content_type="text/html; charset=utf-8"):
    response = MagicMock()
    response.text = text
    response.status_code = status_code
    response.headers = {"content-type": content_type}
    response.raise_for_status.return_value = None
    return response


class TestBuildPageUrl(unittest.TestCase):

    def test_first_page_is_the_bare_path(self):
        self.assertEqual(build_page_url("www.literotica.com", "/s/x", 1), "https://www.literotica.com/s/x")

    def test_later_pages_add_a_query_parameter(self):
        self.assertEqual(build_page_url("www.literotica.com", "/s/x", 3), "https://www.literotica.com/s/x?page=3")

    def test_existing_query_string_is_extended(self):
        self.assertEqual(
            build_page_url("www.literotica.com", "/stories/showstory.php?id=9", 2),
            "https://www.literotica.com/stories/showstory.php?id=9&page=2",
        )


class TestUserAgents(unittest.TestCase):

    def test_choose_from_default_pool(self):
        self.assertIn(choose_user_agent(), USER_AGENTS)

    def test_choose_is_reproducible_with_a_seeded_rng(self):
        pool = ["a", "b", "c"]
        self.assertEqual(choose_user_agent(pool, random.Random(7)), choose_user_agent(pool, random.Random(7)))


class TestPageFetcher(unittest.TestCase):

    def setUp(self):
        self.fetcher = PageFetcher(user_agent="agent-under-test", timeout=3)

    @patch(REQUESTS_GET_PATH)
    def test_fetch_success(self, mock_get):
        mock_get.return_value = make_response("<p>hello</p>")

        result = self.fetcher.fetch("www.literotica.com", "/s/x", 2, {"Cookie": "enable_classic=1"})

        self.assertIsInstance(result, FetchResult)
        self.assertTrue(result.ok)
        self.assertEqual(result.html, "<p>hello</p>")
        self.assertEqual(result.status_code, 200)
        mock_get.assert_called_once_with(
            "https://www.literotica.com/s/x?page=2",
            headers={"Cookie": "enable_classic=1", "User-Agent": "agent-under-test"},
            timeout=3,
        )

    @patch(REQUESTS_GET_PATH)
    def test_every_request_of_a_run_uses_the_same_agent(self, mock_get):
        mock_get.return_value = make_response()
        fetcher = PageFetcher()

        fetcher.fetch_url("https://www.literotica.com/s/x")
        fetcher.fetch_url("https://www.literotica.com/s/x?page=2")

        agents = {call.kwargs["headers"]["User-Agent"] for call in mock_get.call_args_list}
        self.assertEqual(len(agents), 1)
        self.assertIn(agents.pop(), USER_AGENTS)

    @patch(REQUESTS_GET_PATH)
    def test_http_error_is_returned_not_raised(self, mock_get):
        response = make_response(status_code=404)
        response.raise_for_status.side_effect = requests.exceptions.HTTPError("404 Client Error")
        mock_get.return_value = response

        result = self.fetcher.fetch_url("https://www.literotica.com/s/missing")

        self.assertFalse(result.ok)
        self.assertIsNone(result.html)
        self.assertIn("HTTP error occurred", result.error)

    @patch(REQUESTS_GET_PATH)
    def test_connection_error_is_returned_not_raised(self, mock_get):
        mock_get.side_effect = requests.exceptions.ConnectionError("connection refused")

        result = self.fetcher.fetch_url("https://www.literotica.com/s/x")

        self.assertFalse(result.ok)
        self.assertIn("Request failed", result.error)

    @patch(REQUESTS_GET_PATH)
    def test_non_text_response_is_an_error(self, mock_get):
        mock_get.return_value = make_response(content_type="image/png")

        result = self.fetcher.fetch_url("https://www.literotica.com/s/x")

        self.assertFalse(result.ok)
        self.assertIn("image/png", result.error)

    @patch(REQUESTS_GET_PATH)
    def test_unexpected_error_is_returned_not_raised(self, mock_get):
        mock_get.side_effect = ValueError("boom")

        result = self.fetcher.fetch_url("https://www.literotica.com/s/x")

        self.assertFalse(result.ok)
        self.assertIn("boom", result.error)


if __name__ == '__main__':
    unittest.main()
