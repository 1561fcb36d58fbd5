import unittest
from unittest import mock

import requests

from client.network.client import NetworkClient


def response(status=200, text="{}", payload=None):
    r = mock.Mock()
    r.status_code = status
    r.text = text
    r.json.return_value = payload
    return r


@mock.patch("client.network.client.time.sleep")
@mock.patch("client.network.client.requests.request")
class TestNetworkClient(unittest.TestCase):
    def test_get_text(self, request, sleep):
        request.return_value = response(text='{"layout": "odd-r"}')
        client = NetworkClient("http://localhost:5000/")
        self.assertEqual(client.get_text_with_retry("/api/layouts/x"), '{"layout": "odd-r"}')
        request.assert_called_once_with("GET", "http://localhost:5000/api/layouts/x", timeout=5.0)
        sleep.assert_not_called()

    def test_absolute_url(self, request, sleep):
        request.return_value = response(payload={"a": ["b"]})
        client = NetworkClient("http://localhost:5000")
        self.assertEqual(client.get_json_with_retry("https://example.test/codes.json"), {"a": ["b"]})
        self.assertEqual(request.call_args[0][1], "https://example.test/codes.json")

    def test_retries_with_backoff(self, request, sleep):
        request.side_effect = [
            requests.exceptions.ConnectionError("down"),
            response(status=503),
            response(text="ok"),
        ]
        client = NetworkClient(max_retries=3, retry_delay=1.0, backoff_factor=2.0)
        self.assertEqual(client.get_text_with_retry("http://x.test/a"), "ok")
        self.assertEqual([c.args[0] for c in sleep.call_args_list], [1.0, 2.0])

    def test_gives_up(self, request, sleep):
        request.side_effect = requests.exceptions.Timeout("slow")
        client = NetworkClient(max_retries=2)
        self.assertIsNone(client.get_json_with_retry("http://x.test/a"))
        self.assertEqual(request.call_count, 2)
        self.assertEqual(sleep.call_count, 1)


if __name__ == '__main__':
    unittest.main()
