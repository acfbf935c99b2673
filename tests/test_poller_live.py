import socket
import threading
import time
import unittest
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

from pagewatch.errors import TimeoutExceeded
from pagewatch.models import PollRequest
from pagewatch.poller import poll, wait_for_page


class _PageHandler(BaseHTTPRequestHandler):
    # Served bodies in order; the last one repeats.
    bodies: list[bytes] = [b"Hello, World"]
    status_until: int = 0
    hits: int = 0
    accept_headers: list[str] = []

    def do_GET(self) -> None:
        cls = type(self)
        cls.hits += 1
        cls.accept_headers.append(self.headers.get("Accept", ""))
        status = 503 if cls.hits <= cls.status_until else 200
        body = cls.bodies[min(cls.hits, len(cls.bodies)) - 1]
        self.send_response(status)
        self.send_header("Content-Type", "text/plain; charset=utf-8")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format: str, *args) -> None:
        return


def _free_port() -> int:
    with socket.socket() as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


class LivePollerTests(unittest.TestCase):
    def _serve(self, bodies: list[bytes], status_until: int = 0) -> str:
        handler = type(
            "Handler",
            (_PageHandler,),
            {"bodies": bodies, "status_until": status_until, "hits": 0, "accept_headers": []},
        )
        server = ThreadingHTTPServer(("127.0.0.1", 0), handler)
        thread = threading.Thread(target=server.serve_forever, daemon=True)
        thread.start()
        self.addCleanup(thread.join, 5)
        self.addCleanup(server.server_close)
        self.addCleanup(server.shutdown)
        self.handler = handler
        return f"http://127.0.0.1:{server.server_address[1]}/"

    def test_found_immediately(self) -> None:
        url = self._serve([b"Hello, World"])
        started = time.perf_counter()

        elapsed_ms = wait_for_page(url, 5, "World", measure_latency=True)

        wall_ms = (time.perf_counter() - started) * 1000
        self.assertGreaterEqual(elapsed_ms, 0)
        self.assertLessEqual(elapsed_ms, wall_ms)
        self.assertLess(wall_ms, 5000)
        self.assertEqual(self.handler.accept_headers, ["*/*"])

    def test_waits_through_error_statuses_and_changing_content(self) -> None:
        url = self._serve([b"booting", b"booting", b"still booting", b"ready: Hello, World"], status_until=2)
        request = PollRequest.create(url=url, timeout_s=5, target="World", poll_interval_s=0.05)

        res = poll(request)

        self.assertTrue(res.found)
        self.assertEqual(res.attempts, 4)
        self.assertEqual(res.last_body, "ready: Hello, World")

    def test_unreachable_page_times_out(self) -> None:
        url = f"http://127.0.0.1:{_free_port()}/"
        request = PollRequest.create(url=url, timeout_s=1, target="World", poll_interval_s=0.1)
        started = time.perf_counter()

        with self.assertRaises(TimeoutExceeded) as ctx:
            poll(request)

        self.assertGreaterEqual(time.perf_counter() - started, 1.0)
        self.assertIn("Empty webpage", str(ctx.exception))


if __name__ == "__main__":
    unittest.main()
