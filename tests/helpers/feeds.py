"""Shared feed fixtures and record builders for tests."""

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from http.server import BaseHTTPRequestHandler, HTTPServer

from src.feed.models import CandidateRecord, LatencyStatus


FEED_HEADER = (
    "*vpn_servers\n"
    "#HostName,IP,Score,Ping,Speed,CountryLong,CountryShort,NumVpnSessions,"
    "Uptime,TotalUsers,TotalTraffic,LogType,Operator,Message,"
    "OpenVPN_ConfigData_Base64\n"
)

# Three eligible hosts, one excluded region, one unreachable, one malformed
SAMPLE_FEED = (
    FEED_HEADER
    + "alpha,10.0.0.1,100,20,50000000,Japan,JP,4,1,1,1,2w,op,,cfg\n"
    + "beta,10.0.0.2,100,80,90000000,Korea Republic of,KR,2,1,1,1,2w,op,,cfg\n"
    + "gamma.opengw.net,10.0.0.3,100,40,10000000,United States,US,0,1,1,1,2w,op,,cfg\n"
    + "delta,10.0.0.4,100,10,99000000,Iran,IR,0,1,1,1,2w,op,,cfg\n"
    + "epsilon,10.0.0.5,100,-1,99000000,Japan,JP,0,1,1,1,2w,op,,cfg\n"
    + "broken,10.0.0.6,100\n"
    + "*\n"
)


def make_record(
    host: str = "host.opengw.net",
    address: str = "10.0.0.1",
    latency: int = 50,
    throughput: int = 10_000_000,
    load: int = 0,
    region_code: str = "JP",
    region_name: str = "Japan",
) -> CandidateRecord:
    """Create a CandidateRecord with sensible defaults."""
    return CandidateRecord(
        host_identifier=host,
        address=address,
        region_name=region_name,
        region_code=region_code,
        throughput=throughput,
        load=load,
        latency=latency,
        latency_status=LatencyStatus.from_latency(latency),
    )


class FeedHandler(BaseHTTPRequestHandler):
    """Serves ``body`` with ``status`` for every GET."""

    status: int = 200
    body: bytes = SAMPLE_FEED.encode("utf-8")
    request_count: int = 0

    def log_message(self, format: str, *args: object) -> None:  # noqa: A002
        """Suppress log messages during tests."""

    def do_GET(self) -> None:  # noqa: N802
        """Return the configured response."""
        type(self).request_count += 1
        self.send_response(self.status)
        self.send_header("Content-Type", "text/csv")
        self.send_header("Content-Length", str(len(self.body)))
        self.end_headers()
        self.wfile.write(self.body)


def make_handler(status: int = 200, body: str | bytes = SAMPLE_FEED) -> type[FeedHandler]:
    """Build a FeedHandler subclass with its own response and counter."""
    payload = body.encode("utf-8") if isinstance(body, str) else body
    return type(
        "ConfiguredFeedHandler",
        (FeedHandler,),
        {"status": status, "body": payload, "request_count": 0},
    )


@contextmanager
def serve(handler: type[BaseHTTPRequestHandler]) -> Iterator[str]:
    """Run a local HTTP server for the duration of the block.

    Yields:
        Base URL of the server, e.g. ``http://127.0.0.1:54321``.
    """
    server = HTTPServer(("127.0.0.1", 0), handler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        host, port = server.server_address[0], server.server_address[1]
        if isinstance(host, bytes):
            host = host.decode("utf-8")
        yield f"http://{host}:{port}"
    finally:
        server.shutdown()
        server.server_close()
        thread.join(timeout=5)
