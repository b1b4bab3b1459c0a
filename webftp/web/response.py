"""HTTP response value for webftp."""

from dataclasses import dataclass, field
from typing import Dict


@dataclass
class HttpResponse:
    """Byte payload with status and headers, handed to the web layer."""
    body: bytes = b""
    status: int = 200
    headers: Dict[str, str] = field(default_factory=dict)

    def add_header(self, name: str, value: str) -> "HttpResponse":
        """Set a header and return the response for chaining."""
        self.headers[name] = value
        return self
