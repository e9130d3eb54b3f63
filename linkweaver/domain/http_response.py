from typing import NamedTuple, Optional


class HttpResponse(NamedTuple):
    """Response from HTTP fetch operation."""
    status_code: int
    text: str
    content_type: Optional[str] = None
    reason: str = ""
    url: Optional[str] = None

    @property
    def status_line(self) -> str:
        """Status code plus reason phrase, e.g. ``"404 Not Found"``."""
        if self.reason:
            return f"{self.status_code} {self.reason}"
        return str(self.status_code)

    @property
    def is_html(self) -> bool:
        # Servers that omit the header are given the benefit of the doubt.
        if not self.content_type:
            return True
        ct = self.content_type.lower()
        return "html" in ct
