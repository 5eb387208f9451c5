"""Network configuration constants for the child-facing web page."""

DEFAULT_HOST: str = "0.0.0.0"
DEFAULT_PORT: int = 8000
