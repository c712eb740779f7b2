import os

SERVICE_NAME = os.getenv("SERVICE_NAME", "cors-relay")

DEFAULT_UPSTREAM_URL = "http://localhost:3001/"
DEFAULT_PORT = 8787
DEFAULT_HOST = "0.0.0.0"
DEFAULT_MAX_REDIRECTS = 5

LOG_LEVEL = os.getenv("LOG_LEVEL", "info").lower()

OTLP_ENDPOINT = os.getenv("OTLP_ENDPOINT")
OTLP_HEADERS = os.getenv("OTLP_HEADERS", "")

# Exposing /metrics takes that path away from the relay, so it is opt-in
METRICS_ENABLED = os.getenv("METRICS_ENABLED", "false").lower() == "true"
METRICS_PATH = os.getenv("METRICS_PATH", "/metrics")
