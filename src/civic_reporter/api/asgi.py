"""ASGI entrypoint for the civic reporter app."""

from civic_reporter.api.app import create_app
from civic_reporter.containers import build_container

app = create_app(build_container())
