"""ASGI entrypoint for the adcraft API."""

from adcraft.api.app import create_app
from adcraft.containers import build_container

app = create_app(build_container())
