"""ASGI entrypoint for the dish calories API."""

from dish_calories.api.app import create_app
from dish_calories.containers import build_container

app = create_app(build_container())
