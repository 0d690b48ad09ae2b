"""Flask front end exposing normalization and phonemization over HTTP."""

from phonetext.webui.app import create_app, main

__all__ = ["create_app", "main"]
