"""Allow ``python -m bankstress``."""

from .cli import app

app(prog_name="bankstress")
