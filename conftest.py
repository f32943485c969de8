"""Global pytest configuration."""

import os

# Pin provider defaults before settings are first read, whatever the local .env says
os.environ["DEFAULT_PROVIDER"] = "openai"
os.environ["SYNTHESIS_PROVIDER"] = "openai"
os.environ["FALLBACK_PROVIDER"] = "google"
os.environ["UI_ORIGIN"] = "http://localhost:5173"
