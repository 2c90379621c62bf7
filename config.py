"""Central configuration for mood-diary."""

import os
from pathlib import Path

# Load .env file if it exists
def _load_env():
    env_file = Path(__file__).parent / ".env"
    if env_file.exists():
        with open(env_file) as f:
            for line in f:
                line = line.strip()
                if line and not line.startswith("#") and "=" in line:
                    key, value = line.split("=", 1)
                    key = key.strip()
                    value = value.strip().strip('"').strip("'")
                    if key and key not in os.environ:
                        os.environ[key] = value

_load_env()

# Directories
PROJECT_DIR = Path(__file__).parent
DATA_DIR = Path(os.environ.get("MOOD_DIARY_DATA_DIR", Path.home() / ".config" / "mood-diary")).expanduser()

# Storage keys (one JSON document per key under DATA_DIR)
ENTRIES_KEY = "mood_entries"
PIN_KEY = "mind_diary_pin"

# Analysis profiles
PROFILES_FILE = Path(os.environ.get("MOOD_DIARY_PROFILES", PROJECT_DIR / "profiles.yaml")).expanduser()
PROFILE_OVERRIDE_FILE = DATA_DIR / "profile.override"

# Pattern analysis settings
MIN_ENTRIES_FOR_ANALYSIS = 3
NOTES_PER_MOOD = 5
LLM_TIMEOUT_SEC = 120.0

# API configuration
REDPILL_API_KEY = os.environ.get("REDPILL_API_KEY", "")
REDPILL_BASE_URL = os.environ.get("REDPILL_BASE_URL", "https://api.redpill.ai/v1")
OLLAMA_HOST = os.environ.get("OLLAMA_HOST", "http://localhost:11434")

# Speech synthesis (OpenAI-compatible /audio/speech, raw PCM output)
TTS_MODEL = os.environ.get("MOOD_DIARY_TTS_MODEL", "gpt-4o-mini-tts")
TTS_TIMEOUT_SEC = 60.0
TTS_SAMPLE_RATE = 24000
TTS_CHANNELS = 1
