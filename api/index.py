"""Vercel serverless entry point for classmanager."""
import os
import sys
import tempfile

# Add src to path so imports work
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from classmanager.config import ClassManagerConfig
from classmanager.web.app import create_app

# Serverless file systems are read-only outside /tmp
_data_dir = os.path.join(tempfile.gettempdir(), "classmanager")

app = create_app(
    config=ClassManagerConfig(
        output_dir=os.path.join(_data_dir, "lza-css"),
        preferences_path=os.path.join(_data_dir, "preferences.json"),
    )
)
