"""CLI package exports for top-level command entry points."""

from __future__ import annotations

from .boot import run_iso_main
from .main import IsoBootModalCLI, main
from .seed import create_cloud_init_main

__all__ = ['IsoBootModalCLI', 'create_cloud_init_main', 'main', 'run_iso_main']
