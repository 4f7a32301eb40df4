"""
CLI module for web-reader.

Provides the `web` command using Typer, plus the pre-parser that keeps
--input/--value/--button pairs in order.
"""

from web_reader.cli.arguments import OrderedOptions, split_ordered_options
from web_reader.cli.main import app, run

__all__ = ["app", "run", "OrderedOptions", "split_ordered_options"]
