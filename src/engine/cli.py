"""
Interpreter - Command Line Entry Point
Mounts a configuration file, renders it once and prints the element tree.
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Any

from core import ValidationError, configure_logging, create_container, get_logger, get_settings, safe_json_dumps
from core.container import build_interpreter
from core.json import JSONParseError, extract_json

logger = get_logger(__name__)


def _tree(rendered: Any) -> Any:
    if isinstance(rendered, list):
        return [_tree(item) for item in rendered]
    return rendered.to_dict() if hasattr(rendered, "to_dict") else rendered


async def render_file(config_path: Path, state: dict[str, Any] | None = None, mount: bool = True) -> Any:
    """
    Render the configuration at `config_path`.

    Args:
        config_path: JSON configuration document
        state: Initial state written before mounting
        mount: Run the root's dataFetch list first

    Returns:
        Plain-data element tree
    """
    settings = get_settings()
    container = create_container(settings)
    interpreter = build_interpreter(container, config_path.read_text(encoding="utf-8"))

    for key, value in (state or {}).items():
        interpreter.store.set(key, value)

    try:
        if mount:
            await interpreter.mount()
        return _tree(interpreter.render())
    finally:
        await interpreter.unmount()
        interpreter.client.close()


def main(argv: list[str] | None = None) -> int:
    """Entry point."""
    parser = argparse.ArgumentParser(prog="dynamic-renderer", description=__doc__.strip().splitlines()[0])
    parser.add_argument("config", type=Path, help="JSON configuration file")
    parser.add_argument("--state", help="Initial state as a JSON object")
    parser.add_argument("--no-mount", action="store_true", help="Skip mount-time data fetches")
    args = parser.parse_args(argv)

    settings = get_settings()
    # stdout carries the rendered tree
    configure_logging(settings.log_level, settings.json_logs, stream=sys.stderr)

    try:
        state = extract_json(args.state) if args.state else None
        tree = asyncio.run(render_file(args.config, state, mount=not args.no_mount))
    except (OSError, JSONParseError, ValidationError) as e:
        logger.error("render_failed", config=str(args.config), error=str(e))
        return 1

    print(safe_json_dumps(tree, indent=2, default=str))
    return 0


if __name__ == "__main__":
    sys.exit(main())
