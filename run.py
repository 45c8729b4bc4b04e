"""Delve CLI entry point.

Provides subcommands for running the JSON API server and for generating
dungeons, caves and paths straight to the terminal. Accepts configuration via
flags and environment variables, with optional .env loading.

Run `python run.py --help` for details.
"""

import argparse
import json
import os
import signal
import sys
from textwrap import dedent

from colorama import Fore, Style
from colorama import init as _color_init
from dotenv import load_dotenv

from delve import __version__

_color_init()

# Disable colors if output is not a real terminal (e.g., during pytest capture)
_COLOR_ENABLED = sys.stdout.isatty()

GLYPH_COLORS = {
    "#": Fore.BLUE,
    ".": Fore.WHITE,
    ",": Fore.WHITE,
    "+": Fore.YELLOW,
    "S": Fore.GREEN + Style.BRIGHT,
    "E": Fore.RED + Style.BRIGHT,
}


def parse_args(argv: list[str]) -> argparse.Namespace:
    description = """
    Delve dungeon generator

    Run the JSON API server or generate dungeons, caves and paths from the
    command line. Configuration can be provided via CLI flags or environment
    variables. If both are present, CLI flags take precedence.
    """

    epilog = dedent(
        """
        Environment variables:
          HOST                 Bind address for the web server (default: 0.0.0.0)
          PORT                 Port for the web server (default: 5000)
          DELVE_LOG_LEVEL      debug | info | warn | error (default: info)
          DELVE_LOG_JSON       1 to emit JSON log lines
          DELVE_DISABLE_CACHE  1 to regenerate dungeons on every API request

        Examples:
          # Run the server on the default host and port
          python run.py server

          # Print a reproducible 40x30 dungeon
          python run.py generate --seed 42 --width 40 --height 30

          # Print a cave as JSON
          python run.py cave --seed 7 --json

          # Path from the start marker to the end marker, diagonals allowed
          python run.py path --seed 42 --diagonal --simplify
        """
    )

    parser = argparse.ArgumentParser(
        prog="delve",
        description=dedent(description),
        epilog=epilog,
        formatter_class=argparse.RawTextHelpFormatter,
    )

    parser.add_argument(
        "--env-file",
        dest="env_file",
        help="Path to a .env file to load before processing flags",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"Delve {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command")

    # server subcommand
    server_parser = subparsers.add_parser(
        "server",
        help="Run the JSON API server",
        formatter_class=argparse.RawTextHelpFormatter,
        description="Run the Flask dungeon API server",
    )
    server_parser.add_argument(
        "--host",
        default=None,
        help="Host interface to bind (default: env HOST or 0.0.0.0)",
    )
    server_parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to listen on (default: env PORT or 5000)",
    )
    server_parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable Flask debug mode with verbose error pages",
    )
    server_parser.set_defaults(command="server")

    # generate subcommand
    gen_parser = subparsers.add_parser(
        "generate",
        help="Print a room-and-corridor dungeon",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    _add_map_args(gen_parser)
    gen_parser.add_argument("--min-rooms", dest="min_rooms", type=int, default=6, help="Minimum room target (default: 6)")
    gen_parser.add_argument("--max-rooms", dest="max_rooms", type=int, default=10, help="Maximum room target (default: 10)")
    gen_parser.set_defaults(command="generate")

    # cave subcommand
    cave_parser = subparsers.add_parser(
        "cave",
        help="Print a cellular-automata cave",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    _add_map_args(cave_parser)
    cave_parser.add_argument(
        "--wall-probability",
        dest="wall_probability",
        type=float,
        default=0.45,
        help="Chance an interior cell starts as wall (default: 0.45)",
    )
    cave_parser.add_argument("--iterations", type=int, default=5, help="Smoothing rounds (default: 5)")
    cave_parser.set_defaults(command="cave")

    # path subcommand
    path_parser = subparsers.add_parser(
        "path",
        help="Find a path on a seeded dungeon and print its waypoints",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    _add_map_args(path_parser)
    path_parser.add_argument("--kind", choices=("rooms", "cave"), default="rooms", help="Dungeon kind (default: rooms)")
    path_parser.add_argument(
        "--from", dest="src", nargs=2, type=int, metavar=("X", "Y"), help="Start cell (default: start marker)"
    )
    path_parser.add_argument(
        "--to", dest="dst", nargs=2, type=int, metavar=("X", "Y"), help="Goal cell (default: end marker)"
    )
    path_parser.add_argument("--diagonal", action="store_true", help="Allow diagonal steps")
    path_parser.add_argument("--simplify", action="store_true", help="Drop waypoints on straight runs")
    path_parser.set_defaults(command="path")

    # If no subcommand provided, default to server
    if len(argv) == 0:
        argv = ["server"]

    args = parser.parse_args(argv)
    return args


def _add_map_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--seed", type=int, default=None, help="Generation seed (default: random)")
    p.add_argument("--width", type=int, default=60, help="Map width in cells (default: 60)")
    p.add_argument("--height", type=int, default=60, help="Map height in cells (default: 60)")
    p.add_argument("--json", action="store_true", help="Print JSON instead of the ASCII map")


def colorize(ascii_map: str) -> str:
    if not _COLOR_ENABLED:
        return ascii_map
    return "\n".join(
        "".join(f"{GLYPH_COLORS.get(ch, '')}{ch}{Style.RESET_ALL}" for ch in row) for row in ascii_map.split("\n")
    )


def _label(text: str) -> str:
    return f"{Fore.YELLOW}{text}{Style.RESET_ALL}" if _COLOR_ENABLED else text


def _print_dungeon(dungeon, as_json: bool) -> None:
    if as_json:
        print(json.dumps(dungeon.to_json(), indent=2))
        return
    print(colorize(dungeon.to_ascii()))
    stats = dungeon.stats()
    print(f"{_label('Seed:'):12} {dungeon.seed}")
    print(f"{_label('Rooms:'):12} {stats['rooms']}")
    print(f"{_label('Regions:'):12} {stats['regions']}")
    print(f"{_label('Open:'):12} {stats['floor_pct']}%")
    for key in sorted(dungeon.metrics):
        if key in ("phase_ms", "tiles"):
            continue
        print(f"  {key}={dungeon.metrics[key]}")


def _run_path(args) -> int:
    from delve.dungeon import generate, generate_cave
    from delve.pathfinding import grid_to_world, search, simplify_path

    if args.kind == "cave":
        dungeon = generate_cave(args.width, args.height, seed=args.seed)
    else:
        dungeon = generate(args.width, args.height, seed=args.seed)
    src = tuple(args.src) if args.src else dungeon.start_position
    dst = tuple(args.dst) if args.dst else dungeon.end_position
    if src is None or dst is None:
        print("[ERROR] Dungeon has no start/end markers; pass --from and --to")
        return 1
    result = search(src, dst, dungeon.grid, diagonal_allowed=args.diagonal)
    path = result.world_path()
    if args.simplify and path:
        path = simplify_path(path, dungeon.grid)
    if args.json:
        print(json.dumps({"seed": dungeon.seed, "status": result.status, "path": [list(p) for p in path]}))
    else:
        print(f"{_label('Seed:'):12} {dungeon.seed}")
        print(f"{_label('From:'):12} {src} -> {grid_to_world(src)}")
        print(f"{_label('To:'):12} {dst} -> {grid_to_world(dst)}")
        print(f"{_label('Status:'):12} {result.status} (expanded {result.expanded})")
        for wx, wy in path:
            print(f"  {wx:.1f},{wy:.1f}")
    return 0 if result else 1


def main(argv: list[str]) -> int:
    args = parse_args(argv)
    if getattr(args, "env_file", None):
        load_dotenv(args.env_file)
    else:
        # Load default .env if present (no error if missing)
        load_dotenv()

    mode = (getattr(args, "command", None) or "server").lower()

    if mode == "generate":
        from delve.dungeon import generate

        _print_dungeon(generate(args.width, args.height, args.min_rooms, args.max_rooms, seed=args.seed), args.json)
        return 0
    if mode == "cave":
        from delve.dungeon import generate_cave

        dungeon = generate_cave(
            args.width,
            args.height,
            wall_probability=args.wall_probability,
            iterations=args.iterations,
            seed=args.seed,
        )
        _print_dungeon(dungeon, args.json)
        return 0
    if mode == "path":
        return _run_path(args)

    # Resolve configuration from CLI flags or env vars
    host = getattr(args, "host", None) or os.getenv("HOST", "0.0.0.0")
    port = int(getattr(args, "port", None) or os.getenv("PORT", "5000"))
    debug = bool(getattr(args, "debug", False) or os.getenv("FLASK_DEBUG") == "1")

    def handle_sigint(sig, frame):
        print("\n[INFO] Shutting down server...")
        sys.exit(0)

    signal.signal(signal.SIGINT, handle_sigint)

    # Import server entrypoint only after environment is ready
    from delve.logging_utils import log
    from delve.server import start_server

    divider = (Fore.MAGENTA + "=" * 40 + Style.RESET_ALL) if _COLOR_ENABLED else "=" * 40
    title = f"{Fore.CYAN}{Style.BRIGHT}Delve API Bootup{Style.RESET_ALL}" if _COLOR_ENABLED else "Delve API Bootup"
    print("\n".join([divider, f"  {title}", divider, f"  {_label('Host:'):12} {host}", f"  {_label('Port:'):12} {port}", divider, ""]))
    log.info(event="listen", host=host, port=port, debug=debug)
    start_server(host=host, port=port, debug=debug)
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
