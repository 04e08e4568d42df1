"""
Command-line interface for PanelCharts package.

Provides an argparse-based CLI with subcommands for rendering, validating and
batch rendering chart documents. Without a subcommand, one line of JSON is
read from standard input and printed back as an HTML ``<img>`` tag.

Usage:
    echo '{"mappings": []}' | panel-charts
    panel-charts render --input chart.json --output chart.svg
    panel-charts validate charts/*.json
    panel-charts batch charts/*.json --output-dir rendered/ --format png --parallel
    panel-charts init-config panel_charts.yaml
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

import yaml

from .api import create_chart, load_chart
from .batch import BatchRenderer
from .config import RenderConfig, get_default_config
from .constants import OUTPUT_FORMATS
from .exceptions import PanelChartsError
from .logging_config import setup_logging
from .model import PanelConfig


def setup_logging_from_args(args: argparse.Namespace) -> None:
    """
    Configure logging based on command-line arguments.

    Args:
        args: Parsed command-line arguments with verbose, quiet, log_file
    """
    if hasattr(args, 'silent') and args.silent:
        verbosity = -2  # ERROR
    elif hasattr(args, 'quiet') and args.quiet:
        verbosity = -1  # WARNING
    elif hasattr(args, 'verbose') and args.verbose:
        verbosity = 1  # DEBUG
    else:
        verbosity = 0  # INFO

    log_file = getattr(args, 'log_file', None)
    setup_logging(verbosity=verbosity, log_file=log_file)


def load_config(config_path: Optional[str]) -> Optional[RenderConfig]:
    """
    Load configuration from file.

    Args:
        config_path: Path to config file (YAML or JSON)

    Returns:
        RenderConfig object or None if no path provided
    """
    if config_path is None:
        return None

    try:
        config = RenderConfig.load_from_file(config_path)
        config.validate()
        return config
    except (OSError, ValueError, TypeError, yaml.YAMLError) as e:
        print(f"Error loading config from {config_path}: {e}", file=sys.stderr)
        sys.exit(1)


def _config_from_args(args: argparse.Namespace) -> RenderConfig:
    config = load_config(getattr(args, "config", None))
    if config is None:
        config = RenderConfig()
    if getattr(args, "dpi", None):
        config.dpi = args.dpi
    if getattr(args, "canvas_color", None):
        config.canvas_color = args.canvas_color
    return config


def _cli_print(args: argparse.Namespace, *values: object, **kwargs) -> None:
    """Print unless --silent was provided."""
    if getattr(args, "silent", False):
        return
    print(*values, **kwargs)


def _read_document(args: argparse.Namespace) -> str:
    if getattr(args, "input", None):
        return Path(args.input).read_text(encoding="utf-8")
    return sys.stdin.readline()


def cmd_render(args: argparse.Namespace) -> int:
    """Handle 'render' subcommand (also the default without a subcommand)."""
    try:
        config = _config_from_args(args)
        text = _read_document(args)
        if not text.strip():
            print("Error: No chart document informed", file=sys.stderr)
            return 1

        panel = load_chart(text, config)

        if args.output:
            output_path = create_chart(panel, output_path=args.output, config=config)
            if getattr(args, "silent", False):
                print(str(output_path))
            else:
                print(f"Success! Chart saved to: {output_path}")
        elif args.format == "svg":
            print(panel.svg())
        else:
            print(panel.html_img_tag())
        return 0

    except PanelChartsError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_validate(args: argparse.Namespace) -> int:
    """Handle 'validate' subcommand."""
    n_invalid = 0
    for file_name in args.files:
        try:
            config = PanelConfig.from_json(Path(file_name).read_text(encoding="utf-8"))
            config.validate()
            split = config.resolve_split()
            n_mappings = sum(len(p.mappings) for p in config.plots)
            _cli_print(args, f"OK       {file_name} ({len(config.plots)} plot(s), split={split}, {n_mappings} mapping(s))")
        except (PanelChartsError, OSError) as e:
            n_invalid += 1
            print(f"INVALID  {file_name}: {e}", file=sys.stderr)

    _cli_print(args, f"\n{len(args.files) - n_invalid}/{len(args.files)} document(s) valid")
    return 0 if n_invalid == 0 else 1


def cmd_batch(args: argparse.Namespace) -> int:
    """Handle 'batch' subcommand."""
    _cli_print(args, f"Rendering {len(args.files)} chart(s) to {args.output_dir}")

    try:
        config = _config_from_args(args)
        batch = BatchRenderer(config)
        result = batch.render_files(
            args.files,
            output_dir=args.output_dir,
            fmt=args.format,
            parallel=args.parallel,
            max_workers=args.workers,
            show_progress=not (getattr(args, "quiet", False) or getattr(args, "silent", False)),
        )

        successful = len(result['successful'])
        total = successful + len(result['failed'])
        success_rate = successful / total * 100 if total > 0 else 0

        if getattr(args, "silent", False):
            for path in result['successful']:
                print(path)
        else:
            print(f"\nBatch rendering complete!")
            print(f"  Successful: {successful}/{total} ({success_rate:.1f}%)")
            print(f"  Total time: {result['total_time']:.1f}s")
            print(f"  Output directory: {args.output_dir}")

        for failure in result['failed']:
            _cli_print(args, f"  Failed: {failure['source']}: {failure['error']}")

        return 0 if not result['failed'] else 1

    except PanelChartsError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_init_config(args: argparse.Namespace) -> int:
    """Handle 'init-config' subcommand."""
    path = Path(args.path)
    if path.exists() and not args.force:
        print(f"Error: {path} already exists (use --force to overwrite)", file=sys.stderr)
        return 1
    try:
        get_default_config().save_to_file(path)
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    _cli_print(args, f"Default configuration written to: {path}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI."""
    parser = argparse.ArgumentParser(
        prog="panel-charts",
        description="Render declarative chart documents to PNG, SVG, PostScript or PDF",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    def _add_common_globalish_args(p: argparse.ArgumentParser) -> None:
        """Add args that users reasonably expect to work after subcommands too.

        Argparse only treats options as "global" when they appear before the
        subcommand token. To make UX forgiving, we add these to subparsers as
        well.
        """

        p.add_argument(
            "-v", "--verbose",
            action="store_true",
            help="Enable DEBUG logging"
        )
        p.add_argument(
            "-q", "--quiet",
            action="store_true",
            help="Suppress INFO logging (WARNING+ only)"
        )
        p.add_argument(
            "--silent",
            action="store_true",
            help="Suppress most console output (prints only final output)"
        )
        p.add_argument(
            "--log-file",
            type=str,
            help="Write logs to file"
        )

    def _add_config_args(p: argparse.ArgumentParser) -> None:
        p.add_argument(
            "--config",
            type=str,
            help="Config file path (YAML/JSON)"
        )
        p.add_argument(
            "--dpi",
            type=int,
            help="Override raster resolution"
        )
        p.add_argument(
            "--canvas-color",
            type=str,
            default=None,
            help="Colour painted under the whole canvas (e.g. '#ffffff'); transparent by default",
        )

    def _add_render_args(p: argparse.ArgumentParser) -> None:
        p.add_argument(
            "--input",
            type=str,
            help="Chart document file (default: read one line from stdin)"
        )
        p.add_argument(
            "--output",
            type=str,
            help="Output file path; the extension selects the format"
        )
        p.add_argument(
            "--format",
            choices=["png", "svg"],
            default="png",
            help="Stdout format without --output: png <img> tag or svg text (default: png)"
        )
        _add_config_args(p)

    # Global arguments (still supported before subcommands)
    _add_common_globalish_args(parser)
    _add_render_args(parser)
    parser.set_defaults(func=cmd_render)

    # Subcommands
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # ========================================================================
    # render subcommand
    # ========================================================================
    parser_render = subparsers.add_parser(
        "render",
        help="Render one chart document"
    )
    _add_common_globalish_args(parser_render)
    _add_render_args(parser_render)
    parser_render.set_defaults(func=cmd_render)

    # ========================================================================
    # validate subcommand
    # ========================================================================
    parser_validate = subparsers.add_parser(
        "validate",
        help="Validate chart documents without rendering"
    )
    _add_common_globalish_args(parser_validate)
    parser_validate.add_argument(
        "files",
        nargs="+",
        help="Chart document files"
    )
    parser_validate.set_defaults(func=cmd_validate)

    # ========================================================================
    # batch subcommand
    # ========================================================================
    parser_batch = subparsers.add_parser(
        "batch",
        help="Render many chart documents into a directory"
    )
    _add_common_globalish_args(parser_batch)
    parser_batch.add_argument(
        "files",
        nargs="+",
        help="Chart document files"
    )
    parser_batch.add_argument(
        "--output-dir",
        type=str,
        required=True,
        help="Output directory"
    )
    parser_batch.add_argument(
        "--format",
        choices=list(OUTPUT_FORMATS),
        default=None,
        help="Output format (default: from config, png)"
    )
    parser_batch.add_argument(
        "--parallel",
        action="store_true",
        help="Render in parallel worker processes"
    )
    parser_batch.add_argument(
        "--workers",
        type=int,
        help="Number of parallel workers (default: from config)"
    )
    _add_config_args(parser_batch)
    parser_batch.set_defaults(func=cmd_batch)

    # ========================================================================
    # init-config subcommand
    # ========================================================================
    parser_init = subparsers.add_parser(
        "init-config",
        help="Write the default render configuration to a file"
    )
    _add_common_globalish_args(parser_init)
    parser_init.add_argument(
        "path",
        type=str,
        help="Destination (.yaml, .yml or .json)"
    )
    parser_init.add_argument(
        "--force",
        action="store_true",
        help="Overwrite an existing file"
    )
    parser_init.set_defaults(func=cmd_init_config)

    # Parse arguments
    args = parser.parse_args(argv)

    # Setup logging
    setup_logging_from_args(args)

    # Execute subcommand
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
