"""Command-line entry point for GIF-to-spritesheet workflows."""

import argparse
import logging
import sys
from pathlib import Path

from .core import LayoutMode
from .core import exporter, frame_adapter, gif_loader, spritesheet_builder
from .core.errors import DecodeError, EmptyInputError, ProcessingError, RenderSurfaceError, ValidationError
from .main import configure_logging
from .utils import file_tools, validators

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gif2sprite",
        description="Convert an animated GIF into a spritesheet and frame atlas.",
    )
    parser.add_argument("input", type=Path, help="Path to source GIF")
    parser.add_argument(
        "output",
        type=Path,
        nargs="?",
        help="Destination spritesheet path (PNG); defaults to the GIF name with .png",
    )
    parser.add_argument(
        "--layout",
        choices=[mode.value for mode in LayoutMode],
        default=LayoutMode.HORIZONTAL.value,
        help="Frame arrangement (default: horizontal)",
    )
    parser.add_argument(
        "--padding",
        type=int,
        default=0,
        help=f"Gap between cells in px, 0-{validators.MAX_PADDING} (default: 0)",
    )
    parser.add_argument(
        "--columns",
        type=int,
        help="Columns for grid layout (default: square-ish)",
    )
    parser.add_argument(
        "--remove",
        type=int,
        action="append",
        default=[],
        metavar="POSITION",
        help="Drop the frame at this 0-based position; may be repeated",
    )
    parser.add_argument(
        "--metadata",
        type=Path,
        help="Optional JSON atlas output for frame positions and durations",
    )
    parser.add_argument(
        "--image-name",
        help="Image name recorded in the atlas (default: output file name)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the computed layout without writing outputs",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(logging.DEBUG if args.verbose else logging.INFO)

    try:
        config = validators.normalize_config(args.layout, args.padding, args.columns)
        animation = gif_loader.load_animation(args.input)
        frames = frame_adapter.adapt_animation(animation)
        if args.remove:
            frames = frame_adapter.remove_frames(frames, args.remove)

        if args.dry_run:
            geometry = spritesheet_builder.compute_layout(frames, config)
            print(
                f"{len(frames)} frames -> {geometry.columns}x{geometry.rows} cells of "
                f"{geometry.cell_width}x{geometry.cell_height}, sheet {geometry.width}x{geometry.height}"
            )
            return 0

        output = args.output or file_tools.default_output_path(args.input)
        with spritesheet_builder.build_spritesheet(frames, config) as result:
            image_path, atlas_path = exporter.export_spritesheet(
                result, output, atlas_path=args.metadata, image_name=args.image_name
            )
    except (DecodeError, EmptyInputError, ValidationError, RenderSurfaceError, ProcessingError, IndexError) as exc:
        logger.error("%s", exc)
        return 1

    print(image_path)
    if atlas_path:
        print(atlas_path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
