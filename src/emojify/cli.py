"""CLI for emojify: ``emojify run`` and ``emojify categories``."""

import argparse
import logging
import os
import sys
from pathlib import Path

logger = logging.getLogger(__name__)

NOISY_LOGGERS = ("absl", "mediapipe", "urllib3", "PIL")


def suppress_thirdparty_noise() -> None:
    """Quiet MediaPipe / TFLite native logging before it is imported."""
    os.environ.setdefault("GLOG_minloglevel", "2")
    os.environ.setdefault("TF_CPP_MIN_LOG_LEVEL", "2")
    os.environ.setdefault("OPENCV_LOG_LEVEL", "ERROR")


def configure_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(level=logging.DEBUG)
    else:
        logging.basicConfig(level=logging.INFO)
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="emojify",
        description="Overlay expression-matched emoji on faces in a photo",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  emojify run photo.jpg -o out.png --assets ./emoji
  emojify run photo.jpg -o out.png --assets ./emoji --faces faces.json
  emojify run photo.jpg -o out.png --config emojify.yaml --no-double-scale
  emojify categories --assets ./emoji
""",
    )
    sub = parser.add_subparsers(dest="command")

    # emojify run
    run_p = sub.add_parser("run", help="Emojify a photo")
    run_p.add_argument("path", help="Path to the input photo")
    run_p.add_argument(
        "-o", "--output",
        required=True,
        help="Output image path (format from extension)",
    )
    run_p.add_argument(
        "--assets",
        default=None,
        metavar="DIR",
        help="Directory with emoji PNGs (overrides assets_dir from --config)",
    )
    run_p.add_argument(
        "--config",
        default=None,
        metavar="PATH",
        help="Path to emojify config YAML file",
    )
    run_p.add_argument(
        "--faces",
        default=None,
        metavar="PATH",
        help="JSON file of face records to use instead of running the detector",
    )
    run_p.add_argument(
        "--no-double-scale",
        action="store_true",
        help="Apply the scale factor to the emoji height only once",
    )
    run_p.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Threads for pre-rendering overlays (default: sequential)",
    )
    run_p.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output",
    )

    # emojify categories
    cat_p = sub.add_parser("categories", help="List emoji categories and asset files")
    cat_p.add_argument(
        "--assets",
        default=None,
        metavar="DIR",
        help="Report which asset files exist in this directory",
    )

    return parser


def _load_config(args: argparse.Namespace):
    from emojify.config import EmojifyConfig

    config = EmojifyConfig.from_yaml(args.config) if args.config else EmojifyConfig()
    overrides = config.to_dict()
    if args.assets:
        overrides["assets_dir"] = args.assets
    if args.no_double_scale:
        overrides["double_scale_height"] = False
    if args.workers is not None:
        overrides["max_workers"] = args.workers
    return EmojifyConfig.from_dict(overrides)


def _cmd_run(args: argparse.Namespace) -> int:
    """Handle ``emojify run``."""
    from emojify.assets import EmojiAssets
    from emojify.backends import MediaPipeFaceBackend, StaticFaceDetector
    from emojify.errors import EmojifyError
    from emojify.pipeline import emojify_file

    try:
        config = _load_config(args)
        if not config.assets_dir:
            print("No emoji assets: pass --assets or set assets_dir in --config", file=sys.stderr)
            return 1
        assets = EmojiAssets.from_directory(config.assets_dir)

        if args.faces:
            detector = StaticFaceDetector.from_json(args.faces)
        else:
            detector = MediaPipeFaceBackend(
                max_faces=config.max_faces,
                min_detection_confidence=config.min_detection_confidence,
            )
        detector.initialize()
        try:
            result = emojify_file(args.path, args.output, detector, assets, config=config)
        finally:
            detector.cleanup()
    except (EmojifyError, FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    for notice in result.notices:
        where = "" if notice.face_index is None else f" [face {notice.face_index}]"
        print(f"  {notice.kind.value}{where}: {notice.message}")
    print(f"\nDone: {result.overlay_count} emoji -> {args.output}")
    return 0


def _cmd_categories(args: argparse.Namespace) -> int:
    """Handle ``emojify categories``."""
    from emojify.assets import DEFAULT_ASSET_FILES

    directory = Path(args.assets) if args.assets else None
    for category, filename in DEFAULT_ASSET_FILES.items():
        line = f"  {category.name:18s}  {filename}"
        if directory is not None:
            line += "  ok" if (directory / filename).exists() else "  MISSING"
        print(line)
    return 0


def main(argv=None) -> None:
    suppress_thirdparty_noise()
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(getattr(args, "verbose", False))

    if args.command == "run":
        sys.exit(_cmd_run(args))
    elif args.command == "categories":
        sys.exit(_cmd_categories(args))
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
