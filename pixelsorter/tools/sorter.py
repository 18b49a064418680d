"""
Pixelsorter Sort - Sort pixels of every image in a directory.

All options live in the settings file; the command only takes its location.
Sorted images are written to <input_path>/out under their original names.

Usage:
    pixelsort [SETTINGS]

Examples:
    pixelsort
    pixelsort settings.txt
    pixelsort configs/vertical_hue.yaml
"""

import argparse
import logging
import sys
from pathlib import Path

from pixelsorter import __version__
from pixelsorter.utils.config import (
    DEFAULT_SETTINGS_FILE,
    ConfigError,
    load_settings,
    print_config_summary,
)

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FILE_ERRORS = 1
EXIT_CONFIG_ERROR = 2


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Pixel sort every image of a directory",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  pixelsort
  pixelsort settings.txt
  pixelsort configs/vertical_hue.yaml

A missing settings file is created with default values.

Settings:
  input_path         Directory with the images (results go to <input_path>/out)
  sort_direction     left, right, up or down
  sort_by            red, green, blue, hue, saturation or value
  contrast_lower     Lower bound of the contrast band (0.0-1.0)
  contrast_upper     Upper bound of the contrast band (0.0-1.0)
  contrast_type      Attribute used for the contrast band
  debug              Verbose output and <name>_mask.png images
  jobs               Images processed at once (YAML only)
  continue_on_error  Keep going after a failed image (YAML only)
""",
    )

    parser.add_argument(
        "settings",
        nargs="?",
        type=Path,
        default=Path(DEFAULT_SETTINGS_FILE),
        help=f"Settings file, .txt or .yaml (default: {DEFAULT_SETTINGS_FILE})",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    return parser.parse_args(argv)


def main(argv=None):
    """Main entry point."""
    args = parse_args(argv)

    try:
        settings = load_settings(args.settings)
    except ConfigError as e:
        print(f"Invalid settings in {args.settings}:", file=sys.stderr)
        for error in e.errors:
            print(f"  - {error}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    if settings.debug:
        print_config_summary(settings.to_dict())

    from pixelsorter.sorting.processor import BatchProcessor

    processor = BatchProcessor(max_workers=settings.jobs)

    try:
        result = processor.run(settings)
    except (OSError, ValueError) as e:
        logger.error(f"Aborting: {e}")
        return EXIT_FILE_ERRORS

    print("\nResults:")
    print(f"  Sorted: {len(result.processed)}")
    print(f"  Failed: {len(result.failures)}")
    print(f"  Output: {settings.output_dir}")
    print(f"  Time: {result.elapsed_seconds:.1f}s")

    for item in result.failures:
        print(f"  - {item.input_path.name}: {item.error}")

    return EXIT_FILE_ERRORS if result.failures else EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
