"""Точка входа в приложение: командная строка и запуск окна просмотра."""
from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from pnmlab.config import AppConfig, configure_logging
from pnmlab.models.errors import PnmError
from pnmlab.models.image_model import image_of_size
from pnmlab.models.pixel import FormatTag
from pnmlab.services.export_service import ExportService
from pnmlab.services.image_service import ImageService
from pnmlab.services.process_service import ProcessService

logger = logging.getLogger(__name__)

_FORMATS = {
    "bilevel": FormatTag.BILEVEL,
    "grayscale": FormatTag.GRAYSCALE,
    "rgb": FormatTag.RGB,
}


def parse_args(argv: Optional[List[str]] = None, config: Optional[AppConfig] = None) -> argparse.Namespace:
    config = config or AppConfig()
    epilog = """\
examples:
  %(prog)s image.pbm --scale 4 -o big.pbm              Upscale 4x
  %(prog)s --new 16 16 --line 0 0 15 15 -o diag.pbm    Draw on a blank canvas
  %(prog)s photo.ppm --convert bilevel                 Threshold to P1 on stdout
  cat image.pgm | %(prog)s                             Normalise stdin to stdout
  %(prog)s image.ppm --view                            Open the viewer
"""
    parser = argparse.ArgumentParser(
        prog="pnmlab",
        description="Plain-text PNM (P1/P2/P3) toolkit",
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("input", nargs="?", help="Path to a PNM file (default: stdin)")
    parser.add_argument("-o", "--output", help="Output path (default: stdout)")
    parser.add_argument("--new", nargs=2, type=int, metavar=("W", "H"),
                        help="Start from a blank canvas instead of reading input")
    parser.add_argument("--format", choices=sorted(_FORMATS), default="bilevel",
                        help="Format of the --new canvas (default: bilevel)")
    parser.add_argument("--convert", choices=sorted(_FORMATS),
                        help="Convert to another PNM variant")
    parser.add_argument("--line", nargs=4, type=int, action="append", default=[],
                        metavar=("X0", "Y0", "X1", "Y1"),
                        help="Draw a line; may be repeated")
    parser.add_argument("--scale", type=int, default=config.default_scale,
                        help=f"Nearest-neighbour upscale factor (default: {config.default_scale})")
    parser.add_argument("--log-level", default=config.log_level,
                        help=f"Logging level (default: {config.log_level})")
    parser.add_argument("--view", action="store_true",
                        help="Open the result in the viewer instead of writing it")
    return parser.parse_args(argv)


def run(args: argparse.Namespace, config: AppConfig) -> int:
    """Выполняет конвейер: загрузка → конвертация → линии → масштаб → вывод."""
    image_service = ImageService()

    if args.new:
        width, height = args.new
        image = image_of_size(width, height, _FORMATS[args.format])
    else:
        image = image_service.load(args.input)

    if args.convert:
        image = ProcessService().convert(image, _FORMATS[args.convert])

    for x0, y0, x1, y1 in args.line:
        image.draw_line((x0, y0), (x1, y1))

    if args.scale != 1:
        image = image.scaled(args.scale)

    if args.view:
        # fail before the window exists if the grid cannot be displayed
        ExportService().to_pil(image)

        from pnmlab.app import PnmViewerApp

        app = PnmViewerApp(config=config, image=image)
        app.mainloop()
        return 0

    image_service.save(image, args.output)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Разбирает аргументы, выполняет команду и возвращает код завершения."""
    try:
        config = AppConfig.from_env()
    except PnmError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    args = parse_args(argv, config)
    configure_logging(args.log_level)

    try:
        return run(args, config)
    except (PnmError, OSError) as exc:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
