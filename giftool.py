import argparse
import logging
import os
import math
import typing as t

import gifblocks
from gifblocks import Colortable, Gif, GifStreamException
from PIL import Image


VALID_MODES = [
    "info",
    "reverse",
    "resize",
    "palette",
    "help"
]


def prepare_argparser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=(
        "A tool for inspecting and rewriting GIF files block by block. Set "
        "mode with --mode/-m. Any arguments given that do not apply to the "
        "current mode will be ignored."
    ))

    parser.add_argument("--mode", "-m", type=str, choices=VALID_MODES, default="info", help=(
        "Set operation mode. Default is \"info\". Use mode \"help\" for more "
        "information on each mode."
    ))

    parser.add_argument("--path", "-i", type=str, default=None, help=(
        "The path to the GIF file to operate on."
    ))

    parser.add_argument("--output", "-o", type=str, default=None, help=(
        "Where reverse and resize modes write the new GIF."
    ))

    parser.add_argument("--width", type=int, default=None, help=(
        "New logical screen width for resize mode."
    ))
    parser.add_argument("--height", type=int, default=None, help=(
        "New logical screen height for resize mode."
    ))

    parser.add_argument("--verbose", "-v", action="store_true", help=(
        "Explicitly print long lists of data, which are otherwise omitted for "
        "brevity."
    ))
    parser.add_argument("--add-local", dest="add_local", action="store_true", help=(
        "Add local color tables to the output of palette mode. This will "
        "create a directory instead of a single image."
    ))
    parser.add_argument("--debug", action="store_true", help=(
        "Log every block as it is decoded."
    ))

    return parser


MODE_HELP = """Available modes:
help -
    Print this help text.

info -
    The default mode. Prints the blocks parsed from the GIF file passed
    through --path.

reverse -
    Write a copy of the GIF with its frames in reverse order to --output.

resize -
    Write a copy of the GIF with the logical screen set to --width and
    --height to --output. Frames are not scaled, only the canvas changes.

palette -
    Generate an image visualizing the palette of a GIF file. By default this
    only generates an image for the global color palette, but local palettes
    may be added to the output with --add-local. This will create a directory
    containing all color tables in the GIF.
"""


def gif_name(path: str) -> str:
    return ".".join(os.path.basename(path).split(".")[:-1])


def mode_help() -> None:
    print(MODE_HELP)


def mode_info(gif: Gif, args: argparse.Namespace) -> None:
    print("{}:".format(args.path))
    gif.pretty_print(verbose=args.verbose)


def mode_reverse(gif: Gif, parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    if args.output is None:
        parser.error("Must specify --output for reverse mode.")

    gifblocks.save(gifblocks.reverse(gif), args.output)
    print("Reversed {} frames written to {}".format(len(gif.images), args.output))


def mode_resize(gif: Gif, parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    if args.output is None:
        parser.error("Must specify --output for resize mode.")

    if args.width is None or args.height is None:
        parser.error("Must specify --width and --height for resize mode.")

    try:
        resized = gifblocks.resize(gif, args.width, args.height)
    except ValueError as e:
        parser.error(str(e))

    gifblocks.save(resized, args.output)
    print("Screen resized to {}x{}, written to {}".format(args.width, args.height, args.output))


# unused swatches are "missing texture purple"
PALETTE_BACKGROUND = (249, 11, 243)
SWATCH_SIZE = 25


def palette_image(colortable: Colortable, swatch_size: int = SWATCH_SIZE) -> Image.Image:
    """
    Render a color table as a near-square grid of swatch_size x swatch_size squares, in table order.
    """
    columns = math.ceil(math.sqrt(len(colortable)))
    rows = math.ceil(len(colortable) / columns)

    # one pixel per entry, then blown up so every pixel becomes a swatch
    grid = Image.new("RGB", (columns, rows), color=PALETTE_BACKGROUND)
    grid.putdata([tuple(color) for color in colortable])

    return grid.resize((columns * swatch_size, rows * swatch_size), Image.NEAREST)


def palette_tables(gif: Gif, add_local: bool) -> t.Dict[str, Colortable]:
    """
    Map output file names to the color tables to render. Local tables are named after their frame index,
    zero padded to the width of the last index so the names sort in frame order.
    """
    tables = {}

    if gif.colortable:
        tables["__global.png"] = gif.colortable

    if add_local:
        width = len(str(len(gif.images) - 1))
        for n, img in enumerate(gif.images):
            if img.colortable is not None:
                tables[str(n).zfill(width) + ".png"] = img.colortable

    return tables


def mode_palette(gif: Gif, parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    name = gif_name(args.path)
    tables = palette_tables(gif, args.add_local)

    if not tables:
        parser.error("GIF has no color tables. Abort.")

    if list(tables) == ["__global.png"]:
        if args.add_local:
            print("warn: no local color tables, only outputting global table.")

        output_name = name + "_palette.png"
        palette_image(gif.colortable).save(output_name)
        print("Palette written to {}".format(output_name))
        return

    if "__global.png" not in tables:
        print("warn: no global colortable")

    output_dir = name + "_palette"

    try:
        os.makedirs(output_dir)
    except FileExistsError:
        msg = "{} already exists, please delete or move and try again"
        parser.error(msg.format(output_dir))

    for filename, table in tables.items():
        palette_image(table).save(os.path.join(output_dir, filename))

    print("{} palettes written to {}".format(len(tables), output_dir))


def main(argv=None) -> None:
    parser = prepare_argparser()
    args = parser.parse_args(argv)

    if args.mode == "help":
        mode_help()
        parser.exit()

    if args.path is None:
        parser.error("Must specify --path for non-help mode.")

    if args.debug:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    try:
        gif = gifblocks.load(args.path)
    except GifStreamException as e:
        parser.exit(1, "{}: {}\n".format(args.path, e))
    except OSError as e:
        parser.exit(1, "{}: could not read file: {}\n".format(args.path, e))

    if args.mode == "info":
        mode_info(gif, args)
    elif args.mode == "reverse":
        mode_reverse(gif, parser, args)
    elif args.mode == "resize":
        mode_resize(gif, parser, args)
    elif args.mode == "palette":
        mode_palette(gif, parser, args)
    else:
        raise Exception("internal error: invalid mode")


if __name__ == "__main__":
    main()
