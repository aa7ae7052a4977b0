#!/usr/bin/env python3
"""
HTML/CSS/JS compressor command line.

    html-compressor --level 2 --file page.html
    html-compressor --level 3 --content w < page.html
    html-compressor --level auto --dir site/ dist/ --gzip
"""

import argparse
import logging
import os
import sys

from . import api
from .config import CompressionConfig
from .gzip_html import gzip_directory, gzip_text
from .levels import AUTO, Level

STDIN_MARKER = "w"
SUFFIX_TYPES = {
    ".html": api.ContentType.HTML,
    ".htm": api.ContentType.HTML,
    ".css": api.ContentType.CSS,
    ".js": api.ContentType.JS,
}


def build_parser():
    parser = argparse.ArgumentParser(prog="html-compressor", description="Minify HTML, CSS and JavaScript")
    parser.add_argument("--level", help="compression level 1-3 or 'auto'")
    parser.add_argument("--content", help=f"text to compress ('{STDIN_MARKER}' reads stdin)")
    parser.add_argument("--file", help="file to compress")
    parser.add_argument("--dir", nargs=2, metavar=("INPUT_DIR", "OUTPUT_DIR"), help="compress every HTML/CSS/JS file in a directory")
    parser.add_argument("--type", default="HTML", help="content type: HTML, CSS or JS")
    parser.add_argument("--scope", choices=["scoped", "global"], help="hand JS to the external bundler with this scope")
    parser.add_argument("--gzip", action="store_true", help="gzip the output")
    parser.add_argument("--verbose", action="store_true", help="log delegation details")
    return parser


def fail(message):
    print(message)
    sys.exit(1)


def parse_level(value):
    if value.strip().lower() == AUTO:
        return AUTO
    try:
        return Level.parse(value)
    except ValueError:
        fail("Compressor level must be between 1 and 3.")


def read_input(args):
    if args.file:
        try:
            with open(args.file, 'r', encoding='utf-8') as f:
                return f.read()
        except OSError:
            fail(f"Failed to open file: {args.file}")
    if args.content == STDIN_MARKER:
        return sys.stdin.read()
    return args.content


def compress_directory(input_dir, output_dir, level, scope, config, gzip):
    """Compress every supported file in input_dir into output_dir."""
    if not os.path.isdir(input_dir):
        fail(f"Failed to open directory: {input_dir}")

    os.makedirs(output_dir, exist_ok=True)

    print("-- HTML minification:")
    for filename in sorted(os.listdir(input_dir)):
        content_type = SUFFIX_TYPES.get(os.path.splitext(filename)[1].lower())
        if content_type is None:
            continue

        input_path = os.path.join(input_dir, filename)
        output_path = os.path.join(output_dir, filename)

        with open(input_path, 'r', encoding='utf-8') as f:
            original = f.read()

        result = api.compress(original, level, content_type, scope, config)
        if result is None:
            print(f"  {filename}: skipped (compression failed)")
            continue

        with open(output_path, 'w', encoding='utf-8') as f:
            f.write(result.text)

        original_size = len(original.encode('utf-8'))
        reduction = (1 - result.length / original_size) * 100 if original_size > 0 else 0

        print(f"  {filename}: {original_size} -> {result.length} bytes ({reduction:.1f}% reduction)")

    if gzip:
        gzip_directory(output_dir, output_dir)


def main(argv=None):
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    if not args.level or not (args.content is not None or args.file or args.dir):
        fail("--level && --content/file is required")

    level = parse_level(args.level)
    try:
        content_type = api.ContentType.parse(args.type)
        config = CompressionConfig.from_env()
    except ValueError as exc:
        fail(str(exc))

    if args.dir:
        compress_directory(args.dir[0], args.dir[1], level, args.scope, config, args.gzip)
        return 0

    content = read_input(args)
    result = api.compress(content, level, content_type, args.scope, config)
    if result is None:
        fail("Compression failed.")

    if args.gzip:
        sys.stdout.buffer.write(gzip_text(result.text))
        sys.stdout.flush()
    else:
        print(result.text)
    return 0


if __name__ == '__main__':
    sys.exit(main())
