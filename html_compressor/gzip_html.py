"""
gzip encoding for minified output, including .gz companions for a directory.
"""

import gzip
import os

GZIP_SUFFIXES = (".html", ".css", ".js")


def gzip_text(text):
    return gzip.compress(text.encode("utf-8"), compresslevel=9)


def gzip_directory(input_dir, output_dir):
    """Write <name>.gz into output_dir for each HTML/CSS/JS file in input_dir."""
    os.makedirs(output_dir, exist_ok=True)

    written = []
    print("-- gzip compression:")
    for filename in sorted(os.listdir(input_dir)):
        if filename.endswith(GZIP_SUFFIXES):
            input_path = os.path.join(input_dir, filename)
            output_path = os.path.join(output_dir, filename + '.gz')

            with open(input_path, 'rb') as f_in:
                data = f_in.read()

            compressed = gzip.compress(data, compresslevel=9)

            with open(output_path, 'wb') as f_out:
                f_out.write(compressed)

            ratio = (1 - len(compressed) / len(data)) * 100 if data else 0
            print(f"  {filename}: {len(data)} -> {len(compressed)} bytes ({ratio:.1f}% reduction)")
            written.append(output_path)

    return written
