from __future__ import annotations

import argparse
import io
import time
from pathlib import Path

import requests
from PIL import Image, ImageDraw


def make_image() -> bytes:
    img = Image.new('RGB', (256, 256), 'white')
    draw = ImageDraw.Draw(img)
    draw.ellipse((48, 48, 208, 208), fill='orange')
    out = io.BytesIO()
    img.save(out, format='JPEG')
    return out.getvalue()


def main() -> None:
    parser = argparse.ArgumentParser(description='Send one image through a running server and save the PNG.')
    parser.add_argument('--url', default='http://127.0.0.1:8000')
    parser.add_argument('--image', type=Path, help='image to upload (defaults to a generated JPEG)')
    parser.add_argument('--out', type=Path, default=Path('smoke-no-background.png'))
    args = parser.parse_args()

    if args.image:
        name, data = args.image.name, args.image.read_bytes()
        content_type = f"image/{args.image.suffix.lstrip('.').lower().replace('jpg', 'jpeg') or 'png'}"
    else:
        name, data, content_type = 'smoke.jpg', make_image(), 'image/jpeg'

    started = time.time()
    resp = requests.post(
        f"{args.url}/api/remove-bg/download",
        files={'file': (name, data, content_type)},
        timeout=120,
    )
    resp.raise_for_status()
    args.out.write_bytes(resp.content)

    elapsed = time.time() - started
    print({'saved': str(args.out), 'bytes': len(resp.content), 'elapsed_sec': round(elapsed, 2)})


if __name__ == '__main__':
    main()
