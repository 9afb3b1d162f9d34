from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from typing import List, Optional

from . import ppm, steg
from .analysis import chi_square_lsb, flipped_bits, region_stats
from .errors import StegError
from .lsb import capacity_bytes

log = logging.getLogger(__name__)


def _write_bytes(path: str, data: bytes) -> None:
    if path == "-":
        sys.stdout.buffer.write(data)
        sys.stdout.buffer.flush()
    else:
        with open(path, "wb") as f:
            f.write(data)


def build_arg_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="ppmsteg", description="Hide messages in P6 PPM images")
    ap.add_argument('-v', '--verbose', action='store_true', help='debug logging')
    sub = ap.add_subparsers(dest='command', required=True)

    hide = sub.add_parser('hide', help='hide MESSAGE in IMAGE')
    hide.add_argument('image', help='cover PPM image')
    hide.add_argument('message', help='text to hide')
    hide.add_argument('--out', default='-', help='output PPM path (default: stdout)')
    hide.add_argument('--encoding', default='utf-8', help='encoding used to turn MESSAGE into bytes')
    hide.add_argument('--png', default=None, help='optional lossless PNG copy of the output')
    hide.add_argument('--report', default=None, help='optional JSON report path')
    hide.add_argument('--figdir', default=None, help='optional directory to save figures')

    unhide = sub.add_parser('unhide', help='print the message hidden in IMAGE')
    unhide.add_argument('image', help='PPM image carrying a message')
    unhide.add_argument('--encoding', default='utf-8', help='encoding used to decode the message')

    info = sub.add_parser('info', help='show image meta-information and capacity')
    info.add_argument('image', help='PPM image')
    return ap


def run_hide(args) -> None:
    cover = ppm.read_ppm(args.image)
    try:
        message = args.message.encode(args.encoding)
    except UnicodeEncodeError as exc:
        raise ValueError(f"message cannot be encoded as {args.encoding}: {exc}") from exc
    stego = steg.hide(cover, message)
    _write_bytes(args.out, ppm.serialize(stego))

    if args.png:
        ppm.to_pil(stego).save(args.png, format='PNG')

    if args.figdir:
        from .viz import plot_flipped_bits, plot_lsb_bits

        os.makedirs(args.figdir, exist_ok=True)
        plot_lsb_bits(stego, os.path.join(args.figdir, 'lsb_bits.png'))
        plot_flipped_bits(cover, stego, os.path.join(args.figdir, 'flipped.png'))

    if args.report:
        carrier = 8 * (len(steg.STEG_MAGIC) + len(message) + 1)
        report = {
            'input': args.image,
            'output': args.out,
            **ppm.meta(cover),
            'capacity_bytes': capacity_bytes(len(cover.pixel_bytes)),
            'used_bytes': carrier // 8,
            'message_len': len(message),
            **region_stats(stego),
            **flipped_bits(cover, stego),
            'chi_carrier_before': chi_square_lsb(cover, 0, carrier),
            'chi_carrier_after': chi_square_lsb(stego, 0, carrier),
        }
        with open(args.report, 'w', encoding='utf-8') as f:
            json.dump(report, f, ensure_ascii=False, indent=2)
    log.info("hid %d bytes from %s into %s", len(message), args.image, args.out)


def run_unhide(args) -> None:
    image = ppm.read_ppm(args.image)
    data = steg.unhide(image)
    try:
        text = data.decode(args.encoding)
    except UnicodeDecodeError:
        text = data.decode(args.encoding, errors='replace')
        log.warning("%s: message is not valid %s", args.image, args.encoding)
    print(text)


def run_info(args) -> None:
    image = ppm.read_ppm(args.image)
    out = {
        'id': image.id,
        **ppm.meta(image),
        'capacity_bytes': capacity_bytes(len(image.pixel_bytes)),
        'max_message_len': steg.max_message_length(image),
        'has_message': steg.check_magic(image),
    }
    print(json.dumps(out, indent=2))


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format='%(asctime)s %(levelname)s %(name)s - %(message)s')

    commands = {'hide': run_hide, 'unhide': run_unhide, 'info': run_info}
    try:
        commands[args.command](args)
    except StegError as exc:
        print(exc, file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"cannot read/write {exc.filename}: {exc.strerror}", file=sys.stderr)
        return 1
    except ValueError as exc:
        parser.error(str(exc))
    return 0


if __name__ == '__main__':
    sys.exit(main())
