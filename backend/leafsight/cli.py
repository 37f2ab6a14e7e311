"""LeafSight command line — signature extraction, classification, reference building.

Usage:
    leafsight signature leaf.csv [--harmonics 30]
    leafsight classify leaf.csv --db data.csv [-k 5]
    leafsight add leaf.csv --db data.csv --label "Acer campestre"
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from leafsight.config import settings
from leafsight.engine.context import ClassificationRequest
from leafsight.engine.contour import load_contour
from leafsight.engine.diagnostics import format_report
from leafsight.engine.efd import extract_signature
from leafsight.engine.measurements import shape_measurements
from leafsight.engine.moments import hu_descriptor
from leafsight.engine.pipeline import ClassificationPipeline
from leafsight.engine.reference import CsvReferenceStore, ReferenceEntry


def _signature(args: argparse.Namespace) -> int:
    contour = load_contour(args.contour)
    sig = extract_signature(contour, args.harmonics)
    print(
        json.dumps(
            {
                "n_points": sig.coefficients.n_points,
                "normalized": [round(float(v), 6) for v in sig.normalized],
                "hu": [round(float(v), 6) for v in hu_descriptor(contour)],
                "measurements": shape_measurements(contour),
            },
            indent=2,
        )
    )
    return 0


def _classify(args: argparse.Namespace) -> int:
    references = CsvReferenceStore(args.db).load()
    config = settings.classifier_config()
    pipeline = ClassificationPipeline(references, config)
    result = pipeline.run(
        ClassificationRequest(
            contour=load_contour(args.contour),
            n_harmonics=args.harmonics,
            hu=args.hu,
            k=args.k,
        )
    )
    print(format_report(result))
    return 0


def _add(args: argparse.Namespace) -> int:
    contour = load_contour(args.contour)
    sig = extract_signature(contour, args.harmonics)
    store = CsvReferenceStore(args.db)
    store.append(
        ReferenceEntry.create(
            label=args.label,
            efd=sig.normalized,
            hu=hu_descriptor(contour),
            measurements=shape_measurements(contour),
        )
    )
    print(f"Added '{args.label}' to {args.db}")
    return 0


def _float_list(text: str) -> list[float]:
    try:
        return [float(v) for v in text.split(",")]
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"expected comma-separated numbers: {text!r}") from e


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="leafsight", description="Leaf contour classification (EFD + k-NN)"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    def contour_args(p: argparse.ArgumentParser) -> None:
        p.add_argument("contour", help="Contour file: x,y per line, optional header")
        p.add_argument(
            "--harmonics",
            type=int,
            default=settings.n_harmonics,
            help=f"Harmonic count (default {settings.n_harmonics})",
        )

    p_sig = sub.add_parser("signature", help="Print the normalized EFD signature")
    contour_args(p_sig)
    p_sig.set_defaults(func=_signature)

    p_cls = sub.add_parser("classify", help="Classify a contour against a reference table")
    contour_args(p_cls)
    p_cls.add_argument("--db", default=settings.reference_db or None, required=not settings.reference_db)
    p_cls.add_argument("-k", type=int, default=settings.default_k, help="Nearest neighbours")
    p_cls.add_argument(
        "--hu",
        type=_float_list,
        default=None,
        help="Secondary descriptor as comma-separated floats (computed when omitted)",
    )
    p_cls.set_defaults(func=_classify)

    p_add = sub.add_parser("add", help="Append a contour to a reference table")
    contour_args(p_add)
    p_add.add_argument("--db", default=settings.reference_db or None, required=not settings.reference_db)
    p_add.add_argument("--label", required=True, help="Class label")
    p_add.set_defaults(func=_add)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    level = logging.DEBUG if args.verbose else getattr(
        logging, settings.leafsight_log_level.upper(), logging.INFO
    )
    logging.basicConfig(level=level, format="%(asctime)s %(name)s %(levelname)s %(message)s")

    try:
        return args.func(args)
    except (ValueError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
