from __future__ import annotations

import argparse
import logging
import sys
from datetime import date
from pathlib import Path

from satr.services.aggregator import ReportField
from satr.services.exceptions import ExtractionError
from satr.services.extraction import aggregate_report, extract_all
from satr.services.invoice_filter import InvoiceFilter, SubjectKind
from satr.utils.formatters import format_mxn, format_timestamp
from satr.utils.validators import validate_date, validate_date_range, validate_rfc

_RULE = "-" * 64

_SETTINGS_EXAMPLE = {
    "invoices_dir": "~/facturas",
}


def _date_arg(value: str) -> date:
    try:
        return validate_date(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def _rfc_arg(value: str) -> str:
    try:
        return validate_rfc(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def _add_query_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "subject",
        choices=[k.value for k in SubjectKind],
        help="Buscar por RFC del emisor o del receptor.",
    )
    parser.add_argument("rfc", metavar="RFC", type=_rfc_arg, help="RFC del emisor o receptor.")


def _add_window_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-s",
        "--date-start",
        type=_date_arg,
        help="Solo se incluirán facturas desde esta fecha (YYYY-MM-DD). "
        "Por defecto, la fecha más antigua existente.",
    )
    parser.add_argument(
        "-e",
        "--date-end",
        type=_date_arg,
        help="Solo se incluirán facturas hasta esta fecha (YYYY-MM-DD). "
        "Por defecto, el momento actual.",
    )
    parser.add_argument(
        "path",
        nargs="?",
        type=Path,
        metavar="PATH",
        help="Carpeta desde donde se extraerán recursivamente las facturas.",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="satr",
        description="Reportes y listados de facturas CFDI en carpetas y archivos zip.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Mostrar mensajes de depuración.")
    sub = parser.add_subparsers(dest="command", required=True)

    report = sub.add_parser("report", help="Imprime un reporte de las facturas seleccionadas.")
    _add_query_args(report)
    report.add_argument(
        "field",
        choices=[f.value for f in ReportField],
        help="Campo a sumar.",
    )
    report.add_argument(
        "-U",
        "--unformatted",
        action="store_true",
        help="Imprime solo el número resultante.",
    )
    _add_window_args(report)

    ls = sub.add_parser("ls", help="Lista una breve descripción de las facturas seleccionadas.")
    _add_query_args(ls)
    _add_window_args(ls)

    sub.add_parser("init", help="Crea un settings.yaml de ejemplo.")
    return parser


def _invoice_filter(args: argparse.Namespace) -> InvoiceFilter:
    validate_date_range(args.date_start, args.date_end)
    return InvoiceFilter.build(
        SubjectKind(args.subject),
        args.rfc,
        args.date_start,
        args.date_end,
    )


def _root(args: argparse.Namespace) -> Path:
    if args.path is not None:
        return args.path
    from satr.config import get_invoices_dir

    return get_invoices_dir()


def _run_report(args: argparse.Namespace) -> None:
    result = aggregate_report(_root(args), _invoice_filter(args), ReportField(args.field))
    if args.unformatted:
        print(result)
        return
    print(format_mxn(result))


def _run_list(args: argparse.Namespace) -> None:
    invoices = extract_all(_root(args), _invoice_filter(args))

    print(_RULE)
    print("Fecha               | Emisor        | Receptor      | Total")
    print(_RULE)
    for inv in invoices:
        print(
            f"{format_timestamp(inv.issued_at)} | {inv.issuer.rfc:<13} | "
            f"{inv.recipient.rfc:<13} | {format_mxn(inv.total())}"
        )
        for n, item in enumerate(inv.line_items, start=1):
            print(f"  {n}.- {item.description} - {format_mxn(item.value)}")
        print()


def _init_config() -> None:
    """Write an example settings.yaml to the config directory."""
    from satr.config import SETTINGS_FILE, get_config_dir, save_settings

    path = get_config_dir() / SETTINGS_FILE
    if path.exists():
        print(f"  ya existe: {path}")
        return
    save_settings(_SETTINGS_EXAMPLE)
    print(f"  creado: {path}")
    print("Edite invoices_dir con la carpeta donde guarda sus facturas.")


def main(argv: list[str] | None = None) -> None:
    """Entry point for the satr CLI."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    from satr.config import load_env

    load_env()

    if args.command == "init":
        _init_config()
        return

    try:
        if args.command == "report":
            _run_report(args)
        else:
            _run_list(args)
    except ExtractionError as e:
        print(f"Error al obtener facturas: {e}", file=sys.stderr)
        sys.exit(1)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
