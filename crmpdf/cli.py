import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import find_dotenv, load_dotenv

from .config import load_config
from .errors import CrmPdfError
from .messages import MESSAGES, get_message
from .orchestrator import run_pdf_pipeline
from .types import PdfRequest

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"

EXAMPLES = """examples:
  crmpdf pdf -u user@org.com -d ./templates -t contact.html -o ./contact.pdf -s contact \\
      -q "select Title, FirstName, LastName, Account.Name from Contact where Id='00380000023TUDeAAO'"
  crmpdf pdf -u user@org.com -d ../templates -t opportunity.html -o ./opportunity.pdf -f ./queries.json
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="crmpdf", description=MESSAGES["commandDescription"])
    sub = parser.add_subparsers(dest="command", required=True)

    pdf = sub.add_parser(
        "pdf",
        description=MESSAGES["commandDescription"],
        epilog=EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    pdf.add_argument("-u", "--targetusername", required=True, help=MESSAGES["usernameFlagDescription"])
    pdf.add_argument("-d", "--template-dir", required=True, help=MESSAGES["templateDirFlagDescription"])
    pdf.add_argument("-t", "--template", required=True, help=MESSAGES["templateFlagDescription"])
    pdf.add_argument("-o", "--output", required=True, help=MESSAGES["outputFlagDescription"])
    pdf.add_argument("-s", "--sobject", help=MESSAGES["sobjectFlagDescription"])
    pdf.add_argument("-q", "--query", help=MESSAGES["queryFlagDescription"])
    pdf.add_argument("-f", "--query-file", help=MESSAGES["queryFileFlagDescription"])
    pdf.add_argument("--allow-empty", action="store_true", help=MESSAGES["allowEmptyFlagDescription"])
    pdf.add_argument("--json", action="store_true", help="format output as JSON")
    pdf.add_argument(
        "--loglevel",
        default="WARNING",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="logging level (default: WARNING)",
    )
    return parser


def _request_from_args(args: argparse.Namespace) -> PdfRequest:
    return PdfRequest(
        username=args.targetusername,
        template_dir=Path(args.template_dir),
        template=args.template,
        output=Path(args.output),
        sobject=args.sobject,
        query=args.query,
        query_file=Path(args.query_file) if args.query_file is not None else None,
    )


def _print_error(name: str, exc: Exception, as_json: bool) -> None:
    if as_json:
        print(json.dumps({"status": 1, "name": name, "message": str(exc)}), file=sys.stderr)
    else:
        print(f"Error: {exc}", file=sys.stderr)


def main(argv: Optional[List[str]] = None) -> int:
    # Charger .env avant toute lecture d'os.getenv (config/services)
    load_dotenv(find_dotenv(usecwd=True), override=False)

    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.loglevel, format=LOG_FORMAT)

    try:
        cfg = load_config(allow_empty=args.allow_empty)
        report = asyncio.run(run_pdf_pipeline(_request_from_args(args), cfg))
    except KeyboardInterrupt:
        print("Interrupted.", file=sys.stderr)
        return 130
    except CrmPdfError as e:
        _print_error(e.name, e, args.json)
        return 1
    except Exception as e:
        # Erreur inattendue : même sortie que les erreurs connues, sans traceback
        logger.debug("Erreur inattendue", exc_info=True)
        _print_error(type(e).__name__, e, args.json)
        return 1

    if args.json:
        print(json.dumps({"status": 0, "result": {"success": True, "output": report.output}}))
    else:
        print(get_message("successMessage", report.output))
    return 0


if __name__ == "__main__":
    sys.exit(main())
