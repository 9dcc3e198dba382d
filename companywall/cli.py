# companywall/cli.py
# -*- coding: utf-8 -*-

"""
Command-line interface for the companywall package
"""

import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

from companywall.batch_worker import BatchWorker
from companywall.client import CompanyWallClient
from companywall.config import LOG_DIR, STORE_DIR
from companywall.constants import (
    MSG_BATCH_CANCELLED,
    MSG_BATCH_COMPLETE,
    MSG_FOUND,
    MSG_NO_EXCEL_DATA,
    MSG_NOT_FOUND,
    MSG_SEARCHING,
)
from companywall.excel_service import export_results_to_excel, read_queries_from_excel
from companywall.exceptions import FileError, ValidationError
from companywall.formatters import format_company_details
from companywall.store import FileDocumentStore, MemoryDocumentStore
from companywall.utils import sanitize_filename, validate_excel_file

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False, log_to_file: bool = False):
    """Configure logging for the CLI"""
    level = logging.DEBUG if verbose else logging.INFO
    handlers = [logging.StreamHandler()]
    if log_to_file:
        log_dir = Path(LOG_DIR)
        log_dir.mkdir(exist_ok=True)
        log_file = log_dir / f"companywall_{datetime.now().strftime('%Y%m%d')}.log"
        handlers.append(logging.FileHandler(log_file, encoding='utf-8'))
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers
    )


def build_client(store_dir: Optional[str] = None, no_cache: bool = False, known: bool = False) -> CompanyWallClient:
    store = MemoryDocumentStore() if no_cache else FileDocumentStore(store_dir or STORE_DIR)
    return CompanyWallClient(store=store, use_known_companies=known)


def search_command(
    query: str,
    store_dir: Optional[str] = None,
    no_cache: bool = False,
    known: bool = False
) -> int:
    """
    Look up one company by name or OIB.

    Returns:
        0 on success, 1 when nothing was found or on error
    """
    try:
        client = build_client(store_dir, no_cache, known)
        record = client.search(query)
        client.flush()

        if record is None:
            print(MSG_NOT_FOUND.format(query=query))
            return 1

        print(MSG_FOUND.format(name=record.name, oib=record.oib))
        print()
        print(format_company_details(record))
        return 0

    except ValidationError as e:
        print(f"❌ Neispravan upit: {e.message}")
        return 1
    except Exception as e:
        logger.exception("Unexpected error")
        print(f"❌ Neočekivana greška: {e}")
        return 1


def batch_command(
    input_file: str,
    output_file: Optional[str] = None,
    store_dir: Optional[str] = None,
    no_cache: bool = False,
    known: bool = False
) -> int:
    """
    Look up every company listed in an Excel file.

    Args:
        input_file: Input .xlsx with an OIB or company-name column
        output_file: Output .xlsx (defaults to <input>_results.xlsx)

    Returns:
        0 on success, 1 on error
    """
    try:
        input_path = validate_excel_file(input_file)

        if not output_file:
            output_file = str(input_path.parent / f"{input_path.stem}_results.xlsx")
        else:
            output_file = sanitize_filename(output_file)
            if not output_file.endswith('.xlsx'):
                output_file += '.xlsx'

        print(f"📖 Čitam datoteku: {input_path}")
        queries, _, column_name = read_queries_from_excel(str(input_path))

        if not queries:
            print(MSG_NO_EXCEL_DATA)
            return 1

        print(f"📊 Stupac '{column_name}': {len(queries)} upita\n")

        client = build_client(store_dir, no_cache, known)
        worker = BatchWorker(client)

        def on_progress(idx: int, total: int, query: str):
            print(MSG_SEARCHING.format(query=query, idx=idx, total=total), end=" ", flush=True)

        completed = []

        def on_result(row):
            completed.append(row)
            print(f"❌ {row['Greška']}" if row.get("Greška") else "✅")

        try:
            results = worker.process_queries(
                queries,
                progress_callback=on_progress,
                result_callback=on_result
            )
        except KeyboardInterrupt:
            print()
            print(MSG_BATCH_CANCELLED.format(completed=len(completed), total=len(queries)))
            if completed:
                export_results_to_excel(completed, output_file)
                print(f"💾 Djelomični rezultati: {output_file}")
            return 1
        finally:
            client.flush()

        print(f"\n💾 Zapisujem rezultate u: {output_file}")
        export_results_to_excel(
            results,
            output_file,
            metadata={
                "timestamp": datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
                "source": str(input_path),
                "count": len(results),
            }
        )

        print(MSG_BATCH_COMPLETE.format(total=len(results), found=worker.found))
        return 0

    except FileError as e:
        print(f"❌ Greška datoteke: {e.message}")
        return 1
    except ValidationError as e:
        print(f"❌ Greška provjere: {e.message}")
        return 1
    except Exception as e:
        logger.exception("Unexpected error")
        print(f"❌ Neočekivana greška: {e}")
        return 1


def main(argv=None):
    """Entry point for the CLI"""
    parser = argparse.ArgumentParser(
        description="Pretraga tvrtki na companywall.hr",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Primjeri:
  %(prog)s search --query "29756659895"
  %(prog)s search --query "Infobip"
  %(prog)s batch ulaz.xlsx izlaz.xlsx
  %(prog)s batch ulaz.xlsx  # izlaz: ulaz_results.xlsx
        """
    )

    parser.add_argument('-v', '--verbose', action='store_true', help='Detaljni zapis')
    parser.add_argument('--log-file', action='store_true', help=f'Zapis i u {LOG_DIR}/')
    parser.add_argument('--store-dir', default=None, help=f'Direktorij predmemorije (zadano: {STORE_DIR})')
    parser.add_argument('--no-cache', action='store_true', help='Ne koristi predmemoriju na disku')
    parser.add_argument('--known', action='store_true', help='Ugrađeni podaci za poznate tvrtke')

    subparsers = parser.add_subparsers(dest='command', help='Naredba')

    search_parser = subparsers.add_parser('search', help='Pretraga jedne tvrtke')
    search_parser.add_argument('--query', '-q', required=True, help='OIB ili naziv tvrtke')

    batch_parser = subparsers.add_parser('batch', help='Skupna pretraga iz Excel datoteke')
    batch_parser.add_argument('input_file', help='Ulazna Excel datoteka')
    batch_parser.add_argument(
        'output_file',
        nargs='?',
        default=None,
        help='Izlazna Excel datoteka (zadano: <ulaz>_results.xlsx)'
    )

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    setup_logging(args.verbose, args.log_file)

    if args.command == 'search':
        return search_command(args.query, args.store_dir, args.no_cache, args.known)
    elif args.command == 'batch':
        return batch_command(args.input_file, args.output_file, args.store_dir, args.no_cache, args.known)
    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
