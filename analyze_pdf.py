#!/usr/bin/env python3
"""
PDF Link Analysis Script

Extracts links and cleaned page text from PDFs and saves one JSON per PDF.

Usage:
    python analyze_pdf.py resume.pdf
    python analyze_pdf.py ./inbox --output ./output --backend pypdf
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List

from loguru import logger
from tqdm import tqdm

from pdflinks import AnalysisPipeline, DocumentOpenError, format_response, load_config


def setup_logging(config: Dict[str, Any], verbose: bool = False):
    """Setup logging based on configuration."""
    log_config = config.get('logging', {})
    log_level = 'DEBUG' if verbose else log_config.get('level', 'INFO')
    log_file = log_config.get('log_file', 'logs/pdflinks.log')
    log_rotation = log_config.get('log_rotation', '10 MB')

    # Create logs directory
    Path(log_file).parent.mkdir(parents=True, exist_ok=True)

    logger.remove()  # Remove default handler
    logger.add(
        sys.stderr,
        level=log_level,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
    )
    logger.add(
        log_file,
        level=log_level,
        rotation=log_rotation,
        encoding='utf-8',
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"
    )


def find_pdfs(inputs: List[str]) -> List[Path]:
    """Expand files and directories into a sorted list of PDFs."""
    pdfs = []
    for item in inputs:
        path = Path(item)
        if path.is_dir():
            pdfs.extend(p for p in path.rglob('*') if p.is_file() and p.suffix.lower() == '.pdf')
        elif path.suffix.lower() == '.pdf':
            pdfs.append(path)
        else:
            logger.warning(f"Skipping {path}: not a PDF or directory")
    return sorted(set(pdfs))


def save_analysis(output_dir: Path, pdf_path: Path, response: Dict[str, Any]) -> Path:
    output_dir.mkdir(parents=True, exist_ok=True)
    output_path = output_dir / f"{pdf_path.stem}.json"
    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump(response, f, indent=2, ensure_ascii=False)
    return output_path


def main() -> int:
    parser = argparse.ArgumentParser(
        description='Extract links and text from PDFs with unreliable text layout',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python analyze_pdf.py resume.pdf
  python analyze_pdf.py ./inbox --output ./output
  python analyze_pdf.py cv.pdf --backend pdfplumber --verbose
        """
    )
    parser.add_argument('inputs', nargs='+', help='PDF files or directories containing PDFs')
    parser.add_argument('--config', type=str, default='config.yaml',
                        help='Path to configuration file (default: config.yaml)')
    parser.add_argument('--output', '-o', default=None,
                        help='Output directory for JSON results (overrides config)')
    parser.add_argument('--backend', '-b', choices=['pymupdf', 'pypdf', 'pdfplumber'], default=None,
                        help='PDF library to use (overrides config)')
    parser.add_argument('--parallel', '-p', action='store_true',
                        help='Process pages of each PDF in parallel')
    parser.add_argument('--workers', '-w', type=int, default=None,
                        help='Number of page workers')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Enable verbose logging')
    args = parser.parse_args()

    overrides: Dict[str, Any] = {}
    if args.backend:
        overrides.setdefault('pdf', {})['backend'] = args.backend
    if args.parallel:
        overrides.setdefault('pipeline', {})['parallel'] = True
    if args.workers:
        overrides.setdefault('pipeline', {})['max_workers'] = args.workers
    if args.output:
        overrides.setdefault('output', {})['directory'] = args.output

    config = load_config(args.config, overrides=overrides)
    setup_logging(config, verbose=args.verbose)

    pdfs = find_pdfs(args.inputs)
    if not pdfs:
        logger.error("No PDFs to process")
        return 1

    pipeline = AnalysisPipeline(config=config)
    output_dir = Path(config['output']['directory'])

    failed = 0
    total_links = 0
    for pdf_path in tqdm(pdfs, desc="Analyzing PDFs", unit="pdf", disable=len(pdfs) < 2):
        try:
            result = pipeline.analyze_file(pdf_path)
        except DocumentOpenError as e:
            logger.error(f"Error analyzing PDF: {e}")
            failed += 1
            continue

        output_path = save_analysis(output_dir, pdf_path, format_response(result))
        total_links += len(result.links)
        logger.info(f"{pdf_path.name}: {len(result.links)} links, {result.page_count} pages -> {output_path}")

    print("\n" + "=" * 60)
    print("ANALYSIS COMPLETE")
    print("=" * 60)
    print(f"   PDFs analyzed: {len(pdfs) - failed}/{len(pdfs)}")
    print(f"   Links found:   {total_links}")
    print(f"   Output:        {output_dir}")
    print("=" * 60)

    return 1 if failed == len(pdfs) else 0


if __name__ == "__main__":
    sys.exit(main())
