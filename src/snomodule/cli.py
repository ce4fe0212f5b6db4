#!/usr/bin/env python3
"""
snomodule Extraction Runner

Converts an OWL functional syntax release into a filtered module.

Usage:
    snomodule-extract snomed.ofn --filter 404684003 --output module.ofn
    snomodule-extract snomed.ofn --filter 404684003 --config configs/extract.yaml --version-date 20260901
"""

import argparse
import logging
import os
import sys
from pathlib import Path

from .core.exceptions import ConversionError
from .extraction.assembler import load_copyright_notice
from .extraction.pipeline import ModuleExtractionPipeline
from .utils.config import load_config
from .utils.owl_parser import OWLParser

logger = logging.getLogger(__name__)


def main(argv=None):
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Extract the OWL module around one concept of a terminology release"
    )
    parser.add_argument(
        'input',
        type=str,
        help='OWL functional syntax file holding the full release ontology'
    )
    parser.add_argument(
        '--filter', '-f',
        type=str,
        default=None,
        help='Concept id of the module root; omit to convert the whole ontology'
    )
    parser.add_argument(
        '--output', '-o',
        type=str,
        default='module.ofn',
        help='Output file path'
    )
    parser.add_argument(
        '--config', '-c',
        type=str,
        default=None,
        help='Path to configuration file'
    )
    parser.add_argument(
        '--ontology-uri',
        type=str,
        default=None,
        help='Ontology IRI to use instead of the release header'
    )
    parser.add_argument(
        '--version-date',
        type=str,
        default=None,
        help='Release date used to build the version IRI'
    )
    parser.add_argument(
        '--reasoner', '-r',
        type=str,
        default=None,
        help='Classification backend'
    )
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose output'
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    try:
        config = load_config(args.config, overrides={
            'reasoner': args.reasoner,
            'ontology_uri': args.ontology_uri,
            'version_date': args.version_date,
        })
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        return 2

    logger.info(f"Loading release from {args.input}")
    try:
        release = OWLParser(strict=config.strict_parsing).parse(args.input)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to load release: {e}")
        return 1

    notice = load_copyright_notice(config.copyright_notice) if config.copyright_notice else None
    output_path = Path(args.output)
    partial_path = output_path.with_name(output_path.name + '.part')

    try:
        pipeline = ModuleExtractionPipeline(
            reasoner_type=config.reasoner_type,
            module_type=config.module_kind,
            copyright_notice=notice,
        )
        with open(partial_path, 'wb') as sink:
            result = pipeline.convert(
                release, sink,
                filter_id=args.filter,
                ontology_uri_override=config.ontology_uri,
                version_date=config.version_date,
            )
    except (ConversionError, OSError) as e:
        logger.error(f"Conversion failed: {e}")
        if e.__cause__ is not None:
            logger.error(f"Caused by: {e.__cause__!r}")
        if partial_path.exists():
            partial_path.unlink()
        return 1

    os.replace(partial_path, output_path)

    print("\n" + "="*60)
    print("EXTRACTION SUMMARY")
    print("="*60)
    if result.is_filtered:
        print(f"  Filter concept: {result.filter_class.iri}")
        print(f"  Seed signature: {len(result.signature)} entities")
        print(f"  Extracted axioms: {result.num_extracted}")
        print(f"  Added by gap repair: {result.num_repaired}")
    print(f"  Module size: {result.module_size} axioms")
    print(f"  Time: {result.time_seconds:.3f}s")
    print(f"  Memory: {result.memory_mb:.1f} MB")
    print(f"  Written to: {output_path}")
    print("="*60)
    return 0


if __name__ == '__main__':
    sys.exit(main())
