#!/usr/bin/env python3
"""
Main pipeline script for VCF origin analysis.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from vcf_ancestry import (
    AnalysisConfig,
    MarkerReferenceTable,
    build_summary,
    estimate_origins,
    load_config,
)
from vcf_ancestry.estimator import method_ids
from vcf_ancestry.exceptions import AncestryError
from vcf_ancestry.report import generate_report
from vcf_ancestry.visualization import plot_origins


def run_ancestry_analysis(vcf_file: str,
                          method: Optional[str] = None,
                          config: Optional[AnalysisConfig] = None,
                          output_file: Optional[str] = None,
                          json_file: Optional[str] = None,
                          plot_file: Optional[str] = None):
    """
    Run the analysis pipeline on one VCF file.

    Args:
        vcf_file: Path to the VCF file (plain or gzip-compressed)
        method: Decoding method id; autosomal analysis when omitted
        config: Analysis parameters
        output_file: Path to save the text report (optional)
        json_file: Path to save the origins as JSON (optional)
        plot_file: Path to save a bar chart (optional)

    Returns:
        Dictionary with the result, summary and report
    """
    config = config or AnalysisConfig()

    print("=" * 60)
    print("VCF ORIGIN ANALYSIS PIPELINE")
    print("=" * 60)
    print()

    data = Path(vcf_file).read_bytes()
    print(f"✓ Read {len(data):,} bytes from {vcf_file}")

    reference = None
    stats = None
    if method in (None, 'autosomal_analysis'):
        reference = (MarkerReferenceTable.from_csv(config.panel_path)
                     if config.panel_path else MarkerReferenceTable.default())
        stats = reference.get_stats()
        print(f"✓ Marker panel: {stats.loaded_markers} markers")

    result = estimate_origins(data, method=method, reference=reference, config=config)
    summary = build_summary(Path(vcf_file).name, result, data)
    report = generate_report(result, stats)

    print("\n")
    print(report)
    print(summary)

    if output_file:
        with open(output_file, 'w', encoding='utf-8') as f:
            f.write(report)
        print(f"\n✓ Report saved to {output_file}")

    if json_file:
        payload = result.to_dict()
        payload['summary'] = summary
        with open(json_file, 'w', encoding='utf-8') as f:
            json.dump(payload, f, ensure_ascii=False, indent=2)
        print(f"✓ JSON saved to {json_file}")

    if plot_file:
        plot_origins(result.portions, plot_file)
        print(f"✓ Chart saved to {plot_file}")

    return {
        'result': result,
        'summary': summary,
        'report': report,
    }


def main(argv: Optional[List[str]] = None):
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description='Estimate regional origin or haplogroups from a VCF file',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Autosomal origin estimate
  python analyze_ancestry.py sample.vcf

  # Paternal haplogroup
  python analyze_ancestry.py sample.vcf.gz --method y_haplogroup

  # Custom marker panel, English labels, report and chart
  python analyze_ancestry.py sample.vcf --panel panel.csv --locale en \\
      --output report.txt --plot origins.png
        """
    )

    parser.add_argument(
        'vcf_file',
        help='Path to a single-sample VCF file (plain or gzip-compressed)'
    )

    parser.add_argument(
        '--method',
        choices=method_ids(),
        default=None,
        help='Decoding method (default: autosomal_analysis)'
    )

    parser.add_argument(
        '--panel',
        help='Path to a marker panel CSV replacing the packaged panel'
    )

    parser.add_argument(
        '--config',
        help='Path to a TOML configuration file with an [analysis] table'
    )

    parser.add_argument(
        '--locale',
        choices=['ru', 'en'],
        default=None,
        help='Language of the region labels (default: ru)'
    )

    parser.add_argument(
        '--output',
        help='Path to save the text report'
    )

    parser.add_argument(
        '--json',
        help='Path to save the origins as JSON'
    )

    parser.add_argument(
        '--plot',
        help='Path to save a bar chart of the origins'
    )

    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Enable debug logging'
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )

    if not Path(args.vcf_file).exists():
        print(f"Error: VCF file not found: {args.vcf_file}")
        sys.exit(1)

    try:
        config = load_config(Path(args.config)) if args.config else AnalysisConfig()
        config = config.with_overrides(locale=args.locale,
                                       panel_path=Path(args.panel) if args.panel else None)

        run_ancestry_analysis(
            vcf_file=args.vcf_file,
            method=args.method,
            config=config,
            output_file=args.output,
            json_file=args.json,
            plot_file=args.plot
        )
    except (AncestryError, OSError) as e:
        print(f"\n✗ Analysis failed: {e}")
        sys.exit(1)


if __name__ == '__main__':
    main()
