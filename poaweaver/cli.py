#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
Command-line interface for PoaWeaver.

This module provides the main CLI entry point and all subcommands for
building partial-order alignment graphs and exporting their consensus,
multiple sequence alignment, or GFA representation.
"""

import io
import logging
import sys
import click
from pathlib import Path
from typing import Optional
import yaml

from .version import __version__
from .config.schema import (
    VALID_GAP_MODELS,
    VALID_MODES,
    VALID_RESULTS,
    ConfigValidationError,
    load_config,
    save_config_template,
    scoring_from_config,
    validate_config,
)
from .io_utils.sequence_io import SequenceRecord, read_sequences, write_fasta
from .poa_core.alignment_engine import AlignmentType, NumpyAlignmentEngine
from .poa_core.builder import PoaBuilder
from .poa_core.exceptions import PoaError

logger = logging.getLogger(__name__)


def setup_logging(level: str, log_file: Optional[str] = None):
    """Configure root logging for a CLI run (messages go to stderr)."""
    handlers = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=getattr(logging, str(level).upper()),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers,
        force=True
    )


@click.group()
@click.version_option(version=__version__)
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose output')
@click.option('--quiet', '-q', is_flag=True, help='Suppress non-error output')
@click.pass_context
def main(ctx, verbose, quiet):
    """
    PoaWeaver: Partial-Order Alignment Graphs

    Builds a partial-order alignment graph from a set of sequences and reports
    its consensus, multiple sequence alignment, or GFA graph.
    """
    # Ensure context object exists
    ctx.ensure_object(dict)
    ctx.obj['VERBOSE'] = verbose
    ctx.obj['QUIET'] = quiet


# ============================================================================
# Configuration Management Commands
# ============================================================================

@main.group()
def config():
    """Configuration management commands."""
    pass


@config.command('init')
@click.option('--output', '-o', type=click.Path(), default='poaweaver_config.yaml',
              help='Output configuration file path')
@click.option('--template', '-t',
              type=click.Choice(['default', 'dna', 'protein', 'local']),
              default='default', help='Configuration template type')
def config_init(output, template):
    """Generate a template configuration file with all available parameters."""
    click.echo(f"Generating {template} configuration template: {output}")

    try:
        save_config_template(Path(output), template=template)
    except OSError as e:
        click.echo(f"✗ Error creating configuration: {e}", err=True)
        sys.exit(1)

    click.echo(f"✓ Configuration file created: {output}")
    click.echo("\nThe configuration file includes:")
    click.echo("  • Alignment mode and scoring (match, mismatch, gap penalties)")
    click.echo("  • Input filtering and quality weighting")
    click.echo("  • Output result type and logging")


@config.command('validate')
@click.argument('config_file', type=click.Path(exists=True))
def config_validate(config_file):
    """Validate a configuration file."""
    click.echo(f"Validating configuration file: {config_file}")

    try:
        config = load_config(Path(config_file))
    except ConfigValidationError as e:
        click.echo(f"✗ Error validating configuration: {e}", err=True)
        sys.exit(1)

    errors = validate_config(config)
    if errors:
        click.echo("\n✗ Configuration validation failed:")
        for error in errors:
            click.echo(f"  • {error}", err=True)
        sys.exit(1)

    click.echo("✓ Configuration is valid")

    # Show key settings
    alignment = config['alignment']
    click.echo("\nKey Settings:")
    click.echo(f"  Mode: {alignment['mode']}")
    click.echo(f"  Gap model: {scoring_from_config(config).gap_model.value}")
    click.echo(f"  Result: {config['output']['result']}")


@config.command('show')
@click.argument('config_file', type=click.Path(exists=True))
@click.option('--format', '-f', type=click.Choice(['yaml', 'summary']), default='summary',
              help='Output format')
def config_show(config_file, format):
    """Display configuration settings."""
    try:
        config = load_config(Path(config_file))
    except ConfigValidationError as e:
        click.echo(f"✗ Error reading configuration: {e}", err=True)
        sys.exit(1)

    if format == 'yaml':
        click.echo(yaml.dump(config, default_flow_style=False, sort_keys=False))
        return

    alignment = config['alignment']
    click.echo(f"Configuration from: {config_file}")
    click.echo("=" * 60)

    click.echo("\nAlignment:")
    click.echo(f"  Mode: {alignment['mode']}")
    click.echo(f"  Match/mismatch: {alignment['match']}/{alignment['mismatch']}")
    click.echo(f"  Gap open/extend: {alignment['gap_open']}/{alignment['gap_extend']}")
    click.echo(f"  Second gap open/extend: {alignment['gap_open_2']}/{alignment['gap_extend_2']}")
    click.echo(f"  Gap model: {alignment['gap_model']}")
    click.echo(f"  Strand ambiguous: {alignment['strand_ambiguous']}")

    click.echo("\nInput:")
    click.echo(f"  Minimum length: {config['input']['min_length']}")
    click.echo(f"  Quality weights: {config['input']['use_quality_weights']}")

    click.echo("\nOutput:")
    click.echo(f"  Result: {config['output']['result']}")
    click.echo(f"  Log level: {config['output']['logging']['level']}")


# ============================================================================
# Graph Commands
# ============================================================================

@main.command()
@click.argument('sequences', type=click.Path(exists=True))
@click.option('--output', '-o', type=click.Path(),
              help='Output file (default: stdout)')
@click.option('--config', 'config_file', type=click.Path(exists=True),
              help='Configuration file (YAML)')
@click.option('--result', '-r', type=click.Choice(VALID_RESULTS), default=None,
              help='What to report: consensus, msa, both (MSA with consensus row), '
                   'gfa, gfa_consensus (GFA with consensus path)')
@click.option('--mode', '-l', type=click.Choice(VALID_MODES), default=None,
              help='Alignment mode')
@click.option('--match', '-m', type=int, default=None, help='Match score')
@click.option('--mismatch', '-n', type=int, default=None, help='Mismatch score')
@click.option('--gap-open', '-g', type=int, default=None, help='Gap opening score')
@click.option('--gap-extend', '-e', type=int, default=None, help='Gap extension score')
@click.option('--gap-open-2', '-q', type=int, default=None, help='Second gap opening score')
@click.option('--gap-extend-2', '-c', type=int, default=None, help='Second gap extension score')
@click.option('--gap-model', type=click.Choice(VALID_GAP_MODELS), default=None,
              help='Gap model (auto picks the simplest one the gap scores describe)')
@click.option('--strand-ambiguous/--single-strand', default=None,
              help='Also align the reverse complement and keep the better strand')
@click.option('--quality-weights/--no-quality-weights', default=None,
              help='Weight edges with FASTQ base qualities')
@click.option('--min-length', type=int, default=None,
              help='Skip sequences shorter than this')
@click.option('--line-width', type=int, default=None,
              help='Wrap FASTA output lines (0 = no wrapping)')
@click.pass_context
def align(ctx, sequences, output, config_file, result, mode,
          match, mismatch, gap_open, gap_extend, gap_open_2, gap_extend_2,
          gap_model, strand_ambiguous, quality_weights, min_length, line_width):
    """
    Build a POA graph from SEQUENCES (FASTA/FASTQ, optionally gzipped).

    Examples:
        # Consensus of a set of reads
        poaweaver align reads.fastq

        # GFA graph with the consensus path, local alignment
        poaweaver align reads.fa -l local -r gfa_consensus -o graph.gfa
    """
    verbose = ctx.obj.get('VERBOSE', False)
    quiet = ctx.obj.get('QUIET', False)

    try:
        run_config = load_config(Path(config_file) if config_file else None)
    except ConfigValidationError as e:
        click.echo(f"✗ Error reading configuration: {e}", err=True)
        ctx.exit(1)

    # Override config with command-line options
    overrides = {
        'mode': mode, 'match': match, 'mismatch': mismatch,
        'gap_open': gap_open, 'gap_extend': gap_extend,
        'gap_open_2': gap_open_2, 'gap_extend_2': gap_extend_2,
        'gap_model': gap_model, 'strand_ambiguous': strand_ambiguous,
    }
    for key, value in overrides.items():
        if value is not None:
            run_config['alignment'][key] = value
    if quality_weights is not None:
        run_config['input']['use_quality_weights'] = quality_weights
    if min_length is not None:
        run_config['input']['min_length'] = min_length
    if result is not None:
        run_config['output']['result'] = result
    if line_width is not None:
        run_config['output']['line_width'] = line_width

    errors = validate_config(run_config)
    if errors:
        click.echo("✗ Invalid configuration:", err=True)
        for error in errors:
            click.echo(f"  • {error}", err=True)
        ctx.exit(1)

    log_level = run_config['output']['logging']['level']
    if verbose:
        log_level = 'DEBUG'
    elif quiet:
        log_level = 'ERROR'
    setup_logging(log_level, run_config['output']['logging']['log_file'])

    try:
        records = read_sequences(sequences, min_length=run_config['input']['min_length'])
        if not records:
            click.echo(f"✗ Error: no sequences found in {sequences}", err=True)
            ctx.exit(1)

        engine = NumpyAlignmentEngine(
            AlignmentType(run_config['alignment']['mode']),
            scoring_from_config(run_config)
        )
        logger.info(f"Aligning {len(records)} sequences with {engine}")

        builder = PoaBuilder(engine, strand_ambiguous=run_config['alignment']['strand_ambiguous'])
        builder.add_records(records, use_quality_weights=run_config['input']['use_quality_weights'])

        text = render_result(builder, run_config['output']['result'],
                             run_config['output']['line_width'])
    except (PoaError, ValueError, OSError) as e:
        click.echo(f"✗ Error: {e}", err=True)
        ctx.exit(1)

    if output:
        with open(output, 'w') as f:
            f.write(text)
        if not quiet:
            click.echo(f"✓ {run_config['output']['result']} written to {output}", err=True)
    else:
        click.echo(text, nl=False)


def render_result(builder: PoaBuilder, result: str, line_width: int = 0) -> str:
    """
    Render the requested result for a built graph.

    Args:
        builder: Builder holding the graph and sequence headers
        result: One of 'consensus', 'msa', 'both', 'gfa', 'gfa_consensus'
        line_width: FASTA line width (0 = no wrapping)

    Returns:
        Output text
    """
    if result in ('gfa', 'gfa_consensus'):
        return builder.to_gfa(include_consensus=(result == 'gfa_consensus'))

    out = io.StringIO()
    graph = builder.graph

    if result == 'consensus':
        consensus = graph.generate_consensus_sequence()
        records = [SequenceRecord(id=f"Consensus LN:i:{len(consensus)}", sequence=consensus)]
    else:
        rows = graph.generate_msa(include_consensus=(result == 'both'))
        headers = list(builder.headers)
        if result == 'both':
            headers.append("Consensus")
        records = [SequenceRecord(id=header, sequence=row) for header, row in zip(headers, rows)]

    write_fasta(records, out, line_width=line_width)
    return out.getvalue()


if __name__ == '__main__':
    main()
