#!/usr/bin/env python3
"""
CLI for querying word2vec binary vector files.

Usage:
    wordvec --help
    wordvec --vectors vectors.bin info
    wordvec --vectors vectors.bin cosine winter snow -k 10
    wordvec --vectors vectors.bin analogy -p king woman -n man -k 10 --json
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from .config import WordVecConfig
from .core.exceptions import VocabularyIncompleteError, WordVecConfigError, WordVecError
from .core.logging import configure_logging
from .core.types import SimilarityHit
from .query import WordVectors


logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_LOAD_ERROR = 1
EXIT_USAGE = 2
EXIT_NO_RESULT = 3


def setup_logging(config: WordVecConfig, verbose: bool = False, structured: bool = False) -> None:
    """Configure logging from config and command-line flags."""
    level = logging.DEBUG if verbose else config.log_level
    configure_logging(
        level=level,
        structured=structured or config.structured_logs,
        stream=sys.stderr,
    )


def _hits_to_json(hits: Optional[List[SimilarityHit]]) -> Optional[list]:
    if hits is None:
        return None
    return [hit.to_dict() for hit in hits]


def _print_hits(title: str, hits: Optional[List[SimilarityHit]]) -> None:
    print(f"\n{title}")
    print("=" * 50)
    if hits is None:
        print("  (no result)")
        return
    if not hits:
        print("  (no neighbors)")
        return
    for hit in hits:
        print(f"  {hit.rank:>3}. {hit.word:<30} {hit.score:.6f}")


def cmd_info(args: argparse.Namespace, model: WordVectors, config: WordVecConfig) -> int:
    """Show vocabulary statistics."""
    stats = model.stats

    if args.json:
        print(json.dumps(stats.to_dict(), indent=2))
        return EXIT_OK

    print("\nVector file")
    print("=" * 50)
    print(f"Source:          {stats.source}")
    print(f"Declared words:  {stats.declared_count}")
    print(f"Entries read:    {stats.loaded_count}")
    print(f"Unique words:    {stats.unique_count}")
    print(f"Dimensions:      {stats.vector_size}")
    print(f"Complete:        {stats.is_complete}")
    print(f"Zero vectors:    {stats.zero_norm_count}")
    print(f"Load time:       {stats.duration_ms}ms")
    return EXIT_OK


def cmd_cosine(args: argparse.Namespace, model: WordVectors, config: WordVecConfig) -> int:
    """Show nearest neighbors for one or more words."""
    k = args.k or config.default_k

    if len(args.words) == 1:
        results = {args.words[0]: model.cosine(args.words[0], k)}
    else:
        results = model.cosine_many(args.words, k, max_workers=config.max_workers)

    if args.json:
        print(json.dumps({word: _hits_to_json(hits) for word, hits in results.items()}, indent=2))
    else:
        for word, hits in results.items():
            _print_hits(f"Nearest to: {word}", hits)

    if any(hits is None for hits in results.values()):
        return EXIT_NO_RESULT
    return EXIT_OK


def cmd_analogy(args: argparse.Namespace, model: WordVectors, config: WordVecConfig) -> int:
    """Solve an analogy query."""
    k = args.k or config.default_k
    hits = model.analogy(args.positive, args.negative, k)

    if args.json:
        output = {
            "positive": args.positive,
            "negative": args.negative,
            "hits": _hits_to_json(hits),
        }
        print(json.dumps(output, indent=2))
    else:
        title = f"Analogy: +{' +'.join(args.positive) or '-'} -{' -'.join(args.negative) or '-'}"
        _print_hits(title, hits)

    return EXIT_NO_RESULT if hits is None else EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wordvec",
        description="Nearest-neighbor and analogy queries over word2vec binary vectors",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging")
    parser.add_argument("--config", type=Path, help="YAML config file")
    parser.add_argument("--vectors", type=Path, help="Binary vector file (.bin or .bin.gz)")
    parser.add_argument(
        "--strict", action="store_true",
        help="Fail if the file holds fewer entries than its header declares",
    )
    parser.add_argument(
        "--structured-logs", action="store_true", help="Emit JSON log lines"
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # info command
    info_parser = subparsers.add_parser("info", help="Show vocabulary statistics")
    info_parser.add_argument("--json", action="store_true", help="Output JSON")
    info_parser.set_defaults(func=cmd_info)

    # cosine command
    cosine_parser = subparsers.add_parser("cosine", help="Find nearest neighbors of words")
    cosine_parser.add_argument("words", nargs="+", help="Query words")
    cosine_parser.add_argument("-k", type=int, help="Number of neighbors (default from config)")
    cosine_parser.add_argument("--json", action="store_true", help="Output JSON")
    cosine_parser.set_defaults(func=cmd_cosine)

    # analogy command
    analogy_parser = subparsers.add_parser("analogy", help="Solve a word analogy")
    analogy_parser.add_argument(
        "-p", "--positive", nargs="*", default=[], help="Words added to the query"
    )
    analogy_parser.add_argument(
        "-n", "--negative", nargs="*", default=[], help="Words subtracted from the query"
    )
    analogy_parser.add_argument("-k", type=int, help="Number of results (default from config)")
    analogy_parser.add_argument("--json", action="store_true", help="Output JSON")
    analogy_parser.set_defaults(func=cmd_analogy)

    return parser


def main(argv: Optional[list] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return EXIT_USAGE

    if getattr(args, "k", None) is not None and args.k <= 0:
        parser.error("-k must be positive")

    # Existing environment variables take precedence over .env
    load_dotenv()

    try:
        config = WordVecConfig(args.config)
    except WordVecConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_USAGE

    setup_logging(config, verbose=args.verbose, structured=args.structured_logs)

    vectors_path = args.vectors or config.vectors_path
    if vectors_path is None:
        print(
            "Error: no vector file given (use --vectors or set WORDVEC_VECTORS_PATH)",
            file=sys.stderr,
        )
        return EXIT_USAGE

    try:
        model = WordVectors.load_file(vectors_path, chunk_size=config.chunk_size)
        if args.strict or config.strict:
            model.store.require_complete()
    except VocabularyIncompleteError as e:
        logger.error(str(e))
        return EXIT_LOAD_ERROR
    except (WordVecError, OSError, EOFError) as e:
        logger.error(f"Failed to load {vectors_path}: {e}")
        return EXIT_LOAD_ERROR

    return args.func(args, model, config)


if __name__ == "__main__":
    sys.exit(main())
