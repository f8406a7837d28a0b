"""
Command-line interface for vanityeth.

Usage:
    python -m vanityeth --prefix dead
    python -m vanityeth --suffix beef --workers 8
    python -m vanityeth --contains cafe --count 3
    python -m vanityeth --prefix "(a|b|c)(10|20)" --suffix c0ffee --case-sensitive
    python -m vanityeth --regex "^0x(dead|cafe)" --output found.txt
"""

import argparse
import logging
import sys
from typing import Optional

from colorama import Fore, Style, init as colorama_init

from vanityeth import __version__
from vanityeth.difficulty import estimate_seconds
from vanityeth.export import FORMATS, format_results_json, save_results
from vanityeth.generator import Config, GeneratorStats, Result, SearchEngine, default_workers
from vanityeth.verify import verify_with_eth_keys


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vanity-eth",
        description="Vanity Ethereum address generator",
        epilog=(
            "Examples:\n"
            "  vanity-eth --prefix dead\n"
            "  vanity-eth --suffix beef\n"
            "  vanity-eth --contains cafe --count 3\n"
            '  vanity-eth --prefix "x(a|b|c)(10|20|30)"\n'
            '  vanity-eth --regex "^0x(dead|cafe)"\n'
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--version", action="version", version=f"vanity-eth {__version__}"
    )

    pattern = parser.add_argument_group("patterns (at least one required)")
    pattern.add_argument(
        "--prefix", "-p", metavar="HEX", default="",
        help="Address must start with this hex pattern (after 0x)",
    )
    pattern.add_argument(
        "--suffix", "-s", metavar="HEX", default="",
        help="Address must end with this hex pattern",
    )
    pattern.add_argument(
        "--contains", "-c", metavar="HEX", default="",
        help="Address must contain this hex pattern anywhere",
    )
    pattern.add_argument(
        "--regex", "-r", metavar="PATTERN", default="",
        help="Address must match this regex (applied to the full 0x... address)",
    )

    parser.add_argument(
        "--workers", "-w", type=int, default=0,
        help="Number of worker processes (default: all CPUs)",
    )
    parser.add_argument(
        "--count", "-n", type=int, default=1,
        help="How many matching addresses to find (default: 1)",
    )
    parser.add_argument(
        "--case-sensitive", action="store_true",
        help="Match letter case against the checksummed address",
    )
    parser.add_argument(
        "--output", "-o", metavar="PATH",
        help="Save results to this file",
    )
    parser.add_argument(
        "--format", choices=FORMATS, default="text",
        help="Output format: text or json (default: text)",
    )
    parser.add_argument(
        "--no-verify", action="store_true",
        help="Skip eth-keys verification",
    )
    parser.add_argument(
        "--dry-run", action="store_true",
        help="Show difficulty estimate without searching",
    )
    parser.add_argument(
        "--quiet", "-q", action="store_true",
        help="Minimal output (just the result addresses)",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true",
        help="Enable debug logging",
    )

    return parser


def format_time(seconds: float) -> str:
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    elif seconds < 60:
        return f"{seconds:.1f}s"
    elif seconds < 3600:
        return f"{seconds / 60:.1f}m"
    elif seconds < 86400:
        return f"{seconds / 3600:.1f}h"
    else:
        return f"{seconds / 86400:.1f}d"


def format_rate(rate: float) -> str:
    if rate < 1000:
        return f"{rate:.0f}"
    elif rate < 1_000_000:
        return f"{rate / 1000:.1f}K"
    else:
        return f"{rate / 1_000_000:.2f}M"


def format_count(n: int) -> str:
    if n < 1_000:
        return f"{n}"
    elif n < 1_000_000:
        return f"{n / 1e3:.1f}K"
    elif n < 1_000_000_000:
        return f"{n / 1e6:.2f}M"
    else:
        return f"{n / 1e9:.3f}B"


def format_eta(seconds: float) -> str:
    seconds = int(round(seconds))
    days, rem = divmod(seconds, 86400)
    hours, rem = divmod(rem, 3600)
    minutes, secs = divmod(rem, 60)
    if days:
        return f"{days}d {hours:02d}:{minutes:02d}:{secs:02d}"
    if hours:
        return f"{hours:02d}:{minutes:02d}:{secs:02d}"
    return f"{minutes:02d}:{secs:02d}"


def describe_pattern(config: Config) -> str:
    parts = []
    for name in ("prefix", "suffix", "contains", "regex"):
        value = getattr(config, name)
        if value:
            parts.append(f"{name}='{value}'")
    return "  ".join(parts)


def highlight_address(address: str, matcher) -> str:
    """Colour the prefix/suffix part of the address that matched."""
    bare = address[2:]
    marked = [False] * len(bare)
    for kind in ("prefix", "suffix"):
        span = matcher.match_span(address, kind)
        if span:
            for i in range(*span):
                marked[i] = True

    out = ["0x"]
    for ch, hit in zip(bare, marked):
        out.append(f"{Fore.GREEN}{Style.BRIGHT}{ch}{Style.RESET_ALL}" if hit else ch)
    return "".join(out)


def progress_callback(stats: GeneratorStats, config: Config, expected: Optional[int],
                      quiet: bool = False) -> None:
    if quiet:
        return
    eta = estimate_seconds(expected, stats.rate, config.count - stats.found)
    eta_str = f"  |  ETA: {format_eta(eta)}" if eta else ""
    sys.stderr.write(
        f"\r\033[K  Checked: {stats.total_checked:,}  |  "
        f"Found: {min(stats.found, config.count)}/{config.count}  |  "
        f"Rate: {format_rate(stats.rate)}/sec  |  "
        f"Elapsed: {format_time(stats.elapsed)}{eta_str}"
    )
    sys.stderr.flush()


def print_result(n: int, result: Result, engine: SearchEngine, matcher) -> None:
    sys.stderr.write("\r\033[K")
    total = engine.stats.total
    print(f"\n{Fore.GREEN}{Style.BRIGHT}MATCH #{n}{Style.RESET_ALL} after {format_count(total)} checked")
    print(f"  Address:     {highlight_address(result.address, matcher)}")
    print(f"  Private key: {Fore.RED}0x{result.private_key}{Style.RESET_ALL}")


def print_verification(result: Result) -> None:
    v = verify_with_eth_keys(result.private_key, result.address)
    if not v["eth_keys_available"]:
        print(f"  eth-keys verification skipped ({v['error']})")
        return
    if v["error"]:
        print(f"  eth-keys verification {Fore.RED}ERROR{Style.RESET_ALL}: {v['error']}")
        return
    ok = v["address_match"] and v["checksum_match"] is not False
    status = f"{Fore.GREEN}PASS{Style.RESET_ALL}" if ok else f"{Fore.RED}FAIL{Style.RESET_ALL}"
    print(f"  eth-keys verification: {status}")


def main(argv: list[str] = None) -> int:
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )
    colorama_init()

    config = Config(
        prefix=args.prefix,
        suffix=args.suffix,
        contains=args.contains,
        regex=args.regex or None,
        workers=args.workers if args.workers > 0 else default_workers(),
        count=args.count,
        case_sensitive=args.case_sensitive,
    )

    if not config.has_constraint:
        parser.error("provide at least one of: --prefix, --suffix, --contains, --regex")

    try:
        engine = SearchEngine(config)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    text_mode = args.format == "text"
    verbose_text = text_mode and not args.quiet
    difficulty = engine.get_difficulty()
    expected = difficulty["expected_attempts"]

    if verbose_text:
        print(f"{Style.BRIGHT}vanity-eth v{__version__}{Style.RESET_ALL}")
        print(f"  Pattern:    {Fore.YELLOW}{describe_pattern(config)}{Style.RESET_ALL}")
        print(f"  Case:       {'sensitive (checksummed)' if config.case_sensitive else 'insensitive'}")
        print(f"  Workers:    {config.workers}")
        print(f"  Target:     {config.count} address(es)")
        if expected:
            print(f"  Expected:   {Fore.CYAN}~1 in {expected:,} addresses match{Style.RESET_ALL}")
        print(f"  Difficulty: {difficulty['difficulty_description']}")
        print()

    if args.dry_run:
        return 0

    matcher = config.build_matcher()
    engine.on_progress = lambda stats: progress_callback(
        stats, config, expected, quiet=not verbose_text
    )
    if verbose_text:
        engine.on_result = lambda result: print_result(
            len(engine.results), result, engine, matcher
        )

    if verbose_text:
        print("Searching...")

    results = engine.run_blocking(progress_interval=0.5)
    final = engine.poll()

    if verbose_text:
        sys.stderr.write("\n")
        print(
            f"\n{Style.BRIGHT}done{Style.RESET_ALL}  found {len(results)}/{config.count}  |  "
            f"{format_count(final.total_checked)} checked  |  "
            f"{format_rate(final.rate)}/sec  |  {format_time(final.elapsed)}"
        )

    if not results:
        print("No results found (search was interrupted).", file=sys.stderr)
        return 1

    if args.format == "json":
        sys.stdout.write(format_results_json(results))
    elif args.quiet:
        for result in results:
            print(result.address)

    if verbose_text and not args.no_verify:
        print()
        for result in results:
            print(f"  {result.address}")
            print_verification(result)

    if args.output:
        try:
            path = save_results(results, args.output, args.format)
        except OSError as e:
            print(f"Error saving file: {e}", file=sys.stderr)
            return 1
        if verbose_text:
            print(f"\n  {Fore.GREEN}Saved to {path}{Style.RESET_ALL}")

    return 0
