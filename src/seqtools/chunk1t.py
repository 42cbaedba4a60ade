"""
Splits (large) input files into records and execs a command over each record.

Usage example:
    chunk1t --type fasta -i proteins.fa -- grep -c '>'

Without a command, every chunk is printed between '<<<' and '>>>' lines.
"""

import argparse
import subprocess
import sys
from typing import Callable, List, Optional, TextIO

from tqdm import tqdm

from seqchunks.chunks import chunks
from seqchunks.formats import SENTINELS
from seqchunks.io_utils import open_inputs


def print_chunk(chunk: bytes, out: Optional[TextIO] = None) -> None:
    out = out if out is not None else sys.stdout
    out.write("<<<\n")
    out.write(chunk.decode("utf-8", errors="replace").strip() + "\n")
    out.write(">>>\n")


def exec_chunk(command: List[str]) -> Callable[[bytes], None]:
    """Create a handler that runs command once per chunk with the chunk on its stdin."""
    def handle(chunk: bytes) -> None:
        result = subprocess.run(command, input=chunk)
        if result.returncode != 0:
            raise subprocess.CalledProcessError(result.returncode, command)
    return handle


def chunk_inputs(paths: Optional[List[str]], record_type: str, handler: Callable[[bytes], None], progress: bool = False) -> int:
    """Run handler over every chunk of every input.

    Returns:
        int: The number of chunks handled.
    """
    if record_type not in SENTINELS:
        raise ValueError(f"Unknown record type `{record_type}'. Expected one of: {', '.join(SENTINELS)}")
    sentinel = SENTINELS[record_type]
    count = 0
    for source in open_inputs(paths):
        for chunk in tqdm(chunks(source, sentinel), desc="Processing chunks", unit="chunk", disable=not progress):
            handler(chunk)
            count += 1
    return count


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Splits (large) input files up and execs child processes over these.")
    parser.add_argument("--type", "-t", type=str, required=True, choices=sorted(SENTINELS), help="Record format type.")
    parser.add_argument("--in", "-i", dest="inputs", type=str, nargs="+", default=None, help="Input file(s). If not provided, defaults to STDIN.")
    parser.add_argument("--progress", "-p", action="store_true", help="Show a progress bar on STDERR.")
    parser.add_argument("commands", nargs=argparse.REMAINDER, help="Command to run for each chunk, which it receives on STDIN.")
    args = parser.parse_args(argv)
    if args.commands and args.commands[0] == "--":
        args.commands = args.commands[1:]
    return args


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    handler = exec_chunk(args.commands) if args.commands else print_chunk
    try:
        chunk_inputs(args.inputs, args.type, handler, progress=args.progress)
    except subprocess.CalledProcessError as e:
        print(f"Chunk command failed with exit status {e.returncode}: {' '.join(e.cmd)}", file=sys.stderr)
        sys.exit(e.returncode)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
