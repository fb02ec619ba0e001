from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from digital_matrix.actions import Click
from digital_matrix.config import load_config
from digital_matrix.driver import GameDriver
from digital_matrix.store import GameStore
from digital_matrix.terminal import PROMPT, Terminal

log = logging.getLogger(__name__)

EXIT_COMMANDS = ("exit", "quit")
MAX_CLICKS = 1000


def _parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="digital-matrix", description="Digital Matrix idle hacking game")
    parser.add_argument("--config", type=Path, default=None, help="path to a JSON config file")
    parser.add_argument("--save", type=Path, default=None, help="override the save file location")
    parser.add_argument("--log-level", default="WARNING", help="logging level (DEBUG, INFO, ...)")
    return parser.parse_args(argv)


def _click(store: GameStore, args: list) -> str:
    count = min(int(args[0]), MAX_CLICKS) if args and args[0].isdigit() else 1
    before = store.get_state().data
    for _ in range(count):
        store.dispatch(Click())
    return f"+{store.get_state().data - before:.2f} data"


async def main(argv=None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    config = load_config(args.config)
    save_path = args.save if args.save is not None else config.save_file()

    store = GameStore()
    driver = GameDriver(store, config, save_path)
    if driver.load():
        log.info("[save] loaded game from %s", save_path)
    driver.start()
    terminal = Terminal(store, save_path)

    loop = asyncio.get_running_loop()
    print("DIGITAL MATRIX online. Type 'help' for commands, 'click [n]' to harvest data.")
    try:
        while True:
            sys.stdout.write(PROMPT)
            sys.stdout.flush()
            line = await loop.run_in_executor(None, sys.stdin.readline)
            if not line:
                break
            words = line.split()
            if not words:
                continue
            command = words[0].lower()
            if command in EXIT_COMMANDS:
                break
            if command == "click":
                print(_click(store, words[1:]))
                continue
            for out in terminal.execute(line):
                print(out)
    finally:
        await driver.stop()


def run() -> None:
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    run()
