# main.py
import sys, os
sys.path.append(os.path.dirname(__file__))  # run from source without installing

from utils.crashlog import setup_crashlog, log_exception, log_dir
setup_crashlog()

import argparse
import logging
from logging.handlers import RotatingFileHandler
from config import AppConfig, RenderConfig, GameConfig, AudioConfig, OCTAVE_CYCLE, MODES
from app import App

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

def _init_logging(level: str = "INFO"):
    root = logging.getLogger()
    if root.handlers:
        return
    root.setLevel(logging.DEBUG)

    console = logging.StreamHandler()
    console.setLevel(getattr(logging, level.upper(), logging.INFO))
    console.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(console)

    try:
        fh = RotatingFileHandler(os.path.join(log_dir(), "app.log"),
                                 maxBytes=2*1024*1024, backupCount=3, encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(fh)
    except OSError as e:
        root.warning("File logging disabled: %s", e)

def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Grand staff note-reading trainer")
    ap.add_argument('--initial-notes', type=int, default=GameConfig.initial_notes)
    ap.add_argument('--max-notes', type=int, default=GameConfig.max_notes)
    ap.add_argument('--octave', type=int, default=GameConfig.start_octave, choices=OCTAVE_CYCLE)
    ap.add_argument('--mode', default=GameConfig.mode, choices=MODES)
    ap.add_argument('--seed', type=int, default=None)
    ap.add_argument('--paginate', action='store_true', help="16-note pages instead of a scrolling staff")
    ap.add_argument('--no-audio', action='store_true')
    ap.add_argument('--keymap', default=None, help="JSON file of key name -> note letter")
    ap.add_argument('--log-level', default='INFO', choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'])
    return ap

def config_from_args(args: argparse.Namespace) -> AppConfig:
    return AppConfig(
        render=RenderConfig(paginate=args.paginate),
        game=GameConfig(
            initial_notes=args.initial_notes,
            max_notes=args.max_notes,
            start_octave=args.octave,
            seed=args.seed,
            mode=args.mode,
        ).validate(),
        audio=AudioConfig(enabled=not args.no_audio),
        keymap_path=args.keymap,
    )

def main(argv=None):
    args = build_parser().parse_args(argv)
    _init_logging(args.log_level)
    logging.info("Starting grand staff trainer")
    cfg = config_from_args(args)

    App(cfg).run()

if __name__ == '__main__':
    try:
        main()
    except Exception as e:
        try:
            path = log_exception("Top-level exception", e)
        except OSError:
            path = None
        logging.error("Unhandled exception: %s", e, exc_info=True)
        print(f"The trainer crashed; see {path or 'the logs/ folder'} and logs/app.log")
        sys.exit(1)
