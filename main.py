# main.py
import sys
import logging
from pathlib import Path
from typing import Dict, Optional

from dictation.LoggingSetup import setup_logging


def resolve_paths(script_path: Path) -> Dict[str, Path]:
    """
    Resolves application paths relative to the main script.

    Layout:
        stable-dictation/
        ├── main.py
        ├── dictation/
        ├── config/                    # CONFIG_DIR
        └── logs/                      # LOGS_DIR

    Args:
        script_path: Path to main script

    Returns:
        Dictionary with resolved paths
    """
    app_dir = script_path.resolve().parent
    return {
        "APP_DIR": app_dir,
        "CONFIG_DIR": app_dir / "config",
        "LOGS_DIR": app_dir / "logs",
    }


def parse_args(argv: list) -> Dict[str, Optional[str]]:
    """Parse -v and --name=value flags.

    Returns:
        Dictionary with keys verbose, input_file, config, backend
    """
    args: Dict[str, Optional[str]] = {
        "verbose": "-v" in argv,
        "input_file": None,
        "config": None,
        "backend": None,
    }
    for arg in argv:
        if arg.startswith("--input-file="):
            args["input_file"] = arg.split("=", 1)[1]
        elif arg.startswith("--config="):
            args["config"] = arg.split("=", 1)[1]
        elif arg.startswith("--backend="):
            args["backend"] = arg.split("=", 1)[1]
    return args


def main(argv: list) -> int:
    from dictation.config import load_config, validate_config
    from dictation.server.ToggleServer import default_socket_path, signal_existing_instance

    args = parse_args(argv)
    paths = resolve_paths(Path(__file__))
    is_frozen = getattr(sys, 'frozen', False)
    setup_logging(paths["LOGS_DIR"], verbose=args["verbose"], is_frozen=is_frozen)

    default_config = paths["CONFIG_DIR"] / "dictation_config.json"
    config_path = args["config"] or (str(default_config) if default_config.exists() else None)
    config = load_config(config_path)
    if args["backend"]:
        config['injection']['backend'] = args["backend"]
        validate_config(config)

    # A second launch finishes the running session instead of starting one
    if config['toggle']['enabled']:
        if signal_existing_instance(default_socket_path(config['toggle']['socket_name'])):
            logging.info("Signalled running instance to stop, exiting")
            return 0

    if not args["input_file"]:
        logging.error("No recognizer input: pass --input-file=PATH with one hypothesis per line")
        return 1

    from dictation.DictationApp import DictationApp
    from dictation.recognition.ScriptedRecognizer import ScriptedRecognizer

    recognizer = ScriptedRecognizer.from_file(args["input_file"])
    app = DictationApp(config, recognizer, verbose=args["verbose"])
    typed = app.run()
    logging.info(f"Typed: '{typed}'")
    return 0


if __name__ == "__main__":
    try:
        sys.exit(main(sys.argv[1:]))
    except KeyboardInterrupt:
        logging.info("Interrupted by user.")
        sys.exit(0)
    except Exception as e:
        logging.error(f"ERROR: {type(e).__name__}: {e}")
        import traceback
        logging.error(traceback.format_exc())
        sys.exit(1)
