#!/usr/bin/env python3
"""
Main entry point for the virtual interviewer.
Allows running the package with: python -m virtual_interviewer [job_key] [options]
"""
import asyncio
import signal
import sys
from typing import List, Optional

from .config import get_config
from .interview import ConsolePresenter, JobCatalog, JobConfigurationError, SessionController
from .utils import setup_logging

USAGE = """Usage: python -m virtual_interviewer [job_key] [options]

Options:
  --list                 Show the available roles and exit
  --text, --no-tts       Print questions instead of speaking them
  --typed, --no-stt      Type answers instead of speaking them
  --timeout=SECONDS      Seconds to wait for a spoken answer
  --jobs=FILE            Load roles from a JSON file
  --export=DIR           Directory for the exported session JSON
"""


def _parse_float(arg: str) -> float:
    value = float(arg.split("=", 1)[1])
    if value <= 0:
        raise ValueError(value)
    return value


def _choose_job(catalog: JobCatalog) -> Optional[str]:
    keys = catalog.keys()
    for idx, key in enumerate(keys, start=1):
        print(f"  {idx}. {key} - {catalog.get(key).title}")
    try:
        choice = input("Select a role: ").strip()
    except (EOFError, KeyboardInterrupt):
        return None
    if choice.isdigit() and 1 <= int(choice) <= len(keys):
        return keys[int(choice) - 1]
    return choice or None


async def _run(controller: SessionController, job_key: str) -> None:
    loop = asyncio.get_running_loop()
    try:
        loop.add_signal_handler(signal.SIGINT, controller.stop)
    except (NotImplementedError, RuntimeError):
        # Signal handlers are unavailable on some platforms; Ctrl-C then aborts the run
        pass
    try:
        await controller.run(job_key)
    finally:
        try:
            loop.remove_signal_handler(signal.SIGINT)
        except (NotImplementedError, RuntimeError):
            pass


def main(argv: Optional[List[str]] = None) -> int:
    """Command-line interface for the session controller."""
    args = sys.argv[1:] if argv is None else argv

    if "--help" in args or "-h" in args:
        print(USAGE)
        return 0

    try:
        config = get_config()
    except ValueError as e:
        print(f"❌ Configuration Error: {e}")
        return 1

    job_key = None
    for arg in args:
        if arg in ("--text", "--no-tts"):
            config.enable_tts = False
        elif arg in ("--typed", "--no-stt"):
            config.enable_stt = False
        elif arg.startswith("--timeout="):
            try:
                config.answer_timeout_seconds = _parse_float(arg)
            except (ValueError, IndexError):
                print("❌ Invalid timeout value. Use --timeout=<seconds greater than 0>")
                return 1
        elif arg.startswith("--jobs="):
            config.jobs_file = arg.split("=", 1)[1]
        elif arg.startswith("--export="):
            config.export_dir = arg.split("=", 1)[1]
        elif arg == "--list":
            pass
        elif arg.startswith("-"):
            print(f"❌ Unknown option: {arg}\n\n{USAGE}")
            return 1
        else:
            job_key = arg

    try:
        catalog = JobCatalog.default(config.jobs_file)
    except JobConfigurationError as e:
        print(f"❌ Configuration Error: {e}")
        return 1

    if "--list" in args:
        for key in catalog.keys():
            print(f"{key}: {catalog.get(key).title}")
        return 0

    if job_key is None:
        job_key = _choose_job(catalog)
        if job_key is None:
            return 1

    log_file = setup_logging(config.log_file, config.log_level)

    if config.enable_tts:
        print("🔊 TTS Mode: questions will be spoken aloud (use --text to disable)")
    else:
        print("📝 Text Mode: questions will be printed")
    if not config.enable_stt:
        print("⌨️  Typed Mode: answers are typed")
    print(f"⏱️  Answer timeout: {config.answer_timeout_seconds:.0f}s")
    print(f"📝 Detailed logs: {log_file}")

    controller = SessionController.from_config(config, catalog=catalog)
    ConsolePresenter(lambda: controller.session).attach(controller.event_bus)

    try:
        asyncio.run(_run(controller, job_key))
    except JobConfigurationError as e:
        print(f"❌ Configuration Error: {e}")
        return 1
    except KeyboardInterrupt:
        controller.stop()

    if controller.export_enabled:
        path = controller.export(config.export_dir)
        print(f"💾 Session exported to {path}")
    print(f"📈 Session metrics: {controller.get_metrics()}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
