import os
import threading
import multiprocessing

from procworld import config

LEVELS = {'DEBUG': 10, 'INFO': 20, 'WARN': 30, 'ERROR': 40}

_context = threading.local()


def set_chunk(chunk_pos):
    """Tag this thread's log lines with the chunk being generated (None clears)."""
    _context.chunk = chunk_pos


def enabled(level):
    threshold = LEVELS.get(getattr(config, 'LOG_LEVEL', 'INFO'), 20)
    return LEVELS.get(level, 20) >= threshold


def log(scope, msg, level="INFO"):
    if not enabled(level):
        return
    if scope == "TIMING" and not getattr(config, "LOG_MAPGEN_TIMINGS", True):
        return
    pid = os.getpid()
    proc = multiprocessing.current_process().name
    thread = threading.current_thread().name
    chunk = getattr(_context, "chunk", None)
    chunk_tag = f" c{chunk[0]},{chunk[1]}" if chunk is not None else ""
    text = f"[{level}{chunk_tag} pid{pid} proc{proc} thr{thread} {scope}] {msg}"
    use_color = getattr(config, "LOG_COLOR", True) and os.getenv("NO_COLOR") is None
    if use_color:
        if level in ("WARN", "ERROR"):
            text = f"\x1b[31m{text}\x1b[0m"
        # Main process + main thread: default (no color).
        elif proc == "MainProcess" and thread != "MainThread":
            # Generator worker thread.
            text = f"\x1b[32m{text}\x1b[0m"
        elif proc != "MainProcess":
            # Worker process.
            text = f"\x1b[33m{text}\x1b[0m"
    print(text)
