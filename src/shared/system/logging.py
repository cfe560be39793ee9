"""
Centralized Logger with Rich Console
====================================
Thin static facade over a per-run file logger plus Rich console output.

Usage:
    from src.shared.system.logging import Logger

    Logger.info("[SCANNER] Found 12 token accounts")
    Logger.success("[BATCH] Closed 5 accounts")
    Logger.warning("[METADATA] Lookup failed")
    Logger.error("[CLEAN] Keypair does not match wallet")
    Logger.section("Dust Scan")
"""

import os
import logging
from datetime import datetime
from logging.handlers import RotatingFileHandler

from rich.console import Console
from rich.text import Text

LOG_DIR = os.getenv("DUST_JANITOR_LOG_DIR") or os.path.join(os.getcwd(), "logs")
if not os.path.exists(LOG_DIR):
    os.makedirs(LOG_DIR, exist_ok=True)

# One log file per run
_run_id = datetime.now().strftime("%Y%m%d_%H%M%S")
log_file = os.path.join(LOG_DIR, f"dust_{_run_id}.log")

handler = RotatingFileHandler(log_file, maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8")
formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(message)s", datefmt="%Y-%m-%d %H:%M:%S")
handler.setFormatter(formatter)

file_logger = logging.getLogger("DustJanitor")
file_logger.setLevel(logging.DEBUG)
if not file_logger.handlers:
    file_logger.addHandler(handler)


# =============================================================================
# SOURCE ICONS (for visual scanning)
# =============================================================================

SOURCE_ICONS = {
    "SYSTEM": "🛸",
    "SCANNER": "🔍",
    "METADATA": "📚",
    "LEDGER": "📡",
    "KEYPAIR": "🔐",
    "BUILDER": "🏗️",
    "BATCH": "📦",
    "INTERACTIVE": "🔄",
    "CLEAN": "🧹",
}

_console = Console(stderr=True)

LEVEL_STYLES = {
    "INFO": "cyan",
    "SUCCESS": "green bold",
    "WARNING": "yellow",
    "ERROR": "red bold",
    "DEBUG": "dim",
    "CRITICAL": "red bold reverse",
    "SECTION": "magenta bold",
}


# =============================================================================
# LOGGER CLASS
# =============================================================================

class Logger:
    """
    Centralized logger with Rich console output.

    Features:
    - Color-coded console lines
    - Rotating per-run log file
    - Source-based icon prefixes parsed from a leading [TAG]
    """

    _silent_mode = False

    @staticmethod
    def _timestamp() -> str:
        """High-precision timestamp (HH:MM:SS.ms)."""
        now = datetime.now()
        ms = str(now.microsecond // 1000).zfill(3)
        return f"{now.strftime('%H:%M:%S')}.{ms}"

    @staticmethod
    def _parse_source(message: str) -> tuple:
        """Extract [SOURCE] tag from message if present."""
        stripped = message.strip()
        if stripped.startswith("[") and "]" in stripped:
            tag_end = stripped.index("]")
            source = stripped[1:tag_end].upper()
            if 0 < len(source) < 15:
                return source, stripped[tag_end + 1:].strip()
        return "SYSTEM", message

    @staticmethod
    def _format_console(level: str, message: str, source: str) -> None:
        if Logger._silent_mode:
            return

        ts = Logger._timestamp()
        icon = SOURCE_ICONS.get(source.upper(), "")
        msg_with_icon = f"{icon} {message}" if icon else message

        style = LEVEL_STYLES.get(level, "white")
        line = Text()
        line.append(f"{ts} ", style="dim")
        line.append(f"| {level[:8].ljust(8)} ", style=style)
        line.append(f"| {source[:12].ljust(12)} | ", style="dim")
        line.append(msg_with_icon)
        _console.print(line)

    @staticmethod
    def _log_to_file(level: str, message: str, source: str = "") -> None:
        full_msg = f"[{source}] {message}" if source else message
        if level == "INFO":
            file_logger.info(full_msg)
        elif level == "WARNING":
            file_logger.warning(full_msg)
        elif level == "ERROR":
            file_logger.error(full_msg)
        elif level == "DEBUG":
            file_logger.debug(full_msg)

    # =========================================================================
    # PUBLIC API
    # =========================================================================

    @staticmethod
    def info(message: str, icon: str = "") -> None:
        source, msg = Logger._parse_source(message)
        if icon:
            msg = f"{icon} {msg}"
        Logger._format_console("INFO", msg, source)
        Logger._log_to_file("INFO", msg, source)

    @staticmethod
    def success(message: str) -> None:
        source, msg = Logger._parse_source(message)
        Logger._format_console("SUCCESS", msg, source)
        Logger._log_to_file("INFO", f"✅ {msg}", source)

    @staticmethod
    def warning(message: str) -> None:
        source, msg = Logger._parse_source(message)
        Logger._format_console("WARNING", msg, source)
        Logger._log_to_file("WARNING", msg, source)

    @staticmethod
    def error(message: str) -> None:
        source, msg = Logger._parse_source(message)
        Logger._format_console("ERROR", msg, source)
        Logger._log_to_file("ERROR", msg, source)

    @staticmethod
    def debug(message: str) -> None:
        # File only
        source, msg = Logger._parse_source(message)
        Logger._log_to_file("DEBUG", msg, source)

    @staticmethod
    def critical(message: str) -> None:
        source, msg = Logger._parse_source(message)
        Logger._format_console("CRITICAL", f"🛑 {msg}", source)
        Logger._log_to_file("ERROR", f"🛑 {msg}", source)

    @staticmethod
    def section(title: str) -> None:
        """Print a section header."""
        if not Logger._silent_mode:
            _console.print()
            _console.rule(f"[bold magenta]{title}[/]", style="dim")
        Logger._log_to_file("INFO", f"=== {title} ===", "SYSTEM")

    @staticmethod
    def set_silent(silent: bool) -> None:
        """Enable/disable console output."""
        Logger._silent_mode = silent
