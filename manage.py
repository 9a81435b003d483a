#!/usr/bin/env python3
"""
Employee Portal — local management tool

Single entry point for running and maintaining the portal backend.
Usage: python manage.py <command> [options]
"""

import json
import logging
import os
import subprocess
import sys
import urllib.error
import urllib.request
from datetime import datetime
from typing import List, Optional

BACKEND_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "backend")


# ═══════════════════════════════════════════════════════════
#  Console output
# ═══════════════════════════════════════════════════════════

ANSI = {
    "cyan": "\033[96m",
    "green": "\033[92m",
    "yellow": "\033[93m",
    "red": "\033[91m",
    "magenta": "\033[95m",
    "bold": "\033[1m",
    "reset": "\033[0m",
}

# Inline markers a message may carry, checked in order: (marker, symbol, colour)
MARKERS = (
    ("[SUCCESS]", "✓", "green"),
    ("[ERROR]", "✗", "red"),
    ("[WARNING]", "⚠", "yellow"),
    ("[STEP]", "▶", "cyan"),
)

LEVEL_STYLE = {
    logging.DEBUG: ("•", "cyan"),
    logging.INFO: ("→", "cyan"),
    logging.WARNING: ("⚠", "yellow"),
    logging.ERROR: ("✗", "red"),
    logging.CRITICAL: ("✗", "red"),
}


class ColorFormatter(logging.Formatter):
    """Prefix console lines with a status symbol and colour them by outcome."""

    def __init__(self, use_colors: bool | None = None):
        super().__init__()
        if use_colors is None:
            use_colors = sys.stderr.isatty() and sys.platform != "win32"
        self.use_colors = use_colors

    def _paint(self, text: str, colour: str) -> str:
        return f"{ANSI[colour]}{text}{ANSI['reset']}" if self.use_colors else text

    def format(self, record: logging.LogRecord) -> str:
        text = record.getMessage()
        if text.lstrip("\n").startswith("==="):
            return self._paint(text, "magenta")
        if text.startswith(" "):
            return text

        symbol, colour = LEVEL_STYLE.get(record.levelno, ("", "reset"))
        for marker, marker_symbol, marker_colour in MARKERS:
            if marker in text:
                text = text.replace(marker, "").strip()
                symbol, colour = marker_symbol, marker_colour
                break
        return self._paint(f"{symbol} {text}", colour)


def configure_logging() -> logging.Logger:
    """Daily log file under ./logs plus the coloured console."""
    os.makedirs("logs", exist_ok=True)
    file_handler = logging.FileHandler(
        os.path.join("logs", f"manage-{datetime.now():%Y%m%d}.log"), encoding="utf-8"
    )
    file_handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(message)s"))

    console = logging.StreamHandler()
    console.setFormatter(ColorFormatter())

    logging.basicConfig(level=logging.INFO, handlers=[file_handler, console])
    return logging.getLogger("manage")


logger = configure_logging()




# ═══════════════════════════════════════════════════════════
#  Portal Manager
# ═══════════════════════════════════════════════════════════

class PortalManager:
    """Runs the backend and its maintenance scripts from the backend/ directory."""

    def __init__(self, host: str = "127.0.0.1", port: int = 8000):
        self.host = host
        self.port = port
        self.base_url = f"http://{host}:{port}"

    # ─── Helpers ──────────────────────────────────────────
    def _run(self, cmd: List[str], check: bool = True, capture: bool = True) -> subprocess.CompletedProcess:
        logger.info(f"[STEP] Running: {' '.join(cmd)}")
        try:
            result = subprocess.run(cmd, check=check, text=True, capture_output=capture, cwd=BACKEND_DIR)
            if capture and result.stdout:
                for line in result.stdout.strip().splitlines():
                    if line.strip():
                        logger.info(f"  {line.strip()}")
            if capture and result.stderr:
                for line in result.stderr.strip().splitlines():
                    if line.strip():
                        logger.warning(f"  {line.strip()}")
            return result
        except subprocess.CalledProcessError as exc:
            logger.error(f"Command failed (exit {exc.returncode})")
            if exc.stderr:
                logger.error(f"  {exc.stderr.strip()}")
            raise

    def _call(self, method: str, path: str, body: Optional[dict] = None,
              cookie: Optional[str] = None) -> tuple:
        """Issue one JSON request and return (status, json, set-cookie header)."""
        data = json.dumps(body).encode() if body is not None else None
        req = urllib.request.Request(f"{self.base_url}{path}", data=data, method=method)
        req.add_header("Content-Type", "application/json")
        if cookie:
            req.add_header("Cookie", cookie)
        try:
            with urllib.request.urlopen(req, timeout=10) as resp:
                return resp.status, json.loads(resp.read().decode() or "{}"), resp.headers.get("Set-Cookie")
        except urllib.error.HTTPError as exc:
            return exc.code, json.loads(exc.read().decode() or "{}"), None

    # ─── Core Commands ────────────────────────────────────
    def serve(self, reload: bool = False) -> None:
        """Run the API under uvicorn (foreground, Ctrl-C to stop)."""
        logger.info(f"\n=== Starting Portal on {self.base_url} ===")
        cmd = [sys.executable, "-m", "uvicorn", "app.main:app", "--host", self.host, "--port", str(self.port)]
        if reload:
            cmd.append("--reload")
        try:
            self._run(cmd, capture=False)
        except KeyboardInterrupt:
            logger.info("\n[SUCCESS] Server stopped")

    # ─── Database ─────────────────────────────────────────
    def init_db(self) -> None:
        """Run Alembic migrations."""
        logger.info("\n=== Database Initialisation ===")
        self._run([sys.executable, "-m", "alembic", "upgrade", "head"])
        logger.info("[SUCCESS] Database migrations applied!")

    def seed(self) -> None:
        """Create the seed admin account when missing."""
        logger.info("\n=== Seeding Database ===")
        self._run([sys.executable, "-m", "scripts.seed_employees"])
        logger.info("[SUCCESS] Seed data inserted!")

    def hash_password(self) -> None:
        """Hash a password read from stdin (prompts when interactive)."""
        subprocess.run([sys.executable, "-m", "scripts.hash_password"], cwd=BACKEND_DIR, check=True)

    # ─── Smoke Test ───────────────────────────────────────
    def test(self, username: str, password: str) -> bool:
        """Smoke-test a running server: health, auth gate, login, listing, logout."""
        logger.info(f"\n=== Portal Smoke Test ({self.base_url}) ===")
        ok = True
        try:
            status, body, _ = self._call("GET", "/health")
            logger.info(f"[SUCCESS] Health: status={body.get('status')} env={body.get('env')}")

            status, _, _ = self._call("GET", "/api/customers")
            if status == 401:
                logger.info("[SUCCESS] Customer list is gated (401 without session)")
            else:
                ok = False
                logger.error(f"[ERROR] Expected 401 without session, got {status}")

            status, body, set_cookie = self._call("POST", "/api/login", {"username": username, "password": password})
            if status != 200 or not set_cookie:
                logger.error(f"[ERROR] Login failed ({status}): {body.get('message')}")
                return False
            cookie = set_cookie.split(";", 1)[0]
            logger.info(f"[SUCCESS] Logged in as {body['employee']['full_name']}")

            status, body, _ = self._call("GET", "/api/customers", cookie=cookie)
            if status == 200:
                logger.info(f"[SUCCESS] Listed {len(body.get('customers', []))} customer(s)")
            else:
                ok = False
                logger.error(f"[ERROR] Listing failed ({status}): {body.get('message')}")

            self._call("POST", "/api/logout", cookie=cookie)
            logger.info("[SUCCESS] Logged out")
        except (urllib.error.URLError, OSError) as exc:
            logger.error(f"[ERROR] Portal unreachable: {exc}")
            return False
        return ok

    # ─── URLs ─────────────────────────────────────────────
    def urls(self) -> None:
        """Print access URLs."""
        logger.info("\n=== Portal Access URLs ===")
        logger.info(f"🔧  API:             {self.base_url}/api")
        logger.info(f"📖  Swagger Docs:    {self.base_url}/docs")
        logger.info(f"❤️   Health Check:    {self.base_url}/health")


# ═══════════════════════════════════════════════════════════
#  CLI
# ═══════════════════════════════════════════════════════════

COMMANDS = (
    ("serve", "Run the API (--reload for development)"),
    ("init-db", "Apply Alembic migrations"),
    ("seed", "Create the seed admin account"),
    ("hash-password", "Print the bcrypt digest of a password from stdin"),
    ("test", "Smoke-test a running server"),
    ("urls", "Show access URLs"),
)


def usage() -> str:
    b, r = ANSI["bold"], ANSI["reset"]
    lines = [f"{b}Employee Portal management{r}", "", f"{b}Usage:{r} python manage.py <command> [options]", ""]
    lines.append(f"{b}Commands:{r}")
    lines.extend(f"    {name:<16}{help_text}" for name, help_text in COMMANDS)
    lines += [
        "",
        f"{b}Options:{r}",
        "    --host=HOST         Bind / target host (default 127.0.0.1)",
        "    --port=PORT         Bind / target port (default 8000)",
        "    --reload            Auto-reload on code changes ('serve')",
        "    --user=NAME         Login for 'test' (default admin)",
        "    --password=SECRET   Password for 'test' (default admin123)",
        "",
        f"{b}Example:{r} python manage.py init-db && python manage.py seed && python manage.py serve --reload",
    ]
    return "\n".join(lines)


def _option(opts: List[str], name: str, default: str) -> str:
    for o in opts:
        if o.startswith(f"--{name}="):
            return o.split("=", 1)[1]
    return default


def main() -> None:
    if len(sys.argv) < 2 or sys.argv[1] in ("-h", "--help"):
        print(usage())
        sys.exit(0)

    command = sys.argv[1]
    opts = sys.argv[2:]

    mgr = PortalManager(
        host=_option(opts, "host", "127.0.0.1"),
        port=int(_option(opts, "port", "8000")),
    )

    try:
        if command == "serve":
            mgr.serve(reload="--reload" in opts)
        elif command == "init-db":
            mgr.init_db()
        elif command == "seed":
            mgr.seed()
        elif command == "hash-password":
            mgr.hash_password()
        elif command == "test":
            passed = mgr.test(_option(opts, "user", "admin"), _option(opts, "password", "admin123"))
            sys.exit(0 if passed else 1)
        elif command == "urls":
            mgr.urls()
        else:
            logger.error(f"Unknown command: {command}")
            print(usage())
            sys.exit(1)
    except subprocess.CalledProcessError as exc:
        logger.error(f"Operation failed: {exc}")
        sys.exit(1)


if __name__ == "__main__":
    main()
