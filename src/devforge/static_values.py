"""Shared static values used across the DevForge package."""

from __future__ import annotations

APP_HELP = """
DevForge - chat-style command dispatcher for project analysis, test generation and local dev actions.

Just type `devforge` and hit enter to open the command panel.

Commands (inside the panel):
  \x07 /flow                 Analyze the project structure and data flow (remote agent).
  \x07 /summary [file]       Static analysis of one file (alias: /analyze).
  \x07 /test [file]          Generate a unit test, save it under tests/ and run the test command.
  \x07 /logs [file]          Show the last 10 lines of a log file (default: server.log).
  \x07 /env [name]           Start docker-compose.<name>.yml (alias: /environment).
  \x07 /help                 Show the command table.

Examples:
  \x07 devforge chat --project-dir ./my-app --active-file src/app.js
  \x07 devforge /summary index.js                 (quick mode: runs one command and exits)
  \x07 devforge chat --test-cmd "npm test -- --ci"
Configuration:
  \x07 Put DEVFORGE_ENDPOINT_URL (and friends) in the project .env or in ~/.config/devforge/.env.
""".strip()

PROMPT = "[bold green]devforge[/bold green] [dim]>[/dim] "

ENV_FILENAMES = (".env", ".env.local")

GLOBAL_ENV_ENVVAR = "DEVFORGE_GLOBAL_ENV"
DEVFORGE_CONFIG_DIR_ENVVAR = "DEVFORGE_CONFIG_DIR"

ENDPOINT_ENVVAR = "DEVFORGE_ENDPOINT_URL"
TEST_CMD_ENVVAR = "DEVFORGE_TEST_CMD"
REQUEST_TIMEOUT_ENVVAR = "DEVFORGE_REQUEST_TIMEOUT"
TEST_TIMEOUT_ENVVAR = "DEVFORGE_TEST_TIMEOUT"
MAX_CONTEXT_FILES_ENVVAR = "DEVFORGE_MAX_CONTEXT_FILES"
SKIP_UNREADABLE_ENVVAR = "DEVFORGE_SKIP_UNREADABLE"

DEFAULT_ENDPOINT_URL = "http://localhost:5678/webhook/devforge-analysis"
DEFAULT_TEST_CMD = "npm test"
DEFAULT_REQUEST_TIMEOUT_SEC = 120.0
DEFAULT_TEST_TIMEOUT_SEC = 600.0
DEFAULT_LOG_FILE = "server.log"
DEFAULT_ENV_NAME = "default"

# Flow analysis file discovery.
FLOW_FILE_PATTERNS = (
    "**/package.json",
    "**/*.html",
    "**/index.js",
    "**/index.ts",
    "**/index.jsx",
    "**/index.tsx",
    "**/server.js",
    "**/server.ts",
    "**/src/**/*.js",
    "**/src/**/*.ts",
    "**/src/**/*.jsx",
    "**/src/**/*.tsx",
)
FLOW_EXCLUDE_DIRS = frozenset({"node_modules", ".git", ".hg", ".svn"})
MAX_CONTEXT_FILES = 8

TESTS_DIRNAME = "tests"
TEST_FILE_MARKER = ".test"
LOG_TAIL_LINES = 10
COMPOSE_COMMAND_TEMPLATE = "docker-compose -f {compose_file} up -d --build"

SUMMARY_FALLBACK = "Analysis failed: Agent returned no specific summary text."
FLOW_FALLBACK = "Flow analysis failed. Check the analysis workflow for a response."

SHOW_LOGS_ALIAS = "showcurrentlogs"

HELP_TEXT = """
**DevForge Agent Commands:**
| Command | Action | Example |
| :--- | :--- | :--- |
| **/flow** | Analyzes the entire project structure and data flow. | `/flow` |
| **/summary [file]** | Runs AI static analysis (flaws, suggestions). Alias: **/analyze**. | `/summary index.js` |
| **/test [file]** | **Generates and executes** a unit test suite. | `/test component.js` |
| **/logs [file]** | Fetches the last 10 lines of the log file from the project root. | `/logs app.log` |
| **/env [version]** | Executes Docker Compose for the environment version (e.g., `node-18`). Alias: **/environment**. | `/env node-18` |
| **/help** | Displays this command list. | `/help` |
""".strip()

WELCOME_TEXT = "Welcome to DevForge! Type a command to start, or **/help** for the command list."
