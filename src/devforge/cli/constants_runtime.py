"""Session titles and other CLI-runtime strings."""

CHAT_SESSION_TITLE = "DevForge Agent | Chat"
DOCTOR_SESSION_TITLE = "DevForge Agent | Doctor"
EXIT_WORDS = frozenset({"exit", "quit", ":q", "/exit", "/quit"})
CLEAR_WORDS = frozenset({"cls", "clear", "/clear"})
