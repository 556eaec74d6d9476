"""Centralized logging configuration for anyapi.

Entry points (CLI, embedding applications) should call configure_logging()
early. Library code only ever uses module-level loggers.

Logging Levels:
- DEBUG: Individual proxy calls, probe misses, schema path misses, cache hits
- INFO: Discovery summaries, tool executions
- WARNING: Recoverable issues (discovery strategy failures, missing broker secret)
- ERROR: Failures that affect an invocation

Guidelines:
- Tools: Log at INFO only in tools/executor.py
- Discovery: One INFO line per completed discovery, DEBUG per probe
"""

import logging
import os
import re
from dataclasses import dataclass, field

# Default patterns for secret detection and redaction
DEFAULT_REDACT_PATTERNS: list[str] = [
    # API key prefixes (OpenAI, GitHub, Slack, Google)
    r"\b(sk-[A-Za-z0-9_-]{20,})\b",
    r"\b(ghp_[A-Za-z0-9]{20,})\b",
    r"\b(github_pat_[A-Za-z0-9_]{20,})\b",
    r"\b(xox[baprs]-[A-Za-z0-9-]{10,})\b",
    r"\b(AIza[0-9A-Za-z\-_]{20,})\b",
    # ENV-style assignments: NANGO_SECRET_KEY=secret or API_KEY: secret
    r"\b[A-Z0-9_]+(?:KEY|TOKEN|SECRET|PASSWORD|PASSWD)\s*[=:]\s*([^\s\"']{8,})",
    # Bearer tokens in headers
    r"\bBearer\s+([A-Za-z0-9._\-+=]{20,})\b",
    # OAuth token fields in serialized payloads
    r"\"(?:access_token|refresh_token|id_token)\"\s*:\s*\"([^\"]{8,})\"",
    # PEM private key blocks
    r"-----BEGIN [A-Z ]*PRIVATE KEY-----[\s\S]+?-----END [A-Z ]*PRIVATE KEY-----",
]


@dataclass
class SecretRedactor:
    """Redacts sensitive information from log messages.

    Matches are replaced with partially masked versions so a token can still
    be recognized while debugging.
    """

    patterns: list[re.Pattern[str]] = field(default_factory=list)
    enabled: bool = True

    def __post_init__(self) -> None:
        if not self.patterns:
            self.patterns = [
                re.compile(p, re.IGNORECASE) for p in DEFAULT_REDACT_PATTERNS
            ]

    def redact(self, text: str) -> str:
        """Redact secrets from text, preserving partial info for debugging."""
        if not self.enabled or not text:
            return text
        result = text
        for pattern in self.patterns:
            result = pattern.sub(self._mask_match, result)
        return result

    def _mask_match(self, match: re.Match[str]) -> str:
        full = match.group(0)

        if "PRIVATE KEY" in full:
            lines = full.strip().split("\n")
            if len(lines) >= 2:
                return f"{lines[0]}\n...redacted...\n{lines[-1]}"
            return "***PRIVATE KEY***"

        token = match.group(1) if match.lastindex else full

        # Already masked
        if "..." in token:
            return full

        if len(token) < 12:
            return full.replace(token, "***") if token != full else "***"

        masked = f"{token[:4]}...{token[-4:]}"
        return full.replace(token, masked) if token != full else masked


_redactor = SecretRedactor()


def configure_redaction(
    enabled: bool = True, extra_patterns: list[str] | None = None
) -> None:
    """Configure secret redaction for log output.

    Args:
        enabled: Whether to enable redaction.
        extra_patterns: Additional regex patterns to match secrets.
    """
    global _redactor
    patterns = [re.compile(p, re.IGNORECASE) for p in DEFAULT_REDACT_PATTERNS]
    if extra_patterns:
        patterns.extend(re.compile(p, re.IGNORECASE) for p in extra_patterns)
    _redactor = SecretRedactor(patterns=patterns, enabled=enabled)


def redact(text: str) -> str:
    """Redact secrets using the active module-level redactor."""
    return _redactor.redact(text)


class ComponentFormatter(logging.Formatter):
    """Formatter that adds a short component name and redacts secrets.

    - anyapi.capabilities.prober -> capabilities
    - anyapi.broker.nango -> broker
    """

    def format(self, record: logging.LogRecord) -> str:
        parts = record.name.split(".")
        if len(parts) >= 2 and parts[0] == "anyapi":
            record.component = parts[1]
        else:
            record.component = parts[0]
        return _redactor.redact(super().format(record))


# Third-party loggers that are too noisy at INFO level
NOISY_LOGGERS = [
    "httpx",
    "httpcore",
]


def configure_logging(
    level: str | None = None,
    use_rich: bool = False,
) -> None:
    """Configure logging for anyapi.

    Call this once at application startup.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR).
            If None, uses ANYAPI_LOG_LEVEL env var or INFO.
        use_rich: Use Rich handler for colorful console output.
    """
    if level is None:
        level = os.environ.get("ANYAPI_LOG_LEVEL", "INFO")
    level = level.upper()
    if level not in ("DEBUG", "INFO", "WARNING", "ERROR"):
        level = "INFO"

    log_level = getattr(logging, level)

    if use_rich:
        from rich.logging import RichHandler

        handler: logging.Handler = RichHandler(
            rich_tracebacks=False,
            show_path=False,
            show_time=True,
            markup=False,
        )
        handler.setFormatter(ComponentFormatter("%(component)s | %(message)s"))
    else:
        handler = logging.StreamHandler()
        handler.setFormatter(
            ComponentFormatter(
                "%(asctime)s | %(levelname)-8s | %(component)s | %(message)s",
                datefmt="%H:%M:%S",
            )
        )

    logging.basicConfig(
        level=log_level,
        handlers=[handler],
        force=True,
    )

    for logger_name in NOISY_LOGGERS:
        logging.getLogger(logger_name).setLevel(logging.WARNING)
