"""frontaudit — rule-driven static audits for React and Next.js projects."""

__version__ = "0.1.0"
