"""ProjectPilot - turn a project idea into a runnable project scaffold."""

__version__ = "0.1.0"
