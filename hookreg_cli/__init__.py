"""HookReg CLI: hook-path extraction and regex synthesis for JavaScript."""

__version__ = "1.0.0"
