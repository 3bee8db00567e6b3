"""mcc: keep several Claude CLI profiles side by side and switch between them."""

__version__ = "0.3.0"
