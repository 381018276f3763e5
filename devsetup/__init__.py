"""devsetup — platform-aware development dependency installer."""

__version__ = "0.1.0"
