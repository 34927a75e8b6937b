"""docedit: operation dispatch and sessions for Office, PDF and email documents."""

__version__ = "0.1.0"
