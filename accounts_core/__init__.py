"""accounts-core: user accounts with password and Google sign-in."""

__version__ = "0.1.0"
