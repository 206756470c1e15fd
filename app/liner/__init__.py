"""cargo-liner - keep globally installed Cargo packages in sync with a config file."""

__version__ = "0.7.0"

# Name under which the tool itself is published and installed.
PACKAGE_NAME = "cargo-liner"
