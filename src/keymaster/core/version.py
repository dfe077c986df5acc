"""Single source of the KeyMaster version (read by pyproject.toml and ``/v``)."""

__version__ = "1.0.0"
