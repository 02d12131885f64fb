class CatalogUnavailable(RuntimeError):
    """The typology catalog could not be read or parsed."""


class ExportFailed(RuntimeError):
    """Writing the full advisory card failed."""
