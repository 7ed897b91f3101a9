"""Sheet-facing layer: header mapping, row normalization, output rows, API client."""
