"""servekit: FastAPI service bootstrap with session authentication and error normalization."""

__version__ = "0.1.0"
