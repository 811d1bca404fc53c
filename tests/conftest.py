import os

# No display during tests
os.environ.setdefault("MPLBACKEND", "Agg")
