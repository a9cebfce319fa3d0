# utils/path.py
import sys, os

def project_root() -> str:
    return os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

def resource_path(rel: str) -> str:
    """
    Path of a bundled asset: relative to the project root when running from
    source, inside the PyInstaller extraction dir when frozen.
    e.g. resource_path("static/fonts/NotoMusic-Regular.ttf")
    """
    base = getattr(sys, "_MEIPASS", project_root())
    return os.path.join(base, rel)
