"""Minimal demonstration of the floor-plan analysis pipeline."""

import mimetypes
import sys
from pathlib import Path

from tablemap_core import analyze_image

if __name__ == "__main__":
    image_path = Path(sys.argv[1] if len(sys.argv) > 1 else "floorplan.png")
    mime_type, _ = mimetypes.guess_type(image_path.name)
    reply = analyze_image(image_path.read_bytes(), mime_type)
    print("Image:", image_path)
    print("Layout:", reply)
