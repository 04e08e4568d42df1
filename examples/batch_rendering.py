"""
Batch Rendering Example

Writes a handful of chart documents to disk and renders all of them to SVG in
parallel worker processes.

Output:
    - chart documents in output/documents/
    - rendered charts in output/batch/
"""

import json
import os
from pathlib import Path

# Worker processes must not try to open a display
os.environ.setdefault("MPLBACKEND", "Agg")

from panel_charts import BatchRenderer, RenderConfig


def write_documents(directory: Path, count: int = 6):
    directory.mkdir(parents=True, exist_ok=True)
    paths = []
    for i in range(count):
        xs = list(range(10))
        document = {
            "x": {"from": 0, "to": 9, "label": "step", "precision": 0},
            "y": {"from": 0, "to": 1, "label": f"series {i}", "adjust": "tight"},
            "mappings": [
                {"kind": "line", "map": {"x": xs, "y": [(x * (i + 1)) % 7 for x in xs]}, "width": 1.5},
            ],
            "layout": {"width": 480, "height": 320},
        }
        path = directory / f"series_{i}.json"
        path.write_text(json.dumps(document))
        paths.append(path)

    # One broken document to show how failures are reported
    broken = directory / "broken.json"
    broken.write_text(json.dumps({"mappings": [{"kind": "line", "map": {"x": [1, 2], "y": [1]}}]}))
    paths.append(broken)
    return paths


def main():
    output = Path("output")
    sources = write_documents(output / "documents")

    batch = BatchRenderer(RenderConfig(max_workers=3))
    result = batch.render_files(sources, output_dir=output / "batch", fmt="svg", parallel=True)

    print(f"Rendered {len(result['successful'])} chart(s) in {result['total_time']:.1f}s")
    for failure in result["failed"]:
        print(f"  Failed: {failure['source']}: {failure['error']}")


if __name__ == "__main__":
    main()
