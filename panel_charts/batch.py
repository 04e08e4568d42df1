"""
Batch processing module for rendering many chart documents.

This module provides the BatchRenderer class for rendering a list of chart
document files into an output directory, optionally in parallel.

Example:
    >>> from panel_charts import BatchRenderer
    >>>
    >>> batch = BatchRenderer()
    >>> result = batch.render_files(
    ...     ["charts/sales.json", "charts/errors.json"],
    ...     output_dir="rendered",
    ...     fmt="svg",
    ...     parallel=True,
    ... )
    >>> print(f"Rendered {len(result['successful'])} charts")
"""

import logging
import os
import time
from concurrent.futures import ProcessPoolExecutor, ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from tqdm import tqdm

from .api import create_chart
from .config import RenderConfig
from .constants import OUTPUT_FORMATS
from .exceptions import InvalidParameterError, PanelChartsError

logger = logging.getLogger(__name__)


def _render_file_worker(
    *,
    source: str,
    output_path: str,
    config: RenderConfig,
) -> Tuple[Optional[str], Optional[str]]:
    """Process-safe worker rendering one document; returns (path, error)."""

    # Worker processes never display anything
    os.environ.setdefault("MPLBACKEND", "Agg")

    try:
        return create_chart(source, output_path=output_path, config=config), None
    except PanelChartsError as e:
        logger.error(f"Failed to render {source}: {e}")
        return None, str(e)


class BatchRenderer:
    """
    Render chart document files into an output directory.

    Each document ``name.json`` is written as ``<output_dir>/name.<fmt>``.

    Attributes:
        config: Render configuration shared by every chart
    """

    def __init__(self, config: Optional[RenderConfig] = None):
        self.config = config if config is not None else RenderConfig()
        self.config.validate()
        logger.info("Initialized BatchRenderer")

    def _output_path(self, source: Path, output_dir: Path, fmt: str) -> Path:
        return output_dir / f"{source.stem}.{fmt}"

    def render_files(
        self,
        sources: Sequence[Union[str, Path]],
        output_dir: Optional[Union[str, Path]] = None,
        fmt: Optional[str] = None,
        parallel: bool = False,
        max_workers: Optional[int] = None,
        parallel_backend: str = "process",
        show_progress: bool = True,
    ) -> Dict[str, Any]:
        """
        Render every document in ``sources``.

        Args:
            sources: Paths to chart documents
            output_dir: Destination directory (default: config.output_dir)
            fmt: Output format (default: config.default_format)
            parallel: Enable parallel processing (default: False)
            max_workers: Maximum parallel workers (default: config.max_workers)
            parallel_backend: "process" or "thread"
            show_progress: Show a tqdm progress bar

        Returns:
            Dictionary with keys:
                - successful: List of paths to rendered charts
                - failed: List of {"source", "error"} entries
                - total_time: Total rendering time in seconds
        """
        fmt = (fmt or self.config.default_format).lower()
        if fmt not in OUTPUT_FORMATS:
            raise InvalidParameterError(f"Invalid format '{fmt}'. Use one of: {', '.join(OUTPUT_FORMATS)}")
        output_dir = Path(output_dir) if output_dir is not None else self.config.output_dir
        output_dir.mkdir(parents=True, exist_ok=True)
        max_workers = max_workers or self.config.max_workers

        logger.info(
            f"Rendering {len(sources)} chart(s) to {output_dir} as {fmt} "
            f"(parallel={parallel}, max_workers={max_workers})"
        )

        start_time = time.time()
        successful: List[str] = []
        failed: List[Dict[str, str]] = []

        jobs = [(str(source), str(self._output_path(Path(source), output_dir, fmt))) for source in sources]

        if parallel:
            backend = (parallel_backend or "process").strip().lower()
            if backend not in {"thread", "process"}:
                raise InvalidParameterError(
                    f"Invalid parallel_backend='{parallel_backend}'. Use 'thread' or 'process'."
                )
            Executor = ThreadPoolExecutor if backend == "thread" else ProcessPoolExecutor
            with Executor(max_workers=max_workers) as executor:
                future_to_source = {
                    executor.submit(
                        _render_file_worker, source=source, output_path=output_path, config=self.config
                    ): source
                    for source, output_path in jobs
                }
                futures = tqdm(
                    as_completed(future_to_source),
                    total=len(jobs),
                    desc="Rendering charts",
                    unit="chart",
                    disable=not show_progress,
                )
                for future in futures:
                    source = future_to_source[future]
                    path, error = future.result()
                    if path:
                        successful.append(path)
                    else:
                        failed.append({"source": source, "error": error or "unknown error"})
        else:
            for source, output_path in tqdm(jobs, desc="Rendering charts", unit="chart", disable=not show_progress):
                path, error = _render_file_worker(source=source, output_path=output_path, config=self.config)
                if path:
                    successful.append(path)
                else:
                    failed.append({"source": source, "error": error or "unknown error"})

        total_time = time.time() - start_time
        logger.info(
            f"Batch complete: {len(successful)} rendered, {len(failed)} failed "
            f"in {total_time:.1f}s"
        )
        return {
            "successful": sorted(successful),
            "failed": failed,
            "total_time": total_time,
        }
