"""
Config-driven grid breakup runner.

Usage:
    uv run python run_breakup.py input=grid.txt num_row_chunks=2 num_col_chunks=2
    uv run python run_breakup.py -cn config output=chunks/grid max_workers=4
"""

import logging
import sys

import hydra
from hydra.utils import to_absolute_path
from omegaconf import DictConfig, OmegaConf

from Breakup import BreakupError, BreakupParams, run

log = logging.getLogger(__name__)


def build_params(cfg: DictConfig) -> BreakupParams:
    """Validate the composed config against BreakupParams and build it."""
    schema = OmegaConf.structured(BreakupParams)
    merged = OmegaConf.merge(schema, {k: v for k, v in cfg.items() if k != "hydra"})
    data = OmegaConf.to_container(merged, resolve=True)

    data["input"] = to_absolute_path(data["input"])
    if data.get("output"):
        data["output"] = to_absolute_path(data["output"])
    return BreakupParams(**data)


def run_from_config(cfg: DictConfig) -> int:
    """Build params from ``cfg``, run the breakup and return the exit code."""
    try:
        params = build_params(cfg)
        log.info(f"{params.operation}: {params.input} -> {params.output}.*, "
                 f"{params.num_row_chunks} x {params.num_col_chunks} chunks")
        result = run(params)
    except (BreakupError, ValueError, NotImplementedError) as e:
        log.error(str(e))
        return 1

    log.info(f"Done: {result.to_dict()}")
    return 0 if result.success else 1


@hydra.main(config_path="conf", config_name="config", version_base=None)
def main(cfg: DictConfig) -> None:
    """Entry point - breaks the configured grid file and exits non-zero on failure."""
    code = run_from_config(cfg)
    if code:
        sys.exit(code)


if __name__ == "__main__":
    main()
